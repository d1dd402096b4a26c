from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from captains_log.services.dashboard import (
    build_day_view,
    build_itinerary,
    calculate_budget,
    calculate_time_remaining,
    calculate_time_span,
    calculate_trip_progress,
    get_countdown,
    get_next_event,
    get_next_up_display_state,
    get_next_up_event,
    get_recent_activity,
    get_todays_events,
    normalize_all_events,
)

UTC = timezone.utc
NOW = datetime(2024, 3, 15, 12, 0, tzinfo=UTC)


def activity(id, name, start=None, end=None, category=None, cost=None, currency=None, all_day=False, tz=None, **kw):
    return SimpleNamespace(
        id=id, name=name, start_time=start, end_time=end, category=category, cost=cost,
        currency=currency, all_day=all_day, timezone=tz, **kw,
    )


def transport(id, type="flight", departure=None, arrival=None, to_name=None, from_name=None, cost=None, currency=None):
    return SimpleNamespace(
        id=id, type=type, departure_time=departure, arrival_time=arrival, destination_name=to_name,
        origin_name=from_name, carrier="Air France", vehicle_number="AF 11", start_timezone=None,
        end_timezone=None, cost=cost, currency=currency,
    )


def stay(id, name, check_in=None, check_out=None, cost=None, currency=None, type="hotel"):
    return SimpleNamespace(
        id=id, name=name, type=type, check_in_date=check_in, check_out_date=check_out, address="1 Rue",
        timezone=None, cost=cost, currency=currency,
    )


def trip_ns(**kw):
    defaults = dict(
        start_date=date(2024, 3, 20), end_date=date(2024, 3, 25), status="Planned", timezone="UTC",
    )
    defaults.update(kw)
    return SimpleNamespace(**defaults)


# ─── Event normalization ───


def test_normalize_all_events_sorts_and_titles():
    events = normalize_all_events(
        [activity(1, "Louvre", start=NOW + timedelta(hours=5)), activity(2, "Someday")],
        [transport(3, departure=NOW + timedelta(hours=1), to_name="Paris")],
        [stay(4, "Hotel Lutetia", check_in=NOW + timedelta(hours=3))],
    )
    assert [e.title for e in events] == ["Flight to Paris", "Check in: Hotel Lutetia", "Louvre", "Someday"]
    assert events[-1].date_time is None
    assert events[0].tab_name == "transportation"


def test_transport_title_without_destination():
    events = normalize_all_events([], [transport(1, type="car", departure=NOW)], [])
    assert events[0].title == "Drive"


class TestNextUp:
    def setup_method(self):
        self.activities = [
            activity(1, "Past", start=NOW - timedelta(hours=2)),
            activity(2, "Later", start=NOW + timedelta(hours=2)),
        ]

    def test_not_started_trip_shows_first_event(self):
        event = get_next_up_event(self.activities, [], [], "Planned", date(2024, 3, 20), date(2024, 3, 25), NOW)
        assert event.title == "Past"

    def test_in_progress_trip_shows_next_future_event(self):
        event = get_next_up_event(self.activities, [], [], "In Progress", date(2024, 3, 14), date(2024, 3, 16), NOW)
        assert event.title == "Later"

    def test_finished_trip_has_no_event(self):
        assert get_next_up_event(self.activities, [], [], "Completed", None, None, NOW) is None
        assert get_next_up_event(self.activities, [], [], "Cancelled", None, None, NOW) is None

    def test_display_states(self):
        start, end = date(2024, 3, 20), date(2024, 3, 25)
        assert get_next_up_display_state("Planned", False, start, end, NOW) == "no_events"
        assert get_next_up_display_state("Dream", True, start, end, NOW) == "dream"
        assert get_next_up_display_state("Planned", True, start, end, NOW) == "upcoming"
        assert get_next_up_display_state("Planned", True, date(2024, 3, 14), end, NOW) == "in_progress"
        assert get_next_up_display_state("Completed", True, start, end, NOW) == "completed"


# ─── Today's itinerary ───


def test_todays_events_include_lodging_check_in_and_out():
    events = get_todays_events(
        [
            activity(1, "Breakfast", start=NOW - timedelta(hours=3), end=NOW - timedelta(hours=2)),
            activity(2, "Tomorrow", start=NOW + timedelta(days=1)),
        ],
        [],
        [
            stay(3, "Old Hotel", check_in=NOW - timedelta(days=2), check_out=NOW - timedelta(hours=1)),
            stay(4, "New Hotel", check_in=NOW + timedelta(hours=3)),
        ],
        "UTC",
        NOW,
    )
    assert [e.name for e in events] == ["Breakfast", "Check out: Old Hotel", "Check in: New Hotel"]
    assert [e.is_completed for e in events] == [True, True, False]
    assert get_next_event(events).name == "Check in: New Hotel"


def test_todays_events_use_trip_timezone():
    # 02:00 UTC on the 16th is the evening of the 15th in Los Angeles
    late = datetime(2024, 3, 16, 2, 0, tzinfo=UTC)
    events = get_todays_events([activity(1, "Dinner", start=late)], [], [], "America/Los_Angeles", NOW)
    assert [e.name for e in events] == ["Dinner"]


def test_time_span_widens_to_fit_events():
    events = get_todays_events(
        [
            activity(1, "Sunrise", start=NOW.replace(hour=6)),
            activity(2, "Late show", start=NOW.replace(hour=21), end=NOW.replace(hour=22, minute=30)),
        ],
        [], [], "UTC", NOW,
    )
    assert calculate_time_span(events, "UTC") == {"start_hour": 6, "end_hour": 23}
    assert calculate_time_span([], "UTC") == {"start_hour": 8, "end_hour": 20}


# ─── Countdown and progress ───


def test_time_remaining_breakdown():
    target = NOW + timedelta(days=2, hours=3, minutes=4, seconds=5)
    remaining = calculate_time_remaining(target, NOW)
    assert (remaining["days"], remaining["hours"], remaining["minutes"], remaining["seconds"]) == (2, 3, 4, 5)


def test_time_remaining_is_zero_after_target():
    remaining = calculate_time_remaining(NOW - timedelta(minutes=1), NOW)
    assert remaining == {"days": 0, "hours": 0, "minutes": 0, "seconds": 0, "total_seconds": 0}


def test_countdown_is_relative_to_now():
    trip = trip_ns()
    first = get_countdown(trip, NOW)
    later = get_countdown(trip, NOW + timedelta(days=2))
    assert first["state"] == "countdown"
    assert later["remaining"]["total_seconds"] < first["remaining"]["total_seconds"]

    started = get_countdown(trip, datetime(2024, 3, 21, 9, 0, tzinfo=UTC))
    assert started["state"] == "in_progress"
    assert started["remaining"] is None


@pytest.mark.parametrize(
    "delta, message, urgency",
    [
        (timedelta(days=45), "Your adventure awaits", "low"),
        (timedelta(days=20), "Getting closer!", "medium"),
        (timedelta(days=5), "Almost time!", "high"),
        (timedelta(days=1, hours=2), "Tomorrow!", "high"),
        (timedelta(hours=10), "Today is the day!", "imminent"),
        (timedelta(hours=3), "Almost there!", "imminent"),
        (timedelta(minutes=30), "Any moment now!", "imminent"),
    ],
)
def test_countdown_messages(delta, message, urgency):
    start = NOW + delta
    trip = trip_ns(start_date=start.date(), end_date=start.date() + timedelta(days=3))
    # Count down to midnight of the start date
    now = datetime.combine(start.date(), datetime.min.time(), tzinfo=UTC) - delta
    countdown = get_countdown(trip, now)
    assert countdown["message"] == message
    assert countdown["urgency"] == urgency


def test_countdown_states_without_dates_and_after_trip():
    assert get_countdown(trip_ns(start_date=None, end_date=None), NOW)["state"] == "not_scheduled"
    assert get_countdown(trip_ns(status="Completed"), NOW)["state"] == "completed"
    past = trip_ns(start_date=date(2024, 3, 1), end_date=date(2024, 3, 5))
    assert get_countdown(past, NOW)["state"] == "completed"


def test_trip_progress():
    progress = calculate_trip_progress(date(2024, 3, 14), date(2024, 3, 17), NOW)
    assert progress["current_day"] == 2
    assert progress["total_days"] == 4
    # 36 of 96 hours elapsed
    assert progress["percent_complete"] == 37.5

    before = calculate_trip_progress(date(2024, 3, 20), date(2024, 3, 22), NOW)
    assert (before["current_day"], before["percent_complete"]) == (1, 0.0)
    after = calculate_trip_progress(date(2024, 3, 1), date(2024, 3, 3), NOW)
    assert (after["current_day"], after["percent_complete"]) == (3, 100.0)


# ─── Recent activity ───


def test_recent_activity_groups_by_day_and_detects_action():
    rows = {
        "ACTIVITY": [
            SimpleNamespace(id=1, name="Louvre", created_at=NOW - timedelta(hours=1), updated_at=NOW - timedelta(hours=1)),
            SimpleNamespace(
                id=2, name="Orsay", created_at=NOW - timedelta(days=3), updated_at=NOW - timedelta(days=1),
            ),
        ],
        "JOURNAL_ENTRY": [
            SimpleNamespace(
                id=3, title="Day one", created_at=NOW - timedelta(minutes=30),
                updated_at=NOW - timedelta(minutes=29, seconds=30),
            ),
        ],
    }
    groups = get_recent_activity(rows, limit=10, now=NOW)
    assert [g["label"] for g in groups] == ["Today", "Yesterday"]
    today = groups[0]["items"]
    assert [i["name"] for i in today] == ["Day one", "Louvre"]
    assert all(i["action"] == "created" for i in today)
    assert groups[1]["items"][0]["action"] == "updated"


def test_recent_activity_limit():
    rows = {
        "PHOTO": [
            SimpleNamespace(id=i, caption=f"p{i}", file_path=None, created_at=NOW - timedelta(days=i),
                            updated_at=NOW - timedelta(days=i))
            for i in range(10)
        ]
    }
    groups = get_recent_activity(rows, limit=3, now=NOW)
    assert sum(len(g["items"]) for g in groups) == 3
    assert groups[-1]["label"] == "Mar 13, 2024"


# ─── Budget ───


def test_budget_breakdown_and_status():
    summary = calculate_budget(
        1000,
        "USD",
        [
            activity(1, "Dinner", category="Food & Drink", cost=100),
            activity(2, "Museum", category="Culture", cost=50),
            activity(3, "Souvenirs", category=None, cost=25),
        ],
        [transport(4, cost=400)],
        [stay(5, "Hotel", cost=300)],
    )
    assert summary["breakdown"] == {
        "lodging": 300.0, "transportation": 400.0, "activities": 50.0, "food": 100.0, "other": 25.0,
    }
    assert summary["spent"] == 875.0
    assert summary["remaining"] == 125.0
    assert summary["percentage"] == 88
    assert summary["status"] == "warning"
    assert summary["display"] == {"budget": "$1,000.00", "spent": "$875.00", "remaining": "$125.00"}


def test_budget_converts_and_flags_overspend():
    summary = calculate_budget(100, "USD", [], [], [stay(1, "Hotel", cost=100, currency="EUR")])
    assert summary["spent"] == 108.0
    assert summary["status"] == "over"


def test_budget_without_a_budget():
    summary = calculate_budget(None, "USD", [activity(1, "Lunch", category="restaurant", cost=20)], [], [])
    assert summary["budget"] is None
    assert summary["remaining"] is None
    assert summary["status"] == "good"
    assert summary["breakdown"]["food"] == 20.0


# ─── Day view ───


def test_day_view_sorts_all_day_first_and_marks_stays():
    trip = trip_ns(start_date=date(2024, 3, 14), end_date=date(2024, 3, 18))
    lodging = [
        stay(1, "Hotel", check_in=datetime(2024, 3, 14, 15, tzinfo=UTC), check_out=datetime(2024, 3, 17, 11, tzinfo=UTC)),
    ]
    activities = [
        activity(2, "Lunch", start=datetime(2024, 3, 15, 12, tzinfo=UTC)),
        activity(3, "Breakfast", start=datetime(2024, 3, 15, 8, tzinfo=UTC)),
        activity(4, "Festival", start=datetime(2024, 3, 15, 0, tzinfo=UTC), all_day=True),
    ]
    view = build_day_view(trip, date(2024, 3, 15), activities, [], lodging, [])
    assert view["trip_day"] == 2
    titles = [item["title"] for item in view["items"]]
    assert titles[:2] in (["Staying at Hotel", "Festival"], ["Festival", "Staying at Hotel"])
    assert titles[2:] == ["Breakfast", "Lunch"]
    assert view["items"][-1]["display_time"] == "12:00 PM UTC"


def test_itinerary_covers_every_trip_day():
    trip = trip_ns(start_date=date(2024, 3, 14), end_date=date(2024, 3, 16))
    flight = transport(
        1, departure=datetime(2024, 3, 14, 22, tzinfo=UTC), arrival=datetime(2024, 3, 15, 6, tzinfo=UTC), to_name="Rome",
    )
    days = build_itinerary(trip, [], [flight], [], [])
    assert [d["date"] for d in days] == ["2024-03-14", "2024-03-15", "2024-03-16"]
    assert days[0]["items"][0]["kind"] == "departure"
    assert days[1]["items"][0]["kind"] == "arrival"
    assert days[2]["items"] == []

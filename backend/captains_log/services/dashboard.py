"""Trip dashboard aggregation.

Pure functions over already-loaded trip items: event normalization, the
"next up" card, today's itinerary, countdown and progress, recent activity,
the budget summary, and the per-day view. Callers pass ``now`` explicitly so
every snapshot is computed relative to the request time.
"""

import math
from collections import OrderedDict
from dataclasses import asdict, dataclass, field
from datetime import date, datetime, time, timedelta, timezone

from captains_log.data.currency import convert, format_price
from captains_log.models.trip import TripStatus
from captains_log.services.entity_link_service import display_name
from captains_log.utils.date_format import format_date
from captains_log.utils.timezone import format_time_in_timezone, get_zone, local_date

TRANSPORT_LABELS = {
    "flight": "Flight",
    "train": "Train",
    "bus": "Bus",
    "car": "Drive",
    "ferry": "Ferry",
    "bicycle": "Bike ride",
    "walk": "Walk",
    "other": "Travel",
}

FOOD_KEYWORDS = ("food", "restaurant", "dining")
OTHER_CATEGORIES = ("other", "misc", "miscellaneous", "shopping")

DEFAULT_DAY_START_HOUR = 8
DEFAULT_DAY_END_HOUR = 20

# Edits within this window of creation still count as "created"
CREATED_GRACE = timedelta(minutes=1)


@dataclass
class NormalizedEvent:
    id: int
    type: str
    title: str
    subtitle: str | None
    date_time: datetime | None
    end_date_time: datetime | None
    timezone: str | None
    icon_type: str
    tab_name: str
    location: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ItineraryEvent:
    id: int
    type: str
    name: str
    start_time: datetime | None
    end_time: datetime | None
    subtitle: str | None = None
    location: str | None = None
    timezone: str | None = None
    kind: str | None = None
    is_completed: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


def _aware(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _sort_key(moment: datetime | None):
    # Unscheduled items sort after everything else
    return (moment is None, moment or datetime.max.replace(tzinfo=timezone.utc))


def transportation_title(item) -> str:
    label = TRANSPORT_LABELS.get(item.type, item.type.capitalize())
    destination = item.destination_name
    return f"{label} to {destination}" if destination else label


# ─── Event normalization ───


def normalize_all_events(activities, transportation, lodging) -> list[NormalizedEvent]:
    """Flatten activities, transportation departures, and lodging check-ins into one timeline."""
    events = []
    for a in activities:
        events.append(NormalizedEvent(
            id=a.id,
            type="activity",
            title=a.name,
            subtitle=a.category,
            date_time=_aware(a.start_time),
            end_date_time=_aware(a.end_time),
            timezone=a.timezone,
            icon_type="activity",
            tab_name="activities",
        ))
    for t in transportation:
        origin = t.origin_name
        events.append(NormalizedEvent(
            id=t.id,
            type="transportation",
            title=transportation_title(t),
            subtitle=" ".join(p for p in (t.carrier, t.vehicle_number) if p) or None,
            date_time=_aware(t.departure_time),
            end_date_time=_aware(t.arrival_time),
            timezone=t.start_timezone,
            icon_type=t.type,
            tab_name="transportation",
            location=f"From {origin}" if origin else None,
        ))
    for lo in lodging:
        events.append(NormalizedEvent(
            id=lo.id,
            type="lodging",
            title=f"Check in: {lo.name}",
            subtitle=lo.type.replace("_", " ").title(),
            date_time=_aware(lo.check_in_date),
            end_date_time=_aware(lo.check_out_date),
            timezone=lo.timezone,
            icon_type="lodging",
            tab_name="lodging",
            location=lo.address,
        ))
    events.sort(key=lambda e: _sort_key(e.date_time))
    return events


def _trip_today(now: datetime, tz: str | None) -> date:
    return local_date(now, tz)


def get_next_up_event(
    activities,
    transportation,
    lodging,
    trip_status: str,
    start_date: date | None,
    end_date: date | None,
    now: datetime,
    tz: str | None = None,
) -> NormalizedEvent | None:
    """The event the "Next Up" card should show.

    Not-started trips show their first scheduled event, in-progress trips the
    first event at or after ``now``, and finished trips nothing.
    """
    if trip_status in TripStatus.FINAL:
        return None

    scheduled = [e for e in normalize_all_events(activities, transportation, lodging) if e.date_time]
    if not scheduled:
        return None

    today = _trip_today(now, tz)
    in_progress = trip_status == TripStatus.IN_PROGRESS or (
        start_date is not None and end_date is not None and start_date <= today <= end_date
    )
    if in_progress:
        return next((e for e in scheduled if e.date_time >= now), None)
    return scheduled[0]


def get_next_up_display_state(
    trip_status: str,
    has_scheduled: bool,
    start_date: date | None,
    end_date: date | None,
    now: datetime,
    tz: str | None = None,
) -> str:
    today = _trip_today(now, tz)
    if trip_status in TripStatus.FINAL or (end_date is not None and today > end_date):
        return "completed"
    if not has_scheduled:
        return "no_events"
    if trip_status == TripStatus.DREAM:
        return "dream"
    if trip_status == TripStatus.IN_PROGRESS or (
        start_date is not None and end_date is not None and start_date <= today <= end_date
    ):
        return "in_progress"
    return "upcoming"


# ─── Today's itinerary ───


def get_todays_events(activities, transportation, lodging, tz: str | None, now: datetime) -> list[ItineraryEvent]:
    """Events whose local date in ``tz`` is today. Lodging contributes check-in and check-out."""
    today = _trip_today(now, tz)
    events = []

    def on_today(moment: datetime | None) -> bool:
        return moment is not None and local_date(moment, tz) == today

    for a in activities:
        if on_today(a.start_time):
            events.append(ItineraryEvent(
                id=a.id, type="activity", name=a.name, subtitle=a.category,
                start_time=_aware(a.start_time), end_time=_aware(a.end_time), timezone=a.timezone,
            ))
    for t in transportation:
        if on_today(t.departure_time):
            events.append(ItineraryEvent(
                id=t.id, type="transportation", name=transportation_title(t), subtitle=t.carrier,
                start_time=_aware(t.departure_time), end_time=_aware(t.arrival_time),
                location=t.origin_name, timezone=t.start_timezone,
            ))
    for lo in lodging:
        if on_today(lo.check_in_date):
            events.append(ItineraryEvent(
                id=lo.id, type="lodging", name=f"Check in: {lo.name}", start_time=_aware(lo.check_in_date),
                end_time=None, location=lo.address, timezone=lo.timezone, kind="check_in",
            ))
        if on_today(lo.check_out_date):
            events.append(ItineraryEvent(
                id=lo.id, type="lodging", name=f"Check out: {lo.name}", start_time=_aware(lo.check_out_date),
                end_time=None, location=lo.address, timezone=lo.timezone, kind="check_out",
            ))

    for event in events:
        finish = event.end_time or event.start_time
        event.is_completed = finish < now
    events.sort(key=lambda e: _sort_key(e.start_time))
    return events


def get_next_event(events: list[ItineraryEvent]) -> ItineraryEvent | None:
    return next((e for e in events if not e.is_completed), None)


def calculate_time_span(events: list[ItineraryEvent], tz: str | None = None) -> dict:
    """Hour window for the itinerary timeline, widened to fit every event."""
    start_hour, end_hour = DEFAULT_DAY_START_HOUR, DEFAULT_DAY_END_HOUR
    zone = get_zone(tz) or timezone.utc
    for event in events:
        if event.start_time:
            start_hour = min(start_hour, event.start_time.astimezone(zone).hour)
            end_hour = max(end_hour, event.start_time.astimezone(zone).hour + 1)
        if event.end_time:
            local_end = event.end_time.astimezone(zone)
            if local_end.date() == event.start_time.astimezone(zone).date():
                end_hour = max(end_hour, local_end.hour + (1 if local_end.minute else 0))
            else:
                end_hour = 24
    return {"start_hour": start_hour, "end_hour": min(end_hour, 24)}


# ─── Countdown and progress ───


def calculate_time_remaining(target: datetime, now: datetime) -> dict:
    seconds_left = int((target - now).total_seconds())
    if seconds_left <= 0:
        return {"days": 0, "hours": 0, "minutes": 0, "seconds": 0, "total_seconds": 0}

    days, rest = divmod(seconds_left, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, seconds = divmod(rest, 60)
    return {"days": days, "hours": hours, "minutes": minutes, "seconds": seconds, "total_seconds": seconds_left}


def _start_of_day(day: date, tz: str | None) -> datetime:
    return datetime.combine(day, time.min, tzinfo=get_zone(tz) or timezone.utc)


def calculate_trip_progress(start_date: date, end_date: date, now: datetime, tz: str | None = None) -> dict:
    """Day N of M and percent elapsed, clamped to the trip window."""
    total_days = max(1, (end_date - start_date).days + 1)
    today = _trip_today(now, tz)
    current_day = min(total_days, max(1, (today - start_date).days + 1))

    window_start = _start_of_day(start_date, tz)
    window = (_start_of_day(end_date, tz) + timedelta(days=1)) - window_start
    elapsed = now - window_start
    percent = elapsed.total_seconds() / window.total_seconds() * 100
    return {
        "current_day": current_day,
        "total_days": total_days,
        "percent_complete": round(min(100.0, max(0.0, percent)), 1),
    }


def get_excitement_message(remaining: dict) -> dict:
    days, hours = remaining["days"], remaining["hours"]
    if remaining["total_seconds"] <= 0:
        return {"message": "It's time!", "sub_message": "Your adventure begins now", "urgency": "imminent"}
    if days == 0:
        if hours == 0:
            return {"message": "Any moment now!", "sub_message": "Final preparations", "urgency": "imminent"}
        if hours < 6:
            return {"message": "Almost there!", "sub_message": "Just a few hours left", "urgency": "imminent"}
        return {"message": "Today is the day!", "sub_message": "The wait is almost over", "urgency": "imminent"}
    if days == 1:
        return {"message": "Tomorrow!", "sub_message": "Pack your bags!", "urgency": "high"}
    if days <= 7:
        return {"message": "Almost time!", "sub_message": "Final countdown begins", "urgency": "high"}
    if days <= 30:
        return {"message": "Getting closer!", "sub_message": "Time to finalize plans", "urgency": "medium"}
    return {"message": "Your adventure awaits", "sub_message": "Plenty of time to plan", "urgency": "low"}


def get_countdown(trip, now: datetime) -> dict:
    """Countdown snapshot for the trip at ``now``."""
    result = {"state": "not_scheduled", "remaining": None, "progress": None, "message": None, "urgency": None}
    if not trip.start_date:
        result["message"] = "Set trip dates to start the countdown"
        return result

    today = _trip_today(now, trip.timezone)
    if trip.status in TripStatus.FINAL or (trip.end_date and today > trip.end_date):
        result.update(state="completed", message="Trip complete")
        return result

    start = _start_of_day(trip.start_date, trip.timezone)
    if now < start:
        remaining = calculate_time_remaining(start, now)
        excitement = get_excitement_message(remaining)
        result.update(
            state="countdown",
            remaining=remaining,
            message=excitement["message"],
            sub_message=excitement["sub_message"],
            urgency=excitement["urgency"],
        )
        return result

    end_date = trip.end_date or trip.start_date
    progress = calculate_trip_progress(trip.start_date, end_date, now, trip.timezone)
    result.update(
        state="in_progress",
        progress=progress,
        message=f"Day {progress['current_day']} of {progress['total_days']}",
    )
    return result


# ─── Recent activity ───


def get_recent_activity(collections: dict[str, list], limit: int = 10, now: datetime | None = None, tz: str | None = None) -> list[dict]:
    """Latest changes across every collection, grouped by local day.

    ``collections`` maps an entity type (``"ACTIVITY"``, ``"PHOTO"``...) to its rows.
    """
    now = now or datetime.now(timezone.utc)
    entries = []
    for entity_type, rows in collections.items():
        for row in rows:
            updated = _aware(row.updated_at) or _aware(row.created_at)
            created = _aware(row.created_at) or updated
            entries.append({
                "entity_type": entity_type,
                "id": row.id,
                "name": display_name(entity_type, row),
                "action": "created" if updated - created <= CREATED_GRACE else "updated",
                "timestamp": updated,
            })
    entries.sort(key=lambda e: e["timestamp"], reverse=True)

    today = _trip_today(now, tz)
    groups: OrderedDict[str, dict] = OrderedDict()
    for entry in entries[:limit]:
        day = local_date(entry["timestamp"], tz)
        if day == today:
            label = "Today"
        elif day == today - timedelta(days=1):
            label = "Yesterday"
        else:
            label = format_date(day)
        group = groups.setdefault(day.isoformat(), {"date": day.isoformat(), "label": label, "items": []})
        group["items"].append(entry)
    return list(groups.values())


# ─── Budget ───


def _budget_bucket(category: str | None) -> str:
    text = (category or "").lower()
    if any(keyword in text for keyword in FOOD_KEYWORDS):
        return "food"
    if not text or text in OTHER_CATEGORIES:
        return "other"
    return "activities"


def calculate_budget(budget, currency: str, activities, transportation, lodging) -> dict:
    """Spending against the trip budget, converted into the trip currency."""
    currency = (currency or "USD").upper()
    breakdown = {"lodging": 0.0, "transportation": 0.0, "activities": 0.0, "food": 0.0, "other": 0.0}

    def add(bucket: str, item):
        if item.cost is not None:
            breakdown[bucket] += convert(float(item.cost), item.currency, currency)

    for lo in lodging:
        add("lodging", lo)
    for t in transportation:
        add("transportation", t)
    for a in activities:
        add(_budget_bucket(a.category), a)

    breakdown = {k: round(v, 2) for k, v in breakdown.items()}
    spent = round(sum(breakdown.values()), 2)
    total = float(budget) if budget is not None else None

    percentage = round(spent / total * 100) if total else 0
    if total is not None and spent > total:
        status = "over"
    elif percentage >= 80:
        status = "warning"
    else:
        status = "good"

    remaining = round(total - spent, 2) if total is not None else None
    return {
        "budget": total,
        "spent": spent,
        "remaining": remaining,
        "percentage": percentage,
        "status": status,
        "currency": currency,
        "breakdown": breakdown,
        "display": {
            "budget": format_price(total, currency) if total is not None else None,
            "spent": format_price(spent, currency),
            "remaining": format_price(remaining, currency) if remaining is not None else None,
        },
    }


# ─── Daily view ───


@dataclass
class DayItem:
    type: str
    id: int
    title: str
    time: datetime | None
    end_time: datetime | None = None
    all_day: bool = False
    kind: str | None = None
    subtitle: str | None = None
    timezone: str | None = None
    display_time: str = ""
    extra: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)


def _day_entries(trip, activities, transportation, lodging, journal_entries):
    """Yield ``(local date, DayItem)`` for every day each item touches."""
    trip_tz = trip.timezone

    for a in activities:
        if a.start_time is None:
            continue
        tz = a.timezone or trip_tz
        yield local_date(a.start_time, tz), DayItem(
            type="activity", id=a.id, title=a.name, time=_aware(a.start_time), end_time=_aware(a.end_time),
            all_day=a.all_day, subtitle=a.category, timezone=tz,
        )

    for t in transportation:
        if t.departure_time is None:
            continue
        start_tz = t.start_timezone or trip_tz
        departure_day = local_date(t.departure_time, start_tz)
        yield departure_day, DayItem(
            type="transportation", id=t.id, title=transportation_title(t), time=_aware(t.departure_time),
            end_time=_aware(t.arrival_time), kind="departure", subtitle=t.carrier, timezone=start_tz,
            extra={"from": t.origin_name, "to": t.destination_name},
        )
        if t.arrival_time is not None:
            end_tz = t.end_timezone or trip_tz
            arrival_day = local_date(t.arrival_time, end_tz)
            if arrival_day != departure_day:
                yield arrival_day, DayItem(
                    type="transportation", id=t.id, title=f"Arrive: {transportation_title(t)}",
                    time=_aware(t.arrival_time), kind="arrival", subtitle=t.carrier, timezone=end_tz,
                    extra={"from": t.origin_name, "to": t.destination_name},
                )

    for lo in lodging:
        if lo.check_in_date is None:
            continue
        tz = lo.timezone or trip_tz
        check_in_day = local_date(lo.check_in_date, tz)
        yield check_in_day, DayItem(
            type="lodging", id=lo.id, title=f"Check in: {lo.name}", time=_aware(lo.check_in_date),
            kind="check_in", subtitle=lo.address, timezone=tz,
        )
        if lo.check_out_date is None:
            continue
        check_out_day = local_date(lo.check_out_date, tz)
        day = check_in_day + timedelta(days=1)
        while day < check_out_day:
            yield day, DayItem(
                type="lodging", id=lo.id, title=f"Staying at {lo.name}", time=None, all_day=True,
                kind="staying", subtitle=lo.address, timezone=tz,
            )
            day += timedelta(days=1)
        if check_out_day != check_in_day:
            yield check_out_day, DayItem(
                type="lodging", id=lo.id, title=f"Check out: {lo.name}", time=_aware(lo.check_out_date),
                kind="check_out", subtitle=lo.address, timezone=tz,
            )

    for j in journal_entries:
        yield local_date(j.date, trip_tz), DayItem(
            type="journal", id=j.id, title=j.title or "Journal entry", time=_aware(j.date),
            subtitle=j.entry_type, timezone=trip_tz,
        )


def _finish(items: list[DayItem], trip_tz: str | None) -> list[dict]:
    # All-day items first, then by time
    items.sort(key=lambda i: (not i.all_day, _sort_key(i.time)))
    for item in items:
        if item.all_day:
            item.display_time = "All day"
        elif item.time is not None:
            item.display_time = format_time_in_timezone(item.time, item.timezone, trip_tz)
    return [item.to_dict() for item in items]


def build_day_view(trip, day: date, activities, transportation, lodging, journal_entries) -> dict:
    items = [
        item
        for item_day, item in _day_entries(trip, activities, transportation, lodging, journal_entries)
        if item_day == day
    ]
    trip_day = None
    if trip.start_date and trip.start_date <= day <= (trip.end_date or trip.start_date):
        trip_day = (day - trip.start_date).days + 1
    return {
        "date": day.isoformat(),
        "label": format_date(day, "full"),
        "trip_day": trip_day,
        "items": _finish(items, trip.timezone),
    }


def build_itinerary(trip, activities, transportation, lodging, journal_entries) -> list[dict]:
    """Every trip day (plus any day an item falls on), each with its sorted items."""
    by_day: dict[date, list[DayItem]] = {}
    if trip.start_date and trip.end_date:
        day = trip.start_date
        while day <= trip.end_date:
            by_day[day] = []
            day += timedelta(days=1)
    for item_day, item in _day_entries(trip, activities, transportation, lodging, journal_entries):
        by_day.setdefault(item_day, []).append(item)

    days = []
    for day in sorted(by_day):
        trip_day = None
        if trip.start_date and trip.end_date and trip.start_date <= day <= trip.end_date:
            trip_day = (day - trip.start_date).days + 1
        days.append({
            "date": day.isoformat(),
            "label": format_date(day, "full"),
            "trip_day": trip_day,
            "items": _finish(by_day[day], trip.timezone),
        })
    return days


def checklist_progress(checklists) -> dict:
    total = sum(c.stats["total"] for c in checklists)
    checked = sum(c.stats["checked"] for c in checklists)
    return {
        "checklists": len(checklists),
        "total": total,
        "checked": checked,
        "percentage": math.floor(checked / total * 100) if total else 0,
    }


def build_dashboard(trip, now: datetime) -> dict:
    """Every widget's data for one trip, computed at ``now``.

    ``trip`` must have its collections loaded.
    """
    tz = trip.timezone
    activities, transportation, lodging = trip.activities, trip.transportation, trip.lodging

    events = normalize_all_events(activities, transportation, lodging)
    next_up = get_next_up_event(
        activities, transportation, lodging, trip.status, trip.start_date, trip.end_date, now, tz
    )
    todays = get_todays_events(activities, transportation, lodging, tz, now)
    next_today = get_next_event(todays)

    recent = get_recent_activity(
        {
            "ACTIVITY": activities,
            "TRANSPORTATION": transportation,
            "LODGING": lodging,
            "JOURNAL_ENTRY": trip.journal_entries,
            "LOCATION": trip.locations,
            "PHOTO": trip.photos,
            "PHOTO_ALBUM": trip.albums,
        },
        limit=10,
        now=now,
        tz=tz,
    )

    return {
        "countdown": get_countdown(trip, now),
        "next_up": {
            "state": get_next_up_display_state(
                trip.status, any(e.date_time for e in events), trip.start_date, trip.end_date, now, tz
            ),
            "event": next_up.to_dict() if next_up else None,
        },
        "today": {
            "events": [e.to_dict() for e in todays],
            "next_event": next_today.to_dict() if next_today else None,
            "time_span": calculate_time_span(todays, tz),
        },
        "budget": calculate_budget(trip.budget, trip.currency, activities, transportation, lodging),
        "recent_activity": recent,
        "checklists": checklist_progress(trip.checklists),
        "counts": {
            "activities": len(activities),
            "transportation": len(transportation),
            "lodging": len(lodging),
            "journal_entries": len(trip.journal_entries),
            "locations": len(trip.locations),
            "photos": len(trip.photos),
            "albums": len(trip.albums),
        },
    }

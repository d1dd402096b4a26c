"""Trip health report.

Pure functions over an already-loaded trip. Each check returns a list of
issues; the report adds them up into a 0..100 score where every critical,
warning, or info issue costs a fixed number of points. A trip is valid while
it has no critical issues.
"""

import math
from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timedelta

from captains_log.utils.timezone import local_date

SEVERITY_PENALTY = {"critical": 20, "warning": 10, "info": 5}

EARTH_RADIUS_KM = 6371
# Ground speeds in km/h; unknown modes use the default
TRAVEL_SPEEDS_KMH = {"train": 100, "car": 60, "bus": 60, "bicycle": 15, "walk": 5}
DEFAULT_SPEED_KMH = 50
FLIGHT_SPEED_KMH = 800
FLIGHT_AIRPORT_MINUTES = 180
TRAVEL_TIME_MARGIN = 1.2
COMFORTABLE_BUFFER_MINUTES = 30


@dataclass
class ValidationIssue:
    severity: str
    type: str
    message: str
    suggestion: str | None = None
    affected_items: list = field(default_factory=list)


@dataclass
class ValidationResult:
    trip_id: int
    is_valid: bool
    score: int
    issues: list[ValidationIssue]

    def to_dict(self) -> dict:
        return asdict(self)


def _trip_days(trip) -> list[date]:
    if not trip.start_date or not trip.end_date or trip.end_date < trip.start_date:
        return []
    return [trip.start_date + timedelta(days=i) for i in range((trip.end_date - trip.start_date).days + 1)]


def _activity_day(activity, trip) -> date | None:
    return local_date(activity.start_time, activity.timezone or trip.timezone)


# ─── Checks ───


def check_missing_lodging(trip) -> list[ValidationIssue]:
    """Nights of the trip (every day but the last) with no stay covering them."""
    nights = _trip_days(trip)[:-1]
    if not nights:
        return []

    covered = set()
    for stay in trip.lodging:
        if not stay.check_in_date or not stay.check_out_date:
            continue
        tz = stay.timezone or trip.timezone
        night = local_date(stay.check_in_date, tz)
        check_out = local_date(stay.check_out_date, tz)
        while night < check_out:
            covered.add(night)
            night += timedelta(days=1)

    missing = [night for night in nights if night not in covered]
    if not missing:
        return []
    return [ValidationIssue(
        severity="warning",
        type="missing_lodging",
        message=f"{len(missing)} day(s) without lodging",
        suggestion="Add lodging for all days in your trip",
        affected_items=[night.isoformat() for night in missing],
    )]


def check_missing_transportation(trip) -> list[ValidationIssue]:
    if len(trip.locations) > 1 and not trip.transportation:
        return [ValidationIssue(
            severity="warning",
            type="missing_transportation",
            message="Multiple locations but no transportation recorded",
            suggestion="Add transportation details between locations",
        )]
    return []


def check_timeline_conflicts(activities) -> list[ValidationIssue]:
    """Consecutive timed activities where one ends after the next begins."""
    timed = sorted(
        (a for a in activities if a.start_time and a.end_time and not a.all_day),
        key=lambda a: a.start_time,
    )
    issues = []
    for current, following in zip(timed, timed[1:]):
        if current.end_time > following.start_time:
            issues.append(ValidationIssue(
                severity="warning",
                type="timeline_conflict",
                message=f'Activities "{current.name}" and "{following.name}" overlap',
                suggestion="Adjust activity times to prevent overlap",
                affected_items=[current.id, following.id],
            ))
    return issues


def check_dates_outside_trip(trip) -> list[ValidationIssue]:
    if not trip.start_date or not trip.end_date:
        return []
    issues = []
    for activity in trip.activities:
        day = _activity_day(activity, trip)
        if day is not None and not trip.start_date <= day <= trip.end_date:
            issues.append(ValidationIssue(
                severity="critical",
                type="invalid_date",
                message=f'Activity "{activity.name}" is outside trip dates',
                suggestion="Move activity within trip dates or adjust trip dates",
                affected_items=[activity.id],
            ))
    return issues


def check_missing_information(activities, activity_locations: dict[int, int]) -> list[ValidationIssue]:
    issues = []
    without_location = [a for a in activities if a.id not in activity_locations]
    if without_location:
        issues.append(ValidationIssue(
            severity="info",
            type="missing_info",
            message=f"{len(without_location)} activities without location",
            suggestion="Add location information to activities",
            affected_items=[a.id for a in without_location],
        ))

    without_time = [a for a in activities if not a.start_time and not a.all_day]
    if without_time:
        issues.append(ValidationIssue(
            severity="info",
            type="missing_info",
            message=f"{len(without_time)} activities without time",
            suggestion="Add start time or mark as all-day",
            affected_items=[a.id for a in without_time],
        ))
    return issues


def check_empty_days(trip) -> list[ValidationIssue]:
    planned = {_activity_day(a, trip) for a in trip.activities if a.start_time}
    empty = [day for day in _trip_days(trip) if day not in planned]
    if not empty:
        return []
    return [ValidationIssue(
        severity="info",
        type="empty_days",
        message=f"{len(empty)} day(s) without planned activities",
        suggestion="Consider adding activities for free days",
        affected_items=[day.isoformat() for day in empty],
    )]


# ─── Travel time ───


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in decimal degrees."""
    lat1, lon1, lat2, lon2 = map(math.radians, (lat1, lon1, lat2, lon2))
    a = math.sin((lat2 - lat1) / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin((lon2 - lon1) / 2) ** 2
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def estimate_travel_minutes(origin, destination, mode: str | None = None) -> float:
    """Rough door-to-door minutes between two located places."""
    distance = haversine_km(origin.latitude, origin.longitude, destination.latitude, destination.longitude)
    if mode == "flight":
        return distance / FLIGHT_SPEED_KMH * 60 + FLIGHT_AIRPORT_MINUTES
    speed = TRAVEL_SPEEDS_KMH.get(mode or "", DEFAULT_SPEED_KMH)
    return math.ceil(distance / speed * 60 * TRAVEL_TIME_MARGIN)


def _minutes_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 60


def check_travel_time(trip, activity_locations: dict[int, int]) -> list[ValidationIssue]:
    """Flag consecutive located activities that leave too little time to get between them."""
    places = {loc.id: loc for loc in trip.locations if loc.latitude is not None and loc.longitude is not None}
    located = sorted(
        (
            (a, places[activity_locations[a.id]])
            for a in trip.activities
            if a.start_time and a.end_time and activity_locations.get(a.id) in places
        ),
        key=lambda pair: pair[0].start_time,
    )

    issues = []
    for (current, origin), (following, destination) in zip(located, located[1:]):
        required = estimate_travel_minutes(origin, destination)
        available = _minutes_between(current.end_time, following.start_time)
        buffer = available - required
        if buffer < 0:
            issues.append(ValidationIssue(
                severity="critical",
                type="travel_time",
                message=(
                    f"Impossible connection: Need {round(required)} minutes "
                    f"but only have {round(available)} minutes"
                ),
                suggestion=f"Allow {round(required)} minutes for travel or adjust activity times",
                affected_items=[current.id, following.id],
            ))
        elif buffer < COMFORTABLE_BUFFER_MINUTES:
            issues.append(ValidationIssue(
                severity="warning",
                type="travel_time",
                message=f"Tight connection: Only {round(buffer)} minutes buffer",
                suggestion=f"Consider adding {COMFORTABLE_BUFFER_MINUTES - round(buffer)} more minutes buffer",
                affected_items=[current.id, following.id],
            ))
    return issues


# ─── Report ───


def health_score(issues: list[ValidationIssue]) -> int:
    return max(0, 100 - sum(SEVERITY_PENALTY[issue.severity] for issue in issues))


def validate_trip(trip, activity_locations: dict[int, int]) -> ValidationResult:
    """Run every check against a trip with its activities, lodging, transportation and locations loaded."""
    issues = [
        *check_missing_lodging(trip),
        *check_missing_transportation(trip),
        *check_timeline_conflicts(trip.activities),
        *check_dates_outside_trip(trip),
        *check_missing_information(trip.activities, activity_locations),
        *check_empty_days(trip),
        *check_travel_time(trip, activity_locations),
    ]
    return ValidationResult(
        trip_id=trip.id,
        is_valid=not any(issue.severity == "critical" for issue in issues),
        score=health_score(issues),
        issues=issues,
    )

"""Timezone-aware formatting for activities, transportation, and lodging.

Datetimes are stored in UTC and rendered in the item's own zone, falling back
to the trip's zone. Output mimics the en-US browser locale so the API and the
client agree on display strings:

    format_datetime_in_timezone("2024-03-15T18:30:00Z", "America/New_York")
    -> "Mar 15, 2:30 PM EDT"
    format_datetime_in_timezone("2024-03-15T18:30:00Z", "Europe/Paris")
    -> "Mar 15, 7:30 PM GMT+1"
"""

import logging
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

NOT_SET = "Not set"
INVALID_DATE = "Invalid Date"

MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
WEEKDAY_ABBR = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

COMMON_TIMEZONES = [
    {"value": "", "label": "Use trip timezone"},
    {"value": "UTC", "label": "UTC (Coordinated Universal Time)"},
    {"value": "America/New_York", "label": "Eastern Time (US & Canada)"},
    {"value": "America/Chicago", "label": "Central Time (US & Canada)"},
    {"value": "America/Denver", "label": "Mountain Time (US & Canada)"},
    {"value": "America/Los_Angeles", "label": "Pacific Time (US & Canada)"},
    {"value": "America/Anchorage", "label": "Alaska"},
    {"value": "Pacific/Honolulu", "label": "Hawaii"},
    {"value": "Europe/London", "label": "London"},
    {"value": "Europe/Paris", "label": "Paris"},
    {"value": "Europe/Berlin", "label": "Berlin"},
    {"value": "Asia/Tokyo", "label": "Tokyo"},
    {"value": "Asia/Shanghai", "label": "Shanghai"},
    {"value": "Asia/Dubai", "label": "Dubai"},
    {"value": "Australia/Sydney", "label": "Sydney"},
    {"value": "Pacific/Auckland", "label": "Auckland"},
]


def get_zone(tz: str | None) -> ZoneInfo | None:
    """Resolve an IANA name, or None when it is empty or unknown."""
    if not tz:
        return None
    try:
        return ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Invalid timezone: {tz}")
        return None


def parse_datetime(value: str | datetime | None) -> datetime | None:
    """Parse an ISO string into an aware datetime. Naive values are read as UTC.

    Raises ValueError for unparseable strings.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# en-US only has letter abbreviations for US zones; the rest render as GMT offsets
US_ZONE_PREFIXES = ("America/", "US/", "Pacific/Honolulu")
US_ABBREVIATIONS = frozenset({
    "EST", "EDT", "CST", "CDT", "MST", "MDT", "PST", "PDT", "AKST", "AKDT", "HST", "HDT",
})
UTC_ZONES = frozenset({"UTC", "Etc/UTC"})


def zone_label(dt: datetime) -> str:
    """Short zone name for an aware datetime, as the en-US locale prints it.

    "EDT" in New York, "GMT+2" in Paris, "GMT+5:30" in Kolkata, "UTC" for UTC.
    """
    key = getattr(dt.tzinfo, "key", "")
    name = dt.tzname()
    if name in US_ABBREVIATIONS and key.startswith(US_ZONE_PREFIXES):
        return name
    if key in UTC_ZONES:
        return "UTC"

    minutes = int(dt.utcoffset().total_seconds() // 60)
    if minutes == 0:
        return "GMT"
    sign = "+" if minutes > 0 else "-"
    hours, mins = divmod(abs(minutes), 60)
    return f"GMT{sign}{hours}:{mins:02d}" if mins else f"GMT{sign}{hours}"


def _clock(dt: datetime) -> str:
    hour = dt.hour % 12 or 12
    meridiem = "AM" if dt.hour < 12 else "PM"
    return f"{hour}:{dt.minute:02d} {meridiem}"


def _resolve(value, tz, fallback_tz) -> tuple[datetime | None, ZoneInfo | None, str | None]:
    """Shared front half of the formatters: (localized datetime, zone, error text)."""
    try:
        dt = parse_datetime(value)
    except (TypeError, ValueError):
        return None, None, INVALID_DATE
    if dt is None:
        return None, None, NOT_SET
    zone = get_zone(tz or fallback_tz)
    if zone is not None:
        dt = dt.astimezone(zone)
    return dt, zone, None


def format_datetime_in_timezone(
    value: str | datetime | None,
    tz: str | None = None,
    fallback_tz: str | None = None,
    include_timezone: bool = True,
    fmt: str = "medium",
) -> str:
    """Format a datetime in the effective zone (``tz`` or ``fallback_tz``).

    ``short`` and ``medium`` give "Mar 15, 2:30 PM", ``long`` gives
    "Fri, March 15, 2024, 2:30 PM". The zone abbreviation is appended when a
    valid zone was applied and ``include_timezone`` is set.
    """
    dt, zone, error = _resolve(value, tz, fallback_tz)
    if error:
        return error

    if fmt == "long":
        text = (
            f"{WEEKDAY_ABBR[dt.weekday()]}, {MONTH_NAMES[dt.month - 1]} {dt.day}, "
            f"{dt.year}, {_clock(dt)}"
        )
    else:
        text = f"{MONTH_ABBR[dt.month - 1]} {dt.day}, {_clock(dt)}"

    if zone is not None and include_timezone:
        text = f"{text} {zone_label(dt)}"
    return text


def format_date_in_timezone(
    value: str | datetime | None,
    tz: str | None = None,
    fallback_tz: str | None = None,
) -> str:
    dt, _, error = _resolve(value, tz, fallback_tz)
    if error:
        return error
    return f"{MONTH_ABBR[dt.month - 1]} {dt.day}, {dt.year}"


def format_time_in_timezone(
    value: str | datetime | None,
    tz: str | None = None,
    fallback_tz: str | None = None,
    include_timezone: bool = True,
) -> str:
    dt, zone, error = _resolve(value, tz, fallback_tz)
    if error:
        return error
    text = _clock(dt)
    if zone is not None and include_timezone:
        text = f"{text} {zone_label(dt)}"
    return text


def get_timezone_abbreviation(tz: str, at: datetime | None = None) -> str:
    """Short zone name such as "EST" or "GMT+9". Unknown zones echo the input."""
    try:
        zone = ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError):
        return tz
    moment = (at or datetime.now(timezone.utc)).astimezone(zone)
    return zone_label(moment)


def format_duration(minutes: int | None) -> str:
    if minutes is None:
        return ""
    hours, mins = divmod(int(minutes), 60)
    if hours == 0:
        return f"{mins}m"
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}m"


def calculate_duration(start: str | datetime | None, end: str | datetime | None) -> str:
    try:
        start_dt = parse_datetime(start)
        end_dt = parse_datetime(end)
    except (TypeError, ValueError):
        return "Invalid duration"
    if start_dt is None or end_dt is None:
        return ""
    seconds = (end_dt - start_dt).total_seconds()
    if seconds < 0:
        return "Invalid duration"
    return format_duration(int(seconds // 60))


def normalize_to_utc(value: str | datetime | None, tz: str | None = None) -> datetime | None:
    """Aware UTC datetime for storage. Naive input is wall-clock time in ``tz``."""
    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        value = datetime.fromisoformat(text)
    if value.tzinfo is None:
        value = value.replace(tzinfo=get_zone(tz) or timezone.utc)
    return value.astimezone(timezone.utc)


def current_time_in_timezone(tz: str | None = None) -> datetime:
    return datetime.now(timezone.utc).astimezone(get_zone(tz) or timezone.utc)


def local_date(value: datetime | None, tz: str | None = None) -> date | None:
    """Calendar date of ``value`` as seen in ``tz`` (UTC when unset or invalid)."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(get_zone(tz) or timezone.utc).date()

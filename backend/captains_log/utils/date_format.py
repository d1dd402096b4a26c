"""Date-only display helpers.

Trip dates are calendar dates, so these read the ``YYYY-MM-DD`` prefix as-is
and never shift it through a timezone.
"""

from datetime import date, datetime

from captains_log.utils.timezone import MONTH_ABBR, MONTH_NAMES, WEEKDAY_NAMES


def _to_date(value: str | date | datetime | None) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = value.strip().split("T")[0]
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def format_date(value: str | date | datetime | None, style: str = "medium", fallback: str = "Not set") -> str:
    """Format a calendar date.

    >>> format_date("2024-03-15")
    'Mar 15, 2024'
    >>> format_date("2024-03-15", "short")
    '3/15/24'
    """
    d = _to_date(value)
    if d is None:
        return fallback

    if style == "short":
        return f"{d.month}/{d.day}/{d.year % 100:02d}"
    if style == "long":
        return f"{MONTH_NAMES[d.month - 1]} {d.day}, {d.year}"
    if style == "full":
        return f"{WEEKDAY_NAMES[d.weekday()]}, {MONTH_NAMES[d.month - 1]} {d.day}, {d.year}"
    return f"{MONTH_ABBR[d.month - 1]} {d.day}, {d.year}"


def format_date_range(
    start: str | date | None,
    end: str | date | None,
    style: str = "medium",
) -> str:
    start_text = format_date(start, style, "TBD")
    end_text = format_date(end, style, "TBD")

    if start_text == "TBD" and end_text == "TBD":
        return "Dates not set"
    if start_text == "TBD":
        return f"TBD - {end_text}"
    if end_text == "TBD":
        return f"{start_text} - TBD"

    start_date, end_date = _to_date(start), _to_date(end)
    if style == "medium" and start_date.year == end_date.year:
        # Year shown once, on the end date
        start_text = f"{MONTH_ABBR[start_date.month - 1]} {start_date.day}"
    return f"{start_text} - {end_text}"


def get_relative_time(value: str | date | datetime | None, today: date | None = None) -> str:
    """"Today", "In 3 days", "2 weeks ago"; beyond a month, the medium date."""
    d = _to_date(value)
    if d is None:
        return "" if not value else format_date(value)

    diff = (d - (today or date.today())).days
    if diff == 0:
        return "Today"
    if diff == 1:
        return "Tomorrow"
    if diff == -1:
        return "Yesterday"
    if 0 < diff <= 7:
        return f"In {diff} days"
    if -7 <= diff < 0:
        return f"{-diff} days ago"
    if 7 < diff <= 30:
        return f"In {-(-diff // 7)} weeks"
    if -30 <= diff < -7:
        return f"{-(diff // 7)} weeks ago"
    return format_date(d)

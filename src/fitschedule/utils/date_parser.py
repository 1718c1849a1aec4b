"""Date, time and weekday parsing utilities."""

from datetime import date, datetime, time, timedelta
from dateutil import parser as date_parser

# Sunday-based ordinals, matching Series.weekdays.
WEEKDAYS = {
    "sunday": 0, "sun": 0,
    "monday": 1, "mon": 1,
    "tuesday": 2, "tue": 2, "tues": 2,
    "wednesday": 3, "wed": 3,
    "thursday": 4, "thu": 4, "thurs": 4,
    "friday": 5, "fri": 5,
    "saturday": 6, "sat": 6,
}


def _python_weekday(ordinal: int) -> int:
    """Convert a Sunday-based ordinal to date.weekday() numbering."""
    return (ordinal - 1) % 7


def parse_date(date_str: str, today: date | None = None) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative dates: "today", "tomorrow", "yesterday"
    - Weekdays: "next monday" (strictly after today), "last friday"
      (strictly before today), "monday" (today or the next one)

    Args:
        date_str: Date string in various formats
        today: Reference day, defaults to the current date

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = today or date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    prefix, _, rest = date_str.partition(" ")
    if prefix in ("next", "last") and rest in WEEKDAYS:
        target = _python_weekday(WEEKDAYS[rest])
        if prefix == "next":
            days_ahead = (target - today.weekday()) % 7 or 7
            return today + timedelta(days=days_ahead)
        days_ago = (today.weekday() - target) % 7 or 7
        return today - timedelta(days=days_ago)

    if date_str in WEEKDAYS:
        target = _python_weekday(WEEKDAYS[date_str])
        return today + timedelta(days=(target - today.weekday()) % 7)

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_time(time_str: str) -> time:
    """Parse a wall-clock time such as "09:00", "9:30" or "6pm".

    Raises:
        ValueError: If time string cannot be parsed
    """
    time_str = time_str.strip()
    try:
        return datetime.strptime(time_str, "%H:%M").time()
    except ValueError:
        pass
    try:
        parsed = date_parser.parse(time_str, default=datetime(2000, 1, 1))
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse time '{time_str}': {e}")
    return parsed.time().replace(second=0, microsecond=0)


def parse_weekdays(weekdays_str: str) -> list[int]:
    """Parse a comma-separated weekday list into Sunday-based ordinals.

    Accepts names ("mon,wed"), abbreviations and ordinals ("1,3").

    Raises:
        ValueError: If a weekday is not recognized
    """
    ordinals = []
    for part in weekdays_str.split(","):
        part = part.strip().lower()
        if not part:
            continue
        if part in WEEKDAYS:
            ordinals.append(WEEKDAYS[part])
        elif part.isdigit() and 0 <= int(part) <= 6:
            ordinals.append(int(part))
        else:
            raise ValueError(f"Unknown weekday '{part}'")
    return ordinals


def parse_datetime(value: str) -> datetime:
    """Parse a local date and time, e.g. "2024-01-01 10:00".

    Raises:
        ValueError: If the value cannot be parsed
    """
    try:
        return date_parser.parse(value)
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date/time '{value}': {e}")

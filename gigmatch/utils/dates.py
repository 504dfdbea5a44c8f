from datetime import datetime
from zoneinfo import ZoneInfo

from gigmatch import config

SHOW_DATE_FORMATS = [
    "%Y-%m-%d",
    "%m/%d/%Y",
    "%m/%d/%y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%a %b %d %Y",
    "%A, %B %d, %Y",
]


def parse_show_date(date_str):
    """
    Parse a show date into a datetime for ordering.
    Handles: "2024-03-01", "3/1/2024", "Mar 1, 2024", "March 1, 2024",
    "Fri Mar 01 2024" and full ISO datetimes.
    Returns None for anything else, including the "Unknown" placeholder.
    """
    if not isinstance(date_str, str):
        return None

    date_str = date_str.strip()
    if not date_str or date_str == config.UNKNOWN:
        return None

    for fmt in SHOW_DATE_FORMATS:
        try:
            return datetime.strptime(date_str, fmt)
        except ValueError:
            continue

    try:
        dt = datetime.fromisoformat(date_str.replace("Z", "+00:00"))
    except ValueError:
        return None
    # Naive and aware datetimes can't be compared; order by wall-clock date
    return dt.replace(tzinfo=None)


def parse_listing_datetime(value, tz_name=None):
    """
    Parse the ISO-8601 datetime from a listing row and convert it to the
    listings timezone. Returns None if missing or unparseable.
    """
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None

    tz = ZoneInfo(tz_name or config.LISTINGS_TIMEZONE)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


def format_display_date(dt):
    """US locale date, e.g. 3/1/2024."""
    return f"{dt.month}/{dt.day}/{dt.year}"


def format_display_time(dt):
    """US locale two-digit hour and minute, e.g. 08:00 PM."""
    return dt.strftime("%I:%M %p")

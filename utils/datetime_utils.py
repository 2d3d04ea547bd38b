# -*- coding: utf-8 -*-
"""
DateTime Utilities

Centralized datetime handling for drafts, the preview and save status.

Dates of birth/death travel as ISO date strings (YYYY-MM-DD); timestamps
travel as ISO datetime strings, optionally with a trailing "Z".
"""

from datetime import datetime, date, timezone
from typing import Union, Optional

from services.translation_manager import tr

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def from_isoformat(value: Union[str, datetime, date, None]) -> Optional[datetime]:
    """
    Convert ISO format string to datetime object.

    Accepts the "Z" suffix servers send. Never raises.

    Examples:
        >>> from_isoformat('2024-01-15T10:30:00')
        datetime(2024, 1, 15, 10, 30)
        >>> from_isoformat('2024-01-15')
        datetime(2024, 1, 15, 0, 0)
        >>> from_isoformat('not a date')
        None
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return value

    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())

    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            if 'T' in text or ' ' in text:
                return datetime.fromisoformat(text)
            return datetime.combine(date.fromisoformat(text), datetime.min.time())
        except ValueError:
            return None

    return None


def to_date_isoformat(value: Union[datetime, date, str, None]) -> Optional[str]:
    """
    Convert any datetime-like value to date-only ISO format (YYYY-MM-DD).

    Used for date_of_birth / date_of_death. Unparsable strings are kept
    as-is so the identity validator can reject them; None stays None.

    Examples:
        >>> to_date_isoformat(datetime(2024, 1, 15, 10, 30))
        '2024-01-15'
        >>> to_date_isoformat('2024-01-15T00:00:00')
        '2024-01-15'
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return value.date().isoformat()

    if isinstance(value, date):
        return value.isoformat()

    if isinstance(value, str):
        if 'T' in value:
            head = value.split('T')[0]
            if parse_date(head) is not None:
                return head
        return value

    return str(value)


def parse_date(value: Union[str, date, None]) -> Optional[date]:
    """Parse a YYYY-MM-DD value into a date. Never raises."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def format_display_date(value: Union[str, date, None]) -> Optional[str]:
    """Format a date as 'March 1, 1940'. Returns None if it cannot be parsed."""
    parsed = parse_date(value)
    if parsed is None:
        return None
    return f"{MONTH_NAMES[parsed.month - 1]} {parsed.day}, {parsed.year}"


def calculate_age(birth: Union[str, date, None], death: Union[str, date, None]) -> Optional[int]:
    """Whole years between birth and death, or None if either is missing or out of order."""
    born = parse_date(birth)
    died = parse_date(death)
    if born is None or died is None or died < born:
        return None
    age = died.year - born.year
    if (died.month, died.day) < (born.month, born.day):
        age -= 1
    return age


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_last_saved(saved_at: Union[datetime, str, None],
                      now: Optional[datetime] = None) -> Optional[str]:
    """
    Human readable "last saved" label.

    Args:
        saved_at: when the draft was last persisted
        now: reference time (defaults to the current time, aware if saved_at is)

    Returns:
        "Just saved", "N seconds ago", "N minutes ago", "N hours ago",
        or the display date for anything older than a day. None if never saved.
    """
    saved = from_isoformat(saved_at)
    if saved is None:
        return None

    if now is None:
        now = utc_now() if saved.tzinfo is not None else datetime.now()
    # Naive timestamps are local time
    if saved.tzinfo is None and now.tzinfo is not None:
        saved = saved.astimezone()
    elif saved.tzinfo is not None and now.tzinfo is None:
        now = now.astimezone()

    seconds = int((now - saved).total_seconds())
    if seconds < 10:
        return tr("save_status.just_saved")
    if seconds < 60:
        return tr("save_status.seconds_ago", count=seconds)

    minutes = seconds // 60
    if minutes < 60:
        if minutes == 1:
            return tr("save_status.minute_ago")
        return tr("save_status.minutes_ago", count=minutes)

    hours = minutes // 60
    if hours < 24:
        if hours == 1:
            return tr("save_status.hour_ago")
        return tr("save_status.hours_ago", count=hours)

    return format_display_date(saved.date())

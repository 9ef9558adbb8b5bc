"""Date formatting helpers matching how Tempgram renders dates in the UI and in emails."""

import re
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional

# Chat dialogs show a 24h clock without seconds
CHAT_TIME_PATTERN = re.compile(r"^(0[0-9]|1[0-9]|2[0-3]):[0-5][0-9]$")


def _now(tz: Optional[tzinfo] = None) -> datetime:
    return datetime.now(tz or timezone.utc)


def get_current_date_and_format_dd_month_yyyy_separated_by_spaces(
    tz: Optional[tzinfo] = None,
) -> str:
    """Return today's date as e.g. '05 October 2026'."""
    return _now(tz).strftime("%d %B %Y")


def get_date_and_format_yyyymmdd(
    separator: str = "-",
    days_offset: int = 0,
    tz: Optional[tzinfo] = None,
) -> str:
    """
    Return a date as year, month and day joined by a separator.

    Args:
        separator: String placed between the date parts.
        days_offset: Days to add to today (negative for the past).
        tz: Timezone used to determine "today". Defaults to UTC.

    Returns:
        Formatted date, e.g. '2026/10/19' for separator '/'.
    """
    date = _now(tz) + timedelta(days=days_offset)
    return separator.join(
        (f"{date.year:04d}", f"{date.month:02d}", f"{date.day:02d}")
    )


def chat_notification_date_time_pattern(tz: Optional[tzinfo] = None) -> re.Pattern:
    """
    Build the pattern of a message timestamp in a chat notification email.

    Notification emails stamp every message as '19 October 2026 at 14:05 UTC'.
    """
    today = re.escape(get_current_date_and_format_dd_month_yyyy_separated_by_spaces(tz))
    return re.compile(rf"^{today}\sat\s\d+:\d+\sUTC$")

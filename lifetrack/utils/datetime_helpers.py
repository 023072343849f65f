"""
Date/time helpers for calendar-day gamification rules

Streaks and bonuses are decided on calendar days, so every comparison goes
through day_of() to drop the time component. Stored timestamps may be naive
(documents written by older clients) or aware; comparing dates works for both.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Callable, Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from lifetrack.config import APP_TIMEZONE

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def get_app_timezone(tz_name: Optional[str] = None) -> Optional[ZoneInfo]:
    """
    Timezone used to decide calendar days

    Returns:
        ZoneInfo, or None to use server local time
    """
    tz_name = APP_TIMEZONE if tz_name is None else tz_name
    if not tz_name:
        return None

    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        logger.error(f"Invalid APP_TIMEZONE '{tz_name}': {e}. Using server local time")
        return None


def now_local() -> datetime:
    """Current time in the application timezone"""
    tz = get_app_timezone()
    if tz is None:
        return datetime.now()
    return datetime.now(tz)


def day_of(value: Union[date, datetime, None]) -> Optional[date]:
    """
    Calendar day of a timestamp (None passes through)

    Aware timestamps are converted to the application timezone (server local
    time if none is set) first; naive ones are taken as already local.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(get_app_timezone())
        return value.date()
    return value


def is_same_day(value: Union[date, datetime, None], today: date) -> bool:
    return day_of(value) == today


def is_previous_day(value: Union[date, datetime, None], today: date) -> bool:
    return day_of(value) == today - timedelta(days=1)

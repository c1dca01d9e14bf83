from __future__ import annotations

import logging
from datetime import datetime, time, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

MEDIUM_TIME_FORMAT = "%H:%M:%S"
SHORT_TIME_FORMAT = "%H:%M"


def resolve_timezone(name: Optional[str]) -> Optional[tzinfo]:
    if name:
        try:
            return ZoneInfo(name)
        except Exception as exc:  # pragma: no cover - environment-dependent
            logger.warning("Failed to load timezone %s via zoneinfo (%s)", name, exc)
    local_tz = datetime.now().astimezone().tzinfo
    if local_tz is None:  # pragma: no cover - environment-dependent
        logger.warning("System timezone unavailable, using naive local time")
    return local_tz


def now_in_tz(tz: Optional[tzinfo]) -> datetime:
    if tz:
        return datetime.now(tz)
    return datetime.now().astimezone()


def format_medium_time(moment: datetime | time) -> str:
    """Locale-independent medium time precision, e.g. ``08:30:05``."""
    return moment.strftime(MEDIUM_TIME_FORMAT)


def format_short_time(moment: datetime | time) -> str:
    return moment.strftime(SHORT_TIME_FORMAT)


def same_minute(moment: datetime | time, target: time) -> bool:
    return moment.hour == target.hour and moment.minute == target.minute

"""Application timezone handling.

Deadlines, trigger times and timestamps are aware datetimes in the
application timezone everywhere above the persistence layer. Columns store
UTC without ``tzinfo``: SQL comparisons such as ``deadline <= now`` work on
every backend and stay unambiguous across daylight saving transitions.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from taskboard.config import get_settings

logger = logging.getLogger(__name__)

FALLBACK_TIMEZONE: Final[str] = "Asia/Singapore"
DEADLINE_FORMAT: Final[str] = "%a, %d %b %Y %H:%M"

# Fixed offsets such as "UTC+8", "GMT-05:30" or "UTC+0530".
_FIXED_OFFSET: Final[re.Pattern[str]] = re.compile(
    r"^(?:UTC|GMT)(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$",
    re.IGNORECASE,
)


def _fixed_offset(name: str) -> tzinfo | None:
    match = _FIXED_OFFSET.match(name)
    if match is None:
        return None
    delta = timedelta(hours=int(match["hours"]), minutes=int(match["minutes"] or 0))
    return timezone(-delta if match["sign"] == "-" else delta, name.upper())


def resolve_timezone(name: str | None) -> tzinfo:
    """Turn an IANA name or a fixed ``UTC±HH[:MM]`` offset into a ``tzinfo``.

    Unknown names fall back to :data:`FALLBACK_TIMEZONE` with a warning.
    """

    name = (name or "").strip() or FALLBACK_TIMEZONE
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        offset = _fixed_offset(name)
        if offset is not None:
            return offset
    logger.warning("Unknown timezone %r; using %s", name, FALLBACK_TIMEZONE)
    return ZoneInfo(FALLBACK_TIMEZONE)


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Timezone configured through ``APP_TIMEZONE``."""

    return resolve_timezone(get_settings().app_timezone)


def reset_app_timezone_cache() -> None:
    get_app_timezone.cache_clear()


def now_in_app_timezone() -> datetime:
    return datetime.now(tz=get_app_timezone())


def now_in_storage_datetime() -> datetime:
    """Current time in its stored form (naive UTC)."""

    return datetime.now(tz=timezone.utc).replace(tzinfo=None)


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Express ``value`` in the app timezone; naive values are taken as app time."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=get_app_timezone())
    return value.astimezone(get_app_timezone())


def to_storage_datetime(value: datetime | None) -> datetime | None:
    """Stored form of ``value``: naive UTC. Naive input is taken as app time."""

    if value is None:
        return None
    return ensure_app_timezone(value).astimezone(timezone.utc).replace(tzinfo=None)


def from_storage_datetime(value: datetime | None) -> datetime | None:
    """Inverse of :func:`to_storage_datetime`, expressed in the app timezone."""

    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc).astimezone(get_app_timezone())


def format_deadline(value: datetime | None, default: str = "N/A") -> str:
    """Render a deadline for people, e.g. ``Mon, 10 Mar 2025 17:00``."""

    localized = ensure_app_timezone(value)
    return localized.strftime(DEADLINE_FORMAT) if localized else default

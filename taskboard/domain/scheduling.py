"""Pure date arithmetic for reminders and recurring tasks.

Reminders use a grace-window policy: a reminder is due from its trigger time
until ``grace_minutes`` later, inclusive. A scan that runs late (slow tick,
process restart) still fires the reminder as long as it lands inside the
window; a scan that runs later than that skips it for good.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone

from .entities.recurrence import (
    Daily,
    EndsOnDate,
    Monthly,
    RecurrenceRule,
    Weekly,
)
from .entities.task import DEFAULT_REMINDER_OFFSETS

MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = 1440


def _as_utc(value: datetime) -> datetime:
    # Arithmetic on two values sharing one tzinfo is wall-clock arithmetic;
    # elapsed time across a daylight saving change needs UTC.
    return value.astimezone(timezone.utc) if value.tzinfo is not None else value


def reminder_trigger_time(deadline: datetime, offset_minutes: int) -> datetime:
    """Return the moment a reminder ``offset_minutes`` before ``deadline`` fires.

    The offset is elapsed time, so an hour before 03:30 on a spring-forward
    night is 01:30. The result keeps the timezone of ``deadline``.
    """

    trigger = _as_utc(deadline) - timedelta(minutes=offset_minutes)
    return trigger.astimezone(deadline.tzinfo) if deadline.tzinfo is not None else trigger


def is_due(trigger_time: datetime, now: datetime, grace_minutes: int) -> bool:
    """Return ``True`` when ``now`` falls inside ``[trigger, trigger + grace]``."""

    trigger_time, now = _as_utc(trigger_time), _as_utc(now)
    if now < trigger_time:
        return False
    return now - trigger_time <= timedelta(minutes=grace_minutes)


def add_months(value: datetime, months: int) -> datetime:
    """Add calendar months, clamping the day to the end of the target month."""

    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return value.replace(year=year, month=month, day=min(value.day, last_day))


def next_occurrence(current_deadline: datetime, rule: RecurrenceRule) -> datetime:
    """Return the deadline of the occurrence following ``current_deadline``."""

    frequency = rule.frequency
    if isinstance(frequency, Daily):
        return current_deadline + timedelta(days=frequency.interval)
    if isinstance(frequency, Weekly):
        return current_deadline + timedelta(days=7 * frequency.interval)
    if isinstance(frequency, Monthly):
        return add_months(current_deadline, frequency.interval)
    raise ValueError(f"Unsupported recurrence frequency: {frequency!r}")


def should_spawn(next_deadline: datetime, rule: RecurrenceRule) -> bool:
    """Return ``False`` only when the series ends before ``next_deadline``."""

    if not isinstance(rule.ends, EndsOnDate):
        return True
    until = rule.ends.until
    if until.tzinfo is None and next_deadline.tzinfo is not None:
        until = until.replace(tzinfo=next_deadline.tzinfo)
    elif until.tzinfo is not None and next_deadline.tzinfo is None:
        until = until.replace(tzinfo=None)
    return next_deadline <= until


def _pluralize(value: int, unit: str) -> str:
    return f"{value} {unit}" if value == 1 else f"{value} {unit}s"


def humanize_offset(minutes: int) -> str:
    """Describe an offset in its largest whole unit, e.g. ``"3 days"``."""

    if minutes >= MINUTES_PER_DAY:
        return _pluralize(minutes // MINUTES_PER_DAY, "day")
    if minutes >= MINUTES_PER_HOUR:
        return _pluralize(minutes // MINUTES_PER_HOUR, "hour")
    return _pluralize(minutes, "minute")


def normalize_reminder_offsets(values: Iterable[object]) -> list[int]:
    """Return unique positive integer offsets sorted from furthest to nearest."""

    cleaned: set[int] = set()
    for value in values:
        if isinstance(value, bool):
            continue
        try:
            number = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            continue
        if number != number or number in (float("inf"), float("-inf")):
            continue
        if number <= 0 or not number.is_integer():
            continue
        cleaned.add(int(number))
    return sorted(cleaned, reverse=True)


def derive_reminder_offsets(
    deadline: datetime | None, offsets: Iterable[object] | None
) -> list[int]:
    """Offsets a task should carry given its deadline.

    No deadline means no reminders. Unset offsets (``None``) fall back to
    :data:`DEFAULT_REMINDER_OFFSETS`; an explicit empty collection is kept.
    """

    if deadline is None:
        return []
    if offsets is None:
        return list(DEFAULT_REMINDER_OFFSETS)
    return normalize_reminder_offsets(offsets)


__all__ = [
    "add_months",
    "derive_reminder_offsets",
    "humanize_offset",
    "is_due",
    "next_occurrence",
    "normalize_reminder_offsets",
    "reminder_trigger_time",
    "should_spawn",
]

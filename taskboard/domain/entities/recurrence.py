"""Recurrence rules attached to tasks.

A rule is made of a frequency variant (``Daily``, ``Weekly`` or ``Monthly``)
and a termination variant (``EndsNever`` or ``EndsOnDate``). Rules are values:
they are embedded in the task row and copied verbatim onto each successor.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Union

FREQUENCY_DAILY = "daily"
FREQUENCY_WEEKLY = "weekly"
FREQUENCY_MONTHLY = "monthly"

ENDS_NEVER = "never"
ENDS_ON_DATE = "onDate"


def _validate_interval(interval: int) -> None:
    if isinstance(interval, bool) or not isinstance(interval, int) or interval < 1:
        msg = f"Recurrence interval must be a positive integer, got {interval!r}"
        raise ValueError(msg)


@dataclass(frozen=True)
class Daily:
    interval: int = 1

    name = FREQUENCY_DAILY

    def __post_init__(self) -> None:
        _validate_interval(self.interval)


@dataclass(frozen=True)
class Weekly:
    interval: int = 1

    name = FREQUENCY_WEEKLY

    def __post_init__(self) -> None:
        _validate_interval(self.interval)


@dataclass(frozen=True)
class Monthly:
    interval: int = 1

    name = FREQUENCY_MONTHLY

    def __post_init__(self) -> None:
        _validate_interval(self.interval)


@dataclass(frozen=True)
class EndsNever:
    """The series continues indefinitely."""


@dataclass(frozen=True)
class EndsOnDate:
    """No occurrence is spawned whose deadline falls after ``until``."""

    until: datetime


Frequency = Union[Daily, Weekly, Monthly]
Termination = Union[EndsNever, EndsOnDate]

_FREQUENCIES: dict[str, type] = {
    FREQUENCY_DAILY: Daily,
    FREQUENCY_WEEKLY: Weekly,
    FREQUENCY_MONTHLY: Monthly,
}


def _parse_interval(raw: Any) -> int:
    """Accept whole numbers only; ``1.5`` or ``"2.5"`` are rejected, not truncated."""

    if isinstance(raw, bool):
        raise ValueError(f"Invalid recurrence interval: {raw!r}")
    try:
        number = float(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid recurrence interval: {raw!r}") from exc
    if not math.isfinite(number) or not number.is_integer():
        raise ValueError(f"Invalid recurrence interval: {raw!r}")
    return int(number)


@dataclass(frozen=True)
class RecurrenceRule:
    """How a completed task regenerates its next occurrence."""

    frequency: Frequency
    ends: Termination = field(default_factory=EndsNever)

    @property
    def interval(self) -> int:
        return self.frequency.interval

    def to_payload(self) -> dict[str, Any]:
        """Serialize the rule into the JSON shape stored with the task."""

        until = self.ends.until if isinstance(self.ends, EndsOnDate) else None
        return {
            "frequency": self.frequency.name,
            "interval": self.frequency.interval,
            "ends": ENDS_ON_DATE if until is not None else ENDS_NEVER,
            "until": until.isoformat() if until is not None else None,
        }

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "RecurrenceRule":
        """Parse a stored or submitted rule.

        Raises ``ValueError`` for unknown frequencies, non-positive intervals,
        unknown termination kinds and ``onDate`` rules without ``until``.
        """

        if not isinstance(payload, dict):
            raise ValueError("Recurrence rule must be an object")

        name = str(payload.get("frequency") or "").strip().lower()
        frequency_cls = _FREQUENCIES.get(name)
        if frequency_cls is None:
            raise ValueError(f"Unsupported recurrence frequency: {name or None!r}")

        raw_interval = payload.get("interval", 1)
        interval = _parse_interval(raw_interval if raw_interval is not None else 1)
        frequency = frequency_cls(interval)

        ends = payload.get("ends") or ENDS_NEVER
        if ends == ENDS_NEVER:
            return cls(frequency=frequency, ends=EndsNever())
        if ends != ENDS_ON_DATE:
            raise ValueError(f"Unsupported recurrence termination: {ends!r}")

        until = payload.get("until")
        if until is None or until == "":
            raise ValueError("Recurrence ending on a date requires 'until'")
        if isinstance(until, str):
            until = datetime.fromisoformat(until.replace("Z", "+00:00"))
        if not isinstance(until, datetime):
            raise ValueError(f"Invalid recurrence end date: {until!r}")
        return cls(frequency=frequency, ends=EndsOnDate(until))


__all__ = [
    "Daily",
    "ENDS_NEVER",
    "ENDS_ON_DATE",
    "EndsNever",
    "EndsOnDate",
    "FREQUENCY_DAILY",
    "FREQUENCY_MONTHLY",
    "FREQUENCY_WEEKLY",
    "Frequency",
    "Monthly",
    "RecurrenceRule",
    "Termination",
    "Weekly",
]

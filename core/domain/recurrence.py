from __future__ import annotations

import re
from calendar import monthrange
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Optional


class RecurrenceKind(str, Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUAL = "annual"
    EVERY_N = "every_n"


class IntervalUnit(str, Enum):
    DAYS = "days"
    WEEKS = "weeks"


_EVERY_N_PATTERN = re.compile(r"^every_(\d+)_(days|weeks)$")

_MONTH_STEPS = {
    RecurrenceKind.MONTHLY: 1,
    RecurrenceKind.QUARTERLY: 3,
    RecurrenceKind.ANNUAL: 12,
}


def add_months(anchor: date, months: int) -> date:
    """Calendar month shift; the day is clamped to the target month's last day."""
    index = anchor.month - 1 + months
    year = anchor.year + index // 12
    month = index % 12 + 1
    day = min(anchor.day, monthrange(year, month)[1])
    return date(year, month, day)


@dataclass(frozen=True)
class Recurrence:
    kind: RecurrenceKind
    interval: int = 1
    unit: Optional[IntervalUnit] = None

    @staticmethod
    def parse(rule: str | None) -> Optional["Recurrence"]:
        """Decode a stored rule string.

        ``None``/blank means one-time. Named rules map directly, ``every_<N>_<days|weeks>``
        becomes an ``EVERY_N`` value. Anything else (including a malformed or
        non-positive ``every_`` rule) falls back to monthly.
        """
        token = (rule or "").strip().lower()
        if not token:
            return None
        match = _EVERY_N_PATTERN.match(token)
        if match:
            count = int(match.group(1))
            if count > 0:
                return Recurrence(RecurrenceKind.EVERY_N, count, IntervalUnit(match.group(2)))
            return MONTHLY
        try:
            kind = RecurrenceKind(token)
        except ValueError:
            return MONTHLY
        if kind == RecurrenceKind.EVERY_N:
            return MONTHLY
        return Recurrence(kind)

    def to_rule(self) -> str:
        if self.kind == RecurrenceKind.EVERY_N:
            unit = self.unit or IntervalUnit.DAYS
            return f"every_{self.interval}_{unit.value}"
        return self.kind.value

    def advance(self, current: date) -> date:
        if self.kind == RecurrenceKind.WEEKLY:
            return current + timedelta(days=7)
        if self.kind == RecurrenceKind.BIWEEKLY:
            return current + timedelta(weeks=2)
        if self.kind == RecurrenceKind.EVERY_N:
            if self.unit == IntervalUnit.WEEKS:
                return current + timedelta(weeks=self.interval)
            return current + timedelta(days=self.interval)
        return add_months(current, _MONTH_STEPS[self.kind])


WEEKLY = Recurrence(RecurrenceKind.WEEKLY)
BIWEEKLY = Recurrence(RecurrenceKind.BIWEEKLY)
MONTHLY = Recurrence(RecurrenceKind.MONTHLY)
QUARTERLY = Recurrence(RecurrenceKind.QUARTERLY)
ANNUAL = Recurrence(RecurrenceKind.ANNUAL)


def advance_date(current: date, recurrence: Recurrence | None) -> date:
    """Next occurrence after ``current``; one-time commitments do not move."""
    if recurrence is None:
        return current
    return recurrence.advance(current)


__all__ = [
    "RecurrenceKind",
    "IntervalUnit",
    "Recurrence",
    "WEEKLY",
    "BIWEEKLY",
    "MONTHLY",
    "QUARTERLY",
    "ANNUAL",
    "add_months",
    "advance_date",
]

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from typing import List, Tuple

from src.core.errors import BadRequestError


@dataclass(frozen=True, order=True)
class Period:
    """A (year, month) reporting bucket. Ordering is chronological."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise BadRequestError(f"Invalid period month: {self.month}")

    @classmethod
    def containing(cls, value: date) -> "Period":
        return cls(year=value.year, month=value.month)

    @property
    def start(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def label(self) -> str:
        return calendar.month_abbr[self.month]

    def shift(self, months: int) -> "Period":
        month_index = self.month - 1 + months
        return Period(year=self.year + month_index // 12, month=month_index % 12 + 1)

    def previous(self) -> "Period":
        return self.shift(-1)

    def next(self) -> "Period":
        return self.shift(1)

    def key(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


def current_and_previous_period(as_of: date) -> Tuple[Period, Period]:
    current = Period.containing(as_of)
    return current, current.previous()


def trailing_periods(end: Period, count: int) -> List[Period]:
    """Return ``count`` consecutive periods ending at ``end``, oldest first."""
    return [end.shift(offset) for offset in range(-(count - 1), 1)]

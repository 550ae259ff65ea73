from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Generic, List, Sequence, Tuple, TypeVar

from src.schemas.reports import DataSource

T = TypeVar("T")

TierLoader = Callable[[], List[T]]


@dataclass(frozen=True)
class TierResult(Generic[T]):
    source: DataSource
    data: List[T] = field(default_factory=list)


def first_non_empty(tiers: Sequence[Tuple[DataSource, TierLoader[T]]]) -> TierResult[T]:
    """Evaluate loaders in priority order and keep the first non-empty result.

    Loaders are called lazily, so a lower tier is never read when a higher
    one produced rows. A result whose values are all zero still counts as
    non-empty.
    """
    if not tiers:
        raise ValueError("At least one tier is required")
    source = tiers[0][0]
    for source, load in tiers:
        data = load()
        if data:
            return TierResult(source=source, data=list(data))
    return TierResult(source=source, data=[])


def safe_divide(numerator: float, denominator: float) -> float:
    if not denominator:
        return 0.0
    return float(numerator) / float(denominator)


def percent_change(current: float, previous: float) -> float:
    """Period-over-period growth in percent; 0 when there is no positive baseline."""
    if previous <= 0:
        return 0.0
    return (float(current) - float(previous)) * 100 / float(previous)


def share_of_total(value: float, total: float) -> float:
    if total <= 0:
        return 0.0
    return float(value) * 100 / float(total)

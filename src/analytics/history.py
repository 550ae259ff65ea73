from __future__ import annotations

import random
from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, List, Sequence, Tuple

from src.analytics.tiers import percent_change
from src.models.reports import MonthlyMetricSnapshot, RevenuePaymentRecord
from src.schemas.reports import DataSource, RevenueHistoryPoint
from src.shared.time import Period, trailing_periods

HISTORY_MONTHS = 12

# Synthetic tier bands.
SYNTHETIC_REVENUE_FLOOR = 25000
SYNTHETIC_REVENUE_SPREAD = 15000
SYNTHETIC_REVENUE_PER_BOOKING = 2000
SYNTHETIC_GROWTH_SPREAD = 30


def _build_points(
    buckets: Sequence[Tuple[Period, float, int]], source: DataSource
) -> List[RevenueHistoryPoint]:
    points: List[RevenueHistoryPoint] = []
    previous_revenue = None
    for period, revenue, bookings in buckets:
        growth = percent_change(revenue, previous_revenue) if previous_revenue is not None else 0.0
        points.append(
            RevenueHistoryPoint(
                period_start=period.start,
                year=period.year,
                month=period.month,
                label=period.label,
                revenue=revenue,
                bookings=bookings,
                growth=growth,
                source=source,
            )
        )
        previous_revenue = revenue
    return points


def _pad_front(
    buckets: List[Tuple[Period, float, int]], months: int
) -> List[Tuple[Period, float, int]]:
    missing = months - len(buckets)
    if missing <= 0 or not buckets:
        return buckets
    earliest = buckets[0][0]
    padding = [(earliest.shift(offset), 0.0, 0) for offset in range(-missing, 0)]
    return padding + buckets


def history_from_snapshots(
    snapshots: Iterable[MonthlyMetricSnapshot], months: int = HISTORY_MONTHS
) -> List[RevenueHistoryPoint]:
    ordered = sorted(snapshots, key=lambda snapshot: snapshot.metric_date)[-months:]
    buckets = [
        (snapshot.period, float(snapshot.total_revenue), snapshot.total_bookings)
        for snapshot in ordered
    ]
    return _build_points(_pad_front(buckets, months), DataSource.SNAPSHOT)


def history_from_payments(
    payments: Iterable[RevenuePaymentRecord], months: int = HISTORY_MONTHS
) -> List[RevenueHistoryPoint]:
    totals: Dict[Period, Decimal] = defaultdict(lambda: Decimal("0"))
    counts: Dict[Period, int] = defaultdict(int)
    for payment in payments:
        if not payment.is_paid:
            continue
        totals[payment.period] += payment.amount
        counts[payment.period] += 1

    recent = sorted(totals.keys())[-months:]
    buckets = [(period, float(totals[period]), counts[period]) for period in recent]
    return _build_points(_pad_front(buckets, months), DataSource.ROLLUP)


def synthetic_history(
    end: Period, rng: random.Random, months: int = HISTORY_MONTHS
) -> List[RevenueHistoryPoint]:
    points: List[RevenueHistoryPoint] = []
    for period in trailing_periods(end, months):
        base_revenue = SYNTHETIC_REVENUE_FLOOR + rng.random() * SYNTHETIC_REVENUE_SPREAD
        points.append(
            RevenueHistoryPoint(
                period_start=period.start,
                year=period.year,
                month=period.month,
                label=period.label,
                revenue=float(int(base_revenue)),
                bookings=int(base_revenue // SYNTHETIC_REVENUE_PER_BOOKING),
                growth=(rng.random() - 0.5) * SYNTHETIC_GROWTH_SPREAD,
                source=DataSource.SYNTHETIC,
            )
        )
    return points

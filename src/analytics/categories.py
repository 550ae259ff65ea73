from __future__ import annotations

from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple

from src.analytics.tiers import percent_change, share_of_total
from src.models.reports import BookingRecord, CategorySnapshot
from src.schemas.reports import CategoryPerformance, DataSource

CATEGORY_LABELS = {
    "national": "National",
    "international": "International",
    "group": "Group",
}

SYNTHETIC_CATEGORIES = (
    ("National", 18000.0, 12, 45.0, 8.5),
    ("International", 15000.0, 8, 37.5, 12.3),
    ("Group", 7000.0, 4, 17.5, -2.1),
)

CategoryTotals = Dict[str, Tuple[Decimal, int]]


def category_label(code: str) -> str:
    return CATEGORY_LABELS.get(code, code)


def _to_rows(current: CategoryTotals, previous: CategoryTotals, source: DataSource) -> List[CategoryPerformance]:
    total_revenue = sum((revenue for revenue, _ in current.values()), Decimal("0"))
    rows: List[CategoryPerformance] = []
    for code, (revenue, bookings) in current.items():
        previous_revenue = previous.get(code, (Decimal("0"), 0))[0]
        rows.append(
            CategoryPerformance(
                category=category_label(code),
                revenue=float(revenue),
                bookings=bookings,
                market_share=share_of_total(revenue, total_revenue),
                growth=percent_change(revenue, previous_revenue),
                source=source,
            )
        )
    return rows


def totals_from_snapshots(snapshots: Iterable[CategorySnapshot]) -> CategoryTotals:
    totals: CategoryTotals = {}
    for snapshot in snapshots:
        revenue, bookings = totals.get(snapshot.category, (Decimal("0"), 0))
        totals[snapshot.category] = (revenue + snapshot.total_revenue, bookings + snapshot.total_bookings)
    return totals


def totals_from_bookings(bookings: Iterable[BookingRecord]) -> CategoryTotals:
    revenue_by_category: Dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
    count_by_category: Dict[str, int] = defaultdict(int)
    for booking in bookings:
        if booking.trip is None or not booking.trip.category:
            continue
        revenue_by_category[booking.trip.category] += booking.trip.price
        count_by_category[booking.trip.category] += 1
    return {code: (revenue_by_category[code], count_by_category[code]) for code in revenue_by_category}


def categories_from_snapshots(
    current: Iterable[CategorySnapshot], previous: Iterable[CategorySnapshot]
) -> List[CategoryPerformance]:
    return _to_rows(totals_from_snapshots(current), totals_from_snapshots(previous), DataSource.SNAPSHOT)


def categories_from_bookings(
    current: Iterable[BookingRecord], previous: Iterable[BookingRecord]
) -> List[CategoryPerformance]:
    return _to_rows(totals_from_bookings(current), totals_from_bookings(previous), DataSource.ROLLUP)


def synthetic_categories() -> List[CategoryPerformance]:
    return [
        CategoryPerformance(
            category=category,
            revenue=revenue,
            bookings=bookings,
            market_share=market_share,
            growth=growth,
            source=DataSource.SYNTHETIC,
        )
        for category, revenue, bookings, market_share, growth in SYNTHETIC_CATEGORIES
    ]

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, List

from src.analytics.tiers import share_of_total
from src.models.reports import SourceSnapshot
from src.schemas.reports import DataSource, RevenueSource

SOURCE_LABELS = {
    "website": "Website",
    "referral": "Referral",
    "social_media": "Social Media",
    "direct": "Direct",
}

SYNTHETIC_SOURCES = (
    ("Website", 15000.0, 45.0, 12, 320.0),
    ("Referral", 8000.0, 25.0, 8, 280.0),
    ("Social Media", 6000.0, 18.0, 6, 150.0),
    ("Direct", 4000.0, 12.0, 4, 200.0),
)


def source_label(code: str) -> str:
    return SOURCE_LABELS.get(code, code)


def sources_from_snapshots(snapshots: Iterable[SourceSnapshot]) -> List[RevenueSource]:
    rows = list(snapshots)
    total_revenue = sum((row.revenue_amount for row in rows), Decimal("0"))
    return [
        RevenueSource(
            source=source_label(row.source_type),
            amount=float(row.revenue_amount),
            percentage=share_of_total(row.revenue_amount, total_revenue),
            bookings=row.booking_count,
            roi=float(row.roi),
            data_source=DataSource.SNAPSHOT,
        )
        for row in rows
    ]


def synthetic_sources() -> List[RevenueSource]:
    return [
        RevenueSource(
            source=source,
            amount=amount,
            percentage=percentage,
            bookings=bookings,
            roi=roi,
            data_source=DataSource.SYNTHETIC,
        )
        for source, amount, percentage, bookings, roi in SYNTHETIC_SOURCES
    ]

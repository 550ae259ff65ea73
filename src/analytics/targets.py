from __future__ import annotations

from typing import Iterable, List

from src.models.reports import RevenueTargetRecord
from src.schemas.reports import FinancialTarget


def to_financial_target(record: RevenueTargetRecord) -> FinancialTarget:
    # Achievement rate is maintained upstream and reported as stored.
    return FinancialTarget(
        id=record.id,
        target_type=record.target_type,
        target_period=record.target_period,
        revenue_target=float(record.revenue_target),
        bookings_target=record.bookings_target,
        leads_target=record.leads_target,
        conversion_target=float(record.conversion_target),
        actual_revenue=float(record.actual_revenue),
        actual_bookings=record.actual_bookings,
        actual_leads=record.actual_leads,
        actual_conversion=float(record.actual_conversion),
        achievement_rate=float(record.achievement_rate),
    )


def map_targets(records: Iterable[RevenueTargetRecord]) -> List[FinancialTarget]:
    return [to_financial_target(record) for record in records]

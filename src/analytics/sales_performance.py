from __future__ import annotations

from typing import Iterable, List

from src.analytics.tiers import safe_divide
from src.models.reports import SALES_ROLES, StaffRecord
from src.schemas.reports import SalesPerformance

BASE_LEADS = 150
LEADS_STEP = 30
OPPORTUNITY_PERCENT = 30
BASE_DEAL_SIZE = 2000
DEAL_SIZE_STEP = 500


def estimate_sales_performance(staff: Iterable[StaffRecord]) -> List[SalesPerformance]:
    """Estimate per-member pipeline figures from headcount and position.

    There is no per-activity tracking upstream yet, so every figure is a
    deterministic function of the member's index in the sales roster.
    """
    roster = [member for member in staff if member.role in SALES_ROLES]
    estimates: List[SalesPerformance] = []
    for index, member in enumerate(roster):
        leads = BASE_LEADS + index * LEADS_STEP
        opportunities = leads * OPPORTUNITY_PERCENT // 100
        revenue = opportunities * (BASE_DEAL_SIZE + index * DEAL_SIZE_STEP)
        estimates.append(
            SalesPerformance(
                name=member.display_name,
                leads=leads,
                opportunities=opportunities,
                revenue=float(revenue),
                conversion_rate=safe_divide(opportunities * 100, leads),
                average_deal_size=safe_divide(revenue, opportunities),
            )
        )
    return estimates

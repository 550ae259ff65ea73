from __future__ import annotations

from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import ConfigDict, Field

from src.shared.base import BaseSchema


class DataSource(str, Enum):
    SNAPSHOT = "snapshot"
    ROLLUP = "rollup"
    SYNTHETIC = "synthetic"


class RevenueMetrics(BaseSchema):
    total_revenue: float
    monthly_revenue: float
    revenue_growth: float
    average_booking_value: float
    total_bookings: int
    conversion_rate: float
    leads_generated: int
    sales_activities: int
    client_revenue: float


class RevenueHistoryPoint(BaseSchema):
    period_start: date
    year: int
    month: int
    label: str
    revenue: float
    bookings: int
    growth: float
    source: DataSource


class CategoryPerformance(BaseSchema):
    category: str
    revenue: float
    bookings: int
    market_share: float
    growth: float
    source: DataSource


class RevenueSource(BaseSchema):
    source: str
    amount: float
    percentage: float
    bookings: int
    roi: float
    data_source: DataSource


class SalesPerformance(BaseSchema):
    name: str
    leads: int
    opportunities: int
    revenue: float
    conversion_rate: float
    average_deal_size: float


class FinancialTarget(BaseSchema):
    id: str
    target_type: str
    target_period: str
    revenue_target: float
    bookings_target: int
    leads_target: int
    conversion_target: float
    actual_revenue: float
    actual_bookings: int
    actual_leads: int
    actual_conversion: float
    achievement_rate: float


class TopClient(BaseSchema):
    name: str
    value: float


class ClientRevenueSummary(BaseSchema):
    total_client_revenue: float = 0.0
    average_client_value: float = 0.0
    top_clients: List[TopClient] = Field(default_factory=list)


class ReportsResponse(BaseSchema):
    metrics: RevenueMetrics
    revenue_history: List[RevenueHistoryPoint]
    category_performance: List[CategoryPerformance]
    revenue_sources: List[RevenueSource]
    sales_performance: List[SalesPerformance]
    targets: List[FinancialTarget]
    client_revenue_data: ClientRevenueSummary

    @property
    def uses_synthetic_data(self) -> bool:
        return (
            any(point.source == DataSource.SYNTHETIC for point in self.revenue_history)
            or any(row.source == DataSource.SYNTHETIC for row in self.category_performance)
            or any(row.data_source == DataSource.SYNTHETIC for row in self.revenue_sources)
        )


class ReportFilters(BaseSchema):
    # Keep query parameter names in snake_case for API contract consistency.
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    as_of: Optional[date] = None
    display_currency: bool = False


class TargetListFilters(BaseSchema):
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=50, ge=1, le=500)


class RevenueTargetCreateRequest(BaseSchema):
    target_type: str = Field(pattern="^(monthly|quarterly|yearly)$")
    target_period: str = Field(min_length=1)
    revenue_target: float = Field(ge=0)
    bookings_target: int = Field(default=0, ge=0)
    leads_target: int = Field(default=0, ge=0)
    conversion_target: float = Field(default=0.0, ge=0)
    actual_revenue: float = Field(default=0.0, ge=0)
    actual_bookings: int = Field(default=0, ge=0)
    actual_leads: int = Field(default=0, ge=0)
    actual_conversion: float = Field(default=0.0, ge=0)


class RevenueTargetUpdateRequest(BaseSchema):
    revenue_target: Optional[float] = Field(default=None, ge=0)
    bookings_target: Optional[int] = Field(default=None, ge=0)
    leads_target: Optional[int] = Field(default=None, ge=0)
    conversion_target: Optional[float] = Field(default=None, ge=0)
    actual_revenue: Optional[float] = Field(default=None, ge=0)
    actual_bookings: Optional[int] = Field(default=None, ge=0)
    actual_leads: Optional[int] = Field(default=None, ge=0)
    actual_conversion: Optional[float] = Field(default=None, ge=0)

from __future__ import annotations

import os

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")

from datetime import date  # noqa: E402
from typing import List  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from src.api.dependencies import get_reports_service  # noqa: E402
from src.core.errors import NotFoundError  # noqa: E402
from src.main import create_app  # noqa: E402
from src.schemas.reports import (  # noqa: E402
    CategoryPerformance,
    ClientRevenueSummary,
    DataSource,
    FinancialTarget,
    ReportsResponse,
    RevenueHistoryPoint,
    RevenueMetrics,
    RevenueSource,
    RevenueTargetCreateRequest,
    RevenueTargetUpdateRequest,
    SalesPerformance,
    TopClient,
)
from src.shared.time import Period  # noqa: E402


class FakeReportsService:
    def _report(self) -> ReportsResponse:
        return ReportsResponse(
            metrics=self.get_metrics(date(2026, 10, 19)),
            revenue_history=self.get_revenue_history(date(2026, 10, 19)),
            category_performance=self.get_category_performance(date(2026, 10, 19)),
            revenue_sources=self.get_revenue_sources(date(2026, 10, 19)),
            sales_performance=self.get_sales_performance(),
            targets=self.get_targets(),
            client_revenue_data=self.get_client_revenue(),
        )

    def build_report(self, as_of: date) -> ReportsResponse:
        _ = as_of
        return self._report()

    def get_metrics(self, as_of: date) -> RevenueMetrics:
        _ = as_of
        return RevenueMetrics(
            total_revenue=120000.0,
            monthly_revenue=120000.0,
            revenue_growth=20.0,
            average_booking_value=4000.0,
            total_bookings=30,
            conversion_rate=50.0,
            leads_generated=60,
            sales_activities=90,
            client_revenue=400000.0,
        )

    def get_revenue_history(self, as_of: date) -> List[RevenueHistoryPoint]:
        period = Period.containing(as_of)
        return [
            RevenueHistoryPoint(
                period_start=period.shift(offset).start,
                year=period.shift(offset).year,
                month=period.shift(offset).month,
                label=period.shift(offset).label,
                revenue=40000.0,
                bookings=10,
                growth=0.0,
                source=DataSource.ROLLUP,
            )
            for offset in range(-11, 1)
        ]

    def get_category_performance(self, as_of: date) -> List[CategoryPerformance]:
        _ = as_of
        return [
            CategoryPerformance(
                category="National",
                revenue=80000.0,
                bookings=20,
                market_share=100.0,
                growth=0.0,
                source=DataSource.SNAPSHOT,
            )
        ]

    def get_revenue_sources(self, as_of: date) -> List[RevenueSource]:
        _ = as_of
        return [
            RevenueSource(
                source="Website",
                amount=15000.0,
                percentage=45.0,
                bookings=12,
                roi=320.0,
                data_source=DataSource.SYNTHETIC,
            )
        ]

    def get_sales_performance(self) -> List[SalesPerformance]:
        return [
            SalesPerformance(
                name="ana",
                leads=150,
                opportunities=45,
                revenue=90000.0,
                conversion_rate=30.0,
                average_deal_size=2000.0,
            )
        ]

    def get_targets(self) -> List[FinancialTarget]:
        return [
            FinancialTarget(
                id=f"target-{index}",
                target_type="monthly",
                target_period="2026-10",
                revenue_target=100000.0,
                bookings_target=40,
                leads_target=120,
                conversion_target=30.0,
                actual_revenue=80000.0,
                actual_bookings=32,
                actual_leads=100,
                actual_conversion=32.0,
                achievement_rate=80.0,
            )
            for index in range(3)
        ]

    def get_client_revenue(self) -> ClientRevenueSummary:
        return ClientRevenueSummary(
            total_client_revenue=400000.0,
            average_client_value=200000.0,
            top_clients=[TopClient(name="Acme", value=240000.0), TopClient(name="Globex", value=160000.0)],
        )

    def create_target(self, request: RevenueTargetCreateRequest) -> FinancialTarget:
        return self.get_targets()[0].model_copy(update={"id": "target-new", "target_period": request.target_period})

    def update_target(self, target_id: str, request: RevenueTargetUpdateRequest) -> FinancialTarget:
        if target_id != "target-0":
            raise NotFoundError("Revenue target not found")
        target = self.get_targets()[0]
        if request.actual_revenue is not None:
            target = target.model_copy(update={"actual_revenue": request.actual_revenue})
        return target


@pytest.fixture()
def client() -> TestClient:
    app = create_app()
    app.dependency_overrides[get_reports_service] = FakeReportsService
    return TestClient(app)

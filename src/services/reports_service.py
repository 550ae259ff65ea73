from __future__ import annotations

import logging
import random
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from src.analytics.categories import categories_from_bookings, categories_from_snapshots, synthetic_categories
from src.analytics.client_revenue import summarize_client_revenue
from src.analytics.history import history_from_payments, history_from_snapshots, synthetic_history
from src.analytics.metrics import calculate_revenue_metrics
from src.analytics.sales_performance import estimate_sales_performance
from src.analytics.sources import sources_from_snapshots, synthetic_sources
from src.analytics.targets import map_targets, to_financial_target
from src.analytics.tiers import TierLoader, TierResult, first_non_empty
from src.core.config import get_settings
from src.core.errors import NotFoundError, ReportUnavailableError
from src.models.reports import SALES_ROLES
from src.repositories.reports_repository import ReportsRepository
from src.schemas.reports import (
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
)
from src.shared.time import Period, current_and_previous_period

logger = logging.getLogger(__name__)


class ReportsService:
    """Builds the operations dashboard report from repository reads.

    Every section is computed from fresh reads; nothing is cached between
    calls. ``as_of`` anchors the current and previous periods.
    """

    def __init__(self, repository: ReportsRepository, rng: Optional[random.Random] = None) -> None:
        self.repository = repository
        self.settings = get_settings()
        self.rng = rng or random.Random(self.settings.report_synthetic_seed)

    def _select_tier(self, section: str, tiers: Sequence[Tuple[DataSource, TierLoader[Any]]]) -> TierResult[Any]:
        result = first_non_empty(tiers)
        if result.source == DataSource.SYNTHETIC:
            logger.info("Report section %s has no data; using synthetic example values", section)
        else:
            logger.debug("Report section %s built from %s tier", section, result.source.value)
        return result

    def get_metrics(self, as_of: date) -> RevenueMetrics:
        current, previous = current_and_previous_period(as_of)
        return calculate_revenue_metrics(
            current_payments=self.repository.list_paid_revenue(current),
            previous_payments=self.repository.list_paid_revenue(previous),
            total_bookings=self.repository.count_bookings_since(current.start),
            leads_generated=self.repository.count_clients_since(current.start),
            valued_clients=self.repository.list_clients_with_trip_value(),
        )

    def get_revenue_history(self, as_of: date) -> List[RevenueHistoryPoint]:
        months = self.settings.report_history_months
        end = Period.containing(as_of)
        result = self._select_tier(
            "revenue_history",
            [
                (
                    DataSource.SNAPSHOT,
                    lambda: history_from_snapshots(self.repository.list_monthly_snapshots(months), months),
                ),
                (
                    DataSource.ROLLUP,
                    lambda: history_from_payments(self.repository.list_paid_revenue(), months),
                ),
                (DataSource.SYNTHETIC, lambda: synthetic_history(end, self.rng, months)),
            ],
        )
        return result.data

    def get_category_performance(self, as_of: date) -> List[CategoryPerformance]:
        current, previous = current_and_previous_period(as_of)

        def from_snapshots() -> List[CategoryPerformance]:
            snapshots = self.repository.list_category_snapshots(current)
            if not snapshots:
                return []
            return categories_from_snapshots(snapshots, self.repository.list_category_snapshots(previous))

        def from_bookings() -> List[CategoryPerformance]:
            bookings = self.repository.list_bookings_since(current.start, current.next().start, include_trip=True)
            if not bookings:
                return []
            previous_bookings = self.repository.list_bookings_since(
                previous.start, current.start, include_trip=True
            )
            return categories_from_bookings(bookings, previous_bookings)

        result = self._select_tier(
            "category_performance",
            [
                (DataSource.SNAPSHOT, from_snapshots),
                (DataSource.ROLLUP, from_bookings),
                (DataSource.SYNTHETIC, synthetic_categories),
            ],
        )
        return result.data

    def get_revenue_sources(self, as_of: date) -> List[RevenueSource]:
        current = Period.containing(as_of)
        result = self._select_tier(
            "revenue_sources",
            [
                (
                    DataSource.SNAPSHOT,
                    lambda: sources_from_snapshots(self.repository.list_source_snapshots(current)),
                ),
                (DataSource.SYNTHETIC, synthetic_sources),
            ],
        )
        return result.data

    def get_sales_performance(self) -> List[SalesPerformance]:
        return estimate_sales_performance(self.repository.list_staff(SALES_ROLES))

    def get_targets(self) -> List[FinancialTarget]:
        return map_targets(self.repository.list_targets())

    def get_client_revenue(self) -> ClientRevenueSummary:
        return summarize_client_revenue(
            self.repository.list_clients_with_trip_value(),
            top_n=self.settings.report_top_clients,
        )

    def build_report(self, as_of: date) -> ReportsResponse:
        sections: Dict[str, Callable[[], Any]] = {
            "metrics": lambda: self.get_metrics(as_of),
            "revenue_history": lambda: self.get_revenue_history(as_of),
            "category_performance": lambda: self.get_category_performance(as_of),
            "revenue_sources": lambda: self.get_revenue_sources(as_of),
            "sales_performance": self.get_sales_performance,
            "targets": self.get_targets,
            "client_revenue_data": self.get_client_revenue,
        }
        results: Dict[str, Any] = {}
        with ThreadPoolExecutor(
            max_workers=self.settings.report_max_workers, thread_name_prefix="report"
        ) as executor:
            futures: Dict[str, Future] = {
                name: executor.submit(section) for name, section in sections.items()
            }
            for name, future in futures.items():
                try:
                    results[name] = future.result()
                except Exception as exc:
                    for pending in futures.values():
                        pending.cancel()
                    logger.exception("Report section %s failed; aborting report", name)
                    raise ReportUnavailableError(
                        f"Report section {name} could not be built", section=name
                    ) from exc
        return ReportsResponse(**results)

    def create_target(self, request: RevenueTargetCreateRequest) -> FinancialTarget:
        record = self.repository.create_target(request.model_dump())
        return to_financial_target(record)

    def update_target(self, target_id: str, request: RevenueTargetUpdateRequest) -> FinancialTarget:
        payload = request.model_dump(exclude_none=True)
        if not payload:
            record = self.repository.get_target(target_id)
        else:
            record = self.repository.update_target(target_id, payload)
        if record is None:
            raise NotFoundError("Revenue target not found")
        return to_financial_target(record)

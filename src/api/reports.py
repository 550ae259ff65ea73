from __future__ import annotations

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query

from src.analytics.currency import convert_client_revenue_to_display, convert_report_to_display
from src.api.dependencies import get_reports_service
from src.core.config import get_settings
from src.schemas.reports import (
    CategoryPerformance,
    ClientRevenueSummary,
    DataSource,
    FinancialTarget,
    ReportFilters,
    ReportsResponse,
    RevenueHistoryPoint,
    RevenueMetrics,
    RevenueSource,
    RevenueTargetCreateRequest,
    RevenueTargetUpdateRequest,
    SalesPerformance,
    TargetListFilters,
)
from src.services.reports_service import ReportsService
from src.shared.response import ResponseEnvelope, build_meta, paginate_list
from src.shared.time import Period


router = APIRouter(prefix="/reports", tags=["reports"])


def get_report_filters(
    as_of: date | None = Query(default=None, alias="as_of"),
    display_currency: bool = Query(default=False, alias="display_currency"),
) -> ReportFilters:
    return ReportFilters(as_of=as_of, display_currency=display_currency)


def get_target_list_filters(
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=50, ge=1, le=500),
) -> TargetListFilters:
    return TargetListFilters(page=page, page_size=page_size)


def _as_of(filters: ReportFilters) -> date:
    return filters.as_of or date.today()


def _time_window(as_of: date) -> str:
    return Period.containing(as_of).key()


def _base_currency() -> str:
    return get_settings().base_currency_code


@router.get("")
def reports_overview(
    filters: ReportFilters = Depends(get_report_filters),
    service: ReportsService = Depends(get_reports_service),
) -> ResponseEnvelope[ReportsResponse]:
    as_of = _as_of(filters)
    data = service.build_report(as_of)
    synthetic = data.uses_synthetic_data
    settings = get_settings()
    currency = settings.base_currency_code
    if filters.display_currency:
        data = convert_report_to_display(data, settings.display_currency_rate)
        currency = settings.display_currency_code
    meta = build_meta(
        as_of,
        source="bookings_revenue,bookings,clients,financial_metrics,category_performance,"
        "revenue_sources,users,revenue_targets",
        time_window=_time_window(as_of),
        currency=currency,
        synthetic=synthetic,
    )
    return ResponseEnvelope(data=data, meta=meta)


@router.get("/metrics")
def reports_metrics(
    filters: ReportFilters = Depends(get_report_filters),
    service: ReportsService = Depends(get_reports_service),
) -> ResponseEnvelope[RevenueMetrics]:
    as_of = _as_of(filters)
    data = service.get_metrics(as_of)
    meta = build_meta(
        as_of,
        source="bookings_revenue,bookings,clients",
        time_window=_time_window(as_of),
        currency=_base_currency(),
    )
    return ResponseEnvelope(data=data, meta=meta)


@router.get("/revenue-history")
def reports_revenue_history(
    filters: ReportFilters = Depends(get_report_filters),
    service: ReportsService = Depends(get_reports_service),
) -> ResponseEnvelope[List[RevenueHistoryPoint]]:
    as_of = _as_of(filters)
    data = service.get_revenue_history(as_of)
    meta = build_meta(
        as_of,
        source="financial_metrics,bookings_revenue",
        time_window=f"{len(data)}m",
        currency=_base_currency(),
        synthetic=any(point.source == DataSource.SYNTHETIC for point in data),
    )
    return ResponseEnvelope(data=data, meta=meta)


@router.get("/categories")
def reports_categories(
    filters: ReportFilters = Depends(get_report_filters),
    service: ReportsService = Depends(get_reports_service),
) -> ResponseEnvelope[List[CategoryPerformance]]:
    as_of = _as_of(filters)
    data = service.get_category_performance(as_of)
    meta = build_meta(
        as_of,
        source="category_performance,bookings,trips",
        time_window=_time_window(as_of),
        currency=_base_currency(),
        synthetic=any(row.source == DataSource.SYNTHETIC for row in data),
    )
    return ResponseEnvelope(data=data, meta=meta)


@router.get("/sources")
def reports_sources(
    filters: ReportFilters = Depends(get_report_filters),
    service: ReportsService = Depends(get_reports_service),
) -> ResponseEnvelope[List[RevenueSource]]:
    as_of = _as_of(filters)
    data = service.get_revenue_sources(as_of)
    meta = build_meta(
        as_of,
        source="revenue_sources",
        time_window=_time_window(as_of),
        currency=_base_currency(),
        synthetic=any(row.data_source == DataSource.SYNTHETIC for row in data),
    )
    return ResponseEnvelope(data=data, meta=meta)


@router.get("/sales-performance")
def reports_sales_performance(
    service: ReportsService = Depends(get_reports_service),
) -> ResponseEnvelope[List[SalesPerformance]]:
    data = service.get_sales_performance()
    meta = build_meta(date.today(), source="users", time_window="na", currency=_base_currency())
    return ResponseEnvelope(data=data, meta=meta)


@router.get("/client-revenue")
def reports_client_revenue(
    display_currency: bool = Query(default=False, alias="display_currency"),
    service: ReportsService = Depends(get_reports_service),
) -> ResponseEnvelope[ClientRevenueSummary]:
    data = service.get_client_revenue()
    settings = get_settings()
    currency = settings.base_currency_code
    if display_currency:
        data = convert_client_revenue_to_display(data, settings.display_currency_rate)
        currency = settings.display_currency_code
    meta = build_meta(date.today(), source="clients", time_window="all", currency=currency)
    return ResponseEnvelope(data=data, meta=meta)


@router.get("/targets")
def reports_targets(
    filters: TargetListFilters = Depends(get_target_list_filters),
    service: ReportsService = Depends(get_reports_service),
) -> ResponseEnvelope[List[FinancialTarget]]:
    data = service.get_targets()
    paged_data, pagination = paginate_list(data, filters.page, filters.page_size)
    meta = build_meta(date.today(), source="revenue_targets", time_window="all", currency=_base_currency())
    return ResponseEnvelope(data=paged_data, pagination=pagination, meta=meta)


@router.post("/targets", status_code=201)
def reports_create_target(
    request: RevenueTargetCreateRequest,
    service: ReportsService = Depends(get_reports_service),
) -> ResponseEnvelope[FinancialTarget]:
    data = service.create_target(request)
    meta = build_meta(date.today(), source="revenue_targets", time_window="na", currency=_base_currency())
    return ResponseEnvelope(data=data, meta=meta)


@router.patch("/targets/{target_id}")
def reports_update_target(
    target_id: str,
    request: RevenueTargetUpdateRequest,
    service: ReportsService = Depends(get_reports_service),
) -> ResponseEnvelope[FinancialTarget]:
    data = service.update_target(target_id, request)
    meta = build_meta(date.today(), source="revenue_targets", time_window="na", currency=_base_currency())
    return ResponseEnvelope(data=data, meta=meta)

from __future__ import annotations

from datetime import date
from decimal import Decimal

import httpx
import pytest

from src.core.errors import DataSourceError
from src.core.supabase import SupabaseClient
from src.repositories.reports_repository import PAGE_SIZE, ReportsRepository
from src.services.reports_service import ReportsService
from src.shared.time import Period


def build_client(handler) -> SupabaseClient:
    return SupabaseClient(http_client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_select_sends_filters_and_parses_count() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        seen["prefer"] = request.headers.get("prefer")
        return httpx.Response(200, json=[{"id": "1"}], headers={"content-range": "0-0/42"})

    rows, total = build_client(handler).select(
        "clients", "id", filters=[("trip_value", "gt.0")], limit=5, order="trip_value.desc", count=True
    )
    assert rows == [{"id": "1"}]
    assert total == 42
    assert seen["prefer"] == "count=exact"
    assert seen["url"].params["trip_value"] == "gt.0"
    assert seen["url"].params["order"] == "trip_value.desc"


def test_http_errors_raise_data_source_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"message": "boom"})

    with pytest.raises(DataSourceError) as exc_info:
        build_client(handler).select("bookings_revenue", "*")
    assert exc_info.value.table == "bookings_revenue"
    assert exc_info.value.status_code == 502


def test_transport_errors_raise_data_source_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(DataSourceError):
        build_client(handler).select("clients", "*")


def test_update_requires_filters() -> None:
    client = build_client(lambda request: httpx.Response(200, json=[]))
    with pytest.raises(ValueError):
        client.update("revenue_targets", {"actual_revenue": 1}, filters=[])


def test_repository_reads_paid_revenue_for_period() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = request.url.params
        return httpx.Response(
            200,
            json=[
                {
                    "amount": "1250.50",
                    "revenue_month": 10,
                    "revenue_year": 2026,
                    "payment_status": "paid",
                    "booking_id": "b1",
                    "created_at": "2026-10-02T10:00:00+00:00",
                }
            ],
        )

    repository = ReportsRepository(client=build_client(handler))
    records = repository.list_paid_revenue(Period(2026, 10))
    assert seen["params"]["payment_status"] == "eq.paid"
    assert seen["params"]["revenue_month"] == "eq.10"
    assert records[0].amount == Decimal("1250.50")
    assert records[0].booking_ref == "b1"


def test_repository_returns_snapshots_oldest_first() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["order"] == "metric_date.desc"
        return httpx.Response(
            200,
            json=[
                {"metric_date": "2026-10-01", "total_revenue": 300, "total_bookings": 3},
                {"metric_date": "2026-09-01", "total_revenue": 200, "total_bookings": 2},
            ],
        )

    snapshots = ReportsRepository(client=build_client(handler)).list_monthly_snapshots(12)
    assert [snapshot.metric_date for snapshot in snapshots] == [date(2026, 9, 1), date(2026, 10, 1)]


def test_repository_parses_embedded_trip() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert "trips!inner" in request.url.params["select"]
        return httpx.Response(
            200,
            json=[
                {
                    "id": "b1",
                    "created_at": "2026-10-05T12:00:00+00:00",
                    "trip": {"id": "t1", "category": "group", "price": "7000"},
                }
            ],
        )

    bookings = ReportsRepository(client=build_client(handler)).list_bookings_since(
        date(2026, 10, 1), date(2026, 11, 1), include_trip=True
    )
    assert bookings[0].trip is not None
    assert bookings[0].trip.category == "group"


def paged_handler(tables):
    """Serve each table's rows honouring ``limit`` and ``offset`` like PostgREST."""

    def handler(request: httpx.Request) -> httpx.Response:
        rows = tables.get(request.url.path.rsplit("/", 1)[-1], [])
        offset = int(request.url.params.get("offset", "0"))
        limit = int(request.url.params.get("limit", str(len(rows))))
        return httpx.Response(200, json=rows[offset : offset + limit])

    return handler


def test_repository_pages_through_all_paid_revenue() -> None:
    old_rows = [
        {"amount": "10", "revenue_month": index % 12 + 1, "revenue_year": 2024, "payment_status": "paid"}
        for index in range(PAGE_SIZE * 2 + 500)
    ]
    recent_rows = [
        {"amount": "100", "revenue_month": 9, "revenue_year": 2026, "payment_status": "paid"} for _ in range(10)
    ]
    repository = ReportsRepository(
        client=build_client(paged_handler({"bookings_revenue": old_rows + recent_rows}))
    )

    records = repository.list_paid_revenue()
    assert len(records) == len(old_rows) + len(recent_rows)

    history = ReportsService(repository=repository).get_revenue_history(date(2026, 10, 19))
    assert (history[-1].year, history[-1].month) == (2026, 9)
    assert history[-1].revenue == 1000.0
    assert history[-1].bookings == 10


def test_repository_pages_through_valued_clients() -> None:
    clients = [{"id": f"c{index}", "name": f"Client {index}", "trip_value": "1"} for index in range(PAGE_SIZE + 1)]
    repository = ReportsRepository(client=build_client(paged_handler({"clients": clients})))
    assert len(repository.list_clients_with_trip_value()) == PAGE_SIZE + 1


def test_repository_counts_use_exact_count_header() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["prefer"] = request.headers.get("prefer")
        seen["params"] = request.url.params
        return httpx.Response(200, json=[{"id": "b1"}], headers={"content-range": "0-0/7000"})

    repository = ReportsRepository(client=build_client(handler))
    assert repository.count_bookings_since(date(2026, 10, 1)) == 7000
    assert seen["prefer"] == "count=exact"
    assert seen["params"]["limit"] == "1"
    assert seen["params"]["created_at"] == "gte.2026-10-01"


def test_repository_count_without_total_raises() -> None:
    repository = ReportsRepository(client=build_client(lambda request: httpx.Response(200, json=[])))
    with pytest.raises(DataSourceError):
        repository.count_clients_since(date(2026, 10, 1))

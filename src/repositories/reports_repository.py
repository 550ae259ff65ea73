from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple

from src.core.errors import DataSourceError
from src.core.supabase import SupabaseClient
from src.models.reports import (
    PAID_STATUS,
    BookingRecord,
    CategorySnapshot,
    ClientRecord,
    MonthlyMetricSnapshot,
    RevenuePaymentRecord,
    RevenueTargetRecord,
    SourceSnapshot,
    StaffRecord,
)
from src.shared.time import Period

# Matches PostgREST max-rows on Supabase; a shorter page ends a scan.
PAGE_SIZE = 1000

BOOKING_WITH_TRIP_SELECT = "id,created_at,trip:trips!inner(id,category,price)"


class ReportsRepository:
    def __init__(self, client: Optional[SupabaseClient] = None) -> None:
        self.client = client or SupabaseClient()

    def list_paid_revenue(self, period: Optional[Period] = None) -> List[RevenuePaymentRecord]:
        filters: List[Tuple[str, str]] = [("payment_status", f"eq.{PAID_STATUS}")]
        if period is not None:
            filters.append(("revenue_month", f"eq.{period.month}"))
            filters.append(("revenue_year", f"eq.{period.year}"))
        rows = self._select_all(
            table="bookings_revenue",
            select="amount,revenue_month,revenue_year,payment_status,booking_id,created_at",
            filters=filters,
            order="created_at.asc,id.asc",
        )
        return [RevenuePaymentRecord.model_validate(row) for row in rows]

    def list_bookings_since(
        self,
        since: date,
        until: Optional[date] = None,
        include_trip: bool = False,
    ) -> List[BookingRecord]:
        rows = self._select_all(
            table="bookings",
            select=BOOKING_WITH_TRIP_SELECT if include_trip else "id,created_at",
            filters=self._created_filters(since, until),
            order="created_at.asc,id.asc",
        )
        return [BookingRecord.model_validate(row) for row in rows]

    def list_clients_since(self, since: date) -> List[ClientRecord]:
        rows = self._select_all(
            table="clients",
            select="id,name,created_at,trip_value",
            filters=self._created_filters(since),
            order="created_at.asc,id.asc",
        )
        return [ClientRecord.model_validate(row) for row in rows]

    def count_bookings_since(self, since: date) -> int:
        return self._count("bookings", self._created_filters(since))

    def count_clients_since(self, since: date) -> int:
        return self._count("clients", self._created_filters(since))

    def list_clients_with_trip_value(self) -> List[ClientRecord]:
        rows = self._select_all(
            table="clients",
            select="id,name,created_at,trip_value",
            filters=[("trip_value", "not.is.null"), ("trip_value", "gt.0")],
            order="trip_value.desc,id.asc",
        )
        return [ClientRecord.model_validate(row) for row in rows]

    def list_monthly_snapshots(self, limit: int) -> List[MonthlyMetricSnapshot]:
        """Latest ``limit`` monthly snapshots, returned oldest-first.

        The query runs newest-first so the limit drops the oldest months,
        never the current ones.
        """
        rows, _ = self.client.select(
            table="financial_metrics",
            select="metric_date,total_revenue,total_bookings",
            filters=[("metric_type", "eq.monthly")],
            limit=limit,
            order="metric_date.desc",
        )
        snapshots = [MonthlyMetricSnapshot.model_validate(row) for row in rows]
        return sorted(snapshots, key=lambda snapshot: snapshot.metric_date)

    def list_category_snapshots(self, period: Period) -> List[CategorySnapshot]:
        rows, _ = self.client.select(
            table="category_performance",
            select="month,year,category,total_revenue,total_bookings,market_share",
            filters=self._period_filters(period),
        )
        return [CategorySnapshot.model_validate(row) for row in rows]

    def list_source_snapshots(self, period: Period) -> List[SourceSnapshot]:
        rows, _ = self.client.select(
            table="revenue_sources",
            select="month,year,source_type,revenue_amount,booking_count,roi",
            filters=self._period_filters(period),
        )
        return [SourceSnapshot.model_validate(row) for row in rows]

    def list_staff(self, roles: Sequence[str]) -> List[StaffRecord]:
        if not roles:
            return []
        rows, _ = self.client.select(
            table="users",
            select="id,email,role",
            filters=[("role", f"in.({','.join(roles)})")],
            order="email.asc",
        )
        return [StaffRecord.model_validate(row) for row in rows]

    def list_targets(self) -> List[RevenueTargetRecord]:
        rows, _ = self.client.select(
            table="revenue_targets",
            select="*",
            order="created_at.desc",
        )
        return [RevenueTargetRecord.model_validate(row) for row in rows]

    def get_target(self, target_id: str) -> Optional[RevenueTargetRecord]:
        rows, _ = self.client.select(
            table="revenue_targets",
            select="*",
            filters=[("id", f"eq.{target_id}")],
            limit=1,
        )
        if not rows:
            return None
        return RevenueTargetRecord.model_validate(rows[0])

    def create_target(self, payload: Dict[str, Any]) -> RevenueTargetRecord:
        rows = self.client.insert("revenue_targets", payload)
        if not rows:
            raise DataSourceError("Revenue target insert returned no rows", table="revenue_targets")
        return RevenueTargetRecord.model_validate(rows[0])

    def update_target(self, target_id: str, payload: Dict[str, Any]) -> Optional[RevenueTargetRecord]:
        rows = self.client.update("revenue_targets", payload, filters=[("id", f"eq.{target_id}")])
        if not rows:
            return None
        return RevenueTargetRecord.model_validate(rows[0])

    @staticmethod
    def _period_filters(period: Period) -> List[Tuple[str, str]]:
        return [("month", f"eq.{period.month}"), ("year", f"eq.{period.year}")]

    @staticmethod
    def _created_filters(since: date, until: Optional[date] = None) -> List[Tuple[str, str]]:
        filters = [("created_at", f"gte.{since.isoformat()}")]
        if until is not None:
            filters.append(("created_at", f"lt.{until.isoformat()}"))
        return filters

    def _count(self, table: str, filters: List[Tuple[str, str]]) -> int:
        _, total = self.client.select(table=table, select="id", filters=filters, limit=1, count=True)
        if total is None:
            raise DataSourceError(f"Supabase did not return an exact count for {table}", table=table)
        return total

    def _select_all(
        self,
        table: str,
        select: str,
        filters: List[Tuple[str, str]],
        order: str,
    ) -> List[Dict[str, Any]]:
        rows: List[Dict[str, Any]] = []
        offset = 0
        while True:
            page, _ = self.client.select(
                table=table,
                select=select,
                filters=filters,
                limit=PAGE_SIZE,
                offset=offset,
                order=order,
            )
            rows.extend(page)
            if len(page) < PAGE_SIZE:
                return rows
            offset += PAGE_SIZE

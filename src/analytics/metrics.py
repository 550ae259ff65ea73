from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from src.analytics.tiers import percent_change, safe_divide
from src.models.reports import ClientRecord, RevenuePaymentRecord
from src.schemas.reports import RevenueMetrics


def sum_paid(payments: Iterable[RevenuePaymentRecord]) -> Decimal:
    return sum((payment.amount for payment in payments if payment.is_paid), Decimal("0"))


def sum_trip_values(clients: Iterable[ClientRecord]) -> Decimal:
    return sum(
        (client.trip_value for client in clients if client.trip_value and client.trip_value > 0),
        Decimal("0"),
    )


def calculate_revenue_metrics(
    current_payments: Iterable[RevenuePaymentRecord],
    previous_payments: Iterable[RevenuePaymentRecord],
    total_bookings: int,
    leads_generated: int,
    valued_clients: Iterable[ClientRecord],
) -> RevenueMetrics:
    total_revenue = float(sum_paid(current_payments))
    previous_revenue = float(sum_paid(previous_payments))
    return RevenueMetrics(
        total_revenue=total_revenue,
        monthly_revenue=total_revenue,
        revenue_growth=percent_change(total_revenue, previous_revenue),
        average_booking_value=safe_divide(total_revenue, total_bookings),
        total_bookings=total_bookings,
        conversion_rate=safe_divide(total_bookings * 100, leads_generated),
        leads_generated=leads_generated,
        sales_activities=total_bookings + leads_generated,
        client_revenue=float(sum_trip_values(valued_clients)),
    )

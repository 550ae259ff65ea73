from __future__ import annotations

from src.schemas.reports import ClientRevenueSummary, ReportsResponse

DEFAULT_DISPLAY_RATE = 40.0


def to_display_currency(base_amount: float, rate: float = DEFAULT_DISPLAY_RATE) -> float:
    """Convert an amount in agency currency to the display currency.

    ``rate`` is the number of base units per display unit. Aggregation
    always happens in base units; call this only when rendering.
    """
    if rate <= 0:
        raise ValueError("Display currency rate must be positive")
    return float(base_amount) / rate


def convert_client_revenue_to_display(
    summary: ClientRevenueSummary, rate: float = DEFAULT_DISPLAY_RATE
) -> ClientRevenueSummary:
    return summary.model_copy(
        update={
            "total_client_revenue": to_display_currency(summary.total_client_revenue, rate),
            "average_client_value": to_display_currency(summary.average_client_value, rate),
            "top_clients": [
                client.model_copy(update={"value": to_display_currency(client.value, rate)})
                for client in summary.top_clients
            ],
        }
    )


def convert_report_to_display(report: ReportsResponse, rate: float = DEFAULT_DISPLAY_RATE) -> ReportsResponse:
    def convert(amount: float) -> float:
        return to_display_currency(amount, rate)

    metrics = report.metrics.model_copy(
        update={
            "total_revenue": convert(report.metrics.total_revenue),
            "monthly_revenue": convert(report.metrics.monthly_revenue),
            "average_booking_value": convert(report.metrics.average_booking_value),
            "client_revenue": convert(report.metrics.client_revenue),
        }
    )
    history = [point.model_copy(update={"revenue": convert(point.revenue)}) for point in report.revenue_history]
    categories = [
        row.model_copy(update={"revenue": convert(row.revenue)}) for row in report.category_performance
    ]
    sources = [row.model_copy(update={"amount": convert(row.amount)}) for row in report.revenue_sources]
    sales = [
        row.model_copy(
            update={
                "revenue": convert(row.revenue),
                "average_deal_size": convert(row.average_deal_size),
            }
        )
        for row in report.sales_performance
    ]
    targets = [
        row.model_copy(
            update={
                "revenue_target": convert(row.revenue_target),
                "actual_revenue": convert(row.actual_revenue),
            }
        )
        for row in report.targets
    ]
    client_summary = convert_client_revenue_to_display(report.client_revenue_data, rate)
    return report.model_copy(
        update={
            "metrics": metrics,
            "revenue_history": history,
            "category_performance": categories,
            "revenue_sources": sources,
            "sales_performance": sales,
            "targets": targets,
            "client_revenue_data": client_summary,
        }
    )

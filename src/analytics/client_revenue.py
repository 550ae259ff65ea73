from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from src.models.reports import ClientRecord
from src.schemas.reports import ClientRevenueSummary, TopClient

TOP_CLIENTS = 5


def summarize_client_revenue(
    clients: Iterable[ClientRecord], top_n: int = TOP_CLIENTS
) -> ClientRevenueSummary:
    valued = [client for client in clients if client.trip_value is not None and client.trip_value > 0]
    if not valued:
        return ClientRevenueSummary()

    total = sum((client.trip_value for client in valued), Decimal("0"))
    ranked = sorted(valued, key=lambda client: client.trip_value, reverse=True)[:top_n]
    return ClientRevenueSummary(
        total_client_revenue=float(total),
        average_client_value=float(total / len(valued)),
        top_clients=[TopClient(name=client.name, value=float(client.trip_value)) for client in ranked],
    )

from __future__ import annotations

from functools import lru_cache

from src.repositories.reports_repository import ReportsRepository
from src.services.reports_service import ReportsService


@lru_cache
def get_reports_repository() -> ReportsRepository:
    return ReportsRepository()


def get_reports_service() -> ReportsService:
    return ReportsService(repository=get_reports_repository())

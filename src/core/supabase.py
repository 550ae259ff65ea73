from __future__ import annotations

import logging
from threading import Lock
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlencode

import httpx

from src.core.config import get_settings
from src.core.errors import DataSourceError

logger = logging.getLogger(__name__)


class SupabaseClient:
    """Minimal PostgREST client shared by every repository.

    The underlying ``httpx.Client`` is pooled and thread-safe, so report
    sections can read concurrently through one instance.
    """

    _shared_client: httpx.Client | None = None
    _client_lock: Lock = Lock()

    def __init__(self, http_client: Optional[httpx.Client] = None) -> None:
        settings = get_settings()
        self.base_url = settings.supabase_url.rstrip("/") + "/rest/v1"
        self.api_key = settings.supabase_service_role_key or settings.supabase_anon_key
        if not self.api_key:
            raise ValueError("Supabase API key is required")
        self._client = http_client or self._get_shared_client(settings.supabase_timeout_seconds)

    @classmethod
    def _get_shared_client(cls, timeout: float) -> httpx.Client:
        if cls._shared_client is not None:
            return cls._shared_client
        with cls._client_lock:
            if cls._shared_client is None:
                cls._shared_client = httpx.Client(
                    timeout=timeout,
                    limits=httpx.Limits(max_keepalive_connections=20, max_connections=100),
                )
        return cls._shared_client

    def _headers(self, prefer: Optional[str] = None, json_body: bool = False) -> Dict[str, str]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
        }
        if json_body:
            headers["Content-Type"] = "application/json"
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def _url(self, table: str, params: List[Tuple[str, str]]) -> str:
        url = f"{self.base_url}/{table}"
        if params:
            url = f"{url}?{urlencode(params, doseq=True)}"
        return url

    def _send(self, method: str, table: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Supabase %s %s failed with status %s", method, table, exc.response.status_code
            )
            raise DataSourceError(
                f"Supabase {method} on {table} failed with status {exc.response.status_code}",
                table=table,
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("Supabase %s %s failed: %s", method, table, exc)
            raise DataSourceError(f"Supabase {method} on {table} failed", table=table) from exc
        return response

    @staticmethod
    def _rows(response: httpx.Response) -> List[Dict[str, Any]]:
        if not response.content:
            return []
        data = response.json()
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            return [data]
        return []

    def select(
        self,
        table: str,
        select: str,
        filters: Optional[List[Tuple[str, str]]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        order: Optional[str] = None,
        count: bool = False,
    ) -> Tuple[List[Dict[str, Any]], Optional[int]]:
        params: List[Tuple[str, str]] = [("select", select)]
        if filters:
            params.extend(filters)
        if limit is not None:
            params.append(("limit", str(limit)))
        if offset is not None:
            params.append(("offset", str(offset)))
        if order:
            params.append(("order", order))

        headers = self._headers(prefer="count=exact" if count else None)
        response = self._send("GET", table, self._url(table, params), headers=headers)
        total_count = None
        content_range = response.headers.get("content-range")
        if count and content_range and "/" in content_range:
            total = content_range.split("/")[-1]
            total_count = int(total) if total.isdigit() else None
        return self._rows(response), total_count

    def insert(self, table: str, payload: Dict[str, Any] | List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        headers = self._headers(prefer="return=representation", json_body=True)
        response = self._send("POST", table, self._url(table, []), headers=headers, json=payload)
        return self._rows(response)

    def update(
        self,
        table: str,
        payload: Dict[str, Any],
        filters: List[Tuple[str, str]],
    ) -> List[Dict[str, Any]]:
        if not filters:
            raise ValueError("Refusing to update without filters")
        headers = self._headers(prefer="return=representation", json_body=True)
        response = self._send("PATCH", table, self._url(table, filters), headers=headers, json=payload)
        return self._rows(response)

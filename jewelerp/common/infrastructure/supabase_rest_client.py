# jewelerp/common/infrastructure/supabase_rest_client.py
"""Thin client for the Supabase (PostgREST) tables behind the storefront."""

import json
import logging
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from jewelerp.common.config.settings import settings
from jewelerp.common.exceptions.custom_exceptions import APIError

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30


def to_json_value(value: Any) -> Any:
    """Decimals travel as strings so PostgREST casts them to numeric without float rounding."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    return value


class SupabaseRestClient:
    def __init__(self, base_url: Optional[str] = None, api_key: Optional[str] = None) -> None:
        self.base_url = (base_url or settings.SUPABASE_URL or "").rstrip("/")
        self.api_key = api_key or settings.SUPABASE_KEY

        self.session = requests.Session()
        # Only reads are retried; a retried POST/PATCH could apply a write twice
        retry_strategy = Retry(
            total=3,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["HEAD", "GET", "OPTIONS"],
            backoff_factor=1,
        )
        adapter = HTTPAdapter(max_retries=retry_strategy, pool_connections=5, pool_maxsize=5)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    def _headers(self, prefer: Optional[str] = None) -> dict[str, str]:
        if not self.base_url or not self.api_key:
            raise APIError("SUPABASE_URL and SUPABASE_KEY must be set in environment variables.")
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def _url(self, table: str) -> str:
        return f"{self.base_url}/rest/v1/{table}"

    def _request(self, method: str, table: str, *, params=None, payload=None, prefer=None) -> Any:
        headers = self._headers(prefer)
        try:
            response = self.session.request(
                method,
                self._url(table),
                params=params,
                data=json.dumps(payload) if payload is not None else None,
                headers=headers,
                timeout=REQUEST_TIMEOUT,
            )
            response.raise_for_status()
        except requests.exceptions.Timeout as e:
            # A read timeout on a write leaves open whether the server committed it
            outcome_unknown = method != "GET" and not isinstance(e, requests.exceptions.ConnectTimeout)
            raise APIError(f"{method} {table} timed out", original_exception=e, outcome_unknown=outcome_unknown)
        except requests.exceptions.RequestException as e:
            status_code = e.response.status_code if e.response is not None else None
            raise APIError(
                f"{method} {table} failed: {e}",
                original_exception=e,
                status_code=status_code,
                outcome_unknown=method != "GET" and status_code is None,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except json.JSONDecodeError as e:
            raise APIError(
                f"Failed to decode response for {method} {table}: {e}",
                original_exception=e,
                outcome_unknown=method != "GET",
            )

    def select(self, table: str, filters: Optional[dict[str, Any]] = None, order: Optional[str] = None) -> list[dict]:
        """`filters` maps column -> value and is sent as PostgREST `eq.` filters."""
        params: dict[str, str] = {"select": "*"}
        for column, value in (filters or {}).items():
            params[column] = f"eq.{to_json_value(value)}"
        if order:
            params["order"] = order
        return self._request("GET", table, params=params) or []

    def insert(self, table: str, rows: list[dict[str, Any]]) -> list[dict]:
        """Inserts all rows in one request and returns them as stored."""
        payload = [{k: to_json_value(v) for k, v in row.items()} for row in rows]
        result = self._request("POST", table, payload=payload, prefer="return=representation")
        logger.debug(f"Inserted {len(rows)} row(s) into {table}")
        return result or []

    def update(self, table: str, row_id: int, values: dict[str, Any]) -> None:
        payload = {k: to_json_value(v) for k, v in values.items()}
        self._request("PATCH", table, params={"id": f"eq.{row_id}"}, payload=payload, prefer="return=minimal")

    def delete(self, table: str, row_id: int) -> None:
        self._request("DELETE", table, params={"id": f"eq.{row_id}"}, prefer="return=minimal")

    def __del__(self) -> None:
        """Clean up the session when the object is destroyed."""
        if hasattr(self, "session"):
            self.session.close()

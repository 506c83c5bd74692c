"""
Remote Table Store

Client for the hosted-table REST API. Speaks the PostgREST dialect:

    GET    /{table}?userId=eq.alice&order=createdAt.desc
    POST   /{table}                      (Prefer: return=representation)
    PATCH  /{table}?id=eq.42             (Prefer: return=representation)
    DELETE /{table}?id=eq.42

There is no retry and no version check; a failed call raises StoreError
and the caller decides what to tell the user.

Dependencies:
    - httpx (HTTP client)
"""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx

from focusflow.store.base import (
    Record,
    StoreError,
    TableStore,
    check_fields,
    check_table,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


def encode_filter_value(value: Any) -> str:
    """Encode a Python value as a PostgREST equality operand."""
    if value is None:
        return "is.null"
    if isinstance(value, bool):
        return f"eq.{'true' if value else 'false'}"
    return f"eq.{value}"


class RemoteTableStore(TableStore):
    """Table store backed by the hosted-table HTTP API."""

    def __init__(
        self,
        api_base: str,
        api_key: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        if not api_base:
            raise ValueError("api_base is required for the remote store")

        self._api_base = api_base.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.Client | None = None

    @classmethod
    def from_env(cls, api_base: str, api_key_env: str, timeout: float = DEFAULT_TIMEOUT) -> RemoteTableStore:
        api_key = os.getenv(api_key_env)
        if not api_key:
            logger.warning(f"{api_key_env} is not set; calling the table API without credentials")
        return cls(api_base=api_base, api_key=api_key, timeout=timeout)

    @property
    def name(self) -> str:
        return "remote"

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            headers = {"Content-Type": "application/json", "Accept": "application/json"}
            if self._api_key:
                headers["Authorization"] = f"Bearer {self._api_key}"
                headers["apikey"] = self._api_key
            self._client = httpx.Client(
                base_url=self._api_base,
                headers=headers,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    def _request(
        self,
        method: str,
        table: str,
        params: list[tuple[str, str]] | None = None,
        json: Any = None,
        returning: bool = False,
    ) -> Any:
        """Make API request with error handling."""
        client = self._get_client()
        headers = {"Prefer": "return=representation"} if returning else None

        try:
            response = client.request(method, f"/{table}", params=params, json=json, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Table API error: {method} {table} -> {e.response.status_code} {e.response.text}"
            )
            raise StoreError(
                f"Table API error: {e.response.status_code}", table=table, operation=method
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Table API request error: {method} {table}: {e}")
            raise StoreError(f"Table API request error: {e}", table=table, operation=method) from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise StoreError("Table API returned invalid JSON", table=table, operation=method) from e

    @staticmethod
    def _filter_params(filters: dict[str, Any]) -> list[tuple[str, str]]:
        return [(field, encode_filter_value(value)) for field, value in filters.items()]

    def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        ascending: bool = True,
    ) -> list[Record]:
        filters = filters or {}
        check_fields(table, filters)
        params = [("select", "*"), *self._filter_params(filters)]
        if order_by:
            check_fields(table, [order_by])
            params.append(("order", f"{order_by}.{'asc' if ascending else 'desc'}"))

        data = self._request("GET", table, params=params)
        return list(data or [])

    def insert(self, table: str, record: Record) -> Record:
        check_table(table)
        values = {k: v for k, v in record.items() if k != "id"}
        check_fields(table, values)

        data = self._request("POST", table, json=values, returning=True)
        rows = data if isinstance(data, list) else [data]
        if not rows or rows[0] is None:
            raise StoreError("Table API returned no inserted record", table=table, operation="POST")
        return rows[0]

    def update(self, table: str, values: Record, filters: dict[str, Any]) -> list[Record]:
        if not filters:
            raise StoreError("Refusing to update without filters", table=table, operation="PATCH")
        values = {k: v for k, v in values.items() if k != "id"}
        check_fields(table, values)
        check_fields(table, filters)

        data = self._request(
            "PATCH", table, params=self._filter_params(filters), json=values, returning=True
        )
        if data is None:
            return []
        return data if isinstance(data, list) else [data]

    def delete(self, table: str, filters: dict[str, Any]) -> None:
        if not filters:
            raise StoreError("Refusing to delete without filters", table=table, operation="DELETE")
        check_fields(table, filters)
        self._request("DELETE", table, params=self._filter_params(filters))

    def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            self._client.close()

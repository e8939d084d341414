"""
Supabase relational storage (PostgREST) client
Report and profile tables
"""

import logging
from typing import Optional, List, Dict, Any

import httpx

from pawtrack.backend.base import SupabaseClient, error_message
from pawtrack.core.exceptions import StoreError

logger = logging.getLogger(__name__)


class PostgrestTable(SupabaseClient):
    """One table exposed through /rest/v1."""

    def __init__(self, url: str, anon_key: str, table: str, **kwargs):
        super().__init__(url, anon_key, **kwargs)
        self.table = table

    @property
    def endpoint(self) -> str:
        return f"{self.url}/rest/v1/{self.table}"

    def insert(self, row: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Insert a single row.

        Returns:
            The stored row as echoed by the server, None if not echoed

        Raises:
            StoreError: request failed or was rejected
        """
        body = self._request(
            "POST",
            json=row,
            headers={"Prefer": "return=representation"},
        )

        if isinstance(body, list) and body:
            return body[0]
        return None

    def select(
        self,
        columns: str = "*",
        order: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Select all rows.

        Args:
            columns: PostgREST column list
            order: PostgREST order clause, e.g. "created_at.desc"
        """
        params = {"select": columns}
        if order:
            params["order"] = order

        body = self._request("GET", params=params)
        if not isinstance(body, list):
            raise StoreError(f"Unexpected response from {self.table}")
        return body

    def _request(
        self,
        method: str,
        params: Optional[Dict[str, str]] = None,
        json: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        try:
            response = self._client.request(
                method,
                self.endpoint,
                params=params,
                json=json,
                headers=self._headers(headers),
            )
        except httpx.HTTPError as e:
            raise StoreError(f"{self.table}: {e}") from e

        if response.is_error:
            raise StoreError(f"{self.table}: {error_message(response)}")

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise StoreError(f"{self.table}: invalid JSON response") from e


class ReportStore(PostgrestTable):
    """Stray report table."""

    def __init__(self, url: str, anon_key: str, table: str = "reports", **kwargs):
        super().__init__(url, anon_key, table, **kwargs)

    def list_all(
        self,
        order_by: str = "created_at",
        descending: bool = True,
    ) -> List[Dict[str, Any]]:
        """Every report row, ordered."""
        direction = "desc" if descending else "asc"
        rows = self.select("*", order=f"{order_by}.{direction}")
        logger.debug(f"Fetched {len(rows)} rows from {self.table}")
        return rows

    def list_statuses(self) -> List[str]:
        """Status column only."""
        return [row.get("status") for row in self.select("status")]


class ProfileStore(PostgrestTable):
    """User profile table, one row per account."""

    def __init__(self, url: str, anon_key: str, table: str = "profiles", **kwargs):
        super().__init__(url, anon_key, table, **kwargs)

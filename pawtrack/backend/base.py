"""
Shared HTTP plumbing for the hosted Supabase backend
"""

import logging
from typing import Callable, Optional, Dict

import httpx

logger = logging.getLogger(__name__)


class SupabaseClient:
    """
    Base client for one Supabase project.

    Every request carries the project's anon key. When a session provider
    is given and yields an access token, requests are made on behalf of
    that user so row-level security applies.
    """

    def __init__(
        self,
        url: str,
        anon_key: str,
        timeout: float = 30.0,
        session_provider: Optional[Callable[[], Optional[str]]] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        """
        Initialize client.

        Args:
            url: Project URL, e.g. https://xyz.supabase.co
            anon_key: Project anon (public) API key
            timeout: HTTP request timeout in seconds
            session_provider: Callable returning the current access token
            http_client: Preconfigured httpx client
        """
        if not url or not anon_key:
            raise ValueError("Supabase URL and anon key are required")

        self.url = url.rstrip("/")
        self.anon_key = anon_key
        self.timeout = timeout
        self.session_provider = session_provider
        self._client = http_client or httpx.Client(timeout=timeout)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def close(self) -> None:
        self._client.close()

    def _bearer(self) -> str:
        token = self.session_provider() if self.session_provider else None
        return token or self.anon_key

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {self._bearer()}",
        }
        if extra:
            headers.update(extra)
        return headers


def error_message(response: httpx.Response) -> str:
    """Pull the human-readable message out of a Supabase error response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"

    if isinstance(body, dict):
        for key in ("msg", "message", "error_description", "error"):
            if body.get(key):
                return str(body[key])

    return f"HTTP {response.status_code}"

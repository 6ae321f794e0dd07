"""
Async Graph API client with pagination and read-only safety enforcement.
Requests are issued one at a time; failures are raised, never retried.
"""

from __future__ import annotations

import logging
from typing import Any, AsyncGenerator, Optional

import httpx

from ..config import (
    GRAPH_BASE_URL,
    GRAPH_API_VERSION,
    DEFAULT_PAGE_SIZE,
    MAX_PAGES_PER_ENDPOINT,
    REQUEST_TIMEOUT_SECONDS,
    CONNECT_TIMEOUT_SECONDS,
)
from ..safety.guardian import SafetyGuardian

logger = logging.getLogger("mfa_status_report.graph")


class GraphAPIError(Exception):
    """Raised when Graph API returns an error or cannot be reached."""
    def __init__(self, status_code: int, message: str, url: str):
        self.status_code = status_code
        self.url = url
        super().__init__(f"Graph API Error {status_code} for {url}: {message}")


class GraphClient:
    """
    Async Microsoft Graph API client.
    Features:
      - Safety-validated requests (read-only enforcement)
      - Automatic pagination with @odata.nextLink
      - Sequential requests, no retry or backoff
    """

    def __init__(
        self,
        access_token: str,
        guardian: SafetyGuardian,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.access_token = access_token
        self.guardian = guardian
        self._transport = transport
        self._request_count = 0
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(REQUEST_TIMEOUT_SECONDS, connect=CONNECT_TIMEOUT_SECONDS),
            transport=self._transport,
            headers={
                "Authorization": f"Bearer {self.access_token}",
                "Accept": "application/json",
                "ConsistencyLevel": "eventual",  # Required for $count with $filter
            },
        )
        return self

    async def __aexit__(self, *args):
        if self._client:
            await self._client.aclose()
            self._client = None

    def _build_url(self, endpoint: str) -> str:
        """Build full Graph URL from relative endpoint."""
        if endpoint.startswith("http"):
            return endpoint
        return f"{GRAPH_BASE_URL}/{GRAPH_API_VERSION}/{endpoint.lstrip('/')}"

    async def get(self, endpoint: str, params: Optional[dict] = None) -> dict:
        """Execute a single GET request."""
        url = self._build_url(endpoint)
        self.guardian.validate_request("GET", url)
        return await self._execute(url, params=params)

    async def get_all_pages(
        self,
        endpoint: str,
        params: Optional[dict] = None,
        skip_top: bool = False,
    ) -> list[dict]:
        """
        Fetch all pages of a paginated endpoint into a list.
        Set skip_top=True for endpoints that don't support $top.
        """
        return [item async for item in self.get_all_pages_stream(endpoint, params, skip_top)]

    async def get_all_pages_stream(
        self,
        endpoint: str,
        params: Optional[dict] = None,
        skip_top: bool = False,
    ) -> AsyncGenerator[dict, None]:
        """Yield every item of a paginated endpoint, following @odata.nextLink."""
        params = dict(params or {})
        if not skip_top and "$top" not in params:
            params["$top"] = str(DEFAULT_PAGE_SIZE)

        url: Optional[str] = self._build_url(endpoint)
        pages = 0

        while url and pages < MAX_PAGES_PER_ENDPOINT:
            self.guardian.validate_request("GET", url)
            data = await self._execute(url, params=params)

            for item in data.get("value", []):
                yield item

            url = data.get("@odata.nextLink")
            params = None  # nextLink contains all params
            pages += 1

        if url:
            logger.warning(
                f"Pagination safety cap reached ({MAX_PAGES_PER_ENDPOINT} pages) "
                f"for endpoint: {endpoint}"
            )

    async def _execute(self, url: str, params: Optional[dict] = None) -> dict:
        """Execute a GET and decode the JSON body."""
        if not self._client:
            raise RuntimeError("GraphClient not initialized. Use 'async with' context.")

        try:
            response = await self._client.get(url, params=params)
        except httpx.HTTPError as e:
            raise GraphAPIError(0, f"{type(e).__name__}: {e}", url) from e

        self._request_count += 1
        logger.debug(f"GET {url} -> {response.status_code}")

        if response.status_code == 200:
            if not response.content or not response.content.strip():
                return {"value": []}
            try:
                return response.json()
            except ValueError as e:
                raise GraphAPIError(200, f"Non-JSON response body: {e}", url) from e

        if response.status_code == 204:
            return {}

        try:
            error_body = response.json() if response.content else {}
        except ValueError:
            error_body = {}
        if not isinstance(error_body, dict):
            error_body = {}
        error_msg = error_body.get("error", {}).get("message", response.text[:200])
        raise GraphAPIError(response.status_code, error_msg, url)

    def get_stats(self) -> dict:
        """Return client statistics."""
        return {"total_requests": self._request_count}

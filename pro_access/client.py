"""
HTTP client for the vendor subscription lookup endpoint.

GET {base_url}/api/vendors/{tenant_id}/subscription returns
{"subscription": {...}, "plan": {...}} or an empty body / 404 when the
tenant has never subscribed.
"""

import asyncio
import logging
import random
import time
from typing import Any, Dict, Optional

import httpx

from pro_access.config import MAX_RETRY_DELAY_SECONDS, GateSettings
from pro_access.errors import SubscriptionFetchError

logger = logging.getLogger(__name__)

_EMPTY_STATUSES = {204, 404}

# 10% random jitter on top of the exponential delay
_JITTER_FACTOR = 0.1


class SubscriptionClient:
    """
    Client for the subscription lookup endpoint.

    Handles:
    - Sync and async lookups over httpx
    - Bounded retries with exponential backoff on transport errors and 5xx responses
    - Mapping "no subscription" responses to None

    The underlying httpx clients are opened on first use. close() releases
    the sync client; aclose() releases both.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        settings: Optional[GateSettings] = None,
        transport: Optional[httpx.BaseTransport] = None,
        async_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize subscription client.

        Args:
            base_url: Backend base URL (from settings if not provided)
            token: Optional bearer token of the logged-in vendor
            settings: Gate settings for timeout and retry policy
            transport: Optional sync transport (tests use httpx.MockTransport)
            async_transport: Optional async transport
        """
        self.settings = settings or GateSettings()
        self.base_url = (base_url or self.settings.api_base_url).rstrip("/")
        self.max_attempts = self.settings.max_attempts

        self._headers = {"Accept": "application/json"}
        if token:
            self._headers["Authorization"] = f"Bearer {token}"

        self._transport = transport
        self._async_transport = async_transport
        self._client: Optional[httpx.Client] = None
        self._async_client: Optional[httpx.AsyncClient] = None

    @property
    def http(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                headers=self._headers,
                timeout=self.settings.timeout_seconds,
                transport=self._transport,
            )
        return self._client

    @property
    def async_http(self) -> httpx.AsyncClient:
        if self._async_client is None:
            self._async_client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._headers,
                timeout=self.settings.timeout_seconds,
                transport=self._async_transport,
            )
        return self._async_client

    @staticmethod
    def subscription_path(tenant_id: str) -> str:
        normalized = str(tenant_id).strip()
        if not normalized:
            raise ValueError("tenant_id is required")
        return f"/api/vendors/{normalized}/subscription"

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
        if self._async_client is not None and not self._async_client.is_closed:
            logger.warning("Async subscription client left open, use aclose()", extra={
                "base_url": self.base_url,
            })

    async def aclose(self) -> None:
        if self._client is not None:
            self._client.close()
        if self._async_client is not None:
            await self._async_client.aclose()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    def retry_delay(self, attempt: int) -> float:
        """
        Delay before the attempt after `attempt` (1-indexed).

        Exponential backoff with jitter, capped at MAX_RETRY_DELAY_SECONDS.
        """
        base_delay = self.settings.retry_delay_seconds * (2 ** (attempt - 1))
        jitter = random.uniform(0, base_delay * _JITTER_FACTOR)
        return min(base_delay + jitter, MAX_RETRY_DELAY_SECONDS)

    def fetch(self, tenant_id: str) -> Optional[Dict[str, Any]]:
        """
        Fetch the tenant's subscription payload.

        Returns:
            Parsed JSON payload, or None when the tenant has no subscription

        Raises:
            SubscriptionFetchError: after exhausting retries, or on a non-retryable status
        """
        path = self.subscription_path(tenant_id)
        last_error: Optional[SubscriptionFetchError] = None

        for attempt in range(1, self.max_attempts + 1):
            if attempt > 1:
                time.sleep(self.retry_delay(attempt - 1))
            try:
                response = self.http.get(path)
            except httpx.RequestError as e:
                last_error = self._request_failed(tenant_id, attempt, e)
                continue

            outcome = self._handle_response(tenant_id, attempt, response)
            if isinstance(outcome, SubscriptionFetchError):
                last_error = outcome
                continue
            return outcome

        assert last_error is not None
        raise last_error

    async def fetch_async(self, tenant_id: str) -> Optional[Dict[str, Any]]:
        """Async variant of fetch with the same retry policy."""
        path = self.subscription_path(tenant_id)
        last_error: Optional[SubscriptionFetchError] = None

        for attempt in range(1, self.max_attempts + 1):
            if attempt > 1:
                await asyncio.sleep(self.retry_delay(attempt - 1))
            try:
                response = await self.async_http.get(path)
            except httpx.RequestError as e:
                last_error = self._request_failed(tenant_id, attempt, e)
                continue

            outcome = self._handle_response(tenant_id, attempt, response)
            if isinstance(outcome, SubscriptionFetchError):
                last_error = outcome
                continue
            return outcome

        assert last_error is not None
        raise last_error

    def _request_failed(
        self, tenant_id: str, attempt: int, error: httpx.RequestError
    ) -> SubscriptionFetchError:
        logger.warning("Subscription lookup request error", extra={
            "tenant_id": tenant_id,
            "attempt": attempt,
            "max_attempts": self.max_attempts,
            "error": str(error),
        })
        return SubscriptionFetchError(tenant_id, f"Request failed: {error}", cause=error)

    def _handle_response(self, tenant_id: str, attempt: int, response: httpx.Response):
        """Return the payload, None, or a retryable SubscriptionFetchError."""
        status_code = response.status_code

        if status_code in _EMPTY_STATUSES:
            return None

        if status_code >= 500:
            logger.warning("Subscription lookup server error", extra={
                "tenant_id": tenant_id,
                "attempt": attempt,
                "status_code": status_code,
            })
            return SubscriptionFetchError(
                tenant_id, f"Subscription API error: {status_code}", status_code=status_code
            )

        if status_code >= 400:
            logger.error("Subscription lookup rejected", extra={
                "tenant_id": tenant_id,
                "status_code": status_code,
                "response": response.text[:500],
            })
            raise SubscriptionFetchError(
                tenant_id, f"Subscription API error: {status_code}", status_code=status_code
            )

        if not response.content:
            return None

        try:
            data = response.json()
        except ValueError as e:
            raise SubscriptionFetchError(
                tenant_id, "Malformed subscription response", status_code=status_code, cause=e
            ) from e

        if data is None:
            return None
        if not isinstance(data, dict):
            raise SubscriptionFetchError(
                tenant_id, "Subscription response must be an object", status_code=status_code
            )
        return data

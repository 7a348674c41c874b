"""
Subscription state store: the single owner of a tenant's subscription snapshot.

One store is constructed per logged-in tenant session and closed at logout.
The snapshot is always treated as stale: every mount/focus triggers a refetch.
Any failure to load resolves to "not entitled" (fail-closed).
"""

import logging
from typing import Optional

from pro_access.client import SubscriptionClient
from pro_access.config import GateSettings
from pro_access.errors import SubscriptionFetchError
from pro_access.models import SubscriptionPlan, SubscriptionRecord

logger = logging.getLogger(__name__)


class SubscriptionStateStore:
    """Holds the current SubscriptionRecord for one tenant."""

    def __init__(
        self,
        tenant_id: str,
        client: Optional[SubscriptionClient] = None,
        settings: Optional[GateSettings] = None,
    ) -> None:
        normalized = str(tenant_id or "").strip()
        if not normalized:
            raise ValueError("tenant_id is required")
        self._tenant_id = normalized
        self.settings = settings or GateSettings()
        self._owns_client = client is None
        self._client = client or SubscriptionClient(settings=self.settings)
        self._record: Optional[SubscriptionRecord] = None
        self._loaded = False
        self._closed = False
        self.last_error: Optional[Exception] = None

    @property
    def tenant_id(self) -> Optional[str]:
        return self._tenant_id

    @property
    def is_loading(self) -> bool:
        return not self._loaded and not self._closed

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def plan(self) -> Optional[SubscriptionPlan]:
        record = self.get_subscription()
        return record.plan if record else None

    def get_subscription(self, tenant_id: Optional[str] = None) -> Optional[SubscriptionRecord]:
        """Return the cached snapshot, or None if absent or for another tenant."""
        if self._closed:
            return None
        if tenant_id is not None and str(tenant_id).strip() != self._tenant_id:
            return None
        return self._record

    def is_entitled(self) -> bool:
        record = self.get_subscription()
        return bool(record and record.is_entitled)

    def is_free(self) -> bool:
        return not self.is_entitled()

    def refresh(self) -> Optional[SubscriptionRecord]:
        """Refetch the subscription. Never raises; failures clear the snapshot."""
        if self._closed:
            return None
        try:
            payload = self._client.fetch(self._tenant_id)
            record = self._parse(payload)
        except SubscriptionFetchError as e:
            return self._fail(e)
        except Exception as e:  # fail-closed on anything unexpected
            logger.exception("Unexpected subscription refresh failure", extra={
                "tenant_id": self._tenant_id,
            })
            return self._fail(e)
        return self._apply(record)

    async def refresh_async(self) -> Optional[SubscriptionRecord]:
        """Async variant of refresh for event-loop hosted sessions."""
        if self._closed:
            return None
        try:
            payload = await self._client.fetch_async(self._tenant_id)
            record = self._parse(payload)
        except SubscriptionFetchError as e:
            return self._fail(e)
        except Exception as e:  # fail-closed on anything unexpected
            logger.exception("Unexpected subscription refresh failure", extra={
                "tenant_id": self._tenant_id,
            })
            return self._fail(e)
        return self._apply(record)

    # the cache is always stale: mount and focus both refetch
    def on_mount(self) -> Optional[SubscriptionRecord]:
        return self.refresh()

    def on_focus(self) -> Optional[SubscriptionRecord]:
        return self.refresh()

    def close(self) -> None:
        """Tear down at logout. Further queries fail closed."""
        if self._shut_down():
            self._client.close()

    async def aclose(self) -> None:
        if self._shut_down():
            await self._client.aclose()

    def _shut_down(self) -> bool:
        """Mark the store closed. True when an owned client must be released."""
        if self._closed:
            return False
        self._closed = True
        self._record = None
        logger.info("Subscription store closed", extra={"tenant_id": self._tenant_id})
        return self._owns_client

    def _parse(self, payload) -> Optional[SubscriptionRecord]:
        record = SubscriptionRecord.from_payload(payload, tenant_id=self._tenant_id)
        if record is not None and record.tenant_id != self._tenant_id:
            logger.warning("Subscription response for a different tenant ignored", extra={
                "tenant_id": self._tenant_id,
                "response_tenant_id": record.tenant_id,
            })
            return None
        return record

    def _apply(self, record: Optional[SubscriptionRecord]) -> Optional[SubscriptionRecord]:
        was_entitled = self.is_entitled()
        self._record = record
        self._loaded = True
        self.last_error = None

        is_entitled = self.is_entitled()
        if was_entitled != is_entitled:
            logger.info("Subscription entitlement changed", extra={
                "tenant_id": self._tenant_id,
                "is_pro": is_entitled,
                "status": record.status if record else None,
                "payment_status": record.payment_status if record else None,
            })
        return record

    def _fail(self, error: Exception) -> None:
        logger.warning("Subscription unavailable, treating tenant as not entitled", extra={
            "tenant_id": self._tenant_id,
            "error": str(error),
            "error_code": getattr(error, "error_code", SubscriptionFetchError.error_code),
        })
        self._record = None
        self._loaded = True
        self.last_error = error
        return None


class UnavailableSubscriptionStore:
    """Safe default where no tenant session is established. Never entitled."""

    tenant_id = None
    is_loading = False
    is_closed = False
    plan = None
    last_error = None

    def get_subscription(self, tenant_id: Optional[str] = None) -> Optional[SubscriptionRecord]:
        return None

    def is_entitled(self) -> bool:
        return False

    def is_free(self) -> bool:
        return True

    def refresh(self) -> None:
        return None

    async def refresh_async(self) -> None:
        return None

    def on_mount(self) -> None:
        return None

    def on_focus(self) -> None:
        return None

    def close(self) -> None:
        return None

    async def aclose(self) -> None:
        return None


def resolve_store(store=None):
    """Return the given store, or the fail-closed default when there is none."""
    if store is None:
        return UnavailableSubscriptionStore()
    return store

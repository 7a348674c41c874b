"""
Fakes and payload builders shared by the Pro access tests.
"""

from pro_access.store import SubscriptionStateStore

TENANT_ID = "vendor-1"


def subscription_payload(
    status="active",
    payment_status="completed",
    tenant_id=TENANT_ID,
    plan_id="plan-pro",
):
    return {
        "subscription": {
            "id": "sub-1",
            "vendorId": tenant_id,
            "planId": plan_id,
            "status": status,
            "paymentStatus": payment_status,
            "startDate": "2024-01-01T00:00:00Z",
            "currentPeriodEnd": "2024-02-01T00:00:00Z",
        },
        "plan": {
            "id": plan_id,
            "name": "pro",
            "displayName": "Pro",
            "price": "399",
            "features": ["orders", "pos"],
        },
    }


class FakeSubscriptionClient:
    """Stands in for SubscriptionClient; returns or raises whatever is queued."""

    def __init__(self, payload=None, error=None):
        self.payload = payload
        self.error = error
        self.calls = 0
        self.closed = False

    def fetch(self, tenant_id):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.payload

    async def fetch_async(self, tenant_id):
        return self.fetch(tenant_id)

    def close(self):
        self.closed = True

    async def aclose(self):
        self.closed = True


def make_store(status="active", payment_status="completed", payload=..., error=None):
    """Build a store and load it once."""
    if payload is ...:
        payload = subscription_payload(status=status, payment_status=payment_status)
    client = FakeSubscriptionClient(payload=payload, error=error)
    store = SubscriptionStateStore(TENANT_ID, client=client)
    store.refresh()
    return store

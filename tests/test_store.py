"""
Subscription state store: snapshot parsing, fail-closed refresh,
entitlement transitions, tenant isolation and teardown.
"""

from datetime import datetime, timezone

import pytest

from pro_access.errors import SubscriptionFetchError
from pro_access.models import SubscriptionRecord
from pro_access.policy import ActionPolicyEvaluator
from pro_access.store import SubscriptionStateStore, UnavailableSubscriptionStore, resolve_store

from tests.fakes import TENANT_ID, FakeSubscriptionClient, subscription_payload


def test_record_from_payload_parses_camel_case():
    record = SubscriptionRecord.from_payload(subscription_payload())

    assert record.tenant_id == TENANT_ID
    assert record.plan_id == "plan-pro"
    assert record.status == "active"
    assert record.payment_status == "completed"
    assert record.current_period_end == datetime(2024, 2, 1, tzinfo=timezone.utc)
    assert record.plan.display_name == "Pro"
    assert record.plan.features == ("orders", "pos")


def test_record_from_empty_payload_is_none():
    assert SubscriptionRecord.from_payload(None) is None
    assert SubscriptionRecord.from_payload({}) is None
    assert SubscriptionRecord.from_payload({"subscription": None, "plan": {"id": "x"}}) is None


def test_record_requires_tenant_id():
    with pytest.raises(ValueError, match="tenant_id is required"):
        SubscriptionRecord(tenant_id="   ", plan_id="p", status="active", payment_status="completed")


def test_store_requires_tenant_id():
    with pytest.raises(ValueError, match="tenant_id is required"):
        SubscriptionStateStore("", client=FakeSubscriptionClient())


def test_store_is_loading_and_not_entitled_before_first_fetch():
    store = SubscriptionStateStore(TENANT_ID, client=FakeSubscriptionClient(subscription_payload()))

    assert store.is_loading is True
    assert store.is_entitled() is False

    store.on_mount()
    assert store.is_loading is False
    assert store.is_entitled() is True


def test_fetch_error_is_swallowed_and_fails_closed():
    client = FakeSubscriptionClient(subscription_payload())
    store = SubscriptionStateStore(TENANT_ID, client=client)
    store.refresh()
    assert store.is_entitled() is True

    client.error = SubscriptionFetchError(TENANT_ID, "gateway down", status_code=502)
    assert store.refresh() is None

    assert store.is_entitled() is False
    assert store.get_subscription() is None
    assert isinstance(store.last_error, SubscriptionFetchError)


def test_unexpected_error_fails_closed():
    client = FakeSubscriptionClient(error=RuntimeError("boom"))
    store = SubscriptionStateStore(TENANT_ID, client=client)

    store.refresh()

    assert store.is_entitled() is False
    assert isinstance(store.last_error, RuntimeError)


def test_unreadable_period_end_does_not_affect_entitlement():
    payload = subscription_payload()
    payload["subscription"]["currentPeriodEnd"] = "not-a-date"
    store = SubscriptionStateStore(TENANT_ID, client=FakeSubscriptionClient(payload))

    store.refresh()

    assert store.is_entitled() is True
    assert store.get_subscription().current_period_end is None


@pytest.mark.parametrize("raw, microsecond", [
    ("2024-02-01T00:00:00.1234567Z", 123456),
    ("2024-02-01T00:00:00.5Z", 500000),
    ("2024-02-01T00:00:00.12+05:30", 120000),
])
def test_period_end_accepts_any_fraction_length(raw, microsecond):
    payload = subscription_payload()
    payload["subscription"]["currentPeriodEnd"] = raw
    store = SubscriptionStateStore(TENANT_ID, client=FakeSubscriptionClient(payload))

    store.refresh()

    period_end = store.get_subscription().current_period_end
    assert store.is_entitled() is True
    assert period_end.microsecond == microsecond
    assert period_end.tzinfo is not None


def test_focus_always_refetches():
    client = FakeSubscriptionClient(subscription_payload())
    store = SubscriptionStateStore(TENANT_ID, client=client)

    store.on_mount()
    store.on_focus()
    store.on_focus()

    assert client.calls == 3


def test_entitlement_flips_after_refresh():
    """Payment completes between two evaluations separated by a refresh."""
    client = FakeSubscriptionClient(subscription_payload("active", "pending"))
    store = SubscriptionStateStore(TENANT_ID, client=client)
    evaluator = ActionPolicyEvaluator(store)
    store.refresh()

    assert evaluator.evaluate("save").allowed is False

    client.payload = subscription_payload("active", "completed")
    # no propagation until the cache is refreshed
    assert evaluator.evaluate("save").allowed is False

    store.on_focus()
    assert evaluator.evaluate("save").allowed is True


def test_response_for_other_tenant_is_ignored():
    payload = subscription_payload(tenant_id="vendor-2")
    store = SubscriptionStateStore(TENANT_ID, client=FakeSubscriptionClient(payload))

    store.refresh()

    assert store.get_subscription() is None
    assert store.is_entitled() is False


def test_get_subscription_for_other_tenant_is_none(pro_store):
    assert pro_store.get_subscription(TENANT_ID) is not None
    assert pro_store.get_subscription("vendor-2") is None


def test_close_fails_closed_and_keeps_injected_client_open():
    client = FakeSubscriptionClient(subscription_payload())
    store = SubscriptionStateStore(TENANT_ID, client=client)
    store.refresh()

    store.close()
    store.close()

    assert store.is_entitled() is False
    assert store.refresh() is None
    assert client.calls == 1
    assert client.closed is False


def test_unavailable_store_is_never_entitled():
    store = resolve_store(None)

    assert isinstance(store, UnavailableSubscriptionStore)
    assert store.tenant_id is None
    assert store.is_entitled() is False
    assert store.is_free() is True
    assert store.refresh() is None
    assert store.get_subscription("vendor-1") is None


def test_resolve_store_passes_through(pro_store):
    assert resolve_store(pro_store) is pro_store


@pytest.mark.asyncio
async def test_refresh_async_loads_snapshot():
    store = SubscriptionStateStore(TENANT_ID, client=FakeSubscriptionClient(subscription_payload()))

    record = await store.refresh_async()

    assert record is not None
    assert store.is_entitled() is True


@pytest.mark.asyncio
async def test_refresh_async_fails_closed():
    error = SubscriptionFetchError(TENANT_ID, "timeout")
    store = SubscriptionStateStore(TENANT_ID, client=FakeSubscriptionClient(error=error))

    assert await store.refresh_async() is None
    assert store.is_entitled() is False

"""
Action policy: entitlement invariant, fail-closed behaviour, messages,
module access.
"""

import pytest

from pro_access.actions import ActionKind, PlatformModule, action_label, coerce_action
from pro_access.errors import UnknownActionError
from pro_access.models import ActionDecision, SubscriptionRecord
from pro_access.policy import ActionPolicyEvaluator, get_action_restricted_message

from tests.fakes import TENANT_ID, make_store

GENERIC_MESSAGE = "Upgrade to Pro to save, publish, or download this feature."

STATUSES = ["active", "cancelled", "expired", "pending", "", "ACTIVE", "unknown"]
PAYMENT_STATUSES = ["completed", "pending", "failed", "", "refunded"]


# ----- Entitlement invariant -----

@pytest.mark.parametrize("status", STATUSES)
@pytest.mark.parametrize("payment_status", PAYMENT_STATUSES)
def test_entitled_iff_active_and_completed(status, payment_status):
    record = SubscriptionRecord(
        tenant_id=TENANT_ID,
        plan_id="plan-pro",
        status=status,
        payment_status=payment_status,
    )
    expected = status.lower() == "active" and payment_status == "completed"
    assert record.is_entitled is expected


def test_active_with_pending_payment_is_not_entitled():
    store = make_store("active", "pending")
    assert store.is_entitled() is False
    assert ActionPolicyEvaluator(store).is_pro is False


# ----- Fail-closed -----

def test_no_subscription_denies_everything(free_store):
    evaluator = ActionPolicyEvaluator(free_store)
    assert free_store.is_entitled() is False
    for kind in ActionKind:
        assert evaluator.evaluate(kind).allowed is False
    assert evaluator.evaluate().allowed is False


def test_fetch_error_denies_everything(failing_store):
    evaluator = ActionPolicyEvaluator(failing_store)
    assert evaluator.evaluate(ActionKind.SAVE).allowed is False


def test_no_store_denies_with_generic_messages():
    evaluator = ActionPolicyEvaluator(None)
    decision = evaluator.evaluate()
    assert decision == ActionDecision(False, GENERIC_MESSAGE, True)
    assert evaluator.evaluate("publish").message == "Upgrade to Pro to publish this feature."


# ----- Entitled tenants -----

def test_pro_tenant_faces_no_restriction(pro_store):
    evaluator = ActionPolicyEvaluator(pro_store)
    for kind in ActionKind:
        decision = evaluator.evaluate(kind)
        assert decision.allowed is True
        assert decision.show_upgrade_prompt is False
        assert decision.message == ""
    assert evaluator.evaluate() == ActionDecision.allow()


# ----- Messages -----

def test_message_for_publish(free_store):
    decision = ActionPolicyEvaluator(free_store).can_perform_action("publish")
    assert decision.message == "Upgrade to Pro to publish this feature."


def test_message_without_action(free_store):
    assert ActionPolicyEvaluator(free_store).evaluate(None).message == GENERIC_MESSAGE


@pytest.mark.parametrize("kind", list(ActionKind))
def test_every_action_kind_has_a_message(kind):
    assert get_action_restricted_message(kind) == f"Upgrade to Pro to {kind.value} this feature."
    assert action_label(kind) == kind.value


def test_export_scenario_with_pending_payment():
    store = make_store("active", "pending")
    decision = ActionPolicyEvaluator(store).evaluate(ActionKind.EXPORT)
    assert decision == ActionDecision(
        allowed=False,
        message="Upgrade to Pro to export this feature.",
        show_upgrade_prompt=True,
    )


def test_unknown_action_string_rejected(free_store):
    with pytest.raises(UnknownActionError):
        ActionPolicyEvaluator(free_store).evaluate("archive")


def test_coerce_action_normalizes_strings():
    assert coerce_action(" Publish ") is ActionKind.PUBLISH
    assert coerce_action("") is None
    assert coerce_action(None) is None


# ----- Idempotence -----

def test_repeated_evaluation_is_identical(free_store):
    evaluator = ActionPolicyEvaluator(free_store)
    first = evaluator.evaluate(ActionKind.DELETE)
    assert all(evaluator.evaluate(ActionKind.DELETE) == first for _ in range(5))
    assert free_store._client.calls == 1


# ----- Module access -----

def test_free_tenant_module_access(free_store):
    evaluator = ActionPolicyEvaluator(free_store)
    assert evaluator.can_access("customers") is True
    assert evaluator.can_access("Additional-Services") is True
    assert evaluator.can_access(PlatformModule.POS) is False
    assert evaluator.get_restricted_message("pos") == "Upgrade to Pro to access Point of Sale"
    assert evaluator.get_restricted_message("widgets") == "Upgrade to Pro to access widgets"


def test_pro_tenant_accesses_every_module(pro_store):
    evaluator = ActionPolicyEvaluator(pro_store)
    assert all(evaluator.can_access(m) for m in PlatformModule)


def test_module_access_summary(free_store):
    access = ActionPolicyEvaluator(free_store).module_access("analytics")
    assert access.has_access is False
    assert access.is_free is True
    assert access.message == "Upgrade to Pro to access Analytics & Reports"

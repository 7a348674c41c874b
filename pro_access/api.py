"""
Read-only Pro access endpoints. Report what the gate would decide for the
current tenant. This is for UX only: it does not enforce anything.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status

from pro_access.actions import ActionKind, coerce_action
from pro_access.errors import UnknownActionError
from pro_access.models import ActionDecision
from pro_access.policy import ActionPolicyEvaluator
from pro_access.prompt import build_upgrade_prompt
from pro_access.schemas import ActionDecisionResponse, ProAccessResponse, UpgradePromptResponse
from pro_access.store import resolve_store

router = APIRouter(prefix="/pro-access", tags=["pro-access"])


def _tenant_id(request: Request) -> str:
    if hasattr(request.state, "tenant_id") and request.state.tenant_id:
        return request.state.tenant_id
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Missing tenant context")


def get_subscription_store(request: Request):
    """
    Store for the current request.

    Applications attach a per-session store to request.state (or override
    this dependency). The snapshot is refetched on every request.
    """
    tenant_id = _tenant_id(request)
    store = resolve_store(getattr(request.state, "subscription_store", None))
    if store.tenant_id is not None and store.tenant_id != tenant_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Tenant mismatch")
    store.on_mount()
    return store


def _decision_response(action: Optional[ActionKind], decision: ActionDecision) -> ActionDecisionResponse:
    return ActionDecisionResponse(
        action=action.value if action else None,
        allowed=decision.allowed,
        message=decision.message,
        show_upgrade_prompt=decision.show_upgrade_prompt,
    )


def _coerce_or_422(action: Optional[str]) -> Optional[ActionKind]:
    try:
        return coerce_action(action)
    except UnknownActionError as e:
        raise HTTPException(status_code=422, detail=e.to_dict())


@router.get("", response_model=ProAccessResponse)
def get_pro_access(request: Request, store=Depends(get_subscription_store)) -> ProAccessResponse:
    """Return entitlement and the decision for every action kind."""
    tenant_id = _tenant_id(request)
    evaluator = ActionPolicyEvaluator(store)
    record = store.get_subscription()

    return ProAccessResponse(
        tenant_id=tenant_id,
        is_pro=evaluator.is_pro,
        is_free=evaluator.is_free,
        status=record.status if record else None,
        payment_status=record.payment_status if record else None,
        plan_id=record.plan_id if record else None,
        current_period_end=record.current_period_end if record else None,
        actions={
            kind.value: _decision_response(kind, evaluator.evaluate(kind))
            for kind in ActionKind
        },
    )


@router.get("/actions/{action}", response_model=ActionDecisionResponse)
def get_action_decision(action: str, store=Depends(get_subscription_store)) -> ActionDecisionResponse:
    kind = _coerce_or_422(action)
    return _decision_response(kind, ActionPolicyEvaluator(store).evaluate(kind))


@router.get("/upgrade-prompt", response_model=UpgradePromptResponse)
def get_upgrade_prompt(action: Optional[str] = None) -> UpgradePromptResponse:
    """Prompt content; does not consult entitlement."""
    view = build_upgrade_prompt(_coerce_or_422(action))
    return UpgradePromptResponse(
        action=view.action,
        title=view.title,
        headline=view.headline,
        benefits=list(view.benefits),
        offer_label=view.offer_label,
        price_label=view.price_label,
        upgrade_label=view.upgrade_label,
        dismiss_label=view.dismiss_label,
        upgrade_route=view.upgrade_route,
    )

"""
Pro subscription action gate for Vyora vendors.

This module provides:
- SubscriptionStateStore: per-tenant subscription snapshot, fail-closed
- SubscriptionClient: httpx client for the subscription lookup endpoint
- ActionPolicyEvaluator: the single allow/deny rule for gated actions
- ProActionGuard / ProActionButton / ProActionGuardHook: guard surfaces
- build_upgrade_prompt: upgrade prompt presentation
- router: read-only FastAPI endpoints (see pro_access.api)

Pro means subscription status "active" AND payment status "completed".
"""

from pro_access.actions import (
    ActionKind,
    PlatformModule,
    FREE_MODULES,
    PRO_MODULES,
    action_label,
    coerce_action,
)
from pro_access.client import SubscriptionClient
from pro_access.config import GateSettings
from pro_access.errors import ProAccessError, SubscriptionFetchError, UnknownActionError
from pro_access.guards import (
    Interaction,
    ProActionButton,
    ProActionGuard,
    ProActionGuardHook,
    use_pro_action_guard,
)
from pro_access.models import (
    ActionDecision,
    GuardResult,
    GuardSession,
    ModuleAccess,
    PaymentStatus,
    SubscriptionPlan,
    SubscriptionRecord,
    SubscriptionStatus,
)
from pro_access.policy import (
    ActionPolicyEvaluator,
    get_action_restricted_message,
    get_restricted_message,
)
from pro_access.prompt import UpgradePromptView, build_upgrade_prompt, render_text
from pro_access.store import SubscriptionStateStore, UnavailableSubscriptionStore, resolve_store

__all__ = [
    # Actions
    "ActionKind",
    "PlatformModule",
    "FREE_MODULES",
    "PRO_MODULES",
    "action_label",
    "coerce_action",
    # Client / config
    "SubscriptionClient",
    "GateSettings",
    # Errors
    "ProAccessError",
    "SubscriptionFetchError",
    "UnknownActionError",
    # Guards
    "Interaction",
    "ProActionButton",
    "ProActionGuard",
    "ProActionGuardHook",
    "use_pro_action_guard",
    # Models
    "ActionDecision",
    "GuardResult",
    "GuardSession",
    "ModuleAccess",
    "PaymentStatus",
    "SubscriptionPlan",
    "SubscriptionRecord",
    "SubscriptionStatus",
    # Policy
    "ActionPolicyEvaluator",
    "get_action_restricted_message",
    "get_restricted_message",
    # Prompt
    "UpgradePromptView",
    "build_upgrade_prompt",
    "render_text",
    # Store
    "SubscriptionStateStore",
    "UnavailableSubscriptionStore",
    "resolve_store",
]

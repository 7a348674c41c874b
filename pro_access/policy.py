"""
Pro action policy evaluation.

The one place where allow/deny for gated actions is decided. Every guard
surface calls into ActionPolicyEvaluator; none of them re-implements the rule.
"""

from typing import Union

from pro_access.actions import (
    ActionLike,
    PlatformModule,
    action_label,
    is_free_module,
    module_display_name,
)
from pro_access.models import ActionDecision, ModuleAccess
from pro_access.store import resolve_store


def get_action_restricted_message(action: ActionLike = None) -> str:
    """
    Denial message for an action.

    Args:
        action: ActionKind, its string value, or None for the generic message

    Returns:
        "Upgrade to Pro to {verb} this feature."
    """
    return f"Upgrade to Pro to {action_label(action)} this feature."


def get_restricted_message(module: Union[PlatformModule, str]) -> str:
    """Denial message for a Pro-only module."""
    return f"Upgrade to Pro to access {module_display_name(module)}"


class ActionPolicyEvaluator:
    """
    Decides whether the tenant may perform a gated action.

    Reads only the store's current snapshot and performs no I/O, so repeated
    evaluations with an unchanged snapshot return equal decisions.
    """

    def __init__(self, store=None):
        """
        Initialize evaluator.

        Args:
            store: SubscriptionStateStore, or None outside a tenant session
                   (everything is then denied)
        """
        self.store = resolve_store(store)

    @property
    def is_pro(self) -> bool:
        return self.store.is_entitled()

    @property
    def is_free(self) -> bool:
        return not self.is_pro

    def evaluate(self, action: ActionLike = None) -> ActionDecision:
        """
        Evaluate a gated action against the current entitlement snapshot.

        Pro tenants face no restriction regardless of action kind. Everyone
        else can view but not save/create/update/publish/download/export/...

        Raises:
            UnknownActionError: if action is a string outside ActionKind
        """
        message = get_action_restricted_message(action)
        if self.is_pro:
            return ActionDecision.allow()
        return ActionDecision.deny(message)

    can_perform_action = evaluate

    def would_allow(self, action: ActionLike = None) -> bool:
        return self.evaluate(action).allowed

    def get_action_restricted_message(self, action: ActionLike = None) -> str:
        return get_action_restricted_message(action)

    def can_access(self, module: Union[PlatformModule, str]) -> bool:
        if self.is_pro:
            return True
        return is_free_module(module)

    def get_restricted_message(self, module: Union[PlatformModule, str]) -> str:
        return get_restricted_message(module)

    def module_access(self, module: Union[PlatformModule, str]) -> ModuleAccess:
        is_pro = self.is_pro
        return ModuleAccess(
            has_access=self.can_access(module),
            is_pro=is_pro,
            is_free=not is_pro,
            message=get_restricted_message(module),
        )

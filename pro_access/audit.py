"""
Audit logging for the Pro action gate.

Emits structured log events for blocked actions and upgrade prompt exits.
Logging is best-effort: a failing handler never affects the gate.
"""

import logging
from typing import Optional

from pro_access.actions import ActionKind

logger = logging.getLogger(__name__)

PRO_ACTION_BLOCKED = "pro_action.blocked"
UPGRADE_PROMPT_UPGRADE = "pro_action.upgrade_selected"
UPGRADE_PROMPT_DISMISSED = "pro_action.prompt_dismissed"


def _action_value(action: Optional[ActionKind]) -> Optional[str]:
    return action.value if action is not None else None


def log_action_blocked(
    tenant_id: Optional[str],
    action: Optional[ActionKind],
    surface: str,
    message: str,
    status: Optional[str] = None,
    payment_status: Optional[str] = None,
) -> None:
    """
    Log a blocked Pro action.

    Args:
        tenant_id: Tenant ID, None outside a tenant session
        action: Action kind that was attempted
        surface: Guard surface that blocked it (guard, button, hook)
        message: Denial message shown to the tenant
        status: Subscription status at the time of the check
        payment_status: Payment status at the time of the check
    """
    try:
        logger.warning(
            "Pro action blocked",
            extra={
                "tenant_id": tenant_id,
                "action": PRO_ACTION_BLOCKED,
                "pro_action": _action_value(action),
                "surface": surface,
                "reason": message,
                "status": status,
                "payment_status": payment_status,
            }
        )
    except Exception as e:
        logger.error(
            "Failed to log pro action blocked event",
            extra={"error": str(e), "tenant_id": tenant_id}
        )


def log_prompt_exit(
    tenant_id: Optional[str],
    action: Optional[ActionKind],
    upgraded: bool,
    route: Optional[str] = None,
) -> None:
    """Log how the tenant left the upgrade prompt."""
    try:
        logger.info(
            "Upgrade prompt closed",
            extra={
                "tenant_id": tenant_id,
                "action": UPGRADE_PROMPT_UPGRADE if upgraded else UPGRADE_PROMPT_DISMISSED,
                "pro_action": _action_value(action),
                "route": route,
            }
        )
    except Exception as e:
        logger.error(
            "Failed to log upgrade prompt event",
            extra={"error": str(e), "tenant_id": tenant_id}
        )

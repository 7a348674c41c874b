"""
Upgrade prompt presentation.

Purely presentational: builds the view shown when a Pro action is blocked.
It never looks at entitlement; guards decide when it is open.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from pro_access.actions import ActionLike, coerce_action
from pro_access.config import GateSettings
from pro_access.policy import get_action_restricted_message

PROMPT_TITLE = "Upgrade to Pro"
UPGRADE_LABEL = "Upgrade Now"
DISMISS_LABEL = "Maybe Later"
OFFER_LABEL = "Special Offer"


@dataclass(frozen=True)
class UpgradePromptView:
    is_open: bool
    title: str
    headline: str
    benefits: Tuple[str, ...]
    offer_label: str
    price_label: str
    upgrade_label: str
    dismiss_label: str
    upgrade_route: str
    action: Optional[str] = None


def build_upgrade_prompt(
    action: ActionLike = None,
    is_open: bool = True,
    settings: Optional[GateSettings] = None,
) -> UpgradePromptView:
    """Build the prompt view; the action only customises the headline."""
    settings = settings or GateSettings()
    kind = coerce_action(action)
    return UpgradePromptView(
        is_open=is_open,
        title=PROMPT_TITLE,
        headline=get_action_restricted_message(kind),
        benefits=settings.benefits,
        offer_label=OFFER_LABEL,
        price_label=settings.price_label,
        upgrade_label=UPGRADE_LABEL,
        dismiss_label=DISMISS_LABEL,
        upgrade_route=settings.billing_route,
        action=kind.value if kind else None,
    )


def render_text(view: UpgradePromptView) -> str:
    """Plain-text rendering, e.g. for terminals and notification bodies."""
    if not view.is_open:
        return ""
    lines = [view.title, view.headline, ""]
    lines.extend(f"  * {benefit}" for benefit in view.benefits)
    lines.append("")
    lines.append(f"{view.offer_label}: {view.price_label}")
    lines.append(f"[{view.upgrade_label}]  [{view.dismiss_label}]")
    return "\n".join(lines)

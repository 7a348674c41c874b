"""
Gated action kinds and platform module definitions.

Action kinds group the write-type operations that require an active,
paid Pro subscription. Platform modules group the areas of the vendor
app into free and Pro-only sections.
"""

import re
from enum import Enum
from typing import Dict, FrozenSet, Optional, Union

from pro_access.errors import UnknownActionError


class ActionKind(str, Enum):
    """
    Write-type operations subject to Pro gating.

    Free tenants can VIEW every feature but cannot perform any of these.
    """
    SAVE = "save"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    PUBLISH = "publish"
    DOWNLOAD = "download"
    EXPORT = "export"
    SUBMIT = "submit"
    SEND = "send"
    GENERATE = "generate"
    ACTIVATE = "activate"
    DEACTIVATE = "deactivate"


ACTION_LABELS: Dict[ActionKind, str] = {
    ActionKind.SAVE: "save",
    ActionKind.CREATE: "create",
    ActionKind.UPDATE: "update",
    ActionKind.DELETE: "delete",
    ActionKind.PUBLISH: "publish",
    ActionKind.DOWNLOAD: "download",
    ActionKind.EXPORT: "export",
    ActionKind.SUBMIT: "submit",
    ActionKind.SEND: "send",
    ActionKind.GENERATE: "generate",
    ActionKind.ACTIVATE: "activate",
    ActionKind.DEACTIVATE: "deactivate",
}

# Verb used when a caller does not say which action was attempted
GENERIC_ACTION_VERB = "save, publish, or download"

ActionLike = Union[ActionKind, str, None]


def coerce_action(action: ActionLike) -> Optional[ActionKind]:
    """
    Convert a caller-supplied action into an ActionKind.

    Args:
        action: ActionKind, its string value, or None

    Returns:
        The matching ActionKind, or None when no action was given

    Raises:
        UnknownActionError: if the value is not a gated action kind
    """
    if action is None:
        return None
    if isinstance(action, ActionKind):
        return action
    normalized = str(action).strip().lower()
    if not normalized:
        return None
    try:
        return ActionKind(normalized)
    except ValueError:
        raise UnknownActionError(action) from None


def action_label(action: ActionLike) -> str:
    """
    Lower-case verb for an action, or the generic verb when none is given.

    Total over ActionKind plus None.
    """
    kind = coerce_action(action)
    if kind is None:
        return GENERIC_ACTION_VERB
    return ACTION_LABELS[kind]


class PlatformModule(str, Enum):
    """Top-level areas of the vendor app."""
    CUSTOMERS = "customers"
    LEADS = "leads"
    SUPPLIERS = "suppliers"
    ADDITIONAL_SERVICES = "additional-services"
    REFERRAL = "referral"
    ACCOUNT = "account"
    DASHBOARD = "dashboard"
    NOTIFICATIONS = "notifications"
    ORDERS = "orders"
    POS = "pos"
    PRODUCTS = "products"
    CATALOGUE = "catalogue"
    SERVICES = "services"
    BOOKINGS = "bookings"
    APPOINTMENTS = "appointments"
    ANALYTICS = "analytics"
    MARKETING = "marketing"
    GREETING = "greeting"
    INVOICING = "invoicing"
    BILLS = "bills"
    COUPONS = "coupons"
    WEBSITE = "website"
    INVENTORY = "inventory"
    EMPLOYEES = "employees"
    HR = "hr"


FREE_MODULES: FrozenSet[PlatformModule] = frozenset({
    PlatformModule.CUSTOMERS,
    PlatformModule.LEADS,
    PlatformModule.SUPPLIERS,
    PlatformModule.ADDITIONAL_SERVICES,
    PlatformModule.REFERRAL,
    PlatformModule.ACCOUNT,
    PlatformModule.DASHBOARD,
    PlatformModule.NOTIFICATIONS,
})

PRO_MODULES: FrozenSet[PlatformModule] = frozenset(
    m for m in PlatformModule if m not in FREE_MODULES
)

MODULE_DISPLAY_NAMES: Dict[PlatformModule, str] = {
    PlatformModule.ORDERS: "Order Management",
    PlatformModule.POS: "Point of Sale",
    PlatformModule.PRODUCTS: "Product Catalogue",
    PlatformModule.CATALOGUE: "Service Catalogue",
    PlatformModule.SERVICES: "Services",
    PlatformModule.BOOKINGS: "Bookings",
    PlatformModule.APPOINTMENTS: "Appointments",
    PlatformModule.ANALYTICS: "Analytics & Reports",
    PlatformModule.MARKETING: "Marketing & Greetings",
    PlatformModule.GREETING: "Marketing & Greetings",
    PlatformModule.INVOICING: "Invoicing",
    PlatformModule.BILLS: "Billing",
    PlatformModule.COUPONS: "Coupons & Offers",
    PlatformModule.WEBSITE: "Website Builder",
    PlatformModule.INVENTORY: "Inventory Management",
    PlatformModule.EMPLOYEES: "Employee Management",
    PlatformModule.HR: "HR Management",
}

_NON_LETTERS = re.compile(r"[^a-z]")


def normalize_module_name(module: str) -> str:
    """Lower-case a module name or route segment and drop non-letters."""
    return _NON_LETTERS.sub("", str(module).lower())


def is_free_module(module: Union[PlatformModule, str]) -> bool:
    """
    Check if a module (or a route/path naming one) is open to free tenants.

    Matching is by substring on the normalised name, so
    "/vendor/customers/123" counts as the customers module.

    Args:
        module: PlatformModule or free-form module/route name

    Returns:
        True if the name contains a free module
    """
    value = module.value if isinstance(module, PlatformModule) else module
    normalized = normalize_module_name(value)
    return any(normalize_module_name(m.value) in normalized for m in FREE_MODULES)


def module_display_name(module: Union[PlatformModule, str]) -> str:
    """Human-readable module name, falling back to the name as given."""
    value = module.value if isinstance(module, PlatformModule) else str(module)
    try:
        return MODULE_DISPLAY_NAMES.get(PlatformModule(value.lower()), value)
    except ValueError:
        return value

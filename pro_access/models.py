from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Generic, Mapping, Optional, Tuple, TypeVar

from pro_access.actions import ActionKind

T = TypeVar("T")


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"
    EXPIRED = "expired"
    PENDING = "pending"


class PaymentStatus(str, Enum):
    COMPLETED = "completed"
    PENDING = "pending"
    FAILED = "failed"


# fromisoformat before 3.11 only takes 3 or 6 fractional digits
_FRACTION = re.compile(r"\.(\d+)")


def _pad_fraction(match: re.Match) -> str:
    return "." + match.group(1)[:6].ljust(6, "0")


def _parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp. Unreadable values become None; they never gate access."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        raw = str(value).strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        raw = _FRACTION.sub(_pad_fraction, raw)
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class SubscriptionPlan:
    """Plan attached to a subscription response."""

    id: str
    name: str
    display_name: str = ""
    price: str = ""
    features: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "features", tuple(self.features))

    @classmethod
    def from_payload(cls, raw: Optional[Mapping[str, Any]]) -> Optional["SubscriptionPlan"]:
        if not raw:
            return None
        return cls(
            id=str(raw.get("id", "")),
            name=str(raw.get("name", "")),
            display_name=str(raw.get("displayName", raw.get("display_name", "")) or ""),
            price=str(raw.get("price", "") or ""),
            features=tuple(str(f) for f in raw.get("features") or ()),
        )


@dataclass(frozen=True)
class SubscriptionRecord:
    """Snapshot of a tenant's current paid-plan enrollment.

    status and payment_status are kept as the raw wire strings so unknown
    values survive parsing; they simply never grant entitlement.
    """

    tenant_id: str
    plan_id: str
    status: str
    payment_status: str
    current_period_end: Optional[datetime] = None
    id: Optional[str] = None
    start_date: Optional[datetime] = None
    plan: Optional[SubscriptionPlan] = None

    def __post_init__(self) -> None:
        tenant_id = str(self.tenant_id).strip()
        if not tenant_id:
            raise ValueError("tenant_id is required")
        object.__setattr__(self, "tenant_id", tenant_id)
        object.__setattr__(self, "status", _enum_value(self.status))
        object.__setattr__(self, "payment_status", _enum_value(self.payment_status))
        object.__setattr__(self, "current_period_end", _parse_timestamp(self.current_period_end))
        object.__setattr__(self, "start_date", _parse_timestamp(self.start_date))

    @property
    def is_entitled(self) -> bool:
        # strict AND, no fallback
        return (
            self.status == SubscriptionStatus.ACTIVE.value
            and self.payment_status == PaymentStatus.COMPLETED.value
        )

    @classmethod
    def from_payload(
        cls,
        payload: Optional[Mapping[str, Any]],
        tenant_id: Optional[str] = None,
    ) -> Optional["SubscriptionRecord"]:
        """Parse `{"subscription": {...}, "plan": {...}}` as sent by the backend.

        Returns None when the payload carries no subscription.
        """
        if not payload:
            return None
        raw = payload.get("subscription")
        if not raw:
            return None

        plan = SubscriptionPlan.from_payload(payload.get("plan") or raw.get("plan"))
        return cls(
            tenant_id=str(raw.get("vendorId") or raw.get("tenantId") or tenant_id or ""),
            plan_id=str(raw.get("planId", "") or ""),
            status=str(raw.get("status", "") or ""),
            payment_status=str(raw.get("paymentStatus", "") or ""),
            current_period_end=raw.get("currentPeriodEnd"),
            id=raw.get("id"),
            start_date=raw.get("startDate"),
            plan=plan,
        )


def _enum_value(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    return str(value or "").strip().lower()


@dataclass(frozen=True)
class ActionDecision:
    """Outcome of evaluating one gated action. Never persisted."""

    allowed: bool
    message: str = ""
    show_upgrade_prompt: bool = False

    @classmethod
    def allow(cls) -> "ActionDecision":
        return cls(allowed=True, message="", show_upgrade_prompt=False)

    @classmethod
    def deny(cls, message: str) -> "ActionDecision":
        return cls(allowed=False, message=message, show_upgrade_prompt=True)


@dataclass(frozen=True)
class GuardResult(Generic[T]):
    """What the imperative guard hands back to its caller."""

    executed: bool
    result: Optional[T] = None
    message: str = ""

    def __bool__(self) -> bool:
        return self.executed


@dataclass(frozen=True)
class ModuleAccess:
    has_access: bool
    is_pro: bool
    is_free: bool
    message: str


@dataclass
class GuardSession:
    """Transient UI state owned by one guard instance."""

    is_open: bool = False
    blocked_action: Optional[ActionKind] = None

    def open(self, action: Optional[ActionKind]) -> None:
        self.is_open = True
        self.blocked_action = action

    def dismiss(self) -> None:
        # closing the prompt never retries the blocked action
        self.is_open = False

    def clear(self) -> None:
        self.is_open = False
        self.blocked_action = None

"""
Pro access error hierarchy.

Provides:
- ProAccessError: base for all gate failures
- SubscriptionFetchError: subscription lookup failed (resolved fail-closed)
- UnknownActionError: action outside the ActionKind enumeration

A denied Pro action is NOT an error. It is returned as an ActionDecision.
"""

from typing import Optional


class ProAccessError(Exception):
    """Base exception for Pro access failures."""

    error_code = "PRO_ACCESS_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"error": self.error_code, "message": self.message}


class SubscriptionFetchError(ProAccessError):
    """
    Raised by the subscription client when the lookup endpoint fails.

    The state store catches this and treats the tenant as not entitled.
    """

    error_code = "SUBSCRIPTION_FETCH_FAILED"

    def __init__(
        self,
        tenant_id: str,
        detail: str,
        status_code: Optional[int] = None,
        cause: Optional[Exception] = None,
    ):
        self.tenant_id = tenant_id
        self.detail = detail
        self.status_code = status_code
        self.cause = cause
        super().__init__(f"Subscription lookup failed for {tenant_id}: {detail}")

    def to_dict(self) -> dict:
        d = {
            "error": self.error_code,
            "message": self.detail,
            "tenant_id": self.tenant_id,
        }
        if self.status_code is not None:
            d["status_code"] = self.status_code
        return d


class UnknownActionError(ProAccessError, ValueError):
    """Raised when a string does not name a gated action kind."""

    error_code = "UNKNOWN_ACTION"

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Unknown Pro action: {value!r}")

    def to_dict(self) -> dict:
        return {"error": self.error_code, "message": self.message, "action": str(self.value)}

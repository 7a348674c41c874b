"""
Pro access gate configuration.

Values come from environment variables with safe defaults.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Tuple

# setting name -> (environment variable, default, parser)
_ENV_SETTINGS: Dict[str, Tuple[str, str, Callable[[str], Any]]] = {
    # Base URL of the vendor backend that owns subscriptions
    "api_base_url": ("VYORA_API_BASE_URL", "http://localhost:5000", str),
    # Route the upgrade prompt navigates to
    "billing_route": ("VYORA_BILLING_ROUTE", "/vendor/account", str),
    "timeout_seconds": ("VYORA_SUBSCRIPTION_TIMEOUT_SECONDS", "30", float),
    # Subscription lookup: one attempt plus two retries
    "max_attempts": ("VYORA_SUBSCRIPTION_MAX_ATTEMPTS", "3", int),
    # Base delay of the exponential backoff between attempts
    "retry_delay_seconds": ("VYORA_SUBSCRIPTION_RETRY_DELAY_SECONDS", "1", float),
    "price_label": ("VYORA_PRO_PRICE_LABEL", "₹399/month", str),
}


def _env_setting(name: str) -> Any:
    env_var, default, parse = _ENV_SETTINGS[name]
    return parse(os.getenv(env_var, default))


def _env_settings() -> Dict[str, Any]:
    return {name: _env_setting(name) for name in _ENV_SETTINGS}


API_BASE_URL = _env_setting("api_base_url")
BILLING_ROUTE = _env_setting("billing_route")
SUBSCRIPTION_TIMEOUT_SECONDS = _env_setting("timeout_seconds")
SUBSCRIPTION_MAX_ATTEMPTS = _env_setting("max_attempts")
SUBSCRIPTION_RETRY_DELAY_SECONDS = _env_setting("retry_delay_seconds")
PRO_PRICE_LABEL = _env_setting("price_label")

# Upper bound for a single backoff wait
MAX_RETRY_DELAY_SECONDS = 10.0

PRO_BENEFITS: Tuple[str, ...] = (
    "Unlimited saves & exports",
    "Publish your mini website",
    "Full POS & order management",
    "Advanced analytics & reports",
    "Marketing & greeting cards",
    "Priority support",
)


@dataclass(frozen=True)
class GateSettings:
    """Settings shared by the store, guards and upgrade prompt."""

    api_base_url: str = API_BASE_URL
    billing_route: str = BILLING_ROUTE
    timeout_seconds: float = SUBSCRIPTION_TIMEOUT_SECONDS
    max_attempts: int = SUBSCRIPTION_MAX_ATTEMPTS
    retry_delay_seconds: float = SUBSCRIPTION_RETRY_DELAY_SECONDS
    price_label: str = PRO_PRICE_LABEL
    benefits: Tuple[str, ...] = field(default=PRO_BENEFITS)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.retry_delay_seconds < 0:
            raise ValueError("retry_delay_seconds must not be negative")
        if not self.billing_route:
            raise ValueError("billing_route is required")
        object.__setattr__(self, "benefits", tuple(self.benefits))

    @classmethod
    def from_env(cls, **overrides: Any) -> "GateSettings":
        """
        Read settings at call time rather than import time.

        Keyword overrides (including benefits) win over the environment.
        """
        values = _env_settings()
        values.setdefault("benefits", PRO_BENEFITS)
        values.update(overrides)
        return cls(**values)

"""
Guard surfaces for Pro-restricted actions.

Three interchangeable ways to put a gated action behind the policy:
- ProActionGuard: wraps an existing interaction handler
- ProActionButton: a self-contained button that gates its own click
- ProActionGuardHook: imperative guard_action(action, callback)

All three delegate the decision to ActionPolicyEvaluator. A denial is a
normal outcome, never an exception: the action is suppressed, the upgrade
prompt opens and an optional on_blocked callback receives the message.
"""

import functools
import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, TypeVar, Union

from pro_access.actions import ActionKind, ActionLike, coerce_action
from pro_access.audit import log_action_blocked, log_prompt_exit
from pro_access.config import GateSettings
from pro_access.models import ActionDecision, GuardResult, GuardSession
from pro_access.policy import ActionPolicyEvaluator
from pro_access.prompt import UpgradePromptView, build_upgrade_prompt

T = TypeVar("T")

OnBlocked = Callable[[str], None]
Navigator = Callable[[str], None]


@dataclass
class Interaction:
    """A UI event (click, submit, key press) travelling towards its handler."""

    name: str = "click"
    target: Any = None
    default_prevented: bool = False
    propagation_stopped: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True

    def stop_propagation(self) -> None:
        self.propagation_stopped = True


class _PromptingGuard:
    """Shared upgrade-prompt handling for the guard surfaces."""

    surface = "guard"

    def __init__(
        self,
        evaluator: ActionPolicyEvaluator,
        navigator: Optional[Navigator] = None,
        settings: Optional[GateSettings] = None,
    ):
        self.evaluator = evaluator
        self.settings = settings or GateSettings()
        self.session = GuardSession()
        self._navigator = navigator

    @property
    def is_pro(self) -> bool:
        return self.evaluator.is_pro

    @property
    def show_upgrade_modal(self) -> bool:
        return self.session.is_open

    def prompt(self) -> UpgradePromptView:
        return build_upgrade_prompt(
            self.session.blocked_action,
            is_open=self.session.is_open,
            settings=self.settings,
        )

    def upgrade(self) -> str:
        """Close the prompt and navigate to the billing/account route."""
        route = self.settings.billing_route
        action = self.session.blocked_action
        self.session.dismiss()
        log_prompt_exit(self.evaluator.store.tenant_id, action, upgraded=True, route=route)
        if self._navigator is not None:
            self._navigator(route)
        return route

    def dismiss(self) -> None:
        """Close the prompt without retrying the blocked action."""
        action = self.session.blocked_action
        self.session.dismiss()
        log_prompt_exit(self.evaluator.store.tenant_id, action, upgraded=False)

    def _allow(self) -> None:
        """A permitted attempt closes any prompt left from an earlier denial."""
        self.session.clear()

    def _block(
        self,
        action: Optional[ActionKind],
        decision: ActionDecision,
        on_blocked: Optional[OnBlocked],
    ) -> None:
        record = self.evaluator.store.get_subscription()
        log_action_blocked(
            self.evaluator.store.tenant_id,
            action,
            surface=self.surface,
            message=decision.message,
            status=record.status if record else None,
            payment_status=record.payment_status if record else None,
        )
        self.session.open(action)
        if on_blocked is not None:
            on_blocked(decision.message)


class ProActionGuard(_PromptingGuard):
    """
    Wraps an interaction handler so the check runs before it.

    Non-Pro tenants can VIEW everything but the wrapped handler will not run
    for them. For Pro tenants wrap() hands the handler back untouched.
    Call wrap() on every render so a change in entitlement is picked up.
    """

    surface = "guard"

    def __init__(
        self,
        evaluator: ActionPolicyEvaluator,
        action: ActionLike = ActionKind.SAVE,
        on_blocked: Optional[OnBlocked] = None,
        navigator: Optional[Navigator] = None,
        settings: Optional[GateSettings] = None,
        show_inline_warning: bool = False,
    ):
        super().__init__(evaluator, navigator=navigator, settings=settings)
        self.action = coerce_action(action)
        self.on_blocked = on_blocked
        self.show_inline_warning = show_inline_warning

    def wrap(self, child: Callable[..., T]) -> Callable[..., Union[T, bool]]:
        if self.is_pro:
            return child

        @functools.wraps(child)
        def intercept(*args, **kwargs):
            interaction = args[0] if args and isinstance(args[0], Interaction) else None
            if not self.handle(interaction):
                return False
            return child(*args, **kwargs)

        return intercept

    def handle(self, interaction: Optional[Interaction] = None) -> bool:
        """Run the check for one interaction. Returns True if it may proceed."""
        decision = self.evaluator.evaluate(self.action)
        if decision.allowed:
            self._allow()
            return True

        if interaction is not None:
            interaction.prevent_default()
            interaction.stop_propagation()
        self._block(self.action, decision, self.on_blocked)
        return False

    @property
    def inline_warning(self) -> Optional[str]:
        if not self.show_inline_warning or self.is_pro:
            return None
        return self.evaluator.get_action_restricted_message(self.action)


@dataclass(frozen=True)
class ButtonView:
    label: str
    disabled: bool
    show_lock: bool
    variant: str
    size: str
    button_type: str
    prompt: UpgradePromptView


class ProActionButton(_PromptingGuard):
    """A button that gates its own click and shows a lock to free tenants."""

    surface = "button"

    def __init__(
        self,
        evaluator: ActionPolicyEvaluator,
        label: str,
        action: ActionLike = ActionKind.SAVE,
        on_click: Optional[Callable[[Optional[Interaction]], Any]] = None,
        disabled: bool = False,
        variant: str = "default",
        size: str = "default",
        button_type: str = "button",
        navigator: Optional[Navigator] = None,
        settings: Optional[GateSettings] = None,
    ):
        super().__init__(evaluator, navigator=navigator, settings=settings)
        self.label = label
        self.action = coerce_action(action)
        self.on_click = on_click
        self.disabled = disabled
        self.variant = variant
        self.size = size
        self.button_type = button_type

    @property
    def show_lock(self) -> bool:
        return not self.is_pro

    def click(self, interaction: Optional[Interaction] = None) -> bool:
        """Returns True if the click went through to on_click."""
        if self.disabled:
            return False

        decision = self.evaluator.evaluate(self.action)
        if not decision.allowed:
            if interaction is not None:
                interaction.prevent_default()
                interaction.stop_propagation()
            self._block(self.action, decision, None)
            return False

        self._allow()
        if self.on_click is not None:
            self.on_click(interaction)
        return True

    def render(self) -> ButtonView:
        return ButtonView(
            label=self.label,
            disabled=self.disabled,
            show_lock=self.show_lock,
            variant=self.variant,
            size=self.size,
            button_type=self.button_type,
            prompt=self.prompt(),
        )


class ProActionGuardHook(_PromptingGuard):
    """Imperative guard for actions triggered from code rather than a widget."""

    surface = "hook"

    def guard_action(
        self,
        action: ActionLike,
        callback: Callable[[], Union[T, Awaitable[T]]],
        on_blocked: Optional[OnBlocked] = None,
    ) -> Union[GuardResult[T], Awaitable[GuardResult[T]]]:
        """
        Run callback only if the action is allowed.

        Denied: the callback is NOT called and GuardResult(executed=False)
        comes back immediately, as a coroutine when callback is a coroutine
        function so that `await guard_action(...)` holds on both paths. Allowed: the callback's result is wrapped in
        GuardResult(executed=True); an awaitable result is returned as a
        coroutine resolving to that GuardResult. Exceptions raised by the
        callback propagate to the caller.
        """
        kind = coerce_action(action)
        decision = self.evaluator.evaluate(kind)

        if not decision.allowed:
            self._block(kind, decision, on_blocked)
            denied = GuardResult(executed=False, message=decision.message)
            if inspect.iscoroutinefunction(callback):
                return self._settled(denied)
            return denied

        self._allow()
        result = callback()
        if inspect.isawaitable(result):
            return self._resolve(result)
        return GuardResult(executed=True, result=result)

    execute_action = guard_action

    def would_allow(self, action: ActionLike = None) -> bool:
        return self.evaluator.would_allow(action)

    def can_perform_action(self, action: ActionLike = None) -> ActionDecision:
        return self.evaluator.evaluate(action)

    def get_action_restricted_message(self, action: ActionLike = None) -> str:
        return self.evaluator.get_action_restricted_message(action)

    @staticmethod
    async def _settled(result: GuardResult[T]) -> GuardResult[T]:
        return result

    @staticmethod
    async def _resolve(pending: Awaitable[T]) -> GuardResult[T]:
        return GuardResult(executed=True, result=await pending)


def use_pro_action_guard(
    store=None,
    navigator: Optional[Navigator] = None,
    settings: Optional[GateSettings] = None,
) -> ProActionGuardHook:
    """Build an imperative guard for a store (or the fail-closed default)."""
    return ProActionGuardHook(
        ActionPolicyEvaluator(store),
        navigator=navigator,
        settings=settings,
    )

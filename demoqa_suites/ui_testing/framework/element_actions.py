# ================================================================================
# Element Actions Module
# ================================================================================
#
# Non-throwing UI actions for an unreliable target.
#
# Every action first probes its target for visibility (bounded wait) and only
# then runs. Failures never escape as exceptions: they come back inside an
# ActionOutcome carrying the error kind, and are recorded in the executor's
# DiagnosticsLog. Callers decide whether to propagate, log or ignore.
#
# Key Features:
#   - Probe-then-act for single locators or fallback candidate lists
#   - Optional whole-step retries through the Retry Policy
#   - click / fill / type / press / clear-and-type helpers
#   - Allure step integration
#
# Usage:
#   actions = ActionExecutor(page, default_timeout=5000)
#   outcome = await actions.click(page.locator("#addNewRecordButton"), description="Add")
#   if not outcome:
#       logger.warning(outcome.last_error)
#
# ================================================================================

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Optional, Sequence, Union

import allure
from playwright.async_api import Locator, Page

from .errors import DiagnosticsLog, InteractionError, TransientUIError, UIAutomationError
from .log_config import SupportsLogging, get_logger
from .probe import Probe, visible
from .retry import RetryConfig, SleepFn, retry
from .smart_locator import resolve_first_matching


Target = Union[Locator, Sequence[Locator]]
Action = Callable[[Locator], Awaitable[Any]]


@dataclass
class ActionOutcome:
    """
    Result of an attempted UI action. Returned, never raised.

    Attributes:
        succeeded: Whether the action ran to completion
        attempts: How many probe-then-act attempts were made
        last_error: TransientUIError / InteractionError of the last failure
        description: What was attempted
    """
    succeeded: bool
    attempts: int = 1
    last_error: Optional[UIAutomationError] = None
    description: str = ""

    def __bool__(self) -> bool:
        return self.succeeded

    @property
    def ok(self) -> bool:
        return self.succeeded

    @property
    def error_kind(self) -> Optional[str]:
        return self.last_error.kind if self.last_error is not None else None

    def raise_for_failure(self) -> "ActionOutcome":
        """Raise the recorded error if the action failed."""
        if not self.succeeded:
            raise self.last_error or InteractionError(f"{self.description} failed")
        return self

    @classmethod
    def success(cls, description: str = "", attempts: int = 1) -> "ActionOutcome":
        return cls(succeeded=True, attempts=attempts, description=description)

    @classmethod
    def failure(
        cls,
        error: UIAutomationError,
        description: str = "",
        attempts: int = 1,
    ) -> "ActionOutcome":
        return cls(succeeded=False, attempts=attempts, last_error=error, description=description)

    @classmethod
    def merge(cls, outcomes: Iterable["ActionOutcome"], description: str = "") -> "ActionOutcome":
        """Fold step outcomes into one flow outcome. The last failure wins."""
        outcomes = list(outcomes)
        last_error = None
        for outcome in outcomes:
            if not outcome.succeeded:
                last_error = outcome.last_error
        return cls(
            succeeded=all(o.succeeded for o in outcomes),
            attempts=sum(o.attempts for o in outcomes) or 1,
            last_error=last_error,
            description=description,
        )


def _is_candidate_list(target: Target) -> bool:
    return isinstance(target, Sequence) and not isinstance(target, (str, bytes))


async def perform_action(
    target: Target,
    action: Action,
    timeout_ms: int = 5000,
    description: str = "action",
    prober: Optional[Probe] = None,
    logger: Optional[SupportsLogging] = None,
) -> ActionOutcome:
    """
    Probe `target` for visibility, then run `action` on it.

    Args:
        target: Locator, or ordered fallback candidates for the same element
        action: Coroutine function receiving the resolved Locator
        timeout_ms: Bound for the visibility probe
        description: Label for logs and diagnostics
        prober: Probe instance (polling policy)
        logger: Logger with debug/info/warning/error

    Returns:
        ActionOutcome. A target that never became visible yields a
        TransientUIError and the action is not run; an action that raised
        yields an InteractionError.
    """
    log = logger or get_logger("actions")
    prober = prober or Probe(logger=log)

    if _is_candidate_list(target):
        locator = await resolve_first_matching(target, timeout_ms, prober=prober, logger=log)
    else:
        found = await prober.run(visible(target), timeout_ms, description)
        locator = target if found else None

    if locator is None:
        error = TransientUIError(f"'{description}' not visible within {timeout_ms}ms")
        log.warning(str(error))
        return ActionOutcome.failure(error, description=description)

    try:
        await action(locator)
    except Exception as e:
        error = InteractionError(f"'{description}' failed while executing", cause=e)
        log.warning(str(error)[:200])
        return ActionOutcome.failure(error, description=description)

    log.debug(f"Action succeeded: {description}")
    return ActionOutcome.success(description=description)


class ActionExecutor:
    """
    Sequential executor for UI-mutating actions.

    Wraps `perform_action` with default timeouts, optional retries of the
    whole probe-then-act step and a diagnostics log for every failure.

    Example:
        actions = ActionExecutor(page)
        await actions.fill(page.locator("#firstName"), "John", description="First Name")
        await actions.click(page.locator("#submit"), description="Submit")
    """

    def __init__(
        self,
        page: Page,
        default_timeout: int = 5000,
        max_attempts: int = 1,
        retry_delay_ms: int = 500,
        diagnostics: Optional[DiagnosticsLog] = None,
        prober: Optional[Probe] = None,
        logger: Optional[SupportsLogging] = None,
        sleep: SleepFn = asyncio.sleep,
    ):
        """
        Initialize ActionExecutor.

        Args:
            page: Playwright Page object (used for keyboard input)
            default_timeout: Probe timeout in milliseconds
            max_attempts: Default attempts per action (1 = no retry)
            retry_delay_ms: Fixed delay between attempts
            diagnostics: Collector for failed actions
            prober: Probe instance shared by all actions
            logger: Logger with debug/info/warning/error
            sleep: Delay coroutine used between retries
        """
        self.page = page
        self.default_timeout = default_timeout
        self.max_attempts = max_attempts
        self.retry_delay_ms = retry_delay_ms
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticsLog()
        self.logger = logger or get_logger("actions")
        self.prober = prober or Probe(logger=self.logger)
        self._sleep = sleep

    async def perform(
        self,
        target: Target,
        action: Action,
        timeout: Optional[int] = None,
        description: str = "action",
        max_attempts: Optional[int] = None,
    ) -> ActionOutcome:
        """Run probe-then-act, retrying the whole step on failure."""
        timeout = self.default_timeout if timeout is None else timeout
        attempts = 0

        async def attempt() -> None:
            nonlocal attempts
            attempts += 1
            outcome = await perform_action(
                target, action, timeout, description,
                prober=self.prober, logger=self.logger,
            )
            outcome.raise_for_failure()

        config = RetryConfig(
            max_attempts=self.max_attempts if max_attempts is None else max_attempts,
            delay_ms=self.retry_delay_ms,
            retry_on=(UIAutomationError,),
        )
        try:
            await retry(
                attempt,
                config=config,
                description=description,
                logger=self.logger,
                sleep=self._sleep,
            )
        except UIAutomationError as e:
            self.diagnostics.record(e, description)
            return ActionOutcome.failure(e, description=description, attempts=attempts)

        return ActionOutcome.success(description=description, attempts=attempts)

    async def click(
        self,
        target: Target,
        description: str = "",
        timeout: Optional[int] = None,
        **kwargs: Any,
    ) -> ActionOutcome:
        """Click the target once it is visible."""
        description = description or "click"
        with allure.step(f"Click: {description}"):
            outcome = await self.perform(
                target, lambda loc: loc.click(**kwargs), timeout, description,
            )
        if outcome:
            self.logger.info(f"Clicked: {description}")
        return outcome

    async def fill(
        self,
        target: Target,
        value: str,
        description: str = "",
        clear_first: bool = True,
        timeout: Optional[int] = None,
    ) -> ActionOutcome:
        """Clear (optionally) and fill an input."""
        description = description or "fill"

        async def act(locator: Locator) -> None:
            if clear_first:
                await locator.clear()
            await locator.fill(value)

        masked = "*" * len(value) if "password" in description.lower() else value
        with allure.step(f"Fill {description}: {masked}"):
            outcome = await self.perform(target, act, timeout, description)
        if outcome:
            self.logger.info(f"Filled {description}: {masked}")
        return outcome

    async def type_text(
        self,
        target: Target,
        text: str,
        description: str = "",
        delay: int = 50,
        timeout: Optional[int] = None,
    ) -> ActionOutcome:
        """
        Focus, select-all, delete, then type key by key.

        An empty `text` just clears the field.
        """
        description = description or "type"

        async def act(locator: Locator) -> None:
            await locator.click()
            await self.page.keyboard.press("Control+A")
            await self.page.keyboard.press("Delete")
            if text and text.strip():
                await locator.press_sequentially(text, delay=delay)

        with allure.step(f"Type into {description}: {text}"):
            return await self.perform(target, act, timeout, description)

    async def clear_and_type(
        self,
        target: Target,
        text: str,
        description: str = "",
        timeout: Optional[int] = None,
    ) -> ActionOutcome:
        """Replace the input value and verify it took."""
        description = description or "clear and type"

        async def act(locator: Locator) -> None:
            await locator.click()
            await self.page.keyboard.press("Control+A")
            await self.page.keyboard.press("Delete")
            await locator.fill(text)
            actual = await locator.input_value()
            if actual != text:
                raise ValueError(f"Expected value '{text}', got '{actual}'")

        return await self.perform(target, act, timeout, description)

    async def press(self, key: str, target: Optional[Target] = None, description: str = "") -> ActionOutcome:
        """Press a key on the target, or on the page when no target is given."""
        description = description or f"press {key}"
        if target is not None:
            return await self.perform(target, lambda loc: loc.press(key), None, description)

        try:
            await self.page.keyboard.press(key)
        except Exception as e:
            error = InteractionError(f"'{description}' failed while executing", cause=e)
            self.logger.warning(str(error))
            self.diagnostics.record(error, description)
            return ActionOutcome.failure(error, description=description)
        return ActionOutcome.success(description=description)


__all__ = [
    "ActionOutcome",
    "ActionExecutor",
    "perform_action",
]

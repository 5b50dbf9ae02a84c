"""
================================================================================
Probe
================================================================================

Bounded condition polling against the page.

A probe evaluates a condition (element visible, attached, enabled, text
contains, ...) until it holds or the timeout elapses. A timeout is a normal
`False` result, never an exception: UI state changes asynchronously and "not
visible yet" is not the same thing as "broken".

Guarantee:
    A probe returns within `timeout_ms + policy.interval_ms`. Every single
    condition evaluation is itself bounded by the remaining time.

Usage:
    >>> found = await probe(visible(page.locator("#addNewRecordButton")), 5000)
    >>> result = await Probe().run(text_contains(table, "Cierra"), 3000)
    >>> result.found, result.elapsed_ms

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import asyncio
import inspect
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Union

from playwright.async_api import Locator, Page

from .log_config import SupportsLogging, get_logger


Condition = Callable[[], Union[bool, Awaitable[bool]]]


@dataclass
class PollPolicy:
    """
    Polling schedule for a probe.

    Attributes:
        interval_ms: First delay between evaluations (the polling quantum)
        multiplier: Growth factor applied after each miss (1.0 = fixed interval)
        max_interval_ms: Upper bound for the delay between evaluations
    """
    interval_ms: int = 100
    multiplier: float = 1.0
    max_interval_ms: int = 1000

    def next_interval(self, current_ms: float) -> float:
        return min(current_ms * self.multiplier, self.max_interval_ms)


@dataclass
class ProbeResult:
    """Outcome of a single probe call."""
    found: bool
    elapsed_ms: int

    def __bool__(self) -> bool:
        return self.found


DEFAULT_POLL_POLICY = PollPolicy()


class Probe:
    """
    Polls a condition until it holds or the timeout expires.

    Args:
        policy: Polling schedule. Defaults to a fixed 100 ms interval.
        logger: Logger with debug/info/warning/error.
    """

    def __init__(
        self,
        policy: Optional[PollPolicy] = None,
        logger: Optional[SupportsLogging] = None,
    ):
        self.policy = policy or DEFAULT_POLL_POLICY
        self.logger = logger or get_logger("probe")

    async def run(
        self,
        condition: Condition,
        timeout_ms: int,
        description: str = "condition",
    ) -> ProbeResult:
        """
        Poll `condition` for up to `timeout_ms`.

        Exceptions raised by the condition count as "does not hold yet".
        `timeout_ms <= 0` evaluates the condition exactly once.
        """
        loop = asyncio.get_running_loop()
        start = loop.time()
        deadline = start + max(timeout_ms, 0) / 1000
        quantum = self.policy.interval_ms / 1000
        interval_ms: float = self.policy.interval_ms

        while True:
            remaining = deadline - loop.time()
            found = await self._evaluate(condition, max(remaining, quantum), description)
            elapsed_ms = int((loop.time() - start) * 1000)

            if found:
                self.logger.debug(f"Probe hit: {description} ({elapsed_ms}ms)")
                return ProbeResult(found=True, elapsed_ms=elapsed_ms)

            remaining = deadline - loop.time()
            if remaining <= 0:
                self.logger.debug(f"Probe timed out: {description} ({elapsed_ms}ms)")
                return ProbeResult(found=False, elapsed_ms=elapsed_ms)

            await asyncio.sleep(min(interval_ms / 1000, remaining))
            interval_ms = self.policy.next_interval(interval_ms)

    async def _evaluate(
        self,
        condition: Condition,
        budget_s: float,
        description: str,
    ) -> bool:
        try:
            result = condition()
            if inspect.isawaitable(result):
                result = await asyncio.wait_for(result, timeout=budget_s)
            return bool(result)
        except asyncio.TimeoutError:
            return False
        except Exception as e:
            self.logger.debug(f"Probe check raised for {description}: {str(e)[:80]}")
            return False


async def probe(
    condition: Condition,
    timeout_ms: int,
    policy: Optional[PollPolicy] = None,
    logger: Optional[SupportsLogging] = None,
) -> bool:
    """Return True if `condition` holds within `timeout_ms`, else False."""
    result = await Probe(policy=policy, logger=logger).run(condition, timeout_ms)
    return result.found


# =============================================================================
# Conditions
# =============================================================================

def visible(locator: Locator) -> Condition:
    """Condition: first match of `locator` is visible."""
    async def check() -> bool:
        return await locator.first.is_visible()
    return check


def hidden(locator: Locator) -> Condition:
    """Condition: no visible match of `locator`."""
    async def check() -> bool:
        return not await locator.first.is_visible()
    return check


def attached(locator: Locator) -> Condition:
    """Condition: at least one match of `locator` is in the DOM."""
    async def check() -> bool:
        return await locator.count() > 0
    return check


def enabled(locator: Locator) -> Condition:
    """Condition: first match of `locator` is visible and enabled."""
    async def check() -> bool:
        first = locator.first
        return await first.is_visible() and await first.is_enabled()
    return check


def text_contains(
    locator: Locator,
    text: str,
    case_sensitive: bool = False,
) -> Condition:
    """Condition: text content of `locator` contains `text`."""
    async def check() -> bool:
        content = await locator.first.text_content() or ""
        if case_sensitive:
            return text in content
        return text.lower() in content.lower()
    return check


def url_contains(page: Page, fragment: str) -> Condition:
    """Condition: the current page URL contains `fragment`."""
    def check() -> bool:
        return fragment in (page.url or "")
    return check


__all__ = [
    "Condition",
    "PollPolicy",
    "ProbeResult",
    "Probe",
    "probe",
    "visible",
    "hidden",
    "attached",
    "enabled",
    "text_contains",
    "url_contains",
]

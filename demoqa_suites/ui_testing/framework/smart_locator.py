"""
================================================================================
Smart Locator with Fallback Selector Resolution
================================================================================

Element location for an unreliable, asynchronously rendering site:
    - Several candidate selectors per logical element (primary + fallbacks)
    - Candidates probed concurrently, list order decides the winner
    - Locator health tracking (which elements needed a fallback)
    - Concurrent bulk visibility and form readiness checks

Resolution rule:
    All candidates are probed at the same time. Candidate N is returned only
    after candidates 0..N-1 have all come back negative, so an earlier
    candidate always wins when it resolves within the timeout. As soon as
    the earliest still-pending candidate resolves, the remaining probes are
    cancelled. Total latency is bounded by the slowest single probe.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

from playwright.async_api import Locator, Page

from .errors import TransientUIError
from .log_config import SupportsLogging, get_logger
from .probe import Condition, Probe, enabled, visible


class ElementNotFoundError(TransientUIError):
    """Raised when no locator strategy finds the element in time."""
    pass


# =============================================================================
# Fallback Selector Resolver
# =============================================================================

async def _first_positive_in_order(
    conditions: Sequence[Tuple[str, Condition]],
    timeout_ms: int,
    prober: Probe,
) -> Optional[int]:
    """Probe all conditions concurrently, return the lowest index that holds."""
    tasks = [
        asyncio.ensure_future(prober.run(condition, timeout_ms, description))
        for description, condition in conditions
    ]
    try:
        for index, task in enumerate(tasks):
            result = await task
            if result.found:
                return index
        return None
    finally:
        pending = [t for t in tasks if not t.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)


async def resolve_first_matching(
    candidates: Sequence[Locator],
    timeout_ms: int,
    prober: Optional[Probe] = None,
    logger: Optional[SupportsLogging] = None,
) -> Optional[Locator]:
    """
    Return the first candidate (in list order) that becomes visible.

    Args:
        candidates: Locators believed to reference the same logical element
        timeout_ms: Bound for each probe; probes run concurrently
        prober: Probe instance (polling policy, logger)
        logger: Logger with debug/info/warning/error

    Returns:
        The winning Locator, or None if every candidate timed out
    """
    log = logger or get_logger("resolver")
    if not candidates:
        return None

    prober = prober or Probe(logger=log)
    conditions = [
        (f"candidate[{i}]", visible(locator)) for i, locator in enumerate(candidates)
    ]
    index = await _first_positive_in_order(conditions, timeout_ms, prober)

    if index is None:
        log.debug(f"No candidate resolved among {len(candidates)} within {timeout_ms}ms")
        return None
    if index > 0:
        log.debug(f"Resolved fallback candidate[{index}]")
    return candidates[index]


async def check_visibility(
    candidates: Mapping[str, Locator],
    timeout_ms: int = 1000,
    prober: Optional[Probe] = None,
    logger: Optional[SupportsLogging] = None,
) -> Dict[str, bool]:
    """
    Check visibility of several elements concurrently.

    Returns:
        Mapping of candidate name -> visible within timeout
    """
    log = logger or get_logger("resolver")
    prober = prober or Probe(logger=log)

    names = list(candidates.keys())
    results = await asyncio.gather(*(
        prober.run(visible(candidates[name]), timeout_ms, name) for name in names
    ))
    visibility = {name: result.found for name, result in zip(names, results)}

    visible_count = sum(1 for v in visibility.values() if v)
    log.info(f"Element check: {visible_count}/{len(names)} elements visible")
    return visibility


async def validate_form_fields(
    fields: Mapping[str, Locator],
    timeout_ms: int = 1000,
    prober: Optional[Probe] = None,
    logger: Optional[SupportsLogging] = None,
) -> bool:
    """Return True when every field is visible and enabled."""
    log = logger or get_logger("resolver")
    prober = prober or Probe(logger=log)

    names = list(fields.keys())
    results = await asyncio.gather(*(
        prober.run(enabled(fields[name]), timeout_ms, name) for name in names
    ))
    for name, result in zip(names, results):
        log.debug(f"Field {name}: ready={result.found}")

    all_valid = all(result.found for result in results)
    log.info(f"Form validation: {'all fields ready' if all_valid else 'some fields unavailable'}")
    return all_valid


# =============================================================================
# Named Locators
# =============================================================================

@dataclass
class LocatorHealth:
    """
    Tracks which strategy located an element.

    Attributes:
        element_name: Human-readable element name
        primary_selector: The preferred selector
        used_fallback: Whether a fallback was used
        fallback_name: Name of fallback used (if any)
        fallback_selector: The fallback selector used (if any)
    """
    element_name: str
    primary_selector: str
    used_fallback: bool = False
    fallback_name: Optional[str] = None
    fallback_selector: Optional[str] = None


class SmartLocator:
    """
    Named element locator with fallback strategies.

    Locator Priority Order:
        1. id selectors (DemoQA ships stable ids for most controls)
        2. title / aria attributes
        3. visible text
        4. CSS structure (last resort)

    Usage:
        >>> smart = SmartLocator(page)
        >>> button = await smart.locate("add_button")
        >>> await smart.is_visible("search_box", timeout=2000)
    """

    # Format: element_name -> {strategy_name: selector}
    LOCATORS: Dict[str, Dict[str, str]] = {
        # Login (Book Store)
        "username_input": {
            "primary": "#userName",
            "fallback_1": "input[placeholder='UserName']",
        },
        "password_input": {
            "primary": "#password",
            "fallback_1": "input[type='password']",
        },
        "login_button": {
            "primary": "#login",
            "fallback_1": "button:has-text('Login')",
        },
        "login_error": {
            "primary": "text=Invalid username or password!",
            "fallback_1": "#name",
            "fallback_2": ".alert",
            "fallback_3": "[role='alert']",
            "fallback_4": ".error-message",
            "fallback_5": "text=Invalid credentials",
        },

        # Profile / dashboard
        "profile_link": {
            "primary": "text=Profile",
        },
        "main_header": {
            "primary": ".main-header",
            "fallback_1": "text=Book Store Application",
        },
        "navigation_menu": {
            "primary": ".left-pannel",
        },
        "user_name_value": {
            "primary": "#userName-value",
        },
        "logout_button": {
            "primary": "#submit:has-text('Log out')",
            "fallback_1": "button:has-text('Log out')",
            "fallback_2": "text=Log out",
        },

        # Web Tables
        "add_button": {
            "primary": "#addNewRecordButton",
            "fallback_1": "button:has-text('Add')",
        },
        "search_box": {
            "primary": "#searchBox",
            "fallback_1": "input[placeholder='Type to search']",
        },
        "user_table": {
            "primary": ".rt-table",
            "fallback_1": "[role='grid']",
        },
        "modal_form": {
            "primary": ".modal-content",
            "fallback_1": "[role='dialog']",
        },
        "submit_button": {
            "primary": "#submit",
            "fallback_1": "button[type='submit']",
            "fallback_2": ".btn-primary",
        },
        "close_modal": {
            "primary": ".close",
            "fallback_1": "[aria-label='Close']",
            "fallback_2": ".btn-secondary",
        },
        "edit_button": {
            "primary": "[title='Edit']",
            "fallback_1": ".fa-edit",
            "fallback_2": ".rt-tbody button:first-child",
        },
        "delete_button": {
            "primary": "[title='Delete']",
            "fallback_1": ".fa-trash",
            "fallback_2": ".rt-tbody button:last-child",
        },
        "no_data_message": {
            "primary": "text=No rows found",
            "fallback_1": "text=No data available",
            "fallback_2": "text=No results found",
        },
        "first_name_input": {"primary": "#firstName"},
        "last_name_input": {"primary": "#lastName"},
        "email_input": {"primary": "#userEmail"},
        "age_input": {"primary": "#age"},
        "salary_input": {"primary": "#salary"},
        "department_input": {"primary": "#department"},
    }

    def __init__(
        self,
        page: Page,
        prober: Optional[Probe] = None,
        logger: Optional[SupportsLogging] = None,
    ):
        """
        Initialize SmartLocator with a Playwright page.

        Args:
            page: Playwright Page object
            prober: Probe used for every candidate check
            logger: Logger with debug/info/warning/error
        """
        self.page = page
        self.logger = logger or get_logger("smart_locator")
        self.prober = prober or Probe(logger=self.logger)
        self._locators: Dict[str, Dict[str, str]] = {
            name: dict(strategies) for name, strategies in self.LOCATORS.items()
        }
        self._health_records: List[LocatorHealth] = []
        self._fallback_used: Dict[str, LocatorHealth] = {}

    def strategies(self, target: Union[str, Mapping[str, str]]) -> Dict[str, str]:
        """Return the ordered strategy -> selector map for a target."""
        if isinstance(target, Mapping):
            return dict(target)
        strategies = self._locators.get(target)
        if not strategies:
            raise KeyError(f"No locators defined for element: {target}")
        return dict(strategies)

    def candidates(self, target: Union[str, Mapping[str, str]]) -> List[Locator]:
        """Build Playwright locators for every strategy, in priority order."""
        return [self.page.locator(selector) for selector in self.strategies(target).values()]

    async def find(
        self,
        target: Union[str, Mapping[str, str]],
        timeout: int = 5000,
        element_name: Optional[str] = None,
    ) -> Optional[Locator]:
        """
        Resolve a target to the first visible candidate.

        Returns:
            Locator, or None when every strategy timed out
        """
        strategies = self.strategies(target)
        display_name = element_name or (target if isinstance(target, str) else "custom_element")
        names = list(strategies.keys())
        locators = [self.page.locator(strategies[n]) for n in names]

        conditions = [(f"{display_name}:{n}", visible(loc)) for n, loc in zip(names, locators)]
        index = await _first_positive_in_order(conditions, timeout, self.prober)
        if index is None:
            return None

        strategy_name = names[index]
        selector = strategies[strategy_name]
        primary = strategies.get("primary", strategies[names[0]])
        used_fallback = index > 0
        health = LocatorHealth(
            element_name=display_name,
            primary_selector=primary,
            used_fallback=used_fallback,
            fallback_name=strategy_name if used_fallback else None,
            fallback_selector=selector if used_fallback else None,
        )
        self._health_records.append(health)

        if used_fallback:
            self.logger.warning(
                f"Element '{display_name}' used fallback: {strategy_name} -> {selector}"
            )
            self._fallback_used[display_name] = health
        else:
            self.logger.debug(f"Element '{display_name}' found: {selector}")
        return locators[index]

    async def locate(
        self,
        target: Union[str, Mapping[str, str]],
        timeout: int = 5000,
        element_name: Optional[str] = None,
    ) -> Locator:
        """
        Resolve a target, raising when nothing matches.

        Raises:
            ElementNotFoundError: When all strategies fail
        """
        locator = await self.find(target, timeout=timeout, element_name=element_name)
        if locator is None:
            display_name = element_name or (target if isinstance(target, str) else "custom_element")
            selectors = ", ".join(self.strategies(target).values())
            raise ElementNotFoundError(
                f"All locators failed for '{display_name}' within {timeout}ms: {selectors}"
            )
        return locator

    async def is_visible(
        self,
        target: Union[str, Mapping[str, str]],
        timeout: int = 2000,
    ) -> bool:
        """Check if any strategy of the target becomes visible."""
        return await self.find(target, timeout=timeout) is not None

    def register_locator(self, element_name: str, locators: Dict[str, str]) -> None:
        """Register or replace a locator map at runtime (this instance only)."""
        self._locators[element_name] = dict(locators)
        self.logger.debug(f"Registered new locator: {element_name}")

    @property
    def health_records(self) -> List[LocatorHealth]:
        return list(self._health_records)

    def get_health_report(self) -> str:
        """
        Generate locator health report.

        Lists elements that needed a fallback (maintenance candidates).
        """
        if not self._fallback_used:
            return "All elements used primary locators. No maintenance needed."

        report_lines = [
            "Locator Health Report - Fallbacks Used:",
            "",
        ]
        for element_name, health in self._fallback_used.items():
            report_lines.extend([
                f"  [{element_name}]",
                f"    Failed primary: {health.primary_selector}",
                f"    Used: {health.fallback_name} -> {health.fallback_selector}",
                "",
            ])
        return "\n".join(report_lines)


__all__ = [
    "ElementNotFoundError",
    "LocatorHealth",
    "SmartLocator",
    "resolve_first_matching",
    "check_visibility",
    "validate_form_fields",
]

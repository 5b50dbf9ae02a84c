"""
================================================================================
Base Page Object
================================================================================

Foundation class for Page Object Model implementation.

Provides:
    - Navigation relative to the configured base URL
    - Named element interaction through SmartLocator + ActionExecutor
    - Tolerant load-state waits (timeouts are recorded, not raised)
    - Screenshot and failure capture utilities
    - Strict/tolerant handling of flow outcomes

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

import allure
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Dialog, Locator, Page

from .artifacts import ensure_directory, screenshot_filename
from .config_loader import UIConfig
from .element_actions import ActionExecutor, ActionOutcome
from .errors import AssertionFailure, DiagnosticsLog, InteractionError, TransientUIError
from .log_config import SupportsLogging, get_logger
from .probe import Probe, text_contains
from .smart_locator import SmartLocator


class BasePage:
    """
    Base class for all page objects.

    Usage:
        class LoginPage(BasePage):
            URL_PATH = "/login"

            async def login(self, username: str, password: str):
                await self.fill("username_input", username)
                await self.fill("password_input", password)
                await self.click("login_button")
    """

    # Override in subclasses
    URL_PATH: str = "/"
    PAGE_TITLE: str = ""

    def __init__(
        self,
        page: Page,
        config: Optional[UIConfig] = None,
        diagnostics: Optional[DiagnosticsLog] = None,
        logger: Optional[SupportsLogging] = None,
    ):
        """
        Initialize page object.

        Args:
            page: Playwright Page object
            config: Resolved UI configuration
            diagnostics: Shared per-test diagnostics log
            logger: Logger with debug/info/warning/error
        """
        self.page = page
        self.config = config or UIConfig()
        self.base_url = self.config.base_url.rstrip("/")
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticsLog()
        self.logger = logger or get_logger(type(self).__name__)
        self.prober = Probe(logger=self.logger)
        self.smart = SmartLocator(page, prober=self.prober, logger=self.logger)
        self.actions = ActionExecutor(
            page,
            default_timeout=self.config.timeout_ms,
            max_attempts=self.config.retries,
            diagnostics=self.diagnostics,
            prober=self.prober,
            logger=self.logger,
        )

    @property
    def url(self) -> str:
        """Full URL of this page."""
        return f"{self.base_url}{self.URL_PATH}"

    def _locator(self, target: Union[str, Locator]) -> Locator:
        if isinstance(target, str):
            return self.page.locator(target)
        return target

    def _record(self, error: Exception, description: str) -> None:
        self.diagnostics.record(error, description)
        self.logger.warning(f"{description}: {str(error)[:150]}")

    # =========================================================================
    # Navigation
    # =========================================================================

    async def navigate(
        self,
        path: Optional[str] = None,
        wait_until: str = "domcontentloaded",
        timeout: Optional[int] = None,
    ) -> None:
        """
        Navigate to this page (or another path on the same origin).

        Raises:
            playwright Error when navigation itself fails
        """
        target = f"{self.base_url}{path}" if path is not None else self.url
        timeout = self.config.navigation_timeout_ms if timeout is None else timeout
        with allure.step(f"Navigate to {target}"):
            await self.page.goto(target, wait_until=wait_until, timeout=timeout)
            self.logger.debug(f"Navigated to: {target}")

    async def wait_for_page_load(self, state: str = "domcontentloaded", timeout: int = 5000) -> bool:
        """Wait for a load state; a timeout is recorded and reported as False."""
        try:
            await self.page.wait_for_load_state(state, timeout=timeout)
            self.logger.debug(f"Page reached {state}")
            return True
        except PlaywrightError as e:
            self._record(TransientUIError(f"Load state '{state}' not reached", cause=e), "wait_for_page_load")
            return False

    async def wait_for_network_idle(self, timeout: int = 5000) -> bool:
        return await self.wait_for_page_load("networkidle", timeout)

    async def pause(self, ms: int) -> None:
        """Fixed settle time for animations the page does not signal."""
        await self.page.wait_for_timeout(ms)

    # =========================================================================
    # Named Element Interactions
    # =========================================================================

    def element(self, element_name: str) -> Locator:
        """Primary locator of a named element."""
        return self.smart.candidates(element_name)[0]

    async def click(self, element_name: str, timeout: Optional[int] = None, **kwargs: Any) -> ActionOutcome:
        return await self.actions.click(
            self.smart.candidates(element_name), description=element_name, timeout=timeout, **kwargs
        )

    async def fill(self, element_name: str, value: str, timeout: Optional[int] = None) -> ActionOutcome:
        return await self.actions.fill(
            self.smart.candidates(element_name), value, description=element_name, timeout=timeout
        )

    async def is_visible(self, element_name: str, timeout: int = 2000) -> bool:
        return await self.smart.is_visible(element_name, timeout=timeout)

    # =========================================================================
    # Reads
    # =========================================================================

    async def get_element_text(self, target: Union[str, Locator], timeout: int = 3000) -> Optional[str]:
        """Text content of the first match, or None if unavailable."""
        locator = self._locator(target)
        try:
            text = await locator.first.text_content(timeout=timeout)
        except PlaywrightError as e:
            self._record(TransientUIError("Text not readable", cause=e), f"get_element_text {target}")
            return None
        self.logger.debug(f"Got text from {target}: {(text or '')[:50]}")
        return text

    async def has_text_content(self, target: Union[str, Locator], expected: str, timeout: int = 2000) -> bool:
        """Case-insensitive check that the element text contains `expected`."""
        found = await self.prober.run(
            text_contains(self._locator(target), expected), timeout, f"text '{expected}'"
        )
        self.logger.debug(f"Text check - Expected: '{expected}', Found: {found.found}")
        return found.found

    async def verify_element_count(self, target: Union[str, Locator], expected_count: int) -> bool:
        actual = await self._locator(target).count()
        self.logger.info(f"Expected: {expected_count}, Actual: {actual} for {target}")
        return actual == expected_count

    # =========================================================================
    # Page State Utilities
    # =========================================================================

    async def scroll_to(self, target: Union[str, Locator]) -> bool:
        try:
            await self._locator(target).first.scroll_into_view_if_needed(timeout=self.config.timeout_ms)
        except PlaywrightError as e:
            self._record(InteractionError("Scroll failed", cause=e), f"scroll_to {target}")
            return False
        return True

    async def log_page_info(self) -> None:
        try:
            title = await self.page.title()
        except PlaywrightError as e:
            self._record(TransientUIError("Title not readable", cause=e), "log_page_info")
            return
        self.logger.info(f"Page Info - Title: '{title}', URL: '{self.page.url}'")

    def handle_dialogs(self, accept: bool = True) -> None:
        """Accept (or dismiss) every JS dialog the page opens."""
        async def on_dialog(dialog: Dialog) -> None:
            self.logger.info(f"Dialog detected: {dialog.message}")
            if accept:
                await dialog.accept()
            else:
                await dialog.dismiss()

        self.page.on("dialog", on_dialog)

    async def is_page_ready(self) -> bool:
        """Document complete and no loading indicators present."""
        try:
            ready = await self.page.evaluate(
                """() => document.readyState === 'complete'
                    && document.body !== null
                    && !document.querySelector('.loading, .spinner, [class*="loading"]')"""
            )
        except PlaywrightError as e:
            self._record(TransientUIError("Readiness check failed", cause=e), "is_page_ready")
            return False
        self.logger.debug(f"Page ready: {ready}")
        return bool(ready)

    async def quick_stability_check(self) -> bool:
        await self.wait_for_page_load("domcontentloaded")
        await self.pause(200)
        return await self.is_page_ready()

    # =========================================================================
    # Outcomes
    # =========================================================================

    def finish_flow(self, outcome: ActionOutcome) -> ActionOutcome:
        """
        Apply the strict/tolerant policy to a completed flow.

        Tolerant (default): log and return the outcome.
        Strict (`strict_crud`): a failed flow raises AssertionFailure.
        """
        if outcome.succeeded:
            self.logger.info(f"{outcome.description} completed")
            return outcome
        if self.config.strict_crud:
            raise AssertionFailure(f"{outcome.description} did not complete: {outcome.last_error}")
        self.logger.warning(f"{outcome.description} had issues, continuing: {outcome.last_error}")
        return outcome

    # =========================================================================
    # Screenshot and Debug Utilities
    # =========================================================================

    async def screenshot(
        self,
        name: str,
        full_page: bool = True,
        attach_to_allure: bool = True,
    ) -> Optional[Path]:
        """
        Save `{name}-{timestamp}.png` under the screenshot directory.

        Returns:
            Path to the file, or None when capture failed
        """
        filepath = ensure_directory(self.config.screenshot_dir) / screenshot_filename(name)
        try:
            image = await self.page.screenshot(path=str(filepath), full_page=full_page)
        except PlaywrightError as e:
            self._record(InteractionError("Screenshot failed", cause=e), f"screenshot {name}")
            return None

        if attach_to_allure:
            allure.attach(image, name=name, attachment_type=allure.attachment_type.PNG)
        self.logger.info(f"Screenshot saved: {filepath}")
        return filepath

    async def capture_failure(self, test_name: str) -> None:
        """Screenshot, current URL and diagnostics for a failed test."""
        with allure.step("Capture failure details"):
            await self.screenshot(f"failure-{test_name}")
            allure.attach(self.page.url, name="Current URL", attachment_type=allure.attachment_type.TEXT)
            self.diagnostics.attach_to_allure()

    def get_locator_health_report(self) -> str:
        return self.smart.get_health_report()


__all__ = [
    "BasePage",
    "PageBase",
]

# Alias kept for page objects that prefer PageBase naming
PageBase = BasePage

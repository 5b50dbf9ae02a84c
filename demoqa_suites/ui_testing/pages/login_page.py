"""
================================================================================
Login Page Object (Async / Playwright)
================================================================================

DemoQA Book Store login page (`/login`).

Design goals:
  - Named elements resolved through SmartLocator (primary + fallbacks)
  - Non-throwing actions; failures land in the page's DiagnosticsLog
  - Post-submit wait is condition based (left /login, or an error appeared)

================================================================================
"""

from __future__ import annotations

from typing import Optional

import allure
from playwright.async_api import Error as PlaywrightError

from demoqa_suites.ui_testing.framework.element_actions import ActionOutcome
from demoqa_suites.ui_testing.framework.errors import AssertionFailure, TransientUIError
from demoqa_suites.ui_testing.framework.page_base import PageBase
from demoqa_suites.ui_testing.framework.smart_locator import check_visibility


class LoginPage(PageBase):
    """Login page object (async)."""

    URL_PATH = "/login"
    PAGE_TITLE = "Login"

    # Signs that a login went through
    SUCCESS_INDICATORS = {
        "primary": "text=Profile",
        "fallback_1": "#userName-value",
        "fallback_2": ".main-header",
        "fallback_3": "text=Book Store Application",
        "fallback_4": "text=Log out",
    }

    @allure.step("Open login page")
    async def navigate_to_login(self) -> bool:
        """
        Open /login and wait for the form.

        On failure, go through the home page once and try again.

        Raises:
            AssertionFailure: The form is still missing after the second attempt
        """
        self.logger.info("Navigating to login page...")
        try:
            await self.navigate(timeout=30000)
            if await self.verify_form_displayed(timeout=10000):
                self.logger.info("Login page loaded successfully")
                return True
            self._record(TransientUIError("Login form not visible"), "navigate_to_login")
        except PlaywrightError as e:
            self._record(TransientUIError("Login page failed to load", cause=e), "navigate_to_login")

        await self.navigate("/")
        await self.pause(2000)
        await self.navigate()

        if not await self.is_visible("username_input", timeout=5000):
            raise AssertionFailure("Login page did not load on second attempt")
        self.logger.info("Login page loaded on second attempt")
        return True

    async def verify_form_displayed(self, timeout: int = 2000) -> bool:
        """Username, password and login button all visible."""
        visibility = await check_visibility(
            {
                "username": self.element("username_input"),
                "password": self.element("password_input"),
                "login": self.element("login_button"),
            },
            timeout_ms=timeout,
            prober=self.prober,
            logger=self.logger,
        )
        return all(visibility.values())

    @allure.step("Login (username={username})")
    async def login(self, username: str, password: str, settle_timeout: int = 3000) -> ActionOutcome:
        """
        Fill and submit the login form.

        Waits up to `settle_timeout` for the page to react (URL leaves /login
        or an error shows). Returns the merged outcome of the form steps.
        """
        self.logger.info(f"Attempting login with username: {username}")

        steps = [
            await self.fill("username_input", username),
            await self.fill("password_input", password),
            await self.click("login_button"),
        ]
        await self.prober.run(self._login_settled, settle_timeout, "login settled")

        return self.finish_flow(ActionOutcome.merge(steps, f"Login as {username}"))

    async def _login_settled(self) -> bool:
        if "/login" not in (self.page.url or ""):
            return True
        return await self.element("login_error").first.is_visible()

    @allure.step("Verify login error")
    async def verify_login_error(self) -> bool:
        """
        Look for a login error message, then fall back to "still on /login".
        """
        self.logger.info("Checking for login error messages...")
        error_locator = await self.smart.find("login_error", timeout=3000)
        if error_locator is not None:
            error_text = await self.get_element_text(error_locator)
            self.logger.info(f"Error found: {error_text}")
            return True

        self.logger.info("No specific error messages found - checking URL")
        if "/login" in (self.page.url or ""):
            self.logger.info("Still on login page - likely invalid credentials")
            return True
        return False

    async def is_logged_in(self) -> bool:
        """URL heuristics first, then any visible success indicator."""
        current_url = self.page.url or ""
        self.logger.info(f"Checking login status, current URL: {current_url}")

        if "/profile" in current_url or "/books" in current_url or "/login" not in current_url:
            self.logger.info("Redirected away from login page - likely successful")
            return True

        indicator = await self.smart.find(
            self.SUCCESS_INDICATORS, timeout=3000, element_name="login_success"
        )
        if indicator is not None:
            self.logger.info("Success indicator found")
            return True

        self.logger.info("No success indicators found")
        return False

    async def current_username(self) -> Optional[str]:
        return await self.get_element_text("#userName-value")

"""
================================================================================
Dashboard Page Object (Async / Playwright)
================================================================================

DemoQA Book Store profile page (`/profile`), reached after login.

Highlights:
  - Readiness is a race between three independent markers
  - Logout is tolerant: a missed redirect is recorded, not raised

================================================================================
"""

from __future__ import annotations

from typing import Dict, Optional

import allure
from playwright.async_api import Error as PlaywrightError

from demoqa_suites.ui_testing.framework.element_actions import ActionOutcome
from demoqa_suites.ui_testing.framework.errors import TransientUIError
from demoqa_suites.ui_testing.framework.page_base import PageBase
from demoqa_suites.ui_testing.framework.smart_locator import (
    check_visibility,
    resolve_first_matching,
)


class DashboardPage(PageBase):
    """Dashboard (profile) page object (async)."""

    URL_PATH = "/profile"
    PAGE_TITLE = "Profile"

    @allure.step("Wait for dashboard")
    async def wait_for_dashboard_load(self, timeout: int = 10000) -> bool:
        """True once the profile link, main header or navigation menu shows."""
        self.logger.info("Waiting for dashboard to load...")
        marker = await resolve_first_matching(
            [
                self.element("profile_link"),
                self.element("main_header"),
                self.element("navigation_menu"),
            ],
            timeout,
            prober=self.prober,
            logger=self.logger,
        )
        if marker is None:
            self._record(
                TransientUIError(f"No dashboard marker within {timeout}ms"), "wait_for_dashboard_load"
            )
            return False
        self.logger.info("Dashboard loaded successfully")
        return True

    async def get_user_info(self) -> Optional[str]:
        return await self.get_element_text(self.element("user_name_value"))

    @allure.step("Logout")
    async def logout(self) -> ActionOutcome:
        """Click "Log out" and wait briefly for the login page."""
        self.logger.info("Logging out...")
        outcome = await self.click("logout_button")
        if not outcome:
            return self.finish_flow(outcome)

        try:
            await self.page.wait_for_url("**/login", timeout=5000)
        except PlaywrightError as e:
            error = TransientUIError("Logout redirect not detected", cause=e)
            self._record(error, "logout")
            return self.finish_flow(ActionOutcome.failure(error, description="Logout"))

        self.logger.info("Logout successful")
        return ActionOutcome.success(description="Logout")

    async def verify_dashboard_elements(self) -> Dict[str, bool]:
        """Visibility of profile link, navigation menu and page body."""
        self.logger.info("Verifying dashboard elements...")
        checks = await check_visibility(
            {
                "profile_visible": self.element("profile_link"),
                "navigation_visible": self.element("navigation_menu"),
                "page_loaded": self.page.locator("body"),
            },
            timeout_ms=1000,
            prober=self.prober,
            logger=self.logger,
        )
        self.logger.info(f"Dashboard verification results: {checks}")
        return checks

"""
================================================================================
Login Feature UI Tests (Async / Playwright)
================================================================================

DemoQA Book Store login against the live site.

Note:
  The demo site does not guarantee that the configured account exists.
  A valid-credential run that stays on /login is accepted as long as the
  page is still DemoQA; the flow itself must not crash.

================================================================================
"""

import allure
import pytest

from demoqa_suites.ui_testing.pages.dashboard_page import DashboardPage
from demoqa_suites.ui_testing.pages.login_page import LoginPage


pytestmark = [pytest.mark.e2e, pytest.mark.login]


@allure.epic("UI Testing")
@allure.feature("Authentication")
class TestLogin:
    """Login UI test suite (async)."""

    @allure.story("Happy Path")
    @allure.title("Login with valid credentials")
    @allure.severity(allure.severity_level.BLOCKER)
    @pytest.mark.P0
    @pytest.mark.smoke
    @pytest.mark.asyncio
    async def test_login_with_valid_credentials(
        self, login_page: LoginPage, dashboard_page: DashboardPage, credentials
    ):
        """Login and, when the account exists, reach the profile page."""
        with allure.step("Open login page"):
            await login_page.navigate_to_login()

        with allure.step("Login"):
            await login_page.login(credentials["username"], credentials["password"])

        with allure.step("Verify result"):
            if await login_page.is_logged_in():
                await dashboard_page.wait_for_dashboard_load()
                await dashboard_page.screenshot("successful-login")
                assert "/login" not in login_page.page.url
            else:
                await login_page.screenshot("login-attempt-result")
                assert "demoqa.com" in login_page.page.url

    @allure.story("Negative Path")
    @allure.title("Invalid login is handled gracefully")
    @allure.severity(allure.severity_level.CRITICAL)
    @pytest.mark.P0
    @pytest.mark.asyncio
    async def test_invalid_login_is_handled(self, login_page: LoginPage):
        """Wrong credentials show an error or keep the user on /login."""
        await login_page.navigate_to_login()
        await login_page.login("invalid_user", "invalid_pass")

        has_error = await login_page.verify_login_error()
        if not has_error:
            assert "/login" in login_page.page.url
        await login_page.screenshot("invalid-login-result")

    @allure.story("Navigation")
    @allure.title("Login page opens with its form")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P1
    @pytest.mark.asyncio
    async def test_navigate_to_login_page(self, login_page: LoginPage):
        await login_page.navigate_to_login()

        assert "/login" in login_page.page.url
        assert await login_page.verify_form_displayed(timeout=5000)
        await login_page.screenshot("login-page-loaded")

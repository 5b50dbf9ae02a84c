"""
================================================================================
UI Testing Pytest Configuration
================================================================================

Fixtures for browser management, page objects and test data, plus failure
artifacts.

Key Features:
- One browser and traced context per test (isolation, no loop sharing)
- Page Object fixtures sharing a per-test DiagnosticsLog
- On failure: screenshot, Playwright trace and diagnostics in Allure

================================================================================
"""

import os
from typing import AsyncGenerator

import allure
import pytest
from playwright.async_api import BrowserContext, Page

from demoqa_suites.ui_testing.framework.artifacts import safe_test_name
from demoqa_suites.ui_testing.framework.browser_manager import BrowserManager
from demoqa_suites.ui_testing.framework.config_loader import ConfigLoader, UIConfig, load_ui_config
from demoqa_suites.ui_testing.framework.data_factory import UserDataFactory
from demoqa_suites.ui_testing.framework.errors import DiagnosticsLog
from demoqa_suites.ui_testing.framework.log_config import get_logger, init_logger
from demoqa_suites.ui_testing.framework.page_base import BasePage
from demoqa_suites.ui_testing.pages.dashboard_page import DashboardPage
from demoqa_suites.ui_testing.pages.login_page import LoginPage
from demoqa_suites.ui_testing.pages.web_tables_page import WebTablesPage


init_logger(os.getenv("LOG_LEVEL") or ConfigLoader().get("logging.level", "INFO"))
logger = get_logger("ui_tests")


# ================================================================================
# Configuration Fixtures
# ================================================================================

@pytest.fixture(scope="session")
def ui_config() -> UIConfig:
    """Resolved UI configuration (YAML + environment)."""
    return load_ui_config()


@pytest.fixture
def diagnostics() -> DiagnosticsLog:
    """Per-test collector of recovered UI errors."""
    return DiagnosticsLog()


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest.fixture
async def browser_manager(ui_config: UIConfig) -> AsyncGenerator[BrowserManager, None]:
    """
    Function-scoped browser manager.

    The browser lives on the test's own event loop.
    """
    manager = BrowserManager(ui_config)
    await manager.start()
    yield manager
    await manager.close()


@pytest.fixture
async def context(
    request,
    browser_manager: BrowserManager,
    diagnostics: DiagnosticsLog,
) -> AsyncGenerator[BrowserContext, None]:
    """
    Traced browser context.

    The trace is kept only when the test body failed.
    """
    context = await browser_manager.new_context(trace=True)
    yield context

    report = getattr(request.node, "rep_call", None)
    failed = report is not None and report.failed
    name = safe_test_name(request.node.nodeid)
    trace_path = await browser_manager.finish_trace(context, name, keep=failed)
    if trace_path is not None:
        allure.attach.file(str(trace_path), name="Playwright trace", extension="zip")
    diagnostics.attach_to_allure()


@pytest.fixture
async def page(request, context: BrowserContext, ui_config: UIConfig) -> AsyncGenerator[Page, None]:
    """
    Function-scoped page fixture.

    Takes a full-page screenshot when the test body failed.
    """
    page = await context.new_page()
    yield page

    report = getattr(request.node, "rep_call", None)
    if report is not None and report.failed:
        await BasePage(page, ui_config).screenshot(f"failure-{safe_test_name(request.node.nodeid)}")
        allure.attach(
            str(report.longrepr)[:4000],
            name="Error message",
            attachment_type=allure.attachment_type.TEXT,
        )
        logger.warning(f"Test failed, artifacts captured: {request.node.nodeid}")
    await page.close()


# ================================================================================
# Page Object Fixtures
# ================================================================================

@pytest.fixture
def login_page(page: Page, ui_config: UIConfig, diagnostics: DiagnosticsLog) -> LoginPage:
    return LoginPage(page, ui_config, diagnostics)


@pytest.fixture
def dashboard_page(page: Page, ui_config: UIConfig, diagnostics: DiagnosticsLog) -> DashboardPage:
    return DashboardPage(page, ui_config, diagnostics)


@pytest.fixture
def web_tables_page(page: Page, ui_config: UIConfig, diagnostics: DiagnosticsLog) -> WebTablesPage:
    return WebTablesPage(page, ui_config, diagnostics)


# ================================================================================
# Test Data Fixtures
# ================================================================================

@pytest.fixture
def user_factory(ui_config: UIConfig) -> UserDataFactory:
    """Data factory; deterministic when `seed` is configured."""
    return UserDataFactory(seed=ui_config.seed)


@pytest.fixture
def credentials(user_factory: UserDataFactory):
    return user_factory.login_credentials()


# ================================================================================
# Test Lifecycle Hooks
# ================================================================================

@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Expose each phase's report on the item (rep_setup / rep_call / rep_teardown)."""
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)

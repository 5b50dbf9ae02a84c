"""
================================================================================
Browser Manager
================================================================================

Browser lifecycle management for UI automation.

Features:
    - Browser launch driven by UIConfig (browser type, headless, slow_mo)
    - Context isolation per test
    - Playwright tracing, kept only for failed tests

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger
from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Playwright,
)

from .artifacts import ensure_directory, trace_filename
from .config_loader import UIConfig


class BrowserManager:
    """
    Manages browser instances and contexts for UI testing.

    Usage:
        async with BrowserManager(config) as manager:
            context = await manager.new_context(trace=True)
            page = await context.new_page()
            await page.goto("https://demoqa.com/webtables")
    """

    # Chromium flags that keep the demo site stable in CI containers
    CHROMIUM_ARGS: List[str] = [
        "--disable-web-security",
        "--disable-features=VizDisplayCompositor",
        "--disable-extensions",
        "--no-sandbox",
        "--disable-setuid-sandbox",
        "--disable-dev-shm-usage",
        "--disable-background-networking",
        "--disable-default-apps",
        "--disable-sync",
    ]

    DEFAULT_CONTEXT_OPTIONS: Dict[str, Any] = {
        "viewport": {"width": 1280, "height": 720},
        "ignore_https_errors": True,
    }

    def __init__(self, config: Optional[UIConfig] = None):
        """
        Initialize browser manager.

        Args:
            config: Resolved UI configuration (defaults if omitted)
        """
        self.config = config or UIConfig()

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._contexts: List[BrowserContext] = []

    async def __aenter__(self) -> "BrowserManager":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def launch_options(self) -> Dict[str, Any]:
        """Build launch options for the configured browser."""
        options: Dict[str, Any] = {
            "headless": self.config.headless,
            "slow_mo": self.config.slow_mo_ms,
        }
        if self.config.browser == "chromium":
            options["args"] = list(self.CHROMIUM_ARGS)
        return options

    async def start(self) -> None:
        """Start Playwright and launch browser."""
        self._playwright = await async_playwright().start()

        if self.config.browser == "firefox":
            browser_launcher = self._playwright.firefox
        elif self.config.browser == "webkit":
            browser_launcher = self._playwright.webkit
        else:
            browser_launcher = self._playwright.chromium

        self._browser = await browser_launcher.launch(**self.launch_options())
        logger.debug(
            f"Browser started: {self.config.browser} "
            f"(headless={self.config.headless}, slow_mo={self.config.slow_mo_ms}ms)"
        )

    async def close(self) -> None:
        """Close all contexts and browser."""
        for context in self._contexts:
            try:
                await context.close()
            except Exception as e:
                logger.debug(f"Context already closed: {e}")
        self._contexts.clear()

        if self._browser:
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

        logger.debug("Browser closed")

    async def new_context(self, trace: bool = False, **options: Any) -> BrowserContext:
        """
        Create an isolated browser context.

        Args:
            trace: Start Playwright tracing (screenshots + snapshots)
            **options: Additional context options
        """
        if not self._browser:
            raise RuntimeError("Browser not started. Call start() first.")

        context_options = {
            **self.DEFAULT_CONTEXT_OPTIONS,
            "base_url": self.config.base_url,
            **options,
        }
        context = await self._browser.new_context(**context_options)
        context.set_default_timeout(self.config.action_timeout_ms)
        context.set_default_navigation_timeout(self.config.navigation_timeout_ms)

        if trace:
            await context.tracing.start(screenshots=True, snapshots=True)
        self._contexts.append(context)
        return context

    async def new_page(self, context: Optional[BrowserContext] = None) -> Page:
        """Create a page in the given context, or in a fresh one."""
        if context is None:
            context = await self.new_context()
        return await context.new_page()

    async def finish_trace(
        self,
        context: BrowserContext,
        name: str,
        keep: bool,
    ) -> Optional[Path]:
        """
        Stop tracing on a context.

        Args:
            context: Context started with trace=True
            name: Base name for the trace file
            keep: Write the trace zip (failed test) or discard it

        Returns:
            Path of the written trace, or None
        """
        if not keep:
            await context.tracing.stop()
            return None

        trace_dir = ensure_directory(self.config.trace_dir)
        path = trace_dir / trace_filename(name)
        await context.tracing.stop(path=str(path))
        logger.info(f"Trace saved: {path}")
        return path

    @property
    def browser(self) -> Optional[Browser]:
        return self._browser


__all__ = [
    "BrowserManager",
]

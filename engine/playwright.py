"""Playwright Automation Engine Implementation

Implements AbstractAutomationEngine using Playwright's asyncio API.
This object is the default resource bound to every instruction.

Dependency: playwright
Setup: playwright install chromium
"""

import logging
from typing import Any, Callable, Optional, Tuple

from .base import AbstractAutomationEngine


class PlaywrightEngine(AbstractAutomationEngine):
    """Playwright implementation of the automation engine."""

    def __init__(self, playwright_factory: Optional[Callable[[], Any]] = None):
        super().__init__()
        self._playwright_factory = playwright_factory
        self._manager = None
        self._playwright = None

    async def _ensure_playwright(self):
        """Lazily start Playwright."""
        if self._playwright is None:
            factory = self._playwright_factory
            if factory is None:
                try:
                    from playwright.async_api import async_playwright
                except ImportError:
                    raise RuntimeError(
                        "Playwright not installed. Run: pip install playwright && playwright install chromium"
                    )
                factory = async_playwright
            self._manager = factory()
            self._playwright = await self._manager.start()
            logging.info("Playwright engine initialized")
        return self._playwright

    def _browser_type(self, playwright: Any, browser_type: str) -> Tuple[Any, Optional[str]]:
        """Map a browser name to (Playwright BrowserType, channel)."""
        browser_map = {
            "chromium": playwright.chromium,
            "chrome": playwright.chromium,
            "edge": playwright.chromium,
            "firefox": playwright.firefox,
        }

        launcher = browser_map.get(browser_type)
        if not launcher:
            raise ValueError(f"Unknown browser type: {browser_type}")

        channel = None
        if browser_type == "chrome":
            channel = "chrome"
        elif browser_type == "edge":
            channel = "msedge"
        return launcher, channel

    async def launch(self, browser_type: str = "chromium", **options: Any) -> Any:
        """Launch a browser with one prepared context holding a blank page."""
        playwright = await self._ensure_playwright()
        launcher, channel = self._browser_type(playwright, browser_type)
        if channel:
            options.setdefault("channel", channel)

        try:
            browser = await launcher.launch(**options)
        except Exception as e:
            logging.error(f"Failed to launch {browser_type}: {e}")
            raise RuntimeError(f"Browser launch failed: {e}")

        await self._prepare_browser(browser)
        context = await browser.new_context()
        await self._prepare_context(context)
        await context.new_page()

        logging.info(f"Launched {browser_type} (headless={options.get('headless', True)})")
        return browser

    async def connect(self, endpoint: str, browser_type: str = "chromium", **options: Any) -> Any:
        """Attach to a running Chromium over CDP and prepare its contexts."""
        playwright = await self._ensure_playwright()
        launcher, _ = self._browser_type(playwright, browser_type)

        try:
            browser = await launcher.connect_over_cdp(endpoint, **options)
        except Exception as e:
            logging.error(f"Failed to connect to {endpoint}: {e}")
            raise RuntimeError(f"Browser connect failed: {e}")

        await self._prepare_browser(browser)
        for context in browser.contexts:
            await self._prepare_context(context)

        logging.info(f"Connected to browser at {endpoint}")
        return browser

    async def new_page(self, browser: Any) -> Any:
        """Open a page in the browser's first context (prepared if new)."""
        if browser.contexts:
            context = browser.contexts[0]
        else:
            context = await browser.new_context()
            await self._prepare_context(context)
        return await context.new_page()

    async def solve_recaptchas(self, page: Any) -> Any:
        """Solve the reCAPTCHAs on a page with the recaptcha plugin in use."""
        plugin = self.get_plugin("recaptcha")
        if plugin is None:
            raise RuntimeError("No recaptcha plugin in use")
        return await plugin.solve_recaptchas(page)

    async def _prepare_browser(self, browser: Any) -> None:
        for plugin in self.plugins:
            await plugin.on_browser(browser)

    async def _prepare_context(self, context: Any) -> None:
        for plugin in self.plugins:
            await plugin.on_context(context)
        context.on("page", self._on_page)

    async def _on_page(self, page: Any) -> None:
        for plugin in self.plugins:
            try:
                await plugin.on_page(page)
            except Exception as e:
                logging.warning(f"Plugin '{plugin.name}' failed on new page: {e}")

    async def shutdown(self) -> None:
        """Gracefully stop Playwright.

        CRITICAL: async_playwright().start() MUST be matched with .stop().
        """
        if self._playwright:
            try:
                await self._playwright.stop()
                logging.info("Playwright engine stopped")
            except Exception as e:
                logging.warning(f"Error stopping Playwright: {e}")
            finally:
                self._playwright = None
                self._manager = None

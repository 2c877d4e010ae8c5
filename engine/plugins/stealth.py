"""Stealth plugin - identity masking for prepared browser contexts

Dependency: playwright-stealth
"""

import logging
from typing import Any

from playwright_stealth import Stealth

from engine.base import EnginePlugin


class StealthPlugin(EnginePlugin):
    """Applies playwright-stealth evasions to every prepared context.

    The browser-level hook is disabled unless `apply_on_browser` is set:
    evasions are installed per context, which covers all of its pages.
    """

    name = "stealth"

    def __init__(self, apply_on_browser: bool = False, **stealth_options: Any):
        self.apply_on_browser = apply_on_browser
        self.stealth = Stealth(**stealth_options)

    async def on_browser(self, browser: Any) -> None:
        if not self.apply_on_browser:
            return
        for context in browser.contexts:
            await self.stealth.apply_stealth_async(context)

    async def on_context(self, context: Any) -> None:
        await self.stealth.apply_stealth_async(context)
        logging.debug("Stealth evasions applied to context")

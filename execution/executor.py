"""Instruction Executor - runs one remote instruction against the engine

NO retries. NO transport. Just execution, classification and cleanup tracking.

Per instruction, strictly in order:
1. Prepare the engine (stealth + reCAPTCHA plugins, credentials read fresh)
2. Bind the engine as the instruction's default resource
3. Run the instruction (recovered or fatal failure)
4. Register browsers, set up their pages, wire console relaying
5. Report the value
"""

import inspect
import logging
from typing import Any, Callable, Dict, Optional

from core.config import DelegateConfig, DelegateSettings, RecaptchaSettings
from core.console_relay import ConsoleRelay
from core.resource_kinds import BROWSER, PAGE, is_instance_of
from core.resource_registry import ResourceRegistry
from engine.base import AbstractAutomationEngine
from engine.plugins import RecaptchaPlugin, StealthPlugin
from execution.instruction import Instruction
from execution.page_setup import configure_page, list_pages


async def _invoke(callback: Callable[[Any], Any], argument: Any) -> Any:
    result = callback(argument)
    if inspect.isawaitable(result):
        result = await result
    return result


class InstructionExecutor:
    """Executes instructions and tracks the browsers they produce"""

    def __init__(
        self,
        engine: AbstractAutomationEngine,
        registry: ResourceRegistry,
        console_relay: Optional[ConsoleRelay] = None,
        options: Optional[Dict[str, Any]] = None,
        settings: Optional[DelegateSettings] = None,
    ):
        self.engine = engine
        self.registry = registry
        self.console_relay = console_relay or ConsoleRelay()
        self.settings = settings or DelegateConfig.get().with_options(options)
        logging.info(
            f"InstructionExecutor initialized (log_browser_console={self.settings.log_browser_console})"
        )

    @property
    def logs_browser_console(self) -> bool:
        return self.settings.log_browser_console is True

    def prepare_engine(self) -> None:
        """Configure the engine's plugins for this call.

        Re-applied on every instruction: credentials may change between calls.
        """
        resolver = RecaptchaSettings.from_env()
        self.engine.use(StealthPlugin(apply_on_browser=False))
        self.engine.use(
            RecaptchaPlugin(
                provider_id=resolver.provider_id,
                token=resolver.token,
                visual_feedback=self.settings.recaptcha_visual_feedback,
            )
        )

    async def execute(
        self,
        instruction: Instruction,
        on_success: Callable[[Any], Any],
        on_failure: Callable[[BaseException], Any],
    ) -> None:
        """Execute one instruction and report through exactly one callback.

        Failures of instructions that don't catch errors propagate to the
        caller and neither callback fires.
        """
        self.prepare_engine()
        instruction.set_default_resource(self.engine)

        try:
            value = await instruction.execute()
        except Exception as error:
            if instruction.should_catch_errors():
                logging.info(f"Instruction failed (reported to caller): {error}")
                await _invoke(on_failure, error)
                return
            raise

        if is_instance_of(value, BROWSER):
            await self._adopt_browser(value)

        if self.logs_browser_console and is_instance_of(value, PAGE):
            self._attach_console(value)

        await _invoke(on_success, value)

    async def _adopt_browser(self, browser: Any) -> None:
        """Track a browser and set up the pages it has right now.

        Pages opened later are neither configured nor wired. A page that
        fails setup (e.g. closed meanwhile) is logged and skipped; the
        instruction still succeeds.
        """
        self.registry.add(browser)

        for page in list_pages(browser):
            try:
                await configure_page(page)
            except Exception as e:
                logging.warning(f"Page setup failed, skipping page: {e}")

        if self.logs_browser_console:
            for page in list_pages(browser):
                self._attach_console(page)

    def _attach_console(self, page: Any) -> None:
        try:
            self.console_relay.attach(page)
        except Exception as e:
            logging.warning(f"Failed to attach console relay: {e}")

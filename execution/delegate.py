"""Connection delegates - the seam between the connection layer and execution

The connection layer decodes each request into an Instruction and calls
handle_instruction() once per request. The delegate answers through exactly
one of the two handlers, or lets a fatal failure propagate.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

from core.config import DelegateConfig
from core.console_relay import ConsoleRelay
from core.resource_registry import ResourceRegistry
from core.signal_guard import SignalGuard
from engine.base import AbstractAutomationEngine
from engine.playwright import PlaywrightEngine
from execution.executor import InstructionExecutor
from execution.instruction import Instruction


class ConnectionDelegate(ABC):
    """Base class for request handlers of a connection"""

    def __init__(self, options: Optional[Dict[str, Any]] = None):
        self.options = dict(options or {})

    @abstractmethod
    async def handle_instruction(
        self,
        instruction: Instruction,
        response_handler: Callable[[Any], Any],
        error_handler: Callable[[BaseException], Any],
    ) -> None:
        raise NotImplementedError


class PlaywrightConnectionDelegate(ConnectionDelegate):
    """Handles the requests of a connection controlling Playwright.

    Owns the process-wide browser registry and installs the signal guard
    once, at construction.
    """

    def __init__(
        self,
        options: Optional[Dict[str, Any]] = None,
        engine: Optional[AbstractAutomationEngine] = None,
        install_signal_guard: bool = True,
    ):
        super().__init__(options)

        self.browsers = ResourceRegistry()
        self.signal_guard = SignalGuard(self.browsers)
        if install_signal_guard:
            self.signal_guard.install()

        self.engine = engine or PlaywrightEngine()
        self.executor = InstructionExecutor(
            engine=self.engine,
            registry=self.browsers,
            console_relay=ConsoleRelay(),
            settings=DelegateConfig.get().with_options(self.options),
        )
        logging.info("PlaywrightConnectionDelegate ready")

    async def handle_instruction(
        self,
        instruction: Instruction,
        response_handler: Callable[[Any], Any],
        error_handler: Callable[[BaseException], Any],
    ) -> None:
        await self.executor.execute(instruction, response_handler, error_handler)

    def close_all_browsers(self) -> int:
        """Request close of every browser created through this delegate."""
        return self.browsers.close_all()

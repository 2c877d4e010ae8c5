"""Signal Guard - drains the ResourceRegistry on termination signals

Browsers launched by instructions are not reliably torn down by the engine
when the process dies, so every termination signal closes them first.

RESPONSIBILITY:
- Register SIGINT / SIGTERM / SIGHUP handlers once
- Request close of all tracked browsers, then exit

DOES NOT:
- Wait for browsers to finish closing
- Use distinct exit codes per signal
"""

import asyncio
import logging
import signal
import sys
from typing import Any, Callable, Optional

from core.resource_registry import ResourceRegistry


TERMINATION_SIGNALS = ("SIGINT", "SIGTERM", "SIGHUP")


def _exit_process() -> None:
    sys.exit(0)


class SignalGuard:
    """Closes every tracked browser before the process terminates.

    Usage:
        guard = SignalGuard(registry)
        guard.install()
    """

    def __init__(
        self,
        registry: ResourceRegistry,
        exit: Callable[[], Any] = _exit_process,
    ):
        self.registry = registry
        self._exit = exit
        self._installed = False
        self._draining = False

    @property
    def installed(self) -> bool:
        return self._installed

    def install(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        """Register handlers for all termination signals available here.

        With an event loop, handlers run inside the loop so the close
        requests can be sent before exiting.
        """
        if self._installed:
            return

        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                loop = None

        for name in TERMINATION_SIGNALS:
            signum = getattr(signal, name, None)
            if signum is None:
                continue
            if loop is not None:
                try:
                    loop.add_signal_handler(signum, self.handle_signal, signum)
                    continue
                except NotImplementedError:
                    pass
            signal.signal(signum, self._handle_native)

        self._installed = True
        logging.info("Signal guard installed")

    def _handle_native(self, signum: int, frame: Any) -> None:
        self.handle_signal(signum)

    def handle_signal(self, signum: int) -> None:
        """Drain the registry and terminate. Re-entrant calls are ignored."""
        if self._draining:
            return
        self._draining = True

        logging.info(f"Received signal {signum}, closing tracked browsers")
        self.registry.close_all()

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is not None:
            # Queued behind the close tasks so each sends its close request first
            loop.call_soon(self._exit)
        else:
            self._exit()

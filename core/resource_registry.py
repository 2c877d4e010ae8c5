"""Resource Registry - Single Authority for Tracked Browsers

Mirrors the session manager pattern. Tracks every browser produced by an
executed instruction so it can be torn down when the process exits.

RESPONSIBILITY:
- Track browsers, unique by identity
- Invoke close on all of them at exit, on the loop each was added from

DOES NOT:
- Track pages (only observed as children of a browser)
- Wait for browsers to finish closing
- Forget browsers after closing (the process is exiting)

GUARDRAIL: Single-threaded use only. Mutated by the executor (add) and the
signal guard (close_all).
"""

import asyncio
import inspect
import logging
from typing import Any, Dict, Iterator, List, Optional


class ResourceRegistry:
    """Process-lifetime set of browser handles.

    Usage:
        registry = ResourceRegistry()
        registry.add(browser)
        registry.close_all()
    """

    def __init__(self):
        # id() keys: identity semantics regardless of the handle's __eq__
        self._browsers: Dict[int, Any] = {}
        self._loops: Dict[int, Optional[asyncio.AbstractEventLoop]] = {}
        self._pending: List[asyncio.Future] = []

    def add(self, browser: Any) -> None:
        """Track a browser. Adding the same object again has no effect."""
        key = id(browser)
        if key in self._browsers:
            return
        self._browsers[key] = browser
        self._loops[key] = _running_loop()
        logging.info(f"Tracking browser ({len(self._browsers)} tracked)")

    def __contains__(self, browser: Any) -> bool:
        return id(browser) in self._browsers

    def __len__(self) -> int:
        return len(self._browsers)

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._browsers.values()))

    def close_all(self) -> int:
        """Invoke close on every tracked browser (fire-and-forget).

        Coroutine results are scheduled on the running loop and not awaited.
        Without a running loop they are run to completion on the loop the
        browser was added from, when that loop is still open and idle.
        Otherwise a fresh loop is used; engine handles bound to a closed
        loop (Playwright's are) then fail to close and are only logged.

        Returns:
            Number of browsers whose close was invoked
        """
        count = 0
        for key, browser in list(self._browsers.items()):
            try:
                result = browser.close()
            except Exception as e:
                logging.warning(f"Error closing browser: {e}")
                continue
            count += 1
            if inspect.isawaitable(result):
                self._schedule(result, self._loops.get(key))

        logging.info(f"Close requested for {count} browser(s)")
        return count

    def _schedule(self, awaitable: Any, owner: Optional[asyncio.AbstractEventLoop] = None) -> None:
        loop = _running_loop()

        if loop is None:
            try:
                if owner is not None and not owner.is_closed() and not owner.is_running():
                    owner.run_until_complete(_await(awaitable))
                else:
                    asyncio.run(_await(awaitable))
            except Exception as e:
                logging.warning(f"Error closing browser: {e}")
            return

        future = asyncio.ensure_future(awaitable)
        future.add_done_callback(_log_close_failure)
        self._pending.append(future)


def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


async def _await(awaitable: Any) -> Any:
    return await awaitable


def _log_close_failure(future: asyncio.Future) -> None:
    if future.cancelled():
        return
    error = future.exception()
    if error is not None:
        logging.warning(f"Error closing browser: {error}")

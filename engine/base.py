"""Abstract Automation Engine Interface

The engine is the default resource instructions run against.
NOT an executor. NOT a registry.

RESPONSIBILITY:
- Define the engine surface instructions may use
- Define the plugin hooks engines call
- Allow backend swapping without executor changes

DOES NOT:
- Track browsers (ResourceRegistry's job)
- Configure pages for the delegate (page_setup's job)
- Decide which plugins to use (InstructionExecutor's job)
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List


class EnginePlugin:
    """Base class for engine plugins.

    Hooks are called by the engine; all default to no-ops.
    Plugins are identified by name: using a plugin replaces any previous
    plugin with the same name.
    """

    name: str = "plugin"

    async def on_browser(self, browser: Any) -> None:
        """Called once for each launched or connected browser."""

    async def on_context(self, context: Any) -> None:
        """Called for each browser context the engine prepares."""

    async def on_page(self, page: Any) -> None:
        """Called for each page opened in a prepared context."""


class AbstractAutomationEngine(ABC):
    """Interface for automation engines.

    Implementations:
    - PlaywrightEngine (playwright.py)

    All browser operations are coroutines.
    """

    def __init__(self):
        self._plugins: Dict[str, EnginePlugin] = {}

    def use(self, plugin: EnginePlugin) -> "AbstractAutomationEngine":
        """Register a plugin, replacing one with the same name."""
        self._plugins[plugin.name] = plugin
        return self

    @property
    def plugins(self) -> List[EnginePlugin]:
        return list(self._plugins.values())

    def get_plugin(self, name: str) -> EnginePlugin:
        return self._plugins.get(name)

    @abstractmethod
    async def launch(self, browser_type: str = "chromium", **options: Any) -> Any:
        """Launch a browser with one blank page and return it.

        Args:
            browser_type: chromium | chrome | edge | firefox
            **options: Passed to the backend's launch call

        Returns:
            Browser instance
        """
        raise NotImplementedError

    @abstractmethod
    async def connect(self, endpoint: str, **options: Any) -> Any:
        """Connect to an already running browser and return it."""
        raise NotImplementedError

    @abstractmethod
    async def shutdown(self) -> None:
        """Stop the backend."""
        raise NotImplementedError

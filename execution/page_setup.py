"""Page setup applied to every page of a newly observed browser

Fixed desktop viewport, scripts on, no navigation timeout, and a startup
script answering notification permission queries from Notification.permission.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List


@dataclass(frozen=True)
class Viewport:
    width: int = 1920
    height: int = 1080
    device_scale_factor: float = 1
    has_touch: bool = False
    is_landscape: bool = False
    is_mobile: bool = False

    def to_size(self) -> Dict[str, int]:
        return {"width": self.width, "height": self.height}

    def to_device_metrics(self) -> Dict[str, Any]:
        """CDP Emulation.setDeviceMetricsOverride payload."""
        if self.is_landscape:
            orientation = {"angle": 90, "type": "landscapePrimary"}
        else:
            orientation = {"angle": 0, "type": "portraitPrimary"}
        return {
            "width": self.width,
            "height": self.height,
            "deviceScaleFactor": self.device_scale_factor,
            "mobile": self.is_mobile,
            "screenOrientation": orientation,
        }


DEFAULT_VIEWPORT = Viewport()

# 0 disables the navigation timeout
NO_NAVIGATION_TIMEOUT = 0

NOTIFICATIONS_PERMISSION_SCRIPT = """
(() => {
  const originalQuery = window.navigator.permissions.query;
  window.navigator.permissions.query = (parameters) => (
    parameters.name === 'notifications'
      ? Promise.resolve({ state: Notification.permission })
      : originalQuery.call(window.navigator.permissions, parameters)
  );
})();
"""


def list_pages(browser: Any) -> List[Any]:
    """All currently open pages of a browser, across its contexts."""
    return [page for context in browser.contexts for page in context.pages]


async def configure_page(page: Any, viewport: Viewport = DEFAULT_VIEWPORT) -> None:
    """Apply the fixed page profile to one page."""
    await page.set_viewport_size(viewport.to_size())

    try:
        session = await page.context.new_cdp_session(page)
    except Exception as e:
        # CDP is Chromium only
        logging.info(f"Device emulation skipped, no CDP session: {e}")
        session = None

    if session is not None:
        try:
            await session.send("Emulation.setDeviceMetricsOverride", viewport.to_device_metrics())
            await session.send("Emulation.setTouchEmulationEnabled", {"enabled": viewport.has_touch})
            await session.send("Emulation.setScriptExecutionDisabled", {"value": False})
        except Exception as e:
            logging.warning(f"Device emulation failed: {e}")

    page.set_default_navigation_timeout(NO_NAVIGATION_TIMEOUT)
    await page.add_init_script(script=NOTIFICATIONS_PERMISSION_SCRIPT)

import asyncio
import logging

from execution.page_setup import (
    DEFAULT_VIEWPORT,
    NOTIFICATIONS_PERMISSION_SCRIPT,
    Viewport,
    configure_page,
    list_pages,
)
from fakes import Browser, BrowserContext


def test_default_viewport_profile():
    assert DEFAULT_VIEWPORT.to_size() == {"width": 1920, "height": 1080}
    assert DEFAULT_VIEWPORT.to_device_metrics() == {
        "width": 1920,
        "height": 1080,
        "deviceScaleFactor": 1,
        "mobile": False,
        "screenOrientation": {"angle": 0, "type": "portraitPrimary"},
    }


def test_landscape_orientation():
    metrics = Viewport(is_landscape=True).to_device_metrics()
    assert metrics["screenOrientation"] == {"angle": 90, "type": "landscapePrimary"}


def test_list_pages_spans_contexts():
    browser = Browser(contexts=[BrowserContext(pages=2), BrowserContext(pages=1)])
    pages = list_pages(browser)
    assert len(pages) == 3
    assert pages == browser.contexts[0].pages + browser.contexts[1].pages


def test_configure_page_applies_profile():
    page = BrowserContext(pages=1).pages[0]

    asyncio.run(configure_page(page))

    assert page.viewport == {"width": 1920, "height": 1080}
    assert page.navigation_timeout == 0
    assert page.init_scripts == [NOTIFICATIONS_PERMISSION_SCRIPT]
    assert page.cdp.sent == [
        ("Emulation.setDeviceMetricsOverride", DEFAULT_VIEWPORT.to_device_metrics()),
        ("Emulation.setTouchEmulationEnabled", {"enabled": False}),
        ("Emulation.setScriptExecutionDisabled", {"value": False}),
    ]


def test_configure_page_without_cdp(caplog):
    page = BrowserContext(pages=1, cdp=False).pages[0]

    with caplog.at_level(logging.INFO):
        asyncio.run(configure_page(page))

    assert page.viewport == {"width": 1920, "height": 1080}
    assert page.navigation_timeout == 0
    assert page.init_scripts == [NOTIFICATIONS_PERMISSION_SCRIPT]
    assert "Device emulation skipped" in caplog.text


def test_permissions_script_only_intercepts_notifications():
    assert "parameters.name === 'notifications'" in NOTIFICATIONS_PERMISSION_SCRIPT
    assert "Notification.permission" in NOTIFICATIONS_PERMISSION_SCRIPT
    assert "originalQuery.call(window.navigator.permissions, parameters)" in NOTIFICATIONS_PERMISSION_SCRIPT


class DetachedSession:
    async def send(self, method, params=None):
        raise RuntimeError("Target closed")


def test_cdp_failure_still_applies_remaining_setup(caplog):
    page = BrowserContext(pages=1).pages[0]
    page.cdp = DetachedSession()

    asyncio.run(configure_page(page))

    assert page.viewport == {"width": 1920, "height": 1080}
    assert page.navigation_timeout == 0
    assert page.init_scripts == [NOTIFICATIONS_PERMISSION_SCRIPT]
    assert "Device emulation failed: Target closed" in caplog.text


def test_permissions_script_passes_other_names_to_original_query():
    lines = [line.strip() for line in NOTIFICATIONS_PERMISSION_SCRIPT.strip().splitlines()]
    captured = lines.index("const originalQuery = window.navigator.permissions.query;")
    replaced = lines.index("window.navigator.permissions.query = (parameters) => (")

    assert captured < replaced
    assert lines[replaced + 1] == "parameters.name === 'notifications'"
    assert lines[replaced + 2] == "? Promise.resolve({ state: Notification.permission })"
    assert lines[replaced + 3] == ": originalQuery.call(window.navigator.permissions, parameters)"

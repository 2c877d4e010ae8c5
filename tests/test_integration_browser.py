"""Real Chromium checks. Skipped unless run against an installed browser."""

import asyncio
import logging

from execution.delegate import PlaywrightConnectionDelegate
from execution.instruction import Instruction


def test_launched_page_reports_notification_permission(caplog):
    delegate = PlaywrightConnectionDelegate(
        {"log_browser_console": True},
        install_signal_guard=False,
    )
    results = []

    async def scenario():
        await delegate.handle_instruction(
            Instruction(lambda engine: engine.launch(headless=True)),
            results.append,
            results.append,
        )
        page = results[0].contexts[0].pages[0]
        await page.goto("data:text/html,<title>ok</title>")
        state = await page.evaluate(
            "async () => [(await navigator.permissions.query({name: 'notifications'})).state, Notification.permission]"
        )
        # Pages opened later get no setup: their query is the unpatched one
        plain = await results[0].contexts[0].new_page()
        await plain.goto("data:text/html,<title>plain</title>")
        geolocation_query = "async () => (await navigator.permissions.query({name: 'geolocation'})).state"
        geolocation = (await page.evaluate(geolocation_query), await plain.evaluate(geolocation_query))
        await page.evaluate("() => console.log('hello %s', 'world')")
        await asyncio.sleep(0.2)
        await results[0].close()
        await delegate.engine.shutdown()
        return state, geolocation, page.viewport_size

    with caplog.at_level(logging.INFO):
        state, geolocation, viewport = asyncio.run(scenario())

    assert state[0] == state[1]
    assert geolocation[0] == geolocation[1]
    assert viewport == {"width": 1920, "height": 1080}
    assert "hello world" in [r.getMessage() for r in caplog.records if r.name == "Browser"]

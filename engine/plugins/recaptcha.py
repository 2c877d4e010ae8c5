"""reCAPTCHA plugin - detects and solves reCAPTCHA v2 widgets on a page

Visual feedback colors widgets: violet = detected, green = solved.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from engine.base import EnginePlugin
from .recaptcha_providers import BaseRecaptchaProvider, create_provider


FIND_RECAPTCHAS_SCRIPT = """
() => Array.from(document.querySelectorAll('[data-sitekey]'))
  .map((element, index) => {
    element.setAttribute('data-delegate-recaptcha', String(index));
    return { index, sitekey: element.getAttribute('data-sitekey') };
  })
"""

HIGHLIGHT_SCRIPT = """
([index, color]) => {
  const element = document.querySelector(`[data-delegate-recaptcha="${index}"]`);
  if (element) {
    element.style.outline = `3px solid ${color}`;
  }
}
"""

ENTER_TOKEN_SCRIPT = """
([index, token]) => {
  const element = document.querySelector(`[data-delegate-recaptcha="${index}"]`);
  const scope = (element && element.closest('form')) || document;
  scope.querySelectorAll('[name="g-recaptcha-response"]').forEach((field) => {
    field.innerHTML = token;
    field.value = token;
  });
  const callbackName = element && element.getAttribute('data-callback');
  if (callbackName && typeof window[callbackName] === 'function') {
    window[callbackName](token);
  }
}
"""

DETECTED_COLOR = "#8A2BE2"
SOLVED_COLOR = "#32CD32"


@dataclass(frozen=True)
class RecaptchaSolution:
    index: int
    sitekey: str
    token: str


class RecaptchaPlugin(EnginePlugin):
    """reCAPTCHA resolution through a remote provider.

    Creating the plugin never fails: a missing or unknown provider id is
    reported when solving.
    """

    name = "recaptcha"

    def __init__(
        self,
        provider_id: Optional[str] = None,
        token: str = "",
        visual_feedback: bool = True,
        provider: Optional[BaseRecaptchaProvider] = None,
    ):
        self.provider_id = provider_id
        self.token = token or ""
        self.visual_feedback = visual_feedback
        self._provider = provider

    @property
    def provider(self) -> BaseRecaptchaProvider:
        if self._provider is None:
            self._provider = create_provider(self.provider_id, self.token)
        return self._provider

    async def find_recaptchas(self, page: Any) -> List[dict]:
        found = await page.evaluate(FIND_RECAPTCHAS_SCRIPT) or []
        return [item for item in found if item.get("sitekey")]

    async def _highlight(self, page: Any, index: int, color: str) -> None:
        if self.visual_feedback:
            await page.evaluate(HIGHLIGHT_SCRIPT, [index, color])

    async def solve_recaptchas(self, page: Any) -> List[RecaptchaSolution]:
        """Find, solve and fill every reCAPTCHA widget on the page."""
        captchas = await self.find_recaptchas(page)
        if not captchas:
            return []

        provider = self.provider
        logging.info(f"Found {len(captchas)} reCAPTCHA(s) on {page.url}")

        solutions = []
        for captcha in captchas:
            index = captcha["index"]
            await self._highlight(page, index, DETECTED_COLOR)
            token = await asyncio.to_thread(provider.solve, captcha["sitekey"], page.url)
            await page.evaluate(ENTER_TOKEN_SCRIPT, [index, token])
            await self._highlight(page, index, SOLVED_COLOR)
            solutions.append(RecaptchaSolution(index=index, sitekey=captcha["sitekey"], token=token))

        return solutions

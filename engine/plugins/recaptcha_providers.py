"""reCAPTCHA resolver providers

A provider turns (sitekey, page url) into a response token. Calls are
blocking HTTP; the plugin runs them in a worker thread.
"""

import requests
import logging
import time
from typing import Dict, Optional, Type

from core.exceptions import ProviderUnavailableError


class BaseRecaptchaProvider:
    """Base class for resolver providers"""

    id = "base"

    def __init__(self, token: str = "", **kwargs):
        self.token = token

    def solve(self, sitekey: str, url: str) -> str:
        """Return a g-recaptcha-response token for the widget."""
        raise NotImplementedError


class TwoCaptchaProvider(BaseRecaptchaProvider):
    """2captcha.com provider"""

    id = "2captcha"

    def __init__(
        self,
        token: str = "",
        api_url: str = "https://2captcha.com",
        poll_interval: float = 5.0,
        timeout: float = 180.0,
        **kwargs
    ):
        super().__init__(token, **kwargs)
        self.api_url = api_url.rstrip("/")
        self.poll_interval = poll_interval
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs) -> Dict:
        try:
            response = requests.request(method, f"{self.api_url}/{path}", timeout=30, **kwargs)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.ConnectionError as e:
            raise ProviderUnavailableError(
                provider=self.id,
                message=f"Cannot connect to 2captcha API: {e}"
            )
        except requests.exceptions.Timeout as e:
            raise ProviderUnavailableError(
                provider=self.id,
                message=f"2captcha API request timed out: {e}"
            )
        except requests.exceptions.HTTPError as e:
            # 5xx errors are infrastructure failures
            if e.response is not None and e.response.status_code >= 500:
                raise ProviderUnavailableError(
                    provider=self.id,
                    message=f"2captcha service error: {e}"
                )
            logging.error(f"2captcha API error: {e}")
            raise RuntimeError(f"2captcha API call failed: {e}")

    def solve(self, sitekey: str, url: str) -> str:
        submitted = self._request(
            "POST",
            "in.php",
            data={
                "key": self.token,
                "method": "userrecaptcha",
                "googlekey": sitekey,
                "pageurl": url,
                "json": 1,
            },
        )
        if submitted.get("status") != 1:
            raise RuntimeError(f"2captcha rejected the task: {submitted.get('request')}")

        task_id = submitted["request"]
        logging.info(f"2captcha task {task_id} submitted for sitekey {sitekey}")

        deadline = time.monotonic() + self.timeout
        while time.monotonic() < deadline:
            time.sleep(self.poll_interval)
            result = self._request(
                "GET",
                "res.php",
                params={"key": self.token, "action": "get", "id": task_id, "json": 1},
            )
            if result.get("status") == 1:
                return result["request"]
            if result.get("request") != "CAPCHA_NOT_READY":
                raise RuntimeError(f"2captcha failed task {task_id}: {result.get('request')}")

        raise ProviderUnavailableError(
            provider=self.id,
            message=f"Task {task_id} not solved within {self.timeout}s"
        )


PROVIDERS: Dict[str, Type[BaseRecaptchaProvider]] = {
    TwoCaptchaProvider.id: TwoCaptchaProvider,
}


def create_provider(provider_id: Optional[str], token: str = "") -> BaseRecaptchaProvider:
    """Instantiate a provider by id."""
    if not provider_id:
        raise ValueError("No reCAPTCHA resolver provider configured (RECAPTCHA_RESOLVER_PROVIDER)")
    provider_class = PROVIDERS.get(provider_id)
    if provider_class is None:
        raise ValueError(
            f"Unknown reCAPTCHA resolver provider '{provider_id}'. "
            f"Known: {sorted(PROVIDERS)}"
        )
    return provider_class(token=token)

"""Delegate Configuration - Single Authority for Delegate Policy

Mirrors the BrowserConfig pattern. The executor reads from here, never decides policy.

RESPONSIBILITY:
- Load delegate.yaml
- Merge per-delegate options over file values
- Provide get() singleton
- Read CAPTCHA resolver credentials from the environment

DOES NOT:
- Execute instructions
- Track browsers (ResourceRegistry's job)
- Configure the engine (InstructionExecutor's job)
"""

import logging
import os
from pathlib import Path
from typing import Dict, Any, Optional, Literal
from dataclasses import dataclass


@dataclass(frozen=True)
class DelegateSettings:
    """Immutable delegate configuration snapshot."""
    log_browser_console: bool
    browser_type: Literal["chromium", "chrome", "edge", "firefox"]
    headless: bool
    recaptcha_visual_feedback: bool


@dataclass(frozen=True)
class RecaptchaSettings:
    """CAPTCHA resolver credentials.

    Read fresh on every instruction: the environment may change between calls.
    An empty token is an accepted default, not an error.
    """
    provider_id: Optional[str]
    token: str = ""

    @classmethod
    def from_env(cls) -> "RecaptchaSettings":
        return cls(
            provider_id=os.environ.get("RECAPTCHA_RESOLVER_PROVIDER"),
            token=os.environ.get("RECAPTCHA_RESOLVER_TOKEN", ""),
        )


class DelegateConfig:
    """Singleton delegate configuration authority.

    Usage:
        config = DelegateConfig.get()
        settings = config.settings
        settings = config.with_options({"log_browser_console": True})
    """

    _instance: Optional["DelegateConfig"] = None
    _settings: Optional[DelegateSettings] = None

    # Defaults (used if yaml missing or invalid)
    DEFAULTS = {
        "log_browser_console": False,
        "browser_type": "chromium",
        "headless": True,
        "recaptcha_visual_feedback": True,
    }

    CONFIG_PATH = Path(__file__).parent.parent / "config" / "delegate.yaml"

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._load()
        return cls._instance

    @classmethod
    def get(cls) -> "DelegateConfig":
        """Get singleton instance."""
        return cls()

    @property
    def settings(self) -> DelegateSettings:
        """Get current delegate settings."""
        if self._settings is None:
            self._load()
        return self._settings

    def _load(self) -> None:
        """Load configuration from delegate.yaml."""
        config_path = self.CONFIG_PATH

        raw_config: Dict[str, Any] = {}

        if config_path.exists():
            try:
                import yaml
                with open(config_path, encoding="utf-8") as f:
                    full_config = yaml.safe_load(f) or {}
                    raw_config = full_config.get("delegate", {}) or {}
                    logging.info(f"Loaded delegate config from {config_path}")
            except Exception as e:
                logging.warning(f"Failed to load delegate.yaml: {e}, using defaults")
        else:
            logging.info(f"No delegate.yaml found at {config_path}, using defaults")

        self._raw = {**self.DEFAULTS, **raw_config}
        self._settings = self._build(self._raw)

        logging.debug(f"DelegateConfig: {self._settings}")

    @staticmethod
    def _build(merged: Dict[str, Any]) -> DelegateSettings:
        return DelegateSettings(
            # Only a real boolean True enables console relaying
            log_browser_console=merged["log_browser_console"] is True,
            browser_type=merged["browser_type"],
            headless=bool(merged["headless"]),
            recaptcha_visual_feedback=bool(merged["recaptcha_visual_feedback"]),
        )

    def with_options(self, options: Optional[Dict[str, Any]] = None) -> DelegateSettings:
        """Settings with per-delegate options layered over the file values.

        Unknown option keys are ignored; they belong to the connection layer.
        """
        if not options:
            return self.settings

        known = {k: v for k, v in options.items() if k in self.DEFAULTS}
        return self._build({**self._raw, **known})

    def reload(self) -> None:
        """Force reload configuration (for testing)."""
        self._load()

"""Engine plugins - behavior layered onto every browser the engine produces

StealthPlugin: identity masking (playwright-stealth)
RecaptchaPlugin: reCAPTCHA resolution through a remote provider
"""

from .stealth import StealthPlugin
from .recaptcha import RecaptchaPlugin, RecaptchaSolution
from .recaptcha_providers import TwoCaptchaProvider, create_provider

__all__ = [
    "StealthPlugin",
    "RecaptchaPlugin",
    "RecaptchaSolution",
    "TwoCaptchaProvider",
    "create_provider",
]

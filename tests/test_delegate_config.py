import pytest

from core.config import DelegateConfig, RecaptchaSettings


@pytest.fixture
def config_at(tmp_path, monkeypatch):
    """Fresh DelegateConfig singleton reading from a temporary yaml file."""
    def _config(content=None):
        path = tmp_path / "delegate.yaml"
        if content is not None:
            path.write_text(content, encoding="utf-8")
        monkeypatch.setattr(DelegateConfig, "CONFIG_PATH", path)
        monkeypatch.setattr(DelegateConfig, "_instance", None)
        monkeypatch.setattr(DelegateConfig, "_settings", None)
        return DelegateConfig.get()
    return _config


def test_defaults_without_file(config_at):
    settings = config_at().settings

    assert settings.log_browser_console is False
    assert settings.browser_type == "chromium"
    assert settings.headless is True
    assert settings.recaptcha_visual_feedback is True


def test_file_values_override_defaults(config_at):
    settings = config_at(
        "delegate:\n"
        "  log_browser_console: true\n"
        "  browser_type: firefox\n"
        "  headless: false\n"
    ).settings

    assert settings.log_browser_console is True
    assert settings.browser_type == "firefox"
    assert settings.headless is False
    assert settings.recaptcha_visual_feedback is True


def test_invalid_yaml_falls_back_to_defaults(config_at):
    settings = config_at("delegate: [unclosed\n").settings

    assert settings.browser_type == "chromium"


def test_non_boolean_console_flag_disables_logging(config_at):
    settings = config_at('delegate:\n  log_browser_console: "yes"\n').settings

    assert settings.log_browser_console is False


def test_options_override_file_values(config_at):
    config = config_at("delegate:\n  log_browser_console: false\n")

    settings = config.with_options({"log_browser_console": True, "connection_timeout": 5})

    assert settings.log_browser_console is True
    assert config.settings.log_browser_console is False


def test_option_must_be_true_to_enable_logging(config_at):
    config = config_at()

    assert config.with_options({"log_browser_console": 1}).log_browser_console is False
    assert config.with_options({"log_browser_console": "true"}).log_browser_console is False


def test_empty_options_return_file_settings(config_at):
    config = config_at()

    assert config.with_options(None) is config.settings
    assert config.with_options({}) is config.settings


def test_get_returns_singleton(config_at):
    config = config_at()

    assert DelegateConfig.get() is config


def test_reload_picks_up_changes(config_at, tmp_path):
    config = config_at("delegate:\n  headless: true\n")
    (tmp_path / "delegate.yaml").write_text("delegate:\n  headless: false\n", encoding="utf-8")

    config.reload()

    assert config.settings.headless is False


def test_recaptcha_settings_from_environment(monkeypatch):
    assert RecaptchaSettings.from_env() == RecaptchaSettings(provider_id=None, token="")

    monkeypatch.setenv("RECAPTCHA_RESOLVER_PROVIDER", "2captcha")
    monkeypatch.setenv("RECAPTCHA_RESOLVER_TOKEN", "secret")

    assert RecaptchaSettings.from_env() == RecaptchaSettings(provider_id="2captcha", token="secret")

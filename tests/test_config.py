import pytest

from pluginhealth.config import (
    DEFAULT_DATABASE_URL,
    DEFAULT_UPDATE_CENTER_URL,
    ConfigError,
    Settings,
    require_source,
)


def test_settings_defaults(monkeypatch):
    for name in (
        "PLUGINHEALTH_UPDATE_CENTER_URL",
        "PLUGINHEALTH_DATABASE_URL",
        "PLUGINHEALTH_LOG_LEVEL",
        "PLUGINHEALTH_WORKFLOWS_DIR",
    ):
        monkeypatch.delenv(name, raising=False)

    s = Settings.from_env()
    assert s.update_center_url == DEFAULT_UPDATE_CENTER_URL
    assert s.database_url == DEFAULT_DATABASE_URL
    assert s.log_level == "INFO"
    assert s.workflows_dir == ".github/workflows"


def test_settings_from_env_and_overrides(monkeypatch):
    monkeypatch.setenv("PLUGINHEALTH_UPDATE_CENTER_URL", "https://mirror.example/uc.json")
    monkeypatch.setenv("PLUGINHEALTH_LOG_LEVEL", "debug")

    s = Settings.from_env()
    assert s.update_center_url == "https://mirror.example/uc.json"
    assert s.log_level == "DEBUG"

    o = s.with_overrides(update_center_url="local.json", database_url=None)
    assert o.update_center_url == "local.json"
    assert o.database_url == s.database_url


def test_require_source():
    assert require_source("  uc.json ") == "uc.json"
    with pytest.raises(ConfigError):
        require_source(None)
    with pytest.raises(ConfigError):
        require_source("")


def test_blank_update_center_env_is_not_replaced_by_default(monkeypatch):
    monkeypatch.setenv("PLUGINHEALTH_UPDATE_CENTER_URL", "  ")

    s = Settings.from_env()
    assert s.update_center_url == "  "
    with pytest.raises(ConfigError):
        require_source(s.update_center_url)

"""
Configuration tests.
"""

import pytest

from econwatch.config import (
    REPEAT_POLICY_EVERY_CYCLE,
    REPEAT_POLICY_ONCE_PER_PERIOD,
    Settings,
    get_settings,
)


def test_get_settings_returns_settings() -> None:
    """get_settings returns a Settings instance."""
    settings = get_settings()
    assert isinstance(settings, Settings)
    assert settings.app_name == "EconWatch"


def test_test_environment_applied() -> None:
    """conftest forces sqlite, static feed and the log channel."""
    settings = get_settings()
    assert settings.database_url == "sqlite://"
    assert settings.feed_use_static is True
    assert settings.email_backend == "log"


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "FEED_TIMEOUT",
        "CYCLE_INTERVAL_HOURS",
        "CYCLE_RUN_ON_START",
        "NOTIFICATION_REPEAT_POLICY",
        "BLS_API_KEY",
        "BLS_API_URL",
    ):
        monkeypatch.delenv(name, raising=False)
    settings = Settings()
    assert settings.feed_timeout == 10.0
    assert settings.cycle_interval_hours == 24.0
    assert settings.cycle_run_on_start is True
    assert settings.notification_repeat_policy == REPEAT_POLICY_ONCE_PER_PERIOD
    assert settings.bls_api_key is None
    assert settings.bls_api_url == "https://api.bls.gov/publicAPI/v2/timeseries/data/"


def test_values_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FEED_TIMEOUT", "2.5")
    monkeypatch.setenv("CYCLE_INTERVAL_HOURS", "6")
    monkeypatch.setenv("CYCLE_RUN_ON_START", "false")
    monkeypatch.setenv("NOTIFICATION_REPEAT_POLICY", "Every_Cycle")
    monkeypatch.setenv("BLS_API_KEY", "  abc  ")
    monkeypatch.setenv("SENDER_FIRST_NAME", "Sam")
    settings = Settings()
    assert settings.feed_timeout == 2.5
    assert settings.cycle_interval_hours == 6.0
    assert settings.cycle_run_on_start is False
    assert settings.notification_repeat_policy == REPEAT_POLICY_EVERY_CYCLE
    assert settings.bls_api_key == "abc"
    assert settings.sender_first_name == "Sam"


def test_postgres_url_rewritten_for_psycopg(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db:5432/econwatch")
    assert Settings().database_url == "postgresql+psycopg://u:p@db:5432/econwatch"


def test_invalid_repeat_policy_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NOTIFICATION_REPEAT_POLICY", "hourly")
    with pytest.raises(ValueError, match="NOTIFICATION_REPEAT_POLICY"):
        Settings()


def test_invalid_email_backend_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EMAIL_BACKEND", "pigeon")
    with pytest.raises(ValueError, match="EMAIL_BACKEND"):
        Settings()


def test_get_settings_cache_reloads_after_clear(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_NAME", "EconWatch Staging")
    get_settings.cache_clear()
    try:
        assert get_settings().app_name == "EconWatch Staging"
    finally:
        monkeypatch.delenv("APP_NAME")
        get_settings.cache_clear()

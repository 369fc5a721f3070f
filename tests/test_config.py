from __future__ import annotations

from datetime import timezone

import pytest

from config import DashboardConfig

ENV_KEYS = [
    "STOCKSCAN_BASE_URL",
    "STOCK_SYMBOL",
    "STOCK_EXCHANGE",
    "STOCKSCAN_TIMEOUT",
    "DISPLAY_TIMEZONE",
    "DASHBOARD_HOST",
    "DASHBOARD_PORT",
    "LOG_LEVEL",
    "LOG_FILE",
]


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults_point_at_stockscan_tsla() -> None:
    config = DashboardConfig.from_env()

    assert config.api.base_url == "https://chart.stockscan.io"
    assert config.api.symbol == "TSLA"
    assert config.api.exchange == "NASDAQ"
    assert config.api.timeout_sec == 30.0
    assert config.display.tz is timezone.utc
    assert config.server.port == 8080
    assert config.log_level == "INFO"


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STOCKSCAN_BASE_URL", "http://localhost:9000")
    monkeypatch.setenv("STOCK_SYMBOL", "aapl")
    monkeypatch.setenv("STOCK_EXCHANGE", "nasdaq")
    monkeypatch.setenv("STOCKSCAN_TIMEOUT", "2.5")
    monkeypatch.setenv("DASHBOARD_PORT", "9090")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("LOG_FILE", "")

    config = DashboardConfig.from_env()

    assert config.api.base_url == "http://localhost:9000"
    assert config.api.symbol == "AAPL"
    assert config.api.exchange == "NASDAQ"
    assert config.api.timeout_sec == 2.5
    assert config.server.port == 9090
    assert config.log_level == "DEBUG"
    assert config.log_file == ""


@pytest.mark.parametrize(
    "key, value, message",
    [
        ("DASHBOARD_PORT", "abc", "DASHBOARD_PORT"),
        ("DASHBOARD_PORT", "70000", "DASHBOARD_PORT"),
        ("STOCKSCAN_TIMEOUT", "0", "STOCKSCAN_TIMEOUT"),
        ("LOG_LEVEL", "LOUD", "LOG_LEVEL"),
        ("DISPLAY_TIMEZONE", "Nowhere/Atlantis", "DISPLAY_TIMEZONE"),
        ("STOCK_SYMBOL", " ", "STOCK_SYMBOL"),
    ],
)
def test_invalid_settings_raise(monkeypatch: pytest.MonkeyPatch, key: str, value: str, message: str) -> None:
    monkeypatch.setenv(key, value)

    with pytest.raises(ValueError, match=message):
        DashboardConfig.from_env()

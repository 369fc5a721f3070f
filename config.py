"""
StockScan Dashboard — Configuration
All tunable parameters in one place.
"""

import os
import logging
from dataclasses import dataclass, field
from datetime import timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


@dataclass
class ApiConfig:
    base_url: str = "https://chart.stockscan.io"
    symbol: str = "TSLA"
    exchange: str = "NASDAQ"
    timeout_sec: float = 30.0           # Bounds a hung request


@dataclass
class DisplayConfig:
    timezone: str = "UTC"               # IANA name for axis/tooltip dates

    @property
    def tz(self) -> tzinfo:
        if self.timezone.upper() == "UTC":
            return timezone.utc
        return ZoneInfo(self.timezone)


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8080


@dataclass
class DashboardConfig:
    api: ApiConfig = field(default_factory=ApiConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    log_level: str = "INFO"
    log_file: str = "data/dashboard.log"

    @classmethod
    def from_env(cls) -> "DashboardConfig":
        """Load config with environment variable overrides."""
        config = cls()
        try:
            config.api.base_url = os.getenv("STOCKSCAN_BASE_URL", config.api.base_url).strip()
            config.api.symbol = os.getenv("STOCK_SYMBOL", config.api.symbol).strip().upper()
            config.api.exchange = os.getenv("STOCK_EXCHANGE", config.api.exchange).strip().upper()
            config.api.timeout_sec = float(os.getenv("STOCKSCAN_TIMEOUT", "30"))
            config.display.timezone = os.getenv("DISPLAY_TIMEZONE", "UTC").strip()
            config.server.host = os.getenv("DASHBOARD_HOST", config.server.host).strip()
            config.server.port = int(os.getenv("DASHBOARD_PORT", "8080"))
        except ValueError as e:
            raise ValueError(
                f"Invalid numeric setting ({e}). Check STOCKSCAN_TIMEOUT and DASHBOARD_PORT."
            ) from e
        config.log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
        config.log_file = os.getenv("LOG_FILE", config.log_file).strip()
        return config.validate()

    def validate(self) -> "DashboardConfig":
        if not self.api.base_url:
            raise ValueError("STOCKSCAN_BASE_URL must not be empty")
        if not self.api.symbol or not self.api.exchange:
            raise ValueError("STOCK_SYMBOL and STOCK_EXCHANGE must not be empty")
        if self.api.timeout_sec <= 0:
            raise ValueError("STOCKSCAN_TIMEOUT must be positive")
        if not 0 < self.server.port < 65536:
            raise ValueError("DASHBOARD_PORT must be between 1 and 65535")
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Unknown LOG_LEVEL '{self.log_level}'")
        try:
            self.display.tz
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown DISPLAY_TIMEZONE '{self.display.timezone}'") from e
        return self

"""Exceptions raised while retrieving candles from StockScan."""

from __future__ import annotations
from typing import Optional


class StockDataError(Exception):
    """Base exception for candle retrieval failures."""


class NetworkError(StockDataError):
    """Non-2xx HTTP status or transport failure."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class MalformedResponseError(StockDataError):
    """Payload parsed but does not have the expected shape."""

    def __init__(self, field: str, reason: str):
        super().__init__(f"'{field}' {reason}")
        self.field = field
        self.reason = reason

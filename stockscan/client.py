"""
StockScan REST API Client.
Single unauthenticated GET per fetch attempt: no retries, no caching.
"""

from __future__ import annotations
import asyncio
from typing import Any, Dict, List, Optional
import aiohttp
import logging

from stockscan.errors import MalformedResponseError, NetworkError
from stockscan.models import TimeFrame

logger = logging.getLogger(__name__)


class StockScanClient:
    """Async wrapper around the StockScan candle endpoint."""

    def __init__(
        self,
        base_url: str,
        symbol: str,
        exchange: str,
        timeout: float = 30.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.symbol = symbol
        self.exchange = exchange
        self.timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
        return self._session

    async def close(self):
        if self._session and not self._session.closed:
            await self._session.close()

    def candle_url(self, time_frame: TimeFrame) -> str:
        return f"{self.base_url}/candle/v3/{self.symbol}/{time_frame.value}/{self.exchange}"

    async def _request(self, url: str) -> Any:
        """GET a URL and return the decoded JSON body."""
        session = await self._get_session()
        try:
            async with session.get(url) as resp:
                if not 200 <= resp.status < 300:
                    logger.error(f"[STOCKSCAN] GET {url} failed: status={resp.status}")
                    raise NetworkError(f"HTTP error! status: {resp.status}", status=resp.status)
                try:
                    return await resp.json(content_type=None)
                except ValueError as e:
                    raise MalformedResponseError("body", f"is not valid JSON ({e})") from e

        except asyncio.TimeoutError as e:
            logger.error(f"[STOCKSCAN] GET {url} timed out after {self.timeout}s")
            raise NetworkError(f"Request timed out after {self.timeout}s") from e
        except aiohttp.ClientError as e:
            logger.error(f"[STOCKSCAN] GET {url} Exception: {e}")
            raise NetworkError(str(e) or e.__class__.__name__) from e

    async def get_candles(self, time_frame: TimeFrame) -> List[Dict[str, Any]]:
        """
        Get the raw candle list for a time frame.
        Only the top-level shape is checked here; entries are validated
        when they are mapped to chart points.
        """
        url = self.candle_url(time_frame)
        payload = await self._request(url)

        if not isinstance(payload, dict):
            raise MalformedResponseError("body", "must be a JSON object")
        if "candles" not in payload:
            raise MalformedResponseError("candles", "is missing")
        candles = payload["candles"]
        if not isinstance(candles, list):
            raise MalformedResponseError("candles", "must be a list")

        logger.debug(f"[STOCKSCAN] {self.symbol} {time_frame.value}: {len(candles)} candles")
        return candles

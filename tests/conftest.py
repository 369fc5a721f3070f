"""
Shared fixtures — an in-process fake of the StockScan candle endpoint.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Tuple

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from core.stock_data import StockDataFetcher
from core.view import DashboardView
from stockscan.client import StockScanClient


class FakeStockScan:
    """Serves canned candle responses per time frame."""

    def __init__(self) -> None:
        self.base_url = ""
        self.requests: List[str] = []
        self._responses: Dict[str, Tuple[int, Any, float]] = {}

    def respond(self, time_frame: str, body: Any = None, status: int = 200, delay: float = 0.0) -> None:
        if body is None:
            body = {"candles": []}
        self._responses[time_frame] = (status, body, delay)

    async def handle(self, request: web.Request) -> web.Response:
        time_frame = request.match_info["time_frame"]
        self.requests.append(request.path)
        status, body, delay = self._responses.get(time_frame, (200, {"candles": []}, 0.0))
        if delay:
            await asyncio.sleep(delay)
        if isinstance(body, str):
            return web.Response(text=body, status=status)
        return web.json_response(body, status=status)


@pytest_asyncio.fixture
async def upstream():
    fake = FakeStockScan()
    app = web.Application()
    app.router.add_get("/candle/v3/{symbol}/{time_frame}/{exchange}", fake.handle)
    server = TestServer(app)
    await server.start_server()
    fake.base_url = str(server.make_url("/")).rstrip("/")
    yield fake
    await server.close()


@pytest_asyncio.fixture
async def client(upstream):
    stock_client = StockScanClient(
        base_url=upstream.base_url,
        symbol="TSLA",
        exchange="NASDAQ",
        timeout=5,
    )
    yield stock_client
    await stock_client.close()


@pytest.fixture
def fetcher(client):
    return StockDataFetcher(client)


@pytest_asyncio.fixture
async def view(fetcher):
    dashboard_view = DashboardView(fetcher)
    yield dashboard_view
    await dashboard_view.close()


@pytest.fixture
def hourly_candles():
    return [
        {"date": "2024-01-05T14:00:00Z", "close": 100},
        {"date": "2024-01-05T15:00:00Z", "close": "110.00"},
    ]


@pytest.fixture
def daily_candles():
    return [
        {"date": "2024-01-03T00:00:00Z", "close": 240.1},
        {"date": "2024-01-04T00:00:00Z", "close": 238.45},
        {"date": "2024-01-05T00:00:00Z", "close": "237.49"},
    ]

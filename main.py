"""
StockScan Dashboard — Entry point.
Wires config, upstream client, fetcher, view and web server; runs until signalled.
"""

from __future__ import annotations
import asyncio
import os
import sys
import signal
import logging

from dotenv import load_dotenv

from config import DashboardConfig
from core.chart import ChartBuilder
from core.stock_data import StockDataFetcher
from core.view import DashboardView
from dashboard import Dashboard
from stockscan.client import StockScanClient

logger = logging.getLogger(__name__)


def setup_logging(level: str, log_file: str):
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s | %(levelname)-7s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


class App:
    """Owns the running components."""

    def __init__(self, config: DashboardConfig):
        self.config = config
        self.client = StockScanClient(
            base_url=config.api.base_url,
            symbol=config.api.symbol,
            exchange=config.api.exchange,
            timeout=config.api.timeout_sec,
        )
        tz = config.display.tz
        self.fetcher = StockDataFetcher(self.client, display_tz=tz)
        self.view = DashboardView(self.fetcher)
        self.dashboard = Dashboard(
            self.view,
            chart=ChartBuilder(display_tz=tz),
            host=config.server.host,
            port=config.server.port,
        )
        self._stopped = asyncio.Event()

    async def start(self):
        logger.info(
            f"[BOOT] {self.config.api.symbol}/{self.config.api.exchange} "
            f"from {self.config.api.base_url}"
        )
        await self.dashboard.start()
        self.view.mount()
        await self._stopped.wait()

    async def stop(self):
        """Graceful shutdown."""
        logger.info("[SHUTDOWN] Stopping dashboard...")
        await self.view.close()
        await self.dashboard.stop()
        await self.client.close()
        self._stopped.set()
        logger.info("[SHUTDOWN] Complete.")


async def main():
    """Entry point."""
    load_dotenv()
    try:
        config = DashboardConfig.from_env()
    except ValueError as e:
        setup_logging("INFO", "")
        logger.critical(f"Configuration error: {e}")
        sys.exit(1)

    setup_logging(config.log_level, config.log_file)
    app = App(config)

    if sys.platform != "win32":
        loop = asyncio.get_running_loop()

        def handle_signal(sig):
            logger.info(f"Received signal {sig}. Initiating shutdown...")
            asyncio.create_task(app.stop())

        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, lambda s=sig: handle_signal(s))

    try:
        await app.start()
    except Exception as e:
        logger.critical(f"Fatal error: {e}", exc_info=True)
        await app.stop()
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())

"""
Dashboard — Lightweight web server for the StockScan price chart.
Uses aiohttp.web to serve the HTML page plus a JSON API over the same view.
"""

from __future__ import annotations
import os
import json
from decimal import Decimal
from datetime import datetime, timezone
from typing import Optional, TYPE_CHECKING
from aiohttp import web
from jinja2 import Environment, FileSystemLoader, select_autoescape
import logging

from core.chart import ChartBuilder
from core.formatters import format_full_date
from core.view import ViewStatus
from stockscan.models import TimeFrame

if TYPE_CHECKING:
    from core.view import DashboardView

logger = logging.getLogger(__name__)

TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "templates")


class DecimalEncoder(json.JSONEncoder):
    """JSON encoder that handles Decimal types."""
    def default(self, o):
        if isinstance(o, Decimal):
            return float(o)
        if isinstance(o, datetime):
            return o.isoformat()
        return super().default(o)


def json_response(data, status=200):
    return web.Response(
        text=json.dumps(data, cls=DecimalEncoder),
        content_type="application/json",
        status=status,
    )


def _flag(request: web.Request, name: str) -> bool:
    return request.query.get(name, "").lower() in {"1", "true", "yes", "on"}


class Dashboard:
    """Web dashboard server."""

    def __init__(
        self,
        view: "DashboardView",
        chart: Optional[ChartBuilder] = None,
        host: str = "0.0.0.0",
        port: int = 8080,
    ):
        self.view = view
        self.chart = chart or ChartBuilder()
        self.host = host
        self.port = port
        self.templates = Environment(
            loader=FileSystemLoader(TEMPLATE_DIR),
            autoescape=select_autoescape(["html"]),
        )
        self.app = web.Application()
        self._runner: Optional[web.AppRunner] = None
        self._setup_routes()

    def _setup_routes(self):
        self.app.router.add_get("/", self._serve_html)
        self.app.router.add_post("/timeframe/{time_frame}", self._form_timeframe)
        self.app.router.add_post("/retry", self._form_retry)
        self.app.router.add_get("/api/dashboard", self._api_dashboard)
        self.app.router.add_post("/api/timeframe/{time_frame}", self._api_timeframe)
        self.app.router.add_post("/api/retry", self._api_retry)

    async def start(self):
        """Start the dashboard web server."""
        self._runner = web.AppRunner(self.app, access_log=None)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.host, self.port)
        await site.start()
        logger.info(f"[DASHBOARD] Running on http://{self.host}:{self.port}")

    async def stop(self):
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None

    def render_page(self, compact: bool = False) -> str:
        snap = self.view.snapshot(compact=compact)
        chart_html = ""
        if snap.status is ViewStatus.LOADED and snap.has_data:
            chart_html = self.chart.to_html(self.chart.build(snap.points, compact=compact))
        template = self.templates.get_template("dashboard.html")
        return template.render(
            snap=snap,
            chart_html=chart_html,
            loading=snap.status in (ViewStatus.IDLE, ViewStatus.LOADING),
            last_updated=format_full_date(
                snap.updated_at or datetime.now(timezone.utc), self.view.fetcher.display_tz
            ),
        )

    # ─── Routes ───

    async def _serve_html(self, request: web.Request) -> web.Response:
        """Serve the dashboard HTML."""
        try:
            html = self.render_page(compact=_flag(request, "compact"))
            return web.Response(text=html, content_type="text/html")
        except Exception as e:
            logger.error(f"[DASHBOARD] Render error: {e}", exc_info=True)
            return web.Response(text="Dashboard render failed", status=500)

    async def _form_timeframe(self, request: web.Request) -> web.Response:
        try:
            time_frame = TimeFrame.parse(request.match_info["time_frame"])
        except ValueError as e:
            return web.Response(text=str(e), status=400)
        self.view.select_time_frame(time_frame)
        raise web.HTTPSeeOther("/")

    async def _form_retry(self, request: web.Request) -> web.Response:
        self.view.retry()
        raise web.HTTPSeeOther("/")

    async def _api_dashboard(self, request: web.Request) -> web.Response:
        """Main dashboard data endpoint — returns everything in one call."""
        try:
            snap = self.view.snapshot(compact=_flag(request, "compact"))
            return json_response(snap.to_dict())
        except Exception as e:
            logger.error(f"[DASHBOARD] API error: {e}", exc_info=True)
            return json_response({"error": str(e)}, status=500)

    async def _api_timeframe(self, request: web.Request) -> web.Response:
        """Select a time frame. ?wait=1 returns after the fetch completes."""
        try:
            time_frame = TimeFrame.parse(request.match_info["time_frame"])
        except ValueError as e:
            return json_response({"error": str(e)}, status=400)

        try:
            task = self.view.select_time_frame(time_frame)
            if _flag(request, "wait"):
                await task
            return json_response(self.view.snapshot(compact=_flag(request, "compact")).to_dict())
        except Exception as e:
            logger.error(f"[DASHBOARD] Time frame API error: {e}", exc_info=True)
            return json_response({"error": str(e)}, status=500)

    async def _api_retry(self, request: web.Request) -> web.Response:
        """Retry the selected time frame. ?wait=1 returns after the fetch completes."""
        try:
            task = self.view.retry()
            if _flag(request, "wait"):
                await task
            return json_response(self.view.snapshot(compact=_flag(request, "compact")).to_dict())
        except Exception as e:
            logger.error(f"[DASHBOARD] Retry API error: {e}", exc_info=True)
            return json_response({"error": str(e)}, status=500)

"""
Dashboard View — owns the selected time frame and derives what to render.

States: IDLE -> LOADING -> LOADED | ERROR, and any state -> LOADING on a
time frame change or retry. There is no terminal state.
"""

from __future__ import annotations
import asyncio
from dataclasses import asdict, dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Set, TYPE_CHECKING
import logging

from core.calculations import ZERO_CHANGE, calculate_price_change
from core.formatters import format_percentage, format_price
from stockscan.models import (
    DEFAULT_TIME_FRAME,
    TIME_FRAME_OPTIONS,
    PriceChange,
    StockPoint,
    TimeFrame,
)

if TYPE_CHECKING:
    from core.stock_data import StockDataFetcher

logger = logging.getLogger(__name__)


class ViewStatus(Enum):
    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"
    LOADED = "loaded"


@dataclass
class TimeFrameButton:
    key: str
    label: str
    icon: str
    active: bool


@dataclass
class ViewSnapshot:
    """Everything the page needs for one render."""
    status: ViewStatus
    symbol: str
    exchange: str
    time_frame: TimeFrame
    time_frame_label: str
    buttons: List[TimeFrameButton]
    error: str = ""
    points: List[StockPoint] = field(default_factory=list)
    current_price: Decimal = Decimal("0")
    point_count: int = 0
    price_change: PriceChange = ZERO_CHANGE
    current_price_text: str = "$0.00"
    change_text: str = "$0.00"
    percentage_text: str = "+0.00%"
    compact: bool = False
    updated_at: Optional[datetime] = None

    @property
    def has_data(self) -> bool:
        return self.point_count > 0

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "symbol": self.symbol,
            "exchange": self.exchange,
            "time_frame": self.time_frame.value,
            "time_frame_label": self.time_frame_label,
            "time_frames": [asdict(b) for b in self.buttons],
            "error": self.error,
            "compact": self.compact,
            "points": [
                {"date": p.date, "close": p.close, "full_date": p.full_date}
                for p in self.points
            ],
            "summary": {
                "current_price": self.current_price,
                "current_price_text": self.current_price_text,
                "data_points": self.point_count,
                "time_frame": self.time_frame.value,
                "change": self.price_change.change,
                "change_text": self.change_text,
                "percentage": self.price_change.percentage,
                "percentage_text": self.percentage_text,
                "is_positive": self.price_change.is_positive,
            },
            "updated_at": self.updated_at,
        }


class DashboardView:
    """Drives the fetcher from user actions and exposes view snapshots."""

    def __init__(self, fetcher: "StockDataFetcher"):
        self.fetcher = fetcher
        self.time_frame: TimeFrame = DEFAULT_TIME_FRAME
        self._mounted = False
        self._tasks: Set[asyncio.Task] = set()

    @property
    def status(self) -> ViewStatus:
        state = self.fetcher.state
        if not self._mounted:
            return ViewStatus.IDLE
        if state.loading:
            return ViewStatus.LOADING
        if state.error:
            return ViewStatus.ERROR
        return ViewStatus.LOADED

    def _schedule_fetch(self) -> asyncio.Task:
        # enter Loading now; the task only carries the request
        request_id = self.fetcher.begin(self.time_frame)
        task = asyncio.create_task(self.fetcher.complete(request_id, self.time_frame))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def mount(self) -> asyncio.Task:
        """Initial load for the default time frame."""
        self._mounted = True
        logger.info(f"[VIEW] Mounted, loading {self.time_frame.value}")
        return self._schedule_fetch()

    def select_time_frame(self, time_frame: TimeFrame) -> asyncio.Task:
        """Switch time frame; any in-flight fetch is left to finish and be discarded."""
        self._mounted = True
        if time_frame is not self.time_frame:
            logger.info(f"[VIEW] Time frame {self.time_frame.value} -> {time_frame.value}")
        self.time_frame = time_frame
        return self._schedule_fetch()

    def retry(self) -> asyncio.Task:
        """Re-issue the full request for the selected time frame."""
        self._mounted = True
        logger.info(f"[VIEW] Retry {self.time_frame.value}")
        return self._schedule_fetch()

    async def close(self):
        """Cancel fetches still in flight."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def snapshot(self, compact: bool = False) -> ViewSnapshot:
        status = self.status
        state = self.fetcher.state
        client = self.fetcher.client

        snap = ViewSnapshot(
            status=status,
            symbol=client.symbol,
            exchange=client.exchange,
            time_frame=self.time_frame,
            time_frame_label=self.time_frame.label,
            buttons=[
                TimeFrameButton(opt.key.value, opt.label, opt.icon, opt.key is self.time_frame)
                for opt in TIME_FRAME_OPTIONS
            ],
            compact=compact,
            updated_at=state.updated_at,
        )

        if status is ViewStatus.ERROR:
            snap.error = state.error
        elif status is ViewStatus.LOADED:
            points = list(state.data)
            change = calculate_price_change(points)
            current = points[-1].close if points else Decimal("0")
            snap.points = points
            snap.point_count = len(points)
            snap.current_price = current
            snap.price_change = change
            snap.current_price_text = format_price(current)
            snap.change_text = format_price(change.change)
            snap.percentage_text = format_percentage(change.percentage)
        return snap

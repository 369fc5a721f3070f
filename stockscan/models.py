"""
Data models for the StockScan dashboard.
Uses Decimal for all price values — no floating point drift in the cards.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from datetime import datetime


class TimeFrame(Enum):
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @classmethod
    def parse(cls, value: str) -> "TimeFrame":
        """Look up a time frame by its upstream name (case-insensitive)."""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            supported = ", ".join(tf.value for tf in cls)
            raise ValueError(f"Unknown time frame '{value}'. Supported: {supported}") from None

    @property
    def label(self) -> str:
        return self.value.capitalize()


DEFAULT_TIME_FRAME = TimeFrame.HOURLY


@dataclass(frozen=True)
class TimeFrameOption:
    """One button in the time frame selector."""
    key: TimeFrame
    label: str
    icon: str


TIME_FRAME_OPTIONS: List[TimeFrameOption] = [
    TimeFrameOption(TimeFrame.HOURLY, "Hourly", "⏰"),
    TimeFrameOption(TimeFrame.DAILY, "Daily", "📅"),
    TimeFrameOption(TimeFrame.WEEKLY, "Weekly", "📊"),
    TimeFrameOption(TimeFrame.MONTHLY, "Monthly", "📈"),
]


@dataclass(frozen=True)
class StockPoint:
    """One chart point built from a validated upstream candle."""
    date: str               # Display label, format depends on the time frame
    close: Decimal
    full_date: datetime     # Timezone-aware


@dataclass(frozen=True)
class PriceChange:
    """Delta between the last two points. percentage is None when undefined."""
    change: Decimal
    percentage: Optional[Decimal]
    is_positive: bool


@dataclass
class FetchState:
    """Loading / error / data triple owned by the fetcher."""
    loading: bool = False
    error: str = ""
    data: List[StockPoint] = field(default_factory=list)
    time_frame: Optional[TimeFrame] = None
    updated_at: Optional[datetime] = None

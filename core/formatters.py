"""
Formatters — display strings for chart labels, tooltips and summary cards.
All functions are pure; the display timezone is passed in explicitly.
"""

from __future__ import annotations
from datetime import datetime, timezone, tzinfo
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from stockscan.models import TimeFrame

Number = Union[int, float, Decimal]

CENT = Decimal("0.01")


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 upstream date into an aware datetime.
    Accepts a trailing Z; values without an offset are taken as UTC.
    """
    text = value.strip()
    if not text:
        raise ValueError("empty timestamp")
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _localize(timestamp: datetime, tz: Optional[tzinfo]) -> datetime:
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(tz or timezone.utc)


def format_date(timestamp: datetime, time_frame: TimeFrame, tz: Optional[tzinfo] = None) -> str:
    """
    Axis label for a point.

    hourly:  Jan 5 14:30
    daily:   Jan 5, 24
    weekly:  Jan 5, 2024
    monthly: Jan 2024
    """
    dt = _localize(timestamp, tz)
    if time_frame is TimeFrame.HOURLY:
        return f"{dt:%b} {dt.day} {dt:%H:%M}"
    if time_frame is TimeFrame.DAILY:
        return f"{dt:%b} {dt.day}, {dt:%y}"
    if time_frame is TimeFrame.WEEKLY:
        return f"{dt:%b} {dt.day}, {dt.year}"
    if time_frame is TimeFrame.MONTHLY:
        return f"{dt:%b} {dt.year}"
    raise ValueError(f"Unsupported time frame: {time_frame!r}")


def format_full_date(timestamp: datetime, tz: Optional[tzinfo] = None) -> str:
    """Tooltip label, e.g. Friday, January 5, 2024 at 14:30."""
    dt = _localize(timestamp, tz)
    return f"{dt:%A}, {dt:%B} {dt.day}, {dt.year} at {dt:%H:%M}"


def format_price(amount: Number) -> str:
    """US-dollar string with thousands separators and exactly two decimals."""
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    if not value.is_finite():
        raise ValueError(f"Cannot format non-finite price: {amount!r}")

    rounded = value.quantize(CENT, rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,.2f}"


def format_percentage(value: Optional[Number]) -> str:
    """Signed percentage with two decimals; n/a when the change is undefined."""
    if value is None:
        return "n/a"
    pct = value if isinstance(value, Decimal) else Decimal(str(value))
    if not pct.is_finite():
        raise ValueError(f"Cannot format non-finite percentage: {value!r}")
    return f"{pct.quantize(CENT, rounding=ROUND_HALF_UP):+.2f}%"

"""
Price change between the two most recent points of a series.
"""

from __future__ import annotations
from decimal import Decimal
from typing import Sequence

from stockscan.models import PriceChange, StockPoint

ZERO_CHANGE = PriceChange(change=Decimal("0"), percentage=Decimal("0"), is_positive=True)


def calculate_price_change(series: Sequence[StockPoint]) -> PriceChange:
    """
    change = last - previous, percentage = change / previous * 100.
    Fewer than two points gives the zero state. A previous close of zero
    leaves the percentage undefined (None).
    """
    if len(series) < 2:
        return ZERO_CHANGE

    current_price = series[-1].close
    previous_price = series[-2].close
    change = current_price - previous_price

    percentage = None
    if previous_price != 0:
        percentage = change / previous_price * 100

    return PriceChange(
        change=change,
        percentage=percentage,
        is_positive=change >= 0,
    )

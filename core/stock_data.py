"""
Stock Data Fetcher — one FetchState per dashboard session.
Maps raw StockScan candles to chart points and tracks loading/error state.
Overlapping fetches are allowed; only the most recently issued one may
write its result.
"""

from __future__ import annotations
from datetime import datetime, timezone, tzinfo
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, TYPE_CHECKING
import logging

from core.formatters import format_date, parse_timestamp
from stockscan.errors import MalformedResponseError, NetworkError
from stockscan.models import FetchState, StockPoint, TimeFrame

if TYPE_CHECKING:
    from stockscan.client import StockScanClient

logger = logging.getLogger(__name__)

INVALID_FORMAT_MESSAGE = "Invalid data format received from API"
GENERIC_FAILURE_MESSAGE = "Failed to fetch data"


def _parse_close(value: Any, field: str) -> Decimal:
    # bool is an int subclass but never a price
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise MalformedResponseError(field, "must be a number or numeric string")
    try:
        close = Decimal(str(value).strip())
    except InvalidOperation:
        raise MalformedResponseError(field, f"is not numeric: {value!r}") from None
    if not close.is_finite():
        raise MalformedResponseError(field, f"is not finite: {value!r}")
    return close


def _parse_date(value: Any, field: str) -> datetime:
    if not isinstance(value, str):
        raise MalformedResponseError(field, "must be an ISO-8601 string")
    try:
        return parse_timestamp(value)
    except ValueError:
        raise MalformedResponseError(field, f"is not a valid date: {value!r}") from None


def map_candles(
    candles: List[Dict[str, Any]],
    time_frame: TimeFrame,
    tz: Optional[tzinfo] = None,
) -> List[StockPoint]:
    """
    Validate every raw candle and map it to a StockPoint, keeping upstream order.
    One bad entry rejects the whole list.
    """
    points = []
    for i, item in enumerate(candles):
        if not isinstance(item, dict):
            raise MalformedResponseError(f"candles[{i}]", "must be an object")
        if "date" not in item:
            raise MalformedResponseError(f"candles[{i}].date", "is missing")
        if "close" not in item:
            raise MalformedResponseError(f"candles[{i}].close", "is missing")

        full_date = _parse_date(item["date"], f"candles[{i}].date")
        points.append(StockPoint(
            date=format_date(full_date, time_frame, tz),
            close=_parse_close(item["close"], f"candles[{i}].close"),
            full_date=full_date,
        ))
    return points


class StockDataFetcher:
    """Runs fetch attempts against StockScan and owns the FetchState."""

    def __init__(self, client: "StockScanClient", display_tz: Optional[tzinfo] = None):
        self.client = client
        self.display_tz = display_tz or timezone.utc
        self.state = FetchState()
        self._latest_request = 0

    def _is_current(self, request_id: int) -> bool:
        return request_id == self._latest_request

    def begin(self, time_frame: TimeFrame) -> int:
        """
        Start an attempt: take the next request id and enter loading.
        Runs before any I/O so the state is Loading as soon as the user acts.
        """
        self._latest_request += 1
        request_id = self._latest_request

        self.state.loading = True
        self.state.error = ""
        logger.info(f"[FETCH] #{request_id} {self.client.symbol} {time_frame.value}")
        return request_id

    async def complete(self, request_id: int, time_frame: TimeFrame):
        """
        Request and map the candles for an attempt started with begin().
        If a newer attempt was begun meanwhile, the result is dropped and
        the newer attempt decides the final state.
        """
        error = ""
        points: Optional[List[StockPoint]] = None
        try:
            candles = await self.client.get_candles(time_frame)
            points = map_candles(candles, time_frame, self.display_tz)

        except MalformedResponseError as e:
            error = f"{INVALID_FORMAT_MESSAGE}: {e}"
            logger.warning(f"[FETCH] #{request_id} {time_frame.value}: malformed payload, {e}")
        except NetworkError as e:
            error = str(e)
            logger.warning(f"[FETCH] #{request_id} {time_frame.value}: {e}")
        except Exception as e:
            error = str(e) or GENERIC_FAILURE_MESSAGE
            logger.error(f"[FETCH] #{request_id} {time_frame.value}: unexpected error: {e}", exc_info=True)

        if not self._is_current(request_id):
            logger.debug(
                f"[FETCH] #{request_id} {time_frame.value}: stale, "
                f"superseded by #{self._latest_request}; discarded"
            )
            return

        if points is not None:
            self.state.data = points
            self.state.time_frame = time_frame
            self.state.updated_at = datetime.now(timezone.utc)
            logger.info(f"[FETCH] #{request_id} {time_frame.value}: {len(points)} points")
        self.state.error = error
        self.state.loading = False

    async def fetch(self, time_frame: TimeFrame):
        """Run one full fetch attempt. The caller observes self.state."""
        await self.complete(self.begin(time_frame), time_frame)

from __future__ import annotations

import asyncio
from decimal import Decimal

import pytest

from core.view import ViewStatus
from stockscan.models import TimeFrame


@pytest.mark.asyncio
async def test_view_is_idle_until_mounted(view) -> None:
    snap = view.snapshot()

    assert snap.status is ViewStatus.IDLE
    assert snap.time_frame is TimeFrame.HOURLY
    assert snap.points == []


@pytest.mark.asyncio
async def test_mount_loads_default_time_frame(upstream, view, hourly_candles) -> None:
    upstream.respond("hourly", {"candles": hourly_candles})

    task = view.mount()
    assert view.snapshot().status is ViewStatus.LOADING
    await task

    snap = view.snapshot()
    assert snap.status is ViewStatus.LOADED
    assert upstream.requests == ["/candle/v3/TSLA/hourly/NASDAQ"]
    assert snap.point_count == 2
    assert snap.current_price == Decimal("110")
    assert snap.current_price_text == "$110.00"
    assert snap.price_change.change == Decimal("10")
    assert snap.change_text == "$10.00"
    assert snap.percentage_text == "+10.00%"
    assert snap.time_frame_label == "Hourly"
    assert snap.error == ""


@pytest.mark.asyncio
async def test_loading_snapshot_hides_previous_series(upstream, view, hourly_candles, daily_candles) -> None:
    upstream.respond("hourly", {"candles": hourly_candles})
    await view.mount()
    upstream.respond("weekly", {"candles": daily_candles}, delay=0.2)

    task = view.select_time_frame(TimeFrame.WEEKLY)
    await asyncio.sleep(0.05)
    snap = view.snapshot()

    assert snap.status is ViewStatus.LOADING
    assert snap.points == []
    assert snap.point_count == 0
    assert snap.time_frame is TimeFrame.WEEKLY
    await task


@pytest.mark.asyncio
async def test_error_shows_message_and_retry_recovers(upstream, view, hourly_candles) -> None:
    upstream.respond("hourly", {}, status=502)
    await view.mount()

    snap = view.snapshot()
    assert snap.status is ViewStatus.ERROR
    assert snap.error == "HTTP error! status: 502"
    assert snap.points == []

    upstream.respond("hourly", {"candles": hourly_candles})
    await view.retry()

    snap = view.snapshot()
    assert snap.status is ViewStatus.LOADED
    assert snap.error == ""
    assert len(upstream.requests) == 2


@pytest.mark.asyncio
async def test_retry_uses_selected_time_frame(upstream, view) -> None:
    upstream.respond("monthly", {}, status=500)
    await view.select_time_frame(TimeFrame.MONTHLY)

    await view.retry()

    assert upstream.requests == [
        "/candle/v3/TSLA/monthly/NASDAQ",
        "/candle/v3/TSLA/monthly/NASDAQ",
    ]


@pytest.mark.asyncio
async def test_rapid_selection_shows_latest_requested(upstream, view, hourly_candles, daily_candles) -> None:
    upstream.respond("hourly", {"candles": hourly_candles}, delay=0.3)
    upstream.respond("daily", {"candles": daily_candles})

    first = view.mount()
    second = view.select_time_frame(TimeFrame.DAILY)
    await asyncio.gather(first, second)

    snap = view.snapshot()
    assert snap.status is ViewStatus.LOADED
    assert snap.time_frame is TimeFrame.DAILY
    assert snap.point_count == len(daily_candles)
    assert snap.current_price == Decimal("237.49")
    assert snap.price_change.is_positive is False


@pytest.mark.asyncio
async def test_empty_series_is_loaded_without_data(upstream, view) -> None:
    upstream.respond("hourly", {"candles": []})
    await view.mount()

    snap = view.snapshot()
    assert snap.status is ViewStatus.LOADED
    assert snap.has_data is False
    assert snap.current_price_text == "$0.00"


@pytest.mark.asyncio
async def test_buttons_mark_the_selected_time_frame(upstream, view) -> None:
    await view.select_time_frame(TimeFrame.WEEKLY)

    buttons = view.snapshot().buttons
    assert [b.key for b in buttons] == ["hourly", "daily", "weekly", "monthly"]
    assert [b.key for b in buttons if b.active] == ["weekly"]


@pytest.mark.asyncio
async def test_close_cancels_in_flight_fetch(upstream, view) -> None:
    upstream.respond("hourly", {"candles": []}, delay=1.0)
    task = view.mount()
    await asyncio.sleep(0.05)

    await view.close()

    assert task.cancelled()


@pytest.mark.asyncio
async def test_snapshot_dict_exposes_summary(upstream, view, hourly_candles) -> None:
    upstream.respond("hourly", {"candles": hourly_candles})
    await view.mount()

    data = view.snapshot(compact=True).to_dict()

    assert data["status"] == "loaded"
    assert data["compact"] is True
    assert data["summary"]["data_points"] == 2
    assert data["points"][0]["date"] == "Jan 5 14:00"


@pytest.mark.asyncio
async def test_selection_is_loading_before_the_task_runs(upstream, view, hourly_candles, daily_candles) -> None:
    upstream.respond("hourly", {"candles": hourly_candles})
    await view.mount()
    upstream.respond("daily", {"candles": daily_candles})

    task = view.select_time_frame(TimeFrame.DAILY)
    snap = view.snapshot()

    assert snap.status is ViewStatus.LOADING
    assert snap.time_frame_label == "Daily"
    assert snap.points == []
    await task
    assert view.snapshot().point_count == len(daily_candles)


@pytest.mark.asyncio
async def test_retry_leaves_error_state_immediately(upstream, view, hourly_candles) -> None:
    upstream.respond("hourly", {}, status=503)
    await view.mount()
    upstream.respond("hourly", {"candles": hourly_candles})

    task = view.retry()
    snap = view.snapshot()

    assert snap.status is ViewStatus.LOADING
    assert snap.error == ""
    await task

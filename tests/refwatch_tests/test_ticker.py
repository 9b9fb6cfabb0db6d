import asyncio
import itertools

import pytest

from refwatch.services.ticker import MatchTicker


class RecordingSession:
    def __init__(self, stop_after=None):
        self.ticks = []
        self.stop_after = stop_after
        self.ticker = None

    async def advance_tick(self, delta_millis, epoch=None):
        self.ticks.append((delta_millis, epoch))
        if self.stop_after is not None and len(self.ticks) >= self.stop_after:
            self.ticker.stop()


def _quarter_second_clock():
    readings = itertools.count()
    return lambda: next(readings) * 0.25


@pytest.mark.asyncio
async def test_ticker_reports_measured_deltas_with_its_epoch():
    session = RecordingSession(stop_after=3)
    ticker = MatchTicker(session, epoch=4, interval_ms=1, time_source=_quarter_second_clock())
    session.ticker = ticker

    ticker.start()
    await asyncio.wait_for(ticker.wait_stopped(), timeout=5)

    assert session.ticks == [(250, 4), (250, 4), (250, 4)]
    assert not ticker.active


@pytest.mark.asyncio
async def test_stop_from_outside_cancels_the_loop():
    session = RecordingSession()
    ticker = MatchTicker(session, epoch=0, interval_ms=10_000, time_source=_quarter_second_clock())

    ticker.start()
    assert ticker.active
    ticker.stop()
    await ticker.wait_stopped()

    assert session.ticks == []
    assert not ticker.active


@pytest.mark.asyncio
async def test_failing_tick_keeps_ticker_alive():
    calls = []

    class FlakySession:
        async def advance_tick(self, delta_millis, epoch=None):
            calls.append(delta_millis)
            if len(calls) == 1:
                raise RuntimeError("store hiccup")
            ticker.stop()

    ticker = MatchTicker(FlakySession(), epoch=0, interval_ms=1, time_source=_quarter_second_clock())
    ticker.start()
    await asyncio.wait_for(ticker.wait_stopped(), timeout=5)

    assert len(calls) == 2


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        MatchTicker(RecordingSession(), epoch=0, interval_ms=0)

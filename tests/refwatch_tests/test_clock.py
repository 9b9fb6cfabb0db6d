import pytest

from refwatch.domain.entities.clock import MatchClock
from refwatch.domain.errors import InvalidArgumentError


def test_reset_to_sets_full_duration_and_stops():
    clock = MatchClock(remaining_millis=10, elapsed_millis=50, running=True).reset_to(60_000)
    assert clock == MatchClock(remaining_millis=60_000, elapsed_millis=0, running=False)


def test_reset_to_negative_raises():
    with pytest.raises(InvalidArgumentError):
        MatchClock().reset_to(-1)


def test_start_is_noop_when_running_or_empty():
    running = MatchClock().reset_to(1000).start(1000)
    assert running.running
    assert running.start(5000) is running

    empty = MatchClock()
    assert empty.start(0) is empty


def test_tick_moves_time_between_remaining_and_elapsed():
    clock = MatchClock().reset_to(60_000).start(60_000)
    ticked, expired_now = clock.tick(1_500)

    assert not expired_now
    assert ticked.remaining_millis == 58_500
    assert ticked.elapsed_millis == 1_500
    assert ticked.running


def test_tick_caps_at_remaining_and_stops():
    clock = MatchClock(remaining_millis=500, elapsed_millis=59_500, running=True)
    ticked, expired_now = clock.tick(2_000)

    assert expired_now
    assert ticked.remaining_millis == 0
    assert ticked.elapsed_millis == 60_000
    assert not ticked.running
    assert ticked.expired


def test_tick_on_paused_clock_changes_nothing():
    clock = MatchClock().reset_to(60_000)
    ticked, expired_now = clock.tick(1_000)
    assert ticked is clock
    assert not expired_now


def test_negative_tick_raises():
    clock = MatchClock().reset_to(60_000).start(60_000)
    with pytest.raises(InvalidArgumentError):
        clock.tick(-1)


def test_elapsed_plus_remaining_is_constant():
    clock = MatchClock().reset_to(60_000).start(60_000)
    for delta in (0, 1, 999, 250, 30_000, 40_000):
        clock, _ = clock.tick(delta)
        assert clock.elapsed_millis + clock.remaining_millis == 60_000


def test_pause_keeps_times():
    clock = MatchClock().reset_to(60_000).start(60_000)
    clock, _ = clock.tick(2_000)
    paused = clock.pause()
    assert not paused.running
    assert paused.remaining_millis == 58_000
    assert paused.pause() is paused

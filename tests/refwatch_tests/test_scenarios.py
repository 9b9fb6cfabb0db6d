"""Whole-match scenarios at regulation length."""
import pytest

from refwatch.domain.aggregates.match_aggregate import MatchState
from refwatch.domain.entities.clock import MatchClock
from refwatch.domain.entities.settings import MatchSettings
from refwatch.domain.events import CardIssued, GoalScored, PhaseChanged
from refwatch.domain.value_objects.enums import CardType, Phase, Team


@pytest.fixture
def regulation():
    return MatchState.new(match_id="final", settings=MatchSettings(half_duration_minutes=45, halftime_duration_minutes=15))


def test_kickoff_then_first_half_expiry_then_halftime_clock(regulation, stamper):
    state = regulation.confirm_and_start(stamper)
    assert state.current_phase is Phase.FIRST_HALF
    assert state.clock.remaining_millis == 2_700_000
    assert state.clock.running
    logged_at_kickoff = len(state.event_log)

    state, signal = state.advance_tick(2_700_000, stamper)
    assert state.current_phase is Phase.HALF_TIME
    assert signal.ended_phase is Phase.FIRST_HALF
    [expiry] = state.event_log.since(logged_at_kickoff)
    assert [evt.new_phase for evt in state.event_log] == [Phase.FIRST_HALF, Phase.HALF_TIME]
    assert isinstance(expiry, PhaseChanged)
    assert expiry.new_phase is Phase.HALF_TIME
    assert expiry.game_time_millis == 2_700_000

    state = state.toggle_clock()
    assert state.clock.remaining_millis == 900_000
    assert state.clock.running


def test_goal_then_card_order(regulation, stamper):
    state = regulation.confirm_and_start(stamper)
    logged_at_kickoff = len(state.event_log)
    state = state.add_goal(Team.HOME, stamper).add_card(Team.AWAY, 7, CardType.RED, stamper)

    # the kickoff itself is logged first, as the PRE_GAME -> FIRST_HALF change
    kickoff, goal, card = state.event_log
    assert isinstance(kickoff, PhaseChanged) and kickoff.new_phase is Phase.FIRST_HALF
    assert isinstance(goal, GoalScored)
    assert (goal.team, goal.home_score_after, goal.away_score_after) == (Team.HOME, 1, 0)
    assert isinstance(card, CardIssued)
    assert (card.team, card.player_number, card.card_type) == (Team.AWAY, 7, CardType.RED)
    assert state.event_log.since(logged_at_kickoff) == (goal, card)
    assert (state.home_score, state.away_score) == (1, 0)


def test_two_home_goals(regulation, stamper):
    state = regulation.confirm_and_start(stamper)
    one = state.add_goal(Team.HOME, stamper)
    two = one.add_goal(Team.HOME, stamper)

    assert (one.home_score, one.away_score) == (1, 0)
    assert (two.home_score, two.away_score) == (2, 0)
    goals = two.event_log.of_type(GoalScored)
    assert [(g.home_score_after, g.away_score_after) for g in goals] == [(1, 0), (2, 0)]


def test_reset_keeps_colors(regulation, stamper):
    state = regulation.update_settings(home_color_argb=0xFF000000, away_color_argb=0xFFFFFFFF)
    state = state.confirm_and_start(stamper)
    state, _ = state.advance_tick(1_000_000, stamper)
    state = state.add_goal(Team.AWAY, stamper).advance_early(stamper)

    state = state.reset()

    assert state.current_phase is Phase.PRE_GAME
    assert (state.home_score, state.away_score) == (0, 0)
    assert len(state.event_log) == 0
    assert state.clock == MatchClock(remaining_millis=2_700_000, elapsed_millis=0, running=False)
    assert (state.settings.home_color_argb, state.settings.away_color_argb) == (0xFF000000, 0xFFFFFFFF)


def test_phases_without_duration_never_run(regulation, stamper):
    assert not regulation.toggle_clock().clock.running

    state = regulation.confirm_and_start(stamper)
    for _ in range(3):
        state = state.advance_early(stamper)
    assert state.current_phase is Phase.FULL_TIME
    assert state.phase_duration_millis == 0
    assert not state.toggle_clock().clock.running


@pytest.mark.parametrize("remaining, delta", [(1, 0), (1, 1), (2_700_000, 250), (900_000, 899_999), (500, 500)])
def test_tick_within_remaining(remaining, delta):
    clock = MatchClock().reset_to(remaining).start(remaining)
    ticked, _ = clock.tick(delta)
    assert ticked.remaining_millis == remaining - delta
    assert ticked.remaining_millis >= 0


def test_one_transition_per_expiry(regulation, stamper):
    state = regulation.confirm_and_start(stamper)
    for _ in range(10_799):
        state, signal = state.advance_tick(250, stamper)
        assert signal is None
    state, signal = state.advance_tick(250, stamper)

    assert signal is not None
    assert state.current_phase is Phase.HALF_TIME
    assert len(state.event_log.of_type(PhaseChanged)) == 2

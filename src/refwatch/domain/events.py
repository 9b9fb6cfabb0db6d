from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable
from uuid import uuid4

from refwatch.domain.value_objects.enums import CardType, Phase, Team


@dataclass(frozen=True)
class MatchEvent:
    event_id: str
    # Wall-clock time the event was logged, supplied by the host's stamper.
    occurred_on: datetime
    # Elapsed time in the current period when the event happened.
    game_time_millis: int


@dataclass(frozen=True)
class GoalScored(MatchEvent):
    """Scores are the totals *after* this goal."""
    team: Team
    home_score_after: int
    away_score_after: int


@dataclass(frozen=True)
class CardIssued(MatchEvent):
    team: Team
    player_number: int
    card_type: CardType


@dataclass(frozen=True)
class PhaseChanged(MatchEvent):
    """
    Fired on every phase transition. `game_time_millis` equals
    `prior_phase_elapsed_millis`: the time played in the phase that just ended
    (the full duration on natural expiry, less on an early advance).
    """
    new_phase: Phase
    prior_phase_elapsed_millis: int


@dataclass(frozen=True)
class GenericLog(MatchEvent):
    message: str


@dataclass(frozen=True)
class EventStamper:
    """
    Source of event identity and wall-clock time.
    The core never reads the clock itself; tests inject a deterministic stamper.
    """
    new_id: Callable[[], str] = field(default=lambda: str(uuid4()))
    now: Callable[[], datetime] = field(default=lambda: datetime.now(timezone.utc))


DEFAULT_STAMPER = EventStamper()


def format_time(millis: int) -> str:
    """MM:SS, minutes may exceed 59."""
    if millis < 0:
        return "00:00"
    total_seconds = millis // 1000
    return f"{total_seconds // 60:02d}:{total_seconds % 60:02d}"


def display_string(event: MatchEvent) -> str:
    """One human readable log line per event kind."""
    if isinstance(event, GoalScored):
        return (
            f"Goal: {event.team.value} ({event.home_score_after}-{event.away_score_after}) "
            f"at {format_time(event.game_time_millis)}"
        )
    elif isinstance(event, CardIssued):
        return (
            f"{event.card_type.readable()} Card: {event.team.value}, Player #{event.player_number} "
            f"at {format_time(event.game_time_millis)}"
        )
    elif isinstance(event, PhaseChanged):
        return f"{event.new_phase.readable()} (Clock: {format_time(event.game_time_millis)})"
    elif isinstance(event, GenericLog):
        return event.message
    else:
        raise ValueError(f"Unknown event type: {type(event).__name__}")

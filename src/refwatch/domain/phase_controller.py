from dataclasses import dataclass
from typing import Optional

from refwatch.domain.entities.clock import MatchClock
from refwatch.domain.entities.settings import MatchSettings
from refwatch.domain.events import EventStamper, PhaseChanged
from refwatch.domain.value_objects.enums import Phase, Team


@dataclass(frozen=True)
class PhaseTransition:
    """Everything a phase change rewrites on the aggregate."""
    new_phase: Phase
    clock: MatchClock
    kickoff_team: Team
    event: PhaseChanged


def kickoff_team_for(phase: Phase, settings: MatchSettings, current: Team) -> Team:
    """
    The initial kickoff team starts the first half, the other team the second.
    Any other phase keeps whoever kicked off last.
    """
    if phase in (Phase.PRE_GAME, Phase.FIRST_HALF):
        return settings.kickoff_team
    if phase is Phase.SECOND_HALF:
        return settings.kickoff_team.other()
    return current


def confirm_start(
    current_phase: Phase,
    clock: MatchClock,
    settings: MatchSettings,
    kickoff_team: Team,
    stamper: EventStamper,
) -> Optional[PhaseTransition]:
    """PRE_GAME -> FIRST_HALF. The only way into the match."""
    if current_phase is not Phase.PRE_GAME:
        return None
    return _apply(Phase.FIRST_HALF, clock, settings, kickoff_team, stamper)


def advance(
    current_phase: Phase,
    clock: MatchClock,
    settings: MatchSettings,
    kickoff_team: Team,
    stamper: EventStamper,
) -> Optional[PhaseTransition]:
    """
    Move to the next phase. Shared by natural expiry and early advance;
    the two differ only in how much of the phase had elapsed.
    Returns None from PRE_GAME and FULL_TIME.
    """
    target = current_phase.next_timed()
    if target is None:
        return None
    return _apply(target, clock, settings, kickoff_team, stamper)


def _apply(
    target: Phase,
    clock: MatchClock,
    settings: MatchSettings,
    kickoff_team: Team,
    stamper: EventStamper,
) -> PhaseTransition:
    prior_elapsed = clock.pause().elapsed_millis
    event = PhaseChanged(
        event_id=stamper.new_id(),
        occurred_on=stamper.now(),
        game_time_millis=prior_elapsed,
        new_phase=target,
        prior_phase_elapsed_millis=prior_elapsed,
    )
    return PhaseTransition(
        new_phase=target,
        clock=clock.pause().reset_to(settings.duration_millis_for(target)),
        kickoff_team=kickoff_team_for(target, settings, kickoff_team),
        event=event,
    )

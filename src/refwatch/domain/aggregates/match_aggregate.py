from dataclasses import dataclass, field, replace
from typing import Optional, Tuple
from uuid import uuid4

from refwatch.domain import phase_controller
from refwatch.domain.entities.clock import MatchClock
from refwatch.domain.entities.settings import MatchSettings
from refwatch.domain.errors import InvalidArgumentError
from refwatch.domain.event_log import EventLog
from refwatch.domain.events import DEFAULT_STAMPER, EventStamper, GenericLog
from refwatch.domain.phase_controller import PhaseTransition
from refwatch.domain.scoreboard import ScoreBoard
from refwatch.domain.value_objects.enums import CardType, MatchStatus, Phase, Team


@dataclass(frozen=True)
class PeriodExpired:
    """
    Emitted once when a phase's clock runs out naturally.
    The host turns it into whatever feedback its device offers.
    """
    match_id: str
    ended_phase: Phase
    new_phase: Phase


@dataclass(frozen=True)
class MatchState:
    """
    Immutable snapshot of one match.

    Every command returns a new snapshot, or `self` unchanged when the
    command is not allowed in the current phase, so callers can detect
    a rejection with `new is old`.
    """
    match_id: str
    settings: MatchSettings = field(default_factory=MatchSettings)
    current_phase: Phase = Phase.PRE_GAME
    clock: MatchClock = field(default_factory=MatchClock)
    scoreboard: ScoreBoard = field(default_factory=ScoreBoard)
    event_log: EventLog = field(default_factory=EventLog)
    current_period_kickoff_team: Team = Team.HOME

    @classmethod
    def new(cls, match_id: Optional[str] = None, settings: Optional[MatchSettings] = None) -> "MatchState":
        """A PRE_GAME baseline: zero score, empty log, clock showing the half duration."""
        settings = settings or MatchSettings()
        return cls(
            match_id=match_id or str(uuid4()),
            settings=settings,
            current_phase=Phase.PRE_GAME,
            clock=MatchClock().reset_to(settings.half_duration_millis),
            scoreboard=ScoreBoard(),
            event_log=EventLog(),
            current_period_kickoff_team=settings.kickoff_team,
        )

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def home_score(self) -> int:
        return self.scoreboard.home

    @property
    def away_score(self) -> int:
        return self.scoreboard.away

    @property
    def is_tied(self) -> bool:
        return self.scoreboard.is_tied

    @property
    def status(self) -> MatchStatus:
        return self.current_phase.status()

    @property
    def phase_duration_millis(self) -> int:
        return self.settings.duration_millis_for(self.current_phase)

    @property
    def summary(self) -> str:
        home = self.settings.home_team_name.strip()
        away = self.settings.away_team_name.strip()
        if (home and home != "Home") or (away and away != "Away"):
            text = f"{home} vs {away}"
        else:
            text = "Game"
        age_group = self.settings.age_group
        if age_group is not None and age_group.display_name.lower() != "unknown":
            text += f" ({age_group.display_name})"
        if text == "Game":
            text = f"Game ID: {self.match_id[:8]}"
        return text

    # ------------------------------------------------------------------
    # COMMANDS
    # ------------------------------------------------------------------

    def confirm_and_start(self, stamper: EventStamper = DEFAULT_STAMPER) -> "MatchState":
        transition = phase_controller.confirm_start(
            self.current_phase, self.clock, self.settings, self.current_period_kickoff_team, stamper
        )
        if transition is None:
            return self
        # the first half clock runs from the kickoff
        kicked_off = self._apply_transition(transition)
        return replace(kicked_off, clock=kicked_off.clock.start(self.settings.half_duration_millis))

    def toggle_clock(self) -> "MatchState":
        if self.clock.running:
            return replace(self, clock=self.clock.pause())
        if not self.current_phase.has_duration or self.phase_duration_millis <= 0 or self.clock.expired:
            return self
        return replace(self, clock=self.clock.start(self.clock.remaining_millis))

    def advance_tick(
        self,
        delta_millis: int,
        stamper: EventStamper = DEFAULT_STAMPER,
    ) -> Tuple["MatchState", Optional[PeriodExpired]]:
        """
        Drive the clock forward. When the phase runs out, the transition to
        the next phase happens in the same step and a PeriodExpired signal is
        returned alongside the new snapshot.
        """
        ticked, expired_now = self.clock.tick(delta_millis)
        if not expired_now:
            if ticked is self.clock:
                return self, None
            return replace(self, clock=ticked), None

        ran_out = replace(self, clock=ticked)
        transition = phase_controller.advance(
            ran_out.current_phase, ticked, self.settings, self.current_period_kickoff_team, stamper
        )
        if transition is None:
            return ran_out, None
        signal = PeriodExpired(
            match_id=self.match_id,
            ended_phase=self.current_phase,
            new_phase=transition.new_phase,
        )
        return ran_out._apply_transition(transition), signal

    def add_goal(self, team: Team, stamper: EventStamper = DEFAULT_STAMPER) -> "MatchState":
        result = self.scoreboard.record_goal(team, self.current_phase, self.clock.elapsed_millis, stamper)
        if result is None:
            return self
        scoreboard, event = result
        return replace(self, scoreboard=scoreboard, event_log=self.event_log.append(event))

    def add_card(
        self,
        team: Team,
        player_number: int,
        card_type: CardType,
        stamper: EventStamper = DEFAULT_STAMPER,
    ) -> "MatchState":
        event = self.scoreboard.record_card(
            team, player_number, card_type, self.current_phase, self.clock.elapsed_millis, stamper
        )
        if event is None:
            return self
        return replace(self, event_log=self.event_log.append(event))

    def advance_early(self, stamper: EventStamper = DEFAULT_STAMPER) -> "MatchState":
        """Manual advance, e.g. the referee ends a half before the clock does."""
        if self.current_phase.next_timed() is None:
            return self
        paused = self.clock.pause()
        transition = phase_controller.advance(
            self.current_phase, paused, self.settings, self.current_period_kickoff_team, stamper
        )
        return replace(self, clock=paused)._apply_transition(transition)

    def update_settings(self, **changes) -> "MatchState":
        """
        Durations and kickoff team change only before kickoff; colors and
        team names change at any time. In PRE_GAME the clock follows the new
        half duration; once the match is on, the running clock is untouched.
        """
        in_pre_game = self.current_phase is Phase.PRE_GAME
        settings = self.settings.with_changes(allow_timing=in_pre_game, **changes)
        if settings == self.settings:
            return self
        if not in_pre_game:
            return replace(self, settings=settings)
        return replace(
            self,
            settings=settings,
            clock=self.clock.pause().reset_to(settings.half_duration_millis),
            current_period_kickoff_team=settings.kickoff_team,
        )

    def log_note(self, message: str, stamper: EventStamper = DEFAULT_STAMPER) -> "MatchState":
        if not message or not message.strip():
            raise InvalidArgumentError("Note message must not be empty")
        event = GenericLog(
            event_id=stamper.new_id(),
            occurred_on=stamper.now(),
            game_time_millis=self.clock.elapsed_millis,
            message=message.strip(),
        )
        return replace(self, event_log=self.event_log.append(event))

    def reset(self) -> "MatchState":
        """Back to a PRE_GAME baseline, keeping the configured settings."""
        return MatchState.new(match_id=self.match_id, settings=self.settings)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _apply_transition(self, transition: PhaseTransition) -> "MatchState":
        return replace(
            self,
            current_phase=transition.new_phase,
            clock=transition.clock,
            current_period_kickoff_team=transition.kickoff_team,
            event_log=self.event_log.append(transition.event),
        )

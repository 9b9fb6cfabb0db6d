from dataclasses import dataclass
from typing import Optional, Tuple

from refwatch.domain.errors import InvalidArgumentError
from refwatch.domain.events import CardIssued, EventStamper, GoalScored
from refwatch.domain.value_objects.enums import CardType, Phase, Team


@dataclass(frozen=True)
class ScoreBoard:
    home: int = 0
    away: int = 0

    def record_goal(
        self,
        team: Team,
        phase: Phase,
        game_time_millis: int,
        stamper: EventStamper,
    ) -> Optional[Tuple["ScoreBoard", GoalScored]]:
        """None outside playable phases; otherwise the new score and its event."""
        if not phase.is_playable:
            return None

        scored = ScoreBoard(
            home=self.home + (1 if team is Team.HOME else 0),
            away=self.away + (1 if team is Team.AWAY else 0),
        )
        event = GoalScored(
            event_id=stamper.new_id(),
            occurred_on=stamper.now(),
            game_time_millis=game_time_millis,
            team=team,
            home_score_after=scored.home,
            away_score_after=scored.away,
        )
        return scored, event

    def record_card(
        self,
        team: Team,
        player_number: int,
        card_type: CardType,
        phase: Phase,
        game_time_millis: int,
        stamper: EventStamper,
    ) -> Optional[CardIssued]:
        # no roster lookup: any shirt number is accepted
        if isinstance(player_number, bool) or not isinstance(player_number, int) or player_number <= 0:
            raise InvalidArgumentError(f"Player number must be a positive integer, got {player_number!r}")
        if not phase.is_playable:
            return None

        return CardIssued(
            event_id=stamper.new_id(),
            occurred_on=stamper.now(),
            game_time_millis=game_time_millis,
            team=team,
            player_number=player_number,
            card_type=card_type,
        )

    @property
    def is_tied(self) -> bool:
        return self.home == self.away

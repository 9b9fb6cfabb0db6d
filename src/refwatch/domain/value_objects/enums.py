from enum import Enum
from typing import Optional


class Team(Enum):
    HOME = "HOME"
    AWAY = "AWAY"

    def other(self) -> "Team":
        return Team.AWAY if self is Team.HOME else Team.HOME


class CardType(Enum):
    YELLOW = "YELLOW"
    RED = "RED"

    def readable(self) -> str:
        return self.value.capitalize()


class MatchStatus(Enum):
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class Phase(Enum):
    """
    Segments of a match, in playing order.
    Extra time and penalties would slot in after SECOND_HALF.
    """
    PRE_GAME = "PRE_GAME"
    FIRST_HALF = "FIRST_HALF"
    HALF_TIME = "HALF_TIME"
    SECOND_HALF = "SECOND_HALF"
    FULL_TIME = "FULL_TIME"

    @property
    def has_duration(self) -> bool:
        return self in _TIMED_PHASES

    @property
    def is_playable(self) -> bool:
        """Goals and cards may only be recorded while the ball is in play."""
        return self in _PLAYABLE_PHASES

    def readable(self) -> str:
        return _READABLE_NAMES.get(self) or self.value.replace("_", " ").title()

    def status(self) -> MatchStatus:
        if self is Phase.PRE_GAME:
            return MatchStatus.SCHEDULED
        if self is Phase.FULL_TIME:
            return MatchStatus.COMPLETED
        return MatchStatus.IN_PROGRESS

    def next_timed(self) -> Optional["Phase"]:
        """
        The phase reached when this one ends, by expiry or early advance.
        PRE_GAME only leaves through an explicit confirm, FULL_TIME only through reset.
        """
        return _NEXT_PHASE.get(self)


_TIMED_PHASES = frozenset({Phase.FIRST_HALF, Phase.HALF_TIME, Phase.SECOND_HALF})
_PLAYABLE_PHASES = frozenset({Phase.FIRST_HALF, Phase.SECOND_HALF})

_NEXT_PHASE = {
    Phase.FIRST_HALF: Phase.HALF_TIME,
    Phase.HALF_TIME: Phase.SECOND_HALF,
    Phase.SECOND_HALF: Phase.FULL_TIME,
}

_READABLE_NAMES = {
    Phase.PRE_GAME: "Pre Game",
    Phase.FIRST_HALF: "1st Half",
    Phase.HALF_TIME: "Halftime",
    Phase.SECOND_HALF: "2nd Half",
    Phase.FULL_TIME: "Full Time",
}

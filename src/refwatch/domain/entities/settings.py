from dataclasses import dataclass, replace
from typing import Optional

from refwatch.constants import (
    DEFAULT_AWAY_COLOR_ARGB,
    DEFAULT_AWAY_TEAM_NAME,
    DEFAULT_HALF_DURATION_MINUTES,
    DEFAULT_HALFTIME_DURATION_MINUTES,
    DEFAULT_HOME_COLOR_ARGB,
    DEFAULT_HOME_TEAM_NAME,
    MILLIS_PER_MINUTE,
)
from refwatch.domain.errors import InvalidArgumentError
from refwatch.domain.value_objects.age_groups import AgeGroup
from refwatch.domain.value_objects.enums import Phase, Team

# Fields that shape the match clock; frozen once the first half kicks off.
TIMING_FIELDS = frozenset({"half_duration_minutes", "halftime_duration_minutes", "kickoff_team", "age_group"})
# Cosmetic fields; editable in any phase.
COSMETIC_FIELDS = frozenset({"home_color_argb", "away_color_argb", "home_team_name", "away_team_name"})
_DURATION_FIELDS = ("half_duration_minutes", "halftime_duration_minutes")


def _check_duration(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidArgumentError(f"{name} must be a positive integer, got {value!r}")


@dataclass(frozen=True)
class MatchSettings:
    half_duration_minutes: int = DEFAULT_HALF_DURATION_MINUTES
    halftime_duration_minutes: int = DEFAULT_HALFTIME_DURATION_MINUTES
    home_color_argb: int = DEFAULT_HOME_COLOR_ARGB
    away_color_argb: int = DEFAULT_AWAY_COLOR_ARGB
    kickoff_team: Team = Team.HOME
    home_team_name: str = DEFAULT_HOME_TEAM_NAME
    away_team_name: str = DEFAULT_AWAY_TEAM_NAME
    age_group: Optional[AgeGroup] = None

    def __post_init__(self):
        for name in _DURATION_FIELDS:
            _check_duration(name, getattr(self, name))

    @classmethod
    def for_age_group(cls, age_group: AgeGroup, **overrides) -> "MatchSettings":
        """Settings pre-filled with the customary durations of an age bracket."""
        fields = {
            "half_duration_minutes": age_group.half_duration_minutes,
            "halftime_duration_minutes": age_group.halftime_duration_minutes,
            "age_group": age_group,
        }
        fields.update(overrides)
        return cls(**fields)

    @property
    def half_duration_millis(self) -> int:
        return self.half_duration_minutes * MILLIS_PER_MINUTE

    @property
    def halftime_duration_millis(self) -> int:
        return self.halftime_duration_minutes * MILLIS_PER_MINUTE

    def duration_millis_for(self, phase: Phase) -> int:
        """Configured length of a phase; zero for phases without a clock."""
        if phase in (Phase.FIRST_HALF, Phase.SECOND_HALF):
            return self.half_duration_millis
        if phase is Phase.HALF_TIME:
            return self.halftime_duration_millis
        return 0

    def team_name(self, team: Team) -> str:
        return self.home_team_name if team is Team.HOME else self.away_team_name

    def with_changes(self, allow_timing: bool, **changes) -> "MatchSettings":
        """
        Return a copy with `changes` applied. Timing fields are dropped
        unless `allow_timing` is set; unknown field names raise.
        """
        unknown = set(changes) - TIMING_FIELDS - COSMETIC_FIELDS
        if unknown:
            raise InvalidArgumentError(f"Unknown settings fields: {sorted(unknown)}")
        # a bad duration is an argument error even when it would be ignored
        for name in _DURATION_FIELDS:
            if changes.get(name) is not None:
                _check_duration(name, changes[name])

        accepted = {
            name: value for name, value in changes.items()
            if value is not None and (allow_timing or name not in TIMING_FIELDS)
        }
        if not accepted:
            return self
        return replace(self, **accepted)

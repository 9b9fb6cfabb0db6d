import pytest

from refwatch.domain.entities.settings import MatchSettings
from refwatch.domain.errors import InvalidArgumentError
from refwatch.domain.value_objects.age_groups import AgeGroup
from refwatch.domain.value_objects.enums import MatchStatus, Phase, Team


def test_defaults():
    settings = MatchSettings()
    assert settings.half_duration_minutes == 45
    assert settings.halftime_duration_minutes == 15
    assert settings.kickoff_team is Team.HOME
    assert settings.home_color_argb == 0xFFE53935
    assert settings.away_color_argb == 0xFF1E88E5
    assert settings.half_duration_millis == 45 * 60_000


@pytest.mark.parametrize("bad", [0, -1, True, 1.5, "45"])
def test_duration_must_be_positive_int(bad):
    with pytest.raises(InvalidArgumentError):
        MatchSettings(half_duration_minutes=bad)


def test_duration_for_each_phase():
    settings = MatchSettings(half_duration_minutes=40, halftime_duration_minutes=10)
    assert settings.duration_millis_for(Phase.FIRST_HALF) == 2_400_000
    assert settings.duration_millis_for(Phase.SECOND_HALF) == 2_400_000
    assert settings.duration_millis_for(Phase.HALF_TIME) == 600_000
    assert settings.duration_millis_for(Phase.PRE_GAME) == 0
    assert settings.duration_millis_for(Phase.FULL_TIME) == 0


def test_with_changes_drops_timing_when_not_allowed():
    settings = MatchSettings()
    changed = settings.with_changes(allow_timing=False, half_duration_minutes=20, away_team_name="Tigers")
    assert changed.half_duration_minutes == 45
    assert changed.away_team_name == "Tigers"


def test_with_changes_ignores_none():
    settings = MatchSettings()
    assert settings.with_changes(allow_timing=True, home_team_name=None) is settings


def test_with_changes_validates_ignored_durations():
    with pytest.raises(InvalidArgumentError):
        MatchSettings().with_changes(allow_timing=False, halftime_duration_minutes=-5)


def test_for_age_group():
    settings = MatchSettings.for_age_group(AgeGroup.U12, kickoff_team=Team.AWAY)
    assert settings.half_duration_minutes == 30
    assert settings.halftime_duration_minutes == 10
    assert settings.age_group is AgeGroup.U12
    assert settings.kickoff_team is Team.AWAY


@pytest.mark.parametrize("text, expected", [
    ("U10", AgeGroup.U10),
    ("10U", AgeGroup.U10),
    ("u 12", AgeGroup.U12),
    ("9U", AgeGroup.U10),
    ("U-14", AgeGroup.U14),
    ("Adult Generic", AgeGroup.GENERIC_ADULT),
    ("youth generic", AgeGroup.GENERIC_YOUTH),
    ("", AgeGroup.UNKNOWN),
    (None, AgeGroup.UNKNOWN),
    ("veterans", AgeGroup.UNKNOWN),
])
def test_age_group_from_string(text, expected):
    assert AgeGroup.from_string(text) is expected


@pytest.mark.parametrize("age, expected", [
    (6, AgeGroup.U8),
    (9, AgeGroup.U10),
    (19, AgeGroup.U19),
    (35, AgeGroup.GENERIC_ADULT),
    (-1, AgeGroup.UNKNOWN),
])
def test_age_group_from_age(age, expected):
    assert AgeGroup.from_age(age) is expected


def test_phase_helpers():
    assert [p.readable() for p in Phase] == ["Pre Game", "1st Half", "Halftime", "2nd Half", "Full Time"]
    assert Phase.PRE_GAME.next_timed() is None
    assert Phase.FULL_TIME.next_timed() is None
    assert Phase.SECOND_HALF.next_timed() is Phase.FULL_TIME
    assert Phase.HALF_TIME.status() is MatchStatus.IN_PROGRESS
    assert not Phase.HALF_TIME.is_playable
    assert Team.HOME.other() is Team.AWAY

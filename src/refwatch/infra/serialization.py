"""
Snapshot codec shared by every store and the HTTP layer.
Wire format of a snapshot (UTF-8 JSON):
{
  "schema_version": 1,
  "match_id": "...",
  "settings": {...},
  "current_phase": "FIRST_HALF",
  "clock": {"remaining_millis": ..., "elapsed_millis": ..., "running": false},
  "home_score": 1, "away_score": 0,
  "current_period_kickoff_team": "HOME",
  "events": [
     {"eventType": "GOAL", "event_id": "...", "occurred_on": "...", "game_time_millis": ..., ...},
     ...
  ]
}
"""
import json
from datetime import datetime
from typing import Dict

from refwatch.constants import EVENT_TYPE_KEY, SNAPSHOT_SCHEMA_VERSION
from refwatch.domain.aggregates.match_aggregate import MatchState
from refwatch.domain.entities.clock import MatchClock
from refwatch.domain.entities.settings import MatchSettings
from refwatch.domain.event_log import EventLog
from refwatch.domain.events import CardIssued, GenericLog, GoalScored, MatchEvent, PhaseChanged
from refwatch.domain.scoreboard import ScoreBoard
from refwatch.domain.value_objects.age_groups import AgeGroup
from refwatch.domain.value_objects.enums import CardType, Phase, Team

# Discriminator values written under "eventType"
GOAL = "GOAL"
CARD = "CARD"
PHASE_CHANGE = "PHASE_CHANGE"
GENERIC_LOG = "GENERIC_LOG"


def serialize(snapshot: MatchState) -> bytes:
    return json.dumps(snapshot_to_dict(snapshot), sort_keys=True).encode("utf-8")


def deserialize(data: bytes) -> MatchState:
    return snapshot_from_dict(json.loads(data.decode("utf-8")))


def snapshot_to_dict(snapshot: MatchState) -> Dict:
    return {
        "schema_version": SNAPSHOT_SCHEMA_VERSION,
        "match_id": snapshot.match_id,
        "settings": _settings_to_dict(snapshot.settings),
        "current_phase": snapshot.current_phase.value,
        "clock": {
            "remaining_millis": snapshot.clock.remaining_millis,
            "elapsed_millis": snapshot.clock.elapsed_millis,
            "running": snapshot.clock.running,
        },
        "home_score": snapshot.home_score,
        "away_score": snapshot.away_score,
        "current_period_kickoff_team": snapshot.current_period_kickoff_team.value,
        "events": [event_to_dict(evt) for evt in snapshot.event_log],
    }


def snapshot_from_dict(data: Dict) -> MatchState:
    version = data.get("schema_version", SNAPSHOT_SCHEMA_VERSION)
    if version != SNAPSHOT_SCHEMA_VERSION:
        raise ValueError(f"Unsupported snapshot schema version: {version}")

    clock = data["clock"]
    return MatchState(
        match_id=data["match_id"],
        settings=_settings_from_dict(data["settings"]),
        current_phase=Phase(data["current_phase"]),
        clock=MatchClock(
            remaining_millis=clock["remaining_millis"],
            elapsed_millis=clock["elapsed_millis"],
            running=clock["running"],
        ),
        scoreboard=ScoreBoard(home=data["home_score"], away=data["away_score"]),
        event_log=EventLog(tuple(event_from_dict(row) for row in data.get("events", []))),
        current_period_kickoff_team=Team(data["current_period_kickoff_team"]),
    )


# ------------- Events ----------------------------

def event_to_dict(evt: MatchEvent) -> Dict:
    """Convert a match event to a dict tagged with its kind."""
    row = {
        "event_id": evt.event_id,
        "occurred_on": evt.occurred_on.isoformat(),
        "game_time_millis": evt.game_time_millis,
    }
    if isinstance(evt, GoalScored):
        row.update({
            EVENT_TYPE_KEY: GOAL,
            "team": evt.team.value,
            "home_score_after": evt.home_score_after,
            "away_score_after": evt.away_score_after,
        })
    elif isinstance(evt, CardIssued):
        row.update({
            EVENT_TYPE_KEY: CARD,
            "team": evt.team.value,
            "player_number": evt.player_number,
            "card_type": evt.card_type.value,
        })
    elif isinstance(evt, PhaseChanged):
        row.update({
            EVENT_TYPE_KEY: PHASE_CHANGE,
            "new_phase": evt.new_phase.value,
            "prior_phase_elapsed_millis": evt.prior_phase_elapsed_millis,
        })
    elif isinstance(evt, GenericLog):
        row.update({
            EVENT_TYPE_KEY: GENERIC_LOG,
            "message": evt.message,
        })
    else:
        raise ValueError(f"Unknown event type: {type(evt).__name__}")
    return row


def event_from_dict(row: Dict) -> MatchEvent:
    """Rebuild the right event class from its discriminator."""
    event_type = row.get(EVENT_TYPE_KEY)
    common = {
        "event_id": row["event_id"],
        "occurred_on": datetime.fromisoformat(row["occurred_on"]),
        "game_time_millis": row["game_time_millis"],
    }
    if event_type == GOAL:
        return GoalScored(
            **common,
            team=Team(row["team"]),
            home_score_after=row["home_score_after"],
            away_score_after=row["away_score_after"],
        )
    elif event_type == CARD:
        return CardIssued(
            **common,
            team=Team(row["team"]),
            player_number=row["player_number"],
            card_type=CardType(row["card_type"]),
        )
    elif event_type == PHASE_CHANGE:
        return PhaseChanged(
            **common,
            new_phase=Phase(row["new_phase"]),
            prior_phase_elapsed_millis=row["prior_phase_elapsed_millis"],
        )
    elif event_type == GENERIC_LOG:
        return GenericLog(**common, message=row["message"])
    else:
        raise ValueError(f"Unknown event type: {event_type}")


# ------------- Settings --------------------------

def _settings_to_dict(settings: MatchSettings) -> Dict:
    return {
        "half_duration_minutes": settings.half_duration_minutes,
        "halftime_duration_minutes": settings.halftime_duration_minutes,
        "home_color_argb": settings.home_color_argb,
        "away_color_argb": settings.away_color_argb,
        "kickoff_team": settings.kickoff_team.value,
        "home_team_name": settings.home_team_name,
        "away_team_name": settings.away_team_name,
        "age_group": settings.age_group.name if settings.age_group else None,
    }


def _settings_from_dict(data: Dict) -> MatchSettings:
    age_group = data.get("age_group")
    return MatchSettings(
        half_duration_minutes=data["half_duration_minutes"],
        halftime_duration_minutes=data["halftime_duration_minutes"],
        home_color_argb=data["home_color_argb"],
        away_color_argb=data["away_color_argb"],
        kickoff_team=Team(data["kickoff_team"]),
        home_team_name=data["home_team_name"],
        away_team_name=data["away_team_name"],
        age_group=AgeGroup[age_group] if age_group else None,
    )

from typing import List, Optional
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from refwatch.domain.aggregates.match_aggregate import MatchState
from refwatch.domain.entities.settings import MatchSettings
from refwatch.domain.errors import InvalidArgumentError
from refwatch.domain.value_objects.age_groups import AgeGroup
from refwatch.domain.value_objects.enums import CardType, Team
from refwatch.infra.serialization import snapshot_to_dict
from refwatch.services.match_session import MatchSession
from refwatch.services.registry import MatchSessionRegistry

import logging
logger = logging.getLogger(__name__)

router = APIRouter()


# ------------- Request bodies ---------------------

class CreateMatchRequest(BaseModel):
    match_id: Optional[str] = None
    age_group: Optional[str] = None
    half_duration_minutes: Optional[int] = None
    halftime_duration_minutes: Optional[int] = None
    home_team_name: Optional[str] = None
    away_team_name: Optional[str] = None
    home_color_argb: Optional[int] = None
    away_color_argb: Optional[int] = None
    kickoff_team: Optional[Team] = None


class SettingsPatch(BaseModel):
    half_duration_minutes: Optional[int] = None
    halftime_duration_minutes: Optional[int] = None
    home_team_name: Optional[str] = None
    away_team_name: Optional[str] = None
    home_color_argb: Optional[int] = None
    away_color_argb: Optional[int] = None
    kickoff_team: Optional[Team] = None


class GoalRequest(BaseModel):
    team: Team


class CardRequest(BaseModel):
    team: Team
    player_number: int
    card_type: CardType


class NoteRequest(BaseModel):
    message: str = Field(min_length=1)


# ------------- Dependencies -----------------------

def get_registry(request: Request) -> MatchSessionRegistry:
    return request.app.state.registry


async def get_match_session(match_id: str, registry: MatchSessionRegistry = Depends(get_registry)) -> MatchSession:
    session = await registry.get(match_id)
    if session is None:
        raise HTTPException(
            status_code=404,
            detail={
                "message": f"No match found with id {match_id}",
                "error_code": "MATCH_NOT_FOUND",
            }
        )
    return session


def snapshot_response(snapshot: MatchState) -> dict:
    body = snapshot_to_dict(snapshot)
    body["status"] = snapshot.status.value
    body["summary"] = snapshot.summary
    return body


async def _run(command) -> dict:
    """Await a session command, mapping argument errors to 422."""
    try:
        return snapshot_response(await command)
    except InvalidArgumentError as e:
        raise HTTPException(status_code=422, detail=str(e))


# ------------- Routes -----------------------------

@router.post("/matches", status_code=201)
async def create_match(request: CreateMatchRequest, registry: MatchSessionRegistry = Depends(get_registry)) -> dict:
    """
    Open (or restore) a match. Fields left out fall back to the age group's
    customary durations, then to the service defaults.
    """
    overrides = request.model_dump(exclude_none=True, exclude={"match_id", "age_group"})
    try:
        if request.age_group:
            settings = MatchSettings.for_age_group(AgeGroup.from_string(request.age_group), **overrides)
        elif overrides:
            base = registry.config
            overrides.setdefault("half_duration_minutes", base.default_half_duration_minutes)
            overrides.setdefault("halftime_duration_minutes", base.default_halftime_duration_minutes)
            settings = MatchSettings(**overrides)
        else:
            settings = None
    except InvalidArgumentError as e:
        raise HTTPException(status_code=422, detail=str(e))

    session = await registry.create(request.match_id or str(uuid4()), settings)
    logger.info(f"Match {session.match_id} ready")
    return snapshot_response(session.state)


@router.get("/matches/{match_id}")
async def get_match(session: MatchSession = Depends(get_match_session)) -> dict:
    return snapshot_response(session.state)


@router.get("/matches/{match_id}/log")
async def get_match_log(session: MatchSession = Depends(get_match_session)) -> List[str]:
    """Human readable log lines, oldest first."""
    return list(session.state.event_log.render_display_strings())


@router.post("/matches/{match_id}/start")
async def confirm_and_start(session: MatchSession = Depends(get_match_session)) -> dict:
    return await _run(session.confirm_and_start())


@router.post("/matches/{match_id}/clock/toggle")
async def toggle_clock(session: MatchSession = Depends(get_match_session)) -> dict:
    return await _run(session.toggle_clock())


@router.post("/matches/{match_id}/goals")
async def add_goal(request: GoalRequest, session: MatchSession = Depends(get_match_session)) -> dict:
    return await _run(session.add_goal(request.team))


@router.post("/matches/{match_id}/cards")
async def add_card(request: CardRequest, session: MatchSession = Depends(get_match_session)) -> dict:
    return await _run(session.add_card(request.team, request.player_number, request.card_type))


@router.post("/matches/{match_id}/advance")
async def advance_early(session: MatchSession = Depends(get_match_session)) -> dict:
    return await _run(session.advance_early())


@router.patch("/matches/{match_id}/settings")
async def update_settings(request: SettingsPatch, session: MatchSession = Depends(get_match_session)) -> dict:
    return await _run(session.update_settings(**request.model_dump(exclude_none=True)))


@router.post("/matches/{match_id}/notes")
async def log_note(request: NoteRequest, session: MatchSession = Depends(get_match_session)) -> dict:
    return await _run(session.log_note(request.message))


@router.post("/matches/{match_id}/reset")
async def reset_match(session: MatchSession = Depends(get_match_session)) -> dict:
    return await _run(session.reset())

import pytest
from fastapi.testclient import TestClient

from refwatch.config.settings import AppConfig
from refwatch.infra.repo.match import MatchRepository
from refwatch.infra.repo.snapshot_store.base import InMemorySnapshotStore
from refwatch.main import create_app
from refwatch.services.registry import MatchSessionRegistry


@pytest.fixture
def client(tmp_path):
    config = AppConfig(log_dir=tmp_path / "logs", tick_interval_ms=60_000)
    registry = MatchSessionRegistry(MatchRepository(InMemorySnapshotStore()), config=config, per_match_logs=False)
    with TestClient(create_app(registry=registry, config=config)) as client:
        yield client


def _create(client, **body):
    body.setdefault("match_id", "m1")
    body.setdefault("half_duration_minutes", 1)
    body.setdefault("halftime_duration_minutes", 1)
    response = client.post("/refwatch/matches", json=body)
    assert response.status_code == 201
    return response.json()


def test_create_match(client):
    body = _create(client)

    assert body["match_id"] == "m1"
    assert body["current_phase"] == "PRE_GAME"
    assert body["status"] == "SCHEDULED"
    assert body["clock"] == {"remaining_millis": 60_000, "elapsed_millis": 0, "running": False}
    assert body["events"] == []


def test_create_match_from_age_group(client):
    response = client.post("/refwatch/matches", json={"match_id": "kids", "age_group": "U12"})

    settings = response.json()["settings"]
    assert settings["half_duration_minutes"] == 30
    assert settings["age_group"] == "U12"


def test_unknown_match_is_404(client):
    response = client.get("/refwatch/matches/ghost")
    assert response.status_code == 404
    assert response.json()["detail"]["error_code"] == "MATCH_NOT_FOUND"


def test_play_and_read_log(client):
    _create(client, home_team_name="Lions")
    client.post("/refwatch/matches/m1/start")
    client.post("/refwatch/matches/m1/goals", json={"team": "HOME"})
    response = client.post(
        "/refwatch/matches/m1/cards",
        json={"team": "AWAY", "player_number": 7, "card_type": "RED"},
    )
    body = response.json()
    assert body["current_phase"] == "FIRST_HALF"
    assert (body["home_score"], body["away_score"]) == (1, 0)
    assert body["summary"] == "Lions vs Away"

    lines = client.get("/refwatch/matches/m1/log").json()
    assert lines == [
        "1st Half (Clock: 00:00)",
        "Goal: HOME (1-0) at 00:00",
        "Red Card: AWAY, Player #7 at 00:00",
    ]


def test_rejected_command_returns_unchanged_snapshot(client):
    created = _create(client)
    response = client.post("/refwatch/matches/m1/goals", json={"team": "AWAY"})

    assert response.status_code == 200
    assert response.json()["events"] == created["events"]


def test_invalid_card_is_422(client):
    _create(client)
    client.post("/refwatch/matches/m1/start")
    response = client.post(
        "/refwatch/matches/m1/cards",
        json={"team": "HOME", "player_number": 0, "card_type": "YELLOW"},
    )
    assert response.status_code == 422


def test_settings_patch(client):
    _create(client)
    response = client.patch("/refwatch/matches/m1/settings", json={"half_duration_minutes": 2})
    assert response.json()["clock"]["remaining_millis"] == 120_000

    response = client.patch("/refwatch/matches/m1/settings", json={"halftime_duration_minutes": 0})
    assert response.status_code == 422


def test_clock_toggle_advance_and_reset(client):
    _create(client)
    started = client.post("/refwatch/matches/m1/start").json()
    assert started["clock"]["running"]

    paused = client.post("/refwatch/matches/m1/clock/toggle").json()
    assert not paused["clock"]["running"]
    resumed = client.post("/refwatch/matches/m1/clock/toggle").json()
    assert resumed["clock"]["running"]

    half_time = client.post("/refwatch/matches/m1/advance").json()
    assert half_time["current_phase"] == "HALF_TIME"
    assert not half_time["clock"]["running"]

    client.post("/refwatch/matches/m1/notes", json={"message": "Rain delay"})
    reset = client.post("/refwatch/matches/m1/reset").json()
    assert reset["current_phase"] == "PRE_GAME"
    assert reset["events"] == []


def test_empty_note_is_rejected(client):
    _create(client)
    response = client.post("/refwatch/matches/m1/notes", json={"message": ""})
    assert response.status_code == 422

# tests/refwatch_tests/conftest.py
import itertools
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from refwatch.domain.aggregates.match_aggregate import MatchState
from refwatch.domain.entities.settings import MatchSettings
from refwatch.domain.events import EventStamper
from refwatch.infra.models import Base

KICKOFF = datetime(2024, 5, 4, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def stamper():
    """
    Deterministic ids ("evt-1", "evt-2", ...) and a wall clock that moves
    one second per event.
    """
    ids = itertools.count(1)
    seconds = itertools.count(0)
    return EventStamper(
        new_id=lambda: f"evt-{next(ids)}",
        now=lambda: KICKOFF + timedelta(seconds=next(seconds)),
    )


@pytest.fixture
def short_settings():
    """One minute halves, one minute break."""
    return MatchSettings(half_duration_minutes=1, halftime_duration_minutes=1)


@pytest.fixture
def pre_game(short_settings):
    return MatchState.new(match_id="match-1", settings=short_settings)


@pytest.fixture
def first_half(pre_game, stamper):
    """Kicked off, clock running from 60_000 ms."""
    return pre_game.confirm_and_start(stamper)


@pytest.fixture
def test_engine():
    """
    An in-memory SQLite engine shared across threads, so stores can be
    driven from asyncio.to_thread as well as from the test itself.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)  # create all tables
    yield engine
    Base.metadata.drop_all(bind=engine)    # teardown - drop all tables
    engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return sessionmaker(bind=test_engine, autocommit=False, autoflush=False)

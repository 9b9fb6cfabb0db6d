# Directory: src/refwatch/infra/db.py
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy_utils import database_exists, create_database

from refwatch.config.settings import AppConfig
from refwatch.infra.models import Base


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create the engine, creating the database itself first for server
    backends that don't have it yet. SQLite files are created on connect.
    """
    engine = create_engine(database_url, echo=echo)
    if not database_url.startswith("sqlite") and not database_exists(engine.url):
        create_database(engine.url)
    return engine


def init_db(engine: Engine) -> None:
    """Create all tables (if they don't exist)."""
    Base.metadata.create_all(bind=engine)


def build_session_factory(config: Optional[AppConfig] = None) -> sessionmaker:
    config = config or AppConfig.from_env()
    engine = build_engine(config.database_url, echo=config.sql_echo)
    init_db(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

from refwatch.constants import (
    DEFAULT_DATABASE_URL,
    DEFAULT_HALF_DURATION_MINUTES,
    DEFAULT_HALFTIME_DURATION_MINUTES,
    DEFAULT_SNAPSHOT_FILE,
    DEFAULT_TICK_INTERVAL_MS,
)

STORE_SQL = "sql"
STORE_LOCAL = "local"


@dataclass(frozen=True)
class AppConfig:
    """Runtime configuration for the officiating service."""
    database_url: str = DEFAULT_DATABASE_URL
    sql_echo: bool = False
    # "sql" -> SQLAlchemy snapshot store, "local" -> single JSON file
    store_kind: str = STORE_SQL
    snapshot_file: Path = Path(DEFAULT_SNAPSHOT_FILE)
    log_dir: Path = Path("logs")
    tick_interval_ms: int = DEFAULT_TICK_INTERVAL_MS
    default_half_duration_minutes: int = DEFAULT_HALF_DURATION_MINUTES
    default_halftime_duration_minutes: int = DEFAULT_HALFTIME_DURATION_MINUTES

    def __post_init__(self):
        if self.store_kind not in (STORE_SQL, STORE_LOCAL):
            raise ValueError(f"Unknown store kind: {self.store_kind}")
        if self.tick_interval_ms <= 0:
            raise ValueError(f"Tick interval must be positive, got {self.tick_interval_ms}")

    @classmethod
    def from_env(cls, env_file: Optional[Union[str, Path]] = ".env") -> "AppConfig":
        """
        Build from REFWATCH_* variables. Values in `env_file` are loaded first
        but never override variables already set in the environment.
        """
        if env_file is not None:
            load_dotenv(env_file)
        return cls(
            database_url=os.getenv("REFWATCH_DATABASE_URL", DEFAULT_DATABASE_URL),
            sql_echo=os.getenv("REFWATCH_SQL_ECHO", "false").lower() in ("1", "true", "yes"),
            store_kind=os.getenv("REFWATCH_STORE", STORE_SQL),
            snapshot_file=Path(os.getenv("REFWATCH_SNAPSHOT_FILE", DEFAULT_SNAPSHOT_FILE)),
            log_dir=Path(os.getenv("REFWATCH_LOG_DIR", "logs")),
            tick_interval_ms=int(os.getenv("REFWATCH_TICK_INTERVAL_MS", str(DEFAULT_TICK_INTERVAL_MS))),
            default_half_duration_minutes=int(
                os.getenv("REFWATCH_HALF_MINUTES", str(DEFAULT_HALF_DURATION_MINUTES))
            ),
            default_halftime_duration_minutes=int(
                os.getenv("REFWATCH_HALFTIME_MINUTES", str(DEFAULT_HALFTIME_DURATION_MINUTES))
            ),
        )

    def ensure_directories_exist(self) -> None:
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.snapshot_file.parent.mkdir(parents=True, exist_ok=True)

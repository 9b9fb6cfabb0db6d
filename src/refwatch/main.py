import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from refwatch.config.logging import setup_logging
from refwatch.config.settings import STORE_LOCAL, AppConfig
from refwatch.infra.api_routes import match_routes
from refwatch.infra.db import build_session_factory
from refwatch.infra.repo.match import MatchRepository
from refwatch.infra.repo.snapshot_store.base import SnapshotStore
from refwatch.infra.repo.snapshot_store.local import LocalFileSnapshotStore
from refwatch.infra.repo.snapshot_store.postgres import PostgresSnapshotStore
from refwatch.services.registry import MatchSessionRegistry

logger = logging.getLogger(__name__)


def build_snapshot_store(config: AppConfig) -> SnapshotStore:
    if config.store_kind == STORE_LOCAL:
        logger.info(f"Using local snapshot file {config.snapshot_file}")
        return LocalFileSnapshotStore(config.snapshot_file)
    logger.info(f"Using SQL snapshot store at {config.database_url}")
    return PostgresSnapshotStore(build_session_factory(config))


def create_app(registry: Optional[MatchSessionRegistry] = None, config: Optional[AppConfig] = None) -> FastAPI:
    """
    Build the API app. Without a registry one is built from `config`
    (or the environment) when the app starts.
    """
    config = config or AppConfig.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "registry", None) is None:
            config.ensure_directories_exist()
            setup_logging(config.log_dir)
            repository = MatchRepository(build_snapshot_store(config))
            app.state.registry = MatchSessionRegistry(repository, config=config)
        yield
        await app.state.registry.close_all()

    app = FastAPI(lifespan=lifespan)
    app.state.registry = registry

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(match_routes.router, prefix="/refwatch")
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "refwatch.main:app",
        host="0.0.0.0",
        port=8001,
        reload=True
    )

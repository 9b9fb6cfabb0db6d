# Directory: src/refwatch/services/registry.py
import asyncio
import logging
from typing import Dict, Optional

from refwatch.config.settings import AppConfig
from refwatch.domain.entities.settings import MatchSettings
from refwatch.infra.repo.match import MatchRepository
from refwatch.services.match_session import MatchSession
from refwatch.utils.logging import close_logger, match_logger

logger = logging.getLogger(__name__)


class MatchSessionRegistry:
    """
    Keeps one MatchSession per match id for the lifetime of the process,
    restoring sessions from the repository on first access.
    """

    def __init__(self, repository: MatchRepository, config: Optional[AppConfig] = None, per_match_logs: bool = True):
        self.repository = repository
        self.config = config or AppConfig()
        self.per_match_logs = per_match_logs
        self._sessions: Dict[str, MatchSession] = {}
        self._lock = asyncio.Lock()

    async def create(self, match_id: str, settings: Optional[MatchSettings] = None) -> MatchSession:
        """
        Open a session for `match_id`. An existing stored match is restored
        (and `settings` ignored) so a crashed host can carry on.
        """
        async with self._lock:
            if match_id in self._sessions:
                return self._sessions[match_id]

            if settings is None:
                settings = MatchSettings(
                    half_duration_minutes=self.config.default_half_duration_minutes,
                    halftime_duration_minutes=self.config.default_halftime_duration_minutes,
                )
            snapshot = await asyncio.to_thread(self.repository.load, match_id, settings)
            session = self._open(snapshot)
            self._sessions[match_id] = session

        await session.resume()
        return session

    async def get(self, match_id: str) -> Optional[MatchSession]:
        """An open session, a restored one, or None when the match is unknown."""
        async with self._lock:
            session = self._sessions.get(match_id)
            if session is not None:
                return session
            exists = await asyncio.to_thread(self.repository.exists, match_id)
            if not exists:
                return None
            snapshot = await asyncio.to_thread(self.repository.load, match_id)
            session = self._open(snapshot)
            self._sessions[match_id] = session

        await session.resume()
        return session

    async def close_all(self) -> None:
        async with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            await self._close(session)

    async def close(self, match_id: str) -> None:
        """Close one match's session and release its log file."""
        async with self._lock:
            session = self._sessions.pop(match_id, None)
        if session is not None:
            await self._close(session)

    async def _close(self, session: MatchSession) -> None:
        try:
            await session.close()
        finally:
            if self.per_match_logs:
                close_logger(session.logger)

    def _open(self, snapshot) -> MatchSession:
        session_logger = (
            match_logger(snapshot.match_id, log_dir=self.config.log_dir) if self.per_match_logs else None
        )
        logger.info(f"Opening session for match {snapshot.match_id} in {snapshot.current_phase.value}")
        return MatchSession(
            snapshot,
            repository=self.repository,
            tick_interval_ms=self.config.tick_interval_ms,
            logger=session_logger,
            on_persistence_failure=self._report_persistence_failure,
        )

    def _report_persistence_failure(self, snapshot, error: Exception) -> None:
        logger.warning(f"Match {snapshot.match_id}: snapshot not persisted ({error})")

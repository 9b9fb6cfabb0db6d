# Directory: src/refwatch/infra/repo/match.py
from typing import Optional

from refwatch.domain.aggregates.match_aggregate import MatchState
from refwatch.domain.entities.settings import MatchSettings
from refwatch.infra.repo.snapshot_store.base import SnapshotStore


class MatchRepository:
    def __init__(self, snapshot_store: SnapshotStore):
        self.snapshot_store = snapshot_store

    def load(self, match_id: str, settings: Optional[MatchSettings] = None) -> MatchState:
        """The stored snapshot, or a fresh PRE_GAME match when none exists."""
        stored = self.snapshot_store.load(match_id)
        if stored is not None:
            return stored
        return MatchState.new(match_id=match_id, settings=settings)

    def exists(self, match_id: str) -> bool:
        return self.snapshot_store.load(match_id) is not None

    def save(self, snapshot: MatchState) -> None:
        self.snapshot_store.save(snapshot)

    def delete(self, match_id: str) -> None:
        self.snapshot_store.delete(match_id)

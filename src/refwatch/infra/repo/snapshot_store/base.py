from typing import List, Optional

from refwatch.domain.aggregates.match_aggregate import MatchState
from refwatch.infra.serialization import deserialize, serialize


class SnapshotStore:
    """Interface/base class for a match snapshot store."""
    def load(self, match_id: str) -> Optional[MatchState]:
        raise NotImplementedError

    def save(self, snapshot: MatchState) -> None:
        raise NotImplementedError

    def delete(self, match_id: str) -> None:
        raise NotImplementedError

    def list_match_ids(self) -> List[str]:
        raise NotImplementedError


class InMemorySnapshotStore(SnapshotStore):
    """Keeps serialized snapshots in a dict. Useful for tests and throwaway sessions."""
    def __init__(self):
        self._storage = {}

    def load(self, match_id: str) -> Optional[MatchState]:
        raw = self._storage.get(match_id)
        return deserialize(raw) if raw is not None else None

    def save(self, snapshot: MatchState) -> None:
        self._storage[snapshot.match_id] = serialize(snapshot)

    def delete(self, match_id: str) -> None:
        self._storage.pop(match_id, None)

    def list_match_ids(self) -> List[str]:
        return sorted(self._storage)

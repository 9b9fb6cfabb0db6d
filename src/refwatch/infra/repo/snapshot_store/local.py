import os
import json
import threading
from pathlib import Path
from typing import Dict, List, Optional, Union

import filelock

from refwatch.domain.aggregates.match_aggregate import MatchState
from refwatch.domain.errors import PersistenceError
from refwatch.infra.repo.snapshot_store.base import SnapshotStore
from refwatch.infra.serialization import snapshot_from_dict, snapshot_to_dict


class LocalFileSnapshotStore(SnapshotStore):
    """
    An in-memory snapshot store that also persists to a local JSON file.
    Format on disk (match_snapshots.json):
    {
      "match-123": {"schema_version": 1, "match_id": "match-123", "current_phase": "...", "events": [...]},
      "match-XYZ": { ... }
    }
    Every session of the service writes into the same file, so each write
    re-reads it and replaces it while holding a thread lock (sessions in this
    process) and a file lock (other processes sharing the file).
    """
    def __init__(self, filename: Union[str, Path] = "match_snapshots.json", lock_timeout: float = 30):
        self.filename = str(filename)
        self._storage: Dict[str, dict] = {}  # raw dict for all matches
        self._mutex = threading.Lock()
        self._file_lock = filelock.FileLock(f"{self.filename}.lock", timeout=lock_timeout)

        # on startup, load everything
        with self._mutex:
            self._acquire_file_lock()
            try:
                self._storage = self._load_from_file()
            finally:
                self._file_lock.release()

    def load(self, match_id: str) -> Optional[MatchState]:
        with self._mutex:
            raw = self._storage.get(match_id)
        if raw is None:
            return None
        return snapshot_from_dict(raw)

    def save(self, snapshot: MatchState) -> None:
        """
        Replace the match's entry in memory + persist entire dictionary to the JSON file.
        """
        self._update(snapshot.match_id, snapshot_to_dict(snapshot))

    def delete(self, match_id: str) -> None:
        self._update(match_id, None)

    def list_match_ids(self) -> List[str]:
        with self._mutex:
            return sorted(self._storage)

    # ------------- Internal JSON handling -------------
    def _update(self, match_id: str, row: Optional[dict]):
        """Write one match's entry (or drop it when `row` is None)."""
        with self._mutex:
            self._acquire_file_lock()
            try:
                # pick up matches written by other processes since our last write
                storage = self._load_from_file()
                if row is None:
                    storage.pop(match_id, None)
                else:
                    storage[match_id] = row
                self._save_to_file(storage)
                self._storage = storage
            finally:
                self._file_lock.release()

    def _acquire_file_lock(self):
        try:
            self._file_lock.acquire()
        except filelock.Timeout as e:
            raise PersistenceError(f"Timed out waiting for lock on {self.filename}") from e

    def _load_from_file(self) -> Dict[str, dict]:
        if not os.path.exists(self.filename):
            return {}
        try:
            with open(self.filename, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Could not read snapshots from {self.filename}: {e}") from e

    def _save_to_file(self, storage: Dict[str, dict]):
        # write to a sibling file first so a crash mid-write keeps the old snapshot
        tmp_name = f"{self.filename}.tmp"
        try:
            with open(tmp_name, "w", encoding="utf-8") as f:
                json.dump(storage, f, indent=2)
            os.replace(tmp_name, self.filename)
        except OSError as e:
            raise PersistenceError(f"Could not write snapshots to {self.filename}: {e}") from e

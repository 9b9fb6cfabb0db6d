from datetime import datetime, timezone
from typing import Callable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from refwatch.constants import EVENT_TYPE_KEY
from refwatch.domain.aggregates.match_aggregate import MatchState
from refwatch.domain.errors import PersistenceError
from refwatch.domain.events import MatchEvent
from refwatch.infra.models import MatchEventModel, MatchSnapshotModel
from refwatch.infra.repo.snapshot_store.base import SnapshotStore
from refwatch.infra.serialization import event_from_dict, event_to_dict, snapshot_from_dict, snapshot_to_dict


class PostgresSnapshotStore(SnapshotStore):
    def __init__(self, session_factory: Callable[[], Session]):
        """
        session_factory should be something like:
            session_factory = sessionmaker(bind=engine)
        so we can create new Sessions on demand.
        Any SQLAlchemy backend works; tests run it against SQLite.
        """
        self.session_factory = session_factory

    def load(self, match_id: str) -> Optional[MatchState]:
        session: Session = self.session_factory()
        try:
            row = session.get(MatchSnapshotModel, match_id)
            if row is None:
                return None
            return snapshot_from_dict(row.payload)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not load match {match_id}: {e}") from e
        finally:
            session.close()

    def save(self, snapshot: MatchState) -> None:
        """
        Upsert the snapshot row and bring the event rows in line with the log.
        Events are append-only, so normally only the new tail is inserted;
        after a reset the stored rows no longer match and are rewritten.
        """
        session: Session = self.session_factory()
        try:
            session.merge(MatchSnapshotModel(
                match_id=snapshot.match_id,
                current_phase=snapshot.current_phase.value,
                home_score=snapshot.home_score,
                away_score=snapshot.away_score,
                clock_running=snapshot.clock.running,
                updated_on=datetime.now(timezone.utc),
                payload=snapshot_to_dict(snapshot),
            ))
            # the parent row must exist before event rows reference it
            session.flush()

            stored_ids = [
                event_id for (event_id,) in (
                    session.query(MatchEventModel.event_id)
                    .filter_by(match_id=snapshot.match_id)
                    .order_by(MatchEventModel.sequence.asc())
                    .all()
                )
            ]
            events = snapshot.event_log.events
            start = len(stored_ids)
            if stored_ids != [evt.event_id for evt in events[:start]]:
                session.query(MatchEventModel).filter_by(match_id=snapshot.match_id).delete()
                start = 0

            for sequence, evt in enumerate(events[start:], start=start):
                session.add(self._to_row(snapshot.match_id, sequence, evt))
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise PersistenceError(f"Could not save match {snapshot.match_id}: {e}") from e
        finally:
            session.close()

    def delete(self, match_id: str) -> None:
        session: Session = self.session_factory()
        try:
            session.query(MatchEventModel).filter_by(match_id=match_id).delete()
            session.query(MatchSnapshotModel).filter_by(match_id=match_id).delete()
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise PersistenceError(f"Could not delete match {match_id}: {e}") from e
        finally:
            session.close()

    def list_match_ids(self) -> List[str]:
        session: Session = self.session_factory()
        try:
            return [
                match_id for (match_id,) in
                session.query(MatchSnapshotModel.match_id).order_by(MatchSnapshotModel.match_id).all()
            ]
        finally:
            session.close()

    def load_events(self, match_id: str) -> List[MatchEvent]:
        """
        The audit trail for a match straight from the event table, in log order.
        """
        session: Session = self.session_factory()
        try:
            rows = (
                session.query(MatchEventModel)
                .filter_by(match_id=match_id)
                .order_by(MatchEventModel.sequence.asc())
                .all()
            )
            return [event_from_dict(row.payload) for row in rows]
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not load events for match {match_id}: {e}") from e
        finally:
            session.close()

    # -------------- Internal --------------

    def _to_row(self, match_id: str, sequence: int, evt: MatchEvent) -> MatchEventModel:
        payload = event_to_dict(evt)
        return MatchEventModel(
            event_id=evt.event_id,
            match_id=match_id,
            sequence=sequence,
            event_type=payload[EVENT_TYPE_KEY],
            occurred_on=evt.occurred_on,
            game_time_millis=evt.game_time_millis,
            payload=payload,
        )

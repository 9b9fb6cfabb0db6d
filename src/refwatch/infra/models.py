# Directory: src/refwatch/infra/models.py
from sqlalchemy import Column, String, Integer, DateTime, JSON, Boolean, ForeignKey
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class MatchSnapshotModel(Base):
    """
    Latest snapshot of a match. `payload` holds the full serialized snapshot;
    the scalar columns are copies for quick listing queries.
    """
    __tablename__ = 'match_snapshots'

    match_id         = Column(String, primary_key=True)
    current_phase    = Column(String, nullable=False)
    home_score       = Column(Integer, nullable=False, default=0)
    away_score       = Column(Integer, nullable=False, default=0)
    clock_running    = Column(Boolean, nullable=False, default=False)
    updated_on       = Column(DateTime, nullable=False)
    payload          = Column(JSON, nullable=False)

    events = relationship(
        "MatchEventModel",
        back_populates="match",
        order_by="MatchEventModel.sequence",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return (f"<MatchSnapshotModel(match_id='{self.match_id}', "
                f"phase='{self.current_phase}', score={self.home_score}-{self.away_score})>")


class MatchEventModel(Base):
    """
    One row per logged match event, in log order (the audit trail).
    """
    __tablename__ = 'match_events'

    event_id         = Column(String, primary_key=True)
    match_id         = Column(String, ForeignKey('match_snapshots.match_id'), nullable=False, index=True)
    sequence         = Column(Integer, nullable=False)
    event_type       = Column(String, nullable=False)
    occurred_on      = Column(DateTime, nullable=False)
    game_time_millis = Column(Integer, nullable=False)
    payload          = Column(JSON, nullable=False)

    match = relationship("MatchSnapshotModel", back_populates="events")

    def __repr__(self):
        return (f"<MatchEventModel(event_id='{self.event_id}', match_id='{self.match_id}', "
                f"sequence={self.sequence}, event_type='{self.event_type}')>")

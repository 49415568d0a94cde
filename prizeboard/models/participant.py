"""
Participant ledger model
"""
from uuid import uuid4
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Numeric, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from prizeboard.database import Base
from prizeboard.utils.time_utils import utc_now


class Participant(Base):
    """Ranked entrant in a competition's scoring ledger"""
    __tablename__ = "participants"

    id = Column(Uuid, primary_key=True, default=uuid4)
    competition_id = Column(Uuid, ForeignKey("competitions.id", ondelete="CASCADE"), nullable=False, index=True)

    wallet_address = Column(String(128), nullable=False, index=True)
    username = Column(String(255), nullable=True)

    # Performance
    score = Column(Numeric(20, 4, asdecimal=False), default=0)
    rank = Column(Integer, nullable=True, index=True)

    # Timestamps
    entry_date = Column(DateTime, default=utc_now)
    created_at = Column(DateTime, default=utc_now)

    # Unique constraint - one entry per wallet per competition
    __table_args__ = (
        UniqueConstraint('competition_id', 'wallet_address', name='unique_participant_wallet'),
    )

    # Relationships
    competition = relationship("Competition", back_populates="participants")

"""
Winner model
"""
from enum import Enum
from uuid import uuid4
from sqlalchemy import Column, String, Integer, DateTime, Text, ForeignKey, Numeric, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from prizeboard.database import Base
from prizeboard.utils.time_utils import utc_now


class PaymentStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DISQUALIFIED = "disqualified"
    PAID = "paid"


class Winner(Base):
    """A participant assigned to a prize place; the only record of money owed"""
    __tablename__ = "winners"

    id = Column(Uuid, primary_key=True, default=uuid4)
    competition_id = Column(Uuid, ForeignKey("competitions.id", ondelete="CASCADE"), nullable=False, index=True)

    wallet_address = Column(String(128), nullable=False)
    place = Column(Integer, nullable=False)
    username = Column(String(255), nullable=True)

    # Payment
    amount_usd = Column(Numeric(14, 2, asdecimal=False), nullable=False, default=0)
    payment_status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value, index=True)
    paid_at = Column(DateTime, nullable=True)
    tx_url = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    __table_args__ = (
        UniqueConstraint('competition_id', 'wallet_address', 'place', name='unique_winner_slot'),
    )

    # Relationships
    competition = relationship("Competition", back_populates="winners")

    @property
    def status(self) -> PaymentStatus:
        return PaymentStatus(self.payment_status)

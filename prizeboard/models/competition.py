"""
Competition and prize breakdown models
"""
from uuid import uuid4
from sqlalchemy import Column, String, Integer, Boolean, DateTime, Text, ForeignKey, Numeric, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from prizeboard.database import Base
from prizeboard.utils.time_utils import utc_now


class Competition(Base):
    """Time-boxed trading competition with a prize pool"""
    __tablename__ = "competitions"

    id = Column(Uuid, primary_key=True, default=uuid4)
    name = Column(String(100), nullable=True, index=True)

    # Display
    title = Column(String(255), nullable=False)
    period = Column(String(100), nullable=True)  # e.g. 'September 2025'
    competition_type = Column(String(50), nullable=True)  # 'P&L', 'Volume', 'Win Rate'
    highlight_copy = Column(Text, nullable=True)
    cta_text = Column(String(255), nullable=True)
    cta_link = Column(Text, nullable=True)

    # Manual flag; display uses the status computed from the dates
    status = Column(String(50), default="draft")  # 'draft', 'upcoming', 'active', 'ended'

    # Schedule
    start_date = Column(DateTime, nullable=False, index=True)
    end_date = Column(DateTime, nullable=False, index=True)

    prize_pool_usd = Column(Numeric(14, 2, asdecimal=False), nullable=False, default=0)

    # Timestamps
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    # Relationships
    breakdown = relationship(
        "PrizeBreakdown",
        back_populates="competition",
        cascade="all, delete-orphan",
        order_by="PrizeBreakdown.place",
    )
    participants = relationship(
        "Participant",
        back_populates="competition",
        cascade="all, delete-orphan",
        order_by="Participant.rank",
    )
    winners = relationship(
        "Winner",
        back_populates="competition",
        cascade="all, delete-orphan",
        order_by="Winner.place",
    )

    def prize_for_place(self, place: int) -> float:
        """Configured amount for a place, 0 when the place has no breakdown row"""
        for row in self.breakdown:
            if row.place == place:
                return float(row.amount_usd or 0)
        return 0.0


class PrizeBreakdown(Base):
    """Prize amount for one finishing place"""
    __tablename__ = "prize_breakdown"

    id = Column(Uuid, primary_key=True, default=uuid4)
    competition_id = Column(Uuid, ForeignKey("competitions.id", ondelete="CASCADE"), nullable=False, index=True)

    place = Column(Integer, nullable=False)
    amount_usd = Column(Numeric(14, 2, asdecimal=False), nullable=False, default=0)
    percent = Column(Numeric(5, 2, asdecimal=False), nullable=True)
    is_split = Column(Boolean, default=False)

    created_at = Column(DateTime, default=utc_now)

    # One row per place per competition
    __table_args__ = (
        UniqueConstraint('competition_id', 'place', name='unique_breakdown_place'),
    )

    # Relationships
    competition = relationship("Competition", back_populates="breakdown")

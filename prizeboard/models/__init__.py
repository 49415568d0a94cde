"""
Database models for Prizeboard

All models should be imported here for Alembic to detect them.
"""
from prizeboard.models.admin import AdminUser, AppSetting
from prizeboard.models.competition import Competition, PrizeBreakdown
from prizeboard.models.participant import Participant
from prizeboard.models.winner import PaymentStatus, Winner

__all__ = [
    # Admin
    "AdminUser",
    "AppSetting",
    # Competition
    "Competition",
    "PrizeBreakdown",
    # Ledger
    "Participant",
    # Winners
    "PaymentStatus",
    "Winner",
]

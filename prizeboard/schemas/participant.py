"""
Participant ledger schemas
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_serializer, field_validator

from prizeboard.schemas.competition import CompetitionResponse
from prizeboard.utils.time_utils import to_naive_utc, to_utc_isoformat


class ParticipantEntry(BaseModel):
    """One row from the scoring feed"""
    wallet_address: str = Field(..., min_length=1, max_length=128)
    username: Optional[str] = Field(None, max_length=255)
    score: float = 0
    entry_date: Optional[datetime] = None

    @field_validator('entry_date')
    @classmethod
    def normalize_datetime(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)


class ParticipantIngest(BaseModel):
    """Batch of scoring-feed rows for one competition"""
    participants: List[ParticipantEntry] = Field(..., min_length=1)


class ParticipantResponse(BaseModel):
    id: UUID
    wallet_address: str
    username: Optional[str] = None
    score: float
    rank: Optional[int] = None
    entry_date: Optional[datetime] = None

    @field_serializer('entry_date')
    def serialize_datetime(self, value: Optional[datetime]) -> Optional[str]:
        return to_utc_isoformat(value)

    class Config:
        from_attributes = True


class ParticipantListResponse(BaseModel):
    competition: CompetitionResponse
    participants: List[ParticipantResponse]


class ParticipantIngestResponse(BaseModel):
    success: bool = True
    created: int
    updated: int
    duplicates_skipped: int
    total_participants: int

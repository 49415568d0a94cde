"""
Winner schemas
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_serializer

from prizeboard.utils.time_utils import to_utc_isoformat

STATUS_PATTERN = r"^(pending|approved|disqualified|paid)$"


class WinnerSlotRequest(BaseModel):
    """Identifies one (competition, wallet, place) slot"""
    competition_id: UUID
    wallet_address: str = Field(..., min_length=1, max_length=128)
    place: int = Field(..., ge=1)


class MarkPaidRequest(WinnerSlotRequest):
    tx_url: Optional[str] = None


class CompetitionRef(BaseModel):
    competition_id: UUID


class WinnerCreate(BaseModel):
    """Manual winner entry (admin)"""
    competition_id: UUID
    wallet_address: str = Field(..., min_length=1, max_length=128)
    place: int = Field(..., ge=1)
    username: Optional[str] = Field(None, max_length=255)
    amount_usd: Optional[float] = Field(None, ge=0)
    tx_url: Optional[str] = None
    payment_status: str = Field("pending", pattern=STATUS_PATTERN)


class WinnerUpdate(BaseModel):
    username: Optional[str] = Field(None, max_length=255)
    amount_usd: Optional[float] = Field(None, ge=0)
    tx_url: Optional[str] = None
    payment_status: Optional[str] = Field(None, pattern=STATUS_PATTERN)


class WinnerResponse(BaseModel):
    id: UUID
    competition_id: UUID
    wallet_address: str
    place: int
    username: Optional[str] = None
    amount_usd: float
    payment_status: str
    paid_at: Optional[datetime] = None
    tx_url: Optional[str] = None
    competition_title: Optional[str] = None

    @field_serializer('paid_at')
    def serialize_datetime(self, value: Optional[datetime]) -> Optional[str]:
        return to_utc_isoformat(value)

    class Config:
        from_attributes = True


class WinnerListResponse(BaseModel):
    winners: List[WinnerResponse]
    total_count: int


class DisqualifyResponse(BaseModel):
    """Result of a disqualification and its single-hop promotion"""
    disqualified: WinnerResponse
    promoted: Optional[WinnerResponse] = None


class FinalizeResponse(BaseModel):
    success: bool = True
    created: List[WinnerResponse]


class ReconcileResponse(BaseModel):
    success: bool = True
    corrected: int

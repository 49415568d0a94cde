"""
Competition schemas
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_serializer, field_validator, model_validator

from prizeboard.utils.time_utils import to_naive_utc, to_utc_isoformat


class BreakdownItem(BaseModel):
    """Prize for one finishing place"""
    place: int = Field(..., ge=1)
    amount_usd: float = Field(..., ge=0)
    percent: Optional[float] = Field(None, ge=0, le=100)
    is_split: bool = False

    class Config:
        from_attributes = True


def _check_unique_places(breakdown: Optional[List[BreakdownItem]]):
    if breakdown is None:
        return
    places = [item.place for item in breakdown]
    if len(places) != len(set(places)):
        raise ValueError("breakdown places must be unique")


class CompetitionBase(BaseModel):
    """Fields shared by create and response"""
    name: Optional[str] = Field(None, max_length=100)
    title: str = Field(..., min_length=1, max_length=255)
    period: Optional[str] = Field(None, max_length=100)
    competition_type: Optional[str] = Field(None, max_length=50)
    highlight_copy: Optional[str] = None
    cta_text: Optional[str] = Field(None, max_length=255)
    cta_link: Optional[str] = None
    start_date: datetime
    end_date: datetime
    prize_pool_usd: float = Field(0, ge=0)


class CompetitionCreate(CompetitionBase):
    """Schema for creating competitions (admin)"""
    status: str = Field("draft", pattern=r"^(draft|upcoming|active|ended)$")
    breakdown: List[BreakdownItem] = []

    @field_validator('start_date', 'end_date')
    @classmethod
    def normalize_datetime(cls, value: datetime) -> datetime:
        return to_naive_utc(value)

    @model_validator(mode='after')
    def check_dates_and_places(self):
        if self.start_date >= self.end_date:
            raise ValueError("start_date must be before end_date")
        _check_unique_places(self.breakdown)
        return self


class CompetitionUpdate(BaseModel):
    """Partial update; a provided breakdown replaces the stored one"""
    name: Optional[str] = Field(None, max_length=100)
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    period: Optional[str] = Field(None, max_length=100)
    competition_type: Optional[str] = Field(None, max_length=50)
    highlight_copy: Optional[str] = None
    cta_text: Optional[str] = Field(None, max_length=255)
    cta_link: Optional[str] = None
    status: Optional[str] = Field(None, pattern=r"^(draft|upcoming|active|ended)$")
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    prize_pool_usd: Optional[float] = Field(None, ge=0)
    breakdown: Optional[List[BreakdownItem]] = None

    @field_validator('start_date', 'end_date')
    @classmethod
    def normalize_datetime(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)

    @model_validator(mode='after')
    def check_places(self):
        _check_unique_places(self.breakdown)
        return self


class CompetitionResponse(CompetitionBase):
    """Competition with its breakdown and display status"""
    id: UUID
    status: str
    computed_status: str
    breakdown: List[BreakdownItem] = []
    breakdown_total_usd: float = 0
    breakdown_exceeds_pool: bool = False
    created_at: Optional[datetime] = None

    @field_serializer('start_date', 'end_date', 'created_at')
    def serialize_datetime(self, value: Optional[datetime]) -> Optional[str]:
        return to_utc_isoformat(value)


class CompetitionCreatedResponse(BaseModel):
    success: bool = True
    id: UUID
    competition: CompetitionResponse

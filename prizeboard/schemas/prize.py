"""
Public prize page schemas
"""
from typing import List

from pydantic import BaseModel

from prizeboard.schemas.competition import CompetitionResponse
from prizeboard.schemas.participant import ParticipantResponse
from prizeboard.schemas.winner import WinnerResponse


class HistoryCompetition(CompetitionResponse):
    """Ended competition with its results"""
    winners: List[WinnerResponse] = []
    participants: List[ParticipantResponse] = []


class PrizeStats(BaseModel):
    total_distributed: float
    total_winners: int
    months_active: int


class PrizeConfig(BaseModel):
    hero_promo_days_before_start: int
    cache_version: str
    leaderboard_enabled: bool


class PrizeViewResponse(BaseModel):
    current: List[CompetitionResponse]
    upcoming: List[CompetitionResponse]
    history: List[HistoryCompetition]
    stats: PrizeStats
    config: PrizeConfig


class StatsResponse(PrizeStats):
    cache_version: str

"""
Public prize page endpoints
"""
from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from prizeboard.core.config import Settings
from prizeboard.core.dependencies import get_now, get_settings
from prizeboard.database import get_db
from prizeboard.schemas.prize import PrizeViewResponse, StatsResponse
from prizeboard.services.prize_service import PrizeService

router = APIRouter(tags=["prizes"])


@router.get("/prizes", response_model=PrizeViewResponse)
async def get_prizes(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    now: datetime = Depends(get_now),
):
    """
    Everything the prize page renders in one call

    - **current**: competitions running now
    - **upcoming**: competitions not started yet
    - **history**: recently ended competitions with winners and participants
    """
    return PrizeService(db, settings).get_prize_view(now)


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Totals across all competitions"""
    return PrizeService(db, settings).get_stats()

"""
Competition API endpoints
"""
from datetime import datetime
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from prizeboard.core.dependencies import get_current_admin, get_now, get_settings
from prizeboard.core.config import Settings
from prizeboard.database import get_db
from prizeboard.models.admin import AdminUser
from prizeboard.schemas.competition import (
    CompetitionCreate,
    CompetitionCreatedResponse,
    CompetitionResponse,
    CompetitionUpdate,
)
from prizeboard.schemas.participant import (
    ParticipantIngest,
    ParticipantIngestResponse,
    ParticipantListResponse,
)
from prizeboard.schemas.winner import FinalizeResponse
from prizeboard.services.competition_service import CompetitionService, competition_to_response
from prizeboard.services.participant_service import ParticipantService
from prizeboard.services.prize_service import PrizeService
from prizeboard.services.winner_service import WinnerService

router = APIRouter(prefix="/competitions", tags=["competitions"])


@router.get("", response_model=List[CompetitionResponse])
async def list_competitions(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    now: datetime = Depends(get_now),
):
    """List all competitions with their prize breakdown"""
    return PrizeService(db, settings).list_competitions(now)


@router.get("/{competition_id}", response_model=CompetitionResponse)
async def get_competition(
    competition_id: UUID,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Get competition details"""
    competition = CompetitionService(db).get_or_404(competition_id)
    return competition_to_response(competition, now)


@router.get("/{competition_id}/participants", response_model=ParticipantListResponse)
async def get_competition_participants(
    competition_id: UUID,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    now: datetime = Depends(get_now),
):
    """Competition with its participants ordered by rank"""
    return PrizeService(db, settings).get_participants(competition_id, now)


@router.post("", response_model=CompetitionCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_competition(
    data: CompetitionCreate,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    current_admin: AdminUser = Depends(get_current_admin),
):
    """Create a competition with its prize breakdown (admin)"""
    competition = CompetitionService(db).create(data)
    return CompetitionCreatedResponse(
        id=competition.id,
        competition=competition_to_response(competition, now),
    )


@router.put("/{competition_id}", response_model=CompetitionResponse)
async def update_competition(
    competition_id: UUID,
    data: CompetitionUpdate,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    current_admin: AdminUser = Depends(get_current_admin),
):
    """Update a competition; a provided breakdown replaces the old one (admin)"""
    competition = CompetitionService(db).update(competition_id, data)
    return competition_to_response(competition, now)


@router.delete("/{competition_id}")
async def delete_competition(
    competition_id: UUID,
    db: Session = Depends(get_db),
    current_admin: AdminUser = Depends(get_current_admin),
):
    """Delete a competition with its breakdown, participants and winners (admin)"""
    CompetitionService(db).delete(competition_id)
    return {"success": True}


@router.post("/{competition_id}/participants", response_model=ParticipantIngestResponse)
async def ingest_participants(
    competition_id: UUID,
    data: ParticipantIngest,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    current_admin: AdminUser = Depends(get_current_admin),
):
    """Upsert scoring-feed rows and re-rank the competition (admin)"""
    CompetitionService(db).get_or_404(competition_id)
    participant_service = ParticipantService(db)
    created, updated, duplicates = participant_service.ingest(competition_id, data.participants, now)
    return ParticipantIngestResponse(
        created=created,
        updated=updated,
        duplicates_skipped=duplicates,
        total_participants=participant_service.count(competition_id),
    )


@router.post("/{competition_id}/finalize", response_model=FinalizeResponse)
async def finalize_competition(
    competition_id: UUID,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    current_admin: AdminUser = Depends(get_current_admin),
):
    """Create pending winners from the final ranking of an ended competition (admin)"""
    winner_service = WinnerService(db)
    created = winner_service.finalize(competition_id, now)
    return FinalizeResponse(created=winner_service.to_responses(created))

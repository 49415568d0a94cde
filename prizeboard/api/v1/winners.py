"""
Winner API endpoints - all admin only
"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from prizeboard.core.dependencies import get_current_admin, get_now
from prizeboard.database import get_db
from prizeboard.models.winner import Winner
from prizeboard.schemas.winner import (
    STATUS_PATTERN,
    CompetitionRef,
    DisqualifyResponse,
    MarkPaidRequest,
    ReconcileResponse,
    WinnerCreate,
    WinnerListResponse,
    WinnerResponse,
    WinnerSlotRequest,
    WinnerUpdate,
)
from prizeboard.services.winner_service import WinnerService

router = APIRouter(
    prefix="/winners",
    tags=["winners"],
    dependencies=[Depends(get_current_admin)],
)


def _one(winner_service: WinnerService, winner: Winner) -> WinnerResponse:
    return winner_service.to_responses([winner])[0]


@router.get("", response_model=WinnerListResponse)
async def list_winners(
    competition_id: Optional[UUID] = Query(None, description="Filter by competition"),
    payment_status: Optional[str] = Query(None, pattern=STATUS_PATTERN, description="Filter by status"),
    db: Session = Depends(get_db),
):
    """List winners with their competition titles"""
    winner_service = WinnerService(db)
    winners = winner_service.list_winners(competition_id, payment_status)
    return WinnerListResponse(
        winners=winner_service.to_responses(winners),
        total_count=len(winners),
    )


@router.post("", response_model=WinnerResponse, status_code=status.HTTP_201_CREATED)
async def create_winner(
    data: WinnerCreate,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Record a winner manually"""
    winner_service = WinnerService(db)
    return _one(winner_service, winner_service.create(data, now))


@router.post("/approve", response_model=WinnerResponse)
async def approve_winner(
    slot: WinnerSlotRequest,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Approve a participant for a place (idempotent)"""
    winner_service = WinnerService(db)
    winner = winner_service.approve(slot.competition_id, slot.wallet_address, slot.place, now)
    return _one(winner_service, winner)


@router.post("/disqualify", response_model=DisqualifyResponse)
async def disqualify_winner(
    slot: WinnerSlotRequest,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Disqualify a slot and promote the next eligible participant, if any"""
    winner_service = WinnerService(db)
    result = winner_service.disqualify(slot.competition_id, slot.wallet_address, slot.place, now)
    return DisqualifyResponse(
        disqualified=_one(winner_service, result.disqualified),
        promoted=_one(winner_service, result.promoted) if result.promoted else None,
    )


@router.post("/revoke", response_model=WinnerResponse)
async def revoke_winner(
    slot: WinnerSlotRequest,
    db: Session = Depends(get_db),
):
    """Withdraw an approval, back to pending"""
    winner_service = WinnerService(db)
    winner = winner_service.revoke(slot.competition_id, slot.wallet_address, slot.place)
    return _one(winner_service, winner)


@router.post("/reinstate", response_model=WinnerResponse)
async def reinstate_winner(
    slot: WinnerSlotRequest,
    db: Session = Depends(get_db),
):
    """Undo a disqualification, back to pending"""
    winner_service = WinnerService(db)
    winner = winner_service.reinstate(slot.competition_id, slot.wallet_address, slot.place)
    return _one(winner_service, winner)


@router.post("/mark-paid", response_model=WinnerResponse)
async def mark_winner_paid(
    data: MarkPaidRequest,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Record that an approved prize was paid out"""
    winner_service = WinnerService(db)
    winner = winner_service.mark_paid(data.competition_id, data.wallet_address, data.place, now, data.tx_url)
    return _one(winner_service, winner)


@router.post("/reconcile", response_model=ReconcileResponse)
async def reconcile_winner_amounts(
    data: CompetitionRef,
    db: Session = Depends(get_db),
):
    """Reset winner amounts to the competition's prize breakdown"""
    corrected = WinnerService(db).reconcile_amounts(data.competition_id)
    return ReconcileResponse(corrected=corrected)


@router.put("/{winner_id}", response_model=WinnerResponse)
async def update_winner(
    winner_id: UUID,
    data: WinnerUpdate,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Edit a winner; status changes must be legal transitions"""
    winner_service = WinnerService(db)
    return _one(winner_service, winner_service.update(winner_id, data, now))


@router.delete("/{winner_id}")
async def delete_winner(
    winner_id: UUID,
    db: Session = Depends(get_db),
):
    """Delete a winner row"""
    WinnerService(db).delete(winner_id)
    return {"success": True}

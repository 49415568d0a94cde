"""
Competition service - repository over competitions and their prize breakdown
"""
import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import desc
from sqlalchemy.orm import Session, selectinload

from prizeboard.core.errors import CompetitionNotFound, ValidationError
from prizeboard.database import commit
from prizeboard.models.competition import Competition, PrizeBreakdown
from prizeboard.schemas.competition import (
    BreakdownItem,
    CompetitionCreate,
    CompetitionResponse,
    CompetitionUpdate,
)

logger = logging.getLogger(__name__)

ACTIVE = "active"
UPCOMING = "upcoming"
ENDED = "ended"


def computed_status(now: datetime, start_date: datetime, end_date: datetime) -> str:
    """Display status from the date range alone; the stored status flag is ignored"""
    if now < start_date:
        return UPCOMING
    if now <= end_date:
        return ACTIVE
    return ENDED


def competition_to_response(competition: Competition, now: datetime) -> CompetitionResponse:
    breakdown = [BreakdownItem.model_validate(row) for row in competition.breakdown]
    breakdown_total = sum(item.amount_usd for item in breakdown)
    pool = float(competition.prize_pool_usd or 0)
    return CompetitionResponse(
        id=competition.id,
        name=competition.name,
        title=competition.title,
        period=competition.period,
        competition_type=competition.competition_type,
        highlight_copy=competition.highlight_copy,
        cta_text=competition.cta_text,
        cta_link=competition.cta_link,
        start_date=competition.start_date,
        end_date=competition.end_date,
        prize_pool_usd=pool,
        status=competition.status or "draft",
        computed_status=computed_status(now, competition.start_date, competition.end_date),
        breakdown=breakdown,
        breakdown_total_usd=breakdown_total,
        breakdown_exceeds_pool=breakdown_total > pool,
        created_at=competition.created_at,
    )


class CompetitionService:
    """Service for competition CRUD"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, data: CompetitionCreate) -> Competition:
        """Create a competition together with its breakdown"""
        competition = Competition(
            name=data.name,
            title=data.title,
            period=data.period,
            competition_type=data.competition_type,
            highlight_copy=data.highlight_copy,
            cta_text=data.cta_text,
            cta_link=data.cta_link,
            status=data.status,
            start_date=data.start_date,
            end_date=data.end_date,
            prize_pool_usd=data.prize_pool_usd,
        )
        competition.breakdown = [self._breakdown_row(item) for item in data.breakdown]
        self.db.add(competition)
        commit(self.db)
        self.db.refresh(competition)

        logger.info(f"Created competition {competition.id} '{competition.title}'")
        return competition

    def get(self, competition_id: UUID) -> Optional[Competition]:
        """Get competition by ID"""
        return self.db.query(Competition).filter(Competition.id == competition_id).first()

    def get_or_404(self, competition_id: UUID) -> Competition:
        competition = self.get(competition_id)
        if competition is None:
            raise CompetitionNotFound()
        return competition

    def list_competitions(self) -> List[Competition]:
        """All competitions, newest start first"""
        return (
            self.db.query(Competition)
            .options(selectinload(Competition.breakdown))
            .order_by(desc(Competition.start_date))
            .all()
        )

    def update(self, competition_id: UUID, data: CompetitionUpdate) -> Competition:
        competition = self.get_or_404(competition_id)
        changes = data.model_dump(exclude_unset=True, exclude={"breakdown"})

        start_date = changes.get("start_date", competition.start_date)
        end_date = changes.get("end_date", competition.end_date)
        if start_date is None or end_date is None or start_date >= end_date:
            raise ValidationError("start_date must be before end_date")

        for field, value in changes.items():
            if field in ("title", "prize_pool_usd") and value is None:
                raise ValidationError(f"{field} cannot be null")
            setattr(competition, field, value)

        if data.breakdown is not None:
            # Replace wholesale; flush the deletes first so the place constraint holds
            competition.breakdown = []
            self.db.flush()
            competition.breakdown = [self._breakdown_row(item) for item in data.breakdown]

        commit(self.db)
        self.db.refresh(competition)

        logger.info(f"Updated competition {competition.id}: {sorted(changes)}")
        return competition

    def delete(self, competition_id: UUID) -> None:
        """Delete a competition; breakdown, participants and winners cascade"""
        competition = self.get_or_404(competition_id)
        self.db.delete(competition)
        commit(self.db)
        logger.info(f"Deleted competition {competition_id}")

    @staticmethod
    def _breakdown_row(item: BreakdownItem) -> PrizeBreakdown:
        return PrizeBreakdown(
            place=item.place,
            amount_usd=item.amount_usd,
            percent=item.percent,
            is_split=item.is_split,
        )

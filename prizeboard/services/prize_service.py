"""
Prize service - public read views and aggregate stats
"""
from datetime import datetime
from typing import List
from uuid import UUID

from sqlalchemy import asc, desc, func
from sqlalchemy.orm import Session, selectinload

from prizeboard.core.config import Settings
from prizeboard.models.competition import Competition
from prizeboard.models.winner import PaymentStatus, Winner
from prizeboard.schemas.competition import CompetitionResponse
from prizeboard.schemas.participant import ParticipantListResponse, ParticipantResponse
from prizeboard.schemas.prize import (
    HistoryCompetition,
    PrizeStats,
    PrizeViewResponse,
    StatsResponse,
)
from prizeboard.schemas.winner import WinnerResponse
from prizeboard.services.competition_service import CompetitionService, competition_to_response
from prizeboard.services.participant_service import ParticipantService
from prizeboard.services.settings_service import SettingsService

DISQUALIFIED = PaymentStatus.DISQUALIFIED.value


class PrizeService:
    """Service for the public prize page"""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings

    def _with_breakdown(self):
        return self.db.query(Competition).options(selectinload(Competition.breakdown))

    def get_current(self, now: datetime) -> List[Competition]:
        """Competitions whose date range contains now"""
        return self._with_breakdown().filter(
            Competition.start_date <= now,
            Competition.end_date >= now
        ).order_by(asc(Competition.start_date)).all()

    def get_upcoming(self, now: datetime) -> List[Competition]:
        return self._with_breakdown().filter(
            Competition.start_date > now
        ).order_by(asc(Competition.start_date)).all()

    def get_history(self, now: datetime) -> List[Competition]:
        """Most recently ended competitions, newest first"""
        return self._with_breakdown().options(
            selectinload(Competition.winners),
            selectinload(Competition.participants)
        ).filter(
            Competition.end_date < now
        ).order_by(desc(Competition.end_date)).limit(self.settings.HISTORY_LIMIT).all()

    def _history_entry(self, competition: Competition, now: datetime) -> HistoryCompetition:
        base = competition_to_response(competition, now)
        winners = [
            WinnerResponse.model_validate(w).model_copy(update={"competition_title": competition.title})
            for w in competition.winners
            if w.payment_status != DISQUALIFIED
        ]
        participants = [ParticipantResponse.model_validate(p) for p in competition.participants]
        return HistoryCompetition(**dict(base), winners=winners, participants=participants)

    def get_prize_view(self, now: datetime) -> PrizeViewResponse:
        """
        Compose the prize page: current, upcoming, history, stats and config.

        Stats cover the history window only: total_distributed sums winner
        amounts, total_winners counts winner rows, months_active counts
        history entries.
        """
        current = [competition_to_response(c, now) for c in self.get_current(now)]
        upcoming = [competition_to_response(c, now) for c in self.get_upcoming(now)]
        history = [self._history_entry(c, now) for c in self.get_history(now)]
        config = SettingsService(self.db, self.settings).public_config()

        stats = PrizeStats(
            total_distributed=sum(w.amount_usd for h in history for w in h.winners),
            total_winners=sum(len(h.winners) for h in history),
            months_active=len(history),
        )
        return PrizeViewResponse(
            current=current,
            upcoming=upcoming,
            history=history,
            stats=stats,
            config=config,
        )

    def get_stats(self) -> StatsResponse:
        """Global stats across every competition"""
        total_distributed, total_winners = self.db.query(
            func.coalesce(func.sum(Winner.amount_usd), 0),
            func.count(Winner.id)
        ).filter(Winner.payment_status != DISQUALIFIED).one()

        months = {
            (start.year, start.month)
            for (start,) in self.db.query(Competition.start_date).all()
        }
        config = SettingsService(self.db, self.settings).public_config()

        return StatsResponse(
            total_distributed=float(total_distributed or 0),
            total_winners=int(total_winners or 0),
            months_active=len(months),
            cache_version=config.cache_version,
        )

    def list_competitions(self, now: datetime) -> List[CompetitionResponse]:
        return [
            competition_to_response(c, now)
            for c in CompetitionService(self.db).list_competitions()
        ]

    def get_participants(self, competition_id: UUID, now: datetime) -> ParticipantListResponse:
        competition = CompetitionService(self.db).get_or_404(competition_id)
        participants = ParticipantService(self.db).list_ranked(competition_id)
        return ParticipantListResponse(
            competition=competition_to_response(competition, now),
            participants=[ParticipantResponse.model_validate(p) for p in participants],
        )

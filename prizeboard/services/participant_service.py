"""
Participant ledger service - scoring feed ingest and ranking
"""
import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import asc
from sqlalchemy.orm import Session

from prizeboard.database import commit
from prizeboard.models.participant import Participant
from prizeboard.schemas.participant import ParticipantEntry

logger = logging.getLogger(__name__)


class ParticipantService:
    """Service for the per-competition ranked ledger"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, competition_id: UUID, wallet_address: str) -> Optional[Participant]:
        return self.db.query(Participant).filter(
            Participant.competition_id == competition_id,
            Participant.wallet_address == wallet_address
        ).first()

    def list_ranked(self, competition_id: UUID) -> List[Participant]:
        """Participants ordered by rank; unranked rows last"""
        return self.db.query(Participant).filter(
            Participant.competition_id == competition_id
        ).order_by(
            Participant.rank.is_(None),
            asc(Participant.rank),
            asc(Participant.entry_date)
        ).all()

    def ingest(
        self,
        competition_id: UUID,
        entries: List[ParticipantEntry],
        now: datetime
    ) -> Tuple[int, int, int]:
        """
        Upsert scoring-feed rows and recompute ranks.

        One row per wallet is kept: within the batch and against stored rows
        the earliest entry_date wins, while score and username take the
        latest feed values.

        Returns: (created, updated, duplicates_skipped)
        """
        batch: Dict[str, ParticipantEntry] = {}
        duplicates = 0
        for entry in entries:
            entry_date = entry.entry_date or now
            previous = batch.get(entry.wallet_address)
            if previous is None:
                batch[entry.wallet_address] = entry.model_copy(update={"entry_date": entry_date})
                continue
            duplicates += 1
            earliest = min(previous.entry_date, entry_date)
            batch[entry.wallet_address] = entry.model_copy(update={"entry_date": earliest})

        created = updated = 0
        for wallet, entry in batch.items():
            participant = self.get(competition_id, wallet)
            if participant is None:
                self.db.add(Participant(
                    competition_id=competition_id,
                    wallet_address=wallet,
                    username=entry.username,
                    score=entry.score,
                    entry_date=entry.entry_date,
                ))
                created += 1
            else:
                participant.score = entry.score
                if entry.username:
                    participant.username = entry.username
                if participant.entry_date is None or entry.entry_date < participant.entry_date:
                    participant.entry_date = entry.entry_date
                updated += 1

        self.db.flush()
        self.rerank(competition_id)
        commit(self.db)

        logger.info(
            f"Ingested participants for {competition_id}: "
            f"{created} created, {updated} updated, {duplicates} duplicates skipped"
        )
        return created, updated, duplicates

    def rerank(self, competition_id: UUID) -> None:
        """Assign dense 1..n ranks by score descending, earlier entry first on ties"""
        participants = self.db.query(Participant).filter(
            Participant.competition_id == competition_id
        ).all()
        participants.sort(key=lambda p: (-(p.score or 0), p.entry_date or datetime.max))
        for idx, participant in enumerate(participants):
            participant.rank = idx + 1

    def count(self, competition_id: UUID) -> int:
        return self.db.query(Participant).filter(
            Participant.competition_id == competition_id
        ).count()

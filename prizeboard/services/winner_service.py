"""
Winner service - prize distribution state machine

Each (competition, wallet, place) slot moves through

    (none) --approve--> approved --mark_paid--> paid
      |                    |  ^
      |                 revoke |approve
      |                    v  |
      +---------------> pending
      |                    ^
      |                reinstate
      |                    |
      +--disqualify--> disqualified --(single-hop promotion of the next eligible rank)

Only the moves listed in TRANSITIONS are legal; anything else raises
InvalidTransition.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, FrozenSet, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from prizeboard.core.errors import (
    CompetitionNotFound,
    InvalidTransition,
    ParticipantNotFound,
    ValidationError,
    WinnerNotFound,
)
from prizeboard.database import commit
from prizeboard.models.competition import Competition
from prizeboard.models.participant import Participant
from prizeboard.models.winner import PaymentStatus, Winner
from prizeboard.schemas.winner import WinnerCreate, WinnerResponse, WinnerUpdate
from prizeboard.services.competition_service import ENDED, computed_status
from prizeboard.services.participant_service import ParticipantService

logger = logging.getLogger(__name__)

PENDING = PaymentStatus.PENDING
APPROVED = PaymentStatus.APPROVED
DISQUALIFIED = PaymentStatus.DISQUALIFIED
PAID = PaymentStatus.PAID

# action -> (legal source states, target state); None is "no row yet"
TRANSITIONS: Dict[str, Tuple[FrozenSet[Optional[PaymentStatus]], PaymentStatus]] = {
    "approve": (frozenset({None, PENDING, APPROVED}), APPROVED),
    "disqualify": (frozenset({None, PENDING, APPROVED, DISQUALIFIED}), DISQUALIFIED),
    "revoke": (frozenset({APPROVED}), PENDING),
    "reinstate": (frozenset({DISQUALIFIED}), PENDING),
    "mark_paid": (frozenset({APPROVED, PAID}), PAID),
    "promote": (frozenset({None, PENDING}), PENDING),
}


def check_transition(action: str, current: Optional[PaymentStatus]) -> PaymentStatus:
    """Return the target state for `action`, or raise if `current` cannot take it"""
    sources, target = TRANSITIONS[action]
    if current not in sources:
        label = current.value if current else "none"
        raise InvalidTransition(f"Cannot {action.replace('_', ' ')} a winner that is {label}")
    return target


def action_for(current: PaymentStatus, target: PaymentStatus) -> Optional[str]:
    """Map a requested status change to the operation that performs it"""
    if current == target:
        return None
    if target == APPROVED:
        return "approve"
    if target == PAID:
        return "mark_paid"
    if target == DISQUALIFIED:
        return "disqualify"
    if current == APPROVED:
        return "revoke"
    if current == DISQUALIFIED:
        return "reinstate"
    raise InvalidTransition(f"Cannot move a winner from {current.value} to {target.value}")


def _assign(winner: Winner, **fields):
    # Only touch changed columns so repeated calls leave the row untouched
    for name, value in fields.items():
        if getattr(winner, name) != value:
            setattr(winner, name, value)


@dataclass
class DisqualifyResult:
    disqualified: Winner
    promoted: Optional[Winner] = None


class WinnerService:
    """Service for winner operations"""

    def __init__(self, db: Session):
        self.db = db
        self.participants = ParticipantService(db)

    # -- lookups ---------------------------------------------------------

    def _competition(self, competition_id: UUID) -> Competition:
        competition = self.db.query(Competition).filter(Competition.id == competition_id).first()
        if competition is None:
            raise CompetitionNotFound()
        return competition

    def _participant(self, competition_id: UUID, wallet_address: str) -> Participant:
        participant = self.participants.get(competition_id, wallet_address)
        if participant is None:
            raise ParticipantNotFound(
                f"No participant with wallet {wallet_address} in this competition"
            )
        return participant

    def get_slot(self, competition_id: UUID, wallet_address: str, place: int) -> Optional[Winner]:
        return self.db.query(Winner).filter(
            Winner.competition_id == competition_id,
            Winner.wallet_address == wallet_address,
            Winner.place == place
        ).first()

    def get(self, winner_id: UUID) -> Winner:
        winner = self.db.query(Winner).filter(Winner.id == winner_id).first()
        if winner is None:
            raise WinnerNotFound()
        return winner

    def list_winners(
        self,
        competition_id: Optional[UUID] = None,
        payment_status: Optional[str] = None
    ) -> List[Winner]:
        query = self.db.query(Winner)
        if competition_id:
            query = query.filter(Winner.competition_id == competition_id)
        if payment_status:
            query = query.filter(Winner.payment_status == payment_status)
        return query.order_by(Winner.competition_id, Winner.place, Winner.created_at).all()

    def _slot(self, competition_id: UUID, wallet_address: str, place: int) -> Winner:
        winner = self.get_slot(competition_id, wallet_address, place)
        if winner is None:
            raise WinnerNotFound()
        return winner

    # -- state transitions -----------------------------------------------

    def approve(self, competition_id: UUID, wallet_address: str, place: int, now: datetime) -> Winner:
        """
        Approve a participant for a place.

        Idempotent upsert on the slot: approving an approved slot leaves the
        row as it was.
        """
        competition = self._competition(competition_id)
        participant = self._participant(competition_id, wallet_address)

        winner = self.get_slot(competition_id, wallet_address, place)
        current = winner.status if winner else None
        check_transition("approve", current)

        if winner is None:
            winner = Winner(competition_id=competition_id, wallet_address=wallet_address, place=place)
            self.db.add(winner)

        _assign(
            winner,
            username=participant.username,
            amount_usd=competition.prize_for_place(place),
            payment_status=APPROVED.value,
        )
        if current != APPROVED:
            winner.paid_at = now

        commit(self.db)
        self.db.refresh(winner)

        logger.info(f"Approved {wallet_address} for place {place} in {competition_id}")
        return winner

    def disqualify(self, competition_id: UUID, wallet_address: str, place: int, now: datetime) -> DisqualifyResult:
        """
        Disqualify a slot and promote at most one replacement.

        The slot is marked, not deleted. The replacement is the next
        participant ranked below `place` with a different wallet; it gets a
        pending row at the same place even if it already holds another
        place. Promotion is single-hop: disqualifying an already disqualified
        slot promotes nobody.
        """
        competition = self._competition(competition_id)

        winner = self.get_slot(competition_id, wallet_address, place)
        current = winner.status if winner else None
        check_transition("disqualify", current)

        if current == DISQUALIFIED:
            logger.info(f"{wallet_address} already disqualified at place {place} in {competition_id}")
            return DisqualifyResult(disqualified=winner)

        if winner is None:
            participant = self.participants.get(competition_id, wallet_address)
            winner = Winner(
                competition_id=competition_id,
                wallet_address=wallet_address,
                place=place,
                username=participant.username if participant else None,
            )
            self.db.add(winner)

        winner.amount_usd = 0
        winner.payment_status = DISQUALIFIED.value
        winner.paid_at = None
        self.db.flush()

        promoted = None
        candidate = self._next_eligible(competition_id, wallet_address, place)
        if candidate is not None:
            promoted = self._promote(competition, candidate, place)

        commit(self.db)
        self.db.refresh(winner)
        if promoted is not None:
            self.db.refresh(promoted)
            logger.info(
                f"Disqualified {wallet_address} at place {place} in {competition_id}; "
                f"promoted {promoted.wallet_address}"
            )
        else:
            logger.info(
                f"Disqualified {wallet_address} at place {place} in {competition_id}; "
                f"no eligible replacement, place left vacant"
            )
        return DisqualifyResult(disqualified=winner, promoted=promoted)

    def _next_eligible(self, competition_id: UUID, excluded_wallet: str, place: int) -> Optional[Participant]:
        promotable = TRANSITIONS["promote"][0]
        for participant in self.participants.list_ranked(competition_id):
            if participant.rank is None or participant.rank <= place:
                continue
            if participant.wallet_address == excluded_wallet:
                continue
            slot = self.get_slot(competition_id, participant.wallet_address, place)
            if (slot.status if slot else None) not in promotable:
                continue
            return participant
        return None

    def _promote(self, competition: Competition, participant: Participant, place: int) -> Winner:
        winner = self.get_slot(competition.id, participant.wallet_address, place)
        check_transition("promote", winner.status if winner else None)
        if winner is None:
            winner = Winner(
                competition_id=competition.id,
                wallet_address=participant.wallet_address,
                place=place,
            )
            self.db.add(winner)
        winner.username = participant.username
        winner.amount_usd = competition.prize_for_place(place)
        winner.payment_status = PENDING.value
        winner.paid_at = None
        return winner

    def _apply(self, winner: Winner, action: str, now: Optional[datetime] = None) -> PaymentStatus:
        """Move an existing row through `action` with that action's amount and paid_at effects"""
        current = winner.status
        target = check_transition(action, current)

        if action in ("approve", "reinstate"):
            winner.amount_usd = winner.competition.prize_for_place(winner.place)
        elif action == "disqualify":
            winner.amount_usd = 0

        if action == "approve":
            if current != APPROVED:
                winner.paid_at = now
        elif action == "mark_paid":
            if current != PAID or winner.paid_at is None:
                winner.paid_at = now
        else:
            winner.paid_at = None

        winner.payment_status = target.value
        return target

    def revoke(self, competition_id: UUID, wallet_address: str, place: int) -> Winner:
        """Withdraw an approval: approved -> pending"""
        self._competition(competition_id)
        winner = self._slot(competition_id, wallet_address, place)
        self._apply(winner, "revoke")
        commit(self.db)
        self.db.refresh(winner)
        logger.info(f"Revoked approval of {wallet_address} at place {place} in {competition_id}")
        return winner

    def reinstate(self, competition_id: UUID, wallet_address: str, place: int) -> Winner:
        """Undo a disqualification: disqualified -> pending, prize restored"""
        self._competition(competition_id)
        winner = self._slot(competition_id, wallet_address, place)
        self._apply(winner, "reinstate")
        commit(self.db)
        self.db.refresh(winner)
        logger.info(f"Reinstated {wallet_address} at place {place} in {competition_id}")
        return winner

    def mark_paid(
        self,
        competition_id: UUID,
        wallet_address: str,
        place: int,
        now: datetime,
        tx_url: Optional[str] = None
    ) -> Winner:
        """Record a payout: approved -> paid. Moves no funds."""
        self._competition(competition_id)
        winner = self._slot(competition_id, wallet_address, place)
        self._apply(winner, "mark_paid", now)
        if tx_url:
            winner.tx_url = tx_url
        commit(self.db)
        self.db.refresh(winner)
        logger.info(f"Marked {wallet_address} paid for place {place} in {competition_id}")
        return winner

    # -- batch operations ------------------------------------------------

    def finalize(self, competition_id: UUID, now: datetime) -> List[Winner]:
        """
        Create pending winners from the final ranking.

        For each breakdown place with no winner row yet, the participant
        holding that rank is inserted. Safe to run repeatedly.
        """
        competition = self._competition(competition_id)
        if computed_status(now, competition.start_date, competition.end_date) != ENDED:
            raise InvalidTransition("Competition has not ended yet")

        taken_places = {
            place for (place,) in self.db.query(Winner.place).filter(
                Winner.competition_id == competition_id
            ).all()
        }
        by_rank = {
            p.rank: p for p in self.participants.list_ranked(competition_id) if p.rank is not None
        }

        created = []
        for row in competition.breakdown:
            if row.place in taken_places:
                continue
            participant = by_rank.get(row.place)
            if participant is None:
                continue
            winner = Winner(
                competition_id=competition_id,
                wallet_address=participant.wallet_address,
                place=row.place,
                username=participant.username,
                amount_usd=float(row.amount_usd or 0),
                payment_status=PENDING.value,
            )
            self.db.add(winner)
            created.append(winner)

        commit(self.db)
        for winner in created:
            self.db.refresh(winner)

        logger.info(f"Finalized {competition_id}: {len(created)} winners created")
        return created

    def reconcile_amounts(self, competition_id: UUID) -> int:
        """Reset non-disqualified winner amounts to the breakdown; returns rows corrected"""
        competition = self._competition(competition_id)
        corrected = 0
        for winner in competition.winners:
            if winner.payment_status == DISQUALIFIED.value:
                continue
            expected = competition.prize_for_place(winner.place)
            if float(winner.amount_usd or 0) != expected:
                winner.amount_usd = expected
                corrected += 1
        commit(self.db)

        logger.info(f"Reconciled {competition_id}: {corrected} amounts corrected")
        return corrected

    # -- manual CRUD -----------------------------------------------------

    def create(self, data: WinnerCreate, now: datetime) -> Winner:
        competition = self._competition(data.competition_id)
        if self.get_slot(data.competition_id, data.wallet_address, data.place):
            raise ValidationError("A winner already exists for this competition, wallet and place")

        username = data.username
        if username is None:
            participant = self.participants.get(data.competition_id, data.wallet_address)
            username = participant.username if participant else None

        status = PaymentStatus(data.payment_status)
        winner = Winner(
            competition_id=data.competition_id,
            wallet_address=data.wallet_address,
            place=data.place,
            username=username,
            amount_usd=(
                0 if status == DISQUALIFIED
                else data.amount_usd if data.amount_usd is not None
                else competition.prize_for_place(data.place)
            ),
            payment_status=status.value,
            paid_at=now if status in (APPROVED, PAID) else None,
            tx_url=data.tx_url,
        )
        self.db.add(winner)
        commit(self.db)
        self.db.refresh(winner)

        logger.info(f"Created winner {winner.id} ({status.value}) for place {data.place} in {data.competition_id}")
        return winner

    def update(self, winner_id: UUID, data: WinnerUpdate, now: datetime) -> Winner:
        """
        Edit fields. A status change runs the matching transition with its
        amount and paid_at effects but never promotes anyone; an explicit
        amount_usd wins over the breakdown unless the row ends up disqualified.
        """
        winner = self.get(winner_id)
        changes = data.model_dump(exclude_unset=True)

        target_status = changes.pop("payment_status", None)
        if target_status is not None:
            action = action_for(winner.status, PaymentStatus(target_status))
            if action is not None:
                self._apply(winner, action, now)

        amount = changes.pop("amount_usd", None)
        if amount is not None and winner.status != DISQUALIFIED:
            winner.amount_usd = amount

        for field, value in changes.items():
            setattr(winner, field, value)

        commit(self.db)
        self.db.refresh(winner)
        logger.info(f"Updated winner {winner_id}")
        return winner

    def delete(self, winner_id: UUID) -> None:
        winner = self.get(winner_id)
        self.db.delete(winner)
        commit(self.db)
        logger.info(f"Deleted winner {winner_id}")

    # -- presentation ----------------------------------------------------

    def to_responses(self, winners: List[Winner]) -> List[WinnerResponse]:
        """Decorate winners with their competition title, best effort"""
        titles: Dict[UUID, str] = {}
        competition_ids = {w.competition_id for w in winners}
        if competition_ids:
            try:
                titles = dict(self.db.query(Competition.id, Competition.title).filter(
                    Competition.id.in_(competition_ids)
                ).all())
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.warning(f"Could not resolve competition titles for winners: {e}")

        responses = []
        for winner in winners:
            response = WinnerResponse.model_validate(winner)
            response.competition_title = titles.get(winner.competition_id)
            responses.append(response)
        return responses

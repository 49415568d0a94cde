"""
Test data builders shared across the suite
"""
from datetime import datetime, timedelta

from prizeboard.schemas.competition import BreakdownItem, CompetitionCreate
from prizeboard.schemas.participant import ParticipantEntry
from prizeboard.services.competition_service import CompetitionService
from prizeboard.services.participant_service import ParticipantService

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "correct-horse-battery"

START = datetime(2025, 9, 15)
END = datetime(2025, 9, 30, 23, 59, 59)


class FakeClock:
    """Callable clock the tests can move"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)

    def set(self, now: datetime):
        self.now = now


def make_competition(db, title="September Cup", start=START, end=END, breakdown=None, pool=10000):
    if breakdown is None:
        breakdown = {1: 5000, 2: 3000, 3: 2000}
    return CompetitionService(db).create(CompetitionCreate(
        title=title,
        start_date=start,
        end_date=end,
        prize_pool_usd=pool,
        breakdown=[BreakdownItem(place=p, amount_usd=a) for p, a in breakdown.items()],
    ))


def add_participants(db, competition_id, count, now=START):
    """Wallets w1..wN ranked 1..N by descending score"""
    entries = [
        ParticipantEntry(
            wallet_address=f"w{i}",
            username=f"trader{i}",
            score=1000 - i,
            entry_date=now + timedelta(minutes=i),
        )
        for i in range(1, count + 1)
    ]
    ParticipantService(db).ingest(competition_id, entries, now)

"""
Participant ledger: batch dedupe and ranking
"""
from datetime import datetime, timedelta

from helpers import make_competition

from prizeboard.schemas.participant import ParticipantEntry
from prizeboard.services.participant_service import ParticipantService

NOW = datetime(2025, 9, 20)


def entry(wallet, score, minutes=None, username=None):
    return ParticipantEntry(
        wallet_address=wallet,
        username=username,
        score=score,
        entry_date=NOW - timedelta(minutes=minutes) if minutes is not None else None,
    )


def test_batch_duplicates_keep_earliest_entry(db, competition):
    service = ParticipantService(db)
    created, updated, duplicates = service.ingest(competition.id, [
        entry("w1", 10, minutes=5),
        entry("w1", 12, minutes=60),
        entry("w1", 11, minutes=1),
    ], NOW)

    assert (created, updated, duplicates) == (1, 0, 2)
    [participant] = service.list_ranked(competition.id)
    assert participant.entry_date == NOW - timedelta(minutes=60)
    assert participant.score == 11
    assert participant.rank == 1


def test_ties_break_on_earlier_entry(db, competition):
    service = ParticipantService(db)
    service.ingest(competition.id, [
        entry("late", 50, minutes=1),
        entry("early", 50, minutes=30),
        entry("top", 70, minutes=10),
        entry("low", 5, minutes=40),
    ], NOW)

    ranked = [(p.wallet_address, p.rank) for p in service.list_ranked(competition.id)]
    assert ranked == [("top", 1), ("early", 2), ("late", 3), ("low", 4)]


def test_missing_entry_date_defaults_to_now(db, competition):
    service = ParticipantService(db)
    service.ingest(competition.id, [entry("w1", 1)], NOW)
    assert service.get(competition.id, "w1").entry_date == NOW


def test_username_kept_when_feed_omits_it(db, competition):
    service = ParticipantService(db)
    service.ingest(competition.id, [entry("w1", 1, username="alice")], NOW)
    service.ingest(competition.id, [entry("w1", 2)], NOW)
    participant = service.get(competition.id, "w1")
    assert participant.username == "alice"
    assert participant.score == 2


def test_wallets_are_scoped_per_competition(db, competition):
    other = make_competition(db, title="Other Cup")
    service = ParticipantService(db)
    service.ingest(competition.id, [entry("w1", 1)], NOW)
    created, _, _ = service.ingest(other.id, [entry("w1", 1)], NOW)

    assert created == 1
    assert service.count(competition.id) == service.count(other.id) == 1

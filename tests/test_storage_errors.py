"""
Storage failures surface as 503 with the error envelope and leave no partial writes
"""
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from helpers import add_participants

from prizeboard.models.winner import Winner
from prizeboard.services.winner_service import WinnerService


def fail(*args, **kwargs):
    raise OperationalError("COMMIT", {}, Exception("database is locked"))


def test_failed_commit_rolls_back(client, auth_headers, competition, db, monkeypatch):
    add_participants(db, competition.id, 2)
    monkeypatch.setattr(Session, "commit", fail)

    response = client.post(
        "/api/winners/approve",
        json={"competition_id": str(competition.id), "wallet_address": "w1", "place": 1},
        headers=auth_headers,
    )

    assert response.status_code == 503
    assert response.json() == {
        "success": False,
        "error": "storage_failure",
        "detail": "Storage is unavailable",
    }
    monkeypatch.undo()
    db.expire_all()
    assert db.query(Winner).count() == 0


def test_query_error_maps_to_storage_failure(client, auth_headers, monkeypatch):
    monkeypatch.setattr(WinnerService, "list_winners", fail)

    response = client.get("/api/winners", headers=auth_headers)

    assert response.status_code == 503
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "storage_failure"

"""
Shared fixtures: an app per test on in-memory sqlite with a settable clock
"""
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from helpers import ADMIN_PASSWORD, ADMIN_USERNAME, FakeClock, make_competition

from prizeboard.core.config import Settings
from prizeboard.main import create_app
from prizeboard.services.auth_service import AuthService


@pytest.fixture
def settings():
    return Settings(
        DATABASE_URL="sqlite://",
        JWT_SECRET_KEY="test-secret-key",
        RATE_LIMIT_ENABLED=False,
        LOG_LEVEL="WARNING",
        ENVIRONMENT="test",
    )


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 9, 20, 12, 0, 0))


@pytest.fixture
def app(settings, clock):
    app = create_app(settings, clock=clock)
    app.state.database.create_all()
    yield app
    app.state.database.drop_all()
    app.state.database.dispose()


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db(app):
    session = app.state.database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def admin(app, settings):
    with app.state.database.session() as session:
        created = AuthService(session, settings).create_admin(ADMIN_USERNAME, ADMIN_PASSWORD)
        return created.id


@pytest.fixture
def auth_headers(client, admin):
    response = client.post(
        "/api/admin/login",
        json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    # Only the header should authenticate from here on
    client.cookies.clear()
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def competition(db):
    return make_competition(db)

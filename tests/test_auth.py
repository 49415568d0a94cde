"""
Admin login, lockout policy and session tokens
"""
from datetime import timedelta

from fastapi.testclient import TestClient

from helpers import ADMIN_PASSWORD, ADMIN_USERNAME

from prizeboard.core.security import create_access_token, decode_access_token, hash_password, verify_password
from prizeboard.main import create_app
from prizeboard.models.admin import AdminUser
from prizeboard.services.auth_service import AuthService


def login(client, password=ADMIN_PASSWORD, username=ADMIN_USERNAME):
    return client.post("/api/admin/login", json={"username": username, "password": password})


def stored_admin(db) -> AdminUser:
    db.expire_all()
    return db.query(AdminUser).filter(AdminUser.username == ADMIN_USERNAME).one()


def test_password_hash_round_trip():
    hashed = hash_password("s3cret-pass")
    assert hashed != "s3cret-pass"
    assert verify_password("s3cret-pass", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("s3cret-pass", "not-a-bcrypt-hash")


def test_token_expiry_follows_supplied_clock(clock):
    token = create_access_token({"sub": "x"}, "key", "HS256", timedelta(hours=8), issued_at=clock.now)
    assert decode_access_token(token, "key", "HS256", now=clock.now + timedelta(hours=7))["sub"] == "x"
    assert decode_access_token(token, "key", "HS256", now=clock.now + timedelta(hours=8)) is None
    assert decode_access_token(token, "other-key", "HS256", now=clock.now) is None


def test_login_success_returns_token_and_cookie(client, admin, settings, clock):
    response = login(client)

    assert response.status_code == 200
    body = response.json()
    assert body["token"]
    assert body["token_type"] == "bearer"
    assert body["expires_in"] == settings.ADMIN_TOKEN_EXPIRE_HOURS * 3600
    assert body["admin"]["username"] == ADMIN_USERNAME
    assert "password_hash" not in body["admin"]
    assert settings.ADMIN_COOKIE_NAME in response.cookies


def test_unknown_user_and_wrong_password_are_indistinguishable(client, admin):
    unknown = login(client, username="nobody")
    wrong = login(client, password="wrong-password")

    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json() == wrong.json()
    assert unknown.json()["error"] == "invalid_credentials"


def test_five_failures_lock_for_fifteen_minutes(client, admin, db, clock):
    for attempt in range(1, 5):
        assert login(client, password="wrong").status_code == 401
        assert stored_admin(db).locked_until is None
        assert stored_admin(db).failed_login_attempts == attempt

    fifth_failure_at = clock.now
    assert login(client, password="wrong").status_code == 401
    assert stored_admin(db).locked_until == fifth_failure_at + timedelta(minutes=15)

    # correct password is rejected while locked
    clock.advance(minutes=1)
    locked = login(client)
    assert locked.status_code == 423
    assert locked.json()["error"] == "account_locked"

    clock.set(fifth_failure_at + timedelta(minutes=15) - timedelta(seconds=1))
    assert login(client).status_code == 423

    clock.set(fifth_failure_at + timedelta(minutes=15))
    assert login(client).status_code == 200

    admin_row = stored_admin(db)
    assert admin_row.failed_login_attempts == 0
    assert admin_row.locked_until is None
    assert admin_row.last_login_at == clock.now


def test_success_resets_counter_before_threshold(client, admin, db):
    for _ in range(4):
        login(client, password="wrong")
    assert login(client).status_code == 200
    assert stored_admin(db).failed_login_attempts == 0

    # four more failures do not lock
    for _ in range(4):
        login(client, password="wrong")
    assert stored_admin(db).locked_until is None


def test_me_requires_token(client, admin, auth_headers):
    assert client.get("/api/admin/me").status_code == 401
    response = client.get("/api/admin/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["username"] == ADMIN_USERNAME


def test_cookie_session_is_accepted(client, admin):
    assert login(client).status_code == 200
    # no Authorization header, the login cookie is enough
    assert client.get("/api/admin/me").status_code == 200


def test_garbage_token_is_rejected(client, admin):
    response = client.get("/api/admin/me", headers={"Authorization": "Bearer not.a.token"})
    assert response.status_code == 401
    assert response.json()["error"] == "unauthorized"


def test_token_expires_after_eight_hours(client, admin, auth_headers, clock):
    clock.advance(hours=8)
    assert client.get("/api/admin/me", headers=auth_headers).status_code == 401


def test_deactivated_admin_token_is_rejected(client, admin, auth_headers, app, settings):
    with app.state.database.session() as session:
        service = AuthService(session, settings)
        service.deactivate(service.get_admin_by_username(ADMIN_USERNAME))

    assert client.get("/api/admin/me", headers=auth_headers).status_code == 401
    assert login(client).status_code == 401


def test_logout_clears_cookie(client, admin, auth_headers, settings):
    response = client.post("/api/admin/logout", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["success"] is True
    assert response.headers["set-cookie"].startswith(f"{settings.ADMIN_COOKIE_NAME}=")


def test_change_password(client, admin, auth_headers):
    bad = client.post(
        "/api/admin/change-password",
        headers=auth_headers,
        json={"current_password": "nope", "new_password": "new-password-1"},
    )
    assert bad.status_code == 401

    ok = client.post(
        "/api/admin/change-password",
        headers=auth_headers,
        json={"current_password": ADMIN_PASSWORD, "new_password": "new-password-1"},
    )
    assert ok.status_code == 200
    assert login(client).status_code == 401
    assert login(client, password="new-password-1").status_code == 200


def test_short_new_password_is_a_validation_error(client, admin, auth_headers):
    response = client.post(
        "/api/admin/change-password",
        headers=auth_headers,
        json={"current_password": ADMIN_PASSWORD, "new_password": "short"},
    )
    assert response.status_code == 422
    assert response.json()["error"] == "validation_error"


def test_unlock_clears_lockout(db, admin, settings, clock):
    service = AuthService(db, settings)
    admin_row = service.get_admin_by_username(ADMIN_USERNAME)
    admin_row.failed_login_attempts = 5
    admin_row.locked_until = clock.now + timedelta(minutes=10)
    db.commit()

    service.unlock(admin_row)
    token, _ = service.login(ADMIN_USERNAME, ADMIN_PASSWORD, clock.now)
    assert service.verify(token, clock.now).username == ADMIN_USERNAME


def test_login_rate_limit_is_per_app(settings, clock):
    strict = create_app(
        settings.model_copy(update={"RATE_LIMIT_ENABLED": True, "LOGIN_RATE_LIMIT": "2/minute"}),
        clock=clock,
    )
    relaxed = create_app(
        settings.model_copy(update={"RATE_LIMIT_ENABLED": True, "LOGIN_RATE_LIMIT": "5/minute"}),
        clock=clock,
    )

    with TestClient(strict) as strict_client, TestClient(relaxed) as relaxed_client:
        strict_codes = [login(strict_client, password="nope").status_code for _ in range(3)]
        relaxed_codes = [login(relaxed_client, password="nope").status_code for _ in range(3)]

    assert strict_codes == [401, 401, 429]
    assert relaxed_codes == [401, 401, 401]
    strict.state.database.dispose()
    relaxed.state.database.dispose()

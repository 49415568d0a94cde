"""
Password hashing and session token helpers
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt


def hash_password(password: str) -> str:
    """Hash a password with a fresh bcrypt salt"""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash or password over bcrypt's 72 byte limit
        return False


def create_access_token(
    data: Dict[str, Any],
    secret_key: str,
    algorithm: str,
    expires_delta: timedelta,
    issued_at: Optional[datetime] = None,
) -> str:
    """
    Create a signed JWT

    Args:
        data: Claims to embed (e.g. {"sub": admin_id, "username": ...})
        secret_key: HMAC signing key
        algorithm: JWT algorithm, HS256 by default
        expires_delta: Validity window
        issued_at: Naive UTC issue time, defaults to now

    Returns:
        Encoded token
    """
    if issued_at is None:
        issued_at = datetime.now(timezone.utc)
    elif issued_at.tzinfo is None:
        issued_at = issued_at.replace(tzinfo=timezone.utc)

    to_encode = data.copy()
    to_encode.update({"iat": issued_at, "exp": issued_at + expires_delta})
    return jwt.encode(to_encode, secret_key, algorithm=algorithm)


def decode_access_token(
    token: str,
    secret_key: str,
    algorithm: str,
    now: Optional[datetime] = None,
) -> Optional[Dict[str, Any]]:
    """
    Validate signature and expiry

    Returns the claims, or None if the token is malformed, forged or expired.
    Expiry is checked against `now` when given so callers can use their own clock.
    """
    try:
        payload = jwt.decode(
            token,
            secret_key,
            algorithms=[algorithm],
            options={"verify_exp": now is None, "verify_iat": False},
        )
    except jwt.PyJWTError:
        return None

    if now is not None:
        exp = payload.get("exp")
        if exp is None:
            return None
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        if now.timestamp() >= float(exp):
            return None
    return payload

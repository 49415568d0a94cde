"""
Authentication Service - admin credentials, lockout policy and session tokens
"""
import logging
from datetime import datetime, timedelta
from typing import Optional, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from prizeboard.core.config import Settings
from prizeboard.core.errors import AccountLocked, InvalidCredentials, ValidationError
from prizeboard.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from prizeboard.database import commit
from prizeboard.models.admin import AdminUser

logger = logging.getLogger(__name__)


class AuthService:
    """Service for admin authentication operations"""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings

    def get_admin_by_username(self, username: str) -> Optional[AdminUser]:
        """Get admin by username"""
        return self.db.query(AdminUser).filter(AdminUser.username == username).first()

    def get_admin_by_id(self, admin_id: str) -> Optional[AdminUser]:
        """Get admin by ID"""
        try:
            admin_uuid = UUID(admin_id) if isinstance(admin_id, str) else admin_id
        except (ValueError, TypeError):
            return None
        return self.db.query(AdminUser).filter(AdminUser.id == admin_uuid).first()

    def create_admin(self, username: str, password: str, role: str = "admin") -> AdminUser:
        """Create a new admin account"""
        if self.get_admin_by_username(username):
            raise ValidationError(f"Admin '{username}' already exists")

        admin = AdminUser(
            username=username,
            password_hash=hash_password(password),
            role=role,
            failed_login_attempts=0,
            is_active=True,
        )
        self.db.add(admin)
        commit(self.db)
        self.db.refresh(admin)

        logger.info(f"Created admin: {admin.username}")
        return admin

    def login(self, username: str, password: str, now: datetime) -> Tuple[str, AdminUser]:
        """
        Verify credentials and issue a session token

        Raises:
            AccountLocked: the account is inside its lockout window
            InvalidCredentials: unknown username, inactive account or wrong password
        """
        admin = self.get_admin_by_username(username)
        if admin is None or not admin.is_active:
            logger.warning(f"Login rejected for unknown or inactive admin '{username}'")
            raise InvalidCredentials()

        if admin.locked_until is not None and admin.locked_until > now:
            logger.warning(f"Login rejected for locked admin '{username}'")
            raise AccountLocked(admin.locked_until)

        if not verify_password(password, admin.password_hash):
            self._record_failure(admin, now)
            raise InvalidCredentials()

        admin.failed_login_attempts = 0
        admin.locked_until = None
        admin.last_login_at = now
        commit(self.db)
        self.db.refresh(admin)

        logger.info(f"Admin logged in: {admin.username}")
        return self.create_token_for_admin(admin, now), admin

    def _record_failure(self, admin: AdminUser, now: datetime):
        admin.failed_login_attempts = (admin.failed_login_attempts or 0) + 1
        if admin.failed_login_attempts >= self.settings.MAX_FAILED_LOGINS:
            admin.locked_until = now + timedelta(minutes=self.settings.LOCKOUT_MINUTES)
            logger.warning(
                f"Admin '{admin.username}' locked until {admin.locked_until.isoformat()} "
                f"after {admin.failed_login_attempts} failed logins"
            )
        else:
            logger.info(f"Failed login {admin.failed_login_attempts} for admin '{admin.username}'")
        commit(self.db)

    def create_token_for_admin(self, admin: AdminUser, now: datetime) -> str:
        """Create JWT session token for admin"""
        return create_access_token(
            data={"sub": str(admin.id), "username": admin.username},
            secret_key=self.settings.JWT_SECRET_KEY,
            algorithm=self.settings.JWT_ALGORITHM,
            expires_delta=timedelta(hours=self.settings.ADMIN_TOKEN_EXPIRE_HOURS),
            issued_at=now,
        )

    def verify(self, token: Optional[str], now: datetime) -> Optional[AdminUser]:
        """
        Resolve a session token to an active admin

        A valid signature is not enough: the admin must still exist and be active.
        """
        if not token:
            return None

        payload = decode_access_token(
            token,
            self.settings.JWT_SECRET_KEY,
            self.settings.JWT_ALGORITHM,
            now=now,
        )
        if payload is None:
            return None

        admin = self.get_admin_by_id(payload.get("sub"))
        if admin is None or not admin.is_active:
            return None
        return admin

    def change_password(self, admin: AdminUser, current_password: str, new_password: str) -> AdminUser:
        """Re-hash and store a new password. Existing tokens stay valid."""
        if not verify_password(current_password, admin.password_hash):
            raise InvalidCredentials("Current password is incorrect")

        admin.password_hash = hash_password(new_password)
        commit(self.db)
        self.db.refresh(admin)

        logger.info(f"Password changed for admin: {admin.username}")
        return admin

    def set_password(self, admin: AdminUser, new_password: str) -> AdminUser:
        """Administrative reset, also clears any lockout"""
        admin.password_hash = hash_password(new_password)
        admin.failed_login_attempts = 0
        admin.locked_until = None
        commit(self.db)
        self.db.refresh(admin)
        return admin

    def unlock(self, admin: AdminUser) -> AdminUser:
        admin.failed_login_attempts = 0
        admin.locked_until = None
        commit(self.db)
        self.db.refresh(admin)
        return admin

    def deactivate(self, admin: AdminUser) -> AdminUser:
        admin.is_active = False
        commit(self.db)
        self.db.refresh(admin)
        logger.info(f"Deactivated admin: {admin.username}")
        return admin

"""
Admin credential store and key/value settings
"""
from uuid import uuid4
from sqlalchemy import Column, String, Boolean, Integer, DateTime, Text, Uuid
from prizeboard.database import Base
from prizeboard.utils.time_utils import utc_now


class AdminUser(Base):
    """Admin account with lockout counters"""
    __tablename__ = "admin_users"

    id = Column(Uuid, primary_key=True, default=uuid4)
    username = Column(String(100), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(50), default="admin")

    # Lockout
    failed_login_attempts = Column(Integer, default=0, nullable=False)
    locked_until = Column(DateTime, nullable=True)

    # Status
    is_active = Column(Boolean, default=True, nullable=False)
    last_login_at = Column(DateTime, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)


class AppSetting(Base):
    """Generic configuration entry"""
    __tablename__ = "app_settings"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=True)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

"""Authentication schemas"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_serializer

from prizeboard.utils.time_utils import to_utc_isoformat


class LoginRequest(BaseModel):
    """Admin login credentials"""
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1, max_length=72)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1, max_length=72)
    # bcrypt only considers the first 72 bytes
    new_password: str = Field(..., min_length=8, max_length=72)


class AdminResponse(BaseModel):
    """Admin account as exposed to clients (no hash, no counters)"""
    id: UUID
    username: str
    role: str
    is_active: bool
    last_login_at: Optional[datetime] = None

    @field_serializer('last_login_at')
    def serialize_datetime(self, value: Optional[datetime]) -> Optional[str]:
        return to_utc_isoformat(value)

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    """Session token response"""
    token: str
    token_type: str = "bearer"
    expires_in: int
    admin: AdminResponse

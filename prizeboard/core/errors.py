"""
Domain errors for Prizeboard

Every error carries the HTTP status and machine code it is rendered with
by the exception handler in prizeboard.main.
"""
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import status


class PrizeboardError(Exception):
    """Base class for all domain errors"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "error"
    message: str = "Request failed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        self.detail = message or self.message

    def to_dict(self) -> Dict[str, Any]:
        return {"success": False, "error": self.code, "detail": self.detail}


class InvalidCredentials(PrizeboardError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "invalid_credentials"
    message = "Invalid username or password"


class AccountLocked(PrizeboardError):
    status_code = status.HTTP_423_LOCKED
    code = "account_locked"
    message = "Account is temporarily locked"

    def __init__(self, locked_until: datetime):
        super().__init__(f"Account is locked until {locked_until.isoformat()}Z")
        self.locked_until = locked_until

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["locked_until"] = self.locked_until.isoformat() + "Z"
        return data


class Unauthorized(PrizeboardError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthorized"
    message = "Authentication required"


class NotFound(PrizeboardError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    message = "Resource not found"


class CompetitionNotFound(NotFound):
    message = "Competition not found"


class ParticipantNotFound(NotFound):
    message = "Participant not found"


class WinnerNotFound(NotFound):
    message = "Winner not found"


class SettingNotFound(NotFound):
    message = "Setting not found"


class ValidationError(PrizeboardError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "validation_error"
    message = "Invalid request"


class InvalidTransition(PrizeboardError):
    """Raised when a winner status change is not allowed from its current state"""

    status_code = status.HTTP_409_CONFLICT
    code = "invalid_transition"
    message = "Status transition not allowed"


class StorageFailure(PrizeboardError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "storage_failure"
    message = "Storage is unavailable"

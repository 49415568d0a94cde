"""
FastAPI dependencies shared by the routers
"""
import logging
from datetime import datetime
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from prizeboard.core.config import Settings
from prizeboard.core.errors import Unauthorized
from prizeboard.database import get_db
from prizeboard.models.admin import AdminUser
from prizeboard.services.auth_service import AuthService

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_now(request: Request) -> datetime:
    """Current naive UTC time from the application's clock"""
    return request.app.state.clock()


def get_auth_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(db, settings)


def get_current_admin(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
    now: datetime = Depends(get_now),
) -> AdminUser:
    """
    Resolve the calling admin from a Bearer header or the session cookie

    Fails closed: any missing, invalid or expired token, or a token for a
    deactivated admin, raises Unauthorized.
    """
    token = credentials.credentials if credentials else None
    if not token:
        token = request.cookies.get(settings.ADMIN_COOKIE_NAME)

    admin = auth_service.verify(token, now)
    if admin is None:
        logger.info(f"Unauthorized request to {request.method} {request.url.path}")
        raise Unauthorized()
    return admin

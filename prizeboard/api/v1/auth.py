"""
Admin authentication endpoints - login, logout, password change
"""
import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Request, Response, status

from prizeboard.core.config import Settings
from prizeboard.core.dependencies import get_auth_service, get_current_admin, get_now, get_settings
from prizeboard.core.rate_limit import limiter, login_key, login_rate_limit, rate_limit_disabled
from prizeboard.models.admin import AdminUser
from prizeboard.schemas.auth import AdminResponse, ChangePasswordRequest, LoginRequest, LoginResponse
from prizeboard.services.auth_service import AuthService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/login", response_model=LoginResponse, status_code=status.HTTP_200_OK)
@limiter.limit(login_rate_limit, key_func=login_key, exempt_when=rate_limit_disabled)
async def login(
    request: Request,
    response: Response,
    credentials: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
    now: datetime = Depends(get_now),
):
    """
    Log in with username and password

    Returns a session token valid for ADMIN_TOKEN_EXPIRE_HOURS and also sets
    it as an HTTP-only cookie for browser clients.

    - **401**: unknown username or wrong password (indistinguishable)
    - **423**: account locked after too many failed attempts
    """
    token, admin = auth_service.login(credentials.username, credentials.password, now)

    max_age = settings.ADMIN_TOKEN_EXPIRE_HOURS * 60 * 60
    response.set_cookie(
        key=settings.ADMIN_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=max_age,
    )

    return LoginResponse(
        token=token,
        expires_in=max_age,
        admin=AdminResponse.model_validate(admin),
    )


@router.post("/logout", status_code=status.HTTP_200_OK)
async def logout(
    response: Response,
    current_admin: AdminUser = Depends(get_current_admin),
    settings: Settings = Depends(get_settings),
):
    """
    Clear the session cookie

    Tokens are stateless, so a copied bearer token stays valid until it expires.
    """
    response.delete_cookie(settings.ADMIN_COOKIE_NAME)
    logger.info(f"Admin logged out: {current_admin.username}")
    return {"success": True, "message": "Logged out successfully"}


@router.get("/me", response_model=AdminResponse)
async def get_me(current_admin: AdminUser = Depends(get_current_admin)):
    """Current admin profile"""
    return current_admin


@router.post("/change-password", status_code=status.HTTP_200_OK)
async def change_password(
    body: ChangePasswordRequest,
    current_admin: AdminUser = Depends(get_current_admin),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Change the calling admin's password"""
    auth_service.change_password(current_admin, body.current_password, body.new_password)
    return {"success": True, "message": "Password updated"}

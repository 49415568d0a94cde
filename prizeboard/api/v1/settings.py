"""
App settings endpoints (admin)
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from prizeboard.core.config import Settings
from prizeboard.core.dependencies import get_current_admin, get_settings
from prizeboard.database import get_db
from prizeboard.models.admin import AdminUser
from prizeboard.schemas.settings import SettingResponse, SettingsListResponse, SettingUpdate
from prizeboard.services.settings_service import SettingsService

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=SettingsListResponse)
async def list_settings(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    current_admin: AdminUser = Depends(get_current_admin),
):
    """All stored key/value settings"""
    return SettingsListResponse(settings=SettingsService(db, settings).all())


@router.put("", response_model=SettingResponse)
async def update_setting(
    data: SettingUpdate,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    current_admin: AdminUser = Depends(get_current_admin),
):
    """Create or overwrite one setting; booleans are stored as true/false"""
    return SettingsService(db, settings).upsert(data.key, data.value)

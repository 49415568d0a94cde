"""
Settings service - key/value configuration store
"""
import logging
from typing import Dict, Optional, Union

from sqlalchemy.orm import Session

from prizeboard.core.config import Settings
from prizeboard.core.errors import SettingNotFound
from prizeboard.database import commit
from prizeboard.models.admin import AppSetting
from prizeboard.schemas.prize import PrizeConfig
from prizeboard.utils.time_utils import utc_now

logger = logging.getLogger(__name__)

HERO_PROMO_DAYS = "hero_promo_days_before_start"
CACHE_VERSION = "cache_version"
LEADERBOARD_ENABLED = "leaderboard_enabled"

_FALSY = {"false", "0", "no", "off"}


def _to_text(value: Union[bool, int, float, str, None]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class SettingsService:
    """Service for app_settings reads and upserts"""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings

    def all(self) -> Dict[str, Optional[str]]:
        return {row.key: row.value for row in self.db.query(AppSetting).all()}

    def get(self, key: str) -> AppSetting:
        row = self.db.query(AppSetting).filter(AppSetting.key == key).first()
        if row is None:
            raise SettingNotFound(f"Setting '{key}' not found")
        return row

    def upsert(self, key: str, value: Union[bool, int, float, str, None]) -> AppSetting:
        row = self.db.query(AppSetting).filter(AppSetting.key == key).first()
        if row is None:
            row = AppSetting(key=key)
            self.db.add(row)
        row.value = _to_text(value)
        row.updated_at = utc_now()
        commit(self.db)
        self.db.refresh(row)

        logger.info(f"Setting '{key}' updated")
        return row

    def public_config(self, values: Optional[Dict[str, Optional[str]]] = None) -> PrizeConfig:
        """Typed view of the keys the read API exposes, with defaults for bad or missing values"""
        if values is None:
            values = self.all()

        try:
            promo_days = int(values.get(HERO_PROMO_DAYS) or self.settings.DEFAULT_HERO_PROMO_DAYS)
        except ValueError:
            promo_days = self.settings.DEFAULT_HERO_PROMO_DAYS

        leaderboard_raw = (values.get(LEADERBOARD_ENABLED) or "").strip().lower()
        leaderboard_enabled = leaderboard_raw not in _FALSY

        return PrizeConfig(
            hero_promo_days_before_start=promo_days,
            cache_version=values.get(CACHE_VERSION) or self.settings.DEFAULT_CACHE_VERSION,
            leaderboard_enabled=leaderboard_enabled,
        )

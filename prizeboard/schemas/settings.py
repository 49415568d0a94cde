"""Settings store schemas"""
from datetime import datetime
from typing import Dict, Optional, Union

from pydantic import BaseModel, Field, field_serializer

from prizeboard.utils.time_utils import to_utc_isoformat


class SettingUpdate(BaseModel):
    key: str = Field(..., min_length=1, max_length=100)
    value: Union[bool, int, float, str, None]


class SettingResponse(BaseModel):
    key: str
    value: Optional[str] = None
    updated_at: Optional[datetime] = None

    @field_serializer('updated_at')
    def serialize_datetime(self, value: Optional[datetime]) -> Optional[str]:
        return to_utc_isoformat(value)

    class Config:
        from_attributes = True


class SettingsListResponse(BaseModel):
    settings: Dict[str, Optional[str]]

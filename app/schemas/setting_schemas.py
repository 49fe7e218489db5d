from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class SettingOut(BaseModel):
    key: str
    value: str
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class SettingUpdate(BaseModel):
    value: str = Field(..., min_length=1, max_length=255)

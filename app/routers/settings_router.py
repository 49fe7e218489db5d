from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.db import get_db
from app.schemas.setting_schemas import SettingOut, SettingUpdate
from app.services import setting_service
from app.utils.check_roles import require_role, ADMIN
from app.utils.get_user import get_current_user

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("/", response_model=List[SettingOut])
async def route_get_settings(db: AsyncSession = Depends(get_db)):
    return await setting_service.get_all_settings(db)


@router.put("/{key}", response_model=SettingOut)
@require_role(ADMIN)
async def route_update_setting(
    key: str,
    payload: SettingUpdate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    """Create or replace a store setting (e.g. tax_rate, min_order_amount)."""
    return await setting_service.update_setting(db, key, payload.value, _user)

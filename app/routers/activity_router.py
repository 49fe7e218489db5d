# app/routers/activity_router.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Literal, Optional
from app.core.db import get_db
from app.services.activity_service import get_activities
from app.schemas.activity_schemas import UserActivityOut, UserActivityListResponse
from app.utils.get_user import get_current_user
from app.utils.check_roles import require_role, ADMIN

router = APIRouter(prefix="/activities", tags=["User Activities"])

@router.get("/", response_model=UserActivityListResponse)
@require_role(ADMIN)
async def list_user_activities(
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
    entity_type: Optional[Literal["tax_rule", "discount_code", "setting"]] = Query(None),
    entity_key: Optional[str] = Query(None, description="Rule/discount id or setting key"),
    username: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
):
    """
    Who changed which tax rule, discount code or setting, newest first.
    """
    total, activities = await get_activities(
        db=db,
        entity_type=entity_type,
        entity_key=entity_key,
        username=username,
        page=page,
        page_size=page_size,
    )

    return UserActivityListResponse(
        message="User activities fetched successfully",
        total=total,
        data=[UserActivityOut.model_validate(a) for a in activities]
    )

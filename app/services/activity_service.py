# app/services/activity_service.py
from typing import List, Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.activity_models import UserActivity


async def get_activities(
    db: AsyncSession,
    entity_type: Optional[str] = None,
    entity_key: Optional[str] = None,
    username: Optional[str] = None,
    page: int = 1,
    page_size: int = 20,
) -> Tuple[int, List[UserActivity]]:
    """Newest first. ``entity_key`` only narrows the result together with ``entity_type``."""
    filters = []
    if entity_type:
        filters.append(UserActivity.entity_type == entity_type)
        if entity_key:
            filters.append(UserActivity.entity_key == entity_key)
    if username:
        filters.append(UserActivity.username.ilike(f"%{username}%"))

    stmt = select(UserActivity)
    count_stmt = select(func.count(UserActivity.id))
    if filters:
        stmt = stmt.where(*filters)
        count_stmt = count_stmt.where(*filters)

    total = (await db.execute(count_stmt)).scalar() or 0

    stmt = stmt.order_by(UserActivity.id.desc()).offset((page - 1) * page_size).limit(page_size)
    result = await db.execute(stmt)
    return total, result.scalars().all()

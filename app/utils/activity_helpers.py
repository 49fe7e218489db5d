# app/utils/activity_helpers.py
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from app.models.activity_models import UserActivity


async def log_user_activity(
    db: AsyncSession,
    user=None,
    message: str = "",
    entity_type: Optional[str] = None,
    entity_key=None,
    commit: bool = False,
):
    """
    Adds an audit row for a pricing change to the session, so it lands in the
    same transaction as the change. The caller is responsible for the commit.
    """
    activity = UserActivity(
        user_id=getattr(user, "id", None),
        username=getattr(user, "username", None) or "system",
        entity_type=entity_type,
        entity_key=str(entity_key) if entity_key is not None else None,
        message=message,
    )
    db.add(activity)
    if commit:
        await db.commit()

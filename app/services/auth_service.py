# app/services/auth_service.py
from datetime import datetime, timedelta, timezone
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.models.user_models import User
from app.core.security import verify_password, create_access_token
from app.core.config import ACCESS_TOKEN_EXPIRE_MINUTES, ADMIN_ACCESS_TOKEN_EXPIRE_MINUTES
from app.schemas.auth_schemas import TokenResponse, MessageResponse


async def authenticate_user(db: AsyncSession, username: str, password: str) -> User:
    result = await db.execute(select(User).where(User.username == username))
    user = result.scalars().first()
    if not user or not verify_password(password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials"
        )
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User account is inactive.")
    return user


def issue_token(user: User) -> str:
    """Access token carrying token_version so logout can invalidate it immediately."""
    expire_minutes = (
        ADMIN_ACCESS_TOKEN_EXPIRE_MINUTES
        if user.role == "admin"
        else ACCESS_TOKEN_EXPIRE_MINUTES
    )
    return create_access_token(
        {"sub": user.username, "user_id": user.id, "role": user.role},
        token_version=user.token_version,
        expires_delta=timedelta(minutes=expire_minutes),
    )


async def login(db: AsyncSession, username: str, password: str) -> TokenResponse:
    user = await authenticate_user(db, username, password)
    user.last_login = datetime.now(timezone.utc)
    await db.commit()
    await db.refresh(user)
    return TokenResponse(access_token=issue_token(user), role=user.role)


async def logout_user(db: AsyncSession, user: User) -> MessageResponse:
    db_user = await db.get(User, user.id)
    if not db_user:
        raise HTTPException(status_code=404, detail="User not found")

    db_user.token_version += 1
    await db.commit()
    return MessageResponse(msg="Logged out successfully")

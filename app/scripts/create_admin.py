import asyncio
import os

from sqlalchemy import select

from app.core.db import AsyncSessionLocal, init_models
from app.core.security import hash_password
from app.models.user_models import User


async def create_admin(username: str, password: str):
    await init_models()
    async with AsyncSessionLocal() as session:
        existing = await session.execute(select(User).where(User.username == username))
        if existing.scalars().first():
            print(f"User {username} already exists")
            return
        admin = User(
            username=username,
            password_hash=hash_password(password),
            role="admin",
            is_active=True
        )
        session.add(admin)
        await session.commit()
        print("Admin user created!")


if __name__ == "__main__":
    asyncio.run(create_admin(
        os.getenv("ADMIN_USERNAME", "admin@restaurant.com"),
        os.getenv("ADMIN_PASSWORD", "admin123"),
    ))

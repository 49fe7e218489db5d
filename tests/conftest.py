"""Pytest configuration and fixtures."""

import os
import tempfile
from decimal import Decimal
from pathlib import Path

# Configure the app before anything imports app.core.config
_tmp_dir = Path(tempfile.mkdtemp(prefix="restaurant-tests-"))
os.environ["DB_TYPE"] = "sqlite"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_tmp_dir / 'test.db'}"
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ["STORE_TIMEZONE"] = "UTC"

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.db import AsyncSessionLocal, Base, engine
from app.core.security import hash_password
from app.models.user_models import User
from app.schemas.tax_schemas import TaxRuleOut
from app.services.auth_service import issue_token
from main import app


def make_rule(**overrides) -> TaxRuleOut:
    """An unconditional active rule unless overridden."""
    fields = {
        "id": 1,
        "name": "VAT",
        "rate": Decimal("15"),
        "priority": 0,
        "is_active": True,
    }
    fields.update(overrides)
    return TaxRuleOut(**fields)


@pytest.fixture
def rule_factory():
    return make_rule


@pytest.fixture
async def db_reset():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield


@pytest.fixture
async def client(db_reset):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def _create_user(username: str, role: str, password: str = "secret123") -> User:
    async with AsyncSessionLocal() as session:
        user = User(
            username=username,
            password_hash=hash_password(password),
            role=role,
            is_active=True,
            token_version=0,
        )
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user


@pytest.fixture
async def admin_user(db_reset):
    return await _create_user("admin@restaurant.com", "admin")


@pytest.fixture
async def admin_headers(admin_user):
    return {"Authorization": f"Bearer {issue_token(admin_user)}"}


@pytest.fixture
async def staff_headers(db_reset):
    user = await _create_user("waiter@restaurant.com", "staff")
    return {"Authorization": f"Bearer {issue_token(user)}"}

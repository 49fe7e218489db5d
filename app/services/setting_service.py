from decimal import Decimal, InvalidOperation
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.setting_models import Setting
from app.utils.activity_helpers import log_user_activity

TAX_RATE = "tax_rate"
MIN_ORDER_AMOUNT = "min_order_amount"

# key -> (lower bound, upper bound) for numeric settings
NUMERIC_SETTINGS = {
    TAX_RATE: (Decimal("0"), Decimal("100")),
    MIN_ORDER_AMOUNT: (Decimal("0"), None),
}


def parse_numeric(key: str, value: str) -> Decimal:
    low, high = NUMERIC_SETTINGS[key]
    try:
        number = Decimal(value.strip())
    except InvalidOperation:
        raise ValueError(f"Setting '{key}' must be numeric")
    if not number.is_finite() or number < low or (high is not None and number > high):
        raise ValueError(f"Setting '{key}' is out of range")
    return number


async def get_all_settings(db: AsyncSession) -> List[Setting]:
    result = await db.execute(select(Setting).order_by(Setting.key))
    return result.scalars().all()


async def get_decimal_setting(db: AsyncSession, key: str) -> Optional[Decimal]:
    """Numeric setting value, or None when unset or unparsable."""
    setting = await db.get(Setting, key)
    if setting is None:
        return None
    try:
        return parse_numeric(key, setting.value)
    except ValueError:
        return None


async def update_setting(db: AsyncSession, key: str, value: str, _user) -> Setting:
    if key in NUMERIC_SETTINGS:
        try:
            value = str(parse_numeric(key, value))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    setting = await db.get(Setting, key)
    if setting is None:
        setting = Setting(key=key, value=value)
        db.add(setting)
    else:
        setting.value = value

    await log_user_activity(db, _user, message=f"Set '{key}' to '{value}'", entity_type="setting", entity_key=key)

    await db.commit()
    await db.refresh(setting)
    return setting

from typing import Optional
import logging

from fastapi import HTTPException
from sqlalchemy import select, update, and_, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.discount_models import DiscountCode
from app.schemas.discount_schemas import (
    DiscountCodeCreate,
    DiscountCodeUpdate,
    DiscountValidateResponse,
)
from app.services.pricing_services import validate_and_apply, normalize_code
from app.utils.activity_helpers import log_user_activity
from app.utils.decimal_utils import to_decimal

logger = logging.getLogger(__name__)

CLEARABLE_FIELDS = {"description", "expires_at", "usage_limit", "min_order_amount", "max_discount_amount"}


def _check_value(discount_type: str, value) -> None:
    value = to_decimal(value)
    if discount_type == "percentage" and not (0 < value <= 100):
        raise HTTPException(status_code=400, detail="Percentage discount must be between 0 and 100")
    if discount_type == "fixed" and value <= 0:
        raise HTTPException(status_code=400, detail="Fixed discount must be greater than 0")


async def _code_taken(db: AsyncSession, code: str, exclude_id: Optional[int] = None) -> bool:
    query = select(DiscountCode.id).where(DiscountCode.code == code)
    if exclude_id is not None:
        query = query.where(DiscountCode.id != exclude_id)
    result = await db.execute(query)
    return result.first() is not None


# -----------------------
# CREATE
# -----------------------
async def create_discount(db: AsyncSession, payload: DiscountCodeCreate, _user) -> DiscountCode:
    _check_value(payload.type, payload.value)

    if await _code_taken(db, payload.code):
        raise HTTPException(status_code=400, detail="Discount code already exists")

    discount = DiscountCode(**payload.model_dump(), used_count=0)
    db.add(discount)
    await db.flush()

    await log_user_activity(db, _user, message=f"Created discount code '{discount.code}'", entity_type="discount_code", entity_key=discount.id)

    await db.commit()
    await db.refresh(discount)
    return discount


# -----------------------
# READ
# -----------------------
async def get_all_discounts(
    db: AsyncSession,
    active: bool | None = None,
    code: str | None = None,
    discount_type: str | None = None,
):
    filters = []

    if active is not None:
        filters.append(DiscountCode.active == active)
    # Code partial match
    if code:
        filters.append(DiscountCode.code.ilike(f"%{normalize_code(code)}%"))
    if discount_type:
        filters.append(DiscountCode.type == discount_type)

    query = select(DiscountCode).where(and_(*filters)).order_by(DiscountCode.created_at.desc(), DiscountCode.id.desc())
    result = await db.execute(query)
    return result.scalars().all()


async def get_discount_by_id(db: AsyncSession, discount_id: int) -> Optional[DiscountCode]:
    return await db.get(DiscountCode, discount_id)


async def get_discount_by_code(db: AsyncSession, code: str) -> Optional[DiscountCode]:
    result = await db.execute(select(DiscountCode).where(DiscountCode.code == normalize_code(code)))
    return result.scalar_one_or_none()


# -----------------------
# UPDATE
# -----------------------
async def update_discount(db: AsyncSession, discount_id: int, payload: DiscountCodeUpdate, _user):
    discount = await get_discount_by_id(db, discount_id)
    if not discount:
        return None

    update_data = payload.model_dump(exclude_unset=True)
    # null clears optional bounds but never a required column
    update_data = {k: v for k, v in update_data.items() if v is not None or k in CLEARABLE_FIELDS}

    if "type" in update_data or "value" in update_data:
        _check_value(update_data.get("type", discount.type), update_data.get("value", discount.value))

    if "code" in update_data and await _code_taken(db, update_data["code"], exclude_id=discount.id):
        raise HTTPException(status_code=400, detail="Discount code already exists")

    for key, value in update_data.items():
        setattr(discount, key, value)

    await log_user_activity(db, _user, message=f"Updated discount code '{discount.code}' (ID: {discount.id})", entity_type="discount_code", entity_key=discount.id)

    await db.commit()
    await db.refresh(discount)
    return discount


# -----------------------
# DEACTIVATE
# -----------------------
async def deactivate_discount(db: AsyncSession, discount_id: int, _user):
    # Codes stay on record because orders reference them by code
    discount = await get_discount_by_id(db, discount_id)
    if not discount:
        return None

    discount.active = False

    await log_user_activity(db, _user, message=f"Deactivated discount code '{discount.code}' (ID: {discount.id})", entity_type="discount_code", entity_key=discount.id)

    await db.commit()
    await db.refresh(discount)
    return discount


# -----------------------
# VALIDATE / REDEEM
# -----------------------
async def validate_discount_code(db: AsyncSession, code: str, order_total) -> DiscountValidateResponse:
    normalized = normalize_code(code)
    discount = await get_discount_by_code(db, normalized)
    result = validate_and_apply(normalized, order_total, discount)

    if not result.ok:
        logger.info("Discount code %s rejected: %s", normalized, result.reason.value)
        return DiscountValidateResponse(
            ok=False,
            code=normalized,
            reason=result.reason.value,
            message=result.message,
        )

    return DiscountValidateResponse(
        ok=True,
        code=discount.code,
        type=discount.type,
        value=discount.value,
        discount_amount=result.amount,
        description=discount.description,
    )


async def redeem_discount(db: AsyncSession, code: str) -> bool:
    """
    Count one use of a code inside the caller's transaction.

    The increment is conditional on the limit in the same statement, so two
    concurrent checkouts cannot both take the last use. Returns False when
    the code is no longer redeemable.
    """
    stmt = (
        update(DiscountCode)
        .where(DiscountCode.code == normalize_code(code))
        .where(DiscountCode.active == True)
        .where(or_(DiscountCode.usage_limit.is_(None), DiscountCode.used_count < DiscountCode.usage_limit))
        .values(used_count=DiscountCode.used_count + 1)
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    return result.rowcount == 1

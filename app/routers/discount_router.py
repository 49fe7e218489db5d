from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.db import get_db
from app.schemas.discount_schemas import (
    DiscountCodeCreate,
    DiscountCodeUpdate,
    DiscountCodeOut,
    DiscountValidateRequest,
    DiscountValidateResponse,
)
from app.services import discount_service
from app.utils.check_roles import require_role, ADMIN
from app.utils.get_user import get_current_user

router = APIRouter(prefix="/discounts", tags=["Discounts"])
validate_router = APIRouter(prefix="/discount-codes", tags=["Discounts"])


@router.post("/", response_model=DiscountCodeOut, status_code=201)
@require_role(ADMIN)
async def route_create_discount(
    payload: DiscountCodeCreate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    """
    Create a discount code. The code is stored upper-case.
    Percentage values must be in (0, 100]; fixed values must be positive.
    """
    return await discount_service.create_discount(db, payload, _user)


@router.get("/", response_model=List[DiscountCodeOut])
@require_role(ADMIN)
async def route_get_all_discounts(
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
    active: bool | None = Query(None, description="Filter by active flag"),
    code: str | None = Query(None, description="Filter by code (partial match)"),
    discount_type: str | None = Query(None, description="Filter by type (percentage/fixed)"),
):
    return await discount_service.get_all_discounts(db, active=active, code=code, discount_type=discount_type)


@router.get("/{discount_id}", response_model=DiscountCodeOut)
@require_role(ADMIN)
async def route_get_discount(
    discount_id: int,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    discount = await discount_service.get_discount_by_id(db, discount_id)
    if not discount:
        raise HTTPException(status_code=404, detail="Discount not found")
    return discount


@router.put("/{discount_id}", response_model=DiscountCodeOut)
@require_role(ADMIN)
async def route_update_discount(
    discount_id: int,
    payload: DiscountCodeUpdate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    updated = await discount_service.update_discount(db, discount_id, payload, _user)
    if not updated:
        raise HTTPException(status_code=404, detail="Discount not found")
    return updated


@router.delete("/{discount_id}", response_model=DiscountCodeOut)
@require_role(ADMIN)
async def route_deactivate_discount(
    discount_id: int,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    """Deactivate a code; it stays on record for order history."""
    deactivated = await discount_service.deactivate_discount(db, discount_id, _user)
    if not deactivated:
        raise HTTPException(status_code=404, detail="Discount not found")
    return deactivated


@validate_router.post("/validate", response_model=DiscountValidateResponse)
async def route_validate_discount(payload: DiscountValidateRequest, db: AsyncSession = Depends(get_db)):
    """
    Check a code against an order total.
    Rejections come back with ok=false and a reason instead of an error status.
    """
    return await discount_service.validate_discount_code(db, payload.code, payload.order_total)

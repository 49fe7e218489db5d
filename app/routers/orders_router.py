from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.db import get_db
from app.schemas.order_schemas import CheckoutRequest, OrderOut, OrderStatusUpdate, PricingRequest, QuoteResponse
from app.services import order_service
from app.utils.check_roles import require_role, STAFF
from app.utils.get_user import get_current_user

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.post("/quote", response_model=QuoteResponse)
async def route_quote_order(payload: PricingRequest, db: AsyncSession = Depends(get_db)):
    """
    Price a cart without placing it: subtotal, discount, service charge,
    tax lines, final total and whether the minimum order is met.
    """
    return await order_service.quote_order(db, payload)


@router.post("/checkout", response_model=OrderOut, status_code=201)
async def route_checkout(payload: CheckoutRequest, db: AsyncSession = Depends(get_db)):
    """
    Price and place an order.
    400 when the discount is rejected or the total is below the minimum, 409 when
    the code's usage limit ran out meanwhile.
    """
    return await order_service.checkout_order(db, payload)


@router.get("/recent", response_model=List[OrderOut])
@require_role(STAFF)
async def route_recent_orders(
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
    limit: int = Query(10, ge=1, le=100),
):
    return await order_service.get_recent_orders(db, limit=limit)


# Order tracking
@router.get("/{order_id}", response_model=OrderOut)
async def route_get_order(order_id: int, db: AsyncSession = Depends(get_db)):
    return await order_service.get_order_by_id(db, order_id)


@router.patch("/{order_id}/status", response_model=OrderOut)
@require_role(STAFF)
async def route_update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await order_service.update_order_status(db, order_id, payload)

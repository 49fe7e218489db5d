# app/services/order_service.py
"""
Quote and checkout.

Reads a snapshot of tax rules, the discount code, the customer and the
settings, prices the cart with the pure pricing functions and, on checkout,
writes the order with its line snapshots in one transaction. Store read
failures degrade pricing instead of blocking the customer.
"""
import copy
import logging
from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import config
from app.models.order_models import Order, OrderItem, OrderStatus, PaymentStatus
from app.schemas.order_schemas import CartLineIn, CheckoutRequest, PricingRequest, QuoteResponse, OrderStatusUpdate
from app.schemas.tax_schemas import ApplicableTax
from app.services import customer_service, discount_service, setting_service, tax_rule_service
from app.services.pricing_services import (
    DiscountResult,
    MinimumOrder,
    OrderContext,
    OrderTotals,
    ServiceChargeConfig,
    cart_subtotal,
    compute_total,
    match_rules,
    normalize_code,
    rounded_lines,
    validate_and_apply,
)
from app.utils.decimal_utils import round_money

logger = logging.getLogger(__name__)


@dataclass
class PricedCart:
    totals: OrderTotals
    discount_code: Optional[str]
    discount: Optional[DiscountResult]
    customer_id: Optional[int]
    tax_fallback: bool


# --------------------------
# Store reads (each degrades on failure)
# --------------------------
async def _load_rules(db: AsyncSession):
    try:
        return await tax_rule_service.fetch_active_rules(db)
    except SQLAlchemyError:
        logger.exception("Tax rule store unavailable, falling back to the flat tax rate")
        await db.rollback()
        return None


async def _load_fallback_rate(db: AsyncSession) -> Decimal:
    try:
        rate = await setting_service.get_decimal_setting(db, setting_service.TAX_RATE)
    except SQLAlchemyError:
        logger.exception("Settings store unavailable, using DEFAULT_TAX_RATE")
        await db.rollback()
        rate = None
    return rate if rate is not None else config.DEFAULT_TAX_RATE


async def _load_global_minimum(db: AsyncSession) -> Optional[Decimal]:
    try:
        return await setting_service.get_decimal_setting(db, setting_service.MIN_ORDER_AMOUNT)
    except SQLAlchemyError:
        logger.exception("Settings store unavailable, no global minimum applied")
        await db.rollback()
        return None


async def _load_customer(db: AsyncSession, phone: Optional[str]):
    if not phone or not phone.strip():
        return None
    try:
        return await customer_service.get_customer_by_phone(db, phone)
    except SQLAlchemyError:
        logger.exception("Customer store unavailable, no customer minimum applied")
        await db.rollback()
        return None


async def _apply_discount(db: AsyncSession, code: Optional[str], subtotal: Decimal) -> Optional[DiscountResult]:
    if not code or not code.strip():
        return None
    try:
        discount = await discount_service.get_discount_by_code(db, code)
    except SQLAlchemyError:
        logger.exception("Discount store unavailable, pricing without discount %s", code)
        await db.rollback()
        return None
    return validate_and_apply(code, subtotal, discount)


# --------------------------
# Pricing
# --------------------------
async def price_cart(db: AsyncSession, request: PricingRequest) -> PricedCart:
    subtotal = cart_subtotal(request.items)
    code = normalize_code(request.discount_code) if request.discount_code else None

    discount = await _apply_discount(db, code, subtotal)
    discount_amount = discount.amount if discount and discount.ok else Decimal("0")

    customer = await _load_customer(db, request.customer_phone)
    customer_type = request.customer_type or (customer.customer_type if customer else None)

    rules = await _load_rules(db)
    service_charge = ServiceChargeConfig.from_settings()

    matched = None
    if rules is not None:
        # Taxable base mirrors compute_total: discounted subtotal (+ service charge when configured)
        taxable = subtotal - min(discount_amount, subtotal)
        if service_charge.include_in_tax_base:
            taxable += round_money(service_charge.charge_for(taxable))
        context = OrderContext(
            order_amount=taxable,
            dining_type=request.dining_type,
            table_number=request.table_number,
            customer_type=customer_type,
            timestamp=request.order_time,
        )
        matched = match_rules(rules, context)

    fallback_rate = await _load_fallback_rate(db) if matched is None else Decimal("0")
    min_order = MinimumOrder(
        global_minimum=await _load_global_minimum(db),
        customer_minimum=customer.min_order_amount if customer else None,
    )

    totals = compute_total(
        request.items,
        discount_amount,
        service_charge,
        matched,
        min_order,
        fallback_tax_rate=fallback_rate,
    )
    return PricedCart(
        totals=totals,
        discount_code=code,
        discount=discount,
        customer_id=customer.id if customer else None,
        tax_fallback=matched is None,
    )


def to_quote_response(priced: PricedCart) -> QuoteResponse:
    totals = priced.totals
    rejected = priced.discount is not None and not priced.discount.ok
    return QuoteResponse(
        subtotal=round_money(totals.subtotal),
        discount_code=priced.discount_code,
        discount_amount=round_money(totals.discount_amount),
        discount_reason=priced.discount.reason.value if rejected else None,
        discount_message=priced.discount.message if rejected else None,
        service_charge=totals.service_charge,
        taxable_amount=round_money(totals.taxable_amount),
        tax_amount=totals.tax_amount,
        total_tax_rate=totals.tax.total_rate,
        applicable_taxes=[ApplicableTax(**asdict(line)) for line in rounded_lines(totals.tax)],
        tax_fallback=priced.tax_fallback,
        final_total=round_money(totals.final_total),
        required_minimum=round_money(totals.required_minimum),
        eligible=totals.eligible,
        shortfall=round_money(totals.shortfall),
    )


async def quote_order(db: AsyncSession, request: PricingRequest) -> QuoteResponse:
    return to_quote_response(await price_cart(db, request))


# --------------------------
# Checkout
# --------------------------
def snapshot_line(line: CartLineIn) -> dict:
    """Copy a cart line into plain JSON so later menu edits never reach the stored order."""
    data = line.model_dump(mode="json")
    return {
        "product_id": data["product_id"],
        "product_name": data["name"],
        "quantity": line.quantity,
        "unit_price": round_money(line.unit_price),
        "total_price": round_money(line.unit_price * line.quantity),
        "customizations": copy.deepcopy(data["customizations"]),
        "notes": line.notes or next(
            (c["text"] for c in data["customizations"] if c["kind"] == "note"), None
        ),
    }


async def checkout_order(db: AsyncSession, request: CheckoutRequest) -> Order:
    priced = await price_cart(db, request)
    totals = priced.totals

    if priced.discount is not None and not priced.discount.ok:
        raise HTTPException(
            status_code=400,
            detail={"reason": priced.discount.reason.value, "message": priced.discount.message},
        )

    if not totals.eligible:
        logger.info(
            "Checkout blocked for table %s: total %s below minimum %s",
            request.table_number, totals.final_total, totals.required_minimum,
        )
        raise HTTPException(
            status_code=400,
            detail={
                "reason": "below_minimum_order",
                "message": f"Minimum order is {round_money(totals.required_minimum)}",
                "required_minimum": str(round_money(totals.required_minimum)),
                "shortfall": str(round_money(totals.shortfall)),
            },
        )

    order = Order(
        table_number=request.table_number,
        dining_type=request.dining_type,
        subtotal=round_money(totals.subtotal),
        discount_code=priced.discount_code if priced.discount else None,
        discount_amount=round_money(totals.discount_amount),
        service_charge=totals.service_charge,
        tax_amount=totals.tax_amount,
        total_amount=round_money(totals.final_total),
        tax_breakdown=[
            {"id": line.id, "name": line.name, "rate": str(line.rate), "amount": str(line.amount)}
            for line in rounded_lines(totals.tax)
        ],
        status=OrderStatus.PENDING,
        payment_method=request.payment_method,
        payment_status=PaymentStatus.PENDING if request.payment_method == "cash" else PaymentStatus.PAID,
        customer_id=priced.customer_id,
        customer_name=request.customer_name or None,
        customer_phone=request.customer_phone.strip() if request.customer_phone else None,
        items=[OrderItem(**snapshot_line(line)) for line in request.items],
    )

    try:
        # Authoritative usage-limit check happens at write time
        if priced.discount is not None and not await discount_service.redeem_discount(db, priced.discount_code):
            await db.rollback()
            raise HTTPException(
                status_code=409,
                detail={"reason": "usage_exceeded", "message": "Discount code usage limit reached"},
            )
        db.add(order)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Order insert failed for table %s", request.table_number)
        raise HTTPException(status_code=500, detail="Failed to place order")

    await db.refresh(order)
    logger.info("Order %s placed for table %s, total %s", order.id, order.table_number, order.total_amount)
    return order


# --------------------------
# Staff-facing reads / updates
# --------------------------
async def get_order_by_id(db: AsyncSession, order_id: int) -> Order:
    order = await db.get(Order, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


async def get_recent_orders(db: AsyncSession, limit: int = 10) -> List[Order]:
    result = await db.execute(select(Order).order_by(Order.created_at.desc(), Order.id.desc()).limit(limit))
    return result.scalars().all()


async def update_order_status(db: AsyncSession, order_id: int, payload: OrderStatusUpdate) -> Order:
    order = await get_order_by_id(db, order_id)

    update_data = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        raise HTTPException(status_code=400, detail="Nothing to update")

    for key, value in update_data.items():
        setattr(order, key, value)

    await db.commit()
    await db.refresh(order)
    return order

"""
Discount code validation.

Checks run in a fixed order and stop at the first failure; a failure is
reported as a ``DiscountRejection`` so callers can render their own message.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from app.utils.decimal_utils import to_decimal, round_money


class DiscountRejection(str, enum.Enum):
    NOT_FOUND = "not_found"
    INACTIVE = "inactive"
    EXPIRED = "expired"
    USAGE_EXCEEDED = "usage_exceeded"
    BELOW_MINIMUM = "below_minimum"


REJECTION_MESSAGES = {
    DiscountRejection.NOT_FOUND: "Discount code is invalid",
    DiscountRejection.INACTIVE: "Discount code is not available",
    DiscountRejection.EXPIRED: "Discount code has expired",
    DiscountRejection.USAGE_EXCEEDED: "Discount code usage limit reached",
    DiscountRejection.BELOW_MINIMUM: "Order total is below the minimum for this code",
}


@dataclass(frozen=True)
class DiscountResult:
    ok: bool
    amount: Decimal = Decimal("0.00")
    reason: Optional[DiscountRejection] = None

    @property
    def message(self) -> Optional[str]:
        return REJECTION_MESSAGES.get(self.reason) if self.reason else None


def normalize_code(code: str) -> str:
    return (code or "").strip().upper()


def _rejected(reason: DiscountRejection) -> DiscountResult:
    return DiscountResult(ok=False, amount=Decimal("0.00"), reason=reason)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they are stored as UTC
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def discount_amount(discount, order_subtotal) -> Decimal:
    subtotal = to_decimal(order_subtotal)
    value = to_decimal(discount.value)
    if discount.type == "percentage":
        amount = subtotal * value / 100
    else:
        amount = min(value, subtotal)
    if discount.max_discount_amount is not None:
        amount = min(amount, to_decimal(discount.max_discount_amount))
    return round_money(max(amount, Decimal("0")))


def validate_and_apply(code: str, order_subtotal, discount, now: Optional[datetime] = None) -> DiscountResult:
    if discount is None or normalize_code(discount.code) != normalize_code(code):
        return _rejected(DiscountRejection.NOT_FOUND)
    if discount.active is not True:
        return _rejected(DiscountRejection.INACTIVE)

    now = now or datetime.now(timezone.utc)
    if discount.expires_at is not None and _as_utc(discount.expires_at) <= _as_utc(now):
        return _rejected(DiscountRejection.EXPIRED)

    if discount.usage_limit is not None and (discount.used_count or 0) >= discount.usage_limit:
        return _rejected(DiscountRejection.USAGE_EXCEEDED)

    if discount.min_order_amount is not None and to_decimal(order_subtotal) < to_decimal(discount.min_order_amount):
        return _rejected(DiscountRejection.BELOW_MINIMUM)

    return DiscountResult(ok=True, amount=discount_amount(discount, order_subtotal))

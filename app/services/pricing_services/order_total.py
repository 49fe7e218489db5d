"""
Order total assembly.

subtotal -> discount -> service charge -> tax -> final total -> minimum-order gate.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from app.core import config
from app.services.pricing_services.tax_aggregator import TaxBreakdown, aggregate, flat_rate_breakdown
from app.utils.decimal_utils import to_decimal, round_money

ZERO = Decimal("0")


@dataclass(frozen=True)
class ServiceChargeConfig:
    fixed_amount: Decimal = ZERO
    rate: Decimal = ZERO  # fraction, 0.10 == 10%
    include_in_tax_base: bool = False

    @classmethod
    def from_settings(cls) -> "ServiceChargeConfig":
        return cls(
            fixed_amount=config.SERVICE_CHARGE_FIXED,
            rate=config.SERVICE_CHARGE_RATE,
            include_in_tax_base=config.TAX_INCLUDES_SERVICE_CHARGE,
        )

    def charge_for(self, discounted_total: Decimal) -> Decimal:
        if self.fixed_amount > 0:
            return to_decimal(self.fixed_amount)
        if self.rate > 0:
            return discounted_total * to_decimal(self.rate)
        return ZERO


@dataclass(frozen=True)
class MinimumOrder:
    global_minimum: Optional[Decimal] = None
    customer_minimum: Optional[Decimal] = None

    @property
    def required(self) -> Decimal:
        return max(to_decimal(self.global_minimum), to_decimal(self.customer_minimum), ZERO)


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    discount_amount: Decimal
    service_charge: Decimal
    taxable_amount: Decimal
    tax_amount: Decimal
    final_total: Decimal
    required_minimum: Decimal
    eligible: bool
    tax: TaxBreakdown = field(default_factory=TaxBreakdown)

    @property
    def shortfall(self) -> Decimal:
        return max(self.required_minimum - self.final_total, ZERO)


def cart_subtotal(cart_lines: Iterable) -> Decimal:
    return sum((to_decimal(line.unit_price) * line.quantity for line in cart_lines), ZERO)


def compute_total(
    cart_lines: Iterable,
    discount_amount,
    service_charge_config: Optional[ServiceChargeConfig],
    matched_tax_rules: Optional[Sequence],
    min_order: Optional[MinimumOrder] = None,
    fallback_tax_rate=ZERO,
) -> OrderTotals:
    """
    Price a cart.

    ``matched_tax_rules`` of None means the rule store could not be read; the
    flat ``fallback_tax_rate`` is used instead. An empty list means no rule
    applies and no tax is charged.
    """
    service_charge_config = service_charge_config or ServiceChargeConfig()
    min_order = min_order or MinimumOrder()

    subtotal = cart_subtotal(cart_lines)
    discount = min(max(to_decimal(discount_amount), ZERO), subtotal)
    discounted_total = subtotal - discount

    service_charge = round_money(service_charge_config.charge_for(discounted_total))

    taxable_amount = discounted_total
    if service_charge_config.include_in_tax_base:
        taxable_amount += service_charge

    if matched_tax_rules is None:
        breakdown = flat_rate_breakdown(fallback_tax_rate, taxable_amount)
    else:
        breakdown = aggregate(matched_tax_rules, taxable_amount)
    tax_amount = round_money(breakdown.total_amount)

    final_total = discounted_total + service_charge + tax_amount
    required = min_order.required

    return OrderTotals(
        subtotal=subtotal,
        discount_amount=discount,
        service_charge=service_charge,
        taxable_amount=taxable_amount,
        tax_amount=tax_amount,
        final_total=final_total,
        required_minimum=required,
        eligible=final_total >= required,
        tax=breakdown,
    )

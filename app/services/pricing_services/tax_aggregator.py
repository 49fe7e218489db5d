"""Sum matched tax rules into a total rate and amount."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal, ROUND_DOWN
from typing import Any, Iterable, List, Optional

from app.utils.decimal_utils import CENT, to_decimal, round_money


@dataclass(frozen=True)
class TaxLine:
    id: Optional[Any]
    name: str
    rate: Decimal
    amount: Decimal
    priority: int = 0


@dataclass(frozen=True)
class TaxBreakdown:
    total_rate: Decimal = Decimal("0")
    total_amount: Decimal = Decimal("0")
    per_rule: List[TaxLine] = field(default_factory=list)


def aggregate(matched_rules: Iterable, taxable_amount) -> TaxBreakdown:
    taxable = to_decimal(taxable_amount)
    lines = []
    for rule in matched_rules:
        rate = to_decimal(rule.rate)
        lines.append(TaxLine(
            id=rule.id,
            name=rule.name,
            rate=rate,
            amount=taxable * rate / 100,
            priority=rule.priority or 0,
        ))
    return TaxBreakdown(
        total_rate=sum((line.rate for line in lines), Decimal("0")),
        total_amount=sum((line.amount for line in lines), Decimal("0")),
        per_rule=lines,
    )


def flat_rate_breakdown(rate, taxable_amount, name: str = "Default tax") -> TaxBreakdown:
    """Single-line breakdown for the store-wide fallback rate."""
    rate = to_decimal(rate)
    amount = to_decimal(taxable_amount) * rate / 100
    return TaxBreakdown(
        total_rate=rate,
        total_amount=amount,
        per_rule=[TaxLine(id=None, name=name, rate=rate, amount=amount)],
    )


def rounded_lines(breakdown: TaxBreakdown) -> List[TaxLine]:
    """
    Per-rule lines rounded to cents so they add up to the rounded total.

    Each line is truncated to the cent, then the leftover cents go to the lines
    with the largest truncated remainders (earlier lines win ties).
    """
    target = round_money(breakdown.total_amount)
    floored = [line.amount.quantize(CENT, rounding=ROUND_DOWN) for line in breakdown.per_rule]
    leftover = int((target - sum(floored, Decimal("0"))) / CENT)

    by_remainder = sorted(
        range(len(floored)),
        key=lambda i: breakdown.per_rule[i].amount - floored[i],
        reverse=True,
    )
    for i in by_remainder[:max(leftover, 0)]:
        floored[i] += CENT

    return [replace(line, amount=amount) for line, amount in zip(breakdown.per_rule, floored)]

"""
Tax rule applicability.

Each rule condition is a named predicate over ``(rule, context, moment)``.
A rule applies when it is active and every predicate holds; all applicable
rules stack, there is no first-match-wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterable, List, Optional, Tuple
from zoneinfo import ZoneInfo

from app.core.config import STORE_TIMEZONE
from app.utils.decimal_utils import to_decimal

logger = logging.getLogger(__name__)

ALL = "all"


@dataclass(frozen=True)
class OrderContext:
    order_amount: Decimal
    dining_type: str
    table_number: Optional[int] = None
    customer_type: Optional[str] = None
    timestamp: Optional[datetime] = None


def parse_hhmm(value: str) -> Optional[int]:
    """Minutes since midnight for an ``HH:MM`` string, None when malformed."""
    try:
        hours, minutes = value.split(":")[:2]
        return int(hours) * 60 + int(minutes)
    except (AttributeError, ValueError):
        return None


def local_moment(timestamp: Optional[datetime], tz: Optional[ZoneInfo] = None) -> datetime:
    """Resolve the order time in the store's timezone; naive datetimes are taken as store-local."""
    tz = tz or ZoneInfo(STORE_TIMEZONE)
    if timestamp is None:
        return datetime.now(tz)
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=tz)
    return timestamp.astimezone(tz)


# --------------------------
# Predicates
# --------------------------
def amount_in_range(rule, context: OrderContext, moment: datetime) -> bool:
    amount = to_decimal(context.order_amount)
    if rule.min_order_amount is not None and amount < to_decimal(rule.min_order_amount):
        return False
    if rule.max_order_amount is not None and amount > to_decimal(rule.max_order_amount):
        return False
    return True


def dining_type_matches(rule, context: OrderContext, moment: datetime) -> bool:
    return (rule.dining_type or ALL) in (ALL, context.dining_type)


def customer_type_matches(rule, context: OrderContext, moment: datetime) -> bool:
    if context.customer_type is None:
        return True
    return (rule.customer_type or ALL) in (ALL, context.customer_type)


def table_applies(rule, context: OrderContext, moment: datetime) -> bool:
    table = context.table_number
    if table is None:
        return True
    # Exclusion wins over the allow-list
    if rule.exclude_tables and table in rule.exclude_tables:
        return False
    if rule.specific_tables:
        return table in rule.specific_tables
    return True


def time_in_window(rule, context: OrderContext, moment: datetime) -> bool:
    if not rule.time_start or not rule.time_end:
        return True
    start = parse_hhmm(rule.time_start)
    end = parse_hhmm(rule.time_end)
    if start is None or end is None:
        logger.warning("Tax rule %s has a malformed time window %r-%r", rule.id, rule.time_start, rule.time_end)
        return False

    current = moment.hour * 60 + moment.minute
    if start <= end:
        return start <= current <= end
    # overnight window
    return current >= start or current <= end


def day_applies(rule, context: OrderContext, moment: datetime) -> bool:
    if not rule.days_of_week:
        return True
    # datetime.weekday() is Monday=0; rules use Sunday=0
    return (moment.weekday() + 1) % 7 in rule.days_of_week


Predicate = Callable[[object, OrderContext, datetime], bool]

RULE_PREDICATES: Tuple[Tuple[str, Predicate], ...] = (
    ("amount", amount_in_range),
    ("dining_type", dining_type_matches),
    ("customer_type", customer_type_matches),
    ("table", table_applies),
    ("time", time_in_window),
    ("day", day_applies),
)

def failed_conditions(
    rule,
    context: OrderContext,
    tz: Optional[ZoneInfo] = None,
    moment: Optional[datetime] = None,
) -> List[str]:
    """Names of the conditions a rule does not satisfy for this context."""
    moment = moment or local_moment(context.timestamp, tz)
    failed = [name for name, predicate in RULE_PREDICATES if not predicate(rule, context, moment)]
    if not rule.is_active:
        failed.insert(0, "inactive")
    return failed


def match_rules(rules: Iterable, context: OrderContext, tz: Optional[ZoneInfo] = None) -> List:
    """Return every active rule whose conditions all hold, in input order."""
    moment = local_moment(context.timestamp, tz)
    matched = []
    for rule in rules:
        if not rule.is_active:
            continue
        failed = failed_conditions(rule, context, moment=moment)
        if failed:
            logger.debug("Tax rule %s skipped: %s", rule.id, ", ".join(failed))
        else:
            matched.append(rule)
    logger.debug(
        "Matched %d tax rule(s) for %s order of %s",
        len(matched), context.dining_type, context.order_amount,
    )
    return matched

"""Pure pricing functions: tax rule matching, tax aggregation, discounts, order totals."""

from .tax_rule_matcher import OrderContext, match_rules, failed_conditions
from .tax_aggregator import TaxBreakdown, TaxLine, aggregate, flat_rate_breakdown, rounded_lines
from .discount_applier import DiscountRejection, DiscountResult, validate_and_apply, normalize_code
from .order_total import ServiceChargeConfig, MinimumOrder, OrderTotals, compute_total, cart_subtotal

__all__ = [
    "OrderContext",
    "match_rules",
    "failed_conditions",
    "TaxBreakdown",
    "TaxLine",
    "aggregate",
    "flat_rate_breakdown",
    "rounded_lines",
    "DiscountRejection",
    "DiscountResult",
    "validate_and_apply",
    "normalize_code",
    "ServiceChargeConfig",
    "MinimumOrder",
    "OrderTotals",
    "compute_total",
    "cart_subtotal",
]

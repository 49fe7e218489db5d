"""Tests for order total assembly."""

from decimal import Decimal
from types import SimpleNamespace

from app.services.pricing_services import MinimumOrder, ServiceChargeConfig, compute_total, cart_subtotal


def line(price, quantity=1):
    return SimpleNamespace(unit_price=Decimal(price), quantity=quantity)


def test_subtotal_multiplies_unit_price_by_quantity():
    assert cart_subtotal([line("12.50", 2), line("5", 3)]) == Decimal("40.00")


def test_discount_then_tax_scenario(rule_factory):
    totals = compute_total(
        [line("100")],
        Decimal("10"),
        ServiceChargeConfig(),
        [rule_factory(rate=Decimal("15"), dining_type="dine_in")],
    )
    assert totals.subtotal == Decimal("100")
    assert totals.taxable_amount == Decimal("90")
    assert totals.tax_amount == Decimal("13.50")
    assert totals.service_charge == 0
    assert totals.final_total == Decimal("103.50")
    assert totals.eligible


def test_below_global_minimum_reports_shortfall():
    totals = compute_total([line("40")], 0, None, [], MinimumOrder(global_minimum=Decimal("50")))
    assert not totals.eligible
    assert totals.required_minimum == Decimal("50")
    assert totals.shortfall == Decimal("10")


def test_minimum_gate_boundary():
    exact = compute_total([line("50.00")], 0, None, [], MinimumOrder(global_minimum=Decimal("50")))
    short = compute_total([line("49.99")], 0, None, [], MinimumOrder(global_minimum=Decimal("50")))
    assert exact.eligible and exact.shortfall == 0
    assert not short.eligible and short.shortfall == Decimal("0.01")


def test_larger_of_global_and_customer_minimum_applies():
    totals = compute_total([line("60")], 0, None, [], MinimumOrder(Decimal("50"), Decimal("75")))
    assert totals.required_minimum == Decimal("75")
    assert not totals.eligible

    totals = compute_total([line("60")], 0, None, [], MinimumOrder(Decimal("50"), Decimal("20")))
    assert totals.required_minimum == Decimal("50")
    assert totals.eligible


def test_no_minimum_configured():
    totals = compute_total([line("0.01")], 0, None, [])
    assert totals.required_minimum == 0
    assert totals.eligible


def test_fixed_service_charge_wins_over_rate(rule_factory):
    config = ServiceChargeConfig(fixed_amount=Decimal("5"), rate=Decimal("0.10"))
    totals = compute_total([line("100")], 0, config, [rule_factory(rate=Decimal("10"))])
    assert totals.service_charge == Decimal("5.00")
    # service charge stays out of the tax base by default
    assert totals.tax_amount == Decimal("10.00")
    assert totals.final_total == Decimal("115.00")


def test_rate_service_charge_on_discounted_total():
    config = ServiceChargeConfig(rate=Decimal("0.10"))
    totals = compute_total([line("100")], Decimal("20"), config, [])
    assert totals.service_charge == Decimal("8.00")
    assert totals.final_total == Decimal("88.00")


def test_service_charge_in_tax_base_when_enabled(rule_factory):
    config = ServiceChargeConfig(fixed_amount=Decimal("10"), include_in_tax_base=True)
    totals = compute_total([line("100")], 0, config, [rule_factory(rate=Decimal("10"))])
    assert totals.taxable_amount == Decimal("110")
    assert totals.tax_amount == Decimal("11.00")
    assert totals.final_total == Decimal("121.00")


def test_two_stacked_rules(rule_factory):
    rules = [rule_factory(id=1, rate=Decimal("5"), priority=3), rule_factory(id=2, rate=Decimal("3"), priority=7)]
    totals = compute_total([line("100")], 0, None, rules)
    assert totals.tax.total_rate == Decimal("8")
    assert totals.tax_amount == Decimal("8.00")


def test_missing_rules_fall_back_to_flat_rate():
    totals = compute_total([line("100")], 0, None, None, fallback_tax_rate=Decimal("15"))
    assert totals.tax_amount == Decimal("15.00")
    assert totals.tax.per_rule[0].name == "Default tax"


def test_empty_rule_match_charges_no_tax():
    totals = compute_total([line("100")], 0, None, [], fallback_tax_rate=Decimal("15"))
    assert totals.tax_amount == 0


def test_discount_never_drives_total_negative():
    totals = compute_total([line("30")], Decimal("45"), None, [])
    assert totals.discount_amount == Decimal("30")
    assert totals.final_total == 0

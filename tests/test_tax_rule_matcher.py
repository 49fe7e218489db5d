"""Tests for tax rule applicability."""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest

from app.services.pricing_services import OrderContext, match_rules, failed_conditions
from app.services.pricing_services.tax_rule_matcher import parse_hhmm, local_moment

UTC = ZoneInfo("UTC")
# 2024-01-07 is a Sunday
SUNDAY_NOON = datetime(2024, 1, 7, 12, 0, tzinfo=timezone.utc)


def ctx(amount="100", dining_type="dine_in", table=None, customer_type=None, at=SUNDAY_NOON):
    return OrderContext(
        order_amount=Decimal(amount),
        dining_type=dining_type,
        table_number=table,
        customer_type=customer_type,
        timestamp=at,
    )


def matches(rule, context) -> bool:
    return match_rules([rule], context, tz=UTC) == [rule]


class TestUnconditionalRules:
    def test_rule_without_conditions_matches_every_order(self, rule_factory):
        rule = rule_factory()
        for dining_type in ("dine_in", "takeaway", "reservation"):
            assert matches(rule, ctx(amount="0", dining_type=dining_type, table=7, customer_type="vip"))

    def test_inactive_rule_never_matches(self, rule_factory):
        rule = rule_factory(is_active=False)
        assert not matches(rule, ctx())
        assert failed_conditions(rule, ctx(), tz=UTC) == ["inactive"]

    def test_no_match_is_an_empty_list(self, rule_factory):
        assert match_rules([rule_factory(dining_type="takeaway")], ctx(), tz=UTC) == []

    def test_all_matching_rules_are_returned_in_input_order(self, rule_factory):
        rules = [
            rule_factory(id=1, priority=10),
            rule_factory(id=2, priority=1, dining_type="takeaway"),
            rule_factory(id=3, priority=5),
        ]
        assert [r.id for r in match_rules(rules, ctx(), tz=UTC)] == [1, 3]

    def test_matching_is_idempotent(self, rule_factory):
        rules = [rule_factory(id=i, rate=Decimal(i)) for i in range(1, 5)]
        context = ctx(table=3)
        assert match_rules(rules, context, tz=UTC) == match_rules(rules, context, tz=UTC)


class TestAmountBounds:
    @pytest.mark.parametrize("amount,expected", [("49.99", False), ("50", True), ("200", True), ("200.01", False)])
    def test_bounds_are_inclusive(self, rule_factory, amount, expected):
        rule = rule_factory(min_order_amount=Decimal("50"), max_order_amount=Decimal("200"))
        assert matches(rule, ctx(amount=amount)) is expected

    def test_missing_bound_is_unconstrained(self, rule_factory):
        assert matches(rule_factory(min_order_amount=Decimal("10")), ctx(amount="1000000"))
        assert matches(rule_factory(max_order_amount=Decimal("10")), ctx(amount="0"))


class TestDiningAndCustomerType:
    def test_dining_type_must_match_unless_all(self, rule_factory):
        assert matches(rule_factory(dining_type="dine_in"), ctx(dining_type="dine_in"))
        assert not matches(rule_factory(dining_type="dine_in"), ctx(dining_type="takeaway"))
        assert matches(rule_factory(dining_type="all"), ctx(dining_type="reservation"))

    def test_customer_type_must_match_unless_all(self, rule_factory):
        assert matches(rule_factory(customer_type="vip"), ctx(customer_type="vip"))
        assert not matches(rule_factory(customer_type="vip"), ctx(customer_type="regular"))
        assert matches(rule_factory(customer_type="all"), ctx(customer_type="staff"))

    def test_unknown_customer_type_does_not_exclude(self, rule_factory):
        assert matches(rule_factory(customer_type="staff"), ctx(customer_type=None))


class TestTables:
    def test_allow_list(self, rule_factory):
        rule = rule_factory(specific_tables=[1, 2, 3])
        assert matches(rule, ctx(table=2))
        assert not matches(rule, ctx(table=4))

    def test_exclude_list_wins_over_allow_list(self, rule_factory):
        rule = rule_factory(specific_tables=[1, 2, 3], exclude_tables=[2])
        assert not matches(rule, ctx(table=2))
        assert failed_conditions(rule, ctx(table=2), tz=UTC) == ["table"]

    def test_exclude_list_alone(self, rule_factory):
        rule = rule_factory(exclude_tables=[9])
        assert not matches(rule, ctx(table=9))
        assert matches(rule, ctx(table=8))

    def test_no_table_in_context_passes(self, rule_factory):
        assert matches(rule_factory(specific_tables=[1], exclude_tables=[2]), ctx(table=None))

    def test_empty_allow_list_matches_any_table(self, rule_factory):
        assert matches(rule_factory(specific_tables=[]), ctx(table=42))


class TestTimeWindow:
    def test_parse_hhmm(self):
        assert parse_hhmm("00:00") == 0
        assert parse_hhmm("22:30") == 22 * 60 + 30
        assert parse_hhmm("noon") is None

    @pytest.mark.parametrize("hour,minute,expected", [
        (11, 59, False), (12, 0, True), (14, 0, True), (15, 0, True), (15, 1, False),
    ])
    def test_daytime_window_is_inclusive(self, rule_factory, hour, minute, expected):
        rule = rule_factory(time_start="12:00", time_end="15:00")
        at = datetime(2024, 1, 7, hour, minute, tzinfo=timezone.utc)
        assert matches(rule, ctx(at=at)) is expected

    @pytest.mark.parametrize("hour,minute,expected", [
        (23, 30, True), (1, 0, True), (22, 0, True), (2, 0, True), (12, 0, False), (2, 1, False),
    ])
    def test_overnight_window_wraps_midnight(self, rule_factory, hour, minute, expected):
        rule = rule_factory(time_start="22:00", time_end="02:00")
        at = datetime(2024, 1, 7, hour, minute, tzinfo=timezone.utc)
        assert matches(rule, ctx(at=at)) is expected

    def test_window_uses_store_timezone(self, rule_factory):
        rule = rule_factory(time_start="22:00", time_end="23:59")
        # 19:30 UTC is 22:30 in Riyadh
        at = datetime(2024, 1, 7, 19, 30, tzinfo=timezone.utc)
        assert not match_rules([rule], ctx(at=at), tz=UTC)
        assert match_rules([rule], ctx(at=at), tz=ZoneInfo("Asia/Riyadh")) == [rule]

    def test_naive_timestamp_is_store_local(self):
        moment = local_moment(datetime(2024, 1, 7, 9, 15), ZoneInfo("Asia/Riyadh"))
        assert (moment.hour, moment.minute) == (9, 15)


class TestDaysOfWeek:
    def test_sunday_is_zero(self, rule_factory):
        assert matches(rule_factory(days_of_week=[0]), ctx(at=SUNDAY_NOON))
        assert not matches(rule_factory(days_of_week=[1, 2, 3, 4, 5, 6]), ctx(at=SUNDAY_NOON))

    def test_saturday_is_six(self, rule_factory):
        saturday = datetime(2024, 1, 6, 12, 0, tzinfo=timezone.utc)
        assert matches(rule_factory(days_of_week=[6]), ctx(at=saturday))

    def test_empty_days_match_all(self, rule_factory):
        assert matches(rule_factory(days_of_week=[]), ctx())


def test_failed_conditions_lists_every_failing_predicate(rule_factory):
    rule = rule_factory(dining_type="takeaway", min_order_amount=Decimal("500"), days_of_week=[3])
    assert failed_conditions(rule, ctx(), tz=UTC) == ["amount", "dining_type", "day"]


def test_skipped_rules_are_logged_with_their_failing_conditions(rule_factory, caplog):
    caplog.set_level(logging.DEBUG, logger="app.services.pricing_services.tax_rule_matcher")
    rules = [rule_factory(id=1), rule_factory(id=2, dining_type="takeaway", exclude_tables=[5])]

    assert match_rules(rules, ctx(table=5), tz=UTC) == [rules[0]]
    assert "Tax rule 2 skipped: dining_type, table" in caplog.text

"""Tests for utility modules - logging, money helpers and setting parsing."""

import logging
from decimal import Decimal

import pytest

from app.core.logging import setup_logging
from app.services.setting_service import MIN_ORDER_AMOUNT, TAX_RATE, parse_numeric
from app.utils.decimal_utils import round_money, to_decimal


class TestLogging:
    def test_logging_setup(self):
        logger = setup_logging(level="DEBUG")
        assert logger.name == "app"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_repeated_setup_does_not_duplicate_handlers(self):
        setup_logging(level="INFO")
        logger = setup_logging(level="WARNING")
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1

    def test_unknown_level_defaults_to_info(self):
        assert setup_logging(level="chatty").level == logging.INFO


class TestMoney:
    def test_to_decimal_avoids_float_artefacts(self):
        assert to_decimal(0.1) == Decimal("0.1")
        assert to_decimal(None) == Decimal("0")
        assert to_decimal("12.50") == Decimal("12.50")

    @pytest.mark.parametrize("value,expected", [
        ("2.345", "2.35"),
        ("2.344", "2.34"),
        ("0.005", "0.01"),
        (10, "10.00"),
    ])
    def test_round_money_half_up(self, value, expected):
        assert round_money(value) == Decimal(expected)
        assert str(round_money(value)) == expected


class TestSettingParsing:
    def test_valid_values(self):
        assert parse_numeric(TAX_RATE, " 7.5 ") == Decimal("7.5")
        assert parse_numeric(MIN_ORDER_AMOUNT, "250") == Decimal("250")

    @pytest.mark.parametrize("key,value", [
        (TAX_RATE, "abc"),
        (TAX_RATE, "101"),
        (TAX_RATE, "-1"),
        (MIN_ORDER_AMOUNT, "-5"),
        (MIN_ORDER_AMOUNT, "NaN"),
    ])
    def test_invalid_values(self, key, value):
        with pytest.raises(ValueError):
            parse_numeric(key, value)


class TestConfig:
    def test_store_timezone_is_checked(self, monkeypatch):
        from app.core.config import _get_timezone

        monkeypatch.setenv("STORE_TIMEZONE", "Asia/Riyadh")
        assert _get_timezone("STORE_TIMEZONE", "UTC") == "Asia/Riyadh"

        monkeypatch.setenv("STORE_TIMEZONE", "Mars/Olympus_Mons")
        with pytest.raises(ValueError, match="Unknown STORE_TIMEZONE"):
            _get_timezone("STORE_TIMEZONE", "UTC")

    def test_store_timezone_default(self, monkeypatch):
        from app.core.config import _get_timezone

        monkeypatch.delenv("STORE_TIMEZONE", raising=False)
        assert _get_timezone("STORE_TIMEZONE", "UTC") == "UTC"

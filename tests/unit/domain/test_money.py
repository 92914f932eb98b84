"""Tests for the Money value object."""

from decimal import Decimal

import pytest

from artmarket.domain.value_objects import Money


def test_float_input_is_converted_exactly():
    assert Money(0.1).amount == Decimal("0.1")


def test_percentage_rounds_to_cents():
    assert Money(Decimal("2000")).percentage(Decimal("10")).amount == Decimal("200.00")
    assert Money(Decimal("33.33")).percentage(Decimal("12.5")).amount == Decimal("4.17")


def test_minor_units():
    assert Money(Decimal("5500")).to_minor_units() == 550000
    assert Money(Decimal("19.995")).to_minor_units() == 2000


def test_currency_mismatch_rejected():
    with pytest.raises(ValueError):
        Money(Decimal("1"), "NGN") + Money(Decimal("1"), "USD")


def test_invalid_currency_code():
    with pytest.raises(ValueError):
        Money(Decimal("1"), "NAIRA")


def test_comparison():
    assert Money(Decimal("5000")) < Money(Decimal("5500"))
    assert Money(Decimal("5500")) <= Money(Decimal("5500"))

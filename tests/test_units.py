"""Tests for amount conversion and coin strings."""

from decimal import Decimal

import pytest

from cosmos_adapter.exceptions import InvalidAmount
from cosmos_adapter.types import Coin
from cosmos_adapter.units import (
    format_coins,
    format_display,
    parse_coin_string,
    parse_coins,
    sum_coins,
    to_base_units,
    to_decimal_units,
)


@pytest.mark.parametrize(
    "amount,decimals,expected",
    [
        ("1.5", 6, "1500000"),
        ("0.000001", 6, "1"),
        ("1", 0, "1"),
        ("0", 6, "0"),
        (".5", 6, "500000"),
        ("1.50", 1, "15"),
        (Decimal("2.25"), 6, "2250000"),
        (0.1, 6, "100000"),
        (42, 6, "42000000"),
    ],
)
def test_to_base_units(amount, decimals, expected):
    """Display amounts scale to integer base units."""
    assert to_base_units(amount, decimals) == expected


def test_to_base_units_keeps_large_amounts_exact():
    """Amounts beyond float precision are converted exactly."""
    amount = "123456789012345678901234567890.123456"
    assert to_base_units(amount, 6) == "123456789012345678901234567890123456"


@pytest.mark.parametrize("amount", ["", ".", "abc", "-1", "1e5", "1.2.3", "1,5"])
def test_to_base_units_rejects_garbage(amount):
    with pytest.raises(InvalidAmount):
        to_base_units(amount, 6)


def test_to_base_units_rejects_excess_precision():
    """More fractional digits than decimals is an error, not a rounding."""
    with pytest.raises(InvalidAmount):
        to_base_units("1.0000001", 6)


def test_to_base_units_rejects_negative_decimals():
    with pytest.raises(InvalidAmount):
        to_base_units("1", -1)


@pytest.mark.parametrize(
    "base,decimals,expected",
    [
        ("1500000", 6, "1.500000"),
        (1, 6, "0.000001"),
        ("15", 0, "15"),
        ("0", 2, "0.00"),
    ],
)
def test_to_decimal_units(base, decimals, expected):
    assert to_decimal_units(base, decimals) == expected


@pytest.mark.parametrize("base", ["1.5", "-3", "abc", ""])
def test_to_decimal_units_rejects_non_integers(base):
    with pytest.raises(InvalidAmount):
        to_decimal_units(base, 6)


@pytest.mark.parametrize("base", ["0", "1", "999999", "1000000", "987654321987654321"])
def test_decimal_rendering_converts_back(base):
    """Rendering and re-parsing an amount returns the same base units."""
    for decimals in (0, 6, 18):
        assert to_base_units(to_decimal_units(base, decimals), decimals) == base


def test_format_display():
    assert format_display("1500000", "uatom") == "1.500000 ATOM"
    assert format_display("7", "stake", 0) == "7 STAKE"


def test_parse_coin_string():
    assert parse_coin_string("100uatom") == Coin(denom="uatom", amount="100")
    ibc = "ibc/27394FB092D2ECCD56123C74F36E4C1F926001CEADA9CA97EA622B25F41E5EB2"
    assert parse_coin_string(f"5{ibc}") == Coin(denom=ibc, amount="5")


@pytest.mark.parametrize("text", ["uatom", "100", "1.5uatom", "-5uatom"])
def test_parse_coin_string_rejects_invalid(text):
    with pytest.raises(InvalidAmount):
        parse_coin_string(text)


def test_parse_and_format_coin_lists():
    coins = parse_coins("100uatom, 5uosmo")
    assert coins == [Coin("uatom", "100"), Coin("uosmo", "5")]
    assert format_coins(coins) == "100uatom, 5uosmo"
    assert parse_coins("") == []


def test_sum_coins():
    coins = [Coin("uatom", "10"), Coin("uosmo", "3"), Coin("uatom", "5")]
    assert sum_coins(coins, "uatom") == "15"
    assert sum_coins(coins, "ujuno") == "0"


def test_sum_coins_across_denoms():
    coins = [Coin("uatom", "1000000"), Coin("uatom", "500000"), Coin("uosmo", "200000")]
    assert sum_coins(coins, "uatom") == "1500000"

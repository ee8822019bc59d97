"""Tests for fixed-point amount conversion."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

import pytest

from deepbook_client.amounts import (
    AMOUNT_ROUNDING,
    DECIMAL_CONTEXT,
    input_to_price,
    parse_amount,
    price_to_input,
    to_decimal,
    to_units,
)
from deepbook_client.core.constants import FLOAT_SCALAR, U64_MAX
from deepbook_client.core.tables import TESTNET_COINS
from deepbook_client.errors import AmountOverflowError, AmountParseError
from deepbook_client.models import Coin

SUI = TESTNET_COINS["SUI"]
DBUSDC = TESTNET_COINS["DBUSDC"]


def _coin(scalar: int) -> Coin:
    return Coin(address="0x1", type=f"0x1::c{scalar}::C", scalar=scalar)


def test_sui_amount_scales_to_mist() -> None:
    assert to_units("0.1", SUI) == 100_000_000
    assert to_units(Decimal("0.1"), SUI) == 100_000_000
    assert to_units(0.1, SUI) == 100_000_000
    assert to_units(3, SUI) == 3_000_000_000


def test_price_to_input_matches_reference_scenario() -> None:
    base = _coin(1_000_000)
    quote = _coin(1_000_000_000)

    assert price_to_input("0.02", base, quote) == 20_000_000_000


def test_price_to_input_real_pool() -> None:
    # SUI/DBUSDC at 1.5 quote per base
    assert price_to_input("1.5", SUI, DBUSDC) == 1_500_000


def test_price_to_input_evaluates_left_to_right() -> None:
    base = _coin(6)
    quote = _coin(3)
    price = Decimal("0.000000011")

    # 11 * 3 / 6 == 5.5 exactly, which rounds half up
    assert price_to_input(price, base, quote) == 6

    # Dividing before multiplying by the quote scalar loses the tie
    reordered = DECIMAL_CONTEXT.multiply(price, Decimal(FLOAT_SCALAR))
    reordered = DECIMAL_CONTEXT.divide(reordered, Decimal(base.scalar))
    reordered = DECIMAL_CONTEXT.multiply(reordered, Decimal(quote.scalar))
    assert reordered.quantize(Decimal(1), rounding=AMOUNT_ROUNDING) == 5


def test_rounding_is_half_up_on_ties() -> None:
    unit_coin = _coin(1)

    assert AMOUNT_ROUNDING == ROUND_HALF_UP
    assert to_units("0.5", unit_coin) == 1
    assert to_units("2.5", unit_coin) == 3
    assert to_units("2.4999", unit_coin) == 2


@pytest.mark.parametrize("amount", ["1.234567891", "0.000000001", "42", "0"])
def test_units_round_trip_at_nine_digits(amount: str) -> None:
    assert to_decimal(to_units(amount, SUI), SUI) == Decimal(amount)


def test_to_decimal_renders_nine_fractional_digits() -> None:
    value = to_decimal(1_500_000, DBUSDC)

    assert value == Decimal("1.5")
    assert str(value) == "1.500000000"


def test_input_to_price_inverts_price_to_input() -> None:
    base = _coin(1_000_000)
    quote = _coin(1_000_000_000)

    assert input_to_price(20_000_000_000, base, quote) == Decimal("0.02")


@pytest.mark.parametrize("bad", ["abc", "", "-1", "NaN", "Infinity", True, None])
def test_invalid_amounts_are_rejected(bad: object) -> None:
    with pytest.raises(AmountParseError):
        parse_amount(bad)  # type: ignore[arg-type]


def test_amount_overflow() -> None:
    with pytest.raises(AmountOverflowError):
        to_units(10**12, SUI)

    unit_coin = _coin(1)
    assert to_units(U64_MAX, unit_coin) == U64_MAX
    with pytest.raises(AmountOverflowError):
        to_units(U64_MAX + 1, unit_coin)


def test_overflow_is_a_parse_error() -> None:
    with pytest.raises(AmountParseError):
        to_units("1e30", SUI)

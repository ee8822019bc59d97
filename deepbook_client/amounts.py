"""Fixed-point conversion between decimal quantities and on-chain integer units.

All arithmetic runs in a dedicated decimal context wide enough for u64 results
with fractional headroom, so the only rounding step is the final quantize.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation

from deepbook_client.core.constants import DISPLAY_PRECISION, FLOAT_SCALAR, U64_MAX
from deepbook_client.errors import AmountOverflowError, AmountParseError
from deepbook_client.models import Coin

# Half away from zero.
AMOUNT_ROUNDING = ROUND_HALF_UP

DECIMAL_CONTEXT = Context(prec=60, rounding=AMOUNT_ROUNDING)

_DISPLAY_QUANTUM = Decimal(1).scaleb(-DISPLAY_PRECISION)
_UNIT = Decimal(1)

AmountLike = Decimal | int | str | float


def parse_amount(value: AmountLike, *, field: str = "amount") -> Decimal:
    """Parse a user-supplied quantity into a finite, non-negative ``Decimal``."""
    if isinstance(value, bool):
        raise AmountParseError(f"{field} must be numeric, got {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise AmountParseError(f"{field} must be numeric, got {value!r}") from exc
    if not amount.is_finite():
        raise AmountParseError(f"{field} must be finite, got {value!r}")
    if amount < 0:
        raise AmountParseError(f"{field} must not be negative, got {value!r}")
    return amount


def _round_to_u64(value: Decimal, *, field: str) -> int:
    try:
        rounded = value.quantize(_UNIT, rounding=AMOUNT_ROUNDING, context=DECIMAL_CONTEXT)
    except InvalidOperation as exc:
        raise AmountOverflowError(f"{field} {value} exceeds u64 range") from exc
    units = int(rounded)
    if units > U64_MAX:
        raise AmountOverflowError(f"{field} {value} exceeds u64 range")
    return units


def to_units(amount: AmountLike, coin: Coin) -> int:
    """Scale a whole-coin amount to integer units: ``round(amount * scalar)``.

    Raises:
        AmountParseError: If the amount is not a finite, non-negative number.
        AmountOverflowError: If the result does not fit in u64.
    """
    parsed = parse_amount(amount)
    scaled = DECIMAL_CONTEXT.multiply(parsed, Decimal(coin.scalar))
    return _round_to_u64(scaled, field="amount")


def to_decimal(units: int, coin: Coin) -> Decimal:
    """Convert integer units back to whole coins at nine fractional digits."""
    value = DECIMAL_CONTEXT.divide(Decimal(units), Decimal(coin.scalar))
    return value.quantize(_DISPLAY_QUANTUM, rounding=AMOUNT_ROUNDING, context=DECIMAL_CONTEXT)


def price_to_input(price: AmountLike, base: Coin, quote: Coin) -> int:
    """Convert a quote-per-base price into the pool's fixed-point input price.

    Evaluates ``round(price * FLOAT_SCALAR * quote.scalar / base.scalar)`` strictly
    left to right; dividing earlier changes results at rounding ties.
    """
    parsed = parse_amount(price, field="price")
    value = DECIMAL_CONTEXT.multiply(parsed, Decimal(FLOAT_SCALAR))
    value = DECIMAL_CONTEXT.multiply(value, Decimal(quote.scalar))
    value = DECIMAL_CONTEXT.divide(value, Decimal(base.scalar))
    return _round_to_u64(value, field="price")


def input_to_price(input_price: int, base: Coin, quote: Coin) -> Decimal:
    """Invert :func:`price_to_input` for prices returned by the pool."""
    value = DECIMAL_CONTEXT.multiply(Decimal(input_price), Decimal(base.scalar))
    value = DECIMAL_CONTEXT.divide(value, Decimal(FLOAT_SCALAR))
    value = DECIMAL_CONTEXT.divide(value, Decimal(quote.scalar))
    return value.quantize(_DISPLAY_QUANTUM, rounding=AMOUNT_ROUNDING, context=DECIMAL_CONTEXT)

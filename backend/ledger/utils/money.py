"""
Money helpers - conversion between display amounts and integer minor units.

All ledger arithmetic happens on integers (cents for USD). Values only become
Decimal/float at the boundary, when parsing input or rendering a report.
"""
from decimal import Decimal, ROUND_HALF_UP, ROUND_FLOOR, InvalidOperation
from typing import Union

Number = Union[int, float, str, Decimal]

DEFAULT_CURRENCY = "USD"

# ISO 4217 exponents that differ from the usual 2
CURRENCY_EXPONENTS = {
    "BIF": 0, "CLP": 0, "DJF": 0, "GNF": 0, "ISK": 0, "JPY": 0, "KMF": 0,
    "KRW": 0, "PYG": 0, "RWF": 0, "UGX": 0, "VND": 0, "VUV": 0, "XAF": 0,
    "XOF": 0, "XPF": 0,
    "BHD": 3, "IQD": 3, "JOD": 3, "KWD": 3, "LYD": 3, "OMR": 3, "TND": 3,
}


def currency_exponent(currency: str) -> int:
    """Number of decimal places for a currency code (2 when unknown)."""
    return CURRENCY_EXPONENTS.get((currency or DEFAULT_CURRENCY).upper(), 2)


def to_decimal(value: Number) -> Decimal:
    """
    Convert a raw numeric input to Decimal.

    Floats go through str() so 0.1 stays 0.1 instead of its binary expansion.

    Raises:
        ValueError: value is not numeric or not finite
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    try:
        result = Decimal(str(value))
    except (InvalidOperation, TypeError):
        raise ValueError(f"Not a number: {value!r}")
    if not result.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return result


def scale(exponent: int) -> int:
    return 10 ** exponent


def exact_minor(value: Number, exponent: int = 2) -> Decimal:
    """Value expressed in minor units without rounding."""
    return to_decimal(value) * scale(exponent)


def round_half_up(value: Decimal) -> int:
    """Round a Decimal to the nearest integer, halves away from zero."""
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def floor_minor(value: Number) -> int:
    """Drop any fraction of a minor unit."""
    return int(to_decimal(value).quantize(Decimal("1"), rounding=ROUND_FLOOR))


def to_minor(value: Number, exponent: int = 2) -> int:
    """
    Convert a major-unit amount to integer minor units (half up).

    >>> to_minor("10.005")
    1001
    """
    return round_half_up(exact_minor(value, exponent))


def to_major(minor: int, exponent: int = 2) -> Decimal:
    """Convert integer minor units back to a Decimal in major units."""
    quantum = Decimal(1).scaleb(-exponent)
    return (Decimal(minor) / scale(exponent)).quantize(quantum, rounding=ROUND_HALF_UP)


def display(minor: int, exponent: int = 2) -> float:
    """Major-unit float for JSON responses, rounded to the currency exponent."""
    return float(to_major(minor, exponent))

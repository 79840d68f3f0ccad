"""
Input Normalizer
=================
Turns raw measurement values into exact decimals.

Measurements travel through the system as decimal text ("72.50") so that
repeated edits never accumulate binary floating point drift. Every
calculation in this package works on `decimal.Decimal` and only rounds
when a value is written into a result.

Two entry points:
  - to_decimal_or_none(): lenient, fails closed. Anything unusable -> None.
  - parse_measurement_value(): strict, used at the schema boundary.
    Malformed text raises ValueError so bad input never reaches a formula.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

logger = logging.getLogger(__name__)

# Anything a caller may hand us as a measurement value
Numeric = Decimal | str | int | float | None

TWO_PLACES = Decimal("0.01")
ONE_KCAL = Decimal("1")


def _coerce(value: Numeric) -> Decimal | None:
    """Shared conversion; raises InvalidOperation/ValueError on bad input."""
    if value is None:
        return None

    # bool is a subclass of int, but True is not a measurement
    if isinstance(value, bool):
        raise ValueError(f"Boolean is not a numeric value: {value!r}")

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        # str() gives the shortest repr, so 72.1 stays 72.1
        result = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if text == "":
            return None
        # Accept comma decimal separator (e.g., "12,5" -> "12.5")
        result = Decimal(text.replace(",", "."))
    else:
        raise ValueError(f"Unsupported numeric type: {type(value).__name__}")

    if not result.is_finite():
        raise ValueError(f"Non-finite value: {value!r}")

    return result


def to_decimal_or_none(value: Numeric) -> Decimal | None:
    """
    Convert a raw value to Decimal, or None if it cannot be used.

    Never raises: one bad field must not abort the whole pipeline.

    Examples:
        to_decimal_or_none("72.50") -> Decimal("72.50")
        to_decimal_or_none(72.1)    -> Decimal("72.1")
        to_decimal_or_none("abc")   -> None
        to_decimal_or_none("NaN")   -> None
    """
    try:
        return _coerce(value)
    except (InvalidOperation, ValueError):
        logger.debug(f"Discarding non-numeric value: {value!r}")
        return None


def parse_measurement_value(value: Numeric) -> Decimal | None:
    """
    Strict conversion for request validation.

    Returns None for absent or blank values.

    Raises:
        ValueError: If the value is present but not a finite number.
    """
    try:
        return _coerce(value)
    except InvalidOperation:
        raise ValueError(f"Not a valid decimal number: {value!r}") from None


def round_decimal(value: Decimal | None, places: int = 2) -> Decimal | None:
    """Round half-up to a fixed number of decimal places (None passes through)."""
    if value is None:
        return None
    return _quantize(value, Decimal(1).scaleb(-places))


def round_kcal(value: Decimal | None) -> Decimal | None:
    """Round an energy value to whole kilocalories."""
    if value is None:
        return None
    return _quantize(value, ONE_KCAL)


def _quantize(value: Decimal, exponent: Decimal) -> Decimal:
    """Half-up quantize with enough precision for every digit of the result."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() - exponent.adjusted() + 2)
        return value.quantize(exponent, rounding=ROUND_HALF_UP)

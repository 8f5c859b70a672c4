"""
Numeric Coercion Utilities.

Monetary inputs reach the engine already mapped, but the engine still
degrades anything missing, unparseable or non-finite to zero so that a
single bad row can never poison an aggregate.
"""

from __future__ import annotations

import sys
from decimal import Decimal, InvalidOperation

__all__ = ["ZERO", "finite_or_zero", "to_decimal"]

ZERO: Decimal = Decimal("0")

# Inputs are bounded to what a double can hold: larger magnitudes read as
# infinite (and so as zero), smaller ones underflow to zero.  Products and
# ratios of bounded values stay well inside the default decimal context.
_MAX_MAGNITUDE: Decimal = Decimal(str(sys.float_info.max))
_MIN_MAGNITUDE: Decimal = Decimal("5e-324")


def _is_finite(value: Decimal) -> bool:
    return not (value.is_nan() or value.is_infinite())


def to_decimal(value: object, default: Decimal = ZERO) -> Decimal:
    """Coerce *value* to a finite ``Decimal``.

    Accepts ``Decimal``, ``int``, ``float`` and numeric strings (surrounding
    whitespace and thousands separators are tolerated).  Booleans, ``None``,
    blanks, garbage, NaN/Infinity and magnitudes beyond the double range
    all yield *default*; values too small for a double become zero.
    """
    if value is None or isinstance(value, bool):
        return default

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        # str() keeps the shortest repr, so 0.1 stays Decimal("0.1").
        result = Decimal(str(value))
    elif isinstance(value, str):
        cleaned = value.strip().replace(",", "")
        if not cleaned:
            return default
        try:
            result = Decimal(cleaned)
        except InvalidOperation:
            return default
    else:
        return default

    if not _is_finite(result) or abs(result) > _MAX_MAGNITUDE:
        return default
    if abs(result) < _MIN_MAGNITUDE:
        return ZERO
    return result


def finite_or_zero(value: Decimal) -> Decimal:
    """Return *value* unchanged when finite, otherwise ``Decimal("0")``."""
    return value if _is_finite(value) else ZERO

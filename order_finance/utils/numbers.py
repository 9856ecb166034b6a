"""Lenient numeric coercion for order documents.

Order documents are typed in by hand upstream and are not validated before
they reach the calculators. Every numeric field read by this package goes
through ``to_number_or_default`` so that blank, missing or malformed values
fall back to a default instead of failing the computation.
"""

import logging
import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

logger = logging.getLogger(__name__)


def to_number_or_default(value: Any, fallback: float = 0.0) -> float:
    """Coerce a document field to a float.

    Accepts ints, floats, Decimals and numeric strings (``"$1,250.00"`` is
    read as 1250.0). Booleans, None, NaN, infinities and anything that does
    not parse yield ``fallback``.

    Args:
        value: Raw field value from an order document
        fallback: Value returned when ``value`` is not a usable number

    Returns:
        float: The coerced number or the fallback

    Examples:
        >>> to_number_or_default("12.5")
        12.5
        >>> to_number_or_default("", 1)
        1
        >>> to_number_or_default(None, 1)
        1
    """
    if value is None or isinstance(value, bool):
        return fallback

    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            logger.debug(f"Integer too large for a float, using {fallback}")
            return fallback
    elif isinstance(value, Decimal):
        try:
            number = float(value)
        except (InvalidOperation, ValueError):
            return fallback
    elif isinstance(value, str):
        cleaned = value.strip().replace('$', '').replace(',', '')
        if not cleaned:
            return fallback
        try:
            number = float(cleaned)
        except ValueError:
            logger.debug(f"Non-numeric value {value!r}, using {fallback}")
            return fallback
    else:
        return fallback

    if math.isnan(number) or math.isinf(number):
        return fallback
    return number


def is_positive_number(value: Any) -> bool:
    """Return True when ``value`` is present, numeric and greater than zero."""
    return to_number_or_default(value, 0.0) > 0


def round_currency(amount: float) -> float:
    """Round an amount to cents."""
    return float(Decimal(str(amount)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP))

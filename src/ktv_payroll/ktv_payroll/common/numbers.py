from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal:
    """Lenient numeric parse for stored money values.

    Denormalized columns may come back as Decimal, int, float or str depending
    on the driver. Anything non-numeric (None, '', 'abc', NaN) counts as 0.
    """

    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return ZERO
    if not result.is_finite():
        return ZERO
    return result


def to_int(value: Any) -> int:
    return int(to_decimal(value))

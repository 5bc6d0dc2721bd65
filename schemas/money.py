from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")


def coerce_amount(value: Any) -> Decimal:
    """
    Best-effort numeric coercion for amounts read from the database or client payloads.

    Numeric columns come back as Decimal, strings come from loosely typed clients.
    Floats go through `str()` so 0.1 stays 0.1 rather than its binary expansion.
    Anything that is not a finite number collapses to 0 so downstream checks
    (e.g. `limit <= 0`) treat it as "not configured".
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    try:
        number = Decimal(str(value).strip().replace(",", ""))
    except (InvalidOperation, ValueError, TypeError):
        return ZERO
    return number if number.is_finite() else ZERO

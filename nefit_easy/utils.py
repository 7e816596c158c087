"""Utility helpers shared across the Nefit Easy integration."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
import math
from typing import Any

_ONE_DECIMAL = Decimal("0.1")


def format_value(value: Any) -> Any:
    """Return numeric ``value`` rounded half-up to one decimal place.

    Booleans and non-numeric values are returned untouched so the helper can
    be applied to any capability value before comparison or storage.
    Rounding works on the shortest decimal form of the float, so ``0.15``
    becomes ``0.2`` even though its binary value lies just below the tie.
    """

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return value
    if not math.isfinite(value):
        return value
    try:
        rounded = Decimal(str(value)).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP)
    except InvalidOperation:  # pragma: no cover - finite floats always quantize
        return value
    return float(rounded)


def float_or_none(value: Any) -> float | None:
    """Return value as ``float`` if possible, else ``None``.

    Converts integers, floats, and numeric strings to ``float`` while safely
    handling ``None`` and non-numeric inputs.
    """

    try:
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            num = float(value)
        else:
            string_val = str(value).strip()
            if not string_val:
                return None
            num = float(string_val)
        return num if math.isfinite(num) else None
    except (TypeError, ValueError):
        return None


__all__ = ["float_or_none", "format_value"]

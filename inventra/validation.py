from __future__ import annotations

import math
from typing import Any


class ValidationError(ValueError):
    """Form input problem caught before any backend call."""


def to_quantity(value: Any) -> int | None:
    """
    Coerce cart quantity input to a non-negative integer.

    Returns None when the value is not usable (non-numeric, negative, NaN,
    infinite, bool, empty). Fractions are floored.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float):
        number = value
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if math.isnan(number) or math.isinf(number) or number < 0:
        return None
    return int(math.floor(number))


def require_text(value: Any, label: str) -> str:
    text = (value or "").strip() if isinstance(value, str) else ""
    if not text:
        raise ValidationError(f"{label} is required")
    return text


def optional_text(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    text = value.strip()
    return text if text else None


def to_int(value: Any, label: str, *, minimum: int | None = None) -> int:
    """Whole number from a form field; rejects decimals and scientific notation."""
    text = str(value if value is not None else "").strip()
    if not text:
        raise ValidationError(f"{label} is required")
    if "e" in text.lower():
        raise ValidationError(f"{label} must be a plain integer")
    if "." in text:
        raise ValidationError(f"{label} must be an integer (no decimals)")
    try:
        number = int(text)
    except ValueError:
        raise ValidationError(f"{label} must be an integer")
    if minimum is not None and number < minimum:
        raise ValidationError(f"{label} must be at least {minimum}")
    return number


def to_price(value: Any, label: str) -> int | float:
    """Non-negative price from a form field. Whole numbers stay ints."""
    text = str(value if value is not None else "").strip()
    if not text:
        return 0
    try:
        number = float(text)
    except ValueError:
        raise ValidationError(f"{label} must be a number")
    if math.isnan(number) or math.isinf(number):
        raise ValidationError(f"{label} must be a number")
    if number < 0:
        raise ValidationError(f"{label} cannot be negative")
    return int(number) if number.is_integer() else number


def require_password(value: Any) -> str:
    """Passwords go to the backend exactly as typed; only an empty one is rejected."""
    if not isinstance(value, str) or value == "":
        raise ValidationError("Password is required")
    return value


def check_password(password: Any, minimum: int, *, trim: bool = True) -> str:
    text = password if isinstance(password, str) else ""
    if trim:
        text = text.strip()
    if len(text) < minimum:
        raise ValidationError(f"Password must be at least {minimum} characters")
    return text

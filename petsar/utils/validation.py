# petsar/utils/validation.py
"""
Argument checks shared by the prediction services.
"""
import math
import numbers


class InvalidArgumentError(ValueError):
    """Raised when a numeric or enumerated input is outside its valid domain."""


def require_finite(value, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        msg = f"{name} must be a number, got {type(value).__name__}."
        raise InvalidArgumentError(msg)
    if not math.isfinite(value):
        msg = f"{name} must be finite, got {value}."
        raise InvalidArgumentError(msg)
    return float(value)


def require_non_negative(value, name: str) -> float:
    value = require_finite(value, name)
    if value < 0:
        msg = f"{name} must be non-negative, got {value}."
        raise InvalidArgumentError(msg)
    return value


def require_count(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        msg = f"{name} must be an integer count, got {value!r}."
        raise InvalidArgumentError(msg)
    if value < 0:
        msg = f"{name} must be non-negative, got {value}."
        raise InvalidArgumentError(msg)
    return int(value)


def require_choice(value, choices, name: str):
    if value not in choices:
        msg = f"Invalid {name}: {value!r}. Expected one of {sorted(choices)}."
        raise InvalidArgumentError(msg)
    return value

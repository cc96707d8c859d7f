"""Exact integer scalar arithmetic checked against a numpy dtype range."""

import logging
import operator

import numpy as np

from .errors import ArithmeticOverflowError

logger = logging.getLogger(__name__)


def as_integer(x) -> int:
    """Coerce a Python or numpy integer to ``int``; floats and other types raise TypeError."""
    if isinstance(x, bool):
        raise TypeError(f"Expected an integer, got {type(x).__name__}")
    return operator.index(x)


def integer_bounds(dtype) -> tuple[int, int]:
    """Return the inclusive (min, max) range of an integer dtype."""
    info = np.iinfo(dtype)
    return int(info.min), int(info.max)


def check_range(value: int, dtype, expression: str = None) -> int:
    """Return ``value`` unchanged if it fits ``dtype``, else raise ArithmeticOverflowError."""
    lo, hi = integer_bounds(dtype)
    if lo <= value <= hi:
        return value
    if expression is None:
        expression = str(value)
    dtype_name = np.dtype(dtype).name
    logger.debug(f"Overflow in {expression}: {value} outside [{lo}, {hi}]")
    raise ArithmeticOverflowError(expression, value, dtype_name)


def checked_mul(a: int, b: int, dtype) -> int:
    """a * b, failing instead of wrapping."""
    return check_range(int(a) * int(b), dtype, f"{a} * {b}")


def checked_add(a: int, b: int, dtype) -> int:
    """a + b, failing instead of wrapping."""
    return check_range(int(a) + int(b), dtype, f"{a} + {b}")

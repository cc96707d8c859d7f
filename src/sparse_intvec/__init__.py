"""
Sparse integer vectors with exact arithmetic.

Fixed-dimension vectors storing only their nonzero coefficients, sorted by
index, for exact linear algebra on integer boundary matrices.
"""

__version__ = "0.1.0"

from .sparse_vector import SparseVector, linear, ZERO
from .config import VectorConfig
from .growable import CappedArray
from .errors import (
    SparseVectorConfigError,
    SparseVectorRuntimeError,
    InvalidCapacityError,
    InvalidLengthError,
    InvalidDtypeError,
    InvalidMinimalSizeError,
    IndexOutOfRangeError,
    LengthMismatchError,
    ArithmeticOverflowError,
    InvariantViolationError,
)

__all__ = [
    "SparseVector",
    "linear",
    "ZERO",
    "VectorConfig",
    "CappedArray",
    "SparseVectorConfigError",
    "SparseVectorRuntimeError",
    "InvalidCapacityError",
    "InvalidLengthError",
    "InvalidDtypeError",
    "InvalidMinimalSizeError",
    "IndexOutOfRangeError",
    "LengthMismatchError",
    "ArithmeticOverflowError",
    "InvariantViolationError",
]

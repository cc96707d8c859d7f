import numpy as np
from typing import Literal
from dataclasses import dataclass

from .constants import MINIMAL_SIZE, DEFAULT_DTYPE, ValueDtype
from .errors import InvalidDtypeError, InvalidMinimalSizeError


@dataclass(frozen=True)
class VectorConfig:
    """
    Configuration for sparse integer vectors.

    This class defines the storage parameters shared by vectors that are
    combined with each other, most importantly the integer range that exact
    arithmetic is checked against.
    """

    dtype: Literal['int32', 'int64'] = DEFAULT_DTYPE
    """Value dtype of the backing array. Overflow is reported against its range:
    - 'int32': 32-bit signed coefficients
    - 'int64': 64-bit signed coefficients
    """

    minimal_size: int = MINIMAL_SIZE
    """Allocation block used to round up the initial capacity of a new vector."""

    @property
    def np_dtype(self) -> np.dtype:
        return np.dtype(self.dtype)

    def validate(self) -> None:
        """Validate configuration parameters."""
        if self.dtype not in ValueDtype.ALL:
            raise InvalidDtypeError(self.dtype, ValueDtype.ALL)
        if isinstance(self.minimal_size, bool) or not isinstance(self.minimal_size, (int, np.integer)) or self.minimal_size <= 0:
            raise InvalidMinimalSizeError(self.minimal_size)

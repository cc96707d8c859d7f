"""
Capped geometric-growth buffers.

A sparse vector of dimension ``length`` can never hold more than ``length``
nonzero entries, so its backing arrays grow by a factor of 3/2 (plus one)
but are clamped at that dimension.
"""

import logging
from typing import Optional

import numpy as np

from .constants import GROWTH_NUMERATOR, GROWTH_DENOMINATOR
from .errors import InvariantViolationError

logger = logging.getLogger(__name__)


class CappedArray:
    """
    Numpy-backed dynamic array whose capacity never exceeds ``limit``.

    The array does not track how many of its slots are in use; the owner
    passes the occupied count to every operation so that several parallel
    arrays can share one count.

    Parameters
    ----------
    capacity : int
        Initial number of allocated slots, at most ``limit``.
    limit : int
        Hard upper bound for the capacity.
    dtype : numpy dtype or str
        Element dtype.
    """

    def __init__(self, capacity: int, limit: int, dtype):
        if capacity > limit:
            raise InvariantViolationError(f"capacity {capacity} exceeds limit {limit}")
        self.limit = limit
        self.data = np.zeros(capacity, dtype=dtype)

    @classmethod
    def from_values(cls, values, limit: int, dtype, capacity: Optional[int] = None) -> 'CappedArray':
        """Build a buffer holding ``values`` in its leading slots."""
        values = np.asarray(values, dtype=dtype)
        if capacity is None:
            capacity = len(values)
        buf = cls(capacity, limit, dtype)
        buf.data[:len(values)] = values
        return buf

    @property
    def capacity(self) -> int:
        return len(self.data)

    @property
    def dtype(self) -> np.dtype:
        return self.data.dtype

    def next_capacity(self, occupied: int) -> int:
        return min(self.limit, (occupied * GROWTH_NUMERATOR) // GROWTH_DENOMINATOR + 1)

    def ensure_room(self, occupied: int) -> bool:
        """Make room for one element past ``occupied``.

        Returns True if the buffer was reallocated.
        """
        if occupied < self.capacity:
            return False
        if self.capacity >= self.limit:
            raise InvariantViolationError(f"can't occupy more than {self.limit} slots")

        new_capacity = self.next_capacity(occupied)
        data = np.zeros(new_capacity, dtype=self.dtype)
        data[:occupied] = self.data[:occupied]
        logger.debug(f"Growing {self.dtype} buffer: {self.capacity} -> {new_capacity} (limit {self.limit})")
        self.data = data
        return True

    def insert(self, k: int, value, occupied: int) -> None:
        """Shift ``[k, occupied)`` right by one slot and write ``value`` at ``k``."""
        self.ensure_room(occupied)
        if occupied - k > 0:
            # numpy buffers overlapping slice assignments
            self.data[k + 1:occupied + 1] = self.data[k:occupied]
        self.data[k] = value

    def delete(self, k: int, occupied: int) -> None:
        """Shift ``[k+1, occupied)`` left by one slot. Capacity is kept."""
        if occupied - k - 1 > 0:
            self.data[k:occupied - 1] = self.data[k + 1:occupied]

    def snapshot(self, occupied: int) -> 'CappedArray':
        """Independent copy of the occupied prefix, sized exactly to it."""
        return CappedArray.from_values(self.data[:occupied].copy(), self.limit, self.dtype)

    def __repr__(self):
        return f"CappedArray(capacity={self.capacity}, limit={self.limit}, dtype={self.dtype})"

import functools
from typing import Iterable, Iterator

import numpy as np
from scipy import sparse

from .config import VectorConfig
from .constants import INDEX_DTYPE, NO_INDEX
from .errors import IndexOutOfRangeError, InvalidCapacityError, InvalidLengthError, InvariantViolationError, LengthMismatchError
from .exact import as_integer, check_range, checked_add, checked_mul
from .growable import CappedArray


def _scaled(scale: int, x: int, dtype) -> int:
    if scale == 1:
        # the entry may come from a vector with a wider dtype
        return check_range(x, dtype)
    return checked_mul(scale, x, dtype)


def _merge_scaled(a: int, left_idx: list[int], left_val: list[int],
                  b: int, right_idx: list[int], right_val: list[int],
                  dtype) -> tuple[list[int], list[int]]:
    """Sorted merge of two sparse representations into ``a*left + b*right``.

    Entries that come out as zero (cancellation, or a zero scalar) are dropped.
    """
    indices = []
    values = []
    i = j = 0
    n, m = len(left_idx), len(right_idx)
    while i < n and j < m:
        li, rj = left_idx[i], right_idx[j]
        if li < rj:
            idx, x = li, _scaled(a, left_val[i], dtype)
            i += 1
        elif rj < li:
            idx, x = rj, _scaled(b, right_val[j], dtype)
            j += 1
        else:
            idx = li
            x = checked_add(_scaled(a, left_val[i], dtype), _scaled(b, right_val[j], dtype), dtype)
            i += 1
            j += 1
        if x != 0:
            indices.append(idx)
            values.append(x)

    # flush whichever side is left over
    for i in range(i, n):
        x = _scaled(a, left_val[i], dtype)
        if x != 0:
            indices.append(left_idx[i])
            values.append(x)
    for j in range(j, m):
        x = _scaled(b, right_val[j], dtype)
        if x != 0:
            indices.append(right_idx[j])
            values.append(x)
    return indices, values


@functools.total_ordering
class SparseVector:
    """
    Sparse integer vector of fixed dimension with exact arithmetic.

    Only nonzero coefficients are stored, in two parallel numpy arrays sorted
    by index. Vectors are ordered by their leading index (empty vectors last)
    and then by the first differing coefficient, which gives the canonical
    row order used while reducing integer boundary matrices.

    Every fallible operation raises a subclass of ``SparseVectorConfigError``
    or ``SparseVectorRuntimeError``; arithmetic that would leave the range of
    ``config.dtype`` raises ``ArithmeticOverflowError`` and leaves the vector
    untouched.
    """

    def __init__(self, length: int, capacity: int = 0, config: VectorConfig = VectorConfig()):
        """
        Initialize an empty SparseVector.

        Args:
            length: Dimension of the vector. Stored indices lie in [0, length).
            capacity: Expected number of nonzero entries, in [0, length].
                The initial allocation is rounded up to a multiple of
                ``config.minimal_size`` and capped at ``length``.
            config: VectorConfig defining the value dtype.
        """
        length = as_integer(length)
        capacity = as_integer(capacity)
        config.validate()
        if length < 0:
            raise InvalidLengthError(length)
        if capacity < 0 or capacity > length:
            raise InvalidCapacityError(capacity, length)

        self._length = length
        self.config = config
        self._occupation = 0
        size = min(length, ((capacity // config.minimal_size) + 1) * config.minimal_size)
        self._indices = CappedArray(size, length, INDEX_DTYPE)
        self._values = CappedArray(size, length, config.np_dtype)

    @classmethod
    def ZERO(cls, length: int, capacity: int = 0, config: VectorConfig = VectorConfig()) -> 'SparseVector':
        """The zero vector of the given dimension."""
        return cls(length, capacity, config)

    zero = ZERO

    @classmethod
    def _from_buffers(cls, length: int, config: VectorConfig,
                      indices: CappedArray, values: CappedArray, occupation: int) -> 'SparseVector':
        v = cls.__new__(cls)
        v._length = length
        v.config = config
        v._occupation = occupation
        v._indices = indices
        v._values = values
        return v

    @classmethod
    def _from_lists(cls, length: int, config: VectorConfig,
                    indices: list[int], values: list[int], capacity: int) -> 'SparseVector':
        return cls._from_buffers(
            length, config,
            CappedArray.from_values(indices, length, INDEX_DTYPE, capacity=capacity),
            CappedArray.from_values(values, length, config.np_dtype, capacity=capacity),
            len(indices))

    @classmethod
    def from_items(cls, length: int, items: Iterable[tuple[int, int]],
                   capacity: int = 0, config: VectorConfig = VectorConfig()) -> 'SparseVector':
        """Build a vector by accumulating ``(index, value)`` pairs.

        Repeated indices add up, exactly like repeated calls to ``accumulate``.
        """
        v = cls(length, capacity, config)
        for i, x in items:
            v.accumulate(i, x)
        return v

    @classmethod
    def from_dense(cls, dense, config: VectorConfig = VectorConfig()) -> 'SparseVector':
        """Build a vector from a one-dimensional integer array-like."""
        dense = np.asarray(dense)
        if dense.ndim != 1:
            raise ValueError(f"Expected a one-dimensional array, got shape {dense.shape}")
        if dense.size > 0 and not np.issubdtype(dense.dtype, np.integer):
            raise TypeError(f"Expected an integer array, got dtype {dense.dtype}")
        config.validate()
        nz = np.flatnonzero(dense)
        values = [check_range(int(x), config.np_dtype) for x in dense[nz].tolist()]
        return cls._from_lists(len(dense), config, nz.tolist(), values, capacity=len(values))

    # ------------------------------------------------------------------
    # storage views
    # ------------------------------------------------------------------

    @property
    def length(self) -> int:
        return self._length

    @property
    def occupation(self) -> int:
        """Number of stored nonzero entries."""
        return self._occupation

    @property
    def capacity(self) -> int:
        """Allocated size of the backing arrays."""
        return self._indices.capacity

    @property
    def indices(self) -> np.ndarray:
        """Read-only view of the stored indices, strictly increasing."""
        view = self._indices.data[:self._occupation].view()
        view.flags.writeable = False
        return view

    @property
    def values(self) -> np.ndarray:
        """Read-only view of the stored coefficients, parallel to ``indices``."""
        view = self._values.data[:self._occupation].view()
        view.flags.writeable = False
        return view

    def _check_length(self, other: 'SparseVector') -> None:
        if other._length != self._length:
            raise LengthMismatchError(self._length, other._length)

    def _entry_lists(self) -> tuple[list[int], list[int]]:
        occ = self._occupation
        return self._indices.data[:occ].tolist(), self._values.data[:occ].tolist()

    # ------------------------------------------------------------------
    # lookup
    # ------------------------------------------------------------------

    def index(self, i: int) -> int:
        """Binary search for the slot where index ``i`` is, or would be inserted.

        Returns ``occupation`` without searching when the vector is empty or
        ``i`` lies past the last stored index, so appends stay cheap.
        """
        occ = self._occupation
        idx = self._indices.data
        if occ == 0 or i > idx[occ - 1]:
            return occ
        return int(np.searchsorted(idx[:occ], i, side='left'))

    def get(self, i: int) -> int:
        """Coefficient at index ``i``; 0 if nothing is stored there."""
        i = as_integer(i)
        k = self.index(i)
        if k < self._occupation and self._indices.data[k] == i:
            return int(self._values.data[k])
        return 0

    def __getitem__(self, i: int) -> int:
        return self.get(i)

    def __contains__(self, i) -> bool:
        """True if index ``i`` holds a nonzero coefficient."""
        i = as_integer(i)
        k = self.index(i)
        return k < self._occupation and self._indices.data[k] == i

    def first_index(self) -> int:
        """Leading (lowest) stored index, or -1 for the zero vector."""
        if self._occupation == 0:
            return NO_INDEX
        return int(self._indices.data[0])

    def first_value(self) -> int:
        """Coefficient at the leading index, or 0 for the zero vector."""
        if self._occupation == 0:
            return 0
        return int(self._values.data[0])

    def _leading_key(self) -> int:
        # the zero vector sorts after every nonzero one
        if self._occupation == 0:
            return self._length
        return int(self._indices.data[0])

    # ------------------------------------------------------------------
    # mutation
    # ------------------------------------------------------------------

    def accumulate(self, i: int, delta: int) -> None:
        """Add ``delta`` to the coefficient at index ``i``.

        A zero result removes the slot; an absent index gets a new slot.

        Raises:
            IndexOutOfRangeError: if ``i`` is outside [0, length).
            ArithmeticOverflowError: if the new coefficient does not fit the dtype.
        """
        i = as_integer(i)
        delta = as_integer(delta)
        if i < 0 or i >= self._length:
            raise IndexOutOfRangeError(i, 0, self._length)
        dtype = self.config.np_dtype
        check_range(delta, dtype)

        k = self.index(i)
        if k < self._occupation and self._indices.data[k] == i:
            x = checked_add(self._values.data[k], delta, dtype)
            if x != 0:
                self._values.data[k] = x
            else:
                self.remove(k)
        else:
            self.insert(k, i, delta)

    # kept for callers using the accumulate-on-set name
    set = accumulate

    def insert(self, k: int, i: int, value: int) -> None:
        """Store ``(i, value)`` at slot ``k``, shifting later slots right.

        Does nothing for ``value == 0``. Grows the backing arrays by 3/2 when
        they are full, never beyond ``length``.
        """
        value = as_integer(value)
        if value == 0:
            return
        k = as_integer(k)
        i = as_integer(i)
        check_range(value, self.config.np_dtype)
        occ = self._occupation
        if k < 0 or k > occ:
            raise IndexOutOfRangeError(k, 0, occ + 1, what="Slot")
        if i < 0 or i >= self._length:
            raise IndexOutOfRangeError(i, 0, self._length)
        idx = self._indices.data
        if k > 0 and idx[k - 1] >= i:
            raise InvariantViolationError(f"index {i} at slot {k} does not follow index {idx[k - 1]}")
        if k < occ and idx[k] <= i:
            raise InvariantViolationError(f"index {i} at slot {k} does not precede index {idx[k]}")

        self._indices.insert(k, i, occ)
        self._values.insert(k, value, occ)
        self._occupation += 1

    def remove(self, k: int) -> None:
        """Drop slot ``k``, shifting later slots left. Capacity is kept."""
        k = as_integer(k)
        occ = self._occupation
        if k < 0 or k >= occ:
            raise IndexOutOfRangeError(k, 0, occ, what="Slot")
        self._indices.delete(k, occ)
        self._values.delete(k, occ)
        self._occupation -= 1

    def add(self, v: 'SparseVector', lam: int = 1) -> 'SparseVector':
        """In place: self <- self + lam * v.

        The two sorted index sequences are merged into fresh arrays of
        capacity min(occupation + v.occupation, length), which then replace
        this vector's storage. Cancelled coefficients are dropped.

        Args:
            v: Vector of the same length to add.
            lam: Integer scalar applied to ``v``.

        Returns:
            Self, for chaining.

        Raises:
            LengthMismatchError: if ``v`` has a different length.
            ArithmeticOverflowError: if a product or sum leaves the dtype range.
                This vector is left unchanged.
        """
        self._check_length(v)
        lam = as_integer(lam)
        dtype = self.config.np_dtype
        check_range(lam, dtype)

        own_idx, own_val = self._entry_lists()
        other_idx, other_val = v._entry_lists()
        capacity = min(len(own_idx) + len(other_idx), self._length)
        indices, values = _merge_scaled(1, own_idx, own_val, lam, other_idx, other_val, dtype)

        new_indices = CappedArray.from_values(indices, self._length, INDEX_DTYPE, capacity=capacity)
        new_values = CappedArray.from_values(values, self._length, dtype, capacity=capacity)
        self._indices = new_indices
        self._values = new_values
        self._occupation = len(indices)
        return self

    @staticmethod
    def linear(a: int, v: 'SparseVector', b: int, w: 'SparseVector') -> 'SparseVector':
        """New vector a*v + b*w; neither input is modified.

        The result uses the config of ``v``.
        """
        v._check_length(w)
        dtype = v.config.np_dtype
        a = check_range(as_integer(a), dtype)
        b = check_range(as_integer(b), dtype)

        v_idx, v_val = v._entry_lists()
        w_idx, w_val = w._entry_lists()
        capacity = min(len(v_idx) + len(w_idx), v._length)
        indices, values = _merge_scaled(a, v_idx, v_val, b, w_idx, w_val, dtype)
        return SparseVector._from_lists(v._length, v.config, indices, values, capacity)

    def scaled(self, k: int) -> 'SparseVector':
        """New vector k*self."""
        dtype = self.config.np_dtype
        k = check_range(as_integer(k), dtype)
        own_idx, own_val = self._entry_lists()
        indices, values = _merge_scaled(k, own_idx, own_val, 0, [], [], dtype)
        return SparseVector._from_lists(self._length, self.config, indices, values, len(indices))

    # ------------------------------------------------------------------
    # ordering
    # ------------------------------------------------------------------

    def compare_to(self, v: 'SparseVector') -> int:
        """Total order: -1, 0 or +1.

        A smaller leading index sorts first and the zero vector sorts last.
        Ties are broken by the first index whose coefficients differ, the
        smaller coefficient sorting first. Only stored indices are visited,
        so the walk never leaves [0, length).
        """
        self._check_length(v)
        lead, other_lead = self._leading_key(), v._leading_key()
        if lead != other_lead:
            return -1 if lead < other_lead else 1

        own_idx, own_val = self._entry_lists()
        other_idx, other_val = v._entry_lists()
        i = j = 0
        n, m = len(own_idx), len(other_idx)
        while i < n or j < m:
            # index of the next entry stored in either vector
            pos = min(own_idx[i] if i < n else self._length, other_idx[j] if j < m else self._length)
            x = own_val[i] if i < n and own_idx[i] == pos else 0
            y = other_val[j] if j < m and other_idx[j] == pos else 0
            if x != y:
                return -1 if x < y else 1
            if i < n and own_idx[i] == pos:
                i += 1
            if j < m and other_idx[j] == pos:
                j += 1
        return 0

    def __eq__(self, other) -> bool:
        if not isinstance(other, SparseVector):
            return NotImplemented
        if other._length != self._length or other._occupation != self._occupation:
            return False
        return bool(np.array_equal(self.indices, other.indices) and np.array_equal(self.values, other.values))

    def __lt__(self, other) -> bool:
        if not isinstance(other, SparseVector):
            return NotImplemented
        return self.compare_to(other) < 0

    # mutable
    __hash__ = None

    # numpy scalars defer to __rmul__ instead of broadcasting over the vector
    __array_ufunc__ = None

    # ------------------------------------------------------------------
    # copies and conversions
    # ------------------------------------------------------------------

    def clone(self) -> 'SparseVector':
        """Deep copy whose backing arrays are sized to the current occupation."""
        occ = self._occupation
        return SparseVector._from_buffers(self._length, self.config,
                                          self._indices.snapshot(occ), self._values.snapshot(occ), occ)

    def copy(self) -> 'SparseVector':
        """Returns a copy of the vector."""
        return self.clone()

    def __copy__(self) -> 'SparseVector':
        return self.clone()

    def __deepcopy__(self, memo) -> 'SparseVector':
        return self.clone()

    def items(self) -> Iterator[tuple[int, int]]:
        """Iterate ``(index, value)`` pairs in ascending index order."""
        return zip(*self._entry_lists())

    def __iter__(self):
        """Iterate over the stored indices."""
        return iter(self._indices.data[:self._occupation].tolist())

    def __len__(self) -> int:
        """Returns the number of non-zero elements."""
        return self._occupation

    def is_zero(self) -> bool:
        return self._occupation == 0

    def to_dense(self) -> np.ndarray:
        dense = np.zeros(self._length, dtype=self.config.np_dtype)
        dense[self.indices] = self.values
        return dense

    def to_scipy(self) -> sparse.csr_matrix:
        """This vector as a 1 x length CSR row."""
        indptr = np.array([0, self._occupation], dtype=INDEX_DTYPE)
        return sparse.csr_matrix((self.values.copy(), self.indices.copy(), indptr),
                                 shape=(1, self._length), dtype=self.config.np_dtype)

    def check_invariants(self) -> None:
        """Raise InvariantViolationError unless the storage is sorted, zero-free and in bounds."""
        occ = self._occupation
        if self._indices.capacity != self._values.capacity:
            raise InvariantViolationError(
                f"index capacity {self._indices.capacity} != value capacity {self._values.capacity}")
        if not 0 <= occ <= self.capacity <= self._length:
            raise InvariantViolationError(
                f"expected 0 <= occupation ({occ}) <= capacity ({self.capacity}) <= length ({self._length})")
        idx, val = self.indices, self.values
        if occ > 0 and (idx[0] < 0 or idx[-1] >= self._length):
            raise InvariantViolationError(f"stored index outside [0, {self._length})")
        if np.any(np.diff(idx) <= 0):
            raise InvariantViolationError("stored indices are not strictly increasing")
        if np.any(val == 0):
            raise InvariantViolationError("zero coefficient stored")

    # ------------------------------------------------------------------
    # operators
    # ------------------------------------------------------------------

    def __iadd__(self, other: 'SparseVector') -> 'SparseVector':
        if not isinstance(other, SparseVector):
            return NotImplemented
        return self.add(other, 1)

    def __isub__(self, other: 'SparseVector') -> 'SparseVector':
        if not isinstance(other, SparseVector):
            return NotImplemented
        return self.add(other, -1)

    def __add__(self, other: 'SparseVector') -> 'SparseVector':
        if not isinstance(other, SparseVector):
            return NotImplemented
        return SparseVector.linear(1, self, 1, other)

    def __sub__(self, other: 'SparseVector') -> 'SparseVector':
        if not isinstance(other, SparseVector):
            return NotImplemented
        return SparseVector.linear(1, self, -1, other)

    def __neg__(self) -> 'SparseVector':
        return self.scaled(-1)

    def __mul__(self, k) -> 'SparseVector':
        if not isinstance(k, (int, np.integer)) or isinstance(k, bool):
            return NotImplemented
        return self.scaled(k)

    __rmul__ = __mul__

    def __str__(self) -> str:
        body = " ".join(f"{i}:{x}" for i, x in self.items())
        return f"occupation: {self._occupation} -> {body}".rstrip()

    def __repr__(self) -> str:
        """String representation of the vector."""
        items_str = ", ".join(f"{i}: {x}" for i, x in self.items())
        return f"SparseVector(length={self._length}, {{{items_str}}})"


def linear(a: int, v: SparseVector, b: int, w: SparseVector) -> SparseVector:
    """a*v + b*w as a new vector."""
    return SparseVector.linear(a, v, b, w)


def ZERO(length: int, capacity: int = 0, config: VectorConfig = VectorConfig()) -> SparseVector:
    """The zero vector of the given dimension."""
    return SparseVector.ZERO(length, capacity, config)

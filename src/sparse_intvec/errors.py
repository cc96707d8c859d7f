
class SparseVectorConfigError(ValueError):
    """Base class for sparse vector construction and configuration errors."""
    pass

class SparseVectorRuntimeError(ValueError):
    """Base class for sparse vector runtime errors."""
    pass



class InvalidCapacityError(SparseVectorConfigError):
    """Raised when a capacity hint lies outside [0, length]."""

    def __init__(self, capacity: int, length: int):
        self.capacity = capacity
        self.length = length
        if capacity < 0:
            message = f"Capacity must be a non-negative number, got {capacity}"
        else:
            message = f"Capacity {capacity} must not exceed the vector length {length}"
        super().__init__(message)


class InvalidLengthError(SparseVectorConfigError):
    """Raised when a vector length is negative."""

    def __init__(self, length: int):
        self.length = length
        message = f"Vector length must be a non-negative number, got {length}"
        super().__init__(message)


class InvalidDtypeError(SparseVectorConfigError):
    """Raised when an unsupported value dtype is configured."""

    def __init__(self, dtype, valid_dtypes: list):
        self.dtype = dtype
        self.valid_dtypes = valid_dtypes
        message = f"Invalid value dtype '{dtype}'. Must be one of: {valid_dtypes}"
        super().__init__(message)


class InvalidMinimalSizeError(SparseVectorConfigError):
    """Raised when the minimal allocation block is not a positive number."""

    def __init__(self, minimal_size: int):
        self.minimal_size = minimal_size
        message = f"minimal_size must be a positive number, got {minimal_size}"
        super().__init__(message)


class IndexOutOfRangeError(SparseVectorRuntimeError, IndexError):
    """Raised when an index or slot argument lies outside [lower, upper)."""

    def __init__(self, index: int, lower: int, upper: int, what: str = "Index"):
        self.index = index
        self.lower = lower
        self.upper = upper
        message = f"{what} out of bounds: {index} not in [{lower}, {upper})"
        super().__init__(message)


class LengthMismatchError(SparseVectorRuntimeError):
    """Raised when two vectors of different dimension are combined or compared."""

    def __init__(self, left: int, right: int):
        self.left = left
        self.right = right
        message = f"Vector lengths differ: {left} != {right}"
        super().__init__(message)


class ArithmeticOverflowError(SparseVectorRuntimeError, OverflowError):
    """Raised when an exact scalar operation leaves the representable integer range.

    Callers may catch this to retry the computation with a wider dtype.
    """

    def __init__(self, expression: str, result: int, dtype: str):
        self.expression = expression
        self.result = result
        self.dtype = dtype
        message = f"Integer overflow: {expression} = {result} does not fit into {dtype}"
        super().__init__(message)


class InvariantViolationError(SparseVectorRuntimeError, RuntimeError):
    """Raised when an operation would break the sorted, zero-free storage invariant."""

    def __init__(self, detail: str):
        self.detail = detail
        message = f"Sparse vector invariant violated: {detail}"
        super().__init__(message)

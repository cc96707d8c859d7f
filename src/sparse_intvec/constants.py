MINIMAL_SIZE = 16  # allocation block for a fresh vector's backing arrays

# capacity grows to occupation * GROWTH_NUMERATOR // GROWTH_DENOMINATOR + 1
GROWTH_NUMERATOR = 3
GROWTH_DENOMINATOR = 2

INDEX_DTYPE = "intp"
DEFAULT_DTYPE = "int64"


class ValueDtype:
    INT32 = "int32"
    INT64 = "int64"

    ALL = [INT32, INT64]


# first_index() of an empty vector, as returned by the accessor
NO_INDEX = -1

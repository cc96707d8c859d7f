import os
import sys

import numpy as np
import pytest

# Add the src directory to Python path to import local sparse_intvec
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from sparse_intvec import ArithmeticOverflowError
from sparse_intvec.exact import as_integer, integer_bounds, check_range, checked_add, checked_mul


def test_integer_bounds():
    assert integer_bounds(np.int32) == (-2**31, 2**31 - 1)
    assert integer_bounds('int64') == (-2**63, 2**63 - 1)


@pytest.mark.parametrize("a, b", [(2**62, 2), (-2**62, 3), (2**32, 2**32)])
def test_checked_mul_overflow(a, b):
    with pytest.raises(ArithmeticOverflowError) as excinfo:
        checked_mul(a, b, np.int64)
    assert excinfo.value.result == a * b
    assert excinfo.value.dtype == 'int64'


def test_checked_mul_edges():
    assert checked_mul(-2**62, 2, np.int64) == -2**63
    assert checked_mul(np.int64(7), -3, np.int64) == -21


def test_checked_add_overflow():
    hi = 2**31 - 1
    assert checked_add(hi, 0, np.int32) == hi
    with pytest.raises(ArithmeticOverflowError):
        checked_add(hi, 1, np.int32)
    with pytest.raises(ArithmeticOverflowError):
        checked_add(-hi, -2, np.int32)


def test_check_range_message():
    with pytest.raises(ArithmeticOverflowError, match="does not fit into int32"):
        check_range(2**40, np.int32)


def test_as_integer():
    assert as_integer(np.int16(5)) == 5
    assert type(as_integer(np.int64(5))) is int
    with pytest.raises(TypeError):
        as_integer(1.0)
    with pytest.raises(TypeError):
        as_integer(True)

import os
import sys

import numpy as np
import pytest

# Add the src directory to Python path to import local sparse_intvec
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from sparse_intvec import CappedArray, InvariantViolationError


def test_growth_sequence_is_capped():
    buf = CappedArray(0, 10, np.int64)
    seen = []
    occupied = 0
    while occupied < 10:
        if buf.ensure_room(occupied):
            seen.append(buf.capacity)
        buf.data[occupied] = occupied
        occupied += 1
    # 0 -> 1 -> 2 -> 4 -> 7 -> 10 (capped from 11)
    assert seen == [1, 2, 4, 7, 10]
    assert buf.data.tolist() == list(range(10))


def test_growth_beyond_limit_is_an_invariant_violation():
    buf = CappedArray(3, 3, np.int64)
    with pytest.raises(InvariantViolationError):
        buf.ensure_room(3)


def test_no_growth_while_room_is_left():
    buf = CappedArray(4, 10, np.int64)
    assert buf.ensure_room(3) is False
    assert buf.capacity == 4


def test_insert_shifts_right():
    buf = CappedArray.from_values([1, 2, 4], 10, np.int64)
    buf.insert(2, 3, 3)
    assert buf.data[:4].tolist() == [1, 2, 3, 4]
    buf.insert(0, 0, 4)
    assert buf.data[:5].tolist() == [0, 1, 2, 3, 4]


def test_delete_shifts_left_and_keeps_capacity():
    buf = CappedArray.from_values([5, 6, 7, 8], 10, np.int64, capacity=6)
    buf.delete(1, 4)
    assert buf.data[:3].tolist() == [5, 7, 8]
    assert buf.capacity == 6
    buf.delete(2, 3)
    assert buf.data[:2].tolist() == [5, 7]


def test_snapshot_is_exact_and_independent():
    buf = CappedArray.from_values([1, 2, 3], 10, np.int32, capacity=8)
    snap = buf.snapshot(2)
    assert snap.capacity == 2
    assert snap.limit == 10
    assert snap.dtype == np.int32
    buf.data[0] = 99
    assert snap.data.tolist() == [1, 2]


def test_capacity_above_limit_is_rejected():
    with pytest.raises(InvariantViolationError):
        CappedArray(5, 4, np.int64)

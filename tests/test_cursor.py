"""Tests for the cyclic scale+translate cursor."""

import numpy as np
import pytest

from fibspiral.cursor import CircularScaleCursor


def test_cursor_cycles_through_four_states():
    cursor = CircularScaleCursor()
    positions = [cursor.position]
    for _ in range(8):
        positions.append(cursor.advance().position)
    assert positions == [0, 1, 2, 3, 0, 1, 2, 3, 0]


@pytest.mark.parametrize("position, expected", [
    (0, [[2.5, 0, -3], [0, 1, 0]]),
    (1, [[1, 0, 0], [0, 2.5, -3]]),
    (2, [[2.5, 0, 3], [0, 1, 0]]),
    (3, [[1, 0, 0], [0, 2.5, 3]]),
])
def test_build_places_scale_and_signed_distance(position, expected):
    matrix = CircularScaleCursor(position).build(2.5, 3)
    np.testing.assert_array_equal(matrix.as_array(), expected)


def test_full_turn_reproduces_build():
    cursor = CircularScaleCursor()
    before = cursor.build(1.6, 3).as_array()
    for _ in range(4):
        cursor.advance()
    np.testing.assert_array_equal(cursor.build(1.6, 3).as_array(), before)


def test_offset_does_not_move_cursor():
    cursor = CircularScaleCursor(1)
    ahead = cursor.offset(6)
    assert ahead.position == 3
    assert cursor.position == 1

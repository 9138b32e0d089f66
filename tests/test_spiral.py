"""Tests for the spiral point generator."""

import numpy as np
import pytest

from fibspiral.geometry import Point2D
from fibspiral.sequence import generate_fibonacci
from fibspiral.spiral import Extent, compute_extent, get_fibonacci_points, scale_offset_pairs


def _as_tuples(points):
    return [(float(p.x), float(p.y)) for p in points]


def test_scale_offset_pairs(fibonacci_samples):
    pairs = scale_offset_pairs(fibonacci_samples)
    assert len(pairs) == 6
    assert pairs[0] == (1, 0)  # prev == 0
    assert pairs[1] == (1, 0)
    assert pairs[2] == (2, 1)
    assert float(pairs[5][0]) == pytest.approx(1.6)
    assert pairs[5][1] == 3


def test_standard_sequence_points(fibonacci_samples):
    points = get_fibonacci_points(fibonacci_samples)
    assert len(points) == 6
    # Tip of the initial unit segment, before any transform
    assert points[0] == Point2D(1, 0)

    expected = [(1, 0), (0, 1), (-1, 0), (1, -2), (4, 1), (-1, 6)]
    for actual, wanted in zip(_as_tuples(points), expected):
        assert actual == pytest.approx(wanted, abs=1e-5)


def test_first_index_skips_leading_samples(fibonacci_samples):
    assert len(get_fibonacci_points(fibonacci_samples, first_index=2)) == 4
    assert get_fibonacci_points(fibonacci_samples, first_index=6) == []


@pytest.mark.parametrize("length", [0, 1, 2, 3, 10, 30])
def test_length_law(length):
    samples = list(generate_fibonacci(40))[:length]
    expected = length - 1 if length >= 2 else 0
    assert len(get_fibonacci_points(samples)) == expected


def test_generator_is_deterministic():
    samples = generate_fibonacci(30)
    first = get_fibonacci_points(samples)
    second = get_fibonacci_points(samples)
    assert np.array(_as_tuples(first), dtype=np.float32).tobytes() == \
        np.array(_as_tuples(second), dtype=np.float32).tobytes()


def test_accepts_numpy_buffers(fibonacci_samples):
    as_array = np.array(fibonacci_samples, dtype=np.int32)
    assert get_fibonacci_points(as_array) == get_fibonacci_points(fibonacci_samples)


def test_extent(fibonacci_samples):
    extent = compute_extent(get_fibonacci_points(fibonacci_samples))
    assert float(extent.xmin) == pytest.approx(-1, abs=1e-5)
    assert float(extent.xmax) == pytest.approx(4, abs=1e-5)
    assert float(extent.ymin) == pytest.approx(-2, abs=1e-5)
    assert float(extent.ymax) == pytest.approx(6, abs=1e-5)
    assert float(extent.width) == pytest.approx(5, abs=1e-5)
    assert float(extent.height) == pytest.approx(8, abs=1e-5)


def test_extent_of_nothing():
    assert compute_extent([]) is None


def test_extent_of_single_point():
    assert compute_extent([Point2D(2, 3)]) == Extent(2, 2, 3, 3)

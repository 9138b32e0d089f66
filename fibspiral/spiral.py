"""Golden-ratio spiral point generator."""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .cursor import CircularScaleCursor
from .geometry import ROTATION_90, Point2D, Vector2D


@dataclass(frozen=True)
class Extent:
    """World-space bounding box of a point sequence."""
    xmin: float
    xmax: float
    ymin: float
    ymax: float

    @property
    def width(self) -> float:
        return abs(self.xmax - self.xmin)

    @property
    def height(self) -> float:
        return abs(self.ymax - self.ymin)


def scale_offset_pairs(samples: Sequence[int]) -> List[Tuple[np.float32, np.float32]]:
    """
    Derive (scale, distance) for each consecutive pair of samples.

    A zero ``prev`` gives (1, 0) so leading zeros do not divide by zero.
    """
    pairs = []
    for prev, next_ in zip(samples[:-1], samples[1:]):
        prev = int(prev)
        next_ = int(next_)
        if prev == 0:
            pairs.append((np.float32(1.0), np.float32(0.0)))
        else:
            pairs.append((np.float32(next_) / np.float32(prev), np.float32(next_ - prev)))
    return pairs


def get_fibonacci_points(samples: Sequence[int], first_index: int = 0) -> List[Point2D]:
    """
    Compute the spiral vertices for a Fibonacci sample buffer.

    Starting from the unit segment (0,0)->(1,0), every step scales and
    translates the running segment with the cursor's current matrix, then
    turns it a quarter. The tip is recorded *before* each step, so the first
    point is always (1, 0).

    Args:
        samples: Fibonacci numbers in order
        first_index: Number of leading samples to skip

    Returns:
        ``len(samples) - first_index - 1`` points, or an empty list if fewer
        than two samples remain
    """
    cursor = CircularScaleCursor()
    segment = Vector2D(Point2D(0.0, 0.0), Point2D(1.0, 0.0))
    points: List[Point2D] = []

    for scale, distance in scale_offset_pairs(samples[first_index:]):
        matrix = cursor.build(scale, distance)
        cursor.advance()

        transformed = ROTATION_90 @ (matrix @ segment)

        points.append(segment.tip)
        segment = transformed

    return points


def compute_extent(points: Sequence[Point2D]) -> Optional[Extent]:
    """Bounding box over all points, or None for an empty sequence."""
    if not points:
        return None

    xs = [p.x for p in points]
    ys = [p.y for p in points]
    return Extent(min(xs), max(xs), min(ys), max(ys))

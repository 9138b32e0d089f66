"""Geometric primitives and the fixed-shape affine transform kernel.

All coordinates and matrix cells are single precision (numpy.float32).
Operators act on a ``Vector2D`` relative to its anchor: the displacement
``tip - anchor`` is transformed and the anchor is added back.
"""

import math
from dataclasses import dataclass
from typing import Callable, Iterator, Tuple

import numpy as np


@dataclass(frozen=True)
class Point2D:
    """A point (or displacement) in the plane."""
    x: float
    y: float

    def __post_init__(self):
        object.__setattr__(self, 'x', np.float32(self.x))
        object.__setattr__(self, 'y', np.float32(self.y))

    def __add__(self, other: 'Point2D') -> 'Point2D':
        return Point2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Point2D') -> 'Point2D':
        return Point2D(self.x - other.x, self.y - other.y)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def length(self) -> float:
        return math.hypot(float(self.x), float(self.y))


ORIGIN = Point2D(0.0, 0.0)


@dataclass(frozen=True)
class Vector2D:
    """A directed segment from ``anchor`` to ``tip``."""
    anchor: Point2D
    tip: Point2D

    @property
    def displacement(self) -> Point2D:
        return self.tip - self.anchor

    def length(self) -> float:
        return self.displacement.length()


def transform_relative_to_anchor(
    transform: Callable[[Point2D], Point2D],
    vector: Vector2D,
    move_anchor: bool = False
) -> Vector2D:
    """
    Apply a point transform to a segment relative to its anchor.

    Args:
        transform: Function mapping a point to its image
        vector: Segment to transform
        move_anchor: If True, the anchor is shifted by the image of the
                     origin (the translation part of an affine transform)

    Returns:
        New segment; the input is left untouched
    """
    anchor = vector.anchor
    tip = transform(vector.tip - anchor) + anchor

    if move_anchor:
        anchor = transform(ORIGIN) + anchor

    return Vector2D(anchor, tip)


class _FixedMatrix:
    """Row-major float32 storage with checked (row, col) access."""

    ROWS = 2
    COLS = 2

    def __init__(self, storage):
        self._storage = np.array(storage, dtype=np.float32).reshape(self.ROWS, self.COLS)

    @property
    def rows(self) -> int:
        return self.ROWS

    @property
    def cols(self) -> int:
        return self.COLS

    def _check_index(self, key) -> Tuple[int, int]:
        row, col = key
        if not (0 <= row < self.ROWS and 0 <= col < self.COLS):
            raise IndexError(
                f"Index ({row}, {col}) out of range for {self.ROWS}x{self.COLS} matrix"
            )
        return row, col

    def __getitem__(self, key) -> np.float32:
        row, col = self._check_index(key)
        return self._storage[row, col]

    def as_array(self) -> np.ndarray:
        """Read-only copy of the matrix cells."""
        array = self._storage.copy()
        array.setflags(write=False)
        return array

    def apply_point(self, point: Point2D) -> Point2D:
        raise NotImplementedError

    def apply_vector(self, vector: Vector2D) -> Vector2D:
        raise NotImplementedError

    def __matmul__(self, other):
        if isinstance(other, Point2D):
            return self.apply_point(other)
        if isinstance(other, Vector2D):
            return self.apply_vector(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._storage.tolist()})"


class RotationMatrix(_FixedMatrix):
    """Counter-clockwise rotation by a fixed angle in degrees."""

    def __init__(self, angle: float = 0.0):
        radians = math.radians(angle)
        cos = math.cos(radians)
        sin = math.sin(radians)
        super().__init__([cos, -sin, sin, cos])
        self._storage.setflags(write=False)
        self.angle = float(angle)

    @classmethod
    def from_storage(cls, angle: float, storage) -> 'RotationMatrix':
        """Build a rotation from precomputed cells, skipping the trigonometry."""
        matrix = cls.__new__(cls)
        _FixedMatrix.__init__(matrix, storage)
        matrix._storage.setflags(write=False)
        matrix.angle = float(angle)
        return matrix

    @property
    def cos(self) -> np.float32:
        return self._storage[0, 0]

    @property
    def sin(self) -> np.float32:
        return self._storage[1, 0]

    def apply_point(self, point: Point2D) -> Point2D:
        s = self._storage
        x = s[0, 0] * point.x + s[0, 1] * point.y
        y = s[1, 0] * point.x + s[1, 1] * point.y
        return Point2D(x, y)

    def apply_vector(self, vector: Vector2D) -> Vector2D:
        # Rotation has no translation part, the anchor stays put
        return transform_relative_to_anchor(self.apply_point, vector)

    def compose(self, other: 'RotationMatrix') -> 'RotationMatrix':
        """Matrix product ``self · other``."""
        a = self._storage
        b = other._storage
        storage = [
            a[0, 0] * b[0, 0] + a[0, 1] * b[1, 0],
            a[0, 0] * b[0, 1] + a[0, 1] * b[1, 1],
            a[1, 0] * b[0, 0] + a[1, 1] * b[1, 0],
            a[1, 0] * b[0, 1] + a[1, 1] * b[1, 1],
        ]
        return RotationMatrix.from_storage(self.angle + other.angle, storage)

    def __matmul__(self, other):
        if isinstance(other, RotationMatrix):
            return self.compose(other)
        return super().__matmul__(other)


# Shared quarter turn, exact cells instead of cos(pi/2) ~ -4.4e-8
ROTATION_90 = RotationMatrix.from_storage(90.0, [0.0, -1.0, 1.0, 0.0])


class ScaleTranslateMatrix(_FixedMatrix):
    """Affine map ``[[kx, 0, tx], [0, ky, ty]]`` with no shear or rotation."""

    COLS = 3

    _OFF_DIAGONAL = ((0, 1), (1, 0))

    def __init__(self, kx: float = 1.0, ky: float = 1.0, tx: float = 0.0, ty: float = 0.0):
        super().__init__([kx, 0.0, tx, 0.0, ky, ty])

    def __setitem__(self, key, value: float):
        row, col = self._check_index(key)
        if (row, col) in self._OFF_DIAGONAL and value != 0:
            raise ValueError(f"Cell ({row}, {col}) is an off-diagonal scale term and must stay zero")
        self._storage[row, col] = value

    @property
    def scale_x(self) -> np.float32:
        return self._storage[0, 0]

    @scale_x.setter
    def scale_x(self, kx: float):
        self._storage[0, 0] = kx

    @property
    def scale_y(self) -> np.float32:
        return self._storage[1, 1]

    @scale_y.setter
    def scale_y(self, ky: float):
        self._storage[1, 1] = ky

    @property
    def translate_x(self) -> np.float32:
        return self._storage[0, 2]

    @translate_x.setter
    def translate_x(self, tx: float):
        self._storage[0, 2] = tx

    @property
    def translate_y(self) -> np.float32:
        return self._storage[1, 2]

    @translate_y.setter
    def translate_y(self, ty: float):
        self._storage[1, 2] = ty

    def apply_point(self, point: Point2D) -> Point2D:
        x = self.scale_x * point.x + self.translate_x
        y = self.scale_y * point.y + self.translate_y
        return Point2D(x, y)

    def apply_vector(self, vector: Vector2D) -> Vector2D:
        return transform_relative_to_anchor(self.apply_point, vector, move_anchor=True)

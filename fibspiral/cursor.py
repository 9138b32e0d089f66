"""Cyclic cursor producing the scale+translate step for each spiral arm."""

from typing import Tuple

from .geometry import ScaleTranslateMatrix


class CircularScaleCursor:
    """
    Walks a fixed 4-entry table, one entry per quarter turn of the spiral.

    Each entry is ``(scale_row, scale_col, sign, translate_row, translate_col)``:
    the scale factor goes to cell (scale_row, scale_col) and the signed
    distance to cell (translate_row, translate_col) of the 2x3 matrix.
    """

    TRANSFORMATIONS: Tuple[Tuple[int, int, int, int, int], ...] = (
        (0, 0, -1, 0, 2),
        (1, 1, -1, 1, 2),
        (0, 0,  1, 0, 2),
        (1, 1,  1, 1, 2),
    )

    def __init__(self, position: int = 0):
        self._position = position % len(self.TRANSFORMATIONS)

    @property
    def position(self) -> int:
        return self._position

    def advance(self) -> 'CircularScaleCursor':
        """Move to the next state, wrapping after the fourth."""
        self._position = (self._position + 1) % len(self.TRANSFORMATIONS)
        return self

    def offset(self, n: int) -> 'CircularScaleCursor':
        """Return a new cursor ``n`` states ahead of this one."""
        return CircularScaleCursor(self._position + n)

    def build(self, scale: float, distance: float) -> ScaleTranslateMatrix:
        """
        Build the scale+translate matrix for the current state.

        Args:
            scale: Ratio between consecutive samples
            distance: Difference between consecutive samples

        Returns:
            Identity matrix with the scale and signed distance placed
            according to the current table entry
        """
        scale_row, scale_col, sign, translate_row, translate_col = self.TRANSFORMATIONS[self._position]

        result = ScaleTranslateMatrix()
        result[scale_row, scale_col] = scale
        result[translate_row, translate_col] = sign * distance
        return result

    def __repr__(self) -> str:
        return f"CircularScaleCursor(position={self._position})"

"""World-to-screen mapping and draw primitives for the spiral."""

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .geometry import Point2D
from .renderers import Renderer, ScreenPoint
from .spiral import Extent


logger = logging.getLogger(__name__)

Rect = Tuple[ScreenPoint, ScreenPoint]  # (upper_left, lower_right)


@dataclass(frozen=True)
class ScreenMapping:
    """Offset then scale, with the y axis flipped so world-up is screen-up."""
    xoffset: float
    yoffset: float
    xscale: float
    yscale: float

    @classmethod
    def from_extent(cls, extent: Extent, width: int, height: int) -> 'ScreenMapping':
        """
        Fit an extent into a window.

        Args:
            extent: World-space bounding box
            width: Window width in pixels
            height: Window height in pixels

        Returns:
            Mapping that puts (xmin, ymax) at the window's top-left corner
        """
        world_width = float(extent.width)
        world_height = float(extent.height)

        # A flat extent has nothing to stretch
        xscale = width / world_width if world_width > 0 else 1.0
        yscale = height / world_height if world_height > 0 else 1.0

        return cls(
            xoffset=-float(extent.xmin),
            yoffset=float(extent.ymax),
            xscale=xscale,
            yscale=yscale
        )

    def rect(self, prev: Point2D, next_: Point2D) -> Rect:
        """Screen rectangle having ``prev`` and ``next_`` as opposite corners."""
        x1, y1 = map(float, prev)
        x2, y2 = map(float, next_)
        # screen y grows downwards
        y1, y2 = -y1, -y2

        x = (min(x1, x2) + self.xoffset) * self.xscale
        y = (min(y1, y2) + self.yoffset) * self.yscale
        xlength = abs(x2 - x1) * self.xscale
        ylength = abs(y2 - y1) * self.yscale

        return (x, y), (x + xlength, y + ylength)


def spiral_rectangles(points: Sequence[Point2D], mapping: ScreenMapping) -> List[Rect]:
    """
    One rectangle per consecutive point pair.

    Pairs are walked from the last point back to the first, so the
    outermost square comes first.
    """
    rects = []
    if not points:
        return rects

    prev = points[-1]
    for point in reversed(points[:-1]):
        rects.append(mapping.rect(prev, point))
        prev = point
    return rects


def draw_spiral(
    renderer: Renderer,
    points: Sequence[Point2D],
    extent: Extent,
    width: int,
    height: int
) -> bool:
    """
    Draw the spiral's squares into one renderer frame.

    Args:
        renderer: Sink receiving the draw primitives
        points: Spiral vertices in generation order
        extent: Bounding box of ``points``
        width: Window width in pixels
        height: Window height in pixels

    Returns:
        True if the frame was drawn, False on error
    """
    if extent is None or not points:
        logger.warning("Nothing to draw: empty point sequence")
        return False

    mapping = ScreenMapping.from_extent(extent, width, height)
    rects = spiral_rectangles(points, mapping)
    logger.info(f"Drawing {len(rects)} rectangles into {width}x{height} frame")

    try:
        renderer.begin_frame(width, height)
        for upper_left, lower_right in rects:
            renderer.draw_rect(upper_left, lower_right)
        renderer.end_frame()
        return True

    except Exception as e:
        logger.error(f"Error drawing spiral: {e}")
        return False

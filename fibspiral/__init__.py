"""Fibonacci Spiral - Library modules."""

from .cursor import CircularScaleCursor
from .drawing import ScreenMapping, draw_spiral, spiral_rectangles
from .errors import InvalidInputError, SessionBusyError, SourceUnavailableError, SpiralError
from .geometry import ROTATION_90, Point2D, RotationMatrix, ScaleTranslateMatrix, Vector2D
from .renderers import ImageRenderer, JsonLinesRenderer, RecordingRenderer, Renderer
from .session import SpiralRequest, SpiralResult, SpiralSession
from .spiral import Extent, compute_extent, get_fibonacci_points, scale_offset_pairs

__all__ = [
    'CircularScaleCursor',
    'ScreenMapping',
    'draw_spiral',
    'spiral_rectangles',
    'SpiralError',
    'InvalidInputError',
    'SourceUnavailableError',
    'SessionBusyError',
    'Point2D',
    'Vector2D',
    'RotationMatrix',
    'ScaleTranslateMatrix',
    'ROTATION_90',
    'Renderer',
    'RecordingRenderer',
    'JsonLinesRenderer',
    'ImageRenderer',
    'SpiralRequest',
    'SpiralResult',
    'SpiralSession',
    'Extent',
    'compute_extent',
    'get_fibonacci_points',
    'scale_offset_pairs',
]

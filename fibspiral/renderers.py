"""Renderer sinks receiving the spiral's draw primitives."""

import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, TextIO, Tuple

import cv2
import numpy as np


ScreenPoint = Tuple[float, float]


class Renderer:
    """Interface for anything that can draw a frame of rectangles."""

    def begin_frame(self, width: int, height: int):
        raise NotImplementedError

    def draw_rect(self, upper_left: ScreenPoint, lower_right: ScreenPoint):
        raise NotImplementedError

    def end_frame(self):
        raise NotImplementedError


class RecordingRenderer(Renderer):
    """Keeps every frame in memory."""

    def __init__(self):
        self.frames: List[List[Tuple[ScreenPoint, ScreenPoint]]] = []
        self.frame_sizes: List[Tuple[int, int]] = []
        self._current: Optional[List[Tuple[ScreenPoint, ScreenPoint]]] = None

    def begin_frame(self, width: int, height: int):
        self._current = []
        self.frame_sizes.append((width, height))

    def draw_rect(self, upper_left: ScreenPoint, lower_right: ScreenPoint):
        self._current.append((tuple(upper_left), tuple(lower_right)))

    def end_frame(self):
        self.frames.append(self._current)
        self._current = None

    @property
    def last_frame(self) -> Optional[List[Tuple[ScreenPoint, ScreenPoint]]]:
        return self.frames[-1] if self.frames else None


class JsonLinesRenderer(Renderer):
    """
    Writes one JSON request per primitive to a text stream.

    Each line has the shape ``{"id": n, "method": ..., "params": {...}}`` so
    an external drawing program can consume it line by line.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout
        self._request_id = 0

    def _send(self, method: str, params: Optional[Dict] = None):
        self._request_id += 1
        request = {
            "id": self._request_id,
            "method": method,
            "params": params or {}
        }
        print(json.dumps(request), file=self.stream, flush=True)

    def begin_frame(self, width: int, height: int):
        self._send("begin_frame", {"width": width, "height": height})

    def draw_rect(self, upper_left: ScreenPoint, lower_right: ScreenPoint):
        self._send("draw_rect", {
            "x1": float(upper_left[0]),
            "y1": float(upper_left[1]),
            "x2": float(lower_right[0]),
            "y2": float(lower_right[1]),
        })

    def end_frame(self):
        self._send("end_frame")


class ImageRenderer(Renderer):
    """Rasterizes rectangles with OpenCV and writes the frame to an image file."""

    def __init__(
        self,
        path: str,
        color: Tuple[int, int, int] = (255, 255, 255),
        background: Tuple[int, int, int] = (0, 0, 0),
        thickness: int = 1
    ):
        """
        Initialize image renderer.

        Args:
            path: Output image path; the extension selects the format
            color: Rectangle color (BGR)
            background: Canvas fill color (BGR)
            thickness: Line thickness in pixels
        """
        self.path = Path(path)
        self.color = color
        self.background = background
        self.thickness = thickness
        self.canvas: Optional[np.ndarray] = None
        self.logger = logging.getLogger(__name__)

    def begin_frame(self, width: int, height: int):
        self.canvas = np.full((height, width, 3), self.background, dtype=np.uint8)

    def draw_rect(self, upper_left: ScreenPoint, lower_right: ScreenPoint):
        pt1 = (int(round(upper_left[0])), int(round(upper_left[1])))
        pt2 = (int(round(lower_right[0])), int(round(lower_right[1])))
        cv2.rectangle(self.canvas, pt1, pt2, color=self.color,
                      thickness=self.thickness, lineType=cv2.LINE_AA)

    def end_frame(self):
        try:
            written = cv2.imwrite(str(self.path), self.canvas)
        except cv2.error as e:
            raise OSError(f"Could not write image {self.path}: {e}") from e
        if not written:
            raise OSError(f"Could not write image {self.path}")
        self.logger.info(f"Spiral image written to {self.path}")

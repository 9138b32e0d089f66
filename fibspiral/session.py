"""Producer/consumer session building a spiral in a background thread."""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np

from . import sequence
from .drawing import draw_spiral
from .errors import InvalidInputError, SessionBusyError
from .geometry import Point2D
from .renderers import Renderer
from .spiral import Extent, compute_extent, get_fibonacci_points


@dataclass(frozen=True)
class SpiralRequest:
    """
    What to build in one session.

    ``load_path=None`` generates F(0)..F(second) by formula and skips the
    first ``first`` samples; any other value loads that ``.bin`` buffer.
    """
    first: int = 0
    second: int = 0
    load_path: Optional[str] = None
    save: bool = False

    @property
    def from_file(self) -> bool:
        return self.load_path is not None

    def validate(self):
        """
        Reject the request before any session state changes.

        Raises:
            InvalidInputError: Indices out of range or out of order
            SourceUnavailableError: Load path unusable
        """
        if self.first < 0:
            raise InvalidInputError(f"First index must not be negative (got {self.first})")

        if self.from_file:
            sequence.check_source(self.load_path)
            return

        if self.second <= 0:
            raise InvalidInputError(f"Second index must be positive (got {self.second})")
        if self.first >= self.second:
            raise InvalidInputError(
                f"First index must be below second index (got {self.first} >= {self.second})"
            )
        if self.second > sequence.MAX_FIBONACCI_INDEX:
            raise InvalidInputError(
                f"Second index {self.second} exceeds {sequence.MAX_FIBONACCI_INDEX}"
            )


@dataclass(frozen=True)
class SpiralResult:
    """Output of the build phase, handed to the foreground on READY."""
    samples: np.ndarray
    points: List[Point2D]
    extent: Optional[Extent]


class SpiralSession:
    """
    One producer (worker thread) and one consumer (render loop).

    State is a single tag guarded by a condition variable. The worker
    publishes its result and switches to READY in the same critical section,
    so a consumer that observes READY also sees the finished result.
    """

    # State constants
    STATE_IDLE = "IDLE"
    STATE_BUILDING = "BUILDING"
    STATE_READY = "READY"
    STATE_RENDERING = "RENDERING"

    # Outcome of the last finished session
    OUTCOME_RENDERED = "RENDERED"
    OUTCOME_FAILED = "FAILED"
    OUTCOME_ABORTED = "ABORTED"

    # poll() results
    POLL_STARTED = "STARTED"
    POLL_PENDING = "PENDING"
    POLL_RENDERED = "RENDERED"
    POLL_FAILED = "FAILED"

    def __init__(
        self,
        renderer: Renderer,
        width: int,
        height: int,
        config: Optional[Dict] = None
    ):
        """
        Initialize session.

        Args:
            renderer: Sink receiving the rectangles of the render pass
            width: Window width in pixels
            height: Window height in pixels
            config: Configuration dictionary (``session`` and
                    ``persistence`` sections are used)
        """
        config = config or {}
        session_config = config.get('session') or {}
        self.persistence = config.get('persistence') or {}

        self.renderer = renderer
        self.width = width
        self.height = height
        self.spin_interval = session_config.get('spin_interval', 0.001)
        self.join_timeout = session_config.get('join_timeout', 5.0)
        self.logger = logging.getLogger(__name__)

        self._cond = threading.Condition()
        self._state = self.STATE_IDLE
        self._proceed = False
        self._proceed_event = threading.Event()
        self._cancelled = False
        self._finished = True  # no worker alive for the current generation
        self._generation = 0
        self._outcome: Optional[str] = None
        self._result: Optional[SpiralResult] = None
        self._worker: Optional[threading.Thread] = None

        self.request: Optional[SpiralRequest] = None
        self.started_at: Optional[float] = None
        self.render_passes = 0

    # ========== Flags ==========

    @property
    def state(self) -> str:
        with self._cond:
            return self._state

    @property
    def started(self) -> bool:
        with self._cond:
            return self._state != self.STATE_IDLE

    @property
    def sequence_ready(self) -> bool:
        with self._cond:
            return self._state in (self.STATE_READY, self.STATE_RENDERING)

    @property
    def proceed(self) -> bool:
        with self._cond:
            return self._proceed

    @property
    def result(self) -> Optional[SpiralResult]:
        with self._cond:
            return self._result

    @property
    def outcome(self) -> Optional[str]:
        with self._cond:
            return self._outcome

    def _transition(self, new_state: str):
        """Switch state; caller holds the condition."""
        old_state = self._state
        self._state = new_state
        self.logger.info(f"State transition: {old_state} → {new_state}")
        self._cond.notify_all()

    def _reset(self):
        """Return to IDLE with all flags cleared; caller holds the condition."""
        self._proceed = False
        self._proceed_event.clear()
        self._cancelled = False
        if self._state != self.STATE_IDLE:
            self._transition(self.STATE_IDLE)

    # ========== Foreground API ==========

    def start(self, request: SpiralRequest):
        """
        Start building a spiral in the background.

        Args:
            request: What to build

        Raises:
            InvalidInputError: Bad indices, no state changes
            SourceUnavailableError: Bad load path, no state changes
            SessionBusyError: A session is already active
        """
        request.validate()

        with self._cond:
            if self._state != self.STATE_IDLE:
                raise SessionBusyError(f"Session already active (state {self._state})")

            self._reset()
            self._generation += 1
            self._finished = False
            self._outcome = None
            self._result = None
            self.request = request
            self.started_at = time.monotonic()
            self._transition(self.STATE_BUILDING)

            self._worker = threading.Thread(
                target=self._run,
                args=(request, self._generation),
                name=f"spiral-worker-{self._generation}",
                daemon=True
            )

        self._worker.start()

    def wait_ready(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the sequence is ready or the worker gave up.

        Returns:
            True if READY was reached, False on failure or timeout
        """
        with self._cond:
            self._cond.wait_for(
                lambda: self._state in (self.STATE_READY, self.STATE_RENDERING) or self._finished,
                timeout
            )
            return self._state in (self.STATE_READY, self.STATE_RENDERING)

    def request_render(self) -> bool:
        """
        Let the worker run its single render pass.

        Returns:
            True the first time it is called while READY, False otherwise
        """
        with self._cond:
            if self._state != self.STATE_READY or self._proceed:
                return False
            self._proceed = True
        self._proceed_event.set()
        return True

    def join(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the worker to finish and return to IDLE.

        Args:
            timeout: Seconds to wait (default: ``session.join_timeout``)

        Returns:
            True if the worker finished, False if it is still running
        """
        worker = self._worker
        if worker is not None:
            worker.join(self.join_timeout if timeout is None else timeout)
            if worker.is_alive():
                self.logger.warning("Spiral worker still running after join timeout")
                return False

        with self._cond:
            self._reset()
        self._worker = None
        return True

    def abort(self, timeout: Optional[float] = None) -> bool:
        """
        Give up on the current session and force IDLE.

        A worker that is still building will not publish its result; one
        waiting for ``proceed`` exits without rendering.

        Returns:
            True if the worker finished within the timeout
        """
        with self._cond:
            if self._state == self.STATE_IDLE and self._finished:
                return True
            self._cancelled = True
            if not self._finished:
                self._outcome = self.OUTCOME_ABORTED
        self._proceed_event.set()

        self.logger.warning("Aborting spiral session")
        finished = self.join(timeout)

        if not finished:
            # Orphan the worker; its generation no longer matches
            with self._cond:
                self._generation += 1
                self._finished = True
                self._reset()
            self._worker = None

        return finished

    def poll(self, request: SpiralRequest) -> str:
        """
        One non-blocking foreground step.

        Starts a session when idle, and when the sequence is ready triggers
        the render pass and joins. A session whose worker gave up is reported
        once as failed instead of being restarted.

        Returns:
            One of the POLL_* constants
        """
        with self._cond:
            state = self._state
            failed = self._outcome == self.OUTCOME_FAILED
            if failed:
                self._outcome = None

        if failed:
            return self.POLL_FAILED

        if state == self.STATE_IDLE:
            self.start(request)
            return self.POLL_STARTED

        if state == self.STATE_READY:
            self.request_render()
            return self._join_rendered()

        if state == self.STATE_RENDERING:
            # An earlier join timed out while the pass was still drawing
            return self._join_rendered()

        return self.POLL_PENDING

    def _join_rendered(self) -> str:
        if not self.join():
            return self.POLL_PENDING
        return self.POLL_RENDERED

    # ========== Worker ==========

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation and not self._cancelled

    def _load_samples(self, request: SpiralRequest) -> np.ndarray:
        if request.from_file:
            return sequence.load_binary(request.load_path)
        return sequence.generate_fibonacci(request.second)

    def _save_samples(self, samples: np.ndarray):
        try:
            sequence.persist(
                samples,
                self.persistence.get('directory', '.'),
                self.persistence.get('binary_file', 'fibspiral.bin'),
                self.persistence.get('text_file', 'fibspiral.txt')
            )
        except OSError as e:
            self.logger.warning(f"Could not save Fibonacci sequence: {e}")

    def _wait_proceed(self) -> bool:
        if self.spin_interval > 0:
            return self._proceed_event.wait(self.spin_interval)
        return self._proceed_event.is_set()

    def _run(self, request: SpiralRequest, generation: int):
        """Build, wait for proceed, render (runs in background thread)."""
        try:
            try:
                samples = self._load_samples(request)
            except OSError as e:
                self.logger.error(f"Session aborted, cannot read source: {e}")
                self._fail(generation)
                return

            if request.save:
                self._save_samples(samples)

            points = get_fibonacci_points(samples, request.first)
            extent = compute_extent(points)
            self.logger.info(f"Built {len(points)} spiral points from {len(samples)} samples")

            with self._cond:
                if not self._is_current(generation):
                    return
                self._result = SpiralResult(samples, points, extent)
                self._transition(self.STATE_READY)

            # No recomputation while READY
            while not self._wait_proceed():
                pass

            with self._cond:
                if not self._is_current(generation):
                    return
                self._transition(self.STATE_RENDERING)

            if not draw_spiral(self.renderer, points, extent, self.width, self.height):
                self.logger.warning("Render pass produced no frame")

            with self._cond:
                if generation == self._generation:
                    self.render_passes += 1
                    self._outcome = self.OUTCOME_RENDERED

        except Exception as e:
            self.logger.error(f"Error in spiral worker: {e}", exc_info=True)
            self._fail(generation)

        finally:
            with self._cond:
                if generation == self._generation:
                    self._finished = True
                    self._cond.notify_all()

    def _fail(self, generation: int):
        with self._cond:
            if generation != self._generation:
                return
            self._outcome = self.OUTCOME_FAILED
            self._result = None
            self._reset()

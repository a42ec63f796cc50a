"""
Gesture Confirmation Timer: debounces per-frame labels into confirmed actions.

A pose must be held unchanged for hold_ms of wall-clock time before it fires.
Timing uses elapsed time only, never frame counts, so dropped frames or a
slow tick rate delay a confirmation but never change its outcome.

After firing, the label is latched: it cannot start a new hold until a
different label (None included) has been observed. Holding one pose for a
long time therefore fires exactly once.
"""

from __future__ import annotations

from collections.abc import Callable

from loguru import logger

from joyo.delivery.scheduler import monotonic_ms

from .classifier import PoseLabel

HOLD_MS = 1000


class GestureConfirmationTimer:
    """
    Per-frame hold tracker.

    observe() is fed by the frame loop, tick() by the animation loop; both may
    run at any rate.
    """

    def __init__(self, hold_ms: float = HOLD_MS, clock: Callable[[], float] = monotonic_ms):
        if hold_ms <= 0:
            raise ValueError("hold_ms must be positive")
        self.hold_ms = hold_ms
        self.clock = clock
        self.enabled = True
        self._label = PoseLabel.NONE
        self._start_ms: float | None = None

    @property
    def label(self) -> PoseLabel:
        return self._label

    @property
    def holding(self) -> bool:
        """True while a hold is running toward a confirmation."""
        return self.enabled and self._start_ms is not None

    def observe(self, label: PoseLabel, now_ms: float | None = None) -> None:
        """Record the label seen in the latest frame."""
        if not self.enabled or label is self._label:
            return

        now = self.clock() if now_ms is None else now_ms
        logger.debug(f"Pose {self._label.value} -> {label.value}")
        self._label = label
        self._start_ms = now if label.is_active else None

    def tick(self, now_ms: float | None = None) -> PoseLabel | None:
        """
        Check the running hold against the clock.

        Returns:
            The confirmed label on the tick where the hold completes, else None
        """
        if not self.holding:
            return None

        now = self.clock() if now_ms is None else now_ms
        if now - self._start_ms < self.hold_ms:
            return None

        confirmed = self._label
        self._start_ms = None
        logger.info(f"Gesture confirmed: {confirmed.value}")
        return confirmed

    def progress(self, now_ms: float | None = None) -> float:
        """Hold progress in percent (0-100) for a progress ring."""
        if not self.holding:
            return 0.0
        now = self.clock() if now_ms is None else now_ms
        return min(100.0, max(0.0, (now - self._start_ms) / self.hold_ms * 100.0))

    def reset(self) -> None:
        self._label = PoseLabel.NONE
        self._start_ms = None

    def disable(self) -> None:
        """Stop tracking immediately; nothing fires until enable()."""
        self.enabled = False
        self.reset()

    def enable(self) -> None:
        self.reset()
        self.enabled = True

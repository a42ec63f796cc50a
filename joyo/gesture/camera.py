"""
Gesture mode: exclusive ownership of the camera and the pose pipeline.

Enabling gesture mode acquires the camera and loads the landmark model.
Disabling it releases both, stops the frame and confirmation loops, and
resets the hold. Every exit path goes through the same ExitStack, so a
permission error, a model failure or an exception raised by the host all
leave nothing open.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import ExitStack, contextmanager
from typing import Any, Protocol

from loguru import logger

from joyo.core.errors import CameraUnavailable, GestureModeError, ModelLoadFailure

from .classifier import DEFAULT_THRESHOLDS, PoseLabel, PoseThresholds
from .confirmation import GestureConfirmationTimer
from .frame_loop import FrameClassificationLoop, LandmarkProvider


class CameraSource(Protocol):
    """A video source. read() returns (frame, timestamp_ms) or None when no frame is ready."""

    def read(self) -> tuple[Any, int] | None: ...

    def release(self) -> None: ...


class GestureController:
    """
    Owns gesture mode and runs its two periodic tasks.

    step_frame() is the frame-classification pass, step_tick() the
    hold-confirmation pass. Confirmed labels go to on_confirmed.
    """

    def __init__(
        self,
        camera_factory: Callable[[], CameraSource],
        provider_factory: Callable[[], LandmarkProvider],
        on_confirmed: Callable[[PoseLabel], Any],
        timer: GestureConfirmationTimer | None = None,
        thresholds: PoseThresholds = DEFAULT_THRESHOLDS,
    ):
        self.camera_factory = camera_factory
        self.provider_factory = provider_factory
        self.on_confirmed = on_confirmed
        self.timer = timer or GestureConfirmationTimer()
        self.thresholds = thresholds

        self.camera: CameraSource | None = None
        self.loop: FrameClassificationLoop | None = None
        self.last_error: GestureModeError | None = None
        self._stack: ExitStack | None = None
        self.timer.disable()

    @property
    def enabled(self) -> bool:
        return self._stack is not None

    def enable(self) -> None:
        """
        Acquire camera and model.

        Raises:
            CameraUnavailable: Camera could not be opened
            ModelLoadFailure: Landmark model could not be loaded
        """
        if self.enabled:
            return

        stack = ExitStack()
        try:
            try:
                camera = self.camera_factory()
            except Exception as e:
                raise CameraUnavailable(str(e)) from e
            stack.callback(camera.release)

            try:
                provider = self.provider_factory()
            except Exception as e:
                raise ModelLoadFailure(str(e)) from e
            close = getattr(provider, "close", None)
            if close is not None:
                stack.callback(close)
        except GestureModeError as e:
            stack.close()
            self.last_error = e
            logger.warning(f"Gesture mode unavailable: {type(e).__name__}: {e}")
            raise

        self.camera = camera
        self.loop = FrameClassificationLoop(provider, self.timer, self.thresholds)
        self.timer.enable()
        self.last_error = None
        self._stack = stack
        logger.info("Gesture mode enabled")

    def disable(self) -> None:
        """Release everything. Safe to call when already disabled."""
        self.timer.disable()
        if self._stack is None:
            return
        stack, self._stack = self._stack, None
        self.camera = None
        self.loop = None
        try:
            stack.close()
        finally:
            logger.info("Gesture mode disabled")

    @contextmanager
    def active(self) -> Iterator[GestureController]:
        """Scope gesture mode to a with-block."""
        self.enable()
        try:
            yield self
        finally:
            self.disable()

    def step_frame(self) -> PoseLabel | None:
        """
        Classify the next available frame, if any.

        Raises:
            CameraUnavailable: Reading the camera failed (gesture mode is now off)
            ModelLoadFailure: Detection failed (gesture mode is now off)
        """
        if not self.enabled:
            return None
        try:
            grabbed = self.camera.read()
        except Exception as e:
            self.last_error = CameraUnavailable(str(e))
            logger.warning(f"Camera read failed, disabling gesture mode: {e}")
            self.disable()
            raise self.last_error from e
        if grabbed is None:
            return None
        frame, timestamp_ms = grabbed
        try:
            return self.loop.process(frame, timestamp_ms)
        except Exception as e:
            self.last_error = ModelLoadFailure(str(e))
            logger.warning(f"Pose detection failed, disabling gesture mode: {type(e).__name__}: {e}")
            self.disable()
            raise self.last_error from e

    def step_tick(self) -> PoseLabel | None:
        """Check the hold; deliver and return a confirmed label."""
        if not self.enabled:
            return None
        confirmed = self.timer.tick()
        if confirmed is not None:
            self.on_confirmed(confirmed)
        return confirmed

    def progress(self) -> float:
        return self.timer.progress() if self.enabled else 0.0

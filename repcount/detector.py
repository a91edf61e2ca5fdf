"""Push-up detection lifecycle: countdown, calibration, per-frame counting.

:class:`PushupDetector` ties a pose source to the calibration, evaluation,
state machine and feedback steps, and reports every change to a
presentation sink. It is driven cooperatively: either by :meth:`run`, which
evaluates one frame per ``frame_interval``, or by an external caller invoking
:meth:`process_frame` once per frame.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Protocol, Sequence

from repcount.config import DetectionConfig
from repcount.quality.failures import CalibrationFailure, DetectorStateError, SourceExhausted
from repcount.repdetect import feedback
from repcount.repdetect.baseline import Baseline, calibrate
from repcount.repdetect.state_machine import RepetitionSession, StepResult, step
from repcount.signals.kinematics import evaluate
from repcount.vision.keypoints import Pose, PoseSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetectorStatus:
    """Snapshot handed to the presentation layer."""

    count: int
    running: bool
    calibrated: bool
    message: str


class PresentationSink(Protocol):
    def update(self, status: DetectorStatus) -> None:
        ...

    def render_pose(self, pose: Optional[Pose]) -> None:
        ...


class NullSink:
    """Sink that discards everything."""

    def update(self, status: DetectorStatus) -> None:
        pass

    def render_pose(self, pose: Optional[Pose]) -> None:
        pass


class PushupDetector:
    """Counts push-ups from a :class:`PoseSource`.

    Args:
        source: Polled once per frame and once per calibration attempt.
        sink: Receives status snapshots and raw poses.
        config: Thresholds, timings and pacing.
        clock: Returns the current time in seconds; used when a frame is
            processed without an explicit timestamp.
        sleep: Awaitable delay used for countdown, calibration pacing and the
            run loop.
    """

    def __init__(
        self,
        source: PoseSource,
        sink: Optional[PresentationSink] = None,
        config: DetectionConfig = DetectionConfig(),
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.source = source
        self.sink = sink or NullSink()
        self.config = config
        self._clock = clock
        self._sleep = sleep
        self.session = RepetitionSession()
        self.baseline: Optional[Baseline] = None
        self.running = False
        self.message = ""
        self.last_step: Optional[StepResult] = None
        self._generation = 0
        self._starting = False

    @property
    def count(self) -> int:
        return self.session.count

    @property
    def status(self) -> DetectorStatus:
        return DetectorStatus(
            count=self.session.count,
            running=self.running,
            calibrated=self.baseline is not None,
            message=self.message,
        )

    def _publish(self, message: Optional[str] = None) -> DetectorStatus:
        if message is not None:
            self.message = message
        status = self.status
        self.sink.update(status)
        return status

    async def start(self) -> bool:
        """Count down, calibrate and arm detection.

        Returns True when detection is running afterwards. Returns False when
        calibration failed or :meth:`stop` was called while starting.

        Raises:
            DetectorStateError: if detection is already running or starting.
        """
        if self.running or self._starting:
            raise DetectorStateError("detection is already running")

        self._generation += 1
        generation = self._generation
        self._starting = True
        try:
            self.baseline = None
            for remaining in range(self.config.countdown_seconds, 0, -1):
                self._publish(feedback.PREPARING.format(seconds=remaining))
                await self._sleep(1.0)
                if generation != self._generation:
                    return False

            self._publish(feedback.CALIBRATING)
            try:
                baseline = await calibrate(self.source, self.config.calibration, sleep=self._sleep)
            except CalibrationFailure as exc:
                logger.warning("Calibration failed: %s", exc)
                if generation == self._generation:
                    self._publish(feedback.CALIBRATION_FAILED)
                return False

            if generation != self._generation:
                logger.info("Start cancelled during calibration")
                return False

            self.baseline = baseline
            self.session.rearm()
            self.running = True
            self._publish(feedback.DETECTION_STARTED)
            return True
        finally:
            if generation == self._generation:
                self._starting = False

    def stop(self, message: str = feedback.DETECTION_STOPPED) -> DetectorStatus:
        """Stop detection, discard the baseline and rearm; the count is kept."""
        self._generation += 1
        self.running = False
        self._starting = False
        self.baseline = None
        self.session.rearm()
        self.last_step = None
        return self._publish(message)

    def reset_count(self) -> DetectorStatus:
        """Zero the count; calibration and position are left alone."""
        self.session.reset_count()
        return self._publish(feedback.COUNT_RESET)

    def _estimate(self) -> Sequence[Pose]:
        try:
            return self.source.estimate()
        except SourceExhausted:
            logger.info("Pose source exhausted")
            if self.running or self.baseline is not None:
                self.stop(feedback.CAPTURE_ENDED)
            raise
        except Exception:  # noqa: BLE001 - a failing source only skips this frame
            logger.exception("Pose source failed; skipping frame")
            return ()

    def process_frame(self, now: Optional[float] = None) -> DetectorStatus:
        """Poll the source once and, while running, advance the state machine.

        Args:
            now: Frame timestamp in seconds; defaults to the detector clock.

        Raises:
            SourceExhausted: propagated after detection has been stopped.
        """
        poses = self._estimate()
        pose = poses[0] if poses else None
        self.sink.render_pose(pose)

        if pose is None or not self.running or self.baseline is None:
            return self._publish()

        signals = evaluate(pose, self.baseline, self.config.posture)
        if signals is None:
            logger.debug("Shoulders not visible; frame skipped")
            return self._publish()

        timestamp = self._clock() if now is None else now
        result = step(self.session, signals, self.baseline, timestamp, self.config.repetition)
        self.last_step = result
        return self._publish(feedback.classify(result, self.session.count))

    async def run(self) -> None:
        """Process frames until stopped or the source is exhausted."""
        generation = self._generation
        while self.running and generation == self._generation:
            try:
                self.process_frame()
            except SourceExhausted:
                break
            await self._sleep(self.config.frame_interval)

"""
Service helpers wiring the HTTP surface to a single push-up detector.

Clients run the pose model themselves and post keypoints frame by frame; the
latest posted pose is what the detector sees when it polls its source.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Optional, Sequence

from repcount.config import DetectionConfig
from repcount.detector import PushupDetector
from repcount.quality.failures import DetectorStateError
from repcount.vision.keypoints import Pose

COUNTDOWN_ENV = "REPCOUNT_COUNTDOWN_SECONDS"


class LatestPoseSource:
    """Pose source returning the most recently pushed pose until replaced."""

    def __init__(self) -> None:
        self._pose: Optional[Pose] = None

    def push(self, pose: Optional[Pose]) -> None:
        self._pose = pose

    def estimate(self) -> Sequence[Pose]:
        return [self._pose] if self._pose is not None else []


@dataclass
class DetectionService:
    source: LatestPoseSource
    detector: PushupDetector
    client_clock: Optional[bool] = None

    def check_clock(self, timestamp: Optional[float]) -> None:
        """Keep one clock per running session.

        The first frame evaluated while detection runs decides whether the
        session uses client timestamps or server time.

        Raises:
            DetectorStateError: if a later frame switches clocks.
        """
        if not self.detector.running:
            self.client_clock = None
            return
        uses_client_clock = timestamp is not None
        if self.client_clock is None:
            self.client_clock = uses_client_clock
        elif self.client_clock != uses_client_clock:
            expected = "a timestamp" if self.client_clock else "no timestamp"
            raise DetectorStateError(f"frames in this session must carry {expected}")


def config_from_env(base: DetectionConfig = DetectionConfig()) -> DetectionConfig:
    """Apply environment overrides to ``base``."""
    countdown = os.getenv(COUNTDOWN_ENV)
    if countdown is None:
        return base
    try:
        return replace(base, countdown_seconds=int(countdown))
    except ValueError as exc:
        raise ValueError(f"{COUNTDOWN_ENV} must be a non-negative integer, got {countdown!r}") from exc


def build_service(config: Optional[DetectionConfig] = None) -> DetectionService:
    source = LatestPoseSource()
    detector = PushupDetector(source, config=config or config_from_env())
    return DetectionService(source=source, detector=detector)

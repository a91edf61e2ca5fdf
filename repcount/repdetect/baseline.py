"""Baseline posture acquisition.

Before counting starts the user holds the top push-up position while a few
poses are sampled. The accepted samples are averaged into a :class:`Baseline`
that every later frame is compared against. Sampling is paced with
``asyncio.sleep`` so the event loop keeps serving frames in between.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Sequence

import numpy as np

from repcount.config import CalibrationConfig
from repcount.quality.failures import CalibrationFailure, SourceExhausted
from repcount.signals.geometry import midpoint_y
from repcount.vision.keypoints import (
    LEFT_HIP,
    LEFT_SHOULDER,
    RIGHT_HIP,
    RIGHT_SHOULDER,
    Pose,
    PoseSource,
    keypoint_at,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BaselineSample:
    """Reference measurements taken from a single pose."""

    shoulder_y: float
    hip_y: float
    shoulder_width: float


@dataclass(frozen=True)
class Baseline:
    """Averaged reference posture used for shoulder-drop comparisons.

    Attributes:
        shoulder_y: Mean shoulder midpoint y at calibration time.
        hip_y: Mean hip midpoint y at calibration time.
        shoulder_width: Mean horizontal shoulder span.
        body_height: Shoulder-to-hip distance, floored at the configured minimum.
        shoulder_drop_threshold: ``body_height`` scaled by the drop ratio.
    """

    shoulder_y: float
    hip_y: float
    shoulder_width: float
    body_height: float
    shoulder_drop_threshold: float

    @classmethod
    def from_samples(
        cls, samples: Sequence[BaselineSample], config: CalibrationConfig = CalibrationConfig()
    ) -> "Baseline":
        """Average accepted samples; raises :class:`CalibrationFailure` when empty."""
        if not samples:
            raise CalibrationFailure("no reliable pose observed during calibration")

        shoulder_y = float(np.mean([s.shoulder_y for s in samples]))
        hip_y = float(np.mean([s.hip_y for s in samples]))
        shoulder_width = float(np.mean([s.shoulder_width for s in samples]))
        body_height = max(config.min_body_height, abs(hip_y - shoulder_y))
        return cls(
            shoulder_y=shoulder_y,
            hip_y=hip_y,
            shoulder_width=shoulder_width,
            body_height=body_height,
            shoulder_drop_threshold=body_height * config.shoulder_drop_ratio,
        )


def sample_pose(pose: Pose, config: CalibrationConfig = CalibrationConfig()) -> Optional[BaselineSample]:
    """Measure one pose, returning None when it is not usable as a reference."""
    shoulder_y = midpoint_y(pose, LEFT_SHOULDER, RIGHT_SHOULDER, config.min_confidence)
    hip_y = midpoint_y(pose, LEFT_HIP, RIGHT_HIP, config.min_confidence)
    shoulder_width = max(
        abs(keypoint_at(pose, LEFT_SHOULDER).x - keypoint_at(pose, RIGHT_SHOULDER).x), 1.0
    )
    if shoulder_y is None or hip_y is None or shoulder_width <= config.min_shoulder_width:
        return None
    return BaselineSample(shoulder_y=shoulder_y, hip_y=hip_y, shoulder_width=shoulder_width)


def _first_pose(source: PoseSource) -> Optional[Pose]:
    try:
        poses = source.estimate()
    except SourceExhausted:
        logger.debug("Pose source exhausted during calibration")
        return None
    except Exception:  # noqa: BLE001 - a failing source only costs this attempt
        logger.exception("Pose source failed during calibration")
        return None
    return poses[0] if poses else None


async def calibrate(
    source: PoseSource,
    config: CalibrationConfig = CalibrationConfig(),
    *,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> Baseline:
    """Sample ``config.attempts`` poses and average the usable ones.

    Args:
        source: Pose source polled once per attempt.
        config: Attempt budget, pacing and acceptance thresholds.
        sleep: Awaitable delay used between attempts.

    Returns:
        The averaged :class:`Baseline`.

    Raises:
        CalibrationFailure: if no attempt produced an acceptable sample.
    """

    collected: List[BaselineSample] = []
    for attempt in range(config.attempts):
        await sleep(config.sample_delay)
        pose = _first_pose(source)
        if pose is None:
            logger.debug("Calibration attempt %d: no pose", attempt + 1)
            continue
        sample = sample_pose(pose, config)
        if sample is None:
            logger.debug("Calibration attempt %d: pose rejected", attempt + 1)
            continue
        collected.append(sample)

    baseline = Baseline.from_samples(collected, config)
    logger.info(
        "Calibrated from %d/%d samples: shoulder_y=%.1f body_height=%.1f",
        len(collected),
        config.attempts,
        baseline.shoulder_y,
        baseline.body_height,
    )
    return baseline

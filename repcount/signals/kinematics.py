"""Per-frame push-up signals derived from keypoints and the calibrated baseline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from repcount.config import PostureConfig
from repcount.quality.failures import shoulders_visible
from repcount.repdetect.baseline import Baseline
from repcount.signals.geometry import angle_degrees
from repcount.vision.keypoints import (
    LEFT_ELBOW,
    LEFT_SHOULDER,
    LEFT_WRIST,
    RIGHT_ELBOW,
    RIGHT_SHOULDER,
    RIGHT_WRIST,
    Keypoint,
    Pose,
    keypoint_at,
)


@dataclass(frozen=True)
class Signals:
    """Inputs to the repetition state machine for one frame.

    Attributes:
        elbow_angle: Mean of the left and right elbow angles (degrees).
        shoulder_drop: Shoulder midpoint y minus baseline shoulder y; positive
            when the shoulders sit lower in the image than at calibration.
        wrists_under: Both wrists visible and roughly below their shoulders.
    """

    elbow_angle: float
    shoulder_drop: float
    wrists_under: bool


def _wrist_under(wrist: Keypoint, shoulder: Keypoint, shoulder_width: float, config: PostureConfig) -> bool:
    return (
        wrist.confidence >= config.wrist_min_confidence
        and abs(wrist.x - shoulder.x) < shoulder_width * config.wrist_alignment_ratio
    )


def evaluate(pose: Pose, baseline: Baseline, config: PostureConfig = PostureConfig()) -> Optional[Signals]:
    """Compute :class:`Signals` for a pose, or None when the shoulders are not visible.

    Elbow angles are computed for both sides regardless of elbow/wrist
    confidence; poorly placed joints degrade the angle instead of rejecting
    the frame.
    """
    if not shoulders_visible(pose, config.min_confidence):
        return None

    left_shoulder = keypoint_at(pose, LEFT_SHOULDER)
    right_shoulder = keypoint_at(pose, RIGHT_SHOULDER)
    left_elbow = keypoint_at(pose, LEFT_ELBOW)
    right_elbow = keypoint_at(pose, RIGHT_ELBOW)
    left_wrist = keypoint_at(pose, LEFT_WRIST)
    right_wrist = keypoint_at(pose, RIGHT_WRIST)

    shoulder_mid_y = (left_shoulder.y + right_shoulder.y) / 2.0
    shoulder_width = abs(left_shoulder.x - right_shoulder.x)

    elbow_left = angle_degrees(left_shoulder, left_elbow, left_wrist)
    elbow_right = angle_degrees(right_shoulder, right_elbow, right_wrist)

    wrists_under = _wrist_under(left_wrist, left_shoulder, shoulder_width, config) and _wrist_under(
        right_wrist, right_shoulder, shoulder_width, config
    )

    return Signals(
        elbow_angle=(elbow_left + elbow_right) / 2.0,
        shoulder_drop=shoulder_mid_y - baseline.shoulder_y,
        wrists_under=wrists_under,
    )

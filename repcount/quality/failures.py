"""Failure modes surfaced by calibration and per-frame processing.

None of these are fatal to a running detector: calibration failure becomes a
retry prompt, source problems skip a frame, and an exhausted source stops
detection.
"""

from __future__ import annotations

from repcount.vision.keypoints import LEFT_SHOULDER, RIGHT_SHOULDER, Pose, keypoint_at


class RepCountError(Exception):
    """Base class for repcount errors."""


class CalibrationFailure(RepCountError):
    """Raised when no reliable pose was observed during calibration."""


class SourceExhausted(RepCountError):
    """Raised by a pose source whose underlying capture has ended."""


class DetectorStateError(RepCountError, RuntimeError):
    """Raised when a control command does not fit the detector's state."""


def shoulders_visible(pose: Pose, min_confidence: float) -> bool:
    """Return True when both shoulders clear the confidence gate."""
    return (
        keypoint_at(pose, LEFT_SHOULDER).confidence >= min_confidence
        and keypoint_at(pose, RIGHT_SHOULDER).confidence >= min_confidence
    )

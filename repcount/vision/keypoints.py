"""Keypoint and pose types plus the pose source interface.

Poses follow the MoveNet SinglePose (COCO) ordering of 17 keypoints. Pose
production itself (model, camera, backend) lives outside this package; any
object implementing :class:`PoseSource` can drive the detector.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Protocol, Sequence, Tuple

KEYPOINT_NAMES = (
    "nose", "left_eye", "right_eye", "left_ear", "right_ear",
    "left_shoulder", "right_shoulder", "left_elbow", "right_elbow",
    "left_wrist", "right_wrist", "left_hip", "right_hip",
    "left_knee", "right_knee", "left_ankle", "right_ankle",
)

NAME_TO_IDX = {name: i for i, name in enumerate(KEYPOINT_NAMES)}

NUM_KEYPOINTS = len(KEYPOINT_NAMES)

LEFT_SHOULDER = NAME_TO_IDX["left_shoulder"]
RIGHT_SHOULDER = NAME_TO_IDX["right_shoulder"]
LEFT_ELBOW = NAME_TO_IDX["left_elbow"]
RIGHT_ELBOW = NAME_TO_IDX["right_elbow"]
LEFT_WRIST = NAME_TO_IDX["left_wrist"]
RIGHT_WRIST = NAME_TO_IDX["right_wrist"]
LEFT_HIP = NAME_TO_IDX["left_hip"]
RIGHT_HIP = NAME_TO_IDX["right_hip"]


@dataclass(frozen=True)
class Keypoint:
    """Single 2D keypoint in image coordinates (y grows downward)."""

    x: float
    y: float
    confidence: float = 0.0


@dataclass(frozen=True)
class Pose:
    """Keypoints for one detected body in one frame."""

    keypoints: Tuple[Keypoint, ...]

    def __post_init__(self) -> None:
        if len(self.keypoints) != NUM_KEYPOINTS:
            raise ValueError(
                f"Pose requires {NUM_KEYPOINTS} keypoints, got {len(self.keypoints)}"
            )


class PoseSource(Protocol):
    """Anything that can be polled for the poses visible right now.

    Implementations should be cheap to call repeatedly and report transient
    failures by returning an empty sequence.
    """

    def estimate(self) -> Sequence[Pose]:
        ...


def keypoint_at(pose: Pose, index: int) -> Keypoint:
    """Return the keypoint stored at a fixed layout index."""
    return pose.keypoints[index]


def _confidence_from_obj(obj: Mapping[str, Any]) -> float:
    for key in ("score", "probability", "confidence"):
        value = obj.get(key)
        if value is not None:
            return float(value)
    return 0.0


def keypoint_from_obj(obj: Mapping[str, Any]) -> Keypoint:
    """Build a :class:`Keypoint` from a detector-style dict.

    Confidence is read from ``score``, then ``probability``, then
    ``confidence``; a keypoint without any of them is treated as unseen.
    """
    return Keypoint(x=float(obj["x"]), y=float(obj["y"]), confidence=_confidence_from_obj(obj))


def pose_from_obj(keypoints: Optional[Iterable[Mapping[str, Any]]]) -> Optional[Pose]:
    """Parse a list of keypoint dicts into a :class:`Pose` (``None`` stays ``None``)."""
    if keypoints is None:
        return None
    return Pose(keypoints=tuple(keypoint_from_obj(kp) for kp in keypoints))


def pose_to_obj(pose: Pose) -> list[dict]:
    """Inverse of :func:`pose_from_obj`, using the ``score`` key for confidence."""
    return [{"x": kp.x, "y": kp.y, "score": kp.confidence} for kp in pose.keypoints]

"""JSONL pose recordings and a replay source.

Each line stores one frame: its timestamp in seconds and either the pose
keypoints or ``null`` when no body was detected. The format is intentionally
simple to ease inspection and to let recorded sessions drive the detector
deterministically.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence

from repcount.quality.failures import SourceExhausted
from repcount.vision.keypoints import Pose, pose_from_obj, pose_to_obj


@dataclass(frozen=True)
class PoseFrame:
    """Pose data for a single frame."""

    timestamp: float
    pose: Optional[Pose]


def _frame_to_json(frame: PoseFrame) -> str:
    payload = {
        "timestamp": frame.timestamp,
        "keypoints": pose_to_obj(frame.pose) if frame.pose is not None else None,
    }
    return json.dumps(payload)


def _frame_from_obj(obj: dict) -> PoseFrame:
    return PoseFrame(timestamp=float(obj["timestamp"]), pose=pose_from_obj(obj.get("keypoints")))


def save_pose_frames(
    recording_file: Path, frames: Iterable[PoseFrame], *, overwrite: bool = True
) -> Path:
    """Write pose frames to a JSONL recording.

    Args:
        recording_file: Destination path for the JSONL file.
        frames: Iterable of PoseFrame instances.
        overwrite: Whether to overwrite an existing file.
    """

    recording_file.parent.mkdir(parents=True, exist_ok=True)
    if recording_file.exists() and not overwrite:
        raise FileExistsError(f"Recording already exists: {recording_file}")

    with recording_file.open("w", encoding="utf-8") as fh:
        for frame in frames:
            fh.write(_frame_to_json(frame))
            fh.write("\n")
    return recording_file


def load_pose_frames(recording_file: Path) -> Iterator[PoseFrame]:
    """Read pose frames from a JSONL recording."""
    with recording_file.open("r", encoding="utf-8") as fh:
        for line in fh:
            if not line.strip():
                continue
            yield _frame_from_obj(json.loads(line))


class ReplayPoseSource:
    """Pose source that steps through recorded frames, one per ``estimate()``.

    :meth:`clock` reports the timestamp of the most recently returned frame,
    so a detector using it as its clock sees recorded time instead of wall
    time.
    """

    def __init__(self, frames: Iterable[PoseFrame]) -> None:
        self._frames: List[PoseFrame] = list(frames)
        self._position = 0
        self._timestamp = self._frames[0].timestamp if self._frames else 0.0

    @classmethod
    def from_file(cls, recording_file: Path) -> "ReplayPoseSource":
        return cls(load_pose_frames(recording_file))

    def __len__(self) -> int:
        return len(self._frames)

    @property
    def remaining(self) -> int:
        return len(self._frames) - self._position

    def clock(self) -> float:
        return self._timestamp

    def estimate(self) -> Sequence[Pose]:
        if self._position >= len(self._frames):
            raise SourceExhausted("recording has no more frames")
        frame = self._frames[self._position]
        self._position += 1
        self._timestamp = frame.timestamp
        return [frame.pose] if frame.pose is not None else []

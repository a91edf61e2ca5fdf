import math
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from repcount.detector import DetectorStatus
from repcount.vision.keypoints import NUM_KEYPOINTS, Keypoint, Pose


class KeypointIn(BaseModel):
    x: float
    y: float
    score: Optional[float] = Field(None, ge=0.0, le=1.0, description="Keypoint confidence; omitted means unseen.")


class FrameRequest(BaseModel):
    """
    One video frame as seen by the client-side pose model.
    """
    keypoints: Optional[List[KeypointIn]] = Field(
        None,
        description=f"{NUM_KEYPOINTS} keypoints in MoveNet order, or null/empty when no body was detected.",
    )
    timestamp: Optional[float] = Field(
        None,
        description=(
            "Frame time in seconds on a monotonic client clock; defaults to server time. "
            "A running session must either always send it or never send it."
        ),
    )

    @field_validator("keypoints")
    @classmethod
    def keypoints_complete(cls, v: Optional[List[KeypointIn]]) -> Optional[List[KeypointIn]]:
        if v is not None and len(v) not in (0, NUM_KEYPOINTS):
            raise ValueError(f"keypoints must be empty or contain exactly {NUM_KEYPOINTS} entries")
        if v is not None and not all(math.isfinite(kp.x) and math.isfinite(kp.y) for kp in v):
            raise ValueError("keypoint coordinates must be finite")
        return v

    @field_validator("timestamp")
    @classmethod
    def timestamp_finite(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and not math.isfinite(v):
            raise ValueError("timestamp must be finite")
        return v

    def to_pose(self) -> Optional[Pose]:
        if not self.keypoints:
            return None
        return Pose(
            keypoints=tuple(
                Keypoint(x=kp.x, y=kp.y, confidence=kp.score if kp.score is not None else 0.0)
                for kp in self.keypoints
            )
        )


class StatusResponse(BaseModel):
    count: int
    running: bool
    calibrated: bool
    message: str = Field("", description="Latest feedback or lifecycle message.")

    @classmethod
    def from_status(cls, status: DetectorStatus) -> "StatusResponse":
        return cls(
            count=status.count,
            running=status.running,
            calibrated=status.calibrated,
            message=status.message,
        )

"""Synthetic push-up poses for tests.

Shoulders sit 100px apart at ``shoulder_y``; hips are ``body_height`` below.
In the ``up`` phase the arms are straight (elbow angle 180) and in the
``down`` phase the elbows are bent to roughly 72 degrees, wrists kept under
the shoulders in both cases.
"""

from repcount.vision.keypoints import (
    LEFT_ELBOW,
    LEFT_HIP,
    LEFT_SHOULDER,
    LEFT_WRIST,
    NUM_KEYPOINTS,
    RIGHT_ELBOW,
    RIGHT_HIP,
    RIGHT_SHOULDER,
    RIGHT_WRIST,
    Keypoint,
    Pose,
)

LEFT_X = 100.0
RIGHT_X = 200.0


def pushup_pose(
    phase: str = "up",
    shoulder_y: float = 100.0,
    body_height: float = 200.0,
    confidence: float = 0.9,
    shoulder_confidence=None,
    wrist_confidence=None,
    hip_confidence=None,
) -> Pose:
    shoulder_conf = confidence if shoulder_confidence is None else shoulder_confidence
    wrist_conf = confidence if wrist_confidence is None else wrist_confidence
    hip_conf = confidence if hip_confidence is None else hip_confidence

    points = [Keypoint(x=150.0, y=0.0, confidence=0.0) for _ in range(NUM_KEYPOINTS)]
    points[LEFT_SHOULDER] = Keypoint(LEFT_X, shoulder_y, shoulder_conf)
    points[RIGHT_SHOULDER] = Keypoint(RIGHT_X, shoulder_y, shoulder_conf)
    points[LEFT_HIP] = Keypoint(LEFT_X, shoulder_y + body_height, hip_conf)
    points[RIGHT_HIP] = Keypoint(RIGHT_X, shoulder_y + body_height, hip_conf)

    if phase == "up":
        points[LEFT_ELBOW] = Keypoint(LEFT_X, shoulder_y + 50.0, confidence)
        points[RIGHT_ELBOW] = Keypoint(RIGHT_X, shoulder_y + 50.0, confidence)
        points[LEFT_WRIST] = Keypoint(LEFT_X, shoulder_y + 100.0, wrist_conf)
        points[RIGHT_WRIST] = Keypoint(RIGHT_X, shoulder_y + 100.0, wrist_conf)
    elif phase == "down":
        points[LEFT_ELBOW] = Keypoint(LEFT_X - 40.0, shoulder_y + 40.0, confidence)
        points[RIGHT_ELBOW] = Keypoint(RIGHT_X + 40.0, shoulder_y + 40.0, confidence)
        points[LEFT_WRIST] = Keypoint(LEFT_X, shoulder_y + 60.0, wrist_conf)
        points[RIGHT_WRIST] = Keypoint(RIGHT_X, shoulder_y + 60.0, wrist_conf)
    else:
        raise ValueError(f"unknown phase: {phase}")

    return Pose(keypoints=tuple(points))


class ScriptedSource:
    """Pose source whose next answer is set by the test."""

    def __init__(self, pose=None) -> None:
        self.pose = pose
        self.calls = 0
        self.error = None

    def estimate(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return [self.pose] if self.pose is not None else []


class ListSource:
    """Pose source returning a fixed sequence of answers, then empty lists."""

    def __init__(self, answers) -> None:
        self.answers = list(answers)

    def estimate(self):
        if not self.answers:
            return []
        answer = self.answers.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return [answer] if answer is not None else []

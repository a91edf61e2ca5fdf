"""Quick check for the replay pipeline.

Writes a synthetic recording (calibration frames followed by a few slow
push-ups with some dropped frames) and replays it through the CLI.
"""

from pathlib import Path

from repcount.cli import main as cli_main
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
from repcount.vision.recording import PoseFrame, save_pose_frames

FPS = 30.0


def synthetic_pose(depth: float) -> Pose:
    """Front-facing push-up pose; ``depth`` 0 is the top, 1 the bottom."""
    shoulder_y = 200.0 + 40.0 * depth
    bend = 40.0 * depth
    points = [Keypoint(320.0, 0.0, 0.0)] * NUM_KEYPOINTS
    points[LEFT_SHOULDER] = Keypoint(270.0, shoulder_y, 0.9)
    points[RIGHT_SHOULDER] = Keypoint(370.0, shoulder_y, 0.9)
    points[LEFT_ELBOW] = Keypoint(270.0 - bend, shoulder_y + 50.0 - 10.0 * depth, 0.8)
    points[RIGHT_ELBOW] = Keypoint(370.0 + bend, shoulder_y + 50.0 - 10.0 * depth, 0.8)
    points[LEFT_WRIST] = Keypoint(270.0, shoulder_y + 100.0 - 40.0 * depth, 0.8)
    points[RIGHT_WRIST] = Keypoint(370.0, shoulder_y + 100.0 - 40.0 * depth, 0.8)
    points[LEFT_HIP] = Keypoint(270.0, 400.0, 0.9)
    points[RIGHT_HIP] = Keypoint(370.0, 400.0, 0.9)
    return Pose(keypoints=tuple(points))


def build_frames(reps: int = 3) -> list:
    frames = []
    t = 0.0
    for _ in range(int(FPS)):
        frames.append(PoseFrame(t, synthetic_pose(0.0)))
        t += 1 / FPS
    for rep in range(reps):
        # 1s down, 0.5s hold, 1s up, 0.5s rest
        profile = (
            [i / FPS for i in range(int(FPS))]
            + [1.0] * int(FPS / 2)
            + [1.0 - i / FPS for i in range(int(FPS))]
            + [0.0] * int(FPS / 2)
        )
        for idx, depth in enumerate(profile):
            pose = None if (rep == 1 and idx % 7 == 0) else synthetic_pose(depth)
            frames.append(PoseFrame(t, pose))
            t += 1 / FPS
    return frames


def main() -> None:
    recording = Path("examples/_tmp_session.jsonl")
    save_pose_frames(recording, build_frames())
    print(f"wrote {recording}")
    cli_main(["replay", str(recording)])


if __name__ == "__main__":
    main()

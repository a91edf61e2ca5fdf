"""repcount: push-up repetition counting from 2D pose keypoints.

This package hosts baseline calibration, per-frame posture signals, the
Up/Down repetition state machine and feedback messages, plus a detector that
drives them from any pose source.
"""

__all__ = [
    "cli",
    "config",
    "detector",
]

__version__ = "0.1.0"

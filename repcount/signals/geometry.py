"""Geometric primitives over pose keypoints."""

from __future__ import annotations

from typing import Optional

import numpy as np

from repcount.vision.keypoints import Keypoint, Pose, keypoint_at

DEGENERATE_ANGLE = 180.0


def midpoint_y(pose: Pose, a_idx: int, b_idx: int, min_confidence: float = 0.35) -> Optional[float]:
    """Mean y of two keypoints, or None when either is below ``min_confidence``."""
    a = keypoint_at(pose, a_idx)
    b = keypoint_at(pose, b_idx)
    if a.confidence < min_confidence or b.confidence < min_confidence:
        return None
    return (a.y + b.y) / 2.0


def angle_degrees(a: Keypoint, b: Keypoint, c: Keypoint) -> float:
    """
    Calculate the angle ABC (at point b) in degrees.

    A zero-length ray has no direction; the joint is then reported as fully
    extended (180) rather than raising.

    Returns:
        Angle in degrees (0-180)
    """
    ba = np.array([a.x - b.x, a.y - b.y], dtype=float)
    bc = np.array([c.x - b.x, c.y - b.y], dtype=float)

    nba = float(np.hypot(*ba))
    nbc = float(np.hypot(*bc))
    if nba == 0.0 or nbc == 0.0:
        return DEGENERATE_ANGLE

    cosv = float(np.dot(ba, bc) / (nba * nbc))
    cosv = max(-1.0, min(1.0, cosv))

    return float(np.degrees(np.arccos(cosv)))

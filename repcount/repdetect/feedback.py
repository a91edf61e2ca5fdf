"""User-facing status messages derived from a state machine step."""

from __future__ import annotations

from repcount.repdetect.state_machine import StepResult, Transition

REP_COUNTED = "Valid push-up! Total: {count}"
HOLD_LONGER = "Hold the bottom position a little longer for it to count."
TOO_FAST = "Fast movement detected, slow down."
ADJUST_POSTURE = "Adjust posture: elbows and alignment needed."
DESCENT_HOLD = "Descent detected, hold the position."
RETURN_TO_TOP = "Return to the top position."

# Lifecycle messages emitted by the detector.
PREPARING = "Get ready... {seconds}"
CALIBRATING = "Calibrating, hold the top position."
CALIBRATION_FAILED = "Calibration failed, try positioning yourself better."
DETECTION_STARTED = "Detection started. Do push-ups with correct posture."
DETECTION_STOPPED = "Detection stopped."
CAPTURE_ENDED = "Capture ended, detection stopped."
COUNT_RESET = "Count reset."


def classify(result: StepResult, count: int) -> str:
    """Pick the message for one frame.

    A completed repetition wins; timing gate failures only occur on the
    Down -> Up path and come next; otherwise the detection flags decide.
    """
    if result.transition is Transition.REP_COUNTED:
        return REP_COUNTED.format(count=count)
    if result.transition is Transition.HOLD_TOO_SHORT:
        return HOLD_LONGER
    if result.transition is Transition.TOO_FAST:
        return TOO_FAST
    if not result.down_detected and not result.up_detected:
        return ADJUST_POSTURE
    if result.down_detected:
        return DESCENT_HOLD
    return RETURN_TO_TOP

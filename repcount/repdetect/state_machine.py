"""Up/Down repetition state machine with hysteresis and time-based debouncing.

A repetition is counted on the Down -> Up transition only. The down and up
predicates use different elbow-angle and shoulder-drop thresholds so frames
near the midpoint satisfy neither and cannot make the state oscillate. The
minimum hold and minimum interval gates reject pose jitter and implausibly
fast double counts.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from repcount.config import RepetitionConfig
from repcount.repdetect.baseline import Baseline
from repcount.signals.kinematics import Signals


class Position(str, Enum):
    UP = "up"
    DOWN = "down"


class Transition(str, Enum):
    """What a single frame did to the session."""

    NONE = "none"
    DESCENT = "descent"
    REP_COUNTED = "rep_counted"
    HOLD_TOO_SHORT = "hold_too_short"
    TOO_FAST = "too_fast"


@dataclass
class RepetitionSession:
    """Mutable repetition state owned by a single detector.

    Timestamps are in seconds. ``last_rep_timestamp`` stays None until the
    first counted repetition.
    """

    position: Position = Position.UP
    last_rep_timestamp: Optional[float] = None
    last_down_timestamp: Optional[float] = None
    count: int = 0

    def reset_count(self) -> None:
        """Zero the counter without touching position or timing."""
        self.count = 0

    def rearm(self) -> None:
        """Return to the top position and forget timing, keeping the count."""
        self.position = Position.UP
        self.last_rep_timestamp = None
        self.last_down_timestamp = None


@dataclass(frozen=True)
class StepResult:
    down_detected: bool
    up_detected: bool
    transition: Transition


def is_down(signals: Signals, baseline: Baseline, config: RepetitionConfig = RepetitionConfig()) -> bool:
    return (
        signals.elbow_angle < config.down_angle
        and signals.shoulder_drop > baseline.shoulder_drop_threshold * config.down_drop_fraction
        and signals.wrists_under
    )


def is_up(signals: Signals, baseline: Baseline, config: RepetitionConfig = RepetitionConfig()) -> bool:
    return (
        signals.elbow_angle > config.up_angle
        and signals.shoulder_drop < baseline.shoulder_drop_threshold * config.up_drop_fraction
    )


def step(
    session: RepetitionSession,
    signals: Signals,
    baseline: Baseline,
    now: float,
    config: RepetitionConfig = RepetitionConfig(),
) -> StepResult:
    """Advance ``session`` by one frame observed at ``now`` (seconds)."""
    down_detected = is_down(signals, baseline, config)
    up_detected = is_up(signals, baseline, config)
    transition = Transition.NONE

    if session.position is Position.UP and down_detected:
        session.position = Position.DOWN
        session.last_down_timestamp = now
        transition = Transition.DESCENT
    elif session.position is Position.DOWN and up_detected:
        held = now - (session.last_down_timestamp or 0.0)
        since_last_rep = (
            now - session.last_rep_timestamp if session.last_rep_timestamp is not None else float("inf")
        )
        if held >= config.min_down_hold and since_last_rep >= config.min_rep_interval:
            session.count += 1
            session.last_rep_timestamp = now
            session.position = Position.UP
            transition = Transition.REP_COUNTED
        elif held < config.min_down_hold:
            transition = Transition.HOLD_TOO_SHORT
        else:
            transition = Transition.TOO_FAST

    return StepResult(down_detected=down_detected, up_detected=up_detected, transition=transition)

"""Shared configuration used across calibration, evaluation and rep detection."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CalibrationConfig:
    """Parameters for baseline acquisition.

    Attributes:
        attempts: Number of poses requested from the source.
        sample_delay: Seconds to yield before each attempt so a new frame can
            arrive.
        min_confidence: Keypoint confidence required for shoulder/hip midpoints.
        min_shoulder_width: Samples with a narrower shoulder span (pixels) are
            rejected.
        min_body_height: Lower bound applied to the shoulder-to-hip distance.
        shoulder_drop_ratio: Fraction of body height that defines the
            shoulder drop threshold.
    """

    attempts: int = 6
    sample_delay: float = 0.12
    min_confidence: float = 0.35
    min_shoulder_width: float = 10.0
    min_body_height: float = 20.0
    shoulder_drop_ratio: float = 0.18

    def __post_init__(self) -> None:
        if self.attempts < 1:
            raise ValueError("attempts must be at least 1")
        if self.sample_delay < 0:
            raise ValueError("sample_delay must be non-negative")


@dataclass(frozen=True)
class PostureConfig:
    """Confidence gates and form tolerances for per-frame evaluation."""

    min_confidence: float = 0.35
    wrist_min_confidence: float = 0.25
    wrist_alignment_ratio: float = 0.9


@dataclass(frozen=True)
class RepetitionConfig:
    """Hysteresis thresholds and debounce timings for the Up/Down machine.

    Angles are in degrees; drop fractions are relative to the baseline
    shoulder drop threshold; timings are in seconds.
    """

    down_angle: float = 90.0
    up_angle: float = 160.0
    down_drop_fraction: float = 0.85
    up_drop_fraction: float = 0.45
    min_down_hold: float = 0.25
    min_rep_interval: float = 0.8

    def __post_init__(self) -> None:
        if self.down_angle >= self.up_angle:
            raise ValueError("down_angle must be lower than up_angle")
        if self.up_drop_fraction >= self.down_drop_fraction:
            raise ValueError("up_drop_fraction must be lower than down_drop_fraction")
        if self.min_down_hold < 0 or self.min_rep_interval < 0:
            raise ValueError("debounce timings must be non-negative")


@dataclass(frozen=True)
class DetectionConfig:
    """Top-level configuration consumed by :class:`repcount.detector.PushupDetector`."""

    calibration: CalibrationConfig = field(default_factory=CalibrationConfig)
    posture: PostureConfig = field(default_factory=PostureConfig)
    repetition: RepetitionConfig = field(default_factory=RepetitionConfig)
    countdown_seconds: int = 10
    frame_interval: float = 1 / 60

    def __post_init__(self) -> None:
        if self.countdown_seconds < 0:
            raise ValueError("countdown_seconds must be non-negative")
        if self.frame_interval < 0:
            raise ValueError("frame_interval must be non-negative")

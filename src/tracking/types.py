"""
Data types and structures for the Tracking module.

Provides type-safe containers for configuration and per-frame results.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, Field, model_validator

from src.common.types import Quadrilateral


class TrackingStatus(Enum):
    """Outcome of processing one video frame."""

    TRACKED = "TRACKED"  # Fresh measurement fused into the filter
    PREDICTED = "PREDICTED"  # No trusted measurement, filter prediction only
    LOST = "LOST"  # Too many frames without a detection, tracker reset
    NONE = "NONE"  # Nothing to show (never measured)


class ValidationFailure(Enum):
    """Reasons a detected quadrilateral is discarded before scoring."""

    CORNERS_TOO_CLOSE = "Corners Too Close"
    AREA_TOO_SMALL = "Area Too Small"
    NONE = "None"


class KalmanConfig(BaseModel):
    """Per-corner Kalman filter configuration.

    Attributes:
        process_noise: Diagonal of Q (same value on all four state entries)
        measurement_noise: Diagonal of R (same value on x and y)
        initial_position_variance: Initial P entry for x and y
        initial_velocity_variance: Initial P entry for vx and vy
        initial_dt: Time step assumed for the very first measurement (s)
        min_dt: Floor applied to the elapsed time between frames (s)
    """

    process_noise: float = Field(default=1e-2, gt=0.0)
    measurement_noise: float = Field(default=3e-1, gt=0.0)
    initial_position_variance: float = Field(default=1.0, gt=0.0)
    initial_velocity_variance: float = Field(default=10.0, gt=0.0)
    initial_dt: float = Field(default=1.0 / 30.0, gt=0.0)
    min_dt: float = Field(default=1e-3, gt=0.0)


class StabilityConfig(BaseModel):
    """Motion-stability hysteresis configuration.

    Only the ordering of the thresholds (stable < unstable) and the sample
    count asymmetry are enforced; the values themselves are tuning knobs.

    Attributes:
        smoothing_alpha: EMA factor applied to both magnitudes
        accel_stable_threshold: Filtered acceleration below which a sample is calm (g)
        gyro_stable_threshold: Filtered rotation rate below which a sample is calm (rad/s)
        accel_unstable_threshold: Filtered acceleration above which a sample is shaky (g)
        gyro_unstable_threshold: Filtered rotation rate above which a sample is shaky (rad/s)
        required_stable_samples: Consecutive calm samples needed to become stable
        required_unstable_samples: Consecutive shaky samples needed to lose stability
    """

    smoothing_alpha: float = Field(default=0.2, gt=0.0, le=1.0)
    accel_stable_threshold: float = Field(default=0.08, ge=0.0)
    gyro_stable_threshold: float = Field(default=0.10, ge=0.0)
    accel_unstable_threshold: float = Field(default=0.20, ge=0.0)
    gyro_unstable_threshold: float = Field(default=0.25, ge=0.0)
    required_stable_samples: int = Field(default=5, ge=1)
    required_unstable_samples: int = Field(default=10, ge=1)

    @model_validator(mode="after")
    def _check_hysteresis(self) -> "StabilityConfig":
        if self.accel_stable_threshold >= self.accel_unstable_threshold:
            raise ValueError(
                f"accel_stable_threshold ({self.accel_stable_threshold}) must be "
                f"less than accel_unstable_threshold ({self.accel_unstable_threshold})"
            )
        if self.gyro_stable_threshold >= self.gyro_unstable_threshold:
            raise ValueError(
                f"gyro_stable_threshold ({self.gyro_stable_threshold}) must be "
                f"less than gyro_unstable_threshold ({self.gyro_unstable_threshold})"
            )
        if self.required_unstable_samples <= self.required_stable_samples:
            raise ValueError(
                "required_unstable_samples must be greater than "
                "required_stable_samples"
            )
        return self


class ScoringConfig(BaseModel):
    """Document-likeness scoring configuration.

    Attributes:
        size_weight: Weight of the relative-area sub-score
        rectangularity_weight: Weight of the opposite-side similarity sub-score
        aspect_ratio_weight: Weight of the aspect-ratio sub-score
        angle_weight: Weight of the corner-angle sub-score
        ideal_aspect_ratio: Ratio that earns a full aspect-ratio score
        aspect_ratio_range: Inclusive (min, max) range scored by distance to ideal
        aspect_ratio_slope: Penalty per unit of distance from the ideal ratio
        out_of_range_score: Aspect-ratio score outside the range
        max_angle_deviation: Mean deviation from 90 degrees that scores zero (rad)
    """

    size_weight: float = Field(default=0.4, ge=0.0)
    rectangularity_weight: float = Field(default=0.3, ge=0.0)
    aspect_ratio_weight: float = Field(default=0.2, ge=0.0)
    angle_weight: float = Field(default=0.1, ge=0.0)
    ideal_aspect_ratio: float = Field(default=0.75, gt=0.0)
    aspect_ratio_range: Tuple[float, float] = (0.65, 1.5)
    aspect_ratio_slope: float = Field(default=1.5, ge=0.0)
    out_of_range_score: float = Field(default=0.1, ge=0.0, le=1.0)
    max_angle_deviation: float = Field(default=math.pi / 4, gt=0.0)

    @model_validator(mode="after")
    def _check_range(self) -> "ScoringConfig":
        low, high = self.aspect_ratio_range
        if low >= high:
            raise ValueError(
                f"aspect_ratio_range: min ({low}) must be less than max ({high})"
            )
        return self


class ValidationConfig(BaseModel):
    """Detector-output sanity checks.

    Attributes:
        enabled: Drop invalid candidates before scoring
        min_corner_distance: Minimum distance between any two corners
        min_area: Minimum shoelace area
    """

    enabled: bool = True
    min_corner_distance: float = Field(default=5.0, ge=0.0)
    min_area: float = Field(default=1000.0, ge=0.0)


class ProcessorConfig(BaseModel):
    """Per-frame orchestration configuration.

    Attributes:
        use_motion_gate: Require device stability before trusting measurements
        max_missed_frames: Frames without a trusted measurement (no detection
            or device moving) tolerated before the tracked quadrilateral
            is dropped
    """

    use_motion_gate: bool = True
    max_missed_frames: int = Field(default=8, ge=0)


class TrackingConfig(BaseModel):
    """Complete tracking module configuration."""

    kalman: KalmanConfig = Field(default_factory=KalmanConfig)
    stability: StabilityConfig = Field(default_factory=StabilityConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    processor: ProcessorConfig = Field(default_factory=ProcessorConfig)


@dataclass
class CandidateScore:
    """Sub-scores of one candidate quadrilateral."""

    quadrilateral: Quadrilateral
    size: float
    rectangularity: float
    aspect_ratio: float
    angle: float
    total: float


@dataclass
class FrameResult:
    """
    Output of processing one video frame.

    Attributes:
        status: What the tracker did this frame.
        quadrilateral: Smoothed or predicted quadrilateral to display (None if
            there is nothing to show).
        measurement: Best detector candidate fused this frame, if any.
        is_stable: Motion gate output used for the decision.
        candidate_count: Candidates that survived validation.
        missed_frames: Consecutive frames without a trusted measurement.
    """

    status: TrackingStatus
    quadrilateral: Optional[Quadrilateral]
    measurement: Optional[Quadrilateral]
    is_stable: bool
    candidate_count: int
    missed_frames: int

    def has_quadrilateral(self) -> bool:
        """Check if the frame produced something to display."""
        return self.quadrilateral is not None

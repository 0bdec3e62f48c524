"""
Motion-stability gate with hysteresis.

Classifies a stream of device-motion samples (gravity-free acceleration and
angular rate) into a stable/unstable flag. Losing stability is deliberately
harder than gaining it: the unstable thresholds sit well above the stable
ones and more consecutive shaky samples are required than calm ones.
"""

import logging
from typing import Optional, Sequence, Union

import numpy as np

from src.tracking.types import StabilityConfig

logger = logging.getLogger(__name__)

Vector3 = Union[Sequence[float], np.ndarray]


def _as_vector3(value: Vector3, name: str) -> np.ndarray:
    arr = np.asarray(value, dtype=np.float64)
    if arr.shape != (3,):
        raise ValueError(f"Expected {name} of shape (3,), got {arr.shape}")
    return arr


class StabilityGate:
    """
    Hysteresis state machine over smoothed motion magnitudes.

    Per sample:
    1. Magnitude of acceleration and rotation rate
    2. Exponential smoothing of both magnitudes
    3. Classification: calm (both below stable thresholds), shaky (either
       above its unstable threshold), or dead zone
    4. Counter update and flag flip once enough consecutive samples agree

    Example:
        >>> gate = StabilityGate()
        >>> for accel, rate in motion_samples:
        ...     stable = gate.update(accel, rate)
        >>> gate.stop()
    """

    def __init__(self, config: Optional[StabilityConfig] = None):
        self.config = config if config is not None else StabilityConfig()
        self._filtered_accel = 0.0
        self._filtered_gyro = 0.0
        self._stable_count = 0
        self._unstable_count = 0
        self._is_stable = False

    @property
    def is_stable(self) -> bool:
        return self._is_stable

    @property
    def filtered_acceleration(self) -> float:
        return self._filtered_accel

    @property
    def filtered_rotation_rate(self) -> float:
        return self._filtered_gyro

    @property
    def stable_count(self) -> int:
        return self._stable_count

    @property
    def unstable_count(self) -> int:
        return self._unstable_count

    def update(self, acceleration: Vector3, rotation_rate: Vector3) -> bool:
        """
        Feed one motion sample.

        Args:
            acceleration: 3D linear acceleration with gravity removed (g).
            rotation_rate: 3D angular rate (rad/s).

        Returns:
            Current stability flag.

        Raises:
            ValueError: If either input is not a 3-vector.
        """
        cfg = self.config
        accel_mag = float(np.linalg.norm(_as_vector3(acceleration, "acceleration")))
        gyro_mag = float(np.linalg.norm(_as_vector3(rotation_rate, "rotation_rate")))

        alpha = cfg.smoothing_alpha
        self._filtered_accel = alpha * accel_mag + (1 - alpha) * self._filtered_accel
        self._filtered_gyro = alpha * gyro_mag + (1 - alpha) * self._filtered_gyro

        calm = (
            self._filtered_accel < cfg.accel_stable_threshold
            and self._filtered_gyro < cfg.gyro_stable_threshold
        )
        shaky = (
            self._filtered_accel > cfg.accel_unstable_threshold
            or self._filtered_gyro > cfg.gyro_unstable_threshold
        )

        if calm:
            self._stable_count += 1
            self._unstable_count = 0
            if not self._is_stable and self._stable_count >= cfg.required_stable_samples:
                self._is_stable = True
                logger.info(
                    f"Motion STABLE (accel: {self._filtered_accel:.3f}, "
                    f"gyro: {self._filtered_gyro:.3f})"
                )
        elif shaky:
            self._unstable_count += 1
            self._stable_count = 0
            if self._is_stable and self._unstable_count >= cfg.required_unstable_samples:
                self._is_stable = False
                logger.info(
                    f"Motion UNSTABLE (accel: {self._filtered_accel:.3f}, "
                    f"gyro: {self._filtered_gyro:.3f})"
                )
        else:
            # Dead zone between thresholds
            self._stable_count = max(0, self._stable_count - 1)
            self._unstable_count = max(0, self._unstable_count - 1)

        return self._is_stable

    def reset(self) -> None:
        """Clear filtered magnitudes and counters; report unstable."""
        self._filtered_accel = 0.0
        self._filtered_gyro = 0.0
        self._stable_count = 0
        self._unstable_count = 0
        self._is_stable = False

    def stop(self) -> None:
        """End of a capture session."""
        logger.debug("Stability gate stopped")
        self.reset()

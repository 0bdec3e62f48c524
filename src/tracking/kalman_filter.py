"""
Constant-velocity Kalman filter for a single tracked corner.

State vector is [px, py, vx, vy]. Only position is observed. The process
noise is a fixed diagonal and is not scaled with the time step.
"""

import logging

import numpy as np
from filterpy.kalman import KalmanFilter

from src.common.types import Point2D

logger = logging.getLogger(__name__)

# Measurement model: observe position only
H = np.array([[1.0, 0.0, 0.0, 0.0], [0.0, 1.0, 0.0, 0.0]])


def transition_matrix(dt: float) -> np.ndarray:
    """State transition F(dt) for the constant-velocity model."""
    return np.array(
        [
            [1.0, 0.0, dt, 0.0],
            [0.0, 1.0, 0.0, dt],
            [0.0, 0.0, 1.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def inverse_2x2(m: np.ndarray) -> np.ndarray:
    """
    Closed-form inverse of a 2x2 matrix.

    A singular matrix yields the zero matrix, so the corresponding update
    leaves the state untouched.
    """
    a, b = m[0, 0], m[0, 1]
    c, d = m[1, 0], m[1, 1]
    det = a * d - b * c
    inv_det = 1.0 / det if det != 0 else 0.0
    return np.array([[d, -b], [-c, a]]) * inv_det


class CornerKalmanFilter:
    """
    Predicts and smooths the position of one quadrilateral corner.

    Wraps a filterpy KalmanFilter; the transition matrix is rebuilt from
    `dt` before every prediction.

    Example:
        >>> kf = CornerKalmanFilter(Point2D(x=10, y=20))
        >>> kf.predict(1 / 30)
        Point2D(x=10.00, y=20.00)
        >>> kf.update(Point2D(x=12, y=20))  # pulled towards the measurement
    """

    def __init__(
        self,
        initial: Point2D,
        process_noise: float = 1e-2,
        measurement_noise: float = 3e-1,
        initial_position_variance: float = 1.0,
        initial_velocity_variance: float = 10.0,
    ):
        self.filter = KalmanFilter(dim_x=4, dim_z=2)
        self.filter.x = np.array([[initial.x], [initial.y], [0.0], [0.0]])
        self.filter.P = np.diag(
            [
                initial_position_variance,
                initial_position_variance,
                initial_velocity_variance,
                initial_velocity_variance,
            ]
        )
        self.filter.H = H.copy()
        self.filter.Q = np.eye(4) * process_noise
        self.filter.R = np.eye(2) * measurement_noise
        self.filter.inv = inverse_2x2

    @property
    def position(self) -> Point2D:
        return Point2D(x=self.filter.x[0, 0], y=self.filter.x[1, 0])

    @property
    def velocity(self) -> Point2D:
        return Point2D(x=self.filter.x[2, 0], y=self.filter.x[3, 0])

    @property
    def covariance(self) -> np.ndarray:
        return self.filter.P.copy()

    def predict(self, dt: float) -> Point2D:
        """
        Propagate the state by `dt` seconds.

        `dt` is expected to be positive; callers clamp it.

        Returns:
            Predicted position.
        """
        self.filter.F = transition_matrix(dt)
        self.filter.predict()
        return self.position

    def update(self, measurement: Point2D) -> Point2D:
        """
        Correct the state with a measured position.

        Returns:
            Updated position.
        """
        self.filter.update(np.array([[measurement.x], [measurement.y]]))

        innovation = self.filter.y
        logger.debug(
            f"Corner update: innovation=({innovation[0, 0]:.2f}, {innovation[1, 0]:.2f}), "
            f"position=({self.filter.x[0, 0]:.2f}, {self.filter.x[1, 0]:.2f})"
        )
        return self.position

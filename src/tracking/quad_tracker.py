"""
Whole-quadrilateral tracker built from four corner Kalman filters.

The tracker is either `Uninitialized` (never measured, or reset) or
`Tracking` (four filters plus the timestamp of the last processed frame).
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Union

from src.common.types import Point2D, Quadrilateral
from src.tracking.kalman_filter import CornerKalmanFilter
from src.tracking.types import KalmanConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Uninitialized:
    """No measurement received since construction or the last reset."""


@dataclass
class Tracking:
    """Filters for [TL, TR, BR, BL] and the last processed timestamp (s)."""

    filters: List[CornerKalmanFilter]
    last_timestamp: float


TrackerState = Union[Uninitialized, Tracking]


class QuadrilateralTracker:
    """
    Smooths a detected quadrilateral across frames and predicts it when no
    measurement is available.

    Instances are not thread-safe; drive each one from a single sequence of
    frames.

    Example:
        >>> tracker = QuadrilateralTracker()
        >>> smoothed = tracker.update(detected_quad, timestamp=0.0)
        >>> predicted = tracker.predict(timestamp=0.033)
        >>> tracker.reset()
    """

    def __init__(self, config: Optional[KalmanConfig] = None):
        self.config = config if config is not None else KalmanConfig()
        self._state: TrackerState = Uninitialized()

    @property
    def state(self) -> TrackerState:
        return self._state

    @property
    def is_tracking(self) -> bool:
        return isinstance(self._state, Tracking)

    def reset(self) -> None:
        """Discard all filter state and the last timestamp."""
        if self.is_tracking:
            logger.info("Tracker reset")
        self._state = Uninitialized()

    def _new_filter(self, corner: Point2D) -> CornerKalmanFilter:
        return CornerKalmanFilter(
            corner,
            process_noise=self.config.process_noise,
            measurement_noise=self.config.measurement_noise,
            initial_position_variance=self.config.initial_position_variance,
            initial_velocity_variance=self.config.initial_velocity_variance,
        )

    def _elapsed(self, timestamp: float, last_timestamp: float) -> float:
        return max(self.config.min_dt, timestamp - last_timestamp)

    def update(self, measured: Quadrilateral, timestamp: float) -> Quadrilateral:
        """
        Fuse a measured quadrilateral observed at `timestamp`.

        Every corner runs a predict step before its update so the covariance
        grows with the elapsed time even when measurements arrive irregularly.

        Args:
            measured: Detected corners in order [TL, TR, BR, BL].
            timestamp: Monotonic frame time in seconds.

        Returns:
            Smoothed quadrilateral.
        """
        if isinstance(self._state, Tracking):
            dt = self._elapsed(timestamp, self._state.last_timestamp)
            self._state.last_timestamp = timestamp
        else:
            logger.info("Tracker started")
            dt = self.config.initial_dt
            self._state = Tracking(
                filters=[self._new_filter(c) for c in measured.corners],
                last_timestamp=timestamp,
            )

        updated = []
        for corner_filter, corner in zip(self._state.filters, measured.corners):
            corner_filter.predict(dt)
            updated.append(corner_filter.update(corner))

        tl, tr, br, bl = updated
        return Quadrilateral(top_left=tl, top_right=tr, bottom_right=br, bottom_left=bl)

    def predict(self, timestamp: float) -> Optional[Quadrilateral]:
        """
        Predict the quadrilateral at `timestamp` without a measurement.

        Returns:
            Predicted quadrilateral, or None if nothing has been measured yet.
        """
        if not isinstance(self._state, Tracking):
            return None

        dt = self._elapsed(timestamp, self._state.last_timestamp)
        tl, tr, br, bl = (f.predict(dt) for f in self._state.filters)
        self._state.last_timestamp = timestamp

        logger.debug(f"Predicted quadrilateral after dt={dt:.3f}s")
        return Quadrilateral(top_left=tl, top_right=tr, bottom_right=br, bottom_left=bl)

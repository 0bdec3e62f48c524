"""
Main processor for the Tracking module.

Orchestrates the per-frame pipeline:
1. Corner validation of detector candidates
2. Best-candidate selection (document-likeness score)
3. Motion-stability gating
4. Kalman update (trusted measurement) or prediction (no measurement)

Motion samples and video frames usually arrive on different queues; the
caller must serialize calls into one processor instance.
"""

import logging
from pathlib import Path
from typing import Optional, Sequence

from src.common.types import Quadrilateral
from src.tracking.candidate_scorer import CandidateScorer
from src.tracking.config_loader import load_config
from src.tracking.corner_validator import validate_corners
from src.tracking.quad_tracker import QuadrilateralTracker
from src.tracking.stability_gate import StabilityGate, Vector3
from src.tracking.types import FrameResult, TrackingConfig, TrackingStatus

logger = logging.getLogger(__name__)


class TrackingProcessor:
    """
    Per-frame document rectangle tracking.

    Example:
        >>> processor = TrackingProcessor()
        >>> processor.update_motion(accel, rotation_rate)  # at ~60 Hz
        >>> result = processor.process_frame(candidates, timestamp)  # per frame
        >>> if result.has_quadrilateral():
        ...     draw_overlay(result.quadrilateral)
    """

    def __init__(
        self,
        config: Optional[TrackingConfig] = None,
        config_path: Optional[Path] = None,
    ):
        """
        Initialize the tracking processor.

        Args:
            config: Pre-loaded configuration object. If None, will load from file.
            config_path: Path to config file. If None, uses default location.
        """
        if config is not None:
            self.config = config
            logger.info("Using provided configuration")
        else:
            self.config = load_config(config_path) if config_path else load_config()
            logger.info("Loaded configuration from file")

        self.scorer = CandidateScorer(self.config.scoring)
        self.gate = StabilityGate(self.config.stability)
        self.tracker = QuadrilateralTracker(self.config.kalman)
        self._missed_frames = 0

    @property
    def missed_frames(self) -> int:
        return self._missed_frames

    @property
    def is_stable(self) -> bool:
        """Stability used for decisions; always True when the gate is disabled."""
        if not self.config.processor.use_motion_gate:
            return True
        return self.gate.is_stable

    def update_motion(self, acceleration: Vector3, rotation_rate: Vector3) -> bool:
        """Feed one device-motion sample to the stability gate."""
        self.gate.update(acceleration, rotation_rate)
        return self.is_stable

    def _valid_candidates(self, candidates: Sequence[Quadrilateral]) -> list:
        if not self.config.validation.enabled:
            return list(candidates)
        return [
            quad
            for quad in candidates
            if validate_corners(quad, self.config.validation)[0]
        ]

    def _predicted_result(
        self, timestamp: float, is_stable: bool, candidate_count: int
    ) -> FrameResult:
        predicted = self.tracker.predict(timestamp)
        return FrameResult(
            status=(
                TrackingStatus.PREDICTED
                if predicted is not None
                else TrackingStatus.NONE
            ),
            quadrilateral=predicted,
            measurement=None,
            is_stable=is_stable,
            candidate_count=candidate_count,
            missed_frames=self._missed_frames,
        )

    def process_frame(
        self, candidates: Sequence[Quadrilateral], timestamp: float
    ) -> FrameResult:
        """
        Process the detector output of one video frame.

        Args:
            candidates: Zero or more detected quadrilaterals [TL, TR, BR, BL].
            timestamp: Monotonic frame time in seconds.

        Returns:
            FrameResult with the quadrilateral to display (if any).
        """
        valid = self._valid_candidates(candidates)
        best = self.scorer.select_best(valid)
        is_stable = self.is_stable

        logger.debug(
            f"Frame t={timestamp:.3f}: {len(valid)}/{len(candidates)} valid candidates, "
            f"stable={is_stable}"
        )

        if is_stable and best is not None:
            self._missed_frames = 0
            smoothed = self.tracker.update(best, timestamp)
            return FrameResult(
                status=TrackingStatus.TRACKED,
                quadrilateral=smoothed,
                measurement=best,
                is_stable=is_stable,
                candidate_count=len(valid),
                missed_frames=0,
            )

        # No trusted measurement: nothing detected, or the device is moving
        self._missed_frames += 1
        if self._missed_frames > self.config.processor.max_missed_frames:
            if self.tracker.is_tracking:
                logger.info(
                    f"No trusted measurement for {self._missed_frames} frames "
                    f"(stable={is_stable}), clearing tracked quadrilateral"
                )
                self.tracker.reset()
            return FrameResult(
                status=TrackingStatus.LOST,
                quadrilateral=None,
                measurement=None,
                is_stable=is_stable,
                candidate_count=len(valid),
                missed_frames=self._missed_frames,
            )

        return self._predicted_result(timestamp, is_stable, len(valid))

    def stop(self) -> None:
        """Reset tracker, stability gate and missed-frame counter."""
        self.tracker.reset()
        self.gate.stop()
        self._missed_frames = 0
        logger.info("Tracking processor stopped")


def select_best_candidate(
    candidates: Sequence[Quadrilateral],
    config: Optional[TrackingConfig] = None,
) -> Optional[Quadrilateral]:
    """
    Convenience function for one-shot candidate selection.

    Args:
        candidates: Detected quadrilaterals from one frame.
        config: Optional custom configuration. Uses model defaults if None.

    Returns:
        Best quadrilateral or None when there are no candidates.
    """
    config = config if config is not None else TrackingConfig()
    return CandidateScorer(config.scoring).select_best(candidates)

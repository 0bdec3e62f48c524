"""
Document Rectangle Tracking

Smooths and predicts the page quadrilateral of a live document scanner
across video frames.

Pipeline stages:
1. Corner validation (reject collapsed or tiny detections)
2. Candidate scoring (pick the most document-like quadrilateral)
3. Motion-stability gating (trust measurements only while the device is still)
4. Per-corner Kalman filtering (update or predict)
"""

from src.tracking.candidate_scorer import CandidateScorer
from src.tracking.config_loader import get_default_config, load_config
from src.tracking.corner_validator import validate_corners
from src.tracking.kalman_filter import CornerKalmanFilter
from src.tracking.processor import TrackingProcessor, select_best_candidate
from src.tracking.quad_tracker import QuadrilateralTracker, Tracking, Uninitialized
from src.tracking.stability_gate import StabilityGate
from src.tracking.types import (
    CandidateScore,
    FrameResult,
    TrackingConfig,
    TrackingStatus,
    ValidationFailure,
)

__all__ = [
    "TrackingProcessor",
    "select_best_candidate",
    "load_config",
    "get_default_config",
    "validate_corners",
    "CandidateScorer",
    "CornerKalmanFilter",
    "QuadrilateralTracker",
    "StabilityGate",
    "Tracking",
    "Uninitialized",
    "CandidateScore",
    "FrameResult",
    "TrackingConfig",
    "TrackingStatus",
    "ValidationFailure",
]

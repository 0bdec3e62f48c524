"""
Document-likeness scoring for candidate quadrilaterals.

Selects the detector candidate most likely to be a full document page.
Each candidate is scored by a weighted sum of four sub-scores in [0, 1]:

- size: area relative to the largest candidate in the set
- rectangularity: similarity of opposite side lengths
- aspect ratio: closeness to a portrait page ratio (~0.75)
- angle: closeness of the corner angles to 90 degrees
"""

import logging
import math
from typing import List, Optional, Sequence

from src.common.types import Quadrilateral
from src.tracking.types import CandidateScore, ScoringConfig

logger = logging.getLogger(__name__)


def _side_similarity(a: float, b: float) -> float:
    longest = max(a, b)
    if longest == 0:
        return 0.0
    return 1.0 - abs(a - b) / longest


def rectangularity_score(quad: Quadrilateral) -> float:
    """
    Mean similarity of the two pairs of opposite sides.

    Penalizes trapezoids and skewed shapes. An axis whose sides both have
    zero length scores 0.
    """
    top, right, bottom, left = quad.edge_lengths
    horizontal = _side_similarity(top, bottom)
    vertical = _side_similarity(left, right)
    return max(0.0, (horizontal + vertical) / 2.0)


def size_score(quad: Quadrilateral, reference_area: float) -> float:
    """Area relative to `reference_area` (0 when the reference is empty)."""
    if reference_area <= 0:
        return 0.0
    return quad.area / reference_area


def aspect_ratio_score(aspect_ratio: float, config: ScoringConfig) -> float:
    """Linear falloff around the ideal ratio inside the range, flat penalty outside."""
    low, high = config.aspect_ratio_range
    if low <= aspect_ratio <= high:
        difference = abs(aspect_ratio - config.ideal_aspect_ratio)
        return max(0.0, 1.0 - difference * config.aspect_ratio_slope)
    return config.out_of_range_score


def angle_score(quad: Quadrilateral, config: ScoringConfig) -> float:
    """1 for right angles, falling to 0 at a mean deviation of `max_angle_deviation`."""
    deviations = [abs(angle - math.pi / 2) for angle in quad.corner_angles]
    avg_deviation = sum(deviations) / 4.0
    return max(0.0, 1.0 - avg_deviation / config.max_angle_deviation)


class CandidateScorer:
    """
    Scores and ranks candidate quadrilaterals from one frame.

    Example:
        >>> scorer = CandidateScorer()
        >>> best = scorer.select_best(candidates)
        >>> if best is None:
        ...     print("No candidate this frame")
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config if config is not None else ScoringConfig()

    def score(self, quad: Quadrilateral, reference_area: float) -> CandidateScore:
        """
        Score a single candidate.

        Args:
            quad: Candidate quadrilateral.
            reference_area: Largest area in the candidate set.

        Returns:
            CandidateScore with every sub-score and the weighted total.
        """
        cfg = self.config
        size = size_score(quad, reference_area)
        rectangularity = rectangularity_score(quad)
        aspect = aspect_ratio_score(quad.aspect_ratio, cfg)
        angle = angle_score(quad, cfg)

        total = (
            size * cfg.size_weight
            + rectangularity * cfg.rectangularity_weight
            + aspect * cfg.aspect_ratio_weight
            + angle * cfg.angle_weight
        )

        logger.debug(
            f"Candidate score - Area: {quad.area:.0f}, "
            f"AspectRatio: {quad.aspect_ratio:.2f}, Size: {size:.2f}, "
            f"Rectangularity: {rectangularity:.2f}, Aspect: {aspect:.2f}, "
            f"Angle: {angle:.2f}, Total: {total:.3f}"
        )

        return CandidateScore(
            quadrilateral=quad,
            size=size,
            rectangularity=rectangularity,
            aspect_ratio=aspect,
            angle=angle,
            total=total,
        )

    def score_candidates(self, candidates: Sequence[Quadrilateral]) -> List[CandidateScore]:
        """Score every candidate against the largest area in the set."""
        if not candidates:
            return []
        reference_area = max(quad.area for quad in candidates)
        return [self.score(quad, reference_area) for quad in candidates]

    def select_best(self, candidates: Sequence[Quadrilateral]) -> Optional[Quadrilateral]:
        """
        Pick the highest-scoring candidate.

        Ties resolve to the first maximum in input order.

        Returns:
            Best quadrilateral, or None when `candidates` is empty.
        """
        scores = self.score_candidates(candidates)
        if not scores:
            return None
        best = max(scores, key=lambda s: s.total)
        return best.quadrilateral

"""
Sanity checks for detector output before it reaches the scorer.

Rejects detections whose corners collapse onto each other or whose
enclosed area is too small to be a page.
"""

import logging
from itertools import combinations
from typing import Tuple

from src.common.types import Quadrilateral
from src.tracking.types import ValidationConfig, ValidationFailure

logger = logging.getLogger(__name__)

CORNER_NAMES = ("TOP-LEFT", "TOP-RIGHT", "BOTTOM-RIGHT", "BOTTOM-LEFT")


def validate_corners(
    quad: Quadrilateral, config: ValidationConfig
) -> Tuple[bool, ValidationFailure]:
    """
    Validate a detected quadrilateral.

    Args:
        quad: Detected corners in order [TL, TR, BR, BL].
        config: Minimum corner distance and area.

    Returns:
        Tuple of (is_valid, failure_reason).

    Example:
        >>> quad = Quadrilateral.from_list([[0, 0], [100, 0], [100, 100], [0, 100]])
        >>> validate_corners(quad, ValidationConfig())
        (True, <ValidationFailure.NONE: 'None'>)
    """
    for (i, p), (j, q) in combinations(enumerate(quad.corners), 2):
        distance = p.distance_to(q)
        if distance < config.min_corner_distance:
            logger.warning(
                f"Rejecting detection: {CORNER_NAMES[i]} and {CORNER_NAMES[j]} "
                f"too close ({distance:.2f} < {config.min_corner_distance:.2f})"
            )
            return False, ValidationFailure.CORNERS_TOO_CLOSE

    area = quad.area
    if area < config.min_area:
        logger.warning(
            f"Rejecting detection: area {area:.2f} < {config.min_area:.2f}"
        )
        return False, ValidationFailure.AREA_TOO_SMALL

    logger.debug(f"Detection valid (area: {area:.2f})")
    return True, ValidationFailure.NONE

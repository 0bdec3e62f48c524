"""
Geometry Utilities

Helpers for detectors that report corners in no particular order.
"""

import logging
from typing import Union

import numpy as np

from src.common.types import Quadrilateral

logger = logging.getLogger(__name__)


def order_corners(pts: Union[np.ndarray, list]) -> np.ndarray:
    """
    Order 4 points as Top-Left, Top-Right, Bottom-Right, Bottom-Left.

    The tracker pairs corners across frames by position in this order, so
    detector output must be normalized before it is scored or tracked:
    - Top-Left: smallest sum (x + y)
    - Bottom-Right: largest sum (x + y)
    - Top-Right: smallest difference (y - x)
    - Bottom-Left: largest difference (y - x)

    Args:
        pts: Array of 4 points with shape (4, 2) or list of [x, y] coordinates.

    Returns:
        Ordered numpy array of shape (4, 2).

    Raises:
        ValueError: If input does not contain exactly 4 points.

    Example:
        >>> order_corners([[100, 0], [0, 0], [0, 100], [100, 100]])
        array([[  0.,   0.],
               [100.,   0.],
               [100., 100.],
               [  0., 100.]])
    """
    pts = np.array(pts, dtype=np.float64)

    if pts.shape != (4, 2):
        raise ValueError(
            f"Expected exactly 4 points with shape (4, 2), got shape {pts.shape}"
        )

    s = pts.sum(axis=1)
    diff = np.diff(pts, axis=1).ravel()

    rect = np.zeros((4, 2), dtype=np.float64)
    rect[0] = pts[np.argmin(s)]
    rect[1] = pts[np.argmin(diff)]
    rect[2] = pts[np.argmax(s)]
    rect[3] = pts[np.argmax(diff)]

    logger.debug(
        f"Ordered corners: TL={rect[0]}, TR={rect[1]}, BR={rect[2]}, BL={rect[3]}"
    )
    return rect


def quadrilateral_from_points(pts: Union[np.ndarray, list]) -> Quadrilateral:
    """Build a Quadrilateral from 4 unordered points."""
    return Quadrilateral.from_numpy(order_corners(pts))

"""
Shared Utilities

Common functions used across all modules.
"""

from src.utils.geometry import order_corners, quadrilateral_from_points

__all__ = [
    "order_corners",
    "quadrilateral_from_points",
]

"""
Common types shared across all modules.

This module provides the standardized geometric types of the document
tracking core, ensuring consistency between the scorer, tracker and the
per-frame processor.
"""

from src.common.types import Point2D, Quadrilateral

__all__ = ["Point2D", "Quadrilateral"]

"""
Common type definitions for the document tracking core.

This module provides Pydantic-based type definitions for the geometric
primitives shared by every stage of the tracking pipeline: 2D points and
four-corner quadrilaterals.

These types provide:
- Type validation and conversion
- Consistent interfaces across modules
- Derived geometry (area, edge lengths, aspect ratio, corner angles)
- Integration with numpy arrays
"""

import math
from typing import Tuple, Union

import numpy as np
from pydantic import BaseModel, Field, field_validator


class Point2D(BaseModel):
    """
    Immutable 2D point (x, y).

    Coordinates are unit-agnostic; by convention they are pixels in the
    source image space of the detector that produced them.

    Attributes:
        x: X-coordinate (horizontal).
        y: Y-coordinate (vertical).

    Example:
        >>> point = Point2D(x=100.5, y=200.0)
        >>> arr = point.to_numpy()  # array([100.5, 200. ])
        >>> point2 = Point2D.from_numpy(np.array([150, 250]))
    """

    x: float = Field(..., description="X-coordinate (horizontal)")
    y: float = Field(..., description="Y-coordinate (vertical)")

    model_config = {"frozen": True}

    @field_validator("x", "y", mode="before")
    @classmethod
    def _convert_to_float(cls, v: Union[int, float, np.number]) -> float:
        """
        Convert coordinate to float.

        Args:
            v: Coordinate value (int, float or numpy scalar).

        Returns:
            Float coordinate.
        """
        if isinstance(v, (int, float, np.number)) and not isinstance(v, bool):
            return float(v)
        raise ValueError(f"Coordinate must be numeric, got {type(v)}")

    @classmethod
    def from_numpy(cls, arr: np.ndarray) -> "Point2D":
        """
        Create Point2D from numpy array.

        Args:
            arr: Numpy array of shape (2,) with [x, y] coordinates.

        Returns:
            Point2D instance.

        Raises:
            ValueError: If array shape is not (2,).
        """
        arr = np.asarray(arr)
        if arr.shape != (2,):
            raise ValueError(f"Expected array of shape (2,), got {arr.shape}")
        return cls(x=float(arr[0]), y=float(arr[1]))

    @classmethod
    def from_list(cls, coords: list) -> "Point2D":
        """
        Create Point2D from list [x, y].

        Raises:
            ValueError: If list does not contain exactly 2 elements.
        """
        if len(coords) != 2:
            raise ValueError(f"Expected list with 2 elements, got {len(coords)}")
        return cls(x=coords[0], y=coords[1])

    def to_numpy(self, dtype: type = np.float64) -> np.ndarray:
        """Convert to numpy array of shape (2,)."""
        return np.array([self.x, self.y], dtype=dtype)

    def to_tuple(self) -> Tuple[float, float]:
        """Convert to tuple (x, y)."""
        return (self.x, self.y)

    def distance_to(self, other: "Point2D") -> float:
        """
        Calculate Euclidean distance to another point.

        Args:
            other: Target point.

        Returns:
            Euclidean distance as float.
        """
        return math.hypot(self.x - other.x, self.y - other.y)

    def __add__(self, other: "Point2D") -> "Point2D":
        """Add two points (vector addition)."""
        return Point2D(x=self.x + other.x, y=self.y + other.y)

    def __sub__(self, other: "Point2D") -> "Point2D":
        """Subtract two points (vector subtraction)."""
        return Point2D(x=self.x - other.x, y=self.y - other.y)

    def __repr__(self) -> str:
        return f"Point2D(x={self.x:.2f}, y={self.y:.2f})"


def _interior_angle(prev: Point2D, vertex: Point2D, nxt: Point2D) -> float:
    """Angle at `vertex` between the edges towards `prev` and `nxt` (radians)."""
    v1x, v1y = prev.x - vertex.x, prev.y - vertex.y
    v2x, v2y = nxt.x - vertex.x, nxt.y - vertex.y

    mag1 = math.hypot(v1x, v1y)
    mag2 = math.hypot(v2x, v2y)
    if mag1 == 0 or mag2 == 0:
        return 0.0

    cos_angle = (v1x * v2x + v1y * v2y) / (mag1 * mag2)
    return math.acos(max(-1.0, min(1.0, cos_angle)))


class Quadrilateral(BaseModel):
    """
    Immutable four-corner polygon in fixed cyclic order [TL, TR, BR, BL].

    The corners are expected to form a simple (non-self-intersecting)
    polygon for the derived area and scoring values to be meaningful. This
    is not enforced; callers must supply corners in a consistent order.

    Attributes:
        top_left: Top-left corner.
        top_right: Top-right corner.
        bottom_right: Bottom-right corner.
        bottom_left: Bottom-left corner.

    Example:
        >>> quad = Quadrilateral.from_numpy(
        ...     np.array([[0, 0], [600, 0], [600, 800], [0, 800]])
        ... )
        >>> quad.area
        480000.0
        >>> quad.aspect_ratio
        0.75
    """

    top_left: Point2D
    top_right: Point2D
    bottom_right: Point2D
    bottom_left: Point2D

    model_config = {"frozen": True}

    @classmethod
    def from_numpy(cls, arr: Union[np.ndarray, list]) -> "Quadrilateral":
        """
        Create Quadrilateral from an array of corners.

        Args:
            arr: Array of shape (4, 2) in order [TL, TR, BR, BL].

        Returns:
            Quadrilateral instance.

        Raises:
            ValueError: If array shape is not (4, 2).
        """
        arr = np.asarray(arr, dtype=np.float64)
        if arr.shape != (4, 2):
            raise ValueError(f"Expected array of shape (4, 2), got {arr.shape}")
        tl, tr, br, bl = (Point2D.from_numpy(p) for p in arr)
        return cls(top_left=tl, top_right=tr, bottom_right=br, bottom_left=bl)

    @classmethod
    def from_list(cls, coords: list) -> "Quadrilateral":
        """Create Quadrilateral from [[x, y], ...] in order [TL, TR, BR, BL]."""
        return cls.from_numpy(coords)

    def to_numpy(self, dtype: type = np.float64) -> np.ndarray:
        """Convert to numpy array of shape (4, 2) in order [TL, TR, BR, BL]."""
        return np.array([p.to_tuple() for p in self.corners], dtype=dtype)

    @property
    def corners(self) -> Tuple[Point2D, Point2D, Point2D, Point2D]:
        """Corners in cyclic order (TL, TR, BR, BL)."""
        return (self.top_left, self.top_right, self.bottom_right, self.bottom_left)

    @property
    def area(self) -> float:
        """Polygon area using the shoelace formula."""
        corners = self.corners
        total = 0.0
        for i in range(4):
            p, q = corners[i], corners[(i + 1) % 4]
            total += p.x * q.y - q.x * p.y
        return abs(total) / 2.0

    @property
    def edge_lengths(self) -> Tuple[float, float, float, float]:
        """Lengths of the (top, right, bottom, left) edges."""
        return (
            self.top_left.distance_to(self.top_right),
            self.top_right.distance_to(self.bottom_right),
            self.bottom_right.distance_to(self.bottom_left),
            self.bottom_left.distance_to(self.top_left),
        )

    @property
    def aspect_ratio(self) -> float:
        """
        Width / height using the mean of each pair of opposite edges.

        Portrait pages come out below 1.0 (A4 ~0.71, US Letter ~0.77).
        Returns 0.0 for a quadrilateral with no vertical extent.
        """
        top, right, bottom, left = self.edge_lengths
        height = (left + right) / 2.0
        if height == 0:
            return 0.0
        return ((top + bottom) / 2.0) / height

    @property
    def corner_angles(self) -> Tuple[float, float, float, float]:
        """Interior angles in radians at (TL, TR, BR, BL)."""
        tl, tr, br, bl = self.corners
        return (
            _interior_angle(bl, tl, tr),
            _interior_angle(tl, tr, br),
            _interior_angle(tr, br, bl),
            _interior_angle(br, bl, tl),
        )

    def __repr__(self) -> str:
        return (
            f"Quadrilateral(tl={self.top_left!r}, tr={self.top_right!r}, "
            f"br={self.bottom_right!r}, bl={self.bottom_left!r})"
        )

"""
Pytest Configuration and Shared Fixtures

This file contains pytest configuration and fixtures that are available
to all test modules.
"""

import pytest

from src.common.types import Quadrilateral


@pytest.fixture
def unit_square():
    """Stationary 100 x 100 square at the origin."""
    return Quadrilateral.from_list([[0, 0], [100, 0], [100, 100], [0, 100]])


@pytest.fixture
def page_quad():
    """Perfect portrait page: 600 wide, 800 tall (aspect ratio 0.75)."""
    return Quadrilateral.from_list([[0, 0], [600, 0], [600, 800], [0, 800]])


@pytest.fixture
def skewed_trapezoid():
    """Heavily skewed trapezoid with area 600000 (short top edge)."""
    return Quadrilateral.from_list([[400, 0], [600, 0], [1000, 1000], [0, 1000]])


@pytest.fixture
def calm_sample():
    """Motion sample well below the stable thresholds."""
    return [0.0, 0.0, 0.0], [0.0, 0.0, 0.0]


@pytest.fixture
def shaky_sample():
    """Motion sample well above the unstable thresholds."""
    return [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]

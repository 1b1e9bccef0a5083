"""Pytest fixtures for geometry engine tests."""

import pytest
import sys
from pathlib import Path

import numpy as np

# Modules live at the repository root
ROOT_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT_DIR))


@pytest.fixture
def unit_triangle() -> list[tuple[float, float]]:
    """Right triangle with legs along the axes."""
    return [(0.0, 0.0), (1.0, 0.0), (0.0, 1.0)]


@pytest.fixture
def square_10() -> list[tuple[float, float]]:
    """Counter-clockwise 10x10 square at the origin."""
    return [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)]


@pytest.fixture
def bowtie() -> list[tuple[float, float]]:
    """Self-intersecting quadrilateral crossing at (0.5, 0.5)."""
    return [(0.0, 0.0), (1.0, 1.0), (1.0, 0.0), (0.0, 1.0)]


@pytest.fixture
def convex_quad() -> list[tuple[float, float]]:
    """Convex quadrilateral with no four points on a common circle."""
    return [(0.0, 0.0), (4.0, 0.0), (5.0, 3.0), (0.0, 2.0)]


def random_points(seed: int, count: int, scale: float = 100.0) -> list[tuple[float, float]]:
    """Uniform random points in [0, scale) x [0, scale)."""
    rng = np.random.default_rng(seed)
    coords = rng.uniform(0.0, scale, size=(count, 2))
    return [(float(x), float(y)) for x, y in coords]


@pytest.fixture(params=[1, 7, 42, 2024])
def random_cloud(request) -> list[tuple[float, float]]:
    """Random point clouds of moderate size."""
    return random_points(request.param, 30)


@pytest.fixture
def point_cloud():
    """Factory for seeded random point clouds."""
    return random_points

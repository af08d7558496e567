from __future__ import annotations

import math

import matplotlib
import pytest

matplotlib.use("Agg")

from planisphere.astromath import TPI  # noqa: E402
from planisphere.models import ObserverFrame  # noqa: E402


def seoul() -> ObserverFrame:
    return ObserverFrame.from_degrees(9.0, 126.98, 37.57)


def sydney() -> ObserverFrame:
    return ObserverFrame.from_degrees(10.0, 151.21, -33.87)


def angle_gap(a: float, b: float) -> float:
    """Smallest absolute difference between two angles in radians."""
    d = math.fmod(a - b, TPI)
    if d < 0:
        d += TPI
    return min(d, TPI - d)


@pytest.fixture
def seoul_frame() -> ObserverFrame:
    return seoul()


@pytest.fixture
def sydney_frame() -> ObserverFrame:
    return sydney()

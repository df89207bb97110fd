# etell/utils/geo.py

"""
Distance and rectangle helpers.

Geographic positions (calibration samples) and canvas positions (layout
rooms) live in different coordinate systems: use `haversine` for the former
and `euclidean` for the latter.
"""

import math
from typing import Tuple

from etell.analysis.types import Rect


def haversine(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    """
    Compute the great-circle distance between two points on the Earth.

    Parameters
    ----------
    a
        (latitude, longitude) of point A, in decimal degrees.
    b
        (latitude, longitude) of point B, in decimal degrees.

    Returns
    -------
    float
        Distance between A and B in metres.
    """
    lat1, lon1 = a
    lat2, lon2 = b
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = phi2 - phi1
    d_lam = math.radians(lon2 - lon1)
    r = 6371000.0  # Earth radius in metres
    h = math.sin(d_phi/2)**2 + math.cos(phi1)*math.cos(phi2)*math.sin(d_lam/2)**2
    # rounding can push h a hair past 1 for antipodal points
    return 2 * r * math.asin(math.sqrt(min(1.0, h)))


def euclidean(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    """
    Planar distance between two canvas points.
    """
    return math.hypot(a[0] - b[0], a[1] - b[1])


def midpoint(a: Tuple[float, float], b: Tuple[float, float]) -> tuple[float, float]:
    return ((a[0] + b[0]) / 2, (a[1] + b[1]) / 2)


def rects_intersect(a: Rect, b: Rect, margin: float = 0.0) -> bool:
    """
    True when `a`, grown by `margin` on every side, overlaps `b`.

    Rectangles that merely share an edge do not overlap. Growing either
    rectangle gives the same answer, so the test is symmetric.
    """
    return a.expanded(margin).intersects(b)

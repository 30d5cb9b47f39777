"""Reference haversine distance.

The scalar function is the reference used for the fixture sum. It keeps the
literal degrees-to-radians multiplier instead of ``math.radians`` so results
do not depend on how pi/180 is rounded.
"""
from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray


EARTH_RADIUS = 6372.8
DEGREES_TO_RADIANS = 0.01745329251994329577


def radians_from_degrees(degrees: float) -> float:
    return DEGREES_TO_RADIANS * degrees


def reference_haversine(x0: float, y0: float, x1: float, y1: float, earth_radius: float = EARTH_RADIUS) -> float:
    """Great-circle distance between (x0, y0) and (x1, y1).

    x is longitude and y is latitude, both in degrees.
    """

    lat1 = y0
    lat2 = y1
    lon1 = x0
    lon2 = x1

    d_lat = radians_from_degrees(lat2 - lat1)
    d_lon = radians_from_degrees(lon2 - lon1)
    lat1 = radians_from_degrees(lat1)
    lat2 = radians_from_degrees(lat2)

    s_lat = math.sin(d_lat / 2.0)
    s_lon = math.sin(d_lon / 2.0)
    a = s_lat * s_lat + math.cos(lat1) * math.cos(lat2) * (s_lon * s_lon)
    root = math.sqrt(a)
    # libm asin yields NaN outside [-1, 1] where math.asin would raise.
    c = 2.0 * math.asin(root) if root <= 1.0 else math.nan

    return earth_radius * c


def haversine_array(coords: NDArray[np.float64], earth_radius: float = EARTH_RADIUS) -> NDArray[np.float64]:
    """Vectorized haversine over rows (x0, y0, x1, y1).

    May differ from :func:`reference_haversine` in the last bits; use it for
    tolerance-based checks only.
    """

    c = np.asarray(coords, dtype=np.float64).reshape(-1, 4)
    x0, y0, x1, y1 = c[:, 0], c[:, 1], c[:, 2], c[:, 3]

    d_lat = DEGREES_TO_RADIANS * (y1 - y0)
    d_lon = DEGREES_TO_RADIANS * (x1 - x0)
    lat1 = DEGREES_TO_RADIANS * y0
    lat2 = DEGREES_TO_RADIANS * y1

    a = np.sin(d_lat / 2.0) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(d_lon / 2.0) ** 2
    # Rounding can push a marginally above 1 near antipodal pairs.
    a = np.clip(a, 0.0, 1.0)
    return earth_radius * 2.0 * np.arcsin(np.sqrt(a))

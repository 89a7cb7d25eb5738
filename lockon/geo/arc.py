"""
Great-circle arc interpolation for flight-path overlays.

The two endpoints are lifted onto the unit sphere and joined by spherical
linear interpolation (slerp), then projected back to lat/lon.  On a flat map
the result bows toward the pole like a real flight path instead of running
straight across the projection.

Usage
-----
    pts = interpolate_arc(Coordinate(51.5, -0.13), Coordinate(40.7, -74.0))
    surface.draw_path(pts)
"""
from __future__ import annotations

from typing import List

import numpy as np

from .coords import Coordinate, central_angle, lon_delta, wrap_lon

DEFAULT_ARC_STEPS = 32

# Below this separation (radians) sin(d) is too small to divide by.
_DEGENERATE_EPS = 1e-9


def _linear_fallback(start: Coordinate, end: Coordinate, steps: int) -> List[Coordinate]:
    t = np.linspace(0.0, 1.0, steps + 1)
    lats = start.lat + (end.lat - start.lat) * t
    lons = start.lon + lon_delta(start.lon, end.lon) * t
    return [Coordinate(float(la), wrap_lon(float(lo))) for la, lo in zip(lats, lons)]


def interpolate_arc(
    start: Coordinate,
    end: Coordinate,
    steps: int = DEFAULT_ARC_STEPS,
) -> List[Coordinate]:
    """Sample the great circle between *start* and *end*.

    Parameters
    ----------
    start, end : Coordinate
        Arc endpoints.
    steps : int
        Number of segments (>= 2).  ``steps + 1`` points are returned.

    Returns
    -------
    list[Coordinate]
        Ordered points; the first is *start* and the last is *end*.
        Identical or antipodal endpoints fall back to a straight lat/lon
        interpolation.
    """
    if steps < 2:
        raise ValueError(f"steps must be >= 2, got {steps}")

    d = central_angle(start, end)
    sin_d = np.sin(d)
    if d < _DEGENERATE_EPS or abs(sin_d) < _DEGENERATE_EPS:
        pts = _linear_fallback(start, end, steps)
    else:
        lat1, lon1 = np.radians(start.lat), np.radians(start.lon)
        lat2, lon2 = np.radians(end.lat), np.radians(end.lon)

        t = np.arange(steps + 1, dtype=np.float64) / steps
        k = np.sin((1.0 - t) * d) / sin_d
        j = np.sin(t * d) / sin_d

        x = k * np.cos(lat1) * np.cos(lon1) + j * np.cos(lat2) * np.cos(lon2)
        y = k * np.cos(lat1) * np.sin(lon1) + j * np.cos(lat2) * np.sin(lon2)
        z = k * np.sin(lat1) + j * np.sin(lat2)

        lats = np.degrees(np.arctan2(z, np.hypot(x, y)))
        lons = np.degrees(np.arctan2(y, x))
        pts = [
            Coordinate(float(np.clip(la, -90.0, 90.0)), wrap_lon(float(lo)))
            for la, lo in zip(lats, lons)
        ]

    # Pin the endpoints so callers can rely on exact equality.
    pts[0] = start
    pts[-1] = end
    return pts

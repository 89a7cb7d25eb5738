"""Spherical geometry helpers: coordinates and great-circle arcs."""
from __future__ import annotations

from .arc import DEFAULT_ARC_STEPS, interpolate_arc
from .coords import (
    MAP_MAX_LAT,
    MAP_MIN_LAT,
    MAX_ZOOM,
    MIN_ZOOM,
    Coordinate,
    central_angle,
    clamp_lat,
    clamp_zoom,
    haversine_km,
    lon_delta,
    wrap_lon,
)

__all__ = [
    "DEFAULT_ARC_STEPS",
    "MAP_MAX_LAT",
    "MAP_MIN_LAT",
    "MAX_ZOOM",
    "MIN_ZOOM",
    "Coordinate",
    "central_angle",
    "clamp_lat",
    "clamp_zoom",
    "haversine_km",
    "interpolate_arc",
    "lon_delta",
    "wrap_lon",
]

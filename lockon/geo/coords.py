"""
Coordinate type and the wrap / clamp / distance helpers shared by the
planner, the arc interpolator and the camera surfaces.

Longitude wraps into [-180, 180); latitude clamps, never wraps.  Values that
are already in range pass through untouched so that a target handed to the
planner comes back bit-identical on the final hop.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

# Operational range of the web-mercator map (narrower than the sphere).
MAP_MIN_LAT = -85.0
MAP_MAX_LAT = 85.0

MIN_ZOOM = 0.0
MAX_ZOOM = 19.0


def wrap_lon(lon: float) -> float:
    """Wrap a longitude into [-180, 180)."""
    if -180.0 <= lon < 180.0:
        return lon
    wrapped = (lon + 180.0) % 360.0 - 180.0
    # float modulo can round up onto the open bound
    if wrapped >= 180.0:
        wrapped -= 360.0
    return wrapped


def clamp_lat(lat: float, lo: float = MAP_MIN_LAT, hi: float = MAP_MAX_LAT) -> float:
    return max(lo, min(hi, lat))


def clamp_zoom(zoom: float) -> float:
    return max(MIN_ZOOM, min(MAX_ZOOM, zoom))


def lon_delta(lon_a: float, lon_b: float) -> float:
    """Signed shortest angular difference ``lon_b - lon_a`` in [-180, 180)."""
    return (lon_b - lon_a + 540.0) % 360.0 - 180.0


@dataclass(frozen=True)
class Coordinate:
    """A geographic position in decimal degrees."""

    lat: float
    lon: float

    def normalized(self) -> "Coordinate":
        """Clamp latitude to the map range and wrap longitude."""
        lat = clamp_lat(self.lat)
        lon = wrap_lon(self.lon)
        if lat == self.lat and lon == self.lon:
            return self
        return Coordinate(lat, lon)

    def offset(self, d_lat: float, d_lon: float) -> "Coordinate":
        return Coordinate(clamp_lat(self.lat + d_lat), wrap_lon(self.lon + d_lon))

    def as_tuple(self) -> tuple:
        return (self.lat, self.lon)

    def __str__(self) -> str:
        return f"({self.lat:.4f}, {self.lon:.4f})"


def central_angle(a: Coordinate, b: Coordinate) -> float:
    """Great-circle angular separation in radians (haversine form)."""
    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    d_phi = math.radians(b.lat - a.lat)
    d_lambda = math.radians(b.lon - a.lon)

    h = math.sin(d_phi / 2.0) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2.0) ** 2
    return 2.0 * math.asin(math.sqrt(min(1.0, max(0.0, h))))


def haversine_km(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in kilometres on a mean-radius Earth."""
    return 6371.0 * central_angle(a, b)

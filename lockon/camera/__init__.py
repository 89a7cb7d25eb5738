"""Map camera surfaces."""
from __future__ import annotations

from .base import CameraSurface, MarkerSurface
from .sim import CameraMove, Marker, SimulatedCamera

__all__ = [
    "CameraMove",
    "CameraSurface",
    "Marker",
    "MarkerSurface",
    "SimulatedCamera",
]

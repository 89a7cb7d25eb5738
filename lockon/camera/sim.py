"""
Headless camera surface.

Tracks a map camera (centre + zoom) in memory and animates it on a fixed
tick with an ease-in-out cubic curve, the same stepping the desktop map
uses for its fly-to.  Longitude moves along the shorter way round the
antimeridian.  Overlays and markers are kept in dictionaries so callers and
tests can inspect what would be on screen.

``transition_to`` returns the animation task; awaiting it waits for the
move to finish.  Starting a new transition supersedes the one in flight,
which then resolves early.
"""
from __future__ import annotations

import asyncio
import itertools
import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence

from ..geo.coords import Coordinate, clamp_lat, clamp_zoom, lon_delta, wrap_lon

log = logging.getLogger(__name__)


def ease_in_out_cubic(t: float) -> float:
    if t < 0.5:
        return 4 * t * t * t
    return 1 - pow(-2 * t + 2, 3) / 2


@dataclass
class Marker:
    position: Coordinate
    label: str
    radius_m: float = 80.0


@dataclass(frozen=True)
class CameraMove:
    destination: Coordinate
    zoom: float
    duration_s: float


class SimulatedCamera:
    """In-memory :class:`~lockon.camera.base.MarkerSurface`.

    Parameters
    ----------
    center : Coordinate
        Initial camera centre.
    zoom : float
        Initial zoom level.
    tick_s : float
        Animation frame interval.
    """

    def __init__(
        self,
        center: Coordinate = Coordinate(20.0, 0.0),
        zoom: float = 2.0,
        tick_s: float = 1.0 / 30.0,
    ) -> None:
        self._center = center
        self._zoom = zoom
        self._tick_s = tick_s
        self._ids = itertools.count(1)
        self._generation = 0

        self.paths: Dict[int, List[Coordinate]] = {}
        self.markers: Dict[int, Marker] = {}
        self.moves: List[CameraMove] = []

    # ── camera ────────────────────────────────────────────────────────

    def get_center(self) -> Coordinate:
        return self._center

    @property
    def zoom(self) -> float:
        return self._zoom

    def set_view(self, destination: Coordinate, zoom: float) -> None:
        """Jump without animating."""
        self._generation += 1
        self._center = destination
        self._zoom = clamp_zoom(zoom)

    def transition_to(
        self, destination: Coordinate, zoom: float, duration_s: float,
    ) -> asyncio.Task:
        self.moves.append(CameraMove(destination, zoom, duration_s))
        self._generation += 1
        loop = asyncio.get_running_loop()
        return loop.create_task(
            self._animate(
                self._generation, self._center, self._zoom,
                destination, clamp_zoom(zoom), duration_s,
            )
        )

    async def _animate(
        self,
        generation: int,
        start: Coordinate,
        start_zoom: float,
        end: Coordinate,
        end_zoom: float,
        duration_s: float,
    ) -> None:
        loop = asyncio.get_running_loop()
        d_lat = end.lat - start.lat
        d_lon = lon_delta(start.lon, end.lon)
        d_zoom = end_zoom - start_zoom
        began = loop.time()
        while duration_s > 0:
            if generation != self._generation:
                # superseded; the centre stays where the newer move found it
                return
            t = min((loop.time() - began) / duration_s, 1.0)
            if t >= 1.0:
                break
            ease = ease_in_out_cubic(t)
            self._center = Coordinate(
                clamp_lat(start.lat + d_lat * ease),
                wrap_lon(start.lon + d_lon * ease),
            )
            self._zoom = start_zoom + d_zoom * ease
            await asyncio.sleep(self._tick_s)
        if generation != self._generation:
            return
        self._center = end
        self._zoom = end_zoom

    # ── overlays ──────────────────────────────────────────────────────

    def draw_path(self, points: Sequence[Coordinate]) -> int:
        handle = next(self._ids)
        self.paths[handle] = list(points)
        return handle

    def remove_overlay(self, handle: int) -> None:
        if self.paths.pop(handle, None) is None and self.markers.pop(handle, None) is None:
            raise KeyError(f"No overlay with handle {handle}")

    def show_marker(self, position: Coordinate, label: str) -> int:
        handle = next(self._ids)
        self.markers[handle] = Marker(position, label)
        return handle

    def set_marker_radius(self, handle: int, radius_m: float) -> None:
        self.markers[handle].radius_m = radius_m

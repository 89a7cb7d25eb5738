"""
Lock marker — a pulsing indicator placed once the hunt settles.

The pulse ring breathes between 80 m and 800 m in 40 m steps every 120 ms
until the marker is removed.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from .geo.coords import Coordinate

log = logging.getLogger(__name__)

PULSE_MIN_M = 80.0
PULSE_MAX_M = 800.0
PULSE_STEP_M = 40.0
PULSE_INTERVAL_S = 0.12


class PulsingMarker:
    def __init__(self, surface, handle: Any, position: Coordinate, label: str) -> None:
        self._surface = surface
        self.handle = handle
        self.position = position
        self.label = label
        self.radius_m = PULSE_MIN_M
        self._direction = 1
        self._task: Optional[asyncio.Task] = None

    @property
    def pulsing(self) -> bool:
        return self._task is not None and not self._task.done()

    def step(self) -> float:
        """Advance the pulse one tick and return the new radius."""
        self.radius_m += self._direction * PULSE_STEP_M
        if self.radius_m > PULSE_MAX_M:
            self._direction = -1
        elif self.radius_m < PULSE_MIN_M:
            self._direction = 1
        try:
            self._surface.set_marker_radius(self.handle, self.radius_m)
        except Exception as exc:
            log.debug("Marker pulse update failed: %s", exc)
        return self.radius_m

    def start(self) -> None:
        if self.pulsing:
            return
        self._task = asyncio.get_running_loop().create_task(self._pulse())

    async def _pulse(self) -> None:
        while True:
            await asyncio.sleep(PULSE_INTERVAL_S)
            self.step()

    def remove(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None
        try:
            self._surface.remove_overlay(self.handle)
        except Exception as exc:
            log.debug("Marker removal failed: %s", exc)


class MarkerPresenter:
    """Places pulsing lock markers on a marker-capable surface."""

    def __init__(self, surface) -> None:
        self._surface = surface

    def present(self, position: Coordinate, label: str = "") -> PulsingMarker:
        handle = self._surface.show_marker(position, label)
        marker = PulsingMarker(self._surface, handle, position, label)
        marker.start()
        log.info("Marker placed at %s %s", position, label)
        return marker

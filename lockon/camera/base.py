"""Camera surface interfaces consumed by the executor and marker presenter."""
from __future__ import annotations

from typing import Any, Awaitable, Optional, Protocol, Sequence

from ..geo.coords import Coordinate


class CameraSurface(Protocol):
    """Anything that can move a map camera and draw path overlays.

    ``transition_to`` may return an awaitable that resolves when the move
    has genuinely finished; returning ``None`` makes the executor fall back
    to timing the move itself.
    """

    def get_center(self) -> Coordinate: ...

    def transition_to(
        self, destination: Coordinate, zoom: float, duration_s: float,
    ) -> Optional[Awaitable[None]]: ...

    def draw_path(self, points: Sequence[Coordinate]) -> Any: ...

    def remove_overlay(self, handle: Any) -> None: ...


class MarkerSurface(CameraSurface, Protocol):
    def show_marker(self, position: Coordinate, label: str) -> Any: ...

    def set_marker_radius(self, handle: Any, radius_m: float) -> None: ...

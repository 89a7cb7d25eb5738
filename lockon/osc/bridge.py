"""
OSC camera bridge — mirrors the hunt to an external renderer.

Camera, overlay and marker commands are sent as OSC messages to any
OSC-capable front end (TouchDesigner, a browser relay, SuperCollider for
sonification...).  Camera state itself is tracked locally by a
:class:`SimulatedCamera`, so the executor can still read the centre and
await transitions even though UDP gives no feedback.

OSC Address Space
─────────────────
  /lockon/camera/fly <lat> <lon> <zoom> <duration_s>
      Start an animated camera move.

  /lockon/camera/view <lat> <lon> <zoom>
      Jump without animation.

  /lockon/path/add <handle> <lat0> <lon0> <lat1> <lon1> ...
      Draw a flight-path polyline.

  /lockon/overlay/remove <handle>
      Remove a path or marker.

  /lockon/marker/add <handle> <lat> <lon> <label>
      Place the lock marker.

  /lockon/marker/radius <handle> <radius_m>
      Pulse update for a marker.

  /lockon/status <text>
      Human-readable progress line.

Usage
-----
    from lockon.osc.bridge import OscCameraSurface
    surface = OscCameraSurface(host="127.0.0.1", port=57130)
    await executor.execute(surface, plan, audio)
"""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Sequence

from pythonosc import udp_client

from ..camera.sim import SimulatedCamera
from ..geo.coords import Coordinate

log = logging.getLogger(__name__)


class OscCameraSurface:
    """Marker-capable camera surface that mirrors itself over OSC.

    Parameters
    ----------
    host : str
        Renderer OSC host (default "127.0.0.1").
    port : int
        Renderer OSC port (default 57130).
    prefix : str
        Address prefix (default "/lockon").
    camera : SimulatedCamera, optional
        Local state tracker; a fresh one is created when omitted.
    """

    def __init__(
        self,
        host: str = "127.0.0.1",
        port: int = 57130,
        prefix: str = "/lockon",
        camera: Optional[SimulatedCamera] = None,
    ):
        self._host = host
        self._port = port
        self._prefix = prefix.rstrip("/")
        self._camera = camera or SimulatedCamera()
        self._client = udp_client.SimpleUDPClient(host, port)
        self._msg_count = 0
        log.info("OSC camera bridge → %s:%d", host, port)

    def close(self) -> None:
        """Release the UDP socket."""
        if self._client is not None:
            try:
                self._client._sock.close()
            except Exception as exc:
                log.debug("OSC socket close: %s", exc)
            self._client = None

    @property
    def camera(self) -> SimulatedCamera:
        return self._camera

    @property
    def msg_count(self) -> int:
        return self._msg_count

    def _send(self, address: str, args) -> None:
        if self._client is None:
            return
        try:
            self._client.send_message(f"{self._prefix}{address}", args)
            self._msg_count += 1
        except Exception as exc:
            log.debug("OSC send error on %s: %s", address, exc)

    # ── camera ────────────────────────────────────────────────────────

    def get_center(self) -> Coordinate:
        return self._camera.get_center()

    def transition_to(
        self, destination: Coordinate, zoom: float, duration_s: float,
    ) -> asyncio.Task:
        self._send(
            "/camera/fly",
            [float(destination.lat), float(destination.lon), float(zoom), float(duration_s)],
        )
        return self._camera.transition_to(destination, zoom, duration_s)

    def set_view(self, destination: Coordinate, zoom: float) -> None:
        self._send("/camera/view", [float(destination.lat), float(destination.lon), float(zoom)])
        self._camera.set_view(destination, zoom)

    # ── overlays ──────────────────────────────────────────────────────

    def draw_path(self, points: Sequence[Coordinate]) -> int:
        handle = self._camera.draw_path(points)
        flat: List[float] = []
        for p in points:
            flat.extend((float(p.lat), float(p.lon)))
        self._send("/path/add", [handle, *flat])
        return handle

    def remove_overlay(self, handle: int) -> None:
        self._camera.remove_overlay(handle)
        self._send("/overlay/remove", handle)

    def show_marker(self, position: Coordinate, label: str) -> int:
        handle = self._camera.show_marker(position, label)
        self._send("/marker/add", [handle, float(position.lat), float(position.lon), label])
        return handle

    def set_marker_radius(self, handle: int, radius_m: float) -> None:
        self._camera.set_marker_radius(handle, radius_m)
        self._send("/marker/radius", [handle, float(radius_m)])

    def send_status(self, text: str) -> None:
        self._send("/status", text)

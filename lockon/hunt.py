"""
Hunt director — the thin orchestration layer around plan and playback.

Sequence
────────
  start cue ─▶ heartbeat on ─▶ opening view ─▶ plan ─▶ execute
    ─▶ heartbeat off ─▶ marker ─▶ lock cue

A camera-surface failure during the flight is caught here: it is logged
and the director jumps straight to the target so the lock still lands.
"""
from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Optional

from .choreo.executor import AnimationExecutor
from .choreo.plan import HopPlan
from .choreo.planner import HopPlanner, RandomSource, rand_int, rand_range
from .config import HuntConfig
from .geo.coords import Coordinate
from .marker import MarkerPresenter, PulsingMarker

log = logging.getLogger(__name__)


@dataclass
class HuntResult:
    target: Coordinate
    plan: Optional[HopPlan]
    marker: Optional[PulsingMarker]
    fallback: bool = False


class HuntDirector:
    """Runs complete hunts on one surface.

    Parameters
    ----------
    surface : MarkerSurface
        Camera surface that can also show markers.
    audio : AudioCueEngine, optional
        Cue engine; ``None`` runs silently.
    config : HuntConfig, optional
    rng : RandomSource, optional
        Shared source for the opening view and the planner.
    """

    def __init__(
        self,
        surface,
        audio=None,
        config: Optional[HuntConfig] = None,
        rng: Optional[RandomSource] = None,
    ) -> None:
        self._surface = surface
        self._audio = audio
        self._cfg = config or HuntConfig()
        self._rng = rng or random.Random()
        self._planner = HopPlanner(self._cfg.planner)
        self._executor = AnimationExecutor(self._cfg.executor, rng=self._rng)
        self._presenter = MarkerPresenter(surface)
        self._marker: Optional[PulsingMarker] = None

    @property
    def marker(self) -> Optional[PulsingMarker]:
        return self._marker

    def _status(self, text: str) -> None:
        log.info(text)
        send = getattr(self._surface, "send_status", None)
        if send is not None:
            send(text)

    def _cue(self, cue) -> None:
        if self._audio is not None:
            self._audio.ping(*cue)

    async def _opening_view(self) -> None:
        cfg = self._cfg
        start = Coordinate(
            rand_range(self._rng, -cfg.opening_lat, cfg.opening_lat),
            rand_range(self._rng, -cfg.opening_lon, cfg.opening_lon),
        )
        self._set_view(start, cfg.opening_zoom)
        await asyncio.sleep(rand_int(self._rng, *cfg.opening_wait_ms) / 1000.0)

    def _set_view(self, position: Coordinate, zoom: float) -> None:
        set_view = getattr(self._surface, "set_view", None)
        if set_view is not None:
            set_view(position, zoom)
        else:
            self._surface.transition_to(position, zoom, 0.0)

    def _jump_to(self, target: Coordinate) -> bool:
        try:
            self._set_view(target, self._cfg.planner.final_zoom)
            return True
        except Exception as exc:
            log.error("Static fallback view failed too: %s", exc)
            return False

    async def run(self, target: Coordinate, label: str = "", replay: bool = False) -> HuntResult:
        target = target.normalized()
        if self._marker is not None:
            self._marker.remove()
            self._marker = None

        self._status("Replaying hunt…" if replay else "Animating to location…")
        self._cue(self._cfg.start_cue)
        if self._audio is not None:
            self._audio.start_heartbeat()

        plan: Optional[HopPlan] = None
        fallback = False
        try:
            await self._opening_view()
            plan = self._planner.plan(target, self._rng)
            await self._executor.execute(self._surface, plan, self._audio)
        except Exception:
            log.exception("Camera surface failed mid-hunt; falling back to a static view")
            fallback = True
            self._jump_to(target)
        finally:
            if self._audio is not None:
                self._audio.stop_heartbeat()

        self._status("Marking position…")
        try:
            self._marker = self._presenter.present(target, label)
        except Exception as exc:
            log.warning("Marker could not be placed: %s", exc)
        self._cue(self._cfg.replay_lock_cue if replay else self._cfg.lock_cue)
        self._status("Done")
        return HuntResult(target=target, plan=plan, marker=self._marker, fallback=fallback)

    def close(self) -> None:
        if self._marker is not None:
            self._marker.remove()
            self._marker = None

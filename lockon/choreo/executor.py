"""
Animation executor — plays a :class:`HopPlan` on a camera surface.

Hops run strictly one after another: each arc starts at the camera's
*actual* centre, which is only meaningful once the previous transition has
finished.

Per hop::

    draw arc (optional) ─▶ transition_to() ─▶ ping (fire-and-forget)
        ─▶ await transition / timer ─▶ pause ─▶ remove arc

When the surface returns an awaitable from ``transition_to`` the executor
waits for genuine completion, then the hop's pause.  Surfaces that return
nothing fall back to a single timer of ``duration + pause``.

Overlay and audio failures are logged and swallowed; errors from
``get_center`` / ``transition_to`` propagate to the caller.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
import random
from typing import Any, Optional

from ..config import CueBand, ExecutorConfig
from ..geo.arc import interpolate_arc
from .plan import Hop, HopPhase, HopPlan
from .planner import RandomSource, rand_int, rand_range

log = logging.getLogger(__name__)


class AnimationExecutor:
    """Sequential hop player.

    Parameters
    ----------
    config : ExecutorConfig, optional
        Arc resolution and per-phase cue bands.
    rng : RandomSource, optional
        Source for cue pitch/length; defaults to a fresh ``random.Random``.
    """

    def __init__(
        self,
        config: Optional[ExecutorConfig] = None,
        rng: Optional[RandomSource] = None,
    ) -> None:
        self._cfg = config or ExecutorConfig()
        self._rng = rng or random.Random()

    def _band_for(self, phase: HopPhase) -> CueBand:
        if phase is HopPhase.SETTLE:
            return self._cfg.settle_cue
        if phase is HopPhase.APPROACH:
            return self._cfg.approach_cue
        return self._cfg.search_cue

    # ── Best-effort side effects ─────────────────────────────────────

    def _draw_arc(self, surface, hop: Hop) -> Any:
        start = surface.get_center()
        try:
            points = interpolate_arc(start, hop.destination, self._cfg.arc_steps)
            return surface.draw_path(points)
        except Exception as exc:
            log.warning("Arc overlay failed (%s → %s): %s", start, hop.destination, exc)
            return None

    def _remove_arc(self, surface, handle: Any) -> None:
        try:
            surface.remove_overlay(handle)
        except Exception as exc:
            log.warning("Arc overlay removal failed: %s", exc)

    def _emit_cue(self, audio, hop: Hop) -> None:
        band = self._band_for(hop.phase)
        freq = rand_int(self._rng, *band.frequency_hz)
        dur = rand_range(self._rng, *band.duration_s)
        try:
            audio.ping(freq, dur)
        except Exception as exc:
            log.debug("Cue %d Hz dropped: %s", freq, exc)

    # ── Public interface ──────────────────────────────────────────────

    async def execute(self, surface, plan: HopPlan, audio=None) -> None:
        """Play every hop of *plan* on *surface*; returns when the last hop settles."""
        loop = asyncio.get_running_loop()
        started = loop.time()

        for index, hop in enumerate(plan):
            overlay = self._draw_arc(surface, hop) if hop.draw_arc else None

            try:
                transition = surface.transition_to(hop.destination, hop.zoom, hop.duration_s)
                if audio is not None:
                    self._emit_cue(audio, hop)

                log.debug(
                    "Hop %d/%d %s → %s z=%.2f %.2fs +%dms%s",
                    index + 1, len(plan), hop.phase.name, hop.destination,
                    hop.zoom, hop.duration_s, hop.pause_ms,
                    " arc" if overlay is not None else "",
                )

                if inspect.isawaitable(transition):
                    await transition
                    await asyncio.sleep(hop.pause_ms / 1000.0)
                else:
                    await asyncio.sleep(hop.total_s)
            finally:
                # the arc never outlives its hop, even when the camera fails
                if overlay is not None:
                    self._remove_arc(surface, overlay)

        log.info(
            "Executed %d hops in %.1f s, settled on %s",
            len(plan), loop.time() - started, plan.final_hop.destination,
        )

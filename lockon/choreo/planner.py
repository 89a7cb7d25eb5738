"""
Hop planner — turns a target coordinate into a three-phase camera plan.

Plan structure
──────────────
  A. SEARCH    5–9 random hops over habitable latitudes, softly kept out
               of a window around the target so the hunt "misses" first.
  B. APPROACH  2–3 hops converging on the target with shrinking offsets.
  C. SETTLE    bounce-in: three warm-up zoom bands, an optional overshoot,
               an optional micro-correction, then the exact final centre.

All randomness comes from the injected ``rng`` (anything with a
``random()`` method returning floats in [0, 1)), so a seeded
``random.Random`` reproduces a plan.  Every loop has a fixed bound: a
degenerate source that always returns the same value still terminates.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Protocol

from ..config import PlannerConfig, SettleStep
from ..geo.coords import Coordinate, clamp_lat, clamp_zoom, lon_delta, wrap_lon
from .plan import Hop, HopPhase, HopPlan

log = logging.getLogger(__name__)


class RandomSource(Protocol):
    def random(self) -> float: ...


def rand_range(rng: RandomSource, lo: float, hi: float) -> float:
    return lo + (hi - lo) * rng.random()


def rand_int(rng: RandomSource, lo: int, hi: int) -> int:
    """Uniform integer in [lo, hi] (both inclusive)."""
    # min() guards sources that can return exactly 1.0
    return min(hi, lo + int(rng.random() * (hi - lo + 1)))


class HopPlanner:
    """Builds :class:`HopPlan` objects from a :class:`PlannerConfig`."""

    def __init__(self, config: Optional[PlannerConfig] = None) -> None:
        self._cfg = config or PlannerConfig()

    @property
    def config(self) -> PlannerConfig:
        return self._cfg

    # ── Public interface ──────────────────────────────────────────────

    def plan(self, target: Coordinate, rng: RandomSource) -> HopPlan:
        target = target.normalized()
        hops: List[Hop] = []
        hops.extend(self._search_hops(target, rng))
        hops.extend(self._approach_hops(target, rng))
        hops.extend(self._settle_hops(target, rng))
        plan = HopPlan(hops)
        log.info("Planned %r toward %s (%.1f s)", plan, target, plan.total_s)
        return plan

    # ── Phase A: search ───────────────────────────────────────────────

    def _in_exclusion(self, candidate: Coordinate, target: Coordinate) -> bool:
        win = self._cfg.exclusion
        return (
            abs(candidate.lat - target.lat) < win.lat_deg
            and abs(lon_delta(target.lon, candidate.lon)) < win.lon_deg
        )

    def _random_global_point(self, target: Coordinate, rng: RandomSource) -> Coordinate:
        """Random point away from *target*; soft bias, gives up after N draws."""
        cfg = self._cfg
        candidate = target
        for _ in range(max(1, cfg.exclusion.max_attempts)):
            candidate = Coordinate(
                clamp_lat(rand_range(rng, *cfg.search_lat)),
                wrap_lon(rand_range(rng, *cfg.search_lon)),
            )
            if not self._in_exclusion(candidate, target):
                break
        return candidate

    def _search_hops(self, target: Coordinate, rng: RandomSource) -> List[Hop]:
        cfg = self._cfg
        n = rand_int(rng, *cfg.search_hops)
        hops = []
        for _ in range(n):
            dest = self._random_global_point(target, rng)
            hops.append(Hop(
                destination=dest,
                zoom=clamp_zoom(rand_int(rng, *cfg.search_zoom)),
                duration_s=rand_range(rng, *cfg.search_duration_s),
                pause_ms=rand_int(rng, *cfg.search_pause_ms),
                draw_arc=rng.random() < cfg.arc_probability,
                phase=HopPhase.SEARCH,
            ))
        return hops

    # ── Phase B: approach ─────────────────────────────────────────────

    def _approach_hops(self, target: Coordinate, rng: RandomSource) -> List[Hop]:
        cfg = self._cfg
        n = rand_int(rng, *cfg.approach_hops)
        hops = []
        for scale in range(n, 0, -1):
            d_lat = rand_range(rng, -cfg.approach_lat_offset, cfg.approach_lat_offset) * scale
            d_lon = rand_range(rng, -cfg.approach_lon_offset, cfg.approach_lon_offset) * scale
            hops.append(Hop(
                destination=target.offset(d_lat, d_lon),
                zoom=clamp_zoom(rand_int(rng, *cfg.approach_zoom)),
                duration_s=rand_range(rng, *cfg.approach_duration_s),
                pause_ms=rand_int(rng, *cfg.approach_pause_ms),
                draw_arc=rng.random() < cfg.arc_probability,
                phase=HopPhase.APPROACH,
            ))
        return hops

    # ── Phase C: settle ───────────────────────────────────────────────

    def _jittered(self, target: Coordinate, rng: RandomSource) -> Coordinate:
        cfg = self._cfg
        return target.offset(
            rand_range(rng, -cfg.jitter_lat, cfg.jitter_lat),
            rand_range(rng, -cfg.jitter_lon, cfg.jitter_lon),
        )

    def _settle_hop(
        self, dest: Coordinate, zoom: float, duration_s: float, pause_ms: int,
    ) -> Hop:
        return Hop(
            destination=dest,
            zoom=clamp_zoom(zoom),
            duration_s=duration_s,
            pause_ms=pause_ms,
            draw_arc=False,
            phase=HopPhase.SETTLE,
        )

    def _warmup(self, step: SettleStep, target: Coordinate, rng: RandomSource) -> Hop:
        return self._settle_hop(
            self._jittered(target, rng),
            rand_int(rng, int(step.zoom[0]), int(step.zoom[1])),
            rand_range(rng, *step.duration_s),
            rand_int(rng, *step.pause_ms),
        )

    def _settle_hops(self, target: Coordinate, rng: RandomSource) -> List[Hop]:
        cfg = self._cfg
        hops = [self._warmup(step, target, rng) for step in cfg.warmups]

        if rng.random() < cfg.overshoot_probability:
            hops.append(self._settle_hop(
                self._jittered(target, rng),
                cfg.final_zoom + rand_range(rng, *cfg.overshoot_zoom),
                rand_range(rng, *cfg.overshoot_duration_s),
                rand_int(rng, *cfg.overshoot_pause_ms),
            ))

        if rng.random() < cfg.correction_probability:
            hops.append(self._settle_hop(
                self._jittered(target, rng),
                cfg.final_zoom - rand_range(rng, *cfg.correction_zoom),
                rand_range(rng, *cfg.correction_duration_s),
                rand_int(rng, *cfg.correction_pause_ms),
            ))

        # Exact centre, no jitter: the hunt always ends on target.
        hops.append(self._settle_hop(
            target,
            cfg.final_zoom,
            rand_range(rng, *cfg.final_duration_s),
            rand_int(rng, *cfg.final_pause_ms),
        ))
        return hops

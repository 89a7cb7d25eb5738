"""Hop and HopPlan — the immutable output of the planner."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Sequence, Tuple

from ..geo.coords import Coordinate


class HopPhase(Enum):
    SEARCH = auto()     # random globe-spanning hops
    APPROACH = auto()   # converging offsets around the target
    SETTLE = auto()     # bounce-in over the target


@dataclass(frozen=True)
class Hop:
    destination: Coordinate
    zoom: float
    duration_s: float
    pause_ms: int
    draw_arc: bool = False
    phase: HopPhase = HopPhase.SEARCH

    @property
    def total_s(self) -> float:
        return self.duration_s + self.pause_ms / 1000.0


class HopPlan(Sequence[Hop]):
    """Ordered, non-empty, read-only sequence of hops."""

    __slots__ = ("_hops",)

    def __init__(self, hops: Sequence[Hop]) -> None:
        if not hops:
            raise ValueError("A hop plan needs at least the final settle hop")
        self._hops: Tuple[Hop, ...] = tuple(hops)

    def __getitem__(self, index):
        return self._hops[index]

    def __len__(self) -> int:
        return len(self._hops)

    def __iter__(self) -> Iterator[Hop]:
        return iter(self._hops)

    def __repr__(self) -> str:
        counts = ", ".join(
            f"{p.name.lower()}={len(self.by_phase(p))}" for p in HopPhase
        )
        return f"HopPlan({len(self._hops)} hops: {counts})"

    @property
    def final_hop(self) -> Hop:
        return self._hops[-1]

    @property
    def total_s(self) -> float:
        return sum(h.total_s for h in self._hops)

    def by_phase(self, phase: HopPhase) -> Tuple[Hop, ...]:
        return tuple(h for h in self._hops if h.phase is phase)

"""Hop planning and playback."""
from __future__ import annotations

from .executor import AnimationExecutor
from .plan import Hop, HopPhase, HopPlan
from .planner import HopPlanner, RandomSource

__all__ = [
    "AnimationExecutor",
    "Hop",
    "HopPhase",
    "HopPlan",
    "HopPlanner",
    "RandomSource",
]

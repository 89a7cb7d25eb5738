"""
Tunable constants for the hunt, grouped into dataclass sections.

Every threshold the planner, executor and audio heartbeat use lives here so
the choreography can be reshaped from a JSON file without touching code::

    {
      "planner": {"final_zoom": 12, "exclusion": {"lat_deg": 20}},
      "heartbeat": {"base_hz": 300}
    }
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields, is_dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

log = logging.getLogger(__name__)

Range = Tuple[float, float]
IntRange = Tuple[int, int]


# ── Planner ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ExclusionWindow:
    """Soft keep-out box around the target for search hops."""
    lat_deg: float = 15.0
    lon_deg: float = 30.0
    max_attempts: int = 8


@dataclass(frozen=True)
class SettleStep:
    zoom: Range
    duration_s: Range
    pause_ms: IntRange


@dataclass(frozen=True)
class PlannerConfig:
    # Phase A: global search
    search_hops: IntRange = (5, 9)
    search_lat: Range = (-60.0, 70.0)
    search_lon: Range = (-180.0, 180.0)
    search_zoom: IntRange = (2, 4)
    search_duration_s: Range = (0.7, 1.5)
    search_pause_ms: IntRange = (120, 300)
    exclusion: ExclusionWindow = field(default_factory=ExclusionWindow)

    # Phase B: approach
    approach_hops: IntRange = (2, 3)
    approach_lat_offset: float = 14.0
    approach_lon_offset: float = 20.0
    approach_zoom: IntRange = (3, 5)
    approach_duration_s: Range = (0.9, 1.6)
    approach_pause_ms: IntRange = (160, 360)

    arc_probability: float = 0.6

    # Phase C: bounce-in settle
    warmups: Tuple[SettleStep, ...] = (
        SettleStep(zoom=(5, 7), duration_s=(0.7, 1.3), pause_ms=(100, 200)),
        SettleStep(zoom=(8, 10), duration_s=(0.6, 1.2), pause_ms=(90, 190)),
        SettleStep(zoom=(11, 12), duration_s=(0.6, 1.1), pause_ms=(80, 180)),
    )
    overshoot_probability: float = 0.95
    overshoot_zoom: Range = (0.8, 2.4)
    overshoot_duration_s: Range = (0.6, 1.0)
    overshoot_pause_ms: IntRange = (80, 170)
    correction_probability: float = 0.7
    correction_zoom: Range = (0.3, 1.2)
    correction_duration_s: Range = (0.5, 0.9)
    correction_pause_ms: IntRange = (80, 160)
    final_zoom: float = 13.0
    final_duration_s: Range = (0.6, 1.0)
    final_pause_ms: IntRange = (90, 180)
    jitter_lat: float = 0.25
    jitter_lon: float = 0.35


# ── Executor ──────────────────────────────────────────────────────────

@dataclass(frozen=True)
class CueBand:
    """Frequency / duration window for the ping emitted with a hop."""
    frequency_hz: IntRange
    duration_s: Range


@dataclass(frozen=True)
class ExecutorConfig:
    arc_steps: int = 32
    search_cue: CueBand = CueBand(frequency_hz=(200, 360), duration_s=(0.05, 0.12))
    approach_cue: CueBand = CueBand(frequency_hz=(200, 360), duration_s=(0.05, 0.12))
    settle_cue: CueBand = CueBand(frequency_hz=(320, 560), duration_s=(0.06, 0.12))


# ── Audio ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class HeartbeatConfig:
    base_hz: float = 280.0
    hz_jitter: IntRange = (-60, 120)
    duration_s: Range = (0.05, 0.12)
    base_period_ms: float = 260.0
    period_jitter_ms: IntRange = (-60, 120)
    unlock_hz: float = 520.0
    unlock_duration_s: float = 0.06


@dataclass(frozen=True)
class AudioConfig:
    enabled: bool = True
    sample_rate: float = 48000.0


# ── Outer layers ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class OscConfig:
    host: str = "127.0.0.1"
    port: int = 57130
    prefix: str = "/lockon"


@dataclass(frozen=True)
class HuntConfig:
    planner: PlannerConfig = field(default_factory=PlannerConfig)
    executor: ExecutorConfig = field(default_factory=ExecutorConfig)
    heartbeat: HeartbeatConfig = field(default_factory=HeartbeatConfig)
    audio: AudioConfig = field(default_factory=AudioConfig)
    osc: OscConfig = field(default_factory=OscConfig)
    start_cue: Tuple[float, float] = (360.0, 0.08)
    lock_cue: Tuple[float, float] = (800.0, 0.12)
    replay_lock_cue: Tuple[float, float] = (700.0, 0.12)
    opening_lat: float = 25.0
    opening_lon: float = 120.0
    opening_zoom: float = 2.0
    opening_wait_ms: IntRange = (450, 850)
    locate_timeout_s: float = 10.0


# ── Loading ───────────────────────────────────────────────────────────

def _coerce(current: Any, value: Any) -> Any:
    """Convert JSON values into the shape of the field they override."""
    if is_dataclass(current):
        if not isinstance(value, dict):
            raise ValueError(f"Expected an object for {type(current).__name__}")
        return _apply(current, value)
    if isinstance(current, tuple):
        if current and is_dataclass(current[0]):
            return tuple(_apply(current[0], v) for v in value)
        return tuple(value)
    if isinstance(current, float) and isinstance(value, int):
        return float(value)
    return value


def _apply(section: Any, overrides: Dict[str, Any]) -> Any:
    known = {f.name: f for f in fields(section)}
    changes: Dict[str, Any] = {}
    for key, value in overrides.items():
        if key not in known:
            raise ValueError(
                f"Unknown key '{key}' in {type(section).__name__} config"
            )
        changes[key] = _coerce(getattr(section, key), value)
    return replace(section, **changes)


def load_config(path: Optional[Path] = None) -> HuntConfig:
    """Load a :class:`HuntConfig`, overriding defaults from *path* if given."""
    cfg = HuntConfig()
    if path is None:
        return cfg
    with Path(path).open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top-level JSON value must be an object")
    cfg = _apply(cfg, data)
    log.info("Config loaded from %s (%d sections overridden)", path, len(data))
    return cfg

"""Gesture-gated procedural audio cues."""
from __future__ import annotations

from .context import AudioContext, AudioState
from .cues import AudioCueEngine, HeartbeatState
from .synth import PingShape, synthesize_ping

__all__ = [
    "AudioContext",
    "AudioCueEngine",
    "AudioState",
    "HeartbeatState",
    "PingShape",
    "synthesize_ping",
]

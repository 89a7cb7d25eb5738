"""
Shared fixtures for the lockon test suite.
"""
import time
from dataclasses import replace
from typing import List

import pytest

from lockon.audio.context import AudioContext
from lockon.config import HuntConfig, PlannerConfig, SettleStep


class ConstantRandom:
    """Random source that always returns the same value."""

    def __init__(self, value: float) -> None:
        self.value = value

    def random(self) -> float:
        return self.value


class FakeStream:
    """Stand-in for a sounddevice OutputStream."""

    def __init__(self, sample_rate: float = 48000.0, frames: int = 1024) -> None:
        self.sample_rate = sample_rate
        self.frames = frames
        self.started = False
        self.closed = False
        self.writes = 0

    def start(self) -> None:
        self.started = True

    def write(self, data) -> None:
        self.writes += 1
        time.sleep(0.002)

    def stop(self) -> None:
        pass

    def close(self) -> None:
        self.closed = True


class FakeAudio:
    """Records pings instead of synthesizing them."""

    def __init__(self) -> None:
        self.pings: List[tuple] = []
        self.heartbeat_starts = 0
        self.heartbeat_stops = 0

    def ping(self, frequency, duration) -> None:
        self.pings.append((frequency, duration))

    def start_heartbeat(self) -> None:
        self.heartbeat_starts += 1

    def stop_heartbeat(self) -> None:
        self.heartbeat_stops += 1


@pytest.fixture
def streams() -> List[FakeStream]:
    return []


@pytest.fixture
def audio_context(streams):
    """An AudioContext whose output stream is a FakeStream."""
    def factory(sample_rate, frames):
        stream = FakeStream(sample_rate, frames)
        streams.append(stream)
        return stream

    ctx = AudioContext(sample_rate=8000.0, stream_factory=factory)
    yield ctx
    ctx.close()


@pytest.fixture
def fast_planner_config() -> PlannerConfig:
    """Planner config with millisecond-scale timings so plans play instantly."""
    base = PlannerConfig()
    quick = (0.001, 0.002)
    return replace(
        base,
        search_duration_s=quick,
        search_pause_ms=(0, 0),
        approach_duration_s=quick,
        approach_pause_ms=(0, 0),
        warmups=tuple(
            SettleStep(zoom=s.zoom, duration_s=quick, pause_ms=(0, 0)) for s in base.warmups
        ),
        overshoot_duration_s=quick,
        overshoot_pause_ms=(0, 0),
        correction_duration_s=quick,
        correction_pause_ms=(0, 0),
        final_duration_s=quick,
        final_pause_ms=(0, 0),
    )


@pytest.fixture
def fast_hunt_config(fast_planner_config) -> HuntConfig:
    return HuntConfig(planner=fast_planner_config, opening_wait_ms=(0, 0))

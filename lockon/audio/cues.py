"""
Audio cue engine — pings, gesture unlock and the hunt heartbeat.

The engine owns one :class:`AudioContext` (injected or created on first
use) and is the only thing allowed to resume or close it.  Audio is
gesture-gated: until ``unlock()`` runs in response to a real user input
the context stays suspended, pings are silently dropped and a heartbeat
request is parked as PENDING instead of being lost.

All failures inside the audio path degrade to silence; nothing here
raises into the animation.
"""
from __future__ import annotations

import asyncio
import logging
import random
from enum import Enum, auto
from typing import Optional

from ..choreo.planner import RandomSource, rand_int, rand_range
from ..config import HeartbeatConfig
from .context import AudioContext, AudioState
from .synth import DEFAULT_SHAPE, PingShape, synthesize_ping

log = logging.getLogger(__name__)


class HeartbeatState(Enum):
    OFF = auto()
    PENDING = auto()    # requested while suspended; starts on unlock
    RUNNING = auto()


class AudioCueEngine:
    """Fire-and-forget ping player with a hunt heartbeat.

    Parameters
    ----------
    context : AudioContext, optional
        The audio device resource.  Created lazily when omitted.
    config : HeartbeatConfig, optional
        Heartbeat cadence and the unlock confirmation ping.
    rng : RandomSource, optional
        Source for heartbeat pitch / period jitter.
    shape : PingShape, optional
        Envelope and filter constants for synthesis.
    """

    def __init__(
        self,
        context: Optional[AudioContext] = None,
        config: Optional[HeartbeatConfig] = None,
        rng: Optional[RandomSource] = None,
        shape: PingShape = DEFAULT_SHAPE,
    ) -> None:
        self._context = context
        self._cfg = config or HeartbeatConfig()
        self._rng = rng or random.Random()
        self._shape = shape
        self._heartbeat_state = HeartbeatState.OFF
        self._heartbeat_task: Optional[asyncio.Task] = None
        self._pings_played = 0

    # ── context ───────────────────────────────────────────────────────

    def _ensure_context(self) -> Optional[AudioContext]:
        try:
            if self._context is None:
                self._context = AudioContext()
            self._context.ensure()
            return self._context
        except Exception as exc:
            log.debug("Audio context unavailable: %s", exc)
            return None

    @property
    def state(self) -> AudioState:
        if self._context is None:
            return AudioState.UNINITIALIZED
        return self._context.state

    @property
    def heartbeat_state(self) -> HeartbeatState:
        return self._heartbeat_state

    @property
    def pings_played(self) -> int:
        return self._pings_played

    # ── pings ─────────────────────────────────────────────────────────

    def ping(self, frequency: float, duration: float) -> None:
        """Play one radar ping.  Dropped while the context is not running."""
        ctx = self._ensure_context()
        if ctx is None or ctx.state is not AudioState.RUNNING:
            return
        try:
            samples = synthesize_ping(frequency, duration, ctx.sample_rate, self._shape)
            if ctx.play(samples):
                self._pings_played += 1
        except Exception as exc:
            log.debug("Ping %.0f Hz / %.3f s failed: %s", frequency, duration, exc)

    def unlock(self) -> bool:
        """Resume audio in response to a user gesture.

        Returns True when this call brought the context up; repeated calls
        are no-ops and return False.
        """
        ctx = self._ensure_context()
        if ctx is None or ctx.state is AudioState.RUNNING:
            return False
        try:
            ctx.resume()
        except Exception as exc:
            log.warning("Audio unlock failed, continuing silently: %s", exc)
            return False

        log.info("Audio unlocked")
        self.ping(self._cfg.unlock_hz, self._cfg.unlock_duration_s)
        if self._heartbeat_state is HeartbeatState.PENDING:
            try:
                self.start_heartbeat()
            except RuntimeError as exc:
                log.warning("Heartbeat left pending, no running event loop: %s", exc)
        return True

    # ── heartbeat ─────────────────────────────────────────────────────

    def start_heartbeat(self) -> None:
        """Start the hunt heartbeat, or park it until unlock.

        Must be called from the event loop thread.  Any running heartbeat
        is stopped first.
        """
        ctx = self._ensure_context()
        if ctx is None:
            return
        if ctx.state is AudioState.SUSPENDED:
            self._cancel_task()
            self._heartbeat_state = HeartbeatState.PENDING
            log.debug("Heartbeat pending until audio unlock")
            return

        loop = asyncio.get_running_loop()
        self.stop_heartbeat()
        self._heartbeat_task = loop.create_task(self._heartbeat_loop(), name="hunt-heartbeat")
        self._heartbeat_state = HeartbeatState.RUNNING
        log.debug("Heartbeat started")

    def stop_heartbeat(self) -> None:
        if self._heartbeat_state is HeartbeatState.OFF:
            return
        self._cancel_task()
        self._heartbeat_state = HeartbeatState.OFF
        log.debug("Heartbeat stopped")

    def _cancel_task(self) -> None:
        if self._heartbeat_task is not None:
            self._heartbeat_task.cancel()
            self._heartbeat_task = None

    async def _heartbeat_loop(self) -> None:
        cfg = self._cfg
        while True:
            period_ms = cfg.base_period_ms + rand_int(self._rng, *cfg.period_jitter_ms)
            await asyncio.sleep(max(0.01, period_ms / 1000.0))
            self.ping(
                cfg.base_hz + rand_int(self._rng, *cfg.hz_jitter),
                rand_range(self._rng, *cfg.duration_s),
            )

    # ── teardown ──────────────────────────────────────────────────────

    def close(self) -> None:
        self.stop_heartbeat()
        if self._context is not None:
            self._context.close()

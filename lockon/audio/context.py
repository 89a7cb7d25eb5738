"""
Audio context — the single audio device resource for cue playback.

Lifecycle::

    UNINITIALIZED ──ensure()──▶ SUSPENDED ──resume()──▶ RUNNING
                                     └────────close()────────┴──▶ CLOSED

Creating the context does not touch the sound card.  The output stream is
only opened by ``resume()``, and ``resume()`` must only be called in
response to a user gesture (see ``AudioCueEngine.unlock``).  Nothing in
this module resumes on its own.

Playback follows the blocking-write model: a dedicated thread mixes the
active voices into fixed-size chunks and hands each chunk to
``stream.write()``, a blocking C call that releases the GIL while
PortAudio plays it.

    play() ──▶ [voice list] ──▶ _play_loop() mix ──▶ stream.write()

Voices are released as soon as their last sample has been mixed; if the
stream fails or the context is closed every pending voice is released.
"""
from __future__ import annotations

import logging
import threading
from enum import Enum, auto
from typing import Callable, List, Optional

import numpy as np

log = logging.getLogger(__name__)


class AudioState(Enum):
    UNINITIALIZED = auto()
    SUSPENDED = auto()
    RUNNING = auto()
    CLOSED = auto()


StreamFactory = Callable[[float, int], object]


def sounddevice_stream(sample_rate: float, frames: int):
    """Open a blocking mono float32 output stream on the default device."""
    import sounddevice as sd

    return sd.OutputStream(
        samplerate=sample_rate,
        channels=1,
        dtype="float32",
        blocksize=frames,
        latency="low",
    )


class _Voice:
    __slots__ = ("samples", "pos")

    def __init__(self, samples: np.ndarray) -> None:
        self.samples = samples
        self.pos = 0


class AudioContext:
    """Gesture-gated mixing output.

    Parameters
    ----------
    sample_rate : float
        Output sample rate in Hz.
    stream_factory : callable, optional
        ``factory(sample_rate, frames) -> stream`` with ``start()``,
        ``write(ndarray)``, ``stop()`` and ``close()``.  Defaults to a
        sounddevice ``OutputStream``.
    """

    # Frames per blocking write.  1024 / 48000 ≈ 21 ms per write.
    WRITE_FRAMES = 1024

    # Hard limit on simultaneous voices; oldest are dropped beyond it.
    MAX_VOICES = 32

    def __init__(
        self,
        sample_rate: float = 48000.0,
        stream_factory: Optional[StreamFactory] = None,
    ) -> None:
        self.sample_rate = sample_rate
        self._factory = stream_factory or sounddevice_stream
        self._state = AudioState.UNINITIALIZED
        self._lock = threading.Lock()
        self._voices: List[_Voice] = []
        self._stream = None
        self._running = False
        self._thread: Optional[threading.Thread] = None
        self._frames_played = 0

    # ── state ─────────────────────────────────────────────────────────

    @property
    def state(self) -> AudioState:
        return self._state

    @property
    def active_voices(self) -> int:
        with self._lock:
            return len(self._voices)

    @property
    def current_time(self) -> float:
        """Seconds of audio handed to the device since resume."""
        return self._frames_played / self.sample_rate

    def ensure(self) -> None:
        """Create the context (suspended) if it does not exist yet."""
        if self._state is AudioState.UNINITIALIZED:
            self._state = AudioState.SUSPENDED
            log.debug("Audio context created (suspended)")
        elif self._state is AudioState.CLOSED:
            raise RuntimeError("audio context is closed")

    def resume(self) -> None:
        """Open the output stream and start playback.  Gesture-only."""
        self.ensure()
        if self._state is AudioState.RUNNING:
            return

        # a stream left over from a failed playback thread
        self._close_stream()

        self._stream = self._factory(self.sample_rate, self.WRITE_FRAMES)
        try:
            self._stream.start()
        except Exception:
            self._close_stream()
            raise
        self._running = True
        self._state = AudioState.RUNNING

        self._thread = threading.Thread(
            target=self._play_loop, daemon=True, name="cue-playback"
        )
        self._thread.start()
        log.info(
            "Audio running: %.0f Hz, write %d frames",
            self.sample_rate, self.WRITE_FRAMES,
        )

    # ── voices ────────────────────────────────────────────────────────

    def play(self, samples: np.ndarray) -> bool:
        """Queue *samples* for mixing.  Dropped unless the context is running."""
        if self._state is not AudioState.RUNNING or len(samples) == 0:
            return False
        voice = _Voice(np.ascontiguousarray(samples, dtype=np.float32).ravel())
        with self._lock:
            if len(self._voices) >= self.MAX_VOICES:
                self._voices.pop(0)
            self._voices.append(voice)
        return True

    def _render(self, frames: int) -> np.ndarray:
        """Mix the next *frames* samples of every voice; release finished ones."""
        out = np.zeros(frames, dtype=np.float32)
        with self._lock:
            alive: List[_Voice] = []
            for v in self._voices:
                chunk = v.samples[v.pos:v.pos + frames]
                out[:len(chunk)] += chunk
                v.pos += len(chunk)
                if v.pos < len(v.samples):
                    alive.append(v)
            self._voices = alive
        np.clip(out, -1.0, 1.0, out=out)
        return out

    def _release_all(self) -> None:
        with self._lock:
            self._voices.clear()

    # ── playback thread ───────────────────────────────────────────────

    def _play_loop(self) -> None:
        frames = self.WRITE_FRAMES
        try:
            while self._running:
                chunk = self._render(frames)
                self._stream.write(chunk.reshape(-1, 1))
                self._frames_played += frames
        except Exception as exc:
            # Device vanished or stream closed under us
            log.warning("Audio stream stopped: %s", exc)
            self._running = False
            self._state = AudioState.SUSPENDED
        finally:
            self._release_all()

    # ── teardown ──────────────────────────────────────────────────────

    def _close_stream(self) -> None:
        if self._stream is not None:
            try:
                self._stream.stop()
                self._stream.close()
            except Exception as exc:
                log.debug("Audio stream close: %s", exc)
            self._stream = None

    def close(self) -> None:
        self._running = False
        if self._thread is not None:
            self._thread.join(timeout=2.0)
            self._thread = None
        self._close_stream()
        self._release_all()
        self._state = AudioState.CLOSED

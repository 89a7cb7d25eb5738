"""
Radar-ping synthesis.

Signal chain (one cue):
    triangle osc (downward exp glide)
      → resonant band-pass (swept, block-wise iirpeak)
      → exp attack / decay envelope
      ├── dry ─────────────────────────┐
      └── 160 ms delay → wet gain ─────┴─▶ out

The filter sweep runs block-by-block with the filter state carried
across blocks, which is how a control-rate parameter ramp behaves in a
real-time audio graph.
"""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from scipy import signal as sig


@dataclass(frozen=True)
class PingShape:
    min_start_hz: float = 220.0
    min_end_hz: float = 180.0
    start_ratio: float = 1.2
    end_ratio: float = 0.6
    filter_min_start_hz: float = 200.0
    filter_min_end_hz: float = 180.0
    filter_end_ratio: float = 0.5
    filter_q: float = 10.0
    floor_gain: float = 1e-4
    peak_gain: float = 0.16
    attack_s: float = 0.012
    min_glide_s: float = 0.06
    glide_ratio: float = 0.9
    min_decay_s: float = 0.08
    min_tone_s: float = 0.25
    tail_s: float = 0.18
    echo_delay_s: float = 0.16
    echo_gain: float = 0.18
    block: int = 64


DEFAULT_SHAPE = PingShape()


def _exp_ramp(t: np.ndarray, v0: float, v1: float, t0: float, t1: float) -> np.ndarray:
    """Exponential ramp v0→v1 over [t0, t1]; held outside the window."""
    frac = np.clip((t - t0) / max(t1 - t0, 1e-9), 0.0, 1.0)
    return v0 * (v1 / v0) ** frac


def _swept_bandpass(
    x: np.ndarray,
    center_hz: np.ndarray,
    q: float,
    sample_rate: float,
    block: int,
) -> np.ndarray:
    out = np.empty_like(x)
    zi = np.zeros(2)
    nyquist = sample_rate / 2.0
    for start in range(0, len(x), block):
        stop = min(start + block, len(x))
        w0 = float(np.clip(center_hz[start], 20.0, nyquist * 0.95))
        b, a = sig.iirpeak(w0, q, fs=sample_rate)
        out[start:stop], zi = sig.lfilter(b, a, x[start:stop], zi=zi)
    return out


def synthesize_ping(
    frequency: float,
    duration: float,
    sample_rate: float = 48000.0,
    shape: PingShape = DEFAULT_SHAPE,
) -> np.ndarray:
    """Render one percussive ping as mono float32 samples.

    Parameters
    ----------
    frequency : float
        Nominal pitch in Hz (> 0).  The tone glides from above to below it.
    duration : float
        Nominal cue length in seconds (> 0).  The audible decay ends near
        ``max(0.08, duration)``; the echo tail rings on after that.
    sample_rate : float
        Output rate in Hz.
    """
    if frequency <= 0 or duration <= 0:
        raise ValueError(
            f"ping needs positive frequency and duration, got {frequency} Hz / {duration} s"
        )

    glide_s = max(shape.min_glide_s, duration * shape.glide_ratio)
    decay_s = max(shape.min_decay_s, duration)
    tone_s = max(shape.min_tone_s, duration + shape.tail_s)

    n_tone = int(round(tone_s * sample_rate))
    t = np.arange(n_tone, dtype=np.float64) / sample_rate

    # Oscillator: triangle with exponential downward glide
    f_start = max(shape.min_start_hz, frequency * shape.start_ratio)
    f_end = max(shape.min_end_hz, frequency * shape.end_ratio)
    inst_hz = _exp_ramp(t, f_start, f_end, 0.0, glide_s)
    phase = 2.0 * np.pi * np.cumsum(inst_hz) / sample_rate
    tone = sig.sawtooth(phase, width=0.5)

    # Band-pass sweep
    fc_start = max(shape.filter_min_start_hz, frequency)
    fc_end = max(shape.filter_min_end_hz, frequency * shape.filter_end_ratio)
    fc = _exp_ramp(t, fc_start, fc_end, 0.0, glide_s)
    filtered = _swept_bandpass(tone, fc, shape.filter_q, sample_rate, shape.block)

    # Envelope: fast exp attack to a low peak, exp decay to near silence
    env = np.where(
        t < shape.attack_s,
        _exp_ramp(t, shape.floor_gain, shape.peak_gain, 0.0, shape.attack_s),
        _exp_ramp(t, shape.peak_gain, shape.floor_gain, shape.attack_s, decay_s),
    )
    dry = filtered * env

    # Echo: single tap, no feedback
    delay = int(round(shape.echo_delay_s * sample_rate))
    out = np.zeros(n_tone + delay, dtype=np.float64)
    out[:n_tone] += dry
    out[delay:] += dry * shape.echo_gain
    return out.astype(np.float32)

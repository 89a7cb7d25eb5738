import numpy as np
import pytest

from lockon.audio.synth import DEFAULT_SHAPE, PingShape, synthesize_ping


@pytest.mark.parametrize("frequency, duration", [(360, 0.08), (800, 0.12), (220, 0.05), (520, 0.5)])
def test_ping_length_covers_tone_and_echo(frequency, duration):
    sr = 8000.0
    samples = synthesize_ping(frequency, duration, sr)
    tone_s = max(0.25, duration + 0.18)
    expected = int(round(tone_s * sr)) + int(round(0.16 * sr))
    assert samples.shape == (expected,)
    assert samples.dtype == np.float32


def test_ping_is_finite_and_quiet():
    samples = synthesize_ping(400, 0.1, 48000.0)
    assert np.all(np.isfinite(samples))
    peak = float(np.max(np.abs(samples)))
    assert 0.0 < peak < 1.0


def test_ping_decays_before_the_echo_returns():
    sr = 48000.0
    samples = synthesize_ping(400, 0.08, sr)
    attack = samples[: int(0.05 * sr)]
    settled = samples[int(0.14 * sr): int(0.16 * sr)]
    assert np.max(np.abs(settled)) < np.max(np.abs(attack)) * 0.1


def test_echo_adds_a_quieter_copy():
    sr = 48000.0
    dry_only = PingShape(echo_gain=0.0)
    dry = synthesize_ping(400, 0.08, sr, dry_only)
    wet = synthesize_ping(400, 0.08, sr, DEFAULT_SHAPE)
    delay = int(round(0.16 * sr))
    np.testing.assert_allclose(wet[:delay], dry[:delay], atol=1e-6)
    np.testing.assert_allclose(wet[delay:] - dry[delay:], dry[:-delay] * 0.18, atol=1e-5)


@pytest.mark.parametrize("frequency, duration", [(0, 0.1), (-5, 0.1), (400, 0), (400, -1)])
def test_rejects_non_positive_parameters(frequency, duration):
    with pytest.raises(ValueError):
        synthesize_ping(frequency, duration)

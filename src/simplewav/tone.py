"""Test-signal generation."""

import numpy as np
from numpy import pi
from numpy.typing import NDArray

from simplewav.pcm import PCMBuffer


def sine(
    frequency: float,
    duration: float,
    sample_rate: int,
    amplitude: float = 1.0,
) -> NDArray[np.float64]:
    """Generate ``duration`` seconds of a sine wave starting at phase 0."""
    num_samples = int(round(duration * sample_rate))
    t = np.arange(num_samples, dtype=np.float64) / sample_rate
    return amplitude * np.sin(2.0 * pi * frequency * t)


def apply_fade(signal: NDArray[np.float64], sample_rate: int, fade: float) -> NDArray[np.float64]:
    """Apply a linear fade-in and fade-out of ``fade`` seconds each.

    A fade of zero returns the signal unchanged. Fades longer than half the
    signal overlap, so the peak gain never reaches 1.0.
    """
    if fade < 0:
        raise ValueError(f"fade must be >= 0, got {fade}")
    if fade == 0 or len(signal) == 0:
        return signal.copy()

    idx = np.arange(len(signal), dtype=np.float64)
    fade_samples = fade * sample_rate
    fade_in = np.minimum(idx / fade_samples, 1.0)
    fade_out = np.minimum((len(signal) - idx) / fade_samples, 1.0)
    return signal * fade_in * fade_out


def tone_buffer(
    frequency: float = 100.0,
    duration: float = 3.0,
    sample_rate: int = 48000,
    bit_depth: int = 16,
    fade: float = 0.1,
    amplitude: float = 1.0,
    num_channels: int = 1,
) -> PCMBuffer:
    """Build a faded sine tone, duplicated onto ``num_channels`` channels."""
    if num_channels < 1:
        raise ValueError(f"num_channels must be >= 1, got {num_channels}")

    signal = apply_fade(sine(frequency, duration, sample_rate, amplitude), sample_rate, fade)
    return PCMBuffer(
        sample_rate=sample_rate,
        bit_depth=bit_depth,
        channels=[signal.copy() for _ in range(num_channels)],
    )

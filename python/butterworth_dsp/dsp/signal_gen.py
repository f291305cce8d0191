# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""Test signals for measuring filters, as floats between -1 and 1."""

import numpy as np
import scipy.signal as spsig


def sin(fs: float, length: float, freq: float, amplitude: float) -> np.ndarray:
    """
    Generate a sinusoid.

    Parameters
    ----------
    fs : float
        The sampling frequency in Hz.
    length : float
        The duration of the signal in seconds.
    freq : float
        The frequency of the sinusoid in Hz.
    amplitude : float
        The amplitude of the sinusoid.

    Returns
    -------
    np.ndarray
        The generated sinusoid.
    """
    t = np.arange(int(fs * length)) / fs
    return amplitude * np.sin(2 * np.pi * freq * t)


def log_chirp(
    fs: float,
    length: float,
    amplitude: float,
    start: float = 20,
    stop: float = 20000,
) -> np.ndarray:
    """
    Generate a logarithmic chirp, starting at 0 so filters see no step.

    Parameters
    ----------
    fs : float
        The sample rate of the signal.
    length : float
        The duration of the signal in seconds.
    amplitude : float
        The amplitude of the signal.
    start : float, optional
        The starting frequency in Hz.
    stop : float, optional
        The ending frequency in Hz, limited to just below fs/2.
    """
    stop = min(stop, 0.49 * fs)
    t = np.arange(int(fs * length)) / fs
    return amplitude * spsig.chirp(t, start, length, stop, "log", phi=-90)


def white_noise(fs: float, length: float, amplitude: float, seed=0) -> np.ndarray:
    """
    Generate uniformly distributed white noise.

    The noise is repeatable for a given ``seed``.
    """
    rng = np.random.default_rng(seed)
    return amplitude * (2 * rng.random(round(length * fs)) - 1)

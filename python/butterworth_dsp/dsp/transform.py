# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""
s-plane frequency transforms.

These move a normalised analog prototype to the requested cutoff or
band. Target frequencies are pre-warped so that, after the bilinear
transform, the critical frequencies of the digital filter land exactly
where they were requested.

See also `https://docs.scipy.org/doc/scipy/reference/generated/scipy.signal.lp2bp_zpk.html`_
"""

import numpy as np

from butterworth_dsp.dsp.errors import InvalidBandwidth, InvalidFrequency
from butterworth_dsp.dsp.layout import INF, is_inf, layout


def check_sample_rate(fs) -> float:
    """Check the sample rate is a finite positive number of Hz."""
    try:
        fs = float(fs)
    except (TypeError, ValueError):
        raise InvalidFrequency(f"sample rate must be a number, not {fs!r}") from None
    if not np.isfinite(fs) or fs <= 0:
        raise InvalidFrequency(f"sample rate must be positive, not {fs}")
    return fs


def check_filter_freq(filter_freq, fs: float) -> float:
    """Check a frequency lies strictly between 0 and fs/2."""
    try:
        filter_freq = float(filter_freq)
    except (TypeError, ValueError):
        raise InvalidFrequency(f"frequency must be a number, not {filter_freq!r}") from None
    if not np.isfinite(filter_freq) or filter_freq <= 0:
        raise InvalidFrequency(f"frequency must be positive, not {filter_freq}")
    if filter_freq >= fs / 2:
        raise InvalidFrequency(
            f"frequency ({filter_freq} Hz) must be less than fs/2 ({fs / 2} Hz)"
        )
    return filter_freq


def check_bandwidth(center_freq: float, bw, fs: float) -> float:
    """Check the band ``center_freq -/+ bw/2`` lies strictly between 0
    and fs/2. The centre frequency must already have been checked.
    """
    if bw is None:
        raise InvalidBandwidth("band filters need a bandwidth")
    try:
        bw = float(bw)
    except (TypeError, ValueError):
        raise InvalidBandwidth(f"bandwidth must be a number, not {bw!r}") from None
    if not np.isfinite(bw) or bw <= 0:
        raise InvalidBandwidth(f"bandwidth must be positive, not {bw}")
    if bw >= fs / 2:
        raise InvalidBandwidth(f"bandwidth ({bw} Hz) must be less than fs/2 ({fs / 2} Hz)")
    if center_freq - bw / 2 <= 0:
        raise InvalidBandwidth(
            f"band ({center_freq} Hz -/+ {bw / 2} Hz) must start above 0 Hz"
        )
    if center_freq + bw / 2 >= fs / 2:
        raise InvalidBandwidth(
            f"band ({center_freq} Hz -/+ {bw / 2} Hz) must end below fs/2 ({fs / 2} Hz)"
        )
    return bw


def prewarp(freq: float, fs: float) -> float:
    """
    Pre-warp a frequency for the bilinear transform.

    Parameters
    ----------
    freq : float
        Frequency in Hz, less than fs/2.
    fs : float
        Sample rate in Hz.

    Returns
    -------
    float
        The analog angular frequency in rad/s that the bilinear
        transform maps onto ``freq``.
    """
    return 2 * fs * np.tan(np.pi * freq / fs)


def _band_edges(center_freq, bw, fs):
    """Return the pre-warped geometric centre and width of a band."""
    w_lo = prewarp(center_freq - bw / 2, fs)
    w_hi = prewarp(center_freq + bw / 2, fs)
    return np.sqrt(w_lo * w_hi), w_hi - w_lo


def _far_edge(center_freq, fs):
    """The end of the spectrum farthest from a band: infinity (which
    becomes Nyquist) for bands in the lower half, else DC.
    """
    return np.inf if center_freq < fs / 4 else 0.0


def _scale(c, wc):
    return INF if is_inf(c) else c * wc


def _invert(c, wc):
    if is_inf(c):
        return 0j
    if c == 0:
        return INF
    return wc / c


def _to_bandpass(c, w0, bw):
    """Roots of ``s^2 - c*bw*s + w0^2``, the points ``s`` that
    ``(s^2 + w0^2)/(bw*s)`` maps onto ``c``.
    """
    if is_inf(c):
        return 0j, INF
    if c == 0:
        return 1j * w0, -1j * w0
    half = c * bw / 2
    d = np.sqrt(complex(half * half - w0 * w0))
    return half + d, half - d


def _to_bandstop(c, w0, bw):
    """Roots of ``s^2 - (bw/c)*s + w0^2``, the points ``s`` that
    ``bw*s/(s^2 + w0^2)`` maps onto ``c``.
    """
    if is_inf(c):
        return 1j * w0, -1j * w0
    if c == 0:
        return 0j, INF
    half = bw / (2 * c)
    d = np.sqrt(complex(half * half - w0 * w0))
    return half + d, half - d


def _map_each(out: layout, analog: layout, func):
    """Apply a one to one s-plane mapping to every pole and zero."""
    for pair in analog:
        if pair.is_single_pole():
            out.add(func(pair.poles[0]).real, func(pair.zeros[0]))
        else:
            out.add_pair(
                func(pair.poles[0]),
                func(pair.zeros[0]),
                func(pair.poles[1]),
                func(pair.zeros[1]),
            )


def _map_band(out: layout, analog: layout, func):
    """Apply a one to two s-plane mapping to every pole and zero.

    A conjugate pair becomes two conjugate pairs, and a single real pole
    becomes a pair that is either conjugate or real.
    """
    for pair in analog:
        p1, p2 = func(pair.poles[0])
        z1, z2 = func(pair.zeros[0])
        if pair.is_single_pole():
            out.add_pair(p1, z1, p2, z2)
        else:
            out.add_conjugate_pairs(p1, z1)
            out.add_conjugate_pairs(p2, z2)


def lowpass_transform(out: layout, analog: layout, fs: float, filter_freq: float) -> layout:
    """
    Move a normalised prototype to a low-pass cutoff, ``s -> s*wc``.

    Parameters
    ----------
    out : layout
        The layout to write the result into, at least as large as
        ``analog``.
    analog : layout
        Normalised analog prototype.
    fs : float
        Sample rate in Hz.
    filter_freq : float
        Cutoff frequency in Hz.

    Returns
    -------
    layout
        ``out``.

    Raises
    ------
    InvalidFrequency
        If fs or filter_freq is out of range.
    """
    fs = check_sample_rate(fs)
    filter_freq = check_filter_freq(filter_freq, fs)
    wc = prewarp(filter_freq, fs)

    out.reset()
    _map_each(out, analog, lambda c: _scale(c, wc))
    out.set_normal(analog.normal_w * wc, analog.normal_gain)
    return out


def highpass_transform(out: layout, analog: layout, fs: float, filter_freq: float) -> layout:
    """
    Move a normalised prototype to a high-pass cutoff, ``s -> wc/s``.

    Zeros at infinity become zeros at DC.

    Parameters
    ----------
    out : layout
        The layout to write the result into.
    analog : layout
        Normalised analog prototype.
    fs : float
        Sample rate in Hz.
    filter_freq : float
        Cutoff frequency in Hz.

    Returns
    -------
    layout
        ``out``.
    """
    fs = check_sample_rate(fs)
    filter_freq = check_filter_freq(filter_freq, fs)
    wc = prewarp(filter_freq, fs)

    out.reset()
    _map_each(out, analog, lambda c: _invert(c, wc))
    if analog.normal_w == 0:
        normal_w = np.inf
    elif np.isinf(analog.normal_w):
        normal_w = 0.0
    else:
        normal_w = wc / analog.normal_w
    out.set_normal(normal_w, analog.normal_gain)
    return out


def bandpass_transform(
    out: layout, analog: layout, fs: float, center_freq: float, bw: float
) -> layout:
    """
    Move a normalised prototype to a band, ``s -> (s^2 + w0^2)/(B*s)``.

    The band edges ``center_freq -/+ bw/2`` are both pre-warped, ``w0``
    is their geometric mean and ``B`` their difference, so the digital
    filter has its -3 dB points at the requested edges. Every pole and
    zero becomes two, so ``out`` must hold twice as many poles as
    ``analog``.

    Parameters
    ----------
    out : layout
        The layout to write the result into.
    analog : layout
        Normalised analog prototype.
    fs : float
        Sample rate in Hz.
    center_freq : float
        Centre frequency of the band in Hz.
    bw : float
        Width of the band in Hz.

    Returns
    -------
    layout
        ``out``.

    Raises
    ------
    InvalidFrequency
        If fs or center_freq is out of range.
    InvalidBandwidth
        If the band does not fit between 0 and fs/2.
    """
    fs = check_sample_rate(fs)
    center_freq = check_filter_freq(center_freq, fs)
    bw = check_bandwidth(center_freq, bw, fs)
    w0, width = _band_edges(center_freq, bw, fs)

    out.reset()
    _map_band(out, analog, lambda c: _to_bandpass(c, w0, width))
    # DC of the prototype becomes the band centre
    if analog.normal_w == 0:
        normal_w = w0
    else:
        normal_w = _far_edge(center_freq, fs)
    out.set_normal(normal_w, analog.normal_gain)
    return out


def bandstop_transform(
    out: layout, analog: layout, fs: float, center_freq: float, bw: float
) -> layout:
    """
    Move a normalised prototype to a stop band, ``s -> B*s/(s^2 + w0^2)``.

    Zeros at infinity become zeros on the imaginary axis at ``w0``.

    Parameters
    ----------
    out : layout
        The layout to write the result into.
    analog : layout
        Normalised analog prototype.
    fs : float
        Sample rate in Hz.
    center_freq : float
        Centre frequency of the stop band in Hz.
    bw : float
        Width of the stop band in Hz.

    Returns
    -------
    layout
        ``out``.
    """
    fs = check_sample_rate(fs)
    center_freq = check_filter_freq(center_freq, fs)
    bw = check_bandwidth(center_freq, bw, fs)
    w0, width = _band_edges(center_freq, bw, fs)

    out.reset()
    _map_band(out, analog, lambda c: _to_bandstop(c, w0, width))
    if np.isinf(analog.normal_w):
        normal_w = w0
    else:
        normal_w = _far_edge(center_freq, fs)
    out.set_normal(normal_w, analog.normal_gain)
    return out

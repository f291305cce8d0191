# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""The bilinear transform from the s-plane to the z-plane."""

import numpy as np

from butterworth_dsp.dsp.layout import is_inf, layout
from butterworth_dsp.dsp.transform import check_sample_rate


def bilinear(c: complex, fs: float) -> complex:
    """
    Map an s-plane point to the z-plane, ``z = (1 + s/(2fs))/(1 - s/(2fs))``.

    Points at infinity map to ``z = -1``. Points in the left half plane
    map strictly inside the unit circle.
    """
    if is_inf(c):
        return complex(-1.0, 0.0)
    c = c / (2 * fs)
    return (1 + c) / (1 - c)


def bilinear_transform(out: layout, analog: layout, fs: float) -> layout:
    """
    Convert an analog layout into a digital layout.

    The analog layout must already be pre-warped (see
    :func:`butterworth_dsp.dsp.transform.prewarp`) so that the bilinear
    frequency compression puts the critical frequencies in the right
    place.

    Parameters
    ----------
    out : layout
        The layout to write the digital poles and zeros into.
    analog : layout
        The transformed analog layout.
    fs : float
        Sample rate in Hz.

    Returns
    -------
    layout
        ``out``, with the normalisation frequency converted to
        rad/sample.
    """
    fs = check_sample_rate(fs)

    out.reset()
    for pair in analog:
        if pair.is_single_pole():
            out.add(bilinear(pair.poles[0], fs).real, bilinear(pair.zeros[0], fs).real)
        else:
            out.add_pair(
                bilinear(pair.poles[0], fs),
                bilinear(pair.zeros[0], fs),
                bilinear(pair.poles[1], fs),
                bilinear(pair.zeros[1], fs),
            )

    # the analog frequency axis is compressed onto 0 to pi, with
    # infinity landing on Nyquist
    out.set_normal(2 * np.arctan(analog.normal_w / (2 * fs)), analog.normal_gain)
    return out

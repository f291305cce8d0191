# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""The biquad DSP block."""

import numpy as np
import numpy.typing as npt
import scipy.signal as spsig

from butterworth_dsp.dsp import generic as dspg
from butterworth_dsp.dsp.errors import UnstableFilterError
from butterworth_dsp.dsp.layout import is_inf, pole_zero_pair


class biquad(dspg.dsp_block):
    """
    A second order biquadratic filter instance.

    This implements a transposed direct form II biquad filter, using
    the coefficients provided at initialisation:
    `a0*y[n] = b0*x[n] + b1*x[n-1] + b2*x[n-2] - a1*y[n-1] - a2*y[n-2]`

    The coefficients are normalised by a0, so a0 is always 1. Each
    channel keeps two state values, which is the same state layout
    `scipy.signal.lfilter` uses, so sample and frame processing can be
    mixed freely.

    Unlike a coefficient change on hardware, updating the coefficients
    does not reset the states. This lets the filter be retuned while
    running.

    Parameters
    ----------
    coeffs : list[float]
        List of biquad coefficients in the form
        `[b0, b1, b2, a0, a1, a2]`. They are normalised by a0.

    Attributes
    ----------
    coeffs : numpy.ndarray
        Normalised biquad coefficients in the form
        `[b0, b1, b2, 1, a1, a2]`.
    """

    def __init__(self, coeffs: list[float], fs: float, n_chans: int = 1):
        super().__init__(fs, n_chans)

        self.coeffs = np.zeros(6)
        self.coeffs[:] = _check_stable(normalise_biquad(coeffs))

        # state variables, two per channel
        self._state = np.zeros((n_chans, 2))

    def update_coeffs(self, new_coeffs: list[float]):
        """Update the saved coefficients to the input values.

        Parameters
        ----------
        new_coeffs : list[float]
            The new coefficients, in the form `[b0, b1, b2, a0, a1, a2]`.
        """
        self.coeffs[:] = _check_stable(normalise_biquad(new_coeffs))

    def process(self, sample: float, channel: int = 0) -> float:
        """
        Filter a single sample using transposed direct form II.

        """
        b0, b1, b2, _, a1, a2 = self.coeffs
        state = self._state[channel]

        y = b0 * sample + state[0]
        state[0] = b1 * sample - a1 * y + state[1]
        state[1] = b2 * sample - a2 * y

        return float(y)

    def process_block(self, samples: npt.ArrayLike, channel: int = 0) -> np.ndarray:
        """
        Filter a block of samples on one channel with
        `scipy.signal.lfilter`, carrying the state between calls.

        Parameters
        ----------
        samples : array_like
            1-D array of input samples.
        channel : int, optional
            The channel index to process the samples on.

        Returns
        -------
        np.ndarray
            The filtered samples.
        """
        y, self._state[channel] = spsig.lfilter(
            self.coeffs[:3], self.coeffs[3:], np.asarray(samples, dtype=float), zi=self._state[channel]
        )
        return y

    def process_frame(self, frame: list[np.ndarray]) -> list[np.ndarray]:
        """
        Take a list frames of samples and return the processed frames.

        A frame is defined as a list of 1-D numpy arrays, where the
        number of arrays is equal to the number of channels, and the
        length of the arrays is equal to the frame size.

        Parameters
        ----------
        frame : list
            List of frames, where each frame is a 1-D numpy array.

        Returns
        -------
        list
            List of processed frames, with the same structure as the input frame.
        """
        return [self.process_block(frame[chan], chan) for chan in range(len(frame))]

    def response(self, w: npt.ArrayLike) -> np.ndarray:
        """
        Evaluate the complex response at normalised angular frequencies.

        Parameters
        ----------
        w : array_like
            Frequencies in radians per sample.

        Returns
        -------
        np.ndarray
            The complex response at each frequency.
        """
        return biquad_response(self.coeffs, w)

    def freq_response(
        self, nfft: int = 1024
    ) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.complex128]]:
        """
        Calculate the frequency response of the biquad filter.

        The coefficients are passed to `scipy.signal.freqz` to calculate
        the frequency response.

        Parameters
        ----------
        nfft : int
            The number of points to compute in the frequency response,
            by default 1024.

        Returns
        -------
        tuple[npt.NDArray[np.float64], npt.NDArray[np.complex128]]
            A tuple containing the frequency vector in Hz and the
            complex frequency response.

        """
        f, h = spsig.freqz(self.coeffs[:3], self.coeffs[3:], worN=nfft, fs=self.fs)

        return f, h

    def poles(self) -> np.ndarray:
        """Return the poles of the biquad in the z-plane."""
        return _section_roots(self.coeffs[3:])

    def zeros(self) -> np.ndarray:
        """Return the zeros of the biquad in the z-plane."""
        return _section_roots(self.coeffs[:3])

    def reset_state(self):
        """Reset the biquad saved states to zero."""
        self._state[:] = 0.0


def biquad_bypass(fs: float, n_chans: int) -> biquad:
    """Return a biquad object with `b0 = 1`, i.e. output=input."""
    coeffs = make_biquad_bypass()
    return biquad(coeffs, fs, n_chans=n_chans)


def _section_roots(poly):
    """Roots of a section polynomial in z, dropping the ones a first
    order section does not have.
    """
    poly = np.trim_zeros(np.asarray(poly, dtype=float), "b")
    if len(poly) < 2:
        return np.array([], dtype=complex)
    return np.roots(poly).astype(complex)


def _check_stable(coeffs: list[float]) -> list[float]:
    """Check the poles are inside the unit circle."""
    poles = _section_roots(coeffs[3:])
    if np.any(np.abs(poles) >= 1):
        raise UnstableFilterError("Poles lie outside the unit circle, the filter is unstable")

    return coeffs


def apply_biquad_gain(coeffs: list[float], gain: float) -> list[float]:
    """Apply linear gain to the b coefficients."""
    coeffs = list(coeffs)
    coeffs[0] = coeffs[0] * gain
    coeffs[1] = coeffs[1] * gain
    coeffs[2] = coeffs[2] * gain

    return coeffs


def normalise_biquad(coeffs: list[float]) -> list[float]:
    """
    Normalise biquad coefficients by dividing by a0.

    Expected input format: [b0, b1, b2, a0, a1, a2]
    Expected output format: [b0, b1, b2, 1, a1, a2]/a0

    """
    if len(coeffs) != 6:
        raise ValueError("expected list of 6 biquad coefficients")
    if coeffs[3] == 0:
        raise ValueError("a0 must not be zero")
    return [float(c / coeffs[3]) for c in coeffs]


def biquad_response(coeffs: list[float], w: npt.ArrayLike) -> np.ndarray:
    """
    Evaluate the complex response of a set of biquad coefficients at
    normalised angular frequencies in radians per sample.
    """
    z1 = np.exp(-1j * np.asarray(w, dtype=float))
    num = coeffs[0] + coeffs[1] * z1 + coeffs[2] * z1**2
    den = coeffs[3] + coeffs[4] * z1 + coeffs[5] * z1**2
    return num / den


def make_biquad_bypass() -> list[float]:
    """
    Create a bypass biquad filter. Only the b0 and a0 coefficients are
    set.

    Returns
    -------
    list[float]
        The coefficients of the biquad filter in the order
        [b0, b1, b2, a0, a1, a2].
    """
    return [1.0, 0.0, 0.0, 1.0, 0.0, 0.0]


def make_biquad_pole_zero(pair: pole_zero_pair) -> list[float]:
    """
    Create the coefficients of the section holding a pair of poles and
    zeros.

    Two poles give `a = [1, -(p1 + p2), p1*p2]` and likewise for the
    zeros, which for a conjugate pair is `[1, -2*Re(p), |p|^2]`. A single
    real pole and zero give a first order section with `a2 = b2 = 0`.
    A zero at infinity contributes no numerator term.

    Parameters
    ----------
    pair : pole_zero_pair
        The z-plane poles and zeros of the section.

    Returns
    -------
    list[float]
        The coefficients of the biquad filter in the order
        [b0, b1, b2, a0, a1, a2], with ``a0 = 1``. The numerator is not
        yet scaled.
    """
    a = _poly(pair.poles)
    b = _poly(pair.zeros)
    return [b[0], b[1], b[2], a[0], a[1], a[2]]


def _poly(roots) -> list[float]:
    """Real polynomial coefficients in z^-1 with the given roots."""
    r1, r2 = roots
    if r2 is None:
        if is_inf(r1):
            return [1.0, 0.0, 0.0]
        return [1.0, -r1.real, 0.0]
    if is_inf(r1) or is_inf(r2):
        raise ValueError("digital zeros cannot be at infinity")
    return [1.0, -(r1 + r2).real, (r1 * r2).real]

# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
import warnings

import numpy as np
import numpy.typing as npt

from . import biquad as bq
from . import utils as utils
from butterworth_dsp.dsp import generic as dspg
from butterworth_dsp.dsp.errors import InvalidOrder
from butterworth_dsp.dsp.layout import layout

# poles closer than this to the unit circle lose precision
PRECISION_MARGIN = 1e-6


class cascaded_biquads(dspg.dsp_block):
    """A class representing a cascade of up to ``max_sections`` biquads.

    This is used to implement a higher order filter built out of
    second order sections, designed from a digital pole/zero layout.

    ``max_sections`` biquad objects are always created, and sections
    beyond those used by the current layout are set to bypass
    (b0 = 1) and skipped when processing.

    Parameters
    ----------
    max_sections : int
        The number of biquads in the cascade, fixed for the life of the
        object.

    Attributes
    ----------
    biquads : list
        List of biquad objects representing each biquad in the cascade.
    n_sections : int
        The number of biquads used by the current layout.

    """

    def __init__(self, max_sections: int, fs, n_chans=1):
        super().__init__(fs, n_chans)
        if max_sections < 1:
            raise InvalidOrder("a cascade needs at least one section")
        self.max_sections = max_sections
        self.biquads = [bq.biquad_bypass(fs, n_chans) for _ in range(max_sections)]
        self.n_sections = 0

    def set_layout(self, digital: layout):
        """Build the biquads from a digital pole/zero layout.

        One section is made for each pair in the layout, in layout
        order, so the same layout always gives the same coefficients.
        The numerator of the first section is then scaled so that the
        gain at the layout's normalisation frequency is its
        normalisation gain.

        All the sections are checked before any are changed, so on error
        the previous coefficients are kept.

        Parameters
        ----------
        digital : layout
            z-plane poles and zeros, with the normalisation frequency in
            radians per sample.

        Raises
        ------
        InvalidOrder
            If the layout needs more sections than the cascade has.
        UnstableFilterError
            If any section has a pole on or outside the unit circle.
        """
        if len(digital) > self.max_sections:
            raise InvalidOrder(
                "layout needs %d sections, the cascade only has %d"
                % (len(digital), self.max_sections)
            )

        coeffs_list = [bq.make_biquad_pole_zero(pair) for pair in digital]
        for coeffs in coeffs_list:
            bq._check_stable(coeffs)

        if coeffs_list:
            h = np.prod([bq.biquad_response(c, digital.normal_w) for c in coeffs_list])
            coeffs_list[0] = bq.apply_biquad_gain(coeffs_list[0], digital.normal_gain / np.abs(h))

            max_radius = np.max(np.abs(digital.poles()))
            if max_radius > 1 - PRECISION_MARGIN:
                warnings.warn(
                    "pole radius (%.9f) is very close to the unit circle," % max_radius
                    + " the filter response may be inaccurate",
                    utils.PrecisionWarning,
                )

        for n in range(self.max_sections):
            if n < len(coeffs_list):
                self.biquads[n].update_coeffs(coeffs_list[n])
            else:
                self.biquads[n].update_coeffs(bq.make_biquad_bypass())

        # the state of a different length cascade does not carry over
        if len(coeffs_list) != self.n_sections:
            self.reset_state()
        self.n_sections = len(coeffs_list)

    def set_fs(self, fs):
        """Set the sample rate used to convert frequencies in Hz.

        This does not change the coefficients, the cascade must be
        designed for the new sample rate separately.
        """
        self.fs = fs
        for biquad in self.biquads:
            biquad.fs = fs

    @property
    def sos(self) -> np.ndarray:
        """The active sections as an ``(n_sections, 6)`` array, in the
        second order section layout used by `scipy.signal`.
        """
        return np.array([biquad.coeffs for biquad in self.biquads[: self.n_sections]]).reshape(
            -1, 6
        )

    def process(self, sample, channel=0):
        """Process the input sample through the cascaded biquads.

        Parameters
        ----------
        sample : float
            The input sample to be processed.
        channel : int
            The channel index to process the sample on.

        Returns
        -------
        float
            The processed output sample.
        """
        y = sample
        for biquad in self.biquads[: self.n_sections]:
            y = biquad.process(y, channel)

        return y

    def process_block(self, samples: npt.ArrayLike, channel: int = 0) -> np.ndarray:
        """Process a block of samples from one channel through the
        cascaded biquads.

        This gives the same result as calling :meth:`process` for each
        sample, and shares the same state.

        Parameters
        ----------
        samples : array_like
            1-D array of input samples.
        channel : int
            The channel index to process the samples on.

        Returns
        -------
        np.ndarray
            The processed samples.
        """
        y = np.array(samples, dtype=float)
        for biquad in self.biquads[: self.n_sections]:
            y = biquad.process_block(y, channel)

        return y

    def process_frame(self, frame):
        """
        Take a list frames of samples and return the processed frames.

        A frame is defined as a list of 1-D numpy arrays, where the
        number of arrays is equal to the number of channels, and the
        length of the arrays is equal to the frame size.

        The all the samples are run through each biquad in turn.

        Parameters
        ----------
        frame : list
            List of frames, where each frame is a 1-D numpy array.

        Returns
        -------
        list
            List of processed frames, with the same structure as the
            input frame.
        """
        y = [np.array(chan, dtype=float) for chan in frame]
        for biquad in self.biquads[: self.n_sections]:
            y = biquad.process_frame(y)

        return y

    def response(self, freqs: npt.ArrayLike) -> np.ndarray:
        """
        Evaluate the complex response of the cascade.

        Parameters
        ----------
        freqs : array_like
            Frequencies in Hz.

        Returns
        -------
        np.ndarray
            The complex response at each frequency.
        """
        w = utils.hz_to_w(freqs, self.fs)
        h = np.ones_like(w, dtype=complex)
        for biquad in self.biquads[: self.n_sections]:
            h = h * biquad.response(w)

        return h

    def freq_response(self, nfft=512):
        """
        Calculate the frequency response of the cascaded biquad filters.

        The response of each biquad is calculated by
        `scipy.signal.freqz`, and the stages are then combined by
        multiplying the complex frequency responses.

        Parameters
        ----------
        nfft : int
            The number of points to compute in the frequency response,
            by default 512.

        Returns
        -------
        tuple[npt.NDArray[np.float64], npt.NDArray[np.complex128]]
            A tuple containing the frequency vector in Hz and the
            complex frequency response.

        """
        f, h_all = self.biquads[0].freq_response(nfft)
        for biquad in self.biquads[1 : self.n_sections]:
            _, h = biquad.freq_response(nfft)
            h_all = h_all * h

        return f, h_all

    def poles(self) -> np.ndarray:
        """Return the z-plane poles of all the active sections."""
        return np.concatenate(
            [np.array([], dtype=complex)]
            + [biquad.poles() for biquad in self.biquads[: self.n_sections]]
        )

    def zeros(self) -> np.ndarray:
        """Return the z-plane zeros of all the active sections."""
        return np.concatenate(
            [np.array([], dtype=complex)]
            + [biquad.zeros() for biquad in self.biquads[: self.n_sections]]
        )

    def reset_state(self):
        """
        Reset the biquad saved states to zero.
        """
        for biquad in self.biquads:
            biquad.reset_state()

        return

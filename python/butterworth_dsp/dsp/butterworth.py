# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""
Butterworth filters built out of cascaded biquads.

Every filter type runs the same pipeline:

1. a normalised analog prototype, :mod:`butterworth_dsp.dsp.analog`
2. a pre-warped s-plane transform to the requested cutoff or band,
   :mod:`butterworth_dsp.dsp.transform`
3. the bilinear transform to the z-plane,
   :mod:`butterworth_dsp.dsp.bilinear`
4. pairing into normalised second order sections,
   :mod:`butterworth_dsp.dsp.cascaded_biquads`

The method follows Neil Robertson's article "Designing Cascaded Biquad
Filters Using the Pole-Zero Method"
`https://www.dsprelated.com/showarticle/1137.php`_
"""

import sys
from enum import Enum
from typing import NamedTuple

from butterworth_dsp.dsp import analog
from butterworth_dsp.dsp import bilinear as bl
from butterworth_dsp.dsp import cascaded_biquads as cbq
from butterworth_dsp.dsp import transform as tr
from butterworth_dsp.dsp.errors import InvalidBandwidth, InvalidGain
from butterworth_dsp.dsp.layout import layout

DEFAULT_MAX_ORDER = 16


class filter_type(str, Enum):
    """The Butterworth filter families."""

    lowpass = "lowpass"
    highpass = "highpass"
    bandpass = "bandpass"
    bandstop = "bandstop"
    lowshelf = "lowshelf"
    highshelf = "highshelf"
    bandshelf = "bandshelf"


class filter_info(NamedTuple):
    """Description of a filter family.

    Attributes
    ----------
    name : str
        Human readable name.
    shelf : bool
        True if the family is built from the shelf prototype and takes a
        gain.
    band : bool
        True if the family takes a bandwidth, and so uses twice as many
        poles as its order.
    params : tuple[str, ...]
        The parameter slots of the family, in order.
    """

    name: str
    shelf: bool
    band: bool
    params: tuple


_TYPE_I = ("sample_rate", "order", "frequency")
_TYPE_II = ("sample_rate", "order", "frequency", "gain_db")
_TYPE_III = ("sample_rate", "order", "frequency", "bandwidth_hz")
_TYPE_IV = ("sample_rate", "order", "frequency", "bandwidth_hz", "gain_db")

FILTER_INFO = {
    filter_type.lowpass: filter_info("Butterworth Low Pass", False, False, _TYPE_I),
    filter_type.highpass: filter_info("Butterworth High Pass", False, False, _TYPE_I),
    filter_type.bandpass: filter_info("Butterworth Band Pass", False, True, _TYPE_III),
    filter_type.bandstop: filter_info("Butterworth Band Stop", False, True, _TYPE_III),
    filter_type.lowshelf: filter_info("Butterworth Low Shelf", True, False, _TYPE_II),
    filter_type.highshelf: filter_info("Butterworth High Shelf", True, False, _TYPE_II),
    filter_type.bandshelf: filter_info("Butterworth Band Shelf", True, True, _TYPE_IV),
}

_TRANSFORMS = {
    filter_type.lowpass: tr.lowpass_transform,
    filter_type.highpass: tr.highpass_transform,
    filter_type.bandpass: tr.bandpass_transform,
    filter_type.bandstop: tr.bandstop_transform,
    filter_type.lowshelf: tr.lowpass_transform,
    filter_type.highshelf: tr.highpass_transform,
    filter_type.bandshelf: tr.bandpass_transform,
}


class butterworth(cbq.cascaded_biquads):
    """A Butterworth filter of any family, implemented using cascaded
    biquads.

    The maximum order is fixed at construction and sets the number of
    biquads. Until :meth:`setup` is called the filter passes its input
    unchanged.

    Parameters
    ----------
    type : filter_type | str
        The filter family, e.g. ``"lowpass"`` or ``"bandshelf"``.
    max_order : int, optional
        The highest order the filter can be set up with, by default 16.
        Band families use ``max_order`` biquads, the others
        ``ceil(max_order/2)``.

    Attributes
    ----------
    filter_type : filter_type
        The filter family.
    max_order : int
        The highest order the filter can be set up with.
    order : int | None
        The current order, None until set up.
    filter_freq : float | None
        The current cutoff or centre frequency in Hz.
    bw : float | None
        The current bandwidth in Hz, for band families.
    gain_db : float | None
        The current shelf gain in dB, for shelf families.
    """

    def __init__(self, type, fs, n_chans=1, max_order=DEFAULT_MAX_ORDER):
        self.filter_type = filter_type(type)
        self.max_order = analog.check_order(max_order, sys.maxsize)

        max_poles = 2 * self.max_order if self.info.band else self.max_order
        super().__init__((max_poles + 1) // 2, fs, n_chans)

        # working space for each design stage
        self._analog = layout(self.max_order)
        self._transformed = layout(max_poles)
        self._digital = layout(max_poles)

        self.order = None
        self.filter_freq = None
        self.bw = None
        self.gain_db = None

    @property
    def info(self) -> filter_info:
        """The description of this filter's family."""
        return FILTER_INFO[self.filter_type]

    @property
    def name(self) -> str:
        """Human readable name of the filter family."""
        return self.info.name

    def setup(self, order: int, filter_freq: float, bw=None, gain_db=None, fs=None):
        """Design the filter and load the coefficients into the biquads.

        All the parameters are checked before anything is designed, and
        nothing is changed if any check fails. Calling setup again with
        the same parameters gives identical coefficients.

        Parameters
        ----------
        order : int
            The order of the filter, between 1 and ``max_order``.
        filter_freq : float
            The -3 dB cutoff frequency for low-pass and high-pass
            filters, the centre frequency for band filters, or the
            frequency where the gain is ``gain_db/2`` for shelves, in Hz.
        bw : float, optional
            The width of the band in Hz, band families only. The -3 dB
            points are at ``filter_freq -/+ bw/2``.
        gain_db : float, optional
            The shelf gain in dB, shelf families only.
        fs : float, optional
            A new sample rate in Hz. Defaults to the current one.

        Returns
        -------
        butterworth
            self

        Raises
        ------
        InvalidOrder
            If the order is not an integer between 1 and max_order.
        InvalidFrequency
            If the sample rate is not positive, or the frequency is not
            between 0 and fs/2.
        InvalidBandwidth
            If the band does not fit between 0 and fs/2, or a bandwidth
            is given for a family without one.
        InvalidGain
            If the gain is not finite, or a gain is given for a family
            without one.
        UnstableFilterError
            If numerical precision puts a pole on the unit circle.
        """
        info = self.info
        order = analog.check_order(order, self.max_order)
        fs = tr.check_sample_rate(self.fs if fs is None else fs)
        filter_freq = tr.check_filter_freq(filter_freq, fs)

        if info.band:
            bw = tr.check_bandwidth(filter_freq, bw, fs)
        elif bw is not None:
            raise InvalidBandwidth(f"{info.name} filters do not have a bandwidth")

        if info.shelf:
            gain_db = analog.check_gain(gain_db)
        elif gain_db is not None:
            raise InvalidGain(f"{info.name} filters do not have a gain")

        if info.shelf:
            analog.analog_lowshelf(self._analog, order, gain_db)
        else:
            analog.analog_lowpass(self._analog, order)

        transform = _TRANSFORMS[self.filter_type]
        if info.band:
            transform(self._transformed, self._analog, fs, filter_freq, bw)
        else:
            transform(self._transformed, self._analog, fs, filter_freq)

        bl.bilinear_transform(self._digital, self._transformed, fs)
        self.set_layout(self._digital)

        self.set_fs(fs)
        self.order = order
        self.filter_freq = filter_freq
        self.bw = bw
        self.gain_db = gain_db

        return self


class butterworth_lowpass(butterworth):
    """A Butterworth lowpass filter implementation using cascaded
    biquads.

    Parameters
    ----------
    N : int
        The order of the Butterworth filter.
    fc : float
        The -3 dB cutoff frequency of the filter.
    """

    def __init__(self, fs, n_chans, N, fc, max_order=DEFAULT_MAX_ORDER):
        super().__init__(filter_type.lowpass, fs, n_chans, max_order)
        self.setup(N, fc)


class butterworth_highpass(butterworth):
    """A Butterworth highpass filter implementation using cascaded
    biquads.

    Parameters
    ----------
    N : int
        The order of the Butterworth filter.
    fc : float
        The -3 dB cutoff frequency of the filter.
    """

    def __init__(self, fs, n_chans, N, fc, max_order=DEFAULT_MAX_ORDER):
        super().__init__(filter_type.highpass, fs, n_chans, max_order)
        self.setup(N, fc)


class butterworth_bandpass(butterworth):
    """A Butterworth bandpass filter implementation using cascaded
    biquads. An order N bandpass uses N biquads.

    Parameters
    ----------
    N : int
        The order of the Butterworth filter.
    fc : float
        The centre frequency of the band.
    bw : float
        The width of the band in Hz, between the -3 dB points.
    """

    def __init__(self, fs, n_chans, N, fc, bw, max_order=DEFAULT_MAX_ORDER):
        super().__init__(filter_type.bandpass, fs, n_chans, max_order)
        self.setup(N, fc, bw=bw)


class butterworth_bandstop(butterworth):
    """A Butterworth bandstop filter implementation using cascaded
    biquads. An order N bandstop uses N biquads.

    Parameters
    ----------
    N : int
        The order of the Butterworth filter.
    fc : float
        The centre frequency of the stop band.
    bw : float
        The width of the stop band in Hz, between the -3 dB points.
    """

    def __init__(self, fs, n_chans, N, fc, bw, max_order=DEFAULT_MAX_ORDER):
        super().__init__(filter_type.bandstop, fs, n_chans, max_order)
        self.setup(N, fc, bw=bw)


class butterworth_lowshelf(butterworth):
    """A Butterworth low shelf filter implementation using cascaded
    biquads. The gain is ``gain_db`` at DC, 0 dB at Nyquist and
    ``gain_db/2`` at ``fc``.

    Parameters
    ----------
    N : int
        The order of the Butterworth filter.
    fc : float
        The shelf frequency.
    gain_db : float
        The shelf gain in dB.
    """

    def __init__(self, fs, n_chans, N, fc, gain_db, max_order=DEFAULT_MAX_ORDER):
        super().__init__(filter_type.lowshelf, fs, n_chans, max_order)
        self.setup(N, fc, gain_db=gain_db)


class butterworth_highshelf(butterworth):
    """A Butterworth high shelf filter implementation using cascaded
    biquads. The gain is 0 dB at DC, ``gain_db`` at Nyquist and
    ``gain_db/2`` at ``fc``.

    Parameters
    ----------
    N : int
        The order of the Butterworth filter.
    fc : float
        The shelf frequency.
    gain_db : float
        The shelf gain in dB.
    """

    def __init__(self, fs, n_chans, N, fc, gain_db, max_order=DEFAULT_MAX_ORDER):
        super().__init__(filter_type.highshelf, fs, n_chans, max_order)
        self.setup(N, fc, gain_db=gain_db)


class butterworth_bandshelf(butterworth):
    """A Butterworth band shelf filter implementation using cascaded
    biquads. The gain is ``gain_db`` in the band and 0 dB away from it.

    Parameters
    ----------
    N : int
        The order of the Butterworth filter.
    fc : float
        The centre frequency of the band.
    bw : float
        The width of the band in Hz.
    gain_db : float
        The gain in the band in dB.
    """

    def __init__(self, fs, n_chans, N, fc, bw, gain_db, max_order=DEFAULT_MAX_ORDER):
        super().__init__(filter_type.bandshelf, fs, n_chans, max_order)
        self.setup(N, fc, bw=bw, gain_db=gain_db)

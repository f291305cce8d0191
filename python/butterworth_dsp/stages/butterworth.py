# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""Butterworth filter stage, which designs a Butterworth filter from a
parameter model or from an ordered list of parameter values.
"""

from typing import NamedTuple, Sequence

import numpy

from butterworth_dsp.design import plot
from butterworth_dsp.dsp import analog
from butterworth_dsp.dsp import butterworth as bw
from butterworth_dsp.dsp import transform as tr
from butterworth_dsp.models import butterworth as bw_models
from butterworth_dsp.models.fields import DEFAULT_FS


class ParamInfo(NamedTuple):
    """Description of one parameter slot.

    Attributes
    ----------
    id : str
        Identity of the slot.
    label : str
        Human readable name.
    units : str
        Units of the value.
    min : float
        Nominal lower limit, for user interfaces.
    max : float
        Nominal upper limit, for user interfaces.
    default : float
        Default value.
    """

    id: str
    label: str
    units: str
    min: float
    max: float
    default: float


# the nominal ranges are for user interfaces, setup checks the real
# limits, which depend on the sample rate
PARAM_INFO = {
    "sample_rate": ParamInfo("sample_rate", "Sample Rate", "Hz", 8000, 192000, DEFAULT_FS),
    "order": ParamInfo("order", "Order", "", 1, bw.DEFAULT_MAX_ORDER, 2),
    "frequency": ParamInfo("frequency", "Frequency", "Hz", 10, 22040, 1000),
    "bandwidth_hz": ParamInfo("bandwidth_hz", "Bandwidth", "Hz", 10, 22040, 500),
    "gain_db": ParamInfo("gain_db", "Gain", "dB", -24, 24, 0),
}

_MODELS = {
    bw.filter_type.lowpass: bw_models.butterworth_lowpass,
    bw.filter_type.highpass: bw_models.butterworth_highpass,
    bw.filter_type.bandpass: bw_models.butterworth_bandpass,
    bw.filter_type.bandstop: bw_models.butterworth_bandstop,
    bw.filter_type.lowshelf: bw_models.butterworth_lowshelf,
    bw.filter_type.highshelf: bw_models.butterworth_highshelf,
    bw.filter_type.bandshelf: bw_models.butterworth_bandshelf,
}

# parameter slot id to model field name
_SLOT_FIELDS = {
    "order": "order",
    "frequency": "filter_freq",
    "bandwidth_hz": "bw",
    "gain_db": "gain_db",
}


class ButterworthFilter:
    """
    A Butterworth filter of any type, configured from parameters.

    The filter is designed by :class:`butterworth_dsp.dsp.butterworth.butterworth`.
    This class only translates parameters, any invalid parameter raises
    the same error as :meth:`butterworth_dsp.dsp.butterworth.butterworth.setup`
    and leaves the filter unchanged.

    Parameters
    ----------
    type : str
        The filter type, e.g. ``"lowpass"``.
    fs : float
        The sample rate in Hz.
    n_chans : int
        The number of channels to filter.
    max_order : int
        The highest order the filter can be set up with.

    Attributes
    ----------
    dsp_block : :class:`butterworth_dsp.dsp.butterworth.butterworth`
        The DSP block that runs the filter.
    parameters : pydantic model or None
        The parameters the filter was last set up with.
    details : dict
        Dictionary of descriptive details of the current design.
    """

    def __init__(
        self, type="lowpass", fs=DEFAULT_FS, n_chans=1, max_order=bw.DEFAULT_MAX_ORDER
    ):
        self.n_chans = n_chans
        self.max_order = max_order
        self.dsp_block = bw.butterworth(type, fs, n_chans, max_order)
        self.parameters = None
        self.details = {}

    @property
    def fs(self):
        """The sample rate in Hz."""
        return self.dsp_block.fs

    @property
    def name(self) -> str:
        """Human readable name of the filter type."""
        return self.dsp_block.name

    @property
    def kind(self) -> bw.filter_type:
        """The filter type."""
        return self.dsp_block.filter_type

    @property
    def param_info(self) -> list[ParamInfo]:
        """The parameter slots of the filter type, in the order
        :meth:`set_param_values` expects them.
        """
        info = [PARAM_INFO[slot] for slot in self.dsp_block.info.params]
        return [p._replace(max=self.max_order) if p.id == "order" else p for p in info]

    def set_parameters(self, parameters, fs=None) -> "ButterworthFilter":
        """Design the filter from a parameter model.

        If the model is for a different filter type, a new DSP block of
        that type replaces the current one once it has been designed.

        Parameters
        ----------
        parameters : ButterworthParameters | BUTTERWORTH_TYPES
            The parameters of the filter.
        fs : float, optional
            A new sample rate in Hz.

        Returns
        -------
        ButterworthFilter
            self
        """
        if isinstance(parameters, bw_models.ButterworthParameters):
            parameters = parameters.filter
        model = parameters.model_dump()

        filter_type = bw.filter_type(model["type"])
        if filter_type == self.kind:
            dsp_block = self.dsp_block
        else:
            dsp_block = bw.butterworth(filter_type, self.fs, self.n_chans, self.max_order)

        dsp_block.setup(
            model["order"],
            model["filter_freq"],
            bw=model.get("bw"),
            gain_db=model.get("gain_db"),
            fs=fs,
        )

        self.dsp_block = dsp_block
        self.parameters = parameters
        self.details = dict(model, type=dsp_block.name.lower(), fs=dsp_block.fs)
        return self

    def set_param_values(self, values: Sequence[float]) -> "ButterworthFilter":
        """Design the filter from an ordered list of parameter values.

        The values are in the order given by :attr:`param_info`, which is
        ``[sample_rate, order, frequency]`` followed by ``bandwidth_hz``
        for band types and ``gain_db`` for shelf types. Extra values are
        ignored.

        The values are checked in the same order and with the same
        errors as :meth:`butterworth_dsp.dsp.butterworth.butterworth.setup`.
        A missing value is treated as unset, so a list without the
        bandwidth of a band type raises ``InvalidBandwidth``.

        Parameters
        ----------
        values : Sequence[float]
            The parameter values.

        Returns
        -------
        ButterworthFilter
            self
        """
        slots = self.dsp_block.info.params
        by_slot = {slot: values[n] if n < len(values) else None for n, slot in enumerate(slots)}

        # user interfaces pass every value as a float
        order = by_slot["order"]
        if isinstance(order, float) and order.is_integer():
            order = int(order)
        by_slot["order"] = analog.check_order(order, self.max_order)

        fs = tr.check_sample_rate(by_slot["sample_rate"])
        by_slot["frequency"] = tr.check_filter_freq(by_slot["frequency"], fs)
        if "bandwidth_hz" in by_slot:
            by_slot["bandwidth_hz"] = tr.check_bandwidth(
                by_slot["frequency"], by_slot["bandwidth_hz"], fs
            )
        if "gain_db" in by_slot:
            by_slot["gain_db"] = analog.check_gain(by_slot["gain_db"])

        fields = {_SLOT_FIELDS[slot]: by_slot[slot] for slot in slots if slot in _SLOT_FIELDS}
        model = _MODELS[self.kind](**fields)
        return self.set_parameters(model, fs=fs)

    def get_param_values(self) -> list[float]:
        """Return the current design as an ordered list of parameter
        values, see :meth:`set_param_values`. Before the filter is set
        up the slots hold their defaults, apart from the sample rate,
        which is always the filter's own.
        """
        if self.parameters is None:
            values = {p.id: p.default for p in self.param_info}
        else:
            model = self.parameters.model_dump()
            values = {slot: model[field] for slot, field in _SLOT_FIELDS.items() if field in model}
        values["sample_rate"] = self.fs
        return [values[slot] for slot in self.dsp_block.info.params]

    def process(self, in_channels):
        """
        Run the filter on the input channels and return the output.

        Parameters
        ----------
        in_channels : list
            List of numpy arrays, one per channel.

        Returns
        -------
        list
            List of numpy arrays.
        """
        return self.dsp_block.process_frame(in_channels)

    def get_frequency_response(self, nfft=512) -> tuple[numpy.ndarray, numpy.ndarray]:
        """
        Return the frequency response of this instance's dsp_block attribute.

        Parameters
        ----------
        nfft
            The length of the FFT

        Returns
        -------
        ndarray, ndarray
            Frequency values, Frequency response for this stage.
        """
        return self.dsp_block.freq_response(nfft)

    def plot_frequency_response(self, nfft=512):
        """
        Plot magnitude and phase response of this filter using matplotlib.

        Parameters
        ----------
        nfft : int
            Number of frequency bins to calculate in the fft.
        """
        f, h = self.get_frequency_response(nfft)
        return plot.plot_frequency_response(f, h, name=self.name)

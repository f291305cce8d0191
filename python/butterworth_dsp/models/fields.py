# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""Shared pydantic fields of the filter parameter models.

The fields carry the limits that hold at any sample rate. The upper
limits depend on the sample rate and maximum order, so they are checked
when the filter is set up, which raises the errors in
:mod:`butterworth_dsp.dsp.errors`.
"""

from functools import partial

from pydantic import Field

DEFAULT_FS = 48000

DEFAULT_ORDER = partial(Field, default=2, ge=1, description="Order of the filter.")
DEFAULT_FILTER_FREQ = partial(
    Field,
    default=1000.0,
    gt=0,
    description="Cutoff frequency, or centre frequency of band filters, in Hz.",
)
DEFAULT_BW = partial(
    Field,
    default=500.0,
    gt=0,
    description="Bandwidth of the filter in Hz, between the band edges.",
)
DEFAULT_GAIN_DB = partial(Field, default=0.0, description="Shelf gain of the filter in dB.")

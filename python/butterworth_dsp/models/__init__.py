# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""The pydantic models of the Butterworth filter parameters."""

from .butterworth import (
    BUTTERWORTH_TYPES,
    ButterworthParameters,
    butterworth_bandpass,
    butterworth_bandshelf,
    butterworth_bandstop,
    butterworth_highpass,
    butterworth_highshelf,
    butterworth_lowpass,
    butterworth_lowshelf,
)

# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""Pydantic models of the different Butterworth filter types."""

from typing import Annotated, Literal, Union

from pydantic import Field

from butterworth_dsp.models.fields import (
    DEFAULT_BW,
    DEFAULT_FILTER_FREQ,
    DEFAULT_GAIN_DB,
    DEFAULT_ORDER,
)
from butterworth_dsp.models.stage import StageParameters


class butterworth_lowpass(StageParameters):
    """Parameters for a Butterworth low pass filter."""

    type: Literal["lowpass"] = "lowpass"
    order: int = DEFAULT_ORDER()
    filter_freq: float = DEFAULT_FILTER_FREQ()


class butterworth_highpass(StageParameters):
    """Parameters for a Butterworth high pass filter."""

    type: Literal["highpass"] = "highpass"
    order: int = DEFAULT_ORDER()
    filter_freq: float = DEFAULT_FILTER_FREQ()


class butterworth_bandpass(StageParameters):
    """Parameters for a Butterworth band pass filter."""

    type: Literal["bandpass"] = "bandpass"
    order: int = DEFAULT_ORDER()
    filter_freq: float = DEFAULT_FILTER_FREQ()
    bw: float = DEFAULT_BW()


class butterworth_bandstop(StageParameters):
    """Parameters for a Butterworth band stop filter."""

    type: Literal["bandstop"] = "bandstop"
    order: int = DEFAULT_ORDER()
    filter_freq: float = DEFAULT_FILTER_FREQ()
    bw: float = DEFAULT_BW()


class butterworth_lowshelf(StageParameters):
    """Parameters for a Butterworth low shelf filter."""

    type: Literal["lowshelf"] = "lowshelf"
    order: int = DEFAULT_ORDER()
    filter_freq: float = DEFAULT_FILTER_FREQ()
    gain_db: float = DEFAULT_GAIN_DB()


class butterworth_highshelf(StageParameters):
    """Parameters for a Butterworth high shelf filter."""

    type: Literal["highshelf"] = "highshelf"
    order: int = DEFAULT_ORDER()
    filter_freq: float = DEFAULT_FILTER_FREQ()
    gain_db: float = DEFAULT_GAIN_DB()


class butterworth_bandshelf(StageParameters):
    """Parameters for a Butterworth band shelf filter."""

    type: Literal["bandshelf"] = "bandshelf"
    order: int = DEFAULT_ORDER()
    filter_freq: float = DEFAULT_FILTER_FREQ()
    bw: float = DEFAULT_BW()
    gain_db: float = DEFAULT_GAIN_DB()


BUTTERWORTH_TYPES = Annotated[
    Union[
        butterworth_lowpass,
        butterworth_highpass,
        butterworth_bandpass,
        butterworth_bandstop,
        butterworth_lowshelf,
        butterworth_highshelf,
        butterworth_bandshelf,
    ],
    Field(discriminator="type"),
]


class ButterworthParameters(StageParameters):
    """Parameters for a Butterworth filter stage.

    Attributes
    ----------
    filter : BUTTERWORTH_TYPES
        The type of Butterworth filter and its parameters.
    """

    filter: BUTTERWORTH_TYPES = Field(
        default_factory=butterworth_lowpass,
        description="Type of Butterworth filter to implement and its parameters.",
    )

# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""Configuration errors raised while designing a filter.

All of these are raised before any filter coefficients are changed, so
a filter that fails to set up keeps its previous configuration.
"""


class FilterConfigError(ValueError):
    """Base class for filter configuration errors."""

    pass


class InvalidOrder(FilterConfigError):
    """The filter order is not an integer in the range 1 to max_order."""

    pass


class InvalidFrequency(FilterConfigError):
    """A sample rate or frequency is not positive, or a frequency is not
    below the Nyquist frequency.
    """

    pass


class InvalidBandwidth(FilterConfigError):
    """The bandwidth is not positive, or places the band outside
    (0, fs/2).
    """

    pass


class InvalidGain(FilterConfigError):
    """The shelf gain is missing or not finite."""

    pass


class UnstableFilterError(FilterConfigError):
    """A designed section has a pole on or outside the unit circle."""

    pass

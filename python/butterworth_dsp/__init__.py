# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""
Butterworth IIR filter design library.

Designs low-pass, high-pass, band-pass, band-stop and shelving
Butterworth filters and runs them as cascades of second order sections.
"""

from importlib import metadata as _metadata

__version__ = _metadata.version("butterworth_dsp")

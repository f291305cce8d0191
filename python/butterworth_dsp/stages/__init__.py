# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.

"""Butterworth filter stages, configured from parameter models or
parameter value lists.
"""

from .butterworth import ButterworthFilter, ParamInfo, PARAM_INFO

# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""Generic pydantic models for filter parameters."""

from pydantic import BaseModel


class StageParameters(BaseModel, extra="ignore"):
    """The pydantic model defining the runtime configurable parameters of a filter."""

    pass

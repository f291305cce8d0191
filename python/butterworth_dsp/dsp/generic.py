# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""The generic DSP block."""

from copy import deepcopy

from docstring_inheritance import NumpyDocstringInheritanceInitMeta


class dsp_block(metaclass=NumpyDocstringInheritanceInitMeta):
    """
    Generic DSP block, all blocks should inherit from this class and
    implement it's methods.

    By using the metaclass NumpyDocstringInheritanceInitMeta, parameter
    and attribute documentation can be inherited by the child classes.

    Parameters
    ----------
    fs : float
        Sampling frequency in Hz.
    n_chans : int
        Number of channels the block runs on. Each channel has its own
        filter state.

    Attributes
    ----------
    fs : float
        Sampling frequency in Hz.
    n_chans : int
        Number of channels the block runs on.
    """

    def __init__(self, fs, n_chans):
        self.fs = fs
        self.n_chans = n_chans
        return

    def process(self, sample: float, channel=0):
        """
        Take one new sample and give it back. Do no processing for the
        generic block.

        Parameters
        ----------
        sample : float
            The input sample to be processed.
        channel : int, optional
            The channel index to process the sample on. Default is 0.

        Returns
        -------
        float
            The processed sample.
        """
        raise NotImplementedError

    def process_channels(self, sample_list: list[float]) -> list[float]:
        """
        Process the sample in each audio channel.

        The generic implementation calls self.process for each channel.

        Parameters
        ----------
        sample_list : list[float]
            The input samples to be processed. Each sample represents a
            different channel

        Returns
        -------
        list[float]
            The processed samples for each channel.
        """
        output_samples = deepcopy(sample_list)
        for channel in range(len(output_samples)):
            output_samples[channel] = self.process(sample_list[channel], channel)
        return output_samples

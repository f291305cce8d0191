# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""Normalised analog Butterworth prototypes.

The prototypes have a cutoff of 1 rad/s and are written into an s-plane
:class:`butterworth_dsp.dsp.layout.layout`, ready to be moved to the
target frequency by :mod:`butterworth_dsp.dsp.transform`.
"""

import numbers

import numpy as np

from butterworth_dsp.dsp.errors import InvalidGain, InvalidOrder
from butterworth_dsp.dsp.layout import INF, layout


def check_order(order, max_order: int) -> int:
    """Check the filter order is an integer between 1 and max_order.

    Raises
    ------
    InvalidOrder
        If the order is not an integer, or is out of range.
    """
    if isinstance(order, bool) or not isinstance(order, numbers.Integral):
        raise InvalidOrder(f"order must be an integer, not {order!r}")
    if order < 1:
        raise InvalidOrder(f"order must be at least 1, not {order}")
    if order > max_order:
        raise InvalidOrder(f"order {order} is greater than the maximum order {max_order}")
    return int(order)


def check_gain(gain_db) -> float:
    """Check the shelf gain is a finite number of dB.

    Raises
    ------
    InvalidGain
        If the gain is missing or is not finite.
    """
    if gain_db is None:
        raise InvalidGain("shelf filters need a gain_db")
    try:
        gain_db = float(gain_db)
    except (TypeError, ValueError):
        raise InvalidGain(f"gain_db must be a number, not {gain_db!r}") from None
    if not np.isfinite(gain_db):
        raise InvalidGain(f"gain_db must be finite, not {gain_db}")
    return gain_db


def _pole_angles(order: int) -> np.ndarray:
    """Angles of the upper half plane Butterworth poles, in order of
    increasing Q.
    """
    ks = np.arange(order // 2)
    theta = np.pi / 2 + (2 * ks + 1) * np.pi / (2 * order)
    # reverse sequence of poles, put high Q last to minimise chance of clipping
    return np.flip(theta)


def analog_lowpass(proto: layout, order: int) -> layout:
    """
    Design a normalised analog Butterworth low-pass prototype.

    The ``order`` poles are placed on the unit circle in the left half
    of the s-plane at angles ``pi/2 + (2k + 1)*pi/(2*order)``, giving a
    maximally flat magnitude response with -3 dB at 1 rad/s. All the
    zeros are at infinity.

    Parameters
    ----------
    proto : layout
        The layout to write the prototype into. Any previous contents
        are discarded.
    order : int
        Filter order.

    Returns
    -------
    layout
        ``proto``, normalised to unity gain at DC.

    Raises
    ------
    InvalidOrder
        If the order is out of range for ``proto``. ``proto`` is left
        unchanged.
    """
    order = check_order(order, proto.max_poles)

    proto.reset()
    for theta in _pole_angles(order):
        proto.add_conjugate_pairs(np.exp(1j * theta), INF)

    if order % 2:
        proto.add(-1.0, INF)

    proto.set_normal(0.0, 1.0)
    return proto


def analog_lowshelf(proto: layout, order: int, gain_db: float) -> layout:
    """
    Design a normalised analog Butterworth low shelf prototype.

    The poles use the low-pass angles scaled to a radius of ``1/g`` and
    the zeros the same angles at a radius of ``g``, where
    ``g = (10^(gain_db/20))^(1/(2*order))``. The response is ``gain_db``
    at DC, 0 dB at infinity and ``gain_db/2`` at 1 rad/s, with
    Butterworth flatness on each shelf.

    Parameters
    ----------
    proto : layout
        The layout to write the prototype into.
    order : int
        Filter order.
    gain_db : float
        The shelf gain in dB, negative for a cut.

    Returns
    -------
    layout
        ``proto``, normalised to unity gain at infinity.

    Raises
    ------
    InvalidOrder
        If the order is out of range for ``proto``.
    InvalidGain
        If the gain is not finite.
    """
    order = check_order(order, proto.max_poles)
    gain_db = check_gain(gain_db)

    g = (10 ** (gain_db / 20)) ** (1 / (2 * order))

    proto.reset()
    for theta in _pole_angles(order):
        c = np.exp(1j * theta)
        proto.add_conjugate_pairs(c / g, c * g)

    if order % 2:
        proto.add(-1.0 / g, -g)

    proto.set_normal(np.inf, 1.0)
    return proto

# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""Pole/zero layouts shared by the analog and digital design stages."""

import numpy as np

from butterworth_dsp.dsp.errors import InvalidOrder

# a zero (or pole) at infinity in the s-plane
INF = complex(np.inf, 0.0)


def is_inf(c: complex) -> bool:
    """Return True if ``c`` is a point at infinity."""
    return bool(np.isinf(c))


class pole_zero_pair:
    """
    The poles and zeros of one second order section.

    A pair is either two poles and two zeros, which must be a complex
    conjugate pair or two real values so that the section has real
    coefficients, or a single real pole and zero, which forms a first
    order section.

    Parameters
    ----------
    p1 : complex
        The first pole.
    z1 : complex
        The first zero.
    p2 : complex, optional
        The second pole, omitted for a single pole pair.
    z2 : complex, optional
        The second zero, omitted for a single pole pair.

    Attributes
    ----------
    poles : tuple[complex, complex | None]
        The poles of the pair.
    zeros : tuple[complex, complex | None]
        The zeros of the pair.
    """

    __slots__ = ("poles", "zeros")

    def __init__(self, p1: complex, z1: complex, p2=None, z2=None):
        if (p2 is None) != (z2 is None):
            raise ValueError("a pair needs both a second pole and a second zero")
        self.poles = (complex(p1), None if p2 is None else complex(p2))
        self.zeros = (complex(z1), None if z2 is None else complex(z2))

    def is_single_pole(self) -> bool:
        """Return True if this pair only holds one pole and one zero."""
        return self.poles[1] is None

    @property
    def num_poles(self) -> int:
        """The number of poles held in the pair."""
        return 1 if self.is_single_pole() else 2

    def __repr__(self):
        if self.is_single_pole():
            return f"pole_zero_pair({self.poles[0]!r}, {self.zeros[0]!r})"
        return "pole_zero_pair(%r, %r, %r, %r)" % (
            self.poles[0],
            self.zeros[0],
            self.poles[1],
            self.zeros[1],
        )


class layout:
    """
    An ordered collection of pole/zero pairs with a fixed capacity, and
    the frequency and gain that the finished filter is normalised to.

    The capacity is set at construction and never grows. A single pole
    pair can only be the last entry.

    Parameters
    ----------
    max_poles : int
        The maximum number of poles the layout can hold.

    Attributes
    ----------
    max_poles : int
        The maximum number of poles the layout can hold.
    num_poles : int
        The number of poles currently held.
    normal_w : float
        The angular frequency the filter gain is normalised at. Analog
        layouts use rad/s, digital layouts use rad/sample.
    normal_gain : float
        The linear gain of the filter at ``normal_w``.
    """

    def __init__(self, max_poles: int):
        if max_poles < 1:
            raise InvalidOrder("layout must hold at least one pole")
        self.max_poles = max_poles
        self.pairs = []
        self.num_poles = 0
        self.normal_w = 0.0
        self.normal_gain = 1.0

    def reset(self):
        """Remove all pairs and restore the default normalisation."""
        self.pairs.clear()
        self.num_poles = 0
        self.normal_w = 0.0
        self.normal_gain = 1.0

    def set_normal(self, w: float, gain: float):
        """Set the normalisation frequency and gain."""
        self.normal_w = w
        self.normal_gain = gain

    def _append(self, pair: pole_zero_pair):
        if self.num_poles + pair.num_poles > self.max_poles:
            raise InvalidOrder(
                "layout holds at most %d poles, cannot add %d more to %d"
                % (self.max_poles, pair.num_poles, self.num_poles)
            )
        if self.pairs and self.pairs[-1].is_single_pole():
            raise ValueError("a single pole must be the last entry of a layout")
        self.pairs.append(pair)
        self.num_poles += pair.num_poles

    def add(self, pole: complex, zero: complex):
        """Add a single real pole and zero."""
        if np.imag(pole) != 0 or (not is_inf(zero) and np.imag(zero) != 0):
            raise ValueError("single poles and zeros must be real")
        self._append(pole_zero_pair(pole, zero))

    def add_conjugate_pairs(self, pole: complex, zero: complex):
        """Add a pole and a zero along with their complex conjugates."""
        self._append(pole_zero_pair(pole, zero, np.conj(pole), np.conj(zero)))

    def add_pair(self, p1: complex, z1: complex, p2: complex, z2: complex):
        """Add two poles and two zeros, which must be conjugates of each
        other or real.
        """
        self._append(pole_zero_pair(p1, z1, p2, z2))

    def poles(self) -> np.ndarray:
        """Return all poles as a complex array."""
        return np.array([p for pair in self.pairs for p in pair.poles if p is not None])

    def zeros(self) -> np.ndarray:
        """Return all zeros as a complex array."""
        return np.array([z for pair in self.pairs for z in pair.zeros if z is not None])

    def __len__(self):
        return len(self.pairs)

    def __getitem__(self, index) -> pole_zero_pair:
        return self.pairs[index]

    def __iter__(self):
        return iter(self.pairs)

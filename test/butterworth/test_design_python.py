# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
import pytest
import numpy as np

import butterworth_dsp.dsp.analog as analog
import butterworth_dsp.dsp.bilinear as bl
import butterworth_dsp.dsp.transform as tr
from butterworth_dsp.dsp.errors import InvalidBandwidth, InvalidGain, InvalidOrder
from butterworth_dsp.dsp.layout import INF, is_inf, layout


def test_layout_capacity():
    lay = layout(3)
    lay.add_conjugate_pairs(-0.5 + 0.5j, INF)
    lay.add(-1.0, INF)
    assert lay.num_poles == 3
    assert len(lay) == 2

    # a full layout reports the capacity, even after a single pole
    with pytest.raises(InvalidOrder):
        lay.add_conjugate_pairs(-0.5 + 0.5j, INF)
    with pytest.raises(InvalidOrder):
        lay.add(-2.0, INF)
    assert lay.num_poles == 3

    lay.reset()
    assert lay.num_poles == 0
    assert len(lay.poles()) == 0

    lay = layout(4)
    lay.add_conjugate_pairs(-0.5 + 0.5j, INF)
    lay.add_conjugate_pairs(-0.2 + 0.9j, INF)
    with pytest.raises(InvalidOrder):
        lay.add_conjugate_pairs(-0.5 + 0.5j, INF)
    assert len(lay) == 2


def test_layout_single_pole_last():
    lay = layout(4)
    lay.add(-1.0, INF)
    with pytest.raises(ValueError) as excinfo:
        lay.add_conjugate_pairs(-0.5 + 0.5j, INF)
    assert not isinstance(excinfo.value, InvalidOrder)
    with pytest.raises(ValueError):
        layout(4).add(-0.5 + 0.5j, INF)


@pytest.mark.parametrize("order", range(1, 17))
def test_analog_lowpass(order):
    proto = analog.analog_lowpass(layout(order), order)
    poles = proto.poles()

    assert proto.num_poles == order
    assert len(proto) == (order + 1) // 2
    np.testing.assert_allclose(np.abs(poles), 1)
    assert np.all(poles.real < 0)
    assert all(is_inf(z) for z in proto.zeros())
    assert (proto.normal_w, proto.normal_gain) == (0.0, 1.0)

    # lowest Q first, real pole last
    damping = [-pair.poles[0].real for pair in proto]
    if order % 2:
        assert proto[-1].is_single_pole()
        assert proto[-1].poles[0] == -1
        damping = damping[:-1]
    assert damping == sorted(damping, reverse=True)


def test_analog_lowpass_order_too_big():
    proto = analog.analog_lowpass(layout(4), 3)
    with pytest.raises(InvalidOrder):
        analog.analog_lowpass(proto, 5)
    assert proto.num_poles == 3


@pytest.mark.parametrize("order", [1, 2, 3, 8])
@pytest.mark.parametrize("gain_db", [-12, 0, 6])
def test_analog_lowshelf(order, gain_db):
    proto = analog.analog_lowshelf(layout(order), order, gain_db)
    g = 10 ** (gain_db / 20 / (2 * order))

    np.testing.assert_allclose(np.abs(proto.poles()), 1 / g)
    np.testing.assert_allclose(np.abs(proto.zeros()), g)
    assert np.isinf(proto.normal_w)

    def h(s):
        return np.prod(s - proto.zeros()) / np.prod(s - proto.poles())

    assert 20 * np.log10(np.abs(h(0))) == pytest.approx(gain_db)
    assert 20 * np.log10(np.abs(h(1j))) == pytest.approx(gain_db / 2)


@pytest.mark.parametrize("gain_db", [None, float("nan"), "loud"])
def test_analog_lowshelf_bad_gain(gain_db):
    with pytest.raises(InvalidGain):
        analog.analog_lowshelf(layout(2), 2, gain_db)


def test_prewarp():
    fs = 48000
    assert tr.prewarp(fs / 4, fs) == pytest.approx(2 * fs)
    assert tr.prewarp(10, fs) == pytest.approx(2 * np.pi * 10, rel=1e-6)


@pytest.mark.parametrize(
    "center, bandwidth",
    [(1000, None), (1000, -1), (1000, 2000), (23000, 2000), (1000, 24000), (1000, "wide")],
)
def test_check_bandwidth(center, bandwidth):
    with pytest.raises(InvalidBandwidth):
        tr.check_bandwidth(center, bandwidth, 48000)


def test_highpass_transform_zeros():
    fs = 48000
    proto = analog.analog_lowpass(layout(3), 3)
    out = tr.highpass_transform(layout(3), proto, fs, 1000)

    np.testing.assert_array_equal(out.zeros(), np.zeros(3))
    assert np.isinf(out.normal_w)
    np.testing.assert_allclose(np.abs(out.poles()), tr.prewarp(1000, fs))


@pytest.mark.parametrize("order", [1, 2, 3, 4])
def test_band_transforms_double_poles(order):
    fs = 48000
    proto = analog.analog_lowpass(layout(order), order)

    band = tr.bandpass_transform(layout(2 * order), proto, fs, 2000, 500)
    assert band.num_poles == 2 * order
    assert len(band) == order
    assert np.sum(band.zeros() == 0) == order
    assert np.sum(np.isinf(band.zeros())) == order

    stop = tr.bandstop_transform(layout(2 * order), proto, fs, 2000, 500)
    assert stop.num_poles == 2 * order
    w0 = np.sqrt(tr.prewarp(1750, fs) * tr.prewarp(2250, fs))
    np.testing.assert_allclose(np.abs(stop.zeros()), w0)
    np.testing.assert_allclose(stop.zeros().real, 0, atol=1e-9)


def test_bilinear():
    fs = 48000
    assert bl.bilinear(INF, fs) == -1
    assert bl.bilinear(0j, fs) == 1
    assert abs(bl.bilinear(-1000 + 5000j, fs)) < 1
    assert abs(bl.bilinear(1j * tr.prewarp(3000, fs), fs)) == pytest.approx(1)
    assert np.angle(bl.bilinear(1j * tr.prewarp(3000, fs), fs)) == pytest.approx(
        2 * np.pi * 3000 / fs
    )


def test_bilinear_transform():
    fs = 48000
    proto = analog.analog_lowpass(layout(5), 5)
    analog_lp = tr.lowpass_transform(layout(5), proto, fs, 1000)
    digital = bl.bilinear_transform(layout(5), analog_lp, fs)

    assert digital.num_poles == 5
    assert np.all(np.abs(digital.poles()) < 1)
    np.testing.assert_array_equal(digital.zeros(), -np.ones(5))
    assert digital.normal_w == 0
    assert digital[-1].is_single_pole()
    assert digital[-1].poles[0].imag == 0

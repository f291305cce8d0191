# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
import pytest
import numpy as np
import scipy.signal as spsig

import butterworth_dsp.dsp.butterworth as bw
import butterworth_dsp.dsp.signal_gen as gen
import butterworth_dsp.dsp.transform as tr
import butterworth_dsp.dsp.utils as utils
from butterworth_dsp.dsp.errors import (
    FilterConfigError,
    InvalidBandwidth,
    InvalidFrequency,
    InvalidGain,
    InvalidOrder,
)

HALF_POWER_DB = utils.db(np.sqrt(0.5))


def band_centre(fc, bandwidth, fs):
    """The digital frequency of the geometric centre of the pre-warped
    band, where band filters are normalised.
    """
    w_lo = tr.prewarp(fc - bandwidth / 2, fs)
    w_hi = tr.prewarp(fc + bandwidth / 2, fs)
    return fs / np.pi * np.arctan(np.sqrt(w_lo * w_hi) / (2 * fs))


def make_filter(filter_type, order, fs=48000, fc=1000, bandwidth=500, gain_db=6.0):
    filt = bw.butterworth(filter_type, fs)
    info = filt.info
    filt.setup(
        order,
        fc,
        bw=bandwidth if info.band else None,
        gain_db=gain_db if info.shelf else None,
    )
    return filt


@pytest.mark.parametrize("filter_type", ["lowpass", "highpass"])
@pytest.mark.parametrize("f", [100, 1000, 10000])
@pytest.mark.parametrize("order", [1, 2, 3, 4, 7, 8])
@pytest.mark.parametrize("fs", [16000, 44100, 48000, 96000])
def test_matches_scipy(filter_type, f, order, fs):
    f = np.min([f, fs / 2 * 0.95])
    filt = make_filter(filter_type, order, fs, f)
    ref = spsig.butter(order, f, btype=filter_type, fs=fs, output="sos")

    _, h = spsig.sosfreqz(filt.sos, worN=512, fs=fs)
    _, h_ref = spsig.sosfreqz(ref, worN=512, fs=fs)
    np.testing.assert_allclose(h, h_ref, atol=1e-8)


@pytest.mark.parametrize("filter_type", ["bandpass", "bandstop"])
@pytest.mark.parametrize("fc, bandwidth", [(1000, 500), (2000, 500), (15000, 4000)])
@pytest.mark.parametrize("order", [1, 2, 3, 4])
def test_band_matches_scipy(filter_type, fc, bandwidth, order):
    fs = 48000
    filt = make_filter(filter_type, order, fs, fc, bandwidth)
    edges = [fc - bandwidth / 2, fc + bandwidth / 2]
    ref = spsig.butter(order, edges, btype=filter_type, fs=fs, output="sos")

    _, h = spsig.sosfreqz(filt.sos, worN=512, fs=fs)
    _, h_ref = spsig.sosfreqz(ref, worN=512, fs=fs)
    np.testing.assert_allclose(h, h_ref, atol=1e-8)


@pytest.mark.parametrize("filter_type", ["lowpass", "highpass"])
@pytest.mark.parametrize("order", [1, 2, 5, 8, 16])
@pytest.mark.parametrize("fs", [44100, 48000, 96000])
@pytest.mark.parametrize("f", [200, 1000, 5000])
def test_cutoff_half_power(filter_type, order, fs, f):
    filt = make_filter(filter_type, order, fs, f)
    assert utils.db(filt.response(f)) == pytest.approx(HALF_POWER_DB, abs=1e-6)


def test_lowpass_order_2():
    filt = bw.butterworth_lowpass(44100, 1, 2, 1000)

    assert filt.sos.shape == (1, 6)
    assert np.abs(filt.response(0)) == pytest.approx(1.0)
    assert utils.db(filt.response(1000)) == pytest.approx(-3.0103, abs=1e-4)
    assert utils.db(filt.response(100)) == pytest.approx(0, abs=0.2)
    assert utils.db(filt.response(10000)) <= -30
    assert np.abs(filt.response(22050)) < 1e-12


def test_bandpass_order_4():
    filt = bw.butterworth_bandpass(48000, 1, 4, 2000, 500)

    assert filt.sos.shape == (4, 6)
    assert utils.db(filt.response(2000)) == pytest.approx(0, abs=0.1)
    assert utils.db(filt.response(500)) <= -20
    assert utils.db(filt.response(8000)) <= -20
    assert np.abs(filt.response(band_centre(2000, 500, 48000))) == pytest.approx(1.0)
    assert utils.db(filt.response(1750)) == pytest.approx(HALF_POWER_DB, abs=1e-6)
    assert utils.db(filt.response(2250)) == pytest.approx(HALF_POWER_DB, abs=1e-6)
    assert np.abs(filt.response(0)) < 1e-12
    assert np.abs(filt.response(24000)) < 1e-12


@pytest.mark.parametrize("filter_type", ["bandpass", "bandstop"])
@pytest.mark.parametrize("fc", [1000, 12000, 20000])
@pytest.mark.parametrize("order", [2, 5])
def test_band_edges_half_power(filter_type, fc, order):
    fs = 48000
    bandwidth = 1000
    filt = make_filter(filter_type, order, fs, fc, bandwidth)

    for edge in [fc - bandwidth / 2, fc + bandwidth / 2]:
        assert utils.db(filt.response(edge)) == pytest.approx(HALF_POWER_DB, abs=1e-6)

    centre_gain = np.abs(filt.response(band_centre(fc, bandwidth, fs)))
    if filter_type == "bandpass":
        assert centre_gain == pytest.approx(1.0)
    else:
        assert centre_gain < 1e-9


@pytest.mark.parametrize("order", [1, 2, 3, 6])
@pytest.mark.parametrize("gain_db", [-12, -3, 3, 12])
def test_shelf_gains(order, gain_db):
    fs = 48000
    fc = 2000

    low = make_filter("lowshelf", order, fs, fc, gain_db=gain_db)
    assert utils.db(low.response(0)) == pytest.approx(gain_db, abs=1e-6)
    assert utils.db(low.response(fs / 2)) == pytest.approx(0, abs=1e-6)
    assert utils.db(low.response(fc)) == pytest.approx(gain_db / 2, abs=1e-6)

    high = make_filter("highshelf", order, fs, fc, gain_db=gain_db)
    assert utils.db(high.response(0)) == pytest.approx(0, abs=1e-6)
    assert utils.db(high.response(fs / 2)) == pytest.approx(gain_db, abs=1e-6)
    assert utils.db(high.response(fc)) == pytest.approx(gain_db / 2, abs=1e-6)


@pytest.mark.parametrize("order", [1, 2, 3, 4])
@pytest.mark.parametrize("gain_db", [-10, 6])
@pytest.mark.parametrize("fc", [1000, 16000])
def test_bandshelf_gains(order, gain_db, fc):
    fs = 48000
    bandwidth = 1000
    filt = make_filter("bandshelf", order, fs, fc, bandwidth, gain_db)

    assert utils.db(filt.response(band_centre(fc, bandwidth, fs))) == pytest.approx(
        gain_db, abs=1e-6
    )
    assert utils.db(filt.response(0)) == pytest.approx(0, abs=1e-6)
    assert utils.db(filt.response(fs / 2)) == pytest.approx(0, abs=1e-6)
    for edge in [fc - bandwidth / 2, fc + bandwidth / 2]:
        assert utils.db(filt.response(edge)) == pytest.approx(gain_db / 2, abs=1e-6)


@pytest.mark.parametrize("filter_type", list(bw.filter_type))
@pytest.mark.parametrize("order", range(1, bw.DEFAULT_MAX_ORDER + 1))
def test_stable_and_section_count(filter_type, order):
    filt = make_filter(filter_type, order)

    assert np.all(np.abs(filt.poles()) < 1)
    if filt.info.band:
        assert filt.n_sections == order
    else:
        assert filt.n_sections == (order + 1) // 2
    assert filt.sos.shape == (filt.n_sections, 6)
    np.testing.assert_array_equal(filt.sos[:, 3], np.ones(filt.n_sections))


@pytest.mark.parametrize("filter_type", list(bw.filter_type))
def test_setup_is_repeatable(filter_type):
    filt = make_filter(filter_type, 5)
    sos = filt.sos.copy()

    filt.setup(3, 3000, bw=filt.bw, gain_db=filt.gain_db)
    filt.setup(5, 1000, bw=filt.bw, gain_db=filt.gain_db)

    np.testing.assert_array_equal(filt.sos, sos)
    np.testing.assert_array_equal(make_filter(filter_type, 5).sos, sos)


@pytest.mark.parametrize(
    "filter_type, args, error",
    [
        ("lowpass", dict(order=0, filter_freq=1000), InvalidOrder),
        ("lowpass", dict(order=17, filter_freq=1000), InvalidOrder),
        ("lowpass", dict(order=2.5, filter_freq=1000), InvalidOrder),
        ("lowpass", dict(order=True, filter_freq=1000), InvalidOrder),
        ("lowpass", dict(order=2, filter_freq=0), InvalidFrequency),
        ("lowpass", dict(order=2, filter_freq=-100), InvalidFrequency),
        ("highpass", dict(order=2, filter_freq=24000), InvalidFrequency),
        ("highpass", dict(order=2, filter_freq=float("nan")), InvalidFrequency),
        ("lowpass", dict(order=2, filter_freq=1000, fs=0), InvalidFrequency),
        ("lowpass", dict(order=2, filter_freq=1000, fs=1500), InvalidFrequency),
        ("lowpass", dict(order=2, filter_freq=1000, bw=100), InvalidBandwidth),
        ("bandpass", dict(order=2, filter_freq=1000), InvalidBandwidth),
        ("bandpass", dict(order=2, filter_freq=1000, bw=0), InvalidBandwidth),
        ("bandpass", dict(order=2, filter_freq=1000, bw=2000), InvalidBandwidth),
        ("bandstop", dict(order=2, filter_freq=23000, bw=3000), InvalidBandwidth),
        ("bandstop", dict(order=2, filter_freq=1000, bw=25000), InvalidBandwidth),
        ("lowshelf", dict(order=2, filter_freq=1000), InvalidGain),
        ("highshelf", dict(order=2, filter_freq=1000, gain_db=float("inf")), InvalidGain),
        ("bandshelf", dict(order=2, filter_freq=1000, bw=100, gain_db=float("nan")), InvalidGain),
        ("bandpass", dict(order=2, filter_freq=1000, bw=100, gain_db=3), InvalidGain),
    ],
)
def test_invalid_setup_keeps_previous(filter_type, args, error):
    filt = make_filter(filter_type, 4)
    sos = filt.sos.copy()
    state = (filt.order, filt.filter_freq, filt.bw, filt.gain_db, filt.fs)

    with pytest.raises(error):
        filt.setup(**args)

    np.testing.assert_array_equal(filt.sos, sos)
    assert (filt.order, filt.filter_freq, filt.bw, filt.gain_db, filt.fs) == state
    assert issubclass(error, FilterConfigError)


def test_unconfigured_is_bypass():
    filt = bw.butterworth("bandstop", 48000)
    signal = gen.log_chirp(48000, 0.02, 0.5)

    assert filt.order is None
    np.testing.assert_array_equal(filt.process_block(signal), signal)


def test_max_order():
    filt = bw.butterworth("bandpass", 48000, max_order=4)
    assert len(filt.biquads) == 4
    filt.setup(4, 1000, bw=200)
    with pytest.raises(InvalidOrder):
        filt.setup(5, 1000, bw=200)

    filt = bw.butterworth("lowpass", 48000, max_order=5)
    assert len(filt.biquads) == 3

    with pytest.raises(InvalidOrder):
        bw.butterworth("lowpass", 48000, max_order=0)
    with pytest.raises(ValueError):
        bw.butterworth("allpass", 48000)


def test_new_sample_rate():
    filt = bw.butterworth_lowpass(48000, 1, 4, 1000)
    filt.setup(4, 1000, fs=96000)

    assert filt.fs == 96000
    assert all(biquad.fs == 96000 for biquad in filt.biquads)
    assert utils.db(filt.response(1000)) == pytest.approx(HALF_POWER_DB, abs=1e-6)
    f, _ = filt.freq_response(64)
    assert f[-1] < 48000 and f[-1] > 47000


def test_state_kept_while_retuning():
    fs = 48000
    filt = bw.butterworth_lowpass(fs, 1, 4, 1000)
    filt.process_block(gen.sin(fs, 0.01, 500, 0.5))

    # same number of sections, so the state carries on
    filt.setup(4, 2000)
    assert np.any(filt.biquads[0]._state)

    filt.setup(6, 2000)
    for biquad in filt.biquads:
        assert not np.any(biquad._state)


@pytest.mark.parametrize("filter_type", ["lowpass", "bandpass", "highshelf"])
def test_processing_matches_sosfilt(filter_type):
    fs = 48000
    filt = make_filter(filter_type, 5, fs, 3000, 1000, -6)
    signal = gen.white_noise(fs, 0.05, 0.5)

    np.testing.assert_allclose(
        filt.process_block(signal), spsig.sosfilt(filt.sos, signal), rtol=1e-9, atol=1e-12
    )


@pytest.mark.parametrize("fc", [200, 1000, 4000])
def test_lowpass_attenuates_sine(fc):
    fs = 48000
    filt = bw.butterworth_lowpass(fs, 2, 6, fc)
    low = gen.sin(fs, 0.2, fc / 4, 0.5)
    high = gen.sin(fs, 0.2, fc * 4, 0.5)

    out = filt.process_frame([low, high])
    # skip the start up transient
    settled = slice(len(low) // 2, None)
    assert np.max(np.abs(out[0][settled])) == pytest.approx(0.5, rel=1e-3)
    assert np.max(np.abs(out[1][settled])) < 0.5 * utils.db2gain(-70)


def test_precision_warning():
    with pytest.warns(utils.PrecisionWarning):
        bw.butterworth_lowpass(192000, 1, 16, 0.1)


def test_names():
    for filter_type, info in bw.FILTER_INFO.items():
        filt = bw.butterworth(filter_type, 48000)
        assert filt.name == info.name
        assert filt.name.startswith("Butterworth")
        assert filt.info.params[:3] == ("sample_rate", "order", "frequency")
        assert ("bandwidth_hz" in info.params) == info.band
        assert ("gain_db" in info.params) == info.shelf

import pytest

from iqresample.sdrplay import (
    DEFAULT_BANDWIDTH_HZ,
    DEFAULT_SAMPLE_RATE_HZ,
    Bandwidth,
    HardwareId,
    HdrBandwidth,
    SdrplayOptions,
    bandwidth_from_hz,
    device_name,
    hdr_bandwidth_from_hz,
    num_lna_states,
)


@pytest.mark.parametrize(
    "hw, name",
    [
        (HardwareId.RSP1, "SDRplay RSP1"),
        (HardwareId.RSP1A, "SDRplay RSP1A"),
        (HardwareId.RSP1B, "SDRplay RSP1B"),
        (HardwareId.RSP2, "SDRplay RSP2"),
        (HardwareId.RSPDUO, "SDRplay RSPduo"),
        (HardwareId.RSPDX, "SDRplay RSPdx"),
        (HardwareId.RSPDXR2, "SDRplay RSPdx-R2"),
    ],
)
def test_device_name(hw, name):
    assert device_name(hw) == name
    assert device_name(int(hw)) == name


def test_device_name_unknown():
    assert device_name(99) == "Unknown SDRplay Device"


@pytest.mark.parametrize(
    "hw, freq, hdr, hiz, expected",
    [
        (HardwareId.RSP1, 100e6, False, False, 4),
        (HardwareId.RSP1A, 50e6, False, False, 7),
        (HardwareId.RSP1A, 500e6, False, False, 10),
        (HardwareId.RSP1A, 2000e6, False, False, 9),
        (HardwareId.RSP1B, 55e6, False, False, 10),
        (HardwareId.RSP2, 30e6, False, True, 5),
        (HardwareId.RSP2, 30e6, False, False, 9),
        (HardwareId.RSP2, 500e6, False, False, 6),
        (HardwareId.RSPDUO, 30e6, False, True, 5),
        (HardwareId.RSPDUO, 30e6, False, False, 7),
        (HardwareId.RSPDX, 1e6, True, False, 21),
        (HardwareId.RSPDX, 1e6, False, False, 14),
        (HardwareId.RSPDX, 55e6, False, False, 28),
        (HardwareId.RSPDXR2, 100e6, False, False, 27),
        (HardwareId.RSPDXR2, 2000e6, False, False, 19),
        (42, 100e6, False, False, 10),
    ],
)
def test_num_lna_states(hw, freq, hdr, hiz, expected):
    assert num_lna_states(hw, freq, hdr, hiz) == expected


@pytest.mark.parametrize("bw", list(Bandwidth))
def test_bandwidth_round_trip(bw):
    assert bandwidth_from_hz(bw.value) is bw
    assert bandwidth_from_hz(bw.value + 0.5) is bw


@pytest.mark.parametrize("bw", list(HdrBandwidth))
def test_hdr_bandwidth_round_trip(bw):
    assert hdr_bandwidth_from_hz(bw.value) is bw


def test_bandwidth_rejects_unknown_values():
    assert bandwidth_from_hz(1_536_002.0) is None
    assert bandwidth_from_hz(500_000.0) is None
    assert hdr_bandwidth_from_hz(300_000.0) is None


def test_validate_defaults():
    opts = SdrplayOptions()
    opts.validate()
    assert opts.sample_rate_hz == DEFAULT_SAMPLE_RATE_HZ
    assert opts.bandwidth_hz == DEFAULT_BANDWIDTH_HZ
    assert opts.bandwidth is Bandwidth.BW_1_536
    assert not opts.sample_rate_provided
    assert not opts.bandwidth_provided
    assert not opts.gain_level_provided
    assert not opts.if_gain_db_provided
    assert opts.hdr_bandwidth is None


def test_validate_resolves_given_values():
    opts = SdrplayOptions(
        sample_rate_arg=8e6,
        bandwidth_arg=6e6,
        gain_level=3,
        if_gain_arg=-35,
        use_hdr_mode=True,
        hdr_bw_arg=500e3,
    )
    opts.validate()
    assert opts.sample_rate_hz == 8e6
    assert opts.sample_rate_provided
    assert opts.bandwidth is Bandwidth.BW_6_000
    assert opts.bandwidth_provided
    assert opts.gain_level_provided
    assert opts.if_gain_db == -35
    assert opts.hdr_bandwidth is HdrBandwidth.BW_0_500


@pytest.mark.parametrize("gain", [1, -60])
def test_validate_rejects_if_gain_out_of_range(gain):
    with pytest.raises(ValueError, match="sdrplay-if-gain"):
        SdrplayOptions(if_gain_arg=gain).validate()


def test_validate_rejects_bad_hdr_bandwidth():
    with pytest.raises(ValueError, match="Invalid HDR bandwidth"):
        SdrplayOptions(use_hdr_mode=True, hdr_bw_arg=300e3).validate()


def test_validate_hdr_bandwidth_needs_hdr_mode():
    with pytest.raises(ValueError, match="requires --sdrplay-hdr-mode"):
        SdrplayOptions(hdr_bw_arg=200e3).validate()


@pytest.mark.parametrize("rate", [1e6, 11e6])
def test_validate_rejects_sample_rate_out_of_range(rate):
    with pytest.raises(ValueError, match="sample rate"):
        SdrplayOptions(sample_rate_arg=rate).validate()


def test_validate_rejects_unknown_bandwidth():
    with pytest.raises(ValueError, match="Invalid SDRplay bandwidth"):
        SdrplayOptions(bandwidth_arg=1e6).validate()


def test_validate_rejects_bandwidth_above_sample_rate():
    with pytest.raises(ValueError, match="cannot be greater"):
        SdrplayOptions(sample_rate_arg=2e6, bandwidth_arg=5e6).validate()


def test_validate_accepts_sample_rate_limits():
    for rate in (2e6, 10e6):
        opts = SdrplayOptions(sample_rate_arg=rate)
        opts.validate()
        assert opts.sample_rate_hz == rate
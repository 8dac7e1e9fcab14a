"""SDRplay device tables and validation of the SDRplay command-line options."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional

DEFAULT_SAMPLE_RATE_HZ = 2e6
DEFAULT_BANDWIDTH_HZ = 1.536e6
MIN_SAMPLE_RATE_HZ = 2e6
MAX_SAMPLE_RATE_HZ = 10e6
MIN_IF_GAIN_DB = -59
MAX_IF_GAIN_DB = 0
_HZ_TOLERANCE = 1.0


class HardwareId(IntEnum):
    """Hardware version codes reported by SDRplay devices."""

    RSP1 = 1
    RSP2 = 2
    RSPDUO = 3
    RSPDX = 4
    RSP1B = 6
    RSPDXR2 = 7
    RSP1A = 255


_DEVICE_NAMES = {
    HardwareId.RSP1: "SDRplay RSP1",
    HardwareId.RSP1A: "SDRplay RSP1A",
    HardwareId.RSP1B: "SDRplay RSP1B",
    HardwareId.RSP2: "SDRplay RSP2",
    HardwareId.RSPDUO: "SDRplay RSPduo",
    HardwareId.RSPDX: "SDRplay RSPdx",
    HardwareId.RSPDXR2: "SDRplay RSPdx-R2",
}


class Bandwidth(Enum):
    """Analog IF bandwidths the tuner supports; the value is in Hz."""

    BW_0_200 = 200_000
    BW_0_300 = 300_000
    BW_0_600 = 600_000
    BW_1_536 = 1_536_000
    BW_5_000 = 5_000_000
    BW_6_000 = 6_000_000
    BW_7_000 = 7_000_000
    BW_8_000 = 8_000_000


class HdrBandwidth(Enum):
    """Bandwidths available in RSPdx HDR mode; the value is in Hz."""

    BW_0_200 = 200_000
    BW_0_500 = 500_000
    BW_1_200 = 1_200_000
    BW_1_700 = 1_700_000


def device_name(hw_ver: int) -> str:
    """Return the display name for a hardware version code."""
    try:
        return _DEVICE_NAMES[HardwareId(hw_ver)]
    except ValueError:
        return "Unknown SDRplay Device"


def num_lna_states(
    hw_ver: int, rf_freq_hz: float, use_hdr_mode: bool, hiz_port_active: bool
) -> int:
    """Number of LNA gain states a device offers at a tuning frequency.

    Unknown devices get a safe default of 10.
    """
    mhz = rf_freq_hz / 1e6
    if hw_ver == HardwareId.RSP1:
        return 4
    if hw_ver == HardwareId.RSP1A:
        if mhz <= 60.0:
            return 7
        return 10 if mhz <= 1000.0 else 9
    if hw_ver == HardwareId.RSP1B:
        if mhz <= 50.0:
            return 7
        return 10 if mhz <= 1000.0 else 9
    if hw_ver == HardwareId.RSP2:
        if hiz_port_active and mhz <= 60.0:
            return 5
        return 9 if mhz <= 420.0 else 6
    if hw_ver == HardwareId.RSPDUO:
        if hiz_port_active and mhz <= 60.0:
            return 5
        if mhz <= 60.0:
            return 7
        return 10 if mhz <= 1000.0 else 9
    if hw_ver in (HardwareId.RSPDX, HardwareId.RSPDXR2):
        if use_hdr_mode and mhz <= 2.0:
            return 21
        if mhz <= 50.0:
            return 14
        if mhz <= 60.0:
            return 28
        if mhz <= 420.0:
            return 27
        if mhz <= 1000.0:
            return 21
        return 19
    return 10


def bandwidth_from_hz(bw_hz: float) -> Optional[Bandwidth]:
    """Return the tuner bandwidth within 1 Hz of ``bw_hz``, or None."""
    for bandwidth in Bandwidth:
        if abs(bw_hz - bandwidth.value) < _HZ_TOLERANCE:
            return bandwidth
    return None


def hdr_bandwidth_from_hz(bw_hz: float) -> Optional[HdrBandwidth]:
    """Return the HDR-mode bandwidth within 1 Hz of ``bw_hz``, or None."""
    for bandwidth in HdrBandwidth:
        if abs(bw_hz - bandwidth.value) < _HZ_TOLERANCE:
            return bandwidth
    return None


@dataclass
class SdrplayOptions:
    """SDRplay options as given on the command line; zero means not given.

    ``validate`` checks them and fills in the resolved fields.
    """

    sample_rate_arg: float = 0.0
    bandwidth_arg: float = 0.0
    device_index: int = 0
    gain_level: int = 0
    if_gain_arg: int = 0
    antenna: Optional[str] = None
    use_hdr_mode: bool = False
    hdr_bw_arg: float = 0.0

    sample_rate_hz: float = field(default=DEFAULT_SAMPLE_RATE_HZ, init=False)
    bandwidth_hz: float = field(default=DEFAULT_BANDWIDTH_HZ, init=False)
    sample_rate_provided: bool = field(default=False, init=False)
    bandwidth_provided: bool = field(default=False, init=False)
    gain_level_provided: bool = field(default=False, init=False)
    if_gain_db: Optional[int] = field(default=None, init=False)
    hdr_bandwidth: Optional[HdrBandwidth] = field(default=None, init=False)

    @property
    def if_gain_db_provided(self) -> bool:
        return self.if_gain_db is not None

    @property
    def bandwidth(self) -> Bandwidth:
        """The tuner bandwidth setting for the resolved bandwidth."""
        resolved = bandwidth_from_hz(self.bandwidth_hz)
        if resolved is None:
            raise ValueError(f"Invalid SDRplay bandwidth {self.bandwidth_hz:.0f} Hz.")
        return resolved

    def validate(self) -> None:
        """Check the options and resolve them; raise ValueError on a bad value."""
        if self.gain_level != 0:
            self.gain_level_provided = True

        if self.if_gain_arg != 0:
            if not MIN_IF_GAIN_DB <= self.if_gain_arg <= MAX_IF_GAIN_DB:
                raise ValueError(
                    "Invalid value for --sdrplay-if-gain. Must be between -59 and 0."
                )
            self.if_gain_db = int(self.if_gain_arg)

        if self.sample_rate_arg != 0.0:
            self.sample_rate_hz = float(self.sample_rate_arg)
            self.sample_rate_provided = True

        if self.bandwidth_arg != 0.0:
            self.bandwidth_hz = float(self.bandwidth_arg)
            self.bandwidth_provided = True

        if self.hdr_bw_arg != 0.0:
            hdr = hdr_bandwidth_from_hz(self.hdr_bw_arg)
            if hdr is None:
                raise ValueError(
                    f"Invalid HDR bandwidth '{self.hdr_bw_arg:.0f}'. "
                    "Valid values are 200e3, 500e3, 1.2e6, 1.7e6."
                )
            self.hdr_bandwidth = hdr

        if self.hdr_bandwidth is not None and not self.use_hdr_mode:
            raise ValueError(
                "Option --sdrplay-hdr-bw requires --sdrplay-hdr-mode to be specified."
            )

        rate = self.sample_rate_hz
        bandwidth = self.bandwidth_hz
        if rate < MIN_SAMPLE_RATE_HZ or rate > MAX_SAMPLE_RATE_HZ:
            raise ValueError(
                f"Invalid SDRplay sample rate {rate:.0f} Hz. "
                "Must be between 2,000,000 and 10,000,000."
            )
        if bandwidth_from_hz(bandwidth) is None:
            raise ValueError(
                f"Invalid SDRplay bandwidth {bandwidth:.0f} Hz. See --help for valid values."
            )
        if bandwidth > rate:
            raise ValueError(
                f"Bandwidth ({bandwidth:.0f} Hz) cannot be greater than "
                f"the sample rate ({rate:.0f} Hz)."
            )
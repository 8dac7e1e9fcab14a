"""Device setup for SDRplay receivers: gain, antenna and bias-T, sample packing and summary."""

from __future__ import annotations

import sys
from array import array
from dataclasses import dataclass
from itertools import chain
from typing import Optional, Sequence

from .sdrplay import (
    DEFAULT_BANDWIDTH_HZ,
    HardwareId,
    SdrplayOptions,
    device_name,
    num_lna_states,
)

_ANTENNA_NOT_APPLICABLE = "Antenna selection not applicable for the detected device."
_BIAS_T_UNSUPPORTED = "Bias-T is not supported on the detected device."
_DEFAULT_HDR_BW = "1700000"

_RSP2_PORTS = ("A", "B", "HIZ")
_RSPDUO_PORTS = ("A", "HIZ")
_RSPDX_PORTS = ("A", "B", "C")


@dataclass
class AntennaSettings:
    """Antenna port and bias-T settings resolved for one device.

    ``port`` is the upper-case port name applied to the device, or None if
    no selection was made. The ``*_handled`` flags tell whether the device
    could honour what was asked for.
    """

    port: Optional[str] = None
    bias_t_enabled: bool = False
    hiz_port_selected: bool = False
    antenna_requested: bool = False
    bias_t_requested: bool = False
    antenna_handled: bool = False
    bias_t_handled: bool = False

    @property
    def warnings(self) -> list[str]:
        """Messages for requests the device could not honour."""
        messages = []
        if self.antenna_requested and not self.antenna_handled:
            messages.append(_ANTENNA_NOT_APPLICABLE)
        if self.bias_t_requested and not self.bias_t_handled:
            messages.append(_BIAS_T_UNSUPPORTED)
        return messages


def lna_state_for_gain(
    hw_ver: int,
    rf_freq_hz: float,
    use_hdr_mode: bool,
    hiz_port_active: bool,
    gain_level: int,
) -> int:
    """Map a gain level (0 is maximum gain) to the device's LNA state.

    Raises ValueError if the level is outside the range the device offers
    at this frequency.
    """
    states = num_lna_states(hw_ver, rf_freq_hz, use_hdr_mode, hiz_port_active)
    if gain_level < 0 or gain_level >= states:
        raise ValueError(
            f"Invalid LNA state '{gain_level}'. "
            f"Valid range for this device/frequency is 0 to {states - 1}."
        )
    return states - 1 - gain_level


def _check_port(name: str, allowed: Sequence[str], device: str) -> str:
    port = name.upper()
    if port not in allowed:
        choices = ", ".join(allowed[:-1]) + f", or {allowed[-1]}" if len(allowed) > 2 \
            else f"{allowed[0]} or {allowed[1]}"
        raise ValueError(f"Invalid antenna port '{name}' for {device}. Use {choices}.")
    return port


def resolve_antenna(hw_ver: int, antenna_name: Optional[str], bias_t: bool) -> AntennaSettings:
    """Work out the antenna port and bias-T settings for a device.

    Port names are case-insensitive. Raises ValueError for a port the
    device does not have.
    """
    settings = AntennaSettings(
        antenna_requested=antenna_name is not None,
        bias_t_requested=bool(bias_t),
    )
    if antenna_name is None and not bias_t:
        return settings

    if hw_ver == HardwareId.RSP2:
        if bias_t:
            settings.bias_t_enabled = settings.bias_t_handled = True
        if antenna_name is not None:
            port = _check_port(antenna_name, _RSP2_PORTS, "RSP2")
            settings.port = port
            settings.hiz_port_selected = port == "HIZ"
            settings.antenna_handled = True
    elif hw_ver == HardwareId.RSPDUO:
        if bias_t:
            settings.bias_t_enabled = settings.bias_t_handled = True
        if antenna_name is not None:
            port = _check_port(antenna_name, _RSPDUO_PORTS, "RSPduo")
            if port == "HIZ":
                settings.port = port
                settings.hiz_port_selected = True
            settings.antenna_handled = True
    elif hw_ver in (HardwareId.RSPDX, HardwareId.RSPDXR2):
        if bias_t:
            settings.bias_t_enabled = settings.bias_t_handled = True
        if antenna_name is not None:
            settings.port = _check_port(antenna_name, _RSPDX_PORTS, "RSPdx/RSPdx-R2")
            settings.antenna_handled = True
    elif hw_ver in (HardwareId.RSP1A, HardwareId.RSP1B):
        if bias_t:
            settings.bias_t_enabled = settings.bias_t_handled = True
    return settings


def interleave_iq(xi: Sequence[int], xq: Sequence[int]) -> bytes:
    """Pack separate I and Q sample lists into little-endian interleaved cs16 bytes.

    Raises ValueError if the lists differ in length and OverflowError if a
    sample does not fit in 16 bits.
    """
    if len(xi) != len(xq):
        raise ValueError(f"I and Q lengths differ ({len(xi)} != {len(xq)})")
    samples = array("h", chain.from_iterable(zip(xi, xq)))
    if sys.byteorder != "little":
        samples.byteswap()
    return samples.tobytes()


def summary_items(
    options: SdrplayOptions,
    hw_ver: int,
    serial: str,
    sample_rate: float,
    rf_freq_hz: float,
    bias_t: bool,
) -> list[tuple[str, str]]:
    """Label and value pairs describing an SDRplay input, for the run summary."""
    source = f"{device_name(hw_ver)} (S/N: {serial})"[:127]
    active_bw = options.bandwidth_hz if options.bandwidth_provided else DEFAULT_BANDWIDTH_HZ
    items = [
        ("Input Source", source),
        ("Input Format", "16-bit Signed Complex (cs16)"),
        ("Input Rate", f"{int(sample_rate)} Hz"),
        ("Bandwidth", f"{active_bw:.0f} Hz"),
        ("RF Frequency", f"{rf_freq_hz:.0f} Hz"),
    ]

    if options.gain_level_provided or options.if_gain_db_provided:
        lna = (
            f"LNA State: {options.gain_level}"
            if options.gain_level_provided
            else "LNA State: (auto)"
        )
        if_gain = (
            f"IF Gain: {options.if_gain_db} dB"
            if options.if_gain_db_provided
            else "IF Gain: (auto)"
        )
        items.append(("Gain", f"{lna}, {if_gain} (Manual)"))
    else:
        items.append(("Gain", "Automatic (AGC)"))

    if options.antenna is not None:
        items.append(("Antenna Port", options.antenna))
    if options.use_hdr_mode:
        bw = (
            str(options.hdr_bandwidth.value)
            if options.hdr_bandwidth is not None
            else _DEFAULT_HDR_BW
        )
        items.append(("HDR Mode", f"Enabled (BW: {bw} Hz)"))
    items.append(("Bias-T", "Enabled" if bias_t else "Disabled"))
    return items
"""SDR recording metadata from WAV ``auxi`` chunks and from file names."""

from __future__ import annotations

import math
import re
import struct
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import BinaryIO, Iterator, Optional
from xml.parsers import expat

AUXI_CHUNK_ID = "auxi"
MAX_METADATA_CHUNK_SIZE = 1024 * 1024

_EPOCH_ORDINAL = date(1970, 1, 1).toordinal()
_SYSTEMTIME = struct.Struct("<8H")
_BINARY_FREQ = struct.Struct("<I")
_BINARY_FREQ_OFFSET = 32
_BINARY_MIN_SIZE = _SYSTEMTIME.size + 16 + 4
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_FLOAT_RE = re.compile(
    r"\s*[+-]?(?:\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)\Z",
    re.IGNORECASE,
)
_INT_RE = re.compile(r"\s*[+-]?\d+\Z")
_DMY_TIME_RE = re.compile(
    r"\s*([+-]?\d+)-\s*([+-]?\d+)-\s*([+-]?\d+)\s*([+-]?\d+):\s*([+-]?\d+):\s*([+-]?\d+)"
)
_FILENAME_TIME_RE = re.compile(r"_(\d{4})(\d{2})(\d{2})_(\d{2})(\d{2})(\d{2})Z")


class SdrSoftware(Enum):
    """Software that made a recording; the value is its display name."""

    UNKNOWN = "Unknown"
    SDR_SHARP = "SDR#"
    SDR_UNO = "SDRuno"
    SDR_CONNECT = "SDRconnect"
    SDR_CONSOLE = "SDR Console"


@dataclass
class SdrMetadata:
    """What is known about a recording; ``None`` marks a value not found."""

    source_software: SdrSoftware = SdrSoftware.UNKNOWN
    software_name: Optional[str] = None
    software_version: Optional[str] = None
    radio_model: Optional[str] = None
    center_freq_hz: Optional[float] = None
    timestamp_unix: Optional[int] = None
    timestamp_str: Optional[str] = None

    @property
    def has_data(self) -> bool:
        """True if any of the fields the XML parser reports on is set."""
        return (
            self.software_name is not None
            or self.radio_model is not None
            or self.center_freq_hz is not None
            or self.timestamp_unix is not None
        )


def utc_timestamp(year: int, month: int, day: int, hour: int, minute: int, second: int) -> int:
    """Seconds since the epoch for a UTC date; out-of-range fields carry over.

    Raises ValueError if the normalised year cannot be represented.
    """
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    try:
        first = date(year, month, 1).toordinal()
    except (ValueError, OverflowError) as exc:
        raise ValueError(f"year {year} is out of range") from exc
    days = first - _EPOCH_ORDINAL + day - 1
    return days * 86400 + hour * 3600 + minute * 60 + second


def _parse_float(text: str) -> Optional[float]:
    if not _FLOAT_RE.match(text):
        return None
    value = float(text)
    return value if math.isfinite(value) else None


def _parse_int64(text: str) -> Optional[int]:
    if not _INT_RE.match(text):
        return None
    value = int(text)
    return value if _INT64_MIN <= value <= _INT64_MAX else None


def _apply_attribute(metadata: SdrMetadata, name: str, value: str) -> None:
    if name == "SoftwareName":
        metadata.software_name = value
    elif name == "SoftwareVersion":
        metadata.software_version = value
    elif name == "RadioModel":
        metadata.radio_model = value
    elif name == "RadioCenterFreq":
        freq = _parse_float(value)
        if freq is not None:
            metadata.center_freq_hz = freq
    elif name == "UTCSeconds":
        if metadata.timestamp_unix is None:
            seconds = _parse_int64(value)
            if seconds is not None:
                metadata.timestamp_unix = seconds
    elif name == "CurrentTimeUTC":
        metadata.timestamp_str = value
        match = _DMY_TIME_RE.match(value)
        if match:
            day, month, year, hour, minute, second = (int(g) for g in match.groups())
            try:
                metadata.timestamp_unix = utc_timestamp(year, month, day, hour, minute, second)
            except ValueError:
                pass


def parse_auxi_xml(data: bytes, metadata: SdrMetadata) -> bool:
    """Read the attributes of ``Definition`` elements into ``metadata``.

    Returns True if the metadata then holds a software name, radio model,
    centre frequency or timestamp.
    """
    if not data:
        return False

    def start_element(name: str, attrs: list[str]) -> None:
        if name != "Definition":
            return
        for attr_name, attr_value in zip(attrs[0::2], attrs[1::2]):
            _apply_attribute(metadata, attr_name, attr_value)

    parser = expat.ParserCreate()
    parser.ordered_attributes = True
    parser.StartElementHandler = start_element
    try:
        parser.Parse(data, True)
    except expat.ExpatError:
        pass

    found = metadata.has_data
    if found and metadata.software_name is not None and "SDR Console" in metadata.software_name:
        metadata.source_software = SdrSoftware.SDR_CONSOLE
    return found


def parse_binary_auxi(data: bytes, metadata: SdrMetadata) -> bool:
    """Read a binary auxi chunk: a SYSTEMTIME start time and a centre frequency at offset 32.

    Fields already present are kept. Returns True if anything was set.
    """
    if len(data) < _BINARY_MIN_SIZE:
        return False
    year, month, _weekday, day, hour, minute, second, _ms = _SYSTEMTIME.unpack_from(data)
    time_parsed = False
    freq_parsed = False

    if metadata.timestamp_unix is None:
        try:
            timestamp = utc_timestamp(year, month, day, hour, minute, second)
        except ValueError:
            timestamp = None
        if timestamp is not None:
            metadata.timestamp_unix = timestamp
            time_parsed = True
            if metadata.timestamp_str is None:
                metadata.timestamp_str = (
                    f"{year:04d}-{month:02d}-{day:02d} {hour:02d}:{minute:02d}:{second:02d} UTC"
                )

    (freq_hz,) = _BINARY_FREQ.unpack_from(data, _BINARY_FREQ_OFFSET)
    if freq_hz > 0 and metadata.center_freq_hz is None:
        metadata.center_freq_hz = float(freq_hz)
        freq_parsed = True

    return time_parsed or freq_parsed


def parse_auxi_chunk(data: bytes, metadata: SdrMetadata) -> bool:
    """Parse an auxi chunk as XML, falling back to the older binary layout."""
    if not data or len(data) > MAX_METADATA_CHUNK_SIZE:
        return False
    if parse_auxi_xml(data, metadata):
        return True
    return parse_binary_auxi(data, metadata)


def _frequency_from_filename(base_filename: str) -> Optional[float]:
    hz_pos = base_filename.lower().find("hz")
    if hz_pos < 0:
        return None
    underscore = base_filename.rfind("_", 0, hz_pos)
    if underscore < 0:
        return None
    digits = base_filename[underscore + 1:hz_pos]
    if not 0 < len(digits) < 32:
        return None
    freq = _parse_float(digits)
    return freq if freq is not None and freq > 0 else None


def parse_from_filename(base_filename: str, metadata: SdrMetadata) -> bool:
    """Fill missing frequency, timestamp and software from a recording's file name.

    Recognises ``_<digits>Hz`` and ``_YYYYMMDD_HHMMSSZ`` (SDR#), and the
    ``SDRuno_`` and ``SDRconnect_`` prefixes. Returns True if anything was set.
    """
    parsed_something_new = False
    inferred_sdrsharp = False

    if metadata.center_freq_hz is None:
        freq = _frequency_from_filename(base_filename)
        if freq is not None:
            metadata.center_freq_hz = freq
            parsed_something_new = True
            inferred_sdrsharp = True

    if metadata.timestamp_unix is None:
        start = base_filename.find("_")
        while start >= 0:
            match = _FILENAME_TIME_RE.match(base_filename, start)
            if match:
                year, month, day, hour, minute, second = (int(g) for g in match.groups())
                try:
                    timestamp = utc_timestamp(year, month, day, hour, minute, second)
                except ValueError:
                    timestamp = None
                if timestamp is not None:
                    metadata.timestamp_unix = timestamp
                    if metadata.timestamp_str is None:
                        metadata.timestamp_str = (
                            f"{year:04d}-{month:02d}-{day:02d} "
                            f"{hour:02d}:{minute:02d}:{second:02d} UTC"
                        )
                    parsed_something_new = True
                    inferred_sdrsharp = True
                    break
            start = base_filename.find("_", start + 1)

    if metadata.source_software is SdrSoftware.UNKNOWN:
        if inferred_sdrsharp:
            metadata.source_software = SdrSoftware.SDR_SHARP
        elif base_filename.startswith("SDRuno_"):
            metadata.source_software = SdrSoftware.SDR_UNO
        elif base_filename.startswith("SDRconnect_"):
            metadata.source_software = SdrSoftware.SDR_CONNECT
        if metadata.source_software is not SdrSoftware.UNKNOWN and metadata.software_name is None:
            metadata.software_name = metadata.source_software.value
            parsed_something_new = True

    return parsed_something_new


def iter_riff_chunks(stream: BinaryIO) -> Iterator[tuple[str, int, int]]:
    """Yield ``(chunk_id, data_offset, size)`` for each chunk of a seekable RIFF file.

    Raises ValueError if the stream does not start with a RIFF header.
    Iteration stops at a truncated chunk.
    """
    header = stream.read(12)
    if len(header) < 12 or header[:4] != b"RIFF":
        raise ValueError("not a RIFF file")
    while True:
        chunk_header = stream.read(8)
        if len(chunk_header) < 8:
            return
        chunk_id = chunk_header[:4].decode("latin-1")
        (size,) = struct.unpack("<I", chunk_header[4:])
        offset = stream.tell()
        end = stream.seek(0, 2)
        if offset + size > end:
            return
        yield chunk_id, offset, size
        stream.seek(offset + size + (size & 1))


def find_riff_chunk(stream: BinaryIO, chunk_id: str) -> Optional[bytes]:
    """Return the data of the first chunk named ``chunk_id``, or None if there is none."""
    for found_id, offset, size in iter_riff_chunks(stream):
        if found_id == chunk_id:
            stream.seek(offset)
            return stream.read(size)
    return None
import io
import struct
from datetime import datetime, timezone

import pytest

from iqresample.metadata import (
    MAX_METADATA_CHUNK_SIZE,
    SdrMetadata,
    SdrSoftware,
    find_riff_chunk,
    iter_riff_chunks,
    parse_auxi_chunk,
    parse_auxi_xml,
    parse_binary_auxi,
    parse_from_filename,
    utc_timestamp,
)


def _epoch(*fields):
    return int(datetime(*fields, tzinfo=timezone.utc).timestamp())


def _binary_auxi(year, month, day, hour, minute, second, freq):
    head = struct.pack("<8H", year, month, 4, day, hour, minute, second, 0)
    return head + bytes(16) + struct.pack("<I", freq) + bytes(8)


def _chunk(chunk_id, data):
    pad = b"\x00" if len(data) % 2 else b""
    return chunk_id + struct.pack("<I", len(data)) + data + pad


def _riff(*chunks):
    body = b"WAVE" + b"".join(chunks)
    return b"RIFF" + struct.pack("<I", len(body)) + body


def test_utc_timestamp_matches_datetime():
    assert utc_timestamp(2023, 6, 15, 12, 30, 45) == _epoch(2023, 6, 15, 12, 30, 45)
    assert utc_timestamp(1970, 1, 1, 0, 0, 0) == 0


def test_utc_timestamp_normalises_month():
    assert utc_timestamp(2022, 13, 1, 0, 0, 0) == utc_timestamp(2023, 1, 1, 0, 0, 0)
    assert utc_timestamp(2023, 0, 1, 0, 0, 0) == utc_timestamp(2022, 12, 1, 0, 0, 0)


def test_utc_timestamp_out_of_range_year():
    with pytest.raises(ValueError):
        utc_timestamp(0, 1, 1, 0, 0, 0)


def test_parse_auxi_xml_reads_definition_attributes():
    xml = (
        b'<SDR><Definition SoftwareName="SDR Console" SoftwareVersion="3.2" '
        b'RadioModel="Test Radio" RadioCenterFreq="14200000" UTCSeconds="1700000000"/></SDR>'
    )
    meta = SdrMetadata()
    assert parse_auxi_xml(xml, meta) is True
    assert meta.software_name == "SDR Console"
    assert meta.software_version == "3.2"
    assert meta.radio_model == "Test Radio"
    assert meta.center_freq_hz == 14200000.0
    assert meta.timestamp_unix == 1700000000
    assert meta.source_software is SdrSoftware.SDR_CONSOLE


def test_parse_auxi_xml_current_time_string():
    xml = b'<Definition CurrentTimeUTC="15-06-2023 12:30:45"/>'
    meta = SdrMetadata()
    assert parse_auxi_xml(xml, meta) is True
    assert meta.timestamp_str == "15-06-2023 12:30:45"
    assert meta.timestamp_unix == utc_timestamp(2023, 6, 15, 12, 30, 45)


def test_parse_auxi_xml_utc_seconds_does_not_overwrite():
    meta = SdrMetadata(timestamp_unix=5)
    parse_auxi_xml(b'<Definition UTCSeconds="1700000000"/>', meta)
    assert meta.timestamp_unix == 5


def test_parse_auxi_xml_rejects_bad_values():
    meta = SdrMetadata()
    result = parse_auxi_xml(b'<Definition RadioCenterFreq="abc" UTCSeconds="12x"/>', meta)
    assert result is False
    assert meta.center_freq_hz is None
    assert meta.timestamp_unix is None


def test_parse_auxi_xml_ignores_other_elements():
    meta = SdrMetadata()
    assert parse_auxi_xml(b'<Other SoftwareName="X"/>', meta) is False
    assert meta.software_name is None


def test_parse_auxi_xml_other_software_stays_unknown():
    meta = SdrMetadata()
    assert parse_auxi_xml(b'<Definition SoftwareName="Other"/>', meta) is True
    assert meta.source_software is SdrSoftware.UNKNOWN


def test_parse_binary_auxi():
    meta = SdrMetadata()
    assert parse_binary_auxi(_binary_auxi(2023, 6, 15, 12, 30, 45, 7100000), meta) is True
    assert meta.timestamp_unix == _epoch(2023, 6, 15, 12, 30, 45)
    assert meta.timestamp_str == "2023-06-15 12:30:45 UTC"
    assert meta.center_freq_hz == 7100000.0


def test_parse_binary_auxi_keeps_existing_values():
    meta = SdrMetadata(center_freq_hz=1.0, timestamp_unix=2)
    assert parse_binary_auxi(_binary_auxi(2023, 6, 15, 12, 30, 45, 7100000), meta) is False
    assert meta.center_freq_hz == 1.0
    assert meta.timestamp_unix == 2


def test_parse_binary_auxi_too_short():
    meta = SdrMetadata()
    assert parse_binary_auxi(bytes(35), meta) is False
    assert meta == SdrMetadata()


def test_parse_auxi_chunk_falls_back_to_binary():
    meta = SdrMetadata()
    assert parse_auxi_chunk(_binary_auxi(2020, 1, 2, 3, 4, 5, 1000), meta) is True
    assert meta.center_freq_hz == 1000.0
    assert meta.timestamp_unix == _epoch(2020, 1, 2, 3, 4, 5)


def test_parse_auxi_chunk_size_limits():
    assert parse_auxi_chunk(b"", SdrMetadata()) is False
    oversized = b'<Definition SoftwareName="x"/>'.ljust(MAX_METADATA_CHUNK_SIZE + 1, b" ")
    assert parse_auxi_chunk(oversized, SdrMetadata()) is False


def test_parse_from_filename_sdrsharp():
    meta = SdrMetadata()
    assert parse_from_filename("SDRSharp_20230615_123045Z_7100000Hz_IQ.wav", meta) is True
    assert meta.center_freq_hz == 7100000.0
    assert meta.timestamp_unix == _epoch(2023, 6, 15, 12, 30, 45)
    assert meta.timestamp_str == "2023-06-15 12:30:45 UTC"
    assert meta.source_software is SdrSoftware.SDR_SHARP
    assert meta.software_name == SdrSoftware.SDR_SHARP.value


@pytest.mark.parametrize(
    "name, software",
    [("SDRuno_recording.wav", SdrSoftware.SDR_UNO), ("SDRconnect_rec.wav", SdrSoftware.SDR_CONNECT)],
)
def test_parse_from_filename_prefix(name, software):
    meta = SdrMetadata()
    assert parse_from_filename(name, meta) is True
    assert meta.source_software is software
    assert meta.software_name == software.value


def test_parse_from_filename_nothing_found():
    meta = SdrMetadata()
    assert parse_from_filename("capture.wav", meta) is False
    assert meta == SdrMetadata()


def test_parse_from_filename_keeps_existing_frequency():
    meta = SdrMetadata(center_freq_hz=1.0, source_software=SdrSoftware.SDR_UNO)
    assert parse_from_filename("rec_7100000Hz.wav", meta) is False
    assert meta.center_freq_hz == 1.0
    assert meta.source_software is SdrSoftware.SDR_UNO


def test_parse_from_filename_rejects_non_numeric_frequency():
    meta = SdrMetadata()
    parse_from_filename("rec_abcHz.wav", meta)
    assert meta.center_freq_hz is None


def test_iter_riff_chunks_lists_chunks_in_order():
    stream = io.BytesIO(_riff(_chunk(b"fmt ", bytes(16)), _chunk(b"auxi", b"abc"), _chunk(b"data", bytes(8))))
    chunks = list(iter_riff_chunks(stream))
    assert [c[0] for c in chunks] == ["fmt ", "auxi", "data"]
    assert [c[2] for c in chunks] == [16, 3, 8]


def test_find_riff_chunk():
    payload = b'<Definition SoftwareName="x"/>'
    data = _riff(_chunk(b"fmt ", bytes(16)), _chunk(b"auxi", payload), _chunk(b"data", bytes(4)))
    assert find_riff_chunk(io.BytesIO(data), "auxi") == payload
    assert find_riff_chunk(io.BytesIO(data), "LIST") is None


def test_iter_riff_chunks_rejects_non_riff():
    with pytest.raises(ValueError):
        list(iter_riff_chunks(io.BytesIO(b"NOPE" + bytes(8))))


def test_iter_riff_chunks_stops_at_truncated_chunk():
    data = _riff(_chunk(b"fmt ", bytes(16))) + b"auxi" + struct.pack("<I", 100) + b"short"
    assert [c[0] for c in iter_riff_chunks(io.BytesIO(data))] == ["fmt "]
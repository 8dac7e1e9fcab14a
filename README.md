# iqresample

Pure-Python building blocks for working with complex baseband (I/Q)
recordings and SDRplay receiver settings. It needs nothing beyond the
standard library.

## What is inside

- `iqresample.log`: a small levelled logger. `Logger` writes messages at or
  above its level (`Level.TRACE` … `Level.FATAL`) to stderr, or to a stream
  given to it, and to up to 32 extra sinks registered with `add_callback()`
  or `add_stream()`. `set_quiet()` silences the console, `set_lock()` takes
  any context manager to hold while writing. `format_console_line()` and
  `format_file_line()` format a `LogEvent`.
- `iqresample.metadata`: capture metadata in an `SdrMetadata` (centre
  frequency, UTC timestamp, software name and version, radio model, and the
  `SdrSoftware` that made the recording).
  - `parse_auxi_chunk()` reads a WAV `auxi` chunk, trying the XML layout
    (`parse_auxi_xml()`) first and the older binary layout
    (`parse_binary_auxi()`) after.
  - `parse_from_filename()` fills in what is still missing from names such
    as `capture_20240101_120000Z_97300000Hz.wav` or the `SDRuno_` and
    `SDRconnect_` prefixes.
  - `iter_riff_chunks()` and `find_riff_chunk()` walk the chunks of a
    seekable RIFF file.
  - `utc_timestamp()` turns a UTC date and time into seconds since the epoch.
- `iqresample.io_threads`: `SampleChunk`, a `PipelineState` holding the
  shutdown and error flags and progress counters, and the loops
  `reader_loop()`, `stdout_writer_loop()` and `file_writer_loop()` that can
  be run on threads.
- `iqresample.sdrplay`: `HardwareId`, `Bandwidth` and `HdrBandwidth` tables,
  `device_name()`, `num_lna_states()`, `bandwidth_from_hz()`,
  `hdr_bandwidth_from_hz()`, and `SdrplayOptions`, whose `validate()` checks
  the sample rate (2–10 MHz), the analog bandwidth, the HDR bandwidth and
  the IF gain (−59…0 dB).
- `iqresample.sdrplay_setup`: `lna_state_for_gain()`, `resolve_antenna()`
  (returning an `AntennaSettings`), `interleave_iq()` to pack I and Q lists
  into cs16 bytes, and `summary_items()` for a description of the input.
- `iqresample.summary`: `format_file_size()`, `format_duration()`,
  `format_progress()`, `format_final_summary()` for a `RunStats`, and
  `exit_status()`.

Invalid settings are reported by raising `ValueError`, so wrap validation
calls in `try`/`except` where you accept user input.

## Examples

Metadata from a file name:

```python
from iqresample.metadata import SdrMetadata, parse_from_filename

meta = SdrMetadata()
if parse_from_filename("capture_20240101_120000Z_97300000Hz.wav", meta):
    print(meta.center_freq_hz)    # 97300000.0
    print(meta.timestamp_unix)    # 1704110400
    print(meta.source_software)   # SdrSoftware.SDR_SHARP
```

Metadata from a WAV file's `auxi` chunk:

```python
from iqresample.metadata import AUXI_CHUNK_ID, SdrMetadata, find_riff_chunk, parse_auxi_chunk

meta = SdrMetadata()
with open("recording.wav", "rb") as stream:
    data = find_riff_chunk(stream, AUXI_CHUNK_ID)
if data is not None and parse_auxi_chunk(data, meta):
    print(meta)
```

SDRplay settings:

```python
from iqresample.sdrplay import HardwareId, SdrplayOptions, num_lna_states

print(num_lna_states(HardwareId.RSP1A, 100e6, False, False))  # 10

options = SdrplayOptions(sample_rate_arg=6e6, bandwidth_arg=5e6)
options.validate()
print(options.bandwidth)  # Bandwidth.BW_5_000
```

Report formatting:

```python
from iqresample.summary import format_duration, format_file_size

print(format_file_size(1_500_000))  # 1.43 MiB
print(format_duration(3725))        # 01:02:05
```

## What it does not do

This is a library of parts, not a finished tool. It has no command-line
program, does not read or decode the sample data of WAV files (only their
chunk layout and metadata), does not resample or filter samples, and does
not talk to SDRplay hardware: the SDRplay modules only check and work out
settings.

## Running the tests

Install the `test` extra and run `pytest` from the project directory.
"""Progress lines, the final run summary and the process exit status."""

from __future__ import annotations

import math
from dataclasses import dataclass

LABEL_WIDTH = 32
_SIZE_UNITS = ("KiB", "MiB", "GiB", "TiB", "PiB")


@dataclass
class RunStats:
    """Counters gathered over one run of the pipeline."""

    total_frames_read: int = 0
    total_output_frames: int = 0
    source_frames: int = -1
    final_output_size_bytes: int = 0
    end_of_stream_reached: bool = False

    @property
    def total_output_samples(self) -> int:
        """Output samples written: two per I/Q frame."""
        return self.total_output_frames * 2


def format_file_size(size_bytes: int) -> str:
    """Human-readable size in binary units; a negative size is "Unknown"."""
    if size_bytes < 0:
        return "Unknown"
    if size_bytes < 1024:
        return f"{size_bytes} B"
    value = float(size_bytes)
    unit = _SIZE_UNITS[0]
    for unit in _SIZE_UNITS:
        value /= 1024.0
        if value < 1024.0:
            break
    return f"{value:.2f} {unit}"


def format_duration(seconds: float) -> str:
    """Duration as ``HH:MM:SS``; negative or non-finite durations count as zero."""
    if not math.isfinite(seconds) or seconds < 0:
        seconds = 0.0
    total = int(round(seconds))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_progress(current_frames: int, total_frames: int) -> str:
    """The progress line shown while writing; percentages are capped at 100."""
    if total_frames > 0:
        percentage = min(current_frames / total_frames * 100.0, 100.0)
        return (
            f"Writing output frames {current_frames} / {total_frames} "
            f"({percentage:.1f}% Est.)..."
        )
    return f"Written {current_frames} output frames..."


def _line(label: str, value: str) -> str:
    return f"{label:<{LABEL_WIDTH}} {value}"


def format_final_summary(
    stats: RunStats,
    success: bool,
    shutdown_requested: bool,
    known_length: bool,
    duration_seconds: float,
    output_to_stdout: bool,
) -> str:
    """The end-of-run report; empty when output went to stdout."""
    if output_to_stdout:
        return ""
    size_text = format_file_size(stats.final_output_size_bytes)
    duration_text = format_duration(duration_seconds)
    lines = ["", "--- Final Summary ---"]

    if not success:
        lines.append(_line("Status:", "Stopped Due to Error"))
        if stats.total_frames_read > 0:
            lines.append(
                f"Processing stopped after {stats.total_frames_read} input frames."
            )
        lines.append(_line("Output File Size:", f"{size_text} (possibly incomplete)"))
    elif stats.end_of_stream_reached:
        lines += [
            _line("Status:", "Completed Successfully"),
            _line("Processing Duration:", duration_text),
            _line(
                "Input Frames Read:",
                f"{stats.total_frames_read} / {stats.source_frames} (100.0%)",
            ),
            _line("Output Frames Written:", str(stats.total_output_frames)),
            _line("Output Samples Written:", str(stats.total_output_samples)),
            _line("Final Output Size:", size_text),
        ]
    elif shutdown_requested:
        if known_length:
            lines.append(_line("Status:", "Processing Cancelled by User"))
            lines.append(_line("Processing Duration:", duration_text))
            percentage = 0.0
            if stats.source_frames > 0:
                percentage = stats.total_frames_read / stats.source_frames * 100.0
            lines.append(
                _line(
                    "Input Frames Read:",
                    f"{stats.total_frames_read} / {stats.source_frames} ({percentage:.1f}%)",
                )
            )
        else:
            lines.append(_line("Status:", "Capture Stopped by User"))
            lines.append(_line("Capture Duration:", duration_text))
            lines.append(_line("Input Frames Read:", str(stats.total_frames_read)))
        lines += [
            _line("Output Frames Written:", str(stats.total_output_frames)),
            _line("Output Samples Written:", str(stats.total_output_samples)),
            _line("Final Output Size:", size_text),
        ]
    else:
        return "\n".join(lines) + "\n"
    return "\n".join(lines) + "\n"


def exit_status(success: bool, shutdown_requested: bool) -> int:
    """0 when the run succeeded or was stopped on request, 1 otherwise."""
    return 0 if success or shutdown_requested else 1
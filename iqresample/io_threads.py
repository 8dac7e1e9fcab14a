"""Reader and writer loops that move sample chunks through the pipeline."""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass, field
from typing import Callable, Optional

from .log import Logger

DEFAULT_WRITE_CHUNK_SIZE = 1 << 20
DEFAULT_PROGRESS_INTERVAL = 16

ProgressCallback = Callable[[int, int], None]
WriteFn = Callable[[bytes], Optional[int]]
ReadFn = Callable[[int], bytes]


@dataclass(eq=False)
class SampleChunk:
    """One block of samples travelling between pipeline stages."""

    raw_input_data: bytes = b""
    frames_read: int = 0
    frames_to_write: int = 0
    final_output_data: bytes = b""
    is_last_chunk: bool = False
    stream_discontinuity_event: bool = False


@dataclass(eq=False)
class PipelineState:
    """Shared progress counters and the shutdown and error flags of one run."""

    logger: Optional[Logger] = None
    expected_total_output_frames: int = 0
    error_occurred: bool = False
    error_message: Optional[str] = None
    end_of_stream_reached: bool = False
    total_frames_read: int = 0
    total_output_frames: int = 0
    _shutdown: threading.Event = field(default_factory=threading.Event, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    @property
    def shutdown_requested(self) -> bool:
        return self._shutdown.is_set()

    def request_shutdown(self) -> None:
        """Ask every stage to stop."""
        self._shutdown.set()

    def fail(self, message: str) -> None:
        """Record a fatal error, log it and request shutdown."""
        with self._lock:
            self.error_occurred = True
            if self.error_message is None:
                self.error_message = message
        if self.logger is not None:
            self.logger.fatal(message)
        self.request_shutdown()

    def add_frames_read(self, count: int) -> None:
        """Add ``count`` to the number of input frames read."""
        with self._lock:
            self.total_frames_read += count

    def record_output_frames(self, count: int) -> None:
        """Set the number of output frames written so far."""
        with self._lock:
            self.total_output_frames = count


def reader_loop(source: Callable[[], object], state: PipelineState) -> None:
    """Run ``source`` to completion; mark end of stream unless shutdown was asked for."""
    source()
    if not state.shutdown_requested:
        if state.logger is not None:
            state.logger.debug("Reader thread finished naturally. End of stream reached.")
        state.end_of_stream_reached = True


def stdout_writer_loop(
    in_queue: "queue.Queue[Optional[SampleChunk]]",
    free_queue: "queue.Queue[Optional[SampleChunk]]",
    write: WriteFn,
    bytes_per_frame: int,
    state: PipelineState,
) -> int:
    """Write each chunk's output data as it arrives, returning chunks to ``free_queue``.

    A ``None`` item closes the queue. Stops after the last chunk, or requests
    shutdown on a short write. Returns the number of bytes written.
    """
    total = 0
    while True:
        item = in_queue.get()
        if item is None:
            break
        if item.stream_discontinuity_event:
            free_queue.put(item)
            continue
        if item.is_last_chunk:
            free_queue.put(item)
            break
        nbytes = item.frames_to_write * bytes_per_frame
        if nbytes > 0:
            written = write(bytes(item.final_output_data[:nbytes]))
            if written != nbytes:
                if not state.shutdown_requested:
                    state.request_shutdown()
                free_queue.put(item)
                break
            total += nbytes
        free_queue.put(item)
    if state.logger is not None:
        state.logger.debug("Writer thread is exiting.")
    return total


def file_writer_loop(
    read: ReadFn,
    write: WriteFn,
    bytes_per_frame: int,
    state: PipelineState,
    progress: Optional[ProgressCallback] = None,
    chunk_size: int = DEFAULT_WRITE_CHUNK_SIZE,
    progress_interval: int = DEFAULT_PROGRESS_INTERVAL,
) -> int:
    """Copy blocks from ``read`` to ``write`` until ``read`` returns nothing.

    Every ``progress_interval`` blocks the output frame count is stored in
    ``state`` and passed to ``progress`` with the expected total. A failed or
    short write is a fatal error. Returns the number of bytes written.
    """
    total = 0
    loop_count = 0
    while True:
        data = read(chunk_size)
        if not data:
            break
        try:
            written = write(data)
        except OSError as exc:
            state.fail(f"Writer: File write error: {exc}")
            break
        if written != len(data):
            state.fail("Writer: File write error: short write")
            break
        total += len(data)
        loop_count += 1
        if progress is not None and loop_count % progress_interval == 0:
            frames = total // bytes_per_frame
            state.record_output_frames(frames)
            progress(frames, state.expected_total_output_frames)
    if state.logger is not None:
        state.logger.debug("Writer thread is exiting.")
    return total
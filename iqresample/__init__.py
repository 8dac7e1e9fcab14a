"""Parts for I/Q recordings: logging, WAV metadata, SDRplay settings, streaming loops and summaries."""

__version__ = "0.1.0"
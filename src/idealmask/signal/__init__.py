"""Signal processing utilities."""

from .stft import (
    STFTPlan,
    analyze,
    build_stft,
    frame_count,
    synthesize,
    window_sum_square,
)
from .window import ExplicitWindow, FixedSize, WindowSpec, make_window, resolve_window

__all__ = [
    "STFTPlan",
    "analyze",
    "build_stft",
    "frame_count",
    "synthesize",
    "window_sum_square",
    "ExplicitWindow",
    "FixedSize",
    "WindowSpec",
    "make_window",
    "resolve_window",
]

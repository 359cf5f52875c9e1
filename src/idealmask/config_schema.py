"""Structured configuration schema for oracle mask runs.

The dataclasses double as OmegaConf structured configs; see
:mod:`idealmask.configs` for loading and overrides.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from idealmask.oracle import OutputRequest
from idealmask.signal.window import DEFAULT_FFT_SIZE, DEFAULT_WINDOW, FixedSize


@dataclass
class STFTConfig:
    """Framing options. ``hop_size=None`` means half the FFT size."""

    fft_size: int = DEFAULT_FFT_SIZE
    hop_size: int | None = None
    window: str = DEFAULT_WINDOW

    def window_spec(self) -> FixedSize:
        return FixedSize(self.fft_size, self.window)


@dataclass
class MaskConfig:
    """Which masks and outputs to compute."""

    compute_binary_mask: bool = True
    compute_time_axis: bool = False
    ratio_exponent: float = 2.0

    def output_request(self, *, return_masks: bool = False) -> OutputRequest:
        return OutputRequest(
            compute_binary_mask=self.compute_binary_mask,
            compute_time_axis=self.compute_time_axis,
            return_masks=return_masks,
        )


@dataclass
class RuntimeConfig:
    """Output location and logging options."""

    output_dir: str = "outputs/ideal_masks"
    log_level: str = "INFO"
    metrics_file: str = "metrics.jsonl"
    plot: bool = False


@dataclass
class IdealMaskConfig:
    """Top-level configuration."""

    stft: STFTConfig = field(default_factory=STFTConfig)
    masks: MaskConfig = field(default_factory=MaskConfig)
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)

"""Plotting utilities for ideal masks."""

from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

from idealmask.oracle import IdealMaskResult


def _one_sided(tf: np.ndarray) -> np.ndarray:
    """Keep the non-negative frequency bins and put frequency on the rows."""
    if tf.ndim != 2:
        raise ValueError("expected a 2-D array shaped (n_frames, fft_size)")
    n_fft = tf.shape[1]
    return tf[:, : n_fft // 2 + 1].T


def plot_masks(
    ratio_mask: np.ndarray,
    binary_mask: np.ndarray | None = None,
    mixture_tf: np.ndarray | None = None,
    *,
    vmin: float = -60.0,
    vmax: float = 20.0,
) -> plt.Figure:
    """Plot the mixture spectrogram and the ideal masks side by side.

    Inputs are two-sided and shaped ``(n_frames, fft_size)``; only the
    non-negative frequency half is drawn.
    """
    panels: list[tuple[str, np.ndarray, dict[str, float]]] = []
    if mixture_tf is not None:
        power = np.maximum(np.abs(_one_sided(mixture_tf)) ** 2, 1.0e-12)
        panels.append(
            ("Mixture (dB)", 10.0 * np.log10(power), {"vmin": vmin, "vmax": vmax})
        )
    panels.append(("Ideal ratio mask", _one_sided(ratio_mask), {"vmin": 0.0, "vmax": 1.0}))
    if binary_mask is not None:
        panels.append(
            ("Ideal binary mask", _one_sided(binary_mask), {"vmin": 0.0, "vmax": 1.0})
        )

    fig, axes = plt.subplots(nrows=len(panels), ncols=1, squeeze=False, sharex=True)
    for ax, (title, image, limits) in zip(axes[:, 0], panels):
        ax.imshow(image, origin="lower", aspect="auto", rasterized=True, **limits)
        ax.set_title(title)
        ax.set_ylabel("Bin")
    axes[-1, 0].set_xlabel("Frame")
    fig.tight_layout()
    return fig


def save_mask_plots(
    result: IdealMaskResult,
    outdir: str | Path,
    *,
    name: str = "oracle",
) -> list[Path]:
    """Save mask figures for ``result`` as PDFs under ``outdir``.

    ``result`` must come from a call with ``return_masks=True``.
    """
    if result.ratio_mask is None:
        raise ValueError("result has no masks; request them with return_masks=True")

    output_dir = Path(outdir)
    output_dir.mkdir(parents=True, exist_ok=True)

    saved: list[Path] = []
    fig = plot_masks(result.ratio_mask, result.binary_mask, result.mixture_tf)
    path = output_dir / f"{name}-masks.pdf"
    fig.savefig(path)
    plt.close(fig)
    saved.append(path)

    if result.mixture_tf is not None:
        masked = result.mixture_tf * result.ratio_mask
        power = np.maximum(np.abs(_one_sided(masked)) ** 2, 1.0e-12)
        path = output_dir / f"{name}-irm-spectrogram.pdf"
        plt.imshow(10.0 * np.log10(power), origin="lower", aspect="auto", rasterized=True)
        plt.axis("off")
        plt.savefig(path)
        plt.close()
        saved.append(path)

    return saved

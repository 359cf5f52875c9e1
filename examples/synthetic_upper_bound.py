"""Example: oracle-mask upper bounds for a synthetic tone-in-noise mixture.

Usage
-----
``python examples/synthetic_upper_bound.py --snr-db 0 --fft-size 512``
"""

from __future__ import annotations

import argparse
from typing import Sequence

import numpy as np

from idealmask import OutputRequest, apply_ideal_masks, score_result


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Score ideal ratio/binary masks on a synthetic mixture.",
    )
    parser.add_argument("--sample-rate", type=int, default=16000, help="Sample rate in Hz.")
    parser.add_argument("--duration", type=float, default=2.0, help="Length in seconds.")
    parser.add_argument("--snr-db", type=float, default=0.0, help="Target-to-noise ratio.")
    parser.add_argument("--fft-size", type=int, default=1024, help="STFT FFT size.")
    parser.add_argument("--hop-size", type=int, default=None, help="STFT hop size.")
    parser.add_argument("--seed", type=int, default=0, help="Noise seed.")
    return parser.parse_args(argv)


def _make_sources(
    sample_rate: int, duration: float, snr_db: float, seed: int
) -> tuple[np.ndarray, np.ndarray]:
    rng = np.random.default_rng(seed)
    t = np.arange(int(sample_rate * duration)) / sample_rate
    target = np.sin(2.0 * np.pi * 220.0 * t) + 0.5 * np.sin(2.0 * np.pi * 660.0 * t)
    noise = rng.standard_normal(t.size)
    gain = np.sqrt(np.mean(target**2) / (np.mean(noise**2) * 10.0 ** (snr_db / 10.0)))
    return target, gain * noise


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)
    target, interference = _make_sources(
        args.sample_rate, args.duration, args.snr_db, args.seed
    )
    result = apply_ideal_masks(
        target,
        interference,
        args.fft_size,
        args.hop_size,
        args.sample_rate,
        request=OutputRequest(compute_time_axis=True),
    )
    scores = score_result(target, interference, result)
    for key, value in scores.as_dict().items():
        print(f"{key}: {value:.2f} dB")


if __name__ == "__main__":
    main()

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

import numpy as np
import soundfile as sf

from .config_schema import IdealMaskConfig
from .configs import flag_overrides, load_config, save_config
from .errors import InvalidInput
from .evaluation import score_result
from .logging_utils import JsonlLogger, configure_logging
from .oracle import apply_ideal_masks
from .visualization import save_mask_plots


LOGGER = logging.getLogger("idealmask.cli")


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="idealmask",
        description="Apply oracle ideal ratio/binary masks to target + interference",
    )
    parser.add_argument("target_wav", type=Path, help="Path to the target WAV.")
    parser.add_argument(
        "interference_wav", type=Path, help="Path to the interference WAV."
    )
    parser.add_argument(
        "--config", type=Path, default=None, help="YAML configuration file."
    )
    parser.add_argument(
        "--set",
        action="append",
        default=[],
        help="Configuration override in section.key=value form.",
    )
    parser.add_argument("--output-dir", type=Path, default=None, help="Output directory.")
    parser.add_argument("--fft-size", type=int, default=None, help="STFT FFT size.")
    parser.add_argument("--hop-size", type=int, default=None, help="STFT hop size.")
    parser.add_argument("--window", type=str, default=None, help="STFT window name.")
    parser.add_argument(
        "--no-binary",
        action="store_true",
        help="Skip the ideal binary mask output.",
    )
    parser.add_argument("--plot", action="store_true", help="Save mask plots.")
    parser.add_argument("--log-level", type=str, default=None, help="Logging level.")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> IdealMaskConfig:
    """Merge the YAML file, ``--set`` overrides and explicit flags."""
    return load_config(
        args.config, overrides=[*args.set, *flag_overrides(vars(args))]
    )


def load_mono(path: Path) -> tuple[np.ndarray, int]:
    """Read a single-channel audio file as ``float64``."""
    data, sample_rate = sf.read(str(path), dtype="float64", always_2d=True)
    if data.shape[1] != 1:
        raise InvalidInput(
            f"{path} has {data.shape[1]} channels; only mono input is supported"
        )
    return data[:, 0], int(sample_rate)


def run(config: IdealMaskConfig, target_wav: Path, interference_wav: Path) -> dict:
    """Run one oracle separation and write its outputs; return the run record."""
    target, fs_target = load_mono(target_wav)
    interference, fs_interf = load_mono(interference_wav)
    if fs_target != fs_interf:
        raise InvalidInput(
            f"Sample rates differ: {fs_target} Hz (target) vs {fs_interf} Hz "
            "(interference)"
        )

    result = apply_ideal_masks(
        target,
        interference,
        config.stft.window_spec(),
        config.stft.hop_size,
        fs_target,
        request=config.masks.output_request(return_masks=config.runtime.plot),
        ratio_exponent=config.masks.ratio_exponent,
    )

    output_dir = Path(config.runtime.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    outputs = {"irm": output_dir / "irm.wav"}
    sf.write(str(outputs["irm"]), result.ratio_masked, fs_target, subtype="FLOAT")
    if result.binary_masked is not None:
        outputs["ibm"] = output_dir / "ibm.wav"
        sf.write(str(outputs["ibm"]), result.binary_masked, fs_target, subtype="FLOAT")
    LOGGER.info("Saved oracle outputs: %s", ", ".join(str(p) for p in outputs.values()))

    scores = score_result(target, interference, result)
    LOGGER.info(
        "SI-SDR mixture=%.2f dB, IRM=%.2f dB",
        scores.si_sdr_mixture,
        scores.si_sdr_ratio,
    )

    record = {
        "target": str(target_wav),
        "interference": str(interference_wav),
        "sample_rate": fs_target,
        "n_samples": result.n_samples,
        "fft_size": result.plan.fft_size,
        "hop_size": result.plan.hop,
        "outputs": {key: str(path) for key, path in outputs.items()},
        **scores.as_dict(),
    }
    if config.runtime.plot:
        record["plots"] = [str(p) for p in save_mask_plots(result, output_dir)]

    JsonlLogger(output_dir / config.runtime.metrics_file).write(record)
    save_config(output_dir / "config.yaml", config)
    return record


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        config = build_config(args)
        configure_logging(config.runtime.log_level)
        run(config, args.target_wav, args.interference_wav)
    except ValueError as exc:
        LOGGER.error("Invalid input: %s", exc)
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

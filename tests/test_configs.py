from __future__ import annotations

from pathlib import Path

import pytest

from idealmask import IdealMaskConfig, InvalidInput, load_config, parse_config, save_config
from idealmask.configs import flag_overrides


def test_load_config_without_file_gives_defaults() -> None:
    assert load_config() == IdealMaskConfig()


def test_save_and_load_config_round_trip(tmp_path: Path) -> None:
    cfg = parse_config({"stft": {"fft_size": 512, "window": "hann"}, "runtime": {"plot": True}})
    path = save_config(tmp_path / "nested" / "cfg.yaml", cfg)
    assert path.exists()
    assert load_config(path) == cfg


def test_load_config_applies_dotlist_overrides(tmp_path: Path) -> None:
    path = tmp_path / "cfg.yaml"
    path.write_text("stft:\n  fft_size: 512\n", encoding="utf-8")
    cfg = load_config(path, overrides=["stft.fft_size=256", "", "stft.hop_size=64"])
    assert cfg.stft.fft_size == 256
    assert cfg.stft.hop_size == 64
    assert cfg.stft.window == "hamming"


def test_load_config_rejects_unknown_keys(tmp_path: Path) -> None:
    path = tmp_path / "cfg.yaml"
    path.write_text("stft:\n  fft_sise: 512\n", encoding="utf-8")
    with pytest.raises(InvalidInput, match="Invalid configuration"):
        load_config(path)
    with pytest.raises(InvalidInput, match="Invalid configuration"):
        load_config(overrides=["plotting.enabled=true"])


@pytest.mark.parametrize(
    "override", ["stft.fft_size=abc", "masks.ratio_exponent=high", "runtime.plot=maybe"]
)
def test_load_config_rejects_badly_typed_overrides(override: str) -> None:
    with pytest.raises(InvalidInput, match="Invalid configuration"):
        load_config(overrides=[override])


def test_load_config_reports_missing_file(tmp_path: Path) -> None:
    with pytest.raises(InvalidInput, match="Cannot read config"):
        load_config(tmp_path / "missing.yaml")


def test_flag_overrides_skips_unset_flags() -> None:
    flags = {
        "output_dir": Path("runs/a"),
        "fft_size": 256,
        "hop_size": None,
        "window": None,
        "log_level": "DEBUG",
        "no_binary": True,
        "plot": False,
        "set": ["stft.window=hann"],
    }
    assert flag_overrides(flags) == [
        "runtime.output_dir=runs/a",
        "stft.fft_size=256",
        "runtime.log_level=DEBUG",
        "masks.compute_binary_mask=false",
    ]
    assert flag_overrides({}) == []


def test_flag_overrides_feed_load_config() -> None:
    cfg = load_config(overrides=flag_overrides({"hop_size": 128, "plot": True}))
    assert cfg.stft.hop_size == 128
    assert cfg.runtime.plot is True

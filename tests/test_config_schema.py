from __future__ import annotations

import pytest

from idealmask import FixedSize, InvalidInput, OutputRequest
from idealmask.config_schema import IdealMaskConfig, STFTConfig
from idealmask.configs import config_to_dict, parse_config


def test_parse_config_applies_defaults() -> None:
    cfg = parse_config({"stft": {"fft_size": 512}, "runtime": {"plot": True}})
    assert isinstance(cfg, IdealMaskConfig)
    assert cfg.stft.fft_size == 512
    assert cfg.stft.hop_size is None
    assert cfg.stft.window == "hamming"
    assert cfg.masks.compute_binary_mask is True
    assert cfg.masks.ratio_exponent == 2.0
    assert cfg.runtime.plot is True
    assert cfg.runtime.metrics_file == "metrics.jsonl"


def test_parse_config_rejects_unknown_key() -> None:
    with pytest.raises(InvalidInput, match="unknown_field"):
        parse_config({"stft": {"unknown_field": 1}})


def test_parse_config_rejects_wrong_type() -> None:
    with pytest.raises(InvalidInput):
        parse_config({"stft": {"fft_size": "large"}})


def test_parse_config_overrides_win_over_mapping() -> None:
    cfg = parse_config({"stft": {"fft_size": 512}}, overrides=["stft.fft_size=128"])
    assert cfg.stft.fft_size == 128


def test_stft_config_builds_window_spec() -> None:
    assert STFTConfig(fft_size=256, window="hann").window_spec() == FixedSize(256, "hann")


def test_mask_config_builds_output_request() -> None:
    cfg = parse_config({"masks": {"compute_binary_mask": False, "compute_time_axis": True}})
    request = cfg.masks.output_request(return_masks=True)
    assert request == OutputRequest(
        compute_binary_mask=False, compute_time_axis=True, return_masks=True
    )


def test_config_round_trips_through_dict() -> None:
    cfg = parse_config({"stft": {"hop_size": 128}})
    data = config_to_dict(cfg)
    assert data["stft"]["hop_size"] == 128
    assert parse_config(data) == cfg

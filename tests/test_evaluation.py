from __future__ import annotations

import math

import numpy as np
import pytest
from fast_bss_eval import si_sdr as reference_si_sdr

from idealmask import (
    InvalidInput,
    OracleScores,
    OutputRequest,
    apply_ideal_masks,
    score_result,
    si_sdr,
)


def _tone_plus_noise(seed: int = 123) -> tuple[np.ndarray, np.ndarray]:
    rng = np.random.default_rng(seed)
    fs = 8000
    t = np.arange(4096) / fs
    target = np.sin(2.0 * np.pi * 440.0 * t)
    interference = 0.5 * rng.standard_normal(4096)
    return target, interference


def test_si_sdr_matches_fast_bss_eval() -> None:
    target, interference = _tone_plus_noise()
    estimate = target + 0.3 * interference

    ours = si_sdr(target, estimate)
    theirs = np.asarray(reference_si_sdr(target[None, :], estimate[None, :]))
    np.testing.assert_allclose(ours, theirs.reshape(-1)[0], rtol=1e-6, atol=1e-6)


def test_si_sdr_is_scale_invariant() -> None:
    target, interference = _tone_plus_noise()
    estimate = target + interference
    assert si_sdr(target, 3.0 * estimate) == pytest.approx(si_sdr(target, estimate))
    assert si_sdr(target, 0.5 * target) > 100.0


def test_si_sdr_edge_cases() -> None:
    assert math.isnan(si_sdr(np.zeros(8), np.ones(8)))
    assert si_sdr(np.ones(8), np.ones(8)) == math.inf
    assert si_sdr(np.array([1.0, -1.0]), np.array([1.0, 1.0])) == -math.inf
    with pytest.raises(InvalidInput, match="lengths differ"):
        si_sdr(np.ones(8), np.ones(9))


def test_oracle_masks_improve_over_mixture() -> None:
    target, interference = _tone_plus_noise()
    result = apply_ideal_masks(target, interference, 256, fs=8000)
    scores = score_result(target, interference, result)

    assert isinstance(scores, OracleScores)
    assert scores.si_sdr_binary is not None
    assert scores.si_sdr_ratio_improvement > 5.0
    binary_improvement = scores.si_sdr_binary_improvement
    assert binary_improvement is not None
    assert binary_improvement > 5.0


def test_score_result_without_binary_output() -> None:
    target, interference = _tone_plus_noise()
    result = apply_ideal_masks(
        target[:3000],
        interference,
        256,
        request=OutputRequest(compute_binary_mask=False),
    )
    scores = score_result(target[:3000], interference, result)
    assert scores.si_sdr_binary is None
    summary = scores.as_dict()
    assert summary["si_sdr_binary_improvement"] is None
    assert set(summary) == {
        "si_sdr_mixture",
        "si_sdr_ratio",
        "si_sdr_ratio_improvement",
        "si_sdr_binary",
        "si_sdr_binary_improvement",
    }

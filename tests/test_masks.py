import numpy as np
import pytest

from idealmask import (
    InvalidInput,
    STFTPlan,
    analyze,
    apply_mask,
    binary_mask,
    derive_masks,
    fit_length,
    make_window,
    ratio_mask,
)


def _random_tf(rng: np.random.Generator, shape: tuple[int, int]) -> np.ndarray:
    return rng.standard_normal(shape) + 1j * rng.standard_normal(shape)


def test_masks_stay_in_range_and_keep_shape() -> None:
    rng = np.random.default_rng(0)
    target = _random_tf(rng, (7, 16))
    interference = 3.0 * _random_tf(rng, (7, 16))

    irm, ibm = derive_masks(target, interference)
    assert irm.shape == target.shape
    assert ibm.shape == target.shape
    assert np.all((irm >= 0.0) & (irm <= 1.0))
    assert set(np.unique(ibm)) <= {0.0, 1.0}


def test_ratio_mask_is_energy_ratio_by_default() -> None:
    target = np.array([[3.0 + 0.0j, 1.0j]])
    interference = np.array([[4.0j, 1.0]])
    np.testing.assert_allclose(ratio_mask(target, interference), [[9.0 / 25.0, 0.5]])


def test_ratio_mask_magnitude_exponent() -> None:
    target = np.array([[3.0 + 0.0j]])
    interference = np.array([[-4.0 + 0.0j]])
    np.testing.assert_allclose(ratio_mask(target, interference, exponent=1.0), [[3.0 / 7.0]])


def test_ratio_mask_is_zero_where_both_sources_are_silent() -> None:
    zeros = np.zeros((2, 4), dtype=complex)
    with np.errstate(all="raise"):
        irm = ratio_mask(zeros, zeros)
    assert not np.any(np.isnan(irm))
    np.testing.assert_array_equal(irm, 0.0)


def test_binary_mask_ties_go_to_interference() -> None:
    target = np.array([[1.0 + 0.0j, 0.0, 2.0, 1.0j]])
    interference = np.array([[-1.0 + 0.0j, 0.0, 1.0, 1.0]])
    np.testing.assert_array_equal(binary_mask(target, interference), [[0.0, 0.0, 1.0, 0.0]])
    np.testing.assert_array_equal(
        binary_mask(target, interference), binary_mask(target, interference)
    )


def test_masks_reject_shape_mismatch() -> None:
    with pytest.raises(InvalidInput, match="shapes differ"):
        derive_masks(np.zeros((2, 4)), np.zeros((3, 4)))


def test_ratio_mask_rejects_non_positive_exponent() -> None:
    with pytest.raises(InvalidInput, match="exponent"):
        ratio_mask(np.ones((1, 2)), np.ones((1, 2)), exponent=0.0)


def test_all_ones_mask_reconstructs_signal() -> None:
    rng = np.random.default_rng(3)
    x = rng.standard_normal(256)
    plan = STFTPlan(window=make_window(32), hop=8)
    spec = analyze(x, plan)

    y = apply_mask(spec, np.ones(spec.shape), plan)
    assert y.size == 256
    np.testing.assert_allclose(y, x, atol=1e-10)


def test_apply_mask_rejects_mask_shape_mismatch() -> None:
    plan = STFTPlan(window=make_window(16), hop=8)
    spec = analyze(np.ones(64), plan)
    with pytest.raises(InvalidInput):
        apply_mask(spec, np.ones((spec.shape[0] + 1, 16)), plan)


def test_fit_length_pads_and_truncates() -> None:
    x = np.array([1.0, 2.0, 3.0])
    np.testing.assert_array_equal(fit_length(x, 5), [1.0, 2.0, 3.0, 0.0, 0.0])
    np.testing.assert_array_equal(fit_length(x, 2), [1.0, 2.0])
    np.testing.assert_array_equal(fit_length(x, 3), x)


@pytest.mark.parametrize("exponent", [None, "2", True, float("nan")])
def test_ratio_mask_rejects_non_numeric_exponent(exponent: object) -> None:
    with pytest.raises(InvalidInput, match="exponent"):
        ratio_mask(np.ones((1, 2)), np.ones((1, 2)), exponent=exponent)  # type: ignore[arg-type]

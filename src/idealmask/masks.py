"""Ideal time-frequency mask derivation and application."""

from __future__ import annotations

import numbers

import numpy as np

from idealmask.errors import InvalidInput
from idealmask.signal.stft import STFTPlan, synthesize


def check_exponent(exponent: object, what: str = "exponent") -> float:
    """Return ``exponent`` as ``float`` if it is a positive real number."""
    if isinstance(exponent, (bool, np.bool_)) or not isinstance(
        exponent, numbers.Real
    ):
        raise InvalidInput(f"{what} must be a positive real number, got {exponent!r}")
    if not exponent > 0:
        raise InvalidInput(f"{what} must be positive, got {exponent!r}")
    return float(exponent)


def _check_same_shape(a: np.ndarray, b: np.ndarray, what: str) -> None:
    if a.shape != b.shape:
        raise InvalidInput(f"{what} shapes differ: {a.shape} vs {b.shape}")


def ratio_mask(
    target_tf: np.ndarray,
    interference_tf: np.ndarray,
    exponent: float = 2.0,
) -> np.ndarray:
    """Ideal ratio mask ``|T|^p / (|T|^p + |I|^p)``.

    With the default ``exponent=2`` this is the ratio of target energy to
    total energy in each bin; ``exponent=1`` gives the magnitude ratio.
    Bins where both sources are zero get the value 0.

    Parameters
    ----------
    target_tf, interference_tf:
        Complex spectrograms of identical shape.
    exponent:
        Positive power applied to the bin magnitudes.

    Returns
    -------
    np.ndarray
        ``float64`` mask in ``[0, 1]`` with the input shape.
    """
    target_tf = np.asarray(target_tf)
    interference_tf = np.asarray(interference_tf)
    _check_same_shape(target_tf, interference_tf, "target/interference spectrogram")
    exponent = check_exponent(exponent)

    target_pow = np.abs(target_tf) ** exponent
    total_pow = target_pow + np.abs(interference_tf) ** exponent
    mask = np.zeros(target_pow.shape, dtype=np.float64)
    np.divide(target_pow, total_pow, out=mask, where=total_pow > 0)
    return np.clip(mask, 0.0, 1.0)


def binary_mask(target_tf: np.ndarray, interference_tf: np.ndarray) -> np.ndarray:
    """Ideal binary mask: 1 where ``|T| > |I|``, otherwise 0.

    Exact ties, including bins where both are zero, go to the interference.
    """
    target_tf = np.asarray(target_tf)
    interference_tf = np.asarray(interference_tf)
    _check_same_shape(target_tf, interference_tf, "target/interference spectrogram")
    return (np.abs(target_tf) > np.abs(interference_tf)).astype(np.float64)


def derive_masks(
    target_tf: np.ndarray,
    interference_tf: np.ndarray,
    exponent: float = 2.0,
) -> tuple[np.ndarray, np.ndarray]:
    """Return ``(ratio_mask, binary_mask)`` for a pair of source spectrograms."""
    return (
        ratio_mask(target_tf, interference_tf, exponent=exponent),
        binary_mask(target_tf, interference_tf),
    )


def apply_mask(mixture_tf: np.ndarray, mask: np.ndarray, plan: STFTPlan) -> np.ndarray:
    """Mask ``mixture_tf`` bin-for-bin and resynthesize with ``plan``.

    ``plan`` must be the plan the mixture was analyzed with. The output holds
    ``(n_frames - 1) * hop + fft_size`` samples; use :func:`fit_length` to
    bring it back to the input length.
    """
    mixture_tf = np.asarray(mixture_tf)
    mask = np.asarray(mask)
    _check_same_shape(mixture_tf, mask, "mixture spectrogram/mask")
    return synthesize(mixture_tf * mask, plan)


def fit_length(signal: np.ndarray, length: int) -> np.ndarray:
    """Zero-pad the tail of ``signal`` or truncate it to ``length`` samples."""
    x = np.asarray(signal, dtype=np.float64).reshape(-1)
    if x.size >= length:
        return x[:length].copy()
    out = np.zeros(length, dtype=np.float64)
    out[: x.size] = x
    return out

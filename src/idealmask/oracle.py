"""Oracle separation with ideal ratio and binary masks.

The target and interference are analyzed separately and together, masks are
derived from the clean spectrograms, and each mask is applied to the mixture
spectrogram. Outputs always have ``max(len(target), len(interference))``
samples.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import numbers
from typing import Sequence

import numpy as np

from idealmask.errors import InvalidInput
from idealmask.masks import (
    apply_mask,
    binary_mask,
    check_exponent,
    fit_length,
    ratio_mask,
)
from idealmask.signal.stft import STFTPlan, analyze, warn_if_not_invertible
from idealmask.signal.window import WindowSpec, as_positive_int, resolve_window


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutputRequest:
    """Select which optional outputs :func:`apply_ideal_masks` computes.

    Parameters
    ----------
    compute_binary_mask:
        Apply the ideal binary mask as well as the ideal ratio mask.
    compute_time_axis:
        Return the sample times ``i / fs``.
    return_masks:
        Keep the derived masks and the mixture spectrogram in the result.
    """

    compute_binary_mask: bool = True
    compute_time_axis: bool = False
    return_masks: bool = False


@dataclass(frozen=True)
class IdealMaskResult:
    """Outputs of :func:`apply_ideal_masks`.

    Parameters
    ----------
    ratio_masked:
        Mixture filtered by the ideal ratio mask.
    binary_masked:
        Mixture filtered by the ideal binary mask, if requested.
    time:
        Sample times in seconds (or samples when ``fs`` is 1), if requested.
    sample_rate:
        Sample rate used for ``time``.
    plan:
        Window and hop used for analysis and synthesis.
    ratio_mask, binary_mask:
        Masks shaped ``(n_frames, fft_size)`` when ``return_masks`` was set.
        ``binary_mask`` is only kept when the binary output was computed.
    mixture_tf:
        Mixture spectrogram when ``return_masks`` was set.
    """

    ratio_masked: np.ndarray
    sample_rate: float
    plan: STFTPlan
    binary_masked: np.ndarray | None = None
    time: np.ndarray | None = None
    ratio_mask: np.ndarray | None = None
    binary_mask: np.ndarray | None = None
    mixture_tf: np.ndarray | None = None

    @property
    def n_samples(self) -> int:
        return int(self.ratio_masked.size)


def as_signal(x: Sequence[float] | np.ndarray, name: str) -> np.ndarray:
    """Convert ``x`` to a 1-D ``float64`` array.

    Row and column vectors (2-D with a singleton axis) are flattened.
    """
    try:
        arr = np.asarray(x)
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"{name} must be a numeric vector: {exc}") from exc
    if arr.ndim == 2 and 1 in arr.shape:
        arr = arr.reshape(-1)
    if arr.ndim != 1:
        raise InvalidInput(f"{name} must be a vector, got shape {arr.shape}")
    if arr.size < 2:
        raise InvalidInput(f"{name} must have at least 2 samples, got {arr.size}")
    if not np.issubdtype(arr.dtype, np.number) or np.iscomplexobj(arr):
        raise InvalidInput(f"{name} must contain real numbers")
    return arr.astype(np.float64)


def pad(signal: np.ndarray, length: int) -> np.ndarray:
    """Zero-pad the tail of ``signal`` to ``length`` samples.

    Signals already at least ``length`` long are returned unchanged.
    """
    x = np.asarray(signal, dtype=np.float64).reshape(-1)
    if x.size >= length:
        return x.copy()
    return fit_length(x, length)


def time_axis(n_samples: int, fs: float) -> np.ndarray:
    """Return ``t[i] = i / fs`` for ``i`` in ``range(n_samples)``."""
    return np.arange(n_samples, dtype=np.float64) / float(fs)


def _resolve_hop(hop: object, fft_size: int) -> int:
    if hop is None:
        return max(1, fft_size // 2)
    value = as_positive_int(hop, "HOP")
    if value > fft_size:
        raise InvalidInput(
            f"HOP must be less than or equal to NFFT ({fft_size}), got {value}"
        )
    return value


def _resolve_fs(fs: object) -> float:
    if fs is None:
        return 1.0
    if isinstance(fs, (bool, np.bool_)) or not isinstance(
        fs, (numbers.Number, np.ndarray)
    ):
        raise InvalidInput(f"FS must be a real scalar, got {fs!r}")
    arr = np.asarray(fs)
    if arr.ndim != 0 or not np.issubdtype(arr.dtype, np.number):
        raise InvalidInput(f"FS must be a real scalar, got {fs!r}")
    if np.iscomplexobj(arr):
        raise InvalidInput(f"FS must be a real scalar, got {fs!r}")
    value = float(arr)
    if not np.isfinite(value) or value <= 0:
        raise InvalidInput(f"FS must be finite and positive, got {fs!r}")
    return value


def prepare_inputs(
    target: Sequence[float] | np.ndarray,
    interference: Sequence[float] | np.ndarray,
    window: WindowSpec | int | Sequence[float] | np.ndarray | None = None,
    hop: int | None = None,
    fs: float | None = None,
) -> tuple[np.ndarray, np.ndarray, STFTPlan, float]:
    """Validate and normalize the arguments of :func:`apply_ideal_masks`.

    Returns the zero-padded target and interference, the resolved plan and the
    sample rate.

    Raises
    ------
    InvalidInput
        On the first argument that fails validation.
    """
    xt = as_signal(target, "XT")
    xi = as_signal(interference, "XI")

    maxlength = max(xt.size, xi.size)
    xt = pad(xt, maxlength)
    xi = pad(xi, maxlength)

    win = resolve_window(window)
    nfft = win.size
    if xt.size < nfft:
        raise InvalidInput(f"XT must have at least NFFT ({nfft}) samples")
    if xi.size < nfft:
        raise InvalidInput(f"XI must have at least NFFT ({nfft}) samples")

    plan = STFTPlan(window=win, hop=_resolve_hop(hop, nfft))
    return xt, xi, plan, _resolve_fs(fs)


def apply_ideal_masks(
    target: Sequence[float] | np.ndarray,
    interference: Sequence[float] | np.ndarray,
    window: WindowSpec | int | Sequence[float] | np.ndarray | None = None,
    hop: int | None = None,
    fs: float | None = None,
    *,
    request: OutputRequest | None = None,
    ratio_exponent: float = 2.0,
) -> IdealMaskResult:
    """Compute the ideal masks and apply them to ``target + interference``.

    Parameters
    ----------
    target:
        Target signal.
    interference:
        Interference signal. The shorter of the two is zero-padded.
    window:
        :class:`FixedSize` (or a bare integer, or a one-element sequence) for
        a Hamming window of that length, or :class:`ExplicitWindow` (or any
        longer sequence) used as is. The window length is the FFT size.
        Defaults to a Hamming window of 1024 samples.
    hop:
        Frame advance in samples, ``0 < hop <= fft_size``. Defaults to half
        the FFT size.
    fs:
        Sample rate used for the time axis. Defaults to 1.
    request:
        Optional outputs to compute. Defaults to :class:`OutputRequest`.
    ratio_exponent:
        Power applied to bin magnitudes in the ratio mask (2 = energy).

    Returns
    -------
    IdealMaskResult
        Every returned signal holds ``max(len(target), len(interference))``
        samples.

    Raises
    ------
    InvalidInput
        If any argument fails validation. Nothing is computed in that case.
    """
    request = OutputRequest() if request is None else request
    xt, xi, plan, sample_rate = prepare_inputs(target, interference, window, hop, fs)
    ratio_exponent = check_exponent(ratio_exponent, "ratio_exponent")
    maxlength = xt.size
    LOGGER.debug(
        "Ideal masks: n_samples=%d fft_size=%d hop=%d n_frames=%d",
        maxlength,
        plan.fft_size,
        plan.hop,
        plan.n_frames(maxlength),
    )
    warn_if_not_invertible(plan)

    target_tf = analyze(xt, plan)
    interference_tf = analyze(xi, plan)
    mixture_tf = analyze(xt + xi, plan)

    irm = ratio_mask(target_tf, interference_tf, exponent=ratio_exponent)
    ratio_masked = fit_length(apply_mask(mixture_tf, irm, plan), maxlength)

    ibm = None
    binary_masked = None
    if request.compute_binary_mask:
        ibm = binary_mask(target_tf, interference_tf)
        binary_masked = fit_length(apply_mask(mixture_tf, ibm, plan), maxlength)

    time = time_axis(maxlength, sample_rate) if request.compute_time_axis else None

    keep = request.return_masks
    return IdealMaskResult(
        ratio_masked=ratio_masked,
        sample_rate=sample_rate,
        plan=plan,
        binary_masked=binary_masked,
        time=time,
        ratio_mask=irm if keep else None,
        binary_mask=ibm if keep else None,
        mixture_tf=mixture_tf if keep else None,
    )

"""Analysis window specification and generation."""

from __future__ import annotations

from dataclasses import dataclass
import numbers
from typing import Sequence, Union

import numpy as np
from scipy.signal import get_window

from idealmask.errors import InvalidInput


DEFAULT_FFT_SIZE = 1024
DEFAULT_WINDOW = "hamming"


@dataclass(frozen=True)
class FixedSize:
    """Generate a named window of ``size`` samples."""

    size: int
    name: str = DEFAULT_WINDOW


@dataclass(frozen=True)
class ExplicitWindow:
    """Use ``weights`` as the window; its length defines the FFT size."""

    weights: Sequence[float] | np.ndarray


WindowSpec = Union[FixedSize, ExplicitWindow]


def as_positive_int(value: object, what: str) -> int:
    """Return ``value`` as ``int`` if it is a positive integral number.

    Integral floats such as ``512.0`` are accepted; booleans are not.
    """
    if isinstance(value, (bool, np.bool_)):
        raise InvalidInput(f"{what} must be a positive integer, got {value!r}")
    if isinstance(value, numbers.Integral):
        result = int(value)
    elif isinstance(value, numbers.Real) and float(value).is_integer():
        result = int(value)
    else:
        raise InvalidInput(f"{what} must be a positive integer, got {value!r}")
    if result <= 0:
        raise InvalidInput(f"{what} must be a positive integer, got {value!r}")
    return result


def make_window(length: int, name: str = DEFAULT_WINDOW) -> np.ndarray:
    """Return a symmetric window of ``length`` samples.

    The default is the raised-cosine Hamming taper. The window is generated
    with ``fftbins=False`` so it is symmetric, which is what the analysis and
    synthesis stages both assume.
    """
    n = as_positive_int(length, "window length")
    try:
        win = get_window(name, n, fftbins=False)
    except ValueError as exc:
        raise InvalidInput(f"Unknown window {name!r}: {exc}") from exc
    return np.asarray(win, dtype=np.float64)


def _explicit_weights(weights: Sequence[float] | np.ndarray) -> np.ndarray:
    try:
        win = np.asarray(weights)
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"WINDOW must be a numeric vector: {exc}") from exc
    if win.ndim != 1:
        raise InvalidInput(f"WINDOW must be a vector, got shape {win.shape}")
    if win.size == 0:
        raise InvalidInput("WINDOW must contain at least one sample")
    if not np.issubdtype(win.dtype, np.number) or np.iscomplexobj(win):
        raise InvalidInput("WINDOW must contain real numbers")
    win = win.astype(np.float64)
    if not np.all(np.isfinite(win)):
        raise InvalidInput("WINDOW must contain finite values")
    return win


def _single_value(spec: object) -> object | None:
    """Return the only element of a one-element sequence or array, else None."""
    if isinstance(spec, (str, bytes)):
        return None
    try:
        arr = np.asarray(spec)
    except (TypeError, ValueError):
        return None
    if arr.size != 1 or arr.dtype == object:
        return None
    return arr.reshape(-1)[0]


def resolve_window(
    spec: WindowSpec | int | Sequence[float] | np.ndarray | None = None,
) -> np.ndarray:
    """Resolve a window specification into a window array.

    ``None`` means a Hamming window of :data:`DEFAULT_FFT_SIZE` samples. A
    bare number, or any sequence or array holding exactly one value, is read
    as :class:`FixedSize`; longer sequences are read as
    :class:`ExplicitWindow`. Wrap a single weight in :class:`ExplicitWindow`
    to use a one-sample window.

    Raises
    ------
    InvalidInput
        If the size is not a positive integer or the window is not a
        non-empty, finite, real vector.
    """
    if spec is None:
        spec = FixedSize(DEFAULT_FFT_SIZE)
    if isinstance(spec, FixedSize):
        size = as_positive_int(spec.size, "NFFT")
        return make_window(size, spec.name)
    if isinstance(spec, ExplicitWindow):
        return _explicit_weights(spec.weights)
    if isinstance(spec, (numbers.Number, np.number)):
        return make_window(as_positive_int(spec, "NFFT"))
    value = _single_value(spec)
    if value is not None:
        return make_window(as_positive_int(value, "NFFT"))
    return _explicit_weights(spec)  # type: ignore[arg-type]

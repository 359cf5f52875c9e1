"""Short-time Fourier analysis and overlap-add synthesis.

Frames are placed at ``k * hop`` (not centered) and never padded, so a signal
of ``n`` samples yields ``(n - fft_size) // hop + 1`` frames of ``fft_size``
complex bins each. Synthesis is the exact inverse of that layout.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging

import numpy as np
from scipy import fft as sp_fft
from scipy.signal import ShortTimeFFT, check_NOLA

from idealmask.errors import InvalidInput


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class STFTPlan:
    """Window and hop shared by analysis and synthesis."""

    window: np.ndarray
    hop: int

    def __post_init__(self) -> None:
        if self.window.ndim != 1 or self.window.size == 0:
            raise InvalidInput("STFT window must be a non-empty vector")
        if self.hop <= 0 or self.hop > self.window.size:
            raise InvalidInput(
                f"hop must satisfy 0 < hop <= fft_size, got hop={self.hop} "
                f"for fft_size={self.window.size}"
            )

    @property
    def fft_size(self) -> int:
        return int(self.window.size)

    def n_frames(self, n_samples: int) -> int:
        return frame_count(n_samples, self.fft_size, self.hop)

    def synthesis_length(self, n_frames: int) -> int:
        if n_frames <= 0:
            return 0
        return (n_frames - 1) * self.hop + self.fft_size


def build_stft(plan: STFTPlan) -> ShortTimeFFT:
    """Build a :class:`scipy.signal.ShortTimeFFT` instance from ``plan``.

    The analysis window doubles as the synthesis window, so ``istft`` returns
    the plain weighted overlap-add; :func:`synthesize` applies the
    normalization itself.
    """
    win = np.array(plan.window, dtype=np.float64)
    return ShortTimeFFT(
        win=win,
        hop=int(plan.hop),
        fs=1,
        fft_mode="twosided",
        dual_win=win.copy(),
        phase_shift=None,
    )


def frame_count(n_samples: int, fft_size: int, hop: int) -> int:
    """Number of full frames that fit in ``n_samples`` samples."""
    if n_samples < fft_size:
        return 0
    return (n_samples - fft_size) // hop + 1


def analyze(signal: np.ndarray, plan: STFTPlan) -> np.ndarray:
    """Return the two-sided STFT of ``signal`` shaped ``(n_frames, fft_size)``."""
    x = np.asarray(signal, dtype=np.float64)
    if x.ndim != 1:
        raise InvalidInput(f"signal must be 1-D, got shape {x.shape}")
    n_frames = plan.n_frames(x.size)
    if n_frames == 0:
        return np.zeros((0, plan.fft_size), dtype=np.complex128)
    stft = build_stft(plan)
    # k_offset shifts slice p from being centered on p * hop to starting there.
    spec = stft.stft(x, p0=0, p1=n_frames, k_offset=stft.m_num_mid)
    return spec.T


def _overlap_add(stft: ShortTimeFFT, columns: np.ndarray, length: int) -> np.ndarray:
    """Overlap-add ``columns`` (shaped ``(fft_size, n_frames)``) from sample 0.

    istft treats column ``q`` as slice ``q + p_min`` centered on its hop
    position. Leading zero slices move the first frame to a start index
    ``k0 >= 0``; trailing ones satisfy istft's minimum slice count. Zero
    slices add nothing to the sum.
    """
    lead = -(-stft.m_num_mid // stft.hop) - stft.p_min
    k0 = (stft.p_min + lead) * stft.hop - stft.m_num_mid
    min_slices = stft.p_num(stft.m_num - stft.m_num_mid)
    trail = max(0, min_slices - lead - columns.shape[1])
    columns = np.pad(columns, ((0, 0), (lead, trail)))
    return np.real(stft.istft(columns, k0=k0, k1=k0 + length))


def window_sum_square(plan: STFTPlan, n_frames: int) -> np.ndarray:
    """Overlap-add of the squared window over ``n_frames`` frames."""
    length = plan.synthesis_length(n_frames)
    if n_frames <= 0:
        return np.zeros(0, dtype=np.float64)
    stft = build_stft(plan)
    win_spec = sp_fft.fft(stft.win)
    columns = np.repeat(win_spec[:, None], n_frames, axis=1)
    return _overlap_add(stft, columns, length)


def synthesize(spectrogram: np.ndarray, plan: STFTPlan) -> np.ndarray:
    """Invert :func:`analyze` by weighted overlap-add.

    Each frame is inverse transformed, multiplied by the synthesis window and
    added at offset ``k * hop``. The sum is divided by the overlap-added
    squared window where that envelope is non-negligible; samples with zero
    envelope stay zero.

    Parameters
    ----------
    spectrogram:
        Complex array shaped ``(n_frames, fft_size)``.
    plan:
        The plan used for analysis.

    Returns
    -------
    np.ndarray
        Real signal of ``(n_frames - 1) * hop + fft_size`` samples.
    """
    spec = np.asarray(spectrogram)
    if spec.ndim != 2 or spec.shape[1] != plan.fft_size:
        raise InvalidInput(
            f"spectrogram must be shaped (n_frames, {plan.fft_size}), "
            f"got {spec.shape}"
        )
    n_frames = spec.shape[0]
    if n_frames == 0:
        return np.zeros(0, dtype=np.float64)

    length = plan.synthesis_length(n_frames)
    output = _overlap_add(build_stft(plan), spec.T, length)
    envelope = window_sum_square(plan, n_frames)
    nonzero = envelope > np.finfo(envelope.dtype).tiny
    output[nonzero] /= envelope[nonzero]
    output[~nonzero] = 0.0
    return output


def warn_if_not_invertible(plan: STFTPlan) -> bool:
    """Log a warning if ``plan`` leaves samples with zero window coverage.

    Returns ``True`` when the nonzero overlap-add condition holds.
    """
    ok = bool(check_NOLA(plan.window, plan.fft_size, plan.fft_size - plan.hop))
    if not ok:
        LOGGER.warning(
            "Window/hop pair (fft_size=%d, hop=%d) violates the nonzero "
            "overlap-add condition; uncovered samples are reconstructed as zero.",
            plan.fft_size,
            plan.hop,
        )
    return ok

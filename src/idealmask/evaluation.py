"""SI-SDR scoring of oracle-masked outputs."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any

import numpy as np

from idealmask.errors import InvalidInput
from idealmask.oracle import IdealMaskResult, as_signal, pad


LOGGER = logging.getLogger(__name__)


def si_sdr(
    reference: np.ndarray,
    estimate: np.ndarray,
    scaling: bool = True,
) -> float:
    """Compute the (scale-invariant) SDR of ``estimate`` against ``reference``.

    Parameters
    ----------
    reference:
        Reference signal.
    estimate:
        Estimated signal with the same number of samples.
    scaling:
        If ``True``, project ``estimate`` onto ``reference`` first.

    Returns
    -------
    float
        Score in dB. ``inf`` for a perfect estimate, ``nan`` for a silent
        reference.
    """
    ref = np.asarray(reference, dtype=np.float64).reshape(-1)
    est = np.asarray(estimate, dtype=np.float64).reshape(-1)
    if ref.size != est.size:
        raise InvalidInput(
            f"reference and estimate lengths differ: {ref.size} vs {est.size}"
        )

    rss = float(np.dot(ref, ref))
    if rss == 0.0:
        LOGGER.warning("SI-SDR is undefined for a silent reference.")
        return float("nan")

    scale = float(np.dot(ref, est)) / rss if scaling else 1.0
    e_true = scale * ref
    e_res = est - e_true

    sss = float((e_true**2).sum())
    snn = float((e_res**2).sum())
    if snn == 0.0:
        return float("inf")
    if sss == 0.0:
        return float("-inf")
    return 10.0 * float(np.log10(sss / snn))


@dataclass(frozen=True)
class OracleScores:
    """SI-SDR of the mixture and of each oracle-masked output, in dB."""

    si_sdr_mixture: float
    si_sdr_ratio: float
    si_sdr_binary: float | None = None

    @property
    def si_sdr_ratio_improvement(self) -> float:
        return self.si_sdr_ratio - self.si_sdr_mixture

    @property
    def si_sdr_binary_improvement(self) -> float | None:
        if self.si_sdr_binary is None:
            return None
        return self.si_sdr_binary - self.si_sdr_mixture

    def as_dict(self) -> dict[str, Any]:
        return {
            "si_sdr_mixture": self.si_sdr_mixture,
            "si_sdr_ratio": self.si_sdr_ratio,
            "si_sdr_ratio_improvement": self.si_sdr_ratio_improvement,
            "si_sdr_binary": self.si_sdr_binary,
            "si_sdr_binary_improvement": self.si_sdr_binary_improvement,
        }


def score_result(
    target: np.ndarray,
    interference: np.ndarray,
    result: IdealMaskResult,
    *,
    scaling: bool = True,
) -> OracleScores:
    """Score ``result`` against the clean target.

    ``target`` and ``interference`` are zero-padded to the result length, so
    the same arrays passed to :func:`~idealmask.oracle.apply_ideal_masks` can
    be used here.
    """
    n_samples = result.n_samples
    xt = pad(as_signal(target, "target"), n_samples)
    xi = pad(as_signal(interference, "interference"), n_samples)
    if xt.size != n_samples or xi.size != n_samples:
        raise InvalidInput(
            "target and interference must not be longer than the result "
            f"({n_samples} samples)"
        )

    binary = None
    if result.binary_masked is not None:
        binary = si_sdr(xt, result.binary_masked, scaling=scaling)
    return OracleScores(
        si_sdr_mixture=si_sdr(xt, xt + xi, scaling=scaling),
        si_sdr_ratio=si_sdr(xt, result.ratio_masked, scaling=scaling),
        si_sdr_binary=binary,
    )

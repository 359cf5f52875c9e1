"""idealmask public API."""

from .config_schema import IdealMaskConfig
from .configs import load_config, parse_config, save_config
from .errors import InvalidInput
from .evaluation import OracleScores, score_result, si_sdr
from .logging_utils import JsonlLogger, log_records_jsonl
from .masks import apply_mask, binary_mask, derive_masks, fit_length, ratio_mask
from .oracle import (
    IdealMaskResult,
    OutputRequest,
    apply_ideal_masks,
    pad,
    prepare_inputs,
    time_axis,
)
from .signal import (
    ExplicitWindow,
    FixedSize,
    STFTPlan,
    WindowSpec,
    analyze,
    make_window,
    resolve_window,
    synthesize,
)

__all__ = [
    "apply_ideal_masks",
    "IdealMaskResult",
    "OutputRequest",
    "InvalidInput",
    "prepare_inputs",
    "pad",
    "time_axis",
    "apply_mask",
    "binary_mask",
    "derive_masks",
    "fit_length",
    "ratio_mask",
    "ExplicitWindow",
    "FixedSize",
    "STFTPlan",
    "WindowSpec",
    "analyze",
    "make_window",
    "resolve_window",
    "synthesize",
    "OracleScores",
    "score_result",
    "si_sdr",
    "IdealMaskConfig",
    "load_config",
    "parse_config",
    "save_config",
    "JsonlLogger",
    "log_records_jsonl",
]

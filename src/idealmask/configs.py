"""Load, override and save :class:`IdealMaskConfig` run configurations.

Every source is merged onto the structured schema, so unknown keys and values
of the wrong type are rejected as :class:`~idealmask.errors.InvalidInput`.
Later sources win: schema defaults, then the YAML file, then dotlist
overrides such as ``stft.fft_size=512``.
"""

from __future__ import annotations

from dataclasses import asdict
from pathlib import Path
from typing import Any, Iterable, Mapping, cast

import yaml
from omegaconf import DictConfig, ListConfig, OmegaConf
from omegaconf.errors import OmegaConfBaseException

from idealmask.config_schema import IdealMaskConfig
from idealmask.errors import InvalidInput


# Command line option -> configuration key. Switches map to a fixed override.
FLAG_KEYS = {
    "output_dir": "runtime.output_dir",
    "fft_size": "stft.fft_size",
    "hop_size": "stft.hop_size",
    "window": "stft.window",
    "log_level": "runtime.log_level",
}
SWITCH_OVERRIDES = {
    "no_binary": "masks.compute_binary_mask=false",
    "plot": "runtime.plot=true",
}


def flag_overrides(flags: Mapping[str, Any]) -> list[str]:
    """Turn command line flag values into dotlist overrides.

    Options left at ``None`` and switches left off contribute nothing.
    """
    overrides = [
        f"{key}={flags[name]}"
        for name, key in FLAG_KEYS.items()
        if flags.get(name) is not None
    ]
    overrides.extend(
        override for name, override in SWITCH_OVERRIDES.items() if flags.get(name)
    )
    return overrides


def _to_config(sources: Iterable[DictConfig | ListConfig]) -> IdealMaskConfig:
    merged = OmegaConf.structured(IdealMaskConfig)
    try:
        for source in sources:
            merged = OmegaConf.merge(merged, source)
        config = OmegaConf.to_object(merged)
    except OmegaConfBaseException as exc:
        raise InvalidInput(f"Invalid configuration: {exc}") from exc
    return cast(IdealMaskConfig, config)


def _dotlist(overrides: Iterable[str] | None) -> list[DictConfig]:
    items = [item for item in (overrides or []) if item]
    if not items:
        return []
    try:
        return [OmegaConf.from_dotlist(items)]
    except OmegaConfBaseException as exc:
        raise InvalidInput(f"Invalid override in {items}: {exc}") from exc


def parse_config(
    data: Mapping[str, Any] | None = None,
    *,
    overrides: Iterable[str] | None = None,
) -> IdealMaskConfig:
    """Decode a nested mapping plus dotlist overrides into :class:`IdealMaskConfig`."""
    sources: list[DictConfig | ListConfig] = []
    if data:
        sources.append(OmegaConf.create(dict(data)))
    return _to_config(sources + _dotlist(overrides))


def load_config(
    path: str | Path | None = None,
    *,
    overrides: Iterable[str] | None = None,
) -> IdealMaskConfig:
    """Load a YAML file (if any) and apply ``key.sub=value`` overrides."""
    sources: list[DictConfig | ListConfig] = []
    if path is not None:
        try:
            sources.append(OmegaConf.load(Path(path)))
        except OSError as exc:
            raise InvalidInput(f"Cannot read config {path}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise InvalidInput(f"Config {path} is not valid YAML: {exc}") from exc
    return _to_config(sources + _dotlist(overrides))


def config_to_dict(config: IdealMaskConfig) -> dict[str, Any]:
    """Convert :class:`IdealMaskConfig` to a plain dictionary."""
    return asdict(config)


def save_config(path: str | Path, config: IdealMaskConfig) -> Path:
    """Write ``config`` to ``path`` as YAML, creating parent directories.

    The file can be passed back to :func:`load_config`.
    """
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(config_to_dict(config), handle, sort_keys=False)
    return out

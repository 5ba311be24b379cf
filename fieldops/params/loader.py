"""YAML reading and writing of FieldOpsConfig.

Files hold one mapping per parameter group:

    grid:
      size: [32, 32, 8]
      halo: [3, 3, 3]
    runtime:
      backend: cpu
      arch: device

Missing groups and keys fall back to their defaults.
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from fieldops.params.schema import FieldOpsConfig, ValidationError

logger = logging.getLogger(__name__)


def _read_mapping(path: Path) -> dict[str, Any]:
    if not path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {path}")
    with path.open("r") as stream:
        data = yaml.safe_load(stream)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError(
            f"Configuration must be a dictionary of parameter groups, "
            f"got {type(data).__name__}"
        )
    return data


def load_config(path: str | Path) -> FieldOpsConfig:
    """Read and validate a configuration file.

    Args:
        path: YAML file with ``grid`` and/or ``runtime`` groups

    Returns:
        Validated FieldOpsConfig

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValidationError: If the content is not a mapping or a value is invalid
        yaml.YAMLError: If the YAML is malformed
    """
    path = Path(path)
    config = FieldOpsConfig.from_dict(_read_mapping(path))
    logger.debug("Loaded configuration from %s", path)
    return config


def save_config(config: FieldOpsConfig, path: str | Path) -> None:
    """Write ``config`` as YAML, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(config.to_dict(), default_flow_style=None, sort_keys=False))


def load_config_with_overrides(
    path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> FieldOpsConfig:
    """Defaults or a file, then per-group overrides on top.

    Example:
        config = load_config_with_overrides(
            "base.yaml", {"grid": {"size": [32, 32, 8]}, "runtime": {"arch": "device"}}
        )
    """
    config = FieldOpsConfig() if path is None else load_config(path)
    return config.with_updates(**overrides) if overrides else config


def merge_configs(base: FieldOpsConfig, override: FieldOpsConfig) -> FieldOpsConfig:
    """Every value of ``override`` replaces the one in ``base``."""
    merged = base.to_dict()
    for group, values in override.to_dict().items():
        merged[group].update(values)
    return FieldOpsConfig.from_dict(merged)

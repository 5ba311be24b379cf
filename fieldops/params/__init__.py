"""
Parameter management module for fieldops.

This module provides:
- Validated, immutable parameter containers (schema.py)
- YAML loading utilities (loader.py)
"""

from fieldops.params.schema import (
    FieldOpsConfig,
    GridParams,
    RuntimeParams,
    ValidationError,
)
from fieldops.params.loader import (
    load_config,
    load_config_with_overrides,
    merge_configs,
    save_config,
)

__all__ = [
    # Schema classes
    "GridParams",
    "RuntimeParams",
    "FieldOpsConfig",
    "ValidationError",
    # Loader functions
    "load_config",
    "save_config",
    "load_config_with_overrides",
    "merge_configs",
]

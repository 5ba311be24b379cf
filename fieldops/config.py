"""
Taichi configuration and initialization.

Environment variables:
    FIELDOPS_BACKEND: 'cuda', 'vulkan', 'cpu', or 'auto' (default)
    FIELDOPS_DEBUG: '1' to enable debug mode

Debug mode also turns on index-window assertions for elementwise reads of
lazy operations. Falls back to CPU if no GPU is available.
"""

import logging
import os
import subprocess

import taichi as ti

from fieldops.core.dtypes import DTYPE

logger = logging.getLogger(__name__)

_debug = os.environ.get("FIELDOPS_DEBUG", "0") == "1"


def is_debug() -> bool:
    """Whether index-window assertions are enabled."""
    return _debug


def set_debug(flag: bool) -> None:
    """Enable or disable index-window assertions."""
    global _debug
    _debug = bool(flag)


def get_backend() -> str:
    """Determine Taichi backend: check env var, then auto-detect."""
    env = os.environ.get("FIELDOPS_BACKEND", "auto").lower()

    if env in ("cuda", "vulkan", "cpu"):
        return env
    if env != "auto":
        raise ValueError(f"Invalid FIELDOPS_BACKEND: {env}")

    # Auto-detect CUDA
    try:
        result = subprocess.run(
            ["nvidia-smi", "-L"], capture_output=True, text=True, timeout=5
        )
        if result.returncode == 0 and "GPU" in result.stdout:
            return "cuda"
    except (FileNotFoundError, subprocess.TimeoutExpired):
        pass

    return "cpu"


def init_taichi(
    backend: str | None = None,
    debug: bool | None = None,
) -> str:
    """Initialize Taichi with specified or auto-detected backend."""
    if backend is None:
        backend = get_backend()
    if debug is None:
        debug = os.environ.get("FIELDOPS_DEBUG", "0") == "1"

    arch = {"cuda": ti.cuda, "vulkan": ti.vulkan, "cpu": ti.cpu}.get(backend)
    if arch is None:
        raise ValueError(f"Unknown backend: {backend}")

    ti.init(
        arch=arch,
        default_fp=DTYPE,
        debug=debug,
        offline_cache=True,
        random_seed=42,
    )
    set_debug(debug)
    logger.info("Taichi initialized on %s backend (debug=%s)", backend, debug)
    return backend

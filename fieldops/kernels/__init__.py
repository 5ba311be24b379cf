"""Taichi kernels used by device-resident field storage.

The parallel fill engine of the surrounding framework lives elsewhere; these
kernels only cover the bulk fills and copies fieldops needs when relocating
or initialising device storage.
"""

from fieldops.kernels.utils import copy_field, fill_field, fill_window

__all__ = [
    "copy_field",
    "fill_field",
    "fill_window",
]

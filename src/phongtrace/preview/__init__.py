"""Preview module for rendered output.

Components:
    export: Packed-frame unpacking and PNG export (Pillow)

Example:
    >>> from phongtrace.preview import save_png
    >>> save_png(frame, "output.png")
"""

from phongtrace.preview.export import (
    alpha_channel,
    compute_rmse,
    save_png,
    unpack_argb,
)

__all__ = [
    "unpack_argb",
    "alpha_channel",
    "save_png",
    "compute_rmse",
]

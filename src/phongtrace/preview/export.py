"""Image export utilities for rendered frames.

Rendered frames are (height, width) uint32 arrays of packed 0xAARRGGBB
samples. This module converts them to RGB arrays and writes them to disk.

Supported formats:
    - PNG (8-bit RGB via Pillow)

Example:
    >>> from phongtrace.core.renderer import render
    >>> from phongtrace.preview.export import save_png
    >>> from phongtrace.scene.presets import create_preset_scene
    >>>
    >>> scene, camera = create_preset_scene("classic")
    >>> frame = render(scene, camera, 640, 480)
    >>> save_png(frame, "output.png")
"""

from __future__ import annotations

import logging

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

logger = logging.getLogger(__name__)


def unpack_argb(frame: npt.NDArray[np.uint32]) -> npt.NDArray[np.uint8]:
    """Split packed 0xAARRGGBB samples into an RGB image.

    Args:
        frame: Packed frame of shape (H, W).

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.

    Raises:
        ValueError: If the frame is not two-dimensional.
    """
    if frame.ndim != 2:
        raise ValueError(f"Expected a (height, width) frame, got shape {frame.shape}")

    packed = frame.astype(np.uint32)
    rgb = np.empty(packed.shape + (3,), dtype=np.uint8)
    rgb[..., 0] = (packed >> 16) & 0xFF
    rgb[..., 1] = (packed >> 8) & 0xFF
    rgb[..., 2] = packed & 0xFF
    return rgb


def alpha_channel(frame: npt.NDArray[np.uint32]) -> npt.NDArray[np.uint8]:
    """Extract the alpha byte of every packed sample."""
    return ((frame.astype(np.uint32) >> 24) & 0xFF).astype(np.uint8)


def save_png(frame: npt.NDArray[np.uint32], filepath: str) -> None:
    """Save a packed frame as an 8-bit RGB PNG file.

    Args:
        frame: Packed frame of shape (H, W), as returned by render().
        filepath: Output file path (should end in .png).
    """
    image_uint8 = unpack_argb(frame)
    pil_image = PILImage.fromarray(image_uint8)
    pil_image.save(filepath)
    logger.info("Saved %dx%d image to %s", frame.shape[1], frame.shape[0], filepath)


def compute_rmse(
    image_a: npt.NDArray[np.number],
    image_b: npt.NDArray[np.number],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(
            f"Image shapes must match: {image_a.shape} vs {image_b.shape}"
        )

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))

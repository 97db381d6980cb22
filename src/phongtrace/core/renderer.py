"""Frame renderer: the public entry point for producing images.

This module wraps the integrator's frame kernel with:
- Scene and camera upload before each frame
- Worker-count selection for the parallel row loop
- Timing and throughput logging
- A packed uint32 result owned by the caller

The output depends only on the scene, camera and image size. The number of
workers changes how rows are scheduled, never the pixel values.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from phongtrace.core.renderer import Renderer
    >>> from phongtrace.scene.presets import create_preset_scene
    >>>
    >>> scene, camera = create_preset_scene("classic")
    >>> renderer = Renderer(640, 480, workers=8)
    >>> frame = renderer.render(scene, camera)
    >>> frame.shape
    (480, 640)
"""

import logging
import os
import time

import numpy as np
import numpy.typing as npt

from phongtrace.camera.pinhole import PinholeCamera, setup_camera
from phongtrace.core.integrator import (
    get_frame_numpy,
    get_rows_completed,
    render_frame,
    setup_render_target,
)
from phongtrace.scene.manager import Scene

logger = logging.getLogger(__name__)


def default_workers() -> int:
    """Worker count used when none is given: one per available CPU."""
    return os.cpu_count() or 1


class Renderer:
    """Renders scenes into packed 0xAARRGGBB frames of a fixed size.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        workers: CPU thread count for the row loop.
        last_render_seconds: Wall time of the most recent frame.
    """

    def __init__(self, width: int, height: int, workers: int | None = None) -> None:
        """Initialize the renderer.

        Args:
            width: Image width in pixels (max 2048).
            height: Image height in pixels (max 2048).
            workers: Worker count hint. Defaults to default_workers().

        Raises:
            SceneConfigError: If a dimension is not positive.
            ValueError: If dimensions exceed maximum supported size or
                workers is not positive.
        """
        if workers is None:
            workers = default_workers()
        if workers < 1:
            raise ValueError(f"workers must be positive, got {workers}")

        self._width = width
        self._height = height
        self.workers = workers
        self.last_render_seconds = 0.0
        setup_render_target(width, height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def aspect_ratio(self) -> float:
        return self._width / self._height

    @property
    def rows_completed(self) -> int:
        """Rows finished in the most recent frame."""
        return get_rows_completed()

    def resize(self, width: int, height: int) -> None:
        """Change the image size.

        Raises:
            SceneConfigError: If a dimension is not positive.
            ValueError: If dimensions exceed maximum supported size.
        """
        setup_render_target(width, height)
        self._width = width
        self._height = height

    def render(self, scene: Scene, camera: PinholeCamera) -> npt.NDArray[np.uint32]:
        """Render one frame.

        Args:
            scene: The scene to draw. It is uploaded before the frame starts.
            camera: The viewpoint.

        Returns:
            Array of shape (height, width), dtype uint32, row-major, each
            cell packed as 0xAARRGGBB with alpha 0xFF.
        """
        # Another Renderer may have resized the shared frame buffer
        setup_render_target(self._width, self._height)
        scene.upload()
        setup_camera(camera, self.aspect_ratio)

        logger.info(
            "Rendering %dx%d with %d workers (%d spheres, %d lights)",
            self._width,
            self._height,
            self.workers,
            scene.get_sphere_count(),
            scene.get_light_count(),
        )

        start = time.perf_counter()
        render_frame(self.workers)
        self.last_render_seconds = time.perf_counter() - start

        total_rays = self._width * self._height
        if self.last_render_seconds > 0.0:
            mrays = total_rays / self.last_render_seconds / 1e6
        else:
            mrays = float("inf")
        logger.info(
            "Render time: %.3f seconds (%d/%d rows), throughput: %.2f Mrays/sec",
            self.last_render_seconds,
            self.rows_completed,
            self._height,
            mrays,
        )

        return get_frame_numpy()

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return f"Renderer(width={self.width}, height={self.height}, workers={self.workers})"


def render(
    scene: Scene,
    camera: PinholeCamera,
    width: int,
    height: int,
    workers: int | None = None,
) -> npt.NDArray[np.uint32]:
    """Render a scene to a packed pixel buffer.

    Args:
        scene: The scene to draw.
        camera: The viewpoint.
        width: Image width in pixels.
        height: Image height in pixels.
        workers: Worker count hint. Defaults to one per available CPU.

    Returns:
        Array of shape (height, width), dtype uint32, each cell packed as
        0xAARRGGBB.

    Raises:
        SceneConfigError: If a dimension is not positive.
        ValueError: If dimensions exceed maximum supported size.
    """
    return Renderer(width, height, workers=workers).render(scene, camera)

"""Pinhole camera model for perspective projection ray generation.

This module implements a pinhole camera that generates primary rays for rendering.
The camera supports:
- Look-at positioning (position, target, up)
- Vertical field of view in degrees
- Arbitrary aspect ratios (supplied per render from the image size)

The camera builds an orthonormal basis (u, v, w) from the view parameters:
- w: points from target toward position (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

Image coordinates (s, t) are normalized to [0, 1]: s = 0 is the left
edge, t = 0 the bottom edge and t = 1 the top edge. Pixel rows count
from the top, so row indices are inverted when mapped to t.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from phongtrace.camera.pinhole import PinholeCamera, setup_camera, get_ray
    >>>
    >>> camera = PinholeCamera(position=(0.0, 1.0, 5.0), target=(0.0, 0.0, 0.0))
    >>> setup_camera(camera, aspect_ratio=4.0 / 3.0)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(0.5, 0.5)  # Ray through image center
"""

import math
from dataclasses import dataclass

import numpy as np
import taichi as ti

from phongtrace.core.ray import Ray, make_ray
from phongtrace.errors import SceneConfigError

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(frozen=True)
class PinholeCamera:
    """Configuration for a pinhole (perspective) camera.

    Attributes:
        position: Camera position in world space (x, y, z).
        target: Point the camera is looking at in world space (x, y, z).
        up: Up direction vector for camera orientation (typically (0, 1, 0)).
        vfov: Vertical field of view in degrees, in (0, 180).

    Raises:
        SceneConfigError: If vfov is outside (0, 180).
    """

    position: tuple[float, float, float]
    target: tuple[float, float, float]
    up: tuple[float, float, float] = (0.0, 1.0, 0.0)
    vfov: float = 60.0

    def __post_init__(self) -> None:
        if not 0.0 < self.vfov < 180.0:
            raise SceneConfigError(f"Vertical field of view = {self.vfov} must be in (0, 180).")

    def to_dict(self) -> dict:
        return {
            "position": list(self.position),
            "target": list(self.target),
            "up": list(self.up),
            "vfov": self.vfov,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PinholeCamera":
        position = data.get("position", [0.0, 0.0, 0.0])
        target = data.get("target", [0.0, 0.0, -1.0])
        up = data.get("up", [0.0, 1.0, 0.0])
        return cls(
            position=(float(position[0]), float(position[1]), float(position[2])),
            target=(float(target[0]), float(target[1]), float(target[2])),
            up=(float(up[0]), float(up[1]), float(up[2])),
            vfov=float(data.get("vfov", 60.0)),
        )


# =============================================================================
# Taichi Fields for Camera State (GPU-accessible)
# =============================================================================

# Camera origin (position)
_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())

# Orthonormal basis vectors
_camera_u = ti.Vector.field(3, dtype=ti.f32, shape=())  # Right
_camera_v = ti.Vector.field(3, dtype=ti.f32, shape=())  # Up
_camera_w = ti.Vector.field(3, dtype=ti.f32, shape=())  # Backward (opposite view)

# Viewport vectors for ray computation
_viewport_horizontal = ti.Vector.field(3, dtype=ti.f32, shape=())  # Full width
_viewport_vertical = ti.Vector.field(3, dtype=ti.f32, shape=())  # Full height
_lower_left_corner = ti.Vector.field(3, dtype=ti.f32, shape=())  # Lower-left of viewport


def _normalize(v: np.ndarray) -> np.ndarray:
    # Degenerate input stays zero, matching core.ray.normalize
    norm = np.linalg.norm(v)
    if norm > 0.0:
        return v / norm
    return np.zeros_like(v)


# =============================================================================
# Camera Setup (Python-side, called once per camera configuration)
# =============================================================================


def setup_camera(camera: PinholeCamera, aspect_ratio: float) -> None:
    """Initialize camera state from configuration.

    Computes the camera's orthonormal basis (u, v, w) and viewport geometry
    from the provided camera parameters. This must be called before rendering.

    The viewport is a virtual image plane at unit distance from the camera.
    Ray directions are computed by interpolating across this viewport.

    Args:
        camera: Camera configuration with position, orientation, and FOV.
        aspect_ratio: Image width divided by image height.

    Note:
        This function writes to Taichi fields and should be called from
        Python (not from within a Taichi kernel). A camera whose up vector is
        parallel to the view direction gets a zero basis vector rather than
        an error.
    """
    theta = math.radians(camera.vfov)
    h = math.tan(theta / 2.0)

    # Viewport dimensions at unit distance
    viewport_height = 2.0 * h
    viewport_width = aspect_ratio * viewport_height

    position = np.array(camera.position, dtype=np.float64)
    target = np.array(camera.target, dtype=np.float64)
    up = np.array(camera.up, dtype=np.float64)

    w = _normalize(position - target)
    u = _normalize(np.cross(up, w))
    v = np.cross(w, u)

    _camera_origin[None] = position.tolist()
    _camera_u[None] = u.tolist()
    _camera_v[None] = v.tolist()
    _camera_w[None] = w.tolist()

    horizontal = viewport_width * u
    vertical = viewport_height * v

    # Origin - w (move forward) - horizontal/2 (left) - vertical/2 (down)
    lower_left = position - w - horizontal / 2.0 - vertical / 2.0

    _viewport_horizontal[None] = horizontal.tolist()
    _viewport_vertical[None] = vertical.tolist()
    _lower_left_corner[None] = lower_left.tolist()


# =============================================================================
# Ray Generation (Taichi-compatible)
# =============================================================================


@ti.func
def get_ray(s: ti.f32, t: ti.f32) -> Ray:
    """Generate a ray through normalized image coordinates (s, t).

    Args:
        s: Horizontal coordinate in [0, 1] (left to right).
        t: Vertical coordinate in [0, 1] (bottom to top).

    Returns:
        A Ray with origin at the camera position and a unit direction toward
        the specified point on the image plane.
    """
    point_on_viewport = (
        _lower_left_corner[None] + s * _viewport_horizontal[None] + t * _viewport_vertical[None]
    )
    origin = _camera_origin[None]
    return make_ray(origin, point_on_viewport - origin)


@ti.func
def get_pixel_ray(col: ti.i32, row: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate the primary ray for a pixel.

    Pixel (0, 0) is the top-left corner. The first and last columns/rows map
    exactly onto the viewport edges (s = col / (width - 1)).

    Args:
        col: Pixel column (0 = left).
        row: Pixel row (0 = top).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        The primary ray for the pixel.
    """
    s = ti.cast(col, ti.f32) / ti.cast(ti.max(width - 1, 1), ti.f32)
    t = ti.cast(height - 1 - row, ti.f32) / ti.cast(ti.max(height - 1, 1), ti.f32)
    return get_ray(s, t)


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with origin, u, v, w, horizontal, vertical, lower_left.
    """
    fields = {
        "origin": _camera_origin,
        "u": _camera_u,
        "v": _camera_v,
        "w": _camera_w,
        "horizontal": _viewport_horizontal,
        "vertical": _viewport_vertical,
        "lower_left": _lower_left_corner,
    }
    info = {}
    for name, field in fields.items():
        vec = field[None]
        info[name] = (float(vec[0]), float(vec[1]), float(vec[2]))
    return info

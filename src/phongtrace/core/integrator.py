"""Whitted-style integrator: Phong shading, hard shadows and mirror bounces.

This module implements the shading recursion and the frame kernel.

For a ray at reflection depth d:

    trace(ray, d) = background                          if d > MAX_DEPTH
                  = background                          if the ray misses
                  = local                               if k == 0 or d == MAX_DEPTH
                  = local * (1 - k) + trace(r, d+1) * k otherwise

where local is the ambient term plus diffuse and specular contributions of
every light not blocked by a shadow ray, k is the reflectivity of the hit
surface and r the mirror-reflected ray. The convex blend keeps each channel
within the range of its inputs; an additive combination would not.

Taichi functions cannot recurse, so trace() unrolls the recursion into a
bounded loop that carries the product of reflectivities seen so far. The
loop runs at most MAX_DEPTH + 1 times, so a fully mirrored enclosure
terminates like any other scene.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from phongtrace.core.integrator import render_frame, setup_render_target
    >>> from phongtrace.scene.presets import create_preset_scene
    >>> from phongtrace.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_preset_scene("candy_land")
    >>> scene.upload()
    >>> setup_camera(camera, aspect_ratio=4.0 / 3.0)
    >>> setup_render_target(160, 120)
    >>> render_frame(workers=4)
"""

import taichi as ti
import taichi.math as tm

from phongtrace.camera.pinhole import get_pixel_ray
from phongtrace.core.ray import clamp01, make_ray, normalize, reflect
from phongtrace.errors import SceneConfigError
from phongtrace.geometry.sphere import EPSILON, T_MAX
from phongtrace.materials.phong import eval_ambient, eval_phong_direct, get_reflectivity
from phongtrace.scene.intersection import intersect_scene, intersect_scene_any
from phongtrace.scene.lights import (
    background_color,
    light_colors,
    light_intensities,
    light_positions,
    num_lights,
)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Number of mirror bounces after the primary hit
MAX_DEPTH = 3

# 8-bit quantization factor: channel = uint8(PIXEL_SCALE * clamp(c, 0, 1))
PIXEL_SCALE = 255.99

# =============================================================================
# Render Target (Packed Pixel Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Row-major packed 0xAARRGGBB samples, indexed [row, col]
_frame = ti.field(dtype=ti.u32, shape=(MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH))

# Rows finished in the current frame; only ever updated atomically
_rows_completed = ti.field(dtype=ti.i32, shape=())

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the frame buffer for a width x height image.

    Args:
        width: Image width in pixels (1..MAX_IMAGE_WIDTH).
        height: Image height in pixels (1..MAX_IMAGE_HEIGHT).

    Raises:
        SceneConfigError: If a dimension is not positive.
        ValueError: If dimensions exceed maximum supported size.
    """
    if width <= 0 or height <= 0:
        raise SceneConfigError(f"Image dimensions ({width}x{height}) must be positive")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1
    clear_render_target()


def clear_render_target() -> None:
    """Clear the frame buffer and the progress counter."""
    _frame.fill(0)
    _rows_completed[None] = 0


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def get_rows_completed() -> int:
    """Get the number of rows finished in the most recent frame."""
    return int(_rows_completed[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


def get_frame_numpy():
    """Get the packed frame as a (height, width) uint32 NumPy array.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    width, height = get_image_dimensions()
    return _frame.to_numpy()[:height, :width].copy()


# =============================================================================
# Shading
# =============================================================================


@ti.func
def shade_local(point: vec3, normal: vec3, view_dir: vec3, material_id: ti.i32) -> vec3:
    """Ambient plus the direct contribution of every unshadowed light.

    Shadow rays start at the hit point; the EPSILON lower bound keeps them
    from hitting the surface they leave.
    """
    color = eval_ambient(material_id)

    for li in range(num_lights[None]):
        to_light = light_positions[li] - point
        light_distance = tm.length(to_light)
        light_dir = normalize(to_light)

        if intersect_scene_any(point, light_dir, EPSILON, light_distance) == 0:
            color += eval_phong_direct(
                material_id,
                normal,
                light_dir,
                view_dir,
                light_colors[li],
                light_intensities[li],
            )

    return color


@ti.func
def trace_path(ray_origin: vec3, ray_direction: vec3, depth: ti.i32):
    """Trace a ray through the scene, following mirror reflections.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        depth: Reflection depth of this ray (0 for primary rays).

    Returns:
        Tuple of (color, bounces): the unclamped color and the number of
        reflection rays that were traced after the first one.
    """
    background = background_color[None]
    origin = ray_origin
    direction = ray_direction
    d = depth

    color = vec3(0.0, 0.0, 0.0)
    # Product of reflectivities along the path; weight of the current ray
    weight = 1.0
    bounces = 0
    active = 1

    for _ in range(MAX_DEPTH + 1):
        if active == 1:
            if d > MAX_DEPTH:
                color += weight * background
                active = 0
            else:
                rec = intersect_scene(origin, direction, EPSILON, T_MAX)
                if rec.hit == 0:
                    color += weight * background
                    active = 0
                else:
                    view_dir = -direction
                    local = shade_local(rec.point, rec.normal, view_dir, rec.material_id)
                    k = get_reflectivity(rec.material_id)

                    if k > 0.0 and d < MAX_DEPTH:
                        color += weight * (1.0 - k) * local
                        weight *= k
                        reflected = make_ray(rec.point, reflect(-view_dir, rec.normal))
                        origin = reflected.origin
                        direction = reflected.direction
                        d += 1
                        bounces += 1
                    else:
                        color += weight * local
                        active = 0

    return color, bounces


@ti.func
def trace(ray_origin: vec3, ray_direction: vec3, depth: ti.i32) -> vec3:
    """Color seen along a ray (unclamped). See trace_path()."""
    color, _ = trace_path(ray_origin, ray_direction, depth)
    return color


@ti.func
def pack_argb(color: vec3) -> ti.u32:
    """Quantize a clamped color into an opaque 0xAARRGGBB sample."""
    c = clamp01(color)
    r = ti.cast(PIXEL_SCALE * c.x, ti.u32)
    g = ti.cast(PIXEL_SCALE * c.y, ti.u32)
    b = ti.cast(PIXEL_SCALE * c.z, ti.u32)
    alpha = ti.cast(0xFF, ti.u32)
    return (alpha << 24) | (r << 16) | (g << 8) | b


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_rows(width: ti.i32, height: ti.i32, workers: ti.template()):
    """Render one frame, one parallel task per image row.

    Each task writes only its own row of _frame, so tasks never contend;
    the worker count changes scheduling, not results.
    """
    ti.loop_config(parallelize=workers)
    for row in range(height):
        for col in range(width):
            ray = get_pixel_ray(col, row, width, height)
            _frame[row, col] = pack_argb(trace(ray.origin, ray.direction, 0))
        ti.atomic_add(_rows_completed[None], 1)


@ti.kernel
def _trace_single(origin: vec3, direction: vec3, depth: ti.i32) -> vec3:
    ray = make_ray(origin, direction)
    return trace(ray.origin, ray.direction, depth)


@ti.kernel
def _count_bounces(origin: vec3, direction: vec3, depth: ti.i32) -> ti.i32:
    ray = make_ray(origin, direction)
    _, bounces = trace_path(ray.origin, ray.direction, depth)
    return bounces


# =============================================================================
# Public Rendering API
# =============================================================================


def render_frame(workers: int) -> None:
    """Render the current scene into the frame buffer.

    The scene, lights, background and camera must already be uploaded.

    Args:
        workers: CPU thread count for the row loop. Ignored by GPU backends.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If workers is not positive.
    """
    _check_render_target_initialized()
    if workers < 1:
        raise ValueError(f"workers must be positive, got {workers}")

    width, height = get_image_dimensions()
    _rows_completed[None] = 0
    _render_rows(width, height, int(workers))
    ti.sync()


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    depth: int = 0,
) -> tuple[float, float, float]:
    """Trace a single ray from Python and return its unclamped color.

    The direction is normalized before tracing.
    """
    color = _trace_single(vec3(*origin), vec3(*direction), depth)
    return (float(color[0]), float(color[1]), float(color[2]))


def count_bounces(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    depth: int = 0,
) -> int:
    """Number of reflection rays a trace spawns; never exceeds MAX_DEPTH."""
    return int(_count_bounces(vec3(*origin), vec3(*direction), depth))

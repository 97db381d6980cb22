"""Core rendering module.

Components:
    ray: Ray data structure and vector utilities
    integrator: Phong shading with shadows and mirror reflections, frame kernel
    renderer: Renderer class and the render() entry point

All compute-intensive operations use Taichi kernels.
"""

from .ray import (
    Ray,
    clamp01,
    cross,
    dot,
    length,
    length_squared,
    make_ray,
    normalize,
    ray_at,
    reflect,
    vec3,
)

# Note: integrator and renderer are NOT imported here to avoid circular imports.
# Import directly from phongtrace.core.integrator or phongtrace.core.renderer when needed.
#
# For rendering, use:
#   from phongtrace.core.renderer import render

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "reflect",
    "clamp01",
]

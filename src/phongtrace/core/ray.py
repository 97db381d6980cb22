"""Ray data structure and vector utilities for the Phong ray tracer.

This module provides the Ray dataclass and the small set of vector
operations the shading pipeline needs. Everything decorated with
``@ti.func`` is callable from inside Taichi kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -2.0)
    >>> ray = make_ray(origin, direction)  # direction becomes (0, 0, -1)
    >>> point = ray_at(ray, 5.0)
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Ray:
    """A ray with an origin point and a unit direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction of the ray (vec3). Always unit length when
            the ray is built with make_ray(); the intersection math relies
            on it.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction, normalizing the direction.

    Args:
        origin: The starting point of the ray.
        direction: Any non-zero direction vector.

    Returns:
        A new Ray whose direction has unit length. A zero direction stays
        zero (see normalize()).
    """
    return Ray(origin=origin, direction=normalize(direction))


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return tm.length(v)


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared length of a vector (no square root)."""
    return tm.dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    Unlike tm.normalize(), a zero-length input is absorbed instead of
    producing NaNs.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v, or the zero vector if v
        has zero length.
    """
    result = vec3(0.0, 0.0, 0.0)
    len_v = tm.length(v)
    if len_v > 0.0:
        result = v / len_v
    return result


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product of two vectors."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product of two vectors."""
    return tm.cross(a, b)


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Computes incident - 2 * (incident . normal) * normal. The normal must
    be unit length for the result to preserve the length of incident.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def clamp01(color: vec3) -> vec3:
    """Clamp each channel of a color to [0, 1]."""
    return tm.clamp(color, 0.0, 1.0)


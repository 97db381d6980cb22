"""Sphere primitive with analytic ray-sphere intersection.

The intersection solves |o + t*d - center|^2 = radius^2, i.e.

    a*t^2 + b*t + c = 0
    a = d . d
    b = 2 * (o - center) . d
    c = |o - center|^2 - radius^2

Two algebraic forms of the solution are provided as a compile-time
strategy (IntersectForm):

    GENERAL: discriminant b^2 - 4ac, roots (-b -/+ sqrt(disc)) / 2a
    HALF_B:  h = (o - center) . d, discriminant h^2 - c,
             roots -h -/+ sqrt(disc)   (valid because |d| == 1)

HALF_B drops the factor of 4 and the division by a, and is the form the
renderer uses. Both forms agree on hit/miss and on t for unit directions;
geometry.reference holds the float64 version of the same contract.

Root selection: roots at or below t_min (EPSILON for scene queries) are
discarded to suppress self-intersection at the casting surface. The nearer
root is preferred; if it is rejected the farther root is tried. A ray that
starts inside the sphere therefore reports the exit point.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from phongtrace.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, 0), radius=1.0)
    >>> # Use hit_sphere within a Taichi kernel
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

from phongtrace.core.ray import normalize

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Minimum accepted ray parameter; rejects hits on the surface a ray leaves from
EPSILON = 0.001

# Upper bound for unbounded queries
T_MAX = 1e30


class IntersectForm(IntEnum):
    """Algebraic form used to solve the ray-sphere quadratic."""

    GENERAL = 0
    HALF_B = 1


# Form used by scene queries
INTERSECT_FORM = IntersectForm.HALF_B


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """Record of a ray-sphere intersection.

    Attributes:
        hit: 1 if the ray intersected the sphere, 0 on a miss.
        t: The ray parameter of the accepted root. Only valid if hit == 1.
        point: The intersection point. Only valid if hit == 1.
        normal: The outward unit normal at the intersection point.
            Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3


@ti.func
def sphere_roots(
    ray_origin: vec3,
    ray_direction: vec3,
    center: vec3,
    radius: ti.f32,
    form: ti.template(),
):
    """Solve the ray-sphere quadratic with the requested algebraic form.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        center: The sphere center.
        radius: The sphere radius.
        form: IntersectForm value, resolved at compile time.

    Returns:
        Tuple of (discriminant, t_near, t_far). The roots are only
        meaningful when discriminant >= 0; otherwise both are zero.
    """
    oc = ray_origin - center
    discriminant = 0.0
    t_near = 0.0
    t_far = 0.0

    if ti.static(form == IntersectForm.GENERAL):
        a = tm.dot(ray_direction, ray_direction)
        b = 2.0 * tm.dot(oc, ray_direction)
        c = tm.dot(oc, oc) - radius * radius
        discriminant = b * b - 4.0 * a * c
        if discriminant >= 0.0:
            sqrt_d = ti.sqrt(discriminant)
            t_near = (-b - sqrt_d) / (2.0 * a)
            t_far = (-b + sqrt_d) / (2.0 * a)
    else:
        # a == 1 for unit directions
        b_half = tm.dot(oc, ray_direction)
        c = tm.dot(oc, oc) - radius * radius
        discriminant = b_half * b_half - c
        if discriminant >= 0.0:
            sqrt_d = ti.sqrt(discriminant)
            t_near = -b_half - sqrt_d
            t_far = -b_half + sqrt_d

    return discriminant, t_near, t_far


@ti.func
def select_root(discriminant: ti.f32, t_near: ti.f32, t_far: ti.f32, t_min: ti.f32, t_max: ti.f32):
    """Pick the accepted root inside the open interval (t_min, t_max).

    Returns:
        Tuple of (hit, t) where hit is 1 if a root was accepted.
    """
    did_hit = 0
    t = 0.0
    if discriminant >= 0.0:
        if t_min < t_near < t_max:
            did_hit = 1
            t = t_near
        elif t_min < t_far < t_max:
            did_hit = 1
            t = t_far
    return did_hit, t


@ti.func
def intersect_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    center: vec3,
    radius: ti.f32,
    t_min: ti.f32,
    t_max: ti.f32,
    form: ti.template(),
):
    """Intersect a ray with a sphere given as raw center/radius values.

    Returns:
        Tuple of (hit, t).
    """
    discriminant, t_near, t_far = sphere_roots(ray_origin, ray_direction, center, radius, form)
    return select_root(discriminant, t_near, t_far, t_min, t_max)


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: Sphere,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-sphere intersection and build a full hit record.

    Uses INTERSECT_FORM; the ray direction must be unit length.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        sphere: The sphere to test intersection against.
        t_min: Roots at or below this value are rejected.
        t_max: Roots at or above this value are rejected.

    Returns:
        A HitRecord; check the hit field to determine if intersection occurred.
    """
    did_hit, t = intersect_sphere(
        ray_origin, ray_direction, sphere.center, sphere.radius, t_min, t_max, INTERSECT_FORM
    )

    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)
    if did_hit == 1:
        hit_point = ray_origin + t * ray_direction
        hit_normal = normalize(hit_point - sphere.center)

    return HitRecord(hit=did_hit, t=t, point=hit_point, normal=hit_normal)


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from center and radius inside a Taichi kernel."""
    return Sphere(center=center, radius=radius)

"""Geometry module for sphere primitives.

Components:
    sphere: Sphere primitive with ray-sphere intersection (Taichi)
    reference: Float64 NumPy reference intersection, Q16.16 fixed-point
        helpers and cross-validation of other implementations

Two algebraic forms of the ray-sphere quadratic are available
(IntersectForm.GENERAL and IntersectForm.HALF_B). Both select the nearest
root above EPSILON and agree on hit/miss and t for unit directions.
"""

from .reference import (
    DEFAULT_CASES,
    CaseResult,
    IntersectionCase,
    cross_validate,
    from_fixed,
    sphere_intersection,
    to_fixed,
)
from .sphere import (
    EPSILON,
    INTERSECT_FORM,
    HitRecord,
    IntersectForm,
    Sphere,
    hit_sphere,
    intersect_sphere,
    make_sphere,
)

__all__ = [
    "Sphere",
    "HitRecord",
    "IntersectForm",
    "INTERSECT_FORM",
    "EPSILON",
    "hit_sphere",
    "intersect_sphere",
    "make_sphere",
    "sphere_intersection",
    "to_fixed",
    "from_fixed",
    "IntersectionCase",
    "CaseResult",
    "DEFAULT_CASES",
    "cross_validate",
]

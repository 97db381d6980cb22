"""Float64 reference of the ray-sphere intersection contract.

This module restates the kernel-side intersection (geometry.sphere) in
vectorized NumPy double precision. It is the stable contract that external
implementations of the formula (for example a fixed-point hardware model
driven by a simulation harness) are cross-validated against:

    inputs:  ray origin (3), ray direction (3), sphere center (3), radius
    outputs: hit (bool), t (float), discriminant (float)
    policy:  roots <= EPSILON rejected, nearer root preferred, exit point
             reported for origins inside the sphere
    agreement: hit flags equal, |t_candidate - t_reference| < tolerance

The fixed-point helpers follow the Q16.16 layout such models use
(16 integer bits, 16 fractional bits, two's complement int32).

Example:
    >>> import numpy as np
    >>> from phongtrace.geometry.reference import sphere_intersection
    >>> hit, t, disc = sphere_intersection(
    ...     np.array([0.0, 0.0, 5.0]), np.array([0.0, 0.0, -1.0]),
    ...     np.array([0.0, 0.0, 0.0]), 1.0,
    ... )
    >>> bool(hit), float(t)
    (True, 4.0)
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from phongtrace.geometry.sphere import EPSILON, IntersectForm

FloatArray = npt.NDArray[np.float64]

# Q16.16 fixed-point layout
FRAC_BITS = 16
FIXED_SCALE = float(1 << FRAC_BITS)

# Agreement tolerance on t for fixed-point candidates
FIXED_POINT_TOLERANCE = 0.01


def sphere_intersection(
    origin: npt.ArrayLike,
    direction: npt.ArrayLike,
    center: npt.ArrayLike,
    radius: float | npt.ArrayLike,
    form: IntersectForm = IntersectForm.HALF_B,
    t_min: float = EPSILON,
) -> tuple[npt.NDArray[np.bool_], FloatArray, FloatArray]:
    """Intersect one or many rays with a sphere in float64.

    Inputs broadcast over leading dimensions: origin and direction have
    shape (..., 3), center (..., 3) or (3,), radius scalar or (...).
    Directions are expected to be unit length for the HALF_B form.

    Args:
        origin: Ray origins.
        direction: Ray directions.
        center: Sphere center(s).
        radius: Sphere radius (or radii).
        form: Algebraic form to evaluate.
        t_min: Roots at or below this value are rejected.

    Returns:
        Tuple of (hit, t, discriminant) arrays over the leading shape.
        t is 0 where hit is False.
    """
    o = np.asarray(origin, dtype=np.float64)
    d = np.asarray(direction, dtype=np.float64)
    c_pos = np.asarray(center, dtype=np.float64)
    r = np.asarray(radius, dtype=np.float64)

    oc = o - c_pos
    c = np.sum(oc * oc, axis=-1) - r * r

    if form == IntersectForm.GENERAL:
        a = np.sum(d * d, axis=-1)
        b = 2.0 * np.sum(oc * d, axis=-1)
        discriminant = b * b - 4.0 * a * c
        sqrt_d = np.sqrt(np.maximum(discriminant, 0.0))
        t_near = (-b - sqrt_d) / (2.0 * a)
        t_far = (-b + sqrt_d) / (2.0 * a)
    else:
        b_half = np.sum(oc * d, axis=-1)
        discriminant = b_half * b_half - c
        sqrt_d = np.sqrt(np.maximum(discriminant, 0.0))
        t_near = -b_half - sqrt_d
        t_far = -b_half + sqrt_d

    real = discriminant >= 0.0
    near_ok = real & (t_near > t_min)
    far_ok = real & ~near_ok & (t_far > t_min)
    hit = near_ok | far_ok
    t = np.where(near_ok, t_near, np.where(far_ok, t_far, 0.0))
    return hit, t, discriminant


# =============================================================================
# Fixed-point helpers
# =============================================================================


def to_fixed(value: npt.ArrayLike) -> npt.NDArray[np.int32]:
    """Convert real values to Q16.16 (truncating toward zero)."""
    scaled = np.asarray(value, dtype=np.float64) * FIXED_SCALE
    return np.trunc(scaled).astype(np.int32)


def from_fixed(value: npt.ArrayLike) -> FloatArray:
    """Convert Q16.16 integers back to float64."""
    return np.asarray(value, dtype=np.int64).astype(np.float64) / FIXED_SCALE


# =============================================================================
# Cross-validation
# =============================================================================


@dataclass(frozen=True)
class IntersectionCase:
    """A single ray-sphere query used for cross-validation."""

    origin: tuple[float, float, float]
    direction: tuple[float, float, float]
    center: tuple[float, float, float]
    radius: float


@dataclass(frozen=True)
class CaseResult:
    """Outcome of comparing a candidate against the reference for one case."""

    case: IntersectionCase
    reference_hit: bool
    reference_t: float
    candidate_hit: bool
    candidate_t: float
    passed: bool

    @property
    def error(self) -> float:
        if self.reference_hit and self.candidate_hit:
            return abs(self.candidate_t - self.reference_t)
        return 0.0


_INV_SQRT3 = 1.0 / np.sqrt(3.0)

# The accuracy cases exercised by the hardware testbench, directions normalized
DEFAULT_CASES: tuple[IntersectionCase, ...] = (
    IntersectionCase((0.0, 0.0, 5.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1.0),
    IntersectionCase((2.0, 0.0, 3.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1.0),
    IntersectionCase((0.0, 2.0, 5.0), (0.0, -1.0, 0.0), (0.0, 0.0, 0.0), 1.5),
    IntersectionCase(
        (-3.0, -3.0, 5.0),
        (float(_INV_SQRT3), float(_INV_SQRT3), float(-_INV_SQRT3)),
        (0.0, 0.0, 0.0),
        2.0,
    ),
)

CandidateFn = Callable[[IntersectionCase], tuple[bool, float]]


def cross_validate(
    candidate: CandidateFn,
    cases: Sequence[IntersectionCase] = DEFAULT_CASES,
    tolerance: float = FIXED_POINT_TOLERANCE,
) -> list[CaseResult]:
    """Compare a candidate intersection implementation with the reference.

    Case directions must be unit length. The candidate receives the case
    unchanged and is responsible for its own input conversion (e.g.
    to_fixed()).

    Args:
        candidate: Callable returning (hit, t) for a case.
        cases: Queries to run.
        tolerance: Maximum allowed |t| difference when both report a hit.

    Returns:
        One CaseResult per case; a case passes when hit flags agree and, for
        hits, the t values agree within tolerance.
    """
    results = []
    for case in cases:
        ref_hit, ref_t, _ = sphere_intersection(
            case.origin, case.direction, case.center, case.radius
        )
        cand_hit, cand_t = candidate(case)

        passed = bool(ref_hit) == bool(cand_hit)
        if passed and bool(ref_hit):
            passed = abs(float(cand_t) - float(ref_t)) < tolerance

        results.append(
            CaseResult(
                case=case,
                reference_hit=bool(ref_hit),
                reference_t=float(ref_t),
                candidate_hit=bool(cand_hit),
                candidate_t=float(cand_t),
                passed=passed,
            )
        )
    return results

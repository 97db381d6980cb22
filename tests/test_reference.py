"""Tests for the float64 intersection reference and cross-validation.

Tests cover:
- Known intersection cases
- GENERAL / HALF_B agreement over random unit-direction rays
- Q16.16 fixed-point conversion
- cross_validate with passing and biased candidates
- Agreement between the Taichi kernel and the reference
"""

import numpy as np
import pytest
import taichi as ti


class TestReferenceIntersection:
    """Tests for sphere_intersection."""

    @pytest.mark.parametrize(
        "origin,direction,radius,expected_hit,expected_t",
        [
            ((0.0, 0.0, 5.0), (0.0, 0.0, -1.0), 1.0, True, 4.0),
            ((5.0, 0.0, 0.0), (0.0, 0.0, -1.0), 1.0, False, 0.0),
            ((0.0, 1.0, 5.0), (0.0, 0.0, -1.0), 1.0, True, 5.0),
            ((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), 2.0, True, 2.0),
        ],
    )
    def test_known_cases(self, origin, direction, radius, expected_hit, expected_t):
        from phongtrace.geometry.reference import sphere_intersection
        from phongtrace.geometry.sphere import IntersectForm

        for form in IntersectForm:
            hit, t, _ = sphere_intersection(origin, direction, (0.0, 0.0, 0.0), radius, form)
            assert bool(hit) == expected_hit
            assert abs(float(t) - expected_t) < 1e-9

    def test_grazing_discriminant_is_zero(self):
        from phongtrace.geometry.reference import sphere_intersection

        _, _, disc = sphere_intersection((0.0, 1.0, 5.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1.0)
        assert abs(float(disc)) < 1e-12

    def test_forms_agree_on_random_rays(self):
        """Hit flags match and t differs by less than 1e-6 for unit directions."""
        from phongtrace.geometry.reference import sphere_intersection
        from phongtrace.geometry.sphere import IntersectForm

        rng = np.random.default_rng(1234)
        n = 5000
        origins = rng.uniform(-6.0, 6.0, size=(n, 3))
        directions = rng.normal(size=(n, 3))
        directions /= np.linalg.norm(directions, axis=1, keepdims=True)
        centers = rng.uniform(-2.0, 2.0, size=(n, 3))
        radii = rng.uniform(0.2, 3.0, size=n)

        hit_g, t_g, _ = sphere_intersection(origins, directions, centers, radii, IntersectForm.GENERAL)
        hit_h, t_h, _ = sphere_intersection(origins, directions, centers, radii, IntersectForm.HALF_B)

        np.testing.assert_array_equal(hit_g, hit_h)
        assert hit_g.any() and not hit_g.all()
        assert np.max(np.abs(t_g - t_h)) < 1e-6

    def test_batched_shapes(self):
        from phongtrace.geometry.reference import sphere_intersection

        origins = np.zeros((4, 2, 3))
        origins[..., 2] = 5.0
        directions = np.zeros((4, 2, 3))
        directions[..., 2] = -1.0
        hit, t, disc = sphere_intersection(origins, directions, (0.0, 0.0, 0.0), 1.0)
        assert hit.shape == (4, 2)
        assert t.shape == (4, 2)
        assert disc.shape == (4, 2)
        assert np.all(hit)
        np.testing.assert_allclose(t, 4.0)


class TestFixedPoint:
    """Tests for Q16.16 conversion helpers."""

    def test_round_trip_of_representable_values(self):
        from phongtrace.geometry.reference import from_fixed, to_fixed

        values = np.array([0.0, 1.0, -1.0, 0.5, 4.25, -3.75])
        np.testing.assert_array_equal(from_fixed(to_fixed(values)), values)

    def test_scale_and_dtype(self):
        from phongtrace.geometry.reference import FIXED_SCALE, to_fixed

        fixed = to_fixed([1.0, -2.0])
        assert fixed.dtype == np.int32
        assert fixed[0] == int(FIXED_SCALE)
        assert fixed[1] == -2 * int(FIXED_SCALE)

    def test_quantization_error_bounded(self):
        from phongtrace.geometry.reference import FIXED_SCALE, from_fixed, to_fixed

        values = np.linspace(-100.0, 100.0, 1001)
        error = np.abs(from_fixed(to_fixed(values)) - values)
        assert np.max(error) < 1.0 / FIXED_SCALE


class TestCrossValidate:
    """Tests for cross_validate."""

    def test_reference_passes_against_itself(self):
        from phongtrace.geometry.reference import DEFAULT_CASES, cross_validate, sphere_intersection

        def candidate(case):
            hit, t, _ = sphere_intersection(case.origin, case.direction, case.center, case.radius)
            return bool(hit), float(t)

        results = cross_validate(candidate)
        assert len(results) == len(DEFAULT_CASES)
        assert all(r.passed for r in results)
        assert all(r.error < 1e-12 for r in results)

    def test_fixed_point_candidate_passes(self):
        """A candidate computing through Q16.16 inputs stays within tolerance."""
        from phongtrace.geometry.reference import cross_validate, from_fixed, sphere_intersection, to_fixed

        def candidate(case):
            o = from_fixed(to_fixed(case.origin))
            d = from_fixed(to_fixed(case.direction))
            c = from_fixed(to_fixed(case.center))
            r = float(from_fixed(to_fixed(case.radius)))
            hit, t, _ = sphere_intersection(o, d, c, r)
            return bool(hit), float(from_fixed(to_fixed(t)))

        assert all(r.passed for r in cross_validate(candidate))

    def test_biased_candidate_is_flagged(self):
        from phongtrace.geometry.reference import cross_validate, sphere_intersection

        def candidate(case):
            hit, t, _ = sphere_intersection(case.origin, case.direction, case.center, case.radius)
            return bool(hit), float(t) + 0.05

        results = cross_validate(candidate)
        hits = [r for r in results if r.reference_hit]
        assert hits
        assert not any(r.passed for r in hits)
        assert all(abs(r.error - 0.05) < 1e-9 for r in hits)

    def test_wrong_hit_flag_is_flagged(self):
        from phongtrace.geometry.reference import cross_validate

        results = cross_validate(lambda case: (True, 1.0))
        misses = [r for r in results if not r.reference_hit]
        assert misses
        assert not any(r.passed for r in misses)

    def test_default_cases_expected_outcomes(self):
        """The regression rays: hit, offset miss, perpendicular miss, oblique hit."""
        from phongtrace.geometry.reference import DEFAULT_CASES, sphere_intersection

        expected_hits = [True, False, False, True]
        for case, expected in zip(DEFAULT_CASES, expected_hits):
            hit, _, _ = sphere_intersection(case.origin, case.direction, case.center, case.radius)
            assert bool(hit) == expected

    def test_kernel_agrees_with_reference(self):
        """The Taichi implementation passes cross-validation."""
        from phongtrace.geometry.reference import cross_validate
        from phongtrace.geometry.sphere import INTERSECT_FORM, intersect_sphere, vec3

        hit = ti.field(dtype=ti.i32, shape=())
        t_val = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel(o: vec3, d: vec3, c: vec3, r: ti.f32):
            did_hit, t = intersect_sphere(o, d, c, r, 0.001, 1e30, INTERSECT_FORM)
            hit[None] = did_hit
            t_val[None] = t

        def candidate(case):
            test_kernel(vec3(*case.origin), vec3(*case.direction), vec3(*case.center), case.radius)
            return hit[None] == 1, float(t_val[None])

        assert all(r.passed for r in cross_validate(candidate, tolerance=1e-4))

"""Tests for the Whitted-style integrator.

Tests cover:
- Background color for misses and for rays past the depth limit
- Convex blend of local shading and the reflected color
- Bounded recursion in a fully mirrored enclosure
- Hard shadows
- Packed 0xAARRGGBB output
- Render target validation
"""

import math

import numpy as np
import pytest


def _close(a, b, tol=1e-5):
    return all(abs(x - y) < tol for x, y in zip(a, b))


def _matte(color=(1.0, 1.0, 1.0), ambient=1.0, reflectivity=0.0, diffuse=0.0):
    from phongtrace.materials.phong import PhongMaterial

    return PhongMaterial(
        color=color, ambient=ambient, diffuse=diffuse, specular=0.0, reflectivity=reflectivity
    )


class TestBackground:
    """Tests for rays that leave the scene."""

    @pytest.mark.parametrize("depth", [0, 1, 2, 3, 4, 5])
    def test_miss_returns_background(self, depth):
        from phongtrace.core.integrator import trace_ray
        from phongtrace.scene.lights import set_background

        set_background((0.2, 0.4, 0.6))
        assert _close(trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), depth), (0.2, 0.4, 0.6))

    def test_depth_past_limit_returns_background(self):
        """Rays beyond MAX_DEPTH return the background even when they would hit."""
        from phongtrace.core.integrator import MAX_DEPTH, trace_ray
        from phongtrace.scene.manager import Scene

        scene = Scene(background=(0.3, 0.3, 0.3))
        scene.add_sphere((0.0, 0.0, -5.0), 1.0, _matte(color=(1.0, 0.0, 0.0)))
        scene.upload()

        assert _close(trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), MAX_DEPTH + 1), (0.3, 0.3, 0.3))
        assert _close(trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), MAX_DEPTH), (1.0, 0.0, 0.0))

    def test_negative_background_rejected(self):
        from phongtrace.errors import SceneConfigError
        from phongtrace.scene.lights import set_background

        with pytest.raises(SceneConfigError):
            set_background((0.0, -0.1, 0.0))

    def test_background_round_trip(self):
        from phongtrace.scene.lights import get_background, set_background

        set_background((0.5, 0.25, 0.125))
        assert _close(get_background(), (0.5, 0.25, 0.125))


class TestReflection:
    """Tests for the convex blend and bounded recursion."""

    def test_blend_stays_within_input_range(self):
        """local = 1, reflected = 1, k = 0.5 gives 1, not 1.5."""
        from phongtrace.core.integrator import trace_ray
        from phongtrace.scene.manager import Scene

        scene = Scene(background=(1.0, 1.0, 1.0))
        scene.add_sphere((0.0, 0.0, -5.0), 1.0, _matte(reflectivity=0.5))
        scene.upload()

        color = trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert _close(color, (1.0, 1.0, 1.0))
        assert all(c <= 1.0 + 1e-6 for c in color)

    def test_blend_weights(self):
        """color = local * (1 - k) + background * k when the reflected ray escapes."""
        from phongtrace.core.integrator import trace_ray
        from phongtrace.scene.manager import Scene

        scene = Scene(background=(0.2, 0.4, 0.6))
        scene.add_sphere((0.0, 0.0, -5.0), 1.0, _matte(color=(1.0, 0.5, 0.25), ambient=0.8, reflectivity=0.25))
        scene.upload()

        # local = color * 0.8 = (0.8, 0.4, 0.2)
        expected = (0.75 * 0.8 + 0.25 * 0.2, 0.75 * 0.4 + 0.25 * 0.4, 0.75 * 0.2 + 0.25 * 0.6)
        assert _close(trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0)), expected)

    def test_no_reflection_at_depth_limit(self):
        """At depth MAX_DEPTH the local color is returned unblended."""
        from phongtrace.core.integrator import MAX_DEPTH, trace_ray
        from phongtrace.scene.manager import Scene

        scene = Scene(background=(0.0, 0.0, 0.0))
        scene.add_sphere((0.0, 0.0, -5.0), 1.0, _matte(reflectivity=0.5))
        scene.upload()

        assert _close(trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), 0), (0.5, 0.5, 0.5))
        assert _close(trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), MAX_DEPTH), (1.0, 1.0, 1.0))

    def test_mirrored_enclosure_terminates(self):
        """Inside a perfect mirror the bounce count stops at MAX_DEPTH."""
        from phongtrace.core.integrator import MAX_DEPTH, count_bounces, trace_ray
        from phongtrace.scene.manager import Scene

        scene = Scene(background=(1.0, 1.0, 1.0))
        scene.add_sphere((0.0, 0.0, 0.0), 10.0, _matte(ambient=0.0, reflectivity=1.0))
        scene.upload()

        assert count_bounces((0.0, 0.0, 0.0), (0.0, 0.0, -1.0)) == MAX_DEPTH
        assert count_bounces((0.0, 0.0, 0.0), (0.3, 0.5, -0.8)) == MAX_DEPTH
        # Every ray ends on the black mirror, never reaching the background
        assert _close(trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0)), (0.0, 0.0, 0.0))

    def test_non_reflective_surface_spawns_no_bounce(self):
        from phongtrace.core.integrator import count_bounces
        from phongtrace.scene.manager import Scene

        scene = Scene()
        scene.add_sphere((0.0, 0.0, -5.0), 1.0, _matte(reflectivity=0.0))
        scene.upload()

        assert count_bounces((0.0, 0.0, 0.0), (0.0, 0.0, -1.0)) == 0

    def test_mirror_shows_sphere_behind_camera(self):
        """A perfect mirror reflects the sphere behind the viewer."""
        from phongtrace.core.integrator import trace_ray
        from phongtrace.scene.manager import Scene

        scene = Scene(background=(0.0, 0.0, 0.0))
        scene.add_sphere((0.0, 0.0, -5.0), 1.0, _matte(ambient=0.0, reflectivity=1.0))
        scene.add_sphere((0.0, 0.0, 5.0), 1.0, _matte(color=(0.0, 1.0, 0.0)))
        scene.upload()

        assert _close(trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0)), (0.0, 1.0, 0.0))


class TestDirectLighting:
    """Tests for Phong shading with shadow rays."""

    def _scene(self, with_occluder):
        from phongtrace.materials.phong import PhongMaterial
        from phongtrace.scene.manager import Scene

        scene = Scene(background=(0.0, 0.0, 0.0))
        scene.add_sphere(
            (0.0, 0.0, -5.0),
            1.0,
            PhongMaterial(ambient=0.1, diffuse=1.0, specular=0.0, reflectivity=0.0),
        )
        if with_occluder:
            # On the segment from the hit point (0, 0, -4) to the light
            scene.add_sphere((0.0, 2.0, -2.0), 0.5, _matte(reflectivity=0.0))
        scene.add_light((0.0, 4.0, 0.0))
        scene.upload()
        return scene

    def test_unshadowed_diffuse(self):
        from phongtrace.core.integrator import trace_ray

        self._scene(with_occluder=False)
        expected = 0.1 + math.cos(math.radians(45.0))
        assert _close(trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0)), (expected,) * 3)

    def test_occluder_blocks_light(self):
        from phongtrace.core.integrator import trace_ray

        self._scene(with_occluder=True)
        assert _close(trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0)), (0.1, 0.1, 0.1))

    def test_lights_are_additive(self):
        from phongtrace.core.integrator import trace_ray

        scene = self._scene(with_occluder=False)
        single = trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        scene.add_light((0.0, 0.0, 0.0), intensity=0.5)
        scene.upload()
        double = trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert _close(double, tuple(c + 0.5 for c in single))

    def test_direction_is_normalized(self):
        from phongtrace.core.integrator import trace_ray

        self._scene(with_occluder=False)
        assert _close(
            trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -7.0)),
            trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0)),
        )


class TestFrameOutput:
    """Tests for render_frame and the packed frame buffer."""

    def _render_background(self, background, width=4, height=3):
        from phongtrace.camera.pinhole import PinholeCamera, setup_camera
        from phongtrace.core.integrator import get_frame_numpy, render_frame, setup_render_target
        from phongtrace.scene.lights import set_background

        set_background(background)
        setup_camera(PinholeCamera(position=(0.0, 0.0, 0.0), target=(0.0, 0.0, -1.0)), width / height)
        setup_render_target(width, height)
        render_frame(workers=2)
        return get_frame_numpy()

    def test_packing_truncates_scaled_channels(self):
        frame = self._render_background((0.5, 0.25, 1.0))
        assert frame.shape == (3, 4)
        assert frame.dtype == np.uint32
        # r = int(255.99 * 0.5) = 127, g = int(255.99 * 0.25) = 63
        assert np.all(frame == np.uint32(0xFF7F3FFF))

    def test_channels_clamped_before_packing(self):
        frame = self._render_background((2.0, 0.0, 1.5))
        assert np.all(frame == np.uint32(0xFFFF00FF))

    def test_alpha_is_opaque(self):
        frame = self._render_background((0.0, 0.0, 0.0))
        assert np.all((frame >> 24) == 0xFF)

    def test_rows_completed(self):
        from phongtrace.core.integrator import get_rows_completed

        self._render_background((0.0, 0.0, 0.0), width=5, height=7)
        assert get_rows_completed() == 7

    def test_mirrored_enclosure_renders(self):
        from phongtrace.camera.pinhole import PinholeCamera, setup_camera
        from phongtrace.core.integrator import get_rows_completed, render_frame, setup_render_target
        from phongtrace.scene.manager import Scene

        scene = Scene(background=(1.0, 1.0, 1.0))
        scene.add_sphere((0.0, 0.0, 0.0), 10.0, _matte(ambient=0.0, reflectivity=1.0))
        scene.add_light((0.0, 5.0, 0.0))
        scene.upload()
        setup_camera(PinholeCamera(position=(0.0, 0.0, 0.0), target=(0.0, 0.0, -1.0)), 8.0 / 6.0)
        setup_render_target(8, 6)
        render_frame(workers=2)
        assert get_rows_completed() == 6


class TestRenderTarget:
    """Tests for render target validation."""

    @pytest.mark.parametrize("size", [(0, 10), (10, 0), (-1, 5)])
    def test_non_positive_size_rejected(self, size):
        from phongtrace.core.integrator import setup_render_target
        from phongtrace.errors import SceneConfigError

        with pytest.raises(SceneConfigError):
            setup_render_target(*size)

    def test_oversize_rejected(self):
        from phongtrace.core.integrator import MAX_IMAGE_WIDTH, setup_render_target

        with pytest.raises(ValueError):
            setup_render_target(MAX_IMAGE_WIDTH + 1, 10)

    def test_dimensions_stored(self):
        from phongtrace.core.integrator import get_image_dimensions, setup_render_target

        setup_render_target(32, 16)
        assert get_image_dimensions() == (32, 16)

    def test_uninitialized_target_raises(self):
        from phongtrace.core import integrator

        integrator._render_target_initialized[None] = 0
        with pytest.raises(RuntimeError):
            integrator.get_frame_numpy()
        with pytest.raises(RuntimeError):
            integrator.render_frame(workers=1)

    def test_workers_must_be_positive(self):
        from phongtrace.core.integrator import render_frame, setup_render_target

        setup_render_target(2, 2)
        with pytest.raises(ValueError):
            render_frame(workers=0)

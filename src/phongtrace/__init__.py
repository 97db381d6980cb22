"""Taichi-based Whitted-style ray tracer for spheres with Phong shading.

This package renders scenes of spheres lit by point lights into packed
0xAARRGGBB pixel buffers, with support for:
- Phong illumination (ambient, diffuse, specular)
- Hard shadows from any-hit shadow rays
- Bounded mirror reflections blended convexly with the local color
- Row-parallel rendering with a configurable worker count

Subpackages:
    core: Vector/ray utilities, the shading integrator and the renderer
    geometry: Sphere intersection and the float64 reference contract
    materials: Phong material model
    scene: Sphere and light storage, scene construction and presets
    camera: Pinhole camera with ray generation
    preview: Frame unpacking and PNG export
"""

__version__ = "0.1.0"

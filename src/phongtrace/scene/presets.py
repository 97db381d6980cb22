"""Named scene presets.

Each preset is declarative data: spheres with their materials, point lights
and a camera, returned as a SceneConfig. All presets share the same
viewpoint, looking at the origin from (0, 1, 5), and most of them stand
their spheres on a large "floor" sphere of radius 100 centered at
(0, -101, 0).

Available presets:
- classic: red, green and blue spheres with a gold one on a silver floor
- candy_land: playful, saturated colors (the default)
- mirror_gallery: highly reflective spheres in a circle
- neon_dreams: vibrant glossy colors under colored lights
- planetary_system: a "sun" with orbiting "planets"
- glass_orbs: glossy, glass-like spheres on a marble floor
- golden_hour: warm low-angle lighting
- deep_ocean: cool underwater palette

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from phongtrace.scene.presets import create_preset_scene
    >>> from phongtrace.core.renderer import render
    >>>
    >>> scene, camera = create_preset_scene("mirror_gallery")
    >>> frame = render(scene, camera, 320, 240)
"""

from collections.abc import Callable

from phongtrace.camera.pinhole import PinholeCamera
from phongtrace.materials.phong import PhongMaterial
from phongtrace.scene.lights import PointLight
from phongtrace.scene.manager import Scene, SceneConfig, SphereConfig

DEFAULT_PRESET = "candy_land"

DEFAULT_CAMERA = PinholeCamera(position=(0.0, 1.0, 5.0), target=(0.0, 0.0, 0.0))

# Floor sphere shared by most presets
FLOOR_CENTER = (0.0, -101.0, 0.0)
FLOOR_RADIUS = 100.0


def _material(
    color: tuple[float, float, float],
    ambient: float,
    diffuse: float,
    specular: float,
    shininess: float,
    reflectivity: float,
) -> PhongMaterial:
    return PhongMaterial(
        color=color,
        ambient=ambient,
        diffuse=diffuse,
        specular=specular,
        shininess=shininess,
        reflectivity=reflectivity,
    )


def _sphere(center: tuple[float, float, float], radius: float, material: PhongMaterial) -> SphereConfig:
    return SphereConfig(center=center, radius=radius, material=material)


def _light(position: tuple[float, float, float], color: tuple[float, float, float], intensity: float) -> PointLight:
    return PointLight(position=position, color=color, intensity=intensity)


# =============================================================================
# Preset Definitions
# =============================================================================


def classic_scene() -> SceneConfig:
    red = _material((1.0, 0.2, 0.2), 0.1, 0.7, 0.8, 64, 0.4)
    green = _material((0.2, 1.0, 0.2), 0.1, 0.8, 0.6, 32, 0.2)
    blue = _material((0.2, 0.2, 1.0), 0.1, 0.6, 0.9, 128, 0.6)
    gold = _material((1.0, 0.84, 0.0), 0.2, 0.5, 1.0, 256, 0.5)
    silver = _material((0.75, 0.75, 0.75), 0.1, 0.4, 1.0, 256, 0.8)

    return SceneConfig(
        spheres=[
            _sphere((0.0, 0.0, 0.0), 1.0, red),
            _sphere((-2.5, 0.0, -1.0), 0.8, green),
            _sphere((2.5, 0.5, -0.5), 1.2, blue),
            _sphere(FLOOR_CENTER, FLOOR_RADIUS, silver),
            _sphere((-1.0, 1.5, 1.0), 0.5, gold),
        ],
        lights=[
            _light((-5.0, 5.0, 5.0), (1.0, 1.0, 1.0), 0.8),
            _light((5.0, 3.0, 3.0), (1.0, 1.0, 1.0), 0.6),
        ],
        camera=DEFAULT_CAMERA,
    )


def candy_land_scene() -> SceneConfig:
    bubblegum = _material((1.0, 0.4, 0.7), 0.2, 0.7, 0.6, 64, 0.3)
    lemon = _material((1.0, 1.0, 0.3), 0.2, 0.7, 0.5, 64, 0.3)
    mint = _material((0.4, 1.0, 0.7), 0.2, 0.7, 0.5, 64, 0.3)
    grape = _material((0.6, 0.3, 1.0), 0.2, 0.7, 0.6, 64, 0.3)
    orange = _material((1.0, 0.6, 0.2), 0.2, 0.7, 0.5, 64, 0.3)
    cream = _material((1.0, 0.95, 0.85), 0.3, 0.6, 0.3, 32, 0.2)

    return SceneConfig(
        spheres=[
            _sphere((0.0, 0.0, 0.0), 1.0, bubblegum),
            _sphere((-1.8, -0.3, 0.8), 0.8, lemon),
            _sphere((1.8, -0.3, 0.8), 0.8, mint),
            _sphere((-0.8, 1.3, 1.2), 0.7, grape),
            _sphere((0.8, 1.3, 1.2), 0.7, orange),
            _sphere(FLOOR_CENTER, FLOOR_RADIUS, cream),
        ],
        lights=[
            _light((-5.0, 8.0, 5.0), (1.0, 1.0, 1.0), 1.0),
            _light((5.0, 8.0, 5.0), (1.0, 1.0, 1.0), 1.0),
        ],
        camera=DEFAULT_CAMERA,
    )


def mirror_gallery_scene() -> SceneConfig:
    chrome1 = _material((0.9, 0.9, 1.0), 0.05, 0.3, 1.0, 512, 0.9)
    chrome2 = _material((1.0, 0.9, 0.9), 0.05, 0.3, 1.0, 512, 0.9)
    chrome3 = _material((0.9, 1.0, 0.9), 0.05, 0.3, 1.0, 512, 0.9)
    gold_mirror = _material((1.0, 0.84, 0.0), 0.1, 0.3, 1.0, 512, 0.85)
    floor = _material((0.2, 0.2, 0.25), 0.1, 0.6, 0.4, 64, 0.3)

    return SceneConfig(
        spheres=[
            _sphere((0.0, 0.0, 0.0), 1.0, gold_mirror),
            _sphere((2.5, 0.0, 0.0), 0.7, chrome1),
            _sphere((-2.5, 0.0, 0.0), 0.7, chrome2),
            _sphere((0.0, 0.0, 2.5), 0.7, chrome3),
            _sphere((0.0, 0.0, -2.5), 0.7, chrome1),
            _sphere((0.0, 2.0, 0.0), 0.5, chrome2),
            _sphere(FLOOR_CENTER, FLOOR_RADIUS, floor),
        ],
        lights=[
            _light((5.0, 8.0, 5.0), (1.0, 1.0, 1.0), 1.2),
            _light((-5.0, 8.0, -5.0), (0.8, 0.9, 1.0), 0.8),
            _light((0.0, -3.0, 0.0), (1.0, 0.9, 0.8), 0.3),  # Uplight
        ],
        camera=DEFAULT_CAMERA,
    )


def neon_dreams_scene() -> SceneConfig:
    neon_pink = _material((1.0, 0.1, 0.5), 0.15, 0.6, 1.0, 256, 0.7)
    neon_cyan = _material((0.0, 0.9, 1.0), 0.15, 0.6, 1.0, 256, 0.7)
    neon_green = _material((0.2, 1.0, 0.2), 0.15, 0.6, 1.0, 256, 0.7)
    neon_purple = _material((0.8, 0.2, 1.0), 0.15, 0.6, 1.0, 256, 0.7)
    neon_yellow = _material((1.0, 1.0, 0.1), 0.15, 0.6, 1.0, 256, 0.7)
    dark_floor = _material((0.05, 0.05, 0.1), 0.05, 0.3, 0.8, 128, 0.6)

    return SceneConfig(
        spheres=[
            _sphere((-2.0, 0.5, 0.0), 1.2, neon_pink),
            _sphere((2.0, 0.5, 0.0), 1.2, neon_cyan),
            _sphere((0.0, 0.5, 2.0), 1.2, neon_green),
            _sphere((0.0, 2.5, 0.0), 0.8, neon_purple),
            _sphere((0.0, 0.5, -2.0), 1.2, neon_yellow),
            _sphere(FLOOR_CENTER, FLOOR_RADIUS, dark_floor),
        ],
        lights=[
            _light((-5.0, 5.0, 5.0), (1.0, 0.2, 0.8), 1.0),
            _light((5.0, 5.0, 5.0), (0.2, 0.8, 1.0), 1.0),
            _light((0.0, 8.0, 0.0), (1.0, 1.0, 1.0), 0.5),
        ],
        camera=DEFAULT_CAMERA,
    )


def planetary_system_scene() -> SceneConfig:
    sun = _material((1.0, 0.9, 0.3), 0.3, 0.7, 0.3, 16, 0.1)
    mercury = _material((0.7, 0.7, 0.7), 0.1, 0.6, 0.8, 128, 0.4)
    venus = _material((1.0, 0.8, 0.5), 0.1, 0.7, 0.6, 64, 0.3)
    earth = _material((0.2, 0.5, 1.0), 0.1, 0.8, 0.5, 64, 0.4)
    mars = _material((0.9, 0.4, 0.2), 0.1, 0.7, 0.4, 32, 0.3)
    jupiter = _material((0.8, 0.6, 0.4), 0.1, 0.7, 0.5, 64, 0.4)
    space = _material((0.01, 0.01, 0.02), 0.02, 0.2, 0.1, 8, 0.05)

    return SceneConfig(
        spheres=[
            _sphere((0.0, 0.0, -3.0), 1.5, sun),
            _sphere((-2.5, -0.2, 0.0), 0.3, mercury),
            _sphere((-1.5, 0.3, 2.0), 0.5, venus),
            _sphere((2.0, -0.3, 1.0), 0.6, earth),
            _sphere((3.5, 0.5, -1.0), 0.4, mars),
            _sphere((-3.0, 1.0, 3.0), 1.0, jupiter),
            _sphere(FLOOR_CENTER, FLOOR_RADIUS, space),
        ],
        lights=[
            _light((-2.0, 3.0, -3.0), (1.0, 0.95, 0.8), 1.5),
            _light((5.0, 5.0, 5.0), (0.3, 0.3, 0.4), 0.3),  # Fill
        ],
        camera=DEFAULT_CAMERA,
    )


def glass_orbs_scene() -> SceneConfig:
    glass_clear = _material((0.95, 0.95, 1.0), 0.05, 0.2, 1.0, 512, 0.8)
    glass_blue = _material((0.7, 0.85, 1.0), 0.05, 0.25, 1.0, 512, 0.75)
    glass_amber = _material((1.0, 0.8, 0.5), 0.05, 0.25, 1.0, 512, 0.75)
    glass_green = _material((0.7, 1.0, 0.85), 0.05, 0.25, 1.0, 512, 0.75)
    glass_rose = _material((1.0, 0.8, 0.9), 0.05, 0.25, 1.0, 512, 0.75)
    marble_floor = _material((0.85, 0.85, 0.9), 0.15, 0.6, 0.7, 128, 0.4)

    return SceneConfig(
        spheres=[
            _sphere((0.0, 0.0, 0.0), 1.0, glass_clear),
            _sphere((-2.2, -0.3, 0.5), 0.7, glass_blue),
            _sphere((2.2, -0.3, 0.5), 0.7, glass_amber),
            _sphere((-1.5, 1.2, 1.0), 0.5, glass_green),
            _sphere((1.5, 1.2, 1.0), 0.5, glass_rose),
            _sphere(FLOOR_CENTER, FLOOR_RADIUS, marble_floor),
        ],
        lights=[
            _light((-5.0, 8.0, 3.0), (1.0, 1.0, 1.0), 1.2),
            _light((5.0, 8.0, 3.0), (1.0, 1.0, 1.0), 1.2),
            _light((0.0, 3.0, -5.0), (0.8, 0.8, 1.0), 0.6),  # Backlight
        ],
        camera=DEFAULT_CAMERA,
    )


def golden_hour_scene() -> SceneConfig:
    terracotta = _material((0.8, 0.4, 0.3), 0.15, 0.7, 0.3, 32, 0.2)
    sand = _material((0.9, 0.8, 0.6), 0.2, 0.7, 0.2, 16, 0.1)
    copper = _material((0.9, 0.6, 0.4), 0.1, 0.5, 0.9, 256, 0.6)
    bronze = _material((0.7, 0.5, 0.3), 0.1, 0.6, 0.8, 128, 0.5)
    clay = _material((0.7, 0.5, 0.4), 0.15, 0.7, 0.3, 32, 0.2)
    desert_floor = _material((0.8, 0.7, 0.5), 0.2, 0.7, 0.2, 16, 0.15)

    return SceneConfig(
        spheres=[
            _sphere((0.0, 0.0, 0.0), 1.0, copper),
            _sphere((-2.5, -0.2, -0.5), 0.8, terracotta),
            _sphere((2.5, 0.3, 0.5), 1.0, bronze),
            _sphere((-1.0, 1.5, 1.5), 0.6, clay),
            _sphere((1.2, 1.8, -1.0), 0.5, sand),
            _sphere(FLOOR_CENTER, FLOOR_RADIUS, desert_floor),
        ],
        lights=[
            _light((-8.0, 3.0, 2.0), (1.0, 0.7, 0.4), 1.5),  # Low sun
            _light((5.0, 8.0, -3.0), (0.6, 0.7, 1.0), 0.4),  # Sky fill
        ],
        camera=DEFAULT_CAMERA,
    )


def deep_ocean_scene() -> SceneConfig:
    pearl = _material((0.9, 0.95, 1.0), 0.1, 0.4, 1.0, 256, 0.7)
    aqua = _material((0.3, 0.7, 0.8), 0.15, 0.6, 0.6, 64, 0.4)
    deep_blue = _material((0.2, 0.4, 0.7), 0.15, 0.6, 0.5, 64, 0.3)
    teal = _material((0.2, 0.6, 0.6), 0.15, 0.6, 0.6, 64, 0.4)
    coral = _material((0.9, 0.5, 0.5), 0.15, 0.7, 0.4, 32, 0.2)
    ocean_floor = _material((0.15, 0.25, 0.35), 0.1, 0.5, 0.3, 32, 0.2)

    return SceneConfig(
        spheres=[
            _sphere((0.0, 0.5, 0.0), 1.0, pearl),
            _sphere((-2.0, 0.0, 1.0), 0.7, aqua),
            _sphere((2.0, 1.0, 0.0), 0.8, deep_blue),
            _sphere((-1.0, 2.0, -1.0), 0.5, teal),
            _sphere((1.5, -0.3, 2.0), 0.6, coral),
            _sphere(FLOOR_CENTER, FLOOR_RADIUS, ocean_floor),
        ],
        lights=[
            _light((-3.0, 10.0, 0.0), (0.6, 0.8, 1.0), 0.8),
            _light((5.0, 5.0, 5.0), (0.4, 0.6, 0.8), 0.5),
        ],
        camera=DEFAULT_CAMERA,
    )


PRESETS: dict[str, Callable[[], SceneConfig]] = {
    "classic": classic_scene,
    "candy_land": candy_land_scene,
    "mirror_gallery": mirror_gallery_scene,
    "neon_dreams": neon_dreams_scene,
    "planetary_system": planetary_system_scene,
    "glass_orbs": glass_orbs_scene,
    "golden_hour": golden_hour_scene,
    "deep_ocean": deep_ocean_scene,
}


# =============================================================================
# Lookup
# =============================================================================


def list_presets() -> list[str]:
    """Names of all available presets, in definition order."""
    return list(PRESETS)


def get_preset(name: str) -> SceneConfig:
    """Get a fresh configuration for a named preset.

    Args:
        name: One of list_presets().

    Returns:
        A new SceneConfig; callers may modify it freely.

    Raises:
        KeyError: If no preset has this name.
    """
    try:
        factory = PRESETS[name]
    except KeyError:
        raise KeyError(f"Unknown preset {name!r}. Available presets: {', '.join(PRESETS)}") from None
    return factory()


def create_preset_scene(name: str = DEFAULT_PRESET) -> tuple[Scene, PinholeCamera]:
    """Build the Scene and camera of a named preset.

    Args:
        name: Preset name. Default is "candy_land".

    Returns:
        Tuple of (scene, camera).

    Raises:
        KeyError: If no preset has this name.
    """
    config = get_preset(name)
    camera = config.camera if config.camera is not None else DEFAULT_CAMERA
    return Scene.from_config(config), camera

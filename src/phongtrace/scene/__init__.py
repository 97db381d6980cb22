"""Scene module for scene storage, construction and presets.

Components:
    intersection: Sphere storage and closest-hit / any-hit queries
    lights: Point light storage and the background color
    manager: Scene construction, validation and JSON scene files
    presets: Named example scenes

Scene data is organized for efficient GPU access:
    - Structure-of-Arrays layout for spheres, materials and lights
    - One material slot per sphere
"""

from .intersection import (
    MAX_SPHERES,
    SceneHitRecord,
    add_sphere,
    clear_scene,
    get_sphere_count,
    intersect_scene,
    intersect_scene_any,
)
from .lights import (
    DEFAULT_BACKGROUND,
    MAX_LIGHTS,
    PointLight,
    add_point_light,
    clear_lights,
    get_background,
    get_light_count,
    set_background,
)

# Scene construction and configuration
from .manager import (
    Scene,
    SceneConfig,
    SphereConfig,
    load_scene_config,
    save_scene_config,
)
from .presets import DEFAULT_PRESET, create_preset_scene, get_preset, list_presets

__all__ = [
    # Intersection module
    "SceneHitRecord",
    "add_sphere",
    "clear_scene",
    "get_sphere_count",
    "intersect_scene",
    "intersect_scene_any",
    "MAX_SPHERES",
    # Lights module
    "PointLight",
    "add_point_light",
    "clear_lights",
    "get_light_count",
    "MAX_LIGHTS",
    "DEFAULT_BACKGROUND",
    "set_background",
    "get_background",
    # Manager module
    "Scene",
    "SceneConfig",
    "SphereConfig",
    "load_scene_config",
    "save_scene_config",
    # Presets module
    "DEFAULT_PRESET",
    "create_preset_scene",
    "get_preset",
    "list_presets",
]

"""Scene construction, validation and declarative configuration.

A Scene is the Python-side description of what gets rendered: an ordered
list of spheres (each owning its Phong material), an ordered list of point
lights and a background color. Objects are validated when they are added,
so an ill-formed scene fails before any kernel runs.

The Taichi fields that kernels read are global, so a Scene is written into
them by upload() right before a render. Rendering two scenes one after
the other is therefore just two uploads; the fields are never modified
while a frame is in flight.

Scenes can also be described declaratively with SceneConfig, which
converts to and from plain dicts and JSON files.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from phongtrace.scene.manager import Scene
    >>> from phongtrace.materials.phong import PhongMaterial
    >>> scene = Scene()
    >>> scene.add_sphere((0.0, 0.0, -1.0), 0.5, PhongMaterial(color=(1.0, 0.2, 0.2)))
    0
    >>> scene.add_light((-5.0, 5.0, 5.0), intensity=0.8)
    0
    >>> scene.upload()
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import taichi.math as tm

from phongtrace.camera.pinhole import PinholeCamera
from phongtrace.errors import SceneConfigError
from phongtrace.materials.phong import (
    PhongMaterial,
    add_phong_material,
    clear_phong_materials,
)
from phongtrace.scene.intersection import MAX_SPHERES, add_sphere, clear_scene
from phongtrace.scene.lights import (
    DEFAULT_BACKGROUND,
    MAX_LIGHTS,
    PointLight,
    add_point_light,
    clear_lights,
    set_background,
)

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3


def _as_triple(values: Any, what: str) -> tuple[float, float, float]:
    if len(values) != 3:
        raise SceneConfigError(f"{what} must have 3 components, got {values!r}")
    return (float(values[0]), float(values[1]), float(values[2]))


@dataclass(frozen=True)
class SphereConfig:
    """A sphere with its own material.

    Attributes:
        center: Center of the sphere (x, y, z).
        radius: Radius of the sphere, must be positive.
        material: Phong coefficients of the sphere's surface.

    Raises:
        SceneConfigError: If the radius is not positive.
    """

    center: tuple[float, float, float]
    radius: float
    material: PhongMaterial = field(default_factory=PhongMaterial)

    def __post_init__(self) -> None:
        _as_triple(self.center, "Sphere center")
        if self.radius <= 0.0:
            raise SceneConfigError(f"Sphere radius = {self.radius} must be positive.")

    def to_dict(self) -> dict[str, Any]:
        return {
            "center": list(self.center),
            "radius": self.radius,
            "material": self.material.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SphereConfig":
        return cls(
            center=_as_triple(data.get("center", [0.0, 0.0, 0.0]), "Sphere center"),
            radius=float(data.get("radius", 1.0)),
            material=PhongMaterial.from_dict(data.get("material", {})),
        )


@dataclass
class SceneConfig:
    """Declarative scene description.

    Attributes:
        spheres: Spheres in insertion order.
        lights: Point lights in insertion order.
        background: Color of rays that leave the scene.
        camera: Optional viewpoint stored alongside the scene.
    """

    spheres: list[SphereConfig] = field(default_factory=list)
    lights: list[PointLight] = field(default_factory=list)
    background: tuple[float, float, float] = DEFAULT_BACKGROUND
    camera: PinholeCamera | None = None

    def to_dict(self) -> dict[str, Any]:
        """Export the configuration to a dictionary (for JSON serialization)."""
        data: dict[str, Any] = {
            "spheres": [sphere.to_dict() for sphere in self.spheres],
            "lights": [light.to_dict() for light in self.lights],
            "background": list(self.background),
        }
        if self.camera is not None:
            data["camera"] = self.camera.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SceneConfig":
        """Build a configuration from a dictionary.

        Raises:
            SceneConfigError: If any object in the dictionary is invalid.
        """
        camera_data = data.get("camera")
        return cls(
            spheres=[SphereConfig.from_dict(s) for s in data.get("spheres", [])],
            lights=[PointLight.from_dict(light) for light in data.get("lights", [])],
            background=_as_triple(data.get("background", DEFAULT_BACKGROUND), "Background"),
            camera=PinholeCamera.from_dict(camera_data) if camera_data is not None else None,
        )


class Scene:
    """Ordered spheres, ordered lights and a background color.

    Attributes:
        spheres: SphereConfig for every sphere, in insertion order.
        lights: PointLight for every light, in insertion order.
        background: Color returned for rays that miss every sphere.

    Example:
        >>> scene = Scene(background=(0.0, 0.0, 0.0))
        >>> gold = PhongMaterial(color=(1.0, 0.84, 0.0), reflectivity=0.6)
        >>> scene.add_sphere((0.0, 0.0, -3.0), 1.0, gold)
        0
        >>> scene.add_light((5.0, 5.0, 0.0))
        0
    """

    def __init__(self, background: tuple[float, float, float] = DEFAULT_BACKGROUND) -> None:
        self.spheres: list[SphereConfig] = []
        self.lights: list[PointLight] = []
        self.background = DEFAULT_BACKGROUND
        self.set_background(background)

    # =========================================================================
    # Construction
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material: PhongMaterial | None = None,
    ) -> int:
        """Add a sphere with its own material.

        Args:
            center: Center of the sphere.
            radius: Radius of the sphere (> 0).
            material: Surface material. Defaults to PhongMaterial().

        Returns:
            The index of the sphere.

        Raises:
            SceneConfigError: If the radius is not positive.
            RuntimeError: If the maximum number of spheres is exceeded.
        """
        if material is None:
            material = PhongMaterial()
        return self.add(SphereConfig(center=_as_triple(center, "Sphere center"), radius=radius, material=material))

    def add(self, sphere: SphereConfig) -> int:
        """Add an already validated sphere description."""
        if len(self.spheres) >= MAX_SPHERES:
            raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
        self.spheres.append(sphere)
        return len(self.spheres) - 1

    def add_light(
        self,
        position: tuple[float, float, float],
        color: tuple[float, float, float] = (1.0, 1.0, 1.0),
        intensity: float = 1.0,
    ) -> int:
        """Add a point light.

        Returns:
            The index of the light.

        Raises:
            SceneConfigError: If the color or intensity is negative.
            RuntimeError: If the maximum number of lights is exceeded.
        """
        light = PointLight(
            position=_as_triple(position, "Light position"),
            color=_as_triple(color, "Light color"),
            intensity=intensity,
        )
        if len(self.lights) >= MAX_LIGHTS:
            raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
        self.lights.append(light)
        return len(self.lights) - 1

    def set_background(self, color: tuple[float, float, float]) -> None:
        """Set the background color.

        Raises:
            SceneConfigError: If any component is negative.
        """
        background = _as_triple(color, "Background")
        for i, component in enumerate(background):
            if component < 0.0:
                raise SceneConfigError(f"Background color component {i} = {component} is negative.")
        self.background = background

    def clear(self) -> None:
        """Remove all spheres and lights. The background is kept."""
        self.spheres.clear()
        self.lights.clear()

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return len(self.spheres)

    def get_light_count(self) -> int:
        """Get the number of lights in the scene."""
        return len(self.lights)

    # =========================================================================
    # Upload
    # =========================================================================

    def upload(self) -> None:
        """Write the scene into the Taichi fields read by the render kernels.

        Previous field contents are replaced. Sphere i gets material slot i.
        """
        clear_scene()
        clear_phong_materials()
        clear_lights()

        for sphere in self.spheres:
            material_id = add_phong_material(sphere.material)
            center = sphere.center
            add_sphere(vec3(center[0], center[1], center[2]), sphere.radius, material_id)

        for light in self.lights:
            add_point_light(light)

        set_background(self.background)
        logger.debug(
            "Uploaded scene: %d spheres, %d lights, background %s",
            len(self.spheres),
            len(self.lights),
            self.background,
        )

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self, camera: PinholeCamera | None = None) -> SceneConfig:
        """Export the scene to a configuration object.

        Args:
            camera: Optional camera to store with the scene.

        Returns:
            A SceneConfig containing all spheres and lights.
        """
        return SceneConfig(
            spheres=list(self.spheres),
            lights=list(self.lights),
            background=self.background,
            camera=camera,
        )

    @classmethod
    def from_config(cls, config: SceneConfig) -> "Scene":
        """Build a scene from a configuration object.

        Raises:
            SceneConfigError: If the configuration contains invalid data.
            RuntimeError: If a capacity limit is exceeded.
        """
        scene = cls(background=config.background)
        for sphere in config.spheres:
            scene.add(sphere)
        for light in config.lights:
            scene.add_light(light.position, light.color, light.intensity)
        return scene

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        return self.to_config().to_dict()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Scene":
        """Build a scene from a dictionary."""
        return cls.from_config(SceneConfig.from_dict(data))

    def __repr__(self) -> str:
        return f"Scene(spheres={len(self.spheres)}, lights={len(self.lights)}, background={self.background})"


# =============================================================================
# Scene Files
# =============================================================================


def load_scene_config(path: str | Path) -> SceneConfig:
    """Load a scene description from a JSON file.

    Raises:
        SceneConfigError: If the file describes an invalid scene.
        OSError: If the file cannot be read.
        json.JSONDecodeError: If the file is not valid JSON.
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    config = SceneConfig.from_dict(data)
    logger.debug("Loaded scene config from %s (%d spheres)", path, len(config.spheres))
    return config


def save_scene_config(config: SceneConfig, path: str | Path) -> None:
    """Write a scene description to a JSON file."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2)
    logger.debug("Saved scene config to %s", path)

"""Point light sources and the background color.

Lights are stored in Taichi fields in insertion order and iterated by the
integrator for every shading point. Each light has a position, an RGB
color (used by the specular term) and a scalar intensity (scaling both
diffuse and specular terms). Rays that miss every sphere return the
background color.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from phongtrace.scene.lights import PointLight, add_point_light
    >>> add_point_light(PointLight(position=(-5.0, 5.0, 5.0), intensity=0.8))
    0
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from phongtrace.errors import SceneConfigError

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass(frozen=True)
class PointLight:
    """A point light.

    Attributes:
        position: World-space position (x, y, z).
        color: RGB color, components non-negative.
        intensity: Non-negative scalar intensity.

    Raises:
        SceneConfigError: If the color or intensity is negative.
    """

    position: tuple[float, float, float]
    color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    intensity: float = 1.0

    def __post_init__(self) -> None:
        if len(self.position) != 3:
            raise SceneConfigError(f"Light position must have 3 components, got {self.position!r}")
        if len(self.color) != 3:
            raise SceneConfigError(f"Light color must have 3 components, got {self.color!r}")
        for i, component in enumerate(self.color):
            if component < 0.0:
                raise SceneConfigError(f"Light color component {i} = {component} is negative.")
        if self.intensity < 0.0:
            raise SceneConfigError(f"Light intensity = {self.intensity} is negative.")

    def to_dict(self) -> dict:
        return {
            "position": list(self.position),
            "color": list(self.color),
            "intensity": self.intensity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PointLight":
        position = data.get("position", [0.0, 0.0, 0.0])
        color = data.get("color", [1.0, 1.0, 1.0])
        return cls(
            position=(float(position[0]), float(position[1]), float(position[2])),
            color=(float(color[0]), float(color[1]), float(color[2])),
            intensity=float(data.get("intensity", 1.0)),
        )


# Maximum number of lights in the scene
MAX_LIGHTS = 64

light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_intensities = ti.field(dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def clear_lights() -> None:
    """Remove all lights from the scene."""
    num_lights[None] = 0


def add_point_light(light: PointLight) -> int:
    """Add a point light to the scene.

    Args:
        light: The validated light description.

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
    """
    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
    light_positions[idx] = vec3(light.position[0], light.position[1], light.position[2])
    light_colors[idx] = vec3(light.color[0], light.color[1], light.color[2])
    light_intensities[idx] = light.intensity
    num_lights[None] = idx + 1
    return idx


def get_light_count() -> int:
    """Get the number of lights in the scene."""
    return int(num_lights[None])


# =============================================================================
# Background
# =============================================================================

DEFAULT_BACKGROUND = (0.1, 0.1, 0.15)

background_color = ti.Vector.field(3, dtype=ti.f32, shape=())


def set_background(color: tuple[float, float, float]) -> None:
    """Set the color returned for rays that escape the scene.

    Raises:
        SceneConfigError: If any component is negative.
    """
    for i, component in enumerate(color):
        if component < 0.0:
            raise SceneConfigError(f"Background color component {i} = {component} is negative.")
    background_color[None] = [color[0], color[1], color[2]]


def get_background() -> tuple[float, float, float]:
    bg = background_color[None]
    return (float(bg[0]), float(bg[1]), float(bg[2]))

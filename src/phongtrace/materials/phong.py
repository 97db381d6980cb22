"""Phong material model.

A Phong surface reflects light as the sum of three terms:

    ambient  = color * ambient
    diffuse  = color * diffuse * max(0, N . L) * intensity
    specular = light_color * specular * max(0, V . reflect(-L, N))^shininess * intensity

plus an optional mirror term controlled by reflectivity, which the
integrator blends convexly with the local color.

Materials are stored in GPU-friendly Taichi fields (structure of arrays).
Every sphere registers its own material slot, so material values are
owned by their sphere and never shared.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from phongtrace.materials.phong import PhongMaterial, add_phong_material
    >>> red = PhongMaterial(color=(1.0, 0.2, 0.2), reflectivity=0.4)
    >>> material_id = add_phong_material(red)
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from phongtrace.core.ray import reflect
from phongtrace.errors import SceneConfigError

# Type alias for 3D vectors
vec3 = tm.vec3


# =============================================================================
# Material Description (Python side)
# =============================================================================


@dataclass(frozen=True)
class PhongMaterial:
    """Surface reflectance coefficients for Phong shading.

    Attributes:
        color: Base RGB color, each component in [0, 1].
        ambient: Ambient coefficient in [0, 1].
        diffuse: Lambertian diffuse coefficient in [0, 1].
        specular: Specular highlight coefficient in [0, 1].
        shininess: Specular exponent (> 0). Larger values give tighter
            highlights.
        reflectivity: Mirror reflection weight in [0, 1]. 0 disables
            reflection rays.

    Raises:
        SceneConfigError: If any coefficient is out of range.
    """

    color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    ambient: float = 0.1
    diffuse: float = 0.7
    specular: float = 0.6
    shininess: float = 32.0
    reflectivity: float = 0.3

    def __post_init__(self) -> None:
        if len(self.color) != 3:
            raise SceneConfigError(f"Material color must have 3 components, got {self.color!r}")
        for i, component in enumerate(self.color):
            if component < 0.0 or component > 1.0:
                raise SceneConfigError(f"Material color component {i} = {component} is outside [0, 1].")
        for name in ("ambient", "diffuse", "specular", "reflectivity"):
            value = getattr(self, name)
            if value < 0.0 or value > 1.0:
                raise SceneConfigError(f"Material {name} = {value} is outside [0, 1].")
        if self.shininess <= 0.0:
            raise SceneConfigError(f"Material shininess = {self.shininess} must be positive.")

    def to_dict(self) -> dict:
        return {
            "color": list(self.color),
            "ambient": self.ambient,
            "diffuse": self.diffuse,
            "specular": self.specular,
            "shininess": self.shininess,
            "reflectivity": self.reflectivity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PhongMaterial":
        defaults = cls.__dataclass_fields__
        color = data.get("color", defaults["color"].default)
        return cls(
            color=(float(color[0]), float(color[1]), float(color[2])),
            ambient=float(data.get("ambient", defaults["ambient"].default)),
            diffuse=float(data.get("diffuse", defaults["diffuse"].default)),
            specular=float(data.get("specular", defaults["specular"].default)),
            shininess=float(data.get("shininess", defaults["shininess"].default)),
            reflectivity=float(data.get("reflectivity", defaults["reflectivity"].default)),
        )


# =============================================================================
# Material Field Storage
# =============================================================================

# Maximum number of Phong materials (one per sphere)
MAX_PHONG_MATERIALS = 1024

material_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PHONG_MATERIALS)
material_ambient = ti.field(dtype=ti.f32, shape=MAX_PHONG_MATERIALS)
material_diffuse = ti.field(dtype=ti.f32, shape=MAX_PHONG_MATERIALS)
material_specular = ti.field(dtype=ti.f32, shape=MAX_PHONG_MATERIALS)
material_shininess = ti.field(dtype=ti.f32, shape=MAX_PHONG_MATERIALS)
material_reflectivity = ti.field(dtype=ti.f32, shape=MAX_PHONG_MATERIALS)
num_phong_materials = ti.field(dtype=ti.i32, shape=())


def clear_phong_materials() -> None:
    """Clear all Phong materials.

    Resets the material count to zero. Existing data in the fields will be
    overwritten when new materials are added.
    """
    num_phong_materials[None] = 0


def add_phong_material(material: PhongMaterial) -> int:
    """Add a Phong material to the material registry.

    Args:
        material: The validated material description.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    idx = num_phong_materials[None]
    if idx >= MAX_PHONG_MATERIALS:
        raise RuntimeError(f"Maximum number of Phong materials ({MAX_PHONG_MATERIALS}) exceeded")

    material_colors[idx] = vec3(material.color[0], material.color[1], material.color[2])
    material_ambient[idx] = material.ambient
    material_diffuse[idx] = material.diffuse
    material_specular[idx] = material.specular
    material_shininess[idx] = material.shininess
    material_reflectivity[idx] = material.reflectivity
    num_phong_materials[None] = idx + 1
    return idx


def get_phong_material_count() -> int:
    """Get the number of Phong materials in the registry."""
    return int(num_phong_materials[None])


# =============================================================================
# Shading (Taichi-compatible)
# =============================================================================


@ti.func
def get_reflectivity(material_id: ti.i32) -> ti.f32:
    """Get the mirror reflection weight of a material."""
    return material_reflectivity[material_id]


@ti.func
def eval_ambient(material_id: ti.i32) -> vec3:
    """Ambient term: color * ambient."""
    return material_colors[material_id] * material_ambient[material_id]


@ti.func
def eval_phong_direct(
    material_id: ti.i32,
    normal: vec3,
    light_dir: vec3,
    view_dir: vec3,
    light_color: vec3,
    light_intensity: ti.f32,
) -> vec3:
    """Evaluate the diffuse and specular contribution of one unoccluded light.

    Args:
        material_id: Index into the material registry.
        normal: Unit surface normal at the shading point.
        light_dir: Unit direction from the shading point toward the light.
        view_dir: Unit direction from the shading point toward the viewer.
        light_color: RGB color of the light.
        light_intensity: Scalar light intensity.

    Returns:
        diffuse + specular (RGB).
    """
    color = material_colors[material_id]

    n_dot_l = tm.max(0.0, tm.dot(normal, light_dir))
    diffuse = color * material_diffuse[material_id] * n_dot_l * light_intensity

    reflect_dir = reflect(-light_dir, normal)
    r_dot_v = tm.max(0.0, tm.dot(view_dir, reflect_dir))
    spec = r_dot_v ** material_shininess[material_id]
    specular = light_color * material_specular[material_id] * spec * light_intensity

    return diffuse + specular

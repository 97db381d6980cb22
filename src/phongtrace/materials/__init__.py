"""Materials module.

Components:
    phong: Phong reflectance coefficients, their GPU registry and the
        ambient/diffuse/specular evaluation used by the integrator
"""

from .phong import (
    MAX_PHONG_MATERIALS,
    PhongMaterial,
    add_phong_material,
    clear_phong_materials,
    eval_ambient,
    eval_phong_direct,
    get_phong_material_count,
    get_reflectivity,
)

__all__ = [
    "PhongMaterial",
    "MAX_PHONG_MATERIALS",
    "add_phong_material",
    "clear_phong_materials",
    "get_phong_material_count",
    "get_reflectivity",
    "eval_ambient",
    "eval_phong_direct",
]

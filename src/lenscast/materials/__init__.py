"""Materials module: how surfaces scatter light.

Components:
    material: ScatterRecord, MaterialType and the Material base class
    lambertian: Ideal diffuse reflection
    metal: Specular reflection with optional fuzz
    dielectric: Glass-like refraction with Schlick reflectance
    absorber: Black body that absorbs every ray
    registry: Device-side material storage and scattering dispatch
"""

from .absorber import Absorber
from .dielectric import Dielectric, scatter_dielectric
from .lambertian import Lambertian, scatter_lambertian
from .material import Material, MaterialType, ScatterRecord, validate_albedo
from .metal import Metal, scatter_metal
from .registry import (
    MAX_MATERIALS,
    clear_materials,
    get_material_count,
    get_material_type,
    material_from_dict,
    register_material,
    scatter,
)

__all__ = [
    "Material",
    "MaterialType",
    "ScatterRecord",
    "validate_albedo",
    "Lambertian",
    "scatter_lambertian",
    "Metal",
    "scatter_metal",
    "Dielectric",
    "scatter_dielectric",
    "Absorber",
    "MAX_MATERIALS",
    "clear_materials",
    "get_material_count",
    "get_material_type",
    "material_from_dict",
    "register_material",
    "scatter",
]

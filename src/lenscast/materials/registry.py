"""Device-side material registry and scattering dispatch.

Materials referenced by a committed scene are stored here as a type tag
plus a packed (albedo, scalar parameter) pair, indexed by a unified
material id. The shading loop only ever sees the id carried in a hit record
and calls ``scatter`` to dispatch on the tag.

Packed parameter meaning per type:

    LAMBERTIAN  albedo = diffuse color      param unused
    METAL       albedo = reflective color   param = fuzz
    DIELECTRIC  albedo unused               param = refraction index
    ABSORBER    albedo unused               param unused
"""

from typing import Any

import taichi as ti
import taichi.math as tm

from lenscast.core.ray import Ray
from lenscast.geometry.hittable import HitRecord
from lenscast.materials.absorber import Absorber
from lenscast.materials.dielectric import Dielectric, scatter_dielectric
from lenscast.materials.lambertian import Lambertian, scatter_lambertian
from lenscast.materials.material import (
    Material,
    MaterialType,
    ScatterRecord,
    make_absorbed_record,
)
from lenscast.materials.metal import Metal, scatter_metal

# Type alias for 3D vectors
vec3 = tm.vec3

MAX_MATERIALS = 1024

# material_types[i] stores the MaterialType for material_id i
material_types = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
material_albedo = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_param = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())

_MATERIAL_CLASSES: dict[str, type[Material]] = {
    "lambertian": Lambertian,
    "metal": Metal,
    "dielectric": Dielectric,
    "absorber": Absorber,
}


def clear_materials() -> None:
    """Remove all registered materials."""
    num_materials[None] = 0


def register_material(material: Material) -> int:
    """Pack a material into the registry.

    Args:
        material: The host-side material description.

    Returns:
        The unified material id assigned to it.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    material_id = num_materials[None]
    if material_id >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    albedo, param = material.pack()
    material_types[material_id] = int(material.material_type)
    material_albedo[material_id] = albedo
    material_param[material_id] = param
    num_materials[None] = material_id + 1
    return material_id


def get_material_count() -> int:
    """Get the number of registered materials."""
    return int(num_materials[None])


def material_from_dict(config: dict[str, Any]) -> Material:
    """Build a material from its serialized form.

    Args:
        config: A dictionary with a "type" key naming the material and the
            constructor parameters as the remaining keys.

    Raises:
        ValueError: If the type is unknown or a parameter is invalid.
    """
    if not isinstance(config, dict):
        raise ValueError(f"Material entries must be objects, got {config!r}")
    params = dict(config)
    mat_type = str(params.pop("type", "")).lower()
    cls = _MATERIAL_CLASSES.get(mat_type)
    if cls is None:
        raise ValueError(f"Unknown material type: {mat_type}")
    try:
        if "albedo" in params:
            params["albedo"] = tuple(params["albedo"])
        return cls(**params)
    except TypeError as e:
        raise ValueError(f"Invalid parameters for {mat_type} material: {e}") from e


@ti.func
def get_material_type(material_id: ti.i32) -> ti.i32:
    """Get the material type for a given material id.

    Returns:
        The material type as an integer (see MaterialType enum), or -1 for
        invalid material ids.
    """
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_types[material_id]
    return result


@ti.func
def scatter(ray_in: Ray, rec: HitRecord, stream: ti.i32) -> ScatterRecord:
    """Dispatch to the scattering function of the material that was hit.

    Unknown material ids absorb the ray.

    Args:
        ray_in: The incident ray.
        rec: Hit record of the surface struck; rec.material_id selects
            the material.
        stream: Random stream id of the calling pixel.

    Returns:
        The ScatterRecord produced by the material.
    """
    material_id = rec.material_id
    mat_type = get_material_type(material_id)
    result = make_absorbed_record(rec.point)

    if mat_type == int(MaterialType.LAMBERTIAN):
        result = scatter_lambertian(material_albedo[material_id], rec, stream)

    elif mat_type == int(MaterialType.METAL):
        result = scatter_metal(
            material_albedo[material_id],
            material_param[material_id],
            ray_in,
            rec,
            stream,
        )

    elif mat_type == int(MaterialType.DIELECTRIC):
        result = scatter_dielectric(material_param[material_id], ray_in, rec, stream)

    return result

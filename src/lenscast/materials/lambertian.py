"""Lambertian (ideal diffuse) material implementation.

A diffuse surface scatters in a random direction biased toward the normal:
the scattered direction is the unit normal plus a random unit vector, which
yields a cosine-weighted distribution over the hemisphere. With this
importance sampling the attenuation is simply the albedo.

Example:
    >>> from lenscast.materials.lambertian import Lambertian
    >>> ground = Lambertian(albedo=(0.8, 0.8, 0.0))
    >>> # Within a Taichi kernel:
    >>> # record = scatter_lambertian(albedo, hit_record, stream)
"""

from dataclasses import dataclass
from typing import Any, ClassVar

import taichi as ti
import taichi.math as tm

from lenscast.core.ray import near_zero
from lenscast.core.sampler import random_unit_vector
from lenscast.geometry.hittable import HitRecord
from lenscast.materials.material import (
    Color,
    Material,
    MaterialType,
    ScatterRecord,
    validate_albedo,
)

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass(eq=False)
class Lambertian(Material):
    """Lambertian (ideal diffuse) material.

    Attributes:
        albedo: The diffuse reflectance color (RGB, each component in [0, 1]).

    Raises:
        ValueError: If any albedo component is outside [0, 1].
    """

    albedo: Color

    material_type: ClassVar[MaterialType] = MaterialType.LAMBERTIAN

    def __post_init__(self) -> None:
        self.albedo = validate_albedo(self.albedo)

    def pack(self) -> tuple[Color, float]:
        return self.albedo, 0.0

    def params(self) -> dict[str, Any]:
        return {"albedo": list(self.albedo)}


@ti.func
def scatter_lambertian(albedo: vec3, rec: HitRecord, stream: ti.i32) -> ScatterRecord:
    """Scatter a ray off a diffuse surface.

    Args:
        albedo: The diffuse reflectance color (RGB).
        rec: The hit record of the surface struck.
        stream: Random stream id of the calling pixel.

    Returns:
        A ScatterRecord that always scatters, with attenuation = albedo.
    """
    scatter_direction = rec.normal + random_unit_vector(stream)

    # Opposite random vector and normal cancel out
    if near_zero(scatter_direction):
        scatter_direction = rec.normal

    return ScatterRecord(
        did_scatter=1,
        attenuation=albedo,
        origin=rec.point,
        direction=scatter_direction,
    )

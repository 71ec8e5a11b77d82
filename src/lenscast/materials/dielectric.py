"""Dielectric (glass/water) material implementation.

Dielectrics always scatter with unit attenuation. At each interaction the
ray either reflects or refracts:

- it must reflect under total internal reflection (ri * sin(theta) > 1);
- otherwise it reflects with probability given by Schlick's approximation
  of the Fresnel reflectance, and refracts the rest of the time.

The relative index ri is 1/ior when entering the surface (front face) and
ior when leaving it. An ior below 1 models a less dense medium embedded in
a denser one, such as an air bubble in water.

Example:
    >>> from lenscast.materials.dielectric import Dielectric
    >>> glass = Dielectric(refraction_index=1.5)
    >>> bubble = Dielectric(refraction_index=1.0 / 1.5)
"""

from dataclasses import dataclass
from typing import Any, ClassVar

import taichi as ti
import taichi.math as tm

from lenscast.core.ray import Ray, near_zero, reflect, refract, schlick_fresnel
from lenscast.core.sampler import random_float
from lenscast.geometry.hittable import HitRecord
from lenscast.materials.material import Color, Material, MaterialType, ScatterRecord

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass(eq=False)
class Dielectric(Material):
    """Dielectric (glass/water) material.

    Attributes:
        refraction_index: Index of refraction relative to the enclosing
            medium. Common values: Water=1.33, Glass=1.5, Diamond=2.4.

    Raises:
        ValueError: If refraction_index is not positive.
    """

    refraction_index: float = 1.5

    material_type: ClassVar[MaterialType] = MaterialType.DIELECTRIC

    def __post_init__(self) -> None:
        self.refraction_index = float(self.refraction_index)
        if self.refraction_index <= 0.0:
            raise ValueError(
                f"Refraction index must be positive, got {self.refraction_index}"
            )

    def pack(self) -> tuple[Color, float]:
        return (1.0, 1.0, 1.0), self.refraction_index

    def params(self) -> dict[str, Any]:
        return {"refraction_index": self.refraction_index}


@ti.func
def scatter_dielectric(
    refraction_index: ti.f32,
    ray_in: Ray,
    rec: HitRecord,
    stream: ti.i32,
) -> ScatterRecord:
    """Scatter a ray off a dielectric surface.

    Args:
        refraction_index: Index of refraction of the material.
        ray_in: The incident ray.
        rec: The hit record of the surface struck.
        stream: Random stream id of the calling pixel.

    Returns:
        A ScatterRecord that always scatters with attenuation (1, 1, 1).
    """
    ri = refraction_index
    if rec.front_face == 1:
        ri = 1.0 / refraction_index

    unit_direction = tm.normalize(ray_in.direction)
    cos_theta = ti.min(tm.dot(-unit_direction, rec.normal), 1.0)
    sin_theta = ti.sqrt(ti.max(1.0 - cos_theta * cos_theta, 0.0))

    cannot_refract = ri * sin_theta > 1.0
    # Draw unconditionally so every interaction consumes one sample
    u = random_float(stream)

    direction = vec3(0.0, 0.0, 0.0)
    if cannot_refract or schlick_fresnel(cos_theta, ri) > u:
        direction = reflect(unit_direction, rec.normal)
    else:
        direction = refract(unit_direction, rec.normal, ri)
        # Rounding at the critical angle can still leave refract with no solution
        if near_zero(direction):
            direction = reflect(unit_direction, rec.normal)

    return ScatterRecord(
        did_scatter=1,
        attenuation=vec3(1.0, 1.0, 1.0),
        origin=rec.point,
        direction=direction,
    )

"""Metal (specular reflective) material implementation.

Metals reflect the incident ray about the surface normal. A fuzz factor
perturbs the mirror direction by a random point on a sphere of radius fuzz
around the reflected unit vector; fuzz = 0 is a perfect mirror. Perturbed
rays that end up below the surface are absorbed.

Example:
    >>> from lenscast.materials.metal import Metal
    >>> gold = Metal(albedo=(0.8, 0.6, 0.2), fuzz=0.3)
"""

from dataclasses import dataclass
from typing import Any, ClassVar

import taichi as ti
import taichi.math as tm

from lenscast.core.ray import Ray, reflect
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
class Metal(Material):
    """Metal (specular reflective) material.

    Attributes:
        albedo: The reflective color (RGB, each component in [0, 1]).
        fuzz: Radius of the reflection perturbation. Clamped to [0, 1].

    Raises:
        ValueError: If any albedo component is outside [0, 1].
    """

    albedo: Color
    fuzz: float = 0.0

    material_type: ClassVar[MaterialType] = MaterialType.METAL

    def __post_init__(self) -> None:
        self.albedo = validate_albedo(self.albedo)
        self.fuzz = min(max(float(self.fuzz), 0.0), 1.0)

    def pack(self) -> tuple[Color, float]:
        return self.albedo, self.fuzz

    def params(self) -> dict[str, Any]:
        return {"albedo": list(self.albedo), "fuzz": self.fuzz}


@ti.func
def scatter_metal(
    albedo: vec3,
    fuzz: ti.f32,
    ray_in: Ray,
    rec: HitRecord,
    stream: ti.i32,
) -> ScatterRecord:
    """Scatter a ray off a metal surface.

    Args:
        albedo: The reflective color (RGB).
        fuzz: Reflection perturbation radius in [0, 1].
        ray_in: The incident ray.
        rec: The hit record of the surface struck.
        stream: Random stream id of the calling pixel.

    Returns:
        A ScatterRecord; did_scatter is 0 when the fuzzed reflection points
        into the surface.
    """
    reflected = tm.normalize(reflect(ray_in.direction, rec.normal))
    reflected = reflected + fuzz * random_unit_vector(stream)

    did_scatter = 0
    if tm.dot(reflected, rec.normal) > 0.0:
        did_scatter = 1

    return ScatterRecord(
        did_scatter=did_scatter,
        attenuation=albedo,
        origin=rec.point,
        direction=reflected,
    )

"""Scattering capability shared by all materials.

A material answers one question for the shading loop: given an incident ray
and the hit record of the surface it struck, is the ray absorbed, or does it
scatter, and if so with what attenuation and along which outgoing ray?

On the device the answer is a ScatterRecord. On the host, each concrete
material is a small Python object; spheres hold references to these objects,
so one material instance may be shared by any number of spheres. When a
scene is committed every distinct instance is packed into the material
registry (see registry.py) as a type tag plus parameters.
"""

from enum import IntEnum
from typing import Any, ClassVar

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3

Color = tuple[float, float, float]


class MaterialType(IntEnum):
    """Enumeration of supported material types.

    Used for material dispatch in the shading loop to determine which
    scattering function to call.
    """

    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2
    ABSORBER = 3


@ti.dataclass
class ScatterRecord:
    """Outcome of a scattering query.

    Attributes:
        did_scatter: 1 if the ray scattered, 0 if it was absorbed.
        attenuation: Per-channel multiplier applied to the scattered
            ray's contribution. Only valid if did_scatter == 1.
        origin: Origin of the scattered ray (the hit point).
        direction: Direction of the scattered ray (not normalized).
    """

    did_scatter: ti.i32
    attenuation: vec3
    origin: vec3
    direction: vec3


@ti.func
def make_absorbed_record(point: vec3) -> ScatterRecord:
    """Create a ScatterRecord for an absorbed ray."""
    return ScatterRecord(
        did_scatter=0,
        attenuation=vec3(0.0, 0.0, 0.0),
        origin=point,
        direction=vec3(0.0, 0.0, 0.0),
    )


def validate_albedo(albedo: Color) -> Color:
    """Check that an albedo is an RGB triple with components in [0, 1].

    Raises:
        ValueError: If albedo does not have three components or any
            component is outside [0, 1].
    """
    if len(albedo) != 3:
        raise ValueError(f"Albedo must have 3 components, got {len(albedo)}")
    for i, c in enumerate(albedo):
        if not 0.0 <= c <= 1.0:
            raise ValueError(f"Albedo component {i} must be in [0, 1], got {c}")
    return (float(albedo[0]), float(albedo[1]), float(albedo[2]))


class Material:
    """Base class for host-side material descriptions.

    Subclasses set ``material_type`` and implement ``pack`` and ``params``.
    Materials compare by identity: two spheres share a material only if they
    reference the same instance.
    """

    material_type: ClassVar[MaterialType]

    def pack(self) -> tuple[Color, float]:
        """Return the (albedo, scalar parameter) pair stored on the device."""
        raise NotImplementedError("pack() must be implemented by subclasses.")

    def params(self) -> dict[str, Any]:
        """Return the constructor parameters, for serialization."""
        raise NotImplementedError("params() must be implemented by subclasses.")

    def to_dict(self) -> dict[str, Any]:
        """Export the material to a dictionary (for JSON serialization)."""
        return {"type": self.material_type.name.lower(), **self.params()}

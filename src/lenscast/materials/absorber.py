"""Absorbing material: a perfect black body.

Every incident ray is absorbed, so surfaces using this material render as
black silhouettes regardless of lighting.
"""

from dataclasses import dataclass
from typing import Any, ClassVar

from lenscast.materials.material import Color, Material, MaterialType


@dataclass(eq=False)
class Absorber(Material):
    """Material that absorbs every incident ray."""

    material_type: ClassVar[MaterialType] = MaterialType.ABSORBER

    def pack(self) -> tuple[Color, float]:
        return (0.0, 0.0, 0.0), 0.0

    def params(self) -> dict[str, Any]:
        return {}

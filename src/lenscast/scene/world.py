"""Scene aggregate: an ordered collection of spheres answering hit queries.

The Python-side ``Scene`` owns the description of the world: spheres and
references to their materials. Before rendering, ``Scene.commit`` uploads it
to Taichi fields (Structure of Arrays layout) and packs every distinct
material into the material registry. Kernels then query the committed scene
through ``hit_world``, which returns the nearest intersection over all
spheres.

Only one scene is committed at a time; committing a scene replaces whatever
was on the device before.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from lenscast.materials import Lambertian
    >>> from lenscast.scene.world import Scene
    >>> scene = Scene()
    >>> matte = Lambertian(albedo=(0.5, 0.5, 0.5))
    >>> scene.add_sphere((0, 0, -1), 0.5, matte)
    >>> scene.add_sphere((0, -100.5, -1), 100, matte)
    >>> scene.commit()
    >>> # Use hit_world within a Taichi kernel
"""

import logging
from dataclasses import dataclass
from typing import Any

import taichi as ti
import taichi.math as tm

from lenscast.core.interval import Interval
from lenscast.core.ray import Ray, to_float, to_vec3_tuple
from lenscast.geometry.hittable import HitRecord, make_miss_record
from lenscast.geometry.sphere import hit_sphere, make_sphere
from lenscast.materials.material import Material
from lenscast.materials.registry import (
    clear_materials,
    material_from_dict,
    register_material,
)

logger = logging.getLogger(__name__)

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


@dataclass(eq=False)
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        center: The center of the sphere.
        radius: The radius of the sphere. Negative values are clamped to 0.
        material: The scattering policy of the sphere. May be shared with
            other spheres.
    """

    center: tuple[float, float, float]
    radius: float
    material: Material

    def __post_init__(self) -> None:
        self.center = to_vec3_tuple(self.center, "Sphere center")
        self.radius = max(to_float(self.radius, "Sphere radius"), 0.0)


def clear_scene() -> None:
    """Remove all spheres from the device-side scene."""
    num_spheres[None] = 0


def get_sphere_count() -> int:
    """Get the number of spheres in the committed scene."""
    return int(num_spheres[None])


class Scene:
    """An ordered aggregate of spheres.

    A scene is itself a hittable: its hit query returns the nearest hit over
    all members. Members are kept in insertion order, but the nearest-hit
    result does not depend on that order.

    Attributes:
        spheres: The spheres of the scene, in insertion order.
    """

    def __init__(self, spheres: list[SphereInfo] | None = None) -> None:
        self.spheres: list[SphereInfo] = list(spheres) if spheres else []

    def __len__(self) -> int:
        return len(self.spheres)

    def add(self, sphere: SphereInfo) -> None:
        """Append a sphere to the scene."""
        self.spheres.append(sphere)

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material: Material,
    ) -> SphereInfo:
        """Create a sphere and append it to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere. Negative values are clamped to 0.
            material: The scattering policy of the sphere.

        Returns:
            The SphereInfo that was added.
        """
        sphere = SphereInfo(center=center, radius=radius, material=material)
        self.add(sphere)
        return sphere

    def extend(self, other: "Scene") -> None:
        """Append every member of another scene."""
        self.spheres.extend(other.spheres)

    def clear(self) -> None:
        """Remove all spheres from the scene."""
        self.spheres.clear()

    def materials(self) -> list[Material]:
        """Distinct materials referenced by the scene, in first-use order.

        Materials are compared by identity, so a material instance shared by
        several spheres appears once.
        """
        seen: dict[int, Material] = {}
        for sphere in self.spheres:
            seen.setdefault(id(sphere.material), sphere.material)
        return list(seen.values())

    def commit(self) -> dict[int, int]:
        """Upload the scene to the Taichi fields read by ``hit_world``.

        Replaces any previously committed scene and material table.

        Returns:
            Mapping from ``id(material)`` to the material id it was
            assigned on the device.

        Raises:
            RuntimeError: If the scene exceeds the sphere or material
                capacity.
        """
        if len(self.spheres) > MAX_SPHERES:
            raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")

        clear_scene()
        clear_materials()

        material_ids: dict[int, int] = {}
        for material in self.materials():
            material_ids[id(material)] = register_material(material)

        for idx, sphere in enumerate(self.spheres):
            sphere_centers[idx] = sphere.center
            sphere_radii[idx] = sphere.radius
            sphere_material_ids[idx] = material_ids[id(sphere.material)]
        num_spheres[None] = len(self.spheres)

        logger.debug(
            "Committed scene: %d spheres, %d materials",
            len(self.spheres),
            len(material_ids),
        )
        return material_ids

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization).

        Shared materials are written once and referenced by index.
        """
        materials = self.materials()
        index = {id(m): i for i, m in enumerate(materials)}
        return {
            "materials": [m.to_dict() for m in materials],
            "spheres": [
                {
                    "center": list(s.center),
                    "radius": s.radius,
                    "material": index[id(s.material)],
                }
                for s in self.spheres
            ],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Scene":
        """Load a scene from a dictionary.

        Args:
            data: Dictionary with 'materials' and 'spheres' keys.

        Raises:
            ValueError: If the dictionary contains invalid data.
        """
        material_configs = data.get("materials", [])
        sphere_configs = data.get("spheres", [])
        if not isinstance(material_configs, list) or not isinstance(sphere_configs, list):
            raise ValueError("Scene 'materials' and 'spheres' must be lists")

        materials = [material_from_dict(m) for m in material_configs]
        scene = cls()
        for sphere_config in sphere_configs:
            if not isinstance(sphere_config, dict):
                raise ValueError(f"Sphere entries must be objects, got {sphere_config!r}")
            mat_index = sphere_config.get("material", 0)
            if (
                isinstance(mat_index, bool)
                or not isinstance(mat_index, int)
                or not 0 <= mat_index < len(materials)
            ):
                raise ValueError(f"Invalid material index: {mat_index}")
            if "center" not in sphere_config or "radius" not in sphere_config:
                raise ValueError("Sphere entries require 'center' and 'radius'")
            scene.add_sphere(
                sphere_config["center"], sphere_config["radius"], materials[mat_index]
            )
        return scene


@ti.func
def hit_world(ray: Ray, ray_t: Interval) -> HitRecord:
    """Test a ray against every sphere of the committed scene.

    Each sphere is tested with the interval's upper end narrowed to the
    closest hit found so far, so the result is the nearest intersection
    regardless of sphere order.

    Args:
        ray: The ray to test.
        ray_t: Acceptable ray parameters (open interval).

    Returns:
        The HitRecord of the closest intersection, or a miss record.
    """
    closest_so_far = ray_t.hi
    result = make_miss_record()

    for i in range(num_spheres[None]):
        sphere = make_sphere(sphere_centers[i], sphere_radii[i], sphere_material_ids[i])
        rec = hit_sphere(ray, Interval(lo=ray_t.lo, hi=closest_so_far), sphere)
        if rec.hit == 1:
            closest_so_far = rec.t
            result = rec

    return result

"""Hit records produced by intersection queries.

Every intersectable surface answers the same query: given a ray and an
interval of acceptable ray parameters, report the nearest intersection as a
HitRecord. A record with ``hit == 0`` means no intersection; all other fields
are then meaningless.
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class HitRecord:
    """Record of a ray-surface intersection.

    Attributes:
        hit: Whether the ray intersected the surface (1 if hit, 0 if miss).
        t: The parameter value along the ray where intersection occurred.
        point: The 3D point where the ray intersected the surface.
        normal: The unit surface normal at the intersection point, always
            oriented against the incident ray.
        front_face: 1 if the ray approached from the outward side, 0 if it
            hit the surface from inside.
        material_id: The id of the scattering policy of the surface hit.
            -1 on a miss.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    front_face: ti.i32
    material_id: ti.i32


@ti.func
def make_miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        material_id=-1,
    )


@ti.func
def face_normal(ray_direction: vec3, outward_normal: vec3):
    """Orient a unit outward normal against the incident ray.

    Args:
        ray_direction: Direction of the incident ray.
        outward_normal: Unit normal pointing out of the surface.

    Returns:
        A tuple (front_face, normal) where front_face is 1 iff
        dot(ray_direction, outward_normal) < 0 and normal is the outward
        normal, flipped on back-face hits.
    """
    front_face = 0
    normal = -outward_normal
    if tm.dot(ray_direction, outward_normal) < 0.0:
        front_face = 1
        normal = outward_normal
    return front_face, normal

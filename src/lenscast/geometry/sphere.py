"""Sphere primitive with analytic ray-sphere intersection.

The ray-sphere intersection solves

    |O + t*D - C|^2 = r^2

which, with oc = C - O, expands to a*t^2 - 2*h*t + c = 0 where

    a = dot(D, D)
    h = dot(D, oc)          (half of the textbook linear coefficient)
    c = dot(oc, oc) - r^2

so the roots are t = (h -/+ sqrt(h^2 - a*c)) / a. The nearer root is tried
first; if it falls outside the caller's interval (behind the origin, or past
a closer surface already found) the farther root is tried.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from lenscast.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -1), radius=0.5, material_id=0)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from lenscast.core.interval import Interval, surrounds
from lenscast.core.ray import Ray, ray_at
from lenscast.geometry.hittable import HitRecord, face_normal, make_miss_record

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point, radius and scattering policy.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (non-negative).
        material_id: Id of the material shared by this sphere.
    """

    center: vec3
    radius: ti.f32
    material_id: ti.i32


@ti.func
def make_sphere(center: vec3, radius: ti.f32, material_id: ti.i32) -> Sphere:
    """Create a sphere, clamping a negative radius to zero."""
    return Sphere(center=center, radius=ti.max(radius, 0.0), material_id=material_id)


@ti.func
def hit_sphere(ray: Ray, ray_t: Interval, sphere: Sphere) -> HitRecord:
    """Test for ray-sphere intersection within an open parameter interval.

    Degenerate inputs (a zero-length ray direction or a zero radius) report
    a miss rather than dividing by zero.

    Args:
        ray: The ray to test. The direction need not be normalized.
        ray_t: Acceptable ray parameters; both endpoints are excluded.
        sphere: The sphere to test intersection against.

    Returns:
        A HitRecord for the nearest root inside ray_t. Check the hit field
        to determine if intersection occurred.
    """
    oc = sphere.center - ray.origin
    a = tm.dot(ray.direction, ray.direction)
    h = tm.dot(ray.direction, oc)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = h * h - a * c

    record = make_miss_record()

    if a > 0.0 and sphere.radius > 0.0 and discriminant >= 0.0:
        sqrtd = ti.sqrt(discriminant)

        # Nearest root first, then fall back to the far root
        root = (h - sqrtd) / a
        valid = surrounds(ray_t, root)
        if not valid:
            root = (h + sqrtd) / a
            valid = surrounds(ray_t, root)

        if valid:
            point = ray_at(ray, root)
            outward_normal = (point - sphere.center) / sphere.radius
            front_face, normal = face_normal(ray.direction, outward_normal)
            record = HitRecord(
                hit=1,
                t=root,
                point=point,
                normal=normal,
                front_face=front_face,
                material_id=sphere.material_id,
            )

    return record

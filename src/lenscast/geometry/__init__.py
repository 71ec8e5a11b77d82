"""Geometry module for intersectable surfaces.

Components:
    hittable: Hit record structure and the face-orientation rule
    sphere: Sphere primitive with analytic ray-sphere intersection

Intersection routines are Taichi functions (@ti.func) following the pattern:
    record = hit_shape(ray, interval, shape)
"""

from .hittable import HitRecord, face_normal, make_miss_record
from .sphere import Sphere, hit_sphere, make_sphere

__all__ = [
    "HitRecord",
    "face_normal",
    "make_miss_record",
    "Sphere",
    "hit_sphere",
    "make_sphere",
]

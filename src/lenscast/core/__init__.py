"""Core module: vector utilities, rays, intervals and random streams.

Components:
    ray: Ray structure and vector helpers
    interval: Open parameter intervals for hit queries
    sampler: Explicit, seedable per-pixel random streams
    integrator: Shading (ray_color) and the render loop

The integrator is not re-exported here since it depends on the camera,
scene and materials modules; import it as ``lenscast.core.integrator``.
"""

from .interval import INFINITY, Interval, surrounds
from .ray import (
    Ray,
    cross,
    dot,
    length,
    length_squared,
    make_ray,
    near_zero,
    normalize,
    ray_at,
    reflect,
    refract,
    schlick_fresnel,
    to_float,
    to_vec3_tuple,
)
from .sampler import (
    MAX_STREAMS,
    random_float,
    random_in_unit_disk,
    random_in_unit_sphere,
    random_unit_vector,
    sample_square,
    seed_streams,
)

__all__ = [
    "INFINITY",
    "Interval",
    "surrounds",
    "Ray",
    "cross",
    "dot",
    "length",
    "length_squared",
    "make_ray",
    "near_zero",
    "normalize",
    "ray_at",
    "reflect",
    "refract",
    "schlick_fresnel",
    "to_float",
    "to_vec3_tuple",
    "MAX_STREAMS",
    "random_float",
    "random_in_unit_disk",
    "random_in_unit_sphere",
    "random_unit_vector",
    "sample_square",
    "seed_streams",
]

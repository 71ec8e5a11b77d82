"""Numeric ranges for bounding ray parameters.

An Interval bounds the ray parameter ``t`` accepted by an intersection
query. Hit acceptance uses ``surrounds``, which excludes both endpoints: a
ray leaving a surface at ``t = lo`` can never re-hit that surface at the
lower bound itself.
"""

import taichi as ti

# Stand-in for an unbounded upper limit on the ray parameter
INFINITY = float("inf")


@ti.dataclass
class Interval:
    """A numeric range [lo, hi].

    Attributes:
        lo: Lower bound.
        hi: Upper bound. May be +inf.
    """

    lo: ti.f32
    hi: ti.f32


@ti.func
def surrounds(interval: Interval, x: ti.f32) -> ti.i32:
    """Open membership test: 1 iff lo < x < hi."""
    return interval.lo < x and x < interval.hi

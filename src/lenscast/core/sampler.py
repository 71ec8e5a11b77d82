"""Explicit, seedable random streams for Monte Carlo sampling.

Every random number used while rendering (anti-aliasing jitter, lens-disk
samples, scattering directions) is drawn from a *stream*: an independent
xorshift32 generator state stored in a Taichi field and addressed by an
integer stream id. The render loop assigns one stream per pixel, so parallel
pixel workers never share generator state and a render is reproducible for
a given seed.

Streams are seeded on the Python side from a NumPy ``Generator``:

    >>> seed_streams(1234)          # deterministic
    >>> seed_streams()              # fresh OS entropy

Inside kernels, pass the stream id down to any function that needs
randomness:

    >>> @ti.kernel
    ... def sample():
    ...     for i in range(16):
    ...         p = random_in_unit_disk(i)
"""

import logging

import numpy as np
import taichi as ti
import taichi.math as tm

from lenscast.core.ray import length_squared, normalize

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# One stream per pixel of the largest supported image
MAX_STREAMS = 2048 * 2048

# Upper bound on rejection-sampling attempts; the chance of exhausting it is
# below 1e-30 for the unit sphere
MAX_REJECTION_TRIES = 100

# 2^-24: converts the top 24 bits of a state into a float in [0, 1)
_INV_2_24 = 1.0 / 16777216.0

_rng_state = ti.field(dtype=ti.u32, shape=MAX_STREAMS)


def seed_streams(seed: int | None = None) -> None:
    """Seed every random stream.

    Args:
        seed: Seed for the NumPy generator that draws the initial states.
            None draws fresh entropy from the OS, so renders are not
            reproducible.
    """
    rng = np.random.default_rng(seed)
    # xorshift has a fixed point at zero, so states are drawn from [1, 2^32)
    states = rng.integers(1, 2**32, size=MAX_STREAMS, dtype=np.uint32)
    _rng_state.from_numpy(states)
    logger.debug("Seeded %d random streams (seed=%s)", MAX_STREAMS, seed)


@ti.func
def next_u32(stream: ti.i32) -> ti.u32:
    """Advance a stream's xorshift32 state and return it."""
    x = _rng_state[stream]
    x ^= x << ti.u32(13)
    x ^= ti.bit_shr(x, ti.u32(17))
    x ^= x << ti.u32(5)
    _rng_state[stream] = x
    return x


@ti.func
def random_float(stream: ti.i32) -> ti.f32:
    """Draw a uniform float in [0, 1) from a stream."""
    return ti.cast(ti.bit_shr(next_u32(stream), ti.u32(8)), ti.f32) * _INV_2_24


@ti.func
def random_range(stream: ti.i32, lo: ti.f32, hi: ti.f32) -> ti.f32:
    """Draw a uniform float in [lo, hi) from a stream."""
    return lo + (hi - lo) * random_float(stream)


@ti.func
def random_vec3(stream: ti.i32, lo: ti.f32, hi: ti.f32) -> vec3:
    """Draw a vector with each component uniform in [lo, hi)."""
    x = random_range(stream, lo, hi)
    y = random_range(stream, lo, hi)
    z = random_range(stream, lo, hi)
    return vec3(x, y, z)


@ti.func
def sample_square(stream: ti.i32) -> vec3:
    """Random offset in the [-0.5, 0.5] x [-0.5, 0.5] square (z = 0)."""
    x = random_float(stream) - 0.5
    y = random_float(stream) - 0.5
    return vec3(x, y, 0.0)


@ti.func
def random_in_unit_sphere(stream: ti.i32) -> vec3:
    """Generate a random point inside the unit sphere.

    Uses rejection sampling in the enclosing cube. Points too close to the
    center are rejected as well so that the result can be normalized safely.

    Returns:
        A random point with 1e-12 < |p|^2 < 1.
    """
    p = vec3(0.0, 0.0, 0.0)
    found = 0
    for _ in range(MAX_REJECTION_TRIES):
        if found == 0:
            p = random_vec3(stream, -1.0, 1.0)
            lensq = length_squared(p)
            if lensq > 1e-12 and lensq < 1.0:
                found = 1
    return p


@ti.func
def random_unit_vector(stream: ti.i32) -> vec3:
    """Generate a random unit vector uniformly distributed on the sphere."""
    return normalize(random_in_unit_sphere(stream))


@ti.func
def random_in_unit_disk(stream: ti.i32) -> vec3:
    """Generate a random point inside the unit disk in the xy-plane.

    Used for thin-lens (depth of field) origin sampling.

    Returns:
        A random point (x, y, 0) with x^2 + y^2 < 1.
    """
    p = vec3(0.0, 0.0, 0.0)
    found = 0
    for _ in range(MAX_REJECTION_TRIES):
        if found == 0:
            x = random_range(stream, -1.0, 1.0)
            y = random_range(stream, -1.0, 1.0)
            p = vec3(x, y, 0.0)
            if x * x + y * y < 1.0:
                found = 1
    return p

"""Monte Carlo shading and the scanline render loop.

Each camera sample is shaded by following a single path through the scene:
at every surface hit the material decides whether the ray is absorbed or
scattered, and the scattered ray's contribution is multiplied by the
material's attenuation. A path that escapes the scene picks up the sky
gradient; a path that is absorbed or runs out of bounces contributes black.
Since Taichi functions cannot recurse, the recurrence

    ray_color(r, d) = attenuation * ray_color(scattered, d - 1)

is unrolled into a loop that carries the running attenuation product.

The render loop walks the image top-to-bottom, one kernel launch per
scanline; pixels of a scanline are shaded in parallel, each on its own
random stream.

Example:
    >>> import sys
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from lenscast.core.integrator import render
    >>> from lenscast.scene.demo import create_demo_scene
    >>>
    >>> scene, camera = create_demo_scene()
    >>> image = render(camera, scene, sys.stdout, seed=7)
"""

import logging
import time
from collections.abc import Callable
from typing import TextIO

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from lenscast.camera.camera import MAX_IMAGE_WIDTH, Camera, get_ray, setup_camera
from lenscast.core.interval import INFINITY, Interval
from lenscast.core.ray import Ray, make_ray
from lenscast.core.sampler import seed_streams
from lenscast.materials.registry import scatter
from lenscast.output.image import write_ppm
from lenscast.scene.world import Scene, hit_world

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# Lower bound of accepted hits; keeps scattered rays from re-hitting the
# surface they start on due to floating-point error
T_MIN = 0.001

# Sky gradient endpoints
SKY_WHITE = vec3(1.0, 1.0, 1.0)
SKY_BLUE = vec3(0.5, 0.7, 1.0)

ProgressCallback = Callable[[int], None]

# One scanline of linear colors
_scanline = ti.Vector.field(3, dtype=ti.f32, shape=MAX_IMAGE_WIDTH)


# =============================================================================
# Shading
# =============================================================================


@ti.func
def background_color(direction: vec3) -> vec3:
    """Sky color seen along a direction: white at the horizon, blue above."""
    unit_direction = tm.normalize(direction)
    a = 0.5 * (unit_direction.y + 1.0)
    return (1.0 - a) * SKY_WHITE + a * SKY_BLUE


@ti.func
def ray_color(ray: Ray, depth: ti.i32, stream: ti.i32) -> vec3:
    """Estimate the color carried back along a ray.

    Args:
        ray: The ray to shade.
        depth: Remaining bounce budget. Zero or less yields black.
        stream: Random stream id of the calling pixel.

    Returns:
        The estimated color (RGB, linear).
    """
    color = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)
    current = ray

    # Taichi doesn't support break in ti.func loops
    active = 1

    for _ in range(depth):
        if active == 1:
            rec = hit_world(current, Interval(lo=T_MIN, hi=INFINITY))

            if rec.hit == 0:
                color = throughput * background_color(current.direction)
                active = 0
            else:
                srec = scatter(current, rec, stream)
                if srec.did_scatter == 0:
                    active = 0
                else:
                    throughput *= srec.attenuation
                    current = make_ray(srec.origin, srec.direction)

    return color


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_scanline(
    j: ti.i32,
    width: ti.i32,
    samples_per_pixel: ti.i32,
    max_depth: ti.i32,
    pixel_samples_scale: ti.f32,
):
    """Render every pixel of scanline j into the scanline buffer."""
    for i in range(width):
        stream = j * width + i
        pixel_color = vec3(0.0, 0.0, 0.0)
        for _ in range(samples_per_pixel):
            ray = get_ray(i, j, stream)
            pixel_color += ray_color(ray, max_depth, stream)
        _scanline[i] = pixel_samples_scale * pixel_color


@ti.kernel
def _trace_ray(origin: vec3, direction: vec3, depth: ti.i32, stream: ti.i32) -> vec3:
    return ray_color(make_ray(origin, direction), depth, stream)


# =============================================================================
# Public Rendering API
# =============================================================================


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    depth: int,
    stream: int = 0,
) -> tuple[float, float, float]:
    """Shade a single ray against the committed scene.

    This is a Python-callable function for testing and debugging. The scene
    must have been committed and the random streams seeded.

    Args:
        origin: Ray origin.
        direction: Ray direction (need not be normalized).
        depth: Bounce budget.
        stream: Random stream id to draw from.

    Returns:
        Tuple of (R, G, B) color values.
    """
    color = _trace_ray(vec3(*origin), vec3(*direction), depth, stream)
    return (float(color[0]), float(color[1]), float(color[2]))


def render_image(
    camera: Camera,
    world: Scene,
    *,
    seed: int | None = None,
    progress: ProgressCallback | None = None,
) -> npt.NDArray[np.float32]:
    """Render a scene to a linear image.

    Sets up the camera, commits the scene and seeds the random streams
    before rendering.

    Args:
        camera: The camera configuration.
        world: The scene to render.
        seed: Seed for the random streams. None uses fresh OS entropy, so
            the render is not reproducible.
        progress: Called with the number of remaining scanlines before each
            scanline is rendered.

    Returns:
        Linear float32 image of shape (image_height, image_width, 3), rows
        top-to-bottom.

    Raises:
        ValueError: If the camera configuration is invalid.
        RuntimeError: If the scene exceeds the device capacity.
    """
    state = setup_camera(camera)
    world.commit()
    seed_streams(seed)

    width = camera.image_width
    height = state.image_height
    image = np.zeros((height, width, 3), dtype=np.float32)

    logger.info(
        "Rendering %dx%d, %d samples per pixel, max depth %d, %d spheres",
        width,
        height,
        camera.samples_per_pixel,
        camera.max_depth,
        len(world),
    )
    start_time = time.perf_counter()

    for j in range(height):
        if progress is not None:
            progress(height - j)
        _render_scanline(
            j,
            width,
            camera.samples_per_pixel,
            camera.max_depth,
            state.pixel_samples_scale,
        )
        image[j] = _scanline.to_numpy()[:width]

    logger.info("Render finished in %.2fs", time.perf_counter() - start_time)
    return image


def render(
    camera: Camera,
    world: Scene,
    out: TextIO,
    *,
    seed: int | None = None,
    progress: ProgressCallback | None = None,
) -> npt.NDArray[np.float32]:
    """Render a scene and write it to a text sink as a PPM (P3) stream.

    Args:
        camera: The camera configuration.
        world: The scene to render.
        out: Text sink for the pixel stream.
        seed: Seed for the random streams (see render_image).
        progress: Progress callback (see render_image).

    Returns:
        The linear image that was written.
    """
    image = render_image(camera, world, seed=seed, progress=progress)
    write_ppm(image, out)
    return image

"""Thin-lens camera model and primary ray generation.

The camera builds an orthonormal basis (u, v, w) from the view parameters:

- w: points from lookat toward lookfrom (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

The viewport is placed at ``focus_dist`` along -w, so objects at that
distance are in perfect focus. Pixel (0, 0) is the upper-left pixel; i grows
to the right and j grows downward. With a positive ``defocus_angle`` ray
origins are spread over a lens disk of radius
``focus_dist * tan(defocus_angle / 2)`` around the camera center, producing
depth of field.

Setup runs once per render on the Python side with NumPy; ray generation is
a Taichi function reading the uploaded state.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from lenscast.camera.camera import Camera, setup_camera, get_ray
    >>>
    >>> camera = Camera(image_width=200, aspect_ratio=16.0 / 9.0, vfov=60.0)
    >>> state = setup_camera(camera)
    >>> state.image_height
    112
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(0, 0, 0)  # Jittered ray through the upper-left pixel
"""

import logging
import math
from dataclasses import asdict, dataclass, fields
from typing import Any

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from lenscast.core.ray import Ray, make_ray, to_vec3_tuple
from lenscast.core.sampler import random_in_unit_disk, sample_square

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# Largest image the preallocated render buffers can hold
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_INT_FIELDS = ("image_width", "samples_per_pixel", "max_depth")
_FLOAT_FIELDS = ("aspect_ratio", "vfov", "defocus_angle", "focus_dist")
_VECTOR_FIELDS = ("lookfrom", "lookat", "vup")

Vec3Tuple = tuple[float, float, float]


# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class Camera:
    """Configuration for a thin-lens camera.

    Attributes:
        aspect_ratio: Ratio of image width over height.
        image_width: Rendered image width in pixels.
        samples_per_pixel: Count of random samples for each pixel.
        max_depth: Maximum number of ray bounces into the scene.
        vfov: Vertical view angle (field of view) in degrees.
        lookfrom: Point the camera is looking from.
        lookat: Point the camera is looking at.
        vup: Camera-relative "up" direction.
        defocus_angle: Variation angle of rays through each pixel, in
            degrees. 0 disables depth of field.
        focus_dist: Distance from lookfrom to the plane of perfect focus.
    """

    aspect_ratio: float = 1.0
    image_width: int = 100
    samples_per_pixel: int = 10
    max_depth: int = 10
    vfov: float = 90.0
    lookfrom: Vec3Tuple = (0.0, 0.0, 0.0)
    lookat: Vec3Tuple = (0.0, 0.0, -1.0)
    vup: Vec3Tuple = (0.0, 1.0, 0.0)
    defocus_angle: float = 0.0
    focus_dist: float = 10.0

    @property
    def image_height(self) -> int:
        """Image height in pixels, at least 1."""
        return max(1, int(self.image_width / self.aspect_ratio))

    def validate(self) -> None:
        """Check the configuration.

        Raises:
            ValueError: If any parameter is out of range or the view
                vectors are degenerate, or a field has the wrong type.
        """
        for name in _INT_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise ValueError(f"{name} must be an integer, got {value!r}")
        for name in _FLOAT_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(
                value, (int, float, np.integer, np.floating)
            ):
                raise ValueError(f"{name} must be a number, got {value!r}")
        for name in _VECTOR_FIELDS:
            to_vec3_tuple(getattr(self, name), name)

        if self.image_width < 1:
            raise ValueError(f"image_width must be at least 1, got {self.image_width}")
        if self.aspect_ratio <= 0.0:
            raise ValueError(f"aspect_ratio must be positive, got {self.aspect_ratio}")
        if self.samples_per_pixel <= 0:
            raise ValueError(
                f"samples_per_pixel must be positive, got {self.samples_per_pixel}"
            )
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")
        if not 0.0 < self.vfov < 180.0:
            raise ValueError(f"vfov must be in (0, 180) degrees, got {self.vfov}")
        if self.focus_dist <= 0.0:
            raise ValueError(f"focus_dist must be positive, got {self.focus_dist}")
        if self.image_width > MAX_IMAGE_WIDTH or self.image_height > MAX_IMAGE_HEIGHT:
            raise ValueError(
                f"Image dimensions ({self.image_width}x{self.image_height}) exceed "
                f"maximum supported ({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
            )

        view = np.subtract(self.lookfrom, self.lookat).astype(np.float64)
        if np.linalg.norm(view) == 0.0:
            raise ValueError("lookfrom and lookat must be distinct points")
        if np.linalg.norm(np.cross(self.vup, view)) < 1e-12:
            raise ValueError("vup must not be parallel to the view direction")

    def to_dict(self) -> dict[str, Any]:
        """Export the configuration to a dictionary (for JSON serialization)."""
        data = asdict(self)
        for key in _VECTOR_FIELDS:
            data[key] = list(data[key])
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Camera":
        """Create a configuration from a dictionary.

        Missing keys keep their defaults.

        Raises:
            ValueError: If the dictionary contains an unknown key or a
                point or vector that is not three numbers.
        """
        if not isinstance(data, dict):
            raise ValueError(
                f"Camera configuration must be a mapping, got {type(data).__name__}"
            )
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown camera parameters: {sorted(unknown)}")
        kwargs = dict(data)
        for key in _VECTOR_FIELDS:
            if key in kwargs:
                kwargs[key] = to_vec3_tuple(kwargs[key], key)
        return cls(**kwargs)


@dataclass(frozen=True, eq=False)
class CameraState:
    """Render-time constants derived from a Camera configuration.

    Attributes:
        image_height: Rendered image height in pixels.
        pixel_samples_scale: Color scale factor for a sum of pixel samples.
        center: Camera center (equal to lookfrom).
        u: Camera frame basis vector pointing right.
        v: Camera frame basis vector pointing up.
        w: Camera frame basis vector pointing opposite the view direction.
        pixel_delta_u: Offset to the pixel to the right.
        pixel_delta_v: Offset to the pixel below.
        pixel00_loc: Location of the center of pixel (0, 0).
        defocus_disk_u: Defocus disk horizontal radius vector.
        defocus_disk_v: Defocus disk vertical radius vector.
        viewport_width: Viewport width in world units.
        viewport_height: Viewport height in world units.
    """

    image_height: int
    pixel_samples_scale: float
    center: npt.NDArray[np.float64]
    u: npt.NDArray[np.float64]
    v: npt.NDArray[np.float64]
    w: npt.NDArray[np.float64]
    pixel_delta_u: npt.NDArray[np.float64]
    pixel_delta_v: npt.NDArray[np.float64]
    pixel00_loc: npt.NDArray[np.float64]
    defocus_disk_u: npt.NDArray[np.float64]
    defocus_disk_v: npt.NDArray[np.float64]
    viewport_width: float
    viewport_height: float


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_center = ti.Vector.field(3, dtype=ti.f32, shape=())
_pixel00_loc = ti.Vector.field(3, dtype=ti.f32, shape=())
_pixel_delta_u = ti.Vector.field(3, dtype=ti.f32, shape=())
_pixel_delta_v = ti.Vector.field(3, dtype=ti.f32, shape=())
_defocus_disk_u = ti.Vector.field(3, dtype=ti.f32, shape=())
_defocus_disk_v = ti.Vector.field(3, dtype=ti.f32, shape=())
_defocus_angle = ti.field(dtype=ti.f32, shape=())


# =============================================================================
# Camera Setup (Python-side, called once per render)
# =============================================================================


def initialize_camera(camera: Camera) -> CameraState:
    """Derive the render-time camera state from a configuration.

    Args:
        camera: The camera configuration.

    Returns:
        The derived CameraState. The configuration is not modified.

    Raises:
        ValueError: If the configuration is invalid (see Camera.validate).
    """
    camera.validate()

    image_width = camera.image_width
    image_height = camera.image_height
    center = np.array(camera.lookfrom, dtype=np.float64)

    # Viewport dimensions at the focus distance
    theta = math.radians(camera.vfov)
    h = math.tan(theta / 2.0)
    viewport_height = 2.0 * h * camera.focus_dist
    viewport_width = viewport_height * (image_width / image_height)

    # Orthonormal basis for the camera frame
    lookat = np.array(camera.lookat, dtype=np.float64)
    vup = np.array(camera.vup, dtype=np.float64)
    w = center - lookat
    w = w / np.linalg.norm(w)
    u = np.cross(vup, w)
    u = u / np.linalg.norm(u)
    v = np.cross(w, u)

    # Vectors across the horizontal and down the vertical viewport edges
    viewport_u = viewport_width * u
    viewport_v = viewport_height * -v

    pixel_delta_u = viewport_u / image_width
    pixel_delta_v = viewport_v / image_height

    viewport_upper_left = center - camera.focus_dist * w - viewport_u / 2.0 - viewport_v / 2.0
    pixel00_loc = viewport_upper_left + 0.5 * (pixel_delta_u + pixel_delta_v)

    defocus_radius = camera.focus_dist * math.tan(math.radians(camera.defocus_angle / 2.0))

    return CameraState(
        image_height=image_height,
        pixel_samples_scale=1.0 / camera.samples_per_pixel,
        center=center,
        u=u,
        v=v,
        w=w,
        pixel_delta_u=pixel_delta_u,
        pixel_delta_v=pixel_delta_v,
        pixel00_loc=pixel00_loc,
        defocus_disk_u=u * defocus_radius,
        defocus_disk_v=v * defocus_radius,
        viewport_width=viewport_width,
        viewport_height=viewport_height,
    )


def setup_camera(camera: Camera) -> CameraState:
    """Initialize the camera and upload its state for ``get_ray``.

    Must be called again whenever the configuration changes.

    Args:
        camera: The camera configuration.

    Returns:
        The derived CameraState.

    Raises:
        ValueError: If the configuration is invalid.
    """
    state = initialize_camera(camera)

    _camera_center[None] = state.center.tolist()
    _pixel00_loc[None] = state.pixel00_loc.tolist()
    _pixel_delta_u[None] = state.pixel_delta_u.tolist()
    _pixel_delta_v[None] = state.pixel_delta_v.tolist()
    _defocus_disk_u[None] = state.defocus_disk_u.tolist()
    _defocus_disk_v[None] = state.defocus_disk_v.tolist()
    _defocus_angle[None] = camera.defocus_angle

    logger.debug(
        "Camera set up: %dx%d, vfov=%.1f, defocus_angle=%.1f, focus_dist=%.3f",
        camera.image_width,
        state.image_height,
        camera.vfov,
        camera.defocus_angle,
        camera.focus_dist,
    )
    return state


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def defocus_disk_sample(stream: ti.i32) -> vec3:
    """Random point on the camera's lens disk."""
    p = random_in_unit_disk(stream)
    return _camera_center[None] + p.x * _defocus_disk_u[None] + p.y * _defocus_disk_v[None]


@ti.func
def get_ray(i: ti.i32, j: ti.i32, stream: ti.i32) -> Ray:
    """Generate a jittered camera ray for pixel (i, j).

    The ray originates from the lens disk (or the camera center when depth
    of field is disabled) and is directed at a random point inside the
    pixel's square footprint on the focus plane.

    Args:
        i: Pixel column (0 = left).
        j: Pixel row (0 = top).
        stream: Random stream id of the calling pixel.

    Returns:
        A Ray with an unnormalized direction.
    """
    offset = sample_square(stream)
    pixel_sample = (
        _pixel00_loc[None]
        + (ti.cast(i, ti.f32) + offset.x) * _pixel_delta_u[None]
        + (ti.cast(j, ti.f32) + offset.y) * _pixel_delta_v[None]
    )

    ray_origin = _camera_center[None]
    if _defocus_angle[None] > 0.0:
        ray_origin = defocus_disk_sample(stream)

    return make_ray(ray_origin, pixel_sample - ray_origin)


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, Vec3Tuple]:
    """Get the uploaded camera state for debugging.

    Returns:
        Dictionary with center, pixel00_loc, pixel_delta_u, pixel_delta_v,
        defocus_disk_u and defocus_disk_v.
    """
    info = {
        "center": _camera_center[None],
        "pixel00_loc": _pixel00_loc[None],
        "pixel_delta_u": _pixel_delta_u[None],
        "pixel_delta_v": _pixel_delta_v[None],
        "defocus_disk_u": _defocus_disk_u[None],
        "defocus_disk_v": _defocus_disk_v[None],
    }
    return {key: (float(vec[0]), float(vec[1]), float(vec[2])) for key, vec in info.items()}

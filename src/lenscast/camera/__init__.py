"""Camera module: configuration, basis construction and primary rays.

Components:
    camera: Thin-lens camera with defocus blur and jittered sampling
"""

from .camera import (
    MAX_IMAGE_HEIGHT,
    MAX_IMAGE_WIDTH,
    Camera,
    CameraState,
    get_camera_info,
    get_ray,
    initialize_camera,
    setup_camera,
)

__all__ = [
    "Camera",
    "CameraState",
    "MAX_IMAGE_WIDTH",
    "MAX_IMAGE_HEIGHT",
    "initialize_camera",
    "setup_camera",
    "get_ray",
    "get_camera_info",
]

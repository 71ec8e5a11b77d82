"""Output module: gamma correction and image sinks.

Components:
    image: Color writer (gamma, clamp, quantize), PPM and PNG export
"""

from .image import compute_rmse, linear_to_gamma, save_png, to_bytes, write_ppm

__all__ = [
    "compute_rmse",
    "linear_to_gamma",
    "save_png",
    "to_bytes",
    "write_ppm",
]

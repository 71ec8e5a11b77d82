"""Color writer and image sinks for rendered images.

Rendered images are linear float32 arrays of shape (H, W, 3), rows
top-to-bottom. Before output each component goes through the same mapping:

    gamma:     c -> sqrt(c) for c > 0, else 0   (gamma 2)
    clamp:     c -> min(max(c, 0), 0.999)
    quantize:  c -> int(256 * c)

which yields bytes in [0, 255].

Supported formats:
    - PPM (plain-text P3 pixel stream)
    - PNG (8-bit via Pillow)

Example:
    >>> import sys
    >>> from lenscast.output.image import write_ppm, save_png
    >>> write_ppm(image, sys.stdout)
    >>> save_png(image, "output.png")
"""

from __future__ import annotations

from typing import TextIO

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

# Upper clamp keeps int(256 * c) below 256
INTENSITY_MAX = 0.999


def linear_to_gamma(
    image: npt.NDArray[np.floating[npt.NBitBase]],
) -> npt.NDArray[np.float64]:
    """Apply gamma-2 correction; non-positive components map to 0."""
    linear = np.asarray(image, dtype=np.float64)
    return np.sqrt(np.maximum(linear, 0.0))


def to_bytes(image: npt.NDArray[np.floating[npt.NBitBase]]) -> npt.NDArray[np.uint8]:
    """Convert a linear image to 8-bit components.

    Args:
        image: Linear image array of shape (H, W, 3).

    Returns:
        Array of the same shape with dtype uint8.
    """
    gamma = linear_to_gamma(image)
    clamped = np.clip(gamma, 0.0, INTENSITY_MAX)
    return (256.0 * clamped).astype(np.uint8)


def _check_shape(image: npt.NDArray[np.floating[npt.NBitBase]]) -> None:
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Image must have shape (H, W, 3), got {image.shape}")


def write_ppm(image: npt.NDArray[np.floating[npt.NBitBase]], out: TextIO) -> None:
    """Write a linear image as a plain-text PPM (P3) stream.

    The stream holds the header lines ``P3``, ``<width> <height>`` and
    ``255``, then one ``r g b`` line per pixel, rows top-to-bottom.

    Args:
        image: Linear image array of shape (H, W, 3).
        out: Text sink to write to.

    Raises:
        ValueError: If the image does not have shape (H, W, 3).
    """
    _check_shape(image)
    height, width, _ = image.shape
    pixels = to_bytes(image).reshape(-1, 3)

    out.write(f"P3\n{width} {height}\n255\n")
    out.writelines(f"{r} {g} {b}\n" for r, g, b in pixels.tolist())


def save_png(image: npt.NDArray[np.floating[npt.NBitBase]], filepath: str) -> None:
    """Save a linear image as a PNG file.

    Applies the same gamma, clamp and quantization as ``write_ppm``.

    Args:
        image: Linear image array of shape (H, W, 3).
        filepath: Output file path (should end in .png).

    Raises:
        ValueError: If the image does not have shape (H, W, 3).
    """
    _check_shape(image)
    pil_image = PILImage.fromarray(to_bytes(image))
    pil_image.save(filepath)


def compute_rmse(
    image_a: npt.NDArray[np.floating[npt.NBitBase]],
    image_b: npt.NDArray[np.floating[npt.NBitBase]],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(
            f"Image shapes must match: {image_a.shape} vs {image_b.shape}"
        )

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))

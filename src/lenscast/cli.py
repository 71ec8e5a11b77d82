"""Command-line entry point: render a scene to a PPM or PNG image.

Usage:
    lenscast [options] > image.ppm
    python -m lenscast [options]

Options:
    --scene FILE          JSON scene description (default: built-in demo)
    --width N             Image width in pixels
    --aspect-ratio R      Image width over height
    --samples N           Samples per pixel
    --max-depth N         Maximum ray bounces
    --seed N              Seed for the random streams (default: OS entropy)
    --threads N           Maximum number of CPU threads
    --output PATH         Output file; .png writes PNG, anything else PPM
                          (default: PPM on stdout)
    --quiet               Suppress progress output
    --verbose             Enable debug logging

A scene file holds an optional "camera" object with Camera fields, a
"materials" list and a "spheres" list:

    {
      "camera": {"image_width": 400, "vfov": 20, "lookfrom": [-2, 2, 1]},
      "materials": [{"type": "lambertian", "albedo": [0.8, 0.8, 0.0]},
                    {"type": "metal", "albedo": [0.8, 0.6, 0.2], "fuzz": 0.3}],
      "spheres": [{"center": [0, -100.5, -1], "radius": 100, "material": 0},
                  {"center": [0, 0, -1], "radius": 0.5, "material": 1}]
    }

Example:
    lenscast --width 200 --samples 20 --seed 1 --output spheres.png
"""

from __future__ import annotations

import argparse
import contextlib
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from lenscast.logging_config import setup_logging

if TYPE_CHECKING:
    from lenscast.camera.camera import Camera
    from lenscast.scene.world import Scene

logger = logging.getLogger(__name__)

# Command-line flags that override camera fields
_CAMERA_OVERRIDES = {
    "width": "image_width",
    "aspect_ratio": "aspect_ratio",
    "samples": "samples_per_pixel",
    "max_depth": "max_depth",
}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="lenscast",
        description="Render a scene of spheres with a Monte Carlo ray tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene description (default: built-in demo scene)",
    )
    parser.add_argument("--width", type=int, default=None, help="Image width in pixels")
    parser.add_argument(
        "--aspect-ratio",
        type=float,
        default=None,
        help="Image width divided by height",
    )
    parser.add_argument("--samples", type=int, default=None, help="Samples per pixel")
    parser.add_argument("--max-depth", type=int, default=None, help="Maximum ray bounces")
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the random streams (default: fresh OS entropy)",
    )
    parser.add_argument(
        "--threads",
        type=int,
        default=None,
        help="Maximum number of CPU threads used by Taichi",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output file path; .png writes PNG, otherwise PPM (default: stdout)",
    )
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def init_taichi(threads: int | None = None) -> None:
    """Initialize Taichi on the CPU backend."""
    # Taichi prints its banner to stdout, which may carry the image
    with contextlib.redirect_stdout(sys.stderr):
        import taichi as ti

        kwargs: dict[str, Any] = {"arch": ti.cpu, "log_level": ti.WARN}
        if threads is not None:
            if threads < 1:
                raise ValueError(f"threads must be at least 1, got {threads}")
            kwargs["cpu_max_num_threads"] = threads
        ti.init(**kwargs)


def load_scene(path: str | None) -> tuple[Scene, Camera]:
    """Load a scene and camera from a JSON file, or the demo scene.

    Raises:
        ValueError: If the file is not valid JSON or describes an invalid
            scene.
        OSError: If the file cannot be read.
    """
    # Lazy imports to allow Taichi initialization first
    from lenscast.camera.camera import Camera
    from lenscast.scene.demo import create_demo_scene
    from lenscast.scene.world import Scene

    if path is None:
        logger.debug("Using the built-in demo scene")
        return create_demo_scene()

    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Scene file must contain a JSON object: {path}")

    scene = Scene.from_dict(data)
    camera = Camera.from_dict(data.get("camera", {}))
    logger.debug("Loaded %d spheres from %s", len(scene), path)
    return scene, camera


def apply_overrides(camera: Camera, args: argparse.Namespace) -> None:
    """Replace camera fields with the values given on the command line."""
    for arg_name, field_name in _CAMERA_OVERRIDES.items():
        value = getattr(args, arg_name)
        if value is not None:
            setattr(camera, field_name, value)


def _print_progress(remaining: int) -> None:
    print(f"\rScanlines remaining: {remaining} ", end="", file=sys.stderr, flush=True)


def run(args: argparse.Namespace) -> None:
    """Render according to parsed arguments and write the image."""
    from lenscast.core.integrator import render_image
    from lenscast.output.image import save_png, write_ppm

    scene, camera = load_scene(args.scene)
    apply_overrides(camera, args)

    progress = None if args.quiet else _print_progress
    image = render_image(camera, scene, seed=args.seed, progress=progress)
    if not args.quiet:
        print("\rDone.                 ", file=sys.stderr, flush=True)

    if args.output is None:
        write_ppm(image, sys.stdout)
        sys.stdout.flush()
    elif Path(args.output).suffix.lower() == ".png":
        save_png(image, args.output)
        logger.info("Saved to: %s", Path(args.output).absolute())
    else:
        with open(args.output, "w", encoding="ascii") as f:
            write_ppm(image, f)
        logger.info("Saved to: %s", Path(args.output).absolute())


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging("DEBUG" if args.verbose else "WARNING")

    try:
        init_taichi(args.threads)
        run(args)
        return 0
    except (ValueError, RuntimeError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

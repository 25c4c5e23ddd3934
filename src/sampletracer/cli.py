"""Command-line interface for rendering a preset scene.

Usage:
    python -m sampletracer [options]

Options:
    --scene NAME        Preset scene: three-spheres or random-spheres
    --width WIDTH       Image width in pixels (default: scene's own)
    --samples SAMPLES   Samples per pixel (default: scene's own)
    --max-depth DEPTH   Maximum bounces per path (default: scene's own)
    --threads N         CPU worker threads (default: 16)
    --seed SEED         Random seed for scene layout and sampling (default: 0)
    --output PATH       '-' for P3 on stdout, or a .ppm/.png file (default: -)
    --binary            Write binary P6 instead of text P3 for PPM output
    --quiet             Only log warnings and errors
    --log-level LEVEL   Logging level (default: INFO)

Example:
    python -m sampletracer --scene three-spheres --width 200 --samples 20 --output spheres.png
"""

from __future__ import annotations

import argparse
import contextlib
import logging
import sys
import time
from pathlib import Path

from sampletracer.runtime import DEFAULT_NUM_THREADS, init_runtime

logger = logging.getLogger(__name__)

SCENE_NAMES = ("three-spheres", "random-spheres")


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="sampletracer",
        description="Render a preset scene with stochastic ray tracing.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--scene",
        choices=SCENE_NAMES,
        default="three-spheres",
        help="Preset scene to render (default: three-spheres)",
    )
    parser.add_argument("--width", type=int, default=None, help="Image width in pixels")
    parser.add_argument("--samples", type=int, default=None, help="Samples per pixel")
    parser.add_argument("--max-depth", type=int, default=None, help="Maximum bounces per path")
    parser.add_argument(
        "--threads",
        type=int,
        default=DEFAULT_NUM_THREADS,
        help=f"CPU worker threads (default: {DEFAULT_NUM_THREADS})",
    )
    parser.add_argument("--seed", type=int, default=0, help="Random seed (default: 0)")
    parser.add_argument(
        "--output",
        type=str,
        default="-",
        help="'-' for PPM on stdout, or a .ppm/.png file path (default: -)",
    )
    parser.add_argument(
        "--binary",
        action="store_true",
        help="Write binary P6 instead of text P3 for PPM output",
    )
    parser.add_argument("--quiet", action="store_true", help="Only log warnings and errors")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging level (default: INFO)",
    )
    return parser


def config_overrides(args: argparse.Namespace) -> dict[str, int]:
    """Collect the CameraConfig fields overridden on the command line."""
    overrides = {}
    if args.width is not None:
        overrides["image_width"] = args.width
    if args.samples is not None:
        overrides["samples_per_pixel"] = args.samples
    if args.max_depth is not None:
        overrides["max_depth"] = args.max_depth
    return overrides


def render_scene(args: argparse.Namespace):
    """Build the requested scene and render it to the requested output.

    The Taichi runtime must already be initialized.

    Returns:
        The rendered linear image.
    """
    # Lazy imports so Taichi is initialized before fields are allocated
    from sampletracer.camera.camera import Camera
    from sampletracer.output.export import save_image
    from sampletracer.output.ppm import PPMWriter
    from sampletracer.scene.presets import random_spheres_scene, three_spheres_scene

    if args.scene == "random-spheres":
        world, config = random_spheres_scene(seed=args.seed)
    else:
        world, config = three_spheres_scene()

    config = config.with_overrides(**config_overrides(args))
    logger.info("Scene '%s': %d spheres", args.scene, world.sphere_count)

    camera = Camera(config)
    show_progress = not args.quiet

    if args.output == "-":
        stream = sys.stdout.buffer if args.binary else sys.stdout
        return camera.render(world, PPMWriter(stream, binary=args.binary), progress=show_progress)

    image = camera.render(world, progress=show_progress)
    path = save_image(image, args.output, binary=args.binary)
    logger.info("Saved to: %s", Path(path).absolute())
    return image


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    level = logging.WARNING if args.quiet else getattr(logging, args.log_level)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)

    try:
        # Taichi prints its banner to stdout, which may carry the image
        with contextlib.redirect_stdout(sys.stderr):
            init_runtime(num_threads=args.threads, seed=args.seed)
        start_time = time.time()
        render_scene(args)
        logger.info("Total time: %.2fs", time.time() - start_time)
        return 0
    except (ValueError, RuntimeError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

#!/usr/bin/env python3
"""Render a small hand-built sphere scene with depth of field.

This script shows the library API without the CLI: it initializes the
runtime, builds a World with one sphere of each material kind, frames it
with a thin-lens camera focused on the middle sphere and writes a PNG.

Usage:
    python examples/render_spheres.py [options]

Options:
    --width WIDTH       Image width in pixels (default: 320)
    --samples SAMPLES   Number of samples per pixel (default: 32)
    --aperture DEGREES  Defocus angle in degrees, 0 for a pinhole (default: 2.0)
    --output OUTPUT     Output file path (default: spheres.png)
    --threads N         CPU worker threads (default: 16)
    --quiet             Suppress progress output

Example:
    python examples/render_spheres.py --width 200 --samples 16 --aperture 0
"""

from __future__ import annotations

import argparse
import logging
import math
import time
from pathlib import Path

from sampletracer.runtime import DEFAULT_NUM_THREADS, init_runtime

logger = logging.getLogger("render_spheres")


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a small sphere scene with depth of field.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--width", type=int, default=320, help="Image width (default: 320)")
    parser.add_argument(
        "--samples", type=int, default=32, help="Samples per pixel (default: 32)"
    )
    parser.add_argument(
        "--aperture",
        type=float,
        default=2.0,
        help="Defocus angle in degrees, 0 for a pinhole (default: 2.0)",
    )
    parser.add_argument(
        "--output", type=str, default="spheres.png", help="Output file (default: spheres.png)"
    )
    parser.add_argument(
        "--threads",
        type=int,
        default=DEFAULT_NUM_THREADS,
        help=f"CPU worker threads (default: {DEFAULT_NUM_THREADS})",
    )
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    return parser.parse_args()


def build_world():
    """Create a row of spheres on a ground sphere.

    Returns:
        Tuple of (world, center of the focused sphere).
    """
    from sampletracer.scene.world import World

    world = World()
    materials = world.materials

    ground = materials.add_lambertian((0.5, 0.6, 0.5))
    matte = materials.add_lambertian((0.7, 0.2, 0.2))
    glass = materials.add_dielectric(1.5)
    gold = materials.add_metal((0.8, 0.6, 0.2), fuzz=0.05)
    steel = materials.add_metal((0.7, 0.7, 0.75), fuzz=0.4)

    world.add_sphere((0.0, -1000.0, 0.0), 1000.0, ground)
    world.add_sphere((-2.2, 0.7, 0.0), 0.7, matte)
    world.add_sphere((0.0, 1.0, 0.0), 1.0, glass)
    world.add_sphere((2.2, 0.7, 0.0), 0.7, gold)
    world.add_sphere((0.0, 0.4, 2.5), 0.4, steel)
    return world, (0.0, 1.0, 0.0)


def main() -> int:
    """Main entry point."""
    args = parse_args()
    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    init_runtime(num_threads=args.threads, seed=1)

    from sampletracer.camera import Camera, CameraConfig
    from sampletracer.output import save_image

    world, focus_point = build_world()
    lookfrom = (0.0, 2.0, 8.0)
    config = CameraConfig(
        aspect_ratio=16.0 / 9.0,
        image_width=args.width,
        samples_per_pixel=args.samples,
        max_depth=20,
        vfov=35.0,
        lookfrom=lookfrom,
        lookat=focus_point,
        defocus_angle=args.aperture,
        focus_dist=math.dist(lookfrom, focus_point),
    )

    start_time = time.time()
    image = Camera(config).render(world, progress=not args.quiet)
    logger.info("Render time: %.2fs", time.time() - start_time)

    path = save_image(image, args.output)
    logger.info("Saved to: %s", Path(path).absolute())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

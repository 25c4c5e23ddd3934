"""Ready-made scenes.

Each factory builds a World with its materials and returns it together with
a CameraConfig framing the scene.

Scenes:
    three_spheres_scene: diffuse, hollow glass and fuzzy metal spheres on a
        large ground sphere, with depth of field.
    random_spheres_scene: a field of small random spheres around three
        large ones (diffuse, glass, mirror).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from sampletracer.scene.presets import random_spheres_scene
    >>> world, config = random_spheres_scene(seed=3)
    >>> world.sphere_count > 4
    True
"""

import numpy as np

from sampletracer.camera.config import CameraConfig
from sampletracer.scene.world import World

# Number of small spheres per grid axis in the random scene: a, b in [-N, N)
RANDOM_GRID_HALF_EXTENT = 11


def three_spheres_scene() -> tuple[World, CameraConfig]:
    """Create three spheres on a ground sphere.

    The left sphere is hollow glass: an outer sphere with refraction index
    1.5 and an inner air bubble with index 1/1.5.

    Returns:
        Tuple of (world, camera configuration).
    """
    world = World()
    materials = world.materials

    ground = materials.add_lambertian((0.8, 0.8, 0.0))
    center = materials.add_lambertian((0.1, 0.2, 0.5))
    left = materials.add_dielectric(1.5)
    bubble = materials.add_dielectric(1.0 / 1.5)
    right = materials.add_metal((0.8, 0.6, 0.2), fuzz=1.0)

    world.add_sphere((0.0, -100.5, -1.0), 100.0, ground)
    world.add_sphere((0.0, 0.0, -1.2), 0.5, center)
    world.add_sphere((-1.0, 0.0, -1.0), 0.5, left)
    world.add_sphere((-1.0, 0.0, -1.0), 0.4, bubble)
    world.add_sphere((1.0, 0.0, -1.0), 0.5, right)

    config = CameraConfig(
        aspect_ratio=16.0 / 9.0,
        image_width=400,
        samples_per_pixel=100,
        max_depth=50,
        vfov=20.0,
        lookfrom=(-2.0, 2.0, 1.0),
        lookat=(0.0, 0.0, -1.0),
        vup=(0.0, 1.0, 0.0),
        defocus_angle=10.0,
        focus_dist=3.4,
    )
    return world, config


def random_spheres_scene(seed: int | None = None) -> tuple[World, CameraConfig]:
    """Create the random sphere field.

    Small spheres of radius 0.2 are scattered on a 22x22 grid with random
    jitter. Each gets its own material: 80% diffuse, 15% metal, 5% glass.
    Spheres too close to the large metal sphere are skipped.

    Args:
        seed: Seed for NumPy's default_rng. None draws fresh entropy.

    Returns:
        Tuple of (world, camera configuration).
    """
    rng = np.random.default_rng(seed)
    world = World()
    materials = world.materials

    ground = materials.add_lambertian((0.5, 0.5, 0.5))
    world.add_sphere((0.0, -1000.0, 0.0), 1000.0, ground)

    clearance_point = np.array([4.0, 0.2, 0.0])
    for a in range(-RANDOM_GRID_HALF_EXTENT, RANDOM_GRID_HALF_EXTENT):
        for b in range(-RANDOM_GRID_HALF_EXTENT, RANDOM_GRID_HALF_EXTENT):
            choose_mat = rng.random()
            center = np.array([a + 0.9 * rng.random(), 0.2, b + 0.9 * rng.random()])

            if np.linalg.norm(center - clearance_point) <= 0.9:
                continue

            if choose_mat < 0.8:
                # diffuse
                albedo = rng.random(3) * rng.random(3)
                material = materials.add_lambertian(tuple(albedo))
            elif choose_mat < 0.95:
                # metal
                albedo = rng.uniform(0.5, 1.0, 3)
                fuzz = rng.uniform(0.0, 0.5)
                material = materials.add_metal(tuple(albedo), fuzz=fuzz)
            else:
                # glass
                material = materials.add_dielectric(1.5)

            world.add_sphere(tuple(center), 0.2, material)

    glass = materials.add_dielectric(1.5)
    world.add_sphere((0.0, 1.0, 0.0), 1.0, glass)

    diffuse = materials.add_lambertian((0.4, 0.2, 0.1))
    world.add_sphere((-4.0, 1.0, 0.0), 1.0, diffuse)

    mirror = materials.add_metal((0.7, 0.6, 0.5), fuzz=0.0)
    world.add_sphere((4.0, 1.0, 0.0), 1.0, mirror)

    config = CameraConfig(
        aspect_ratio=16.0 / 9.0,
        image_width=1200,
        samples_per_pixel=500,
        max_depth=50,
        vfov=20.0,
        lookfrom=(13.0, 2.0, 3.0),
        lookat=(0.0, 0.0, 0.0),
        vup=(0.0, 1.0, 0.0),
        defocus_angle=0.6,
        focus_dist=10.0,
    )
    return world, config


SCENES = {
    "three-spheres": three_spheres_scene,
    "random-spheres": random_spheres_scene,
}

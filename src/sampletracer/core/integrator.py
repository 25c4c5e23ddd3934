"""Light transport integrator.

``ray_color`` maps a ray and a bounce budget to a radiance estimate:

    ray_color(ray, depth) = black                                   if depth <= 0
                          = background(ray.direction)               if the ray escapes
                          = black                                   if the hit absorbs it
                          = attenuation * ray_color(scattered, depth - 1)   otherwise

Taichi functions cannot recurse, so the recursion is unrolled into a loop
that carries the running product of attenuations (the throughput). The loop
runs at most ``depth`` iterations; a path still bouncing when the budget
runs out contributes nothing.

Colors are unclamped here. Clamping and gamma belong to the output layer.

The scene argument is any data-oriented object providing the Taichi
functions ``hit(ray, t_min, t_max) -> HitRecord`` (nearest hit) and
``scatter(ray, rec) -> ScatterRecord``. It is bound at kernel compile time
through ``ti.template()``.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from sampletracer.core.integrator import ray_color
    >>> @ti.kernel
    ... def trace(depth: ti.i32, scene: ti.template()):
    ...     color = ray_color(Ray(origin=..., direction=...), depth, scene)
"""

import taichi as ti
import taichi.math as tm

from sampletracer.core.ray import Ray

vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Intersection interval. T_MIN skips hits at the ray origin (shadow acne).
T_MIN = 0.001
T_MAX = float("inf")

# Background gradient endpoints
HORIZON_COLOR = (1.0, 1.0, 1.0)
ZENITH_COLOR = (0.5, 0.7, 1.0)


@ti.func
def background_color(direction: vec3) -> vec3:
    """Sky gradient seen by rays that escape the scene.

    Linearly blends from white (straight down) to sky blue (straight up)
    using a = 0.5 * (normalize(direction).y + 1).

    Args:
        direction: The ray direction (need not be normalized).

    Returns:
        The background radiance.
    """
    unit_direction = tm.normalize(direction)
    a = 0.5 * (unit_direction.y + 1.0)
    white = vec3(HORIZON_COLOR[0], HORIZON_COLOR[1], HORIZON_COLOR[2])
    sky = vec3(ZENITH_COLOR[0], ZENITH_COLOR[1], ZENITH_COLOR[2])
    return (1.0 - a) * white + a * sky


@ti.func
def ray_color(ray: Ray, depth: ti.i32, scene: ti.template()) -> vec3:
    """Estimate the radiance arriving along a ray.

    Args:
        ray: The ray to trace.
        depth: Remaining bounce budget. Values <= 0 return black.
        scene: Scene object providing ``hit`` and ``scatter``.

    Returns:
        The radiance estimate (RGB, non-negative, unclamped).
    """
    radiance = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)
    origin = ray.origin
    direction = ray.direction

    # Active flag for path continuation (no break inside ti.func loops)
    active = 1

    for _ in range(depth):
        if active == 1:
            rec = scene.hit(Ray(origin=origin, direction=direction), T_MIN, T_MAX)

            if rec.hit == 0:
                radiance = throughput * background_color(direction)
                active = 0
            else:
                scatter = scene.scatter(Ray(origin=origin, direction=direction), rec)
                if scatter.did_scatter == 0:
                    active = 0
                else:
                    throughput *= scatter.attenuation
                    origin = scatter.origin
                    direction = scatter.direction

    return radiance

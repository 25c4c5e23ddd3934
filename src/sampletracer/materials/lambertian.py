"""Lambertian (ideal diffuse) material.

Diffuse surfaces scatter light in a cosine-weighted distribution around the
surface normal. The scattered direction is generated by adding a random unit
vector to the normal, which yields exactly that distribution, so the
attenuation is simply the albedo.

Example:
    >>> # Inside a Taichi kernel:
    >>> # scatter = scatter_lambertian(albedo, ray, rec)
"""

import taichi as ti
import taichi.math as tm

from sampletracer.core.ray import Ray, near_zero, random_unit_vector
from sampletracer.core.hit_record import HitRecord
from sampletracer.materials.scatter import ScatterRecord

vec3 = tm.vec3


@ti.func
def scatter_lambertian(albedo: vec3, ray: Ray, rec: HitRecord) -> ScatterRecord:
    """Scatter a ray off a diffuse surface.

    Args:
        albedo: The diffuse reflectance color (RGB, each component in [0, 1]).
        ray: The incoming ray (unused; diffuse scattering ignores it).
        rec: The hit record of the intersection.

    Returns:
        A ScatterRecord that always scatters, with attenuation equal to the
        albedo and origin at the hit point.
    """
    scatter_direction = rec.normal + random_unit_vector()

    # Catch degenerate scatter direction
    if near_zero(scatter_direction):
        scatter_direction = rec.normal

    return ScatterRecord(
        did_scatter=1,
        attenuation=albedo,
        origin=rec.point,
        direction=scatter_direction,
    )

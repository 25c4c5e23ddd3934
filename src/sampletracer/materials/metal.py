"""Metal (specular reflective) material.

Metals reflect the incoming ray about the surface normal. A fuzz parameter
perturbs the reflected direction by a random point on a sphere of radius
``fuzz`` around the tip of the unit reflection vector. Rays perturbed below
the surface are absorbed.

The reflection formula is:
    R = I - 2(I . N)N
"""

import taichi as ti
import taichi.math as tm

from sampletracer.core.ray import Ray, random_unit_vector, reflect
from sampletracer.core.hit_record import HitRecord
from sampletracer.materials.scatter import ScatterRecord

vec3 = tm.vec3


@ti.func
def scatter_metal(albedo: vec3, fuzz: ti.f32, ray: Ray, rec: HitRecord) -> ScatterRecord:
    """Reflect a ray off a metal surface.

    Args:
        albedo: The reflective color (RGB, each component in [0, 1]).
        fuzz: Perturbation radius in [0, 1]. 0 = perfect mirror.
        ray: The incoming ray.
        rec: The hit record of the intersection.

    Returns:
        A ScatterRecord. did_scatter is 0 when the perturbed direction
        points into the surface.
    """
    reflected = reflect(ray.direction, rec.normal)
    reflected = tm.normalize(reflected) + fuzz * random_unit_vector()

    did_scatter = 0
    if tm.dot(reflected, rec.normal) > 0.0:
        did_scatter = 1

    return ScatterRecord(
        did_scatter=did_scatter,
        attenuation=albedo,
        origin=rec.point,
        direction=reflected,
    )

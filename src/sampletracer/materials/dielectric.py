"""Dielectric (glass/water) material.

Dielectrics always scatter: the ray is either reflected or refracted.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Schlick's approximation for Fresnel reflectance
    - Total internal reflection when sin(theta_t) > 1

Reflection is chosen stochastically with probability equal to the Schlick
reflectance, so averaging many samples yields the Fresnel-weighted mix.
Common refractive indices: air 1.0, water 1.33, glass 1.5, diamond 2.4.
"""

import taichi as ti
import taichi.math as tm

from sampletracer.core.ray import Ray, reflect, refract, schlick_reflectance
from sampletracer.core.hit_record import HitRecord
from sampletracer.materials.scatter import ScatterRecord

vec3 = tm.vec3


@ti.func
def scatter_dielectric(refraction_index: ti.f32, ray: Ray, rec: HitRecord) -> ScatterRecord:
    """Reflect or refract a ray at a dielectric boundary.

    Args:
        refraction_index: Index of refraction of the material relative to
            the enclosing medium.
        ray: The incoming ray.
        rec: The hit record. ``front_face`` selects whether the ray is
            entering (1) or leaving (0) the material.

    Returns:
        A ScatterRecord with white attenuation. Always scatters.
    """
    # If hitting from outside: eta = 1/ior (air to glass), else ior
    refraction_ratio = 1.0 / refraction_index
    if rec.front_face == 0:
        refraction_ratio = refraction_index

    unit_direction = tm.normalize(ray.direction)
    cos_theta = tm.min(-tm.dot(unit_direction, rec.normal), 1.0)
    sin_theta = ti.sqrt(tm.max(0.0, 1.0 - cos_theta * cos_theta))

    cannot_refract = refraction_ratio * sin_theta > 1.0

    direction = vec3(0.0, 0.0, 0.0)
    if cannot_refract or schlick_reflectance(cos_theta, refraction_ratio) > ti.random(ti.f32):
        direction = reflect(unit_direction, rec.normal)
    else:
        direction = refract(unit_direction, rec.normal, refraction_ratio)

    return ScatterRecord(
        did_scatter=1,
        attenuation=vec3(1.0, 1.0, 1.0),
        origin=rec.point,
        direction=direction,
    )

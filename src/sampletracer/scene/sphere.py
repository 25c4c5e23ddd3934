"""Ray-sphere intersection using the robust quadratic formula.

The robust formula from Ray Tracing Gems avoids catastrophic cancellation
when b^2 is nearly equal to 4ac, which otherwise shows up as speckles on
large spheres such as ground planes.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from sampletracer.scene.sphere import hit_sphere
    >>> # rec = hit_sphere(ray, center, radius, material_id, t_min, t_max)
"""

import taichi as ti
import taichi.math as tm

from sampletracer.core.hit_record import HitRecord
from sampletracer.core.ray import Ray, ray_at

vec3 = tm.vec3


@ti.func
def _solve_quadratic_robust(h: ti.f32, a: ti.f32, c: ti.f32, sqrt_d: ti.f32):
    """Solve a*t^2 + 2*h*t + c = 0 with a numerically stable formula.

    Args:
        h: Half of the linear coefficient.
        a: Quadratic coefficient.
        c: Constant term.
        sqrt_d: Square root of discriminant (h^2 - a*c).

    Returns:
        Tuple of (t0, t1) where t0 <= t1.
    """
    # q = -(h + sign(h) * sqrt(discriminant))
    sign_h = ti.select(h < 0.0, -1.0, 1.0)
    q = -(h + sign_h * sqrt_d)

    t0 = 0.0
    t1 = 0.0

    if ti.abs(q) < 1e-10:
        # Tangent ray: fall back to the textbook formula
        t0 = (-h - sqrt_d) / a
        t1 = (-h + sqrt_d) / a
    else:
        t0 = q / a
        t1 = c / q

    if t0 > t1:
        temp = t0
        t0 = t1
        t1 = temp

    return t0, t1


@ti.func
def hit_sphere(
    ray: Ray,
    center: vec3,
    radius: ti.f32,
    material_id: ti.i32,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Intersect a ray with a sphere inside the open interval (t_min, t_max).

    Solves |origin + t * direction - center|^2 = radius^2, written in the
    half-b form a*t^2 + 2*h*t + c = 0 with:
        a = dot(direction, direction)
        h = dot(direction, origin - center)
        c = dot(origin - center, origin - center) - radius^2

    The nearer root is preferred; the farther one is used when the nearer
    root lies outside the interval (ray starting inside the sphere).

    Args:
        ray: The ray to test. The direction need not be normalized.
        center: Sphere center.
        radius: Sphere radius (non-negative).
        material_id: Material assigned to the sphere, copied into the record.
        t_min: Exclusive lower bound on t (avoids self-intersection).
        t_max: Exclusive upper bound on t (closest hit found so far).

    Returns:
        A HitRecord; check ``hit`` to see whether an intersection occurred.
        The normal faces the incoming ray and ``front_face`` is 1 when the
        ray arrives from outside the sphere.
    """
    oc = ray.origin - center

    a = tm.dot(ray.direction, ray.direction)
    h = tm.dot(ray.direction, oc)
    c = tm.dot(oc, oc) - radius * radius

    discriminant = h * h - a * c

    # Taichi requires outer-scope declaration
    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)
    is_front_face = 0
    hit_material = -1

    if discriminant >= 0.0 and radius > 0.0:
        sqrt_d = ti.sqrt(discriminant)
        t0, t1 = _solve_quadratic_robust(h, a, c, sqrt_d)

        t = t0
        valid = (t > t_min) and (t < t_max)

        if not valid:
            t = t1
            valid = (t > t_min) and (t < t_max)

        if valid:
            did_hit = 1
            hit_t = t
            hit_point = ray_at(ray, t)
            hit_material = material_id

            outward_normal = (hit_point - center) / radius

            if tm.dot(ray.direction, outward_normal) > 0.0:
                # Ray is inside the sphere, hitting back face
                is_front_face = 0
                hit_normal = -outward_normal
            else:
                is_front_face = 1
                hit_normal = outward_normal

    return HitRecord(
        hit=did_hit,
        t=hit_t,
        point=hit_point,
        normal=hit_normal,
        front_face=is_front_face,
        material_id=hit_material,
    )

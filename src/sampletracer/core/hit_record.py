"""Hit record produced by scene intersection queries.

A HitRecord is returned by value from a scene's ``hit`` Taichi function and
consumed immediately by the integrator and the material ``scatter`` call.
Fields other than ``hit`` are only meaningful when ``hit == 1``.
"""

import taichi as ti
import taichi.math as tm

vec3 = tm.vec3


@ti.dataclass
class HitRecord:
    """Record of the nearest ray-surface intersection.

    Attributes:
        hit: Whether the ray intersected any surface (1 if hit, 0 if miss).
        t: The parameter value along the ray where intersection occurred.
        point: The 3D point where the ray intersected the surface.
        normal: The surface normal at the intersection point (unit length).
            Always faces the incoming ray.
        front_face: Whether the ray hit the outside (1) or inside (0) of
            the surface.
        material_id: Material of the struck surface. -1 on a miss.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    front_face: ti.i32
    material_id: ti.i32


@ti.func
def miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        material_id=-1,
    )

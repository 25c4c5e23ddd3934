"""Scatter record returned by material ``scatter`` functions."""

import taichi as ti
import taichi.math as tm

vec3 = tm.vec3


@ti.dataclass
class ScatterRecord:
    """Outcome of a material interaction.

    Attributes:
        did_scatter: 1 if light leaves the surface, 0 if it is absorbed.
        attenuation: Per-channel fraction of radiance carried by the
            scattered ray. Only meaningful when did_scatter == 1.
        origin: Origin of the scattered ray (the hit point).
        direction: Direction of the scattered ray.
    """

    did_scatter: ti.i32
    attenuation: vec3
    origin: vec3
    direction: vec3


@ti.func
def absorbed() -> ScatterRecord:
    """Create a ScatterRecord for an absorbed ray."""
    return ScatterRecord(
        did_scatter=0,
        attenuation=vec3(0.0, 0.0, 0.0),
        origin=vec3(0.0, 0.0, 0.0),
        direction=vec3(0.0, 0.0, 0.0),
    )

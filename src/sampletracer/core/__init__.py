"""Core rendering module.

Components:
    ray: Ray struct, vector helpers and random direction sampling
    hit_record: HitRecord struct returned by scene intersection queries
    sampler: Injected random sources for jitter and lens samples
    integrator: ray_color light transport and the background gradient
    reducer: Parallel per-pixel sample accumulation

All compute-intensive operations are Taichi functions and kernels.
"""

from .hit_record import HitRecord, miss_record
from .ray import (
    Ray,
    near_zero,
    random_in_unit_disk,
    random_in_unit_sphere,
    random_unit_vector,
    ray_at,
    reflect,
    refract,
    schlick_reflectance,
    uniform_disk_point,
    vec2,
    vec3,
)
from .sampler import SequenceSampler, UniformSampler

# Note: integrator and reducer are NOT imported here to keep this package
# importable without pulling in the scene and material modules.

__all__ = [
    "Ray",
    "HitRecord",
    "miss_record",
    "ray_at",
    "vec2",
    "vec3",
    "reflect",
    "refract",
    "schlick_reflectance",
    "near_zero",
    "random_in_unit_sphere",
    "random_unit_vector",
    "random_in_unit_disk",
    "uniform_disk_point",
    "UniformSampler",
    "SequenceSampler",
]

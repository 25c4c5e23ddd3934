"""Scene module for geometry storage and ray-scene queries.

Components:
    sphere: Robust ray-sphere intersection
    world: World container with nearest-hit search and scatter delegation
    presets: Ready-made scenes with matching camera configurations

Scene data is stored in Structure-of-Arrays Taichi fields and searched
linearly; there is no acceleration structure.
"""

from .presets import SCENES, random_spheres_scene, three_spheres_scene
from .sphere import hit_sphere
from .world import MAX_SPHERES, SphereInfo, World

__all__ = [
    "hit_sphere",
    "World",
    "SphereInfo",
    "MAX_SPHERES",
    "SCENES",
    "three_spheres_scene",
    "random_spheres_scene",
]

"""Scene container with nearest-hit intersection testing.

A World holds a list of spheres in Taichi fields (Structure of Arrays) and a
MaterialLibrary. It implements the two Taichi functions the integrator
needs from a scene:

    hit(ray, t_min, t_max) -> HitRecord       nearest intersection
    scatter(ray, rec) -> ScatterRecord        material response at the hit

Intersection is a linear scan over all spheres; there is no acceleration
structure.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from sampletracer.scene.world import World
    >>> world = World()
    >>> ground = world.materials.add_lambertian((0.5, 0.5, 0.5))
    >>> world.add_sphere((0.0, -100.5, -1.0), 100.0, ground)
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from sampletracer.core.ray import Ray
from sampletracer.core.hit_record import HitRecord, miss_record
from sampletracer.materials.library import MaterialLibrary
from sampletracer.materials.scatter import ScatterRecord
from sampletracer.scene.sphere import hit_sphere

vec3 = tm.vec3

# Maximum number of spheres supported in one world
MAX_SPHERES = 1024


@dataclass
class SphereInfo:
    """Host-side description of a sphere in the world.

    Attributes:
        index: The index in the sphere storage arrays.
        center: The center of the sphere.
        radius: The radius of the sphere.
        material_id: The material ID assigned to the sphere.
    """

    index: int
    center: tuple[float, float, float]
    radius: float
    material_id: int


@ti.data_oriented
class World:
    """A collection of spheres with materials.

    Args:
        materials: The material library used by the spheres. A new, empty
            library is created when omitted.
        max_spheres: Capacity of the sphere storage.
    """

    def __init__(self, materials: MaterialLibrary | None = None, max_spheres: int = MAX_SPHERES):
        self.materials = materials if materials is not None else MaterialLibrary()
        self._max_spheres = max_spheres
        self._centers = ti.Vector.field(3, dtype=ti.f32, shape=max_spheres)
        self._radii = ti.field(dtype=ti.f32, shape=max_spheres)
        self._material_ids = ti.field(dtype=ti.i32, shape=max_spheres)
        self._num_spheres = ti.field(dtype=ti.i32, shape=())
        self._spheres: list[SphereInfo] = []

    @property
    def sphere_count(self) -> int:
        """Number of spheres in the world."""
        return len(self._spheres)

    @property
    def spheres(self) -> list[SphereInfo]:
        """Copy of the sphere descriptions, in insertion order."""
        return list(self._spheres)

    def clear(self) -> None:
        """Remove all spheres. Materials are kept."""
        self._spheres.clear()
        self._num_spheres[None] = 0

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material_id: int,
    ) -> int:
        """Add a sphere to the world.

        Args:
            center: The center point of the sphere.
            radius: The radius of the sphere (non-negative).
            material_id: A material ID registered in ``self.materials``.

        Returns:
            The index of the added sphere.

        Raises:
            ValueError: If the radius is negative or the material is unknown.
            RuntimeError: If the maximum number of spheres is exceeded.
        """
        if radius < 0.0:
            raise ValueError(f"Sphere radius must be non-negative, got {radius}")
        if material_id not in self.materials:
            raise ValueError(f"Unknown material id {material_id}")

        idx = len(self._spheres)
        if idx >= self._max_spheres:
            raise RuntimeError(f"Maximum number of spheres ({self._max_spheres}) exceeded")

        center = (float(center[0]), float(center[1]), float(center[2]))
        self._centers[idx] = list(center)
        self._radii[idx] = radius
        self._material_ids[idx] = material_id
        self._num_spheres[None] = idx + 1
        self._spheres.append(
            SphereInfo(index=idx, center=center, radius=float(radius), material_id=material_id)
        )
        return idx

    @ti.func
    def hit(self, ray: Ray, t_min: ti.f32, t_max: ti.f32) -> HitRecord:
        """Find the nearest intersection of a ray with the world.

        Tests every sphere, narrowing t_max to the closest hit so far.

        Args:
            ray: The ray to test.
            t_min: Exclusive lower bound on t.
            t_max: Exclusive upper bound on t.

        Returns:
            The HitRecord of the nearest hit, or a miss record.
        """
        closest_t = t_max
        result = miss_record()

        for k in range(self._num_spheres[None]):
            rec = hit_sphere(
                ray, self._centers[k], self._radii[k], self._material_ids[k], t_min, closest_t
            )
            if rec.hit == 1:
                closest_t = rec.t
                result = rec

        return result

    @ti.func
    def scatter(self, ray: Ray, rec: HitRecord) -> ScatterRecord:
        """Scatter a ray off the surface described by a hit record."""
        return self.materials.scatter(ray, rec)

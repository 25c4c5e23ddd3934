"""Material registry with tagged-union dispatch.

The MaterialLibrary stores every material in one Structure-of-Arrays table
indexed by material ID. Each row carries a MaterialKind tag plus the
parameters of all kinds (albedo, fuzz, refraction index); only the fields
relevant to the tag are read. ``scatter`` dispatches on the tag inside the
kernel.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from sampletracer.materials.library import MaterialLibrary
    >>> materials = MaterialLibrary()
    >>> ground = materials.add_lambertian((0.8, 0.8, 0.0))
    >>> glass = materials.add_dielectric(1.5)
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any

import taichi as ti
import taichi.math as tm

from sampletracer.core.ray import Ray
from sampletracer.core.hit_record import HitRecord
from sampletracer.materials.dielectric import scatter_dielectric
from sampletracer.materials.lambertian import scatter_lambertian
from sampletracer.materials.metal import scatter_metal
from sampletracer.materials.scatter import ScatterRecord, absorbed

vec3 = tm.vec3

# Maximum number of materials in one library
MAX_MATERIALS = 1024


class MaterialKind(IntEnum):
    """Enumeration of supported material kinds used for dispatch."""

    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2


@dataclass
class MaterialInfo:
    """Host-side description of a registered material.

    Attributes:
        material_id: The material ID.
        kind: The material kind.
        params: The parameters as provided during creation.
    """

    material_id: int
    kind: MaterialKind
    params: dict[str, Any]


def _validate_albedo(albedo: tuple[float, float, float]) -> None:
    if len(albedo) != 3:
        raise ValueError(f"Albedo must have 3 components, got {len(albedo)}")
    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )


@ti.data_oriented
class MaterialLibrary:
    """Registry of materials addressable by integer ID.

    Args:
        capacity: Maximum number of materials (default MAX_MATERIALS).
    """

    def __init__(self, capacity: int = MAX_MATERIALS) -> None:
        self._capacity = capacity
        self._kinds = ti.field(dtype=ti.i32, shape=capacity)
        self._albedos = ti.Vector.field(3, dtype=ti.f32, shape=capacity)
        self._fuzz = ti.field(dtype=ti.f32, shape=capacity)
        self._refraction_indices = ti.field(dtype=ti.f32, shape=capacity)
        self._count = ti.field(dtype=ti.i32, shape=())
        self._infos: list[MaterialInfo] = []

    def __len__(self) -> int:
        return len(self._infos)

    def __contains__(self, material_id: object) -> bool:
        return isinstance(material_id, int) and 0 <= material_id < len(self._infos)

    @property
    def capacity(self) -> int:
        return self._capacity

    def info(self, material_id: int) -> MaterialInfo:
        """Return the host-side description of a material.

        Raises:
            KeyError: If the material ID is not registered.
        """
        if material_id not in self:
            raise KeyError(f"Unknown material id {material_id}")
        return self._infos[material_id]

    def clear(self) -> None:
        """Remove all materials."""
        self._infos.clear()
        self._count[None] = 0

    def _add(
        self,
        kind: MaterialKind,
        params: dict[str, Any],
        albedo: tuple[float, float, float] = (1.0, 1.0, 1.0),
        fuzz: float = 0.0,
        refraction_index: float = 1.0,
    ) -> int:
        idx = len(self._infos)
        if idx >= self._capacity:
            raise RuntimeError(f"Maximum number of materials ({self._capacity}) exceeded")

        self._kinds[idx] = int(kind)
        self._albedos[idx] = [albedo[0], albedo[1], albedo[2]]
        self._fuzz[idx] = fuzz
        self._refraction_indices[idx] = refraction_index
        self._count[None] = idx + 1
        self._infos.append(MaterialInfo(material_id=idx, kind=kind, params=params))
        return idx

    def add_lambertian(self, albedo: tuple[float, float, float]) -> int:
        """Add a diffuse material.

        Args:
            albedo: The diffuse reflectance as (R, G, B), each in [0, 1].

        Returns:
            The material ID.

        Raises:
            ValueError: If any albedo component is outside [0, 1].
            RuntimeError: If the library is full.
        """
        _validate_albedo(albedo)
        return self._add(MaterialKind.LAMBERTIAN, {"albedo": tuple(albedo)}, albedo=albedo)

    def add_metal(self, albedo: tuple[float, float, float], fuzz: float = 0.0) -> int:
        """Add a reflective metal material.

        Args:
            albedo: The reflective color as (R, G, B), each in [0, 1].
            fuzz: Reflection perturbation radius. Values above 1 are clamped
                to 1.

        Returns:
            The material ID.

        Raises:
            ValueError: If the albedo is invalid or fuzz is negative.
            RuntimeError: If the library is full.
        """
        _validate_albedo(albedo)
        if fuzz < 0.0:
            raise ValueError(f"Fuzz must be non-negative, got {fuzz}")
        fuzz = min(fuzz, 1.0)
        return self._add(
            MaterialKind.METAL,
            {"albedo": tuple(albedo), "fuzz": fuzz},
            albedo=albedo,
            fuzz=fuzz,
        )

    def add_dielectric(self, refraction_index: float) -> int:
        """Add a clear dielectric material.

        Args:
            refraction_index: Index of refraction relative to the enclosing
                medium (e.g. 1.5 for glass in air, 1/1.5 for an air bubble
                inside glass).

        Returns:
            The material ID.

        Raises:
            ValueError: If the refraction index is not positive.
            RuntimeError: If the library is full.
        """
        if refraction_index <= 0.0:
            raise ValueError(f"Refraction index must be positive, got {refraction_index}")
        return self._add(
            MaterialKind.DIELECTRIC,
            {"refraction_index": refraction_index},
            refraction_index=refraction_index,
        )

    @ti.func
    def scatter(self, ray: Ray, rec: HitRecord) -> ScatterRecord:
        """Scatter a ray according to the material of the hit record.

        Unknown material IDs absorb the ray.

        Args:
            ray: The incoming ray.
            rec: The hit record of the intersection.

        Returns:
            The ScatterRecord of the material interaction.
        """
        material_id = rec.material_id
        result = absorbed()

        if 0 <= material_id < self._count[None]:
            kind = self._kinds[material_id]
            if kind == int(MaterialKind.LAMBERTIAN):
                result = scatter_lambertian(self._albedos[material_id], ray, rec)
            elif kind == int(MaterialKind.METAL):
                result = scatter_metal(
                    self._albedos[material_id], self._fuzz[material_id], ray, rec
                )
            elif kind == int(MaterialKind.DIELECTRIC):
                result = scatter_dielectric(self._refraction_indices[material_id], ray, rec)

        return result

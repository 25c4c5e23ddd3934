"""Materials module for light scattering at surfaces.

Components:
    scatter: ScatterRecord struct returned by every material
    lambertian: Ideal diffuse reflection
    metal: Specular reflection with optional fuzz
    dielectric: Glass-like refraction with Schlick reflectance
    library: MaterialLibrary registry with tagged-union dispatch

All scatter functions are Taichi functions. A material either absorbs the
incoming ray or produces an attenuation color and a scattered ray.
"""

from .dielectric import scatter_dielectric
from .lambertian import scatter_lambertian
from .library import MAX_MATERIALS, MaterialInfo, MaterialKind, MaterialLibrary
from .metal import scatter_metal
from .scatter import ScatterRecord, absorbed

__all__ = [
    "ScatterRecord",
    "absorbed",
    "scatter_lambertian",
    "scatter_metal",
    "scatter_dielectric",
    "MaterialLibrary",
    "MaterialKind",
    "MaterialInfo",
    "MAX_MATERIALS",
]

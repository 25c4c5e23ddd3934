"""Stochastic ray tracer built on Taichi.

Renders a static scene of spheres by averaging many jittered camera rays per
pixel, with optional depth of field. The per-pixel sample loop runs on
Taichi's CPU thread pool with an atomic reduction; pixels are emitted in
scanline-major order.

Subpackages:
    core: Ray struct, random samplers, integrator and the sample reducer
    camera: Camera configuration, geometry and the render loop
    scene: Hit records, sphere intersection, the World and preset scenes
    materials: Lambertian, metal and dielectric scattering
    output: Pixel sinks, gamma conversion, PPM and PNG export

Call :func:`sampletracer.runtime.init_runtime` before constructing any
camera, world or sampler.
"""

__version__ = "0.1.0"

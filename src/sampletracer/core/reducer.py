"""Parallel per-pixel sample reduction.

For one pixel, the SampleReducer runs the sample loop as the outermost loop
of a Taichi kernel, which the CPU backend spreads over its fixed pool of
worker threads (sized by ``cpu_max_num_threads`` in ``ti.init``). Every
sample generates a camera ray, traces it with ``ray_color`` and adds the
result into a single 0-d accumulator field. Taichi lowers ``+=`` on a field
inside a parallel loop to an atomic add, so no contribution is lost
regardless of how samples interleave.

The scene and camera are bound at compile time through ``ti.template()``,
so each (camera, scene) pair compiles its own specialised kernel once.
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from sampletracer.core.integrator import ray_color

vec3 = tm.vec3


@ti.data_oriented
class SampleReducer:
    """Accumulator for the samples of one pixel at a time.

    Args:
        samples_per_pixel: Number of samples in each pixel's sample loop.
    """

    def __init__(self, samples_per_pixel: int) -> None:
        if samples_per_pixel < 1:
            raise ValueError(f"samples_per_pixel must be at least 1, got {samples_per_pixel}")
        self._samples_per_pixel = samples_per_pixel
        self._pixel_sum = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._sample_colors = ti.Vector.field(3, dtype=ti.f32, shape=samples_per_pixel)

    @property
    def samples_per_pixel(self) -> int:
        return self._samples_per_pixel

    @ti.kernel
    def _accumulate(
        self,
        camera: ti.template(),
        scene: ti.template(),
        i: ti.i32,
        j: ti.i32,
        num_samples: ti.i32,
        max_depth: ti.i32,
    ):
        self._pixel_sum[None] = vec3(0.0, 0.0, 0.0)
        for sample in range(num_samples):
            ray = camera.get_ray(i, j, sample)
            self._pixel_sum[None] += ray_color(ray, max_depth, scene)

    @ti.kernel
    def _trace_each(
        self,
        camera: ti.template(),
        scene: ti.template(),
        i: ti.i32,
        j: ti.i32,
        num_samples: ti.i32,
        max_depth: ti.i32,
    ):
        for sample in range(num_samples):
            ray = camera.get_ray(i, j, sample)
            self._sample_colors[sample] = ray_color(ray, max_depth, scene)

    def accumulate(self, camera, scene, i: int, j: int, max_depth: int) -> npt.NDArray[np.float64]:
        """Sum the radiance of all samples of pixel (i, j).

        Args:
            camera: An initialized camera providing ``get_ray``.
            scene: Scene object providing ``hit`` and ``scatter``.
            i: Pixel column.
            j: Pixel row.
            max_depth: Bounce budget per sample.

        Returns:
            The unscaled RGB sum as a float64 array of shape (3,).
        """
        self._accumulate(camera, scene, i, j, self._samples_per_pixel, max_depth)
        return self._pixel_sum.to_numpy().astype(np.float64)

    def trace_samples(
        self, camera, scene, i: int, j: int, max_depth: int
    ) -> npt.NDArray[np.float32]:
        """Trace the samples of pixel (i, j) individually.

        Uses the same sample indices as :meth:`accumulate`, so with a
        deterministic sampler and scene the rows sum to the accumulated
        color.

        Returns:
            Array of shape (samples_per_pixel, 3) with one color per sample.
        """
        self._trace_each(camera, scene, i, j, self._samples_per_pixel, max_depth)
        return self._sample_colors.to_numpy()

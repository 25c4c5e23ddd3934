"""Thin-lens camera with the scanline render loop.

The Camera owns a CameraConfig and, after ``initialize()``, the derived
geometry mirrored into Taichi fields. ``get_ray`` turns a pixel coordinate
into a camera ray with sub-pixel jitter and, when the defocus angle is
positive, an origin sampled on the lens disk. ``render`` walks the image in
scanline-major order and hands every finished pixel to a sink before moving
on to the next one; the samples of each pixel are traced in parallel by a
SampleReducer.

Example:
    >>> import taichi as ti
    >>> from sampletracer.runtime import init_runtime
    >>> init_runtime(num_threads=8, seed=1)
    >>> from sampletracer.camera import Camera, CameraConfig
    >>> from sampletracer.scene.presets import three_spheres_scene
    >>> world, config = three_spheres_scene()
    >>> camera = Camera(config.with_overrides(image_width=64, samples_per_pixel=16))
    >>> image = camera.render(world)
    >>> image.shape
    (36, 64, 3)
"""

import logging
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm
from tqdm import tqdm

from sampletracer.camera.config import CameraConfig
from sampletracer.camera.geometry import CameraGeometry, compute_geometry
from sampletracer.core.ray import Ray
from sampletracer.core.reducer import SampleReducer
from sampletracer.core.sampler import UniformSampler

if TYPE_CHECKING:
    from sampletracer.output.sink import PixelSink

logger = logging.getLogger(__name__)

vec3 = tm.vec3


@ti.data_oriented
class Camera:
    """A positionable camera with optional depth of field.

    Args:
        config: The camera configuration. Defaults to ``CameraConfig()``.
        sampler: Random source for jitter and lens samples. Defaults to a
            UniformSampler. Fixed for the lifetime of the camera.
    """

    def __init__(self, config: CameraConfig | None = None, sampler=None) -> None:
        self._config = config if config is not None else CameraConfig()
        self.sampler = sampler if sampler is not None else UniformSampler()
        self._geometry: CameraGeometry | None = None
        self._reducer: SampleReducer | None = None

        self._center = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._pixel00_loc = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._pixel_delta_u = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._pixel_delta_v = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._defocus_disk_u = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._defocus_disk_v = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._use_lens = ti.field(dtype=ti.i32, shape=())

        # Single-ray probe output for generate_ray()
        self._probe_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._probe_direction = ti.Vector.field(3, dtype=ti.f32, shape=())

    @property
    def config(self) -> CameraConfig:
        return self._config

    @property
    def geometry(self) -> CameraGeometry | None:
        """Derived geometry, or None before ``initialize()``."""
        return self._geometry

    @property
    def image_width(self) -> int:
        return self._config.image_width

    @property
    def image_height(self) -> int:
        return self._config.image_height

    def initialize(self) -> CameraGeometry:
        """Validate the configuration and derive the per-render state.

        Safe to call repeatedly: the configuration is immutable, so every
        call produces the same geometry and reuses the existing fields.

        Returns:
            The derived CameraGeometry.

        Raises:
            ValueError: If the configuration violates a precondition.
        """
        self._config.validate()
        geometry = compute_geometry(self._config)

        self._center[None] = geometry.center.tolist()
        self._pixel00_loc[None] = geometry.pixel00_loc.tolist()
        self._pixel_delta_u[None] = geometry.pixel_delta_u.tolist()
        self._pixel_delta_v[None] = geometry.pixel_delta_v.tolist()
        self._defocus_disk_u[None] = geometry.defocus_disk_u.tolist()
        self._defocus_disk_v[None] = geometry.defocus_disk_v.tolist()
        self._use_lens[None] = 1 if self._config.defocus_angle > 0.0 else 0

        if self._reducer is None:
            self._reducer = SampleReducer(self._config.samples_per_pixel)

        self._geometry = geometry
        return geometry

    # =========================================================================
    # Ray Generation
    # =========================================================================

    @ti.func
    def get_ray(self, i: ti.i32, j: ti.i32, sample: ti.i32) -> Ray:
        """Generate the camera ray for one sample of pixel (i, j).

        The ray starts at the camera center, or at a random point on the
        defocus disk when the lens is enabled, and passes through a point
        jittered uniformly within the pixel's footprint on the focus plane.

        Args:
            i: Pixel column (0 = left).
            j: Pixel row (0 = top).
            sample: Index of the sample within the pixel's sample loop.

        Returns:
            The camera ray. The direction is not normalized.
        """
        offset = self.sampler.sample_square(sample)
        pixel_sample = (
            self._pixel00_loc[None]
            + (ti.cast(i, ti.f32) + offset.x) * self._pixel_delta_u[None]
            + (ti.cast(j, ti.f32) + offset.y) * self._pixel_delta_v[None]
        )

        origin = self._center[None]
        if self._use_lens[None] == 1:
            p = self.sampler.sample_disk(sample)
            origin = (
                self._center[None]
                + p.x * self._defocus_disk_u[None]
                + p.y * self._defocus_disk_v[None]
            )

        return Ray(origin=origin, direction=pixel_sample - origin)

    @ti.kernel
    def _probe_ray(self, i: ti.i32, j: ti.i32, sample: ti.i32):
        ray = self.get_ray(i, j, sample)
        self._probe_origin[None] = ray.origin
        self._probe_direction[None] = ray.direction

    def generate_ray(
        self, i: int, j: int, sample: int = 0
    ) -> tuple[npt.NDArray[np.float32], npt.NDArray[np.float32]]:
        """Generate one camera ray from Python.

        Args:
            i: Pixel column.
            j: Pixel row.
            sample: Sample index passed to the sampler.

        Returns:
            Tuple of (origin, direction) arrays of shape (3,).

        Raises:
            RuntimeError: If the camera has not been initialized.
            IndexError: If (i, j) lies outside the image.
        """
        self._check_pixel(i, j)
        self._probe_ray(i, j, sample)
        return self._probe_origin.to_numpy(), self._probe_direction.to_numpy()

    # =========================================================================
    # Rendering
    # =========================================================================

    def _check_pixel(self, i: int, j: int) -> None:
        if self._geometry is None:
            raise RuntimeError("Camera not initialized. Call initialize() first.")
        if not (0 <= i < self._geometry.image_width and 0 <= j < self._geometry.image_height):
            raise IndexError(
                f"Pixel ({i}, {j}) outside image "
                f"{self._geometry.image_width}x{self._geometry.image_height}"
            )

    def accumulate_pixel(self, scene, i: int, j: int) -> npt.NDArray[np.float64]:
        """Sum all sample colors of pixel (i, j) without scaling."""
        self._check_pixel(i, j)
        return self._reducer.accumulate(self, scene, i, j, self._config.max_depth)

    def trace_samples(self, scene, i: int, j: int) -> npt.NDArray[np.float32]:
        """Trace every sample of pixel (i, j) and return them individually."""
        self._check_pixel(i, j)
        return self._reducer.trace_samples(self, scene, i, j, self._config.max_depth)

    def render_pixel(self, scene, i: int, j: int) -> npt.NDArray[np.float64]:
        """Render pixel (i, j): the average of its samples.

        Args:
            scene: Scene object providing ``hit`` and ``scatter``.
            i: Pixel column.
            j: Pixel row.

        Returns:
            Linear RGB color as a float64 array of shape (3,).
        """
        return self.accumulate_pixel(scene, i, j) * self._geometry.sample_scale

    def render(
        self,
        scene,
        sink: "PixelSink | None" = None,
        *,
        progress: bool = False,
    ) -> npt.NDArray[np.float32]:
        """Render the scene.

        Pixels are produced top-to-bottom, left-to-right. Each pixel is
        finished (all samples reduced and scaled) and written to the sink
        before work on the next pixel begins.

        Args:
            scene: Scene object providing ``hit`` and ``scatter``.
            sink: Optional receiver for finished pixels. ``begin`` is called
                once with the image size, ``write_pixel`` once per pixel in
                scanline-major order, ``finish`` at the end.
            progress: Show a tqdm progress bar over scanlines.

        Returns:
            The linear image as a float32 array of shape (height, width, 3).
        """
        geometry = self.initialize()
        width = geometry.image_width
        height = geometry.image_height
        image = np.zeros((height, width, 3), dtype=np.float32)

        logger.info(
            "Rendering %dx%d image, %d samples per pixel, max depth %d",
            width,
            height,
            self._config.samples_per_pixel,
            self._config.max_depth,
        )

        if sink is not None:
            sink.begin(width, height)

        for j in tqdm(range(height), desc="Scanlines", unit="line", disable=not progress):
            logger.debug("Scanlines remaining: %d", height - j)
            for i in range(width):
                color = self.render_pixel(scene, i, j)
                image[j, i] = color
                if sink is not None:
                    sink.write_pixel(color)

        if sink is not None:
            sink.finish()

        logger.info("Done.")
        return image

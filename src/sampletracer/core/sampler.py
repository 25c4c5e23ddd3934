"""Random sources for camera ray generation.

Camera rays consume two kinds of random numbers: a sub-pixel jitter offset
in [-0.5, 0.5]^2 and, when the lens has an aperture, a point in the unit
disk. Both are drawn from a sampler object handed to the camera at
construction, so the camera never touches a process-wide generator.

Samplers are Taichi data-oriented classes exposing two Taichi functions:

    sample_square(sample) -> vec2   jitter offset in [-0.5, 0.5]^2
    sample_disk(sample) -> vec2     point inside the unit disk

``sample`` is the index of the sample within the pixel's sample loop. The
uniform sampler ignores it; the sequence sampler uses it to look up a fixed
table entry, which makes renders reproducible.

Example:
    >>> import numpy as np
    >>> from sampletracer.core.sampler import SequenceSampler
    >>> rng = np.random.default_rng(7)
    >>> sampler = SequenceSampler(rng.random((64, 4)))
"""

import numpy as np
import numpy.typing as npt
import taichi as ti

from sampletracer.core.ray import random_in_unit_disk, uniform_disk_point, vec2


@ti.data_oriented
class UniformSampler:
    """Sampler backed by Taichi's per-thread random streams.

    Every CPU worker thread owns an independent generator state, so samples
    drawn concurrently inside a parallel loop never share state. The streams
    are seeded by ``ti.init(random_seed=...)`` (see
    :func:`sampletracer.runtime.init_runtime`); the exact sequence consumed
    depends on thread scheduling and is not reproducible bit-for-bit.
    """

    @ti.func
    def sample_square(self, sample: ti.i32) -> vec2:
        return vec2(ti.random(ti.f32) - 0.5, ti.random(ti.f32) - 0.5)

    @ti.func
    def sample_disk(self, sample: ti.i32) -> vec2:
        return random_in_unit_disk()


@ti.data_oriented
class SequenceSampler:
    """Sampler that replays a fixed table of uniform random numbers.

    Row ``sample % n`` of the table supplies the values for a sample:
    columns 0 and 1 become the jitter offset (value - 0.5), columns 2 and 3
    are mapped onto the unit disk with the analytic polar mapping.

    Because lookups depend only on the sample index, the set of rays traced
    for a pixel is the same no matter how the sample loop is scheduled.

    Args:
        values: Array-like of shape (n, 4) with entries in [0, 1). A value of
            0.5 in both jitter columns places the sample at the pixel center.

    Raises:
        ValueError: If the table is empty or not of shape (n, 4).
    """

    def __init__(self, values: npt.ArrayLike) -> None:
        table = np.asarray(values, dtype=np.float32)
        if table.ndim != 2 or table.shape[1] != 4:
            raise ValueError(f"Sample table must have shape (n, 4), got {table.shape}")
        if table.shape[0] == 0:
            raise ValueError("Sample table must contain at least one row")

        self._count = int(table.shape[0])
        self._values = ti.Vector.field(4, dtype=ti.f32, shape=self._count)
        self._values.from_numpy(table)

    @classmethod
    def centered(cls, count: int = 1) -> "SequenceSampler":
        """Create a sampler whose jitter is always zero and lens sample the disk center."""
        table = np.zeros((count, 4), dtype=np.float32)
        table[:, :2] = 0.5
        return cls(table)

    @property
    def count(self) -> int:
        """Number of rows in the table."""
        return self._count

    @ti.func
    def sample_square(self, sample: ti.i32) -> vec2:
        row = self._values[sample % self._count]
        return vec2(row[0] - 0.5, row[1] - 0.5)

    @ti.func
    def sample_disk(self, sample: ti.i32) -> vec2:
        row = self._values[sample % self._count]
        return uniform_disk_point(row[2], row[3])

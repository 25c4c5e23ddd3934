"""Taichi runtime initialization.

The renderer always runs on Taichi's CPU backend. The backend keeps a fixed
pool of worker threads; the outermost loop of every kernel is split across
them. ``init_runtime`` must be called once per process before any camera,
world or sampler is constructed, because those allocate Taichi fields.

Taichi is imported on the first call rather than with this module, so the
CLI can route its import banner away from stdout.
"""

import logging

logger = logging.getLogger(__name__)

# Size of the CPU worker pool used for the per-pixel sample loop
DEFAULT_NUM_THREADS = 16


def init_runtime(
    num_threads: int = DEFAULT_NUM_THREADS,
    seed: int = 0,
    *,
    debug: bool = False,
) -> None:
    """Initialize Taichi on the CPU with a fixed-size thread pool.

    Args:
        num_threads: Number of CPU worker threads.
        seed: Seed for Taichi's per-thread random streams.
        debug: Enable Taichi's debug mode (bounds checks, slower).

    Raises:
        ValueError: If num_threads is less than 1.
    """
    if num_threads < 1:
        raise ValueError(f"num_threads must be at least 1, got {num_threads}")

    import taichi as ti

    ti.init(
        arch=ti.cpu,
        cpu_max_num_threads=num_threads,
        random_seed=seed,
        debug=debug,
    )
    logger.debug("Taichi initialized: cpu, %d threads, seed %d", num_threads, seed)

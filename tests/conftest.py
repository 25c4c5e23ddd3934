"""Pytest configuration for sampletracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import numpy as np
import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls, which would
    invalidate every field allocated by earlier tests.
    """
    ti.init(arch=ti.cpu, cpu_max_num_threads=4, random_seed=42)
    yield


@pytest.fixture
def empty_world():
    """A world with no spheres: every ray escapes to the background."""
    from sampletracer.scene.world import World

    return World()


@pytest.fixture
def mirror_world():
    """A deterministic world: perfect mirrors only (metal with zero fuzz)."""
    from sampletracer.scene.world import World

    world = World()
    ground = world.materials.add_metal((0.8, 0.8, 0.8), fuzz=0.0)
    tinted = world.materials.add_metal((0.9, 0.4, 0.2), fuzz=0.0)
    world.add_sphere((0.0, -100.5, -1.0), 100.0, ground)
    world.add_sphere((0.0, 0.0, -1.0), 0.5, tinted)
    world.add_sphere((-1.0, 0.0, -1.5), 0.5, tinted)
    return world


@pytest.fixture
def random_table():
    """A reproducible (64, 4) table of uniforms for SequenceSampler."""
    rng = np.random.default_rng(1234)
    return rng.random((64, 4))

"""Unit tests for ray-sphere intersection and the World container.

Tests cover:
- Sphere hits from outside and inside
- Open (t_min, t_max) interval handling
- Nearest-hit selection independent of insertion order
- World validation and capacity
- Preset scenes
"""

import math

import numpy as np
import pytest
import taichi as ti
import taichi.math as tm

from sampletracer.core.ray import Ray

vec3 = tm.vec3


class _HitProbe:
    """Evaluates ``scene.hit`` for one ray and returns the record fields."""

    def __init__(self):
        self.hit = ti.field(dtype=ti.i32, shape=())
        self.t = ti.field(dtype=ti.f32, shape=())
        self.point = ti.Vector.field(3, dtype=ti.f32, shape=())
        self.normal = ti.Vector.field(3, dtype=ti.f32, shape=())
        self.front_face = ti.field(dtype=ti.i32, shape=())
        self.material_id = ti.field(dtype=ti.i32, shape=())

    def __call__(self, scene, origin, direction, t_min=0.001, t_max=1e30):
        hit, t, point, normal = self.hit, self.t, self.point, self.normal
        front_face, material_id = self.front_face, self.material_id

        @ti.kernel
        def hit_kernel(
            s: ti.template(),
            o: ti.types.vector(3, ti.f32),
            d: ti.types.vector(3, ti.f32),
            lo: ti.f32,
            hi: ti.f32,
        ):
            rec = s.hit(Ray(origin=o, direction=d), lo, hi)
            hit[None] = rec.hit
            t[None] = rec.t
            point[None] = rec.point
            normal[None] = rec.normal
            front_face[None] = rec.front_face
            material_id[None] = rec.material_id

        hit_kernel(scene, ti.Vector(list(origin)), ti.Vector(list(direction)), t_min, t_max)
        return {
            "hit": int(hit[None]),
            "t": float(t[None]),
            "point": point.to_numpy(),
            "normal": normal.to_numpy(),
            "front_face": int(front_face[None]),
            "material_id": int(material_id[None]),
        }


def _world_with(*spheres):
    from sampletracer.scene.world import World

    world = World(max_spheres=16)
    ids = []
    for center, radius in spheres:
        ids.append(world.materials.add_lambertian((0.5, 0.5, 0.5)))
        world.add_sphere(center, radius, ids[-1])
    return world, ids


class TestSphereHit:
    """Tests for ray-sphere intersection."""

    def test_hit_from_outside(self):
        world, ids = _world_with(((0.0, 0.0, -3.0), 1.0))
        rec = _HitProbe()(world, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert rec["hit"] == 1
        assert abs(rec["t"] - 2.0) < 1e-5
        np.testing.assert_allclose(rec["point"], [0.0, 0.0, -2.0], atol=1e-5)
        np.testing.assert_allclose(rec["normal"], [0.0, 0.0, 1.0], atol=1e-5)
        assert rec["front_face"] == 1
        assert rec["material_id"] == ids[0]

    def test_unnormalized_direction_scales_t(self):
        world, _ = _world_with(((0.0, 0.0, -3.0), 1.0))
        rec = _HitProbe()(world, (0.0, 0.0, 0.0), (0.0, 0.0, -4.0))
        assert rec["hit"] == 1
        assert abs(rec["t"] - 0.5) < 1e-5

    def test_hit_from_inside_faces_ray(self):
        world, _ = _world_with(((0.0, 0.0, -1.0), 0.5))
        rec = _HitProbe()(world, (0.0, 0.0, -1.0), (0.0, 0.0, -1.0))

        assert rec["hit"] == 1
        assert abs(rec["t"] - 0.5) < 1e-5
        np.testing.assert_allclose(rec["normal"], [0.0, 0.0, 1.0], atol=1e-5)
        assert rec["front_face"] == 0

    def test_normal_is_unit_length(self):
        world, _ = _world_with(((1.0, 2.0, -7.0), 2.5))
        rec = _HitProbe()(world, (0.0, 0.0, 0.0), (1.0, 2.0, -7.0))
        assert rec["hit"] == 1
        assert abs(np.linalg.norm(rec["normal"]) - 1.0) < 1e-5

    def test_miss(self):
        world, _ = _world_with(((0.0, 0.0, -3.0), 1.0))
        rec = _HitProbe()(world, (0.0, 0.0, 0.0), (0.0, 1.0, 0.0))
        assert rec["hit"] == 0
        assert rec["material_id"] == -1

    def test_tangent_ray(self):
        world, _ = _world_with(((0.0, 1.0, -3.0), 1.0))
        rec = _HitProbe()(world, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        if rec["hit"] == 1:
            assert abs(rec["t"] - 3.0) < 1e-2

    def test_sphere_behind_ray_is_missed(self):
        world, _ = _world_with(((0.0, 0.0, 3.0), 1.0))
        rec = _HitProbe()(world, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert rec["hit"] == 0

    def test_interval_is_open(self):
        world, _ = _world_with(((0.0, 0.0, -3.0), 1.0))
        probe = _HitProbe()
        # Near root at t = 2 is excluded by t_max = 2, far root excluded too
        assert probe(world, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0), t_max=2.0)["hit"] == 0
        # Near root excluded by t_min, far root at t = 4 accepted
        rec = probe(world, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0), t_min=2.0)
        assert rec["hit"] == 1
        assert abs(rec["t"] - 4.0) < 1e-5

    def test_zero_radius_never_hit(self):
        world, _ = _world_with(((0.0, 0.0, -3.0), 0.0))
        rec = _HitProbe()(world, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert rec["hit"] == 0

    def test_large_sphere_precision(self):
        """A ground sphere of radius 1000 is hit at the expected distance."""
        world, _ = _world_with(((0.0, -1000.0, 0.0), 1000.0))
        rec = _HitProbe()(world, (0.0, 2.0, 0.0), (0.0, -1.0, 0.0))
        assert rec["hit"] == 1
        assert abs(rec["t"] - 2.0) < 1e-3


class TestNearestHit:
    """Tests for nearest-hit selection."""

    def test_nearest_sphere_wins(self):
        world, ids = _world_with(((0.0, 0.0, -5.0), 0.5), ((0.0, 0.0, -2.0), 0.5))
        rec = _HitProbe()(world, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert rec["hit"] == 1
        assert abs(rec["t"] - 1.5) < 1e-5
        assert rec["material_id"] == ids[1]

    def test_insertion_order_irrelevant(self):
        near = ((0.0, 0.0, -2.0), 0.5)
        far = ((0.0, 0.0, -5.0), 0.5)
        first, _ = _world_with(near, far)
        second, _ = _world_with(far, near)

        probe = _HitProbe()
        rec_a = probe(first, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        rec_b = probe(second, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert abs(rec_a["t"] - rec_b["t"]) < 1e-6

    def test_nested_spheres(self):
        """Hollow glass: outer shell first, then the inner bubble from inside the shell."""
        world, ids = _world_with(((0.0, 0.0, -3.0), 1.0), ((0.0, 0.0, -3.0), 0.8))
        probe = _HitProbe()

        outer = probe(world, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert abs(outer["t"] - 2.0) < 1e-5
        assert outer["material_id"] == ids[0]

        inner = probe(world, tuple(outer["point"]), (0.0, 0.0, -1.0))
        assert abs(inner["t"] - 0.2) < 1e-4
        assert inner["material_id"] == ids[1]
        assert inner["front_face"] == 1

    def test_empty_world_misses(self, empty_world):
        rec = _HitProbe()(empty_world, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert rec["hit"] == 0


class TestWorldContainer:
    """Tests for sphere registration."""

    def test_add_sphere_returns_index(self):
        from sampletracer.scene.world import World

        world = World(max_spheres=4)
        material = world.materials.add_lambertian((0.5, 0.5, 0.5))
        assert world.add_sphere((0.0, 0.0, -1.0), 0.5, material) == 0
        assert world.add_sphere((1.0, 0.0, -1.0), 0.5, material) == 1
        assert world.sphere_count == 2
        assert world.spheres[1].center == (1.0, 0.0, -1.0)

    def test_negative_radius_rejected(self):
        from sampletracer.scene.world import World

        world = World(max_spheres=4)
        material = world.materials.add_lambertian((0.5, 0.5, 0.5))
        with pytest.raises(ValueError, match="radius"):
            world.add_sphere((0.0, 0.0, -1.0), -0.5, material)

    def test_unknown_material_rejected(self):
        from sampletracer.scene.world import World

        world = World(max_spheres=4)
        with pytest.raises(ValueError, match="material"):
            world.add_sphere((0.0, 0.0, -1.0), 0.5, 0)

    def test_capacity_exceeded(self):
        from sampletracer.scene.world import World

        world = World(max_spheres=2)
        material = world.materials.add_lambertian((0.5, 0.5, 0.5))
        world.add_sphere((0.0, 0.0, -1.0), 0.5, material)
        world.add_sphere((1.0, 0.0, -1.0), 0.5, material)
        with pytest.raises(RuntimeError, match="Maximum number of spheres"):
            world.add_sphere((2.0, 0.0, -1.0), 0.5, material)

    def test_clear_keeps_materials(self):
        from sampletracer.scene.world import World

        world = World(max_spheres=4)
        material = world.materials.add_lambertian((0.5, 0.5, 0.5))
        world.add_sphere((0.0, 0.0, -1.0), 0.5, material)
        world.clear()
        assert world.sphere_count == 0
        assert len(world.materials) == 1

        rec = _HitProbe()(world, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert rec["hit"] == 0

    def test_shared_material_library(self):
        from sampletracer.materials.library import MaterialLibrary
        from sampletracer.scene.world import World

        library = MaterialLibrary(capacity=4)
        glass = library.add_dielectric(1.5)
        world = World(materials=library, max_spheres=4)
        world.add_sphere((0.0, 0.0, -1.0), 0.5, glass)
        assert world.materials is library


class TestPresets:
    """Tests for the ready-made scenes."""

    def test_three_spheres_scene(self):
        from sampletracer.scene.presets import three_spheres_scene

        world, config = three_spheres_scene()
        assert world.sphere_count == 5
        assert len(world.materials) == 5
        assert config.image_width == 400
        assert config.image_height == 225
        assert config.defocus_angle == 10.0
        config.validate()

    def test_hollow_glass_bubble(self):
        from sampletracer.materials.library import MaterialKind
        from sampletracer.scene.presets import three_spheres_scene

        world, _ = three_spheres_scene()
        bubble = world.spheres[3]
        info = world.materials.info(bubble.material_id)
        assert info.kind == MaterialKind.DIELECTRIC
        assert math.isclose(info.params["refraction_index"], 1.0 / 1.5)

    def test_random_scene_is_seeded(self):
        from sampletracer.scene.presets import random_spheres_scene

        first, _ = random_spheres_scene(seed=7)
        second, _ = random_spheres_scene(seed=7)
        assert first.sphere_count == second.sphere_count
        assert [s.center for s in first.spheres] == [s.center for s in second.spheres]

    def test_random_scene_layout(self):
        from sampletracer.scene.presets import random_spheres_scene

        world, config = random_spheres_scene(seed=3)
        # Ground plus the three large spheres always exist
        assert 4 < world.sphere_count <= 4 + 22 * 22
        radii = [s.radius for s in world.spheres]
        assert radii[0] == 1000.0
        assert radii[-3:] == [1.0, 1.0, 1.0]
        assert all(r == 0.2 for r in radii[1:-3])
        assert config.lookfrom == (13.0, 2.0, 3.0)
        config.validate()

    def test_scene_registry(self):
        from sampletracer.scene.presets import SCENES, random_spheres_scene, three_spheres_scene

        assert SCENES["three-spheres"] is three_spheres_scene
        assert SCENES["random-spheres"] is random_spheres_scene

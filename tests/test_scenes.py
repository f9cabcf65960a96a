"""Tests for the built-in scenes."""

import pytest
import numpy as np

from sphereforge.vec3 import Point3
from sphereforge.camera import CameraSettings
from sphereforge.shapes import Sphere
from sphereforge.materials import Lambertian, Metal, Dielectric
from sphereforge.scenes import two_spheres, material_showcase, random_scene, SCENES


class TestTwoSpheres:

    def test_contents(self):
        world = two_spheres()
        assert len(world) == 2
        small, ground = list(world)
        assert small.radius == 0.5
        assert ground.radius == 100
        assert small.material is ground.material
        assert isinstance(small.material, Lambertian)


class TestMaterialShowcase:

    def test_contents(self):
        world = material_showcase()
        assert len(world) == 5
        kinds = [type(obj.material) for obj in world]
        assert kinds.count(Lambertian) == 2
        assert kinds.count(Metal) == 1
        assert kinds.count(Dielectric) == 2

    def test_hollow_glass(self):
        spheres = [obj for obj in material_showcase() if isinstance(obj.material, Dielectric)]
        outer, inner = spheres
        assert outer.center == inner.center
        assert outer.radius == 0.5
        assert inner.radius == -0.45
        assert outer.material is inner.material


class TestRandomScene:

    def test_seeded_scenes_match(self):
        a = random_scene(np.random.default_rng(5))
        b = random_scene(np.random.default_rng(5))
        assert len(a) == len(b)
        for sa, sb in zip(a, b):
            assert sa.center == sb.center
            assert sa.radius == sb.radius
            assert type(sa.material) is type(sb.material)

    def test_structure(self):
        world = list(random_scene(np.random.default_rng(0)))
        ground, small, big = world[0], world[1:-3], world[-3:]

        assert ground.radius == 1000
        assert ground.center == Point3(0, -1000, 0)
        assert [s.radius for s in big] == [1.0, 1.0, 1.0]
        assert 0 < len(small) <= 22 * 22
        for sphere in small:
            assert sphere.radius == 0.2
            assert sphere.center.y == pytest.approx(0.2)
            assert (sphere.center - Point3(4, 0.2, 0)).length() > 0.9

    def test_glass_is_shared(self):
        world = list(random_scene(np.random.default_rng(1)))
        glass = [s.material for s in world if isinstance(s.material, Dielectric)]
        assert glass
        assert all(g is glass[0] for g in glass)

    def test_metal_fuzz_range(self):
        for sphere in random_scene(np.random.default_rng(2)):
            if isinstance(sphere.material, Metal):
                assert 0.0 <= sphere.material.fuzz <= 0.5


class TestSceneRegistry:

    def test_names(self):
        assert set(SCENES) == {'two-spheres', 'showcase', 'random'}

    @pytest.mark.parametrize('name', sorted(SCENES))
    def test_entries(self, name):
        builder, camera_settings = SCENES[name]
        assert isinstance(camera_settings, CameraSettings)
        world = builder(np.random.default_rng(0))
        assert len(world) > 0
        assert all(isinstance(obj, Sphere) for obj in world)

    def test_random_camera(self):
        _, settings = SCENES['random']
        assert settings.look_from == Point3(13, 2, 3)
        assert settings.vfov == 20.0
        assert settings.aperture == 0.1
        assert settings.focus_dist == 10.0

"""Tests for geometric shapes."""

import pytest
import math
from sphereforge.vec3 import Vec3, Point3, Color
from sphereforge.ray import Ray
from sphereforge.shapes import Sphere, HittableList, HitRecord
from sphereforge.materials import Lambertian, Metal


class TestSphere:
    """Test Sphere class."""

    def test_creation(self):
        center = Point3(0, 0, 0)
        sphere = Sphere(center, 1.0)
        assert sphere.center == center
        assert sphere.radius == 1.0
        assert sphere.material is None

    def test_hit_through_center(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        hit = sphere.hit(ray, 0.001, float('inf'))

        assert hit is not None
        assert abs(hit.t - 4.0) < 1e-6  # Hits at z=-1
        assert abs(hit.point.z - (-1.0)) < 1e-6

    def test_near_and_far_roots(self):
        """distance - radius on the way in, distance + radius on the way out."""
        sphere = Sphere(Point3(3, 4, 0), 2.0)
        ray = Ray(Point3(0, 0, 0), Vec3(0.6, 0.8, 0))  # distance to center is 5

        near = sphere.hit(ray, 0.001, float('inf'))
        assert near.t == pytest.approx(3.0)

        far = sphere.hit(ray, near.t + 1e-6, float('inf'))
        assert far.t == pytest.approx(7.0)

    def test_roots_scale_with_direction_length(self):
        sphere = Sphere(Point3(0, 0, -10), 1.0)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -2))
        hit = sphere.hit(ray, 0.001, float('inf'))
        assert hit.t == pytest.approx(4.5)

    def test_outward_normal(self):
        sphere = Sphere(Point3(0, 0, 0), 2.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        hit = sphere.hit(ray, 0.001, float('inf'))
        assert hit.normal == Vec3(0, 0, -1)
        assert hit.normal.length() == pytest.approx(1.0)

    def test_normal_not_flipped_from_inside(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))
        hit = sphere.hit(ray, 0.001, float('inf'))

        assert hit is not None
        assert hit.t == pytest.approx(1.0)
        # Outward normal, same direction as the ray
        assert hit.normal == Vec3(0, 0, 1)

    def test_negative_radius_gives_inward_normal(self):
        sphere = Sphere(Point3(0, 0, 0), -1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        hit = sphere.hit(ray, 0.001, float('inf'))

        assert hit is not None
        assert hit.t == pytest.approx(4.0)
        assert hit.normal == Vec3(0, 0, 1)

    def test_miss(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 5, -5), Vec3(0, 0, 1))  # Ray passes above sphere
        assert sphere.hit(ray, 0.001, float('inf')) is None

    def test_miss_just_outside_radius(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 1.0001, -5), Vec3(0, 0, 1))
        assert sphere.hit(ray, 0.001, float('inf')) is None

    def test_tangent_ray_is_a_miss(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 1, -5), Vec3(0, 0, 1))
        assert sphere.hit(ray, 0.001, float('inf')) is None

    def test_behind_ray(self):
        sphere = Sphere(Point3(0, 0, -5), 1.0)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))  # Ray points away from sphere
        assert sphere.hit(ray, 0.001, float('inf')) is None

    def test_t_range(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))

        # Hit is at t=4, exclude it with t_min
        hit = sphere.hit(ray, 4.5, float('inf'))
        assert hit is not None
        assert hit.t == pytest.approx(6.0)  # Back of sphere

    def test_interval_is_open(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))

        assert sphere.hit(ray, 4.0, float('inf')).t == pytest.approx(6.0)
        assert sphere.hit(ray, 0.001, 4.0) is None
        assert sphere.hit(ray, 6.5, float('inf')) is None

    def test_with_material(self):
        material = Lambertian(Color(1, 0, 0))
        sphere = Sphere(Point3(0, 0, 0), 1.0, material)
        hit = sphere.hit(Ray(Point3(0, 0, -5), Vec3(0, 0, 1)), 0.001, float('inf'))
        assert hit.material is material

    def test_repr(self):
        assert "Sphere" in repr(Sphere(Point3(0, 0, 0), 1.0))


class TestHittableList:
    """Test HittableList aggregate."""

    def test_empty_list_misses(self):
        world = HittableList()
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        assert world.hit(ray, 0.001, float('inf')) is None
        assert len(world) == 0

    def test_add_and_len(self):
        world = HittableList()
        world.add(Sphere(Point3(0, 0, -1), 0.5))
        world.add(Sphere(Point3(0, 0, -3), 0.5))
        assert len(world) == 2
        assert all(isinstance(obj, Sphere) for obj in world)

    def test_clear(self):
        world = HittableList([Sphere(Point3(0, 0, -1), 0.5)])
        world.clear()
        assert len(world) == 0

    def test_closest_hit_wins(self):
        near_mat = Lambertian(Color(1, 0, 0))
        far_mat = Metal(Color(0, 1, 0))
        # Far object first: order must not matter
        world = HittableList([
            Sphere(Point3(0, 0, -10), 1.0, far_mat),
            Sphere(Point3(0, 0, -3), 1.0, near_mat),
        ])
        hit = world.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), 0.001, float('inf'))
        assert hit.t == pytest.approx(2.0)
        assert hit.material is near_mat

    def test_respects_t_max(self):
        world = HittableList([Sphere(Point3(0, 0, -10), 1.0)])
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        assert world.hit(ray, 0.001, 5.0) is None

    def test_shared_material_not_copied(self):
        shared = Lambertian(Color(0.5, 0.5, 0.5))
        world = HittableList([
            Sphere(Point3(-2, 0, -5), 1.0, shared),
            Sphere(Point3(2, 0, -5), 1.0, shared),
        ])
        left = world.hit(Ray(Point3(-2, 0, 0), Vec3(0, 0, -1)), 0.001, float('inf'))
        right = world.hit(Ray(Point3(2, 0, 0), Vec3(0, 0, -1)), 0.001, float('inf'))
        assert left.material is shared
        assert right.material is shared


class TestHitRecord:
    """Test HitRecord dataclass."""

    def test_fields(self):
        record = HitRecord(t=1.5, point=Point3(0, 0, 1), normal=Vec3(0, 0, 1))
        assert record.t == 1.5
        assert record.material is None

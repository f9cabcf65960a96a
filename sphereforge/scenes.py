"""
Built-in scenes.

Each builder returns a HittableList; SCENES maps a CLI name to the builder
and the camera settings the scene is meant to be viewed with.
"""

from __future__ import annotations
from typing import Callable, Dict, Optional, Tuple

import numpy as np

from .vec3 import Vec3, Point3, Color
from .shapes import Sphere, HittableList
from .materials import Lambertian, Metal, Dielectric
from .camera import CameraSettings


def two_spheres(rng: Optional[np.random.Generator] = None) -> HittableList:
    """A small diffuse sphere resting on a very large one."""
    world = HittableList()
    grey = Lambertian(Color(0.5, 0.5, 0.5))
    world.add(Sphere(Point3(0, 0, -1), 0.5, grey))
    world.add(Sphere(Point3(0, -100.5, -1), 100, grey))
    return world


def material_showcase(rng: Optional[np.random.Generator] = None) -> HittableList:
    """Diffuse, metal and hollow glass spheres side by side."""
    world = HittableList()

    ground = Lambertian(Color(0.8, 0.8, 0.0))
    center = Lambertian(Color(0.1, 0.2, 0.5))
    glass = Dielectric(1.5)
    gold = Metal(Color(0.8, 0.6, 0.2), 0.0)

    world.add(Sphere(Point3(0, -100.5, -1), 100, ground))
    world.add(Sphere(Point3(0, 0, -1), 0.5, center))
    world.add(Sphere(Point3(1, 0, -1), 0.5, gold))
    # Hollow glass: the inner negative radius sphere flips the normal
    world.add(Sphere(Point3(-1, 0, -1), 0.5, glass))
    world.add(Sphere(Point3(-1, 0, -1), -0.45, glass))

    return world


def random_scene(rng: Optional[np.random.Generator] = None) -> HittableList:
    """A field of small random spheres around three large ones.

    Args:
        rng: Random generator (a fresh unseeded one if None)
    """
    rng = rng if rng is not None else np.random.default_rng()
    world = HittableList()

    world.add(Sphere(Point3(0, -1000, 0), 1000, Lambertian(Color(0.5, 0.5, 0.5))))

    glass = Dielectric(1.5)
    keep_clear = Point3(4, 0.2, 0)

    for a in range(-11, 11):
        for b in range(-11, 11):
            choose_mat = rng.random()
            center = Point3(a + 0.9 * rng.random(), 0.2, b + 0.9 * rng.random())

            if (center - keep_clear).length() <= 0.9:
                continue

            if choose_mat < 0.8:
                # diffuse
                albedo = Vec3.random(rng) * Vec3.random(rng)
                material = Lambertian(albedo)
            elif choose_mat < 0.95:
                # metal
                albedo = (Vec3.random(rng) + 1.0) * 0.5
                material = Metal(albedo, 0.5 * rng.random())
            else:
                material = glass

            world.add(Sphere(center, 0.2, material))

    world.add(Sphere(Point3(0, 1, 0), 1.0, glass))
    world.add(Sphere(Point3(-4, 1, 0), 1.0, Lambertian(Color(0.4, 0.2, 0.1))))
    world.add(Sphere(Point3(4, 1, 0), 1.0, Metal(Color(0.7, 0.6, 0.5), 0.0)))

    return world


SceneBuilder = Callable[[Optional[np.random.Generator]], HittableList]

SCENES: Dict[str, Tuple[SceneBuilder, CameraSettings]] = {
    'two-spheres': (two_spheres, CameraSettings()),
    'showcase': (
        material_showcase,
        CameraSettings(
            look_from=Point3(3, 3, 2),
            look_at=Point3(0, 0, -1),
            vfov=20.0,
            aperture=2.0,
            focus_dist=(Point3(3, 3, 2) - Point3(0, 0, -1)).length()
        )
    ),
    'random': (
        random_scene,
        CameraSettings(
            look_from=Point3(13, 2, 3),
            look_at=Point3(0, 0, 0),
            vfov=20.0,
            aperture=0.1,
            focus_dist=10.0
        )
    ),
}

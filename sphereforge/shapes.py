"""
Surfaces a ray can strike.

Spheres are the only primitive; HittableList groups them into a world.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, Optional, TYPE_CHECKING
import math

from .vec3 import Vec3, Point3
from .ray import Ray

if TYPE_CHECKING:
    from .materials import Material


@dataclass
class HitRecord:
    """Nearest intersection found along a ray.

    Attributes:
        t: Ray parameter of the hit, in units of the direction length
        point: ray.at(t)
        normal: The geometric normal, (point - center) / radius for spheres
        material: The material at the hit point (shared, never copied)
    """
    t: float
    point: Point3
    normal: Vec3
    material: Optional[Material] = None


class Hittable(ABC):
    """Anything the renderer can trace rays against."""

    @abstractmethod
    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Find where the ray meets this surface.

        Args:
            ray: The ray to test
            t_min: Lower bound of the open interval of accepted t values
            t_max: Upper bound of the open interval of accepted t values

        Returns:
            The nearest HitRecord with t_min < t < t_max, or None
        """
        pass


class Sphere(Hittable):
    """A sphere defined by center and radius.

    A negative radius keeps the same surface but flips the normal to point
    inward. Nesting a negative-radius sphere inside a dielectric one gives a
    hollow glass shell.
    """

    def __init__(self, center: Point3, radius: float, material: Optional[Material] = None):
        """Create a sphere.

        Args:
            center: Sphere center
            radius: Signed radius; negative flips the normal inward
            material: Shared material, or None for debug normal shading
        """
        self.center = center
        self.radius = radius
        self.material = material

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Solve |O + tD - C|^2 = r^2 for t.

        With the halved linear coefficient b = D.(O-C) the roots are
        (-b -+ sqrt(b^2 - ac)) / a. A zero discriminant (tangent ray) is
        treated as a miss.
        """
        oc = ray.origin - self.center
        a = ray.direction.length_squared()
        b = oc.dot(ray.direction)
        c = oc.length_squared() - self.radius * self.radius

        discriminant = b * b - a * c
        if discriminant <= 0:
            return None

        sqrtd = math.sqrt(discriminant)

        # Near root first, far root when the near one is out of range
        root = (-b - sqrtd) / a
        if not t_min < root < t_max:
            root = (-b + sqrtd) / a
            if not t_min < root < t_max:
                return None

        point = ray.at(root)
        return HitRecord(
            t=root,
            point=point,
            # Not renormalized: the radius sign decides the normal orientation.
            normal=(point - self.center) / self.radius,
            material=self.material
        )

    def __repr__(self) -> str:
        return f"Sphere({self.center}, r={self.radius}, material={self.material!r})"


class HittableList(Hittable):
    """An ordered collection of hittable objects queried as one."""

    def __init__(self, objects: Optional[list[Hittable]] = None):
        self.objects: list[Hittable] = list(objects) if objects is not None else []

    def add(self, obj: Hittable) -> None:
        """Append an object; order does not affect which hit wins."""
        self.objects.append(obj)

    def clear(self) -> None:
        """Remove all objects."""
        self.objects.clear()

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Find the closest intersection among all objects (linear scan)."""
        closest: Optional[HitRecord] = None
        closest_t = t_max

        for obj in self.objects:
            record = obj.hit(ray, t_min, closest_t)
            if record is not None:
                closest = record
                closest_t = record.t

        return closest

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self) -> Iterator[Hittable]:
        return iter(self.objects)

    def __repr__(self) -> str:
        return f"HittableList({len(self.objects)} objects)"

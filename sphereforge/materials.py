"""
Materials: how a surface responds to an incoming ray.

Implements:
- Lambertian diffuse
- Metal (mirror reflection with fuzz)
- Dielectric (glass, water - refraction with Schlick reflectance)

A material returns a ScatterResult when the ray continues and None when it
is absorbed. Material instances are shared between every surface that uses
them and carry no mutable state, so they are safe to read from many
workers at once.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING
import math

import numpy as np

from .vec3 import Vec3, Color
from .ray import Ray

if TYPE_CHECKING:
    from .shapes import HitRecord


@dataclass
class ScatterResult:
    """Result of a material scatter operation."""
    attenuation: Color
    scattered_ray: Ray


class Material(ABC):
    """Abstract base class for materials."""

    @abstractmethod
    def scatter(self, ray_in: Ray, hit: HitRecord, rng: np.random.Generator) -> Optional[ScatterResult]:
        """Compute the scattered ray and attenuation.

        Args:
            ray_in: The incoming ray
            hit: Intersection record (point, normal, t)
            rng: Random generator owned by the calling worker

        Returns:
            ScatterResult if ray scatters, None if absorbed
        """
        pass


class Lambertian(Material):
    """Diffuse material with Lambertian (ideal matte) scattering."""

    def __init__(self, albedo: Color):
        """Create a Lambertian material.

        Args:
            albedo: The base color (RGB, each component 0-1)
        """
        self.albedo = albedo

    def scatter(self, ray_in: Ray, hit: HitRecord, rng: np.random.Generator) -> Optional[ScatterResult]:
        scatter_direction = hit.normal + Vec3.random_in_unit_sphere(rng)

        # Catch degenerate scatter direction
        if scatter_direction.near_zero():
            scatter_direction = hit.normal

        return ScatterResult(
            attenuation=self.albedo,
            scattered_ray=Ray(hit.point, scatter_direction)
        )

    def __repr__(self) -> str:
        return f"Lambertian(albedo={self.albedo})"


class Metal(Material):
    """Metallic material with specular reflection."""

    def __init__(self, albedo: Color, fuzz: float = 0.0):
        """Create a metal material.

        Args:
            albedo: The reflection color
            fuzz: Reflection blur, clamped to [0, 1] (0 = perfect mirror)
        """
        self.albedo = albedo
        self.fuzz = max(0.0, min(fuzz, 1.0))

    def scatter(self, ray_in: Ray, hit: HitRecord, rng: np.random.Generator) -> Optional[ScatterResult]:
        reflected = reflect(ray_in.direction.normalize(), hit.normal)

        if self.fuzz > 0:
            reflected = reflected + Vec3.random_in_unit_sphere(rng) * self.fuzz

        # Only scatter if reflection leaves the surface
        if reflected.dot(hit.normal) > 0:
            return ScatterResult(
                attenuation=self.albedo,
                scattered_ray=Ray(hit.point, reflected)
            )
        return None

    def __repr__(self) -> str:
        return f"Metal(albedo={self.albedo}, fuzz={self.fuzz})"


class Dielectric(Material):
    """Dielectric (glass-like) material with refraction."""

    def __init__(self, refraction_index: float = 1.5):
        """Create a dielectric material.

        Args:
            refraction_index: 1.0 = air, 1.5 = glass, 2.4 = diamond
        """
        self.refraction_index = refraction_index

    def scatter(self, ray_in: Ray, hit: HitRecord, rng: np.random.Generator) -> Optional[ScatterResult]:
        direction = ray_in.direction
        d_dot_n = hit.normal.dot(direction)

        if d_dot_n > 0:
            # Leaving the medium
            outward_normal = -hit.normal
            ni_over_nt = self.refraction_index
            cosine = self.refraction_index * d_dot_n / direction.length()
        else:
            outward_normal = hit.normal
            ni_over_nt = 1.0 / self.refraction_index
            cosine = -d_dot_n / direction.length()

        scattered_direction = reflect(direction, hit.normal)
        refracted = refract(direction, outward_normal, ni_over_nt)
        if refracted is not None:
            if rng.random() >= schlick(cosine, self.refraction_index):
                scattered_direction = refracted

        return ScatterResult(
            attenuation=Color(1.0, 1.0, 1.0),
            scattered_ray=Ray(hit.point, scattered_direction)
        )

    def __repr__(self) -> str:
        return f"Dielectric(refraction_index={self.refraction_index})"


def reflect(v: Vec3, normal: Vec3) -> Vec3:
    """Mirror v about the normal: v - 2 (v·n) n."""
    return v.reflect(normal)


def refract(v: Vec3, normal: Vec3, ni_over_nt: float) -> Optional[Vec3]:
    """Refract v through a surface using Snell's law.

    Args:
        v: Incoming direction (any length)
        normal: Unit normal on the incoming side
        ni_over_nt: Ratio of refractive indices (n1/n2)

    Returns:
        Refracted direction, or None on total internal reflection
    """
    uv = v.normalize()
    dt = uv.dot(normal)
    discriminant = 1.0 - ni_over_nt * ni_over_nt * (1.0 - dt * dt)
    if discriminant > 0:
        return (uv - normal * dt) * ni_over_nt - normal * math.sqrt(discriminant)
    return None


def schlick(cosine: float, refraction_index: float) -> float:
    """Schlick's approximation for reflectance."""
    r0 = (1 - refraction_index) / (1 + refraction_index)
    r0 = r0 * r0
    return r0 + (1 - r0) * (1 - cosine) ** 5

"""
Camera module for generating primary rays.

Supports:
- Perspective projection
- Depth of field (thin lens defocus blur)
- Configurable field of view
- Arbitrary positioning via look-at
"""

from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from .vec3 import Vec3, Point3
from .ray import Ray


@dataclass
class CameraSettings:
    """Plain settings record a Camera is built from.

    The defaults give the classic fixed camera: eye at the origin looking
    down -Z with a 4x2 image plane at distance 1.
    """
    look_from: Point3 = field(default_factory=lambda: Point3(0, 0, 0))
    look_at: Point3 = field(default_factory=lambda: Point3(0, 0, -1))
    v_up: Vec3 = field(default_factory=lambda: Vec3(0, 1, 0))
    vfov: float = 90.0
    aspect_ratio: float = 2.0
    aperture: float = 0.0
    focus_dist: float = 1.0


class Camera:
    """A camera with perspective projection and depth of field.

    Immutable after construction; one instance is shared by every worker.
    """

    def __init__(
        self,
        look_from: Optional[Point3] = None,
        look_at: Optional[Point3] = None,
        vup: Optional[Vec3] = None,
        vfov: float = 90.0,
        aspect_ratio: float = 2.0,
        aperture: float = 0.0,
        focus_dist: float = 1.0
    ):
        """Create a camera.

        Args:
            look_from: Camera position in world space (default origin)
            look_at: Point the camera is looking at (default (0, 0, -1))
            vup: World up vector (usually (0, 1, 0))
            vfov: Vertical field of view in degrees
            aspect_ratio: Width / Height ratio
            aperture: Lens aperture for depth of field (0 = pinhole)
            focus_dist: Distance to the plane in sharp focus
        """
        # Copied so the camera never shares a vector with its caller
        look_from = Point3(0, 0, 0) if look_from is None else Vec3(*look_from)
        look_at = Point3(0, 0, -1) if look_at is None else look_at
        vup = Vec3(0, 1, 0) if vup is None else vup

        half_height = math.tan(vfov * math.pi / 180.0 / 2.0)
        half_width = aspect_ratio * half_height

        # Compute orthonormal camera basis
        self.w = (look_from - look_at).normalize()  # Points backward from camera
        self.u = vup.cross(self.w).normalize()       # Points right
        self.v = self.w.cross(self.u)                # Points up

        self.origin = look_from
        self.lower_left_corner = self.origin - (
            self.u * half_width + self.v * half_height + self.w
        ) * focus_dist
        self.horizontal = self.u * (2.0 * half_width * focus_dist)
        self.vertical = self.v * (2.0 * half_height * focus_dist)

        self.lens_radius = aperture / 2.0

    @classmethod
    def from_settings(cls, settings: CameraSettings) -> Camera:
        """Build a camera from a CameraSettings record."""
        return cls(
            look_from=settings.look_from,
            look_at=settings.look_at,
            vup=settings.v_up,
            vfov=settings.vfov,
            aspect_ratio=settings.aspect_ratio,
            aperture=settings.aperture,
            focus_dist=settings.focus_dist
        )

    def get_ray(self, s: float, t: float, rng: Optional[np.random.Generator] = None) -> Ray:
        """Generate a ray for the given coordinates on the image plane.

        Args:
            s: Horizontal coordinate [0, 1] (0 = left, 1 = right)
            t: Vertical coordinate [0, 1] (0 = bottom, 1 = top)
            rng: Random generator for the lens sample

        Returns:
            A ray from the (possibly offset) lens point through the image plane
        """
        if self.lens_radius > 0:
            rd = Vec3.random_in_unit_disk(rng) * self.lens_radius
            offset = self.u * rd.x + self.v * rd.y
        else:
            offset = Vec3(0, 0, 0)

        direction = (
            self.lower_left_corner
            + self.horizontal * s
            + self.vertical * t
            - self.origin
            - offset
        )
        return Ray(self.origin + offset, direction)

    def __repr__(self) -> str:
        return f"Camera(origin={self.origin}, looking_at={self.lower_left_corner + self.horizontal/2 + self.vertical/2})"

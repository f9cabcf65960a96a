"""
Vector3 class for 3D math operations.

This is the fundamental building block of the ray tracer, used for:
- Points in 3D space
- Direction vectors
- RGB color values
"""

from __future__ import annotations
import math
from typing import Optional, Union
import numpy as np


class ZeroLengthVectorError(ValueError):
    """Raised when normalizing a vector whose length is zero."""
    pass


def _default_rng(rng: Optional[np.random.Generator]) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng()


class Vec3:
    """A 3D vector with value semantics.

    Uses numpy internally for storage while providing a clean, Pythonic
    API. Every operation returns a new vector; the only mutating method is
    make_unit_vector().
    """

    __slots__ = ('_data',)

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        self._data = np.array([x, y, z], dtype=np.float64)

    @classmethod
    def from_array(cls, arr) -> Vec3:
        """Create Vec3 from a numpy array (the array is copied)."""
        data = np.array(arr, dtype=np.float64)
        if data.shape != (3,):
            raise ValueError(f"Vec3 needs exactly 3 components, got shape {data.shape}")
        return cls._wrap(data)

    @classmethod
    def _wrap(cls, data: np.ndarray) -> Vec3:
        # Takes ownership of a freshly computed array.
        v = cls.__new__(cls)
        v._data = data
        return v

    @staticmethod
    def zeros() -> Vec3:
        return Vec3(0.0, 0.0, 0.0)

    @staticmethod
    def ones() -> Vec3:
        return Vec3(1.0, 1.0, 1.0)

    @staticmethod
    def unit_x() -> Vec3:
        return Vec3(1.0, 0.0, 0.0)

    @staticmethod
    def unit_y() -> Vec3:
        return Vec3(0.0, 1.0, 0.0)

    @staticmethod
    def unit_z() -> Vec3:
        return Vec3(0.0, 0.0, 1.0)

    @property
    def x(self) -> float:
        return float(self._data[0])

    @property
    def y(self) -> float:
        return float(self._data[1])

    @property
    def z(self) -> float:
        return float(self._data[2])

    # Aliases for color operations
    @property
    def r(self) -> float:
        return self.x

    @property
    def g(self) -> float:
        return self.y

    @property
    def b(self) -> float:
        return self.z

    def __repr__(self) -> str:
        return f"Vec3({self.x:.4f}, {self.y:.4f}, {self.z:.4f})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vec3):
            return NotImplemented
        return bool(np.allclose(self._data, other._data))

    def __hash__(self) -> int:
        return hash(tuple(self._data))

    def __iter__(self):
        return iter((self.x, self.y, self.z))

    def __len__(self) -> int:
        return 3

    def __neg__(self) -> Vec3:
        return Vec3._wrap(-self._data)

    def __add__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3._wrap(self._data + other._data)
        return Vec3._wrap(self._data + other)

    def __radd__(self, other: float) -> Vec3:
        return Vec3._wrap(other + self._data)

    def __sub__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3._wrap(self._data - other._data)
        return Vec3._wrap(self._data - other)

    def __rsub__(self, other: float) -> Vec3:
        return Vec3._wrap(other - self._data)

    def __mul__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3._wrap(self._data * other._data)
        return Vec3._wrap(self._data * other)

    def __rmul__(self, other: float) -> Vec3:
        return Vec3._wrap(other * self._data)

    def __truediv__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3._wrap(self._data / other._data)
        return Vec3._wrap(self._data / other)

    def __getitem__(self, index: int) -> float:
        return float(self._data[index])

    def length(self) -> float:
        """Return the magnitude (length) of the vector."""
        return math.sqrt(self.length_squared())

    def length_squared(self) -> float:
        """Return the squared magnitude (avoids sqrt for comparisons)."""
        return float(np.dot(self._data, self._data))

    def normalize(self) -> Vec3:
        """Return a unit vector in the same direction.

        Raises:
            ZeroLengthVectorError: if the vector has zero length
        """
        length = self.length()
        if length == 0:
            raise ZeroLengthVectorError(f"cannot normalize zero-length vector {self!r}")
        return Vec3._wrap(self._data / length)

    def make_unit_vector(self) -> None:
        """Normalize this vector in place."""
        length = self.length()
        if length == 0:
            raise ZeroLengthVectorError(f"cannot normalize zero-length vector {self!r}")
        self._data = self._data / length

    def dot(self, other: Vec3) -> float:
        """Compute dot product with another vector."""
        return float(np.dot(self._data, other._data))

    def cross(self, other: Vec3) -> Vec3:
        """Compute cross product with another vector (right-hand rule)."""
        x1, y1, z1 = self._data
        x2, y2, z2 = other._data
        return Vec3(
            y1 * z2 - z1 * y2,
            -(x1 * z2 - z1 * x2),
            x1 * y2 - y1 * x2
        )

    def reflect(self, normal: Vec3) -> Vec3:
        """Reflect this vector around the given normal."""
        return self - normal * (2.0 * self.dot(normal))

    def near_zero(self, epsilon: float = 1e-8) -> bool:
        """Check if vector is close to zero in all dimensions."""
        return bool(np.all(np.abs(self._data) < epsilon))

    def to_array(self) -> np.ndarray:
        """Return the underlying numpy array (copy)."""
        return self._data.copy()

    def clamp(self, min_val: float = 0.0, max_val: float = 1.0) -> Vec3:
        """Clamp all components to the given range."""
        return Vec3._wrap(np.clip(self._data, min_val, max_val))

    def sqrt(self) -> Vec3:
        """Per-channel square root, i.e. gamma 2 correction of a color."""
        return Vec3._wrap(np.sqrt(self._data))

    @staticmethod
    def random(rng: Optional[np.random.Generator] = None,
               min_val: float = 0.0, max_val: float = 1.0) -> Vec3:
        """Generate a random vector with components in [min_val, max_val)."""
        rng = _default_rng(rng)
        return Vec3._wrap(rng.uniform(min_val, max_val, 3))

    @staticmethod
    def random_in_unit_sphere(rng: Optional[np.random.Generator] = None) -> Vec3:
        """Generate a random point strictly inside the unit sphere."""
        rng = _default_rng(rng)
        while True:
            p = rng.uniform(-1.0, 1.0, 3)
            if float(np.dot(p, p)) < 1.0:
                return Vec3._wrap(p)

    @staticmethod
    def random_in_unit_disk(rng: Optional[np.random.Generator] = None) -> Vec3:
        """Generate a random point inside the unit disk (z=0)."""
        rng = _default_rng(rng)
        while True:
            x, y = rng.uniform(-1.0, 1.0, 2)
            if x * x + y * y < 1.0:
                return Vec3(x, y, 0.0)


def unit_vector(v: Vec3) -> Vec3:
    """Return v / |v|. The caller guarantees |v| > 0."""
    return v.normalize()


# Convenience type aliases
Point3 = Vec3
Color = Vec3

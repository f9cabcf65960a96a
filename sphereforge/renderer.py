"""
Renderer module - the heart of the ray tracer.

Implements:
- Recursive path tracing with a fixed depth cut-off
- Sky gradient background
- Per-pixel Monte Carlo sampling with sub-pixel jitter
- Scan-line parallel rendering with one random generator per line
- Gamma correction and 8-bit quantization
"""

from __future__ import annotations
import logging
import os
import platform
from concurrent.futures import ThreadPoolExecutor, ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Optional, Callable
import numpy as np

from .vec3 import Vec3, Color
from .ray import Ray
from .camera import Camera
from .shapes import Hittable

logger = logging.getLogger(__name__)

# Rays start this far along their direction to avoid self-intersection (acne).
T_MIN = 1e-3

SHADING_MODES = ('path', 'normals')

WHITE = Color(1.0, 1.0, 1.0)
SKY_BLUE = Color(0.5, 0.7, 1.0)
BLACK = Color(0.0, 0.0, 0.0)


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    width: int = 200
    height: int = 100
    samples_per_pixel: int = 100
    max_depth: int = 50
    num_threads: int = 0  # 0 = auto-detect
    use_processes: bool = False
    seed: Optional[int] = None
    jitter: bool = True
    shading: str = 'path'
    gamma: float = 2.0

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image size must be positive, got {self.width}x{self.height}")
        if self.samples_per_pixel <= 0:
            raise ValueError(f"samples_per_pixel must be positive, got {self.samples_per_pixel}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must not be negative, got {self.max_depth}")
        if self.shading not in SHADING_MODES:
            raise ValueError(f"Unknown shading mode: {self.shading} (expected one of {SHADING_MODES})")
        if self.gamma <= 0:
            raise ValueError(f"gamma must be positive, got {self.gamma}")
        if self.num_threads < 0:
            raise ValueError(f"num_threads must not be negative, got {self.num_threads}")
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 4


def sky_color(ray: Ray) -> Color:
    """Vertical white-to-blue gradient seen by rays that escape the scene."""
    unit_direction = ray.direction.normalize()
    t = 0.5 * (unit_direction.y + 1.0)
    return WHITE * (1.0 - t) + SKY_BLUE * t


def ray_color(
    ray: Ray,
    world: Hittable,
    rng: np.random.Generator,
    depth: int = 0,
    max_depth: int = 50
) -> Color:
    """Estimate the light arriving along a ray.

    Each bounce multiplies by the surface attenuation. Absorbed rays and
    rays that reach max_depth bounces contribute black; rays that leave the
    scene pick up the sky gradient.

    Args:
        ray: The ray to trace
        world: The scene to trace against
        rng: Random generator owned by the calling worker
        depth: Number of bounces already taken
        max_depth: Bounce limit

    Returns:
        The estimated color for this ray
    """
    hit = world.hit(ray, T_MIN, float('inf'))
    if hit is None:
        return sky_color(ray)

    if depth >= max_depth:
        return BLACK

    # No material - return normal as color (for debugging)
    if hit.material is None:
        return (hit.normal.normalize() + 1.0) * 0.5

    scatter_result = hit.material.scatter(ray, hit, rng)
    if scatter_result is None:
        return BLACK
    return scatter_result.attenuation * ray_color(
        scatter_result.scattered_ray, world, rng, depth + 1, max_depth
    )


def normal_color(ray: Ray, world: Hittable) -> Color:
    """Debug shading: map the unit surface normal to RGB, sky on a miss."""
    hit = world.hit(ray, T_MIN, float('inf'))
    if hit is None:
        return sky_color(ray)
    return (hit.normal.normalize() + 1.0) * 0.5


def render_row(
    row: int,
    world: Hittable,
    camera: Camera,
    settings: RenderSettings,
    seed: np.random.SeedSequence
) -> np.ndarray:
    """Render one scan line.

    Args:
        row: Output row, 0 is the top of the image
        world: Scene to render
        camera: Camera generating primary rays
        settings: Render configuration
        seed: Seed for this line's private random generator

    Returns:
        Averaged linear colors, shape (width, 3)
    """
    rng = np.random.default_rng(seed)
    width = settings.width
    height = settings.height
    samples = settings.samples_per_pixel
    j = height - 1 - row
    line = np.zeros((width, 3), dtype=np.float64)

    for i in range(width):
        pixel_color = Color(0, 0, 0)

        for _ in range(samples):
            if settings.jitter:
                du, dv = rng.random(2)
            else:
                du = dv = 0.5
            u = (i + du) / width
            v = (j + dv) / height

            ray = camera.get_ray(u, v, rng)
            if settings.shading == 'normals':
                pixel_color = pixel_color + normal_color(ray, world)
            else:
                pixel_color = pixel_color + ray_color(ray, world, rng, 0, settings.max_depth)

        line[i] = (pixel_color / samples).to_array()

    return line


# Per-process state for ProcessPoolExecutor workers, set once by the initializer.
_worker_state: dict = {}


def _init_worker(world: Hittable, camera: Camera, settings: RenderSettings) -> None:
    _worker_state['world'] = world
    _worker_state['camera'] = camera
    _worker_state['settings'] = settings


def _render_row_in_worker(row: int, seed: np.random.SeedSequence) -> np.ndarray:
    return render_row(
        row, _worker_state['world'], _worker_state['camera'], _worker_state['settings'], seed
    )


class Renderer:
    """Path tracing renderer that splits work by scan line."""

    def __init__(self, settings: RenderSettings = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def render(self, world: Hittable, camera: Camera) -> np.ndarray:
        """Render the scene and return the linear image.

        Args:
            world: The scene to render (any Hittable)
            camera: The camera to render from

        Returns:
            Averaged colors as numpy array of shape (height, width, 3),
            row 0 being the top scan line
        """
        settings = self.settings
        height = settings.height
        image = np.zeros((height, settings.width, 3), dtype=np.float64)

        seed_seq = np.random.SeedSequence(settings.seed)
        row_seeds = seed_seq.spawn(height)
        logger.info(
            "Rendering %dx%d, %d samples/pixel, max depth %d, %d %s (entropy %d)",
            settings.width, height, settings.samples_per_pixel, settings.max_depth,
            settings.num_threads, 'processes' if settings.use_processes else 'threads',
            seed_seq.entropy
        )

        completed = 0
        for row, line in self._iter_rows(world, camera, row_seeds):
            image[row] = line
            completed += 1
            logger.debug("Finished row %d (%d/%d)", row, completed, height)
            if self._progress_callback:
                self._progress_callback(completed / height)

        logger.info("Render finished")
        return image

    def _iter_rows(self, world: Hittable, camera: Camera, row_seeds: list):
        """Yield (row, line) pairs as scan lines complete, in any order."""
        settings = self.settings

        if settings.num_threads <= 1:
            for row, seed in enumerate(row_seeds):
                yield row, render_row(row, world, camera, settings, seed)
            return

        if settings.use_processes:
            # Scene and camera are shipped once per worker process.
            with ProcessPoolExecutor(
                max_workers=settings.num_threads,
                initializer=_init_worker,
                initargs=(world, camera, settings)
            ) as executor:
                futures = {
                    executor.submit(_render_row_in_worker, row, seed): row
                    for row, seed in enumerate(row_seeds)
                }
                for future in as_completed(futures):
                    yield futures[future], future.result()
        else:
            with ThreadPoolExecutor(max_workers=settings.num_threads) as executor:
                futures = {
                    executor.submit(render_row, row, world, camera, settings, seed): row
                    for row, seed in enumerate(row_seeds)
                }
                for future in as_completed(futures):
                    yield futures[future], future.result()

    def to_ldr(self, image: np.ndarray) -> np.ndarray:
        """Convert a linear image to 8-bit channels.

        Gamma 2 is a per-channel square root; channels are quantized as
        floor(c * 255.99) and clipped to [0, 255].

        Args:
            image: Linear image array (float64)

        Returns:
            LDR image as uint8 array
        """
        gamma = self.settings.gamma
        linear = np.clip(image, 0.0, None)
        if gamma == 2.0:
            corrected = np.sqrt(linear)
        else:
            corrected = np.power(linear, 1.0 / gamma)

        return np.clip(np.floor(corrected * 255.99), 0, 255).astype(np.uint8)

    def render_pixels(self, world: Hittable, camera: Camera) -> np.ndarray:
        """Render and quantize in one step, returning (height, width, 3) uint8."""
        return self.to_ldr(self.render(world, camera))


def get_platform_info() -> dict:
    """Get information about the current platform.

    Returns:
        Dictionary with platform details
    """
    info = {
        'system': platform.system(),
        'machine': platform.machine(),
        'processor': platform.processor(),
        'python_version': platform.python_version(),
        'numpy_version': np.__version__,
        'cpu_count': os.cpu_count(),
        'is_arm': platform.machine().lower() in ('arm64', 'aarch64'),
        'is_x86': platform.machine().lower() in ('x86_64', 'amd64', 'x86'),
    }
    return info

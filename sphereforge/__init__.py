"""
SphereForge - A Python Monte Carlo Ray Tracer

Renders scenes of spheres with diffuse, metal and glass materials:
- Recursive path tracing under a sky gradient
- Thin lens camera with depth of field
- Jittered multi-sample antialiasing
- Scan-line parallel rendering (threads or processes)
- Plain-text PPM and Pillow image output
- YAML/JSON scene files
"""

__version__ = "0.1.0"
__author__ = "SphereForge Team"

from .vec3 import Vec3, Point3, Color, ZeroLengthVectorError, unit_vector
from .ray import Ray
from .shapes import Sphere, HittableList, HitRecord, Hittable
from .materials import Material, ScatterResult, Lambertian, Metal, Dielectric, reflect, refract, schlick
from .camera import Camera, CameraSettings
from .renderer import (
    Renderer, RenderSettings, ray_color, normal_color, sky_color, render_row, get_platform_info
)
from .ppm import PPMFormatError, format_ppm, write_ppm, read_ppm, save_image
from .scenes import SCENES, two_spheres, material_showcase, random_scene
from .scene_parser import SceneParser, SceneParseError, load_scene, parse_scene

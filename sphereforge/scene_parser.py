"""
Scene description parser.

Supports a YAML (or JSON) scene description format with:
- Camera configuration
- Render settings
- Materials library (each material is shared by every sphere naming it)
- Objects (spheres with materials)

Example scene file:
```yaml
camera:
  look_from: [13, 2, 3]
  look_at: [0, 0, 0]
  vfov: 20
  aperture: 0.1
  focus_dist: 10

render:
  width: 400
  height: 200
  samples: 100
  max_depth: 50
  seed: 7

materials:
  ground:
    type: lambertian
    albedo: [0.5, 0.5, 0.5]

  glass:
    type: dielectric
    refraction_index: 1.5

objects:
  - type: sphere
    center: [0, -1000, 0]
    radius: 1000
    material: ground

  - type: sphere
    center: [0, 1, 0]
    radius: 1
    material: glass

  - type: sphere
    center: [0, 1, 0]
    radius: -0.9
    material: glass
```
"""

from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional, Tuple

import yaml

from .vec3 import Vec3, Color, ZeroLengthVectorError
from .camera import Camera
from .shapes import Sphere, HittableList
from .materials import Material, Lambertian, Metal, Dielectric
from .renderer import RenderSettings

logger = logging.getLogger(__name__)


class SceneParseError(Exception):
    """Raised for unreadable or inconsistent scene documents."""
    pass


class SceneParser:
    """Turns a scene document into (world, camera, settings)."""

    def __init__(self):
        self.materials: Dict[str, Material] = {}
        self.objects: HittableList = HittableList()
        self.camera: Optional[Camera] = None
        self.settings: Optional[RenderSettings] = None

    def parse_file(self, filepath: str) -> Tuple[HittableList, Camera, RenderSettings]:
        """Parse a scene file.

        Args:
            filepath: Path to the scene file (YAML or JSON)

        Returns:
            Tuple of (world, camera, settings)
        """
        path = Path(filepath)
        if not path.exists():
            raise SceneParseError(f"Scene file not found: {filepath}")

        content = path.read_text()

        try:
            if path.suffix == '.json':
                data = json.loads(content)
            else:
                # YAML is a superset of JSON, so this covers unknown suffixes too
                data = yaml.safe_load(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SceneParseError(f"Cannot parse {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise SceneParseError(f"Scene file must contain a mapping at top level: {filepath}")

        logger.info("Loading scene from %s", path)
        return self.parse_dict(data)

    def parse_dict(self, data: Dict[str, Any]) -> Tuple[HittableList, Camera, RenderSettings]:
        """Parse a scene from a dictionary.

        Args:
            data: Scene description dictionary

        Returns:
            Tuple of (world, camera, settings)
        """
        # Objects refer to materials by name
        if data.get('materials') is not None:
            self._parse_materials(data['materials'])

        if data.get('objects') is not None:
            self._parse_objects(data['objects'])

        # Settings before camera: the image size gives the default aspect ratio
        render_data = self._section(data, 'render')
        try:
            self.settings = RenderSettings(**self._settings_kwargs(render_data))
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Invalid render settings: {e}") from e

        self._parse_camera(self._section(data, 'camera'))

        logger.debug(
            "Parsed %d materials and %d objects", len(self.materials), len(self.objects)
        )
        return self.objects, self.camera, self.settings

    @staticmethod
    def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
        """Return a top-level mapping section; absent or empty (null) is {}."""
        section = data.get(name)
        if section is None:
            return {}
        if not isinstance(section, dict):
            raise SceneParseError(f"'{name}' must be a mapping, got {type(section).__name__}")
        return section

    def _parse_vec3(self, data: Any) -> Vec3:
        """Read a vector written as [x, y, z] or {x:, y:, z:}."""
        try:
            if isinstance(data, (list, tuple)):
                if len(data) != 3:
                    raise SceneParseError(f"Vec3 must have 3 components, got {len(data)}")
                return Vec3(float(data[0]), float(data[1]), float(data[2]))
            elif isinstance(data, dict):
                return Vec3(
                    float(data.get('x', 0)),
                    float(data.get('y', 0)),
                    float(data.get('z', 0))
                )
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Cannot parse Vec3 from: {data}") from e
        raise SceneParseError(f"Cannot parse Vec3 from: {data}")

    def _parse_color(self, data: Any) -> Color:
        """Read a colour written as [r, g, b], {r:, g:, b:} or "#rrggbb"."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Color must have 3 components, got {len(data)}")
            return self._parse_vec3(data)
        elif isinstance(data, dict):
            try:
                return Color(
                    float(data.get('r', 0)),
                    float(data.get('g', 0)),
                    float(data.get('b', 0))
                )
            except (TypeError, ValueError) as e:
                raise SceneParseError(f"Cannot parse Color from: {data}") from e
        elif isinstance(data, str):
            # Handle hex colors
            if data.startswith('#') and len(data) == 7:
                try:
                    r = int(data[1:3], 16) / 255.0
                    g = int(data[3:5], 16) / 255.0
                    b = int(data[5:7], 16) / 255.0
                except ValueError as e:
                    raise SceneParseError(f"Cannot parse color from string: {data}") from e
                return Color(r, g, b)
            raise SceneParseError(f"Cannot parse color from string: {data}")
        raise SceneParseError(f"Cannot parse Color from: {data}")

    def _parse_material(self, mat_data: Dict[str, Any]) -> Material:
        """Build one material from its description."""
        if not isinstance(mat_data, dict):
            raise SceneParseError(f"Material must be a mapping, got: {mat_data!r}")
        mat_type = str(mat_data.get('type', 'lambertian')).lower()

        if mat_type == 'lambertian':
            return Lambertian(self._parse_color(mat_data.get('albedo', [0.5, 0.5, 0.5])))

        elif mat_type == 'metal':
            albedo = self._parse_color(mat_data.get('albedo', [0.8, 0.8, 0.8]))
            return Metal(albedo, self._parse_float(mat_data, 'fuzz', 0.0))

        elif mat_type == 'dielectric':
            key = 'refraction_index' if 'refraction_index' in mat_data else 'ior'
            return Dielectric(self._parse_float(mat_data, key, 1.5))

        raise SceneParseError(f"Unknown material type: {mat_type}")

    @staticmethod
    def _parse_float(data: Dict[str, Any], key: str, default: float) -> float:
        try:
            return float(data.get(key, default))
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"'{key}' must be a number, got: {data.get(key)!r}") from e

    def _parse_materials(self, materials_data: Dict[str, Any]) -> None:
        """Build the named material library; each entry is created once."""
        if not isinstance(materials_data, dict):
            raise SceneParseError("'materials' must be a mapping of name to material")
        for name, mat_data in materials_data.items():
            self.materials[name] = self._parse_material(mat_data)

    def _get_material(self, mat_ref: Any) -> Optional[Material]:
        """Resolve a sphere's material: a library name, an inline mapping or None."""
        if mat_ref is None:
            return None
        if isinstance(mat_ref, str):
            if mat_ref not in self.materials:
                raise SceneParseError(f"Unknown material: {mat_ref}")
            return self.materials[mat_ref]
        elif isinstance(mat_ref, dict):
            return self._parse_material(mat_ref)
        raise SceneParseError(f"Invalid material reference: {mat_ref}")

    def _parse_objects(self, objects_data: list) -> None:
        """Build the spheres of the objects section."""
        if not isinstance(objects_data, list):
            raise SceneParseError("'objects' must be a list of objects")
        for obj_data in objects_data:
            if not isinstance(obj_data, dict):
                raise SceneParseError(f"Object must be a mapping, got: {obj_data!r}")
            obj_type = str(obj_data.get('type', 'sphere')).lower()
            if obj_type != 'sphere':
                raise SceneParseError(f"Unknown object type: {obj_type}")

            material = self._get_material(obj_data.get('material'))
            center = self._parse_vec3(obj_data.get('center', [0, 0, 0]))
            radius = self._parse_float(obj_data, 'radius', 1.0)
            if radius == 0:
                raise SceneParseError("Sphere radius must be non-zero")
            self.objects.add(Sphere(center, radius, material))

    def _parse_camera(self, camera_data: Dict[str, Any]) -> None:
        """Build the camera; aspect ratio defaults to the image width/height."""
        default_aspect = self.settings.width / self.settings.height
        try:
            self.camera = Camera(
                look_from=self._parse_vec3(camera_data.get('look_from', [0, 0, 0])),
                look_at=self._parse_vec3(camera_data.get('look_at', [0, 0, -1])),
                vup=self._parse_vec3(camera_data.get('vup', [0, 1, 0])),
                vfov=self._parse_float(camera_data, 'vfov', 90.0),
                aspect_ratio=self._parse_float(camera_data, 'aspect_ratio', default_aspect),
                aperture=self._parse_float(camera_data, 'aperture', 0.0),
                focus_dist=self._parse_float(camera_data, 'focus_dist', 1.0)
            )
        except ZeroLengthVectorError as e:
            raise SceneParseError(
                "Camera needs look_from != look_at and vup not parallel to the view direction"
            ) from e

    @staticmethod
    def _settings_kwargs(settings_data: Dict[str, Any]) -> Dict[str, Any]:
        """Map the render section onto RenderSettings arguments."""
        seed = settings_data.get('seed')
        jitter = settings_data.get('jitter', True)
        if not isinstance(jitter, bool):
            raise SceneParseError(f"'jitter' must be true or false, got: {jitter!r}")
        return dict(
            width=int(settings_data.get('width', 200)),
            height=int(settings_data.get('height', 100)),
            samples_per_pixel=int(settings_data.get('samples', 100)),
            max_depth=int(settings_data.get('max_depth', 50)),
            num_threads=int(settings_data.get('threads', 0)),
            seed=int(seed) if seed is not None else None,
            jitter=jitter,
            shading=str(settings_data.get('shading', 'path')),
            gamma=float(settings_data.get('gamma', 2.0))
        )


def load_scene(filepath: str) -> Tuple[HittableList, Camera, RenderSettings]:
    """Convenience function to load a scene file.

    Args:
        filepath: Path to the scene file

    Returns:
        Tuple of (world, camera, settings)
    """
    parser = SceneParser()
    return parser.parse_file(filepath)


def parse_scene(data: Dict[str, Any]) -> Tuple[HittableList, Camera, RenderSettings]:
    """Convenience function to parse a scene from a dictionary."""
    parser = SceneParser()
    return parser.parse_dict(data)

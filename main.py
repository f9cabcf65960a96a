#!/usr/bin/env python3
"""
SphereForge - A Python Monte Carlo Ray Tracer

Main entry point for rendering scenes.
"""

import argparse
import dataclasses
import logging
import sys
import time
from pathlib import Path

import numpy as np

from sphereforge.camera import Camera
from sphereforge.ppm import save_image, write_ppm
from sphereforge.renderer import Renderer, RenderSettings, get_platform_info
from sphereforge.scene_parser import SceneParseError, load_scene
from sphereforge.scenes import SCENES


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='SphereForge - A Python Monte Carlo Ray Tracer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --scene random --output render.ppm
  python main.py --width 400 --height 200 --samples 20 --seed 1 --output small.png
  python main.py --scene-file scenes/glass.yaml --threads 8 --processes --output glass.ppm
  python main.py --scene two-spheres --shading normals --output - > normals.ppm
        '''
    )

    parser.add_argument('--width', type=int, default=200, help='Image width (default: 200)')
    parser.add_argument('--height', type=int, default=100, help='Image height (default: 100)')
    parser.add_argument('--samples', type=int, default=100, help='Samples per pixel (default: 100)')
    parser.add_argument('--depth', type=int, default=50, help='Max ray depth (default: 50)')
    parser.add_argument('--threads', type=int, default=0, help='Number of workers (0=auto)')
    parser.add_argument('--processes', action='store_true',
                        help='Use worker processes instead of threads')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for reproducible renders')
    parser.add_argument('--scene', type=str, default='random', choices=sorted(SCENES),
                        help='Built-in scene to render (default: random)')
    parser.add_argument('--scene-file', type=str, default=None,
                        help='YAML/JSON scene file (overrides --scene and the render flags)')
    parser.add_argument('--shading', type=str, default='path', choices=['path', 'normals'],
                        help='Shading mode (default: path)')
    parser.add_argument('--output', type=str, default='output/render.ppm',
                        help="Output filename, or '-' for PPM on stdout")
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    parser.add_argument('--info', action='store_true', help='Show platform info and exit')
    return parser


def main(argv=None):
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s'
    )

    # Progress and banners go to stderr when the image itself goes to stdout
    out = sys.stderr if args.output == '-' else sys.stdout

    if args.info:
        info = get_platform_info()
        print("SphereForge Platform Info:", file=out)
        print(f"  System: {info['system']}", file=out)
        print(f"  Machine: {info['machine']}", file=out)
        print(f"  Processor: {info['processor']}", file=out)
        print(f"  Python: {info['python_version']}", file=out)
        print(f"  NumPy: {info['numpy_version']}", file=out)
        print(f"  CPU Cores: {info['cpu_count']}", file=out)
        print(f"  ARM: {info['is_arm']}", file=out)
        print(f"  x86: {info['is_x86']}", file=out)
        return 0

    print("=" * 60, file=out)
    print("SphereForge Ray Tracer", file=out)
    print("=" * 60, file=out)

    try:
        if args.scene_file:
            print(f"\nLoading scene file: {args.scene_file}", file=out)
            world, camera, settings = load_scene(args.scene_file)
        else:
            settings = RenderSettings(
                width=args.width,
                height=args.height,
                samples_per_pixel=args.samples,
                max_depth=args.depth,
                num_threads=args.threads,
                use_processes=args.processes,
                seed=args.seed,
                shading=args.shading
            )
            print(f"\nCreating scene: {args.scene}", file=out)
            builder, camera_settings = SCENES[args.scene]
            world = builder(np.random.default_rng(args.seed))
            camera = Camera.from_settings(dataclasses.replace(
                camera_settings, aspect_ratio=settings.width / settings.height
            ))
    except SceneParseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: invalid settings: {e}", file=sys.stderr)
        return 1

    print(f"  Objects in scene: {len(world)}", file=out)
    print("\nRender Settings:", file=out)
    print(f"  Resolution: {settings.width}x{settings.height}", file=out)
    print(f"  Samples: {settings.samples_per_pixel}", file=out)
    print(f"  Max Depth: {settings.max_depth}", file=out)
    print(f"  Workers: {settings.num_threads} ({'processes' if settings.use_processes else 'threads'})", file=out)

    renderer = Renderer(settings)

    # Progress tracking
    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '█' * filled + '░' * (bar_len - filled)
            print(f'\rRendering: [{bar}] {pct}%', end='', flush=True, file=out)

    renderer.set_progress_callback(progress_callback)

    print("\nRendering...", file=out)
    start_time = time.time()

    pixels = renderer.render_pixels(world, camera)

    elapsed = time.time() - start_time
    print(f"\nRender completed in {elapsed:.2f} seconds", file=out)
    if elapsed > 0:
        rays = settings.width * settings.height * settings.samples_per_pixel
        print(f"  Samples per second: {rays / elapsed:.0f}", file=out)

    try:
        if args.output == '-':
            write_ppm(pixels, sys.stdout)
        else:
            output_path = Path(args.output)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            print(f"\nSaving to: {args.output}", file=out)
            save_image(pixels, output_path)
    except OSError as e:
        print(f"Error: cannot write {args.output}: {e}", file=sys.stderr)
        return 1

    print("\nDone!", file=out)
    return 0


if __name__ == '__main__':
    sys.exit(main())

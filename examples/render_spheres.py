#!/usr/bin/env python3
"""Render a sphere scene with the multithreaded path tracer.

This script builds one of the preset scenes, renders it with progressive
per-pass accumulation on a pool of worker threads and saves the result.
With ``--preview`` the render runs on a background thread while a Taichi
window shows the image and its completion percentage.

Usage:
    python -m examples.render_spheres [options]

Options:
    --width WIDTH         Image width in pixels (default: 320)
    --height HEIGHT       Image height in pixels (default: 180)
    --samples SAMPLES     Number of samples per pixel (default: 16)
    --max-depth DEPTH     Maximum bounces per camera ray (default: 50)
    --workers N           Worker threads (default: CPU count)
    --seed SEED           Seed for a reproducible render
    --scene NAME          showcase or random (default: showcase)
    --output OUTPUT       .png or .ppm path, or - for PPM on stdout
                          (default: spheres.png)
    --preview             Show a live preview window while rendering
    --quiet               Suppress progress output
    --verbose             Enable debug logging

Example:
    python -m examples.render_spheres --scene random --samples 64 --seed 1
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

import numpy as np
import taichi as ti


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a sphere scene with the path tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=320,
        help="Image width in pixels (default: 320)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=180,
        help="Image height in pixels (default: 180)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=16,
        help="Number of samples per pixel (default: 16)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=50,
        help="Maximum bounces per camera ray (default: 50)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker threads (default: CPU count)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for a reproducible render",
    )
    parser.add_argument(
        "--scene",
        choices=["showcase", "random"],
        default="showcase",
        help="Scene preset (default: showcase)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="spheres.png",
        help="Output .png or .ppm path, or - for PPM on stdout (default: spheres.png)",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show a live preview window while rendering",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def render_spheres(args: argparse.Namespace) -> None:
    """Render the chosen scene and write the image.

    Args:
        args: Parsed command-line arguments.
    """
    from src.pathtracer.core.progressive import ProgressiveRenderer
    from src.pathtracer.core.settings import RenderSettings
    from src.pathtracer.preview.export import save_image, write_ppm
    from src.pathtracer.preview.interactive import LivePreview
    from src.pathtracer.scene.presets import create_scene

    settings = RenderSettings(
        width=args.width,
        height=args.height,
        samples=args.samples,
        max_depth=args.max_depth,
        workers=args.workers,
        seed=args.seed,
    )

    if not args.quiet:
        print(
            f"Creating {args.scene} scene ({settings.width}x{settings.height})...",
            file=sys.stderr,
        )
    world, camera = create_scene(args.scene, settings.aspect_ratio, np.random.default_rng(args.seed))
    renderer = ProgressiveRenderer(settings, camera, world)

    if not args.quiet:
        print(
            f"Rendering {settings.samples} samples per pixel "
            f"on {settings.resolved_workers()} threads...",
            file=sys.stderr,
        )

    start_time = time.time()

    if args.preview and LivePreview.is_display_available():
        ti.init(arch=ti.cpu)
        preview = LivePreview(settings.width, settings.height)
        thread = renderer.start()
        preview.run_until_closed(thread)
        # Finish the render if the window was closed early
        thread.join()
    else:
        if args.preview:
            print("No display available, rendering without preview", file=sys.stderr)

        def progress_callback(current: int, target: int) -> None:
            if not args.quiet:
                elapsed = time.time() - start_time
                progress_pct = (current / target) * 100 if target > 0 else 0
                samples_per_sec = current / elapsed if elapsed > 0 else 0
                print(
                    f"\r  Progress: {current}/{target} samples "
                    f"({progress_pct:.1f}%) - {samples_per_sec:.2f} spp/s",
                    end="",
                    file=sys.stderr,
                    flush=True,
                )

        renderer.render(callback=progress_callback)

        if not args.quiet:
            print(file=sys.stderr)  # Newline after progress

    if args.output == "-":
        write_ppm(renderer.get_image_numpy(), sys.stdout)
        sys.stdout.flush()
    else:
        output_file = Path(args.output)
        save_image(renderer.get_image_numpy(), output_file)
        if not args.quiet:
            print(f"Saved to: {output_file.absolute()}", file=sys.stderr)

    if not args.quiet:
        print(f"Total time: {time.time() - start_time:.2f}s", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        render_spheres(args)
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

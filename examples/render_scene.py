#!/usr/bin/env python3
"""Render a preset or a scene file to a PNG image.

Usage:
    python -m examples.render_scene [options]

Options:
    --preset NAME       Preset scene to render (default: candy_land)
    --scene PATH        JSON scene description (overrides --preset)
    --width WIDTH       Image width in pixels (default: 800)
    --height HEIGHT     Image height in pixels (default: 600)
    --workers N         Worker threads for the row loop (default: CPU count)
    --arch ARCH         Taichi backend: cpu or gpu (default: cpu)
    --output OUTPUT     Output file path (default: render.png)
    --save-scene PATH   Also write the rendered scene as JSON
    --list-presets      Print available presets and exit
    --quiet             Only log warnings and errors

Example:
    python -m examples.render_scene --preset mirror_gallery --width 640 --height 480
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import taichi as ti

logger = logging.getLogger("render_scene")


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a sphere scene with Phong shading.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--preset",
        type=str,
        default="candy_land",
        help="Preset scene to render (default: candy_land)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene description (overrides --preset)",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=800,
        help="Image width in pixels (default: 800)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=600,
        help="Image height in pixels (default: 600)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker threads for the row loop (default: CPU count)",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu"),
        default="cpu",
        help="Taichi backend (default: cpu)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="render.png",
        help="Output file path (default: render.png)",
    )
    parser.add_argument(
        "--save-scene",
        type=str,
        default=None,
        help="Also write the rendered scene as JSON",
    )
    parser.add_argument(
        "--list-presets",
        action="store_true",
        help="Print available presets and exit",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only log warnings and errors",
    )
    return parser.parse_args()


def render_scene(
    preset: str = "candy_land",
    scene_path: str | None = None,
    width: int = 800,
    height: int = 600,
    workers: int | None = None,
    output_path: str = "render.png",
    save_scene_path: str | None = None,
) -> Path:
    """Render a scene and save it to file.

    Args:
        preset: Preset name, used when scene_path is None.
        scene_path: Optional JSON scene description.
        width: Image width in pixels.
        height: Image height in pixels.
        workers: Worker count hint for the renderer.
        output_path: Output file path (PNG).
        save_scene_path: Optional path to write the scene description to.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from phongtrace.core.renderer import render
    from phongtrace.preview.export import save_png
    from phongtrace.scene.manager import Scene, load_scene_config, save_scene_config
    from phongtrace.scene.presets import DEFAULT_CAMERA, create_preset_scene

    if scene_path is not None:
        config = load_scene_config(scene_path)
        scene = Scene.from_config(config)
        camera = config.camera if config.camera is not None else DEFAULT_CAMERA
        logger.info("Loaded scene %s", scene_path)
    else:
        scene, camera = create_preset_scene(preset)
        logger.info("Using preset %s", preset)

    if save_scene_path is not None:
        save_scene_config(scene.to_config(camera), save_scene_path)

    frame = render(scene, camera, width, height, workers=workers)

    output_file = Path(output_path)
    save_png(frame, str(output_file))
    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    if args.list_presets:
        from phongtrace.scene.presets import list_presets

        for name in list_presets():
            print(name)
        return 0

    ti.init(arch=ti.gpu if args.arch == "gpu" else ti.cpu)

    try:
        output_file = render_scene(
            preset=args.preset,
            scene_path=args.scene,
            width=args.width,
            height=args.height,
            workers=args.workers,
            output_path=args.output,
            save_scene_path=args.save_scene,
        )
    except (KeyError, ValueError, OSError) as e:
        logger.error("%s", e)
        return 1

    logger.info("Saved to: %s", output_file.absolute())
    return 0


if __name__ == "__main__":
    sys.exit(main())

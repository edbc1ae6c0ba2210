"""
Command line interface for rendering looping noise frames.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict

from dotenv import load_dotenv

from .config import NoiseSettings, RenderConfig, load_config
from .images import FrameWriteError, ImageDecodeError, load_source_images
from .logging_setup import configure_logging
from .rendering import FrameRenderer

# CLI option name -> RenderConfig field.
_RENDER_OVERRIDES = {
    "output_dir": "output_dir",
    "gradient": "gradient_path",
    "text": "text_path",
    "border": "border_path",
    "duration": "duration_seconds",
    "ups": "updates_per_second",
    "fps": "fps",
    "x_scale": "x_scale",
    "y_scale": "y_scale",
    "rescale_scale": "rescale_scale",
    "rescale_offset": "rescale_offset",
    "resize": "resize_output",
    "border_mask": "apply_border",
    "workers": "workers",
}
_NOISE_OVERRIDES = ("seed", "octaves", "persistence")


def _seed(value: str) -> int:
    try:
        return int(value, 0)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid seed: {value!r}") from exc


def _positive_int(value: str) -> int:
    parsed = int(value)
    if parsed <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="noiseloop",
        description="Render a seamlessly looping 4D noise animation as numbered PNG frames.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("noiseloop.json"),
        help="JSON configuration file (default: noiseloop.json; environment variables are used when missing).",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Existing directory that receives the frames (default: frames).",
    )
    parser.add_argument("--gradient", type=Path, help="Gradient image burned under the noise.")
    parser.add_argument("--text", type=Path, help="Text image overlaid on every frame.")
    parser.add_argument("--border", type=Path, help="Border image used for resizing and masking.")

    timing = parser.add_argument_group("loop timing")
    timing.add_argument("--duration", type=float, help="Loop duration in seconds (default: 5).")
    timing.add_argument(
        "--ups",
        type=float,
        help="Noise-space traversal speed in loop updates per second (default: 0.6).",
    )
    timing.add_argument("--fps", type=float, help="Frames per second (default: 30).")

    texture = parser.add_argument_group("noise texture")
    texture.add_argument("--x-scale", type=float, help="Horizontal pixel to noise scale.")
    texture.add_argument("--y-scale", type=float, help="Vertical pixel to noise scale.")
    texture.add_argument("--rescale-scale", type=float, help="Multiplier applied to raw noise.")
    texture.add_argument("--rescale-offset", type=float, help="Offset added after scaling raw noise.")
    texture.add_argument("--seed", type=_seed, help="Noise seed (decimal or 0x-prefixed).")
    texture.add_argument("--octaves", type=_positive_int, help="Number of fractal octaves.")
    texture.add_argument("--persistence", type=float, help="Amplitude falloff between octaves.")

    output = parser.add_argument_group("output")
    output.add_argument(
        "--resize",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Resize frames to the border image dimensions.",
    )
    output.add_argument(
        "--border-mask",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Clear the canvas under the border margin and overlay the border.",
    )
    output.add_argument(
        "--frame",
        dest="frames",
        type=int,
        action="append",
        help="Render only this frame index (repeatable).",
    )
    output.add_argument("--workers", type=_positive_int, help="Number of frame rendering threads.")
    output.add_argument(
        "--dry-run",
        action="store_true",
        help="Load the images and report the render plan without writing frames.",
    )

    parser.add_argument("--log-file", type=Path, help="Also write log output to this file.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def resolve_config(args: argparse.Namespace) -> RenderConfig:
    """Load the configured defaults and apply command line overrides."""
    config = load_config(args.config)

    render_changes: Dict[str, Any] = {
        field_name: getattr(args, option)
        for option, field_name in _RENDER_OVERRIDES.items()
        if getattr(args, option) is not None
    }
    noise_changes = {
        name: getattr(args, name)
        for name in _NOISE_OVERRIDES
        if getattr(args, name) is not None
    }
    if noise_changes:
        render_changes["noise"] = replace(config.noise, **noise_changes)
    return replace(config, **render_changes) if render_changes else config


def _log_plan(logger: logging.Logger, config: RenderConfig, renderer: FrameRenderer) -> None:
    canvas_width, canvas_height = renderer.images.canvas_size
    output_width, output_height = renderer.output_size
    noise: NoiseSettings = config.noise
    logger.info(
        "Loop: %s frames over %.2fs at %.2f fps, radius %.4f",
        config.num_frames,
        config.duration_seconds,
        config.fps,
        config.loop_radius,
    )
    logger.info(
        "Noise: seed %#x, %s octaves, persistence %.2f",
        noise.seed,
        noise.octaves,
        noise.persistence,
    )
    logger.info(
        "Canvas %sx%s -> output %sx%s (resize=%s, border=%s)",
        canvas_width,
        canvas_height,
        output_width,
        output_height,
        config.needs_resize,
        config.apply_border,
    )


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)
    logger = configure_logging(args.verbose, args.log_file)

    config = resolve_config(args)
    if config.num_frames <= 0:
        parser.error(
            f"duration {config.duration_seconds} at {config.fps} fps yields no frames"
        )
    for index in args.frames or ():
        if not 0 <= index < config.num_frames:
            parser.error(f"--frame {index} is outside [0, {config.num_frames})")

    try:
        images = load_source_images(config)
    except ImageDecodeError as exc:
        logger.error("Image loading failed: %s", exc)
        return 1

    renderer = FrameRenderer(config, images, logger=logger)
    _log_plan(logger, config, renderer)
    if args.dry_run:
        logger.info("Dry run: no frames written")
        return 0

    try:
        summary = renderer.render_all(args.frames)
    except FrameWriteError as exc:
        logger.error("Frame writing failed: %s", exc)
        return 1

    logger.info(
        "Rendered %s frames to %s in %.1fs",
        summary.frame_count,
        summary.output_dir,
        summary.elapsed_seconds,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())

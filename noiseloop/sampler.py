"""Map frame indices onto a closed loop through noise space and build noise canvases."""

from __future__ import annotations

import math
from typing import Tuple

import numpy as np

from noiseloop.config import RenderConfig
from noiseloop.noise import LoopNoise


def frame_angle(frame: int, num_frames: int) -> float:
    """Angle of ``frame`` along the loop, one full turn per ``num_frames``."""
    return frame / num_frames * math.tau


def loop_point(config: RenderConfig, frame: int) -> Tuple[float, float]:
    """Return the point on the loop circle sampled for ``frame``."""
    angle = frame_angle(frame, config.num_frames)
    radius = config.loop_radius
    return math.cos(angle) * radius, math.sin(angle) * radius


def noise_point(
    config: RenderConfig,
    frame: int,
    x: int,
    y: int,
) -> Tuple[float, float, float, float]:
    """Full 4D coordinate sampled for pixel ``(x, y)`` of ``frame``."""
    loop_x, loop_y = loop_point(config, frame)
    return loop_x, loop_y, x * config.x_scale, y * config.y_scale


def noise_to_byte(config: RenderConfig, value: float) -> int:
    scaled = math.floor(config.rescale(value) * 255)
    return max(0, min(255, scaled))


def noise_to_bytes(config: RenderConfig, values: np.ndarray) -> np.ndarray:
    """Vectorised :func:`noise_to_byte`; saturates instead of wrapping."""
    scaled = np.floor((values * config.rescale_scale + config.rescale_offset) * 255.0)
    return np.clip(scaled, 0, 255).astype(np.uint8)


def render_noise(
    noise: LoopNoise,
    config: RenderConfig,
    frame: int,
    width: int,
    height: int,
) -> np.ndarray:
    """Build an opaque grayscale BGRA canvas of noise for ``frame``."""
    loop_x, loop_y = loop_point(config, frame)
    xs = np.arange(width, dtype=np.float64) * config.x_scale
    ys = np.arange(height, dtype=np.float64) * config.y_scale
    values = noise_to_bytes(config, noise.sample_plane(loop_x, loop_y, xs, ys))

    canvas = np.empty((height, width, 4), dtype=np.uint8)
    canvas[..., :3] = values[..., None]
    canvas[..., 3] = 255
    return canvas


__all__ = [
    "frame_angle",
    "loop_point",
    "noise_point",
    "noise_to_byte",
    "noise_to_bytes",
    "render_noise",
]

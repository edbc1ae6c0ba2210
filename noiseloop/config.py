"""Configuration dataclasses and loading helpers for the noise loop renderer."""

from __future__ import annotations

import json
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

DEFAULT_ASSETS_DIR = Path("assets")
DEFAULT_SEED = 0xD9E


def _parse_bool(value: Any, default: bool) -> bool:
    """Parse truthy/falsy values from multiple input types."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    if isinstance(value, (int, float)):
        return value != 0
    return default


def _parse_positive_int(value: Any, default: int) -> int:
    """Parse a positive integer with fallback to default."""
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def _parse_int(value: Any, default: int) -> int:
    """Parse any integer, accepting ``0x`` prefixed strings."""
    if isinstance(value, str):
        try:
            return int(value.strip(), 0)
        except ValueError:
            return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _parse_float(value: Any, default: float) -> float:
    """Parse a floating point number with fallback to default."""
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _parse_path(value: Any, default: Path) -> Path:
    if value is None:
        return default
    text = str(value).strip()
    return Path(text) if text else default


@dataclass(frozen=True)
class NoiseSettings:
    """Parameters of the fractal noise source."""

    seed: int = DEFAULT_SEED
    octaves: int = 4
    persistence: float = 0.75
    lacunarity: float = 2.0
    frequency: float = 1.0


@dataclass(frozen=True)
class RenderConfig:
    """Immutable settings shared by every stage of a render run."""

    duration_seconds: float = 5.0
    updates_per_second: float = 0.6
    fps: float = 30.0
    x_scale: float = 1.0 / 50.0 * 2.0
    y_scale: float = 1.0 / 50.0
    rescale_scale: float = 0.25
    rescale_offset: float = 0.75
    resize_output: bool = True
    apply_border: bool = False
    output_dir: Path = Path("frames")
    gradient_path: Path = DEFAULT_ASSETS_DIR / "gradient.png"
    text_path: Path = DEFAULT_ASSETS_DIR / "text.png"
    border_path: Path = DEFAULT_ASSETS_DIR / "border.png"
    # Noise sampling holds the GIL, so extra threads mostly overlap PNG encoding and file writes.
    workers: int = 1
    noise: NoiseSettings = field(default_factory=NoiseSettings)

    @property
    def num_frames(self) -> int:
        """Number of frames in one full revolution of the loop.

        Halves round up, so 2.5 frames become 3.
        """
        return int(math.floor(self.duration_seconds * self.fps + 0.5))

    @property
    def loop_radius(self) -> float:
        """Radius of the circle traced through noise space over one loop."""
        return self.duration_seconds * self.updates_per_second / math.tau

    @property
    def needs_resize(self) -> bool:
        # Masking reads the border row by row, so it needs matching dimensions.
        return self.resize_output or self.apply_border

    def rescale(self, value: float) -> float:
        return value * self.rescale_scale + self.rescale_offset


def _parse_noise_settings(raw: Mapping[str, Any]) -> NoiseSettings:
    default = NoiseSettings()
    if not isinstance(raw, Mapping):
        return default
    return NoiseSettings(
        seed=_parse_int(raw.get("seed"), default.seed),
        octaves=_parse_positive_int(raw.get("octaves"), default.octaves),
        persistence=_parse_float(raw.get("persistence"), default.persistence),
        lacunarity=_parse_float(raw.get("lacunarity"), default.lacunarity),
        frequency=_parse_float(raw.get("frequency"), default.frequency),
    )


def _parse_render_config(data: Mapping[str, Any]) -> RenderConfig:
    default = RenderConfig()
    return RenderConfig(
        duration_seconds=_parse_float(data.get("duration_seconds"), default.duration_seconds),
        updates_per_second=_parse_float(data.get("updates_per_second"), default.updates_per_second),
        fps=_parse_float(data.get("fps"), default.fps),
        x_scale=_parse_float(data.get("x_scale"), default.x_scale),
        y_scale=_parse_float(data.get("y_scale"), default.y_scale),
        rescale_scale=_parse_float(data.get("rescale_scale"), default.rescale_scale),
        rescale_offset=_parse_float(data.get("rescale_offset"), default.rescale_offset),
        resize_output=_parse_bool(data.get("resize_output"), default.resize_output),
        apply_border=_parse_bool(data.get("apply_border"), default.apply_border),
        output_dir=_parse_path(data.get("output_dir"), default.output_dir),
        gradient_path=_parse_path(data.get("gradient_path"), default.gradient_path),
        text_path=_parse_path(data.get("text_path"), default.text_path),
        border_path=_parse_path(data.get("border_path"), default.border_path),
        workers=_parse_positive_int(data.get("workers"), default.workers),
        noise=_parse_noise_settings(data.get("noise", {})),
    )


def _load_env_config(env: Mapping[str, str]) -> RenderConfig:
    """Configuration derived from environment variables."""
    return _parse_render_config({
        "duration_seconds": env.get("LOOP_DURATION_SECONDS"),
        "updates_per_second": env.get("LOOP_UPDATES_PER_SECOND"),
        "fps": env.get("LOOP_FPS"),
        "x_scale": env.get("NOISE_X_SCALE"),
        "y_scale": env.get("NOISE_Y_SCALE"),
        "rescale_scale": env.get("RESCALE_SCALE"),
        "rescale_offset": env.get("RESCALE_OFFSET"),
        "resize_output": env.get("RESIZE_OUTPUT"),
        "apply_border": env.get("APPLY_BORDER"),
        "output_dir": env.get("OUTPUT_DIR"),
        "gradient_path": env.get("GRADIENT_IMAGE"),
        "text_path": env.get("TEXT_IMAGE"),
        "border_path": env.get("BORDER_IMAGE"),
        "workers": env.get("RENDER_WORKERS"),
        "noise": {
            "seed": env.get("NOISE_SEED"),
            "octaves": env.get("NOISE_OCTAVES"),
            "persistence": env.get("NOISE_PERSISTENCE"),
        },
    })


def load_config(
    config_path: Optional[Path | str] = None,
    env: Mapping[str, str] | None = None,
) -> RenderConfig:
    """Load configuration from a JSON file or environment defaults."""
    source_env = os.environ if env is None else env

    if config_path is not None:
        path = Path(config_path)
        if path.exists():
            with path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
            return _parse_render_config(data if isinstance(data, Mapping) else {})

    return _load_env_config(source_env)


__all__ = [
    "NoiseSettings",
    "RenderConfig",
    "load_config",
]

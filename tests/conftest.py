import sys
from pathlib import Path

import cv2
import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from noiseloop.config import NoiseSettings, RenderConfig  # noqa: E402


def solid(width: int, height: int, color: tuple[int, int, int, int]) -> np.ndarray:
    image = np.zeros((height, width, 4), dtype=np.uint8)
    image[...] = color
    return image


@pytest.fixture
def asset_paths(tmp_path):
    """Write a small gradient, text and border image set and return their paths."""
    assets = tmp_path / "assets"
    assets.mkdir()

    gradient = np.zeros((8, 12, 4), dtype=np.uint8)
    gradient[..., :3] = np.linspace(0, 255, 12, dtype=np.uint8)[None, :, None]
    gradient[..., 3] = 255

    text = solid(12, 8, (0, 0, 0, 0))
    text[2:4, 2:6] = (255, 255, 255, 255)

    border = solid(6, 4, (40, 40, 40, 255))
    border[:, 0] = (40, 40, 40, 0)
    border[:, -1] = (40, 40, 40, 128)

    paths = {
        "gradient": assets / "gradient.png",
        "text": assets / "text.png",
        "border": assets / "border.png",
    }
    cv2.imwrite(str(paths["gradient"]), gradient)
    cv2.imwrite(str(paths["text"]), text)
    cv2.imwrite(str(paths["border"]), border)
    return paths


@pytest.fixture
def small_config(tmp_path, asset_paths):
    output_dir = tmp_path / "frames"
    output_dir.mkdir()
    return RenderConfig(
        duration_seconds=0.3,
        fps=10.0,
        output_dir=output_dir,
        gradient_path=asset_paths["gradient"],
        text_path=asset_paths["text"],
        border_path=asset_paths["border"],
        workers=1,
        noise=NoiseSettings(octaves=2),
    )

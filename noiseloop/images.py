"""PNG decoding and encoding for source images and rendered frames."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import cv2
import numpy as np

from noiseloop.config import RenderConfig
from noiseloop.models import SourceImages

LOGGER = logging.getLogger(__name__)


class ImageDecodeError(RuntimeError):
    """Raised when a source image cannot be read or decoded."""


class FrameWriteError(RuntimeError):
    """Raised when a rendered frame cannot be encoded or written."""


def _ensure_bgra(image: Optional[np.ndarray]) -> Optional[np.ndarray]:
    if image is None:
        return None
    if image.dtype == np.uint16:
        image = (image >> 8).astype(np.uint8)
    elif image.dtype != np.uint8:
        return None
    if len(image.shape) == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGRA)
    if image.shape[2] == 1:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGRA)
    if image.shape[2] == 3:
        opaque_alpha = np.full((image.shape[0], image.shape[1], 1), 255, dtype=image.dtype)
        return np.concatenate((image, opaque_alpha), axis=2)
    if image.shape[2] != 4:
        return None
    return image


def decode_image(data: bytes, label: str = "image") -> np.ndarray:
    """Decode encoded image bytes into a BGRA ``uint8`` grid."""
    buffer = np.frombuffer(data, dtype=np.uint8)
    decoded = cv2.imdecode(buffer, cv2.IMREAD_UNCHANGED) if buffer.size else None
    if decoded is None:
        raise ImageDecodeError(f"Failed to decode {label}: unrecognised or corrupt image data")
    image = _ensure_bgra(decoded)
    if image is None:
        raise ImageDecodeError(
            f"Failed to decode {label}: unsupported layout {decoded.shape} ({decoded.dtype})"
        )
    return np.ascontiguousarray(image)


def load_image(path: Path, label: str = "image") -> np.ndarray:
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise ImageDecodeError(f"Failed to read {label} at '{path}': {exc}") from exc
    return decode_image(data, f"{label} '{path}'")


def load_source_images(config: RenderConfig) -> SourceImages:
    """Decode the gradient, text and border images named by ``config``."""
    images = SourceImages(
        gradient=load_image(config.gradient_path, "gradient"),
        text=load_image(config.text_path, "text"),
        border=load_image(config.border_path, "border"),
    )
    for label, image in (("gradient", images.gradient), ("text", images.text), ("border", images.border)):
        LOGGER.debug("Loaded %s image %sx%s", label, image.shape[1], image.shape[0])
    return images


def encode_png(image: np.ndarray) -> bytes:
    success, buffer = cv2.imencode(".png", image)
    if not success:
        raise FrameWriteError(f"Failed to encode {image.shape[1]}x{image.shape[0]} frame as PNG")
    return buffer.tobytes()


def write_frame(image: np.ndarray, path: Path) -> Path:
    """Encode ``image`` as PNG and write it to ``path``.

    The parent directory must already exist.
    """
    data = encode_png(image)
    try:
        path.write_bytes(data)
    except OSError as exc:
        raise FrameWriteError(f"Failed to write frame to '{path}': {exc}") from exc
    return path


__all__ = [
    "FrameWriteError",
    "ImageDecodeError",
    "decode_image",
    "encode_png",
    "load_image",
    "load_source_images",
    "write_frame",
]

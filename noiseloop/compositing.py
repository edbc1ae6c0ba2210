"""Compositing operations applied to a frame canvas.

Every grid handled here is a ``uint8`` array of shape ``(height, width, 4)``
in BGRA order. The color operations treat the three color channels
identically, so the channel order never affects a result.
"""

from __future__ import annotations

import cv2
import numpy as np

TRANSPARENT = (0, 0, 0, 0)
_TRUNCATION_EPSILON = 1e-6


def burn(top: float, bottom: float) -> float:
    """Color burn of two normalised channel values.

    The sum check runs before the zero check. With inputs in ``[0, 1]`` a
    zero ``top`` therefore always yields 0 and the second branch never fires;
    the order is kept so output stays identical for out-of-range inputs too.
    """
    if top + bottom <= 1.0:
        return 0.0
    if top == 0.0:
        return 1.0
    return min(1.0, max(0.0, (top + bottom - 1.0) / top))


def burn_byte(top: int, bottom: int) -> int:
    return int(np.floor(burn(top / 255.0, bottom / 255.0) * 255.0))


def color_burn(canvas: np.ndarray, gradient: np.ndarray) -> np.ndarray:
    """Color burn ``canvas`` (top) against ``gradient`` (bottom) in place.

    Alpha is carried over from the canvas unchanged.
    """
    if canvas.shape[:2] != gradient.shape[:2]:
        raise ValueError(
            f"Gradient {gradient.shape[1]}x{gradient.shape[0]} does not match "
            f"canvas {canvas.shape[1]}x{canvas.shape[0]}"
        )

    top = canvas[..., :3].astype(np.float64) / 255.0
    bottom = gradient[..., :3].astype(np.float64) / 255.0
    total = top + bottom
    safe_top = np.where(top == 0.0, 1.0, top)
    ratio = np.clip((total - 1.0) / safe_top, 0.0, 1.0)

    out = np.select(
        [total <= 1.0, top == 0.0],
        [0.0, 1.0],
        default=ratio,
    )
    canvas[..., :3] = np.floor(out * 255.0).astype(np.uint8)
    return canvas


def overlay(canvas: np.ndarray, source: np.ndarray, x: int = 0, y: int = 0) -> np.ndarray:
    """Source-over composite ``source`` onto ``canvas`` at ``(x, y)`` in place.

    The source is clipped to the canvas bounds. Fully transparent source
    pixels leave the canvas untouched and fully opaque ones replace it.
    """
    canvas_height, canvas_width = canvas.shape[:2]
    source_height, source_width = source.shape[:2]
    start_x, start_y = max(0, x), max(0, y)
    end_x = min(canvas_width, x + source_width)
    end_y = min(canvas_height, y + source_height)
    if end_x <= start_x or end_y <= start_y:
        return canvas

    tile = source[start_y - y:end_y - y, start_x - x:end_x - x]
    region = canvas[start_y:end_y, start_x:end_x]

    region_color = region[..., :3].astype(np.float64)
    region_alpha = region[..., 3].astype(np.float64) / 255.0
    tile_color = tile[..., :3].astype(np.float64)
    tile_alpha = tile[..., 3].astype(np.float64) / 255.0

    inverse_tile_alpha = 1.0 - tile_alpha
    out_alpha = tile_alpha + region_alpha * inverse_tile_alpha

    combined_color = (
        tile_color * tile_alpha[..., None]
        + region_color * (region_alpha * inverse_tile_alpha)[..., None]
    )
    divisor = np.maximum(out_alpha[..., None], 1e-6)
    out_color = combined_color / divisor

    # Bytes are truncated; the epsilon keeps exact results from landing one below.
    blended = np.empty_like(tile)
    blended[..., :3] = np.clip(out_color + _TRUNCATION_EPSILON, 0, 255).astype(np.uint8)
    blended[..., 3] = np.clip(out_alpha * 255.0 + _TRUNCATION_EPSILON, 0, 255).astype(np.uint8)

    opaque = tile[..., 3] == 255
    blended[opaque] = tile[opaque]
    hidden = tile[..., 3] == 0
    blended[hidden] = region[hidden]

    canvas[start_y:end_y, start_x:end_x] = blended
    return canvas


def resize_to_match(canvas: np.ndarray, reference: np.ndarray) -> np.ndarray:
    """Return ``canvas`` resized to the exact dimensions of ``reference``.

    Nearest-neighbour sampling keeps the hard edges of the noise texture.
    """
    height, width = reference.shape[:2]
    if canvas.shape[:2] == (height, width):
        return canvas
    return cv2.resize(canvas, (width, height), interpolation=cv2.INTER_NEAREST)


def border_margin_mask(border: np.ndarray) -> np.ndarray:
    """Boolean mask of pixels outside the first opaque column from each side.

    Rows without any fully opaque pixel are masked entirely.
    """
    height, width = border.shape[:2]
    opaque = border[..., 3] == 255
    has_opaque = opaque.any(axis=1)

    first = np.where(has_opaque, opaque.argmax(axis=1), width)
    last = np.where(has_opaque, width - 1 - opaque[:, ::-1].argmax(axis=1), -1)

    columns = np.arange(width)[None, :]
    return (columns < first[:, None]) | (columns > last[:, None])


def clear_border_margin(canvas: np.ndarray, border: np.ndarray) -> np.ndarray:
    """Make canvas pixels transparent wherever the border margin lies, in place."""
    if canvas.shape[:2] != border.shape[:2]:
        raise ValueError(
            f"Border {border.shape[1]}x{border.shape[0]} does not match "
            f"canvas {canvas.shape[1]}x{canvas.shape[0]}"
        )
    canvas[border_margin_mask(border)] = TRANSPARENT
    return canvas


def apply_border(canvas: np.ndarray, border: np.ndarray) -> np.ndarray:
    """Clear the margin under ``border`` then composite the border on top."""
    clear_border_margin(canvas, border)
    return overlay(canvas, border)


__all__ = [
    "apply_border",
    "border_margin_mask",
    "burn",
    "burn_byte",
    "clear_border_margin",
    "color_burn",
    "overlay",
    "resize_to_match",
]

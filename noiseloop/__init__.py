"""
Offline renderer for seamlessly looping 4D noise animations.
"""

from .config import NoiseSettings, RenderConfig, load_config
from .images import FrameWriteError, ImageDecodeError
from .noise import LoopNoise
from .rendering import FrameRenderer

__all__ = [
    "FrameRenderer",
    "FrameWriteError",
    "ImageDecodeError",
    "LoopNoise",
    "NoiseSettings",
    "RenderConfig",
    "load_config",
]

"""Data models used across the noise loop renderer."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

import numpy as np


@dataclass(frozen=True)
class SourceImages:
    """Static BGRA images shared read-only by every frame."""

    gradient: np.ndarray
    text: np.ndarray
    border: np.ndarray

    @property
    def canvas_size(self) -> tuple[int, int]:
        """Width and height of a freshly created canvas."""
        return self.gradient.shape[1], self.gradient.shape[0]


@dataclass
class RenderedFrame:
    """A frame written to disk."""

    index: int
    path: Path
    width: int
    height: int


@dataclass
class RenderSummary:
    """Summary of a completed render run."""

    output_dir: Path
    frame_count: int
    width: int
    height: int
    elapsed_seconds: float
    frames: List[RenderedFrame] = field(default_factory=list)


__all__ = ["RenderSummary", "RenderedFrame", "SourceImages"]

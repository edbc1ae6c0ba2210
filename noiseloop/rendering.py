"""Frame rendering pipeline for the noise loop renderer."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np

from noiseloop.compositing import apply_border, color_burn, overlay, resize_to_match
from noiseloop.config import RenderConfig
from noiseloop.images import write_frame
from noiseloop.models import RenderedFrame, RenderSummary, SourceImages
from noiseloop.noise import LoopNoise
from noiseloop.progress import ProgressReporter
from noiseloop.sampler import render_noise


def frame_filename(index: int) -> str:
    return f"{index:05d}.png"


class FrameRenderer:
    """Render looping noise frames and write them as numbered PNG files."""

    def __init__(
        self,
        config: RenderConfig,
        images: SourceImages,
        *,
        logger: logging.Logger,
        noise: Optional[LoopNoise] = None,
    ) -> None:
        self.config = config
        self.images = images
        self.logger = logger
        self.noise = noise or LoopNoise(config.noise)
        self.workers = max(1, config.workers)

    # ------------------------------------------------------------------
    # Single frame pipeline
    # ------------------------------------------------------------------

    @property
    def output_size(self) -> tuple[int, int]:
        if self.config.needs_resize:
            return self.images.border.shape[1], self.images.border.shape[0]
        return self.images.canvas_size

    def frame_path(self, index: int) -> Path:
        return self.config.output_dir / frame_filename(index)

    def render_frame(self, index: int) -> np.ndarray:
        """Run the full compositing pipeline for one frame and return the canvas."""
        width, height = self.images.canvas_size
        canvas = render_noise(self.noise, self.config, index, width, height)
        color_burn(canvas, self.images.gradient)
        overlay(canvas, self.images.text)
        if self.config.needs_resize:
            canvas = resize_to_match(canvas, self.images.border)
        if self.config.apply_border:
            apply_border(canvas, self.images.border)
        return canvas

    def write(self, index: int) -> RenderedFrame:
        canvas = self.render_frame(index)
        path = write_frame(canvas, self.frame_path(index))
        self.logger.debug("Wrote frame %s to %s", index, path)
        return RenderedFrame(
            index=index,
            path=path,
            width=canvas.shape[1],
            height=canvas.shape[0],
        )

    # ------------------------------------------------------------------
    # Batch rendering
    # ------------------------------------------------------------------

    def render_all(self, indices: Optional[Iterable[int]] = None) -> RenderSummary:
        """Render ``indices`` (default: every frame of the loop) to disk.

        The first failure cancels frames that have not started yet and is
        re-raised; frames already written stay on disk.
        """
        frame_indices = (
            list(range(self.config.num_frames)) if indices is None else sorted(set(indices))
        )
        width, height = self.output_size
        self.logger.info(
            "Rendering %s frames (%sx%s) to %s with %s worker(s)",
            len(frame_indices),
            width,
            height,
            self.config.output_dir,
            self.workers,
        )

        progress = ProgressReporter(self.logger, len(frame_indices), "Frame rendering")
        if self.workers == 1:
            rendered = self._render_sequential(frame_indices, progress)
        else:
            rendered = self._render_parallel(frame_indices, progress)

        return RenderSummary(
            output_dir=self.config.output_dir,
            frame_count=len(rendered),
            width=width,
            height=height,
            elapsed_seconds=progress.elapsed,
            frames=rendered,
        )

    def _render_sequential(
        self,
        frame_indices: Sequence[int],
        progress: ProgressReporter,
    ) -> List[RenderedFrame]:
        rendered: List[RenderedFrame] = []
        for index in frame_indices:
            rendered.append(self.write(index))
            progress.advance()
        return rendered

    def _render_parallel(
        self,
        frame_indices: Sequence[int],
        progress: ProgressReporter,
    ) -> List[RenderedFrame]:
        results: Dict[int, RenderedFrame] = {}
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            futures = [executor.submit(self.write, index) for index in frame_indices]
            try:
                for future in as_completed(futures):
                    result = future.result()
                    results[result.index] = result
                    progress.advance()
            except BaseException:
                for pending in futures:
                    pending.cancel()
                raise
        return [results[index] for index in frame_indices]


__all__ = ["FrameRenderer", "frame_filename"]

"""Deterministic 4D fractal noise built from layered OpenSimplex octaves."""

from __future__ import annotations

from typing import List

import numpy as np
from opensimplex import OpenSimplex

from noiseloop.config import NoiseSettings


class LoopNoise:
    """Fractal Brownian motion over 4D OpenSimplex noise.

    Each octave owns its own generator (seeded ``seed + octave``) so layers do
    not correlate. Octave ``i`` is weighted by ``persistence ** i`` and sampled
    at ``frequency * lacunarity ** i``; the sum is normalised by the total
    weight, keeping results close to ``[-1, 1]``.

    Instances are read-only after construction and may be shared between
    worker threads.
    """

    def __init__(self, settings: NoiseSettings) -> None:
        self.settings = settings
        octaves = max(1, settings.octaves)
        self._generators: List[OpenSimplex] = [
            OpenSimplex(seed=settings.seed + octave) for octave in range(octaves)
        ]
        self._amplitudes = [settings.persistence ** octave for octave in range(octaves)]
        self._frequencies = [
            settings.frequency * settings.lacunarity ** octave for octave in range(octaves)
        ]
        total = sum(self._amplitudes)
        self._normaliser = 1.0 / total if total else 1.0

    @property
    def octaves(self) -> int:
        return len(self._generators)

    def sample(self, x: float, y: float, z: float, w: float) -> float:
        """Return the noise value at a single 4D point."""
        result = 0.0
        for generator, amplitude, frequency in zip(
            self._generators, self._amplitudes, self._frequencies
        ):
            result += amplitude * generator.noise4(
                x * frequency,
                y * frequency,
                z * frequency,
                w * frequency,
            )
        return result * self._normaliser

    def sample_plane(
        self,
        x: float,
        y: float,
        zs: np.ndarray,
        ws: np.ndarray,
    ) -> np.ndarray:
        """Sample a whole plane with fixed ``x``/``y`` in one call.

        Returns an array of shape ``(len(ws), len(zs))`` where element
        ``[i, j]`` equals ``sample(x, y, zs[j], ws[i])``.
        """
        zs = np.asarray(zs, dtype=np.float64)
        ws = np.asarray(ws, dtype=np.float64)
        result = np.zeros((ws.size, zs.size), dtype=np.float64)
        for generator, amplitude, frequency in zip(
            self._generators, self._amplitudes, self._frequencies
        ):
            # noise4array returns shape (w, z, y, x) for the outer product of its inputs.
            layer = generator.noise4array(
                np.array([x * frequency]),
                np.array([y * frequency]),
                zs * frequency,
                ws * frequency,
            )
            result += amplitude * layer[:, :, 0, 0]
        return result * self._normaliser


__all__ = ["LoopNoise"]

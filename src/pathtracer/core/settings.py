"""Render settings shared by the tracer, the progressive renderer and scripts."""

from __future__ import annotations

import os
from dataclasses import dataclass

from src.pathtracer.core.integrator import MAX_DEPTH


@dataclass(frozen=True)
class RenderSettings:
    """Parameters of one render session.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        samples: Samples per pixel (number of sample passes).
        max_depth: Maximum recursion depth per camera ray.
        workers: Worker threads in the pool. None uses the CPU count.
        seed: Seed for reproducible renders. None draws fresh entropy.

    Raises:
        ValueError: If a size, count or depth is not positive.
    """

    width: int
    height: int
    samples: int = 1
    max_depth: int = MAX_DEPTH
    workers: int | None = None
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Image dimensions ({self.width}x{self.height}) must be positive."
            )
        if self.samples <= 0:
            raise ValueError(f"Samples = {self.samples} must be a positive integer.")
        if self.max_depth <= 0:
            raise ValueError(f"Max depth = {self.max_depth} must be a positive integer.")
        if self.workers is not None and self.workers <= 0:
            raise ValueError(f"Workers = {self.workers} must be a positive integer.")

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    def resolved_workers(self) -> int:
        """Number of worker threads to actually start."""
        return self.workers if self.workers is not None else (os.cpu_count() or 1)

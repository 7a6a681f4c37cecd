"""Progressive renderer for iterative sample accumulation.

This module provides a session object around the tracer that supports:
- Progressive rendering that refines over time
- Progress callbacks and a generator interface for UI updates
- Rendering on a background thread while the image is previewed
- Easy reset and re-render functionality

The ProgressiveRenderer owns the image accumulator for one camera and world.
Each call to ``render`` adds sample passes on top of the ones already
accumulated.

Example:
    >>> from src.pathtracer.core.progressive import ProgressiveRenderer
    >>> from src.pathtracer.core.settings import RenderSettings
    >>> from src.pathtracer.scene.presets import create_showcase_scene
    >>>
    >>> settings = RenderSettings(width=160, height=90, samples=8)
    >>> world, camera = create_showcase_scene(settings.aspect_ratio)
    >>> renderer = ProgressiveRenderer(settings, camera, world)
    >>> renderer.render()
    >>> image = renderer.get_image_numpy()
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Generator
from pathlib import Path

import numpy as np
import numpy.typing as npt

from src.pathtracer.camera.thin_lens import Camera
from src.pathtracer.core.accumulator import ImageAccumulator
from src.pathtracer.core.ray import ZERO
from src.pathtracer.core.settings import RenderSettings
from src.pathtracer.core.tracer import render
from src.pathtracer.geometry.hittable import Hittable

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (current_samples, total_target_samples)
ProgressCallback = Callable[[int, int], None]


class RenderThread(threading.Thread):
    """Background render thread that re-raises worker errors on join()."""

    def __init__(self, renderer: ProgressiveRenderer, num_samples: int | None) -> None:
        super().__init__(name="progressive-render", daemon=True)
        self.renderer = renderer
        self._num_samples = num_samples
        self.error: Exception | None = None

    def run(self) -> None:
        try:
            self.renderer.render(self._num_samples)
        except Exception as exc:  # re-raised in join()
            logger.exception("Background render failed")
            self.error = exc

    def join(self, timeout: float | None = None) -> None:
        super().join(timeout)
        if self.error is not None and not self.is_alive():
            raise self.error


class ProgressiveRenderer:
    """A progressive renderer that accumulates samples over time.

    Attributes:
        settings: The render settings.
        camera: Camera used for primary rays.
        world: The scene.
        image: The accumulator holding the running per-pixel averages.
    """

    def __init__(self, settings: RenderSettings, camera: Camera, world: Hittable) -> None:
        """Initialize the progressive renderer.

        Args:
            settings: Image size, sample count, depth, workers and seed.
            camera: Camera used for primary rays.
            world: The scene to render.
        """
        self.settings = settings
        self.camera = camera
        self.world = world
        self.image = ImageAccumulator.new_blank(settings.width, settings.height, ZERO)
        self._sample_count = 0
        self._lock = threading.Lock()

    @property
    def width(self) -> int:
        """Get the image width."""
        return self.image.width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self.image.height

    @property
    def sample_count(self) -> int:
        """Get the number of completed sample passes."""
        return self._sample_count

    @property
    def completion(self) -> float:
        """Get the completion fraction of the current (or last) render call."""
        return self.image.get_completion()

    def reset(self) -> None:
        """Reset the accumulator for a new render.

        Clears the color buffer, completion and sample count without
        changing the image dimensions.
        """
        with self._lock:
            self.image.fill(ZERO)
            self.image.update_completion(lambda _: 0.0)
            self._sample_count = 0

    def render(
        self,
        num_samples: int | None = None,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render sample passes progressively with optional progress callback.

        Accumulates the specified number of samples into the existing buffer.
        Can be called multiple times to continue refining the image.

        Args:
            num_samples: Number of passes to add. Defaults to
                ``settings.samples``.
            callback: Optional callback called after each pass.
                Receives (current_total_samples, target_total_samples).

        Example:
            >>> def progress(current, target):
            ...     print(f"Progress: {current}/{target} samples")
            >>> renderer.render(100, callback=progress)
        """
        samples = self.settings.samples if num_samples is None else num_samples
        if samples <= 0:
            return

        with self._lock:
            start_samples = self._sample_count
            target_samples = start_samples + samples
            def on_pass_complete(sample: int) -> None:
                self._sample_count = sample + 1
                if callback is not None:
                    callback(self._sample_count, target_samples)

            render(
                self.camera,
                self.world,
                self.image,
                samples,
                max_depth=self.settings.max_depth,
                workers=self.settings.workers,
                seed=self.settings.seed,
                first_sample=start_samples,
                on_pass_complete=on_pass_complete,
            )

    def render_progressive(
        self,
        num_samples: int | None = None,
    ) -> Generator[tuple[int, int], None, None]:
        """Render passes one at a time, yielding progress after each.

        Args:
            num_samples: Number of passes to add. Defaults to
                ``settings.samples``.

        Yields:
            Tuple of (current_total_samples, target_total_samples).
        """
        samples = self.settings.samples if num_samples is None else num_samples
        if samples <= 0:
            return

        target_samples = self._sample_count + samples
        while self._sample_count < target_samples:
            self.render(1)
            yield (self._sample_count, target_samples)

    def start(self, num_samples: int | None = None) -> RenderThread:
        """Start rendering on a background thread.

        The image can be read (for example by a preview window) while the
        thread runs. Errors raised during rendering are re-raised by the
        returned thread's ``join()``.
        """
        thread = RenderThread(self, num_samples)
        thread.start()
        return thread

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the linear radiance as a NumPy array, top scanline first.

        Returns:
            Array of shape (height, width, 3) with dtype float32.
        """
        return np.flipud(self.image.to_numpy()).astype(np.float32)

    def get_display_image(self, tone_map: str = "max_intensity") -> npt.NDArray[np.float32]:
        """Get the image tone mapped and gamma corrected for display."""
        from src.pathtracer.preview.display import process_image_for_display

        return process_image_for_display(self.get_image_numpy(), tone_map=tone_map)

    def save_image(self, filepath: str | Path, tone_map: str = "max_intensity") -> None:
        """Save the rendered image as PNG or PPM, chosen by file extension."""
        from src.pathtracer.preview.export import save_image

        save_image(self.get_image_numpy(), filepath, tone_map=tone_map)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"ProgressiveRenderer(width={self.width}, height={self.height}, "
            f"samples={self.sample_count})"
        )

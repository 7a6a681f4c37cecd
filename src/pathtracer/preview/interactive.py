"""Live preview window using Taichi GGUI.

This module shows a render while it is still in progress. The render runs
on a background thread (``ProgressiveRenderer.start``); the preview loop on
the main thread repeatedly reads the accumulator, runs it through the
display pipeline, copies it into a Taichi field and presents it together
with the completion percentage.

Features:
    - Taichi GGUI-based window sized to the image
    - Support for updating the display from numpy arrays or a renderer
    - Completion percentage drawn in a small GUI sub-window
    - Headless detection so scripts can skip the window on servers

Example:
    >>> import taichi as ti
    >>> from src.pathtracer.preview.interactive import LivePreview
    >>>
    >>> ti.init(arch=ti.cpu)
    >>> preview = LivePreview(320, 180)
    >>> thread = renderer.start()
    >>> preview.run_until_closed(thread)
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

import numpy as np
import taichi as ti

from src.pathtracer.preview.display import ToneMapMethod

if TYPE_CHECKING:
    import numpy.typing as npt

    from src.pathtracer.core.progressive import ProgressiveRenderer, RenderThread

logger = logging.getLogger(__name__)


def format_completion(completion: float) -> str:
    """Format a completion fraction as a whole percentage, e.g. ``"42%"``."""
    return "{:.0f}%".format(completion * 100.0)


class LivePreview:
    """Live preview window using Taichi GGUI.

    Taichi must be initialized (``ti.init``) before a preview is created,
    since the display buffer is a Taichi field. The window itself is only
    opened on first use, so the buffer can be filled without a display.

    Attributes:
        width: Window width in pixels.
        height: Window height in pixels.
        display_image: Taichi field storing the display image (RGB float).
        completion: Last completion fraction passed to ``show_frame``.
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        title: str = "Path Tracer - Live Preview",
        tone_map: ToneMapMethod = "max_intensity",
    ) -> None:
        """Initialize the preview.

        Args:
            width: Window width in pixels.
            height: Window height in pixels.
            title: Window title.
            tone_map: Tone mapping method for the displayed image.
        """
        self.width = width
        self.height = height
        self.tone_map = tone_map
        self.completion = 0.0
        self._title = title

        # Defer window creation until first use to support headless checks
        self._window: ti.ui.Window | None = None
        self._canvas: ti.ui.Canvas | None = None

        # Shape is (width, height) for Taichi field, RGB values stored as vec3
        self.display_image: ti.MatrixField = ti.Vector.field(
            3, dtype=ti.f32, shape=(width, height)
        )

    def _initialize_window(self) -> None:
        if self._window is not None:
            return

        self._window = ti.ui.Window(
            name=self._title,
            res=(self.width, self.height),
            vsync=True,
        )
        self._canvas = self._window.get_canvas()

    @property
    def window(self) -> ti.ui.Window:
        """Get the Taichi GGUI window, initializing if needed."""
        self._initialize_window()
        assert self._window is not None
        return self._window

    @property
    def canvas(self) -> ti.ui.Canvas:
        """Get the canvas for rendering."""
        self._initialize_window()
        assert self._canvas is not None
        return self._canvas

    def update_image(self, image: npt.NDArray[np.float32]) -> None:
        """Update the display buffer from a processed image.

        Args:
            image: Array of shape (height, width, 3), top scanline first,
                already tone mapped into [0, 1].

        Raises:
            ValueError: If image shape doesn't match (height, width, 3).
        """
        expected_shape = (self.height, self.width, 3)
        if image.shape != expected_shape:
            raise ValueError(
                f"Image shape {image.shape} doesn't match expected {expected_shape}"
            )

        # Taichi fields are indexed (x, y) with the origin at the bottom left
        image_transposed = np.ascontiguousarray(
            np.transpose(np.flipud(image), (1, 0, 2)), dtype=np.float32
        )
        self.display_image.from_numpy(image_transposed)

    def update_from_renderer(self, renderer: ProgressiveRenderer) -> None:
        """Snapshot the renderer's image and completion into the preview."""
        self.update_image(renderer.get_display_image(tone_map=self.tone_map))
        self.completion = renderer.completion

    def is_running(self) -> bool:
        """Check if the window is still open."""
        return self.window.running

    def show_frame(self) -> None:
        """Present the display buffer and the completion percentage."""
        self.canvas.set_image(self.display_image)
        with self.window.GUI.sub_window("Progress", 0.02, 0.02, 0.12, 0.06) as gui:
            gui.text(format_completion(self.completion))
        self.window.show()

    def run_until_closed(self, thread: RenderThread) -> None:
        """Show the render on ``thread`` until the window is closed.

        The final image stays on screen after the render finishes. If the
        render has finished when the window closes, ``join`` re-raises any
        error it hit; an unfinished render is left running as a daemon.

        Args:
            thread: Background render thread from ``ProgressiveRenderer.start``.
        """
        self._initialize_window()

        while self.is_running():
            self.update_from_renderer(thread.renderer)
            self.show_frame()

        if thread.is_alive():
            logger.info("Preview closed at %s", format_completion(self.completion))
        else:
            thread.join()

    def close(self) -> None:
        """Close the preview window."""
        if self._window is not None:
            self._window.running = False

    @staticmethod
    def is_display_available() -> bool:
        """Check if a display is available for GUI rendering.

        Returns:
            True if a display is available, False for headless environments.
        """
        display = os.environ.get("DISPLAY")
        wayland = os.environ.get("WAYLAND_DISPLAY")

        if os.name == "nt":
            return True

        # On macOS, display is always available if not in SSH
        if os.uname().sysname == "Darwin":
            ssh_connection = os.environ.get("SSH_CONNECTION")
            return not (ssh_connection and not display)

        # On Linux, check for X11 or Wayland
        return bool(display or wayland)

"""Thread-safe image accumulator for progressive rendering.

The accumulator is a fixed ``width x height`` grid of independently locked
pixel cells plus a locked completion fraction. Render workers update cells
through ``update_pixel``; preview and export code may read single pixels or
the whole grid at any time.

Storage is a single NumPy arena of shape ``(width * height, 3)`` indexed by
``y * width + x``. Cell locks come from a fixed pool of ``LOCK_STRIPES``
locks: cell ``i`` is guarded by lock ``i % LOCK_STRIPES``, so the lock count
does not grow with the image. There is no global lock: a full-grid read copies
one stripe per lock acquire, so the cells of one snapshot are individually
consistent but may come from different moments.

Row ``y = 0`` is the bottom scanline, matching the camera's image-plane
convention.

Example:
    >>> from src.pathtracer.core.accumulator import ImageAccumulator
    >>> from src.pathtracer.core.ray import Vec3
    >>> image = ImageAccumulator.new_blank(4, 3, Vec3(0.0, 0.0, 0.0))
    >>> image.update_pixel(1, 2, lambda old: old + Vec3(1.0, 0.5, 0.25))
    Vec3(x=1.0, y=0.5, z=0.25)
    >>> image.update_completion(lambda done: done + 0.5)
    0.5
"""

from __future__ import annotations

import threading
from collections.abc import Callable

import numpy as np
import numpy.typing as npt

from src.pathtracer.core.ray import Vec3

PixelUpdate = Callable[[Vec3], Vec3]
CompletionUpdate = Callable[[float], float]

# Upper bound on cell locks; cell i uses lock i % LOCK_STRIPES
LOCK_STRIPES = 256


class ImageAccumulator:
    """Grid of independently lockable pixel cells and a completion counter.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
    """

    def __init__(self, width: int, height: int, initial_color: Vec3) -> None:
        """Allocate the pixel arena and its lock stripes.

        Args:
            width: Image width in pixels (positive).
            height: Image height in pixels (positive).
            initial_color: Value every cell starts with.

        Raises:
            ValueError: If either dimension is not positive.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Image dimensions ({width}x{height}) must be positive.")

        self._width = width
        self._height = height
        self._pixels = np.empty((width * height, 3), dtype=np.float64)
        self._pixels[:] = tuple(initial_color)
        self._pixel_locks = [
            threading.Lock() for _ in range(min(LOCK_STRIPES, width * height))
        ]

        self._completion = 0.0
        self._completion_lock = threading.Lock()

    @classmethod
    def new_blank(cls, width: int, height: int, initial_color: Vec3) -> ImageAccumulator:
        """Create an accumulator with every cell set to ``initial_color``."""
        return cls(width, height, initial_color)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def lock_count(self) -> int:
        """Get the number of pixel locks (at most ``LOCK_STRIPES``)."""
        return len(self._pixel_locks)

    def _index(self, x: int, y: int) -> int:
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(
                f"Pixel ({x}, {y}) is outside the {self._width}x{self._height} image"
            )
        return y * self._width + x

    def _lock_for(self, index: int) -> threading.Lock:
        return self._pixel_locks[index % len(self._pixel_locks)]

    def _read(self, index: int) -> Vec3:
        r, g, b = self._pixels[index]
        return Vec3(float(r), float(g), float(b))

    # =========================================================================
    # Pixels
    # =========================================================================

    def get_pixel(self, x: int, y: int) -> Vec3:
        """Read one pixel's current running average.

        Raises:
            IndexError: If (x, y) is outside the image.
        """
        index = self._index(x, y)
        with self._lock_for(index):
            return self._read(index)

    def update_pixel(self, x: int, y: int, update: PixelUpdate) -> Vec3:
        """Atomically replace a pixel with ``update(old_value)``.

        Only the stripe lock guarding this cell is held while ``update`` runs.

        Args:
            x: Column, ``0 <= x < width``.
            y: Row from the bottom, ``0 <= y < height``.
            update: Function from the old value to the new value.

        Returns:
            The new value.

        Raises:
            IndexError: If (x, y) is outside the image.
        """
        index = self._index(x, y)
        with self._lock_for(index):
            value = update(self._read(index))
            self._pixels[index] = (value.x, value.y, value.z)
            return value

    def fill(self, value: Vec3) -> None:
        """Set every cell to ``value``, one lock stripe at a time."""
        stride = len(self._pixel_locks)
        for stripe, lock in enumerate(self._pixel_locks):
            with lock:
                self._pixels[stripe::stride] = tuple(value)

    # =========================================================================
    # Completion
    # =========================================================================

    def get_completion(self) -> float:
        """Read the completion fraction in [0, 1]."""
        with self._completion_lock:
            return self._completion

    def update_completion(self, update: CompletionUpdate) -> float:
        """Atomically replace the completion fraction with ``update(old)``."""
        with self._completion_lock:
            self._completion = update(self._completion)
            return self._completion

    # =========================================================================
    # Whole-image reads
    # =========================================================================

    def _copy_cells(self) -> npt.NDArray[np.float64]:
        out = np.empty_like(self._pixels)
        stride = len(self._pixel_locks)
        for stripe, lock in enumerate(self._pixel_locks):
            with lock:
                out[stripe::stride] = self._pixels[stripe::stride]
        return out

    def snapshot(self) -> list[Vec3]:
        """Read every cell in ``y * width + x`` order.

        Each stripe of cells is copied under its own lock; there is no global
        lock.
        """
        return [Vec3(r, g, b) for r, g, b in self._copy_cells().tolist()]

    def to_numpy(self) -> npt.NDArray[np.float64]:
        """Copy the grid into an array of shape (height, width, 3).

        Row 0 of the result is the bottom scanline. Cells are copied stripe by
        stripe, as in ``snapshot``.
        """
        return self._copy_cells().reshape(self._height, self._width, 3)

    def __repr__(self) -> str:
        return (
            f"ImageAccumulator(width={self._width}, height={self._height}, "
            f"completion={self.get_completion():.3f})"
        )

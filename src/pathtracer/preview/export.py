"""Image export utilities for rendered images.

Supported formats:
    - PPM (plain-text P3, 8-bit)
    - PNG (8-bit via Pillow)

All writers take a linear image of shape (height, width, 3) with the top
scanline first (as returned by ``ProgressiveRenderer.get_image_numpy``) and
run it through the display pipeline first.

Example:
    >>> from src.pathtracer.preview.export import save_image
    >>> save_image(renderer.get_image_numpy(), "output.png")  # doctest: +SKIP
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TextIO

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from src.pathtracer.preview.display import (
    ToneMapMethod,
    process_image_for_display,
    to_uint8,
)

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".png", ".ppm")


def image_to_uint8(
    image: npt.NDArray[np.float32],
    *,
    tone_map: ToneMapMethod = "max_intensity",
) -> npt.NDArray[np.uint8]:
    """Convert a linear float32 image to uint8 for display/export.

    Args:
        image: Linear HDR image array of shape (H, W, 3).
        tone_map: Tone mapping method.

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.
    """
    return to_uint8(process_image_for_display(image, tone_map=tone_map))


def write_ppm(
    image: npt.NDArray[np.float32],
    stream: TextIO,
    *,
    tone_map: ToneMapMethod = "max_intensity",
) -> None:
    """Write an image as plain-text PPM (P3).

    The header is ``P3``, ``width height`` and ``255``, followed by one
    ``r g b`` triple per line, top scanline first, left to right.

    Args:
        image: Linear HDR image array of shape (H, W, 3), top row first.
        stream: Text stream to write to.
        tone_map: Tone mapping method.
    """
    pixels = image_to_uint8(image, tone_map=tone_map)
    height, width = pixels.shape[:2]

    stream.write(f"P3\n{width} {height}\n255\n")
    for row in pixels:
        stream.writelines(f"{r} {g} {b}\n" for r, g, b in row)


def save_ppm(
    image: npt.NDArray[np.float32],
    filepath: str | Path,
    *,
    tone_map: ToneMapMethod = "max_intensity",
) -> None:
    """Save an image as a plain-text PPM file."""
    with open(filepath, "w", encoding="ascii") as f:
        write_ppm(image, f, tone_map=tone_map)


def save_png(
    image: npt.NDArray[np.float32],
    filepath: str | Path,
    *,
    tone_map: ToneMapMethod = "max_intensity",
) -> None:
    """Save an image as an 8-bit PNG file.

    Args:
        image: Linear HDR image array of shape (H, W, 3), top row first.
        filepath: Output file path.
        tone_map: Tone mapping method.
    """
    pil_image = PILImage.fromarray(image_to_uint8(image, tone_map=tone_map))
    pil_image.save(filepath, format="PNG")


def save_image(
    image: npt.NDArray[np.float32],
    filepath: str | Path,
    *,
    tone_map: ToneMapMethod = "max_intensity",
) -> None:
    """Save an image, choosing PNG or PPM from the file extension.

    Raises:
        ValueError: If the extension is neither ``.png`` nor ``.ppm``.
    """
    suffix = Path(filepath).suffix.lower()
    if suffix == ".png":
        save_png(image, filepath, tone_map=tone_map)
    elif suffix == ".ppm":
        save_ppm(image, filepath, tone_map=tone_map)
    else:
        raise ValueError(
            f"Unsupported image extension {suffix!r} for {filepath}; "
            f"expected one of {SUPPORTED_EXTENSIONS}"
        )
    logger.info("Saved %dx%d image to %s", image.shape[1], image.shape[0], filepath)

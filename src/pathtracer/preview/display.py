"""Display pipeline for rendered images.

The accumulator holds unclamped linear radiance. Before it can be shown or
written to an 8-bit file it goes through:

1. Tone mapping: by default every channel is divided by the brightest
   channel value in the image (never by less than 1.0, so images that
   already fit in [0, 1] are left alone). Reinhard and identity mappings
   are also available.
2. Gamma correction with gamma 2 (square root).
3. Clamping to [0, 1].

Example:
    >>> import numpy as np
    >>> from src.pathtracer.preview.display import process_image_for_display
    >>> image = np.full((2, 2, 3), 4.0, dtype=np.float32)
    >>> process_image_for_display(image)[0, 0]
    array([1., 1., 1.], dtype=float32)
"""

from __future__ import annotations

from typing import Literal

import numpy as np
import numpy.typing as npt

# Type alias for tone mapping options
ToneMapMethod = Literal["max_intensity", "reinhard", "none"]

# Images are never scaled up by max-intensity normalization
MIN_NORMALIZATION = 1.0

DISPLAY_GAMMA = 2.0


def max_intensity(image: npt.NDArray[np.floating]) -> float:
    """Get the normalization divisor: the largest channel value, at least 1.0."""
    if image.size == 0:
        return MIN_NORMALIZATION
    return max(float(np.max(image)), MIN_NORMALIZATION)


def tone_map_max_intensity(
    image: npt.NDArray[np.float32],
) -> npt.NDArray[np.float32]:
    """Scale the image so its brightest channel is at most 1.0.

    Args:
        image: Linear HDR image array of shape (H, W, 3).

    Returns:
        Image divided by ``max_intensity(image)``.
    """
    image = np.maximum(image, 0.0)
    return (image / max_intensity(image)).astype(np.float32)


def tone_map_reinhard(
    image: npt.NDArray[np.float32],
) -> npt.NDArray[np.float32]:
    """Apply Reinhard tone mapping: L / (1 + L).

    Args:
        image: Linear HDR image array of shape (H, W, 3).

    Returns:
        Tone mapped image in [0, 1) range.
    """
    image = np.maximum(image, 0.0)
    return (image / (1.0 + image)).astype(np.float32)


def apply_gamma(
    image: npt.NDArray[np.float32],
    gamma: float = DISPLAY_GAMMA,
) -> npt.NDArray[np.float32]:
    """Apply gamma correction for display.

    Args:
        image: Linear image array in [0, 1] range.
        gamma: Gamma value. The default of 2.0 is a square root.

    Returns:
        Gamma corrected image.
    """
    if gamma == 1.0:
        return image

    # Clamp to [0, 1] before gamma to avoid NaN from negative values
    image = np.clip(image, 0.0, 1.0)
    if gamma == 2.0:
        return np.sqrt(image).astype(np.float32)
    return np.power(image, 1.0 / gamma).astype(np.float32)


def process_image_for_display(
    image: npt.NDArray[np.float32],
    tone_map: ToneMapMethod = "max_intensity",
    gamma: float = DISPLAY_GAMMA,
) -> npt.NDArray[np.float32]:
    """Process an image for display with tone mapping and gamma correction.

    Args:
        image: Linear HDR image array of shape (H, W, 3).
        tone_map: Tone mapping method ("max_intensity", "reinhard", or "none").
        gamma: Gamma correction value (default 2.0).

    Returns:
        Processed image ready for display, in [0, 1] range.

    Raises:
        ValueError: If ``tone_map`` is not a known method.
    """
    result = np.asarray(image, dtype=np.float32).copy()

    if tone_map == "max_intensity":
        result = tone_map_max_intensity(result)
    elif tone_map == "reinhard":
        result = tone_map_reinhard(result)
    elif tone_map != "none":
        raise ValueError(f"Unknown tone mapping method: {tone_map}")

    result = apply_gamma(result, gamma)
    return np.clip(result, 0.0, 1.0).astype(np.float32)


def to_uint8(image: npt.NDArray[np.float32]) -> npt.NDArray[np.uint8]:
    """Convert a display image in [0, 1] to 8-bit by truncation (``int(v * 255)``)."""
    return (np.clip(image, 0.0, 1.0) * 255.0).astype(np.uint8)

"""Normal-visualization debug material.

Surfaces with this material emit their unit normal shifted by one,
``n + (1, 1, 1)``, and scatter nothing. Each channel therefore lies in
[0, 2]; the display pipeline's max-intensity normalization maps it to the
familiar ``0.5 * (n + 1)`` false-color image.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.pathtracer.core.ray import ONE, Ray
from src.pathtracer.materials.interaction import LightInteraction


@dataclass(frozen=True, slots=True)
class Normal:
    """Debug material that visualizes surface normals."""


def scatter_normal(hit_normal: Ray) -> LightInteraction:
    """Emit ``normal + 1`` and terminate the path."""
    return LightInteraction(hit_normal.direction + ONE, ())

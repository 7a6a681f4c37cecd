"""Preview module for output and visualization.

Components:
    display: Tone mapping and gamma correction for display
    export: PPM and PNG image export
    interactive: Taichi GGUI live preview window

The renderer accumulates unclamped linear radiance. By default the display
pipeline divides by the brightest channel value (never by less than 1.0)
and applies gamma 2 before quantizing to 8 bits.

Example:
    >>> from src.pathtracer.preview import save_image
    >>> save_image(renderer.get_image_numpy(), "output.ppm")

For the live preview window:
    >>> from src.pathtracer.preview import LivePreview
    >>> preview = LivePreview(320, 180)
    >>> preview.run_until_closed(renderer.start())
"""

from src.pathtracer.preview.display import (
    ToneMapMethod,
    apply_gamma,
    max_intensity,
    process_image_for_display,
    to_uint8,
    tone_map_max_intensity,
    tone_map_reinhard,
)
from src.pathtracer.preview.export import (
    image_to_uint8,
    save_image,
    save_png,
    save_ppm,
    write_ppm,
)
from src.pathtracer.preview.interactive import LivePreview

__all__ = [
    # Live preview
    "LivePreview",
    # Tone mapping
    "ToneMapMethod",
    "max_intensity",
    "tone_map_max_intensity",
    "tone_map_reinhard",
    "apply_gamma",
    "process_image_for_display",
    "to_uint8",
    # Export functions
    "image_to_uint8",
    "write_ppm",
    "save_ppm",
    "save_png",
    "save_image",
]

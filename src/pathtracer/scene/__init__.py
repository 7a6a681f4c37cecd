"""Scene description.

Components:
    world: Collection of hittables with nearest-hit queries
    presets: Ready-made scenes paired with cameras
"""

from .presets import SCENES, create_random_scene, create_scene, create_showcase_scene
from .world import World

__all__ = [
    "World",
    "SCENES",
    "create_scene",
    "create_showcase_scene",
    "create_random_scene",
]

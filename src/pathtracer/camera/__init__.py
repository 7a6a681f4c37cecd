"""Camera models.

Components:
    thin_lens: Positionable camera with field of view and depth of field
"""

from .thin_lens import Camera, CameraConfig, build_camera, get_camera_info

__all__ = [
    "Camera",
    "CameraConfig",
    "build_camera",
    "get_camera_info",
]

"""Thin-lens camera model for perspective ray generation with depth of field.

The camera supports:
- Look-at positioning (lookfrom, lookat, vup)
- Vertical field of view in degrees
- Arbitrary aspect ratios
- A circular lens aperture focused at a given distance

The camera builds an orthonormal basis (u, v, w) from the view parameters:
- w: points from lookat toward lookfrom (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

and places the image-plane rectangle at the focus distance. With a zero
aperture every ray starts at the eye and the model reduces to a pinhole
camera.

Example:
    >>> from src.pathtracer.camera.thin_lens import CameraConfig, build_camera
    >>> camera = build_camera(CameraConfig(
    ...     lookfrom=(0.0, 0.0, 0.0),
    ...     lookat=(0.0, 0.0, -1.0),
    ...     vup=(0.0, 1.0, 0.0),
    ...     vfov=90.0,
    ...     aspect_ratio=1.0,
    ... ))
    >>> ray = camera.get_ray(0.5, 0.5)  # Ray through image center
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from src.pathtracer.core.ray import ZERO, Ray, Vec3, random_in_unit_disk

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(frozen=True)
class CameraConfig:
    """Configuration for a thin-lens camera.

    Attributes:
        lookfrom: Camera position in world space (x, y, z).
        lookat: Point the camera is looking at in world space (x, y, z).
        vup: Up direction vector for camera orientation (typically (0, 1, 0)).
        vfov: Vertical field of view in degrees, in (0, 180).
        aspect_ratio: Width divided by height of the output image.
        aperture: Lens diameter. 0 gives a pinhole camera.
        focus_dist: Distance from the eye to the plane in perfect focus.

    Raises:
        ValueError: If any parameter is outside its valid range.
    """

    lookfrom: tuple[float, float, float]
    lookat: tuple[float, float, float]
    vup: tuple[float, float, float]
    vfov: float
    aspect_ratio: float
    aperture: float = 0.0
    focus_dist: float = 1.0

    def __post_init__(self) -> None:
        if not 0.0 < self.vfov < 180.0:
            raise ValueError(f"Vertical field of view = {self.vfov} must be in (0, 180).")
        if self.aspect_ratio <= 0.0:
            raise ValueError(f"Aspect ratio = {self.aspect_ratio} must be positive.")
        if self.aperture < 0.0:
            raise ValueError(f"Aperture = {self.aperture} must not be negative.")
        if self.focus_dist <= 0.0:
            raise ValueError(f"Focus distance = {self.focus_dist} must be positive.")
        if tuple(self.lookfrom) == tuple(self.lookat):
            raise ValueError("lookfrom and lookat must be different points.")


@dataclass(frozen=True, slots=True)
class Camera:
    """Precomputed camera state used for ray generation.

    Attributes:
        origin: Eye position.
        lower_left: Lower-left corner of the image plane at the focus distance.
        horizontal: Vector spanning the full image-plane width.
        vertical: Vector spanning the full image-plane height.
        u: Right direction.
        v: Up direction.
        w: Backward direction (opposite the view direction).
        lens_radius: Half the aperture.
    """

    origin: Vec3
    lower_left: Vec3
    horizontal: Vec3
    vertical: Vec3
    u: Vec3
    v: Vec3
    w: Vec3
    lens_radius: float = 0.0

    def get_ray(self, s: float, t: float, rng: np.random.Generator | None = None) -> Ray:
        """Generate a ray through image-plane fractions (s, t).

        The coordinates are normalized:
        - s = 0: left edge, s = 1: right edge
        - t = 0: bottom edge, t = 1: top edge

        Args:
            s: Horizontal fraction in [0, 1].
            t: Vertical fraction in [0, 1].
            rng: Random source for the lens sample. Only needed when the
                camera has a non-zero aperture.

        Returns:
            A ray from a point on the lens through the image-plane point.
            The direction is not normalized.
        """
        offset = ZERO
        if self.lens_radius > 0.0:
            if rng is None:
                raise ValueError("A random source is required for a camera with an aperture.")
            rd = random_in_unit_disk(rng) * self.lens_radius
            offset = self.u * rd.x + self.v * rd.y

        start = self.origin + offset
        target = self.lower_left + self.horizontal * s + self.vertical * t
        return Ray(start, target - start)


# =============================================================================
# Camera Setup
# =============================================================================


def build_camera(config: CameraConfig) -> Camera:
    """Compute the camera basis and image-plane geometry from a configuration.

    Args:
        config: Camera configuration with position, orientation, FOV and lens.

    Returns:
        The precomputed Camera.

    Raises:
        ValueError: If ``vup`` is parallel to the view direction.
    """
    theta = math.radians(config.vfov)
    half_height = math.tan(theta / 2.0)
    half_width = config.aspect_ratio * half_height

    origin = Vec3.from_iterable(config.lookfrom)
    lookat = Vec3.from_iterable(config.lookat)
    vup = Vec3.from_iterable(config.vup)

    w = (origin - lookat).unit()
    side = vup.cross(w)
    if side.squared_length() == 0.0:
        raise ValueError("vup must not be parallel to the view direction.")
    u = side.unit()
    v = w.cross(u)

    focus = config.focus_dist
    lower_left = origin - u * (half_width * focus) - v * (half_height * focus) - w * focus
    return Camera(
        origin=origin,
        lower_left=lower_left,
        horizontal=u * (2.0 * half_width * focus),
        vertical=v * (2.0 * half_height * focus),
        u=u,
        v=v,
        w=w,
        lens_radius=config.aperture / 2.0,
    )


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info(camera: Camera) -> dict[str, tuple[float, float, float]]:
    """Get camera state for debugging.

    Returns:
        Dictionary with origin, u, v, w, horizontal, vertical, lower_left.
    """
    return {
        "origin": tuple(camera.origin),
        "u": tuple(camera.u),
        "v": tuple(camera.v),
        "w": tuple(camera.w),
        "horizontal": tuple(camera.horizontal),
        "vertical": tuple(camera.vertical),
        "lower_left": tuple(camera.lower_left),
    }

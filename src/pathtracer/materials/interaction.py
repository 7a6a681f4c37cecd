"""Result types produced when a material responds to a ray hit.

A LightInteraction carries the radiance the surface emits directly plus the
rays it scatters. An absorbed ray is simply an interaction with no scattered
rays; it is not an error.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.pathtracer.core.ray import ZERO, Ray, Vec3


@dataclass(frozen=True, slots=True)
class ScatteredRay:
    """An outgoing ray and the per-channel factor applied to its radiance.

    Attributes:
        ray: The scattered ray, starting at the hit point.
        attenuation: Multiplier applied to the radiance returned along ``ray``.
    """

    ray: Ray
    attenuation: Vec3


@dataclass(frozen=True, slots=True)
class LightInteraction:
    """A material's response to one hit.

    Attributes:
        directly_emitted: Radiance contributed regardless of further bounces.
        scattered_rays: Zero or more outgoing rays.
    """

    directly_emitted: Vec3 = ZERO
    scattered_rays: tuple[ScatteredRay, ...] = ()


def validate_albedo(albedo: Vec3) -> None:
    """Raise ValueError if any albedo component lies outside [0, 1]."""
    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )

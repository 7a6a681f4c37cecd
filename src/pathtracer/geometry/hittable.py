"""The Hittable interface and the hit record it produces.

Any shape that can be intersected by a ray implements ``Hittable.hit``.
The interface is open: spheres and the World aggregate are the
implementations shipped today, and new primitives only need to provide
``hit``.

A miss is reported as ``None``, never as an exception.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from src.pathtracer.core.ray import Ray, Vec3

if TYPE_CHECKING:
    from src.pathtracer.materials.material import Material


@dataclass(frozen=True, slots=True)
class Hit:
    """Record of a successful ray-object intersection.

    Attributes:
        t: The ray parameter at which the intersection occurred.
        normal: A ray whose origin is the intersection point and whose
            direction is the outward unit normal there. The normal is not
            flipped toward the incoming ray; materials decide sidedness.
        material: The material of the intersected object.
    """

    t: float
    normal: Ray
    material: Material

    @property
    def point(self) -> Vec3:
        """The intersection point (origin of the normal ray)."""
        return self.normal.origin


class Hittable(ABC):
    """Capability for testing ray intersection against a shape."""

    @abstractmethod
    def hit(self, ray: Ray, t_min: float, t_max: float) -> Hit | None:
        """Find the nearest intersection with ``t_min < t < t_max``.

        Args:
            ray: The ray to test.
            t_min: Exclusive lower bound on the ray parameter.
            t_max: Exclusive upper bound on the ray parameter.

        Returns:
            The hit record, or None if the ray misses within the range.
        """

"""Scene-level closest-hit aggregation.

A World owns every object in the scene and is itself a Hittable: querying it
tests each member and returns the nearest intersection. The World is
immutable once built and is shared read-only by all render workers.

Example:
    >>> from src.pathtracer.core.ray import Vec3
    >>> from src.pathtracer.geometry.sphere import Sphere
    >>> from src.pathtracer.materials.lambertian import Lambertian
    >>> from src.pathtracer.scene.world import World
    >>> grey = Lambertian(Vec3(0.5, 0.5, 0.5))
    >>> world = World.from_objects([
    ...     Sphere(Vec3(0.0, 0.0, -1.0), 0.5, grey),
    ...     Sphere(Vec3(0.0, -100.5, -1.0), 100.0, grey),
    ... ])
    >>> len(world)
    2
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from src.pathtracer.core.ray import Ray
from src.pathtracer.geometry.hittable import Hit, Hittable


@dataclass(frozen=True, slots=True)
class World(Hittable):
    """An ordered, immutable collection of hittable objects.

    Attributes:
        objects: The scene's objects, tested in order.
    """

    objects: tuple[Hittable, ...] = ()

    @classmethod
    def from_objects(cls, objects: Iterable[Hittable]) -> World:
        """Build a world from any iterable of hittables."""
        return cls(tuple(objects))

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self) -> Iterator[Hittable]:
        return iter(self.objects)

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Hit | None:
        """Return the nearest hit among all objects, or None.

        Every object is queried with the same range; ties on ``t`` keep the
        first object encountered.
        """
        closest: Hit | None = None
        for hittable in self.objects:
            record = hittable.hit(ray, t_min, t_max)
            if record is not None and (closest is None or record.t < closest.t):
                closest = record
        return closest

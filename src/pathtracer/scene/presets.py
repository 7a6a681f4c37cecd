"""Ready-made scenes with matching cameras.

Two presets are provided:

- ``create_showcase_scene``: six spheres in front of the camera, one of
  each material (including the normal-visualization debug material), on a
  large green ground sphere.
- ``create_random_scene``: the classic "random spheres" cover scene, a
  22 x 22 grid of small randomly placed spheres with random materials
  around three large feature spheres, viewed through a lens with a small
  aperture.

Example:
    >>> from src.pathtracer.scene.presets import create_showcase_scene
    >>> world, camera = create_showcase_scene(aspect_ratio=16.0 / 9.0)
    >>> len(world)
    6
"""

from __future__ import annotations

from collections.abc import Callable

import numpy as np

from src.pathtracer.camera.thin_lens import Camera, CameraConfig, build_camera
from src.pathtracer.core.ray import Vec3
from src.pathtracer.geometry.sphere import Sphere
from src.pathtracer.materials.dielectric import Dielectric
from src.pathtracer.materials.lambertian import Lambertian
from src.pathtracer.materials.material import Material
from src.pathtracer.materials.metal import Metal
from src.pathtracer.materials.normal import Normal
from src.pathtracer.scene.world import World

# Scene factory signature: (aspect_ratio, rng) -> (world, camera)
SceneFactory = Callable[[float, np.random.Generator | None], tuple[World, Camera]]

# Random scene grid: spheres are placed on a GRID_SIZE x GRID_SIZE lattice
GRID_SIZE = 22
RANDOM_SPHERE_COUNT = 500
SMALL_RADIUS = 0.2


# =============================================================================
# Showcase Scene
# =============================================================================


def create_showcase_scene(
    aspect_ratio: float = 16.0 / 9.0,
    rng: np.random.Generator | None = None,
) -> tuple[World, Camera]:
    """Create a small scene with one sphere per material.

    Args:
        aspect_ratio: Image width divided by height.
        rng: Unused; accepted so all presets share one signature.

    Returns:
        Tuple of (world, camera).
    """
    red_matte = Lambertian(Vec3(0.8, 0.3, 0.3))
    green_matte = Lambertian(Vec3(0.3, 0.8, 0.3))
    blue_fuzzy_metal = Metal(Vec3(0.3, 0.3, 0.5), fuzz=0.5)
    shiny_metal = Metal(Vec3(0.8, 0.8, 0.8), fuzz=0.005)
    glass = Dielectric(1.5)

    world = World.from_objects([
        Sphere(Vec3(-1.0, 0.0, -1.5), 0.5, blue_fuzzy_metal),
        Sphere(Vec3(0.0, 2.0, -3.5), 1.5, shiny_metal),
        Sphere(Vec3(0.0, 0.0, -1.5), 0.5, Normal()),
        Sphere(Vec3(0.5, -0.25, -1.0), 0.25, red_matte),
        Sphere(Vec3(1.0, 0.0, -1.5), 0.5, glass),
        Sphere(Vec3(0.0, -200.5, -1.0), 200.0, green_matte),
    ])

    camera = build_camera(CameraConfig(
        lookfrom=(0.0, 0.0, 0.0),
        lookat=(0.0, 0.0, -1.0),
        vup=(0.0, 1.0, 0.0),
        vfov=90.0,
        aspect_ratio=aspect_ratio,
    ))
    return world, camera


# =============================================================================
# Random Spheres Scene
# =============================================================================


def random_material(rng: np.random.Generator) -> Material:
    """Pick a material: 80% diffuse, 15% metal, 5% glass."""
    choose_mat = rng.random()
    if choose_mat < 0.8:
        albedo = rng.random(3) * rng.random(3)
        return Lambertian(Vec3.from_iterable(albedo))
    elif choose_mat < 0.95:
        albedo = 0.5 * (1.0 + rng.random(3))
        return Metal(Vec3.from_iterable(albedo), fuzz=0.5 * float(rng.random()))
    return Dielectric(1.5)


def create_random_spheres(rng: np.random.Generator) -> list[Sphere]:
    """Scatter small spheres over the ground grid.

    Spheres that would overlap the large metal sphere at (4, 1, 0) are
    skipped.
    """
    keep_clear = Vec3(4.0, SMALL_RADIUS, 0.0)
    spheres = []
    for i in range(RANDOM_SPHERE_COUNT):
        a = (i // GRID_SIZE) % GRID_SIZE - GRID_SIZE // 2
        b = i % GRID_SIZE - GRID_SIZE // 2
        jitter_a, jitter_b = rng.random(2)
        center = Vec3(a + 0.9 * float(jitter_a), SMALL_RADIUS, b + 0.9 * float(jitter_b))
        if (center - keep_clear).length() > 0.9:
            spheres.append(Sphere(center, SMALL_RADIUS, random_material(rng)))
    return spheres


def create_random_scene(
    aspect_ratio: float = 16.0 / 9.0,
    rng: np.random.Generator | None = None,
) -> tuple[World, Camera]:
    """Create the random spheres scene.

    Args:
        aspect_ratio: Image width divided by height.
        rng: Random source for sphere placement and materials. A fresh
            generator is used when omitted.

    Returns:
        Tuple of (world, camera).
    """
    if rng is None:
        rng = np.random.default_rng()

    spheres = create_random_spheres(rng)
    spheres.extend([
        Sphere(Vec3(0.0, -1000.0, 0.0), 1000.0, Lambertian(Vec3(0.5, 0.5, 0.5))),
        Sphere(Vec3(0.0, 1.0, 0.0), 1.0, Dielectric(1.5)),
        Sphere(Vec3(-4.0, 1.0, 0.0), 1.0, Lambertian(Vec3(0.4, 0.2, 0.1))),
        Sphere(Vec3(4.0, 1.0, 0.0), 1.0, Metal(Vec3(0.7, 0.6, 0.5), fuzz=0.0)),
    ])

    camera = build_camera(CameraConfig(
        lookfrom=(7.5, 1.5, -2.0),
        lookat=(0.0, 1.0, 0.0),
        vup=(0.0, 1.0, 0.0),
        vfov=60.0,
        aspect_ratio=aspect_ratio,
        aperture=0.05,
        focus_dist=4.0,
    ))
    return World.from_objects(spheres), camera


SCENES: dict[str, SceneFactory] = {
    "showcase": create_showcase_scene,
    "random": create_random_scene,
}


def create_scene(
    name: str,
    aspect_ratio: float,
    rng: np.random.Generator | None = None,
) -> tuple[World, Camera]:
    """Create a preset scene by name.

    Raises:
        ValueError: If ``name`` is not a known preset.
    """
    try:
        factory = SCENES[name]
    except KeyError:
        raise ValueError(
            f"Unknown scene: {name!r}. Choose from {sorted(SCENES)}"
        ) from None
    return factory(aspect_ratio, rng)

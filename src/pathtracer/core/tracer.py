"""Parallel tracer that folds per-pixel samples into an ImageAccumulator.

Rendering is split into work items, one per (sample index, scanline) pair.
A work item walks every column of its scanline, traces one jittered camera
ray per pixel and folds the result into that pixel's running average:

    sample 0:  avg = c
    sample k:  avg = (avg * k + c) / (k + 1)

The running average is only correct if sample k of a pixel sees exactly the
result of samples 0..k-1. Items are therefore dispatched one sample pass at
a time: all scanlines of pass k run in parallel on the worker pool, and pass
k + 1 is submitted only after every item of pass k has finished. Within a
pass no two items touch the same pixel.

Each work item draws from its own NumPy generator seeded from
``(seed entropy, sample, row)``, so a seeded render produces the same image
regardless of how the threads are scheduled.

Shading is pure Python, so the GIL keeps the pool from using more than one
core at a time. The pool provides concurrent, lock-safe accumulation and
lets the preview read the image mid-render; it is not a speedup.

Example:
    >>> from src.pathtracer.core.accumulator import ImageAccumulator
    >>> from src.pathtracer.core.ray import Vec3
    >>> from src.pathtracer.core.tracer import render
    >>> image = ImageAccumulator.new_blank(32, 16, Vec3(0.0, 0.0, 0.0))
    >>> render(camera, world, image, samples=4, seed=7)  # doctest: +SKIP
    >>> image.get_completion()  # doctest: +SKIP
    1.0
"""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from functools import partial
from itertools import groupby
from operator import attrgetter

import numpy as np

from src.pathtracer.camera.thin_lens import Camera
from src.pathtracer.core.accumulator import ImageAccumulator
from src.pathtracer.core.integrator import MAX_DEPTH, T_MAX, T_MIN, color
from src.pathtracer.core.ray import Vec3
from src.pathtracer.geometry.hittable import Hittable

logger = logging.getLogger(__name__)

# Called with the sample index of each finished pass
PassCallback = Callable[[int], None]


@dataclass(frozen=True, slots=True)
class WorkItem:
    """One scanline at one sample index.

    Attributes:
        sample: Sample index (0-based) this item contributes.
        row: Scanline, counted from the bottom of the image.
    """

    sample: int
    row: int


def build_work_items(samples: int, height: int, first_sample: int = 0) -> list[WorkItem]:
    """Enumerate work items grouped by sample index.

    Sample indices increase in the outer loop; scanlines run from the top
    of the image to the bottom in the inner loop.

    Args:
        samples: Number of sample passes.
        height: Image height in scanlines.
        first_sample: Sample index of the first pass.

    Returns:
        ``samples * height`` work items.
    """
    return [
        WorkItem(sample, row)
        for sample in range(first_sample, first_sample + samples)
        for row in reversed(range(height))
    ]


def fold_sample(old: Vec3, new: Vec3, sample: int) -> Vec3:
    """Fold sample number ``sample`` into a running average."""
    if sample == 0:
        return new
    return (old * sample + new) / (sample + 1)


def jittered(index: int, size: int, rng: np.random.Generator) -> float:
    """Image-plane fraction of a random point inside pixel ``index``."""
    return (index + float(rng.random())) / size


def trace_work_item(
    item: WorkItem,
    camera: Camera,
    world: Hittable,
    image: ImageAccumulator,
    max_depth: int,
    rng: np.random.Generator,
) -> None:
    """Trace one scanline for one sample and fold it into the image.

    Args:
        item: The scanline and sample index to render.
        camera: Camera used to generate primary rays.
        world: Scene to trace against.
        image: Accumulator receiving the running averages.
        max_depth: Maximum recursion depth per camera ray.
        rng: Random source for jitter, lens and material sampling.
    """
    width, height = image.width, image.height
    for x in range(width):
        ray = camera.get_ray(jittered(x, width, rng), jittered(item.row, height, rng), rng)
        pixel_color = color(ray, world, T_MIN, T_MAX, max_depth, rng)
        image.update_pixel(x, item.row, partial(fold_sample, new=pixel_color, sample=item.sample))


def _run_work_item(
    item: WorkItem,
    camera: Camera,
    world: Hittable,
    image: ImageAccumulator,
    max_depth: int,
    entropy: int,
    fraction: float,
) -> None:
    rng = np.random.default_rng([entropy, item.sample, item.row])
    trace_work_item(item, camera, world, image, max_depth, rng)
    image.update_completion(lambda done: min(1.0, done + fraction))


def render(
    camera: Camera,
    world: Hittable,
    image: ImageAccumulator,
    samples: int,
    max_depth: int = MAX_DEPTH,
    workers: int | None = None,
    seed: int | None = None,
    first_sample: int = 0,
    on_pass_complete: PassCallback | None = None,
) -> None:
    """Render ``samples`` passes into ``image`` on a pool of worker threads.

    The completion fraction of ``image`` is reset to 0.0, then advances by
    ``1 / (samples * height)`` after every scanline, capped at 1.0. It reaches
    1.0 when the call returns.

    Args:
        camera: Camera used to generate primary rays.
        world: Scene to trace against; shared read-only by all workers.
        image: Accumulator receiving the running averages.
        samples: Number of sample passes to render.
        max_depth: Maximum recursion depth per camera ray.
        workers: Pool size. None uses the CPU count.
        seed: Seed for reproducible renders. None draws fresh entropy.
        first_sample: Sample index of the first pass, for continuing an
            earlier render of the same image.
        on_pass_complete: Called with the sample index after each pass.

    Raises:
        ValueError: If ``samples`` or ``max_depth`` is not positive.
        Exception: Any exception raised inside a worker is re-raised here.
    """
    if samples <= 0:
        raise ValueError(f"Samples = {samples} must be a positive integer.")
    if max_depth <= 0:
        raise ValueError(f"Max depth = {max_depth} must be a positive integer.")

    items = build_work_items(samples, image.height, first_sample)
    fraction = 1.0 / len(items)
    entropy = np.random.SeedSequence(seed).entropy
    image.update_completion(lambda _: 0.0)
    pool_size = workers if workers is not None else (os.cpu_count() or 1)

    logger.info(
        "Rendering %dx%d, %d samples, depth %d on %d workers",
        image.width,
        image.height,
        samples,
        max_depth,
        pool_size,
    )
    start_time = time.perf_counter()

    with ThreadPoolExecutor(max_workers=pool_size, thread_name_prefix="tracer") as pool:
        for sample, pass_items in groupby(items, key=attrgetter("sample")):
            futures = [
                pool.submit(
                    _run_work_item, item, camera, world, image, max_depth, entropy, fraction
                )
                for item in pass_items
            ]
            # Barrier: pass k + 1 must not start before pass k has finished
            for future in as_completed(futures):
                future.result()

            logger.debug(
                "Finished sample pass %d (%.1f%% complete)",
                sample,
                image.get_completion() * 100.0,
            )
            if on_pass_complete is not None:
                on_pass_complete(sample)

    logger.info("Render finished in %.2fs", time.perf_counter() - start_time)

"""Pytest configuration for path tracer tests.

This module provides shared fixtures for all test modules:
- a seeded NumPy generator for tests that only need *some* randomness
- a scripted random source for tests that need exact random draws
- Taichi initialization for the preview tests, which must happen once per
  session
"""

from __future__ import annotations

import numpy as np
import pytest
import taichi as ti


class FakeRandom:
    """Stand-in for ``numpy.random.Generator`` that replays scripted values.

    ``random()`` pops from ``randoms`` and ``uniform(low, high, size)`` pops
    ``size`` values from ``uniforms``. Scripted uniforms are returned as-is,
    so they must already lie in ``[low, high)``.
    """

    def __init__(self, randoms=(), uniforms=()):
        self._randoms = list(randoms)
        self._uniforms = list(uniforms)

    def random(self, size=None):
        if size is None:
            return self._randoms.pop(0)
        return np.array([self._randoms.pop(0) for _ in range(size)])

    def uniform(self, low=0.0, high=1.0, size=None):
        if size is None:
            return self._uniforms.pop(0)
        return np.array([self._uniforms.pop(0) for _ in range(size)])


@pytest.fixture
def rng():
    """A seeded NumPy generator."""
    return np.random.default_rng(12345)


@pytest.fixture
def fake_random():
    """Factory for scripted random sources: ``fake_random(randoms=..., uniforms=...)``."""
    return FakeRandom


@pytest.fixture(scope="session")
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield

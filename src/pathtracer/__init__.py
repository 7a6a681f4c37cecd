"""Python implementation of a multithreaded Monte Carlo path tracer.

This package renders scenes of spheres by recursive path tracing, with
support for:
- Diffuse, metal, glass and normal-visualization materials
- A thin-lens camera with depth of field
- Progressive, per-pass sample accumulation on a pool of worker threads
- A shared, thread-safe image buffer that can be previewed while rendering

Subpackages:
    core: Vector math, rays, the integrator, the image accumulator and the
        parallel tracer
    geometry: The hittable interface and the sphere primitive
    materials: Material models and the light-interaction dispatch
    scene: The world container and preset scenes
    camera: Thin-lens camera model with ray generation
    preview: Display processing, image export and the live preview window
"""

__version__ = "0.1.0"

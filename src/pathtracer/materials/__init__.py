"""Material models.

Components:
    interaction: LightInteraction and ScatteredRay result types
    normal: Debug material that emits its surface normal
    lambertian: Ideal diffuse reflection
    metal: Mirror reflection with optional fuzz
    dielectric: Glass-like refraction with Schlick reflectance
    material: The Material union and the interact() dispatch

Every material turns a hit into emitted light plus zero or more scattered
rays, each weighted by an attenuation.
"""

from .dielectric import Dielectric
from .interaction import LightInteraction, ScatteredRay
from .lambertian import Lambertian
from .material import Material, interact
from .metal import Metal
from .normal import Normal

__all__ = [
    "Material",
    "interact",
    "LightInteraction",
    "ScatteredRay",
    "Normal",
    "Lambertian",
    "Metal",
    "Dielectric",
]

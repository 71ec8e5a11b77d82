"""Scene module: the world of spheres and a built-in demo scene.

Components:
    world: Scene aggregate, device-side sphere storage and hit_world
    demo: The three-spheres demo scene with its camera
"""

from .demo import create_demo_scene
from .world import (
    MAX_SPHERES,
    Scene,
    SphereInfo,
    clear_scene,
    get_sphere_count,
    hit_world,
)

__all__ = [
    "Scene",
    "SphereInfo",
    "MAX_SPHERES",
    "clear_scene",
    "get_sphere_count",
    "hit_world",
    "create_demo_scene",
]

"""Built-in demo scene: three spheres on a large ground sphere.

A matte blue sphere sits in the middle, flanked by a hollow glass sphere on
the left (an outer shell of glass around an air bubble) and a fuzzy gold
metal sphere on the right. The camera looks down at the group from above
and to the left with a shallow depth of field.
"""

from lenscast.camera.camera import Camera
from lenscast.materials import Dielectric, Lambertian, Metal
from lenscast.scene.world import Scene


def create_demo_scene() -> tuple[Scene, Camera]:
    """Create the demo scene and its camera.

    Returns:
        Tuple of (scene, camera).
    """
    ground = Lambertian(albedo=(0.8, 0.8, 0.0))
    center = Lambertian(albedo=(0.1, 0.2, 0.5))
    left = Dielectric(refraction_index=1.50)
    bubble = Dielectric(refraction_index=1.00 / 1.50)
    right = Metal(albedo=(0.8, 0.6, 0.2), fuzz=1.0)

    scene = Scene()
    scene.add_sphere((0.0, -100.5, -1.0), 100.0, ground)
    scene.add_sphere((0.0, 0.0, -1.2), 0.5, center)
    scene.add_sphere((-1.0, 0.0, -1.0), 0.5, left)
    scene.add_sphere((-1.0, 0.0, -1.0), 0.4, bubble)
    scene.add_sphere((1.0, 0.0, -1.0), 0.5, right)

    camera = Camera(
        aspect_ratio=16.0 / 9.0,
        image_width=400,
        samples_per_pixel=100,
        max_depth=50,
        vfov=20.0,
        lookfrom=(-2.0, 2.0, 1.0),
        lookat=(0.0, 0.0, -1.0),
        vup=(0.0, 1.0, 0.0),
        defocus_angle=10.0,
        focus_dist=3.4,
    )

    return scene, camera

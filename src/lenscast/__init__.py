"""Taichi-based Monte Carlo ray tracer.

This package renders scenes of spheres through a thin-lens camera using
stochastic path sampling on Taichi's CPU backend.

Subpackages:
    core: Vector utilities, rays, intervals, random streams, shading and the
        render loop
    geometry: Hit records and the analytic sphere
    scene: The scene aggregate and a built-in demo scene
    materials: Scattering policies and the material registry
    camera: Camera configuration, basis construction and primary rays
    output: Gamma correction and PPM/PNG image sinks

Taichi must be initialized (``ti.init``) before importing subpackages that
declare fields (camera, scene, materials, core.sampler, core.integrator).
"""

__version__ = "0.1.0"

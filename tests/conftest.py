"""Pytest configuration for lenscast tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Library modules declare their fields at import time, so tests import
    them lazily, after this fixture has run. Calling ti.init() again would
    invalidate those fields.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear the committed scene and material table around each test."""
    # Import here to ensure Taichi is initialized
    from lenscast.materials.registry import clear_materials
    from lenscast.scene.world import clear_scene

    clear_scene()
    clear_materials()

    yield

    clear_scene()
    clear_materials()


@pytest.fixture
def seeded_streams():
    """Seed the random streams deterministically."""
    from lenscast.core.sampler import seed_streams

    seed_streams(1234)

"""Pytest configuration for flat primitive tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts. fast_math stays
    off so NaN/inf comparisons in the intersection code are IEEE-correct.
    """
    from flat_primitives.config import TaichiConfig, init_taichi

    init_taichi(TaichiConfig(arch="cpu", random_seed=42))
    yield


@pytest.fixture(autouse=True)
def clear_scene_data():
    """Clear primitive storage before and after each test.

    This ensures tests are isolated from each other.
    """
    # Import here so that Taichi is initialized before fields are declared
    from flat_primitives.scene.intersection import clear_scene

    clear_scene()
    yield
    clear_scene()

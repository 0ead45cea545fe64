"""
Pytest configuration and fixtures for PyFastResample test suite.

This file contains shared fixtures, test configuration, and utilities
used across the test suite.
"""
import os
import sys
import pytest
import numpy as np


def pytest_configure(config):
    """Configure pytest with custom settings."""
    # Add the package root to Python path for testing
    package_root = os.path.dirname(os.path.dirname(__file__))
    if package_root not in sys.path:
        sys.path.insert(0, package_root)

    for marker in ("unit", "integration", "importtest", "slow"):
        config.addinivalue_line("markers", f"{marker}: {marker} tests")


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers and ordering."""
    for item in items:
        # Mark import tests for easy selection
        if "import" in item.name.lower() or "test_imports.py" in str(item.fspath):
            item.add_marker("importtest")


@pytest.fixture(scope="session", autouse=True)
def taichi_runtime():
    """Initialise Taichi once on the CPU for the whole session."""
    import taichi as ti
    from pyfastresample import pool

    ti.init(arch=ti.cpu, offline_cache=False)
    pool.clear()
    yield ti


class TestDataManager:
    """Helper class for building pixel buffers."""

    @staticmethod
    def solid(width, height, color, dtype=np.uint8):
        """Create a buffer filled with one RGBA color."""
        from pyfastresample import PixelBuffer

        return PixelBuffer.filled(width, height, color, dtype=dtype)

    @staticmethod
    def random(width, height, seed=42):
        """Create a buffer of reproducible random channel values."""
        from pyfastresample import PixelBuffer

        rng = np.random.default_rng(seed)
        data = rng.integers(0, 256, size=width * height * 4, dtype=np.uint8)
        return PixelBuffer(width, height, data)

    @staticmethod
    def quadrants():
        """2x2 source with four distinct solid colors: [[R, G], [B, W]]."""
        from pyfastresample import PixelBuffer

        rgba = np.array(
            [
                [[255, 0, 0, 255], [0, 255, 0, 255]],
                [[0, 0, 255, 255], [255, 255, 255, 255]],
            ],
            dtype=np.uint8,
        )
        return PixelBuffer.from_array(rgba)


@pytest.fixture
def test_data_manager():
    """Provide access to test data creation utilities."""
    return TestDataManager()

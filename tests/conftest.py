import numpy as np
import pytest


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def noise_target():
    """Small random RGB target; never matched exactly by a handful of triangles."""
    return np.random.default_rng(7).integers(0, 256, size=(10, 12, 3), dtype=np.uint8)

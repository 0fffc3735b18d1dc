"""
Test configuration and fixtures for prominence tests.
"""
import io

import numpy as np
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from prominence.main import app


@pytest.fixture
def test_client():
    """Create test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def reset_metrics():
    """Reset metrics before each test."""
    from prominence.utils.metrics import reset_metrics
    reset_metrics()


@pytest.fixture
def red_image():
    """10x10 image of pure red."""
    return np.full((10, 10, 3), (255, 0, 0), dtype=np.uint8)


@pytest.fixture
def two_halves_image():
    """200x100 image: left half red, right half blue."""
    img = np.zeros((100, 200, 3), dtype=np.uint8)
    img[:, :100] = (255, 0, 0)
    img[:, 100:] = (0, 0, 255)
    return img


@pytest.fixture
def random_image():
    """Deterministic noisy image with many distinct colors."""
    rng = np.random.default_rng(42)
    return rng.integers(0, 256, size=(64, 64, 3), dtype=np.uint8)


def encode_png(arr: np.ndarray) -> bytes:
    """Encode an RGB array as PNG bytes."""
    buffer = io.BytesIO()
    Image.fromarray(arr).save(buffer, format="PNG")
    return buffer.getvalue()

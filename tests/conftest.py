import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from photoedit.models import PixelBuffer


@pytest.fixture
def uniform_buffer() -> PixelBuffer:
    """4x4, every pixel (100, 150, 200, 255)."""
    return PixelBuffer.filled(4, 4, (100, 150, 200, 255))


@pytest.fixture
def random_buffer() -> PixelBuffer:
    """Deterministic 16x12 noise with varying alpha."""
    rng = np.random.default_rng(1234)
    return PixelBuffer.from_array(rng.integers(0, 256, size=(12, 16, 4), dtype=np.uint8))


@pytest.fixture
def split_buffer() -> PixelBuffer:
    """20x20: left half black, right half white."""
    pixels = np.zeros((20, 20, 4), dtype=np.uint8)
    pixels[:, :, 3] = 255
    pixels[:, 10:, :3] = 255
    return PixelBuffer.from_array(pixels)

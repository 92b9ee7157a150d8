import numpy as np
import pytest

from backend.texture_classes import ImageBuffer


def uniform(rgba, width=4, height=4):
    pixels = np.empty((height, width, 4), dtype=np.float32)
    pixels[...] = rgba
    return ImageBuffer(pixels)


@pytest.fixture
def gradient():
    # 3x2 image with distinct values on every channel and pixel
    values = np.arange(3 * 2 * 4, dtype=np.float32).reshape(2, 3, 4) / 24.0
    return ImageBuffer(values)

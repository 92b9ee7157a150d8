""" Per-pixel channel operations. Each one builds a new buffer and never touches its inputs. """

from typing import Union

import numpy as np
from numpy.typing import NDArray

from backend.texture_classes import Channel, DimensionMismatch, ImageBuffer

LUMINOSITY_WEIGHTS: tuple[float, float, float] = (0.3, 0.59, 0.11) # R, G, B weights used for desaturation.


def check_same_size(*images: ImageBuffer) -> None:
# Raises DimensionMismatch if the images don't all share the same width and height.

    sizes = [image.size for image in images]
    if len(set(sizes)) > 1:
        size_list = ", ".join(f"{width}x{height}" for width, height in sizes)
        raise DimensionMismatch(f"Source textures must share the same resolution, got: {size_list}.")


def _grayscale(values: NDArray[np.float32], alpha: Union[NDArray[np.float32], float] = 1.0) -> ImageBuffer:
# Stacks a single (height, width) plane into (v, v, v, alpha) pixels.
    alpha_plane = np.broadcast_to(np.asarray(alpha, dtype=np.float32), values.shape)
    return ImageBuffer(np.stack([values, values, values, alpha_plane], axis=-1))




#                                         === Operations ===

def desaturate(source: ImageBuffer) -> ImageBuffer:
# Luminosity = 0.3R + 0.59G + 0.11B; alpha is kept from the source.

    red_weight, green_weight, blue_weight = LUMINOSITY_WEIGHTS
    pixels = source.pixels
    luminosity = pixels[..., 0] * red_weight + pixels[..., 1] * green_weight + pixels[..., 2] * blue_weight
    # Float32 weights of a white pixel can sum just above 1.
    return _grayscale(np.clip(luminosity, 0.0, 1.0).astype(np.float32), pixels[..., 3])


def extract_channel(source: ImageBuffer, channel: Union[Channel, str]) -> ImageBuffer:
# Copies one channel into RGB; alpha is forced to 1 rather than preserved.
    return _grayscale(source.channel(channel))


def roughness_to_smoothness(source: ImageBuffer) -> ImageBuffer:
# Smoothness = 1 - roughness, read from the red channel only.
    return _grayscale(np.float32(1.0) - source.channel(Channel.RED))


def constant_fill(value: float, width: int, height: int) -> ImageBuffer:
# Uniform (value, value, value, 1) texture, stands in for a map given as a single value.

    if width <= 0 or height <= 0:
        raise ValueError(f"Texture size must be positive, got {width}x{height}.")
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"Fill value must be within 0-1, got {value}.")
    return _grayscale(np.full((height, width), value, dtype=np.float32))


def compose_channels(r_channel: ImageBuffer, g_channel: ImageBuffer, b_channel: ImageBuffer, a_channel: ImageBuffer) -> ImageBuffer:
# Packs the red component of each source into R, G, B and A of the output.

    sources = (r_channel, g_channel, b_channel, a_channel)
    check_same_size(*sources)
    return ImageBuffer(np.stack([source.channel(Channel.RED) for source in sources], axis=-1))

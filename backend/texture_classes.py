from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple, Union
import os

import numpy as np
from numpy.typing import NDArray


#                                           === Errors ===

class MapGeneratorError(Exception):
    """Base class for every failure surfaced by the map generation pipeline."""

class DimensionMismatch(MapGeneratorError):
    """Images used by the same operation differ in width/height."""

class MissingInput(MapGeneratorError):
    """A mandatory texture was never supplied and no scalar fallback applies."""

class IOFailure(MapGeneratorError):
    """Output directory could not be created, or a file could not be read/written."""




#                                           === Image data ===

class Channel(Enum):
    RED = 0
    GREEN = 1
    BLUE = 2
    ALPHA = 3

    @classmethod
    def parse(cls, value: Union["Channel", str]) -> "Channel":
    # Accepts a Channel or its name: "R", "g", "Blue", "alpha"...
        if isinstance(value, Channel):
            return value
        name: str = (value or "").strip().upper()
        for channel in cls:
            if name in (channel.name, channel.name[0]):
                return channel
        raise ValueError(f"Unknown channel '{value}'. Expected one of R, G, B, A.")


Pixel = Tuple[float, float, float, float]


@dataclass(frozen=True, eq=False)
class ImageBuffer:
    pixels: NDArray[np.float32] # Row-major RGBA grid, shape (height, width, 4), normalized 0-1 floats.

    def __post_init__(self) -> None:
        source_array = np.asarray(self.pixels)
        if not np.issubdtype(source_array.dtype, np.floating):
            raise ValueError(f"Image buffer needs normalized 0-1 floats, got dtype {source_array.dtype}; divide 8bit data by 255 first.")
        pixel_array = np.array(source_array, dtype=np.float32) # Always copies, so the caller's array is never shared.
        if pixel_array.ndim != 3 or pixel_array.shape[2] != 4:
            raise ValueError(f"Image buffer needs shape (height, width, 4), got {pixel_array.shape}.")
        if pixel_array.shape[0] <= 0 or pixel_array.shape[1] <= 0:
            raise ValueError(f"Image buffer needs a positive size, got {pixel_array.shape[1]}x{pixel_array.shape[0]}.")
        if not np.all(np.isfinite(pixel_array)):
            raise ValueError("Image buffer contains NaN or infinite values.")
        if float(pixel_array.min()) < 0.0 or float(pixel_array.max()) > 1.0:
            raise ValueError(f"Image buffer values must be within 0-1, got {float(pixel_array.min())} to {float(pixel_array.max())}.")
        pixel_array.setflags(write=False)
        object.__setattr__(self, "pixels", pixel_array)

    @classmethod
    def from_pixels(cls, width: int, height: int, pixels: Sequence[Pixel]) -> "ImageBuffer":
    # Builds a buffer from a flat row-major list of RGBA tuples.
        if len(pixels) != width * height:
            raise ValueError(f"Expected {width * height} pixels for {width}x{height}, got {len(pixels)}.")
        return cls(np.asarray(pixels, dtype=np.float32).reshape(height, width, 4))

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def pixel(self, x: int, y: int) -> Pixel:
        red, green, blue, alpha = (float(v) for v in self.pixels[y, x])
        return red, green, blue, alpha

    def channel(self, channel: Union[Channel, str]) -> NDArray[np.float32]:
    # Returns a read-only (height, width) view of one channel.
        return self.pixels[..., Channel.parse(channel).value]




#                                           === Requests ===

@dataclass(frozen=True)
class ImageInput:
    image: Optional[ImageBuffer] # Source texture for this channel role.

@dataclass(frozen=True)
class ScalarInput:
    value: float # Uniform 0-1 value used instead of a texture.

    def __post_init__(self) -> None:
        value = float(self.value)
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"Scalar value must be within 0-1, got {self.value}.")
        object.__setattr__(self, "value", value)

ChannelInput = Union[ImageInput, ScalarInput]
# Either a texture or a uniform value for a channel role, never both.


@dataclass(frozen=True)
class DetailMapRequest:
    diffuse: Optional[ImageBuffer] # Albedo texture; desaturated into R.
    normal: Optional[ImageBuffer] # Normal map; green goes to G, red goes to A.
    roughness: ChannelInput # Converted to smoothness into B.

@dataclass(frozen=True)
class MaskMapRequest:
    metallic: ChannelInput # R.
    ambient_occlusion: Optional[ImageBuffer] # G.
    detail_mask: Optional[ImageBuffer] # B; also the reference size for scalar fallbacks.
    roughness: ChannelInput # A.


@dataclass(frozen=True)
class OutputArtifact:
    image: ImageBuffer # Final packed texture.
    directory: str # Target folder.
    name: str # Base file name, without extension.

    @property
    def path(self) -> str:
        return os.path.join(self.directory, f"{self.name}.png")

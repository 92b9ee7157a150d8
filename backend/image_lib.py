""" Image processing backend. Currently implemented using Pillow (PIL) and NumPy. PIL exports 8bit images only."""



#                                           === Backend ===

from typing import Any, TypeAlias

import numpy as np
from numpy.typing import NDArray
from PIL import Image as PILImageModule
from PIL.Image import Image as PILImage

from backend.texture_classes import ImageBuffer

ImageObject: TypeAlias = PILImage


def close_image(image: object) -> None:
    close = getattr(image, "close", None)
    if callable(close):
        close()


def from_array_u8(data: Any, mode: str) -> ImageObject:
# Creates an image from a uint8 numpy array; Pillow infers the mode from the array shape.
    image = PILImageModule.fromarray(np.asarray(data, dtype=np.uint8))
    return image if image.mode == mode else image.convert(mode)


def get_image_mode(image: Any) -> str:
# Return the Pillow image mode: "RGB", "RGBA", "L"
    return image.mode


def open_image(path: str) -> ImageObject:
    return PILImageModule.open(path)


def save_image(image: Any, path: str) -> None:
    image.save(path, format="PNG")




#                                       === Buffer conversion ===

def to_buffer(image: ImageObject) -> ImageBuffer:
# Reads every pixel of an opened image into a normalized RGBA float buffer.
# Grayscale maps are expanded to (v, v, v, 1); missing alpha becomes 1.

    if is_grayscale(image):
        image = convert_to_grayscale(image)
    rgba_image = image if get_image_mode(image) == "RGBA" else image.convert("RGBA")
    pixels_u8: NDArray[np.uint8] = np.asarray(rgba_image, dtype=np.uint8)
    return from_u8(pixels_u8)


def from_u8(pixels_u8: NDArray[np.uint8]) -> ImageBuffer:
# Converts an HxWx4 uint8 array to a float buffer.
    return ImageBuffer(pixels_u8.astype(np.float32) / np.float32(255.0))


def to_u8(buffer: ImageBuffer) -> NDArray[np.uint8]:
# Converts a float buffer to HxWx4 uint8, rounding to the nearest 8bit step.
    return np.rint(np.clip(buffer.pixels, 0.0, 1.0) * 255.0).astype("uint8")


def from_buffer(buffer: ImageBuffer) -> ImageObject:
# Generates an RGBA Pillow image from a float buffer.
    return from_array_u8(to_u8(buffer), "RGBA")




#                                           === Utils ===

def is_grayscale(image: ImageObject) -> bool:
# Returns True if the image is of type grayscale image.

    mode = get_image_mode(image)
    return mode in ("L", "LA") or mode == "I" or str(mode).startswith("I;16")


def convert_to_grayscale(image: ImageObject) -> ImageObject:
# Converts an image to 8-bit grayscale; an existing alpha (LA) is kept.
    mode = image.mode
    if mode in ("L", "LA"):
        return image
    if mode in ("I", "I;16", "I;16L", "I;16B"):
        return _16_to_8bit(image)
    return image.convert("L")


def _16_to_8bit(image: ImageObject) -> ImageObject:
# Scales down 16bit range to a 8bit, so values are properly maintained instead of being clipped.

# Preparing the image:
    if image.mode == "I":
        img16 = image.convert("I;16")
    elif image.mode in ("I;16", "I;16L", "I;16B"):
        img16 = image if image.mode == "I;16" else image.convert("I;16")
    # Normalizes the image type to 16bit LE.
    else:
        return image.convert("L")
    # If the image is just 8bit grayscale, passes it though.

    raw = img16.tobytes("raw", "I;16")  # LE 16bit
    data16: NDArray[np.uint16] = np.frombuffer(raw, dtype="<u2")

# Scaling:
    data8: NDArray[np.uint8] = (data16 >> 8).astype(np.uint8)
    return PILImageModule.frombytes("L", img16.size, data8.tobytes())

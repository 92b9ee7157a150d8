""" Shared utilities: console logging, output folder handling and .exr reading. """

import os
from functools import lru_cache
import importlib.util
from typing import Any, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from backend.texture_classes import IOFailure, MissingInput


LOG_TYPES: list[str] = ["info", "warn", "error", "skip", "complete"]
# Defines log types printed by the CLI.

def log(message: str, message_kind: LOG_TYPES = "info") -> None:
# Maps different log types.

    if message == "":
        print("")
        return

    if message_kind not in LOG_TYPES:
        message_kind = "info"

    if message_kind == "info":
        print(f"   {message}")
    elif message_kind == "warn":
        print(f"⚠️ {message}")
    elif message_kind == "error":
        print(f"⛔ {message}")
    elif message_kind == "skip":
        print(f"❌ {message}")
    elif message_kind == "complete":
        print(f"✅ {message}")

    # Print styles:
    # info: 3 whitespaces + message
    # warn: ⚠️ + message
    # error: ⛔ + message
    # skip: ❌ + message
    # complete: ✅ + message


def format_resolution(size: Tuple[int, int]) -> str:
    width, height = size
    return f"{width}x{height}"


def make_output_dir(output_directory: str) -> str:
# Creates (if missing) and returns the absolute output directory, including all intermediate folders.

    output_directory = os.path.abspath(output_directory or ".")
    try:
        os.makedirs(output_directory, exist_ok=True)
    except OSError as error:
        raise IOFailure(f"Cannot create output folder '{output_directory}': {error}") from error
    return output_directory


def validate_safe_file_name(raw_file_name: Optional[str]) -> str:
# Validates that the output file name is not empty and doesn't include unsupported characters.

    file_name: str = (raw_file_name or "").strip()
    if file_name == "":
        raise IOFailure("Output file name cannot be empty.")

    if any(invalid_character in file_name for invalid_character in '\\/:*?"<>|'):
        raise IOFailure(f"Invalid file name '{raw_file_name}'. It cannot contain \\ / : * ? \" < > |")
    return file_name




#                                           === .exr support ===

@lru_cache(maxsize=1)
def check_exr_libraries() -> bool:
# Checks if OpenEXR and Imath are installed for reading the .exr files.
    return importlib.util.find_spec("OpenEXR") is not None and importlib.util.find_spec("Imath") is not None


def linear_to_srgb(linear_values: NDArray[np.float32]) -> NDArray[np.float32]:
# Applies sRGB gamma.
    linear_values = np.clip(linear_values, 0.0, 1.0).astype(np.float32)
    srgb_a = 0.055
    return np.where(linear_values <= 0.0031308, linear_values * 12.92, (1 + srgb_a) * np.power(linear_values, 1 / 2.4) - srgb_a).astype(np.float32)


def read_exr(source_exr_path: str, *, srgb_transform: bool = False) -> NDArray[np.float32]:
# Reads a 32bit float .exr image into an HxWx4 float array (0-1) using OpenEXR and Numpy.

    if not check_exr_libraries():
        raise MissingInput(f"Cannot read '{source_exr_path}': EXR runtime missing (OpenEXR/Imath).")

    import OpenEXR
    import Imath

# Preparing the image:
    try:
        file: OpenEXR.InputFile = OpenEXR.InputFile(source_exr_path)
    except OSError as error:
        raise IOFailure(f"Cannot read '{source_exr_path}': {error}") from error

    try:
        hdr: dict[str, Any] = file.header()
        data_window: Imath.Box2i = hdr['dataWindow']
        width: int = data_window.max.x - data_window.min.x + 1
        height: int = data_window.max.y - data_window.min.y + 1
        float_pixel_data: Imath.PixelType = Imath.PixelType(Imath.PixelType.FLOAT) # Setting pixel data type to float.

        channels_list: list[str] = list(hdr['channels'].keys())
        channel_names: dict[str, str] = {channel.lower(): channel for channel in channels_list}
        # Gets names of all available channels.

        is_rgb: bool = all(k in channel_names for k in ("r", "g", "b"))
        has_alpha: bool = ("a" in channel_names)

        def read_channel(channel_name: str) -> NDArray[np.float32]:
        # Reads chanel as a 32b float and restructure its pixels into 2D array W*H.
            return np.frombuffer(file.channel(channel_name, float_pixel_data), dtype=np.float32).reshape(height, width)

# Processing the image:
        alpha: NDArray[np.float32] = np.ones((height, width, 1), dtype=np.float32)
        if is_rgb:
            r, g, b = read_channel(channel_names["r"]), read_channel(channel_names["g"]), read_channel(channel_names["b"])
            rgb: NDArray[np.float32] = np.stack([r, g, b], axis=-1) # HxWx3 (Height, Width, Channels).

            if has_alpha:
                alpha = np.clip(read_channel(channel_names["a"])[..., None], 0.0, 1.0)
                eps: float = 1e-6
                almost_empty_alpha: bool = float(alpha.max()) <= eps
                almost_opaque_alpha: bool = float(alpha.min()) >= 1.0 - eps
                if not almost_empty_alpha and not almost_opaque_alpha:
                    partial_alpha_fraction: float = float(((alpha > eps) & (alpha < 1.0 - eps)).mean())
                    if partial_alpha_fraction > 1e-3:
                        alpha_denominator: NDArray[np.float32] = np.maximum(alpha, np.float32(1e-8))
                        rgb = np.divide(rgb, alpha_denominator, out=rgb.copy(), where=alpha_denominator > 0).astype(np.float32)
                    # Un-premultiplies RGB using a non-zero alpha divisor.
            # Un-premultiplies Alpha if available, and is neither all 0 nor 1.
        else:
            grayscale: NDArray[np.float32] = read_channel(channels_list[0])
            rgb = np.stack([grayscale, grayscale, grayscale], axis=-1)
        # In case the full RGB is missing, it uses the first available channel as grayscale.

    finally:
        file.close()

    rgb = linear_to_srgb(rgb) if srgb_transform else np.clip(rgb, 0.0, 1.0)
    return np.concatenate([rgb, alpha], axis=-1).astype(np.float32)

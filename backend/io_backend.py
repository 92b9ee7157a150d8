""" Input/output backend: reads source textures into buffers and writes generated maps to disk. """

import os

from backend.image_lib import (ImageObject, close_image, from_buffer, open_image, save_image as save_image_file, to_buffer)
from backend.texture_classes import (ImageBuffer, IOFailure, MissingInput, OutputArtifact)

from settings import (ALLOWED_FILE_TYPES, OUTPUT_FILE_TYPE, RAW_SOURCE_TYPES)
from utils import (log, make_output_dir, read_exr, validate_safe_file_name)




#                                           === Loading ===

def load_texture(path: str, *, srgb_transform: bool = False) -> ImageBuffer:
# Reads a source texture into an RGBA float buffer.
# srgb_transform only applies to .exr sources, which are stored as linear floats.

    if not path or not os.path.isfile(path):
        raise MissingInput(f"Texture not found: '{path}'.")

    source_file_extension: str = os.path.splitext(path)[1].lower()
    if source_file_extension in RAW_SOURCE_TYPES:
        return ImageBuffer(read_exr(path, srgb_transform=srgb_transform))

    if source_file_extension not in ALLOWED_FILE_TYPES:
        log(f"Unrecognized extension '{source_file_extension}' for '{path}', trying to read it anyway.", "warn")

    image: ImageObject = None
    try:
        image = open_image(path)
        return to_buffer(image)
    except (OSError, ValueError) as error:
        raise IOFailure(f"Cannot read '{path}': {error}") from error
    finally:
        close_image(image)
    # Safely closes the opened image even if there is an error during conversion.




#                                           === Saving ===

def save_image(output_directory: str, filename: str, image: ImageBuffer) -> str:
# Saves the buffer as <output_directory>/<filename>.png, creating missing folders and overwriting an existing file.
# Returns the written path.

    filename = validate_safe_file_name(filename)
    output_directory = make_output_dir(output_directory)
    output_path: str = os.path.join(output_directory, f"{filename}.{OUTPUT_FILE_TYPE}")

    output_image: ImageObject = from_buffer(image)
    try:
        save_image_file(output_image, output_path)
    except (OSError, ValueError) as error:
        raise IOFailure(f"Cannot write '{output_path}': {error}") from error
    finally:
        close_image(output_image)

    log(f"Texture saved to: {output_path.replace(os.sep, '/')}", "info")
    return output_path


def save_artifact(artifact: OutputArtifact) -> str:
    return save_image(artifact.directory, artifact.name, artifact.image)

""" Detail map and mask map pipelines built from the channel operations. """

from typing import Optional

from backend.channel_ops import (check_same_size, compose_channels, constant_fill, desaturate, extract_channel, roughness_to_smoothness)
from backend.texture_classes import (Channel, ChannelInput, DetailMapRequest, ImageBuffer, ImageInput, MaskMapRequest, MissingInput, OutputArtifact, ScalarInput)
from backend.io_backend import save_artifact

from utils import log


def _require(image: Optional[ImageBuffer], role: str) -> ImageBuffer:
# Returns a mandatory texture or fails if it was never supplied.
    if image is None:
        raise MissingInput(f"Missing required texture: {role}.")
    return image


def resolve_channel_input(channel_input: ChannelInput, reference: ImageBuffer, role: str) -> ImageBuffer:
# Turns a texture-or-value input into a texture; values are filled at the reference resolution.

    if isinstance(channel_input, ScalarInput):
        return constant_fill(channel_input.value, reference.width, reference.height)
    if isinstance(channel_input, ImageInput):
        return _require(channel_input.image, role)
    raise TypeError(f"Unsupported input for {role}: {type(channel_input).__name__}")




#                                           === Pipelines ===

def compose_detail_map(request: DetailMapRequest) -> ImageBuffer:
# Packing: R = albedo luminance, G = normal Y, B = smoothness, A = normal X.

    diffuse: ImageBuffer = _require(request.diffuse, "diffuse")
    normal: ImageBuffer = _require(request.normal, "normal map")
    roughness: ImageBuffer = resolve_channel_input(request.roughness, diffuse, "roughness map")
    check_same_size(diffuse, normal, roughness)
    # Validated up front so nothing is computed for mismatched sources.

    desaturated_diffuse: ImageBuffer = desaturate(diffuse)
    smoothness: ImageBuffer = roughness_to_smoothness(roughness)
    normal_red: ImageBuffer = extract_channel(normal, Channel.RED)
    normal_green: ImageBuffer = extract_channel(normal, Channel.GREEN)

    return compose_channels(desaturated_diffuse, normal_green, smoothness, normal_red)


def compose_mask_map(request: MaskMapRequest) -> ImageBuffer:
# Packing: R = metallic, G = ambient occlusion, B = detail mask, A = roughness.
# The detail mask sets the resolution of value-based metallic/roughness.

    detail_mask: ImageBuffer = _require(request.detail_mask, "detail mask")
    ambient_occlusion: ImageBuffer = _require(request.ambient_occlusion, "ambient occlusion")
    metallic: ImageBuffer = resolve_channel_input(request.metallic, detail_mask, "metallic map")
    roughness: ImageBuffer = resolve_channel_input(request.roughness, detail_mask, "roughness map")

    return compose_channels(metallic, ambient_occlusion, detail_mask, roughness)




#                                     === Generate and save ===

def generate_detail_map(request: DetailMapRequest, output_directory: str, filename: str) -> OutputArtifact:
    log("Generating Detail Map...", "info")
    artifact = OutputArtifact(compose_detail_map(request), output_directory, filename)
    save_artifact(artifact)
    return artifact


def generate_mask_map(request: MaskMapRequest, output_directory: str, filename: str) -> OutputArtifact:
    log("Generating Mask Map...", "info")
    artifact = OutputArtifact(compose_mask_map(request), output_directory, filename)
    save_artifact(artifact)
    return artifact

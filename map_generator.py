""" Generates PBR detail maps and mask maps from source textures. Command-line front end for the pipelines. """

import argparse
import sys
import time
from typing import List, Optional

from backend.io_backend import load_texture
from backend.map_composer import generate_detail_map, generate_mask_map
from backend.texture_classes import (ChannelInput, DetailMapRequest, ImageInput, MapGeneratorError, MaskMapRequest, OutputArtifact, ScalarInput)

from settings import (DETAIL_MAP_NAME, EXR_SRGB_CURVE, INSTRUCTIONS, MASK_MAP_NAME, OUTPUT_FOLDER, SHOW_DETAILS)
from utils import format_resolution, log




#                                       === Building requests ===

def _load(path: str):
    return load_texture(path, srgb_transform=EXR_SRGB_CURVE)


def _channel_input(map_path: Optional[str], value: Optional[float]) -> ChannelInput:
# A given map path (even an empty one) selects the texture; with neither given, the value defaults to 0.
    if map_path is not None:
        return ImageInput(_load(map_path))
    return ScalarInput(value if value is not None else 0.0)


def _unit_float(raw_value: str) -> float:
# argparse type for 0-1 values, the range of the original slider.
    try:
        value = float(raw_value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{raw_value}' is not a number")
    if not 0.0 <= value <= 1.0:
        raise argparse.ArgumentTypeError(f"{value} is outside the 0-1 range")
    return value


def build_detail_request(arguments: argparse.Namespace) -> DetailMapRequest:
    return DetailMapRequest(
        diffuse=_load(arguments.diffuse),
        normal=_load(arguments.normal),
        roughness=_channel_input(arguments.roughness_map, arguments.roughness),
    )


def build_mask_request(arguments: argparse.Namespace) -> MaskMapRequest:
    return MaskMapRequest(
        metallic=_channel_input(arguments.metallic_map, arguments.metallic),
        ambient_occlusion=_load(arguments.ao),
        detail_mask=_load(arguments.detail_mask),
        roughness=_channel_input(arguments.roughness_map, arguments.roughness),
    )




#                                         === CLI entry point ===

def _add_output_arguments(parser: argparse.ArgumentParser, default_name: str) -> None:
    parser.add_argument("--output-dir", default=OUTPUT_FOLDER, help=f"Folder for the generated map (default: {OUTPUT_FOLDER}).")
    parser.add_argument("--name", default=default_name, help=f"File name without extension (default: {default_name}).")


def _add_map_or_value(parser: argparse.ArgumentParser, texture_type: str) -> None:
# Map and value are mutually exclusive, like the "Use ... Map" toggle.
    group = parser.add_mutually_exclusive_group()
    group.add_argument(f"--{texture_type}-map", help=f"{texture_type.capitalize()} texture.")
    group.add_argument(f"--{texture_type}", type=_unit_float, help=f"Uniform {texture_type} value (0-1) used when no map is given.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="map_generator", description="Generates PBR detail maps and mask maps.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    detail_parser = subparsers.add_parser("detail", help="Generate a detail map (R: albedo luminance, G: normal Y, B: smoothness, A: normal X).")
    detail_parser.add_argument("--diffuse", required=True, help="Diffuse (albedo) texture.")
    detail_parser.add_argument("--normal", required=True, help="Normal map texture.")
    _add_map_or_value(detail_parser, "roughness")
    _add_output_arguments(detail_parser, DETAIL_MAP_NAME)

    mask_parser = subparsers.add_parser("mask", help="Generate a mask map (R: metallic, G: ambient occlusion, B: detail mask, A: roughness).")
    _add_map_or_value(mask_parser, "metallic")
    mask_parser.add_argument("--ao", required=True, help="Ambient occlusion texture.")
    mask_parser.add_argument("--detail-mask", required=True, help="Detail mask texture; sets the resolution for value-based channels.")
    _add_map_or_value(mask_parser, "roughness")
    _add_output_arguments(mask_parser, MASK_MAP_NAME)

    subparsers.add_parser("instructions", help="Show instructions on how to prepare source textures.")
    return parser


def run(arguments: argparse.Namespace) -> OutputArtifact:
    if arguments.command == "detail":
        return generate_detail_map(build_detail_request(arguments), arguments.output_dir, arguments.name)
    return generate_mask_map(build_mask_request(arguments), arguments.output_dir, arguments.name)


def main(argv: Optional[List[str]] = None) -> int:
    arguments = build_parser().parse_args(argv)

    if arguments.command == "instructions":
        print(INSTRUCTIONS)
        return 0

    start_time = time.time()
    try:
        artifact: OutputArtifact = run(arguments)
    except MapGeneratorError as error:
        log(f"Aborted: {error}", "error")
        return 1

    if SHOW_DETAILS:
        log(f"Created: {artifact.name}.png ({format_resolution(artifact.image.size)})", "complete")
        log(f"Execution time: {time.time() - start_time:.2f} seconds", "info")
    else:
        log(f"Created: {artifact.name}.png", "complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())

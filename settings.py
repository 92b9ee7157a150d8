""" Map Generator settings. Only used to seed the CLI defaults; the pipelines receive everything through their requests. """

import json
import os
from typing import Tuple


def _as_bool(v) -> bool:
# Converts .json input (bool/int/str/None) to a real bool;
# Avoids the case where a non-empty string like "False" is treated as True.

    if isinstance(v, bool): return v
    if isinstance(v, str):
        input_str = v.strip().lower()
        if input_str == "": return False
        return input_str in ("1","true","yes","on")
    return bool(v)



#                                           === Loading JSON file ===

_config_path = os.path.join(os.path.dirname(__file__), "config.json")
_config_data: dict = {}
if os.path.isfile(_config_path):
    with open(_config_path, "r", encoding="utf-8") as f:
        _config_data = json.load(f)


# Assigning config values:
OUTPUT_FOLDER: str = (_config_data.get("OUTPUT_FOLDER") or "Assets/Materials/Brick").strip() # Folder the generated maps are saved to.
DETAIL_MAP_NAME: str = (_config_data.get("DETAIL_MAP_NAME") or "detail_map").strip() # File name of the generated detail map, without extension.
MASK_MAP_NAME: str = (_config_data.get("MASK_MAP_NAME") or "mask_map").strip() # File name of the generated mask map, without extension.
EXR_SRGB_CURVE: bool = _as_bool(_config_data.get("EXR_SRGB_CURVE", True)) # If true, applies sRGB gamma transform when reading .exr sources, mimicking Photoshop behavior.

SHOW_DETAILS: bool = _as_bool(_config_data.get("SHOW_DETAILS", False)) # Shows details like exact resolution when printing logs.




#                                           === Constants ===

OUTPUT_FILE_TYPE: str = "png" # Generated maps are always lossless PNG.
ALLOWED_FILE_TYPES: Tuple[str, ...] = (".png", ".jpg", ".jpeg", ".tga")
RAW_SOURCE_TYPES: Tuple[str, ...] = (".exr",)  # Float sources read through OpenEXR.

INSTRUCTIONS: str = (
    "1. Export source textures with full pixel data (no filtering, scaling or compression applied on import).\n"
    "2. Use the raw normal map image: the detail map reads its red and green channels as X and Y of the normal vector.\n"
    "3. All textures used for one map must share the same resolution.\n"
    "4. Roughness is read from the red channel and converted to smoothness (1 - roughness) for the detail map.\n"
    "5. Detail map packing: R = albedo luminance, G = normal Y, B = smoothness, A = normal X.\n"
    "6. Mask map packing: R = metallic, G = ambient occlusion, B = detail mask, A = roughness."
)

# Copyright (c) 2026 Knitvision
# SPDX-License-Identifier: MIT

"""
Color tools: color-space math, palette extraction and color planning.
"""

from knitvision.color.colorspace import (
    color_name,
    contrast_ratio,
    hex_to_hsl,
    hex_to_rgb,
    hsl_to_hex,
    hsl_to_rgb,
    normalize_hex,
    readable_text_color,
    relative_luminance,
    rgb_to_hex,
    rgb_to_hsl,
)
from knitvision.color.palette import (
    PaletteConfig,
    extract_palette,
    kmeans_palette,
    perceptual_distance_sq,
)
from knitvision.color.harmony import (
    calculate_color_yardage,
    generate_gradient_sequence,
    generate_palette,
)

__all__ = [
    # Color space
    "hex_to_rgb",
    "rgb_to_hex",
    "rgb_to_hsl",
    "hsl_to_rgb",
    "hex_to_hsl",
    "hsl_to_hex",
    "normalize_hex",
    "relative_luminance",
    "contrast_ratio",
    "readable_text_color",
    "color_name",
    # Palette extraction
    "PaletteConfig",
    "extract_palette",
    "kmeans_palette",
    "perceptual_distance_sq",
    # Planning
    "generate_palette",
    "generate_gradient_sequence",
    "calculate_color_yardage",
]

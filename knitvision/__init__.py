# Copyright (c) 2026 Knitvision
# SPDX-License-Identifier: MIT

"""
Knitvision -- Knitting chart detection and color planning.

Turns a photographed or scanned knitting chart into a grid of stitch
symbols, and extracts ranked color palettes from images.

Quick start::

    from knitvision import detect_chart_from_image, extract_palette

    chart = detect_chart_from_image("chart.jpg")
    if chart:
        chart.grid                 # rows of symbol codes
        chart.overall_confidence   # mean cell confidence
        chart.to_json()

    extract_palette("yarn.jpg", k=5, seed=0)
"""

from __future__ import annotations

__version__ = "1.0.0"

from knitvision.errors import CellExtractionError, ImageDecodeError, KnitvisionError
from knitvision.chart import (
    GridDetectionConfig,
    PreprocessConfig,
    RecognitionConfig,
    detect_chart_from_image,
    detect_grid,
    preprocess,
    recognize_symbol,
)
from knitvision.color import (
    PaletteConfig,
    calculate_color_yardage,
    extract_palette,
    generate_gradient_sequence,
    generate_palette,
)
from knitvision.schema import (
    CellRecognition,
    ColorInput,
    ColorTransition,
    Correction,
    DetectedChart,
    ExtractedColor,
    GradientConfig,
    GridDetectionFailure,
    GridDetectionResult,
    HarmonyScheme,
    TransitionStyle,
    apply_corrections,
)

__all__ = [
    # Chart detection
    "detect_chart_from_image",
    "preprocess",
    "detect_grid",
    "recognize_symbol",
    "apply_corrections",
    "DetectedChart",
    "GridDetectionResult",
    "GridDetectionFailure",
    "CellRecognition",
    "Correction",
    # Color
    "extract_palette",
    "generate_palette",
    "generate_gradient_sequence",
    "calculate_color_yardage",
    "ExtractedColor",
    "HarmonyScheme",
    "TransitionStyle",
    "ColorInput",
    "GradientConfig",
    "ColorTransition",
    # Configuration
    "PreprocessConfig",
    "GridDetectionConfig",
    "RecognitionConfig",
    "PaletteConfig",
    # Errors
    "KnitvisionError",
    "ImageDecodeError",
    "CellExtractionError",
    # Version
    "__version__",
]

# Copyright (c) 2026 Knitvision
# SPDX-License-Identifier: MIT

"""
Schema definitions for chart detection and color planning.

All types in this module are immutable (frozen dataclasses) and carry no
behavior beyond validation and serialization.
"""

from knitvision.schema.chart import (
    UNRECOGNIZED_THRESHOLD,
    CellRecognition,
    Correction,
    DetectedChart,
    GridBounds,
    GridDetectionFailure,
    GridDetectionResult,
    StitchSymbol,
    apply_corrections,
)
from knitvision.schema.color import (
    HSL,
    ColorInput,
    ColorTransition,
    ColorYardage,
    ExtractedColor,
    GradientConfig,
    HarmonyScheme,
    RGBColor,
    TransitionStyle,
    palette_to_json,
)

__all__ = [
    # Chart types
    "GridBounds",
    "GridDetectionResult",
    "GridDetectionFailure",
    "CellRecognition",
    "Correction",
    "DetectedChart",
    "StitchSymbol",
    "UNRECOGNIZED_THRESHOLD",
    "apply_corrections",
    # Color types
    "RGBColor",
    "HSL",
    "ExtractedColor",
    "palette_to_json",
    # Planning types
    "HarmonyScheme",
    "TransitionStyle",
    "ColorInput",
    "GradientConfig",
    "ColorTransition",
    "ColorYardage",
]

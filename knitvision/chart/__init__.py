# Copyright (c) 2026 Knitvision
# SPDX-License-Identifier: MIT

"""
Knitting chart detection: preprocessing, grid detection, cell recognition.
"""

from knitvision.chart.preprocess import PreprocessConfig, preprocess, preprocess_pixels
from knitvision.chart.grid import (
    GridDetectionConfig,
    detect_grid,
    detect_grid_pixels,
    estimate_count,
    find_peaks,
    laplacian_edges,
)
from knitvision.chart.cells import (
    RecognitionConfig,
    cell_in_bounds,
    extract_cell,
    recognize_cell,
    recognize_symbol,
)
from knitvision.chart.assemble import assemble_chart, detect_chart_from_image
from knitvision.chart.symbols import (
    SYMBOL_LIBRARY,
    get_symbol,
    is_valid_symbol,
    symbols_by_category,
)

__all__ = [
    # Preprocessing
    "PreprocessConfig",
    "preprocess",
    "preprocess_pixels",
    # Grid detection
    "GridDetectionConfig",
    "detect_grid",
    "detect_grid_pixels",
    "laplacian_edges",
    "find_peaks",
    "estimate_count",
    # Cell recognition
    "RecognitionConfig",
    "cell_in_bounds",
    "extract_cell",
    "recognize_symbol",
    "recognize_cell",
    # Assembly
    "assemble_chart",
    "detect_chart_from_image",
    # Symbols
    "SYMBOL_LIBRARY",
    "is_valid_symbol",
    "get_symbol",
    "symbols_by_category",
]

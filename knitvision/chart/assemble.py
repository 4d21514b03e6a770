# Copyright (c) 2026 Knitvision
# SPDX-License-Identifier: MIT

"""
Chart detection pipeline.

    image ─▶ preprocess ─▶ detect grid ─▶ recognize every cell ─▶ DetectedChart

A single bad cell never aborts the run; it falls back to a low-confidence
knit and is listed as unrecognized.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Union

import numpy as np
from numpy.typing import NDArray

from knitvision.imaging import ImageInput
from knitvision.schema.chart import (
    UNRECOGNIZED_THRESHOLD,
    CellRecognition,
    DetectedChart,
    GridDetectionFailure,
    GridDetectionResult,
)
from knitvision.chart.preprocess import PreprocessConfig, preprocess_pixels
from knitvision.chart.grid import GridDetectionConfig, detect_grid_pixels
from knitvision.chart.cells import RecognitionConfig, recognize_cell

logger = logging.getLogger(__name__)


def _recognize_row(
    gray: NDArray[np.uint8],
    grid: GridDetectionResult,
    row: int,
    config: RecognitionConfig,
) -> list[CellRecognition]:
    return [
        recognize_cell(gray, row, col, grid.cell_width, grid.cell_height, config)
        for col in range(grid.cols)
    ]


def assemble_chart(rows: list[list[CellRecognition]]) -> DetectedChart:
    """
    Build a DetectedChart from per-cell recognitions in row-major order.

    Cells below the unrecognized threshold (fallbacks included) are
    listed in ``unrecognized_cells``.
    """
    n_rows = len(rows)
    n_cols = len(rows[0]) if rows else 0

    unrecognized = tuple(
        (r, c)
        for r, cells in enumerate(rows)
        for c, cell in enumerate(cells)
        if cell.confidence < UNRECOGNIZED_THRESHOLD
    )

    return DetectedChart(
        grid=tuple(tuple(cell.symbol for cell in cells) for cells in rows),
        cell_confidences=tuple(tuple(cell.confidence for cell in cells) for cells in rows),
        unrecognized_cells=unrecognized,
        dimensions=(n_rows, n_cols),
    )


def detect_chart_from_image(
    image: ImageInput,
    *,
    preprocess_config: Optional[PreprocessConfig] = None,
    grid_config: Optional[GridDetectionConfig] = None,
    recognition_config: Optional[RecognitionConfig] = None,
    max_workers: int = 1,
) -> Union[DetectedChart, GridDetectionFailure]:
    """
    Detect a knitting chart in an image.

    Args:
        image: Image bytes, file path, or uint8 array
        preprocess_config: Contrast and sharpening settings
        grid_config: Grid detection thresholds
        recognition_config: Symbol recognition thresholds
        max_workers: Threads used to recognize rows in parallel. The
            result is identical for any value.

    Returns:
        DetectedChart, or GridDetectionFailure when no grid structure
        can be inferred

    Raises:
        ImageDecodeError: If the image cannot be decoded

    Example:
        >>> result = detect_chart_from_image(Path("chart.jpg"))
        >>> if not result:
        ...     print(result.reason)
        ... else:
        ...     print(result.dimensions, result.overall_confidence)
    """
    if max_workers < 1:
        raise ValueError(f"max_workers must be >= 1, got {max_workers}")

    rec_cfg = recognition_config or RecognitionConfig()

    gray = preprocess_pixels(image, preprocess_config)
    grid = detect_grid_pixels(gray, grid_config)
    if isinstance(grid, GridDetectionFailure):
        return grid

    row_indices = range(grid.rows)
    if max_workers == 1:
        rows = [_recognize_row(gray, grid, r, rec_cfg) for r in row_indices]
    else:
        # map() yields results in submission order
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            rows = list(pool.map(lambda r: _recognize_row(gray, grid, r, rec_cfg), row_indices))

    chart = assemble_chart(rows)

    fallbacks = sum(cell.fallback for cells in rows for cell in cells)
    logger.debug(
        "Detected %dx%d chart: confidence %.2f, %d unrecognized, %d fallback cells",
        chart.rows, chart.cols, chart.overall_confidence,
        len(chart.unrecognized_cells), fallbacks,
    )
    return chart

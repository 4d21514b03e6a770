# Copyright (c) 2026 Knitvision
# SPDX-License-Identifier: MIT

"""
Chart grid detection.

Grid lines show up as strong responses to a Laplacian edge filter. Summing
the edge map along each axis gives a projection profile whose peaks mark
line positions:

    edges ──sum over columns──▶ row profile  ──peaks──▶ rows
          ──sum over rows─────▶ col profile  ──peaks──▶ cols

With at least two peaks the line spacing is the mean gap between them.
Otherwise the spacing falls back to a typical cell size for the axis
length. Counts are clamped to the chart sizes the service supports.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Union

import numpy as np
from numpy.typing import NDArray

from knitvision.color.colorspace import round_half_up
from knitvision.imaging import ImageInput, load_pixels
from knitvision.schema.chart import GridBounds, GridDetectionFailure, GridDetectionResult

logger = logging.getLogger(__name__)


# Supported chart sizes
ROW_RANGE = (3, 150)
COL_RANGE = (3, 100)

# 3x3 Laplacian, center weight 8, all neighbours -1
LAPLACIAN_CENTER_WEIGHT = 8


@dataclass(frozen=True)
class GridDetectionConfig:
    """Configuration for grid detection."""

    # A peak must exceed this fraction of the profile maximum
    peak_threshold: float = 0.3

    # Minimum samples between accepted peaks: max(min_peak_distance, L / peak_distance_divisor)
    min_peak_distance: int = 10
    peak_distance_divisor: float = 50.0

    # Fallback cell size with fewer than two peaks: max(fallback_min_cell, L / fallback_divisor)
    fallback_min_cell: float = 20.0
    fallback_divisor: float = 30.0

    def __post_init__(self) -> None:
        if not 0.0 <= self.peak_threshold < 1.0:
            raise ValueError(f"peak_threshold must be in [0, 1), got {self.peak_threshold}")
        if self.min_peak_distance < 1:
            raise ValueError(f"min_peak_distance must be >= 1, got {self.min_peak_distance}")
        if self.peak_distance_divisor <= 0 or self.fallback_divisor <= 0:
            raise ValueError("Divisors must be positive")
        if self.fallback_min_cell <= 0:
            raise ValueError(f"fallback_min_cell must be positive, got {self.fallback_min_cell}")


def laplacian_edges(gray: NDArray[np.uint8]) -> NDArray[np.uint8]:
    """
    Apply a 3x3 Laplacian edge filter.

    Borders are handled by replicating edge pixels, so a uniform image
    gives an all-zero response. Negative responses clamp to 0 and
    responses above 255 clamp to 255.

    Args:
        gray: (H, W) uint8 grayscale image

    Returns:
        (H, W) uint8 edge magnitude
    """
    if gray.size == 0:
        return np.zeros(gray.shape, dtype=np.uint8)

    padded = np.pad(gray.astype(np.int32), 1, mode="edge")
    height, width = gray.shape

    neighbours = np.zeros((height, width), dtype=np.int32)
    for dy in range(3):
        for dx in range(3):
            if dy == 1 and dx == 1:
                continue
            neighbours += padded[dy:dy + height, dx:dx + width]

    response = LAPLACIAN_CENTER_WEIGHT * padded[1:-1, 1:-1] - neighbours
    return np.clip(response, 0, 255).astype(np.uint8)


def find_peaks(
    profile: Union[Sequence[float], NDArray],
    threshold_ratio: float,
    min_distance: float,
) -> list[int]:
    """
    Find peak positions in a projection profile.

    Position i is a peak when its value exceeds ``threshold_ratio`` of the
    profile maximum, is strictly greater than the previous sample, is at
    least the next sample, and lies at least ``min_distance`` samples after
    the previously accepted peak. The first and last samples are never
    peaks.

    Returns:
        Ascending peak indices
    """
    values = np.asarray(profile, dtype=np.float64)
    if len(values) < 3:
        return []

    threshold = values.max() * threshold_ratio

    peaks: list[int] = []
    last = None
    for i in range(1, len(values) - 1):
        v = values[i]
        if v <= threshold or v <= values[i - 1] or v < values[i + 1]:
            continue
        if last is not None and i - last < min_distance:
            continue
        peaks.append(i)
        last = i

    return peaks


def estimate_count(
    length: int,
    peaks: Sequence[int],
    config: Optional[GridDetectionConfig] = None,
) -> int:
    """
    Estimate how many cells span an axis (unclamped).

    With two or more peaks: round(length / mean gap between peaks).
    Otherwise: round(length / max(fallback_min_cell, length / fallback_divisor)).
    """
    cfg = config or GridDetectionConfig()

    if len(peaks) >= 2:
        mean_gap = (peaks[-1] - peaks[0]) / (len(peaks) - 1)
        if mean_gap > 0:
            return round_half_up(length / mean_gap)

    cell_size = max(cfg.fallback_min_cell, length / cfg.fallback_divisor)
    return round_half_up(length / cell_size)


def _clamp(value: int, bounds: tuple[int, int]) -> int:
    low, high = bounds
    return min(high, max(low, value))


def _axis_count(profile: NDArray, length: int, cfg: GridDetectionConfig) -> int:
    min_distance = max(cfg.min_peak_distance, length / cfg.peak_distance_divisor)
    peaks = find_peaks(profile, cfg.peak_threshold, min_distance)
    count = estimate_count(length, peaks, cfg)
    logger.debug("Axis length %d: %d peaks, estimated %d cells", length, len(peaks), count)
    return count


def detect_grid_pixels(
    gray: NDArray[np.uint8],
    config: Optional[GridDetectionConfig] = None,
) -> Union[GridDetectionResult, GridDetectionFailure]:
    """
    Infer the chart grid from a preprocessed grayscale array.

    Returns:
        GridDetectionResult, or GridDetectionFailure for a zero-area image
    """
    cfg = config or GridDetectionConfig()
    height, width = gray.shape[:2]

    if width == 0 or height == 0:
        logger.warning("Grid detection failed: image has zero area (%dx%d)", width, height)
        return GridDetectionFailure(
            reason="Could not detect grid structure in image: image has zero area",
            width=width,
            height=height,
        )

    edges = laplacian_edges(gray).astype(np.int64)

    # Row profile: one value per image row; column profile: one per column
    row_profile = edges.sum(axis=1)
    col_profile = edges.sum(axis=0)

    rows = _clamp(_axis_count(row_profile, height, cfg), ROW_RANGE)
    cols = _clamp(_axis_count(col_profile, width, cfg), COL_RANGE)

    result = GridDetectionResult(
        rows=rows,
        cols=cols,
        cell_width=round_half_up(width / cols),
        cell_height=round_half_up(height / rows),
        bounds=GridBounds(x=0, y=0, width=width, height=height),
    )
    logger.debug(
        "Detected %dx%d grid, cells %dx%d px",
        rows, cols, result.cell_width, result.cell_height,
    )
    return result


def detect_grid(
    image: ImageInput,
    config: Optional[GridDetectionConfig] = None,
) -> Union[GridDetectionResult, GridDetectionFailure]:
    """
    Infer the chart grid from an image.

    The image is analysed as-is; run it through preprocessing first for
    photographs.

    Args:
        image: Image bytes, file path, or uint8 array
        config: Peak and fallback thresholds

    Returns:
        GridDetectionResult with rows in [3, 150] and cols in [3, 100],
        or GridDetectionFailure (falsy) when no grid can be inferred

    Raises:
        ImageDecodeError: If the image cannot be decoded
    """
    return detect_grid_pixels(load_pixels(image, mode="L"), config)

# Copyright (c) 2026 Knitvision
# SPDX-License-Identifier: MIT

"""
Cell extraction and heuristic symbol recognition.

Each cell is cropped from the preprocessed chart and resized to a 32x32
grayscale patch. The patch is classified from simple pixel statistics,
first match wins:

    1. mostly light                         → k      0.75
    2. mostly dark                          → p      0.70
    3. bright center, ring of dark pixels   → yo     0.65
    4. one dark diagonal                    → k2tog  0.60  (top-left to bottom-right)
                                              ssk    0.60  (top-right to bottom-left)
    5. both diagonals dark                  → x      0.65
    6. anything else                        → k      0.40

Confidence is a fixed value per rule, not a calibrated probability.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
from numpy.typing import NDArray
from PIL import Image

from knitvision.errors import CellExtractionError
from knitvision.schema.chart import CellRecognition

logger = logging.getLogger(__name__)


PATCH_SIZE = 32

# Confidence per rule
KNIT_CONFIDENCE = 0.75
PURL_CONFIDENCE = 0.70
YARN_OVER_CONFIDENCE = 0.65
DECREASE_CONFIDENCE = 0.60
NO_STITCH_CONFIDENCE = 0.65
DEFAULT_CONFIDENCE = 0.40

# Substituted when a cell cannot be extracted
FALLBACK_SYMBOL = "k"
FALLBACK_CONFIDENCE = 0.30

# Center brightness used when the center disc holds no pixels
_NEUTRAL_BRIGHTNESS = 128.0


@dataclass(frozen=True)
class RecognitionConfig:
    """Thresholds for heuristic symbol recognition."""

    # Pixel classes (grayscale 0-255)
    dark_threshold: int = 100     # strictly below is dark
    light_threshold: int = 200    # strictly above is light

    # Rule 1 and 2: share of light / dark pixels
    knit_light_ratio: float = 0.8
    purl_dark_ratio: float = 0.6

    # Rule 3: center disc brighter than the mean by this factor,
    # with a dark ratio strictly inside (yo_dark_min, yo_dark_max)
    yo_center_factor: float = 1.2
    yo_dark_min: float = 0.3
    yo_dark_max: float = 0.5

    # Rule 4: share of dark samples along a diagonal
    diagonal_ratio: float = 0.4

    # Rule 5: share of samples dark on both diagonals
    cross_ratio: float = 0.3

    def __post_init__(self) -> None:
        if not 0 <= self.dark_threshold <= self.light_threshold <= 255:
            raise ValueError(
                "Thresholds must satisfy 0 <= dark_threshold <= light_threshold <= 255, "
                f"got {self.dark_threshold}, {self.light_threshold}"
            )
        if self.yo_dark_min > self.yo_dark_max:
            raise ValueError(
                f"yo_dark_min ({self.yo_dark_min}) must not exceed yo_dark_max ({self.yo_dark_max})"
            )


# =============================================================================
# Extraction
# =============================================================================


def cell_in_bounds(
    gray: NDArray[np.uint8],
    row: int,
    col: int,
    cell_width: int,
    cell_height: int,
) -> bool:
    """True if the cell's crop rectangle lies entirely inside the image."""
    height, width = gray.shape[:2]
    if row < 0 or col < 0 or cell_width <= 0 or cell_height <= 0:
        return False
    return (col + 1) * cell_width <= width and (row + 1) * cell_height <= height


def extract_cell(
    gray: NDArray[np.uint8],
    row: int,
    col: int,
    cell_width: int,
    cell_height: int,
    size: int = PATCH_SIZE,
) -> NDArray[np.uint8]:
    """
    Crop one cell and resize it to a square patch.

    The crop starts at (col * cell_width, row * cell_height).

    Args:
        gray: (H, W) uint8 preprocessed chart
        row: Cell row (0-indexed)
        col: Cell column (0-indexed)
        cell_width: Cell width in pixels
        cell_height: Cell height in pixels
        size: Output patch edge length

    Returns:
        (size, size) uint8 patch (bilinear resampling)

    Raises:
        CellExtractionError: If the crop rectangle leaves the image
    """
    if not cell_in_bounds(gray, row, col, cell_width, cell_height):
        height, width = gray.shape[:2]
        raise CellExtractionError(
            f"Cell ({row}, {col}) of size {cell_width}x{cell_height} "
            f"lies outside the {width}x{height} image"
        )

    top = row * cell_height
    left = col * cell_width
    crop = gray[top:top + cell_height, left:left + cell_width]

    patch = Image.fromarray(np.ascontiguousarray(crop)).resize(
        (size, size), resample=Image.Resampling.BILINEAR
    )
    return np.array(patch, dtype=np.uint8)


# =============================================================================
# Recognition
# =============================================================================


def center_brightness(patch: NDArray[np.uint8]) -> float:
    """
    Mean brightness inside a disc at the patch center.

    The disc has radius min(w, h) / 4 and is centered on (w // 2, h // 2).
    """
    height, width = patch.shape
    cy, cx = height // 2, width // 2
    radius = min(width, height) / 4

    yy, xx = np.ogrid[:height, :width]
    mask = (xx - cx) ** 2 + (yy - cy) ** 2 <= radius ** 2
    if not mask.any():
        return _NEUTRAL_BRIGHTNESS
    return float(patch[mask].mean())


def diagonal_samples(patch: NDArray[np.uint8]) -> tuple[NDArray[np.uint8], NDArray[np.uint8]]:
    """
    Sample both diagonals of a patch.

    Samples min(w, h) points. Point i of the main diagonal is at
    (floor(i*w/d), floor(i*h/d)); the anti-diagonal mirrors x to
    w - 1 - x.

    Returns:
        (main, anti) pixel values, each of length d
    """
    height, width = patch.shape
    d = min(width, height)
    i = np.arange(d)
    ys = (i * height) // d
    xs = (i * width) // d
    return patch[ys, xs], patch[ys, width - 1 - xs]


def recognize_symbol(
    patch: NDArray[np.uint8],
    config: Optional[RecognitionConfig] = None,
) -> CellRecognition:
    """
    Classify a cell patch into a stitch symbol.

    Args:
        patch: (H, W) uint8 grayscale patch, normally 32x32
        config: Recognition thresholds

    Returns:
        CellRecognition with the first matching rule's symbol and confidence
    """
    cfg = config or RecognitionConfig()

    if patch.size == 0:
        return CellRecognition(FALLBACK_SYMBOL, FALLBACK_CONFIDENCE, fallback=True)

    total = patch.size
    dark = patch < cfg.dark_threshold
    dark_ratio = np.count_nonzero(dark) / total
    light_ratio = np.count_nonzero(patch > cfg.light_threshold) / total

    if light_ratio > cfg.knit_light_ratio:
        return CellRecognition("k", KNIT_CONFIDENCE)

    if dark_ratio > cfg.purl_dark_ratio:
        return CellRecognition("p", PURL_CONFIDENCE)

    mean = float(patch.mean())
    if (
        center_brightness(patch) > mean * cfg.yo_center_factor
        and cfg.yo_dark_min < dark_ratio < cfg.yo_dark_max
    ):
        return CellRecognition("yo", YARN_OVER_CONFIDENCE)

    main, anti = diagonal_samples(patch)
    d = len(main)
    main_dark = main < cfg.dark_threshold
    anti_dark = anti < cfg.dark_threshold
    main_count = int(np.count_nonzero(main_dark))
    anti_count = int(np.count_nonzero(anti_dark))

    diagonal_min = d * cfg.diagonal_ratio
    if main_count > diagonal_min and main_count > anti_count:
        return CellRecognition("k2tog", DECREASE_CONFIDENCE)
    if anti_count > diagonal_min and anti_count > main_count:
        return CellRecognition("ssk", DECREASE_CONFIDENCE)

    if np.count_nonzero(main_dark & anti_dark) > d * cfg.cross_ratio:
        return CellRecognition("x", NO_STITCH_CONFIDENCE)

    return CellRecognition("k", DEFAULT_CONFIDENCE)


def recognize_cell(
    gray: NDArray[np.uint8],
    row: int,
    col: int,
    cell_width: int,
    cell_height: int,
    config: Optional[RecognitionConfig] = None,
) -> CellRecognition:
    """
    Extract and classify one cell of a preprocessed chart.

    Cells whose crop would leave the image are not analysed; they get the
    fallback recognition (k, 0.3, fallback=True) instead of an error.
    """
    if not cell_in_bounds(gray, row, col, cell_width, cell_height):
        logger.debug(
            "Cell (%d, %d) outside image, using fallback symbol %r",
            row, col, FALLBACK_SYMBOL,
        )
        return CellRecognition(FALLBACK_SYMBOL, FALLBACK_CONFIDENCE, fallback=True)

    patch = extract_cell(gray, row, col, cell_width, cell_height)
    return recognize_symbol(patch, config)

# Copyright (c) 2026 Knitvision
# SPDX-License-Identifier: MIT

"""
Chart image preprocessing.

Grayscale, contrast stretch, sharpen. The result feeds grid detection
and cell recognition, so both see the same normalized pixels.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
from numpy.typing import NDArray
from PIL import ImageFilter, ImageOps

from knitvision.errors import ImageDecodeError
from knitvision.imaging import ImageInput, encode_png, load_image

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreprocessConfig:
    """Configuration for chart preprocessing."""

    # Percent of darkest/lightest pixels ignored when stretching contrast
    contrast_cutoff: float = 1.0

    # Apply a 3x3 sharpening convolution after the stretch
    sharpen: bool = True

    def __post_init__(self) -> None:
        if not 0.0 <= self.contrast_cutoff < 50.0:
            raise ValueError(
                f"contrast_cutoff must be in [0, 50), got {self.contrast_cutoff}"
            )


def preprocess_pixels(
    image: ImageInput,
    config: Optional[PreprocessConfig] = None,
) -> NDArray[np.uint8]:
    """
    Normalize a chart image for analysis.

    Returns:
        (H, W) uint8 grayscale array. Zero-area array input is returned
        as an empty (H, W) array so grid detection can report it.

    Raises:
        ImageDecodeError: If the image cannot be decoded
    """
    cfg = config or PreprocessConfig()

    if isinstance(image, np.ndarray) and image.size == 0:
        return np.zeros(image.shape[:2], dtype=np.uint8)

    gray = load_image(image).convert("L")
    gray = ImageOps.autocontrast(gray, cutoff=cfg.contrast_cutoff)
    if cfg.sharpen:
        gray = gray.filter(ImageFilter.SHARPEN)

    logger.debug("Preprocessed chart image %dx%d", gray.width, gray.height)
    return np.array(gray, dtype=np.uint8)


def preprocess(
    image: ImageInput,
    config: Optional[PreprocessConfig] = None,
) -> bytes:
    """
    Normalize a chart image and return it as PNG bytes.

    Deterministic: the same input and config give identical bytes.

    Raises:
        ImageDecodeError: If the image cannot be decoded or has zero area
    """
    pixels = preprocess_pixels(image, config)
    if pixels.size == 0:
        raise ImageDecodeError(f"Image has zero area: shape {pixels.shape}")
    return encode_png(pixels)

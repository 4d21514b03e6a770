# Copyright (c) 2026 Knitvision
# SPDX-License-Identifier: MIT

"""
Palette extraction using k-means clustering.

Pixels are sampled from a cover-fit thumbnail, clustered in RGB with a
perceptually weighted distance, and returned as a ranked palette:

    d² = (2 + r̄/256)·ΔR² + 4·ΔG² + (2 + (255 − r̄)/256)·ΔB²

where r̄ is the mean red of the two colors.

Initialization is k-means++ and uses randomness. Pass ``seed`` (an int or
a numpy Generator) for reproducible output; with no seed repeated runs on
the same image may order or place centroids differently.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np
from numpy.typing import NDArray
from PIL import Image, ImageOps

from knitvision.imaging import ImageInput, load_image
from knitvision.schema.color import ExtractedColor
from knitvision.color.colorspace import color_name, rgb_to_hex, round_half_up

logger = logging.getLogger(__name__)

SeedLike = Union[int, np.random.Generator, None]


@dataclass(frozen=True)
class PaletteConfig:
    """Configuration for palette extraction."""

    # Thumbnail size pixels are sampled from (cover fit, center crop)
    sample_width: int = 100
    sample_height: int = 100

    # Lloyd iterations; stops earlier once no pixel changes cluster
    max_iterations: int = 20

    def __post_init__(self) -> None:
        if self.sample_width < 1 or self.sample_height < 1:
            raise ValueError(
                f"Sample size must be positive, got {self.sample_width}x{self.sample_height}"
            )
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {self.max_iterations}")


def perceptual_distance_sq(
    pixels: NDArray[np.float64],
    centroids: NDArray[np.float64],
) -> NDArray[np.float64]:
    """
    Weighted squared RGB distance between every pixel and every centroid.

    Args:
        pixels: (N, 3) RGB values 0-255
        centroids: (K, 3) RGB values 0-255

    Returns:
        (N, K) array of squared distances
    """
    p = pixels[:, np.newaxis, :]
    c = centroids[np.newaxis, :, :]

    r_mean = (p[..., 0] + c[..., 0]) / 2.0
    delta = p - c

    return (
        (2.0 + r_mean / 256.0) * delta[..., 0] ** 2
        + 4.0 * delta[..., 1] ** 2
        + (2.0 + (255.0 - r_mean) / 256.0) * delta[..., 2] ** 2
    )


def sample_pixels(
    image: ImageInput,
    config: Optional[PaletteConfig] = None,
) -> NDArray[np.uint8]:
    """
    Decode an image and sample its pixels for clustering.

    Returns:
        (N, 3) uint8 RGB array, N = sample_width * sample_height
        (empty for zero-area array input)
    """
    cfg = config or PaletteConfig()

    if isinstance(image, np.ndarray) and image.size == 0:
        return np.zeros((0, 3), dtype=np.uint8)

    img = load_image(image)
    if img.mode != "RGB":
        img = img.convert("RGB")

    thumb = ImageOps.fit(
        img,
        (cfg.sample_width, cfg.sample_height),
        method=Image.Resampling.BILINEAR,
    )
    return np.array(thumb, dtype=np.uint8).reshape(-1, 3)


def _init_centroids(
    data: NDArray[np.float64],
    k: int,
    rng: np.random.Generator,
) -> NDArray[np.float64]:
    """
    k-means++ initialization.

    First centroid uniformly at random; each next one drawn with
    probability proportional to its squared distance to the nearest
    centroid chosen so far.
    """
    n = len(data)
    centroids = np.empty((k, 3), dtype=np.float64)
    centroids[0] = data[rng.integers(n)]

    # Distances to the nearest chosen centroid, updated incrementally
    nearest = perceptual_distance_sq(data, centroids[:1])[:, 0]

    for i in range(1, k):
        total = nearest.sum()
        if total <= 0:
            # Every pixel coincides with a chosen centroid
            centroids[i] = data[rng.integers(n)]
        else:
            idx = rng.choice(n, p=nearest / total)
            centroids[i] = data[idx]

        nearest = np.minimum(
            nearest, perceptual_distance_sq(data, centroids[i:i + 1])[:, 0]
        )

    return centroids


def _kmeans(
    data: NDArray[np.float64],
    k: int,
    max_iter: int,
    rng: np.random.Generator,
) -> tuple[NDArray[np.float64], NDArray[np.int64]]:
    """
    Lloyd's k-means with the perceptual metric.

    Centroids are kept as rounded integer RGB means.

    Returns:
        (centroids, labels) where centroids is (k, 3) and labels is (N,)
    """
    centroids = _init_centroids(data, k, rng)
    # -1 forces at least one centroid update
    labels = np.full(len(data), -1, dtype=np.int64)

    for iteration in range(max_iter):
        new_labels = np.argmin(perceptual_distance_sq(data, centroids), axis=1)
        if np.array_equal(new_labels, labels):
            logger.debug("k-means converged after %d iterations", iteration)
            break
        labels = new_labels

        for j in range(k):
            mask = labels == j
            if np.any(mask):
                centroids[j] = np.floor(data[mask].mean(axis=0) + 0.5)

    return centroids, labels


def kmeans_palette(
    pixels: NDArray[np.uint8],
    k: int,
    *,
    seed: SeedLike = None,
    max_iterations: int = 20,
) -> tuple[ExtractedColor, ...]:
    """
    Cluster RGB pixels into a ranked palette.

    Args:
        pixels: (N, 3) uint8 RGB array
        k: Number of clusters requested
        seed: Int seed or numpy Generator for reproducible initialization
        max_iterations: Maximum Lloyd iterations

    Returns:
        Tuple of ExtractedColor ordered by pixel count descending.
        Empty if k <= 0 or there are no pixels. May hold fewer than k
        entries when the image has fewer distinct colors.
    """
    if k <= 0 or len(pixels) == 0:
        return ()

    data = np.asarray(pixels, dtype=np.float64).reshape(-1, 3)
    n_unique = len(np.unique(pixels.reshape(-1, 3), axis=0))
    k = min(k, n_unique)

    rng = np.random.default_rng(seed)
    centroids, labels = _kmeans(data, k, max_iterations, rng)

    counts = np.bincount(labels, minlength=k)
    total = len(data)

    # Drop empty clusters and merge clusters landing on the same hex
    merged: dict[str, int] = {}
    for j in range(k):
        if counts[j] == 0:
            continue
        r, g, b = (int(v) for v in centroids[j])
        hex_value = rgb_to_hex(r, g, b)
        merged[hex_value] = merged.get(hex_value, 0) + int(counts[j])

    ranked = sorted(merged.items(), key=lambda item: item[1], reverse=True)

    return tuple(
        ExtractedColor(
            hex=hex_value,
            percentage=min(100, round_half_up(count / total * 100)),
            name=color_name(hex_value),
        )
        for hex_value, count in ranked
    )


def extract_palette(
    image: ImageInput,
    k: int = 6,
    *,
    seed: SeedLike = None,
    config: Optional[PaletteConfig] = None,
) -> tuple[ExtractedColor, ...]:
    """
    Extract a ranked color palette from an image.

    Args:
        image: Image bytes, file path, or uint8 array
        k: Number of colors to extract (callers typically clamp to 2-10)
        seed: Int seed or numpy Generator for reproducible initialization
        config: Sampling and iteration settings

    Returns:
        Tuple of ExtractedColor, most common first. Percentages sum to
        about 100 (each entry is rounded independently).

    Raises:
        ImageDecodeError: If the image cannot be decoded
    """
    cfg = config or PaletteConfig()
    if k <= 0:
        return ()

    pixels = sample_pixels(image, cfg)
    palette = kmeans_palette(pixels, k, seed=seed, max_iterations=cfg.max_iterations)

    logger.debug("Extracted %d colors (requested %d)", len(palette), k)
    return palette

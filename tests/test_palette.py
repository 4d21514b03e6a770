# Copyright (c) 2026 Knitvision
# SPDX-License-Identifier: MIT

"""Tests for k-means palette extraction."""

import io

import numpy as np
import pytest
from PIL import Image

from knitvision import ImageDecodeError, extract_palette
from knitvision.color.palette import (
    PaletteConfig,
    kmeans_palette,
    perceptual_distance_sq,
    sample_pixels,
)


def _solid_image(r, g, b, height=100, width=100):
    """Create a solid-color image."""
    return np.full((height, width, 3), [r, g, b], dtype=np.uint8)


def _two_tone_image(rgb1, rgb2, height=100, width=100):
    """Create an image that is half one color, half another."""
    img = np.zeros((height, width, 3), dtype=np.uint8)
    img[:, :width // 2] = rgb1
    img[:, width // 2:] = rgb2
    return img


def _gradient_image(height=64, width=64):
    """Create a smooth two-axis color gradient."""
    xs = np.linspace(0, 255, width, dtype=np.float64)
    ys = np.linspace(0, 255, height, dtype=np.float64)
    img = np.zeros((height, width, 3), dtype=np.uint8)
    img[..., 0] = xs[np.newaxis, :]
    img[..., 1] = ys[:, np.newaxis]
    img[..., 2] = 128
    return img


def _png_bytes(pixels):
    buffer = io.BytesIO()
    Image.fromarray(pixels).save(buffer, format="PNG")
    return buffer.getvalue()


class TestPerceptualDistance:

    def test_identical_is_zero(self):
        pixels = np.array([[10, 200, 30]], dtype=np.float64)
        assert perceptual_distance_sq(pixels, pixels)[0, 0] == 0.0

    def test_shape(self):
        pixels = np.zeros((5, 3))
        centroids = np.zeros((2, 3))
        assert perceptual_distance_sq(pixels, centroids).shape == (5, 2)

    def test_black_white(self):
        black = np.array([[0, 0, 0]], dtype=np.float64)
        white = np.array([[255, 255, 255]], dtype=np.float64)
        r_mean = 127.5
        expected = 255.0 ** 2 * (
            (2 + r_mean / 256) + 4 + (2 + (255 - r_mean) / 256)
        )
        assert perceptual_distance_sq(black, white)[0, 0] == pytest.approx(expected)

    def test_green_weighted_most(self):
        origin = np.array([[128, 128, 128]], dtype=np.float64)
        dr = np.array([[138, 128, 128]], dtype=np.float64)
        dg = np.array([[128, 138, 128]], dtype=np.float64)
        assert perceptual_distance_sq(origin, dg)[0, 0] > perceptual_distance_sq(origin, dr)[0, 0]


class TestExtractPalette:

    def test_solid_color(self):
        palette = extract_palette(_solid_image(255, 0, 0), k=3, seed=0)
        assert len(palette) == 1
        assert palette[0].hex == "#FF0000"
        assert palette[0].percentage == 100
        assert palette[0].name == "Red"

    def test_two_tone(self):
        pixels = _two_tone_image([255, 0, 0], [0, 0, 255])
        palette = extract_palette(pixels, k=4, seed=1)
        assert {c.hex for c in palette} == {"#FF0000", "#0000FF"}
        assert all(c.percentage == 50 for c in palette)

    def test_single_cluster_is_mean_color(self):
        pixels = _two_tone_image([255, 0, 0], [0, 0, 255])
        palette = extract_palette(pixels, k=1, seed=0)
        assert len(palette) == 1
        assert palette[0].hex == "#800080"
        assert palette[0].percentage == 100

    def test_sorted_by_share(self):
        pixels = _solid_image(0, 0, 255)
        pixels[:, :75] = [255, 255, 0]
        palette = extract_palette(pixels, k=2, seed=3)
        assert [c.hex for c in palette] == ["#FFFF00", "#0000FF"]
        assert [c.percentage for c in palette] == [75, 25]

    def test_percentages_sum_to_about_100(self):
        palette = extract_palette(_gradient_image(), k=6, seed=42)
        assert 1 <= len(palette) <= 6
        assert sum(c.percentage for c in palette) == pytest.approx(100, abs=len(palette))

    def test_seeded_runs_match(self):
        pixels = _gradient_image()
        assert extract_palette(pixels, k=5, seed=7) == extract_palette(pixels, k=5, seed=7)

    def test_accepts_generator(self):
        palette = extract_palette(_gradient_image(), k=3, seed=np.random.default_rng(0))
        assert 1 <= len(palette) <= 3

    def test_hex_values_unique(self):
        palette = extract_palette(_gradient_image(), k=8, seed=0)
        hexes = [c.hex for c in palette]
        assert len(hexes) == len(set(hexes))

    def test_non_positive_k_returns_empty(self):
        assert extract_palette(_solid_image(1, 2, 3), k=0) == ()
        assert extract_palette(_solid_image(1, 2, 3), k=-2) == ()

    def test_png_bytes(self):
        palette = extract_palette(_png_bytes(_solid_image(0, 128, 0)), k=2, seed=0)
        assert [c.hex for c in palette] == ["#008000"]

    def test_zero_area_returns_empty(self):
        assert extract_palette(np.zeros((0, 10, 3), dtype=np.uint8), k=3) == ()

    def test_undecodable_bytes(self):
        with pytest.raises(ImageDecodeError):
            extract_palette(b"definitely not an image", k=3)


class TestKmeansPalette:

    def test_empty_pixels(self):
        assert kmeans_palette(np.zeros((0, 3), dtype=np.uint8), k=3) == ()

    def test_fewer_unique_colors_than_k(self):
        pixels = np.array([[0, 0, 0]] * 10 + [[255, 255, 255]] * 30, dtype=np.uint8)
        palette = kmeans_palette(pixels, k=5, seed=0)
        assert [c.hex for c in palette] == ["#FFFFFF", "#000000"]
        assert [c.percentage for c in palette] == [75, 25]


class TestSampling:

    def test_cover_fit_size(self):
        pixels = sample_pixels(_solid_image(5, 6, 7, height=40, width=300))
        assert pixels.shape == (100 * 100, 3)

    def test_custom_sample_size(self):
        config = PaletteConfig(sample_width=20, sample_height=10)
        assert sample_pixels(_solid_image(5, 6, 7), config).shape == (200, 3)

    def test_grayscale_input(self):
        gray = np.full((100, 100), 77, dtype=np.uint8)
        pixels = sample_pixels(gray)
        assert np.all(pixels == 77)


class TestPaletteConfig:

    def test_defaults(self):
        config = PaletteConfig()
        assert (config.sample_width, config.sample_height) == (100, 100)
        assert config.max_iterations == 20

    def test_invalid_sample_size(self):
        with pytest.raises(ValueError):
            PaletteConfig(sample_width=0)

    def test_invalid_iterations(self):
        with pytest.raises(ValueError):
            PaletteConfig(max_iterations=0)

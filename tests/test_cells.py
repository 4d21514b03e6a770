# Copyright (c) 2026 Knitvision
# SPDX-License-Identifier: MIT

"""Tests for cell extraction and heuristic symbol recognition."""

import numpy as np
import pytest

from knitvision import CellExtractionError, RecognitionConfig, recognize_symbol
from knitvision.chart.cells import (
    cell_in_bounds,
    center_brightness,
    diagonal_samples,
    extract_cell,
    recognize_cell,
)


def _patch(value, size=32):
    """Create a uniform grayscale patch."""
    return np.full((size, size), value, dtype=np.uint8)


def _diagonal_band_patch(half_width=2, background=150):
    """Gray patch with a dark band along the top-left to bottom-right diagonal."""
    ys, xs = np.mgrid[:32, :32]
    patch = _patch(background)
    patch[np.abs(xs - ys) <= half_width] = 0
    return patch


def _cross_patch(background=150):
    """Gray patch with both 1px diagonals dark."""
    ys, xs = np.mgrid[:32, :32]
    patch = _patch(background)
    patch[(xs == ys) | (xs == 31 - ys)] = 0
    return patch


def _ring_patch():
    """White center square inside a dark frame (dark ratio ~0.48)."""
    ys, xs = np.mgrid[:32, :32]
    chebyshev = np.maximum(np.abs(xs - 16), np.abs(ys - 16))
    patch = _patch(255)
    patch[chebyshev >= 12] = 0
    return patch


class TestRecognizeSymbol:

    def test_light_is_knit(self):
        result = recognize_symbol(_patch(255))
        assert (result.symbol, result.confidence) == ("k", 0.75)
        assert not result.fallback

    def test_dark_is_purl(self):
        result = recognize_symbol(_patch(0))
        assert (result.symbol, result.confidence) == ("p", 0.70)

    def test_ring_is_yarn_over(self):
        result = recognize_symbol(_ring_patch())
        assert (result.symbol, result.confidence) == ("yo", 0.65)

    def test_main_diagonal_is_k2tog(self):
        result = recognize_symbol(_diagonal_band_patch())
        assert (result.symbol, result.confidence) == ("k2tog", 0.60)

    def test_anti_diagonal_is_ssk(self):
        result = recognize_symbol(np.fliplr(_diagonal_band_patch()).copy())
        assert (result.symbol, result.confidence) == ("ssk", 0.60)

    def test_cross_is_no_stitch(self):
        result = recognize_symbol(_cross_patch())
        assert (result.symbol, result.confidence) == ("x", 0.65)

    def test_featureless_gray_defaults_to_knit(self):
        result = recognize_symbol(_patch(150))
        assert (result.symbol, result.confidence) == ("k", 0.40)
        assert not result.is_recognized

    def test_first_rule_wins(self):
        # A thin diagonal on white is still mostly light
        result = recognize_symbol(_diagonal_band_patch(background=255))
        assert result.symbol == "k"
        assert result.confidence == 0.75

    def test_thresholds_are_configurable(self):
        config = RecognitionConfig(knit_light_ratio=0.9)
        result = recognize_symbol(_diagonal_band_patch(background=255), config)
        assert result.symbol == "k2tog"

    def test_dark_threshold_configurable(self):
        # 90 is dark by default, not with a lower threshold
        assert recognize_symbol(_patch(90)).symbol == "p"
        config = RecognitionConfig(dark_threshold=80)
        assert recognize_symbol(_patch(90), config).confidence == 0.40

    def test_non_square_patch(self):
        result = recognize_symbol(np.full((20, 40), 255, dtype=np.uint8))
        assert result.symbol == "k"


class TestPatchFeatures:

    def test_center_brightness_uniform(self):
        assert center_brightness(_patch(200)) == pytest.approx(200.0)

    def test_center_brightness_ring(self):
        assert center_brightness(_ring_patch()) == pytest.approx(255.0)

    def test_diagonal_samples(self):
        patch = np.arange(16, dtype=np.uint8).reshape(4, 4)
        main, anti = diagonal_samples(patch)
        assert main.tolist() == [0, 5, 10, 15]
        assert anti.tolist() == [3, 6, 9, 12]


class TestExtractCell:

    def test_patch_size(self):
        gray = np.full((90, 90), 255, dtype=np.uint8)
        assert extract_cell(gray, 1, 2, 30, 30).shape == (32, 32)

    def test_crop_location(self):
        gray = np.full((60, 60), 255, dtype=np.uint8)
        gray[30:60, 0:30] = 0
        assert np.all(extract_cell(gray, 1, 0, 30, 30) == 0)
        assert np.all(extract_cell(gray, 0, 1, 30, 30) == 255)

    def test_custom_size(self):
        gray = np.full((40, 40), 10, dtype=np.uint8)
        assert extract_cell(gray, 0, 0, 20, 20, size=16).shape == (16, 16)

    def test_out_of_bounds_raises(self):
        gray = np.full((50, 50), 255, dtype=np.uint8)
        with pytest.raises(CellExtractionError):
            extract_cell(gray, 0, 2, 20, 20)

    def test_error_is_value_error(self):
        gray = np.full((50, 50), 255, dtype=np.uint8)
        with pytest.raises(ValueError):
            extract_cell(gray, -1, 0, 20, 20)


class TestCellInBounds:

    @pytest.mark.parametrize("row,col,w,h,expected", [
        (0, 0, 10, 10, True),
        (4, 4, 10, 10, True),
        (5, 0, 10, 10, False),
        (0, 5, 10, 10, False),
        (-1, 0, 10, 10, False),
        (0, 0, 0, 10, False),
    ])
    def test_bounds(self, row, col, w, h, expected):
        gray = np.zeros((50, 50), dtype=np.uint8)
        assert cell_in_bounds(gray, row, col, w, h) is expected


class TestRecognizeCell:

    def test_in_bounds(self):
        gray = np.full((60, 60), 255, dtype=np.uint8)
        gray[0:30, 30:60] = 0
        assert recognize_cell(gray, 0, 1, 30, 30).symbol == "p"
        assert recognize_cell(gray, 1, 1, 30, 30).symbol == "k"

    def test_out_of_bounds_falls_back(self):
        gray = np.full((60, 60), 0, dtype=np.uint8)
        result = recognize_cell(gray, 0, 2, 30, 30)
        assert result.fallback
        assert (result.symbol, result.confidence) == ("k", 0.3)
        assert not result.is_recognized


class TestRecognitionConfig:

    def test_defaults(self):
        config = RecognitionConfig()
        assert (config.dark_threshold, config.light_threshold) == (100, 200)

    def test_inverted_thresholds(self):
        with pytest.raises(ValueError):
            RecognitionConfig(dark_threshold=220, light_threshold=200)

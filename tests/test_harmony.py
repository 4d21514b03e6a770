# Copyright (c) 2026 Knitvision
# SPDX-License-Identifier: MIT

"""Tests for harmony palettes, gradient sequences and yardage."""

import pytest

from knitvision import (
    ColorInput,
    GradientConfig,
    HarmonyScheme,
    TransitionStyle,
    calculate_color_yardage,
    generate_gradient_sequence,
    generate_palette,
)
from knitvision.color.colorspace import hex_to_hsl


def _colors(n):
    names = ["Cream", "Sage", "Moss", "Forest", "Ink", "Plum"]
    hexes = ["#F5F0E1", "#B2C2A3", "#7A8F5B", "#2F4A2A", "#1B1F2A", "#5E3A5A"]
    return tuple(ColorInput(id=str(i), name=names[i], hex=hexes[i]) for i in range(n))


def _spans(sequence):
    return [(t.start_row, t.end_row) for t in sequence]


def _hue_distance(a, b):
    d = abs(a - b) % 360
    return min(d, 360 - d)


class TestGeneratePalette:

    def test_complementary_red(self):
        assert generate_palette("#FF0000", HarmonyScheme.COMPLEMENTARY) == ["#FF0000", "#00FFFF"]

    def test_triadic_red(self):
        assert generate_palette("#FF0000", "triadic") == ["#FF0000", "#00FF00", "#0000FF"]

    def test_complementary_keeps_saturation_and_lightness(self):
        base = hex_to_hsl("#3941C8")
        other = hex_to_hsl(generate_palette("#3941C8", "complementary")[1])
        assert _hue_distance(other.h, (base.h + 180) % 360) < 1.0
        assert other.s == pytest.approx(base.s, abs=1.0)
        assert other.l == pytest.approx(base.l, abs=1.0)

    def test_analogous(self):
        palette = generate_palette("#3941C8", HarmonyScheme.ANALOGOUS)
        base = hex_to_hsl("#3941C8")
        assert len(palette) == 3
        assert palette[1] == "#3941C8"
        assert _hue_distance(hex_to_hsl(palette[0]).h, base.h - 30) < 1.0
        assert _hue_distance(hex_to_hsl(palette[2]).h, base.h + 30) < 1.0

    def test_split_complementary(self):
        palette = generate_palette("#3941C8", HarmonyScheme.SPLIT_COMPLEMENTARY)
        base = hex_to_hsl("#3941C8")
        assert palette[0] == "#3941C8"
        assert _hue_distance(hex_to_hsl(palette[1]).h, base.h + 150) < 1.0
        assert _hue_distance(hex_to_hsl(palette[2]).h, base.h + 210) < 1.0

    def test_hue_wraps_past_zero(self):
        palette = generate_palette("#FF0000", "analogous")
        assert hex_to_hsl(palette[0]).h == pytest.approx(330.0, abs=1.0)
        assert hex_to_hsl(palette[2]).h == pytest.approx(30.0, abs=1.0)

    def test_monochromatic(self):
        palette = generate_palette("#808080", HarmonyScheme.MONOCHROMATIC)
        lightness = [hex_to_hsl(h).l for h in palette]
        assert lightness[0] == pytest.approx(30.2, abs=0.5)
        assert lightness[2] == pytest.approx(70.2, abs=0.5)
        assert palette[1] == "#808080"

    def test_monochromatic_clamps(self):
        dark = generate_palette("#1A1A1A", "monochromatic")
        assert hex_to_hsl(dark[0]).l == pytest.approx(20.0, abs=0.5)
        light = generate_palette("#EEEEEE", "monochromatic")
        assert hex_to_hsl(light[2]).l == pytest.approx(80.0, abs=0.5)

    def test_base_is_normalized(self):
        assert generate_palette("#f00", "complementary")[0] == "#FF0000"

    def test_unknown_scheme(self):
        with pytest.raises(ValueError):
            generate_palette("#FF0000", "tetradic")

    def test_invalid_hex(self):
        with pytest.raises(ValueError):
            generate_palette("not-a-color", "triadic")


class TestLinearGradient:

    def test_even_split_with_remainder(self):
        seq = generate_gradient_sequence(GradientConfig(total_rows=10, colors=_colors(3)))
        assert _spans(seq) == [(1, 4), (5, 7), (8, 10)]
        assert [t.percentage for t in seq] == pytest.approx([40.0, 30.0, 30.0])

    @pytest.mark.parametrize("total_rows,n", [(1, 2), (7, 3), (100, 4), (101, 6), (3, 3)])
    def test_contiguous_and_complete(self, total_rows, n):
        seq = generate_gradient_sequence(GradientConfig(total_rows=total_rows, colors=_colors(n)))
        assert seq[0].start_row == 1
        assert seq[-1].end_row == total_rows
        for prev, nxt in zip(seq, seq[1:]):
            assert nxt.start_row == prev.end_row + 1
        assert sum(t.percentage for t in seq) == pytest.approx(100.0)

    def test_more_colors_than_rows(self):
        seq = generate_gradient_sequence(GradientConfig(total_rows=2, colors=_colors(3)))
        assert _spans(seq) == [(1, 1), (2, 2)]
        assert [t.color_id for t in seq] == ["0", "1"]

    def test_carries_color_details(self):
        seq = generate_gradient_sequence(GradientConfig(total_rows=4, colors=_colors(2)))
        assert seq[1].color_name == "Sage"
        assert seq[1].hex_code == "#B2C2A3"


class TestSmoothGradient:

    def test_fade_overlap(self):
        config = GradientConfig(
            total_rows=100, colors=_colors(3), transition_style=TransitionStyle.SMOOTH
        )
        seq = generate_gradient_sequence(config)
        # fade = max(2, 100 // 12) = 8
        assert _spans(seq) == [(1, 36), (29, 64), (57, 100)]

    @pytest.mark.parametrize("total_rows,n", [(3, 3), (10, 4), (48, 2), (200, 5)])
    def test_covers_all_rows(self, total_rows, n):
        config = GradientConfig(
            total_rows=total_rows, colors=_colors(n), transition_style="smooth"
        )
        seq = generate_gradient_sequence(config)
        assert seq[0].start_row == 1
        assert seq[-1].end_row == total_rows
        for t in seq:
            assert 1 <= t.start_row <= t.end_row <= total_rows
        for prev, nxt in zip(seq, seq[1:]):
            assert prev.start_row < nxt.start_row <= prev.end_row + 1

    def test_short_project(self):
        config = GradientConfig(
            total_rows=3, colors=_colors(3), transition_style=TransitionStyle.SMOOTH
        )
        assert _spans(generate_gradient_sequence(config)) == [(1, 1), (2, 2), (3, 3)]


class TestStripedGradient:

    def test_cycles_colors(self):
        config = GradientConfig(
            total_rows=10, colors=_colors(2), transition_style=TransitionStyle.STRIPED
        )
        seq = generate_gradient_sequence(config)
        assert _spans(seq) == [(1, 4), (5, 8), (9, 10)]
        assert [t.color_id for t in seq] == ["0", "1", "0"]
        assert seq[-1].percentage == pytest.approx(20.0)

    def test_custom_width(self):
        config = GradientConfig(
            total_rows=9, colors=_colors(3), transition_style="striped", stripe_width=3
        )
        seq = generate_gradient_sequence(config)
        assert _spans(seq) == [(1, 3), (4, 6), (7, 9)]

    def test_contiguous(self):
        config = GradientConfig(
            total_rows=57, colors=_colors(4), transition_style="striped", stripe_width=5
        )
        seq = generate_gradient_sequence(config)
        assert seq[-1].end_row == 57
        for prev, nxt in zip(seq, seq[1:]):
            assert nxt.start_row == prev.end_row + 1


class TestGradientEdgeCases:

    def test_no_colors(self):
        assert generate_gradient_sequence(GradientConfig(total_rows=10, colors=())) == []

    @pytest.mark.parametrize("style", list(TransitionStyle))
    def test_single_color_fills_all_rows(self, style):
        config = GradientConfig(total_rows=25, colors=_colors(1), transition_style=style)
        seq = generate_gradient_sequence(config)
        assert _spans(seq) == [(1, 25)]
        assert seq[0].percentage == 100

    def test_invalid_total_rows(self):
        with pytest.raises(ValueError):
            GradientConfig(total_rows=0, colors=_colors(2))

    def test_invalid_stripe_width(self):
        with pytest.raises(ValueError):
            GradientConfig(total_rows=10, colors=_colors(2), stripe_width=0)

    def test_from_dict(self):
        config = GradientConfig.from_dict({
            "total_rows": 12,
            "colors": [{"id": 1, "name": "Cream", "hex": "#F5F0E1"}],
            "transition_style": "striped",
        })
        assert config.colors[0].id == "1"
        assert config.transition_style is TransitionStyle.STRIPED
        assert config.stripe_width == 4


class TestColorYardage:

    def test_sums_per_color(self):
        config = GradientConfig(
            total_rows=10, colors=_colors(2), transition_style=TransitionStyle.STRIPED
        )
        yardage = calculate_color_yardage(1000, generate_gradient_sequence(config))
        assert list(yardage) == ["0", "1"]
        assert yardage["0"].yardage == pytest.approx(600.0)
        assert yardage["0"].percentage == pytest.approx(60.0)
        assert yardage["1"].yardage == pytest.approx(400.0)
        assert yardage["1"].color_name == "Sage"

    def test_linear_totals_match(self):
        seq = generate_gradient_sequence(GradientConfig(total_rows=37, colors=_colors(4)))
        yardage = calculate_color_yardage(500, seq)
        assert sum(y.yardage for y in yardage.values()) == pytest.approx(500.0)

    def test_smooth_overlap_counts_twice(self):
        config = GradientConfig(
            total_rows=100, colors=_colors(3), transition_style=TransitionStyle.SMOOTH
        )
        yardage = calculate_color_yardage(100, generate_gradient_sequence(config))
        assert sum(y.yardage for y in yardage.values()) > 100

    def test_empty(self):
        assert calculate_color_yardage(100, []) == {}

    def test_negative_yardage(self):
        with pytest.raises(ValueError):
            calculate_color_yardage(-1, [])

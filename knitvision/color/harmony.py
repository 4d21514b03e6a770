# Copyright (c) 2026 Knitvision
# SPDX-License-Identifier: MIT

"""
Color planning: harmony palettes, gradient row-sequences and yardage.

Harmony schemes rotate the base hue around the HSL color wheel (or shift
lightness for monochromatic) and keep the other two components. Gradient
sequences split a project's rows between an ordered list of colors.
"""

from __future__ import annotations

import logging
from typing import Iterable, Union

from knitvision.schema.color import (
    HSL,
    ColorInput,
    ColorTransition,
    ColorYardage,
    GradientConfig,
    HarmonyScheme,
    TransitionStyle,
)
from knitvision.color.colorspace import (
    hex_to_hsl,
    hsl_to_hex,
    normalize_hex,
    rotate_hue,
)

logger = logging.getLogger(__name__)


# Hue offsets in degrees; 0 marks the base color itself
_HUE_OFFSETS: dict[HarmonyScheme, tuple[float, ...]] = {
    HarmonyScheme.ANALOGOUS: (-30.0, 0.0, 30.0),
    HarmonyScheme.COMPLEMENTARY: (0.0, 180.0),
    HarmonyScheme.TRIADIC: (0.0, 120.0, 240.0),
    HarmonyScheme.SPLIT_COMPLEMENTARY: (0.0, 150.0, 210.0),
}

# Monochromatic lightness shift and clamp range
MONO_SHIFT = 20.0
MONO_MIN_LIGHTNESS = 20.0
MONO_MAX_LIGHTNESS = 80.0


# =============================================================================
# Harmony
# =============================================================================


def generate_palette(
    base_hex: str,
    scheme: Union[HarmonyScheme, str],
) -> list[str]:
    """
    Generate a harmonious palette around a base color.

    Args:
        base_hex: Base color ("#RRGGBB" or "#RGB")
        scheme: HarmonyScheme or its string value

    Returns:
        Uppercase hex colors in scheme order. The base color appears
        unchanged in its slot:
        - analogous: [h-30, base, h+30]
        - complementary: [base, h+180]
        - triadic: [base, h+120, h+240]
        - split_complementary: [base, h+150, h+210]
        - monochromatic: [l-20 (>= 20), base, l+20 (<= 80)]

    Raises:
        ValueError: If the hex color or scheme is invalid
    """
    scheme = HarmonyScheme(scheme)
    base = normalize_hex(base_hex)
    hsl = hex_to_hsl(base)

    if scheme is HarmonyScheme.MONOCHROMATIC:
        darker = HSL(h=hsl.h, s=hsl.s, l=max(MONO_MIN_LIGHTNESS, hsl.l - MONO_SHIFT))
        lighter = HSL(h=hsl.h, s=hsl.s, l=min(MONO_MAX_LIGHTNESS, hsl.l + MONO_SHIFT))
        return [hsl_to_hex(darker), base, hsl_to_hex(lighter)]

    return [
        base if offset == 0 else hsl_to_hex(rotate_hue(hsl, offset))
        for offset in _HUE_OFFSETS[scheme]
    ]


# =============================================================================
# Gradient sequences
# =============================================================================


def _transition(color: ColorInput, start: int, end: int, total_rows: int) -> ColorTransition:
    return ColorTransition(
        color_id=color.id,
        color_name=color.name,
        hex_code=color.hex,
        start_row=start,
        end_row=end,
        percentage=(end - start + 1) / total_rows * 100,
    )


def _linear(colors: tuple[ColorInput, ...], total_rows: int) -> list[ColorTransition]:
    n = len(colors)
    rows_per_color, remainder = divmod(total_rows, n)

    sequence = []
    current = 1
    for idx, color in enumerate(colors):
        rows = rows_per_color + (1 if idx < remainder else 0)
        if rows == 0:
            # More colors than rows
            continue
        end = current + rows - 1
        sequence.append(_transition(color, current, end, total_rows))
        current = end + 1
    return sequence


def _smooth(colors: tuple[ColorInput, ...], total_rows: int) -> list[ColorTransition]:
    """
    Blocks of equal length where each pair of neighbours shares a fade
    band of rows. The last color always runs to the final row.
    """
    n = len(colors)
    fade = max(2, total_rows // (n * 4))
    effective = total_rows - fade * (n - 1)
    rows_per_color = effective // n

    sequence = []
    current = 1
    for idx, color in enumerate(colors):
        if current > total_rows:
            break
        is_last = idx == n - 1
        if is_last:
            end = total_rows
        else:
            # Short projects can leave no room for a full block
            end = max(current, min(current + rows_per_color + fade - 1, total_rows))
        sequence.append(_transition(color, current, end, total_rows))
        current = max(end - fade + 1, current + 1)
    return sequence


def _striped(
    colors: tuple[ColorInput, ...],
    total_rows: int,
    stripe_width: int,
) -> list[ColorTransition]:
    sequence = []
    current = 1
    idx = 0
    while current <= total_rows:
        color = colors[idx % len(colors)]
        end = min(current + stripe_width - 1, total_rows)
        sequence.append(_transition(color, current, end, total_rows))
        current = end + 1
        idx += 1
    return sequence


def generate_gradient_sequence(config: GradientConfig) -> list[ColorTransition]:
    """
    Split a project's rows between colors.

    Rows are 1-indexed. The first transition starts at row 1 and the
    last ends at total_rows.

    - linear: even blocks, the first ``total_rows % n`` colors get one
      extra row; contiguous and non-overlapping
    - smooth: neighbouring blocks overlap by a fade band of
      ``max(2, total_rows // (n * 4))`` rows
    - striped: ``stripe_width``-row stripes cycling through the colors

    Returns:
        Ordered transitions. Empty if there are no colors; a single
        color fills every row at 100%.
    """
    colors = tuple(config.colors)
    total_rows = config.total_rows

    if not colors:
        return []

    if len(colors) == 1:
        return [_transition(colors[0], 1, total_rows, total_rows)]

    style = TransitionStyle(config.transition_style)
    if style is TransitionStyle.LINEAR:
        sequence = _linear(colors, total_rows)
    elif style is TransitionStyle.SMOOTH:
        sequence = _smooth(colors, total_rows)
    else:
        sequence = _striped(colors, total_rows, config.stripe_width)

    logger.debug(
        "Generated %d %s transitions over %d rows",
        len(sequence), style.value, total_rows,
    )
    return sequence


# =============================================================================
# Yardage
# =============================================================================


def calculate_color_yardage(
    total_yardage: float,
    transitions: Iterable[ColorTransition],
) -> dict[str, ColorYardage]:
    """
    Apportion total yardage between colors by their row percentages.

    Transitions sharing a color id are summed. Overlapping fade bands in
    smooth gradients count toward both colors, so the total can exceed
    ``total_yardage``.

    Returns:
        ColorYardage keyed by color id, in first-seen order
    """
    if total_yardage < 0:
        raise ValueError(f"total_yardage must be >= 0, got {total_yardage}")

    result: dict[str, ColorYardage] = {}
    for t in transitions:
        yardage = total_yardage * t.percentage / 100
        existing = result.get(t.color_id)
        if existing is None:
            result[t.color_id] = ColorYardage(
                color_id=t.color_id,
                color_name=t.color_name,
                hex_code=t.hex_code,
                yardage=yardage,
                percentage=t.percentage,
            )
        else:
            result[t.color_id] = ColorYardage(
                color_id=t.color_id,
                color_name=t.color_name,
                hex_code=t.hex_code,
                yardage=existing.yardage + yardage,
                percentage=existing.percentage + t.percentage,
            )
    return result

# Copyright (c) 2026 Knitvision
# SPDX-License-Identifier: MIT

"""
Color space conversions.

Conversion chain: hex ↔ sRGB (0-255) ↔ HSL (degrees, percent)

Also provides WCAG contrast ratio and approximate color naming.

References:
- HSL: https://www.w3.org/TR/css-color-3/#hsl-color
- Contrast: https://www.w3.org/TR/WCAG21/#dfn-contrast-ratio
"""

from __future__ import annotations

import math
import re

from knitvision.schema.color import HSL, RGBColor


_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6}|[0-9a-fA-F]{3})$")


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


# =============================================================================
# hex ↔ RGB
# =============================================================================


def normalize_hex(hex_color: str) -> str:
    """
    Normalize a hex color to uppercase "#RRGGBB".

    Accepts "#rgb", "rgb", "#rrggbb" or "rrggbb".

    Raises:
        ValueError: If the string is not a hex color
    """
    m = _HEX_RE.match(hex_color.strip())
    if not m:
        raise ValueError(f"Invalid hex color: {hex_color!r}")
    digits = m.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return f"#{digits.upper()}"


def hex_to_rgb(hex_color: str) -> RGBColor:
    """Parse a hex color string into RGB."""
    digits = normalize_hex(hex_color)[1:]
    return RGBColor(
        r=int(digits[0:2], 16),
        g=int(digits[2:4], 16),
        b=int(digits[4:6], 16),
    )


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Format RGB channels as "#RRGGBB", clamping to 0-255."""
    def clamp(x: int) -> int:
        return min(255, max(0, int(x)))
    return f"#{clamp(r):02X}{clamp(g):02X}{clamp(b):02X}"


# =============================================================================
# RGB ↔ HSL
# =============================================================================


def rgb_to_hsl(rgb: RGBColor) -> HSL:
    """
    Convert 8-bit RGB to HSL.

    Values are not rounded, so hsl_to_rgb(rgb_to_hsl(c)) == c.
    """
    r, g, b = rgb.r / 255.0, rgb.g / 255.0, rgb.b / 255.0
    max_c = max(r, g, b)
    min_c = min(r, g, b)
    l = (max_c + min_c) / 2

    h = 0.0
    s = 0.0

    if max_c != min_c:
        d = max_c - min_c
        s = d / (2 - max_c - min_c) if l > 0.5 else d / (max_c + min_c)

        if max_c == r:
            h = ((g - b) / d + (6 if g < b else 0)) / 6
        elif max_c == g:
            h = ((b - r) / d + 2) / 6
        else:
            h = ((r - g) / d + 4) / 6

    return HSL(
        h=wrap_hue(h * 360.0),
        s=min(100.0, s * 100.0),
        l=l * 100.0,
    )


def _hue_to_rgb(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def hsl_to_rgb(hsl: HSL) -> RGBColor:
    """Convert HSL to 8-bit RGB (channels rounded to nearest)."""
    h = hsl.h / 360.0
    s = hsl.s / 100.0
    l = hsl.l / 100.0

    if s == 0:
        r = g = b = l
    else:
        q = l * (1 + s) if l < 0.5 else l + s - l * s
        p = 2 * l - q
        r = _hue_to_rgb(p, q, h + 1 / 3)
        g = _hue_to_rgb(p, q, h)
        b = _hue_to_rgb(p, q, h - 1 / 3)

    def to_channel(x: float) -> int:
        return min(255, max(0, round_half_up(x * 255)))

    return RGBColor(r=to_channel(r), g=to_channel(g), b=to_channel(b))


def hex_to_hsl(hex_color: str) -> HSL:
    """Convert a hex color to HSL."""
    return rgb_to_hsl(hex_to_rgb(hex_color))


def hsl_to_hex(hsl: HSL) -> str:
    """Convert HSL to an uppercase hex color."""
    return hsl_to_rgb(hsl).hex


def wrap_hue(degrees: float) -> float:
    """Wrap an angle into [0, 360)."""
    h = degrees % 360.0
    # Tiny negative inputs wrap to exactly 360.0 in float arithmetic
    return 0.0 if h >= 360.0 else h


def rotate_hue(hsl: HSL, degrees: float) -> HSL:
    """Rotate hue around the color wheel, keeping saturation and lightness."""
    return HSL(h=wrap_hue(hsl.h + degrees), s=hsl.s, l=hsl.l)


# =============================================================================
# Contrast (WCAG 2.1)
# =============================================================================


def relative_luminance(hex_color: str) -> float:
    """
    WCAG relative luminance of a color.

    Returns:
        0.0 for black, 1.0 for white
    """
    rgb = hex_to_rgb(hex_color)

    def linearize(c: int) -> float:
        v = c / 255.0
        return v / 12.92 if v <= 0.03928 else ((v + 0.055) / 1.055) ** 2.4

    return (
        0.2126 * linearize(rgb.r)
        + 0.7152 * linearize(rgb.g)
        + 0.0722 * linearize(rgb.b)
    )


def contrast_ratio(color1: str, color2: str) -> float:
    """
    WCAG contrast ratio between two colors.

    Returns:
        Ratio from 1.0 (identical) to 21.0 (black on white)
    """
    l1 = relative_luminance(color1)
    l2 = relative_luminance(color2)
    lighter, darker = max(l1, l2), min(l1, l2)
    return (lighter + 0.05) / (darker + 0.05)


def readable_text_color(background: str) -> str:
    """Pick black or white text, whichever contrasts more with the background."""
    white = contrast_ratio(background, "#FFFFFF")
    black = contrast_ratio(background, "#000000")
    return "#FFFFFF" if white > black else "#000000"


# =============================================================================
# Naming
# =============================================================================

# Upper hue bound (exclusive) for each name; red wraps around 345-15
_HUE_NAMES = (
    (15, "Red"),
    (45, "Orange"),
    (75, "Yellow"),
    (150, "Green"),
    (210, "Cyan"),
    (270, "Blue"),
    (315, "Purple"),
    (345, "Pink"),
    (360, "Red"),
)


def color_name(hex_color: str) -> str:
    """
    Approximate human-readable name for a color.

    Low-saturation colors are named on a gray scale (Black .. White).
    Other colors get a hue name with a Dark/Light modifier.

    Example:
        >>> color_name("#1A237E")
        'Dark Blue'
    """
    hsl = hex_to_hsl(hex_color)

    if hsl.s < 10:
        if hsl.l < 20:
            return "Black"
        if hsl.l < 40:
            return "Dark Gray"
        if hsl.l < 60:
            return "Gray"
        if hsl.l < 80:
            return "Light Gray"
        return "White"

    hue_name = next(name for bound, name in _HUE_NAMES if hsl.h < bound)

    if hsl.l < 30:
        return f"Dark {hue_name}"
    if hsl.l > 70:
        return f"Light {hue_name}"
    return hue_name

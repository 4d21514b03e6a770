# Copyright (c) 2026 Knitvision
# SPDX-License-Identifier: MIT

"""
Color schema: RGB/HSL values, extracted palettes and gradient plans.

RGB channels are integers 0-255. HSL keeps floats so that
hex -> HSL -> hex reproduces the original color exactly:
- h: Hue in degrees [0, 360)
- s: Saturation percent [0, 100]
- l: Lightness percent [0, 100]
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Optional


# =============================================================================
# Core Color Types
# =============================================================================


@dataclass(frozen=True, slots=True)
class RGBColor:
    """An sRGB color with 8-bit channels."""
    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        """Validate channel ranges."""
        for name, value in (("r", self.r), ("g", self.g), ("b", self.b)):
            if not 0 <= value <= 255:
                raise ValueError(f"Channel {name} must be 0-255, got {value}")

    @property
    def hex(self) -> str:
        """Uppercase hex string like "#3941C8"."""
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {"r": self.r, "g": self.g, "b": self.b}


@dataclass(frozen=True, slots=True)
class HSL:
    """
    A color in HSL space.

    Attributes:
        h: Hue in degrees (0-360, 0 = red, 120 = green, 240 = blue)
        s: Saturation percent (0 = gray, 100 = fully saturated)
        l: Lightness percent (0 = black, 100 = white)
    """
    h: float
    s: float
    l: float

    def __post_init__(self) -> None:
        """Validate HSL ranges."""
        if not 0.0 <= self.h < 360.0:
            raise ValueError(f"Hue must be 0-360, got {self.h}")
        if not 0.0 <= self.s <= 100.0:
            raise ValueError(f"Saturation must be 0-100, got {self.s}")
        if not 0.0 <= self.l <= 100.0:
            raise ValueError(f"Lightness must be 0-100, got {self.l}")

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {"h": self.h, "s": self.s, "l": self.l}


@dataclass(frozen=True, slots=True)
class ExtractedColor:
    """
    One entry of a palette extracted from an image.

    Attributes:
        hex: Uppercase hex of the cluster centroid
        percentage: Share of sampled pixels, rounded (0-100)
        name: Approximate human-readable name (e.g. "Dark Blue")
    """
    hex: str
    percentage: int
    name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate percentage is in range."""
        if not 0 <= self.percentage <= 100:
            raise ValueError(f"Percentage must be 0-100, got {self.percentage}")

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        d: dict = {"hex": self.hex, "percentage": self.percentage}
        if self.name is not None:
            d["name"] = self.name
        return d

    @classmethod
    def from_dict(cls, data: dict) -> ExtractedColor:
        """Deserialize from dictionary."""
        return cls(hex=data["hex"], percentage=data["percentage"], name=data.get("name"))


# =============================================================================
# Harmony
# =============================================================================


class HarmonyScheme(Enum):
    """Color-wheel schemes for palette generation."""
    ANALOGOUS = "analogous"                      # -30°, 0°, +30°
    COMPLEMENTARY = "complementary"              # 0°, +180°
    TRIADIC = "triadic"                          # 0°, +120°, +240°
    SPLIT_COMPLEMENTARY = "split_complementary"  # 0°, +150°, +210°
    MONOCHROMATIC = "monochromatic"              # lightness -20, 0, +20


# =============================================================================
# Gradient Types
# =============================================================================


class TransitionStyle(Enum):
    """How colors hand over to each other across rows."""
    LINEAR = "linear"    # even blocks, no overlap
    SMOOTH = "smooth"    # neighbouring blocks overlap by a fade band
    STRIPED = "striped"  # fixed-width repeating stripes


@dataclass(frozen=True, slots=True)
class ColorInput:
    """A named color taking part in a gradient plan."""
    id: str
    name: str
    hex: str

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {"id": self.id, "name": self.name, "hex": self.hex}

    @classmethod
    def from_dict(cls, data: dict) -> ColorInput:
        """Deserialize from dictionary."""
        return cls(id=str(data["id"]), name=data.get("name", ""), hex=data["hex"])


@dataclass(frozen=True, slots=True)
class GradientConfig:
    """
    Configuration for a gradient row-sequence.

    Attributes:
        total_rows: Number of rows in the project (>= 1)
        colors: Ordered colors, first is worked first
        transition_style: linear, smooth or striped
        stripe_width: Rows per stripe (striped style only)
    """
    total_rows: int
    colors: tuple[ColorInput, ...]
    transition_style: TransitionStyle = TransitionStyle.LINEAR
    stripe_width: int = 4

    def __post_init__(self) -> None:
        """Validate row counts."""
        if self.total_rows < 1:
            raise ValueError(f"total_rows must be >= 1, got {self.total_rows}")
        if self.stripe_width < 1:
            raise ValueError(f"stripe_width must be >= 1, got {self.stripe_width}")

    @classmethod
    def from_dict(cls, data: dict) -> GradientConfig:
        """Deserialize from dictionary."""
        return cls(
            total_rows=data["total_rows"],
            colors=tuple(ColorInput.from_dict(c) for c in data.get("colors", [])),
            transition_style=TransitionStyle(data.get("transition_style", "linear")),
            stripe_width=data.get("stripe_width", 4),
        )


@dataclass(frozen=True, slots=True)
class ColorTransition:
    """
    One block of rows worked in a single color.

    Rows are 1-indexed and inclusive on both ends.
    """
    color_id: str
    color_name: str
    hex_code: str
    start_row: int
    end_row: int
    percentage: float

    @property
    def row_count(self) -> int:
        return self.end_row - self.start_row + 1

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "color_id": self.color_id,
            "color_name": self.color_name,
            "hex_code": self.hex_code,
            "start_row": self.start_row,
            "end_row": self.end_row,
            "percentage": self.percentage,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ColorTransition:
        """Deserialize from dictionary."""
        return cls(
            color_id=data["color_id"],
            color_name=data.get("color_name", ""),
            hex_code=data.get("hex_code", ""),
            start_row=data["start_row"],
            end_row=data["end_row"],
            percentage=data["percentage"],
        )


@dataclass(frozen=True, slots=True)
class ColorYardage:
    """Yarn needed for one color across a gradient plan."""
    color_id: str
    color_name: str
    hex_code: str
    yardage: float
    percentage: float

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "color_id": self.color_id,
            "color_name": self.color_name,
            "hex_code": self.hex_code,
            "yardage": self.yardage,
            "percentage": self.percentage,
        }


def palette_to_json(colors: tuple[ExtractedColor, ...], indent: Optional[int] = 2) -> str:
    """Serialize an extracted palette to a JSON array."""
    return json.dumps([c.to_dict() for c in colors], indent=indent)

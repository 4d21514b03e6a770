# Copyright (c) 2026 Knitvision
# SPDX-License-Identifier: MIT

"""
Chart detection schema.

Design principles:
- Immutable: All types are frozen dataclasses
- Shape-checked: a chart's grid, confidences and dimensions always agree
- Serializable: plain dicts and JSON for the surrounding service to persist

Grid layout (row-major, 0-indexed):

    ┌──────┬──────┬──────┐
    │ 0,0  │ 0,1  │ 0,2  │
    ├──────┼──────┼──────┤
    │ 1,0  │ 1,1  │ 1,2  │
    └──────┴──────┴──────┘
"""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Sequence


# Cells below this confidence are reported as unrecognized
UNRECOGNIZED_THRESHOLD = 0.5


# =============================================================================
# Grid Detection
# =============================================================================


@dataclass(frozen=True, slots=True)
class GridBounds:
    """
    Region of the image the grid was fitted to.

    Attributes:
        x: Left edge in pixels
        y: Top edge in pixels
        width: Width in pixels
        height: Height in pixels
    """
    x: int
    y: int
    width: int
    height: int

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: dict) -> GridBounds:
        """Deserialize from dictionary."""
        return cls(
            x=data.get("x", 0),
            y=data.get("y", 0),
            width=data["width"],
            height=data["height"],
        )


@dataclass(frozen=True, slots=True)
class GridDetectionResult:
    """
    A successfully inferred chart grid.

    Attributes:
        rows: Number of chart rows (3-150)
        cols: Number of chart columns (3-100)
        cell_width: Cell width in pixels
        cell_height: Cell height in pixels
        bounds: Analysed image region
    """
    rows: int
    cols: int
    cell_width: int
    cell_height: int
    bounds: GridBounds

    def __post_init__(self) -> None:
        """Validate grid dimensions."""
        if not 3 <= self.rows <= 150:
            raise ValueError(f"Rows must be 3-150, got {self.rows}")
        if not 3 <= self.cols <= 100:
            raise ValueError(f"Cols must be 3-100, got {self.cols}")
        if self.cell_width < 0 or self.cell_height < 0:
            raise ValueError(
                f"Cell size must be non-negative, got {self.cell_width}x{self.cell_height}"
            )

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "rows": self.rows,
            "cols": self.cols,
            "cell_width": self.cell_width,
            "cell_height": self.cell_height,
            "bounds": self.bounds.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> GridDetectionResult:
        """Deserialize from dictionary."""
        return cls(
            rows=data["rows"],
            cols=data["cols"],
            cell_width=data["cell_width"],
            cell_height=data["cell_height"],
            bounds=GridBounds.from_dict(data["bounds"]),
        )


@dataclass(frozen=True, slots=True)
class GridDetectionFailure:
    """
    No grid structure could be inferred from the image.

    Returned (never raised) by grid detection so callers can branch to a
    manual grid-entry path. Falsy, so ``if not result:`` works.

    Attributes:
        reason: Human-readable explanation
        width: Width of the analysed image
        height: Height of the analysed image
    """
    reason: str
    width: int = 0
    height: int = 0

    def __bool__(self) -> bool:
        return False

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {"error": self.reason, "width": self.width, "height": self.height}


# =============================================================================
# Cell Recognition
# =============================================================================


@dataclass(frozen=True, slots=True)
class CellRecognition:
    """
    Outcome of recognizing one chart cell.

    Attributes:
        symbol: Stitch symbol code (e.g. "k", "p", "yo")
        confidence: Recognizer certainty (0.0-1.0)
        fallback: True when the cell could not be analysed and the
            default symbol was substituted
    """
    symbol: str
    confidence: float
    fallback: bool = False

    def __post_init__(self) -> None:
        """Validate confidence is in range."""
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence must be 0-1, got {self.confidence}")

    @property
    def is_recognized(self) -> bool:
        """True if confidence reaches the unrecognized threshold."""
        return self.confidence >= UNRECOGNIZED_THRESHOLD

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        d = {"symbol": self.symbol, "confidence": self.confidence}
        if self.fallback:
            d["fallback"] = True
        return d


# =============================================================================
# Symbols
# =============================================================================


@dataclass(frozen=True, slots=True)
class StitchSymbol:
    """
    A chart symbol and the stitch it stands for.

    Attributes:
        symbol: Code as written in a chart grid (lowercase)
        name: Display name
        category: basic, increase, decrease, slip, cable, special or colorwork
        description: How to work the stitch
    """
    symbol: str
    name: str
    category: str
    description: str = ""

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "symbol": self.symbol,
            "name": self.name,
            "category": self.category,
            "description": self.description,
        }


# =============================================================================
# Corrections
# =============================================================================


@dataclass(frozen=True, slots=True)
class Correction:
    """
    A user correction for a single cell.

    Corrections that fall outside the grid are ignored when applied.
    """
    row: int
    col: int
    corrected_symbol: str

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {"row": self.row, "col": self.col, "corrected": self.corrected_symbol}

    @classmethod
    def from_dict(cls, data: dict) -> Correction:
        """Deserialize from dictionary (accepts "corrected" or "corrected_symbol")."""
        symbol = data.get("corrected_symbol", data.get("corrected"))
        if symbol is None:
            raise KeyError("Correction requires 'corrected' or 'corrected_symbol'")
        return cls(row=int(data["row"]), col=int(data["col"]), corrected_symbol=symbol)


def apply_corrections(
    grid: Sequence[Sequence[str]],
    corrections: Iterable[Correction],
) -> tuple[tuple[str, ...], ...]:
    """
    Apply user corrections to a symbol grid.

    Pure: the input is never modified, a corrected copy is returned.
    Out-of-range corrections are skipped. Applying the same corrections
    twice gives the same grid as applying them once.

    Args:
        grid: Row-major symbol grid
        corrections: Corrections to apply, in order (later ones win)

    Returns:
        New grid as a tuple of tuples
    """
    rows = [list(row) for row in grid]

    for correction in corrections:
        r, c = correction.row, correction.col
        if 0 <= r < len(rows) and 0 <= c < len(rows[r]):
            rows[r][c] = correction.corrected_symbol

    return tuple(tuple(row) for row in rows)


# =============================================================================
# Detected Chart
# =============================================================================


@dataclass(frozen=True, slots=True)
class DetectedChart:
    """
    A chart grid recognized from an image.

    Attributes:
        grid: Symbol codes, row-major
        cell_confidences: Per-cell confidence, same shape as grid
        unrecognized_cells: (row, col) pairs with confidence below 0.5,
            in row-major order
        dimensions: (rows, cols)
    """
    grid: tuple[tuple[str, ...], ...]
    cell_confidences: tuple[tuple[float, ...], ...]
    unrecognized_cells: tuple[tuple[int, int], ...]
    dimensions: tuple[int, int]

    def __post_init__(self) -> None:
        """Validate the shape invariant."""
        rows, cols = self.dimensions
        if len(self.grid) != rows:
            raise ValueError(f"Grid must have {rows} rows, got {len(self.grid)}")
        if len(self.cell_confidences) != rows:
            raise ValueError(
                f"Confidences must have {rows} rows, got {len(self.cell_confidences)}"
            )
        for i, (symbols, confidences) in enumerate(zip(self.grid, self.cell_confidences)):
            if len(symbols) != cols or len(confidences) != cols:
                raise ValueError(f"Row {i} must have {cols} cells")
            for conf in confidences:
                if not 0.0 <= conf <= 1.0:
                    raise ValueError(f"Confidence must be 0-1, got {conf}")

    @property
    def rows(self) -> int:
        return self.dimensions[0]

    @property
    def cols(self) -> int:
        return self.dimensions[1]

    @property
    def overall_confidence(self) -> float:
        """Arithmetic mean of every cell confidence (0.0 for an empty grid)."""
        count = self.rows * self.cols
        if count == 0:
            return 0.0
        return sum(sum(row) for row in self.cell_confidences) / count

    def symbol_at(self, row: int, col: int) -> str:
        """Symbol at a cell."""
        return self.grid[row][col]

    def with_corrections(self, corrections: Iterable[Correction]) -> DetectedChart:
        """Return a copy of this chart with user corrections applied."""
        return replace(self, grid=apply_corrections(self.grid, corrections))

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "grid": [list(row) for row in self.grid],
            "confidence": self.overall_confidence,
            "grid_dimensions": {"rows": self.rows, "cols": self.cols},
            "unrecognized_symbols": [
                {"row": r, "col": c} for r, c in self.unrecognized_cells
            ],
            "cell_confidences": [list(row) for row in self.cell_confidences],
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: dict) -> DetectedChart:
        """Deserialize from dictionary."""
        dims = data["grid_dimensions"]
        return cls(
            grid=tuple(tuple(row) for row in data["grid"]),
            cell_confidences=tuple(
                tuple(float(c) for c in row) for row in data["cell_confidences"]
            ),
            unrecognized_cells=tuple(
                (cell["row"], cell["col"]) for cell in data.get("unrecognized_symbols", [])
            ),
            dimensions=(dims["rows"], dims["cols"]),
        )

    @classmethod
    def from_json(cls, json_str: str) -> DetectedChart:
        """Deserialize from JSON string."""
        return cls.from_dict(json.loads(json_str))

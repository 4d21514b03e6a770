# Copyright (c) 2026 Knitvision
# SPDX-License-Identifier: MIT

"""
Standard knitting chart symbols.

Codes are lowercase; lookups are case-insensitive. Several stitches have
an alternate glyph (e.g. "." for knit, "/" for k2tog) listed as its own
entry.
"""

from __future__ import annotations

from knitvision.schema.chart import StitchSymbol


CATEGORIES = (
    "basic",
    "increase",
    "decrease",
    "slip",
    "cable",
    "special",
    "colorwork",
)


_SYMBOLS = (
    # Basic stitches
    StitchSymbol("k", "Knit", "basic", "Knit stitch on RS, purl on WS"),
    StitchSymbol("p", "Purl", "basic", "Purl stitch on RS, knit on WS"),
    StitchSymbol(".", "Knit (alt)", "basic", "Alternative knit symbol"),
    StitchSymbol("-", "Purl (alt)", "basic", "Alternative purl symbol"),

    # Yarn overs and increases
    StitchSymbol("yo", "Yarn Over", "increase", "Wrap yarn around needle"),
    StitchSymbol("o", "Yarn Over (alt)", "increase", "Alternative yarn over symbol"),
    StitchSymbol("m1l", "Make 1 Left", "increase", "Left-leaning increase"),
    StitchSymbol("m1r", "Make 1 Right", "increase", "Right-leaning increase"),
    StitchSymbol("kfb", "Knit Front & Back", "increase",
                 "Increase by knitting into front and back"),
    StitchSymbol("inc", "Increase", "increase", "General increase"),

    # Decreases
    StitchSymbol("k2tog", "Knit 2 Together", "decrease", "Right-leaning decrease"),
    StitchSymbol("/", "K2tog (alt)", "decrease", "Alternative k2tog symbol"),
    StitchSymbol("ssk", "Slip Slip Knit", "decrease", "Left-leaning decrease"),
    StitchSymbol("\\", "SSK (alt)", "decrease", "Alternative SSK symbol"),
    StitchSymbol("p2tog", "Purl 2 Together", "decrease", "Purl decrease"),
    StitchSymbol("cdd", "Central Double Decrease", "decrease",
                 "Slip 2 sts together, k1, pass slipped sts over"),
    StitchSymbol("s2kp", "S2KP", "decrease",
                 "Slip 2 together knitwise, k1, pass slipped sts over"),
    StitchSymbol("sk2p", "SK2P", "decrease", "Slip 1, k2tog, pass slipped st over"),

    # Slip stitches
    StitchSymbol("sl", "Slip", "slip", "Slip stitch purlwise"),
    StitchSymbol("v", "Slip (alt)", "slip", "Alternative slip symbol"),
    StitchSymbol("slk", "Slip Knitwise", "slip", "Slip stitch knitwise"),
    StitchSymbol("slwyif", "Slip With Yarn In Front", "slip",
                 "Slip purlwise with yarn in front"),
    StitchSymbol("slwyib", "Slip With Yarn In Back", "slip",
                 "Slip purlwise with yarn in back"),

    # Cables
    StitchSymbol("c4f", "Cable 4 Front", "cable", "4-stitch left-leaning cable"),
    StitchSymbol("c4b", "Cable 4 Back", "cable", "4-stitch right-leaning cable"),
    StitchSymbol("c6f", "Cable 6 Front", "cable", "6-stitch left-leaning cable"),
    StitchSymbol("c6b", "Cable 6 Back", "cable", "6-stitch right-leaning cable"),
    StitchSymbol("t2f", "Twist 2 Front", "cable", "2-stitch left twist"),
    StitchSymbol("t2b", "Twist 2 Back", "cable", "2-stitch right twist"),

    # Special
    StitchSymbol("x", "No Stitch", "special", "Placeholder for no stitch"),
    StitchSymbol("[]", "No Stitch (alt)", "special", "Alternative no stitch symbol"),
    StitchSymbol("bo", "Bind Off", "special", "Bind off stitch"),
    StitchSymbol("co", "Cast On", "special", "Cast on stitch"),
    StitchSymbol("tbl", "Through Back Loop", "special", "Work stitch through back loop"),
    StitchSymbol("ktbl", "Knit TBL", "special", "Knit through back loop"),
    StitchSymbol("ptbl", "Purl TBL", "special", "Purl through back loop"),

    # Colorwork
    StitchSymbol("mc", "Main Color", "colorwork", "Main color stitch"),
    StitchSymbol("cc", "Contrast Color", "colorwork", "Contrast color stitch"),
    StitchSymbol("cc1", "Contrast Color 1", "colorwork", "First contrast color"),
    StitchSymbol("cc2", "Contrast Color 2", "colorwork", "Second contrast color"),
)

SYMBOL_LIBRARY: dict[str, StitchSymbol] = {s.symbol: s for s in _SYMBOLS}


def is_valid_symbol(symbol: str) -> bool:
    """True if the code is a known chart symbol (case-insensitive)."""
    return symbol.lower() in SYMBOL_LIBRARY


def get_symbol(symbol: str) -> StitchSymbol:
    """
    Look up a chart symbol (case-insensitive).

    Raises:
        KeyError: If the symbol is unknown
    """
    try:
        return SYMBOL_LIBRARY[symbol.lower()]
    except KeyError:
        raise KeyError(f"Unknown chart symbol: {symbol!r}") from None


def symbols_by_category(category: str) -> tuple[StitchSymbol, ...]:
    """
    All symbols in a category, in library order.

    Raises:
        ValueError: If the category is unknown
    """
    if category not in CATEGORIES:
        raise ValueError(f"Unknown category: {category!r}. Expected one of {CATEGORIES}")
    return tuple(s for s in _SYMBOLS if s.category == category)

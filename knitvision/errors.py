# Copyright (c) 2026 Knitvision
# SPDX-License-Identifier: MIT

"""
Exception taxonomy.

Only image decoding crosses the pipeline boundary as an exception.
Grid detection failure is a returned value (see GridDetectionFailure),
and per-cell problems degrade into low-confidence fallbacks.
"""


class KnitvisionError(Exception):
    """Base class for all knitvision errors."""


class ImageDecodeError(KnitvisionError, ValueError):
    """Image bytes are unreadable, corrupt, or in an unsupported format."""


class CellExtractionError(KnitvisionError, ValueError):
    """A cell crop falls outside the image."""

# Copyright (c) 2026 Knitvision
# SPDX-License-Identifier: MIT

"""
Image decoding and encoding.

Every pipeline entry point accepts the same image inputs:
- Raw encoded bytes (PNG, JPEG, ...) as bytes, bytearray or memoryview
- A path to an image file (str or Path)
- A NumPy uint8 array of shape (H, W) (grayscale) or (H, W, 3) (sRGB)

Decoding is the only I/O the pipelines perform.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Union

import numpy as np
from numpy.typing import NDArray
from PIL import Image, ImageCms, ImageOps, UnidentifiedImageError

from knitvision.errors import ImageDecodeError

logger = logging.getLogger(__name__)

ImageInput = Union[bytes, bytearray, memoryview, str, Path, NDArray[np.uint8]]


def load_image(image: ImageInput) -> Image.Image:
    """
    Decode an image into an RGB or grayscale PIL image.

    Applies EXIF orientation (phone photos) and converts embedded ICC
    profiles to sRGB so colors match what color pickers show.

    Raises:
        ImageDecodeError: If the data cannot be decoded
        TypeError: If the input type is not supported
        ValueError: If an array input is not uint8 (H, W) or (H, W, 3)
    """
    if isinstance(image, np.ndarray):
        pixels = _validate_array(image)
        if pixels.size == 0:
            raise ImageDecodeError(f"Image has zero area: shape {pixels.shape}")
        return Image.fromarray(pixels)

    if isinstance(image, (bytes, bytearray, memoryview)):
        source = io.BytesIO(bytes(image))
    elif isinstance(image, (str, Path)):
        source = image
    else:
        raise TypeError(
            f"Expected image bytes, file path or numpy array, got {type(image)}"
        )

    # Some decoders report corrupt data as SyntaxError
    try:
        img = Image.open(source)
        img.load()
    except (
        UnidentifiedImageError,
        OSError,
        ValueError,
        SyntaxError,
        Image.DecompressionBombError,
    ) as e:
        raise ImageDecodeError(f"Could not decode image: {e}") from e

    img = ImageOps.exif_transpose(img)

    if "icc_profile" in img.info:
        img = _to_srgb(img)
    elif img.mode not in ("RGB", "L"):
        img = img.convert("RGB")

    return img


def load_pixels(image: ImageInput, mode: str = "RGB") -> NDArray[np.uint8]:
    """
    Decode an image into a uint8 array.

    Args:
        image: Any supported image input
        mode: "RGB" for (H, W, 3) or "L" for (H, W) grayscale

    Returns:
        Pixel array. Zero-area arrays are returned as given (after
        channel conversion) so callers can report them.
    """
    if mode not in ("RGB", "L"):
        raise ValueError(f"Unsupported mode: {mode}")

    if isinstance(image, np.ndarray):
        pixels = _validate_array(image)
        if pixels.size == 0:
            height, width = pixels.shape[:2]
            shape = (height, width, 3) if mode == "RGB" else (height, width)
            return np.zeros(shape, dtype=np.uint8)

    img = load_image(image)
    if img.mode != mode:
        img = img.convert(mode)
    return np.array(img, dtype=np.uint8)


def encode_png(pixels: NDArray[np.uint8]) -> bytes:
    """Encode a (H, W) or (H, W, 3) uint8 array as PNG bytes."""
    buffer = io.BytesIO()
    Image.fromarray(pixels).save(buffer, format="PNG")
    return buffer.getvalue()


def _validate_array(pixels: NDArray) -> NDArray[np.uint8]:
    if pixels.dtype != np.uint8:
        raise ValueError(f"Expected uint8 array, got {pixels.dtype}")
    if pixels.ndim == 2:
        return pixels
    if pixels.ndim == 3 and pixels.shape[2] == 3:
        return pixels
    raise ValueError(f"Expected (H, W) or (H, W, 3) array, got shape {pixels.shape}")


def _to_srgb(img: Image.Image) -> Image.Image:
    """Convert an image carrying an embedded ICC profile to sRGB."""
    if img.mode != "RGB":
        img = img.convert("RGB")
    try:
        embedded_profile = ImageCms.ImageCmsProfile(io.BytesIO(img.info["icc_profile"]))
        srgb_profile = ImageCms.createProfile("sRGB")
        return ImageCms.profileToProfile(img, embedded_profile, srgb_profile)
    except (ImageCms.PyCMSError, OSError) as e:
        # Unusable profile: keep the plain RGB conversion
        logger.debug("ICC conversion failed, using untagged RGB: %s", e)
        return img

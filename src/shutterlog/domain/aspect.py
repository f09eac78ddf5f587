"""Aspect-ratio classification for photo layout classes.

Four buckets over ``width / height``; each lower bound is inclusive:

    ratio < 0.7          portrait
    0.7 <= ratio < 1.3   square
    1.3 <= ratio < 1.8   landscape
    ratio >= 1.8         panorama
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Literal

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

AspectLabel = Literal["portrait", "square", "landscape", "panorama"]

DEFAULT_ASPECT: AspectLabel = "landscape"

_THRESHOLDS: tuple[tuple[float, AspectLabel], ...] = (
    (0.7, "portrait"),
    (1.3, "square"),
    (1.8, "landscape"),
)


def classify_ratio(ratio: float) -> AspectLabel:
    """Map a width/height ratio to its aspect label.

    Raises:
        ValueError: If *ratio* is zero, negative or NaN.

    Examples:
        >>> classify_ratio(0.5)
        'portrait'
        >>> classify_ratio(1.3)
        'landscape'
    """
    if not ratio > 0:
        msg = f"Aspect ratio must be positive, got {ratio}"
        raise ValueError(msg)
    for upper, label in _THRESHOLDS:
        if ratio < upper:
            return label
    return "panorama"


def classify_dimensions(width: int | float, height: int | float) -> AspectLabel:
    """Classify an image by its pixel dimensions.

    Raises:
        ValueError: If either dimension is not positive.
    """
    if width <= 0 or height <= 0:
        msg = f"Image dimensions must be positive, got {width}x{height}"
        raise ValueError(msg)
    return classify_ratio(width / height)


def image_aspect(path: str | Path, *, root: Path | None = None) -> AspectLabel:
    """Classify the image at *path*, falling back to ``landscape``.

    Relative paths resolve against *root* when given.

    Rendering never fails on bad image metadata: a missing, unreadable or
    degenerate file yields :data:`DEFAULT_ASPECT`.
    """
    if not isinstance(path, (str, os.PathLike)):
        logger.warning("Aspect fallback: no image path (got %r)", path)
        return DEFAULT_ASPECT
    try:
        source = root / path if root is not None else Path(path)
        with Image.open(source) as im:
            width, height = im.size
        return classify_dimensions(width, height)
    except (OSError, UnidentifiedImageError, Image.DecompressionBombError, ValueError) as exc:
        logger.warning("Aspect fallback for %s: %s", path, exc)
        return DEFAULT_ASPECT

"""Responsive image generation backed by Pillow.

Each source image is resized into a set of widths and encoded into a set
of formats. Output names embed a hash of the source bytes and the
options, so repeated calls for the same image reuse what is already on
disk and concurrent renders of different pages never clobber each other.
"""

from __future__ import annotations

import hashlib
import logging
import os
import tempfile
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import TYPE_CHECKING

from markupsafe import Markup, escape
from PIL import Image, ImageOps

if TYPE_CHECKING:
    from shutterlog.config.models import ImagesConfig

logger = logging.getLogger(__name__)

# format name -> (Pillow encoder, MIME type)
FORMATS: dict[str, tuple[str, str]] = {
    "jpeg": ("JPEG", "image/jpeg"),
    "webp": ("WEBP", "image/webp"),
    "png": ("PNG", "image/png"),
    "avif": ("AVIF", "image/avif"),
}


@dataclass(frozen=True)
class ImageOptions:
    """Resize and encode settings for one shortcode call."""

    output_dir: Path
    widths: tuple[int, ...] = (600, 1200, 1800)
    formats: tuple[str, ...] = ("webp", "jpeg")
    url_path: str = "/img/"
    quality: int = 85

    def __post_init__(self) -> None:
        unknown = [f for f in self.formats if f not in FORMATS]
        if unknown:
            msg = f"Unsupported image formats: {unknown}. Supported: {sorted(FORMATS)}"
            raise ValueError(msg)
        if not self.formats:
            msg = "At least one image format is required"
            raise ValueError(msg)

    @classmethod
    def from_config(cls, config: ImagesConfig, output_root: Path) -> ImageOptions:
        return cls(
            output_dir=output_root / config.output_subdir,
            widths=tuple(config.widths),
            formats=tuple(config.formats),
            url_path=config.url_path,
            quality=config.quality,
        )

    def fingerprint(self) -> str:
        """Stable string of the options that change encoded output."""
        return f"{self.widths}|{self.formats}|{self.quality}"


@dataclass(frozen=True)
class ImageVariant:
    """One encoded file: a single width in a single format."""

    format: str
    width: int
    height: int
    filename: str
    output_path: Path
    url: str

    @property
    def source_type(self) -> str:
        return FORMATS[self.format][1]

    @property
    def srcset_entry(self) -> str:
        return f"{self.url} {self.width}w"


@dataclass(frozen=True)
class ImageMetadata:
    """Variants per format, each list ordered by ascending width."""

    variants: dict[str, list[ImageVariant]] = field(default_factory=dict)

    def __getitem__(self, fmt: str) -> list[ImageVariant]:
        return self.variants[fmt]

    @property
    def formats(self) -> list[str]:
        return list(self.variants)


def valid_widths(original_width: int, widths: tuple[int, ...]) -> list[int]:
    """Drop widths wider than the source; fall back to the source width.

    Examples:
        >>> valid_widths(1000, (600, 1200, 1800))
        [600]
        >>> valid_widths(400, (600, 1200))
        [400]
    """
    unique = sorted(set(widths))
    kept = [w for w in unique if w <= original_width]
    if unique and not kept:
        kept = [original_width]
    return kept


def generate_image(src: Path, options: ImageOptions) -> ImageMetadata:
    """Resize and encode *src* according to *options*.

    Raises:
        FileNotFoundError: If *src* does not exist.
    """
    data = src.read_bytes()
    digest = hashlib.sha256(data + options.fingerprint().encode()).hexdigest()[:10]

    with Image.open(BytesIO(data)) as opened:
        im = ImageOps.exif_transpose(opened)
        src_width, src_height = im.size
        widths = valid_widths(src_width, options.widths)

        variants: dict[str, list[ImageVariant]] = {}
        for fmt in options.formats:
            encoder = FORMATS[fmt][0]
            for width in widths:
                height = max(1, round(width * src_height / src_width))
                filename = f"{digest}-{width}.{fmt}"
                out_path = options.output_dir / filename
                if not out_path.exists():
                    _encode(im, out_path, (width, height), encoder, options.quality)
                variants.setdefault(fmt, []).append(
                    ImageVariant(
                        format=fmt,
                        width=width,
                        height=height,
                        filename=filename,
                        output_path=out_path,
                        url=f"{options.url_path.rstrip('/')}/{filename}",
                    )
                )
    logger.debug("Generated %d widths x %d formats for %s", len(widths), len(variants), src)
    return ImageMetadata(variants=variants)


def _encode(
    im: Image.Image,
    out_path: Path,
    size: tuple[int, int],
    encoder: str,
    quality: int,
) -> None:
    """Resize and save atomically so a half-written file is never served."""
    resized = im if im.size == size else im.resize(size, Image.Resampling.LANCZOS)
    if encoder == "JPEG" and resized.mode not in ("RGB", "L"):
        resized = resized.convert("RGB")
    out_path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=out_path.parent, suffix=".part")
    try:
        with os.fdopen(fd, "wb") as fh:
            resized.save(fh, encoder, quality=quality)
        os.replace(tmp_name, out_path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def _attrs(attributes: dict[str, str | int]) -> str:
    return "".join(f' {key}="{escape(str(value))}"' for key, value in attributes.items())


def generate_html(metadata: ImageMetadata, attributes: dict[str, str]) -> Markup:
    """Render ``<picture>`` markup for *metadata*.

    The last format is the ``<img>`` fallback; every other format becomes a
    ``<source>``. The ``<img>`` points at the smallest fallback variant and
    carries the largest variant's dimensions.

    Raises:
        ValueError: If ``alt`` is missing from *attributes*.
    """
    if attributes.get("alt") is None:
        msg = "Missing 'alt' attribute on image shortcode"
        raise ValueError(msg)

    fallback_fmt = metadata.formats[-1]
    fallback = metadata[fallback_fmt]
    smallest, largest = fallback[0], fallback[-1]
    sizes = attributes.get("sizes")
    multi_width = len(fallback) > 1

    img_attrs: dict[str, str | int] = {
        "alt": attributes["alt"],
        "src": smallest.url,
        "width": largest.width,
        "height": largest.height,
    }
    img_attrs.update({k: v for k, v in attributes.items() if k not in ("alt", "sizes")})
    if multi_width:
        img_attrs["srcset"] = ", ".join(v.srcset_entry for v in fallback)
        if sizes:
            img_attrs["sizes"] = sizes
    img = f"<img{_attrs(img_attrs)}>"

    sources = []
    for fmt in metadata.formats[:-1]:
        source_attrs: dict[str, str | int] = {
            "type": FORMATS[fmt][1],
            "srcset": ", ".join(v.srcset_entry for v in metadata[fmt]),
        }
        if sizes:
            source_attrs["sizes"] = sizes
        sources.append(f"<source{_attrs(source_attrs)}>")

    if not sources:
        return Markup(img)
    return Markup(f"<picture>{''.join(sources)}{img}</picture>")

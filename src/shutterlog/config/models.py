"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, shutterlog.toml only contains
overrides. A fresh site needs no config file at all.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

ContentKind = Literal["page", "post", "photo"]

# --- shutterlog.toml sections ---


class DirsConfig(BaseModel):
    """[dirs] section. ``includes`` and ``data`` are relative to ``input``."""

    model_config = {"frozen": True}

    input: str = "src"
    output: str = "_site"
    includes: str = "_includes"
    data: str = "_data"


class PassthroughConfig(BaseModel):
    """[passthrough] section. Paths are relative to the input directory."""

    model_config = {"frozen": True}

    paths: list[str] = Field(default_factory=lambda: ["css", "photos"])


class ImagesConfig(BaseModel):
    """[images] section."""

    model_config = {"frozen": True}

    widths: list[int] = Field(default_factory=lambda: [600, 1200, 1800])
    formats: list[str] = Field(default_factory=lambda: ["webp", "jpeg"])
    output_subdir: str = "img"
    url_path: str = "/img/"
    quality: int = 85


class CollectionConfig(BaseModel):
    """One ``[[collections]]`` entry."""

    model_config = {"frozen": True}

    name: str
    pattern: str
    kind: ContentKind = "page"


class ServeConfig(BaseModel):
    """[serve] section."""

    model_config = {"frozen": True}

    host: str = "127.0.0.1"
    port: int = 8080


def default_collections() -> list[CollectionConfig]:
    """The two collections every site gets unless overridden."""
    return [
        CollectionConfig(name="posts", pattern="posts/*.md", kind="post"),
        CollectionConfig(name="photos", pattern="photos/*.md", kind="photo"),
    ]

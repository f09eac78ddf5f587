"""Content models — front-matter schema for pages, posts, and photos.

Model attributes map 1:1 to YAML front-matter keys. Unknown keys are
kept (``extra="allow"``) so templates can reach any field an author
adds. Required fields are enforced by the model: a post without a
``title`` or ``date`` fails the build instead of rendering blank.

Pure parsing (``parse_frontmatter``) lives here so that the dependency
direction stays clean: infrastructure -> domain, never the reverse.
"""

from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import Any, ClassVar, Self

from pydantic import BaseModel, Field, ValidationError, field_validator
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from shutterlog.domain.errors import ContentError

_FRONTMATTER_DELIMITER = "---"


def _new_yaml() -> YAML:
    """Create a fresh safe YAML loader.

    ruamel.yaml's YAML object is stateful, so each parse gets its own.
    """
    return YAML(typ="safe", pure=True)


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Parse YAML front matter and body from markdown content.

    Expects the file to start with ``---`` on the first line. The second
    ``---`` closes the YAML block. Everything after is the body.

    Handles both ``\\n`` and ``\\r\\n`` line endings.

    Returns:
        A ``(frontmatter_dict, body_text)`` tuple. If no valid
        front-matter delimiters are found, returns ``({}, content)``.

    Raises:
        YAMLError: If the block between the delimiters is not valid YAML.
    """
    normalized = content.replace("\r\n", "\n")
    lines = normalized.split("\n")
    if not lines or lines[0].strip() != _FRONTMATTER_DELIMITER:
        return {}, content

    end_idx: int | None = None
    for i, line in enumerate(lines[1:], start=1):
        if line.strip() == _FRONTMATTER_DELIMITER:
            end_idx = i
            break

    if end_idx is None:
        return {}, content

    yaml_block = "\n".join(lines[1:end_idx])
    body = "\n".join(lines[end_idx + 1 :])

    if body.startswith("\n"):
        body = body[1:]

    fm = _new_yaml().load(yaml_block) or {}
    if not isinstance(fm, dict):
        msg = f"front matter must be a mapping, got {type(fm).__name__}"
        raise YAMLError(msg)
    return fm, body


# ---------------------------------------------------------------------------
# Content models
# ---------------------------------------------------------------------------


class PageModel(BaseModel):
    """Any renderable template. Every key is optional."""

    model_config = {"frozen": True, "extra": "allow"}

    title: str | None = None
    layout: str | None = None
    permalink: str | bool | None = None
    date: dt.datetime | dt.date | None = None
    tags: list[str] = Field(default_factory=list)

    kind: ClassVar[str] = "page"

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value: Any) -> list[str]:
        """Accept a single tag or a list; drop duplicates, keep first-seen order."""
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        elif not isinstance(value, (list, tuple)):
            msg = f"tags must be a string or a list, got {type(value).__name__}"
            raise ValueError(msg)
        seen: dict[str, None] = {}
        for tag in value:
            seen.setdefault(str(tag).strip(), None)
        return [tag for tag in seen if tag]

    @classmethod
    def from_frontmatter(cls, fm: dict[str, Any], *, path: Path) -> Self:
        """Validate a parsed front-matter dict, raising :class:`ContentError`."""
        try:
            return cls.model_validate(fm)
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
                for err in exc.errors()
            )
            raise ContentError(path, f"invalid {cls.kind} front matter ({problems})") from exc

    @classmethod
    def from_file(cls, path: Path) -> tuple[Self, str]:
        """Parse a markdown file into ``(model_instance, body_string)``."""
        try:
            content = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise ContentError(path, f"not UTF-8 text: {exc}") from exc
        try:
            fm, body = parse_frontmatter(content)
        except YAMLError as exc:
            raise ContentError(path, f"malformed front matter: {exc}") from exc
        return cls.from_frontmatter(fm, path=path), body

    def template_data(self) -> dict[str, Any]:
        """Front-matter keys as exposed to templates, extras included."""
        return self.model_dump()


class PostModel(PageModel):
    """Blog post — title and date are mandatory."""

    title: str
    date: dt.datetime | dt.date

    kind: ClassVar[str] = "post"


class PhotoModel(PostModel):
    """Portfolio photo with optional shot metadata."""

    location: str | None = None
    image: str | None = None
    camera: str | None = None
    lens: str | None = None
    settings: str | None = None

    kind: ClassVar[str] = "photo"


CONTENT_MODELS: dict[str, type[PageModel]] = {
    "page": PageModel,
    "post": PostModel,
    "photo": PhotoModel,
}


def get_content_model(kind: str) -> type[PageModel]:
    """Look up the model class for a collection kind.

    Raises:
        KeyError: If no model is registered for *kind*.
    """
    try:
        return CONTENT_MODELS[kind]
    except KeyError:
        msg = f"No content model registered for kind={kind!r}"
        raise KeyError(msg) from None

"""Shared Jinja2 template loading with per-site override support."""

from __future__ import annotations

from functools import partial
from pathlib import Path
from typing import Any

import markdown
from jinja2 import BaseLoader, ChoiceLoader, Environment, FileSystemLoader, PackageLoader, nodes
from jinja2.ext import Extension
from jinja2.parser import Parser
from markupsafe import Markup
from PIL import Image

from shutterlog.domain.aspect import image_aspect
from shutterlog.domain.errors import ImageError
from shutterlog.infrastructure.images import ImageOptions, generate_html, generate_image
from shutterlog.rendering.filters import random_item, readable_date

MARKDOWN_EXTENSIONS = ["extra", "sane_lists"]


class ImageShortcode(Extension):
    """``{% image "src/photos/a.jpg", "Alt text", "50vw" %}`` — responsive ``<picture>``.

    A tag rather than a global function, so a page's own ``image``
    front-matter key never shadows it: ``{% image image, title %}``.
    """

    tags = {"image"}

    def __init__(self, environment: Environment) -> None:
        super().__init__(environment)
        environment.extend(image_options=None, image_root=Path.cwd())

    def parse(self, parser: Parser) -> nodes.Node:
        lineno = next(parser.stream).lineno
        args = [parser.parse_expression()]
        while parser.stream.skip_if("comma"):
            args.append(parser.parse_expression())
        return nodes.Output([self.call_method("_render", args)], lineno=lineno)

    def _render(self, src: str, alt: str | None = None, sizes: str = "100vw") -> Markup:
        env = self.environment
        return image_shortcode(src, alt, sizes, root=env.image_root, options=env.image_options)


def build_template_environment(
    *,
    includes_dir: Path | None = None,
    input_dir: Path | None = None,
    site_root: Path | None = None,
    image_options: ImageOptions | None = None,
) -> Environment:
    """Build a Jinja2 environment with site templates before packaged defaults.

    Layouts and partials resolve from the site's includes directory first,
    then the input directory (so pages can ``{% include %}`` siblings), and
    finally the packaged ``templates/`` shipped with shutterlog.
    """
    loaders: list[BaseLoader] = []
    search = [str(p) for p in (includes_dir, input_dir) if p is not None]
    if search:
        loaders.append(FileSystemLoader(search))
    loaders.append(PackageLoader("shutterlog", "templates"))

    root = site_root or Path.cwd()
    env = Environment(
        loader=ChoiceLoader(loaders),
        autoescape=True,
        keep_trailing_newline=True,
        extensions=[ImageShortcode] if image_options is not None else [],
    )
    env.filters["readable_date"] = readable_date
    env.filters["random_item"] = random_item
    env.filters["aspect"] = partial(image_aspect, root=root)
    if image_options is not None:
        env.image_options = image_options  # type: ignore[attr-defined]
        env.image_root = root  # type: ignore[attr-defined]
    return env


def image_shortcode(
    src: str,
    alt: str | None = None,
    sizes: str = "100vw",
    *,
    root: Path,
    options: ImageOptions,
) -> Markup:
    """Generate variants for *src* and return the ``<picture>`` markup.

    *src* resolves against the site root. A missing file raises
    ``FileNotFoundError``; an undecodable file or a missing *alt* raises
    :class:`ImageError`.
    """
    if not isinstance(src, str):
        raise ImageError(root, f"image source must be a path string, got {type(src).__name__}")
    path = root / src
    try:
        metadata = generate_image(path, options)
        return generate_html(
            metadata,
            {"alt": alt, "sizes": sizes, "loading": "lazy", "decoding": "async"},
        )
    except FileNotFoundError:
        raise
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise ImageError(path, str(exc)) from exc


def render_string(env: Environment, source: str, context: dict[str, Any]) -> str:
    """Render *source* as a Jinja2 template against *context*."""
    return env.from_string(source).render(**context)


def render_markdown(text: str) -> Markup:
    """Convert markdown to HTML. A fresh converter per call keeps it reentrant."""
    return Markup(markdown.markdown(text, extensions=MARKDOWN_EXTENSIONS))

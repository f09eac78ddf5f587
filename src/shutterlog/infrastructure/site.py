"""Site — the single dependency injected into every service.

The Site owns path resolution, the Jinja2 environment, and the
collection declarations for one project. It holds no page state: every
build re-reads the input tree.
"""

from __future__ import annotations

import logging
from functools import cached_property
from typing import TYPE_CHECKING

from shutterlog.domain.collections import CollectionSpec
from shutterlog.infrastructure.images import ImageOptions
from shutterlog.infrastructure.templates import build_template_environment

if TYPE_CHECKING:
    from pathlib import Path

    from jinja2 import Environment

    from shutterlog.config.settings import SiteSettings

logger = logging.getLogger(__name__)


class Site:
    """Path and template access for one site project."""

    def __init__(self, settings: SiteSettings) -> None:
        self.settings = settings

    @property
    def root(self) -> Path:
        return self.settings.site_root

    @property
    def input_dir(self) -> Path:
        return self.settings.input_dir

    @property
    def output_dir(self) -> Path:
        return self.settings.output_dir

    @property
    def includes_dir(self) -> Path:
        return self.settings.includes_dir

    @property
    def data_dir(self) -> Path:
        return self.settings.data_dir

    @cached_property
    def image_options(self) -> ImageOptions:
        return ImageOptions.from_config(self.settings.images, self.output_dir)

    @cached_property
    def template_env(self) -> Environment:
        """Jinja2 environment (created lazily on first access)."""
        logger.debug("Building template environment for %s", self.input_dir)
        return build_template_environment(
            includes_dir=self.includes_dir,
            input_dir=self.input_dir,
            site_root=self.root,
            image_options=self.image_options,
        )

    @property
    def collection_specs(self) -> list[CollectionSpec]:
        return [
            CollectionSpec(name=c.name, pattern=c.pattern, kind=c.kind)
            for c in self.settings.collections
        ]

    def passthrough_sources(self) -> list[Path]:
        """Configured passthrough paths, resolved against the input dir."""
        return [self.input_dir / p for p in self.settings.passthrough.paths]

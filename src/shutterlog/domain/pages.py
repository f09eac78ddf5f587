"""Page — one template file as seen by the renderer and by collections."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from markupsafe import Markup

if TYPE_CHECKING:
    from pathlib import Path

    from shutterlog.domain.content import PageModel


@dataclass(eq=False)
class Page:
    """A parsed template plus where it is written.

    ``content`` starts empty and is filled with the rendered body (before
    layouts) so listing pages can embed other pages' content.
    ``output_path`` is None for pages with ``permalink: false``.
    """

    input_path: Path
    rel_path: Path
    model: PageModel
    body: str
    output_path: Path | None
    url: str | None
    content: Markup = field(default_factory=Markup)

    @property
    def data(self) -> dict[str, Any]:
        return self.model.template_data()

    @property
    def title(self) -> str | None:
        return self.model.title

    @property
    def date(self) -> dt.date | dt.datetime | None:
        return self.model.date

    @property
    def tags(self) -> list[str]:
        return self.model.tags

    @property
    def is_markdown(self) -> bool:
        return self.input_path.suffix == ".md"

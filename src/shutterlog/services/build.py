"""BuildService — render the input tree into the output directory.

Build order:

1. passthrough copy (byte-for-byte)
2. global data from ``_data/``
3. page discovery; files matched by a collection use that collection's model
4. collections: named (reversed enumeration), ``all``, and one per tag
5. render every page body, then wrap bodies in layouts and write

Bodies are rendered for all pages before any layout runs, collection
members first, so listing templates can embed ``post.content`` of any
collection member.
"""

from __future__ import annotations

import logging
import shutil
import time
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

from jinja2 import TemplateError
from markupsafe import Markup
from ruamel.yaml.error import YAMLError

from shutterlog.domain.collections import build_collection, group_by_tag
from shutterlog.domain.content import PageModel, get_content_model, parse_frontmatter
from shutterlog.domain.errors import (
    ContentError,
    EmptySequenceError,
    ImageError,
    InvalidDateError,
    OutputConflictError,
)
from shutterlog.domain.pages import Page
from shutterlog.infrastructure.data import load_global_data
from shutterlog.infrastructure.filesystem import (
    copy_passthrough,
    find_content_files,
    find_templates,
    resolve_output_path,
    write_output,
)
from shutterlog.infrastructure.templates import render_markdown, render_string
from shutterlog.services.base import BaseService
from shutterlog.services.result import ServiceResult

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

logger = logging.getLogger(__name__)


class BuildService(BaseService):
    """Generate the static site for a :class:`Site`."""

    def build(
        self,
        *,
        clean: bool = False,
        enumerate_files: Callable[[Path, str], list[Path]] = find_content_files,
    ) -> ServiceResult:
        """Run a full one-shot build.

        Args:
            clean: Remove the output directory first.
            enumerate_files: Lists a collection's files in enumeration order;
                the collection is its reverse.
        """
        site = self._site
        started = time.perf_counter()
        warnings: list[str] = []

        if clean:
            cleaned = self._clean_output()
            if cleaned is not None:
                return cleaned

        try:
            site.output_dir.mkdir(parents=True, exist_ok=True)
            passthrough = self._copy_passthrough(warnings)
            global_data = load_global_data(site.data_dir)
            pages, members = self._load_pages(enumerate_files)
            collections = self._build_collections(pages, members)
            written = self._render_pages(pages, members, collections, global_data)
        except ContentError as exc:
            return _failure("INVALID_CONTENT", exc.message, path=str(exc.path))
        except OutputConflictError as exc:
            return _failure(
                "OUTPUT_CONFLICT",
                str(exc),
                output=str(exc.output),
                sources=[str(s) for s in exc.sources],
            )
        except TemplateError as exc:
            return _failure("TEMPLATE_ERROR", str(exc), template=getattr(exc, "filename", None))
        except FileNotFoundError as exc:
            return _failure("MISSING_FILE", str(exc), path=exc.filename)
        except EmptySequenceError as exc:
            return _failure("EMPTY_SEQUENCE", str(exc))
        except ImageError as exc:
            return _failure("IMAGE_ERROR", exc.message, src=str(exc.src))

        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.info("Built %d pages in %.2f ms", written, elapsed_ms)
        return ServiceResult(
            ok=True,
            op="build",
            data={
                "output_dir": str(site.output_dir),
                "pages": written,
                "passthrough": passthrough,
                "collections": {name: len(items) for name, items in collections.items()},
            },
            warnings=warnings,
            meta={"duration_ms": elapsed_ms},
        )

    # --- Steps ---

    def _clean_output(self) -> ServiceResult | None:
        """Remove the output dir, refusing when it would take sources with it."""
        site = self._site
        output = site.output_dir.resolve()
        protected = (site.root.resolve(), site.input_dir.resolve())
        if any(p.is_relative_to(output) for p in protected):
            return _failure(
                "UNSAFE_CLEAN",
                f"Refusing to clean {output}: it contains site sources",
                output_dir=str(output),
            )
        if output.exists():
            logger.debug("Removing output dir %s", output)
            shutil.rmtree(output)
        return None

    def _copy_passthrough(self, warnings: list[str]) -> int:
        site = self._site
        count = 0
        for source in site.passthrough_sources():
            if not source.exists():
                warnings.append(f"Passthrough path not found: {source.relative_to(site.root)}")
                continue
            dest = site.output_dir / source.relative_to(site.input_dir)
            count += copy_passthrough(source, dest)
        logger.debug("Copied %d passthrough files", count)
        return count

    def _load_pages(
        self,
        enumerate_files: Callable[[Path, str], list[Path]],
    ) -> tuple[list[Page], dict[str, list[Page]]]:
        """Parse every template once; return all pages and collection members.

        Collection members keep *enumerate_files* order here; reversal is
        applied when collections are built.
        """
        site = self._site
        kinds: dict[Path, str] = {}
        matched: dict[str, list[Path]] = {}
        for spec in site.collection_specs:
            paths = enumerate_files(site.input_dir, spec.pattern)
            matched[spec.name] = paths
            for path in paths:
                kinds.setdefault(path.resolve(), spec.kind)

        skip = frozenset({site.includes_dir, site.data_dir})
        candidates = {p.resolve(): p for p in find_templates(site.input_dir, skip=skip)}
        # Collection members are pages even where discovery skips them (`_draft.md`).
        for paths in matched.values():
            for path in paths:
                candidates.setdefault(path.resolve(), path)
        templates = sorted(candidates.values())
        by_path: dict[Path, Page] = {}
        seen_outputs: dict[Path, Path] = {}
        for path in templates:
            model_cls = get_content_model(kinds.get(path.resolve(), "page"))
            page = self._load_page(path, model_cls)
            if page.output_path is not None:
                first = seen_outputs.setdefault(page.output_path, path)
                if first != path:
                    raise OutputConflictError(page.output_path, first, path)
            by_path[path.resolve()] = page

        members: dict[str, list[Page]] = {}
        for spec in site.collection_specs:
            members[spec.name] = [by_path[p.resolve()] for p in matched[spec.name]]
        return list(by_path.values()), members

    def _load_page(self, path: Path, model_cls: type[PageModel]) -> Page:
        site = self._site
        model, body = model_cls.from_file(path)
        rel = path.relative_to(site.input_dir)
        permalink = model.permalink
        if permalink is False:
            return Page(path, rel, model, body, output_path=None, url=None)
        try:
            output_path, url = resolve_output_path(
                site.output_dir,
                rel,
                permalink=permalink if isinstance(permalink, str) else None,
            )
        except ValueError as exc:
            raise ContentError(path, str(exc)) from exc
        return Page(path, rel, model, body, output_path=output_path, url=url)

    def _build_collections(
        self,
        pages: list[Page],
        members: dict[str, list[Page]],
    ) -> dict[str, list[Page]]:
        collections: dict[str, list[Page]] = group_by_tag(pages, lambda p: p.tags)
        collections["all"] = list(pages)
        for name, items in members.items():
            if name in collections:
                logger.debug("Collection %r overrides a tag collection of the same name", name)
            collections[name] = build_collection(items)
        return collections

    def _render_pages(
        self,
        pages: list[Page],
        members: dict[str, list[Page]],
        collections: dict[str, list[Page]],
        global_data: dict[str, Any],
    ) -> int:
        env = self._site.template_env
        base_context = {**global_data, "collections": collections}

        # Collection members first, so listing pages see their content.
        listed = {id(p) for items in members.values() for p in items}
        for page in sorted(pages, key=lambda p: id(p) not in listed):
            context = self._page_context(page, base_context)
            with _page_errors(page):
                rendered = render_string(env, page.body, context)
            page.content = render_markdown(rendered) if page.is_markdown else Markup(rendered)

        written = 0
        for page in pages:
            if page.output_path is None:
                continue
            context = self._page_context(page, base_context)
            with _page_errors(page):
                html = self._apply_layouts(page, context)
            write_output(page.output_path, html)
            logger.debug("Wrote %s -> %s", page.rel_path, page.output_path)
            written += 1
        return written

    def _page_context(self, page: Page, base_context: dict[str, Any]) -> dict[str, Any]:
        return {**base_context, **page.data, "page": page}

    def _apply_layouts(self, page: Page, context: dict[str, Any]) -> str:
        """Wrap the page content in its layout chain.

        A layout may declare its own ``layout`` in front matter. Layout
        front-matter keys fill gaps in the context; page keys win.
        """
        env = self._site.template_env
        content: str = page.content
        layout = page.model.layout
        seen: list[str] = []
        while layout:
            if layout in seen:
                msg = f"layout cycle: {' -> '.join([*seen, layout])}"
                raise ContentError(page.input_path, msg)
            seen.append(layout)
            source, filename, _uptodate = env.loader.get_source(env, layout)
            try:
                layout_fm, layout_body = parse_frontmatter(source)
            except YAMLError as exc:
                raise ContentError(Path(filename or layout), f"malformed front matter: {exc}") from exc
            next_layout = layout_fm.pop("layout", None)
            context = {**layout_fm, **context, "content": Markup(content)}
            content = render_string(env, layout_body, context)
            layout = next_layout
        return content


@contextmanager
def _page_errors(page: Page) -> Iterator[None]:
    """Attribute a bad date value to the page whose render hit it."""
    try:
        yield
    except InvalidDateError as exc:
        raise ContentError(page.input_path, f"bad date: {exc}") from exc


def _failure(code: str, message: str, **detail: Any) -> ServiceResult:
    logger.error("Build failed (%s): %s", code, message)
    return ServiceResult.failure("build", code, message, **detail)

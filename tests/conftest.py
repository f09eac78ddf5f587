"""Shared pytest fixtures and test helpers for shutterlog tests."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner
from PIL import Image

from shutterlog.config.settings import SiteSettings
from shutterlog.infrastructure.site import Site


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's SHUTTERLOG_* environment out of the tests."""
    for var in ("SHUTTERLOG_CONFIG", "SHUTTERLOG_DIRS__OUTPUT", "SHUTTERLOG_DIRS__INPUT"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """Temporary site project with the default ``src/`` layout.

    This is the single source of truth for the site directory layout.
    All site-related fixtures build on this.
    """
    src = tmp_path / "src"
    for sub in ("posts", "photos", "css", "_includes", "_data"):
        (src / sub).mkdir(parents=True)
    (src / "css" / "site.css").write_text("body { margin: 0; }\n", encoding="utf-8")
    (src / "_includes" / "post.html").write_text(
        "<article><h1>{{ title }}</h1>"
        "<time>{{ date | readable_date }}</time>{{ content }}</article>\n",
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture
def site(site_root: Path) -> Site:
    """Site bound to the temporary project."""
    return Site(SiteSettings.from_cli(site_root=site_root))


@pytest.fixture
def _isolated_site(site_root: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Change CWD to the temp site root so the CLI builds it.

    Use via ``@pytest.mark.usefixtures("_isolated_site")`` on command test
    classes.
    """
    monkeypatch.chdir(site_root)
    yield


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def write_content(path: Path, frontmatter: str, body: str = "") -> Path:
    """Write a markdown file with a raw YAML front-matter block."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"---\n{frontmatter.strip()}\n---\n{body}", encoding="utf-8")
    return path


def write_post(
    site_root: Path,
    slug: str,
    title: str,
    date: str = "2024-01-01",
    **extra: str,
) -> Path:
    """Write ``src/posts/<slug>.md`` using the ``post.html`` layout."""
    lines = [f"title: {title}", f"date: {date}", "layout: post.html"]
    lines.extend(f"{key}: {value}" for key, value in extra.items())
    path = site_root / "src" / "posts" / f"{slug}.md"
    return write_content(path, "\n".join(lines), f"Body of {title}.\n")


def make_image(path: Path, size: tuple[int, int], fmt: str = "JPEG") -> Path:
    """Write a solid-color test image of *size* pixels."""
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color=(200, 120, 40)).save(path, fmt)
    return path

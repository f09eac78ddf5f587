"""Filesystem operations for site content.

INVARIANT: Files are truth. Every build re-derives pages and collections
from the input tree; nothing is cached between builds except generated
image variants, which are keyed by content hash.
"""

from __future__ import annotations

import shutil
from pathlib import Path

TEMPLATE_SUFFIXES = frozenset({".md", ".html", ".j2"})

# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


def find_content_files(input_dir: Path, pattern: str) -> list[Path]:
    """List files under *input_dir* matching *pattern*, sorted by path.

    This is the enumeration order collections are derived from.
    """
    return sorted(p for p in input_dir.glob(pattern) if p.is_file())


def find_templates(input_dir: Path, *, skip: frozenset[Path] = frozenset()) -> list[Path]:
    """Discover every renderable template under *input_dir*.

    Skips the directories in *skip* (includes, data) and any path with a
    component starting with ``.`` or ``_``.
    """
    if not input_dir.is_dir():
        return []
    resolved_skip = {s.resolve() for s in skip}
    results: list[Path] = []
    for path in input_dir.rglob("*"):
        if not path.is_file() or path.suffix not in TEMPLATE_SUFFIXES:
            continue
        rel_parts = path.relative_to(input_dir).parts
        if any(part.startswith((".", "_")) for part in rel_parts):
            continue
        if any(path.resolve().is_relative_to(s) for s in resolved_skip):
            continue
        results.append(path)
    return sorted(results)


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def copy_passthrough(source: Path, dest: Path) -> int:
    """Copy a file or directory tree byte-for-byte, returning the file count."""
    if source.is_dir():
        count = 0
        for path in source.rglob("*"):
            if path.is_file():
                target = dest / path.relative_to(source)
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(path, target)
                count += 1
        return count
    dest.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source, dest)
    return 1


def write_output(path: Path, text: str) -> None:
    """Write a rendered page, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def resolve_output_path(
    output_dir: Path,
    rel_path: Path,
    *,
    permalink: str | None = None,
) -> tuple[Path, str]:
    """Resolve where a page is written and the URL it is served from.

    - explicit *permalink*: written there; a trailing ``/`` means
      ``<permalink>/index.html``
    - ``name.ext.j2`` (ext other than html): ``<dir>/name.ext``
    - ``index.*``: ``<dir>/index.html``
    - otherwise: ``<dir>/<stem>/index.html``
    """
    if permalink:
        cleaned = permalink.lstrip("/")
        url = "/" + cleaned
        if not cleaned or cleaned.endswith("/"):
            rel_out = Path(cleaned) / "index.html"
        else:
            rel_out = Path(cleaned)
    else:
        # "feed.xml.j2" keeps its inner extension and is written as-is.
        name = Path(rel_path.stem)
        is_j2 = rel_path.suffix == ".j2"
        base = name.stem if is_j2 and name.suffix == ".html" else name.name
        if is_j2 and name.suffix not in ("", ".html"):
            rel_out = rel_path.parent / name
            url = "/" + rel_out.as_posix()
        elif base == "index":
            rel_out = rel_path.parent / "index.html"
            url = _dir_url(rel_path.parent)
        else:
            rel_out = rel_path.parent / base / "index.html"
            url = _dir_url(rel_path.parent / base)

    result = output_dir / rel_out
    # Guard against path traversal via a crafted permalink
    if not result.resolve().is_relative_to(output_dir.resolve()):
        msg = f"Path escapes output dir: {result}"
        raise ValueError(msg)
    return result, url


def _dir_url(rel_dir: Path) -> str:
    parts = [p for p in rel_dir.parts if p not in ("", ".")]
    if not parts:
        return "/"
    return "/" + "/".join(parts) + "/"

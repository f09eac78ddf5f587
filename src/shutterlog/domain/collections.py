"""Collections — ordered, derived lists of pages for listing templates.

INVARIANT: A named collection is the reverse of the enumeration order of
its matching files. It is not a date sort; a post dated last year whose
file lists last still appears first.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class CollectionSpec:
    """A named glob (relative to the input dir) and the model its files use."""

    name: str
    pattern: str
    kind: str = "page"


def build_collection(items: Sequence[T]) -> list[T]:
    """Return *items* in reverse enumeration order.

    No deduplication and no sort key: ``len(result) == len(items)`` and
    ``result[i] is items[-1 - i]``.
    """
    return list(reversed(items))


def group_by_tag(items: Sequence[T], tags_of: Callable[[T], Sequence[str]]) -> dict[str, list[T]]:
    """Bucket *items* per tag, each bucket reversed like a named collection."""
    buckets: dict[str, list[T]] = {}
    for item in items:
        for tag in tags_of(item):
            buckets.setdefault(tag, []).append(item)
    return {tag: build_collection(bucket) for tag, bucket in buckets.items()}

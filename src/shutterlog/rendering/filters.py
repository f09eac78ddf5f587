"""Template filters — pure functions registered on the Jinja2 environment.

Filters must stay side-effect free: pages may be rendered in any order
and a filter may run many times for the same value.
"""

from __future__ import annotations

import datetime as dt
import random
from collections.abc import Sequence
from typing import TypeVar

from shutterlog.domain.errors import EmptySequenceError, InvalidDateError

T = TypeVar("T")


def to_utc(value: dt.date | dt.datetime | str) -> dt.date:
    """Normalize a front-matter date value to a UTC calendar date.

    Aware datetimes are converted to UTC; naive datetimes are read as UTC
    already. Plain dates carry no zone and pass through unchanged.

    Raises:
        InvalidDateError: If *value* is missing or not a date.
    """
    if isinstance(value, str):
        try:
            value = dt.datetime.fromisoformat(value.strip())
        except ValueError as exc:
            msg = f"not an ISO-8601 date: {value!r}"
            raise InvalidDateError(msg) from exc
    if isinstance(value, dt.datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=dt.UTC).date()
        return value.astimezone(dt.UTC).date()
    if isinstance(value, dt.date):
        return value
    msg = f"expected a date, got {type(value).__name__}"
    raise InvalidDateError(msg)


def readable_date(value: dt.date | dt.datetime | str) -> str:
    """Format a date as ``yyyy-MM-dd`` in UTC.

    Examples:
        >>> readable_date(dt.date(2024, 3, 9))
        '2024-03-09'
    """
    return to_utc(value).isoformat()


def random_item(items: Sequence[T], rng: random.Random | None = None) -> T:
    """Pick one element of *items* uniformly at random.

    Raises:
        EmptySequenceError: If *items* is empty.
    """
    if len(items) == 0:
        msg = "random_item needs a non-empty sequence"
        raise EmptySequenceError(msg)
    return (rng or random).choice(items)

"""Tests for template filters."""

from __future__ import annotations

import datetime as dt
import random
import time

import pytest

from shutterlog.domain.errors import EmptySequenceError, InvalidDateError
from shutterlog.rendering.filters import random_item, readable_date


class TestReadableDate:
    def test_plain_date(self) -> None:
        assert readable_date(dt.date(2024, 3, 9)) == "2024-03-09"

    def test_naive_datetime_read_as_utc(self) -> None:
        assert readable_date(dt.datetime(2024, 12, 31, 23, 30)) == "2024-12-31"

    def test_aware_datetime_normalized_to_utc(self) -> None:
        tz = dt.timezone(dt.timedelta(hours=5))
        # 02:00 at UTC+5 is 21:00 the previous day in UTC.
        assert readable_date(dt.datetime(2024, 1, 1, 2, 0, tzinfo=tz)) == "2023-12-31"

    def test_iso_string(self) -> None:
        assert readable_date("2024-06-01T23:00:00-02:00") == "2024-06-02"
        assert readable_date("2024-06-01") == "2024-06-01"

    def test_fixed_width(self) -> None:
        assert len(readable_date(dt.date(5, 1, 2))) == 10

    @pytest.mark.skipif(not hasattr(time, "tzset"), reason="needs time.tzset")
    def test_independent_of_process_timezone(self, monkeypatch: pytest.MonkeyPatch) -> None:
        instant = dt.datetime(2024, 7, 1, 23, 45, tzinfo=dt.UTC)
        results = []
        for zone in ("UTC", "Pacific/Auckland", "America/Los_Angeles"):
            monkeypatch.setenv("TZ", zone)
            time.tzset()
            results.append(readable_date(instant))
            results.append(readable_date(instant.replace(tzinfo=None)))
        monkeypatch.delenv("TZ", raising=False)
        time.tzset()
        assert set(results) == {"2024-07-01"}

    @pytest.mark.parametrize("value", [None, "", "last tuesday", 20240101])
    def test_non_dates_raise(self, value: object) -> None:
        with pytest.raises(InvalidDateError):
            readable_date(value)  # type: ignore[arg-type]


class TestRandomItem:
    def test_returns_member(self) -> None:
        items = ["a", "b", "c"]
        assert random_item(items) in items

    def test_single_item(self) -> None:
        assert random_item([42]) == 42

    def test_seeded_rng_is_deterministic(self) -> None:
        items = list(range(100))
        first = random_item(items, random.Random(7))
        assert random_item(items, random.Random(7)) == first

    def test_covers_all_elements(self) -> None:
        rng = random.Random(0)
        seen = {random_item(["x", "y", "z"], rng) for _ in range(200)}
        assert seen == {"x", "y", "z"}

    def test_empty_raises(self) -> None:
        with pytest.raises(EmptySequenceError):
            random_item([])

    def test_empty_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            random_item(())

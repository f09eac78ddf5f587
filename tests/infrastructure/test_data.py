"""Tests for global data loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from shutterlog.domain.errors import ContentError
from shutterlog.infrastructure.data import load_global_data


class TestLoadGlobalData:
    def test_json_and_yaml_keyed_by_stem(self, tmp_path: Path) -> None:
        (tmp_path / "site.json").write_text('{"title": "Field Notes"}', encoding="utf-8")
        (tmp_path / "nav.yaml").write_text("- home\n- photos\n", encoding="utf-8")
        (tmp_path / "ignored.txt").write_text("x", encoding="utf-8")

        data = load_global_data(tmp_path)
        assert data == {"nav": ["home", "photos"], "site": {"title": "Field Notes"}}

    def test_missing_dir(self, tmp_path: Path) -> None:
        assert load_global_data(tmp_path / "nope") == {}

    def test_invalid_json(self, tmp_path: Path) -> None:
        bad = tmp_path / "site.json"
        bad.write_text("{nope", encoding="utf-8")
        with pytest.raises(ContentError) as excinfo:
            load_global_data(tmp_path)
        assert excinfo.value.path == bad

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        (tmp_path / "nav.yml").write_text("key: [unclosed\n", encoding="utf-8")
        with pytest.raises(ContentError, match="invalid data file"):
            load_global_data(tmp_path)

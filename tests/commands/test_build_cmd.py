"""Tests for the build command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from shutterlog.cli import cli
from tests.conftest import write_content, write_post


@pytest.mark.usefixtures("_isolated_site")
class TestBuildCommand:
    def test_build_writes_site(self, cli_runner: CliRunner, site_root: Path) -> None:
        write_post(site_root, "hello", "Hello")
        result = cli_runner.invoke(cli, ["build"])
        assert result.exit_code == 0, result.output
        assert "OK" in result.output
        page = site_root / "_site" / "posts" / "hello" / "index.html"
        assert "<h1>Hello</h1>" in page.read_text(encoding="utf-8")
        assert (site_root / "_site" / "css" / "site.css").is_file()

    def test_json_summary(self, cli_runner: CliRunner, site_root: Path) -> None:
        write_post(site_root, "a", "A")
        write_post(site_root, "b", "B")
        result = cli_runner.invoke(cli, ["--json", "build"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["op"] == "build"
        assert data["data"]["collections"]["posts"] == 2

    def test_quiet(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "build"])
        assert result.exit_code == 0
        assert result.output.strip() == "OK: build"

    def test_output_override(self, cli_runner: CliRunner, site_root: Path) -> None:
        result = cli_runner.invoke(cli, ["build", "--output", "public"])
        assert result.exit_code == 0, result.output
        assert (site_root / "public" / "css" / "site.css").is_file()
        assert not (site_root / "_site").exists()

    def test_clean_removes_stale_files(self, cli_runner: CliRunner, site_root: Path) -> None:
        stale = site_root / "_site" / "stale.html"
        stale.parent.mkdir()
        stale.write_text("old", encoding="utf-8")
        result = cli_runner.invoke(cli, ["build", "--clean"])
        assert result.exit_code == 0, result.output
        assert not stale.exists()

    def test_invalid_post_exits_1(self, cli_runner: CliRunner, site_root: Path) -> None:
        write_content(site_root / "src" / "posts" / "bad.md", "title: No date")
        result = cli_runner.invoke(cli, ["build"])
        assert result.exit_code == 1
        assert "INVALID_CONTENT" in result.output

    def test_config_file_dirs(self, cli_runner: CliRunner, site_root: Path) -> None:
        (site_root / "shutterlog.toml").write_text('[dirs]\noutput = "dist"\n')
        result = cli_runner.invoke(cli, ["build"])
        assert result.exit_code == 0, result.output
        assert (site_root / "dist" / "css" / "site.css").is_file()

    def test_examples(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["build", "--examples"])
        assert result.exit_code == 0
        assert "shutterlog build --clean" in result.output

"""Tests for SiteSettings — unified settings with TOML source."""

from pathlib import Path

import click
import pytest

from shutterlog.config.settings import SiteSettings


class TestSiteSettingsDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = SiteSettings.from_cli(site_root=tmp_path)
        assert settings.site_root == tmp_path
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.input_dir == tmp_path / "src"
        assert settings.output_dir == tmp_path / "_site"
        assert settings.includes_dir == tmp_path / "src" / "_includes"
        assert settings.data_dir == tmp_path / "src" / "_data"
        assert settings.passthrough.paths == ["css", "photos"]
        assert settings.images.widths == [600, 1200, 1800]
        assert settings.images.formats == ["webp", "jpeg"]
        assert [c.name for c in settings.collections] == ["posts", "photos"]
        assert settings.serve.port == 8080

    def test_frozen(self, tmp_path: Path) -> None:
        settings = SiteSettings.from_cli(site_root=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "shutterlog.toml").write_text(
            '[dirs]\noutput = "public"\n[images]\nwidths = [400]\n'
        )
        settings = SiteSettings.from_cli(site_root=tmp_path)
        assert settings.output_dir == tmp_path / "public"
        assert settings.dirs.input == "src"
        assert settings.images.widths == [400]
        assert settings.images.quality == 85

    def test_collections_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "shutterlog.toml").write_text(
            '[[collections]]\nname = "notes"\npattern = "notes/*.md"\n'
        )
        settings = SiteSettings.from_cli(site_root=tmp_path)
        assert len(settings.collections) == 1
        assert settings.collections[0].name == "notes"
        assert settings.collections[0].kind == "page"

    def test_site_root_is_config_parent(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "shutterlog.toml").write_text("")
        nested = tmp_path / "src" / "posts"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        settings = SiteSettings.from_cli()
        assert settings.site_root == tmp_path
        assert settings.config_path == tmp_path / "shutterlog.toml"

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "conf" / "site.toml"
        custom.parent.mkdir()
        custom.write_text('[serve]\nport = 9000\n')
        settings = SiteSettings.from_cli(config_path=str(custom), site_root=tmp_path)
        assert settings.serve.port == 9000
        assert settings.config_path == custom

    def test_invalid_toml_is_click_error(self, tmp_path: Path) -> None:
        (tmp_path / "shutterlog.toml").write_text("[dirs\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            SiteSettings.from_cli(site_root=tmp_path)


class TestPrecedence:
    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "shutterlog.toml").write_text("[serve]\nport = 9000\n")
        monkeypatch.setenv("SHUTTERLOG_SERVE__PORT", "9100")
        settings = SiteSettings.from_cli(site_root=tmp_path)
        assert settings.serve.port == 9100

    def test_cli_flags_override_env(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SHUTTERLOG_QUIET", "false")
        settings = SiteSettings.from_cli(site_root=tmp_path, quiet=True, verbose=True)
        assert settings.quiet is True
        assert settings.verbose is True

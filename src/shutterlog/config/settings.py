"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``SHUTTERLOG_*`` prefix
  3. TOML file    — ``shutterlog.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the ``find_config`` walk-up discovery from
:mod:`shutterlog.config.discovery`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from shutterlog.config.discovery import find_config
from shutterlog.config.models import (
    CollectionConfig,
    DirsConfig,
    ImagesConfig,
    PassthroughConfig,
    ServeConfig,
    default_collections,
)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``shutterlog.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class SiteSettings(BaseSettings):
    """Unified settings for the shutterlog CLI.

    Stored on the :class:`AppContext` at the CLI root level.

    Attributes:
        site_root: Resolved project directory (parent of ``shutterlog.toml``,
            or CWD if no config found). All ``[dirs]`` paths and image
            shortcode sources resolve against it.
        config_path: The TOML file in effect, or None.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "SHUTTERLOG_",
        "env_nested_delimiter": "__",
    }

    site_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    dirs: DirsConfig = Field(default_factory=DirsConfig)
    passthrough: PassthroughConfig = Field(default_factory=PassthroughConfig)
    images: ImagesConfig = Field(default_factory=ImagesConfig)
    collections: list[CollectionConfig] = Field(default_factory=default_collections)
    serve: ServeConfig = Field(default_factory=ServeConfig)

    @property
    def input_dir(self) -> Path:
        return self.site_root / self.dirs.input

    @property
    def output_dir(self) -> Path:
        return self.site_root / self.dirs.output

    @property
    def includes_dir(self) -> Path:
        return self.input_dir / self.dirs.includes

    @property
    def data_dir(self) -> Path:
        return self.input_dir / self.dirs.data

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        site_root: Path | None = None,
        **cli_flags: Any,
    ) -> SiteSettings:
        """Construct settings from CLI invocation.

        Discovers ``shutterlog.toml`` via walk-up (or explicit *config_path*),
        resolves *site_root* from the config file's parent directory,
        and merges CLI flags as highest-priority overrides.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(site_root)

        resolved_root = site_root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(
                site_root=resolved_root,
                config_path=toml_path,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None

"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``PLATSTATE_*`` prefix, ``__`` between nested fields
  3. TOML file    — ``platstate.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

The TOML file is read with pydantic-settings' own ``TomlConfigSettingsSource``;
which file to read is decided per call by :meth:`PlatSettings.from_cli`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from platstate.config.discovery import find_config
from platstate.config.models import DebugConfig, HalConfig, RouteConfig

# The TOML path chosen by from_cli(), visible to settings_customise_sources().
_active = threading.local()


class PlatSettings(BaseSettings):
    """Settings for the engine and the CLI.

    Injected into :class:`~platstate.services.engine.PlatformStateEngine`
    at construction; nothing in the engine reads process-wide state.

    Attributes:
        config_path: The ``platstate.toml`` in use, or None.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        env_prefix="PLATSTATE_",
        env_nested_delimiter="__",
    )

    config_path: Path | None = None

    json_output: bool = False
    verbose: bool = False
    log_json: bool = False

    hal: HalConfig = Field(default_factory=HalConfig)
    route: RouteConfig = Field(default_factory=RouteConfig)
    debug: DebugConfig = Field(default_factory=DebugConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [init_settings, env_settings]
        toml_path: Path | None = getattr(_active, "toml_path", None)
        if toml_path is not None:
            sources.append(TomlConfigSettingsSource(settings_cls, toml_file=toml_path))
        return tuple(sources)

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start: Path | None = None,
        **cli_flags: Any,
    ) -> PlatSettings:
        """Build settings for one CLI invocation.

        An explicit *config_path* wins over walk-up discovery from *start*.
        A missing explicit file is ignored; a malformed one is a usage error.
        """
        if config_path:
            candidate = Path(config_path)
            toml_path = candidate if candidate.is_file() else None
        else:
            toml_path = find_config(start)

        _active.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **cli_flags)
        except tomllib.TOMLDecodeError as exc:
            msg = f"Invalid TOML in {toml_path}: {exc}"
            raise click.ClickException(msg) from exc
        finally:
            _active.toml_path = None

"""TbSettings: the one settings object every command reads.

Sources, strongest first:

1. keyword arguments (the global CLI flags)
2. ``TASKBOARD_*`` environment variables, ``__`` between section and key
3. the discovered ``taskboard.toml``
4. defaults on the section models
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from taskboard.config.discovery import find_config, read_toml
from taskboard.config.models import ArrangeConfig, BoardConfig, LayoutConfig

# Parsed TOML for the TbSettings currently being built by from_cli().
_pending_toml: ContextVar[dict[str, Any] | None] = ContextVar("_pending_toml", default=None)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Feeds an already-parsed ``taskboard.toml`` table into pydantic-settings."""

    def __init__(self, settings_cls: type[BaseSettings], data: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._data = data

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        known = self.settings_cls.model_fields
        return {key: value for key, value in self._data.items() if key in known}


class TbSettings(BaseSettings):
    """Frozen, merged settings stored on the AppContext.

    ``board_root`` is the directory holding the config file (the working
    directory when there is none); the board database lives beneath it.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "TASKBOARD_",
        "env_nested_delimiter": "__",
    }

    board_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    board: BoardConfig = Field(default_factory=BoardConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    arrange: ArrangeConfig = Field(default_factory=ArrangeConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, _pending_toml.get() or {}),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        board_root: Path | None = None,
        **cli_flags: Any,
    ) -> TbSettings:
        """Build settings for one CLI invocation.

        An explicit *config_path* that does not exist is ignored, as if
        no config were present.

        Raises:
            click.ClickException: The config file is not valid TOML.
        """
        if config_path:
            candidate = Path(config_path)
            toml_path = candidate if candidate.is_file() else None
        else:
            toml_path = find_config(board_root)

        try:
            data = read_toml(toml_path)
        except tomllib.TOMLDecodeError as exc:
            raise click.ClickException(f"Invalid TOML in {toml_path}: {exc}") from exc

        if board_root is None:
            board_root = toml_path.parent if toml_path else Path.cwd()

        token = _pending_toml.set(data)
        try:
            return cls(board_root=board_root, config_path=toml_path, **cli_flags)
        finally:
            _pending_toml.reset(token)

"""Tests for TbSettings — unified settings with TOML source."""

from __future__ import annotations

from pathlib import Path

import click
import pytest

from taskboard.config.settings import TbSettings


class TestTbSettingsDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = TbSettings.from_cli(board_root=tmp_path)
        assert settings.board_root == tmp_path
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.board.user == "local"
        assert settings.board.default_graph is None
        assert settings.layout.horizontal_spacing == 300
        assert settings.arrange.max_workers == 8

    def test_frozen(self, tmp_path: Path) -> None:
        settings = TbSettings.from_cli(board_root=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]

    def test_cli_flags(self, tmp_path: Path) -> None:
        settings = TbSettings.from_cli(board_root=tmp_path, json_output=True, verbose=True)
        assert settings.json_output is True
        assert settings.verbose is True


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "taskboard.toml").write_text(
            '[board]\nuser = "alice"\ndefault_graph = "q3"\n[arrange]\nmax_workers = 2\n'
        )
        settings = TbSettings.from_cli(board_root=tmp_path)
        assert settings.board.user == "alice"
        assert settings.board.default_graph == "q3"
        assert settings.arrange.max_workers == 2
        assert settings.layout.start_x == 100  # default preserved

    def test_walk_up_sets_board_root(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "taskboard.toml").write_text('[board]\nuser = "alice"\n')
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        settings = TbSettings.from_cli()
        assert settings.board_root == tmp_path.resolve()
        assert settings.board.user == "alice"

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        cfg = tmp_path / "custom.toml"
        cfg.write_text("[layout]\nvertical_spacing = 100\n")
        settings = TbSettings.from_cli(config_path=str(cfg), board_root=tmp_path)
        assert settings.layout.vertical_spacing == 100
        assert settings.config_path == cfg

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "taskboard.toml").write_text("[board\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            TbSettings.from_cli(board_root=tmp_path)

    def test_invalid_value(self, tmp_path: Path) -> None:
        (tmp_path / "taskboard.toml").write_text("[arrange]\nmax_workers = 0\n")
        with pytest.raises(Exception):
            TbSettings.from_cli(board_root=tmp_path)


class TestEnvOverrides:
    def test_env_beats_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "taskboard.toml").write_text('[board]\nuser = "alice"\n')
        monkeypatch.setenv("TASKBOARD_BOARD__USER", "bob")
        settings = TbSettings.from_cli(board_root=tmp_path)
        assert settings.board.user == "bob"


class TestTomlScope:
    def test_toml_does_not_outlive_from_cli(self, tmp_path: Path) -> None:
        (tmp_path / "taskboard.toml").write_text('[board]\nuser = "alice"\n')
        assert TbSettings.from_cli(board_root=tmp_path).board.user == "alice"
        direct = TbSettings(board_root=tmp_path)
        assert direct.board.user == "local"
        assert direct.config_path is None

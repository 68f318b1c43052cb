"""InitService — board initialization.

Runs before any Store exists, so it is a set of static methods rather
than a :class:`BaseService` subclass.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

from pydantic import ValidationError

from taskboard.config.discovery import CONFIG_FILENAME, load_config
from taskboard.infrastructure.database.engine import db_path_for, init_database
from taskboard.services.result import ServiceResult, fail
from taskboard.services.telemetry import traced

_CONFIG_TEMPLATE = """\
# taskboard configuration

[board]
user = "{user}"
{default_graph_line}

[layout]
node_width = 240
node_height = 200
horizontal_spacing = 300
vertical_spacing = 280
start_x = 100
start_y = 100

[arrange]
max_workers = 8
"""


class InitService:
    """Create ``taskboard.toml`` and the database for a new board."""

    @staticmethod
    @traced
    def init_board(
        path: Path,
        *,
        user: str = "local",
        default_graph: str | None = None,
    ) -> ServiceResult:
        """Initialize a board at *path*.

        An existing config file is left untouched; the database is
        created or upgraded in place. Re-running on a board is safe.
        """
        op = "init_board"
        if path.exists() and not path.is_dir():
            return fail(op, "VALIDATION_FAILED", f"Not a directory: {path}", path=str(path))
        path.mkdir(parents=True, exist_ok=True)

        created: list[str] = []
        warnings: list[str] = []
        config_path = path / CONFIG_FILENAME
        if config_path.exists():
            warnings.append(f"{CONFIG_FILENAME} already exists; left unchanged")
        else:
            default_graph_line = (
                f'default_graph = "{default_graph}"' if default_graph else "# default_graph = ..."
            )
            config_path.write_text(
                _CONFIG_TEMPLATE.format(user=user, default_graph_line=default_graph_line),
                encoding="utf-8",
            )
            created.append(CONFIG_FILENAME)

        try:
            load_config(config_path)
        except (tomllib.TOMLDecodeError, ValidationError) as exc:
            return fail(
                op, "VALIDATION_FAILED", f"Invalid {CONFIG_FILENAME}: {exc}", path=str(config_path)
            )

        db_path = db_path_for(path)
        if not db_path.exists():
            created.append(str(db_path.relative_to(path)))
        engine = init_database(path)
        engine.dispose()

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "board_root": str(path),
                "config_path": str(config_path),
                "db_path": str(db_path),
                "created": created,
            },
            warnings=warnings,
        )

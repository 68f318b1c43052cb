"""Database engine setup for SQLite with WAL mode.

SQLite is the persistence layer: WAL mode so the arrange fan-out can
write positions from worker threads while readers proceed, foreign keys
for link integrity. The DB is stored at
``{board_root}/.taskboard/taskboard.db``.

SQLAlchemy Core (not ORM) is used because taskboard is a short-lived
CLI process with no use for session management or identity maps.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from taskboard.infrastructure.database.schema import metadata

DATA_DIRNAME = ".taskboard"
DB_FILENAME = "taskboard.db"


def db_path_for(board_root: Path) -> Path:
    """Location of the database file for a board root."""
    return board_root / DATA_DIRNAME / DB_FILENAME


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode and foreign keys enabled."""
    engine = create_engine(
        f"sqlite:///{db_path}",
        echo=False,
        connect_args={"timeout": 30, "check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def init_database(board_root: Path) -> Engine:
    """Initialize the taskboard database under *board_root*.

    Creates the ``.taskboard/`` directory and all tables from
    :data:`schema.metadata`. Idempotent: safe to call on an existing
    board.

    Returns the engine ready for use.
    """
    path = db_path_for(board_root)
    path.parent.mkdir(parents=True, exist_ok=True)

    engine = create_db_engine(path)
    metadata.create_all(engine)
    return engine

"""Locating and reading ``taskboard.toml``.

The board root is the nearest directory at or above the working
directory that holds a ``taskboard.toml``, the same way git finds its
repository. ``TASKBOARD_CONFIG`` points at a file directly and disables
the search.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from taskboard.config.models import TbConfig

CONFIG_FILENAME = "taskboard.toml"
CONFIG_ENV_VAR = "TASKBOARD_CONFIG"


def _search_dirs(start: Path | None) -> Iterator[Path]:
    here = (start or Path.cwd()).resolve()
    yield here
    yield from here.parents


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file governing *start* (default: cwd), or None."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    for directory in _search_dirs(start):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def read_toml(path: Path | None) -> dict[str, Any]:
    """Parse *path*; a missing file reads as an empty table.

    Raises:
        tomllib.TOMLDecodeError: The file exists but is not valid TOML.
    """
    if path is None or not path.is_file():
        return {}
    with path.open("rb") as fh:
        return tomllib.load(fh)


def load_config(path: Path | None = None, cwd: Path | None = None) -> TbConfig:
    """Validate the board config at *path*, discovered from *cwd* when omitted."""
    if path is None:
        path = find_config(cwd)
    return TbConfig.model_validate(read_toml(path))

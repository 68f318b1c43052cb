"""Shared pytest fixtures and test helpers for taskboard tests."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from taskboard.config.settings import TbSettings
from taskboard.infrastructure.store import Store
from taskboard.services.telemetry import disable_telemetry


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's TASKBOARD_CONFIG from leaking into tests."""
    monkeypatch.delenv("TASKBOARD_CONFIG", raising=False)


@pytest.fixture(autouse=True)
def _telemetry_off() -> Generator[None]:
    """`-v` CLI runs switch span collection on; switch it back off."""
    yield
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def board_root(tmp_path: Path) -> Path:
    """Temporary board directory.

    This is the single source of truth for the board location. All
    board-related fixtures (store, _isolated_board) build on this.
    """
    return tmp_path


@pytest.fixture
def store(board_root: Path) -> Generator[Store]:
    """Store with an initialized database on a temp directory."""
    settings = TbSettings.from_cli(board_root=board_root)
    s = Store(settings)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def _isolated_board(board_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp board root so the CLI creates an isolated board.

    Use via ``@pytest.mark.usefixtures("_isolated_board")`` on command test
    classes.
    """
    monkeypatch.chdir(board_root)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service test modules)
# ---------------------------------------------------------------------------


def create_graph(store: Store, name: str = "Board", **kwargs: Any) -> dict[str, Any]:
    """Create a graph via GraphService, asserting success."""
    from taskboard.services.graph import GraphService

    result = GraphService(store).create(name, **kwargs)
    assert result.ok, result.error
    return result.data


def create_task(store: Store, graph_id: str, title: str, **kwargs: Any) -> dict[str, Any]:
    """Create a task via TaskService, asserting success."""
    from taskboard.services.task import TaskService

    result = TaskService(store).create(graph_id, title, **kwargs)
    assert result.ok, result.error
    return result.data


def create_link(store: Store, graph_id: str, source: str, target: str) -> dict[str, Any]:
    """Create a link via LinkService, asserting success."""
    from taskboard.services.link import LinkService

    result = LinkService(store).create(graph_id, source, target)
    assert result.ok, result.error
    return result.data


def create_workflow(store: Store, graph_id: str, label: str, **kwargs: Any) -> dict[str, Any]:
    """Create a workflow via WorkflowService, asserting success."""
    from taskboard.services.workflow import WorkflowService

    result = WorkflowService(store).create(graph_id, label, **kwargs)
    assert result.ok, result.error
    return result.data


def build_board(
    store: Store,
    task_ids: list[str],
    edges: list[tuple[str, str]],
    *,
    graph_id: str = "g1",
) -> str:
    """Create a graph with tasks named by their ids and the given links."""
    create_graph(store, "Board", graph_id=graph_id)
    for task_id in task_ids:
        create_task(store, graph_id, task_id, task_id=task_id)
    for source, target in edges:
        create_link(store, graph_id, source, target)
    return graph_id

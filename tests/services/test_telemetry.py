"""Tests for telemetry primitives — Span, @traced, trace_span."""

from __future__ import annotations

from collections.abc import Generator

import pytest

from taskboard.services.result import ServiceResult
from taskboard.services.telemetry import (
    Span,
    annotate_current,
    disable_telemetry,
    enable_telemetry,
    trace_span,
    traced,
)


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Generator[None]:
    yield
    disable_telemetry()


@traced
def _op() -> ServiceResult:
    with trace_span("inner") as span:
        if span:
            span.annotate("count", 2)
    return ServiceResult(ok=True, op="op")


class TestSpan:
    def test_duration_zero_until_ended(self) -> None:
        span = Span(name="s")
        assert span.duration_ms == 0.0
        span.end()
        assert span.duration_ms >= 0.0

    def test_to_dict_nesting(self) -> None:
        parent = Span(name="p")
        parent.child("c")
        parent.annotate("k", 1)
        d = parent.to_dict()
        assert d["name"] == "p"
        assert d["annotations"] == {"k": 1}
        assert d["children"][0]["name"] == "c"


class TestTraced:
    def test_disabled_leaves_meta_empty(self) -> None:
        assert _op().meta is None

    def test_enabled_injects_span_tree(self) -> None:
        enable_telemetry()
        result = _op()
        assert result.meta is not None
        tree = result.meta["telemetry"]
        assert tree["name"].endswith("_op")
        assert tree["children"][0]["name"] == "inner"
        assert tree["children"][0]["annotations"] == {"count": 2}

    def test_trace_span_without_parent_yields_none(self) -> None:
        enable_telemetry()
        with trace_span("orphan") as span:
            assert span is None

    def test_annotate_current_targets_root_span(self) -> None:
        @traced
        def annotated() -> ServiceResult:
            annotate_current(graph_id="g1", dry_run=True)
            return ServiceResult(ok=True, op="op")

        enable_telemetry()
        tree = annotated().meta["telemetry"]  # type: ignore[index]
        assert tree["annotations"] == {"graph_id": "g1", "dry_run": True}

    def test_annotate_current_is_noop_when_disabled(self) -> None:
        annotate_current(graph_id="g1")

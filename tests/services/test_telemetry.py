"""Tests for telemetry spans and the @traced decorator."""

from lockshaker.services.result import ServiceResult
from lockshaker.services.telemetry import (
    Span,
    disable_telemetry,
    enable_telemetry,
    trace_span,
    traced,
)


class _Service:
    @traced
    def run(self) -> ServiceResult:
        with trace_span("inner") as span:
            if span:
                span.annotate("items", 3)
        return ServiceResult(ok=True, op="run", meta={"existing": 1})

    @traced
    def plain(self) -> int:
        return 42


class TestSpan:
    def test_duration_zero_until_ended(self) -> None:
        span = Span(name="x")
        assert span.duration_ms == 0.0
        span.end()
        assert span.duration_ms >= 0.0

    def test_to_dict_omits_empty(self) -> None:
        span = Span(name="x")
        span.end()
        assert set(span.to_dict()) == {"name", "duration_ms"}


class TestTraced:
    def test_disabled_by_default(self) -> None:
        result = _Service().run()
        assert result.meta == {"existing": 1}

    def test_trace_span_yields_none_when_disabled(self) -> None:
        with trace_span("x") as span:
            assert span is None

    def test_enabled_injects_tree(self) -> None:
        enable_telemetry()
        try:
            result = _Service().run()
        finally:
            disable_telemetry()

        assert result.meta is not None
        assert result.meta["existing"] == 1
        tree = result.meta["telemetry"]
        assert tree["name"] == "_Service.run"
        assert tree["children"][0]["name"] == "inner"
        assert tree["children"][0]["annotations"] == {"items": 3}

    def test_non_result_passthrough(self) -> None:
        enable_telemetry()
        try:
            assert _Service().plain() == 42
        finally:
            disable_telemetry()

    def test_trace_span_without_parent(self) -> None:
        enable_telemetry()
        try:
            with trace_span("orphan") as span:
                assert span is None
        finally:
            disable_telemetry()

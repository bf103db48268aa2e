"""Tests for metrics helpers."""
from __future__ import annotations

from typing import Any, Dict

from app.observability import metrics
from app.observability import tracing


class _DummyTrace:
    def __init__(self, name: str, metadata: Dict[str, Any]):
        self.name = name
        self.metadata = metadata
        self.ended = False

    def end(self) -> None:
        self.ended = True


class _DummyClient:
    def __init__(self):
        self.traces: list[_DummyTrace] = []

    def trace(self, name: str, metadata: Dict[str, Any] | None = None):
        trace = _DummyTrace(name, metadata or {})
        self.traces.append(trace)
        return trace


def test_log_metric_records_and_closes_trace(monkeypatch) -> None:
    dummy_client = _DummyClient()
    monkeypatch.setattr(tracing, "get_opik_client", lambda: dummy_client)

    metrics.log_metric("plan.validate.tier", 2, metadata={"athlete_id": "abc"})

    assert len(dummy_client.traces) == 1
    recorded = dummy_client.traces[0]
    assert recorded.name == "metric:plan.validate.tier"
    assert recorded.metadata["value"] == 2
    assert recorded.metadata["athlete_id"] == "abc"
    assert recorded.ended is True


def test_log_metric_is_noop_without_client(monkeypatch) -> None:
    monkeypatch.setattr(tracing, "get_opik_client", lambda: None)

    metrics.log_metric("feedback.summary.completion_rate", 80)


def test_trace_attaches_error_and_reraises(monkeypatch) -> None:
    class _ErrorTrace(_DummyTrace):
        def update(self, **kwargs):
            self.metadata["error_info"] = kwargs.get("error_info")

    class _ErrorClient(_DummyClient):
        def trace(self, name: str, metadata=None):
            trace = _ErrorTrace(name, metadata or {})
            self.traces.append(trace)
            return trace

    client = _ErrorClient()
    monkeypatch.setattr(tracing, "get_opik_client", lambda: client)

    try:
        with tracing.trace("plan.submit", athlete_id="a-1"):
            raise RuntimeError("boom")
    except RuntimeError:
        pass
    else:  # pragma: no cover
        raise AssertionError("trace must re-raise")

    recorded = client.traces[0]
    assert recorded.metadata["athlete_id"] == "a-1"
    assert recorded.metadata["error_info"]["message"] == "boom"
    assert recorded.ended is True

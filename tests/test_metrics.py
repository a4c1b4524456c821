"""Tests for request recording."""

import time

import pytest

from endpoint_stubs import Endpoint, MetricsRegistry, Service, Verb
from endpoint_stubs.metrics import EndpointRecording, current_call_site


@pytest.fixture
def service():
    service = Service("docs", "https://api.example.com/v1")
    service.get("show", "documents/:id")
    service.post("create", "documents")
    return service


@pytest.fixture
def registry():
    return MetricsRegistry()


def test_record_creates_bucket_per_endpoint(registry, service):
    """Records are grouped by service and endpoint."""
    show = service.endpoints.find("show")
    create = service.endpoints.find("create")

    registry.record(service, show, object(), "https://api.example.com/v1/documents/1")
    registry.record(service, show, object(), "https://api.example.com/v1/documents/2")
    registry.record(service, create, object(), "https://api.example.com/v1/documents")

    assert len(registry) == 2
    assert [record.uri for record in registry.requests_for("docs", "show")] == [
        "https://api.example.com/v1/documents/1",
        "https://api.example.com/v1/documents/2",
    ]
    assert len(registry.requests_for("docs", "create")) == 1
    assert registry.requests_for("docs", "missing") == []


def test_record_attributes(registry, service):
    """A new record knows its endpoint and has not responded yet."""
    stub = object()
    record = registry.record(service, service.endpoints.find("show"), stub, "https://api.example.com/v1/documents/1")

    assert record.service_id == "docs"
    assert record.endpoint_id == "show"
    assert record.verb is Verb.GET
    assert record.uri_template == "https://api.example.com/v1/documents/:id"
    assert record.stub is stub
    assert record.recorded_at is not None
    assert record.responded_at is None
    assert not record.responded


def test_recorded_from_is_current_test(registry, service):
    """Under pytest the call site is the running test."""
    record = registry.record(service, service.endpoints.find("show"), object(), "uri")

    assert record.recorded_from.endswith("test_metrics.py::test_recorded_from_is_current_test")


def test_current_call_site_outside_pytest(monkeypatch):
    """Without pytest the first caller outside the package is used."""
    monkeypatch.delenv("PYTEST_CURRENT_TEST", raising=False)

    assert "test_metrics.py:" in current_call_site()


def test_find_by_stub(registry, service):
    """Records are found by their stub handle."""
    stub = object()
    record = registry.record(service, service.endpoints.find("show"), stub, "uri")

    assert registry.find_by_stub(stub) is record
    assert registry.find_by_stub(object()) is None


def test_mark_as_responded_once(registry, service):
    """responded_at is set once and never changes afterwards."""
    stub = object()
    record = registry.record(service, service.endpoints.find("show"), stub, "uri")

    assert registry.mark_as_responded(stub) is record
    first = record.responded_at
    assert first is not None

    time.sleep(0.001)
    assert registry.mark_as_responded(stub) is record
    assert record.responded_at == first


def test_mark_as_responded_unknown_stub(registry):
    """Unknown stubs are ignored."""
    assert registry.mark_as_responded(object()) is None


def test_record_mark_reports_transition(service):
    """RequestRecord.mark_as_responded reports whether it changed anything."""
    recording = EndpointRecording(service, Endpoint("show", "get", "documents/:id"))
    record = recording.record(object(), "uri")

    assert record.mark_as_responded() is True
    assert record.mark_as_responded() is False


def test_to_dict(registry, service):
    """Records serialize for debug output."""
    record = registry.record(service, service.endpoints.find("show"), object(), "https://api.example.com/v1/documents/1")

    data = record.to_dict()

    assert data["service_id"] == "docs"
    assert data["endpoint_id"] == "show"
    assert data["verb"] == "GET"
    assert data["responded_at"] is None


def test_reset(registry, service):
    """reset forgets all recordings."""
    registry.record(service, service.endpoints.find("show"), object(), "uri")

    registry.reset()

    assert len(registry) == 0
    assert registry.requests_for("docs", "show") == []

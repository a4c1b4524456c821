"""Pytest configuration for endpoint_stubs tests."""

import pytest

from endpoint_stubs import Configuration, StubSession
from endpoint_stubs.pytest_plugin import stub_session  # noqa: F401


@pytest.fixture
def session():
    """Session with metrics off, regardless of the environment."""
    session = StubSession(Configuration())
    yield session
    session.reset()


@pytest.fixture
def recording_session():
    """Session recording every stub."""
    session = StubSession(Configuration(record_metrics=True))
    yield session
    session.reset()


@pytest.fixture
def docs(session):
    """A docs service with a few endpoints."""
    service = session.register_service("docs", "https://api.example.com/v1")
    service.get("show", "documents/:id")
    service.get("index", "documents")
    service.post("create", "documents")
    return service

"""
Pytest fixtures.

Enable in a conftest.py with:
    pytest_plugins = ["endpoint_stubs.pytest_plugin"]
"""

import pytest

from .session import StubSession


@pytest.fixture
def stub_session():
    """A fresh StubSession, reset after the test."""
    session = StubSession()
    yield session
    session.reset()

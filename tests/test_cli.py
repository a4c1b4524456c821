"""Tests for the endpoint-stubs command line."""

import uuid

import pytest
from click.testing import CliRunner

from endpoint_stubs.cli import cli

TARGET_SOURCE = '''
from endpoint_stubs import Configuration, StubSession

session = StubSession(Configuration())
docs = session.register_service("docs", "https://api.example.com")
docs.get("show", "documents/:id")


def build():
    return session


empty = StubSession(Configuration())
not_a_session = 42
'''


@pytest.fixture
def target(tmp_path, monkeypatch):
    """An importable module defining sessions; returns its name."""
    name = f"stub_target_{uuid.uuid4().hex}"
    (tmp_path / f"{name}.py").write_text(TARGET_SOURCE)
    monkeypatch.syspath_prepend(str(tmp_path))
    return name


def test_show_lists_endpoints(target):
    """show prints services and endpoints."""
    result = CliRunner().invoke(cli, ["show", f"{target}:session"])

    assert result.exit_code == 0
    assert "docs" in result.output
    assert "show" in result.output
    assert "GET" in result.output


def test_show_empty_session(target):
    """show says so when nothing is registered."""
    result = CliRunner().invoke(cli, ["show", f"{target}:empty"])

    assert result.exit_code == 0
    assert "No services registered" in result.output


def test_generate_to_stdout(target):
    """generate prints helpers; callables returning sessions work too."""
    result = CliRunner().invoke(cli, ["generate", f"{target}:build"])

    assert result.exit_code == 0
    assert "def stub_docs_show(session, id, options=None, configure=None):" in result.output


def test_generate_to_file(target, tmp_path):
    """generate --output writes the module."""
    output = tmp_path / "helpers.py"

    result = CliRunner().invoke(cli, ["generate", f"{target}:session", "--output", str(output)])

    assert result.exit_code == 0
    assert "def stub_docs_show" in output.read_text()


@pytest.mark.parametrize("suffix", ["session", ":", ":not_a_session"])
def test_bad_targets(target, suffix):
    """Targets must point at a StubSession."""
    argument = f"{target}{suffix}" if suffix.startswith(":") else suffix

    result = CliRunner().invoke(cli, ["show", argument])

    assert result.exit_code == 2
    assert "TARGET" in result.output


def test_unimportable_module():
    """Unknown modules are reported."""
    result = CliRunner().invoke(cli, ["generate", "no_such_module_here:session"])

    assert result.exit_code == 2
    assert "cannot import" in result.output


def test_generate_reports_helper_name_conflicts(tmp_path, monkeypatch):
    """Conflicting helper names fail with a readable error."""
    name = f"stub_conflict_{uuid.uuid4().hex}"
    (tmp_path / f"{name}.py").write_text(
        "from endpoint_stubs import Configuration, StubSession\n"
        "session = StubSession(Configuration())\n"
        "docs = session.register_service('docs', 'https://api.example.com')\n"
        "docs.get('show-item', 'items/:id')\n"
        "docs.get('show_item', 'items/:id/details')\n"
    )
    monkeypatch.syspath_prepend(str(tmp_path))

    result = CliRunner().invoke(cli, ["generate", f"{name}:session"])

    assert result.exit_code == 1
    assert "stub_docs_show_item" in result.output

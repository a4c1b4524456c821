#!/usr/bin/env python3
"""endpoint-stubs command line."""

import importlib
import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from .codegen import generate_stub_helpers
from .exceptions import HelperNameConflict
from .session import StubSession

console = Console()


def load_session(target: str) -> StubSession:
    """Load a StubSession from "package.module:attribute"."""
    module_name, _, attribute = target.partition(":")
    if not module_name or not attribute:
        raise click.BadParameter("expected module:attribute", param_hint="TARGET")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"cannot import {module_name}: {e}", param_hint="TARGET") from e

    value = getattr(module, attribute, None)
    if callable(value) and not isinstance(value, StubSession):
        value = value()
    if not isinstance(value, StubSession):
        raise click.BadParameter(f"{target} is not a StubSession", param_hint="TARGET")
    return value


@click.group()
@click.option("--log-level", default="WARNING", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]))
def cli(log_level: str):
    """Inspect stub sessions and generate stub helpers"""
    logging.basicConfig(level=log_level, format="%(levelname)s %(name)s: %(message)s")


@cli.command()
@click.argument("target")
def show(target: str):
    """List registered services and endpoints"""
    session = load_session(target)
    services = session.services.values()

    if not services:
        console.print("[yellow]No services registered[/yellow]")
        return

    table = Table(title="Services")
    table.add_column("Service", style="cyan")
    table.add_column("Endpoint", style="magenta")
    table.add_column("Verb", style="green")
    table.add_column("URI template", style="blue")

    for service in services:
        endpoints = service.endpoints.values()
        if not endpoints:
            table.add_row(service.id, "-", "-", service.uri)
        for endpoint in endpoints:
            table.add_row(
                service.id,
                endpoint.id,
                endpoint.verb.value,
                f"{service.uri.rstrip('/')}/{endpoint.uri_template.lstrip('/')}",
            )

    console.print(table)


@cli.command()
@click.argument("target")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Write to file instead of stdout")
@click.option("--service", "service_ids", multiple=True, help="Only these services (repeatable)")
def generate(target: str, output: Optional[Path], service_ids: tuple[str, ...]):
    """Generate stub_<service>_<endpoint> helper functions"""
    session = load_session(target)
    try:
        source = generate_stub_helpers(session.services, service_ids or None)
    except HelperNameConflict as e:
        raise click.ClickException(str(e)) from e

    if output is None:
        click.echo(source, nl=False)
        return

    output.write_text(source)
    console.print(f"[green]✓[/green] Wrote {output}")


if __name__ == "__main__":
    cli()

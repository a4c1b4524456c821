"""Generate per-endpoint stub helper functions as Python source."""

import keyword
import re
from typing import Iterable, Optional

from .endpoint import Endpoint
from .exceptions import HelperNameConflict
from .service import Service

NOT_IDENTIFIER = re.compile(r"\W")
HELPER_ARGUMENTS = ("session", "options", "configure")


def python_name(value: str) -> str:
    name = NOT_IDENTIFIER.sub("_", value)
    if name[:1].isdigit():
        name = f"_{name}"
    if keyword.iskeyword(name):
        name = f"{name}_"
    return name


def helper_name(service: Service, endpoint: Endpoint) -> str:
    return f"stub_{python_name(service.id)}_{python_name(endpoint.id)}"


def argument_names(endpoint: Endpoint) -> list[tuple[str, str]]:
    """Pairs of (route param, helper argument name), all argument names distinct."""
    taken = set(HELPER_ARGUMENTS)
    names = []
    for param in endpoint.route_params:
        name = python_name(param)
        while name in taken:
            name = f"{name}_"
        taken.add(name)
        names.append((param, name))
    return names


def generate_helper(service: Service, endpoint: Endpoint) -> list[str]:
    """Source lines for one helper."""
    params = argument_names(endpoint)
    arguments = "".join(f"{name}, " for _, name in params)
    replacements = ", ".join(f"{param!r}: {name}" for param, name in params)

    return [
        f"def {helper_name(service, endpoint)}(session, {arguments}options=None, configure=None):",
        f'    """{endpoint.verb.value} {service.uri.rstrip("/")}/{endpoint.uri_template.lstrip("/")}"""',
        "    return session.stub(",
        f"        {service.id!r},",
        f"        {endpoint.id!r},",
        f"        {{{replacements}}},",
        "        options=options,",
        "        configure=configure,",
        "    )",
    ]


def generate_stub_helpers(services: Iterable[Service], service_ids: Optional[Iterable[str]] = None) -> str:
    """
    Generate a module with one stub_<service>_<endpoint> function per endpoint.

    Args:
        services: registered services, e.g. session.services
        service_ids: only generate helpers for these services

    Returns:
        Python source text

    Raises:
        HelperNameConflict: when two endpoints would get the same helper name
    """
    wanted = set(service_ids) if service_ids is not None else None
    lines = [
        '"""Stub helpers generated from registered services. Do not edit."""',
        "",
    ]

    generated: dict[str, tuple[str, str]] = {}
    for service in services:
        if wanted is not None and service.id not in wanted:
            continue
        for endpoint in service.endpoints:
            name = helper_name(service, endpoint)
            if name in generated:
                raise HelperNameConflict(name, generated[name], (service.id, endpoint.id))
            generated[name] = (service.id, endpoint.id)
            lines.append("")
            lines.extend(generate_helper(service, endpoint))
            lines.append("")

    return "\n".join(lines).rstrip("\n") + "\n"

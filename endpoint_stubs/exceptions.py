"""Errors raised by the stub registries and the stub transport."""

from typing import Any, Iterable, Optional


def _format_ids(ids: Iterable[str]) -> str:
    return ", ".join(f":{value}" for value in ids)


class StubError(Exception):
    """Base class for every error raised by endpoint_stubs."""


class ServiceNotFound(StubError):
    def __init__(self, service_id: str, suggestions: Optional[list[str]] = None):
        self.id = service_id
        self.suggestions = list(suggestions or [])
        message = f"Couldn't find a service with id=:{service_id}"
        if self.suggestions:
            message += f". Did you mean one of the following? ({_format_ids(self.suggestions)})"
        super().__init__(message)


class EndpointNotFound(StubError):
    def __init__(self, endpoint_id: str, suggestions: Optional[list[str]] = None):
        self.id = endpoint_id
        self.suggestions = list(suggestions or [])
        message = f"Couldn't find an endpoint with id=:{endpoint_id}"
        if self.suggestions:
            message += f". Did you mean one of the following? ({_format_ids(self.suggestions)})"
        super().__init__(message)


class ServiceHasEndpoints(StubError):
    """Registering over a service would discard its endpoints."""

    def __init__(self, service_id: str, endpoint_ids: list[str]):
        self.id = service_id
        self.endpoint_ids = list(endpoint_ids)
        super().__init__(
            f"Service :{service_id} is already registered with endpoints "
            f"[{_format_ids(self.endpoint_ids)}]. Remove it before registering it again."
        )


class UriSegmentMismatch(StubError):
    """Route parameters don't line up with the segments of a URI template."""

    def __init__(self, uri: str, expected_keys: list[str], received_keys: list[str]):
        self.uri = uri
        self.expected_keys = list(expected_keys)
        self.received_keys = list(received_keys)
        super().__init__("\n  ".join(self._message_parts()))

    @property
    def missing_keys(self) -> list[str]:
        return [key for key in self.expected_keys if key not in self.received_keys]

    @property
    def invalid_keys(self) -> list[str]:
        return [key for key in self.received_keys if key not in self.expected_keys]

    def _message_parts(self) -> list[str]:
        parts = [
            f"The URI ({self.uri}) received unexpected route parameters",
            f"Expected: [{','.join(self.expected_keys)}]",
            f"Received: [{','.join(self.received_keys)}]",
        ]
        if self.missing_keys:
            parts.append(f"Missing: [{','.join(self.missing_keys)}]")
        if self.invalid_keys:
            parts.append(f"Invalid: [{','.join(self.invalid_keys)}]")
        return parts


class InvalidUri(StubError):
    def __init__(self, uri: str):
        self.uri = uri
        super().__init__(f"'{uri}' is not a valid URI.")


class InvalidCallback(StubError):
    """A subscriber callback has an unsupported signature."""


class InvalidArgumentType(StubError):
    def __init__(self, name: str, actual: Any, expected: Iterable[Any]):
        self.name = name
        self.actual = actual
        self.expected = [getattr(kind, "__name__", str(kind)) for kind in expected]
        super().__init__(
            f"The argument `{name}` was `{actual!r}`, expected any of [{', '.join(self.expected)}]"
        )


class UnstubbedRequest(StubError):
    """An outgoing request matched none of the registered stubs."""

    def __init__(self, method: str, url: str, registered: Optional[list[str]] = None):
        self.method = method
        self.url = url
        self.registered = list(registered or [])
        message = f"Unstubbed request: {method} {url}"
        if self.registered:
            message += "\nRegistered stubs:\n  " + "\n  ".join(self.registered)
        else:
            message += "\nNo stubs are registered."
        super().__init__(message)


class HelperNameConflict(StubError):
    """Two endpoints map to the same generated helper function name."""

    def __init__(self, name: str, first: tuple[str, str], second: tuple[str, str]):
        self.name = name
        self.endpoints = [first, second]
        super().__init__(
            f"Endpoints :{first[0]}/:{first[1]} and :{second[0]}/:{second[1]} "
            f"would both generate {name}(). Rename one of them."
        )

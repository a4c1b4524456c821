"""
httpx transport that answers requests from registered stubs.

Plays the part of the HTTP mocking engine: a stub is registered for a verb
and URI, optionally narrowed by request matchers, and configured with
responses, an error to raise or a timeout. Any httpx client built on a
StubTransport only ever talks to these stubs.
"""

import json
import logging
import threading
from typing import Any, Callable, Optional, Union

import httpx

from .endpoint import Verb
from .exceptions import UnstubbedRequest
from .options import StubOptions

logger = logging.getLogger(__name__)


def _query_params(url: httpx.URL, extra: Optional[dict[str, Any]] = None) -> list[tuple[str, str]]:
    params = list(url.params.multi_items())
    for key, value in (extra or {}).items():
        values = value if isinstance(value, (list, tuple)) else [value]
        params.extend((key, str(item)) for item in values)
    return sorted(params)


class RequestStub:
    """
    A stubbed request and the way it should be answered.

    Usage:
        RequestStub("GET", "https://api.example.com/items/1").to_return(status=200, json={"id": 1})
    """

    def __init__(self, verb: Union[Verb, str], url: str):
        self.verb = Verb.coerce(verb)
        self.url = httpx.URL(url)
        self.request_matchers: dict[str, Any] = {}
        self.responses: list[dict[str, Any]] = []
        self.error: Any = None
        self.timeout = False
        self.served_count = 0
        self._lock = threading.Lock()

    def with_request(self, headers=None, query=None, json=None, content=None) -> "RequestStub":
        """Only match requests with these headers, query params, JSON body or content."""
        matchers = {"headers": headers, "query": query, "json": json, "content": content}
        self.request_matchers.update({name: value for name, value in matchers.items() if value is not None})
        return self

    def to_return(self, status: int = 200, headers=None, json=None, text=None, content=None) -> "RequestStub":
        """Queue a response. Responses are served in order, the last one repeats."""
        self.responses.append({
            "status": status,
            "headers": headers,
            "json": json,
            "text": text,
            "content": content,
        })
        return self

    def to_raise(self, error: Any) -> "RequestStub":
        self.error = error
        return self

    def to_timeout(self) -> "RequestStub":
        self.timeout = True
        return self

    def matches(self, request: httpx.Request) -> bool:
        if self.verb is not Verb.ANY and self.verb.value != request.method.upper():
            return False

        url = request.url
        if (url.scheme, url.host, url.port, url.path) != (
            self.url.scheme, self.url.host, self.url.port, self.url.path
        ):
            return False
        if _query_params(url) != _query_params(self.url, self.request_matchers.get("query")):
            return False

        headers = self.request_matchers.get("headers") or {}
        for name, value in headers.items():
            if request.headers.get(name) != value:
                return False

        if "json" in self.request_matchers:
            try:
                body = json.loads(request.content or b"null")
            except ValueError:
                return False
            if body != self.request_matchers["json"]:
                return False

        if "content" in self.request_matchers:
            expected = self.request_matchers["content"]
            if isinstance(expected, str):
                expected = expected.encode()
            if request.content != expected:
                return False

        return True

    def respond(self, request: httpx.Request) -> httpx.Response:
        """Produce the configured answer for a matched request."""
        with self._lock:
            index = min(self.served_count, len(self.responses) - 1)
            self.served_count += 1

        if self.timeout:
            raise httpx.ConnectTimeout(f"Stubbed timeout for {request.method} {request.url}", request=request)
        if self.error is not None:
            raise self.error() if isinstance(self.error, type) else self.error
        if index < 0:
            return httpx.Response(200, request=request)

        response = {name: value for name, value in self.responses[index].items() if value is not None}
        return httpx.Response(response.pop("status"), request=request, **response)

    def __repr__(self) -> str:
        matchers = f" with {self.request_matchers}" if self.request_matchers else ""
        return f"<RequestStub {self.verb.value} {self.url}{matchers}>"


def build_request_stub(
    verb: Union[Verb, str],
    uri: str,
    options: Union[StubOptions, dict, None] = None,
    configure: Optional[Callable[[RequestStub], Any]] = None,
) -> RequestStub:
    """Create a stub from options, or hand it to configure instead."""
    stub = RequestStub(verb, uri)
    if configure is not None:
        configure(stub)
        return stub

    options = StubOptions.coerce(options)
    if options.request is not None:
        stub.with_request(**options.request.as_kwargs())
    if options.response is not None:
        stub.to_return(**options.response.as_kwargs())
    if options.error is not None:
        stub.to_raise(options.error)
    if options.timeout:
        stub.to_timeout()
    return stub


class StubTransport(httpx.MockTransport):
    """
    Mock transport routing every request to the newest matching stub.

    on_served(stub, request) is called once a stub is picked, before the
    response is produced.
    """

    def __init__(self, on_served: Optional[Callable[[RequestStub, httpx.Request], Any]] = None):
        super().__init__(self._handle)
        self.on_served = on_served
        self._stubs: list[RequestStub] = []
        self._lock = threading.Lock()

    @property
    def stubs(self) -> list[RequestStub]:
        with self._lock:
            return list(self._stubs)

    def register(self, stub: RequestStub) -> RequestStub:
        with self._lock:
            self._stubs.append(stub)
        logger.debug(f"Registered {stub}")
        return stub

    def remove(self, stub: RequestStub) -> Optional[RequestStub]:
        with self._lock:
            if stub in self._stubs:
                self._stubs.remove(stub)
                return stub
        return None

    def reset(self) -> None:
        with self._lock:
            self._stubs.clear()

    def stub_for(self, request: httpx.Request) -> Optional[RequestStub]:
        for stub in reversed(self.stubs):
            if stub.matches(request):
                return stub
        return None

    def _handle(self, request: httpx.Request) -> httpx.Response:
        stub = self.stub_for(request)
        if stub is None:
            raise UnstubbedRequest(request.method, str(request.url), [repr(stub) for stub in self.stubs])
        if self.on_served is not None:
            self.on_served(stub, request)
        return stub.respond(request)

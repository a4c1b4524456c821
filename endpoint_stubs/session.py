"""The stub session: registries, transport and the stub() entry point."""

import logging
import threading
from typing import Any, Callable, Mapping, Optional, Union

import httpx

from .config import Configuration
from .endpoint import Endpoint, Verb
from .metrics import EndpointRecording, MetricsRegistry, RequestRecord
from .options import StubOptions
from .service import Service
from .service_registry import ServiceRegistry
from .subscriptions import CallbackKind, Subscription, SubscriptionRegistry
from .transport import RequestStub, StubTransport, build_request_stub
from .uri_builder import build_uri

logger = logging.getLogger(__name__)


class StubSession:
    """
    Everything one test run needs to stub HTTP services.

    Usage:
        session = StubSession()
        docs = session.register_service("docs", "https://api.example.com/v1")
        docs.get("show", "documents/:id")

        session.stub("docs", "show", {"id": 42}, {"response": {"json": {"id": 42}}})
        with session.client() as client:
            client.get("https://api.example.com/v1/documents/42")

        session.reset()  # between tests
    """

    def __init__(self, config: Optional[Configuration] = None):
        self.config = config or Configuration.from_env()
        self.services = ServiceRegistry(self.config.fuzzy)
        self.subscriptions = SubscriptionRegistry()
        self.metrics = MetricsRegistry()
        self.transport = StubTransport(on_served=self._on_served)
        self._origins: dict[RequestStub, tuple[Service, Endpoint, str]] = {}
        self._lock = threading.Lock()

    def configure(self, **changes) -> Configuration:
        """
        Update settings, e.g. session.configure(record_metrics=True).

        Raises:
            InvalidArgumentType: for unknown settings or wrong types
        """
        self.config.update(**changes)
        return self.config

    def register_service(self, service_id: str, uri: str) -> Service:
        return self.services.register(service_id, uri)

    def register_endpoint(
        self,
        service_id: str,
        endpoint_id: str,
        verb: Union[Verb, str],
        uri_template: str,
        default_options: Union[StubOptions, dict, None] = None,
    ) -> Endpoint:
        service = self.services.find_or_raise(service_id)
        return service.register_endpoint(endpoint_id, verb, uri_template, default_options)

    def find_service(self, service_id: str) -> Service:
        return self.services.find_or_raise(service_id)

    def uri_for(
        self,
        service_id: str,
        endpoint_id: str,
        route_params: Optional[Mapping[str, Any]] = None,
    ) -> tuple[Service, Endpoint, str]:
        """Resolve service and endpoint and build the concrete URI."""
        service = self.services.find_or_raise(service_id)
        endpoint = service.endpoints.find_or_raise(endpoint_id)
        uri = build_uri(service.uri, endpoint.uri_template, route_params)
        return service, endpoint, uri

    def stub(
        self,
        service_id: str,
        endpoint_id: str,
        route_params: Optional[Mapping[str, Any]] = None,
        options: Union[StubOptions, dict, None] = None,
        configure: Optional[Callable[[RequestStub], Any]] = None,
    ) -> Union[RequestStub, RequestRecord]:
        """
        Stub a registered endpoint.

        Returns the RequestRecord when metrics are recorded, otherwise the
        RequestStub registered on the transport.

        Raises:
            ServiceNotFound: unknown service_id
            EndpointNotFound: unknown endpoint_id, with suggestions
            UriSegmentMismatch: route_params don't fit the URI template
        """
        service, endpoint, uri = self.uri_for(service_id, endpoint_id, route_params)
        stub = build_request_stub(endpoint.verb, uri, endpoint.options_for(options), configure)
        with self._lock:
            self._origins[stub] = (service, endpoint, uri)

        # Recorded before the transport can serve the stub
        record = None
        if self.config.record_metrics:
            record = self.metrics.record(service, endpoint, stub, uri)
        self.transport.register(stub)
        return record if record is not None else stub

    def subscribe(
        self,
        service_id: str,
        endpoint_id: str,
        verb: Union[Verb, str] = Verb.ANY,
        callback: Optional[Callable] = None,
        kind: Optional[CallbackKind] = None,
    ) -> Subscription:
        return self.subscriptions.subscribe(service_id, endpoint_id, verb, callback, kind)

    def unsubscribe(self, service_id: str, endpoint_id: str, verb: Union[Verb, str] = Verb.ANY) -> Optional[Subscription]:
        return self.subscriptions.unsubscribe(service_id, endpoint_id, verb)

    def requests_for(self, service_id: str, endpoint_id: str) -> list[RequestRecord]:
        return self.metrics.requests_for(service_id, endpoint_id)

    def client(self, **kwargs) -> httpx.Client:
        return httpx.Client(transport=self.transport, **kwargs)

    def async_client(self, **kwargs) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport, **kwargs)

    def reset(self) -> None:
        """Clear all state. Call between tests, never while stubbing."""
        self.services.reset()
        self.subscriptions.reset()
        self.metrics.reset()
        self.transport.reset()
        with self._lock:
            self._origins.clear()

    def _on_served(self, stub: RequestStub, request: httpx.Request) -> None:
        origin = self._origins.get(stub)
        if origin is None:
            return

        record = self.metrics.mark_as_responded(stub)
        if record is None:
            service, endpoint, uri = origin
            record = EndpointRecording(service, endpoint).record(stub, uri)
            record.mark_as_responded()
        logger.debug(f"Served {request.method} {request.url} from {record}")
        self.subscriptions.notify(record)

"""Registry of named HTTP services and endpoints for stubbing requests in tests."""

from .config import Configuration, FuzzyOptions
from .endpoint import Endpoint, Verb
from .endpoints import EndpointRegistry
from .exceptions import (
    EndpointNotFound,
    HelperNameConflict,
    InvalidArgumentType,
    InvalidCallback,
    InvalidUri,
    ServiceHasEndpoints,
    ServiceNotFound,
    StubError,
    UnstubbedRequest,
    UriSegmentMismatch,
)
from .metrics import MetricsRegistry, RequestRecord
from .options import RequestOptions, ResponseOptions, StubOptions
from .service import Service
from .service_registry import ServiceRegistry
from .session import StubSession
from .subscriptions import CallbackKind, Subscription, SubscriptionRegistry
from .transport import RequestStub, StubTransport
from .uri_builder import build_uri, build_uri_strict

__all__ = [
    "Configuration",
    "FuzzyOptions",
    "Endpoint",
    "Verb",
    "EndpointRegistry",
    "EndpointNotFound",
    "HelperNameConflict",
    "InvalidArgumentType",
    "InvalidCallback",
    "InvalidUri",
    "ServiceHasEndpoints",
    "ServiceNotFound",
    "StubError",
    "UnstubbedRequest",
    "UriSegmentMismatch",
    "MetricsRegistry",
    "RequestRecord",
    "RequestOptions",
    "ResponseOptions",
    "StubOptions",
    "Service",
    "ServiceRegistry",
    "StubSession",
    "CallbackKind",
    "Subscription",
    "SubscriptionRegistry",
    "RequestStub",
    "StubTransport",
    "build_uri",
    "build_uri_strict",
]

"""Service value object."""

from typing import Optional, Union

from .config import FuzzyOptions
from .endpoint import Endpoint, Verb
from .endpoints import EndpointRegistry
from .options import StubOptions
from .validation import validate_identifier, validate_type


class Service:
    """A named base URI and the endpoints registered under it."""

    def __init__(self, service_id: str, uri: str, fuzzy: Optional[FuzzyOptions] = None):
        self._id = validate_identifier("service_id", service_id)
        self.uri = validate_type("uri", uri, str)
        self._endpoints = EndpointRegistry(fuzzy)

    @property
    def id(self) -> str:
        return self._id

    @property
    def endpoints(self) -> EndpointRegistry:
        return self._endpoints

    def has_endpoints(self) -> bool:
        return bool(self._endpoints)

    def register_endpoint(
        self,
        endpoint_id: str,
        verb: Union[Verb, str],
        uri_template: str,
        default_options: Union[StubOptions, dict, None] = None,
    ) -> Endpoint:
        return self._endpoints.register(endpoint_id, verb, uri_template, default_options)

    def any(self, endpoint_id: str, uri_template: str, **options) -> Endpoint:
        return self.register_endpoint(endpoint_id, Verb.ANY, uri_template, options or None)

    def get(self, endpoint_id: str, uri_template: str, **options) -> Endpoint:
        return self.register_endpoint(endpoint_id, Verb.GET, uri_template, options or None)

    def post(self, endpoint_id: str, uri_template: str, **options) -> Endpoint:
        return self.register_endpoint(endpoint_id, Verb.POST, uri_template, options or None)

    def put(self, endpoint_id: str, uri_template: str, **options) -> Endpoint:
        return self.register_endpoint(endpoint_id, Verb.PUT, uri_template, options or None)

    def patch(self, endpoint_id: str, uri_template: str, **options) -> Endpoint:
        return self.register_endpoint(endpoint_id, Verb.PATCH, uri_template, options or None)

    def delete(self, endpoint_id: str, uri_template: str, **options) -> Endpoint:
        return self.register_endpoint(endpoint_id, Verb.DELETE, uri_template, options or None)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Service):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash((Service, self.id))

    def __repr__(self) -> str:
        endpoints = ",".join(str(endpoint) for endpoint in self._endpoints)
        return f"<Service id=:{self.id} uri={self.uri} endpoints=[{endpoints}]>"

    __str__ = __repr__

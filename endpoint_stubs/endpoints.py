"""Per-service endpoint registry."""

import logging
import threading
from typing import Iterator, Optional, Union

from .config import FuzzyOptions
from .endpoint import Endpoint, Verb
from .exceptions import EndpointNotFound
from .fuzzy import match
from .options import StubOptions
from .validation import validate_identifier

logger = logging.getLogger(__name__)


class EndpointRegistry:
    """
    Thread-safe map of endpoint id to Endpoint.

    Writes are serialized by a lock. Lookups read the dict directly and
    enumeration works on a snapshot, so iterating never fails while other
    threads register or remove endpoints.
    """

    def __init__(self, fuzzy: Optional[FuzzyOptions] = None):
        self._endpoints: dict[str, Endpoint] = {}
        self._lock = threading.RLock()
        self.fuzzy = fuzzy or FuzzyOptions()

    def register(
        self,
        endpoint_id: str,
        verb: Union[Verb, str],
        uri_template: str,
        default_options: Union[StubOptions, dict, None] = None,
    ) -> Endpoint:
        """Add an endpoint, overwriting (with a warning) one with the same id."""
        validate_identifier("endpoint_id", endpoint_id)
        with self._lock:
            endpoint = self._endpoints.get(endpoint_id)
            if endpoint is not None:
                logger.warning(f"Endpoint already registered: {endpoint}")
                endpoint.update(verb, uri_template, default_options)
            else:
                endpoint = Endpoint(endpoint_id, verb, uri_template, default_options)
                self._endpoints[endpoint.id] = endpoint
        logger.debug(f"Registered {endpoint}")
        return endpoint

    def update(
        self,
        endpoint_id: str,
        verb: Union[Verb, str],
        uri_template: str,
        default_options: Union[StubOptions, dict, None] = None,
    ) -> Endpoint:
        validate_identifier("endpoint_id", endpoint_id)
        with self._lock:
            endpoint = self.find_or_raise(endpoint_id)
            return endpoint.update(verb, uri_template, default_options)

    def remove(self, endpoint_id: str) -> Optional[Endpoint]:
        validate_identifier("endpoint_id", endpoint_id)
        with self._lock:
            return self._endpoints.pop(endpoint_id, None)

    def find(self, endpoint_id: str) -> Optional[Endpoint]:
        validate_identifier("endpoint_id", endpoint_id)
        return self._endpoints.get(endpoint_id)

    def find_or_raise(self, endpoint_id: str) -> Endpoint:
        """
        Look up an endpoint.

        Raises:
            EndpointNotFound: with the closest registered ids as suggestions
        """
        endpoint = self.find(endpoint_id)
        if endpoint is None:
            raise EndpointNotFound(endpoint_id, self.suggestions(endpoint_id))
        return endpoint

    def suggestions(self, endpoint_id: str) -> list[str]:
        return match(endpoint_id, self.keys(), self.fuzzy)[: self.fuzzy.max_suggestions]

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._endpoints)

    def values(self) -> list[Endpoint]:
        with self._lock:
            return list(self._endpoints.values())

    def items(self) -> list[tuple[str, Endpoint]]:
        with self._lock:
            return list(self._endpoints.items())

    def __iter__(self) -> Iterator[Endpoint]:
        return iter(self.values())

    def __len__(self) -> int:
        return len(self._endpoints)

    def __contains__(self, endpoint_id: object) -> bool:
        return isinstance(endpoint_id, str) and endpoint_id in self._endpoints

    def __bool__(self) -> bool:
        return bool(self._endpoints)

    def __str__(self) -> str:
        return f"<EndpointRegistry endpoints=[{','.join(str(endpoint) for endpoint in self.values())}]>"

"""Registry of services for a stub session."""

import logging
import threading
from typing import Iterator, Optional

from .config import FuzzyOptions
from .exceptions import ServiceHasEndpoints, ServiceNotFound
from .fuzzy import match
from .service import Service
from .validation import validate_identifier

logger = logging.getLogger(__name__)


class ServiceRegistry:
    """Thread-safe map of service id to Service, in registration order."""

    def __init__(self, fuzzy: Optional[FuzzyOptions] = None):
        self._services: dict[str, Service] = {}
        self._lock = threading.RLock()
        self.fuzzy = fuzzy or FuzzyOptions()

    def register(self, service_id: str, uri: str) -> Service:
        """
        Register a service.

        Replacing a service without endpoints only logs a warning.

        Raises:
            ServiceHasEndpoints: when the id is taken by a service with endpoints
        """
        validate_identifier("service_id", service_id)
        with self._lock:
            existing = self._services.get(service_id)
            if existing is not None:
                if existing.has_endpoints():
                    raise ServiceHasEndpoints(service_id, existing.endpoints.keys())
                logger.warning(f"Service already registered {existing}")
            service = Service(service_id, uri, self.fuzzy)
            self._services[service.id] = service
        logger.debug(f"Registered {service}")
        return service

    def find(self, service_id: str) -> Optional[Service]:
        validate_identifier("service_id", service_id)
        return self._services.get(service_id)

    def find_or_raise(self, service_id: str) -> Service:
        """
        Raises:
            ServiceNotFound: with the closest registered ids as suggestions
        """
        service = self.find(service_id)
        if service is None:
            raise ServiceNotFound(service_id, self.suggestions(service_id))
        return service

    def remove(self, service_id: str) -> Service:
        validate_identifier("service_id", service_id)
        with self._lock:
            service = self._services.pop(service_id, None)
        if service is None:
            raise ServiceNotFound(service_id, self.suggestions(service_id))
        return service

    def reset(self) -> None:
        """Forget every service (for test isolation)."""
        with self._lock:
            self._services.clear()

    def suggestions(self, service_id: str) -> list[str]:
        return match(service_id, self.keys(), self.fuzzy)[: self.fuzzy.max_suggestions]

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._services)

    def values(self) -> list[Service]:
        with self._lock:
            return list(self._services.values())

    def __iter__(self) -> Iterator[Service]:
        return iter(self.values())

    def __len__(self) -> int:
        return len(self._services)

    def __contains__(self, service_id: object) -> bool:
        return isinstance(service_id, str) and service_id in self._services

"""Callbacks fired when a stubbed endpoint serves a request."""

import enum
import inspect
import logging
import threading
from typing import Any, Callable, Iterator, Optional, Union

from .endpoint import Verb
from .exceptions import InvalidCallback
from .validation import validate_identifier

logger = logging.getLogger(__name__)


class CallbackKind(enum.Enum):
    NO_ARGS = "no_args"
    RECORD = "record"
    UNSUPPORTED = "unsupported"

    @classmethod
    def of(cls, callback: Callable) -> "CallbackKind":
        """Classify a callback by the positional arguments it accepts."""
        try:
            parameters = inspect.signature(callback).parameters.values()
        except (TypeError, ValueError):
            return cls.UNSUPPORTED

        positional = [p for p in parameters if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)]
        required = [p for p in positional if p.default is p.empty]
        required_keywords = [p for p in parameters if p.kind is p.KEYWORD_ONLY and p.default is p.empty]
        takes_varargs = any(p.kind is p.VAR_POSITIONAL for p in parameters)

        if len(required) > 1 or required_keywords:
            return cls.UNSUPPORTED
        if positional or takes_varargs:
            return cls.RECORD
        return cls.NO_ARGS


class Subscription:
    def __init__(
        self,
        service_id: str,
        endpoint_id: str,
        verb: Union[Verb, str],
        callback: Callable,
        kind: Optional[CallbackKind] = None,
    ):
        if not callable(callback):
            raise InvalidCallback(f"The callback for a subscription must be callable (was {callback!r})")
        self.service_id = validate_identifier("service_id", service_id)
        self.endpoint_id = validate_identifier("endpoint_id", endpoint_id)
        self.verb = Verb.coerce(verb)
        self.callback = callback
        self.kind = kind or CallbackKind.of(callback)

    def key(self) -> tuple[str, str, Verb]:
        return (self.service_id, self.endpoint_id, self.verb)

    def matches(self, service_id: str, endpoint_id: str, verb: Union[Verb, str]) -> bool:
        return (
            self.service_id == service_id
            and self.endpoint_id == endpoint_id
            and self.verb.matches(verb)
        )

    def call(self, record: Any) -> Any:
        """
        Raises:
            InvalidCallback: when the callback takes neither zero nor one argument
        """
        if self.kind is CallbackKind.NO_ARGS:
            return self.callback()
        if self.kind is CallbackKind.RECORD:
            return self.callback(record)
        raise InvalidCallback(
            f"The callback for a subscription can either take 0 or 1 arguments ({self.callback!r})"
        )

    def __repr__(self) -> str:
        return f"<Subscription :{self.service_id}/:{self.endpoint_id} verb={self.verb.value} kind={self.kind.value}>"


class SubscriptionRegistry:
    """Ordered, thread-safe list of subscriptions."""

    def __init__(self):
        self._subscriptions: list[Subscription] = []
        self._lock = threading.Lock()

    def subscribe(
        self,
        service_id: str,
        endpoint_id: str,
        verb: Union[Verb, str] = Verb.ANY,
        callback: Optional[Callable] = None,
        kind: Optional[CallbackKind] = None,
    ) -> Subscription:
        """Subscribe, or return the existing subscription for the same tuple."""
        subscription = Subscription(service_id, endpoint_id, verb, callback, kind)
        with self._lock:
            for existing in self._subscriptions:
                if existing.key() == subscription.key():
                    return existing
            self._subscriptions.append(subscription)
        logger.debug(f"Subscribed {subscription}")
        return subscription

    def unsubscribe(self, service_id: str, endpoint_id: str, verb: Union[Verb, str] = Verb.ANY) -> Optional[Subscription]:
        key = (service_id, endpoint_id, Verb.coerce(verb))
        with self._lock:
            for subscription in self._subscriptions:
                if subscription.key() == key:
                    self._subscriptions.remove(subscription)
                    return subscription
        return None

    def find(self, service_id: str, endpoint_id: str, verb: Union[Verb, str]) -> Optional[Subscription]:
        return next((sub for sub in self if sub.matches(service_id, endpoint_id, verb)), None)

    def notify(self, record: Any) -> Optional[Subscription]:
        """Call the first subscription matching the record's service, endpoint and verb."""
        subscription = self.find(record.service_id, record.endpoint_id, record.verb)
        if subscription is None:
            return None
        logger.debug(f"Notifying {subscription} of {record}")
        subscription.call(record)
        return subscription

    def reset(self) -> None:
        with self._lock:
            self._subscriptions.clear()

    def __iter__(self) -> Iterator[Subscription]:
        with self._lock:
            return iter(list(self._subscriptions))

    def __len__(self) -> int:
        return len(self._subscriptions)

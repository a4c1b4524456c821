"""Endpoint value object."""

import enum
from typing import NamedTuple, Optional, Union

from .exceptions import InvalidArgumentType
from .options import StubOptions
from .uri import route_params
from .validation import validate_identifier, validate_type


class Verb(str, enum.Enum):
    ANY = "ANY"
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"

    @classmethod
    def coerce(cls, value: Union["Verb", str]) -> "Verb":
        if isinstance(value, cls):
            return value
        validate_type("verb", value, str)
        try:
            return cls(value.upper())
        except ValueError:
            raise InvalidArgumentType(name="verb", actual=value, expected=[verb.value for verb in cls]) from None

    def matches(self, other: Union["Verb", str]) -> bool:
        """ANY on either side matches every verb."""
        other = Verb.coerce(other)
        return Verb.ANY in (self, other) or self is other


class _EndpointState(NamedTuple):
    verb: Verb
    uri_template: str
    default_options: StubOptions


class Endpoint:
    """
    One route of a service: verb, URI template and default stub options.

    The three fields live in one immutable state tuple that update() swaps
    in a single assignment, so readers never see a mix of old and new values.
    """

    def __init__(
        self,
        endpoint_id: str,
        verb: Union[Verb, str],
        uri_template: str,
        default_options: Union[StubOptions, dict, None] = None,
    ):
        self._id = validate_identifier("endpoint_id", endpoint_id)
        self._state = self._coerce_state(verb, uri_template, default_options)

    @staticmethod
    def _coerce_state(
        verb: Union[Verb, str],
        uri_template: str,
        default_options: Union[StubOptions, dict, None],
    ) -> _EndpointState:
        return _EndpointState(
            verb=Verb.coerce(verb),
            uri_template=validate_type("uri_template", uri_template, str),
            default_options=StubOptions.coerce(default_options),
        )

    @property
    def id(self) -> str:
        return self._id

    @property
    def verb(self) -> Verb:
        return self._state.verb

    @property
    def uri_template(self) -> str:
        return self._state.uri_template

    @property
    def default_options(self) -> StubOptions:
        return self._state.default_options

    @property
    def route_params(self) -> list[str]:
        return route_params(self.uri_template)

    def update(
        self,
        verb: Union[Verb, str],
        uri_template: str,
        default_options: Union[StubOptions, dict, None] = None,
    ) -> "Endpoint":
        """
        Replace verb, template and options; the id never changes.

        Raises:
            InvalidArgumentType, pydantic.ValidationError: the endpoint is left unchanged
        """
        self._state = self._coerce_state(verb, uri_template, default_options)
        return self

    def options_for(self, overrides: Optional[Union[StubOptions, dict]] = None) -> StubOptions:
        return self.default_options.merged_with(overrides)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Endpoint):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash((Endpoint, self.id))

    def __repr__(self) -> str:
        return f"<Endpoint id=:{self.id} verb={self.verb.value} uri_template='{self.uri_template}'>"

    __str__ = __repr__

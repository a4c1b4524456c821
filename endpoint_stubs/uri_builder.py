"""Expand URI templates with route parameters into concrete URIs."""

import logging
from typing import Any, Mapping, Optional

from .exceptions import InvalidUri, UriSegmentMismatch
from .uri import SEGMENT, Validator, safe_join, segments, to_segment

logger = logging.getLogger(__name__)


class UriBuilder:
    """
    Build one absolute URI from a host, a template and replacements.

    Usage:
        UriBuilder.build("https://api.example.com/v1", "documents/:id", {"id": 42})
        # -> "https://api.example.com/v1/documents/42"
    """

    def __init__(self, host: str, template: str, replacements: Optional[Mapping[str, Any]] = None):
        self.host = host
        self.template = template
        self.replacements = {to_segment(key): value for key, value in (replacements or {}).items()}
        self.expected_keys = segments(template)
        self.received_keys = list(self.replacements)
        self.unreplaced: list[str] = []
        self.path: Optional[str] = None

    @classmethod
    def build(cls, host: str, template: str, replacements: Optional[Mapping[str, Any]] = None, strict: bool = False) -> str:
        return cls(host, template, replacements).run(strict=strict)

    @property
    def unused(self) -> list[str]:
        return [key for key in self.received_keys if key not in self.expected_keys]

    def run(self, strict: bool = False) -> str:
        """
        Substitute, join and validate.

        Raises:
            UriSegmentMismatch: when replacements are unused or segments are left unreplaced
            InvalidUri: only when strict and the resulting URI fails validation
        """
        if self.unused:
            raise self._mismatch()

        self.path = self._substitute()
        if self.unreplaced:
            raise self._mismatch()

        uri = safe_join(self.host, self.path)
        if not self._validate(uri) and strict:
            raise InvalidUri(uri)
        return uri

    def _substitute(self) -> str:
        # One pass over the template; replaced values are never scanned again
        def replace(found) -> str:
            segment = found.group(0)
            if segment in self.replacements:
                return str(self.replacements[segment])
            if segment not in self.unreplaced:
                self.unreplaced.append(segment)
            return segment

        return SEGMENT.sub(replace, self.template)

    def _mismatch(self) -> UriSegmentMismatch:
        return UriSegmentMismatch(
            uri=safe_join(self.host, self.template),
            expected_keys=self.expected_keys,
            received_keys=self.received_keys,
        )

    def _validate(self, uri: str) -> bool:
        try:
            valid = Validator.is_valid(uri)
        except InvalidUri:
            valid = False
        if not valid:
            logger.warning(f"URI ({uri}) is not valid.")
        return valid


def build_uri(host: str, template: str, replacements: Optional[Mapping[str, Any]] = None) -> str:
    """Lenient build: an invalid URI is logged and still returned."""
    return UriBuilder.build(host, template, replacements)


def build_uri_strict(host: str, template: str, replacements: Optional[Mapping[str, Any]] = None) -> str:
    """Strict build: an invalid URI raises InvalidUri."""
    return UriBuilder.build(host, template, replacements, strict=True)

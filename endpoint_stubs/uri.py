"""URI helpers: route parameter parsing, joining and validation."""

import re

import httpx
import tldextract

from .exceptions import InvalidUri

SEGMENT = re.compile(r":[A-Za-z_]+")
SCHEMES = ("http", "https")

# Bundled public suffix snapshot only, never fetched over the network
_suffixes = tldextract.TLDExtract(suffix_list_urls=(), cache_dir=None)


def segments(template: str) -> list[str]:
    """URI segments (":name") in order of first appearance, without duplicates."""
    return list(dict.fromkeys(SEGMENT.findall(template)))


def route_params(template: str) -> list[str]:
    """Route parameter names used by a URI template."""
    return [segment[1:] for segment in segments(template)]


def to_segment(key: object) -> str:
    """Normalize a replacement key ("id" or ":id") to its segment form."""
    return ":" + str(key).lstrip(":")


def safe_join(host: str, path: str) -> str:
    """Join host and path with exactly one slash between them."""
    return "/".join([host.rstrip("/"), path.lstrip("/")])


def valid_scheme(scheme: str) -> bool:
    return str(scheme) in SCHEMES


def valid_suffix(host: str) -> bool:
    """True when host is a registrable name under a known public suffix."""
    if not host:
        return False
    extracted = _suffixes(host)
    return bool(extracted.suffix and extracted.domain)


class Validator:
    """Syntactic URI check: http(s) scheme and a public suffix host."""

    def __init__(self, uri: str):
        try:
            parsed = httpx.URL(uri)
        except (httpx.InvalidURL, TypeError) as e:
            raise InvalidUri(uri) from e
        self.uri = uri
        self.scheme = parsed.scheme
        self.host = parsed.host

    @classmethod
    def is_valid(cls, uri: str) -> bool:
        return cls(uri).valid()

    def valid(self) -> bool:
        return valid_scheme(self.scheme) and valid_suffix(self.host)

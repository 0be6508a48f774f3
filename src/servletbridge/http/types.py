"""
=============================================================================
REQUEST / RESPONSE DESCRIPTIONS
=============================================================================

Immutable values exchanged between the host container and a handler.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   Host request ──build──► RequestDescription ──► handler             │
    │                                                    │                 │
    │   Host response ◄──write── ResponseDescription ◄───┘                 │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Header values and bodies are TAGGED VARIANTS: a small frozen dataclass per
case. The writers dispatch on the variant class, never on the header name.

    HeaderValue  = IntHeader | DateHeader | TextHeader
    BodyPayload  = TextBody | ChunkedBody | StreamBody | FileBody   (or None)

=============================================================================
"""

import io
import os
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, BinaryIO, Iterable, Mapping, Optional, Union

from ..errors import UnrecognizedBodyKind


# =============================================================================
# ENUMERATED TAGS
# =============================================================================

class Scheme(str, Enum):
    """URL scheme of an inbound request."""

    HTTP = "http"
    HTTPS = "https"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Scheme":
        """Map a host scheme string (any case) to a tag; unknown is OTHER."""
        try:
            return cls((value or "").lower())
        except ValueError:
            return cls.OTHER


class RequestMethod(str, Enum):
    """HTTP request method, lower-cased."""

    GET = "get"
    POST = "post"
    PUT = "put"
    DELETE = "delete"
    HEAD = "head"
    OPTIONS = "options"
    PATCH = "patch"
    TRACE = "trace"
    CONNECT = "connect"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Optional[str]) -> "RequestMethod":
        """Map a host method string (any case) to a tag; unknown is OTHER."""
        try:
            return cls((value or "").lower())
        except ValueError:
            return cls.OTHER


# =============================================================================
# REQUEST SIDE
# =============================================================================

@dataclass(frozen=True)
class LifecycleHandles:
    """
    Host objects attached to a request for legacy integrations.

    The bridge never looks inside these; they are handed to the handler so
    that older code can reach the container directly.
    """

    container: Any
    request: Any
    response: Any
    context: Any = None


@dataclass(frozen=True)
class RequestDescription:
    """
    Immutable description of an inbound request.

    =========================================================================
    FIELDS
    =========================================================================

        server_port:        Port the container accepted the request on
        server_name:        Host name the request was addressed to
        remote_addr:        Client address
        uri:                Request path without the query string
        query_string:       Raw query string, None when absent
        scheme:             Scheme tag (http / https / other)
        request_method:     Method tag (get / post / ...)
        headers:            Lower-cased header name → value (read-only)
        content_type:       Content-Type reported by the host
        content_length:     Non-negative length, None when unknown
        character_encoding: Request charset reported by the host
        body:               Binary stream BORROWED from the host request
        lifecycle:          Optional host handles (legacy integrations)

    =========================================================================
    """

    server_port: int
    server_name: str
    remote_addr: str
    uri: str
    scheme: Scheme
    request_method: RequestMethod
    query_string: Optional[str] = None
    headers: Mapping[str, str] = field(default_factory=dict)
    content_type: Optional[str] = None
    content_length: Optional[int] = None
    character_encoding: Optional[str] = None
    body: Optional[BinaryIO] = None
    lifecycle: Optional[LifecycleHandles] = None

    def __post_init__(self) -> None:
        if not isinstance(self.headers, MappingProxyType):
            object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Look up a header by name in any case."""
        return self.headers.get(name.lower(), default)

    def with_lifecycle(self, handles: LifecycleHandles) -> "RequestDescription":
        """Return a copy carrying ``handles``."""
        return replace(self, lifecycle=handles)


# =============================================================================
# HEADER VALUES
# =============================================================================

@dataclass(frozen=True)
class IntHeader:
    """Numeric header value, written through the integer setter."""

    value: Union[int, float]


@dataclass(frozen=True)
class DateHeader:
    """Date header value, written through the date setter as epoch millis."""

    value: Union[datetime, date]


@dataclass(frozen=True)
class TextHeader:
    """Plain header value, written through the generic string setter."""

    value: Any


HeaderValue = Union[IntHeader, DateHeader, TextHeader]

_HEADER_VARIANTS = (IntHeader, DateHeader, TextHeader)


def header_value(raw: Any) -> HeaderValue:
    """
    Build a header variant from a plain Python value.

    Variants pass through unchanged. ``bool`` is a subclass of ``int`` but
    is treated as text ("True"), not as 1.
    """
    if isinstance(raw, _HEADER_VARIANTS):
        return raw
    if isinstance(raw, bool):
        return TextHeader(raw)
    if isinstance(raw, (int, float)):
        return IntHeader(raw)
    if isinstance(raw, (datetime, date)):
        return DateHeader(raw)
    return TextHeader(raw)


# =============================================================================
# BODY PAYLOADS
# =============================================================================

@dataclass(frozen=True)
class TextBody:
    """Whole body as one string, printed with a trailing line terminator."""

    text: str

    def __post_init__(self) -> None:
        if not isinstance(self.text, str):
            raise UnrecognizedBodyKind(self.text)


@dataclass(frozen=True)
class ChunkedBody:
    """Body produced chunk by chunk; every chunk is flushed as it is written."""

    chunks: Iterable[Any]

    def __post_init__(self) -> None:
        if isinstance(self.chunks, (str, bytes)) or not hasattr(self.chunks, "__iter__"):
            raise UnrecognizedBodyKind(self.chunks)


@dataclass(frozen=True)
class StreamBody:
    """Binary stream copied to the output. The writer closes it."""

    stream: BinaryIO

    def __post_init__(self) -> None:
        if not callable(getattr(self.stream, "read", None)):
            raise UnrecognizedBodyKind(self.stream)


@dataclass(frozen=True)
class FileBody:
    """File on disk, opened and streamed by the writer."""

    path: Union[str, "os.PathLike[str]"]

    def __post_init__(self) -> None:
        if not isinstance(self.path, (str, os.PathLike)):
            raise UnrecognizedBodyKind(self.path)


BodyPayload = Union[TextBody, ChunkedBody, StreamBody, FileBody]

_BODY_VARIANTS = (TextBody, ChunkedBody, StreamBody, FileBody)


def body_payload(raw: Any) -> Optional[BodyPayload]:
    """
    Build a body variant from a plain Python value.

    =========================================================================
    MAPPING
    =========================================================================

        None                      → None (no body)
        TextBody, StreamBody, ... → unchanged
        str                       → TextBody
        bytes, bytearray          → StreamBody over an in-memory buffer
        os.PathLike               → FileBody
        object with .read()       → StreamBody
        list, tuple, iterator     → ChunkedBody

    Anything else (numbers, dicts, sets, ...) raises UnrecognizedBodyKind.

    =========================================================================
    """
    if raw is None or isinstance(raw, _BODY_VARIANTS):
        return raw
    if isinstance(raw, str):
        return TextBody(raw)
    if isinstance(raw, (bytes, bytearray)):
        return StreamBody(io.BytesIO(bytes(raw)))
    if isinstance(raw, os.PathLike):
        return FileBody(raw)
    if callable(getattr(raw, "read", None)):
        return StreamBody(raw)
    if isinstance(raw, (list, tuple)) or _is_iterator(raw):
        return ChunkedBody(raw)
    raise UnrecognizedBodyKind(raw)


def _is_iterator(value: Any) -> bool:
    return hasattr(value, "__next__") and hasattr(value, "__iter__")


# =============================================================================
# RESPONSE SIDE
# =============================================================================

@dataclass(frozen=True)
class ResponseDescription:
    """
    Immutable description of the response a handler wants sent.

    ``headers`` maps the header name (case as supplied) to a HeaderValue, or
    to a list/tuple of them for a header that is repeated. ``body`` should be
    a BodyPayload variant; plain values are accepted and resolved by
    ``body_payload()`` when the response is written.
    """

    status: Optional[int] = None
    headers: Mapping[str, Any] = field(default_factory=dict)
    body: Any = None

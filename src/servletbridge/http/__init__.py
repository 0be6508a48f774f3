"""
=============================================================================
TRANSLATION BOUNDARY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │ DATA MODEL (types.py)                                               │
    │   RequestDescription, ResponseDescription, header and body variants │
    ├─────────────────────────────────────────────────────────────────────┤
    │ HOST INTERFACES (host.py)                                           │
    │   Protocols for the container's request / response objects          │
    ├─────────────────────────────────────────────────────────────────────┤
    │ REQUEST BUILDER (request.py)                                        │
    │   host request → RequestDescription                                 │
    ├─────────────────────────────────────────────────────────────────────┤
    │ HEADER CODEC (headers.py)                                           │
    │   one header value → one typed host setter call                     │
    ├─────────────────────────────────────────────────────────────────────┤
    │ RESPONSE WRITER (response.py)                                       │
    │   ResponseDescription → host response                               │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .types import (
    Scheme,
    RequestMethod,
    LifecycleHandles,
    RequestDescription,
    ResponseDescription,
    # Header variants
    IntHeader,
    DateHeader,
    TextHeader,
    HeaderValue,
    header_value,
    # Body variants
    TextBody,
    ChunkedBody,
    StreamBody,
    FileBody,
    BodyPayload,
    body_payload,
)
from .host import HostRequest, HostResponse, HostContainer, TextWriter, OutputStream
from .headers import set_header, add_header, epoch_millis
from .request import build_request, get_headers, get_content_length, merge_lifecycle_handles
from .response import write_response, write_body, set_headers


__all__ = [
    # Data model
    "Scheme",
    "RequestMethod",
    "LifecycleHandles",
    "RequestDescription",
    "ResponseDescription",
    "IntHeader",
    "DateHeader",
    "TextHeader",
    "HeaderValue",
    "header_value",
    "TextBody",
    "ChunkedBody",
    "StreamBody",
    "FileBody",
    "BodyPayload",
    "body_payload",

    # Host interfaces
    "HostRequest",
    "HostResponse",
    "HostContainer",
    "TextWriter",
    "OutputStream",

    # Header codec
    "set_header",
    "add_header",
    "epoch_millis",

    # Request builder
    "build_request",
    "get_headers",
    "get_content_length",
    "merge_lifecycle_handles",

    # Response writer
    "write_response",
    "write_body",
    "set_headers",
]

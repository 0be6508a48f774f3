"""
=============================================================================
REQUEST BUILDER
=============================================================================

Reads a host request object into an immutable RequestDescription.

    HostRequest                          RequestDescription
    ───────────                          ──────────────────
    get_server_port()        ───────►   server_port
    get_server_name()        ───────►   server_name
    get_remote_addr()        ───────►   remote_addr
    get_request_uri()        ───────►   uri
    get_query_string()       ───────►   query_string
    get_scheme()             ──lower──► scheme          (Scheme tag)
    get_method()             ──lower──► request_method  (RequestMethod tag)
    get_header_names() +
      get_header(name)       ──fold───► headers         (lower-cased keys)
    get_content_type()       ───────►   content_type
    get_content_length()     ──<0?────► content_length  (None if negative)
    get_character_encoding() ───────►   character_encoding
    get_input_stream()       ───────►   body            (borrowed)

Read-only: the host request is never mutated and its input stream is never
closed here.

=============================================================================
"""

import logging
from typing import Any, Dict, Optional

from .host import HostContainer, HostRequest
from .types import (
    LifecycleHandles,
    RequestDescription,
    RequestMethod,
    Scheme,
)


logger = logging.getLogger(__name__)


def get_headers(request: HostRequest) -> Dict[str, str]:
    """
    Collect every request header into one dict with lower-cased names.

    Header names are case-insensitive, so "Accept" and "ACCEPT" fold into
    the same key. The last one enumerated wins.
    """
    headers: Dict[str, str] = {}
    for name in request.get_header_names():
        headers[name.lower()] = request.get_header(name)
    return headers


def get_content_length(request: HostRequest) -> Optional[int]:
    """Return the body length, or None when the host reports it as unknown."""
    length = request.get_content_length()
    if length is None or length < 0:
        return None
    return length


def build_request(request: HostRequest) -> RequestDescription:
    """
    Create a RequestDescription from a host request object.

    Args:
        request: The container's request handle.

    Returns:
        A new, immutable description. Its ``body`` is the host's own input
        stream; the caller does not own it.
    """
    description = RequestDescription(
        server_port=request.get_server_port(),
        server_name=request.get_server_name(),
        remote_addr=request.get_remote_addr(),
        uri=request.get_request_uri(),
        query_string=request.get_query_string(),
        scheme=Scheme.parse(request.get_scheme()),
        request_method=RequestMethod.parse(request.get_method()),
        headers=get_headers(request),
        content_type=request.get_content_type(),
        content_length=get_content_length(request),
        character_encoding=request.get_character_encoding(),
        body=request.get_input_stream(),
    )
    logger.debug(
        f"Built request {description.request_method.value.upper()} {description.uri} "
        f"({len(description.headers)} headers)"
    )
    return description


def merge_lifecycle_handles(
    description: RequestDescription,
    container: Any,
    request: Any,
    response: Any,
) -> RequestDescription:
    """
    Attach the container, request and response handles to ``description``.

    For legacy handlers that need to reach the host objects directly. When
    the container exposes ``get_context()`` its context is attached as well.
    """
    context = container.get_context() if isinstance(container, HostContainer) else None
    return description.with_lifecycle(
        LifecycleHandles(
            container=container,
            request=request,
            response=response,
            context=context,
        )
    )

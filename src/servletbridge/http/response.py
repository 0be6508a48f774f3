"""
=============================================================================
RESPONSE WRITER
=============================================================================

Applies a ResponseDescription onto a host response object.

=============================================================================
ORDER OF OPERATIONS
=============================================================================

The host only honours a status set before the body is written, and some
hosts only honour a content type set through its dedicated setter:

    1. set_status(status)                  if status is not None
    2. headers:  list/tuple → add_header per element, in order
                 single     → set_header once
    3. set_content_type(...)               if "Content-Type" is a key
    4. body, by variant:

    ┌──────────────┬──────────────────────────────────────────────────────┐
    │ None         │ nothing                                              │
    │ TextBody     │ writer: text + line terminator                       │
    │ ChunkedBody  │ writer: str(chunk), flush, str(chunk), flush, ...    │
    │ StreamBody   │ output stream: copy bytes, close input, flush output │
    │ FileBody     │ open file, then as StreamBody                        │
    │ other        │ UnrecognizedBodyKind                                 │
    └──────────────┴──────────────────────────────────────────────────────┘

Every writer, output stream and file opened here is released in a ``with``
block, so it is closed on the error path too. Nothing already sent to the
host (status, headers) is undone when a later step fails.

=============================================================================
"""

import logging
import shutil
from contextlib import closing
from typing import Any, BinaryIO, Mapping, Optional

from ..config import BridgeConfig, resolve_config
from ..errors import NullResponseTarget, UnrecognizedBodyKind
from .headers import add_header, set_header
from .host import HostResponse
from .types import (
    ChunkedBody,
    FileBody,
    ResponseDescription,
    StreamBody,
    TextBody,
    body_payload,
)


logger = logging.getLogger(__name__)


# =============================================================================
# HEADERS
# =============================================================================

def set_headers(response: HostResponse, headers: Mapping[str, Any]) -> None:
    """
    Write a header mapping onto ``response``.

    A list or tuple value means the header is repeated: each element is
    added in order. Anything else replaces the header.
    """
    for name, value in headers.items():
        if isinstance(value, (list, tuple)):
            for item in value:
                add_header(response, name, item)
        else:
            set_header(response, name, value)

    # Content-Type must also go through its own setter
    content_type = headers.get("Content-Type")
    if content_type is not None:
        if isinstance(content_type, (list, tuple)):
            if not content_type:
                return
            content_type = content_type[0]
        response.set_content_type(str(getattr(content_type, "value", content_type)))


# =============================================================================
# BODY
# =============================================================================

def write_body(response: HostResponse, body: Any, config: Optional[BridgeConfig] = None) -> None:
    """
    Write ``body`` to ``response`` according to its payload variant.

    Plain values are resolved with ``body_payload()`` first. Stream and file
    payloads are consumed and closed; do not reuse them afterwards.

    Raises:
        UnrecognizedBodyKind: If ``body`` is not a supported payload.
    """
    config = resolve_config(config)
    payload = body_payload(body)

    if payload is None:
        return

    if isinstance(payload, TextBody):
        logger.debug(f"Writing text body ({len(payload.text)} chars)")
        with closing(response.get_writer()) as writer:
            writer.write(payload.text + config.line_terminator)

    elif isinstance(payload, ChunkedBody):
        logger.debug("Writing chunked body")
        with closing(response.get_writer()) as writer:
            for chunk in payload.chunks:
                writer.write(str(chunk))
                writer.flush()

    elif isinstance(payload, StreamBody):
        _write_stream(response, payload.stream, config)

    elif isinstance(payload, FileBody):
        logger.debug(f"Writing file body {payload.path}")
        with open(payload.path, "rb") as stream:
            _write_stream(response, stream, config)

    else:
        raise UnrecognizedBodyKind(body)


def _write_stream(response: HostResponse, stream: BinaryIO, config: BridgeConfig) -> None:
    # The payload is owned from here on, even if the host refuses an output stream
    try:
        with closing(response.get_output_stream()) as out:
            shutil.copyfileobj(stream, out, config.copy_buffer_size)
            stream.close()
            out.flush()
    finally:
        stream.close()
    logger.debug("Stream body copied")


# =============================================================================
# FULL RESPONSE
# =============================================================================

def write_response(
    response: HostResponse,
    description: ResponseDescription,
    config: Optional[BridgeConfig] = None,
) -> HostResponse:
    """
    Update the host response from a response description.

    Args:
        response: The container's response handle.
        description: What the handler wants sent.
        config: Bridge settings; defaults when omitted.

    Returns:
        The same ``response``, for chaining.

    Raises:
        NullResponseTarget: If ``response`` is None.
        UnrecognizedBodyKind: If the body is not a supported payload.
    """
    if response is None:
        raise NullResponseTarget()

    if description.status is not None:
        logger.debug(f"Setting status {description.status}")
        response.set_status(description.status)

    set_headers(response, description.headers or {})
    write_body(response, description.body, config)
    return response

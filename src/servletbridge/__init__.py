"""
=============================================================================
SERVLETBRIDGE - Pure Handlers on Servlet-Style Containers
=============================================================================

Runs a pure, data-oriented HTTP handler:

    def handler(request: RequestDescription) -> ResponseDescription: ...

inside a container whose native interface is a mutable request / response
object pair with getters, setters, streaming bodies and a mandated call
order.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    servletbridge/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m servletbridge)
    ├── config.py            # BridgeConfig dataclass, logging setup
    ├── errors.py            # Exception taxonomy
    ├── service.py           # Service method, servlet wrapper, registry
    ├── memory.py            # In-memory host container
    └── http/                # The translation boundary
        ├── types.py         # Request/response descriptions, variants
        ├── host.py          # Host object protocols
        ├── request.py       # Host request → RequestDescription
        ├── headers.py       # Typed header setters
        └── response.py      # ResponseDescription → host response

=============================================================================
QUICK START
=============================================================================

    from servletbridge import HandlerServlet, ResponseDescription, TextBody

    def hello(request):
        return ResponseDescription(
            status=200,
            headers={"Content-Type": "text/plain"},
            body=TextBody(f"Hello from {request.uri}"),
        )

    servlet = HandlerServlet(hello)
    servlet.service(container_request, container_response)

=============================================================================
"""

from .config import BridgeConfig, configure_logging
from .errors import (
    BridgeError,
    NullResponseTarget,
    HandlerContractViolation,
    UnrecognizedBodyKind,
)
from .http import (
    Scheme,
    RequestMethod,
    LifecycleHandles,
    RequestDescription,
    ResponseDescription,
    IntHeader,
    DateHeader,
    TextHeader,
    TextBody,
    ChunkedBody,
    StreamBody,
    FileBody,
    build_request,
    merge_lifecycle_handles,
    write_response,
)
from .service import (
    Handler,
    HandlerServlet,
    ServiceRegistry,
    defservice,
    invoke,
    make_service_method,
)

__version__ = "1.0.0"

__all__ = [
    # Configuration
    "BridgeConfig",
    "configure_logging",

    # Errors
    "BridgeError",
    "NullResponseTarget",
    "HandlerContractViolation",
    "UnrecognizedBodyKind",

    # Data model
    "Scheme",
    "RequestMethod",
    "LifecycleHandles",
    "RequestDescription",
    "ResponseDescription",
    "IntHeader",
    "DateHeader",
    "TextHeader",
    "TextBody",
    "ChunkedBody",
    "StreamBody",
    "FileBody",

    # Translation
    "build_request",
    "merge_lifecycle_handles",
    "write_response",

    # Service
    "Handler",
    "HandlerServlet",
    "ServiceRegistry",
    "defservice",
    "invoke",
    "make_service_method",
]

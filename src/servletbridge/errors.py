"""
Exceptions raised at the bridge boundary.

None of these are recovered inside the bridge. They propagate to the host
container, which decides what (if anything) the client sees.

    BridgeError
    ├── NullResponseTarget        response handle missing, nothing written
    ├── HandlerContractViolation  handler returned None, nothing written
    └── UnrecognizedBodyKind      body is not a known payload; status and
                                  headers already written stand
"""

from typing import Any, Optional


class BridgeError(Exception):
    """Base class for every error raised by servletbridge."""


class NullResponseTarget(BridgeError):
    """Raised when the host response handle is None."""

    def __init__(self, message: str = "Null response given."):
        super().__init__(message)


class HandlerContractViolation(BridgeError):
    """
    Raised when a handler returns None instead of a response description.

    The offending handler is kept on ``handler`` so the container can name
    it in its own error reporting.
    """

    def __init__(self, handler: Optional[Any] = None, message: str = "handler produced no response"):
        super().__init__(message)
        self.handler = handler


class UnrecognizedBodyKind(BridgeError, TypeError):
    """
    Raised when a response body is not one of the supported payloads.

    Also a TypeError, since the failure is about the type of the value.
    The value itself is kept on ``body``.
    """

    def __init__(self, body: Any):
        super().__init__(f"Unrecognized body: {body!r}")
        self.body = body

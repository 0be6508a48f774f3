"""
=============================================================================
HOST CONTAINER INTERFACES
=============================================================================

Structural types for the objects a servlet-like container hands us.

Nothing here is instantiated by the bridge. Any object with matching
methods is accepted; ``servletbridge.memory`` has concrete in-memory
versions used by the CLI and the tests.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ HostRequest   read-only getters, body as a binary stream           │
    │ HostResponse  setters in a mandated order:                         │
    │                 status → headers → body (writer OR output stream)  │
    │ HostContainer opaque; may expose get_context()                     │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from typing import Any, BinaryIO, Iterable, Optional, Protocol, runtime_checkable


class TextWriter(Protocol):
    """Character output acquired from a host response."""

    def write(self, text: str) -> Any: ...

    def flush(self) -> None: ...

    def close(self) -> None: ...


class OutputStream(Protocol):
    """Raw byte output acquired from a host response."""

    def write(self, data: bytes) -> Any: ...

    def flush(self) -> None: ...

    def close(self) -> None: ...


class HostRequest(Protocol):
    """Mutable, lifecycle-bound request object owned by the container."""

    def get_server_port(self) -> int: ...

    def get_server_name(self) -> str: ...

    def get_remote_addr(self) -> str: ...

    def get_request_uri(self) -> str: ...

    def get_query_string(self) -> Optional[str]: ...

    def get_scheme(self) -> str: ...

    def get_method(self) -> str: ...

    def get_header_names(self) -> Iterable[str]: ...

    def get_header(self, name: str) -> Optional[str]: ...

    def get_content_type(self) -> Optional[str]: ...

    def get_content_length(self) -> int:
        """Body length in bytes; negative when the host does not know it."""
        ...

    def get_character_encoding(self) -> Optional[str]: ...

    def get_input_stream(self) -> BinaryIO: ...


class HostResponse(Protocol):
    """Mutable response object owned by the container."""

    def set_status(self, status: int) -> None: ...

    def set_header(self, name: str, value: str) -> None: ...

    def add_header(self, name: str, value: str) -> None: ...

    def set_int_header(self, name: str, value: int) -> None: ...

    def add_int_header(self, name: str, value: int) -> None: ...

    def set_date_header(self, name: str, millis: int) -> None: ...

    def add_date_header(self, name: str, millis: int) -> None: ...

    def set_content_type(self, content_type: str) -> None: ...

    def set_character_encoding(self, encoding: str) -> None: ...

    def get_writer(self) -> TextWriter: ...

    def get_output_stream(self) -> OutputStream: ...


@runtime_checkable
class HostContainer(Protocol):
    """Container handle that can expose a shared context object."""

    def get_context(self) -> Any: ...

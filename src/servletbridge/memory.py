"""
=============================================================================
IN-MEMORY HOST CONTAINER
=============================================================================

Concrete host objects that live entirely in memory. They implement the
HostRequest / HostResponse protocols and RECORD every call made on them,
which makes them useful both for running handlers locally (see
``python -m servletbridge``) and for asserting call order in tests.

    MemoryRequest     getters over plain fields; calls → request.calls
    MemoryResponse    setters, writer, output stream; calls → response.calls
    MemoryContainer   container handle with a shared context dict

=============================================================================
WHAT A RECORDED RESPONSE LOOKS LIKE
=============================================================================

    response.calls == [
        ("set_character_encoding", "UTF-8"),
        ("set_status", 200),
        ("set_header", "X-Custom", "value"),
        ("set_content_type", "text/plain"),
        ("get_writer",),
    ]
    response.body     == b"ok\\n"
    response.to_bytes() == b"HTTP/1.1 200 OK\\r\\nX-Custom: value\\r\\n..."

=============================================================================
"""

import io
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from http import HTTPStatus
from typing import Any, Dict, List, Optional, Tuple


# =============================================================================
# REQUEST
# =============================================================================

@dataclass
class MemoryRequest:
    """
    Host request backed by plain fields.

    Headers are (name, value) pairs so that case variants and repeated
    names can be expressed, as on the wire. ``get_header`` returns the first
    value for a name, matched case-insensitively.
    """

    method: str = "GET"
    uri: str = "/"
    query_string: Optional[str] = None
    headers: List[Tuple[str, str]] = field(default_factory=list)
    body: bytes = b""
    server_name: str = "localhost"
    server_port: int = 80
    remote_addr: str = "127.0.0.1"
    scheme: str = "http"
    content_type: Optional[str] = None
    content_length: int = -1
    character_encoding: Optional[str] = None

    calls: List[str] = field(default_factory=list, repr=False)
    _stream: Optional[io.BytesIO] = field(default=None, repr=False)

    @classmethod
    def from_target(cls, method: str, target: str, **kwargs: Any) -> "MemoryRequest":
        """Build a request from a request target such as "/search?q=x"."""
        uri, _, query = target.partition("?")
        return cls(method=method, uri=uri or "/", query_string=query or None, **kwargs)

    def get_server_port(self) -> int:
        self.calls.append("get_server_port")
        return self.server_port

    def get_server_name(self) -> str:
        self.calls.append("get_server_name")
        return self.server_name

    def get_remote_addr(self) -> str:
        self.calls.append("get_remote_addr")
        return self.remote_addr

    def get_request_uri(self) -> str:
        self.calls.append("get_request_uri")
        return self.uri

    def get_query_string(self) -> Optional[str]:
        self.calls.append("get_query_string")
        return self.query_string

    def get_scheme(self) -> str:
        self.calls.append("get_scheme")
        return self.scheme

    def get_method(self) -> str:
        self.calls.append("get_method")
        return self.method

    def get_header_names(self) -> List[str]:
        self.calls.append("get_header_names")
        names: List[str] = []
        for name, _ in self.headers:
            if name not in names:
                names.append(name)
        return names

    def get_header(self, name: str) -> Optional[str]:
        self.calls.append("get_header")
        wanted = name.lower()
        for key, value in self.headers:
            if key.lower() == wanted:
                return value
        return None

    def get_content_type(self) -> Optional[str]:
        self.calls.append("get_content_type")
        return self.content_type

    def get_content_length(self) -> int:
        self.calls.append("get_content_length")
        return self.content_length

    def get_character_encoding(self) -> Optional[str]:
        self.calls.append("get_character_encoding")
        return self.character_encoding

    def get_input_stream(self) -> io.BytesIO:
        self.calls.append("get_input_stream")
        if self._stream is None:
            self._stream = io.BytesIO(self.body)
        return self._stream


# =============================================================================
# RESPONSE OUTPUTS
# =============================================================================

class RecordingWriter:
    """Text writer that keeps everything written and counts flushes."""

    def __init__(self) -> None:
        self._buffer = io.StringIO()
        self.flush_count = 0
        self.closed = False
        self.writes: List[str] = []

    def write(self, text: str) -> int:
        if self.closed:
            raise ValueError("write to closed writer")
        self.writes.append(text)
        return self._buffer.write(text)

    def flush(self) -> None:
        self.flush_count += 1

    def close(self) -> None:
        self.closed = True

    def getvalue(self) -> str:
        return self._buffer.getvalue()


class RecordingOutputStream:
    """Byte output stream that keeps everything written and counts flushes."""

    def __init__(self) -> None:
        self._buffer = io.BytesIO()
        self.flush_count = 0
        self.closed = False

    def write(self, data: bytes) -> int:
        if self.closed:
            raise ValueError("write to closed stream")
        return self._buffer.write(data)

    def flush(self) -> None:
        self.flush_count += 1

    def close(self) -> None:
        self.closed = True

    def getvalue(self) -> bytes:
        return self._buffer.getvalue()


# =============================================================================
# RESPONSE
# =============================================================================

class MemoryResponse:
    """
    Host response that records every call made on it.

    Headers are kept as an ordered list of (name, value) pairs. ``set_*``
    replaces all earlier values of a name (matched case-insensitively);
    ``add_*`` appends. Integer and date headers are stored as their
    rendered strings, dates as RFC 7231 HTTP dates. Like a servlet
    container, a Content-Type header also updates ``content_type``.

    As with a real container, a response hands out EITHER a writer OR an
    output stream, never both.
    """

    def __init__(self) -> None:
        self.status: int = 200
        self.headers: List[Tuple[str, str]] = []
        self.content_type: Optional[str] = None
        self.character_encoding: Optional[str] = None
        self.calls: List[Tuple[Any, ...]] = []
        self.writer: Optional[RecordingWriter] = None
        self.output_stream: Optional[RecordingOutputStream] = None

    # =========================================================================
    # STATUS AND HEADERS
    # =========================================================================

    def set_status(self, status: int) -> None:
        self.calls.append(("set_status", status))
        self.status = status

    def set_header(self, name: str, value: str) -> None:
        self.calls.append(("set_header", name, value))
        self._replace(name, value)
        self._track_content_type(name, value)

    def add_header(self, name: str, value: str) -> None:
        self.calls.append(("add_header", name, value))
        self.headers.append((name, value))
        self._track_content_type(name, value)

    def set_int_header(self, name: str, value: int) -> None:
        self.calls.append(("set_int_header", name, value))
        self._replace(name, str(value))

    def add_int_header(self, name: str, value: int) -> None:
        self.calls.append(("add_int_header", name, value))
        self.headers.append((name, str(value)))

    def set_date_header(self, name: str, millis: int) -> None:
        self.calls.append(("set_date_header", name, millis))
        self._replace(name, format_http_date(from_epoch_millis(millis)))

    def add_date_header(self, name: str, millis: int) -> None:
        self.calls.append(("add_date_header", name, millis))
        self.headers.append((name, format_http_date(from_epoch_millis(millis))))

    def set_content_type(self, content_type: str) -> None:
        self.calls.append(("set_content_type", content_type))
        self.content_type = content_type

    def set_character_encoding(self, encoding: str) -> None:
        self.calls.append(("set_character_encoding", encoding))
        self.character_encoding = encoding

    def get_header(self, name: str) -> Optional[str]:
        """First value of ``name`` (any case), or None."""
        values = self.get_headers(name)
        return values[0] if values else None

    def get_headers(self, name: str) -> List[str]:
        """All values of ``name`` (any case), in order."""
        wanted = name.lower()
        return [value for key, value in self.headers if key.lower() == wanted]

    def _replace(self, name: str, value: str) -> None:
        wanted = name.lower()
        self.headers = [(k, v) for k, v in self.headers if k.lower() != wanted]
        self.headers.append((name, value))

    def _track_content_type(self, name: str, value: str) -> None:
        if name.lower() == "content-type":
            self.content_type = value

    # =========================================================================
    # BODY OUTPUTS
    # =========================================================================

    def get_writer(self) -> RecordingWriter:
        self.calls.append(("get_writer",))
        if self.output_stream is not None:
            raise RuntimeError("get_output_stream() has already been called")
        if self.writer is None:
            self.writer = RecordingWriter()
        return self.writer

    def get_output_stream(self) -> RecordingOutputStream:
        self.calls.append(("get_output_stream",))
        if self.writer is not None:
            raise RuntimeError("get_writer() has already been called")
        if self.output_stream is None:
            self.output_stream = RecordingOutputStream()
        return self.output_stream

    @property
    def body(self) -> bytes:
        """Everything written so far, as bytes."""
        if self.writer is not None:
            return self.writer.getvalue().encode(self.character_encoding or "ISO-8859-1")
        if self.output_stream is not None:
            return self.output_stream.getvalue()
        return b""

    # =========================================================================
    # SERIALIZATION
    # =========================================================================

    @property
    def status_line(self) -> str:
        """Status line, e.g. "HTTP/1.1 200 OK"."""
        try:
            phrase = HTTPStatus(self.status).phrase
        except ValueError:
            phrase = ""
        return f"HTTP/1.1 {self.status} {phrase}".rstrip()

    def to_bytes(self) -> bytes:
        """
        Render the recorded response as an HTTP/1.1 message.

        Content-Type is rendered once from ``content_type`` (with charset,
        when one was set), in place of any raw Content-Type header. The
        Content-Length is added unless a header already provides it.
        """
        body = self.body
        content_type = self.content_type
        if content_type and self.character_encoding and "charset" not in content_type.lower():
            content_type = f"{content_type}; charset={self.character_encoding.lower()}"

        headers = []
        for name, value in self.headers:
            if name.lower() == "content-type":
                if content_type:
                    headers.append(("Content-Type", content_type))
                    content_type = None
                continue
            headers.append((name, value))
        if content_type:
            headers.append(("Content-Type", content_type))

        names = {name.lower() for name, _ in headers}
        if "content-length" not in names:
            headers.append(("Content-Length", str(len(body))))

        lines = [self.status_line]
        lines.extend(f"{name}: {value}" for name, value in headers)
        lines.append("")

        header_bytes = "\r\n".join(lines).encode("iso-8859-1") + b"\r\n"
        return header_bytes + body


# =============================================================================
# CONTAINER
# =============================================================================

@dataclass
class MemoryContainer:
    """Container handle carrying a shared context dict."""

    name: str = "memory"
    context: Dict[str, Any] = field(default_factory=dict)

    def get_context(self) -> Dict[str, Any]:
        return self.context


# =============================================================================
# DATE HELPERS
# =============================================================================

def from_epoch_millis(millis: int) -> datetime:
    """UTC datetime for a millisecond epoch value."""
    return datetime(1970, 1, 1, tzinfo=timezone.utc) + timedelta(milliseconds=millis)


def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date (RFC 7231).

    Format: Day, DD Mon YYYY HH:MM:SS GMT
    Example: Wed, 01 Jan 2026 12:00:00 GMT
    """
    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    dt = dt.astimezone(timezone.utc)
    return (
        f"{days[dt.weekday()]}, {dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )

"""
pytest configuration and fixtures.
"""

import sys
from pathlib import Path
from typing import List

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from servletbridge import BridgeConfig, RequestDescription, ResponseDescription, TextBody
from servletbridge.memory import MemoryContainer, MemoryRequest, MemoryResponse


@pytest.fixture
def sample_get_request() -> MemoryRequest:
    """Sample GET request with a query string and a few headers."""
    return MemoryRequest(
        method="GET",
        uri="/api/users",
        query_string="page=1&limit=10",
        headers=[
            ("Host", "localhost:8080"),
            ("User-Agent", "pytest"),
            ("Accept", "application/json"),
        ],
        server_name="localhost",
        server_port=8080,
        remote_addr="192.168.1.20",
        scheme="http",
    )


@pytest.fixture
def sample_post_request() -> MemoryRequest:
    """Sample POST request with a JSON body."""
    body = b'{"name": "John", "email": "john@example.com"}'
    return MemoryRequest(
        method="POST",
        uri="/api/users",
        headers=[
            ("Host", "localhost:8080"),
            ("Content-Type", "application/json"),
            ("Content-Length", str(len(body))),
        ],
        body=body,
        content_type="application/json",
        content_length=len(body),
        character_encoding="UTF-8",
        scheme="https",
        server_port=443,
    )


@pytest.fixture
def response() -> MemoryResponse:
    """Fresh recording response."""
    return MemoryResponse()


@pytest.fixture
def container() -> MemoryContainer:
    """Container handle with a small shared context."""
    return MemoryContainer(context={"app": "tests"})


@pytest.fixture
def config() -> BridgeConfig:
    """Default bridge configuration."""
    return BridgeConfig()


@pytest.fixture
def seen_requests() -> List[RequestDescription]:
    """List the recording handler appends to."""
    return []


@pytest.fixture
def ok_handler(seen_requests: List[RequestDescription]):
    """Handler that records its request and answers 200 "ok"."""

    def handler(request: RequestDescription) -> ResponseDescription:
        seen_requests.append(request)
        return ResponseDescription(
            status=200,
            headers={"Content-Type": "text/plain"},
            body=TextBody("ok"),
        )

    return handler

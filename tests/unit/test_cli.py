"""
Unit tests for the command-line entry point.
"""

import sys
import types

import pytest

from servletbridge.__main__ import echo_handler, load_handler, main, parse_header
from servletbridge.http.types import ResponseDescription


@pytest.fixture
def handler_module(monkeypatch):
    """Importable module with a handler and a broken handler."""
    module = types.ModuleType("cli_handlers")
    module.hello = lambda request: ResponseDescription(status=201, body="hi " + request.uri)
    module.nothing = lambda request: None
    module.value = 5
    monkeypatch.setitem(sys.modules, "cli_handlers", module)
    return module


class TestMain:
    """Tests for main()."""

    def test_echo(self, capsys):
        status = main(["--uri", "/search?q=x", "-H", "X-Test: 1"])
        out = capsys.readouterr().out

        assert status == 0
        assert out.startswith("HTTP/1.1 200 OK\r\n")
        assert "Content-Type: text/plain; charset=utf-8" in out
        assert "uri: /search" in out
        assert "query: q=x" in out
        assert "header x-test: 1" in out

    def test_echo_body(self, capsys):
        status = main(["-X", "post", "--body", "hello"])
        out = capsys.readouterr().out

        assert status == 0
        assert "method: post" in out
        assert "body: hello" in out

    def test_custom_handler(self, capsys, handler_module):
        status = main(["--handler", "cli_handlers:hello", "--uri", "/x"])
        out = capsys.readouterr().out

        assert status == 0
        assert out.startswith("HTTP/1.1 201 Created\r\n")
        assert out.endswith("hi /x\n")

    def test_contract_violation_exit_code(self, capsys, handler_module):
        status = main(["--handler", "cli_handlers:nothing"])

        assert status == 1
        assert "no response" in capsys.readouterr().err


class TestHelpers:
    """Tests for CLI helpers."""

    def test_parse_header(self):
        assert parse_header("X-Id:  42 ") == ("X-Id", "42")

    def test_parse_header_rejects_garbage(self):
        with pytest.raises(Exception):
            parse_header("no colon here")

    def test_load_handler(self, handler_module):
        assert load_handler("cli_handlers:hello") is handler_module.hello

    @pytest.mark.parametrize("target", ["cli_handlers", "cli_handlers:value"])
    def test_load_handler_rejects(self, handler_module, target):
        with pytest.raises(ValueError):
            load_handler(target)

    def test_echo_handler_without_body(self):
        from servletbridge.http.request import build_request
        from servletbridge.memory import MemoryRequest

        response = echo_handler(build_request(MemoryRequest(uri="/a")))

        assert response.status == 200
        assert "uri: /a" in response.body.text

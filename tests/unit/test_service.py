"""
Unit tests for the service method, servlet wrapper and registration.
"""

import logging
import types
from typing import List

import pytest

from servletbridge.config import BridgeConfig
from servletbridge.errors import (
    HandlerContractViolation,
    NullResponseTarget,
    UnrecognizedBodyKind,
)
from servletbridge.http.types import (
    ChunkedBody,
    RequestDescription,
    RequestMethod,
    ResponseDescription,
    TextBody,
)
from servletbridge.memory import MemoryContainer, MemoryRequest, MemoryResponse
from servletbridge.service import (
    HandlerServlet,
    ServiceRegistry,
    defservice,
    invoke,
    make_service_method,
    service_name,
)


def none_handler(request: RequestDescription) -> None:
    return None


class TestInvoke:
    """Tests for the invocation contract."""

    def test_full_round_trip(
        self,
        ok_handler,
        seen_requests: List[RequestDescription],
        container: MemoryContainer,
        sample_get_request: MemoryRequest,
        response: MemoryResponse,
    ):
        invoke(ok_handler, container, sample_get_request, response)

        assert len(seen_requests) == 1
        assert seen_requests[0].request_method is RequestMethod.GET
        assert seen_requests[0].uri == "/api/users"
        assert response.status == 200
        assert response.content_type == "text/plain"
        assert response.body == b"ok\n"

    def test_encoding_forced_first(self, ok_handler, container, sample_get_request, response):
        """UTF-8 is set before anything else touches the response."""
        invoke(ok_handler, container, sample_get_request, response)

        assert response.calls[0] == ("set_character_encoding", "UTF-8")
        assert response.character_encoding == "UTF-8"

    def test_encoding_set_before_handler_runs(self, container, sample_get_request, response):
        seen = []

        def handler(request):
            seen.append(response.character_encoding)
            return ResponseDescription(status=204)

        invoke(handler, container, sample_get_request, response)

        assert seen == ["UTF-8"]

    def test_configured_encoding(self, ok_handler, container, sample_get_request, response):
        invoke(ok_handler, container, sample_get_request, response,
               BridgeConfig(character_encoding="ISO-8859-1"))

        assert response.character_encoding == "ISO-8859-1"

    def test_handler_called_once(self, container, sample_get_request, response):
        calls = []

        def handler(request):
            calls.append(request)
            return ResponseDescription(status=200)

        invoke(handler, container, sample_get_request, response)

        assert len(calls) == 1

    def test_lifecycle_handles_merged(
        self, ok_handler, seen_requests, container, sample_get_request, response,
    ):
        invoke(ok_handler, container, sample_get_request, response)
        lifecycle = seen_requests[0].lifecycle

        assert lifecycle.container is container
        assert lifecycle.request is sample_get_request
        assert lifecycle.response is response
        assert lifecycle.context == {"app": "tests"}

    def test_lifecycle_merge_disabled(
        self, ok_handler, seen_requests, container, sample_get_request, response,
    ):
        config = BridgeConfig(merge_lifecycle_handles=False)
        invoke(ok_handler, container, sample_get_request, response, config)

        assert seen_requests[0].lifecycle is None

    def test_null_response_checked_first(self, ok_handler, container, sample_get_request):
        """A missing response fails before the request is read."""
        with pytest.raises(NullResponseTarget):
            invoke(ok_handler, container, sample_get_request, None)

        assert sample_get_request.calls == []

    def test_handler_returning_none(self, container, sample_get_request, response):
        """No response from the handler: nothing but the encoding is written."""
        with pytest.raises(HandlerContractViolation) as exc_info:
            invoke(none_handler, container, sample_get_request, response)

        assert exc_info.value.handler is none_handler
        assert "no response" in str(exc_info.value)
        assert response.calls == [("set_character_encoding", "UTF-8")]

    def test_unrecognized_body_propagates(self, container, sample_get_request, response):
        def handler(request):
            return ResponseDescription(status=200, body=42)

        with pytest.raises(UnrecognizedBodyKind):
            invoke(handler, container, sample_get_request, response)

        assert response.status == 200

    def test_handler_exception_propagates(self, container, sample_get_request, response):
        """Handler errors are not caught or converted."""

        def handler(request):
            raise KeyError("boom")

        with pytest.raises(KeyError):
            invoke(handler, container, sample_get_request, response)

    def test_contract_violation_logged(self, container, sample_get_request, response, caplog):
        with caplog.at_level(logging.ERROR, logger="servletbridge"):
            with pytest.raises(HandlerContractViolation):
                invoke(none_handler, container, sample_get_request, response)

        assert "none_handler" in caplog.text

    def test_handler_reads_body(self, container, sample_post_request, response):
        def handler(request):
            data = request.body.read()
            return ResponseDescription(status=200, body=ChunkedBody([len(data), ":", data.decode()]))

        invoke(handler, container, sample_post_request, response)

        assert response.body == b"%d:%s" % (len(sample_post_request.body), sample_post_request.body)

    def test_utf8_text(self, container, sample_get_request, response):
        def handler(request):
            return ResponseDescription(status=200, body=TextBody("héllo ✓"))

        invoke(handler, container, sample_get_request, response)

        assert response.body == "héllo ✓\n".encode("utf-8")


class TestMakeServiceMethod:
    """Tests for make_service_method."""

    def test_service_signature(self, ok_handler, container, sample_get_request, response):
        service = make_service_method(ok_handler)

        assert service(container, sample_get_request, response) is None
        assert response.body == b"ok\n"

    def test_service_named_after_handler(self):
        assert make_service_method(none_handler).__name__ == "service_none_handler"

    def test_reusable_across_requests(self, ok_handler, seen_requests, container):
        service = make_service_method(ok_handler)
        for path in ("/a", "/b"):
            service(container, MemoryRequest(uri=path), MemoryResponse())

        assert [r.uri for r in seen_requests] == ["/a", "/b"]


class TestHandlerServlet:
    """Tests for the servlet wrapper."""

    def test_servlet_is_container(self, ok_handler, seen_requests, sample_get_request, response):
        servlet = HandlerServlet(ok_handler, context={"db": "memory"})
        servlet.service(sample_get_request, response)

        lifecycle = seen_requests[0].lifecycle
        assert lifecycle.container is servlet
        assert lifecycle.context == {"db": "memory"}
        assert response.body == b"ok\n"

    def test_default_context(self, ok_handler):
        assert HandlerServlet(ok_handler).get_context() == {}

    def test_repr(self, ok_handler):
        assert repr(HandlerServlet(none_handler)) == "HandlerServlet(none_handler)"


class TestDefservice:
    """Tests for named entry points."""

    def test_default_name(self):
        assert service_name() == "-service"
        assert service_name("my-prefix-") == "my-prefix-service"

    def test_binds_into_mapping(self, ok_handler, container, sample_get_request, response):
        namespace = {}
        method = defservice(ok_handler, namespace=namespace)

        assert namespace == {"-service": method}
        namespace["-service"](container, sample_get_request, response)
        assert response.body == b"ok\n"

    def test_binds_onto_module(self, ok_handler):
        module = types.ModuleType("app")
        method = defservice(ok_handler, prefix="app-", namespace=module)

        assert getattr(module, "app-service") is method

    def test_prefix_from_config(self, ok_handler):
        namespace = {}
        defservice(ok_handler, namespace=namespace, config=BridgeConfig(service_prefix="web-"))

        assert list(namespace) == ["web-service"]


class TestServiceRegistry:
    """Tests for ServiceRegistry."""

    def test_register_and_get(self, ok_handler, container, sample_get_request, response):
        registry = ServiceRegistry()
        name = registry.register(ok_handler, prefix="api-")

        assert name == "api-service"
        assert "api-service" in registry
        registry.get(name)(container, sample_get_request, response)
        assert response.body == b"ok\n"

    def test_decorator(self):
        registry = ServiceRegistry()

        @registry.service()
        def index(request):
            return ResponseDescription(status=200)

        @registry.service(prefix="admin-")
        def admin(request):
            return ResponseDescription(status=403)

        assert list(registry) == ["-service", "admin-service"]
        assert len(registry) == 2
        assert index.__name__ == "index"

    def test_duplicate_name(self, ok_handler):
        registry = ServiceRegistry()
        registry.register(ok_handler)

        with pytest.raises(ValueError):
            registry.register(ok_handler)

    def test_missing_name(self):
        with pytest.raises(KeyError):
            ServiceRegistry().get("-service")

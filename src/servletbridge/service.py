"""
=============================================================================
SERVICE METHOD
=============================================================================

Turns a handler into the service method a servlet-like container calls with
its three lifecycle objects.

    container.service(container, request, response)
        │
        ├─ 1. response is None?          → NullResponseTarget
        ├─ 2. response.set_character_encoding("UTF-8")
        ├─ 3. build_request(request)     (+ lifecycle handles)
        ├─ 4. handler(description)
        │        └─ None?                → HandlerContractViolation
        └─ 5. write_response(response, result)

=============================================================================
REGISTRATION
=============================================================================

Containers find entry points by name. ``defservice`` binds a handler to the
name ``prefix + "service"`` ("-service" by default); ``ServiceRegistry``
keeps several such bindings and offers a decorator form:

    registry = ServiceRegistry()

    @registry.service(prefix="api-")
    def api(request):
        return ResponseDescription(status=200, body=TextBody("ok"))

    registry.get("api-service")(container, request, response)

=============================================================================
"""

import logging
from collections import abc
from typing import Any, Callable, Dict, Iterator, MutableMapping, Optional, Union

from .config import BridgeConfig, resolve_config
from .errors import BridgeError, HandlerContractViolation, NullResponseTarget
from .http.host import HostRequest, HostResponse
from .http.request import build_request, merge_lifecycle_handles
from .http.response import write_response
from .http.types import RequestDescription, ResponseDescription


logger = logging.getLogger(__name__)


Handler = Callable[[RequestDescription], Optional[ResponseDescription]]
ServiceMethod = Callable[[Any, HostRequest, HostResponse], None]


# =============================================================================
# INVOCATION
# =============================================================================

def invoke(
    handler: Handler,
    container: Any,
    request: HostRequest,
    response: HostResponse,
    config: Optional[BridgeConfig] = None,
) -> None:
    """
    Run ``handler`` for one request/response pair.

    Args:
        handler: Pure function from RequestDescription to ResponseDescription.
        container: The container handle (passed through, never inspected).
        request: The container's request handle.
        response: The container's response handle.
        config: Bridge settings; defaults when omitted.

    Raises:
        NullResponseTarget: ``response`` is None. Nothing is read or written.
        HandlerContractViolation: The handler returned None.
        UnrecognizedBodyKind: The handler's body is not a supported payload.
    """
    if response is None:
        logger.error("Service called without a response object")
        raise NullResponseTarget()

    config = resolve_config(config)

    # Must precede the first get_writer() call to take effect
    response.set_character_encoding(config.character_encoding)

    description = build_request(request)
    if config.merge_lifecycle_handles:
        description = merge_lifecycle_handles(description, container, request, response)

    result = handler(description)
    if result is None:
        logger.error(f"Handler {_handler_name(handler)} returned no response for {description.uri}")
        raise HandlerContractViolation(handler)

    try:
        write_response(response, result, config)
    except BridgeError as e:
        logger.error(f"Failed to write response for {description.uri}: {e}")
        raise


def make_service_method(handler: Handler, config: Optional[BridgeConfig] = None) -> ServiceMethod:
    """
    Wrap ``handler`` in a function shaped like a servlet service method.

    The returned function takes (container, request, response) and returns
    None.
    """

    def service(container: Any, request: HostRequest, response: HostResponse) -> None:
        invoke(handler, container, request, response, config)

    service.__name__ = f"service_{_handler_name(handler)}"
    service.__doc__ = f"Service method for {_handler_name(handler)}."
    return service


def _handler_name(handler: Any) -> str:
    return getattr(handler, "__name__", type(handler).__name__)


class HandlerServlet:
    """
    Container-facing object wrapping one handler.

    Its ``service(request, response)`` passes the servlet itself as the
    container handle, so legacy handlers see it in ``lifecycle.container``.
    """

    def __init__(
        self,
        handler: Handler,
        config: Optional[BridgeConfig] = None,
        context: Optional[Any] = None,
    ):
        self.handler = handler
        self.config = resolve_config(config)
        self.context = context if context is not None else {}
        self._service = make_service_method(handler, self.config)

    def get_context(self) -> Any:
        """Shared context exposed to legacy handlers."""
        return self.context

    def service(self, request: HostRequest, response: HostResponse) -> None:
        self._service(self, request, response)

    def __repr__(self) -> str:
        return f"HandlerServlet({_handler_name(self.handler)})"


# =============================================================================
# REGISTRATION
# =============================================================================

def service_name(prefix: str = "-") -> str:
    """Entry-point name for ``prefix``: "-" gives "-service"."""
    return f"{prefix}service"


def defservice(
    handler: Handler,
    prefix: Optional[str] = None,
    namespace: Optional[Union[MutableMapping[str, Any], Any]] = None,
    config: Optional[BridgeConfig] = None,
) -> ServiceMethod:
    """
    Bind ``handler`` to a named service method.

    Args:
        handler: The handler to serve.
        prefix: Name prefix; ``config.service_prefix`` when omitted.
        namespace: Where to store the method under its name: a mapping
                   (e.g. ``globals()``) or any object (e.g. a module).
        config: Bridge settings; defaults when omitted.

    Returns:
        The service method.
    """
    config = resolve_config(config)
    name = service_name(config.service_prefix if prefix is None else prefix)
    method = make_service_method(handler, config)

    if namespace is not None:
        if isinstance(namespace, abc.MutableMapping):
            namespace[name] = method
        else:
            setattr(namespace, name, method)

    logger.debug(f"Defined service {name!r} for {_handler_name(handler)}")
    return method


class ServiceRegistry:
    """Named service methods, looked up by the container by name."""

    def __init__(self, config: Optional[BridgeConfig] = None):
        self.config = resolve_config(config)
        self._services: Dict[str, ServiceMethod] = {}

    def register(self, handler: Handler, prefix: Optional[str] = None) -> str:
        """
        Register ``handler`` and return the entry-point name it was bound to.

        Raises:
            ValueError: If the name is already taken.
        """
        name = service_name(self.config.service_prefix if prefix is None else prefix)
        if name in self._services:
            raise ValueError(f"Service already registered: {name}")

        self._services[name] = defservice(handler, prefix=prefix, config=self.config)
        return name

    def service(self, prefix: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Decorator form of ``register``. Returns the handler unchanged."""

        def decorator(handler: Handler) -> Handler:
            self.register(handler, prefix)
            return handler

        return decorator

    def get(self, name: str) -> ServiceMethod:
        """
        Look up a service method by name.

        Raises:
            KeyError: If nothing is registered under ``name``.
        """
        return self._services[name]

    def __contains__(self, name: object) -> bool:
        return name in self._services

    def __iter__(self) -> Iterator[str]:
        return iter(self._services)

    def __len__(self) -> int:
        return len(self._services)

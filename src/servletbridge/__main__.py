"""
=============================================================================
SERVLETBRIDGE CLI
=============================================================================

Runs a handler once against an in-memory request and prints the response
exactly as the container would have produced it.

    python -m servletbridge --method POST --uri "/echo?x=1" \\
        --header "Content-Type: text/plain" --body "hello"

    python -m servletbridge --handler myapp.web:handler --uri /health

Without --handler a built-in echo handler is used.

=============================================================================
"""

import argparse
import importlib
import sys
from typing import List, Optional

from . import __version__
from .config import BridgeConfig, configure_logging
from .errors import BridgeError
from .http.types import RequestDescription, ResponseDescription, TextBody
from .memory import MemoryContainer, MemoryRequest, MemoryResponse
from .service import Handler, make_service_method


def echo_handler(request: RequestDescription) -> ResponseDescription:
    """Describe the request back to the client as plain text."""
    lines = [
        f"method: {request.request_method.value}",
        f"uri: {request.uri}",
        f"query: {request.query_string or ''}",
        f"scheme: {request.scheme.value}",
    ]
    lines.extend(f"header {name}: {value}" for name, value in sorted(request.headers.items()))

    body = request.body.read() if request.body is not None else b""
    if body:
        lines.append(f"body: {body.decode(request.character_encoding or 'utf-8', 'replace')}")

    return ResponseDescription(
        status=200,
        headers={"Content-Type": "text/plain"},
        body=TextBody("\n".join(lines)),
    )


def load_handler(target: str) -> Handler:
    """
    Import a handler given as "package.module:attribute".

    Raises:
        ValueError: If ``target`` has no ":" or the attribute is not callable.
    """
    module_name, _, attribute = target.partition(":")
    if not module_name or not attribute:
        raise ValueError(f"Handler must look like 'module:attribute', got {target!r}")

    handler = getattr(importlib.import_module(module_name), attribute)
    if not callable(handler):
        raise ValueError(f"{target} is not callable")
    return handler


def parse_header(raw: str) -> tuple:
    name, sep, value = raw.partition(":")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"Header must look like 'Name: value', got {raw!r}")
    return name.strip(), value.strip()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="servletbridge",
        description="Run a handler once against an in-memory servlet-style container",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m servletbridge                                  # Echo GET /
  python -m servletbridge --uri "/search?q=x"              # Echo with query
  python -m servletbridge -X POST --body hello             # Echo a body
  python -m servletbridge --handler myapp.web:handler      # Your own handler
        """,
    )

    # ─────────────────────────────────────────────────────────────────────
    # REQUEST ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument("--method", "-X", default="GET", help="Request method (default: GET)")
    parser.add_argument("--uri", "-u", default="/", help="Request target, may include ?query (default: /)")
    parser.add_argument(
        "--header", "-H",
        action="append",
        default=[],
        type=parse_header,
        help="Request header as 'Name: value' (repeatable)",
    )
    parser.add_argument("--body", "-d", default=None, help="Request body text")

    # ─────────────────────────────────────────────────────────────────────
    # HANDLER AND LOGGING
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument("--handler", default=None, help="Handler as module:attribute (default: echo)")
    parser.add_argument(
        "--log-level", "-l",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: BRIDGE_LOG_LEVEL or INFO)",
    )
    parser.add_argument("--version", "-v", action="version", version=f"servletbridge {__version__}")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point. Returns the process exit status."""
    args = build_parser().parse_args(argv)

    config = BridgeConfig.from_env()
    if args.log_level:
        config.log_level = args.log_level
    config.validate()
    configure_logging(config.log_level)

    handler = load_handler(args.handler) if args.handler else echo_handler

    body = (args.body or "").encode("utf-8")
    content_type = next((v for n, v in args.header if n.lower() == "content-type"), None)
    request = MemoryRequest.from_target(
        args.method.upper(),
        args.uri,
        headers=list(args.header),
        body=body,
        content_type=content_type,
        content_length=len(body) if args.body is not None else -1,
    )
    response = MemoryResponse()

    try:
        make_service_method(handler, config)(MemoryContainer(), request, response)
    except BridgeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    sys.stdout.write(response.to_bytes().decode(config.character_encoding, "replace"))
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())

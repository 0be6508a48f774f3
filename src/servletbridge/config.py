"""
=============================================================================
BRIDGE CONFIGURATION
=============================================================================

Settings shared by the request builder, response writer and service method.

    ┌─────────────────────────────────────────────────────────────────────┐
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Values passed to BridgeConfig(...) in code                     │
    │   2. Environment variables via BridgeConfig.from_env()              │
    │      └── BRIDGE_COPY_BUFFER_SIZE=65536 python -m servletbridge      │
    │   3. Defaults below                                                 │
    └─────────────────────────────────────────────────────────────────────┘

Every component takes ``config=None`` and falls back to ``BridgeConfig()``.

=============================================================================
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass
class BridgeConfig:
    """
    Configuration for the bridge.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    RESPONSE
    - character_encoding, line_terminator, copy_buffer_size

    REQUEST
    - merge_lifecycle_handles

    REGISTRATION
    - service_prefix

    LOGGING
    - log_level

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # RESPONSE SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    character_encoding: str = "UTF-8"
    """
    Encoding forced on every response before the handler runs.
    Must be set before the host writer is first acquired.
    """

    line_terminator: str = "\n"
    """Appended after a whole-string body."""

    copy_buffer_size: int = 8192
    """Chunk size in bytes when copying stream and file bodies."""

    # ─────────────────────────────────────────────────────────────────────
    # REQUEST SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    merge_lifecycle_handles: bool = True
    """Attach container/request/response handles to each request description."""

    # ─────────────────────────────────────────────────────────────────────
    # REGISTRATION
    # ─────────────────────────────────────────────────────────────────────

    service_prefix: str = "-"
    """Prefix of generated entry-point names ("-" gives "-service")."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "BridgeConfig":
        """
        Create configuration from environment variables.

        BRIDGE_CHARACTER_ENCODING       Forced response encoding (UTF-8)
        BRIDGE_MERGE_LIFECYCLE_HANDLES  Attach host handles (true)
        BRIDGE_SERVICE_PREFIX           Entry-point name prefix (-)
        BRIDGE_COPY_BUFFER_SIZE         Stream copy chunk size (8192)
        BRIDGE_LOG_LEVEL                Logging level (INFO)
        """
        return cls(
            character_encoding=os.getenv("BRIDGE_CHARACTER_ENCODING", "UTF-8"),
            merge_lifecycle_handles=_parse_bool(
                os.getenv("BRIDGE_MERGE_LIFECYCLE_HANDLES", "true"),
                "BRIDGE_MERGE_LIFECYCLE_HANDLES",
            ),
            service_prefix=os.getenv("BRIDGE_SERVICE_PREFIX", "-"),
            copy_buffer_size=int(os.getenv("BRIDGE_COPY_BUFFER_SIZE", "8192")),
            log_level=os.getenv("BRIDGE_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """Raise ValueError for settings the bridge cannot work with."""
        if not self.character_encoding:
            raise ValueError("character_encoding must not be empty")

        if not self.line_terminator:
            raise ValueError("line_terminator must not be empty")

        if self.copy_buffer_size < 1:
            raise ValueError(f"copy_buffer_size must be >= 1, got {self.copy_buffer_size}")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.log_level}")


def _parse_bool(raw: str, name: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def resolve_config(config: Optional[BridgeConfig]) -> BridgeConfig:
    """Return ``config``, or the defaults when it is None."""
    return config if config is not None else BridgeConfig()


def configure_logging(level: str = "INFO") -> None:
    """
    Configure logging for command-line use.

    The library itself never calls this; applications embedding the bridge
    configure logging their own way.
    """
    numeric = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=numeric,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logging.getLogger("servletbridge").setLevel(numeric)

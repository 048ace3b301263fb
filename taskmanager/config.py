"""
Server Configuration
=====================
Defaults reproduce the classic setup (port 4001, all interfaces).
Environment variables override defaults; CLI flags override both.

Environment:
    TASKMANAGER_HOST       Interface to bind (default 0.0.0.0)
    TASKMANAGER_PORT       TCP port (default 4001)
    TASKMANAGER_LOG_LEVEL  debug / info / warning / error (default info)
    TASKMANAGER_LOG_FILE   Also append log lines to this file
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from taskmanager.forms import DEFAULT_MAX_FORM_BYTES

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 4001

ENV_PREFIX = "TASKMANAGER_"


@dataclass(frozen=True)
class ServerConfig:
    """Everything needed to start the service."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    max_form_bytes: int = DEFAULT_MAX_FORM_BYTES
    log_level: str = "info"
    log_file: str = ""          # Empty → no log file

    def __post_init__(self):
        if not 0 <= self.port <= 65535:
            raise ValueError(f"Port out of range: {self.port}")
        if self.max_form_bytes <= 0:
            raise ValueError(f"max_form_bytes must be positive: {self.max_form_bytes}")

    @property
    def address(self) -> str:
        """Listen address as printed at startup, e.g. ":4001"."""
        host = "" if self.host == DEFAULT_HOST else self.host
        return f"{host}:{self.port}"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> ServerConfig:
        """Build a config from ``TASKMANAGER_*`` variables.

        Raises:
            ValueError: If TASKMANAGER_PORT is not an integer in range.
        """
        env = os.environ if environ is None else environ
        kwargs = {}

        host = env.get(f"{ENV_PREFIX}HOST")
        if host:
            kwargs["host"] = host

        port = env.get(f"{ENV_PREFIX}PORT")
        if port:
            try:
                kwargs["port"] = int(port)
            except ValueError:
                raise ValueError(f"Invalid {ENV_PREFIX}PORT: {port!r}") from None

        level = env.get(f"{ENV_PREFIX}LOG_LEVEL")
        if level:
            kwargs["log_level"] = level.lower()

        log_file = env.get(f"{ENV_PREFIX}LOG_FILE")
        if log_file:
            kwargs["log_file"] = log_file

        return cls(**kwargs)

    def with_overrides(self, **overrides) -> ServerConfig:
        """Copy with every non-None override applied (CLI flags)."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

"""Runtime configuration helpers for the bridge server."""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Final, Mapping, Optional

DEFAULT_HOST: Final[str] = "localhost"
DEFAULT_PORT: Final[int] = 9009
DEFAULT_TIMEOUT: Final[float] = 30.0

ENV_HOST: Final[str] = "BINJA_MCP_HOST"
ENV_PORT: Final[str] = "BINJA_MCP_PORT"
ENV_TIMEOUT: Final[str] = "BINJA_MCP_TIMEOUT"


def _parse_int(value: str | None, *, default: int) -> int:
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _parse_float(value: str | None, *, default: float) -> float:
    if value is None or not value.strip():
        return default
    try:
        parsed = float(value)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


@dataclass(frozen=True, slots=True)
class BridgeConfig:
    """Connection settings for the Binary Ninja plugin HTTP server.

    Built once at startup and handed to every client the process creates.
    """

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    timeout: float = DEFAULT_TIMEOUT

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        *,
        base: Optional["BridgeConfig"] = None,
    ) -> "BridgeConfig":
        """Overlay ``BINJA_MCP_*`` environment values on *base* (or the defaults)."""

        env = os.environ if environ is None else environ
        config = base or cls()
        host = (env.get(ENV_HOST) or "").strip() or config.host
        port = _parse_int(env.get(ENV_PORT), default=config.port)
        timeout = _parse_float(env.get(ENV_TIMEOUT), default=config.timeout)
        return replace(config, host=host, port=port, timeout=timeout)

    def with_overrides(
        self,
        *,
        host: Optional[str] = None,
        port: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> "BridgeConfig":
        """Return a copy with any explicitly supplied values applied."""

        return replace(
            self,
            host=host if host else self.host,
            port=int(port) if port is not None else self.port,
            timeout=float(timeout) if timeout is not None and timeout > 0 else self.timeout,
        )


def resolve_config(
    *,
    host: Optional[str] = None,
    port: Optional[int] = None,
    timeout: Optional[float] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> BridgeConfig:
    """Resolve settings with precedence defaults < environment < command line."""

    return BridgeConfig.from_env(environ).with_overrides(host=host, port=port, timeout=timeout)


__all__ = [
    "BridgeConfig",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "DEFAULT_TIMEOUT",
    "ENV_HOST",
    "ENV_PORT",
    "ENV_TIMEOUT",
    "resolve_config",
]

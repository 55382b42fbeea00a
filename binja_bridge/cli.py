"""Command-line entry point for the bridge."""
from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

import uvicorn

from .app import create_server, create_sse_app
from .utils.config import BridgeConfig, resolve_config
from .utils.logging import configure_root

logger = logging.getLogger("binja.bridge.cli")


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser; unset connection flags defer to the environment."""

    parser = argparse.ArgumentParser(
        prog="binja-bridge",
        description="MCP bridge for the Binary Ninja MCP plugin",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Binary Ninja plugin host (env BINJA_MCP_HOST, default: localhost)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Binary Ninja plugin port (env BINJA_MCP_PORT, default: 9009)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Request timeout in seconds (env BINJA_MCP_TIMEOUT, default: 30)",
    )
    parser.add_argument(
        "--transport",
        type=str,
        default="stdio",
        choices=["stdio", "sse"],
        help="MCP transport, default: stdio",
    )
    parser.add_argument(
        "--mcp-host",
        type=str,
        default="127.0.0.1",
        help="Listen host for the SSE transport, default: 127.0.0.1",
    )
    parser.add_argument(
        "--mcp-port",
        type=int,
        default=8099,
        help="Listen port for the SSE transport, default: 8099",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def config_from_args(args: argparse.Namespace) -> BridgeConfig:
    return resolve_config(host=args.host, port=args.port, timeout=args.timeout)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_root(logging.DEBUG if args.debug else logging.INFO)

    config = config_from_args(args)
    logger.info("[Bridge] Connecting to Binary Ninja plugin at %s", config.base_url)
    server = create_server(config)

    if args.transport == "sse":
        app = create_sse_app(server, config=config)
        logger.info("[MCP] SSE endpoint on http://%s:%s/sse", args.mcp_host, args.mcp_port)
        uvicorn.run(app, host=args.mcp_host, port=int(args.mcp_port))
    else:
        logger.info("[MCP] Running in stdio mode.")
        server.run(transport="stdio")
    return 0


__all__ = ["build_parser", "config_from_args", "main"]

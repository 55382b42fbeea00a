"""Application wiring for the Binary Ninja bridge server."""
from __future__ import annotations

import logging
from functools import partial

from mcp.server.fastmcp import FastMCP
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from .api.tools import register_tools
from .binja.client import BinjaClient
from .utils.config import BridgeConfig

SERVER_NAME = "binja-bridge"

_LOGGER = logging.getLogger("binja.bridge.app")


def create_server(config: BridgeConfig) -> FastMCP:
    """Build a FastMCP server with every operation bound to *config*."""

    server = FastMCP(SERVER_NAME)
    registry = register_tools(server, client_factory=partial(BinjaClient, config))
    _LOGGER.info(
        "bridge.configured",
        extra={"upstream": config.base_url, "tools": len(registry)},
    )
    return server


def create_sse_app(server: FastMCP, *, config: BridgeConfig) -> Starlette:
    """Return the SSE transport app with a ``/health`` probe in front of it."""

    async def health(_: Request) -> JSONResponse:
        tools = await server.list_tools()
        return JSONResponse(
            {
                "ok": True,
                "type": "mcp-sse",
                "upstream": config.base_url,
                "tools": len(tools),
            }
        )

    app = Starlette(
        debug=server.settings.debug,
        routes=[Route("/health", health, methods=["GET"], name="health")],
    )
    app.router.routes.extend(server.sse_app().routes)
    return app


__all__ = ["SERVER_NAME", "create_server", "create_sse_app"]

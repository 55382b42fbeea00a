"""Shared helpers for binding operations onto an MCP server."""
from __future__ import annotations

import inspect
from functools import wraps
from typing import Callable

from ..binja.client import BinjaClient
from .registry import Handler

ClientFactory = Callable[[], BinjaClient]


def published_signature(func: Handler) -> inspect.Signature:
    """Signature of *func* without its leading ``client`` parameter."""

    sig = inspect.signature(func)
    params = list(sig.parameters.values())
    if not params or params[0].name != "client":
        raise TypeError(f"{func.__name__} must take 'client' as its first parameter")
    return sig.replace(parameters=params[1:])


def inject_client(factory: ClientFactory) -> Callable[[Handler], Callable[..., str]]:
    """Open a fresh :class:`BinjaClient` for every call of the decorated handler.

    The client parameter is hidden from the published signature so MCP
    schemas only describe the tool's own arguments.
    """

    def decorator(func: Handler) -> Callable[..., str]:
        public = published_signature(func)

        @wraps(func)
        def wrapper(*args, **kwargs):
            with factory() as client:
                return func(client, *args, **kwargs)

        wrapper.__signature__ = public
        return wrapper

    return decorator


__all__ = ["ClientFactory", "inject_client", "published_signature"]

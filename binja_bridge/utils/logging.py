"""Logging helpers: stderr setup and per-tool-call scopes."""
from __future__ import annotations

import contextvars
import logging
import sys
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from time import monotonic
from typing import Dict, Iterator, List, Mapping, Optional

_CURRENT_CALL: contextvars.ContextVar["ToolCall | None"] = contextvars.ContextVar(
    "binja_bridge_tool_call", default=None
)

# httpx logs every request at INFO; the client emits its own record.
_CHATTY_LOGGERS = ("httpx", "httpcore")


def configure_root(level: int = logging.INFO) -> None:
    # stdout belongs to the stdio MCP transport
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    quiet = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(quiet)


@dataclass(frozen=True)
class UpstreamCall:
    """One HTTP exchange with the plugin made during a tool call."""

    method: str
    path: str
    outcome: str
    duration_ms: float


@dataclass(slots=True)
class ToolCall:
    """Structured logging context for a single tool invocation."""

    name: str
    request_id: str
    logger: logging.Logger
    metadata: Dict[str, object] = field(default_factory=dict)
    counters: Dict[str, int] = field(default_factory=dict)
    upstream: List[UpstreamCall] = field(default_factory=list)
    started: float = field(default_factory=monotonic)

    def extra(self, **values: object) -> Dict[str, object]:
        payload = {"request_id": self.request_id, "request": self.name, **self.metadata}
        payload.update(values)
        return payload

    def increment(self, counter: str, amount: int = 1) -> int:
        value = self.counters.get(counter, 0) + amount
        self.counters[counter] = value
        self.logger.debug("counter.%s", counter, extra=self.extra(counter=counter, value=value))
        return value

    def record(self, call: UpstreamCall) -> None:
        self.upstream.append(call)

    def summary(self) -> Dict[str, object]:
        return {
            "duration_ms": (monotonic() - self.started) * 1000.0,
            "counters": dict(self.counters),
            "upstream": [f"{c.method} {c.path} {c.outcome}" for c in self.upstream],
        }


@contextmanager
def request_scope(
    name: str,
    *,
    logger: Optional[logging.Logger] = None,
    extra: Optional[Mapping[str, object]] = None,
) -> Iterator[ToolCall]:
    """Bind a :class:`ToolCall` to the current context for the block's duration."""

    logger = logger or logging.getLogger("binja.bridge.request")
    call = ToolCall(
        name=name,
        request_id=uuid.uuid4().hex,
        logger=logger,
        metadata=dict(extra or {}),
    )
    token = _CURRENT_CALL.set(call)
    logger.info("request.start", extra=call.extra())
    try:
        yield call
    except Exception:
        logger.exception("request.error", extra=call.extra())
        raise
    finally:
        logger.info("request.finish", extra=call.extra(**call.summary()))
        _CURRENT_CALL.reset(token)


def current_request() -> Optional[ToolCall]:
    return _CURRENT_CALL.get()


def increment_counter(name: str, amount: int = 1) -> None:
    """Increment a named counter on the active tool call, if any."""

    call = current_request()
    if call is not None:
        call.increment(name, amount)


def record_upstream(method: str, path: str, outcome: str, duration_ms: float) -> None:
    """Attach a finished plugin request to the active tool call, if any."""

    call = current_request()
    if call is not None:
        call.record(UpstreamCall(method, path, outcome, duration_ms))


__all__ = [
    "ToolCall",
    "UpstreamCall",
    "configure_root",
    "current_request",
    "increment_counter",
    "record_upstream",
    "request_scope",
]

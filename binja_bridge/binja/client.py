"""HTTP client wrapper around the Binary Ninja MCP plugin."""
from __future__ import annotations

import json
import logging
from time import perf_counter
from typing import Any, Dict, Iterable, Mapping, Optional, Union

import httpx

from ..utils.config import BridgeConfig
from ..utils.logging import increment_counter, record_upstream
from .endpoints import DEFAULT_ENDPOINTS, EndpointEntry, is_allowed
from .models import (
    Failure,
    FailureReason,
    Json,
    Lines,
    RemoteError,
    RemoteResponse,
    Text,
)
from .schemas import validate_response

logger = logging.getLogger("binja.bridge.client")

NO_RESPONSE_HINT = "No response from server - is Binary Ninja running with the MCP plugin?"

Params = Mapping[str, Union[str, int, float, None]]


def _clean_params(params: Optional[Params]) -> Dict[str, Union[str, int, float]]:
    if not params:
        return {}
    return {key: value for key, value in params.items() if value is not None}


def _reason_phrase(status: int) -> str:
    return httpx.codes.get_reason_phrase(status) or "Unknown"


class BinjaClient:
    """Issues requests against the plugin and folds every outcome into a value.

    None of the public methods raise for network, status or payload problems;
    those come back as :class:`Failure` / :class:`RemoteError` (tagged calls) or
    as formatted error text (string calls).
    """

    def __init__(
        self,
        config: BridgeConfig,
        *,
        transport: Optional[httpx.BaseTransport] = None,
        endpoints: Optional[Mapping[str, Iterable[EndpointEntry]]] = None,
    ) -> None:
        self.config = config
        self.base_url = config.base_url
        self.timeout = config.timeout
        self._endpoints = dict(endpoints or DEFAULT_ENDPOINTS)
        self._session = httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=transport,
            default_encoding="utf-8",
        )

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "BinjaClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # low level
    # ------------------------------------------------------------------

    def _send(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Params] = None,
        data: Union[Mapping[str, Any], str, None] = None,
        timeout: Optional[float] = None,
    ) -> Union[httpx.Response, Failure]:
        path = path.strip("/")
        if not is_allowed(method, path, self._endpoints):
            logger.error("Attempted to call non-whitelisted endpoint %s %s", method, path)
            return Failure(
                reason=FailureReason.NOT_ALLOWED,
                message=f"endpoint {method} {path} not allowed",
            )

        request_kwargs: Dict[str, Any] = {"params": _clean_params(params)}
        if isinstance(data, str):
            request_kwargs["content"] = data.encode("utf-8")
            request_kwargs["headers"] = {"Content-Type": "text/plain; charset=utf-8"}
        elif data is not None:
            request_kwargs["json"] = dict(data)
        effective_timeout = timeout if timeout is not None else self.timeout
        request_kwargs["timeout"] = effective_timeout

        increment_counter(f"binja.{method.lower()}")
        start = perf_counter()
        try:
            response = self._session.request(method, f"/{path}", **request_kwargs)
        except httpx.TimeoutException as exc:
            cause = (
                f"Request timed out after {effective_timeout:g}s - "
                "is Binary Ninja running with the MCP plugin?"
            )
            return self._transport_failure(method, path, exc, FailureReason.TIMEOUT, cause, start)
        except httpx.TransportError as exc:
            return self._transport_failure(
                method, path, exc, FailureReason.UNREACHABLE, NO_RESPONSE_HINT, start
            )
        except httpx.HTTPError as exc:
            return self._transport_failure(
                method, path, exc, FailureReason.UNREACHABLE, str(exc), start
            )

        elapsed_ms = (perf_counter() - start) * 1000.0
        record_upstream(method, path, str(response.status_code), elapsed_ms)
        logger.info(
            "binja.request",
            extra={
                "method": method,
                "path": path,
                "status_code": response.status_code,
                "duration_ms": elapsed_ms,
            },
        )
        return response

    @staticmethod
    def _transport_failure(
        method: str,
        path: str,
        exc: Exception,
        reason: FailureReason,
        cause: str,
        start: float,
    ) -> Failure:
        elapsed_ms = (perf_counter() - start) * 1000.0
        record_upstream(method, path, reason.value, elapsed_ms)
        logger.warning(
            "binja.request",
            extra={
                "method": method,
                "path": path,
                "duration_ms": elapsed_ms,
                "error": str(exc),
            },
        )
        return Failure(
            reason=reason,
            message=f"{method} {path} failed: {cause}",
            cause=cause,
        )

    @staticmethod
    def _status_failure(response: httpx.Response) -> Failure:
        status = response.status_code
        return Failure(
            reason=FailureReason.STATUS,
            message=f"Server returned {status}: {_reason_phrase(status)}",
            status=status,
            body=response.text.strip(),
        )

    # ------------------------------------------------------------------
    # tagged requests
    # ------------------------------------------------------------------

    def fetch_text(
        self, path: str, params: Optional[Params] = None, *, timeout: Optional[float] = None
    ) -> Union[Text, Failure]:
        response = self._send("GET", path, params=params, timeout=timeout)
        if isinstance(response, Failure):
            return response
        if response.is_success:
            return Text(response.text)
        return self._status_failure(response)

    def fetch_lines(
        self, path: str, params: Optional[Params] = None, *, timeout: Optional[float] = None
    ) -> Union[Lines, Failure]:
        result = self.fetch_text(path, params, timeout=timeout)
        if isinstance(result, Failure):
            return result
        return Lines(result.body.split("\n"))

    def fetch_json(
        self,
        path: str,
        params: Optional[Params] = None,
        *,
        timeout: Optional[float] = None,
        schema: Optional[str] = None,
    ) -> Union[Json, RemoteError, Failure]:
        """GET *path* and classify the JSON answer.

        An ``error`` member wins over the status code so the plugin can report
        domain errors on any status. *schema* names an entry in
        :mod:`binja_bridge.binja.schemas` checked against successful payloads.
        """

        response = self._send("GET", path, params=params, timeout=timeout)
        if isinstance(response, Failure):
            return response
        try:
            payload = json.loads(response.text)
        except json.JSONDecodeError as exc:
            if not response.is_success:
                return self._status_failure(response)
            logger.warning(
                "%s returned invalid JSON", path, extra={"preview": response.text[:256]}
            )
            return Failure(
                reason=FailureReason.MALFORMED,
                message=f"Invalid JSON response from {path}: {exc}",
                status=response.status_code,
                cause=str(exc),
            )
        if isinstance(payload, dict) and "error" in payload:
            logger.warning("%s request failed: %s", path, payload.get("error"))
            return RemoteError(
                detail=payload["error"], status=response.status_code, payload=payload
            )
        if not response.is_success:
            return self._status_failure(response)
        if schema is not None:
            errors = validate_response(schema, payload)
            if errors:
                logger.warning(
                    "%s response failed schema validation",
                    path,
                    extra={"errors": errors[:3]},
                )
                return Failure(
                    reason=FailureReason.MALFORMED,
                    message=f"Unexpected response from {path}: {errors[0]}",
                    status=response.status_code,
                    cause=errors[0],
                )
        return Json(payload)

    def fetch_post(
        self,
        path: str,
        data: Union[Mapping[str, Any], str],
        *,
        timeout: Optional[float] = None,
    ) -> Union[Text, Failure]:
        response = self._send("POST", path, data=data, timeout=timeout)
        if isinstance(response, Failure):
            return response
        if response.is_success:
            return Text(response.text.strip())
        return self._status_failure(response)

    # ------------------------------------------------------------------
    # string contracts
    # ------------------------------------------------------------------

    @staticmethod
    def _failure_text(failure: Failure) -> str:
        if failure.reason is FailureReason.STATUS:
            return f"Error {failure.status}: {failure.body}"
        return f"Error: {failure.message}"

    def get_text(
        self, path: str, params: Optional[Params] = None, *, timeout: Optional[float] = None
    ) -> str:
        result = self.fetch_text(path, params, timeout=timeout)
        if isinstance(result, Failure):
            return self._failure_text(result)
        return result.body

    def get_lines(
        self, path: str, params: Optional[Params] = None, *, timeout: Optional[float] = None
    ) -> list[str]:
        # a trailing newline yields a trailing empty entry; callers tolerate it
        return self.get_text(path, params, timeout=timeout).split("\n")

    def get_json(
        self, path: str, params: Optional[Params] = None, *, timeout: Optional[float] = None
    ) -> Any:
        result = self.fetch_json(path, params, timeout=timeout)
        if isinstance(result, Json):
            return result.value
        if isinstance(result, RemoteError):
            return result.payload
        if result.reason is FailureReason.STATUS:
            return {"error": f"Error {result.status}: {_reason_phrase(result.status or 0)}"}
        if result.reason is FailureReason.MALFORMED:
            return {"error": f"Invalid JSON response: {result.cause}"}
        if result.reason is FailureReason.NOT_ALLOWED:
            return {"error": result.message}
        return {"error": f"Request failed: {result.cause}"}

    def post(
        self,
        path: str,
        data: Union[Mapping[str, Any], str],
        *,
        timeout: Optional[float] = None,
    ) -> str:
        result = self.fetch_post(path, data, timeout=timeout)
        if isinstance(result, Failure):
            return self._failure_text(result)
        return result.body


__all__ = ["BinjaClient", "NO_RESPONSE_HINT", "RemoteResponse"]

from __future__ import annotations

import uuid
from time import perf_counter
from typing import Any, Callable

import structlog
from starlette.datastructures import Headers, MutableHeaders

from articles_api.observability.metrics import get_metrics


REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware:
    """Binds a request id to the log context, writes access logs, counts requests.

    An inbound X-Request-ID is reused so ids can be correlated across hops.
    """

    def __init__(self, app: Callable[..., Any], excluded_metric_paths: set[str] | None = None) -> None:
        self.app = app
        self._excluded_metric_paths = excluded_metric_paths or set()

    async def __call__(self, scope: dict[str, Any], receive: Callable[..., Any], send: Callable[..., Any]) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        request_id = Headers(scope=scope).get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        path = scope.get("path")
        method = scope.get("method")

        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            path=path,
            method=method,
        )

        start = perf_counter()
        status_code: int = 500

        async def send_wrapper(message: dict[str, Any]) -> None:
            nonlocal status_code

            if message.get("type") == "http.response.start":
                status_code = int(message.get("status", 500))
                headers = MutableHeaders(scope=message)
                headers[REQUEST_ID_HEADER] = request_id

            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            elapsed_ms = (perf_counter() - start) * 1000.0

            if path not in self._excluded_metric_paths:
                get_metrics().observe_http_request(elapsed_ms=elapsed_ms)

            log = structlog.get_logger("access")
            emit = log.warning if status_code >= 500 else log.info
            emit(
                "http_request",
                status_code=status_code,
                elapsed_ms=round(elapsed_ms, 2),
            )

            structlog.contextvars.clear_contextvars()

"""Error envelopes and the handlers that turn exceptions into them."""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from articles_api.models.schemas import ErrResponse

logger = structlog.get_logger("errors")


class APIError(Exception):
    """Carries an :class:`ErrResponse` out of a handler or dependency."""

    def __init__(self, response: ErrResponse) -> None:
        super().__init__(response.status_text)
        self.response = response


def err_invalid_request(err: Exception) -> ErrResponse:
    return ErrResponse(
        err=err,
        http_status_code=400,
        status_text="Invalid request.",
        error_text=str(err),
    )


def err_render(err: Exception) -> ErrResponse:
    return ErrResponse(
        err=err,
        http_status_code=422,
        status_text="Error rendering response.",
        error_text=str(err),
    )


ERR_NOT_FOUND = ErrResponse(http_status_code=404, status_text="Resource not found.")

ERR_INTERNAL = ErrResponse(http_status_code=500, status_text="Internal server error.")


def render_error(response: ErrResponse, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(response.body(), status_code=response.http_status_code, headers=headers)


async def _api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    resp = exc.response
    if resp.err is not None:
        logger.info("request_failed", status_code=resp.http_status_code, error=str(resp.err))
    return render_error(resp)


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Unknown routes, wrong methods and HTTPExceptions raised by dependencies.
    resp = ErrResponse(err=exc, http_status_code=exc.status_code, status_text=str(exc.detail))
    return render_error(resp, headers=getattr(exc, "headers", None))


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return render_error(err_invalid_request(exc))


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unhandled_exception", exc_info=exc)
    return render_error(ERR_INTERNAL)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(APIError, _api_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    # Starlette routes this one through ServerErrorMiddleware, so the process survives.
    app.add_exception_handler(Exception, _unhandled_error_handler)

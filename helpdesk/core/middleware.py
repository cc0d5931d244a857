# helpdesk/core/middleware.py
import logging
import uuid

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.datastructures import MutableHeaders
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from helpdesk.core.errors import (
    ApiError,
    NotFound,
    Unexpected,
    ValidationFailed,
    field_errors,
    render_error,
    render_http_error,
)

logger = logging.getLogger(__name__)

TRACE_HEADER = "X-Trace-Id"


class ErrorBoundaryMiddleware:
    """Outermost catch-all.

    Tags each request with a trace id, and turns anything that escapes the
    application into an Unexpected response. The exception itself is only
    logged. If the response has already started it cannot be replaced, so
    the failure is logged and dropped.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        trace_id = uuid.uuid4().hex
        scope.setdefault("state", {})["trace_id"] = trace_id
        response_started = False

        async def send_with_trace(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
                MutableHeaders(scope=message).append(TRACE_HEADER, trace_id)
            await send(message)

        try:
            await self.app(scope, receive, send_with_trace)
        except Exception:
            logger.exception(
                "Unhandled exception on %s %s (traceId=%s)",
                scope.get("method"), scope.get("path"), trace_id,
            )
            if response_started:
                return
            status, body = render_error(Unexpected(), trace_id)
            response = JSONResponse(status_code=status, content=body, headers={TRACE_HEADER: trace_id})
            await response(scope, receive, send)


def _trace_id(request: Request) -> str:
    return getattr(request.state, "trace_id", None) or uuid.uuid4().hex


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    status, body = render_error(exc, _trace_id(request))
    return JSONResponse(status_code=status, content=body)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return await api_error_handler(request, field_errors(exc.errors()))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    status, body = render_http_error(exc.status_code, str(exc.detail), _trace_id(request))
    return JSONResponse(status_code=status, content=body, headers=exc.headers)


def install_error_handling(app: FastAPI) -> None:
    app.add_exception_handler(NotFound, api_error_handler)
    app.add_exception_handler(ValidationFailed, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_middleware(ErrorBoundaryMiddleware)

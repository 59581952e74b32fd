"""
Request middleware: correlation ids, access logging and the last-resort error envelope
"""
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse
import structlog

from app.core.exceptions import AppError
from app.core.responses import error_body

logger = structlog.get_logger()

CORRELATION_HEADER = "X-Correlation-ID"


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """Reuse the caller's correlation id or mint one, and bind it to the log context"""

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=correlation_id)

        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs request start and completion; server errors are logged at error level"""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        logger.info("request_started", method=request.method, path=request.url.path)
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            raise

        duration = time.perf_counter() - started
        log = logger.error if response.status_code >= 500 else logger.info
        log(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round(duration * 1000, 2),
        )
        response.headers["X-Process-Time"] = f"{duration:.6f}"
        return response


class ExceptionHandlerMiddleware(BaseHTTPMiddleware):
    """Turns anything that escaped the route handlers into the error envelope"""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except AppError as e:
            response = JSONResponse(status_code=e.status_code, content=error_body(e.to_dict()))
        except Exception as e:
            logger.exception("unhandled_exception", error=str(e), path=request.url.path)
            response = JSONResponse(
                status_code=500,
                content=error_body({"code": "INTERNAL_ERROR", "message": "Internal server error"}),
            )

        correlation_id = getattr(request.state, "correlation_id", None)
        if correlation_id:
            response.headers[CORRELATION_HEADER] = correlation_id
        return response

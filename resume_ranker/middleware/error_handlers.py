"""
Error responses and request tracing for the Resume Ranker API

Every error leaves the service in one envelope:
``{success, timestamp, request_id, status_code, message, ...}``. Domain errors,
``HTTPException`` and request validation failures are turned into it by the
exception handlers; anything else is caught by ``RequestContextMiddleware``
and reported as a bare 500.
"""
import time
import uuid
from datetime import datetime
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from resume_ranker.utils.exceptions import ResumeRankerError, map_to_http_exception
from resume_ranker.utils.logging_config import get_logger

logger = get_logger(__name__)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


def error_response(request: Request, status_code: int, detail: Any) -> JSONResponse:
    if not isinstance(detail, dict):
        detail = {"message": str(detail)}
    request_id = _request_id(request)
    body = {
        "success": False,
        "timestamp": datetime.utcnow().isoformat(),
        "request_id": request_id,
        "status_code": status_code,
        **detail,
    }
    return JSONResponse(status_code=status_code, content=body, headers={"X-Request-ID": request_id})


async def handle_resume_ranker_error(request: Request, exc: ResumeRankerError) -> JSONResponse:
    http_exc = map_to_http_exception(exc)
    log = logger.error if http_exc.status_code >= 500 else logger.warning
    log(
        f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}",
        extra={"request_id": _request_id(request), "details": exc.details},
    )
    return error_response(request, http_exc.status_code, http_exc.detail)


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.warning(
        f"HTTP {exc.status_code} on {request.method} {request.url.path}: {exc.detail}",
        extra={"request_id": _request_id(request)},
    )
    return error_response(request, exc.status_code, exc.detail)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    logger.warning(
        f"Invalid request to {request.method} {request.url.path}: {len(errors)} error(s)",
        extra={"request_id": _request_id(request)},
    )
    return error_response(request, 422, {
        "message": "Request data validation failed",
        "validation_errors": [{"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in errors],
    })


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ResumeRankerError, handle_resume_ranker_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tags each request with an id, times it and contains unhandled errors"""

    def __init__(self, app, slow_request_threshold: float = 2.0):
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        start_time = time.time()

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.exception(
                f"Unhandled exception in {request.method} {request.url.path}: {exc}",
                extra={"request_id": request_id},
            )
            # internal details stay in the log
            response = error_response(request, 500, {
                "message": "An unexpected error occurred. Please try again later.",
            })

        processing_time = time.time() - start_time
        if processing_time > self.slow_request_threshold:
            logger.warning(
                f"Slow request: {request.method} {request.url.path} took {processing_time:.3f}s",
                extra={"request_id": request_id},
            )
        logger.info(
            f"{request.method} {request.url.path} - {response.status_code} in {processing_time:.3f}s",
            extra={"request_id": request_id},
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Processing-Time"] = f"{processing_time:.3f}"
        return response

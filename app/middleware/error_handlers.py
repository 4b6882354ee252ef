"""
Request middleware: uniform error bodies, request ids and timing headers
"""
import time
import uuid
from datetime import datetime, timezone
from typing import Any

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.middleware.base import BaseHTTPMiddleware

from app.utils.exceptions import CVValidatorBaseException, map_to_http_exception
from app.utils.logging_config import get_logger

logger = get_logger(__name__)


def error_response(request_id: str, status_code: int, detail: Any) -> JSONResponse:
    """JSON error envelope shared by every failure path"""
    if not isinstance(detail, dict):
        detail = {"message": str(detail)}

    body = {
        "success": False,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "request_id": request_id,
        "status_code": status_code,
        **detail,
    }
    return JSONResponse(status_code=status_code, content=body, headers={"X-Request-ID": request_id})


class ExceptionHandlerMiddleware(BaseHTTPMiddleware):
    """Turns domain and framework exceptions into the error envelope"""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        route = f"{request.method} {request.url.path}"
        context = {"request_id": request_id}

        try:
            response = await call_next(request)
        except CVValidatorBaseException as exc:
            log = logger.error if exc.error_code != "VALIDATION_ERROR" else logger.warning
            log(f"{exc.error_code} in {route}: {exc.message}",
                extra={**context, "details": exc.details})
            http_exc = map_to_http_exception(exc)
            return error_response(request_id, http_exc.status_code, http_exc.detail)
        except RequestValidationError as exc:
            logger.warning(f"Invalid request body for {route}", extra=context)
            return error_response(request_id, 422, {
                "message": "Request data validation failed",
                "validation_errors": exc.errors(),
            })
        except ValidationError as exc:
            logger.warning(f"Data validation failed in {route}: {exc.error_count()} error(s)", extra=context)
            return error_response(request_id, 400, {
                "message": "Invalid data format or values",
                "validation_errors": exc.errors(include_url=False, include_context=False),
            })
        except HTTPException as exc:
            logger.warning(f"HTTP {exc.status_code} in {route}: {exc.detail}", extra=context)
            return error_response(request_id, exc.status_code, exc.detail)
        except Exception:
            logger.exception(f"Unhandled exception in {route}", extra=context)
            return error_response(request_id, 500, {
                "message": "An unexpected error occurred. Please try again later.",
            })

        logger.info(f"{route} -> {response.status_code}", extra=context)
        response.headers["X-Request-ID"] = request_id
        return response


class PerformanceMiddleware(BaseHTTPMiddleware):
    """Adds X-Processing-Time and warns about slow requests"""

    def __init__(self, app, slow_request_threshold: float = 2.0):
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started

        if elapsed > self.slow_request_threshold:
            logger.warning(
                f"Slow request: {request.method} {request.url.path} took {elapsed:.3f}s",
                extra={"processing_time": elapsed, "threshold": self.slow_request_threshold},
            )

        response.headers["X-Processing-Time"] = f"{elapsed:.3f}"
        return response

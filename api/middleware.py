"""
Consolidated middleware for the nutrilog API
"""

import time
import logging
from datetime import date, datetime, time as time_of_day
from uuid import uuid4
from decimal import Decimal

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from app.exceptions import AppError, StorageError, ValidationError

logger = logging.getLogger("nutrilog.middleware")


# ============================================================================
# Helper Functions
# ============================================================================


def make_serializable(obj):
    """Convert objects to JSON-serializable format"""
    if isinstance(obj, Decimal):
        return float(obj)
    elif isinstance(obj, (datetime, date, time_of_day)):
        return obj.isoformat()
    elif isinstance(obj, dict):
        return {k: make_serializable(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [make_serializable(item) for item in obj]
    elif obj is None or isinstance(obj, (str, int, float, bool)):
        return obj
    return str(obj)


def error_response(status_code: int, code: str, message: str, details=None) -> JSONResponse:
    """Standard error envelope"""
    error = {"code": code, "message": message}
    if details:
        error["details"] = make_serializable(details)
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": error,
            "timestamp": datetime.utcnow().isoformat(),
        },
    )


# ============================================================================
# Request Logging Middleware
# ============================================================================


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all HTTP requests and responses"""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid4())
        request.state.request_id = request_id

        logger.info(
            f"Request started",
            extra={
                "request_id": request_id,
                "method": request.method,
                "url": str(request.url),
                "client": request.client.host if request.client else None,
            },
        )

        start_time = time.time()

        try:
            response: Response = await call_next(request)
            process_time = time.time() - start_time

            logger.info(
                f"Request completed",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "url": str(request.url),
                    "status_code": response.status_code,
                    "process_time": f"{process_time:.4f}s",
                },
            )

            response.headers["X-Request-ID"] = request_id
            response.headers["X-Process-Time"] = f"{process_time:.4f}"

            return response

        except Exception as exc:
            process_time = time.time() - start_time
            logger.error(
                f"Request failed",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "url": str(request.url),
                    "error": str(exc),
                    "process_time": f"{process_time:.4f}s",
                },
                exc_info=True,
            )
            raise


# ============================================================================
# Error Handlers
# ============================================================================


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request body/query validation errors"""
    logger.warning(f"Validation error on {request.url}: {exc.errors()}")

    return error_response(
        status.HTTP_422_UNPROCESSABLE_CONTENT,
        "VALIDATION_ERROR",
        "Request validation failed",
        details=list(exc.errors()),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions"""
    logger.warning(f"HTTP {exc.status_code} on {request.url}: {exc.detail}")

    return error_response(exc.status_code, f"HTTP_{exc.status_code}", exc.detail)


async def app_exception_handler(request: Request, exc: AppError):
    """Handle every application error by its own status and code"""
    code = exc.code or _default_code(exc)

    if isinstance(exc, ValidationError):
        # Integrity problem in stored data; the raw row stays in the log only
        logger.error(
            f"Invalid {exc.entity} row on {request.url}: {exc.message} "
            f"details={exc.details} row={exc.row}"
        )
    elif isinstance(exc, StorageError) or exc.http_status >= 500:
        logger.error(f"{type(exc).__name__} on {request.url}: {exc.message}")
    else:
        logger.warning(f"{type(exc).__name__} on {request.url}: {exc.message}")

    return error_response(exc.http_status, code, exc.message, details=exc.details)


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors"""
    logger.exception(f"Unexpected error on {request.url}: {str(exc)}")

    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_SERVER_ERROR",
        "An unexpected error occurred",
    )


_DEFAULT_CODES = {
    "ServiceValidationError": "SERVICE_VALIDATION_ERROR",
    "NotFoundError": "NOT_FOUND",
    "ValidationError": "INVALID_ROW",
    "StorageError": "STORAGE_ERROR",
    "EmptyUpdateError": "EMPTY_UPDATE",
    "InferenceError": "INFERENCE_ERROR",
}


def _default_code(exc: AppError) -> str:
    return _DEFAULT_CODES.get(type(exc).__name__, "APP_ERROR")
